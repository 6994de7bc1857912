from __future__ import annotations

from typing import Any, Optional


class TokenCreationError(RuntimeError):
    """Base for every failure of the token creation run.

    ``stage`` names the step that failed; the flow fills it in when the
    raising code did not.
    """

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage


class ConfigError(TokenCreationError):
    pass


class SecretDecodeError(TokenCreationError):
    pass


class DerivationError(TokenCreationError):
    pass


class RpcTransportError(TokenCreationError):
    pass


class RpcError(TokenCreationError):
    """The node answered with a JSON-RPC ``error`` object."""

    def __init__(self, error: Any, stage: Optional[str] = None) -> None:
        super().__init__(f"RPC error: {error}", stage=stage)
        self.error = error


class TransactionRejectedError(RpcError):
    pass


class BlockhashExpiredError(TokenCreationError):
    pass
