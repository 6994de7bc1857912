from __future__ import annotations

import base64
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx

from .errors import (
    BlockhashExpiredError,
    RpcError,
    RpcTransportError,
    TransactionRejectedError,
)
from .project_constants import COMMITMENT_LEVELS, DEFAULT_COMMITMENT

log = logging.getLogger("rpc")


@dataclass(frozen=True)
class LatestBlockhash:
    blockhash: str
    last_valid_block_height: int


def _commitment_reached(status: Optional[str], wanted: str) -> bool:
    if status not in COMMITMENT_LEVELS:
        return False
    return COMMITMENT_LEVELS.index(status) >= COMMITMENT_LEVELS.index(wanted)


class RpcClient:
    def __init__(
        self,
        rpc_url: str,
        timeout_s: float = 60.0,
        commitment: str = DEFAULT_COMMITMENT,
        poll_interval_s: float = 0.5,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.commitment = commitment
        self.poll_interval_s = poll_interval_s
        self.client = httpx.Client(timeout=timeout_s, transport=transport)

    def close(self) -> None:
        self.client.close()

    def _post(self, method: str, params: List[Any], parse: Callable[[Any], Any] = lambda r: r) -> Any:
        """Runs one JSON-RPC call and returns ``parse(result)``."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        log.debug("-> %s", method)
        try:
            resp = self.client.post(self.rpc_url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise RpcTransportError(f"{method} failed: {e}") from e
        try:
            data = resp.json()
        except ValueError as e:
            raise RpcTransportError(f"{method}: malformed response (not JSON): {e}") from e
        if not isinstance(data, dict):
            raise RpcTransportError(f"{method}: malformed response: {data!r}")
        if "error" in data:
            raise RpcError(data["error"])
        try:
            return parse(data["result"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise RpcTransportError(f"{method}: malformed response: {e!r}") from e

    def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        return self._post(
            "getMinimumBalanceForRentExemption",
            [size, {"commitment": self.commitment}],
            int,
        )

    def get_latest_blockhash(self) -> LatestBlockhash:
        return self._post(
            "getLatestBlockhash",
            [{"commitment": self.commitment}],
            lambda r: LatestBlockhash(
                blockhash=str(r["value"]["blockhash"]),
                last_valid_block_height=int(r["value"]["lastValidBlockHeight"]),
            ),
        )

    def get_block_height(self) -> int:
        return self._post("getBlockHeight", [{"commitment": self.commitment}], int)

    def send_transaction(self, wire: bytes) -> str:
        """Submits serialized signed transaction bytes, returns the signature."""
        try:
            return self._post(
                "sendTransaction",
                [
                    base64.b64encode(wire).decode("ascii"),
                    {
                        "encoding": "base64",
                        "skipPreflight": False,
                        "preflightCommitment": self.commitment,
                    },
                ],
                str,
            )
        except RpcError as e:
            raise TransactionRejectedError(e.error) from e

    def get_signature_statuses(self, signatures: List[str]) -> List[Optional[Dict[str, Any]]]:
        return self._post(
            "getSignatureStatuses",
            [signatures, {"searchTransactionHistory": False}],
            lambda r: list(r["value"]),
        )

    def confirm_transaction(self, signature: str, last_valid_block_height: int) -> Dict[str, Any]:
        """
        Blocks until ``signature`` reaches the client's commitment.
        Raises if the transaction failed on-chain or its blockhash expired first.
        """
        while True:
            statuses = self.get_signature_statuses([signature])
            status = statuses[0] if statuses else None
            if status is not None:
                if status.get("err") is not None:
                    raise TransactionRejectedError(status["err"])
                if _commitment_reached(status.get("confirmationStatus"), self.commitment):
                    return status

            if self.get_block_height() > last_valid_block_height:
                raise BlockhashExpiredError(
                    f"Signature {signature} not confirmed before block height "
                    f"{last_valid_block_height}; blockhash expired."
                )
            time.sleep(self.poll_interval_s)

    def get_account_info(self, address: str) -> Optional[Dict[str, Any]]:
        return self._post(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": self.commitment}],
            lambda r: r["value"],
        )
