from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

import base58
from solders.keypair import Keypair

from .errors import ConfigError, SecretDecodeError

SECRET_KEY_LEN = 64


@dataclass(frozen=True)
class Identities:
    payer: Keypair
    mint: Keypair
    mint_generated: bool

    @property
    def mint_secret_b58(self) -> str:
        return encode_secret(self.mint)


def encode_secret(keypair: Keypair) -> str:
    return base58.b58encode(bytes(keypair)).decode("ascii")


def _keypair_from_secret_bytes(raw: bytes, error_cls: type, label: str) -> Keypair:
    if len(raw) != SECRET_KEY_LEN:
        raise error_cls(
            f"{label}: expected {SECRET_KEY_LEN} secret key bytes, got {len(raw)}.",
            stage="provision",
        )
    try:
        return Keypair.from_bytes(raw)
    except ValueError as e:
        raise error_cls(f"{label}: not a valid ed25519 keypair ({e}).", stage="provision") from e


def load_payer_keypair(secret_json: Optional[str]) -> Keypair:
    """
    Payer secret is a JSON array of 64 byte values, the format written by
    ``solana-keygen``.
    """
    if not secret_json or not secret_json.strip():
        raise ConfigError("Missing payer secret (PAYER_PRIVATE_KEY).", stage="provision")

    try:
        values = json.loads(secret_json)
    except json.JSONDecodeError as e:
        raise ConfigError(f"PAYER_PRIVATE_KEY is not valid JSON: {e}", stage="provision") from e

    if not isinstance(values, list) or not all(
        isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 255 for v in values
    ):
        raise ConfigError(
            "PAYER_PRIVATE_KEY must be a JSON array of byte values (0-255).",
            stage="provision",
        )

    return _keypair_from_secret_bytes(bytes(values), ConfigError, "PAYER_PRIVATE_KEY")


def load_or_generate_mint_keypair(secret_b58: Optional[str]) -> tuple[Keypair, bool]:
    """Returns (keypair, generated)."""
    if not secret_b58:
        # Common path: a fresh address per token.
        return Keypair(), True

    try:
        raw = base58.b58decode(secret_b58.strip())
    except ValueError as e:
        raise SecretDecodeError(
            f"MINT_PRIVATE_KEY_BASE58 is not valid Base58: {e}", stage="provision"
        ) from e

    return _keypair_from_secret_bytes(raw, SecretDecodeError, "MINT_PRIVATE_KEY_BASE58"), False


def provision_identities(payer_secret: Optional[str], mint_secret: Optional[str]) -> Identities:
    payer = load_payer_keypair(payer_secret)
    mint, generated = load_or_generate_mint_keypair(mint_secret)
    return Identities(payer=payer, mint=mint, mint_generated=generated)
