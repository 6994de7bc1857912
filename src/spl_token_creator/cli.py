from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .config import Settings
from .create import (
    UPDATE_AUTHORITY_CHOICES,
    CreateTokenResult,
    create_token,
    verify_created_accounts,
)
from .errors import TokenCreationError
from .identity import Identities, encode_secret
from .instructions import TokenMetadata
from .pda import derive_metadata_address
from .project_constants import (
    CLUSTER_URLS,
    COMMITMENT_LEVELS,
    TOKEN_DECIMALS,
    TOKEN_NAME,
    TOKEN_SYMBOL,
    TOKEN_URI,
    UPDATE_AUTHORITY,
)
from .rpc import RpcClient


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def print_mint_secret(identities: Identities) -> None:
    source = "generated" if identities.mint_generated else "loaded from MINT_PRIVATE_KEY_BASE58"
    print(f"Mint keypair  : {source}")
    print(f"Mint address  : {identities.mint.pubkey()}")
    print(f"Mint secret (Base58, save this!): {identities.mint_secret_b58}")
    print("Please ensure the payer address holds enough SOL for fees and rent exemption.")


def print_result(result: CreateTokenResult) -> None:
    print("----------------------------------------")
    print("✅ TOKEN CREATED")
    print(f"Signature     : {result.signature}")
    print(f"Payer         : {result.payer}")
    print(f"Mint address  : {result.mint}")
    print(f"Metadata      : {result.metadata_address}")
    print(f"Name / Symbol : {result.metadata.name} / {result.metadata.symbol}")
    print(f"Mint secret (Base58, save this!): {result.mint_secret_b58}")
    print("----------------------------------------")


def build_receipt(settings: Settings, result: CreateTokenResult) -> Dict[str, Any]:
    # Receipt is safe to share: no key material.
    return {
        "metadata": {
            "tool": "spl-token-creator",
            "version": "1.0.0",
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "cluster": settings.cluster,
            "commitment": settings.commitment,
        },
        "payer": str(result.payer),
        "mint": str(result.mint),
        "mint_keypair_generated": result.mint_generated,
        "decimals": TOKEN_DECIMALS,
        "metadata_address": str(result.metadata_address),
        "metadata_bump": result.metadata_bump,
        "signature": result.signature,
        "token": {
            "name": result.metadata.name,
            "symbol": result.metadata.symbol,
            "uri": result.metadata.uri,
            "seller_fee_basis_points": result.metadata.seller_fee_basis_points,
            "creators": [
                {"address": str(c.address), "share": c.share} for c in result.metadata.creators
            ],
            "is_mutable": result.metadata.is_mutable,
        },
    }


def cmd_create(args: argparse.Namespace) -> int:
    log = logging.getLogger("create")
    settings = Settings.from_env(
        rpc_url_override=args.rpc_url,
        cluster_override=args.cluster,
        commitment_override=args.commitment,
    )
    metadata = TokenMetadata(name=args.name, symbol=args.symbol, uri=args.uri)

    rpc = RpcClient(settings.rpc_url, timeout_s=args.timeout, commitment=settings.commitment)
    try:
        print("========================================")
        print("🪙 SPL TOKEN CREATION")
        print("========================================")
        result = create_token(
            settings,
            rpc,
            metadata=metadata,
            update_authority=args.update_authority,
            on_identities=print_mint_secret,
        )
        # Confirmed on-chain from here; report before any further checks.
        print_result(result)
        if args.out:
            with open(args.out, "w", encoding="utf-8") as f:
                json.dump(build_receipt(settings, result), f, indent=2)
            print(f"🧾 Wrote receipt: {args.out}")

        if args.verify:
            verify_created_accounts(rpc, result)
            log.info("Mint and metadata accounts verified on-chain.")
    finally:
        rpc.close()
    return 0


def cmd_derive(args: argparse.Namespace) -> int:
    mint = Pubkey.from_string(args.mint)
    address, bump = derive_metadata_address(mint)
    print(f"Mint          : {mint}")
    print(f"Metadata      : {address}")
    print(f"Bump          : {bump}")
    return 0


def cmd_keygen(args: argparse.Namespace) -> int:
    kp = Keypair()
    print(f"Mint address  : {kp.pubkey()}")
    print(f"Mint secret (Base58, save this!): {encode_secret(kp)}")
    print("Set MINT_PRIVATE_KEY_BASE58 to this secret to create the token at this address.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="spl-token-creator",
        description="Create an SPL token mint with Metaplex metadata in one transaction.",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    p.add_argument("--rpc-url", default=None, help="Override RPC URL (else use env).")
    p.add_argument(
        "--cluster",
        default=None,
        choices=sorted(CLUSTER_URLS),
        help="Cluster used when no RPC URL is given (default devnet).",
    )
    p.add_argument(
        "--commitment",
        default=None,
        choices=COMMITMENT_LEVELS,
        help="Confirmation level to wait for (default confirmed).",
    )
    p.add_argument("--timeout", type=float, default=60.0, help="RPC timeout seconds.")

    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("create", help="Create the mint and its metadata account.")
    c.add_argument("--name", default=TOKEN_NAME, help="Token name (max 32 bytes).")
    c.add_argument("--symbol", default=TOKEN_SYMBOL, help="Token symbol (max 10 bytes).")
    c.add_argument("--uri", default=TOKEN_URI, help="Off-chain metadata JSON URI.")
    c.add_argument(
        "--update-authority",
        default=UPDATE_AUTHORITY,
        choices=UPDATE_AUTHORITY_CHOICES,
        help="Which keypair may revise the metadata later (default payer).",
    )
    c.add_argument(
        "--verify",
        action="store_true",
        help="After confirmation, check both accounts exist with the right owners.",
    )
    c.add_argument("--out", default=None, help="Write a JSON receipt to this path.")
    c.set_defaults(func=cmd_create)

    d = sub.add_parser("derive", help="Print the metadata address of a mint (offline).")
    d.add_argument("--mint", required=True, help="Mint address (Base58).")
    d.set_defaults(func=cmd_derive)

    k = sub.add_parser("keygen", help="Generate a mint keypair secret (offline).")
    k.set_defaults(func=cmd_keygen)

    return p


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    log = logging.getLogger("main")
    try:
        code = args.func(args)
    except TokenCreationError as e:
        log.error("Error creating token (stage: %s): %s", e.stage or "unknown", e)
        code = 1
    except Exception:
        log.exception("Error creating token")
        code = 1
    raise SystemExit(code)
