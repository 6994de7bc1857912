from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from solders.pubkey import Pubkey
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID

from .config import Settings
from .errors import TokenCreationError
from .identity import Identities, provision_identities
from .instructions import TokenMetadata, build_token_instructions
from .pda import METADATA_PROGRAM_ID, derive_metadata_address
from .project_constants import UPDATE_AUTHORITY
from .transaction import assemble_transaction, serialize_transaction

log = logging.getLogger("create")

UPDATE_AUTHORITY_CHOICES = ("payer", "mint")


@dataclass(frozen=True)
class CreateTokenResult:
    payer: Pubkey
    mint: Pubkey
    metadata_address: Pubkey
    metadata_bump: int
    signature: str
    mint_secret_b58: str
    mint_generated: bool
    metadata: TokenMetadata


@contextmanager
def _stage(name: str) -> Iterator[None]:
    log.debug("stage: %s", name)
    try:
        yield
    except TokenCreationError as e:
        if e.stage is None:
            e.stage = name
        raise


def _update_authority(identities: Identities, choice: str) -> Pubkey:
    if choice == "payer":
        return identities.payer.pubkey()
    if choice == "mint":
        return identities.mint.pubkey()
    raise ValueError(f"update_authority must be one of {UPDATE_AUTHORITY_CHOICES}, got {choice!r}")


def create_token(
    settings: Settings,
    ledger,
    metadata: Optional[TokenMetadata] = None,
    update_authority: str = UPDATE_AUTHORITY,
    on_identities: Optional[Callable[[Identities], None]] = None,
) -> CreateTokenResult:
    """
    Creates the mint and its metadata account in a single transaction.

    ``ledger`` needs get_minimum_balance_for_rent_exemption(size),
    get_latest_blockhash(), send_transaction(wire) and
    confirm_transaction(signature, last_valid_block_height); see RpcClient.
    Nothing touches the ledger until both keypairs are loaded and the
    metadata fields are valid.
    """
    if metadata is None:
        metadata = TokenMetadata()
    with _stage("provision"):
        identities = provision_identities(settings.payer_secret, settings.mint_secret)
    metadata.validate()
    update_authority_key = _update_authority(identities, update_authority)

    payer = identities.payer.pubkey()
    mint = identities.mint.pubkey()
    log.info("Payer address    : %s", payer)
    log.info("Mint address     : %s (%s)", mint, "generated" if identities.mint_generated else "loaded")
    if on_identities is not None:
        on_identities(identities)

    with _stage("derive"):
        metadata_address, bump = derive_metadata_address(mint)
    log.info("Metadata address : %s (bump %d)", metadata_address, bump)

    with _stage("rent"):
        lamports = ledger.get_minimum_balance_for_rent_exemption(MINT_LEN)
    log.info("Rent-exempt mint : %d lamports", lamports)

    with _stage("build"):
        instructions = build_token_instructions(
            payer=payer,
            mint=mint,
            metadata_address=metadata_address,
            lamports=lamports,
            metadata=metadata,
            update_authority=update_authority_key,
        )

    with _stage("blockhash"):
        latest = ledger.get_latest_blockhash()

    with _stage("sign"):
        tx = assemble_transaction(
            instructions,
            fee_payer=identities.payer,
            signers=[identities.payer, identities.mint],
            recent_blockhash=latest.blockhash,
        )

    with _stage("submit"):
        signature = ledger.send_transaction(serialize_transaction(tx))
    log.info("Submitted        : %s", signature)

    with _stage("confirm"):
        ledger.confirm_transaction(signature, latest.last_valid_block_height)
    log.info("Confirmed        : %s", signature)

    return CreateTokenResult(
        payer=payer,
        mint=mint,
        metadata_address=metadata_address,
        metadata_bump=bump,
        signature=signature,
        mint_secret_b58=identities.mint_secret_b58,
        mint_generated=identities.mint_generated,
        metadata=metadata.with_sole_creator(payer),
    )


def verify_created_accounts(ledger, result: CreateTokenResult) -> None:
    """Checks that both accounts exist and are owned by the expected programs."""
    with _stage("verify"):
        for address, owner in (
            (result.mint, TOKEN_PROGRAM_ID),
            (result.metadata_address, METADATA_PROGRAM_ID),
        ):
            info = ledger.get_account_info(str(address))
            if info is None:
                raise TokenCreationError(f"Account {address} not found after confirmation.")
            if info.get("owner") != str(owner):
                raise TokenCreationError(
                    f"Account {address} is owned by {info.get('owner')}, expected {owner}."
                )
