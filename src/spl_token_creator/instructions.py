from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from borsh_construct import U8, U16, U64, Bool, CStruct, Enum, Option, String, Vec
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.system_program import CreateAccountParams, create_account
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID
from spl.token.instructions import InitializeMintParams, initialize_mint

from .pda import METADATA_PROGRAM_ID
from .project_constants import (
    IS_MUTABLE,
    SELLER_FEE_BASIS_POINTS,
    TOKEN_DECIMALS,
    TOKEN_NAME,
    TOKEN_SYMBOL,
    TOKEN_URI,
)

# Token Metadata program instruction index for CreateMetadataAccountV3
CREATE_METADATA_ACCOUNT_V3 = 33

MAX_NAME_LEN = 32
MAX_SYMBOL_LEN = 10
MAX_URI_LEN = 200
MAX_BASIS_POINTS = 10_000


@dataclass(frozen=True)
class Creator:
    address: Pubkey
    share: int
    verified: bool = False


@dataclass(frozen=True)
class TokenMetadata:
    name: str = TOKEN_NAME
    symbol: str = TOKEN_SYMBOL
    uri: str = TOKEN_URI
    seller_fee_basis_points: int = SELLER_FEE_BASIS_POINTS
    creators: List[Creator] = field(default_factory=list)
    is_mutable: bool = IS_MUTABLE

    def with_sole_creator(self, address: Pubkey) -> "TokenMetadata":
        return TokenMetadata(
            name=self.name,
            symbol=self.symbol,
            uri=self.uri,
            seller_fee_basis_points=self.seller_fee_basis_points,
            creators=[Creator(address=address, share=100)],
            is_mutable=self.is_mutable,
        )

    def validate(self) -> None:
        for label, value, limit in (
            ("name", self.name, MAX_NAME_LEN),
            ("symbol", self.symbol, MAX_SYMBOL_LEN),
            ("uri", self.uri, MAX_URI_LEN),
        ):
            if len(value.encode("utf-8")) > limit:
                raise ValueError(f"Metadata {label} is longer than {limit} bytes: {value!r}")
        if not 0 <= self.seller_fee_basis_points <= MAX_BASIS_POINTS:
            raise ValueError(
                f"seller_fee_basis_points must be 0..{MAX_BASIS_POINTS}, "
                f"got {self.seller_fee_basis_points}"
            )
        if self.creators and sum(c.share for c in self.creators) != 100:
            raise ValueError("Creator shares must sum to 100.")


CreatorLayout = CStruct("address" / U8[32], "verified" / Bool, "share" / U8)
CollectionLayout = CStruct("verified" / Bool, "key" / U8[32])
UseMethodLayout = Enum("Burn" / CStruct(), "Multiple" / CStruct(), "Single" / CStruct(), enum_name="UseMethod")
UsesLayout = CStruct("use_method" / UseMethodLayout, "remaining" / U64, "total" / U64)
CollectionDetailsLayout = Enum("V1" / CStruct("size" / U64), enum_name="CollectionDetails")
DataV2Layout = CStruct(
    "name" / String,
    "symbol" / String,
    "uri" / String,
    "seller_fee_basis_points" / U16,
    "creators" / Option(Vec(CreatorLayout)),
    "collection" / Option(CollectionLayout),
    "uses" / Option(UsesLayout),
)
CreateMetadataAccountV3Layout = CStruct(
    "instruction" / U8,
    "data" / DataV2Layout,
    "is_mutable" / Bool,
    "collection_details" / Option(CollectionDetailsLayout),
)


def encode_create_metadata_v3_data(metadata: TokenMetadata) -> bytes:
    """CreateMetadataAccountV3 instruction data; collection, uses and collection details are unset."""
    creators = None
    if metadata.creators:
        creators = [
            {"address": list(bytes(c.address)), "verified": c.verified, "share": c.share}
            for c in metadata.creators
        ]

    return CreateMetadataAccountV3Layout.build(
        {
            "instruction": CREATE_METADATA_ACCOUNT_V3,
            "data": {
                "name": metadata.name,
                "symbol": metadata.symbol,
                "uri": metadata.uri,
                "seller_fee_basis_points": metadata.seller_fee_basis_points,
                "creators": creators,
                "collection": None,
                "uses": None,
            },
            "is_mutable": metadata.is_mutable,
            "collection_details": None,
        }
    )


def create_mint_account_ix(payer: Pubkey, mint: Pubkey, lamports: int) -> Instruction:
    return create_account(
        CreateAccountParams(
            from_pubkey=payer,
            to_pubkey=mint,
            lamports=lamports,
            space=MINT_LEN,
            owner=TOKEN_PROGRAM_ID,
        )
    )


def initialize_mint_ix(mint: Pubkey, decimals: int = TOKEN_DECIMALS) -> Instruction:
    # The mint's own address is both mint and freeze authority.
    return initialize_mint(
        InitializeMintParams(
            decimals=decimals,
            program_id=TOKEN_PROGRAM_ID,
            mint=mint,
            mint_authority=mint,
            freeze_authority=mint,
        )
    )


def create_metadata_ix(
    metadata_address: Pubkey,
    mint: Pubkey,
    mint_authority: Pubkey,
    payer: Pubkey,
    update_authority: Pubkey,
    metadata: TokenMetadata,
) -> Instruction:
    metadata.validate()
    accounts = [
        AccountMeta(metadata_address, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(mint_authority, is_signer=True, is_writable=False),
        AccountMeta(payer, is_signer=True, is_writable=True),
        # Signs when it is one of the transaction's signers (payer or mint).
        AccountMeta(
            update_authority,
            is_signer=update_authority in (payer, mint_authority),
            is_writable=False,
        ),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(
        program_id=METADATA_PROGRAM_ID,
        accounts=accounts,
        data=encode_create_metadata_v3_data(metadata),
    )


def build_token_instructions(
    payer: Pubkey,
    mint: Pubkey,
    metadata_address: Pubkey,
    lamports: int,
    metadata: TokenMetadata,
    update_authority: Pubkey,
) -> List[Instruction]:
    """
    Allocation, then mint initialization, then metadata creation.
    The metadata program checks that the mint is already initialized,
    so this order is fixed.
    """
    metadata = metadata.with_sole_creator(payer)
    return [
        create_mint_account_ix(payer, mint, lamports),
        initialize_mint_ix(mint),
        create_metadata_ix(
            metadata_address=metadata_address,
            mint=mint,
            mint_authority=mint,
            payer=payer,
            update_authority=update_authority,
            metadata=metadata,
        ),
    ]
