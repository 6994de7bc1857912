from __future__ import annotations

from typing import Sequence, Tuple

from solders.pubkey import Pubkey

from .errors import DerivationError

METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")
METADATA_SEED = b"metadata"


def derive(seeds: Sequence[bytes], program_id: Pubkey) -> Tuple[Pubkey, int]:
    """Program-derived address and bump for ``seeds`` under ``program_id``."""
    try:
        return Pubkey.find_program_address(list(seeds), program_id)
    except Exception as e:
        raise DerivationError(
            f"No program address found for program {program_id}: {e}", stage="derive"
        ) from e


def derive_metadata_address(
    mint: Pubkey, program_id: Pubkey = METADATA_PROGRAM_ID
) -> Tuple[Pubkey, int]:
    return derive([METADATA_SEED, bytes(program_id), bytes(mint)], program_id)
