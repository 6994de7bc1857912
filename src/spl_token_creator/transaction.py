from __future__ import annotations

from typing import List, Sequence

from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.transaction import Transaction


def assemble_transaction(
    instructions: List[Instruction],
    fee_payer: Keypair,
    signers: Sequence[Keypair],
    recent_blockhash: str,
) -> Transaction:
    """
    One atomic legacy transaction. ``recent_blockhash`` must be fetched right
    before this call; it expires after roughly 150 blocks.
    """
    blockhash = Hash.from_string(recent_blockhash)
    message = Message.new_with_blockhash(instructions, fee_payer.pubkey(), blockhash)
    keypairs = [fee_payer] + [s for s in signers if s.pubkey() != fee_payer.pubkey()]
    return Transaction(keypairs, message, blockhash)


def serialize_transaction(tx: Transaction) -> bytes:
    return bytes(tx)
