import unittest

from solders.hash import Hash
from solders.keypair import Keypair
from solders.transaction import Transaction

from spl_token_creator.instructions import TokenMetadata, build_token_instructions
from spl_token_creator.pda import derive_metadata_address
from spl_token_creator.transaction import assemble_transaction, serialize_transaction


class TestAssemble(unittest.TestCase):
    def setUp(self):
        self.payer = Keypair()
        self.mint = Keypair()
        metadata_address, _ = derive_metadata_address(self.mint.pubkey())
        self.instructions = build_token_instructions(
            payer=self.payer.pubkey(),
            mint=self.mint.pubkey(),
            metadata_address=metadata_address,
            lamports=1_461_600,
            metadata=TokenMetadata(),
            update_authority=self.payer.pubkey(),
        )
        self.blockhash = Hash.new_unique()

    def assemble(self, signers):
        return assemble_transaction(
            self.instructions,
            fee_payer=self.payer,
            signers=signers,
            recent_blockhash=str(self.blockhash),
        )

    def test_fee_payer_and_signatures(self):
        tx = self.assemble([self.payer, self.mint])
        message = tx.message
        self.assertEqual(message.account_keys[0], self.payer.pubkey())
        self.assertEqual(message.header.num_required_signatures, 2)
        self.assertEqual(
            set(message.account_keys[:2]), {self.payer.pubkey(), self.mint.pubkey()}
        )
        self.assertEqual(message.recent_blockhash, self.blockhash)
        tx.verify()

    def test_signer_order_does_not_matter(self):
        a = self.assemble([self.payer, self.mint])
        b = self.assemble([self.mint, self.payer])
        self.assertEqual(serialize_transaction(a), serialize_transaction(b))

    def test_serialized_wire_format(self):
        tx = self.assemble([self.payer, self.mint])
        wire = serialize_transaction(tx)
        self.assertEqual(Transaction.from_bytes(wire), tx)
        self.assertLessEqual(len(wire), 1232)


if __name__ == "__main__":
    unittest.main()
