import unittest

from solders.pubkey import Pubkey

from spl_token_creator.pda import (
    METADATA_PROGRAM_ID,
    METADATA_SEED,
    derive,
    derive_metadata_address,
)


class TestMetadataAddress(unittest.TestCase):
    def setUp(self):
        self.mint = Pubkey.new_unique()

    def test_deterministic(self):
        self.assertEqual(derive_metadata_address(self.mint), derive_metadata_address(self.mint))

    def test_matches_program_address_seeds(self):
        expected = Pubkey.find_program_address(
            [METADATA_SEED, bytes(METADATA_PROGRAM_ID), bytes(self.mint)],
            METADATA_PROGRAM_ID,
        )
        self.assertEqual(derive_metadata_address(self.mint), expected)

    def test_off_curve_with_valid_bump(self):
        address, bump = derive_metadata_address(self.mint)
        self.assertFalse(address.is_on_curve())
        self.assertTrue(0 <= bump <= 255)

    def test_distinct_mints_distinct_addresses(self):
        other = Pubkey.new_unique()
        self.assertNotEqual(
            derive_metadata_address(self.mint)[0], derive_metadata_address(other)[0]
        )

    def test_generic_derive(self):
        seeds = [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(self.mint)]
        self.assertEqual(derive(seeds, METADATA_PROGRAM_ID), derive_metadata_address(self.mint))


if __name__ == "__main__":
    unittest.main()
