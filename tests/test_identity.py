import json
import unittest

import base58
from solders.keypair import Keypair

from spl_token_creator.errors import ConfigError, SecretDecodeError
from spl_token_creator.identity import (
    encode_secret,
    load_or_generate_mint_keypair,
    load_payer_keypair,
    provision_identities,
)


def secret_json(kp: Keypair) -> str:
    return json.dumps(list(bytes(kp)))


class TestPayerKeypair(unittest.TestCase):
    def test_loads_json_byte_array(self):
        kp = Keypair()
        loaded = load_payer_keypair(secret_json(kp))
        self.assertEqual(loaded.pubkey(), kp.pubkey())

    def test_missing_secret(self):
        for value in (None, "", "   "):
            with self.assertRaises(ConfigError):
                load_payer_keypair(value)

    def test_not_json(self):
        with self.assertRaises(ConfigError):
            load_payer_keypair("not-json")

    def test_wrong_length(self):
        with self.assertRaises(ConfigError):
            load_payer_keypair(json.dumps([1] * 32))

    def test_values_out_of_byte_range(self):
        with self.assertRaises(ConfigError):
            load_payer_keypair(json.dumps([256] * 64))

    def test_not_a_list(self):
        with self.assertRaises(ConfigError):
            load_payer_keypair(json.dumps({"secret": [1, 2]}))


class TestMintKeypair(unittest.TestCase):
    def test_generates_when_absent(self):
        first, generated = load_or_generate_mint_keypair(None)
        second, _ = load_or_generate_mint_keypair(None)
        self.assertTrue(generated)
        self.assertNotEqual(first.pubkey(), second.pubkey())

    def test_same_secret_same_address(self):
        secret = encode_secret(Keypair())
        a, generated = load_or_generate_mint_keypair(secret)
        b, _ = load_or_generate_mint_keypair(secret)
        self.assertFalse(generated)
        self.assertEqual(a.pubkey(), b.pubkey())

    def test_invalid_base58(self):
        with self.assertRaises(SecretDecodeError):
            load_or_generate_mint_keypair("0OIl-not-base58")

    def test_wrong_length(self):
        with self.assertRaises(SecretDecodeError):
            load_or_generate_mint_keypair(base58.b58encode(b"\x01" * 10).decode())

    def test_encode_secret_is_64_bytes(self):
        kp = Keypair()
        self.assertEqual(base58.b58decode(encode_secret(kp)), bytes(kp))


class TestProvision(unittest.TestCase):
    def test_two_independent_signers(self):
        payer = Keypair()
        ids = provision_identities(secret_json(payer), None)
        self.assertEqual(ids.payer.pubkey(), payer.pubkey())
        self.assertNotEqual(ids.mint.pubkey(), payer.pubkey())
        self.assertTrue(ids.mint_generated)
        self.assertEqual(base58.b58decode(ids.mint_secret_b58), bytes(ids.mint))

    def test_payer_checked_before_mint(self):
        with self.assertRaises(ConfigError):
            provision_identities(None, "0OIl")


if __name__ == "__main__":
    unittest.main()
