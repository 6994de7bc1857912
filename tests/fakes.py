import json

from solders.hash import Hash
from solders.keypair import Keypair
from solders.transaction import Transaction

from spl_token_creator.config import Settings
from spl_token_creator.rpc import LatestBlockhash

RENT = 1_461_600


class FakeLedger:
    """In-memory ledger that records every call."""

    def __init__(self, reject_send=None):
        self.calls = []
        self.sent = []
        self.reject_send = reject_send
        self.blockhash = str(Hash.new_unique())
        self.accounts = {}

    def get_minimum_balance_for_rent_exemption(self, size):
        self.calls.append(("rent", size))
        return RENT

    def get_latest_blockhash(self):
        self.calls.append(("blockhash",))
        return LatestBlockhash(blockhash=self.blockhash, last_valid_block_height=1000)

    def send_transaction(self, wire):
        self.calls.append(("send",))
        if self.reject_send is not None:
            raise self.reject_send
        tx = Transaction.from_bytes(wire)
        tx.verify()
        self.sent.append(tx)
        return "sig1"

    def confirm_transaction(self, signature, last_valid_block_height):
        self.calls.append(("confirm", signature, last_valid_block_height))
        return {"confirmationStatus": "confirmed", "err": None}

    def get_account_info(self, address):
        self.calls.append(("account", address))
        return self.accounts.get(address)

    def close(self):
        self.calls.append(("close",))


def settings_for(payer=None, mint_secret=None, payer_secret=None):
    if payer_secret is None:
        payer_secret = json.dumps(list(bytes(payer or Keypair())))
    return Settings(
        rpc_url="http://localhost:8899",
        payer_secret=payer_secret,
        mint_secret=mint_secret,
    )

