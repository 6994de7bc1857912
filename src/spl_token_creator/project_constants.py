"""
Fixed parameters of the GIF token.

The metadata values below are written on-chain at creation time. The
update authority (payer by default) can revise them later; the decimals
cannot be changed once the mint is initialized.
"""

# Token mint layout
TOKEN_DECIMALS = 9

# Default display metadata
TOKEN_NAME = "GIF Token"
TOKEN_SYMBOL = "GIF"
TOKEN_URI = "https://raw.githubusercontent.com/Xe7oee/gif-token-metadata/main/metadata.json"
SELLER_FEE_BASIS_POINTS = 0
IS_MUTABLE = True

# Who may revise the metadata afterwards: "payer" or "mint"
UPDATE_AUTHORITY = "payer"

DEFAULT_CLUSTER = "devnet"
DEFAULT_COMMITMENT = "confirmed"

CLUSTER_URLS = {
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
}

COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")
