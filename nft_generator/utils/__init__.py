import os
from pathlib import Path

from pycardano import Network

# sqlite database holding the local chain
db_path = os.environ.get("NFT_GENERATOR_DB", "nft_generator.db")

# directory holding the wallet keys, one pair of <name>.skey/<name>.vkey per wallet
keys_dir = Path(os.environ.get("NFT_GENERATOR_KEYS", "keys"))

network = (
    Network.MAINNET
    if os.environ.get("NFT_GENERATOR_NETWORK", "testnet").lower() == "mainnet"
    else Network.TESTNET
)

from .keys import get_signing_info, get_address, get_pubkeyhash
