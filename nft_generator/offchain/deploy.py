import fire

from nft_generator.offchain.chain import LocalChain
from nft_generator.storage import connect, sqlite_db
from nft_generator.storage.chain_store import load_chain, save_chain
from nft_generator.utils import db_path
from nft_generator.utils.keys import get_pubkeyhash

from .util import lovelace_from_ada


def main(wallet: str = "creator", minting_price: str = "1", db: str = None):
    """
    Deploy a new NFT generator owned by the wallet.
    Refuses to replace a generator that is already deployed in the database.
    """
    deployer = get_pubkeyhash(wallet)
    connect(db or db_path)
    try:
        if load_chain() is not None:
            raise RuntimeError("A generator is already deployed in this database")

        chain = LocalChain.deploy(deployer, lovelace_from_ada(minting_price))
        save_chain(chain)
    finally:
        sqlite_db.close()

    print(f"Deployed generator {chain.address.hex()} owned by {wallet}")
    return chain.address


if __name__ == "__main__":
    fire.Fire(main)
