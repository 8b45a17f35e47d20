import fire

from nft_generator.utils.keys import get_pubkeyhash

from .util import ada_from_lovelace, lovelace_from_ada, stored_chain


def main(wallet: str = "creator", amount: str = "100", db: str = None):
    """
    Credit funds to a wallet on the local chain
    """
    pubkeyhash = get_pubkeyhash(wallet)
    with stored_chain(db) as chain:
        balance = chain.fund(pubkeyhash, lovelace_from_ada(amount))
    print(f"Wallet {wallet} holds {ada_from_lovelace(balance)} ADA")
    return balance


if __name__ == "__main__":
    fire.Fire(main)
