import fire

from nft_generator.utils.keys import get_pubkeyhash

from .util import ada_from_lovelace, lovelace_from_ada, stored_chain


def main(minting_price: str, wallet: str = "creator", db: str = None):
    """
    ADMIN ONLY
    Change the minting price (in ADA)
    """
    caller = get_pubkeyhash(wallet)
    with stored_chain(db) as chain:
        chain.set_price(caller, lovelace_from_ada(minting_price))
        new_price = chain.minting_price

    print(f"Minting price is now {ada_from_lovelace(new_price)} ADA")
    return new_price


if __name__ == "__main__":
    fire.Fire(main)
