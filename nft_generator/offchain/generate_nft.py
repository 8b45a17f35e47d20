import fire

from nft_generator.utils.keys import get_pubkeyhash

from .util import lovelace_from_ada, show_events, stored_chain


def main(
    token_uri: str,
    wallet: str = "creator",
    payment: str = None,
    db: str = None,
    debug_sql: bool = False,
):
    """
    Mint the next NFT for the wallet.
    Pays the current minting price unless an explicit payment (in ADA) is given.
    """
    caller = get_pubkeyhash(wallet)
    with stored_chain(db, debug_sql) as chain:
        value = (
            chain.minting_price if payment is None else lovelace_from_ada(payment)
        )
        num_events = len(chain.events)
        minted = chain.generate_nft(caller, token_uri, value)
        show_events(chain.events[num_events:])

    print(f"Minted NFT {minted.id} for {wallet}")
    return minted.id


if __name__ == "__main__":
    fire.Fire(main)
