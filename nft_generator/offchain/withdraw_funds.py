import fire

from nft_generator.utils.keys import get_pubkeyhash

from .util import show_events, stored_chain


def main(wallet: str = "creator", receiver: str = None, db: str = None):
    """
    ADMIN ONLY
    Withdraw all funds of the generator to the receiver wallet (defaults to the caller)
    """
    caller = get_pubkeyhash(wallet)
    receiver_pubkeyhash = caller if receiver is None else get_pubkeyhash(receiver)
    with stored_chain(db) as chain:
        num_events = len(chain.events)
        withdrawn = chain.withdraw_funds(caller, receiver_pubkeyhash)
        show_events(chain.events[num_events:])

    return withdrawn.amount


if __name__ == "__main__":
    fire.Fire(main)
