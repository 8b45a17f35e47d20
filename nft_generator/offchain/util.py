import logging
from contextlib import contextmanager
from fractions import Fraction
from typing import List, Union

from nft_generator.onchain.util import (
    Event,
    NFTMinted,
    OwnershipTransferred,
    Transfer,
    WithdrawnFunds,
)
from nft_generator.storage import connect, sqlite_db
from nft_generator.storage.chain_store import load_chain, save_chain
from nft_generator.utils import db_path

LOVELACE_PER_ADA = 1_000_000


def lovelace_from_ada(amount: Union[str, int, float]) -> int:
    """
    Convert an amount of ADA as given on the command line into lovelace.
    Fails on amounts that are not a whole number of lovelace.
    """
    lovelace = Fraction(str(amount)) * LOVELACE_PER_ADA
    if lovelace.denominator != 1:
        raise ValueError(f"{amount} ADA is not a whole number of lovelace")
    if lovelace < 0:
        raise ValueError(f"Negative amount {amount} ADA")
    return int(lovelace)


def ada_from_lovelace(amount: int) -> str:
    ada, lovelace = divmod(amount, LOVELACE_PER_ADA)
    if lovelace == 0:
        return f"{ada}"
    return f"{ada}.{lovelace:06d}".rstrip("0")


def format_event(event: Event) -> str:
    if isinstance(event, NFTMinted):
        return f"NFTMinted(id={event.id}, creator={event.creator.hex()}, token_uri={event.token_uri.decode()})"
    if isinstance(event, WithdrawnFunds):
        return f"WithdrawnFunds(amount={ada_from_lovelace(event.amount)} ADA, receiver={event.receiver.hex()})"
    if isinstance(event, OwnershipTransferred):
        return f"OwnershipTransferred(previous_owner={event.previous_owner.hex()}, new_owner={event.new_owner.hex()})"
    if isinstance(event, Transfer):
        return f"Transfer(sender={event.sender.hex()}, receiver={event.receiver.hex()}, token_id={event.token_id})"
    return repr(event)


def show_events(events: List[Event]):
    for event in events:
        print(format_event(event))


def enable_sql_logging():
    logger = logging.getLogger("peewee")
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        logger.addHandler(logging.StreamHandler())
    logger.setLevel(logging.DEBUG)


@contextmanager
def stored_chain(path: str = None, debug_sql: bool = False):
    """
    Yield the stored chain and store it again if the block completes
    """
    if debug_sql:
        enable_sql_logging()
    connect(path or db_path)
    try:
        chain = load_chain()
        if chain is None:
            raise RuntimeError("No generator deployed yet, run the deploy script first")
        yield chain
        save_chain(chain)
    finally:
        sqlite_db.close()
