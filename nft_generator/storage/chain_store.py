"""
Durable storage of the local chain.

The whole chain is written in one database transaction, so the stored chain
always reflects the state after some completed call.
"""

import logging
from typing import Optional

from nft_generator.offchain.chain import LocalChain
from nft_generator.onchain.token_ledger import TokenLedger
from nft_generator.onchain.util import EVENT_TYPES, GeneratorState, MintRecord
from .db import Account, ContractInfo, EventLog, MintedNFT, NFT, sqlite_db

_LOGGER = logging.getLogger(__name__)


def _insert_rows(model, rows) -> None:
    if rows:
        model.insert_many(rows).execute()


def save_chain(chain: LocalChain) -> None:
    with sqlite_db.atomic():
        for model in (ContractInfo, Account, NFT, MintedNFT, EventLog):
            model.delete().execute()

        ContractInfo.create(
            address=chain.address.hex(),
            owner=chain.state.owner.hex(),
            minting_price=chain.state.minting_price,
            next_id=chain.state.next_id,
            balance=chain.state.balance,
        )
        _insert_rows(
            Account,
            [
                {"address_raw": address.hex(), "balance": balance}
                for address, balance in chain.accounts.items()
            ],
        )
        _insert_rows(
            NFT,
            [
                {
                    "token_id": token_id,
                    "owner": owner.hex(),
                    "token_uri": chain.ledger.token_uris[token_id],
                }
                for token_id, owner in chain.ledger.owners.items()
            ],
        )
        _insert_rows(
            MintedNFT,
            [
                {
                    "creator": creator.hex(),
                    "position": i,
                    "token_id": record.id,
                    "token_uri": record.token_uri,
                }
                for creator, records in chain.state.minted_nfts.items()
                for i, record in enumerate(records)
            ],
        )
        _insert_rows(
            EventLog,
            [
                {"position": i, "kind": type(event).__name__, "data": event.to_cbor()}
                for i, event in enumerate(chain.events)
            ],
        )
    _LOGGER.debug(
        f"Stored chain with {len(chain.ledger)} NFTs and {len(chain.events)} events"
    )


def load_chain() -> Optional[LocalChain]:
    """
    Load the stored chain, None if no generator was deployed yet.
    """
    info = ContractInfo.select().first()
    if info is None:
        return None

    minted_nfts = {}
    for row in MintedNFT.select().order_by(MintedNFT.creator, MintedNFT.position):
        creator = bytes.fromhex(row.creator)
        minted_nfts.setdefault(creator, []).append(
            MintRecord(id=row.token_id, creator=creator, token_uri=bytes(row.token_uri))
        )
    state = GeneratorState(
        owner=bytes.fromhex(info.owner),
        minting_price=info.minting_price,
        next_id=info.next_id,
        minted_nfts=minted_nfts,
        balance=info.balance,
    )

    ledger = TokenLedger()
    for row in NFT.select().order_by(NFT.token_id):
        owner = bytes.fromhex(row.owner)
        ledger.owners[row.token_id] = owner
        ledger.token_uris[row.token_id] = bytes(row.token_uri)
        ledger.balances[owner] = ledger.balances.get(owner, 0) + 1

    accounts = {
        bytes.fromhex(row.address_raw): row.balance for row in Account.select()
    }
    events = [
        EVENT_TYPES[row.kind].from_cbor(bytes(row.data))
        for row in EventLog.select().order_by(EventLog.position)
    ]
    return LocalChain(
        address=bytes.fromhex(info.address),
        state=state,
        ledger=ledger,
        accounts=accounts,
        events=events,
    )
