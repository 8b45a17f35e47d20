"""
The token ledger.

Keeps the canonical association of every minted token id with its current holder
and its token URI. The NFT generator composes with the ledger through the mint
primitive only. Transfers between holders are offered for completeness and
keep the same invariants: an id exists at most once and every existing id has
exactly one holder.
"""

from typing import Dict

from nft_generator.onchain.errors import (
    InvalidReceiver,
    NotTokenOwner,
    TokenAlreadyMinted,
    UnknownId,
)
from nft_generator.onchain.util import MINT_SENDER, PubKeyHash, TokenId, Transfer


class TokenLedger:
    def __init__(self):
        self.owners: Dict[TokenId, PubKeyHash] = {}
        self.token_uris: Dict[TokenId, bytes] = {}
        self.balances: Dict[PubKeyHash, int] = {}

    def __len__(self) -> int:
        return len(self.owners)

    def exists(self, token_id: TokenId) -> bool:
        return token_id in self.owners

    def mint(self, to: PubKeyHash, token_id: TokenId, token_uri: bytes) -> Transfer:
        """
        Create a new token held by `to`. Fails if the id is already taken.
        """
        if not to:
            raise InvalidReceiver("Can not mint to the empty identity")
        if self.exists(token_id):
            raise TokenAlreadyMinted(f"Token {token_id} already minted")
        self.owners[token_id] = to
        self.token_uris[token_id] = token_uri
        self.balances[to] = self.balances.get(to, 0) + 1
        return Transfer(sender=MINT_SENDER, receiver=to, token_id=token_id)

    def owner_of(self, token_id: TokenId) -> PubKeyHash:
        try:
            return self.owners[token_id]
        except KeyError:
            raise UnknownId(f"Token {token_id} was never minted") from None

    def token_uri(self, token_id: TokenId) -> bytes:
        try:
            return self.token_uris[token_id]
        except KeyError:
            raise UnknownId(f"Token {token_id} was never minted") from None

    def balance_of(self, owner: PubKeyHash) -> int:
        return self.balances.get(owner, 0)

    def transfer_from(
        self,
        operator: PubKeyHash,
        sender: PubKeyHash,
        receiver: PubKeyHash,
        token_id: TokenId,
    ) -> Transfer:
        """
        Move a token from its current holder to the receiver.
        Only the holder may move its own tokens.
        """
        holder = self.owner_of(token_id)
        if holder != sender:
            raise NotTokenOwner(f"Token {token_id} is not held by the sender")
        if operator != holder:
            raise NotTokenOwner(f"Caller does not hold token {token_id}")
        if not receiver:
            raise InvalidReceiver("Can not transfer to the empty identity")
        self.balances[sender] -= 1
        self.balances[receiver] = self.balances.get(receiver, 0) + 1
        self.owners[token_id] = receiver
        return Transfer(sender=sender, receiver=receiver, token_id=token_id)
