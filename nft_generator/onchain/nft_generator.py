"""
The NFT generator contract.

Anyone can mint the next NFT by attaching exactly the current minting price and a
non-empty token URI. The NFT is minted to the caller in the token ledger and
recorded in the list of NFTs minted by the caller.
The owner of the generator may change the price, withdraw the collected funds
and hand over the ownership.

Every operation receives the generator state, which it mutates in place, and a
call context provided by the host chain. The host runs every operation as one
transaction and rolls back the state if an error escapes, so operations may
raise at any point without leaving partial effects behind.

The context offers two untrusted boundaries, minting into the token ledger
(which notifies the receiver) and sending funds. Both may reenter the
generator, so all bookkeeping of an operation is finished before crossing them.
"""

from typing import List, Optional

from nft_generator.onchain.errors import (
    EmptyTokenURI,
    IncorrectPayment,
    InvalidOwner,
    InvalidReceiver,
    InvalidTokenURI,
    NotOwner,
    NotPayable,
    TransferFailed,
    TransferRejected,
    UnknownRecord,
)
from nft_generator.onchain.util import *


class CallContext:
    """
    What the host chain exposes to the generator during one call
    """

    # identity of the generator itself
    address: PubKeyHash
    caller: PubKeyHash
    value: int

    def emit(self, event: Event) -> None:
        raise NotImplementedError

    def safe_mint(self, to: PubKeyHash, token_id: TokenId, token_uri: bytes) -> None:
        """
        Mint the token in the ledger and notify the receiver, who may reject it
        """
        raise NotImplementedError

    def send(self, receiver: PubKeyHash, amount: int) -> None:
        """
        Send funds held by the generator, raises TransferRejected if the receiver refuses
        """
        raise NotImplementedError


def check_owner(state: GeneratorState, context: CallContext) -> None:
    if context.caller != state.owner:
        raise NotOwner("Caller is not the owner")


def check_not_payable(context: CallContext) -> None:
    if context.value != 0:
        raise NotPayable("Call does not accept payments")


def generate_nft(
    state: GeneratorState, context: CallContext, token_uri: bytes
) -> NFTMinted:
    # the price in effect right now is the one that counts
    if context.value != state.minting_price:
        raise IncorrectPayment("Incorrect paid amount, check price")
    if not token_uri:
        raise EmptyTokenURI("tokenURI can't be empty")
    try:
        token_uri.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidTokenURI("tokenURI must be valid UTF-8") from None

    creator = context.caller
    token_id = state.next_id
    state.next_id = increment_token_id(token_id)
    state.minted_nfts.setdefault(creator, []).append(
        MintRecord(id=token_id, creator=creator, token_uri=token_uri)
    )
    state.balance += context.value
    event = NFTMinted(id=token_id, creator=creator, token_uri=token_uri)
    context.emit(event)

    context.safe_mint(creator, token_id, token_uri)
    return event


def set_price(state: GeneratorState, context: CallContext, new_price: int) -> None:
    check_not_payable(context)
    check_owner(state, context)
    state.minting_price = new_price


def withdraw_funds(
    state: GeneratorState, context: CallContext, receiver: PubKeyHash
) -> WithdrawnFunds:
    check_not_payable(context)
    check_owner(state, context)
    if not receiver or receiver == context.address:
        raise InvalidReceiver("Funds would be sent to an identity no key controls")

    amount = state.balance
    # zero before sending so that a reentrant withdrawal finds nothing
    state.balance = 0
    try:
        context.send(receiver, amount)
    except TransferRejected as e:
        state.balance = amount
        raise TransferFailed("Transfer failed") from e

    event = WithdrawnFunds(amount=amount, receiver=receiver)
    context.emit(event)
    return event


def transfer_ownership(
    state: GeneratorState, context: CallContext, new_owner: PubKeyHash
) -> OwnershipTransferred:
    check_not_payable(context)
    check_owner(state, context)
    if not new_owner:
        raise InvalidOwner("New owner is the empty identity")

    event = OwnershipTransferred(previous_owner=state.owner, new_owner=new_owner)
    state.owner = new_owner
    context.emit(event)
    return event


def execute(
    state: GeneratorState, call: GeneratorCall, context: CallContext
) -> Optional[Event]:
    """
    Dispatch a call to the matching operation of the generator
    """
    if isinstance(call, GenerateNFT):
        return generate_nft(state, context, call.token_uri)
    elif isinstance(call, SetPrice):
        return set_price(state, context, call.new_price)
    elif isinstance(call, WithdrawFunds):
        return withdraw_funds(state, context, call.receiver)
    elif isinstance(call, TransferOwnership):
        return transfer_ownership(state, context, call.new_owner)
    raise TypeError(f"Unknown call {call!r}")


def minted_nfts(state: GeneratorState, creator: PubKeyHash, index: int) -> MintRecord:
    records: List[MintRecord] = state.minted_nfts.get(creator, [])
    if not 0 <= index < len(records):
        raise UnknownRecord(f"Creator has no minted NFT at index {index}")
    return records[index]


def minted_nfts_count(state: GeneratorState, creator: PubKeyHash) -> int:
    return len(state.minted_nfts.get(creator, []))
