"""
A local chain hosting a single NFT generator.

The chain holds the funds of external accounts, the generator state and the token
ledger. Every call is executed as one transaction: if any error escapes, the
generator state, the ledger, all account funds and the event log are restored to
what they were before the call. Changes are undone from a journal of the entries
a transaction touched, so rolling back never depends on the size of the history.

Accounts may register a Receiver that is notified when they receive an NFT or
funds. Receivers are untrusted: they may reject by raising, and they may call
back into the chain while being notified.
"""

import contextlib
import logging
from hashlib import sha256
from typing import Callable, Dict, List, Optional

from nft_generator.onchain import nft_generator
from nft_generator.onchain.errors import (
    GeneratorError,
    InsufficientFunds,
    InvalidReceiver,
    TransferRejected,
)
from nft_generator.onchain.token_ledger import TokenLedger
from nft_generator.onchain.util import (
    Event,
    GenerateNFT,
    GeneratorCall,
    GeneratorState,
    MintRecord,
    NFTMinted,
    OwnershipTransferred,
    PubKeyHash,
    SetPrice,
    TokenId,
    TransferOwnership,
    WithdrawFunds,
    WithdrawnFunds,
    initial_generator_state,
)

_LOGGER = logging.getLogger(__name__)


def generator_address(deployer: PubKeyHash) -> PubKeyHash:
    """
    The identity of the generator deployed by the given account
    """
    return sha256(b"nft_generator" + deployer).digest()[:28]


def check_amount(amount: int) -> None:
    if not isinstance(amount, int) or amount < 0:
        raise ValueError(f"Amounts must be non-negative integers, got {amount!r}")


class Receiver:
    """
    Hooks of an account that is notified on incoming NFTs and funds.
    Raising from a hook rejects the incoming asset.
    """

    def on_nft_received(
        self, chain: "LocalChain", operator: PubKeyHash, token_id: TokenId
    ) -> None:
        pass

    def on_funds_received(
        self, chain: "LocalChain", sender: PubKeyHash, amount: int
    ) -> None:
        pass


class ChainCallContext(nft_generator.CallContext):
    def __init__(self, chain: "LocalChain", caller: PubKeyHash, value: int):
        self.chain = chain
        self.caller = caller
        self.value = value
        self.address = chain.address

    def emit(self, event: Event) -> None:
        self.chain.events.append(event)

    def safe_mint(self, to: PubKeyHash, token_id: TokenId, token_uri: bytes) -> None:
        ledger = self.chain.ledger
        self.chain.remember(ledger.owners, token_id)
        self.chain.remember(ledger.token_uris, token_id)
        self.chain.remember(ledger.balances, to)
        self.emit(ledger.mint(to, token_id, token_uri))
        self.chain.notify_nft_received(to, self.caller, token_id)

    def send(self, receiver: PubKeyHash, amount: int) -> None:
        try:
            with self.chain.atomic():
                self.chain.set_account_balance(
                    receiver, self.chain.account_balance(receiver) + amount
                )
                hook = self.chain.receivers.get(receiver)
                if hook is not None:
                    hook.on_funds_received(self.chain, self.chain.address, amount)
        except Exception as e:
            _LOGGER.info(f"Receiver {receiver.hex()} rejected {amount}: {e!r}")
            raise TransferRejected(f"Receiver {receiver.hex()} rejected funds") from e


class LocalChain:
    def __init__(
        self,
        address: PubKeyHash,
        state: GeneratorState,
        ledger: Optional[TokenLedger] = None,
        accounts: Optional[Dict[PubKeyHash, int]] = None,
        events: Optional[List[Event]] = None,
    ):
        self.address = address
        self.state = state
        self.ledger = ledger if ledger is not None else TokenLedger()
        self.accounts: Dict[PubKeyHash, int] = accounts if accounts is not None else {}
        self.events: List[Event] = events if events is not None else []
        # hooks are code, they live only as long as this process
        self.receivers: Dict[PubKeyHash, Receiver] = {}
        # undo actions of the running transactions, innermost last
        self._journal: List[Callable[[], None]] = []
        self._depth = 0

    @classmethod
    def deploy(
        cls,
        deployer: PubKeyHash,
        initial_price: int,
        accounts: Optional[Dict[PubKeyHash, int]] = None,
    ) -> "LocalChain":
        """
        Deploy a fresh generator owned by the deployer
        """
        check_amount(initial_price)
        chain = cls(
            address=generator_address(deployer),
            state=initial_generator_state(deployer, initial_price),
            accounts=dict(accounts or {}),
        )
        _LOGGER.info(
            f"Deployed generator {chain.address.hex()} owned by {deployer.hex()} at price {initial_price}"
        )
        return chain

    # accounts

    def create_account(
        self, address: PubKeyHash, funds: int = 0, receiver: Optional[Receiver] = None
    ) -> PubKeyHash:
        check_amount(funds)
        self.set_account_balance(address, self.account_balance(address) + funds)
        if receiver is not None:
            self.receivers[address] = receiver
        return address

    def fund(self, address: PubKeyHash, amount: int) -> int:
        check_amount(amount)
        self.set_account_balance(address, self.account_balance(address) + amount)
        return self.accounts[address]

    def account_balance(self, address: PubKeyHash) -> int:
        return self.accounts.get(address, 0)

    def set_account_balance(self, address: PubKeyHash, balance: int) -> None:
        self.remember(self.accounts, address)
        self.accounts[address] = balance

    def notify_nft_received(
        self, receiver: PubKeyHash, operator: PubKeyHash, token_id: TokenId
    ) -> None:
        hook = self.receivers.get(receiver)
        if hook is None:
            return
        try:
            hook.on_nft_received(self, operator, token_id)
        except Exception as e:
            raise InvalidReceiver(
                f"Receiver {receiver.hex()} rejected token {token_id}"
            ) from e

    # transactions

    def remember(self, mapping: dict, key) -> None:
        """
        Journal the current entry of the mapping at key, if a transaction is running
        """
        if not self._depth:
            return
        if key in mapping:
            value = mapping[key]

            def undo():
                mapping[key] = value

        else:

            def undo():
                mapping.pop(key, None)

        self._journal.append(undo)

    def _remember_minted_nfts(self, creator: PubKeyHash) -> None:
        # records are only ever appended to the list of the caller
        minted_nfts = self.state.minted_nfts
        records = minted_nfts.get(creator)
        if records is None:
            self.remember(minted_nfts, creator)
            return
        num_records = len(records)

        def undo():
            del records[num_records:]

        self._journal.append(undo)

    @contextlib.contextmanager
    def atomic(self):
        """
        Restore the state, ledger, accounts and events if the block raises
        """
        state = self.state
        scalars = (state.owner, state.minting_price, state.next_id, state.balance)
        mark = len(self._journal)
        num_events = len(self.events)
        self._depth += 1
        try:
            yield
        except BaseException:
            # restore in place, running operations still hold these objects
            while len(self._journal) > mark:
                self._journal.pop()()
            state.owner, state.minting_price, state.next_id, state.balance = scalars
            del self.events[num_events:]
            raise
        finally:
            self._depth -= 1
            if not self._depth:
                self._journal.clear()

    def submit(
        self, caller: PubKeyHash, call: GeneratorCall, value: int = 0
    ) -> List[Event]:
        """
        Execute a call to the generator as one transaction.
        Returns the events emitted during the transaction, including nested calls.
        """
        check_amount(value)
        if isinstance(call, SetPrice):
            check_amount(call.new_price)
        num_events = len(self.events)
        try:
            with self.atomic():
                balance = self.account_balance(caller)
                if balance < value:
                    raise InsufficientFunds(
                        f"Account {caller.hex()} holds {balance}, needs {value}"
                    )
                self.set_account_balance(caller, balance - value)
                self._remember_minted_nfts(caller)
                context = ChainCallContext(self, caller, value)
                nft_generator.execute(self.state, call, context)
        except GeneratorError as e:
            _LOGGER.info(
                f"Rejected {type(call).__name__} from {caller.hex()}: {type(e).__name__}: {e}"
            )
            raise
        emitted = self.events[num_events:]
        _LOGGER.debug(
            f"Executed {type(call).__name__} from {caller.hex()}, emitted {len(emitted)} events"
        )
        return emitted

    def generate_nft(self, caller: PubKeyHash, token_uri: str, value: int) -> NFTMinted:
        events = self.submit(caller, GenerateNFT(token_uri.encode()), value)
        return next(e for e in events if isinstance(e, NFTMinted) and e.creator == caller)

    def set_price(self, caller: PubKeyHash, new_price: int, value: int = 0) -> None:
        self.submit(caller, SetPrice(new_price), value)

    def withdraw_funds(
        self, caller: PubKeyHash, receiver: PubKeyHash, value: int = 0
    ) -> WithdrawnFunds:
        events = self.submit(caller, WithdrawFunds(receiver), value)
        return [e for e in events if isinstance(e, WithdrawnFunds)][-1]

    def transfer_ownership(
        self, caller: PubKeyHash, new_owner: PubKeyHash, value: int = 0
    ) -> OwnershipTransferred:
        events = self.submit(caller, TransferOwnership(new_owner), value)
        return [e for e in events if isinstance(e, OwnershipTransferred)][-1]

    def transfer_nft(
        self, caller: PubKeyHash, receiver: PubKeyHash, token_id: TokenId
    ) -> None:
        """
        Move an NFT held by the caller to the receiver, notifying the receiver
        """
        with self.atomic():
            self.remember(self.ledger.owners, token_id)
            self.remember(self.ledger.balances, caller)
            self.remember(self.ledger.balances, receiver)
            self.events.append(
                self.ledger.transfer_from(caller, caller, receiver, token_id)
            )
            self.notify_nft_received(receiver, caller, token_id)

    # reads

    def owner_of(self, token_id: TokenId) -> PubKeyHash:
        return self.ledger.owner_of(token_id)

    def token_uri(self, token_id: TokenId) -> str:
        return self.ledger.token_uri(token_id).decode()

    def balance_of(self, owner: PubKeyHash) -> int:
        return self.ledger.balance_of(owner)

    def minted_nfts(self, creator: PubKeyHash, index: int) -> MintRecord:
        return nft_generator.minted_nfts(self.state, creator, index)

    def minted_nfts_count(self, creator: PubKeyHash) -> int:
        return nft_generator.minted_nfts_count(self.state, creator)

    @property
    def owner(self) -> PubKeyHash:
        return self.state.owner

    @property
    def minting_price(self) -> int:
        return self.state.minting_price

    @property
    def next_id(self) -> TokenId:
        return self.state.next_id

    @property
    def contract_balance(self) -> int:
        return self.state.balance
