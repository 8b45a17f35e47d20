from opshin.prelude import *

TokenId = int

# the id of the first NFT minted by a freshly deployed generator
INITIAL_TOKEN_ID: TokenId = 0

# sender of the ledger transfer event of a freshly minted token
MINT_SENDER: PubKeyHash = b""


def increment_token_id(id: TokenId) -> TokenId:
    return id + 1


@dataclass
class MintRecord(PlutusData):
    """
    An NFT as tracked by its creator
    """

    CONSTR_ID = 0
    id: TokenId
    creator: PubKeyHash
    token_uri: bytes


@dataclass
class GeneratorState(PlutusData):
    """
    State of the NFT generator.
    The balance always equals the funds held by the chain on behalf of the generator.
    """

    CONSTR_ID = 0
    owner: PubKeyHash
    minting_price: int
    next_id: TokenId
    minted_nfts: Dict[PubKeyHash, List[MintRecord]]
    balance: int


def initial_generator_state(owner: PubKeyHash, minting_price: int) -> GeneratorState:
    return GeneratorState(
        owner=owner,
        minting_price=minting_price,
        next_id=INITIAL_TOKEN_ID,
        minted_nfts={},
        balance=0,
    )


@dataclass
class GenerateNFT(PlutusData):
    """
    Mint the next NFT for the caller, paying exactly the minting price
    """

    CONSTR_ID = 0
    token_uri: bytes


@dataclass
class SetPrice(PlutusData):
    """
    ADMIN ONLY
    Change the price charged for minting
    """

    CONSTR_ID = 1
    new_price: int


@dataclass
class WithdrawFunds(PlutusData):
    """
    ADMIN ONLY
    Send the whole balance of the generator to the receiver
    """

    CONSTR_ID = 2
    receiver: PubKeyHash


@dataclass
class TransferOwnership(PlutusData):
    """
    ADMIN ONLY
    Hand the administration of the generator to a new owner
    """

    CONSTR_ID = 3
    new_owner: PubKeyHash


GeneratorCall = Union[GenerateNFT, SetPrice, WithdrawFunds, TransferOwnership]


@dataclass
class NFTMinted(PlutusData):
    CONSTR_ID = 0
    id: TokenId
    creator: PubKeyHash
    token_uri: bytes


@dataclass
class WithdrawnFunds(PlutusData):
    CONSTR_ID = 1
    amount: int
    receiver: PubKeyHash


@dataclass
class OwnershipTransferred(PlutusData):
    CONSTR_ID = 2
    previous_owner: PubKeyHash
    new_owner: PubKeyHash


@dataclass
class Transfer(PlutusData):
    """
    Emitted by the token ledger whenever a token changes hands, including on mint
    """

    CONSTR_ID = 3
    sender: PubKeyHash
    receiver: PubKeyHash
    token_id: TokenId


Event = Union[NFTMinted, WithdrawnFunds, OwnershipTransferred, Transfer]

EVENT_TYPES = {
    cls.__name__: cls
    for cls in (NFTMinted, WithdrawnFunds, OwnershipTransferred, Transfer)
}
