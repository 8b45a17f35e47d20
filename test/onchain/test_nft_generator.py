import pytest
from hypothesis import given
from hypothesis import strategies as st

from nft_generator.onchain import nft_generator
from nft_generator.onchain.errors import (
    EmptyTokenURI,
    IncorrectPayment,
    InvalidOwner,
    InvalidReceiver,
    InvalidTokenURI,
    NotOwner,
    NotPayable,
    TransferFailed,
    UnknownRecord,
)
from nft_generator.onchain.util import (
    GenerateNFT,
    MintRecord,
    NFTMinted,
    OwnershipTransferred,
    SetPrice,
    TransferOwnership,
    WithdrawFunds,
    WithdrawnFunds,
    initial_generator_state,
)
from test.onchain.util import (
    ACCOUNT1,
    ACCOUNT2,
    GENERATOR,
    OWNER,
    TOKEN_URI,
    RecordingContext,
)

PRICE = 1_000_000


def test_initial_state():
    state = initial_generator_state(OWNER, PRICE)
    assert state.owner == OWNER
    assert state.minting_price == PRICE
    assert state.next_id == 0
    assert state.minted_nfts == {}
    assert state.balance == 0


def test_generate_nft():
    state = initial_generator_state(OWNER, PRICE)
    context = RecordingContext(ACCOUNT1, PRICE)
    event = nft_generator.generate_nft(state, context, TOKEN_URI)

    assert event == NFTMinted(id=0, creator=ACCOUNT1, token_uri=TOKEN_URI)
    assert context.events == [event]
    assert context.minted == [(ACCOUNT1, 0, TOKEN_URI)]
    assert state.next_id == 1
    assert state.balance == PRICE
    assert nft_generator.minted_nfts(state, ACCOUNT1, 0) == MintRecord(
        id=0, creator=ACCOUNT1, token_uri=TOKEN_URI
    )


@given(st.integers(min_value=0, max_value=10 * PRICE))
def test_generate_nft_requires_exact_payment(payment: int):
    state = initial_generator_state(OWNER, PRICE)
    context = RecordingContext(ACCOUNT1, payment)
    try:
        nft_generator.generate_nft(state, context, TOKEN_URI)
        assert payment == PRICE
    except IncorrectPayment:
        assert payment != PRICE
        assert state == initial_generator_state(OWNER, PRICE)
        assert context.events == [] and context.minted == []


def test_generate_nft_checks_payment_before_token_uri():
    state = initial_generator_state(OWNER, PRICE)
    with pytest.raises(IncorrectPayment):
        nft_generator.generate_nft(state, RecordingContext(ACCOUNT1, PRICE + 1), b"")
    with pytest.raises(EmptyTokenURI):
        nft_generator.generate_nft(state, RecordingContext(ACCOUNT1, PRICE), b"")
    assert state.next_id == 0


def test_generate_nft_uses_current_price():
    state = initial_generator_state(OWNER, PRICE)
    nft_generator.set_price(state, RecordingContext(OWNER), PRICE // 2)
    with pytest.raises(IncorrectPayment):
        nft_generator.generate_nft(state, RecordingContext(ACCOUNT1, PRICE), TOKEN_URI)
    nft_generator.generate_nft(state, RecordingContext(ACCOUNT1, PRICE // 2), TOKEN_URI)
    assert state.balance == PRICE // 2


def test_free_mint_after_price_set_to_zero():
    state = initial_generator_state(OWNER, PRICE)
    nft_generator.set_price(state, RecordingContext(OWNER), 0)
    nft_generator.generate_nft(state, RecordingContext(ACCOUNT2, 0), TOKEN_URI)
    assert state.next_id == 1
    assert state.balance == 0


@given(st.lists(st.sampled_from([OWNER, ACCOUNT1, ACCOUNT2]), max_size=20))
def test_ids_are_sequential_across_creators(creators):
    state = initial_generator_state(OWNER, PRICE)
    ids = [
        nft_generator.generate_nft(
            state, RecordingContext(creator, PRICE), TOKEN_URI
        ).id
        for creator in creators
    ]
    assert ids == list(range(len(creators)))
    assert state.next_id == len(creators)
    assert state.balance == len(creators) * PRICE
    for creator, records in state.minted_nfts.items():
        assert all(record.creator == creator for record in records)
        assert [r.id for r in records] == sorted(r.id for r in records)


def test_admin_calls_require_owner():
    state = initial_generator_state(OWNER, PRICE)
    nft_generator.generate_nft(state, RecordingContext(ACCOUNT1, PRICE), TOKEN_URI)
    before = initial_generator_state(OWNER, PRICE)
    nft_generator.generate_nft(before, RecordingContext(ACCOUNT1, PRICE), TOKEN_URI)

    context = RecordingContext(ACCOUNT1)
    with pytest.raises(NotOwner):
        nft_generator.set_price(state, context, 1)
    with pytest.raises(NotOwner):
        nft_generator.withdraw_funds(state, context, ACCOUNT1)
    with pytest.raises(NotOwner):
        nft_generator.transfer_ownership(state, context, ACCOUNT1)
    assert state == before
    assert context.sent == [] and context.events == []


def test_admin_calls_are_not_payable():
    state = initial_generator_state(OWNER, PRICE)
    with pytest.raises(NotPayable):
        nft_generator.set_price(state, RecordingContext(OWNER, 1), 0)
    with pytest.raises(NotPayable):
        nft_generator.withdraw_funds(state, RecordingContext(OWNER, 1), OWNER)
    assert state.minting_price == PRICE


def test_withdraw_funds():
    state = initial_generator_state(OWNER, PRICE)
    for _ in range(3):
        nft_generator.generate_nft(state, RecordingContext(ACCOUNT1, PRICE), TOKEN_URI)

    context = RecordingContext(OWNER)
    event = nft_generator.withdraw_funds(state, context, ACCOUNT2)
    assert event == WithdrawnFunds(amount=3 * PRICE, receiver=ACCOUNT2)
    assert context.sent == [(ACCOUNT2, 3 * PRICE)]
    assert context.events == [event]
    assert state.balance == 0


def test_withdraw_funds_empty_balance():
    state = initial_generator_state(OWNER, PRICE)
    context = RecordingContext(OWNER)
    event = nft_generator.withdraw_funds(state, context, OWNER)
    assert event == WithdrawnFunds(amount=0, receiver=OWNER)
    assert state.balance == 0


def test_withdraw_funds_rejected_restores_balance():
    state = initial_generator_state(OWNER, PRICE)
    nft_generator.generate_nft(state, RecordingContext(ACCOUNT1, PRICE), TOKEN_URI)

    context = RecordingContext(OWNER, reject_funds=True)
    with pytest.raises(TransferFailed):
        nft_generator.withdraw_funds(state, context, ACCOUNT2)
    assert state.balance == PRICE
    assert context.events == []


def test_transfer_ownership():
    state = initial_generator_state(OWNER, PRICE)
    event = nft_generator.transfer_ownership(state, RecordingContext(OWNER), ACCOUNT1)
    assert event == OwnershipTransferred(previous_owner=OWNER, new_owner=ACCOUNT1)
    assert state.owner == ACCOUNT1
    with pytest.raises(NotOwner):
        nft_generator.set_price(state, RecordingContext(OWNER), 0)
    with pytest.raises(InvalidOwner):
        nft_generator.transfer_ownership(state, RecordingContext(ACCOUNT1), b"")


def test_minted_nfts_out_of_range():
    state = initial_generator_state(OWNER, PRICE)
    with pytest.raises(UnknownRecord):
        nft_generator.minted_nfts(state, ACCOUNT1, 0)
    nft_generator.generate_nft(state, RecordingContext(ACCOUNT1, PRICE), TOKEN_URI)
    assert nft_generator.minted_nfts_count(state, ACCOUNT1) == 1
    with pytest.raises(UnknownRecord):
        nft_generator.minted_nfts(state, ACCOUNT1, 1)
    with pytest.raises(UnknownRecord):
        nft_generator.minted_nfts(state, ACCOUNT1, -1)


def test_execute_dispatches_calls():
    state = initial_generator_state(OWNER, PRICE)
    event = nft_generator.execute(
        state, GenerateNFT(TOKEN_URI), RecordingContext(ACCOUNT1, PRICE)
    )
    assert event.id == 0
    assert nft_generator.execute(state, SetPrice(5), RecordingContext(OWNER)) is None
    assert state.minting_price == 5
    event = nft_generator.execute(
        state, WithdrawFunds(OWNER), RecordingContext(OWNER)
    )
    assert event.amount == PRICE
    event = nft_generator.execute(
        state, TransferOwnership(ACCOUNT2), RecordingContext(OWNER)
    )
    assert event.new_owner == ACCOUNT2
    with pytest.raises(TypeError):
        nft_generator.execute(state, MintRecord(0, OWNER, b""), RecordingContext(OWNER))


@pytest.mark.parametrize("token_uri", [b"\xff", b"ipfs://\xc3(", b"\x80abc"])
def test_generate_nft_rejects_invalid_utf8(token_uri):
    state = initial_generator_state(OWNER, PRICE)
    context = RecordingContext(ACCOUNT1, PRICE)
    with pytest.raises(InvalidTokenURI):
        nft_generator.generate_nft(state, context, token_uri)
    assert state == initial_generator_state(OWNER, PRICE)
    assert context.minted == [] and context.events == []


@pytest.mark.parametrize("receiver", [b"", GENERATOR])
def test_withdraw_funds_to_uncontrolled_identity(receiver):
    state = initial_generator_state(OWNER, PRICE)
    nft_generator.generate_nft(state, RecordingContext(ACCOUNT1, PRICE), TOKEN_URI)

    context = RecordingContext(OWNER)
    with pytest.raises(InvalidReceiver):
        nft_generator.withdraw_funds(state, context, receiver)
    assert state.balance == PRICE
    assert context.sent == [] and context.events == []
