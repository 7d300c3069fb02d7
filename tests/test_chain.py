import pytest
from web3 import Web3

from airlock import TokenError, ValidationError
from airlock.chain import Chain, Clock, derive_address, require_address
from airlock.tokens import Token, WrappedNative

from constants import START_TIME, ZERO_ADDRESS


@pytest.fixture
def bare_chain():
    return Chain(Clock(START_TIME))


@pytest.fixture
def token(bare_chain):
    return Token(bare_chain, "TKN")


def test_addresses_are_checksummed_and_unique(bare_chain):
    a = bare_chain.new_account("alice")
    b = bare_chain.new_account("alice")
    assert a != b
    assert Web3.is_checksum_address(a)
    assert derive_address("alice", 1) == derive_address("alice", 1)


def test_require_address(bare_chain):
    a = bare_chain.new_account("alice")
    assert require_address(a.lower()) == a
    with pytest.raises(ValidationError, match="Airlock: zero address"):
        require_address(ZERO_ADDRESS)
    with pytest.raises(ValidationError, match="Airlock: invalid beneficiary"):
        require_address("0x1234", "beneficiary")
    with pytest.raises(ValidationError):
        require_address(None)


def test_clock_moves_forward_only(bare_chain):
    assert bare_chain.now() == START_TIME
    bare_chain.advance(10)
    assert bare_chain.now() == START_TIME + 10
    with pytest.raises(ValueError):
        bare_chain.advance(-1)


def test_contracts_are_looked_up_by_address(bare_chain, token):
    assert bare_chain.contract_at(token.address) is token
    assert bare_chain.contract_at(ZERO_ADDRESS) is None


def test_native_transfers(bare_chain):
    a = bare_chain.new_account("a")
    b = bare_chain.new_account("b")
    bare_chain.fund(a, 100)
    bare_chain.send_native(a, b, 40)
    assert bare_chain.native_balance(a) == 60
    assert bare_chain.native_balance(b) == 40
    with pytest.raises(TokenError, match="insufficient native balance"):
        bare_chain.send_native(b, a, 41)


def test_wrapped_native(bare_chain):
    weth = WrappedNative(bare_chain)
    a = bare_chain.new_account("a")
    bare_chain.fund(a, 100)
    weth.deposit(a, 70)
    assert weth.balance_of(a) == 70
    assert bare_chain.native_balance(weth.address) == 70
    weth.withdraw(a, 20)
    assert bare_chain.native_balance(a) == 50
    assert weth.total_supply == 50


def test_token_transfer_and_logs(bare_chain, token):
    a = bare_chain.new_account("a")
    b = bare_chain.new_account("b")
    token.mint(a, 10)
    token.transfer(a, b, 4)
    assert token.balance_of(a) == 6
    assert token.balance_of(b) == 4
    with pytest.raises(TokenError, match="TKN: transfer amount exceeds balance"):
        token.transfer(b, a, 5)

    transfers = bare_chain.filter_logs(token, "Transfer")
    assert [(t.sender, t.receiver, t.amount) for t in transfers] == [
        (ZERO_ADDRESS, a, 10),
        (a, b, 4),
    ]
    assert bare_chain.filter_logs(token.address, "Transfer") == transfers
    assert bare_chain.filter_logs(name="Missing") == []


def test_atomic_restores_state_on_error(bare_chain, token):
    a = bare_chain.new_account("a")
    b = bare_chain.new_account("b")
    token.mint(a, 10)
    bare_chain.fund(a, 5)
    logs_before = len(bare_chain.logs)

    with pytest.raises(TokenError):
        with bare_chain.atomic():
            token.transfer(a, b, 7)
            bare_chain.send_native(a, b, 5)
            token.transfer(a, b, 7)

    assert token.balance_of(a) == 10
    assert token.balance_of(b) == 0
    assert bare_chain.native_balance(a) == 5
    assert len(bare_chain.logs) == logs_before


def test_nested_atomic_joins_outer(bare_chain, token):
    a = bare_chain.new_account("a")
    b = bare_chain.new_account("b")
    token.mint(a, 10)

    with pytest.raises(RuntimeError):
        with bare_chain.atomic():
            with bare_chain.atomic():
                token.transfer(a, b, 3)
            assert token.balance_of(b) == 3
            raise RuntimeError("abort")

    assert token.balance_of(b) == 0

    with bare_chain.atomic():
        with bare_chain.atomic():
            token.transfer(a, b, 3)
    assert token.balance_of(b) == 3


def test_atomic_keeps_cross_contract_references(bare_chain):
    weth = WrappedNative(bare_chain)
    holder = Token(bare_chain, "HOLDER")
    holder.linked = weth

    with pytest.raises(ValueError):
        with bare_chain.atomic():
            raise ValueError("abort")

    assert holder.linked is weth
    assert holder.chain is bare_chain


def test_atomic_restores_objects_in_place(bare_chain, token):
    a = bare_chain.new_account("a")
    token.mint(a, 10)
    balances = token.balances
    token.history = [{"amount": 1}]
    entry = token.history[0]

    with pytest.raises(RuntimeError):
        with bare_chain.atomic():
            token.transfer(a, bare_chain.new_account("b"), 4)
            entry["amount"] = 2
            token.history.append({"amount": 3})
            raise RuntimeError("abort")

    # Same containers, previous contents
    assert token.balances is balances
    assert balances == {a: 10}
    assert token.history[0] is entry
    assert token.history == [{"amount": 1}]


def test_snapshot_and_revert(bare_chain, token):
    a = bare_chain.new_account("a")
    token.mint(a, 10)
    snap = bare_chain.snapshot()

    token.mint(a, 5)
    bare_chain.advance(1000)
    bare_chain.revert(snap)

    assert token.balance_of(a) == 10
    assert bare_chain.now() == START_TIME
    with pytest.raises(IndexError):
        bare_chain.revert(snap)
