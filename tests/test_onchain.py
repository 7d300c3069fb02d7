from unittest.mock import MagicMock

import pytest

from airlock import OnchainError
from airlock.onchain import PairReader, RewardPoolReader

PAIR = "0x" + "11" * 20
TOKEN = "0x" + "22" * 20
ARMOR = "0x" + "33" * 20
HOLDER = "0x" + "44" * 20


def make_reader(token0, token1, reserves, supply=1_000):
    w3 = MagicMock()
    functions = w3.eth.contract.return_value.functions
    functions.token0.return_value.call.return_value = token0
    functions.token1.return_value.call.return_value = token1
    functions.getReserves.return_value.call.return_value = reserves
    functions.totalSupply.return_value.call.return_value = supply
    return PairReader(w3, PAIR)


def test_reserves_follow_token_order():
    reader = make_reader(TOKEN, ARMOR, (50, 10_000, 0))
    assert reader.reserves_for(TOKEN, ARMOR) == (50, 10_000)

    reader = make_reader(ARMOR, TOKEN, (10_000, 50, 0))
    assert reader.reserves_for(TOKEN, ARMOR) == (50, 10_000)


def test_quote_counterpart():
    reader = make_reader(TOKEN, ARMOR, (50 * 10 ** 18, 10_000 * 10 ** 18, 0))
    assert reader.quote_counterpart(TOKEN, 10 * 10 ** 18, ARMOR) == 2_000 * 10 ** 18


def test_quote_liquidity():
    reader = make_reader(TOKEN, ARMOR, (50, 10_000, 0), supply=700)
    assert reader.quote_liquidity(TOKEN, 10, ARMOR) == 140


def test_wrong_pair():
    other = "0x" + "55" * 20
    reader = make_reader(TOKEN, other, (50, 10_000, 0))
    with pytest.raises(OnchainError, match="does not hold"):
        reader.reserves_for(TOKEN, ARMOR)


def test_call_failure_is_wrapped():
    w3 = MagicMock()
    w3.eth.contract.return_value.functions.getReserves.return_value.call.side_effect = ConnectionError("down")
    reader = PairReader(w3, PAIR)
    with pytest.raises(OnchainError, match="getReserves failed: down") as excinfo:
        reader.reserves_for(TOKEN, ARMOR)
    assert excinfo.value.address == reader.address


def test_reward_pool_reader():
    w3 = MagicMock()
    functions = w3.eth.contract.return_value.functions
    functions.earned.return_value.call.return_value = 123
    functions.balanceOf.return_value.call.return_value = 456
    reader = RewardPoolReader(w3, PAIR)
    assert reader.earned(HOLDER) == 123
    assert reader.staked(HOLDER) == 456

    functions.earned.return_value.call.side_effect = ValueError("revert")
    with pytest.raises(OnchainError, match="earned failed"):
        reader.earned(HOLDER)
