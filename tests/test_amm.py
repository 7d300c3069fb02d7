import math

import pytest

from airlock import RewardPool, TokenError
from airlock.amm import MINIMUM_LIQUIDITY, UniswapV2Factory, UniswapV2Router, sort_tokens
from airlock.chain import Chain, Clock, ZERO_ADDRESS
from airlock.tokens import Token, WrappedNative

from constants import START_TIME


@pytest.fixture
def env():
    chain = Chain(Clock(START_TIME))
    weth = WrappedNative(chain)
    factory = UniswapV2Factory(chain)
    router = UniswapV2Router(chain, factory, weth)
    lp = chain.new_account("lp")
    a = Token(chain, "AAA")
    b = Token(chain, "BBB")
    a.mint(lp, 10 ** 24)
    b.mint(lp, 10 ** 24)
    return chain, router, lp, a, b


def test_sort_tokens(env):
    _, _, _, a, b = env
    token0, token1 = sort_tokens(a, b)
    assert (token0, token1) == sort_tokens(b, a)
    assert token0.address.lower() < token1.address.lower()
    with pytest.raises(ValueError):
        sort_tokens(a, a)


def test_first_mint_locks_minimum_liquidity(env):
    _, router, lp, a, b = env
    _, _, liquidity = router.add_liquidity(a, b, 4_000_000, 1_000_000, lp, sender=lp)

    pair = router.factory.get_pair(a, b)
    assert liquidity == math.isqrt(4_000_000 * 1_000_000) - MINIMUM_LIQUIDITY
    assert pair.balance_of(ZERO_ADDRESS) == MINIMUM_LIQUIDITY
    assert pair.total_supply == liquidity + MINIMUM_LIQUIDITY
    assert pair.reserves_for(a, b) == (4_000_000, 1_000_000)
    assert pair.reserves_for(b, a) == (1_000_000, 4_000_000)
    assert pair.get_reserves()[2] == START_TIME


def test_first_mint_too_small(env):
    _, router, lp, a, b = env
    with pytest.raises(TokenError, match="INSUFFICIENT_LIQUIDITY_MINTED"):
        router.add_liquidity(a, b, 10, 10, lp, sender=lp)
    # The whole call was undone, pair creation included
    assert router.factory.get_pair(a, b) is None
    assert a.balance_of(lp) == 10 ** 24


def test_later_mint_is_proportional(env):
    _, router, lp, a, b = env
    router.add_liquidity(a, b, 4_000_000, 1_000_000, lp, sender=lp)
    pair = router.factory.get_pair(a, b)
    supply = pair.total_supply

    amount_a, amount_b, liquidity = router.add_liquidity(a, b, 400_000, 999_999, lp, sender=lp)

    # Router only takes what matches the pool ratio
    assert (amount_a, amount_b) == (400_000, 100_000)
    assert liquidity == supply // 10


def test_router_reduces_first_side_when_second_is_short(env):
    _, router, lp, a, b = env
    router.add_liquidity(a, b, 4_000_000, 1_000_000, lp, sender=lp)
    amount_a, amount_b, _ = router.add_liquidity(a, b, 4_000_000, 10_000, lp, sender=lp)
    assert (amount_a, amount_b) == (40_000, 10_000)


def test_add_liquidity_eth(env):
    chain, router, lp, a, _ = env
    chain.fund(lp, 10 ** 20)
    router.add_liquidity_eth(a, 10 ** 21, lp, sender=lp, value=10 ** 19)
    pair = router.factory.get_pair(a, router.weth)
    assert pair.reserves_for(router.weth, a) == (10 ** 19, 10 ** 21)
    assert chain.native_balance(lp) == 9 * 10 ** 19


def test_create_pair_twice(env):
    _, router, _, a, b = env
    router.factory.create_pair(a, b)
    with pytest.raises(ValueError, match="PAIR_EXISTS"):
        router.factory.create_pair(b, a)


def test_reward_pool_queues_funding_without_stakers(env):
    chain, router, lp, a, b = env
    router.add_liquidity(a, b, 4_000_000, 1_000_000, lp, sender=lp)
    pair = router.factory.get_pair(a, b)
    pool = RewardPool(chain, pair, a)

    pool.notify_reward_amount(lp, 1_000)
    assert pool.queued == 1_000
    assert pool.earned(lp) == 0

    pool.stake(lp, 500)
    assert pool.earned(lp) == 1_000
    assert pool.get_reward(lp) == 1_000
    assert pool.earned(lp) == 0

    with pytest.raises(TokenError, match="exceeds stake"):
        pool.unstake(lp, 501)
    pool.unstake(lp, 500)
    assert pool.balance_of(lp) == 0
