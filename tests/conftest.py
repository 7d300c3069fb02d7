import pytest

from airlock import Airlock, AirlockConfig, Token, build_world

from constants import (
    ARMOR_UNIT,
    BTC_UNIT,
    ETH_UNIT,
    LOCK_PERIOD,
    START_TIME,
    VESTING_PERIOD,
)


#########
# World #
#########


@pytest.fixture
def world():
    config = AirlockConfig(lock_period=LOCK_PERIOD, vesting_period=VESTING_PERIOD)
    return build_world(config, start=START_TIME)


@pytest.fixture
def chain(world):
    return world.chain


@pytest.fixture
def owner(world):
    return world.owner


@pytest.fixture
def airlock(world):
    return world.airlock


@pytest.fixture
def armor(world):
    return world.armor


@pytest.fixture
def weth(world):
    return world.weth


@pytest.fixture
def wbtc(world):
    return world.wbtc


@pytest.fixture
def router(world):
    return world.router


@pytest.fixture
def weth_pair(world):
    return world.weth_pair


@pytest.fixture
def wbtc_pair(world):
    return world.wbtc_pair


@pytest.fixture
def weth_pool(world):
    return world.weth_pool


@pytest.fixture
def wbtc_pool(world):
    return world.wbtc_pool


@pytest.fixture
def fresh_airlock(chain, armor, router, owner):
    """Airlock with nothing whitelisted"""
    return Airlock(chain, armor, router, LOCK_PERIOD, VESTING_PERIOD, owner)


@pytest.fixture
def temp_token(chain, owner):
    token = Token(chain, "TEMP", decimals=18)
    token.mint(owner, 100_000)
    return token


#########
# Users #
#########


@pytest.fixture
def new_user(chain, owner, airlock, wbtc):
    """Account with 100 ETH, 5 WBTC and an ARMOR allocation"""
    def make(label, allocation=1_000_000 * ARMOR_UNIT):
        user = chain.new_account(label)
        chain.fund(user, 100 * ETH_UNIT)
        wbtc.transfer(owner, user, 5 * BTC_UNIT)
        if allocation:
            airlock.increase_allocation(user, allocation, sender=owner)
        return user
    return make


@pytest.fixture
def alice(new_user):
    return new_user("alice")


@pytest.fixture
def bob(new_user):
    return new_user("bob")


@pytest.fixture
def deposit_eth(airlock, weth):
    """Deposit native ETH for `user` paid by `user`"""
    def deposit(user, amount):
        return airlock.deposit(user, weth.address, amount, sender=user, value=amount)
    return deposit


@pytest.fixture
def fund_rewards(owner):
    def fund(pool, amount):
        pool.notify_reward_amount(owner, amount)
    return fund
