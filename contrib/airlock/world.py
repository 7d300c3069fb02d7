"""
Airlock SDK - World Builder

Sets up a complete environment: ARMOR, WETH and WBTC, two seeded pairs,
their reward pools and a funded Airlock with both assets whitelisted.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .airlock import Airlock
from .amm import UniswapV2Factory, UniswapV2Pair, UniswapV2Router
from .chain import Chain, Clock
from .config import AirlockConfig
from .reward_pool import RewardPool
from .tokens import Token, WrappedNative

log = logging.getLogger(__name__)

ETH_UNIT = 10 ** 18
BTC_UNIT = 10 ** 8
ARMOR_UNIT = 10 ** 18


@dataclass
class World:
    chain: Chain
    owner: str
    armor: Token
    weth: WrappedNative
    wbtc: Token
    factory: UniswapV2Factory
    router: UniswapV2Router
    weth_pair: UniswapV2Pair
    wbtc_pair: UniswapV2Pair
    weth_pool: RewardPool
    wbtc_pool: RewardPool
    airlock: Airlock


def build_world(config: Optional[AirlockConfig] = None, start: Optional[int] = None) -> World:
    config = config or AirlockConfig()
    chain = Chain(Clock(start))
    owner = chain.new_account("owner")

    armor = Token(chain, "ARMOR", decimals=18)
    armor.mint(owner, config.armor_supply * ARMOR_UNIT)
    wbtc = Token(chain, "WBTC", decimals=8)
    wbtc.mint(owner, 10_000 * BTC_UNIT)
    weth = WrappedNative(chain)

    factory = UniswapV2Factory(chain)
    router = UniswapV2Router(chain, factory, weth)

    weth_seed = config.weth_liquidity * ETH_UNIT
    chain.fund(owner, weth_seed)
    router.add_liquidity_eth(armor, config.armor_for_weth * ARMOR_UNIT,
                             owner, sender=owner, value=weth_seed)
    router.add_liquidity(wbtc, armor,
                         config.wbtc_liquidity * BTC_UNIT,
                         config.armor_for_wbtc * ARMOR_UNIT,
                         owner, sender=owner)
    weth_pair = factory.get_pair(weth, armor)
    wbtc_pair = factory.get_pair(wbtc, armor)

    airlock = Airlock(chain, armor, router, config.lock_period, config.vesting_period, owner)
    weth_pool = RewardPool(chain, weth_pair, armor)
    wbtc_pool = RewardPool(chain, wbtc_pair, armor)
    airlock.add_token(weth.address, weth_pool.address, sender=owner)
    airlock.add_token(wbtc.address, wbtc_pool.address, sender=owner)
    armor.transfer(owner, airlock.address, config.armor_in_airlock * ARMOR_UNIT)

    log.info(f"World ready: airlock={airlock.address} lock={config.lock_period}s "
             f"vesting={config.vesting_period}s")
    return World(
        chain=chain, owner=owner, armor=armor, weth=weth, wbtc=wbtc,
        factory=factory, router=router, weth_pair=weth_pair, wbtc_pair=wbtc_pair,
        weth_pool=weth_pool, wbtc_pool=wbtc_pool, airlock=airlock,
    )
