"""
Airlock SDK - Liquidity Provisioning Adapter

Calls into the AMM and the reward pools on behalf of the Airlock. Holds no
state of its own; any failure propagates and aborts the enclosing operation.
"""

import logging
from typing import Optional, Tuple

from .amm import UniswapV2Pair, UniswapV2Router
from .chain import Chain
from .reward_pool import RewardPool
from .tokens import Token

log = logging.getLogger(__name__)


class LiquidityAdapter:

    def __init__(self, chain: Chain, router: UniswapV2Router, armor: Token):
        self.chain = chain
        self.router = router
        self.armor = armor

    def token(self, address: str) -> Token:
        return self.chain.contract_at(address)

    def find_pair(self, token: Token) -> Optional[UniswapV2Pair]:
        return self.router.factory.get_pair(token, self.armor)

    def pair(self, address: str) -> UniswapV2Pair:
        return self.router.factory.pair_at(address)

    def reward_pool(self, address: str) -> RewardPool:
        return self.chain.contract_at(address)

    def reserves(self, pair: UniswapV2Pair, token: Token) -> Tuple[int, int]:
        """(asset reserve, ARMOR reserve)"""
        return pair.reserves_for(token, self.armor)

    def provide(self, pair: UniswapV2Pair, token: Token, token_amount: int,
                armor_amount: int, owner: str) -> int:
        """Move both sides from `owner` into the pair and mint shares to `owner`."""
        token.transfer(owner, pair.address, token_amount)
        self.armor.transfer(owner, pair.address, armor_amount)
        minted = pair.mint(owner)
        log.debug(f"Minted {minted} {pair.symbol} for {token_amount} {token.symbol} + {armor_amount} ARMOR")
        return minted

    def stake(self, pool: str, amount: int, owner: str):
        self.reward_pool(pool).stake(owner, amount)

    def unstake(self, pool: str, amount: int, owner: str) -> int:
        return self.reward_pool(pool).unstake(owner, amount)

    def harvest(self, pool: str, owner: str) -> int:
        """Collect yield from the reward pool. Returns ARMOR received."""
        before = self.armor.balance_of(owner)
        self.reward_pool(pool).get_reward(owner)
        return self.armor.balance_of(owner) - before

    def earned(self, pool: str, owner: str) -> int:
        return self.reward_pool(pool).earned(owner)
