"""
Airlock SDK - Pair Registry

Whitelisted asset -> pair address, and pair address -> RewardPoolInfo.
Entries are only added, never removed.
"""

from typing import Dict

from .airlock_types import RewardPoolInfo
from .errors import RegistrationError


class PairRegistry:

    def __init__(self):
        self.pairs: Dict[str, str] = {}
        self.reward_pools: Dict[str, RewardPoolInfo] = {}

    def register(self, token: str, pair: str, pool: str) -> RewardPoolInfo:
        if token in self.pairs:
            raise RegistrationError("Airlock: token already added")
        self.pairs[token] = pair
        info = self.reward_pools.setdefault(pair, RewardPoolInfo(pool=pool))
        return info

    def pair_for(self, token: str) -> str:
        pair = self.pairs.get(token)
        if pair is None:
            raise RegistrationError("Airlock: Pair is not registered")
        return pair

    def info(self, pair: str) -> RewardPoolInfo:
        try:
            return self.reward_pools[pair]
        except KeyError:
            raise RegistrationError("Airlock: Pair is not registered")

    def total_reward(self) -> int:
        """Harvested ARMOR owed to stakers across all pairs."""
        return sum(info.reward for info in self.reward_pools.values())
