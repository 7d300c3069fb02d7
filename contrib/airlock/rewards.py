"""
Airlock SDK - Reward Accrual

Accumulator-based distribution of reward-pool yield to vesting batches.

Per pair:
    acc_armor_per_lp  running sum of ARMOR earned per staked share (x SCALE)
Per batch:
    reward_debt       accrued(remaining, acc) at the batch's last settlement

Owed to a batch:
    accrued(remaining, acc) - reward_debt

Stake changes go through `settle`, which pays what is owed on the current
stake first and only then applies the change and re-takes the baseline.
Changing the stake before settling would pay the new stake for past yield.
"""

import logging

from .adapter import LiquidityAdapter
from .airlock_math import accrued_reward, accumulator_remainder, accumulator_step
from .airlock_types import LPBatch, RewardPoolInfo
from .pair_registry import PairRegistry

log = logging.getLogger(__name__)


class RewardAccrual:

    def __init__(self, registry: PairRegistry, adapter: LiquidityAdapter, account: str):
        self.registry = registry
        self.adapter = adapter
        self.account = account

    def update_pool(self, pair: str) -> RewardPoolInfo:
        """Harvest new yield for `pair` and fold it into the accumulator."""
        info = self.registry.info(pair)
        harvested = self.adapter.harvest(info.pool, self.account)
        info.reward += harvested

        if info.lp_staked == 0:
            info.unallocated += harvested
        elif harvested or info.unallocated:
            distributable = harvested + info.unallocated
            info.acc_armor_per_lp += accumulator_step(distributable, info.lp_staked)
            # Too small to move the accumulator yet
            info.unallocated = accumulator_remainder(distributable, info.lp_staked)
            log.debug(f"Pair {pair}: +{distributable} ARMOR over {info.lp_staked} LP, "
                      f"acc={info.acc_armor_per_lp}")
        return info

    def stake(self, batch: LPBatch) -> RewardPoolInfo:
        """Stake a new batch's shares and set its baseline."""
        info = self.update_pool(batch.pair)
        self.adapter.stake(info.pool, batch.amount, self.account)
        info.lp_staked += batch.amount
        batch.reward_debt = accrued_reward(batch.remaining, info.acc_armor_per_lp)
        return info

    def pending(self, batch: LPBatch) -> int:
        """What `settle` would pay right now, without touching state."""
        info = self.registry.info(batch.pair)
        acc = info.acc_armor_per_lp
        earned = self.adapter.earned(info.pool, self.account)
        if info.lp_staked > 0:
            acc += accumulator_step(earned + info.unallocated, info.lp_staked)
        owed = accrued_reward(batch.remaining, acc) - batch.reward_debt
        return max(0, min(owed, info.reward + earned))

    def settle(self, batch: LPBatch, release: int = 0) -> int:
        """
        Pay the batch's owed reward, then release `release` shares to the holder.

        Args:
            batch: Batch being touched
            release: Shares to unstake and hand back (0 for a reward-only claim)

        Returns:
            ARMOR paid to the holder
        """
        info = self.update_pool(batch.pair)

        # Settle on the stake as it was before this call
        owed = accrued_reward(batch.remaining, info.acc_armor_per_lp) - batch.reward_debt
        owed = max(0, min(owed, info.reward))
        if owed:
            info.reward -= owed
            self.adapter.armor.transfer(self.account, batch.holder, owed)

        if release:
            pair = self.adapter.pair(batch.pair)
            self.adapter.unstake(info.pool, release, self.account)
            pair.transfer(self.account, batch.holder, release)
            batch.claimed_amount += release
            info.lp_staked -= release

        batch.reward_debt = accrued_reward(batch.remaining, info.acc_armor_per_lp)
        return owed
