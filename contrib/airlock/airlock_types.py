"""
Airlock SDK - Data Types

Vesting batches and per-pair reward bookkeeping.
"""

from dataclasses import dataclass, asdict
from enum import Enum


class BatchStatus(Enum):
    """Where a batch is in its lifecycle"""
    LOCKED = "locked"
    VESTING = "vesting"
    VESTED = "vested"
    RELEASED = "released"


@dataclass
class LPBatch:
    """
    One deposit's locked LP shares.

    Structure:
      - holder: Beneficiary address
      - pair: LP token (pair) address
      - amount: Shares minted at deposit
      - claimed_amount: Shares already released (<= amount, never decreases)
      - reward_debt: ARMOR already accounted for (accumulator baseline)
      - maturity: Timestamp at which linear vesting starts
    """
    holder: str
    pair: str
    amount: int
    claimed_amount: int = 0
    reward_debt: int = 0
    maturity: int = 0

    @property
    def remaining(self) -> int:
        """Shares still staked on behalf of the holder."""
        return self.amount - self.claimed_amount

    @property
    def released(self) -> bool:
        return self.claimed_amount == self.amount

    def status(self, now: int, vesting_period: int) -> BatchStatus:
        if self.released:
            return BatchStatus.RELEASED
        if now < self.maturity:
            return BatchStatus.LOCKED
        if now >= self.maturity + vesting_period:
            return BatchStatus.VESTED
        return BatchStatus.VESTING

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "LPBatch":
        return cls(
            holder=data["holder"],
            pair=data["pair"],
            amount=int(data["amount"]),
            claimed_amount=int(data.get("claimed_amount", 0)),
            reward_debt=int(data.get("reward_debt", 0)),
            maturity=int(data.get("maturity", 0)),
        )


@dataclass
class RewardPoolInfo:
    """
    Reward bookkeeping for one registered pair.

      - pool: External reward pool address
      - lp_staked: Shares staked on behalf of all live batches
      - reward: Harvested ARMOR not yet paid out (includes unallocated)
      - acc_armor_per_lp: Accumulator, scaled by SCALE
      - unallocated: Harvested while lp_staked was 0, not yet in the accumulator
    """
    pool: str
    lp_staked: int = 0
    reward: int = 0
    acc_armor_per_lp: int = 0
    unallocated: int = 0

    def to_dict(self) -> dict:
        return asdict(self)
