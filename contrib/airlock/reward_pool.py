"""
Airlock SDK - Reward Pool

External staking contract for one LP token. Stakers earn `reward_token`
pro-rata to stake whenever the pool is funded via `notify_reward_amount`.
Funding that arrives while nothing is staked is queued for the next staker.
"""

import logging
from typing import Dict

from .chain import Chain, Contract
from .errors import TokenError
from .tokens import Token

log = logging.getLogger(__name__)


class RewardPool(Contract):

    PRECISION = 10 ** 18

    def __init__(self, chain: Chain, lp_token: Token, reward_token: Token):
        super().__init__(chain, f"RewardPool-{lp_token.symbol}")
        self.lp_token = lp_token
        self.reward_token = reward_token
        self.total_staked = 0
        self.stakes: Dict[str, int] = {}
        self.reward_per_token = 0
        self.paid: Dict[str, int] = {}
        self.rewards: Dict[str, int] = {}
        self.queued = 0

    def _checkpoint(self, account: str):
        self.rewards[account] = self.earned(account)
        self.paid[account] = self.reward_per_token

    def balance_of(self, account: str) -> int:
        return self.stakes.get(account, 0)

    def earned(self, account: str) -> int:
        """Reward accrued to `account` and not yet collected."""
        stake = self.stakes.get(account, 0)
        delta = self.reward_per_token - self.paid.get(account, 0)
        return self.rewards.get(account, 0) + stake * delta // self.PRECISION

    def stake(self, sender: str, amount: int):
        if amount <= 0:
            raise TokenError("RewardPool: cannot stake 0")
        self._checkpoint(sender)
        self.lp_token.transfer(sender, self.address, amount)
        self.stakes[sender] = self.stakes.get(sender, 0) + amount
        self.total_staked += amount
        if self.queued:
            queued, self.queued = self.queued, 0
            self._distribute(queued)

    def unstake(self, sender: str, amount: int) -> int:
        """Return `amount` staked shares to `sender`."""
        if amount > self.stakes.get(sender, 0):
            raise TokenError("RewardPool: withdraw amount exceeds stake")
        self._checkpoint(sender)
        self.stakes[sender] -= amount
        self.total_staked -= amount
        self.lp_token.transfer(self.address, sender, amount)
        return amount

    def get_reward(self, sender: str) -> int:
        """Transfer everything `sender` has earned. Returns the amount."""
        self._checkpoint(sender)
        amount = self.rewards.get(sender, 0)
        if amount:
            self.rewards[sender] = 0
            self.reward_token.transfer(self.address, sender, amount)
        return amount

    def _distribute(self, amount: int):
        self.reward_per_token += amount * self.PRECISION // self.total_staked

    def notify_reward_amount(self, sender: str, amount: int):
        """Fund the pool with `amount` of reward token from `sender`."""
        with self.chain.atomic():
            self.reward_token.transfer(sender, self.address, amount)
            if self.total_staked == 0:
                self.queued += amount
            else:
                self._distribute(amount)
            log.debug(f"{self.label} funded with {amount}")
