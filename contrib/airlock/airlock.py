# Copyright (c) 2025 The Airlock developers
# Distributed under the MIT software license

"""
Airlock - Liquidity bootstrapping with locked, linearly vesting LP

Flow:
  1. Owner whitelists an asset whose pair with ARMOR exists (add_token)
  2. Owner funds ARMOR and grants per-user allocation
  3. User deposits the asset; the Airlock adds the matching ARMOR at the
     pool's current ratio, mints LP and stakes it in the pair's reward pool
  4. The LP stays locked until maturity (deposit + lock_period), then
     unlocks linearly over vesting_period (claim_lp)
  5. While staked, reward-pool yield is shared between batches pro-rata
     to their remaining stake (claim_armor_reward)

Every public state-changing call is all-or-nothing.
"""

import logging
from typing import Dict, List

from .adapter import LiquidityAdapter
from .airlock_math import claimable_amount, counterpart_amount
from .airlock_types import LPBatch, RewardPoolInfo
from .allocation import AllocationLedger
from .amm import UniswapV2Router
from .chain import Chain, Contract, ZERO_ADDRESS, require_address
from .errors import (
    AuthorizationError,
    InsufficientFundsError,
    NothingToClaimError,
    RegistrationError,
    TemporalError,
    ValidationError,
)
from .events import (
    ArmorAllocationDecreased,
    ArmorAllocationIncreased,
    LPClaimed,
    LPQueued,
    OwnershipTransferred,
    RewardClaimed,
    TokenAdded,
    TreasuryFlushed,
)
from .pair_registry import PairRegistry
from .rewards import RewardAccrual
from .tokens import Token

log = logging.getLogger(__name__)


class Airlock(Contract):
    """
    Deposit, vesting and reward ledger.

    Usage:
        airlock = Airlock(chain, armor, router, lock_period, vesting_period, owner)
        airlock.add_token(weth.address, weth_pool.address, sender=owner)
        airlock.increase_allocation(alice, 5_000 * E18, sender=owner)

        airlock.deposit(alice, weth.address, E18, sender=alice, value=E18)
        chain.advance(lock_period + vesting_period)
        airlock.claim_lp(0, sender=alice)
    """

    def __init__(self, chain: Chain, armor: Token, router: UniswapV2Router,
                 lock_period: int, vesting_period: int, owner: str):
        super().__init__(chain, "Airlock")
        if lock_period < 0 or vesting_period < 0:
            raise ValueError("Periods must be non-negative")
        self.ARMOR = armor
        self.WETH = router.weth
        self.uniswap_router = router
        self._lock_period = lock_period
        self._vesting_period = vesting_period
        self.owner = require_address(owner, "owner")

        self.registry = PairRegistry()
        self.allocations = AllocationLedger()
        self.adapter = LiquidityAdapter(chain, router, armor)
        self.rewards = RewardAccrual(self.registry, self.adapter, self.address)
        self.locked: Dict[str, List[LPBatch]] = {}

    @property
    def lock_period(self) -> int:
        return self._lock_period

    @property
    def vesting_period(self) -> int:
        return self._vesting_period

    @property
    def pairs(self) -> Dict[str, str]:
        return self.registry.pairs

    @property
    def reward_pools(self) -> Dict[str, RewardPoolInfo]:
        return self.registry.reward_pools

    # ═══════════════════════════════════════════════════════════════════════
    # OWNERSHIP & ADMIN
    # ═══════════════════════════════════════════════════════════════════════

    def _only_owner(self, sender: str):
        if sender != self.owner:
            raise AuthorizationError("Ownable: caller is not the owner")

    def transfer_ownership(self, new_owner: str, sender: str):
        with self.chain.atomic():
            self._only_owner(sender)
            new_owner = require_address(new_owner, "owner")
            self.emit(OwnershipTransferred(self.owner, new_owner))
            self.owner = new_owner

    def add_token(self, token: str, reward_pool: str, sender: str) -> str:
        """
        Whitelist `token` for deposits. Returns the pair address.

        The pair token/ARMOR must already exist and `reward_pool` must stake
        exactly that pair's LP and pay out ARMOR.
        """
        with self.chain.atomic():
            self._only_owner(sender)
            asset = self.adapter.token(token)
            pair = None
            if isinstance(asset, Token) and asset is not self.ARMOR:
                pair = self.adapter.find_pair(asset)
            if pair is None:
                raise RegistrationError("Airlock: pair does not exist")
            if not reward_pool or reward_pool == ZERO_ADDRESS:
                raise RegistrationError("Airlock: reward cannot be zero")
            pool = self.adapter.reward_pool(reward_pool)
            if (pool is None
                    or getattr(pool, "lp_token", None) is not pair
                    or getattr(pool, "reward_token", None) is not self.ARMOR):
                raise RegistrationError("Airlock: Invalid reward pool")

            self.registry.register(token, pair.address, reward_pool)
            self.emit(TokenAdded(token=token, pair=pair.address, reward_pool=reward_pool))
            log.info(f"Token added: {asset.symbol} pair={pair.address} pool={reward_pool}")
            return pair.address

    def spendable_armor(self) -> int:
        """ARMOR held minus harvested rewards still owed to stakers."""
        return self.ARMOR.balance_of(self.address) - self.registry.total_reward()

    def _require_spendable(self, amount: int):
        if self.spendable_armor() < amount:
            raise InsufficientFundsError("Airlock: insufficient ARMOR in AirLock")

    def increase_allocation(self, user: str, amount: int, sender: str):
        """Pull `amount` ARMOR from the owner into the treasury and credit `user`."""
        with self.chain.atomic():
            self._only_owner(sender)
            user = require_address(user, "user")
            self.allocations.increase(user, amount)
            self.ARMOR.transfer(sender, self.address, amount)
            self.emit(ArmorAllocationIncreased(user=user, amount=amount))
            log.info(f"Allocation +{amount} for {user}")

    def decrease_allocation(self, user: str, amount: int, sender: str):
        """Revoke unused credit from `user` and return the ARMOR to the owner."""
        with self.chain.atomic():
            self._only_owner(sender)
            user = require_address(user, "user")
            self.allocations.decrease(user, amount)
            self._require_spendable(amount)
            self.ARMOR.transfer(self.address, sender, amount)
            self.emit(ArmorAllocationDecreased(user=user, amount=amount))
            log.info(f"Allocation -{amount} for {user}")

    def allocation_of(self, user: str) -> int:
        """Credit still available to `user`."""
        return self.allocations.available(user)

    def flush_to_treasury(self, amount: int, treasury: str, sender: str):
        """Move spendable ARMOR out of the Airlock."""
        with self.chain.atomic():
            self._only_owner(sender)
            treasury = require_address(treasury, "treasury")
            self._require_spendable(amount)
            self.ARMOR.transfer(self.address, treasury, amount)
            self.emit(TreasuryFlushed(treasury=treasury, amount=amount))
            log.info(f"Flushed {amount} ARMOR to {treasury}")

    # ═══════════════════════════════════════════════════════════════════════
    # DEPOSIT
    # ═══════════════════════════════════════════════════════════════════════

    def quote(self, token: str, amount: int) -> int:
        """ARMOR a deposit of `amount` would require right now."""
        pair = self.adapter.pair(self.registry.pair_for(token))
        reserve_asset, reserve_armor = self.adapter.reserves(pair, self.adapter.token(token))
        return counterpart_amount(amount, reserve_asset, reserve_armor)

    def deposit(self, beneficiary: str, token: str, amount: int,
                sender: str, value: int = 0) -> LPBatch:
        """
        Deposit `amount` of `token` and lock the minted LP for `beneficiary`.

        Args:
            beneficiary: Owner of the new batch
            token: Whitelisted asset address
            amount: Asset amount
            sender: Caller; pays the asset
            value: Native coin attached (WETH deposits only, must equal amount)

        Returns:
            The new batch
        """
        with self.chain.atomic():
            pair_address = self.registry.pair_for(token)
            if value > 0:
                if token != self.WETH.address:
                    raise ValidationError("Airlock: must be WETH")
                if value != amount:
                    raise ValidationError("Airlock: invalid amount")
            if amount <= 0:
                raise ValidationError("Airlock: amount must be greater than zero")
            beneficiary = require_address(beneficiary, "beneficiary")

            asset = self.adapter.token(token)
            pair = self.adapter.pair(pair_address)
            reserve_asset, reserve_armor = self.adapter.reserves(pair, asset)
            armor_amount = counterpart_amount(amount, reserve_asset, reserve_armor)
            if armor_amount == 0:
                raise ValidationError("Airlock: amount too small")

            self._require_spendable(armor_amount)
            self.allocations.consume(beneficiary, armor_amount)

            if value > 0:
                self.chain.send_native(sender, self.address, value)
                self.WETH.deposit(self.address, value)
            else:
                asset.transfer(sender, self.address, amount)

            minted = self.adapter.provide(pair, asset, amount, armor_amount, self.address)
            batch = LPBatch(
                holder=beneficiary,
                pair=pair.address,
                amount=minted,
                maturity=self.chain.now() + self._lock_period,
            )
            self.rewards.stake(batch)
            self.locked.setdefault(beneficiary, []).append(batch)

            self.emit(LPQueued(
                holder=beneficiary,
                pair=pair.address,
                lp_amount=minted,
                token_amount=amount,
                armor_amount=armor_amount,
                maturity=batch.maturity,
            ))
            log.info(f"Deposit {amount} {asset.symbol} + {armor_amount} ARMOR -> "
                     f"{minted} LP for {beneficiary}, maturity {batch.maturity}")
            return batch

    # ═══════════════════════════════════════════════════════════════════════
    # BATCHES
    # ═══════════════════════════════════════════════════════════════════════

    def locked_lp(self, holder: str, index: int) -> LPBatch:
        batches = self.locked.get(holder, [])
        if index < 0 or index >= len(batches):
            raise NothingToClaimError("Airlock: nothing to claim")
        return batches[index]

    def locked_lp_length(self, holder: str) -> int:
        return len(self.locked.get(holder, []))

    def batches_of(self, holder: str) -> List[LPBatch]:
        return list(self.locked.get(holder, []))

    def holders(self) -> List[str]:
        return list(self.locked)

    # ═══════════════════════════════════════════════════════════════════════
    # VESTING
    # ═══════════════════════════════════════════════════════════════════════

    def pending_lp(self, holder: str, index: int) -> int:
        """LP shares `holder` could claim from batch `index` right now."""
        batch = self.locked_lp(holder, index)
        return claimable_amount(batch.amount, batch.claimed_amount, batch.maturity,
                                self.chain.now(), self._vesting_period)

    def claim_lp(self, index: int, sender: str) -> int:
        """
        Release the vested part of batch `index` to its holder.

        Owed reward is settled on the pre-claim stake in the same call.
        A call with nothing vested since the last claim succeeds and releases 0.

        Returns:
            LP shares released
        """
        with self.chain.atomic():
            batch = self.locked_lp(sender, index)
            if self.chain.now() < batch.maturity:
                raise TemporalError("Airlock: LP is still locked")

            release = self.pending_lp(sender, index)
            paid = self.rewards.settle(batch, release)

            if paid:
                self.emit(RewardClaimed(holder=sender, amount=paid))
            if release:
                self.emit(LPClaimed(holder=sender, pair=batch.pair, amount=release))
                log.info(f"Released {release} LP from batch {index} to {sender} "
                         f"({batch.claimed_amount}/{batch.amount})")
            return release

    # ═══════════════════════════════════════════════════════════════════════
    # REWARDS
    # ═══════════════════════════════════════════════════════════════════════

    def pending_armor_reward(self, holder: str, index: int) -> int:
        """ARMOR reward batch `index` would pay if claimed now."""
        return self.rewards.pending(self.locked_lp(holder, index))

    def claim_armor_reward(self, index: int, sender: str) -> int:
        """Pay the reward owed to batch `index`. Returns ARMOR paid."""
        with self.chain.atomic():
            batch = self.locked_lp(sender, index)
            paid = self.rewards.settle(batch)
            if paid:
                self.emit(RewardClaimed(holder=sender, amount=paid))
                log.info(f"Paid {paid} ARMOR reward for batch {index} to {sender}")
            return paid

    # ═══════════════════════════════════════════════════════════════════════
    # STATE
    # ═══════════════════════════════════════════════════════════════════════

    def config_dict(self) -> dict:
        return {
            "address": self.address,
            "owner": self.owner,
            "armor": self.ARMOR.address,
            "weth": self.WETH.address,
            "uniswap_router": self.uniswap_router.address,
            "lock_period": self._lock_period,
            "vesting_period": self._vesting_period,
        }

    def batch_dict(self, holder: str, index: int) -> dict:
        batch = self.locked_lp(holder, index)
        data = batch.to_dict()
        data.update({
            "index": index,
            "status": batch.status(self.chain.now(), self._vesting_period).value,
            "pending_lp": self.pending_lp(holder, index),
            "pending_reward": self.pending_armor_reward(holder, index),
        })
        return data
