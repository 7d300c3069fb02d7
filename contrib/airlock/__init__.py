"""
Airlock SDK

Liquidity bootstrapping with locked, linearly vesting LP and shared
reward-pool yield.

Architecture:
  - Deposits pair the user's asset with treasury ARMOR at the pool ratio
  - Minted LP is locked per deposit (one batch each) and staked
  - After maturity a batch unlocks linearly over the vesting period
  - Reward-pool yield is split by an accumulator over remaining stake

Usage:
    from airlock import build_world, E18

    world = build_world()
    airlock = world.airlock
    airlock.increase_allocation(alice, 5_000 * E18, sender=world.owner)
    airlock.deposit(alice, world.weth.address, E18, sender=alice, value=E18)
"""

from .airlock import Airlock
from .airlock_math import SCALE, counterpart_amount, unlocked_amount, claimable_amount
from .airlock_types import LPBatch, RewardPoolInfo, BatchStatus
from .allocation import AllocationLedger
from .amm import UniswapV2Factory, UniswapV2Pair, UniswapV2Router, MINIMUM_LIQUIDITY
from .chain import Chain, Clock, ZERO_ADDRESS
from .config import AirlockConfig, load_config
from .errors import (
    AirlockError,
    AuthorizationError,
    RegistrationError,
    ValidationError,
    InsufficientFundsError,
    TemporalError,
    NothingToClaimError,
    TokenError,
    OnchainError,
)
from .pair_registry import PairRegistry
from .reward_pool import RewardPool
from .tokens import Token, WrappedNative
from .world import World, build_world

E18 = 10 ** 18

__version__ = "0.1.0"
__all__ = [
    # Types
    "LPBatch", "RewardPoolInfo", "BatchStatus",
    # Core
    "Airlock", "AllocationLedger", "PairRegistry",
    "SCALE", "counterpart_amount", "unlocked_amount", "claimable_amount",
    # Collaborators
    "Chain", "Clock", "ZERO_ADDRESS", "Token", "WrappedNative",
    "UniswapV2Factory", "UniswapV2Pair", "UniswapV2Router", "MINIMUM_LIQUIDITY",
    "RewardPool",
    # Config
    "AirlockConfig", "load_config", "World", "build_world", "E18",
    # Errors
    "AirlockError", "AuthorizationError", "RegistrationError", "ValidationError",
    "InsufficientFundsError", "TemporalError", "NothingToClaimError",
    "TokenError", "OnchainError",
]
