"""
Airlock SDK - Integer Math

Pure functions shared by the engine, the on-chain readers and the simulator.

All amounts are integers in base units. Every division truncates (rounds
down), so the Airlock never commits more ARMOR, releases more LP or pays more
reward than it holds.

    counterpart = amount * reserve_armor // reserve_asset
    unlocked    = amount * min(now - maturity, vesting) // vesting
    acc        += harvested * SCALE // lp_staked
    accrued     = remaining * acc // SCALE
"""

# Fixed-point scale of the reward accumulator
SCALE = 10 ** 12


def counterpart_amount(amount: int, reserve_asset: int, reserve_armor: int) -> int:
    """
    ARMOR required to match `amount` of asset at the pool's current ratio.

    Args:
        amount: Asset amount being deposited
        reserve_asset: Pool reserve of the deposited asset
        reserve_armor: Pool reserve of ARMOR

    Raises:
        ValueError: If the asset reserve is empty

    Examples:
        >>> counterpart_amount(10, 50, 10000)
        2000
    """
    if reserve_asset <= 0:
        raise ValueError(f"Reserve must be positive: {reserve_asset}")
    return amount * reserve_armor // reserve_asset


def unlocked_amount(amount: int, maturity: int, now: int, vesting_period: int) -> int:
    """Portion of `amount` released by linear vesting at time `now`."""
    if now < maturity:
        return 0
    elapsed = min(now - maturity, vesting_period)
    if vesting_period == 0:
        return amount
    return amount * elapsed // vesting_period


def claimable_amount(amount: int, claimed: int, maturity: int,
                     now: int, vesting_period: int) -> int:
    """Unlocked but not yet claimed."""
    unlocked = unlocked_amount(amount, maturity, now, vesting_period)
    if unlocked <= claimed:
        return 0
    return unlocked - claimed


def accumulator_step(harvested: int, lp_staked: int) -> int:
    """Increase of the per-share accumulator for a harvest."""
    if lp_staked == 0:
        return 0
    return harvested * SCALE // lp_staked


def accumulator_remainder(harvested: int, lp_staked: int) -> int:
    """Whole units of a harvest that `accumulator_step` leaves undistributed."""
    if lp_staked == 0:
        return harvested
    return harvested * SCALE % lp_staked // SCALE


def accrued_reward(remaining: int, acc_per_share: int) -> int:
    """Cumulative reward attributable to `remaining` shares."""
    return remaining * acc_per_share // SCALE
