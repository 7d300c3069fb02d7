"""
Airlock SDK - Audit

Rebuilds positions from the event log and checks ledger invariants.

    staked(pair) = sum(LPQueued.lp_amount) - sum(LPClaimed.amount)

Usage:
    violations = check_invariants(airlock)
    export_events(airlock, "airlock-events.json")
"""

import json
import time
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .airlock import Airlock
from .events import LPClaimed, LPQueued, event_from_dict, event_to_dict


@dataclass
class Position:
    """Totals for one (holder, pair)"""
    queued: int = 0
    claimed: int = 0
    batches: int = 0
    maturities: List[int] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        return self.queued - self.claimed


def rebuild_positions(events: list) -> Dict[Tuple[str, str], Position]:
    positions: Dict[Tuple[str, str], Position] = {}
    for event in events:
        if isinstance(event, LPQueued):
            position = positions.setdefault((event.holder, event.pair), Position())
            position.queued += event.lp_amount
            position.batches += 1
            position.maturities.append(event.maturity)
        elif isinstance(event, LPClaimed):
            position = positions.setdefault((event.holder, event.pair), Position())
            position.claimed += event.amount
    return positions


def rebuild_staked(events: list) -> Dict[str, int]:
    staked: Dict[str, int] = {}
    for (_, pair), position in rebuild_positions(events).items():
        staked[pair] = staked.get(pair, 0) + position.remaining
    return staked


def airlock_events(airlock: Airlock) -> list:
    return airlock.chain.filter_logs(airlock)


def check_invariants(airlock: Airlock) -> List[str]:
    """Every violated ledger invariant, as readable strings. Empty when sound."""
    violations = []

    staked: Dict[str, int] = {}
    for holder in airlock.holders():
        for index, batch in enumerate(airlock.batches_of(holder)):
            if not 0 <= batch.claimed_amount <= batch.amount:
                violations.append(
                    f"{holder}[{index}]: claimed {batch.claimed_amount} outside [0, {batch.amount}]")
            staked[batch.pair] = staked.get(batch.pair, 0) + batch.remaining

    for pair, info in airlock.reward_pools.items():
        if info.lp_staked != staked.get(pair, 0):
            violations.append(
                f"{pair}: lp_staked {info.lp_staked} != batch total {staked.get(pair, 0)}")
        if info.reward < 0:
            violations.append(f"{pair}: negative reward {info.reward}")
        pool = airlock.adapter.reward_pool(info.pool)
        if pool.balance_of(airlock.address) != info.lp_staked:
            violations.append(
                f"{pair}: reward pool holds {pool.balance_of(airlock.address)}, "
                f"ledger says {info.lp_staked}")

    replayed = rebuild_staked(airlock_events(airlock))
    for pair, info in airlock.reward_pools.items():
        if replayed.get(pair, 0) != info.lp_staked:
            violations.append(
                f"{pair}: event log implies {replayed.get(pair, 0)} staked, "
                f"ledger says {info.lp_staked}")

    ledger = airlock.allocations
    for user in set(ledger.credit) | set(ledger.consumed):
        if ledger.consumed_of(user) > ledger.credit_of(user):
            violations.append(
                f"{user}: consumed {ledger.consumed_of(user)} > credit {ledger.credit_of(user)}")

    if airlock.spendable_armor() < 0:
        violations.append(f"spendable ARMOR negative: {airlock.spendable_armor()}")

    return violations


def export_events(airlock: Airlock, path: str):
    """Write the Airlock's event log to a JSON file."""
    data = {
        "version": "1.0",
        "airlock": airlock.address,
        "exported_ts": int(time.time()),
        "events": [event_to_dict(e) for e in airlock_events(airlock)],
    }
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def load_events(path: str) -> list:
    with open(path, "r") as f:
        data = json.load(f)
    return [event_from_dict(e) for e in data.get("events", [])]
