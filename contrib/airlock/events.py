"""
Airlock SDK - Events

Audit log records. `LPQueued` and `LPClaimed` are enough to rebuild every
holder's vesting position (see audit.py).
"""

from dataclasses import dataclass, asdict


@dataclass
class TokenAdded:
    token: str
    pair: str
    reward_pool: str


@dataclass
class LPQueued:
    holder: str
    pair: str
    lp_amount: int
    token_amount: int
    armor_amount: int
    maturity: int


@dataclass
class LPClaimed:
    holder: str
    pair: str
    amount: int


@dataclass
class RewardClaimed:
    holder: str
    amount: int


@dataclass
class ArmorAllocationIncreased:
    user: str
    amount: int


@dataclass
class ArmorAllocationDecreased:
    user: str
    amount: int


@dataclass
class TreasuryFlushed:
    treasury: str
    amount: int


@dataclass
class OwnershipTransferred:
    previous_owner: str
    new_owner: str


AUDIT_EVENTS = {
    cls.__name__: cls for cls in (
        TokenAdded, LPQueued, LPClaimed, RewardClaimed,
        ArmorAllocationIncreased, ArmorAllocationDecreased,
        TreasuryFlushed, OwnershipTransferred,
    )
}


def event_to_dict(event) -> dict:
    data = asdict(event)
    data["event"] = type(event).__name__
    return data


def event_from_dict(data: dict):
    data = dict(data)
    cls = AUDIT_EVENTS[data.pop("event")]
    return cls(**data)
