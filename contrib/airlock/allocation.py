"""
Airlock SDK - Allocation Ledger

Per-user ARMOR credit. The owner grants and revokes credit; deposits consume
it. Available credit is `credit - consumed`.
"""

from typing import Dict

from .errors import InsufficientFundsError, ValidationError


class AllocationLedger:

    def __init__(self):
        self.credit: Dict[str, int] = {}
        self.consumed: Dict[str, int] = {}

    def credit_of(self, user: str) -> int:
        return self.credit.get(user, 0)

    def consumed_of(self, user: str) -> int:
        return self.consumed.get(user, 0)

    def available(self, user: str) -> int:
        return self.credit_of(user) - self.consumed_of(user)

    def total_available(self) -> int:
        return sum(self.available(user) for user in self.credit)

    def increase(self, user: str, amount: int):
        if amount <= 0:
            raise ValidationError("Airlock: amount must be greater than zero")
        self.credit[user] = self.credit_of(user) + amount

    def decrease(self, user: str, amount: int):
        """Revoke unused credit. Consumed credit cannot be revoked."""
        if amount <= 0:
            raise ValidationError("Airlock: amount must be greater than zero")
        if self.available(user) < amount:
            raise InsufficientFundsError("Airlock: insufficient allocation")
        self.credit[user] = self.credit_of(user) - amount

    def consume(self, user: str, amount: int):
        if self.available(user) < amount:
            raise InsufficientFundsError("Airlock: insufficient allocation")
        self.consumed[user] = self.consumed_of(user) + amount

    def to_dict(self, user: str) -> dict:
        return {
            "user": user,
            "credit": self.credit_of(user),
            "consumed": self.consumed_of(user),
            "available": self.available(user),
        }
