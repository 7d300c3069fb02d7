"""
Airlock SDK - Tokens

Minimal fungible token ledger (ERC20 semantics without allowances) and the
wrapped native asset. Transfers either fully succeed or raise `TokenError`.
"""

from dataclasses import dataclass
from typing import Dict

from .chain import Chain, Contract, ZERO_ADDRESS
from .errors import TokenError


@dataclass
class Transfer:
    sender: str
    receiver: str
    amount: int


class Token(Contract):
    """
    Fungible token.

    Usage:
        armor = Token(chain, "ARMOR", decimals=18)
        armor.mint(owner, 10 ** 27)
        armor.transfer(owner, airlock.address, 10 ** 24)
    """

    def __init__(self, chain: Chain, symbol: str, decimals: int = 18):
        super().__init__(chain, symbol)
        self.symbol = symbol
        self.decimals = decimals
        self.total_supply = 0
        self.balances: Dict[str, int] = {}

    def balance_of(self, address: str) -> int:
        return self.balances.get(address, 0)

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        if amount < 0:
            raise TokenError(f"{self.symbol}: negative amount")
        balance = self.balances.get(sender, 0)
        if balance < amount:
            raise TokenError(f"{self.symbol}: transfer amount exceeds balance")
        self.balances[sender] = balance - amount
        self.balances[to] = self.balances.get(to, 0) + amount
        self.emit(Transfer(sender, to, amount))
        return True

    def mint(self, to: str, amount: int):
        self.total_supply += amount
        self.balances[to] = self.balances.get(to, 0) + amount
        self.emit(Transfer(ZERO_ADDRESS, to, amount))

    def burn(self, holder: str, amount: int):
        balance = self.balances.get(holder, 0)
        if balance < amount:
            raise TokenError(f"{self.symbol}: burn amount exceeds balance")
        self.balances[holder] = balance - amount
        self.total_supply -= amount
        self.emit(Transfer(holder, ZERO_ADDRESS, amount))


class WrappedNative(Token):
    """WETH: 1:1 claim on native coin held by this contract."""

    def __init__(self, chain: Chain, symbol: str = "WETH"):
        super().__init__(chain, symbol, decimals=18)

    def deposit(self, sender: str, value: int):
        """Wrap `value` native coin from `sender`."""
        self.chain.send_native(sender, self.address, value)
        self.mint(sender, value)

    def withdraw(self, sender: str, amount: int):
        self.burn(sender, amount)
        self.chain.send_native(self.address, sender, amount)
