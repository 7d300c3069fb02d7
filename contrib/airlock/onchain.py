"""
Airlock SDK - On-chain Readers

Read-only views of a deployed Uniswap V2 pair and its reward pool, used to
quote a deposit against live reserves with the same integer rule the
ledger applies.

Usage:
    reader = PairReader.from_rpc("https://mainnet.infura.io/v3/...", PAIR)
    armor_needed = reader.quote_counterpart(WETH, 10 * 10**18, ARMOR)
"""

import logging
from typing import Tuple

from web3 import Web3

from .airlock_math import counterpart_amount
from .errors import OnchainError

log = logging.getLogger(__name__)

PAIR_ABI = [
    {
        "name": "getReserves",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"}
        ]
    },
    {
        "name": "token0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}]
    },
    {
        "name": "token1",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}]
    },
    {
        "name": "totalSupply",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}]
    }
]

REWARD_POOL_ABI = [
    {
        "name": "earned",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}]
    },
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}]
    }
]


class PairReader:
    """Uniswap V2 pair through web3."""

    def __init__(self, w3: Web3, address: str):
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)
        self.contract = w3.eth.contract(address=self.address, abi=PAIR_ABI)

    @classmethod
    def from_rpc(cls, rpc_url: str, address: str) -> "PairReader":
        return cls(Web3(Web3.HTTPProvider(rpc_url)), address)

    def _call(self, name: str, *args):
        try:
            return getattr(self.contract.functions, name)(*args).call()
        except Exception as e:
            log.error(f"{name} failed on {self.address}: {e}")
            raise OnchainError(self.address, f"{name} failed: {e}") from e

    def tokens(self) -> Tuple[str, str]:
        return (Web3.to_checksum_address(self._call("token0")),
                Web3.to_checksum_address(self._call("token1")))

    def total_supply(self) -> int:
        return self._call("totalSupply")

    def reserves_for(self, token: str, armor: str) -> Tuple[int, int]:
        """(token reserve, ARMOR reserve)"""
        token = Web3.to_checksum_address(token)
        armor = Web3.to_checksum_address(armor)
        reserve0, reserve1, _ = self._call("getReserves")
        token0, token1 = self.tokens()
        if (token0, token1) == (token, armor):
            return reserve0, reserve1
        if (token0, token1) == (armor, token):
            return reserve1, reserve0
        raise OnchainError(self.address, f"pair does not hold {token}/{armor}")

    def quote_counterpart(self, token: str, amount: int, armor: str) -> int:
        """ARMOR the Airlock would add for a deposit of `amount` `token`."""
        reserve_token, reserve_armor = self.reserves_for(token, armor)
        return counterpart_amount(amount, reserve_token, reserve_armor)

    def quote_liquidity(self, token: str, amount: int, armor: str) -> int:
        """LP shares a proportional deposit of `amount` would mint."""
        reserve_token, _ = self.reserves_for(token, armor)
        if reserve_token == 0:
            raise OnchainError(self.address, "empty pair")
        return amount * self.total_supply() // reserve_token


class RewardPoolReader:
    """Staking reward pool through web3."""

    def __init__(self, w3: Web3, address: str):
        self.address = Web3.to_checksum_address(address)
        self.contract = w3.eth.contract(address=self.address, abi=REWARD_POOL_ABI)

    @classmethod
    def from_rpc(cls, rpc_url: str, address: str) -> "RewardPoolReader":
        return cls(Web3(Web3.HTTPProvider(rpc_url)), address)

    def earned(self, account: str) -> int:
        try:
            return self.contract.functions.earned(Web3.to_checksum_address(account)).call()
        except Exception as e:
            raise OnchainError(self.address, f"earned failed: {e}") from e

    def staked(self, account: str) -> int:
        try:
            return self.contract.functions.balanceOf(Web3.to_checksum_address(account)).call()
        except Exception as e:
            raise OnchainError(self.address, f"balanceOf failed: {e}") from e
