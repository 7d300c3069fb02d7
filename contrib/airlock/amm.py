"""
Airlock SDK - Constant Product Pool

Uniswap V2 style pair, factory and router. Only what the Airlock needs:
reserves, proportional mint and liquidity seeding. Swaps and burns are not
modelled.

Mint rule:
  first mint: liquidity = isqrt(amount0 * amount1) - MINIMUM_LIQUIDITY
  afterwards: liquidity = min(amount0 * supply // reserve0,
                              amount1 * supply // reserve1)
"""

import logging
import math
from typing import Dict, Optional, Tuple

from .chain import Chain, Contract, ZERO_ADDRESS
from .errors import TokenError
from .tokens import Token, WrappedNative

log = logging.getLogger(__name__)

# Permanently locked on first mint
MINIMUM_LIQUIDITY = 1000


def sort_tokens(token_a: Token, token_b: Token) -> Tuple[Token, Token]:
    if token_a.address == token_b.address:
        raise ValueError("Identical tokens")
    if token_a.address.lower() < token_b.address.lower():
        return token_a, token_b
    return token_b, token_a


class UniswapV2Pair(Token):
    """Pool of two tokens; the pair itself is the LP share token."""

    def __init__(self, chain: Chain, token0: Token, token1: Token):
        super().__init__(chain, f"{token0.symbol}-{token1.symbol}-LP", decimals=18)
        self.token0 = token0
        self.token1 = token1
        self.reserve0 = 0
        self.reserve1 = 0
        self.block_timestamp_last = 0

    def get_reserves(self) -> Tuple[int, int, int]:
        return self.reserve0, self.reserve1, self.block_timestamp_last

    def reserves_for(self, token_a: Token, token_b: Token) -> Tuple[int, int]:
        """Reserves ordered as (token_a, token_b)."""
        if token_a.address == self.token0.address and token_b.address == self.token1.address:
            return self.reserve0, self.reserve1
        if token_a.address == self.token1.address and token_b.address == self.token0.address:
            return self.reserve1, self.reserve0
        raise ValueError(f"{self.symbol} does not hold {token_a.symbol}/{token_b.symbol}")

    def mint(self, to: str) -> int:
        """Mint shares for whatever was transferred in since the last sync."""
        balance0 = self.token0.balance_of(self.address)
        balance1 = self.token1.balance_of(self.address)
        amount0 = balance0 - self.reserve0
        amount1 = balance1 - self.reserve1

        if self.total_supply == 0:
            liquidity = math.isqrt(amount0 * amount1) - MINIMUM_LIQUIDITY
            if liquidity > 0:
                super().mint(ZERO_ADDRESS, MINIMUM_LIQUIDITY)
        else:
            liquidity = min(amount0 * self.total_supply // self.reserve0,
                            amount1 * self.total_supply // self.reserve1)

        if liquidity <= 0:
            raise TokenError("UniswapV2: INSUFFICIENT_LIQUIDITY_MINTED")

        super().mint(to, liquidity)
        self.reserve0 = balance0
        self.reserve1 = balance1
        self.block_timestamp_last = self.chain.now()
        return liquidity


class UniswapV2Factory(Contract):
    def __init__(self, chain: Chain):
        super().__init__(chain, "UniswapV2Factory")
        self.pairs: Dict[Tuple[str, str], UniswapV2Pair] = {}
        self.all_pairs: Dict[str, UniswapV2Pair] = {}

    def get_pair(self, token_a: Token, token_b: Token) -> Optional[UniswapV2Pair]:
        token0, token1 = sort_tokens(token_a, token_b)
        return self.pairs.get((token0.address, token1.address))

    def pair_at(self, address: str) -> Optional[UniswapV2Pair]:
        return self.all_pairs.get(address)

    def create_pair(self, token_a: Token, token_b: Token) -> UniswapV2Pair:
        token0, token1 = sort_tokens(token_a, token_b)
        key = (token0.address, token1.address)
        if key in self.pairs:
            raise ValueError("UniswapV2: PAIR_EXISTS")
        pair = UniswapV2Pair(self.chain, token0, token1)
        self.pairs[key] = pair
        self.all_pairs[pair.address] = pair
        log.debug(f"Pair created: {pair.symbol} at {pair.address}")
        return pair


class UniswapV2Router(Contract):
    """
    Liquidity seeding helper.

    Usage:
        router = UniswapV2Router(chain, factory, weth)
        router.add_liquidity_eth(armor, 10_000 * E18, owner, sender=owner, value=50 * E18)
    """

    def __init__(self, chain: Chain, factory: UniswapV2Factory, weth: WrappedNative):
        super().__init__(chain, "UniswapV2Router")
        self.factory = factory
        self.weth = weth

    def _optimal(self, pair: UniswapV2Pair, token_a: Token, token_b: Token,
                 desired_a: int, desired_b: int) -> Tuple[int, int]:
        reserve_a, reserve_b = pair.reserves_for(token_a, token_b)
        if reserve_a == 0 and reserve_b == 0:
            return desired_a, desired_b
        optimal_b = desired_a * reserve_b // reserve_a
        if optimal_b <= desired_b:
            return desired_a, optimal_b
        return desired_b * reserve_a // reserve_b, desired_b

    def add_liquidity(self, token_a: Token, token_b: Token,
                      desired_a: int, desired_b: int,
                      to: str, sender: str) -> Tuple[int, int, int]:
        with self.chain.atomic():
            pair = self.factory.get_pair(token_a, token_b)
            if pair is None:
                pair = self.factory.create_pair(token_a, token_b)
            amount_a, amount_b = self._optimal(pair, token_a, token_b, desired_a, desired_b)
            token_a.transfer(sender, pair.address, amount_a)
            token_b.transfer(sender, pair.address, amount_b)
            liquidity = pair.mint(to)
            return amount_a, amount_b, liquidity

    def add_liquidity_eth(self, token: Token, desired_token: int,
                          to: str, sender: str, value: int) -> Tuple[int, int, int]:
        with self.chain.atomic():
            self.weth.deposit(sender, value)
            return self.add_liquidity(token, self.weth, desired_token, value, to, sender)
