#!/usr/bin/env python3
# Copyright (c) 2025 The Airlock developers
# Distributed under the MIT software license

"""
Airlock Simulator

Builds a demo world, walks two depositors through lock, vesting and reward
claims, and prints the resulting ledger. Optionally serves the REST API on
the simulated state, quotes a deposit against a live pair, or previews an
account's yield in a live reward pool.

Run:
  airlock-sim --log-level DEBUG
  airlock-sim --serve --port 8090
  airlock-sim --quote 10 --rpc-url https://... --pair 0x... --token 0x... --armor 0x...
  airlock-sim --earned 0x... --rpc-url https://... --reward-pool 0x...
"""

import argparse
import logging
import sys

from .audit import check_invariants
from .config import AirlockConfig, load_config
from .onchain import PairReader, RewardPoolReader
from .world import ARMOR_UNIT, BTC_UNIT, ETH_UNIT, World, build_world

log = logging.getLogger("airlock-sim")


def run_scenario(world: World) -> dict:
    """Deposit, harvest, vest and claim. Returns per-user totals."""
    chain, airlock, owner = world.chain, world.airlock, world.owner
    alice = chain.new_account("alice")
    bob = chain.new_account("bob")

    chain.fund(alice, 20 * ETH_UNIT)
    world.wbtc.transfer(owner, bob, 2 * BTC_UNIT)
    airlock.increase_allocation(alice, 5_000 * ARMOR_UNIT, sender=owner)
    airlock.increase_allocation(bob, 50_000 * ARMOR_UNIT, sender=owner)

    airlock.deposit(alice, world.weth.address, 10 * ETH_UNIT, sender=alice, value=10 * ETH_UNIT)
    airlock.deposit(bob, world.wbtc.address, 1 * BTC_UNIT, sender=bob)

    world.weth_pool.notify_reward_amount(owner, 1_000 * ARMOR_UNIT)
    world.wbtc_pool.notify_reward_amount(owner, 500 * ARMOR_UNIT)

    chain.advance(airlock.lock_period + airlock.vesting_period // 2)
    airlock.claim_lp(0, sender=alice)
    airlock.claim_armor_reward(0, sender=bob)

    world.weth_pool.notify_reward_amount(owner, 1_000 * ARMOR_UNIT)
    chain.advance(airlock.vesting_period)
    airlock.claim_lp(0, sender=alice)
    airlock.claim_lp(0, sender=bob)

    return {
        "alice": {
            "lp": world.weth_pair.balance_of(alice),
            "armor": world.armor.balance_of(alice),
        },
        "bob": {
            "lp": world.wbtc_pair.balance_of(bob),
            "armor": world.armor.balance_of(bob),
        },
    }


def print_report(world: World, totals: dict):
    airlock = world.airlock
    print("\n" + "=" * 70)
    print("AIRLOCK SIMULATION")
    print("=" * 70)
    print(f"  Lock period:    {airlock.lock_period}s")
    print(f"  Vesting period: {airlock.vesting_period}s")
    print(f"  Spendable ARMOR: {airlock.spendable_armor() / ARMOR_UNIT:,.2f}")
    print("-" * 70)
    print(f"{'Pair':<44} {'LP staked':>12} {'Reward':>12}")
    for pair, info in airlock.reward_pools.items():
        print(f"{pair:<44} {info.lp_staked:>12} {info.reward / ARMOR_UNIT:>12.4f}")
    print("-" * 70)
    print(f"{'User':<10} {'LP received':>24} {'ARMOR reward':>20}")
    for user, row in totals.items():
        print(f"{user:<10} {row['lp']:>24} {row['armor'] / ARMOR_UNIT:>20.6f}")
    violations = check_invariants(airlock)
    print("-" * 70)
    print("Invariants: " + ("OK" if not violations else "; ".join(violations)))
    print("=" * 70 + "\n")


def quote(config: AirlockConfig, amount: int, token: str, armor: str) -> int:
    reader = PairReader.from_rpc(config.rpc_url, config.pair_address)
    return reader.quote_counterpart(token, amount, armor)


def preview_rewards(config: AirlockConfig, account: str) -> dict:
    """Yield `account` has earned and LP it has staked in a live reward pool."""
    reader = RewardPoolReader.from_rpc(config.rpc_url, config.reward_pool_address)
    return {
        "reward_pool": reader.address,
        "account": account,
        "earned": reader.earned(account),
        "staked": reader.staked(account),
    }


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Airlock simulator")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--lock-period", type=int, help="Lock period in seconds")
    parser.add_argument("--vesting-period", type=int, help="Vesting period in seconds")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--serve", action="store_true", help="Serve the REST API after the run")
    parser.add_argument("--host", help="API host")
    parser.add_argument("--port", type=int, help="API port")
    parser.add_argument("--quote", type=int, help="Quote ARMOR for this base-unit amount on a live pair")
    parser.add_argument("--rpc-url", help="web3 RPC URL for --quote and --earned")
    parser.add_argument("--pair", help="Pair address for --quote")
    parser.add_argument("--token", help="Deposited token address for --quote")
    parser.add_argument("--armor", help="ARMOR address for --quote")
    parser.add_argument("--earned", metavar="ACCOUNT", help="Preview reward-pool yield of ACCOUNT on a live pool")
    parser.add_argument("--reward-pool", help="Reward pool address for --earned")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = load_config(args.config).merge({
        "lock_period": args.lock_period,
        "vesting_period": args.vesting_period,
        "log_level": args.log_level,
        "host": args.host,
        "port": args.port,
        "rpc_url": args.rpc_url,
        "pair_address": args.pair,
        "reward_pool_address": args.reward_pool,
    })

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if args.quote is not None:
        if not (config.rpc_url and config.pair_address and args.token and args.armor):
            log.error("--quote needs --rpc-url, --pair, --token and --armor")
            return 2
        print(quote(config, args.quote, args.token, args.armor))
        return 0

    if args.earned:
        if not (config.rpc_url and config.reward_pool_address):
            log.error("--earned needs --rpc-url and --reward-pool")
            return 2
        preview = preview_rewards(config, args.earned)
        print(f"Reward pool {preview['reward_pool']}: {preview['account']} "
              f"staked {preview['staked']}, earned {preview['earned']}")
        return 0

    world = build_world(config)
    totals = run_scenario(world)
    print_report(world, totals)

    if args.serve:
        from .server import create_app
        log.info(f"Serving API on {config.host}:{config.port}")
        create_app(world.airlock).run(host=config.host, port=config.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
