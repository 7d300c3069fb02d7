"""
Airlock SDK - Configuration

Defaults < JSON file < AIRLOCK_* environment < command line flags.
"""

import json
import os
from dataclasses import dataclass, asdict, fields
from typing import Optional

DAY = 24 * 60 * 60


@dataclass
class AirlockConfig:
    # Vesting schedule (seconds)
    lock_period: int = 90 * DAY
    vesting_period: int = 90 * DAY

    # Demo world seeding (whole tokens)
    armor_supply: int = 1_000_000_000
    armor_in_airlock: int = 10_000_000
    weth_liquidity: int = 50
    armor_for_weth: int = 10_000
    wbtc_liquidity: int = 10
    armor_for_wbtc: int = 100_000

    # Server
    host: str = "127.0.0.1"
    port: int = 8090

    # Live chain (optional, read-only)
    rpc_url: str = ""
    pair_address: str = ""
    reward_pool_address: str = ""

    log_level: str = "INFO"

    @classmethod
    def from_file(cls, path: str) -> "AirlockConfig":
        with open(path, "r") as f:
            data = json.load(f)
        return cls().merge(data)

    def merge(self, data: dict) -> "AirlockConfig":
        """Copy with known keys from `data` applied (unknown keys are ignored)."""
        values = asdict(self)
        for f in fields(self):
            if f.name in data and data[f.name] is not None:
                values[f.name] = type(getattr(self, f.name))(data[f.name])
        return AirlockConfig(**values)

    def with_env(self, environ: Optional[dict] = None) -> "AirlockConfig":
        environ = os.environ if environ is None else environ
        data = {}
        for f in fields(self):
            key = f"AIRLOCK_{f.name.upper()}"
            if key in environ:
                data[f.name] = environ[key]
        return self.merge(data)

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: Optional[str] = None, environ: Optional[dict] = None) -> AirlockConfig:
    config = AirlockConfig.from_file(path) if path else AirlockConfig()
    return config.with_env(environ)
