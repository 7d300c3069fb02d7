"""
Airlock SDK - Chain

In-process execution environment for the Airlock and its collaborators.

Provides what the contracts expect from a chain:
  - deterministic checksummed addresses
  - a block clock that tests can move forward
  - native coin balances
  - an append-only event log
  - all-or-nothing execution of every public operation

Usage:
    chain = Chain()
    alice = chain.new_account("alice")
    chain.fund(alice, 10 ** 18)

    with chain.atomic():
        ...  # any exception restores every registered contract

    snap = chain.snapshot()
    chain.advance(86400)
    chain.revert(snap)
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from web3 import Web3

from .errors import TokenError, ValidationError

log = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def derive_address(label: str, nonce: int) -> str:
    """Checksummed address from keccak(label:nonce)."""
    digest = Web3.keccak(text=f"{label}:{nonce}")
    return Web3.to_checksum_address("0x" + bytes(digest[-20:]).hex())


def require_address(address: str, what: str = "address") -> str:
    """Validate and checksum an address. Zero address is rejected."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValidationError(f"Airlock: invalid {what}")
    checksummed = Web3.to_checksum_address(address)
    if checksummed == ZERO_ADDRESS:
        raise ValidationError("Airlock: zero address")
    return checksummed


class Clock:
    """Wall clock with a test offset. `start` freezes the base time."""

    def __init__(self, start: Optional[int] = None):
        self._start = start
        self.offset = 0

    def now(self) -> int:
        base = self._start if self._start is not None else int(time.time())
        return base + self.offset

    def advance(self, seconds: int):
        if seconds < 0:
            raise ValueError("Clock cannot go backwards")
        self.offset += seconds


@dataclass
class Log:
    """One emitted event."""
    emitter: str
    event: Any
    timestamp: int

    @property
    def name(self) -> str:
        return type(self.event).__name__


class Contract:
    """Base for everything that lives at an address and holds state."""

    def __init__(self, chain: "Chain", label: str):
        self.chain = chain
        self.label = label
        self.address = chain.new_address(label)
        chain.register(self)

    def emit(self, event):
        self.chain.emit(self.address, event)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.label} {self.address}>"


class Chain:
    """
    Serialized execution environment.

    Every contract registers itself here. `atomic()` records the fields of
    every object reachable from a registered contract and writes them back
    into the same objects if the block raises, so references held outside
    the chain stay live.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or Clock()
        self.contracts: List[Contract] = []
        self._by_address: Dict[str, Contract] = {}
        self.native: Dict[str, int] = {}
        self.logs: List[Log] = []
        self._nonce = 0
        self._depth = 0
        self._snapshots: List[dict] = []

    # ═══════════════════════════════════════════════════════════════════════
    # ADDRESSES & TIME
    # ═══════════════════════════════════════════════════════════════════════

    def new_address(self, label: str = "account") -> str:
        self._nonce += 1
        return derive_address(label, self._nonce)

    def new_account(self, label: str = "account") -> str:
        address = self.new_address(label)
        self.native.setdefault(address, 0)
        return address

    def register(self, contract: Contract):
        self.contracts.append(contract)
        self._by_address[contract.address] = contract

    def contract_at(self, address: str) -> Optional[Contract]:
        return self._by_address.get(address)

    def now(self) -> int:
        return self.clock.now()

    def advance(self, seconds: int):
        """Move block time forward."""
        self.clock.advance(seconds)

    # ═══════════════════════════════════════════════════════════════════════
    # NATIVE COIN
    # ═══════════════════════════════════════════════════════════════════════

    def fund(self, address: str, value: int):
        self.native[address] = self.native.get(address, 0) + value

    def native_balance(self, address: str) -> int:
        return self.native.get(address, 0)

    def send_native(self, sender: str, to: str, value: int):
        balance = self.native.get(sender, 0)
        if balance < value:
            raise TokenError("insufficient native balance")
        self.native[sender] = balance - value
        self.native[to] = self.native.get(to, 0) + value

    # ═══════════════════════════════════════════════════════════════════════
    # EVENTS
    # ═══════════════════════════════════════════════════════════════════════

    def emit(self, emitter: str, event):
        self.logs.append(Log(emitter=emitter, event=event, timestamp=self.now()))

    def filter_logs(self, emitter=None, name: Optional[str] = None) -> list:
        """Events matching an emitter (address or contract) and/or a name."""
        if isinstance(emitter, Contract):
            emitter = emitter.address
        return [
            entry.event for entry in self.logs
            if (emitter is None or entry.emitter == emitter)
            and (name is None or entry.name == name)
        ]

    # ═══════════════════════════════════════════════════════════════════════
    # SNAPSHOT / REVERT
    # ═══════════════════════════════════════════════════════════════════════

    def _capture(self) -> dict:
        saved = []
        seen = {id(self), id(self.clock)}
        pending = list(self.contracts)
        while pending:
            obj = pending.pop()
            if id(obj) in seen:
                continue
            seen.add(id(obj))
            if isinstance(obj, dict):
                saved.append((obj, dict(obj)))
                pending.extend(obj.values())
            elif isinstance(obj, list):
                saved.append((obj, list(obj)))
                pending.extend(obj)
            elif isinstance(obj, set):
                saved.append((obj, set(obj)))
            elif isinstance(obj, tuple):
                pending.extend(obj)
            elif hasattr(obj, "__dict__") and not (callable(obj) or isinstance(obj, Enum)):
                saved.append((obj, dict(vars(obj))))
                pending.extend(vars(obj).values())
        return {
            "objects": saved,
            "native": dict(self.native),
            "logs": list(self.logs),
            "offset": self.clock.offset,
        }

    def _restore(self, state: dict):
        # Shallow copies are written back into the original objects
        for obj, fields in state["objects"]:
            if isinstance(obj, list):
                obj[:] = fields
            elif isinstance(obj, (dict, set)):
                obj.clear()
                obj.update(fields)
            else:
                obj.__dict__.clear()
                obj.__dict__.update(fields)
        self.native = dict(state["native"])
        self.logs = list(state["logs"])
        self.clock.offset = state["offset"]

    def snapshot(self) -> int:
        """Save full state. Returns an id for `revert`."""
        self._snapshots.append(self._capture())
        return len(self._snapshots) - 1

    def revert(self, snapshot_id: int):
        """Restore the state saved by `snapshot` and drop later snapshots."""
        state = self._snapshots[snapshot_id]
        del self._snapshots[snapshot_id:]
        self._restore(state)

    @contextmanager
    def atomic(self):
        """Run a block all-or-nothing. Nested blocks join the outer one."""
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        state = self._capture()
        self._depth = 1
        try:
            yield
        except Exception as e:
            self._restore(state)
            log.debug(f"Reverted: {e}")
            raise
        finally:
            self._depth = 0
