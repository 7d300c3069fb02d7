# Copyright (c) 2025 The Airlock developers
# Distributed under the MIT software license

"""
Airlock REST API - read-only view of the ledger

Endpoints:
  GET /api/status                          - Server status, block time
  GET /api/config                          - Immutable configuration
  GET /api/pairs                           - Whitelisted tokens and pairs
  GET /api/pools/<pair>                    - RewardPoolInfo for a pair
  GET /api/holders/<holder>/batches        - All batches of a holder
  GET /api/holders/<holder>/batches/<i>    - One batch with pending amounts
  GET /api/allocations/<user>              - Allocation credit
  GET /api/events?name=LPQueued            - Audit log
  GET /api/invariants                      - Ledger consistency check
"""

import logging
import threading
import time

from flask import Flask, jsonify, request
from flask_cors import CORS

from .airlock import Airlock
from .audit import airlock_events, check_invariants
from .chain import require_address
from .errors import AirlockError, NothingToClaimError, OnchainError
from .events import event_to_dict

log = logging.getLogger(__name__)


def create_app(airlock: Airlock) -> Flask:
    app = Flask(__name__)
    CORS(app)  # Allow cross-origin for dashboards
    lock = threading.Lock()
    started = int(time.time())

    @app.errorhandler(NothingToClaimError)
    def handle_missing(e):
        return jsonify({"error": e.reason}), 404

    @app.errorhandler(AirlockError)
    def handle_rejected(e):
        return jsonify({"error": e.reason}), 400

    @app.errorhandler(OnchainError)
    def handle_onchain(e):
        log.error(f"On-chain read failed: {e}")
        return jsonify({"error": str(e)}), 502

    @app.route("/api/status")
    def status():
        with lock:
            return jsonify({
                "status": "ok",
                "airlock": airlock.address,
                "block_time": airlock.chain.now(),
                "holders": len(airlock.holders()),
                "pairs": len(airlock.reward_pools),
                "uptime": int(time.time()) - started,
            })

    @app.route("/api/config")
    def config():
        return jsonify(airlock.config_dict())

    @app.route("/api/pairs")
    def pairs():
        with lock:
            return jsonify([
                {"token": token, "pair": pair, "reward_pool": airlock.reward_pools[pair].pool}
                for token, pair in airlock.pairs.items()
            ])

    @app.route("/api/pools/<pair>")
    def pool(pair):
        pair = require_address(pair, "pair")
        with lock:
            info = airlock.registry.info(pair)
            return jsonify(info.to_dict())

    @app.route("/api/holders/<holder>/batches")
    def batches(holder):
        holder = require_address(holder, "holder")
        with lock:
            return jsonify([
                airlock.batch_dict(holder, i)
                for i in range(airlock.locked_lp_length(holder))
            ])

    @app.route("/api/holders/<holder>/batches/<int:index>")
    def batch(holder, index):
        holder = require_address(holder, "holder")
        with lock:
            return jsonify(airlock.batch_dict(holder, index))

    @app.route("/api/allocations/<user>")
    def allocation(user):
        user = require_address(user, "user")
        with lock:
            return jsonify(airlock.allocations.to_dict(user))

    @app.route("/api/events")
    def events():
        name = request.args.get("name")
        with lock:
            found = [event_to_dict(e) for e in airlock_events(airlock)]
        if name:
            found = [e for e in found if e["event"] == name]
        return jsonify(found)

    @app.route("/api/invariants")
    def invariants():
        with lock:
            violations = check_invariants(airlock)
        return jsonify({"ok": not violations, "violations": violations})

    return app
