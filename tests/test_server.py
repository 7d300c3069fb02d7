import pytest

from airlock import LPBatch
from airlock.server import create_app

from constants import ETH_UNIT, LOCK_PERIOD, VESTING_PERIOD


@pytest.fixture
def client(airlock):
    app = create_app(airlock)
    app.config["TESTING"] = True
    return app.test_client()


def test_status(client, airlock, chain):
    resp = client.get("/api/status")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["status"] == "ok"
    assert data["airlock"] == airlock.address
    assert data["block_time"] == chain.now()
    assert data["pairs"] == 2


def test_config(client, airlock):
    data = client.get("/api/config").get_json()
    assert data["lock_period"] == LOCK_PERIOD
    assert data["vesting_period"] == VESTING_PERIOD
    assert data["armor"] == airlock.ARMOR.address
    assert data["weth"] == airlock.WETH.address


def test_pairs_and_pool(client, weth, weth_pair, weth_pool):
    pairs = client.get("/api/pairs").get_json()
    assert {"token": weth.address, "pair": weth_pair.address, "reward_pool": weth_pool.address} in pairs

    pool = client.get(f"/api/pools/{weth_pair.address}").get_json()
    assert pool["pool"] == weth_pool.address
    assert pool["lp_staked"] == 0


def test_unknown_pool_is_rejected(client, chain):
    resp = client.get("/api/pools/0xnotapair")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Airlock: invalid pair"

    resp = client.get(f"/api/pools/{chain.new_account('stranger')}")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Airlock: Pair is not registered"


def test_holder_batches(client, alice, deposit_eth, chain):
    batch = deposit_eth(alice, 10 * ETH_UNIT)
    chain.advance(LOCK_PERIOD + VESTING_PERIOD // 2)

    batches = client.get(f"/api/holders/{alice}/batches").get_json()
    assert len(batches) == 1
    assert batches[0]["index"] == 0
    assert batches[0]["amount"] == batch.amount
    assert batches[0]["status"] == "vesting"
    assert batches[0]["pending_lp"] == batch.amount * (VESTING_PERIOD // 2) // VESTING_PERIOD

    one = client.get(f"/api/holders/{alice}/batches/0").get_json()
    assert one == batches[0]
    assert LPBatch.from_dict(one) == batch


def test_missing_batch_is_404(client, alice):
    resp = client.get(f"/api/holders/{alice}/batches/0")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Airlock: nothing to claim"
    assert client.get(f"/api/holders/{alice}/batches").get_json() == []


def test_allocation(client, alice, airlock):
    data = client.get(f"/api/allocations/{alice}").get_json()
    assert data["available"] == airlock.allocation_of(alice)
    assert data["consumed"] == 0


def test_events_filter(client, alice, deposit_eth):
    deposit_eth(alice, ETH_UNIT)
    everything = client.get("/api/events").get_json()
    queued = client.get("/api/events?name=LPQueued").get_json()
    assert len(everything) > len(queued) == 1
    assert queued[0]["holder"] == alice
    assert queued[0]["token_amount"] == ETH_UNIT


def test_invariants(client, alice, deposit_eth, airlock, weth_pair):
    deposit_eth(alice, ETH_UNIT)
    assert client.get("/api/invariants").get_json() == {"ok": True, "violations": []}

    airlock.reward_pools[weth_pair.address].lp_staked = 0
    data = client.get("/api/invariants").get_json()
    assert data["ok"] is False
    assert data["violations"]


def test_lowercase_addresses_are_accepted(client, alice, deposit_eth, airlock, weth_pair):
    batch = deposit_eth(alice, ETH_UNIT)
    lower = alice.lower()

    batches = client.get(f"/api/holders/{lower}/batches").get_json()
    assert [b["amount"] for b in batches] == [batch.amount]
    assert client.get(f"/api/holders/{lower}/batches/0").status_code == 200
    assert client.get(f"/api/allocations/{lower}").get_json()["user"] == alice
    assert client.get(f"/api/pools/{weth_pair.address.lower()}").get_json()["lp_staked"] == batch.amount


def test_invalid_holder_is_rejected(client):
    resp = client.get("/api/holders/not-an-address/batches")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Airlock: invalid holder"
