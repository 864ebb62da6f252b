import time

import pytest

from nethermind.govaudit.cache import ProposalCache, ProposalCacheEntry, ProposalState

DAO = "Uniswap"
GOVERNOR = "0x408ED6354d4973f66138C91495F2f2FCbd8724C3"
SIMULATION = {"proposal": {"targets": []}, "sim": {"transaction": {}}, "timelock": "0x00"}


@pytest.fixture(name="proposal_cache")
def fixture_proposal_cache(file_cache) -> ProposalCache:
    return ProposalCache(file_cache, ttl=3600)


def test_cache_round_trip(proposal_cache):
    assert proposal_cache.put(DAO, GOVERNOR, "42", "Active", SIMULATION)

    entry = proposal_cache.get(DAO, GOVERNOR.lower(), "42")

    assert entry.proposal_state == "Active"
    assert entry.simulation_data == SIMULATION
    assert abs(entry.timestamp - time.time()) < 60
    assert proposal_cache.is_cached(DAO, GOVERNOR, "42")
    assert not proposal_cache.is_cached(DAO, GOVERNOR, "43")


def test_cache_file_layout(proposal_cache, file_cache):
    proposal_cache.put(DAO, GOVERNOR, "7", None, SIMULATION)

    path = file_cache.path_for(f"Uniswap-{GOVERNOR.lower()}-7")
    assert path.exists()
    assert set(file_cache.read(f"Uniswap-{GOVERNOR.lower()}-7")) == {"timestamp", "proposalState", "simulationData"}
    assert proposal_cache.get(DAO, GOVERNOR, "7").proposal_state == "Unknown"


def test_unknown_state_needs_simulation(proposal_cache):
    proposal_cache.put(DAO, GOVERNOR, "1", "Executed", SIMULATION)

    assert proposal_cache.needs_simulation(DAO, GOVERNOR, "1", None)


def test_uncached_needs_simulation(proposal_cache):
    assert proposal_cache.needs_simulation(DAO, GOVERNOR, "1", "Executed")


def test_state_change_needs_simulation(proposal_cache):
    proposal_cache.put(DAO, GOVERNOR, "1", "Queued", SIMULATION)

    assert proposal_cache.needs_simulation(DAO, GOVERNOR, "1", "Executed")


@pytest.mark.parametrize("state", ["Executed", "Defeated", "Expired", "Canceled"])
def test_terminal_states_never_resimulated(proposal_cache, state):
    proposal_cache.put(DAO, GOVERNOR, "1", state, SIMULATION)

    assert not proposal_cache.needs_simulation(DAO, GOVERNOR, "1", state, now=time.time() + 10 * 3600)


def test_ttl_expiry(proposal_cache):
    proposal_cache.put(DAO, GOVERNOR, "1", "Active", SIMULATION)
    cached_at = proposal_cache.get(DAO, GOVERNOR, "1").timestamp

    assert not proposal_cache.needs_simulation(DAO, GOVERNOR, "1", "Active", now=cached_at + 1800)
    assert proposal_cache.needs_simulation(DAO, GOVERNOR, "1", "Active", now=cached_at + 3601)


def test_corrupt_cache_file_is_a_miss(proposal_cache, file_cache):
    file_cache.directory.mkdir(parents=True, exist_ok=True)
    file_cache.path_for(ProposalCache.cache_key(DAO, GOVERNOR, "1")).write_text("{not json", encoding="utf-8")

    assert proposal_cache.get(DAO, GOVERNOR, "1") is None
    assert proposal_cache.needs_simulation(DAO, GOVERNOR, "1", "Executed")


def test_proposal_state_parsing():
    assert ProposalState.from_any(7) == ProposalState.Executed
    assert ProposalState.from_any("2") == ProposalState.Canceled
    assert ProposalState.from_any("defeated") == ProposalState.Defeated
    assert ProposalState.Expired.is_terminal()
    assert not ProposalState.Queued.is_terminal()


def test_entry_serialization():
    entry = ProposalCacheEntry(timestamp=1700000000, proposal_state="Succeeded", simulation_data=SIMULATION)

    assert ProposalCacheEntry.from_json(entry.to_json()) == entry
