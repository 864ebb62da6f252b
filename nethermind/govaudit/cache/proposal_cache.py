import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from nethermind.govaudit.config import ONE_HOUR
from nethermind.govaudit.exceptions import CacheError

from .base import JsonFileCache

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("cache")


class ProposalState(Enum):
    """Governor Bravo proposal states, indexed by the value returned from ``state(proposalId)``"""

    Pending = 0
    Active = 1
    Canceled = 2
    Defeated = 3
    Succeeded = 4
    Queued = 5
    Expired = 6
    Executed = 7

    @classmethod
    def from_any(cls, state: "str | int | ProposalState") -> "ProposalState":
        """Parses a state from its name or on-chain index"""
        if isinstance(state, ProposalState):
            return state
        if isinstance(state, int) or state.isdigit():
            return cls(int(state))
        return cls[state.capitalize()]

    def is_terminal(self) -> bool:
        """Terminal proposals can no longer change, so re-simulating them is unnecessary"""
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    [ProposalState.Executed, ProposalState.Defeated, ProposalState.Expired, ProposalState.Canceled]
)


@dataclass
class ProposalCacheEntry:
    """Cached simulation of a proposal"""

    timestamp: int
    proposal_state: str | None
    simulation_data: Any

    def to_json(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "proposalState": self.proposal_state,
            "simulationData": self.simulation_data,
        }

    @classmethod
    def from_json(cls, entry: dict[str, Any]) -> "ProposalCacheEntry":
        return cls(
            timestamp=int(entry["timestamp"]),
            proposal_state=entry.get("proposalState"),
            simulation_data=entry.get("simulationData"),
        )


class ProposalCache:
    """
    Cache of full proposal simulations, stored as one JSON file per DAO, governor, and proposal ID.  Decides
    whether a proposal needs to be re-simulated from its cached state and age.
    """

    store: JsonFileCache
    ttl: int

    def __init__(self, store: JsonFileCache, ttl: int = ONE_HOUR):
        self.store = store
        self.ttl = ttl

    @staticmethod
    def cache_key(dao_name: str, governor_address: str, proposal_id: str) -> str:
        return f"{dao_name}-{governor_address.lower()}-{proposal_id}"

    def is_cached(self, dao_name: str, governor_address: str, proposal_id: str) -> bool:
        return self.store.contains(self.cache_key(dao_name, governor_address, proposal_id))

    def get(self, dao_name: str, governor_address: str, proposal_id: str) -> ProposalCacheEntry | None:
        """Returns the cached entry, or None if missing or unreadable"""
        try:
            entry = self.store.read(self.cache_key(dao_name, governor_address, proposal_id))
        except CacheError as e:
            logger.error(f"Error reading cache for proposal {proposal_id}: {e}")
            return None

        if entry is None:
            return None

        try:
            return ProposalCacheEntry.from_json(entry)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed cache entry for proposal {proposal_id}: {e}")
            return None

    def put(
        self,
        dao_name: str,
        governor_address: str,
        proposal_id: str,
        proposal_state: str | None,
        simulation_data: Any,
    ) -> bool:
        """Caches a proposal simulation.  Returns False if the cache file could not be written"""
        entry = ProposalCacheEntry(
            timestamp=int(time.time()),
            proposal_state=proposal_state or "Unknown",
            simulation_data=simulation_data,
        )
        written = self.store.write(self.cache_key(dao_name, governor_address, proposal_id), entry.to_json())
        if written:
            logger.info(f"Cached simulation for proposal {proposal_id}")
        return written

    def needs_simulation(
        self,
        dao_name: str,
        governor_address: str,
        proposal_id: str,
        current_state: str | None,
        now: float | None = None,
    ) -> bool:
        """
        Determines if a proposal needs to be simulated.

        * Proposals with an unknown state, or without a cached simulation are always simulated
        * Proposals whose state changed since they were cached are simulated again
        * Proposals in a terminal state (Executed, Defeated, Expired, Canceled) are never re-simulated
        * Other proposals are re-simulated once their cache entry is older than the TTL

        :param current_state: current on-chain state name of the proposal
        :param now: unix timestamp used for the age check.  Defaults to the current time
        """
        if current_state is None:
            return True

        cached = self.get(dao_name, governor_address, proposal_id)
        if cached is None:
            return True

        if cached.proposal_state != current_state:
            logger.debug(f"Proposal {proposal_id} changed state from {cached.proposal_state} to {current_state}")
            return True

        try:
            if ProposalState.from_any(current_state).is_terminal():
                return False
        except (KeyError, ValueError):
            logger.debug(f"Unrecognized proposal state {current_state}")

        now = time.time() if now is None else now
        return now - cached.timestamp > self.ttl
