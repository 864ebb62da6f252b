import logging
import time
from typing import Any, NamedTuple

from nethermind.govaudit.exceptions import CacheError
from nethermind.govaudit.utils import canonical_address

from .base import JsonFileCache

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("cache")


class AbiCacheKey(NamedTuple):
    """Verified ABIs are cached per chain and contract address"""

    chain_id: int
    address: str

    @classmethod
    def create(cls, chain_id: int, address: str) -> "AbiCacheKey":
        return cls(chain_id=chain_id, address=canonical_address(address))

    def file_key(self) -> str:
        return f"{self.chain_id}-{self.address}"


class AbiCache:
    """
    Verified contract ABIs persisted on disk, with an in-memory secondary cache.  Verified ABIs never change
    for a deployed address, so entries do not expire.
    """

    store: JsonFileCache
    _memory: dict[AbiCacheKey, list[dict[str, Any]]]

    def __init__(self, store: JsonFileCache):
        self.store = store
        self._memory = {}

    def get(self, key: AbiCacheKey) -> list[dict[str, Any]] | None:
        """Returns the cached ABI, checking memory before disk"""
        if key in self._memory:
            return self._memory[key]

        try:
            entry = self.store.read(key.file_key())
        except CacheError as e:
            logger.warning(f"Ignoring unreadable ABI cache entry: {e}")
            return None

        if not isinstance(entry, dict) or not isinstance(entry.get("abi"), list):
            return None

        logger.debug(f"Loaded ABI for {key.address} on chain {key.chain_id} from disk cache")
        self._memory[key] = entry["abi"]
        return entry["abi"]

    def put(self, key: AbiCacheKey, abi: list[dict[str, Any]]):
        self._memory[key] = abi
        self.store.write(
            key.file_key(),
            {"chainId": key.chain_id, "address": key.address, "timestamp": int(time.time()), "abi": abi},
        )
