import logging

from nethermind.govaudit.types.decoding import DecodeCacheKey, DecodedFunction

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("decoding")


class DecodeCache:
    """
    In-memory cache of decoded calldata, keyed by target address & calldata.  Lives for the duration of a single
    audit run.  Decodes within a run share one event loop, so reads and writes are never interleaved mid-update.
    """

    _entries: dict[DecodeCacheKey, DecodedFunction]

    def __init__(self):
        self._entries = {}

    def get(self, target: str, calldata: str) -> DecodedFunction | None:
        """Returns the cached decoding of calldata sent to target, or None"""
        return self._entries.get(DecodeCacheKey.create(target, calldata))

    def put(self, target: str, calldata: str, decoded: DecodedFunction):
        key = DecodeCacheKey.create(target, calldata)
        logger.debug(f"Caching decoded {decoded.name} for {key.target} with selector {key.calldata[:10]}")
        self._entries[key] = decoded

    def __len__(self) -> int:
        return len(self._entries)
