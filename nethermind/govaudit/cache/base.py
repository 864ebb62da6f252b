import json
import logging
from pathlib import Path
from typing import Any

from nethermind.govaudit.exceptions import CacheError

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("cache")


class JsonFileCache:
    """
    Key-value store persisting one JSON file per key inside a directory.  Writes for the same key from separate
    processes race benignly, since the content stored for a key is idempotent.
    """

    directory: Path

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    @staticmethod
    def _sanitize(key: str) -> str:
        return key.replace("/", "_").replace("\\", "_")

    def path_for(self, key: str) -> Path:
        """Returns the path of the cache file for a key"""
        return self.directory / f"{self._sanitize(key)}.json"

    def contains(self, key: str) -> bool:
        return self.path_for(key).exists()

    def read(self, key: str) -> Any:
        """
        Reads the cached value for a key.

        :raises CacheError: if the cache file exists but cannot be read or parsed
        :return: cached JSON value, or None if the key is not cached
        """
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as cache_file:
                return json.load(cache_file)
        except (OSError, json.JSONDecodeError) as e:
            raise CacheError(f"Could not read cache file {path}: {e}") from e

    def write(self, key: str, value: Any) -> bool:
        """
        Writes a JSON value to the cache.  Failures are logged and never raised.

        :return: True if the value was written
        """
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            serialized = json.dumps(value, default=str)
            path.write_text(serialized, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Could not write cache file {path}: {e}")
            return False

        logger.debug(f"Wrote cache file {path}")
        return True
