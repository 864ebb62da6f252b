import asyncio
import json
import logging
from typing import Any

import aiohttp
from aiohttp.client_exceptions import ClientError, ContentTypeError

from nethermind.govaudit.cache import AbiCache, AbiCacheKey
from nethermind.govaudit.config import DEFAULT_ETHERSCAN_URL
from nethermind.govaudit.exceptions import (
    ConfigurationError,
    ExplorerError,
    ExplorerHostError,
    ExplorerRateLimitError,
)
from nethermind.govaudit.utils import checksum

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("etherscan")

# pylint: disable=raise-missing-from


def _validate_api_key(key: str | None) -> str:
    if not key:
        raise ConfigurationError("API key is required for fetching verified ABIs from Etherscan")
    return key


def handle_etherscan_error(response_data: dict[str, Any]) -> Any:
    """
    Check the Etherscan response envelope before returning the result from the API

    :param response_data: decoded JSON response
    :return: response_data['result']
    """
    if str(response_data.get("status")) == "1" and response_data.get("result"):
        return response_data["result"]

    result = str(response_data.get("result") or "")
    message = str(response_data.get("message") or "")

    if "rate limit" in result.lower() or "rate limit" in message.lower():
        raise ExplorerRateLimitError(f"Etherscan rate limit reached: {result or message}")

    match result:
        case "Invalid API Key" | "Missing/Invalid API Key":
            raise ConfigurationError("Invalid Etherscan API Key")
        case _:
            raise ExplorerError(f"Etherscan Error: {message} {result}".strip())


class EtherscanClient:
    """
    Fetches verified contract ABIs from Etherscan.  Requests are serialized and delayed to stay under the
    requests-per-second limit of the API key, and transient failures are retried with exponential backoff.

    Fetched ABIs are stored in the :class:`~nethermind.govaudit.cache.AbiCache`.
    """

    api_key: str
    chain_id: int
    base_url: str

    request_delay: float
    """ Seconds to wait before each request """

    max_retries: int
    """ Maximum number of request attempts for a single ABI """

    backoff: float
    """ Base delay between retries.  The delay doubles after each failed attempt """

    def __init__(
        self,
        api_key: str | None,
        abi_cache: AbiCache | None = None,
        chain_id: int = 1,
        base_url: str = DEFAULT_ETHERSCAN_URL,
        request_delay: float = 0.3,
        max_retries: int = 3,
        backoff: float = 1.0,
        session: aiohttp.ClientSession | None = None,
    ):
        self.api_key = _validate_api_key(api_key)
        self.abi_cache = abi_cache
        self.chain_id = chain_id
        self.base_url = base_url
        self.request_delay = request_delay
        self.max_retries = max_retries
        self.backoff = backoff
        self.session = session

        self._memory_cache: dict[AbiCacheKey, list[dict[str, Any]] | None] = {}
        self._throttle = asyncio.Lock()

    def _cached(self, key: AbiCacheKey) -> tuple[bool, list[dict[str, Any]] | None]:
        if key in self._memory_cache:
            return True, self._memory_cache[key]
        if self.abi_cache is not None:
            abi = self.abi_cache.get(key)
            if abi is not None:
                self._memory_cache[key] = abi
                return True, abi
        return False, None

    async def fetch_abi(self, address: str) -> list[dict[str, Any]] | None:
        """
        Returns the verified ABI of a contract.  Explorer failures never raise.  Once the retries are exhausted
        or the contract is not verified, None is returned so decoding can continue with the next strategy.
        Only definitive results are kept in memory.  A fetch that ran out of retries is attempted again on the
        next call.

        :param address: contract address
        :return: list of ABI elements, or None
        """
        key = AbiCacheKey.create(self.chain_id, address)

        hit, abi = self._cached(key)
        if hit:
            return abi

        async with self._throttle:
            # Another request may have fetched this ABI while waiting on the throttle
            hit, abi = self._cached(key)
            if hit:
                return abi

            try:
                abi = await self._fetch_with_retries(key)
            except ExplorerHostError as e:
                # Transient failure, left out of the memory cache
                logger.error(str(e))
                return None
            self._memory_cache[key] = abi

        if abi is not None and self.abi_cache is not None:
            self.abi_cache.put(key, abi)
        return abi

    async def _fetch_with_retries(self, key: AbiCacheKey) -> list[dict[str, Any]] | None:
        params = {
            "chainid": self.chain_id,
            "module": "contract",
            "action": "getabi",
            "address": checksum(key.address),
            "apikey": self.api_key,
        }

        for attempt in range(self.max_retries):
            await asyncio.sleep(self.request_delay)
            logger.debug(f"Requesting ABI for {key.address} from Etherscan (Attempt {attempt + 1})")

            try:
                response_data = await self._get_json(params)
                abi_string = handle_etherscan_error(response_data)
            except (ExplorerRateLimitError, ExplorerHostError, ClientError, asyncio.TimeoutError) as e:
                retry_secs = self.backoff * 2**attempt
                if attempt + 1 < self.max_retries:
                    logger.warning(
                        f"Etherscan request for {key.address} failed: {e}...  Retrying in {retry_secs} seconds... "
                        f"(Retry Count: {attempt + 1})"
                    )
                    await asyncio.sleep(retry_secs)
                continue
            except ExplorerError as e:
                logger.info(f"No verified ABI available for {key.address}: {e}")
                return None

            return self._parse_abi(key, abi_string)

        raise ExplorerHostError(f"Failed to fetch ABI for {key.address} after {self.max_retries} attempts")

    @staticmethod
    def _parse_abi(key: AbiCacheKey, abi_string: Any) -> list[dict[str, Any]] | None:
        try:
            abi = json.loads(abi_string) if isinstance(abi_string, str) else abi_string
        except json.JSONDecodeError as e:
            logger.warning(f"Error parsing ABI for {key.address}: {e}")
            return None

        if not isinstance(abi, list):
            logger.warning(f"Invalid ABI format for {key.address}: not an array")
            return None

        logger.debug(f"Successfully fetched ABI for {key.address} with {len(abi)} entries")
        return abi

    async def _get_json(self, params: dict[str, Any]) -> dict[str, Any]:
        if self.session is not None:
            return await self._query(self.session, params)

        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=30)) as session:
            return await self._query(session, params)

    async def _query(self, session: aiohttp.ClientSession, params: dict[str, Any]) -> dict[str, Any]:
        async with session.get(self.base_url, params=params) as response:
            match response.status:
                case 200:
                    pass
                case 429:
                    raise ExplorerRateLimitError("Etherscan Initializing Rate Limits")
                case 500 | 502 | 503 | 504:
                    raise ExplorerHostError(f"Etherscan Internal Server Error ({response.status})")
                case _:
                    raise ExplorerError(f"Unexpected Response Status Code ({response.status}) for Etherscan API")

            try:
                response_data = await response.json()
            except (ContentTypeError, json.JSONDecodeError):
                raise ExplorerHostError(f"Etherscan returned a non-JSON response: {(await response.text())[:200]}")

        if not isinstance(response_data, dict):
            raise ExplorerError("Unexpected Etherscan response format")
        return response_data
