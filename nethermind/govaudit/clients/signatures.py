import asyncio
import json
import logging
from typing import Any

import aiohttp
from aiohttp.client_exceptions import ClientError, ContentTypeError

from nethermind.govaudit.config import DEFAULT_SIGNATURE_LOOKUP_URL
from nethermind.govaudit.exceptions import SignatureLookupError

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("signatures")

# pylint: disable=raise-missing-from


class SignatureLookupClient:
    """
    Looks up text signatures for 4 byte function selectors from the 4byte.directory signature database.
    Candidates are returned in the order supplied by the database.
    """

    base_url: str

    def __init__(
        self,
        base_url: str = DEFAULT_SIGNATURE_LOOKUP_URL,
        session: aiohttp.ClientSession | None = None,
    ):
        self.base_url = base_url
        self.session = session
        self._cache: dict[str, list[str]] = {}

    async def lookup(self, selector: str) -> list[str]:
        """
        Returns candidate text signatures for a selector, ie ``['transfer(address,uint256)']``

        :param selector: 0x prefixed 4 byte selector
        :raises SignatureLookupError: if the signature database cannot be queried
        """
        selector = selector.lower()
        if selector in self._cache:
            return self._cache[selector]

        response_data = await self._get_json({"hex_signature": selector})
        candidates = self._parse_candidates(response_data)

        logger.debug(f"Found {len(candidates)} candidate signatures for {selector}")
        self._cache[selector] = candidates
        return candidates

    @staticmethod
    def _parse_candidates(response_data: Any) -> list[str]:
        if not isinstance(response_data, dict) or not isinstance(response_data.get("results"), list):
            raise SignatureLookupError(f"Unexpected signature database response: {str(response_data)[:200]}")

        return [
            result["text_signature"]
            for result in response_data["results"]
            if isinstance(result, dict) and result.get("text_signature")
        ]

    async def _get_json(self, params: dict[str, Any]) -> Any:
        try:
            if self.session is not None:
                return await self._query(self.session, params)

            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=10)) as session:
                return await self._query(session, params)
        except (ClientError, asyncio.TimeoutError) as e:
            raise SignatureLookupError(f"Could not connect to signature database {self.base_url}: {e}")

    async def _query(self, session: aiohttp.ClientSession, params: dict[str, Any]) -> Any:
        async with session.get(self.base_url, params=params) as response:
            if response.status != 200:
                raise SignatureLookupError(f"Signature database returned status code {response.status}")
            try:
                return await response.json()
            except (ContentTypeError, json.JSONDecodeError):
                raise SignatureLookupError("Signature database returned a non-JSON response")
