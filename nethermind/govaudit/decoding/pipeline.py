import dataclasses
import logging
from typing import Protocol, Sequence

from nethermind.govaudit.clients.etherscan import EtherscanClient
from nethermind.govaudit.clients.signatures import SignatureLookupClient
from nethermind.govaudit.exceptions import ConfigurationError, DecodingError, SignatureLookupError
from nethermind.govaudit.types.decoding import DecodedFunction, DecodeSource
from nethermind.govaudit.utils import canonical_address, hex_to_bytes, selector_of

from .cache import DecodeCache
from .dispatcher import DecodingDispatcher
from .utils import signature_to_name

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("decoding")


class DecodeStrategy(Protocol):
    """Single tier of the decoding pipeline"""

    name: str

    async def decode(self, target: str, calldata: str) -> DecodedFunction | None:
        """Returns the decoded function, or None if this tier cannot decode the calldata"""
        raise NotImplementedError()


class CachedDecodeStrategy:
    """Returns decodings produced earlier in the same run"""

    name = "cache"

    def __init__(self, cache: DecodeCache):
        self.cache = cache

    async def decode(self, target: str, calldata: str) -> DecodedFunction | None:
        cached = self.cache.get(target, calldata)
        if cached is None:
            return None
        return dataclasses.replace(cached, source=DecodeSource.cache)


class VerifiedAbiStrategy:
    """
    Decodes calldata with the verified ABI of the target contract, fetched from the block explorer.  Every
    function in the ABI whose selector matches the calldata is attempted.
    """

    name = "verified_abi"

    _dispatchers: dict[str, DecodingDispatcher | None]

    def __init__(self, explorer: EtherscanClient):
        self.explorer = explorer
        self._dispatchers = {}

    async def _get_dispatcher(self, target: str) -> DecodingDispatcher | None:
        address = canonical_address(target)
        if address in self._dispatchers:
            return self._dispatchers[address]

        abi = await self.explorer.fetch_abi(address)
        if abi is None:
            # Definitive misses are memoized by the explorer client
            return None

        dispatcher: DecodingDispatcher | None = DecodingDispatcher()
        try:
            dispatcher.add_abi(address, abi)
        except (DecodingError, KeyError, TypeError) as e:
            logger.warning(f"Could not load verified ABI for {address}: {e}")
            dispatcher = None

        self._dispatchers[address] = dispatcher
        return dispatcher

    async def decode(self, target: str, calldata: str) -> DecodedFunction | None:
        dispatcher = await self._get_dispatcher(target)
        if dispatcher is None:
            return None
        return dispatcher.decode_function(hex_to_bytes(calldata))


class SignatureLookupStrategy:
    """
    Resolves the function name from a public signature database.  Only the name is available from signature
    databases, so arguments are not decoded.
    """

    name = "signature_lookup"

    def __init__(self, client: SignatureLookupClient):
        self.client = client

    async def decode(self, target: str, calldata: str) -> DecodedFunction | None:
        selector = selector_of(calldata)
        try:
            candidates = await self.client.lookup(selector)
        except SignatureLookupError as e:
            logger.warning(f"Signature lookup failed for selector {selector}: {e}")
            return None

        if not candidates:
            return None

        return DecodedFunction(
            name=signature_to_name(candidates[0]),
            args=[],
            arg_names=[],
            function_signature=candidates[0],
            source=DecodeSource.signature_lookup,
        )


class FunctionDecoder:
    """
    Resolves calldata into a function name & arguments by attempting each decoding strategy in order, and
    short-circuiting on the first success.  The default order is the in-memory cache, the verified ABI from
    the block explorer, and the public signature database.

    Failures in a strategy are logged and treated as a miss, so the next strategy is attempted.
    """

    strategies: list[DecodeStrategy]
    cache: DecodeCache

    def __init__(self, strategies: Sequence[DecodeStrategy], cache: DecodeCache | None = None):
        self.strategies = list(strategies)
        self.cache = cache if cache is not None else DecodeCache()

    @classmethod
    def from_clients(
        cls,
        explorer: EtherscanClient,
        signature_client: SignatureLookupClient,
        cache: DecodeCache | None = None,
    ) -> "FunctionDecoder":
        """Creates the default cache -> verified ABI -> signature database pipeline"""
        cache = cache if cache is not None else DecodeCache()
        return cls(
            strategies=[
                CachedDecodeStrategy(cache),
                VerifiedAbiStrategy(explorer),
                SignatureLookupStrategy(signature_client),
            ],
            cache=cache,
        )

    async def decode(self, target: str, calldata: str) -> DecodedFunction | None:
        """
        Decodes calldata sent to target

        :param target: address of the called contract
        :param calldata: hex calldata, including the 4 byte selector
        :return: DecodedFunction, or None if every strategy failed
        """
        try:
            if len(hex_to_bytes(calldata)) < 4:
                return None
        except ValueError:
            logger.warning(f"Calldata for {target} is not valid hex: {calldata}")
            return None

        for strategy in self.strategies:
            try:
                decoded = await strategy.decode(target, calldata)
            except ConfigurationError:
                raise
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error(f"Unexpected error in {strategy.name} decoder for {target}: {e}", exc_info=True)
                continue

            if decoded is None:
                logger.debug(f"{strategy.name} could not decode selector {selector_of(calldata)} for {target}")
                continue

            if decoded.source != DecodeSource.cache:
                self.cache.put(target, calldata, decoded)
            return decoded

        logger.info(f"Could not decode selector {selector_of(calldata)} for {target}")
        return None
