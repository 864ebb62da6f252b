import logging
from typing import Any, Sequence

from eth_typing import ABIFunction

from nethermind.govaudit.exceptions import DecodingError
from nethermind.govaudit.types.decoding import DecodedFunction

from .function_decoders import EVMFunctionDecoder
from .utils import filter_functions

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("decoding")


class DecodingDispatcher:
    """

    Dispatcher for decoding calldata with one or more ABIs.  Every function decoder sharing a selector is kept,
    ordered by ABI priority, and each is attempted until the calldata decodes exactly.

    """

    loaded_abis: list[str]
    """ Names of ABIs loaded into the dispatcher """

    function_decoders: dict[bytes, list[EVMFunctionDecoder]]
    """ Dictionary mapping function selectors to decoders, sorted by descending priority """

    def __init__(self):
        self.loaded_abis = []
        self.function_decoders = {}

    def add_abi(self, abi_name: str, abi_data: Any, priority: int = 0):
        """
        Adds ABI to DecodingDispatcher.  If 2 abis share a function selector, the ABI with the higher priority
        is attempted first when decoding that selector.

        :param abi_name: Name of ABI
        :param abi_data: ABI data as a list of ABI element dicts
        :param priority: Priority of ABI.  Higher is better, negative priority is lower than default
        """
        if abi_name in self.loaded_abis:
            error_msg = f"{abi_name} ABI already loaded into dispatcher"
            logger.error(error_msg)
            raise DecodingError(error_msg)

        if not isinstance(abi_data, list):
            raise DecodingError(f"ABI {abi_name} must be a list of ABI elements")

        abi_functions: list[ABIFunction] = filter_functions(abi_data)
        self.add_function_decoders([EVMFunctionDecoder(f, abi_name, priority) for f in abi_functions])

        self.loaded_abis.append(abi_name)
        logger.debug(f"Added {len(abi_functions)} functions from ABI {abi_name} with priority {priority}")

    def add_function_decoders(self, functions: Sequence[EVMFunctionDecoder]):
        """
        Adds function decoders to the dispatcher.  Decoders for an already loaded selector are inserted after
        all decoders with an equal or higher priority.

        :param functions:
        """
        for func in functions:
            decoders = self.function_decoders.setdefault(func.signature, [])
            if any(d.function_signature == func.function_signature and d.priority == func.priority for d in decoders):
                logger.debug(
                    f"Function {func.function_signature} from ABI {func.abi_name} already loaded with "
                    f"priority {func.priority}.  Defaulting to first loaded decoder..."
                )
                continue

            insert_at = next((i for i, d in enumerate(decoders) if d.priority < func.priority), len(decoders))
            decoders.insert(insert_at, func)

    def decode_function(self, calldata: bytes) -> DecodedFunction | None:
        """
        Decodes calldata with every loaded function decoder matching its selector.

        :param calldata: full calldata bytes, including the 4 byte selector
        :return: first successful decoding, or None if no loaded function decodes the calldata
        """
        if len(calldata) < 4:
            return None

        for decoder in self.function_decoders.get(calldata[:4], []):
            decoded = decoder.decode(calldata)
            if decoded is not None:
                return decoded

        return None
