import logging
from typing import Any, Callable, Sequence

from eth_typing import ABIFunction
from eth_utils import to_checksum_address
from eth_utils.abi import function_signature_to_4byte_selector, get_abi_input_types

from nethermind.govaudit.types.decoding import DecodedFunction, DecodeSource

from .utils import abi_to_signature, decode_evm_abi_from_types

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("decoding")


class EVMFunctionDecoder:
    """
    Represents a single EVM function selector.  Parses input types once to efficiently decode calldata
    with its selector
    """

    name: str
    abi_name: str
    function_signature: str
    signature: bytes
    priority: int

    _input_types: list[str]
    _input_names: list[str]

    _formatters: dict[str, Callable[[Any], Any]] = {}

    def __init__(self, abi_function: ABIFunction, abi_name: str, priority: int = 0):
        self.priority = priority
        self.abi_name = abi_name
        self.name = abi_function["name"]

        self._input_types = list(get_abi_input_types(abi_function))
        self._input_names = [abi_input.get("name", "") for abi_input in abi_function.get("inputs", [])]

        self.function_signature = abi_to_signature(abi_function)
        self.signature = function_signature_to_4byte_selector(self.function_signature)

        self._formatters = {"address": to_checksum_address}

    def decode(self, calldata: bytes) -> DecodedFunction | None:
        """
        Decodes function arguments from calldata.

        :param calldata: full calldata bytes, including the 4 byte selector
        :return: DecodedFunction, or None if the calldata does not match the function inputs
        """
        if calldata[:4] != self.signature:
            logger.debug(f"Selector 0x{calldata[:4].hex()} does not match {self.function_signature}")
            return None

        decoded_input = decode_evm_abi_from_types(self._input_types, calldata[4:])
        if decoded_input is None:
            logger.debug(f"Error Decoding {self.function_signature} for calldata 0x{calldata.hex()}")
            return None

        return DecodedFunction(
            name=self.name,
            args=self.apply_formatters(decoded_input, self._input_types),
            arg_names=list(self._input_names),
            function_signature=self.function_signature,
            source=DecodeSource.verified_abi,
        )

    def apply_formatters(self, decoding_result: Sequence[Any], types: list[str]) -> list[Any]:
        """
        Applies currently loaded formatted to decoding result.

        :param decoding_result: List of values returned from ABI Decoding
        :param types: List of types for each entry in decoding_result
        """
        formatted_values = []
        for value, typ in zip(decoding_result, types, strict=True):
            formatter = self._formatters.get(typ)
            if formatter is not None:
                formatted_values.append(formatter(value))
            else:
                formatted_values.append(value)

        return formatted_values
