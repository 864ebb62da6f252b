from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from nethermind.govaudit.utils import canonical_address, normalize_hex

# pylint: disable=invalid-name


class DecodeSource(Enum):
    """Decoding tier that produced a DecodedFunction"""

    cache = "cache"
    verified_abi = "verified_abi"
    signature_lookup = "signature_lookup"
    simulation = "simulation"

    def pretty(self) -> str:
        """Returns the label appended to narrated calls"""
        match self:
            case DecodeSource.cache:
                return "decoded from cache"
            case DecodeSource.verified_abi:
                return "decoded from ABI"
            case DecodeSource.signature_lookup:
                return "decoded from signature database"
            case DecodeSource.simulation:
                return "decoded by simulation"
            case _:
                raise NotImplementedError(f"Invalid DecodeSource: {self}")


@dataclass
class DecodedFunction:
    """Function Decoding Result"""

    name: str
    args: list[Any] = field(default_factory=list)

    arg_names: list[str] = field(default_factory=list)
    """ Parameter names, aligned with args.  Unnamed parameters are empty strings """

    function_signature: str | None = None
    source: DecodeSource = DecodeSource.verified_abi


class DecodeCacheKey(NamedTuple):
    """Key for cached decoding results.  Both fields are stored in canonical lower-case form"""

    target: str
    calldata: str

    @classmethod
    def create(cls, target: str, calldata: str) -> "DecodeCacheKey":
        return cls(target=canonical_address(target), calldata=normalize_hex(calldata))
