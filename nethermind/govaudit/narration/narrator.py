import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from eth_utils import function_signature_to_4byte_selector

from nethermind.govaudit.decoding import FunctionDecoder
from nethermind.govaudit.decoding.utils import decode_evm_abi_from_types
from nethermind.govaudit.tokens import ERC20Token, TokenMetadataProvider
from nethermind.govaudit.types import Call, DecodedFunction, DecodeSource
from nethermind.govaudit.utils import NATIVE_DECIMALS, checksum, format_units, hex_to_bytes, parse_int, selector_of

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("narration")

COMPLEX_OBJECT = "[Complex Object]"


@dataclass
class Narration:
    """One-line description of a call, and the warnings raised while describing it"""

    text: str
    warnings: list[str] = field(default_factory=list)


def _json_safe(value: Any) -> Any:
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (str, float)):
        return value
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def format_value(value: Any) -> str:
    """
    Formats a decoded argument for display.  Integers are printed in full, and nested structures are printed
    as JSON with integers converted to decimal strings.

    >>> format_value(2**200)
    '1606938044258990275541962092341162602522202993782792835301376'
    >>> format_value((1, b"\\x01"))
    '["1", "0x01"]'
    """
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(_json_safe(value))
    return str(value)


def format_args(args: list[Any], arg_names: list[str] | None = None) -> str:
    """
    Formats decoded arguments as comma separated ``name=value`` pairs.  Unnamed arguments are printed as the
    bare value.  If an argument cannot be serialized, a placeholder is returned for the whole argument list.
    """
    if not args:
        return ""

    arg_names = arg_names or []
    try:
        formatted = []
        for index, arg in enumerate(args):
            name = arg_names[index] if index < len(arg_names) else ""
            value = format_value(arg)
            formatted.append(f"{name}={value}" if name else value)
        return ", ".join(formatted)
    except (TypeError, ValueError) as e:
        logger.debug(f"Could not format arguments {args!r}: {e}")
        return COMPLEX_OBJECT


TokenTemplate = Callable[[str, tuple[Any, ...], str, str], str]


def _approve(sender: str, args: tuple[Any, ...], amount: str, contract: str) -> str:
    spender, _ = args
    return f"`{sender}` approves `{checksum(spender)}` to spend {amount} on {contract} (formatted)"


def _transfer(sender: str, args: tuple[Any, ...], amount: str, contract: str) -> str:
    recipient, _ = args
    return f"`{sender}` transfers {amount} to `{checksum(recipient)}` on {contract} (formatted)"


def _transfer_from(sender: str, args: tuple[Any, ...], amount: str, contract: str) -> str:
    owner, recipient, _ = args
    return (
        f"`{sender}` transfers {amount} from `{checksum(owner)}` to `{checksum(recipient)}` on {contract} (formatted)"
    )


TOKEN_TEMPLATES: dict[str, tuple[list[str], TokenTemplate]] = {
    "0x" + function_signature_to_4byte_selector(signature).hex(): (types, template)
    for signature, types, template in [
        ("approve(address,uint256)", ["address", "uint256"], _approve),
        ("transfer(address,uint256)", ["address", "uint256"], _transfer),
        ("transferFrom(address,address,uint256)", ["address", "address", "uint256"], _transfer_from),
    ]
}


def decode_token_call(calldata: str) -> tuple[Any, ...] | None:
    """
    Decodes the arguments of an ERC20 approve, transfer or transferFrom call with the canonical ERC20 types.
    Returns None for other selectors, or calldata that does not match the canonical types.
    """
    selector = selector_of(calldata)
    if selector not in TOKEN_TEMPLATES:
        return None
    types, _ = TOKEN_TEMPLATES[selector]
    try:
        data = hex_to_bytes(calldata)[4:]
    except ValueError:
        return None
    return decode_evm_abi_from_types(types, data)


def _simulation_signature(call: Call) -> str:
    def _params(arguments) -> str:
        return ", ".join(f"{arg.type} {arg.name}" if arg.name else arg.type for arg in arguments or [])

    signature = f"{call.function_name}({_params(call.decoded_input)})"
    if call.decoded_output:
        signature += f"({_params(call.decoded_output)})"
    return signature


class CalldataNarrator:
    """
    Turns a call from a proposal execution into a one-line description.  Descriptions are attempted in order:

    * Native asset transfers (empty calldata with value)
    * ERC20 approve, transfer & transferFrom, with amounts formatted by the token decimals
    * Calls decoded by the :class:`~nethermind.govaudit.decoding.FunctionDecoder`
    * Calls decoded by the simulation provider
    * Undecoded calls, described by their selector, which also raise a warning
    """

    decoder: FunctionDecoder
    tokens: TokenMetadataProvider
    native_symbol: str

    def __init__(
        self,
        decoder: FunctionDecoder,
        tokens: TokenMetadataProvider | None = None,
        native_symbol: str = "ETH",
    ):
        self.decoder = decoder
        self.tokens = tokens if tokens is not None else TokenMetadataProvider()
        self.native_symbol = native_symbol

    async def narrate(
        self, call: Call, target: str, contract_identifier: str, sender: str | None = None
    ) -> Narration:
        """
        Describes a call

        :param call: call from the execution trace, or a call synthesized from the proposal action
        :param target: address targeted by the proposal action.  Token metadata is read from this address, so
            proxied tokens are described by the proxy rather than the implementation
        :param contract_identifier: display name of the target contract
        :param sender: address issuing the proposal action.  Defaults to the sender of ``call``
        """
        sender = checksum(sender or call.from_address)
        calldata = call.input or "0x"
        value = parse_int(call.value)

        if calldata in ("0x", "") and value > 0:
            amount = format_units(value, NATIVE_DECIMALS)
            return Narration(f"`{sender}` transfers {amount} {self.native_symbol} to `{checksum(target)}` (formatted)")

        token_narration = await self._narrate_token_call(call, target, sender, contract_identifier)
        if token_narration is not None:
            return token_narration

        decoded = await self.decoder.decode(target, calldata)
        if decoded is not None:
            return Narration(self._describe_decoded(sender, decoded, contract_identifier))

        if call.function_name:
            return Narration(self._describe_simulation_decoding(sender, call, contract_identifier))

        selector = selector_of(calldata)
        return Narration(
            text=f"`{sender}` calls `{selector}` on {contract_identifier} (not decoded)",
            warnings=[f"Could not decode function with selector {selector} for contract {checksum(target)}"],
        )

    async def _narrate_token_call(
        self, call: Call, target: str, sender: str, contract_identifier: str
    ) -> Narration | None:
        args = decode_token_call(call.input)
        if args is None:
            return None

        _, template = TOKEN_TEMPLATES[selector_of(call.input)]
        token = await self.tokens.get_token(target)
        return Narration(template(sender, args, self._token_amount(token, args[-1]), contract_identifier))

    @staticmethod
    def _token_amount(token: ERC20Token | None, raw_amount: int) -> str:
        if token is None:
            return f"{raw_amount} (raw amount, token metadata unavailable)"
        return token.human_readable(raw_amount)

    @staticmethod
    def _describe_decoded(sender: str, decoded: DecodedFunction, contract_identifier: str) -> str:
        arguments = format_args(decoded.args, decoded.arg_names)
        return f"`{sender}` calls `{decoded.name}({arguments})` on {contract_identifier} ({decoded.source.pretty()})"

    @staticmethod
    def _describe_simulation_decoding(sender: str, call: Call, contract_identifier: str) -> str:
        arguments = call.decoded_input or []
        rendered = ", ".join(
            f"`{arg.name}={format_value(arg.value)}`" if arg.name else f"`{format_value(arg.value)}`"
            for arg in arguments
        )
        description = f"`{sender}` calls `{_simulation_signature(call)}` on {contract_identifier}"
        if rendered:
            description += f" with arguments {rendered}"
        return f"{description} ({DecodeSource.simulation.pretty()})"
