import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence

from nethermind.govaudit.exceptions import TraceError
from nethermind.govaudit.utils import canonical_address, checksum

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("trace")


@dataclass
class DecodedArgument:
    """Single argument decoded by the simulation provider"""

    name: str
    type: str
    value: Any

    @classmethod
    def from_json(cls, argument: dict[str, Any]) -> "DecodedArgument":
        soltype = argument.get("soltype") or {}
        return cls(
            name=soltype.get("name") or "",
            type=soltype.get("type") or "",
            value=argument.get("value"),
        )


@dataclass
class Call:
    """
    Node in a simulated execution trace.  Only the fields read during proposal audits are kept, the richer
    shape returned by simulation providers is converted once by :meth:`Call.from_json`
    """

    from_address: str
    to_address: str
    input: str = "0x"
    value: str | None = None

    from_balance: str | None = None
    """ Wei balance snapshot of from_address, as a decimal string """

    to_balance: str | None = None
    """ Wei balance snapshot of to_address, as a decimal string """

    function_name: str | None = None
    decoded_input: list[DecodedArgument] | None = None
    decoded_output: list[DecodedArgument] | None = None

    calls: list["Call"] = field(default_factory=list)
    """ Sub-calls made during this call.  List order is execution order """

    @classmethod
    def _from_node(cls, node: dict[str, Any]) -> "Call":
        if not isinstance(node, dict):
            raise TraceError(f"Expected call trace node to be an object, got {type(node).__name__}")

        decoded_input = node.get("decoded_input")
        decoded_output = node.get("decoded_output")

        return cls(
            from_address=node.get("from") or "",
            to_address=node.get("to") or "",
            input=node.get("input") or "0x",
            value=_optional_str(node.get("value")),
            from_balance=_optional_str(node.get("from_balance")),
            to_balance=_optional_str(node.get("to_balance")),
            function_name=node.get("function_name") or None,
            decoded_input=[DecodedArgument.from_json(arg) for arg in decoded_input] if decoded_input else None,
            decoded_output=[DecodedArgument.from_json(arg) for arg in decoded_output] if decoded_output else None,
        )

    @classmethod
    def from_json(cls, trace: dict[str, Any]) -> "Call":
        """
        Converts the call trace JSON returned by the simulation provider into a tree of Calls.  Conversion is
        iterative, so traces nested deeper than the interpreter recursion limit are supported.

        :param trace: call trace object, with nested sub-calls stored under the ``calls`` key
        :return: root Call
        """
        root = cls._from_node(trace)
        stack: list[tuple[Call, Sequence[dict[str, Any]]]] = [(root, trace.get("calls") or [])]

        while stack:
            parent, children = stack.pop()
            for child_json in children:
                child = cls._from_node(child_json)
                parent.calls.append(child)
                stack.append((child, child_json.get("calls") or []))

        return root


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def walk_calls(roots: Sequence[Call]) -> Iterator[Call]:
    """
    Depth first pre-order traversal over a forest of calls.  Each root is yielded, followed by all of its
    sub-calls, before moving onto the next root.
    """
    stack = list(reversed(roots))
    while stack:
        call = stack.pop()
        yield call
        stack.extend(reversed(call.calls))


@dataclass
class ContractInfo:
    """Contract metadata returned alongside a simulation.  Used for resolving display names"""

    address: str
    contract_name: str
    verified_by: str | None = None
    token_name: str | None = None

    @classmethod
    def from_json(cls, contract: dict[str, Any]) -> "ContractInfo":
        token_data = contract.get("token_data") or {}
        return cls(
            address=contract["address"],
            contract_name=contract.get("contract_name") or "",
            verified_by=contract.get("verified_by"),
            token_name=token_data.get("name"),
        )


@dataclass
class SimulationResult:
    """Subset of a simulated proposal execution used by the proposal checks"""

    call_trace: Call | None
    contracts: list[ContractInfo] = field(default_factory=list)
    block_number: int | None = None

    @classmethod
    def from_json(cls, sim: dict[str, Any]) -> "SimulationResult":
        """
        Parses simulation JSON.  A missing or null call trace is valid, and is represented as ``None``

        :param sim: ``{"transaction": {"block_number": .., "transaction_info": {"call_trace": ..}}, "contracts": []}``
        """
        transaction = sim.get("transaction") or {}
        if not isinstance(transaction, dict):
            raise TraceError("Simulation 'transaction' field must be an object")

        transaction_info = transaction.get("transaction_info") or {}
        call_trace_json = transaction_info.get("call_trace")

        if call_trace_json is None:
            logger.debug("Simulation does not contain a call trace")
            call_trace = None
        else:
            call_trace = Call.from_json(call_trace_json)

        try:
            contracts = [ContractInfo.from_json(c) for c in sim.get("contracts") or []]
        except KeyError as e:
            raise TraceError(f"Contract entry missing required field {e}") from e

        return cls(
            call_trace=call_trace,
            contracts=contracts,
            block_number=transaction.get("block_number"),
        )


UNKNOWN_CONTRACT_NAME = "unknown contract name"


class ContractRegistry:
    """
    Resolves display names for the contracts touched by a simulation.  Addresses are matched
    case-insensitively, and addresses missing from the registry resolve to a placeholder name.
    """

    def __init__(self, contracts: Sequence[ContractInfo] = ()):
        self._contracts: dict[str, ContractInfo] = {}
        for contract in contracts:
            self._contracts.setdefault(canonical_address(contract.address), contract)

    def __contains__(self, address: str) -> bool:
        return canonical_address(address) in self._contracts

    def get(self, address: str) -> ContractInfo | None:
        return self._contracts.get(canonical_address(address))

    def name_of(self, address: str) -> str:
        contract = self.get(address)
        if contract is None or not contract.contract_name:
            return UNKNOWN_CONTRACT_NAME
        if contract.token_name:
            return f"{contract.contract_name} ({contract.token_name})"
        return contract.contract_name

    def describe(self, address: str) -> str:
        """Returns the display name of a contract, ie ``Timelock at `0x1a9C8182...` ``"""
        return f"{self.name_of(address)} at `{checksum(address)}`"

    def identify(self, address: str) -> str:
        """Display name for known contracts, and the bare checksum address for unknown ones"""
        if address in self:
            return self.describe(address)
        return f"`{checksum(address)}`"
