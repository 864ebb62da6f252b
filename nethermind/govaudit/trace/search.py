import logging
from typing import Sequence

from nethermind.govaudit.types.trace import Call, walk_calls
from nethermind.govaudit.utils import addresses_match, normalize_hex

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("trace")


def find_matching_call(from_address: str, calldata: str, root_calls: Sequence[Call]) -> Call | None:
    """
    Searches a forest of calls for the first call sent by ``from_address`` with exactly ``calldata`` as input.
    Calls are visited depth first in pre-order, so a parent is matched before any of its sub-calls, and all
    sub-calls of a root are searched before the next root.

    The full tree is searched since a proposal action can occur at any depth.  If the governor is executed
    by a contract instead of an EOA, the timelock call is nested deeper inside the trace.

    :param from_address: sender address.  Compared case-insensitively
    :param calldata: hex calldata including the function selector.  Must match byte-for-byte
    :param root_calls: top level calls of the trace
    :return: matching Call, or None if no call in the trace matches
    """
    target_calldata = normalize_hex(calldata)

    for call in walk_calls(root_calls):
        if addresses_match(call.from_address, from_address) and normalize_hex(call.input) == target_calldata:
            return call

    logger.debug(f"No call from {from_address} with calldata {target_calldata[:10]}... found in trace")
    return None


def resolve_proxy_depth(calldata: str, call: Call) -> Call:
    """
    Follows a matched call down through proxies.  A proxy re-issues identical calldata to its implementation,
    so while the first sub-call has the same input, descend into it.  The deepest frame is the call holding
    the decoded implementation details, while the outer frames are undecorated fallback functions.

    :param calldata: calldata of the matched call
    :param call: matched call
    :return: deepest call with identical calldata
    """
    target_calldata = normalize_hex(calldata)

    while call.calls and normalize_hex(call.calls[0].input) == target_calldata:
        call = call.calls[0]

    return call
