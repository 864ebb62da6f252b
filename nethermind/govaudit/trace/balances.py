import logging
from dataclasses import dataclass
from decimal import Decimal

from nethermind.govaudit.config import DEFAULT_DUST_THRESHOLD
from nethermind.govaudit.types.trace import Call, walk_calls
from nethermind.govaudit.utils import (
    NATIVE_DECIMALS,
    canonical_address,
    format_units,
    native_to_wei,
    parse_int,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("trace")


@dataclass
class BalanceRecord:
    """
    Native balance of an address observed across a trace.  ``before`` is fixed when the address is first
    seen, and ``after`` is overwritten each time the address is seen again.
    """

    before: str
    after: str


@dataclass
class BalanceChange:
    """Net balance change of an address, in wei"""

    address: str
    before: int
    after: int

    @property
    def delta(self) -> int:
        """Signed change in wei"""
        return self.after - self.before

    def is_dust(self, threshold: Decimal) -> bool:
        """
        Returns True if the absolute change is strictly below the threshold.  A change exactly equal to the
        threshold is not dust.

        :param threshold: threshold in units of the native asset (ie 0.0001 ETH)
        """
        return abs(self.delta) < native_to_wei(threshold)

    def formatted_delta(self) -> str:
        """Signed delta in native units, ie ``+0.1`` or ``-0.1``"""
        delta = format_units(self.delta, NATIVE_DECIMALS)
        return f"+{delta}" if self.delta > 0 else delta


def _record_balance(balances: dict[str, BalanceRecord], address: str, balance: str):
    key = canonical_address(address)
    record = balances.get(key)
    if record is None:
        balances[key] = BalanceRecord(before=balance, after=balance)
    else:
        record.after = balance


def aggregate_balance_changes(root_call: Call) -> dict[str, BalanceRecord]:
    """
    Walks a call trace in pre-order, and tracks the first and last balance snapshot of every address that
    appears as the sender or receiver of a call.

    .. note::
        ``after`` is the last snapshot in traversal order.  For traces where independent branches touch the
        same address, traversal order is not guaranteed to be the chronological execution order

    :param root_call: root of the call trace
    :return: mapping of canonical (lower case) addresses to balance records.  Insertion order is the order
        addresses were first seen.
    """
    balances: dict[str, BalanceRecord] = {}

    for call in walk_calls([root_call]):
        if call.from_address and call.from_balance:
            _record_balance(balances, call.from_address, call.from_balance)
        if call.to_address and call.to_balance:
            _record_balance(balances, call.to_address, call.to_balance)

    logger.debug(f"Tracked native balances for {len(balances)} addresses")
    return balances


def compute_balance_changes(
    balances: dict[str, BalanceRecord],
    dust_threshold: Decimal = DEFAULT_DUST_THRESHOLD,
) -> list[BalanceChange]:
    """
    Converts balance records into balance changes, dropping changes with an absolute value below the dust
    threshold.

    :param balances: result of :func:`aggregate_balance_changes`
    :param dust_threshold: threshold in native units
    :return: surviving balance changes, in the order addresses were first seen
    """
    changes = []
    for address, record in balances.items():
        change = BalanceChange(address=address, before=parse_int(record.before), after=parse_int(record.after))
        if change.is_dust(dust_threshold):
            logger.debug(f"Skipping dust balance change of {change.delta} wei for {address}")
            continue
        changes.append(change)
    return changes
