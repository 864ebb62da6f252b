from decimal import Decimal

from nethermind.govaudit.config import DEFAULT_DUST_THRESHOLD
from nethermind.govaudit.trace import aggregate_balance_changes, compute_balance_changes
from nethermind.govaudit.utils import NATIVE_DECIMALS, format_units

from .base import CheckResult, ProposalContext

NO_BALANCE_CHANGES = "No ETH balance changes"


class EthBalanceChangesCheck:
    """
    Reports the net native balance change of every address touched by the proposal execution.  Changes
    smaller than the dust threshold are omitted.
    """

    name = "Reports all ETH balance changes from the proposal"

    def __init__(self, dust_threshold: Decimal = DEFAULT_DUST_THRESHOLD, native_symbol: str = "ETH"):
        self.dust_threshold = dust_threshold
        self.native_symbol = native_symbol

    async def check_proposal(self, context: ProposalContext) -> CheckResult:
        if context.sim.call_trace is None:
            return CheckResult(info=[NO_BALANCE_CHANGES])

        balances = aggregate_balance_changes(context.sim.call_trace)
        changes = compute_balance_changes(balances, self.dust_threshold)
        if not changes:
            return CheckResult(info=[NO_BALANCE_CHANGES])

        symbol = self.native_symbol
        return CheckResult(
            info=[
                f"{context.registry.describe(change.address)}: "
                f"{format_units(change.before, NATIVE_DECIMALS)} {symbol} → "
                f"{format_units(change.after, NATIVE_DECIMALS)} {symbol} "
                f"({change.formatted_delta()} {symbol})"
                for change in changes
            ]
        )
