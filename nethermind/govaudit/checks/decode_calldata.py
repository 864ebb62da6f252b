import asyncio
import logging

from nethermind.govaudit.exceptions import ConfigurationError
from nethermind.govaudit.narration import CalldataNarrator, Narration
from nethermind.govaudit.trace import find_matching_call, resolve_proxy_depth
from nethermind.govaudit.types import Call, ProposalAction
from nethermind.govaudit.utils import checksum

from .base import CheckResult, ProposalContext

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("checks")


class DecodeCalldataCheck:
    """
    Describes each proposal action in plain language.  Each action is located in the execution trace, followed
    through proxies, and narrated.  Actions are narrated concurrently, and reported in proposal order.
    """

    name = "Decodes target calldata into a human-readable format"

    def __init__(self, narrator: CalldataNarrator):
        self.narrator = narrator

    def _locate_call(self, action: ProposalAction, context: ProposalContext, warnings: list[str]) -> Call:
        calldata = action.calldata_with_selector
        root_calls = context.sim.call_trace.calls if context.sim.call_trace else []

        call = find_matching_call(context.timelock, calldata, root_calls)
        if call is not None:
            return resolve_proxy_depth(calldata, call)

        # Native transfers are not always recorded as a separate call in the trace
        if not (calldata == "0x" and action.value > 0):
            warnings.append(f"Could not find matching call for target {action.target} with calldata {calldata}")

        return Call(
            from_address=context.timelock,
            to_address=action.target,
            input=calldata,
            value=str(action.value),
        )

    async def _describe_action(self, action: ProposalAction, context: ProposalContext) -> Narration:
        warnings: list[str] = []
        try:
            call = self._locate_call(action, context, warnings)
            narration = await self.narrator.narrate(
                call, action.target, context.registry.identify(action.target), sender=context.timelock
            )
        except ConfigurationError:
            raise
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(f"Failed to describe action targeting {action.target}: {e}", exc_info=True)
            return Narration(
                text=f"Could not describe call to `{checksum(action.target)}`",
                warnings=warnings + [f"Error describing call to {action.target}: {e}"],
            )

        narration.warnings = warnings + narration.warnings
        return narration

    async def check_proposal(self, context: ProposalContext) -> CheckResult:
        narrations = await asyncio.gather(
            *[self._describe_action(action, context) for action in context.proposal.actions]
        )

        result = CheckResult()
        for narration in narrations:
            result.info.append(narration.text)
            result.warnings.extend(narration.warnings)
        return result
