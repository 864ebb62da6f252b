import logging
from dataclasses import dataclass
from typing import Sequence

from nethermind.govaudit.exceptions import ConfigurationError

from .base import CheckResult, ProposalCheck, ProposalContext

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("checks")


@dataclass
class CheckReport:
    """Result of a single named check"""

    name: str
    result: CheckResult


class ProposalCheckRunner:
    """
    Runs proposal checks in order.  An exception raised by a check is recorded as an error of that check, so
    the remaining checks still run.  Configuration errors halt the run.
    """

    checks: list[ProposalCheck]

    def __init__(self, checks: Sequence[ProposalCheck]):
        self.checks = list(checks)

    async def run(self, context: ProposalContext) -> list[CheckReport]:
        reports = []
        for check in self.checks:
            logger.info(f"Running check: {check.name}")
            try:
                result = await check.check_proposal(context)
            except ConfigurationError:
                raise
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error(f"Check '{check.name}' raised an exception: {e}", exc_info=True)
                result = CheckResult(errors=[f"Check failed with {type(e).__name__}: {e}"])

            logger.debug(
                f"Check '{check.name}' finished with {len(result.info)} info, {len(result.warnings)} warnings "
                f"and {len(result.errors)} errors"
            )
            reports.append(CheckReport(name=check.name, result=result))
        return reports
