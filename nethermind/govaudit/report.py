from typing import Sequence

from nethermind.govaudit.checks import CheckReport, CheckResult

PASSED = "✅ Passed"
PASSED_WITH_WARNINGS = "❗❗ **Passed with warnings**"
FAILED = "❌ **Failed**"


def check_status(result: CheckResult) -> str:
    if not result.passed:
        return FAILED
    if result.warnings:
        return PASSED_WITH_WARNINGS
    return PASSED


def bullet(text: str) -> str:
    return f"- {text}"


def _section(title: str, lines: list[str]) -> list[str]:
    if not lines:
        return []
    return [f"**{title}**:", "", *[bullet(line) for line in lines], ""]


def render_check(report: CheckReport) -> str:
    """Renders a single check as a markdown section"""
    result = report.result
    lines = [f"### {report.name} {check_status(result)}", ""]
    lines += _section("Errors", result.errors)
    lines += _section("Warnings", result.warnings)
    lines += _section("Info", result.info)
    return "\n".join(lines).rstrip() + "\n"


def render_report(reports: Sequence[CheckReport], title: str | None = None) -> str:
    """
    Renders check results as a markdown document.  Checks are rendered in the order they were run.

    :param reports: results of :meth:`~nethermind.govaudit.checks.ProposalCheckRunner.run`
    :param title: optional document heading
    """
    sections = [f"# {title}\n"] if title else []
    sections += [render_check(report) for report in reports]
    return "\n".join(sections)
