import asyncio
import logging
from decimal import Decimal
from pathlib import Path

import click

from nethermind.govaudit.cli.utils import (
    api_key_option,
    cache_dir_option,
    dust_threshold_option,
    group_options,
    json_rpc_option,
    output_option,
    timelock_option,
    verbose_option,
)

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel,too-many-locals

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("cli")

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@click.command("audit")
@click.argument("simulation_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@group_options(
    timelock_option,
    output_option,
    dust_threshold_option,
    api_key_option,
    json_rpc_option,
    cache_dir_option,
    verbose_option,
)
def audit_command(
    simulation_json: Path,
    timelock: str | None,
    output: Path | None,
    dust_threshold: Decimal,
    api_key: str | None,
    json_rpc: str | None,
    cache_dir: Path,
    verbose: bool,
):
    """
    Audits a simulated governance proposal, and generates a markdown report describing each proposal action
    and the ETH balance changes of the execution.

    SIMULATION_JSON is a file containing {"proposal": .., "sim": .., "timelock": ..}, or a cached proposal
    simulation.
    """
    from rich.markdown import Markdown

    from nethermind.govaudit.audit import audit_proposal, load_context_file
    from nethermind.govaudit.cli.utils import cli_logger_config
    from nethermind.govaudit.config import AuditConfig
    from nethermind.govaudit.exceptions import ConfigurationError, TraceError
    from nethermind.govaudit.report import render_report

    console = cli_logger_config(root_logger, verbose)

    config = AuditConfig.from_env(
        etherscan_api_key=api_key,
        json_rpc=json_rpc,
        cache_dir=cache_dir,
        dust_threshold=dust_threshold,
    )

    try:
        config.require_api_key()
        context = load_context_file(simulation_json, timelock)
        reports = asyncio.run(audit_proposal(context, config))
    except (ConfigurationError, TraceError) as e:
        logger.error(e)
        raise click.exceptions.Exit(1)

    report = render_report(reports, title=f"Proposal {context.proposal.proposal_id or simulation_json.stem}")

    if output:
        output.write_text(report, encoding="utf-8")
        console.print(f"[green]Report written to {output}")
    else:
        console.print(Markdown(report))


@click.command("decode")
@click.argument("target", type=str)
@click.argument("calldata", type=str)
@click.option("--sender", "sender", type=str, default=ZERO_ADDRESS, help="Address sending the call")
@click.option("--value", "value", type=int, default=0, help="Wei value sent with the call")
@group_options(api_key_option, json_rpc_option, cache_dir_option, verbose_option)
def decode_command(
    target: str,
    calldata: str,
    sender: str,
    value: int,
    api_key: str | None,
    json_rpc: str | None,
    cache_dir: Path,
    verbose: bool,
):
    """Describes a single call to TARGET with CALLDATA"""
    import aiohttp

    from nethermind.govaudit.audit import build_narrator
    from nethermind.govaudit.cli.utils import cli_logger_config
    from nethermind.govaudit.config import AuditConfig
    from nethermind.govaudit.exceptions import ConfigurationError
    from nethermind.govaudit.types import Call
    from nethermind.govaudit.utils import checksum

    console = cli_logger_config(root_logger, verbose)
    config = AuditConfig.from_env(etherscan_api_key=api_key, json_rpc=json_rpc, cache_dir=cache_dir)

    async def _narrate():
        async with aiohttp.ClientSession() as session:
            narrator = build_narrator(config, session)
            call = Call(from_address=sender, to_address=target, input=calldata, value=str(value))
            return await narrator.narrate(call, target, f"`{checksum(target)}`")

    try:
        narration = asyncio.run(_narrate())
    except ConfigurationError as e:
        logger.error(e)
        raise click.exceptions.Exit(1)

    console.print(narration.text)
    for warning in narration.warnings:
        console.print(f"[yellow]Warning: {warning}")
