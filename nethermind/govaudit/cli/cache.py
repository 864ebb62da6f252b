import logging
from pathlib import Path

import click

from nethermind.govaudit.cli.utils import cache_dir_option, group_options

# isort: skip_file
# pylint: disable=import-outside-toplevel

root_logger = logging.getLogger("nethermind")


@click.group("cache", short_help="Inspect the proposal simulation cache")
def cache_group():
    """Inspect the proposal simulation cache"""


@cache_group.command("status")
@click.argument("dao_name", type=str)
@click.argument("governor_address", type=str)
@click.argument("proposal_id", type=str)
@click.option(
    "--state",
    "state",
    type=str,
    default=None,
    help="Current state of the proposal (ie Active, Executed).  If not provided, the state is unknown and the "
    "proposal always needs simulation",
)
@group_options(cache_dir_option)
def status_command(dao_name: str, governor_address: str, proposal_id: str, state: str | None, cache_dir: Path):
    """Reports whether a proposal needs to be simulated, or can be served from the cache"""
    from datetime import datetime, timezone

    from nethermind.govaudit.cache import JsonFileCache, ProposalCache
    from nethermind.govaudit.cli.utils import cli_logger_config
    from nethermind.govaudit.config import AuditConfig

    console = cli_logger_config(root_logger)
    config = AuditConfig.from_env(cache_dir=cache_dir)
    proposal_cache = ProposalCache(JsonFileCache(config.cache_dir / "proposals"), ttl=config.proposal_cache_ttl)

    entry = proposal_cache.get(dao_name, governor_address, proposal_id)
    if entry is None:
        console.print(f"Proposal {proposal_id} is not cached")
    else:
        cached_at = datetime.fromtimestamp(entry.timestamp, tz=timezone.utc).isoformat()
        console.print(f"Proposal {proposal_id} cached at {cached_at} in state {entry.proposal_state}")

    if proposal_cache.needs_simulation(dao_name, governor_address, proposal_id, state):
        console.print("[yellow]Proposal needs simulation")
    else:
        console.print("[green]Cached simulation is up to date")
