import logging
import os
from decimal import Decimal, InvalidOperation
from logging import Logger
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from nethermind.govaudit.config import DEFAULT_DUST_THRESHOLD

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("govaudit").getChild("cli")


def cli_logger_config(instrument_logger: Logger, verbose: bool = False) -> Console:
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


def _parse_decimal(ctx, param, value):  # pylint: disable=unused-argument
    try:
        return Decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"{value} is not a decimal number")  # pylint: disable=raise-missing-from


# -------------------------------------------------------
#    CLI Secrets, Connections, and Configurations
# -------------------------------------------------------
api_key_option = click.option(
    "--api-key",
    "api_key",
    default=os.environ.get("ETHERSCAN_API_KEY"),
    help="Etherscan API key for fetching verified ABIs.  If not provided, will use the ETHERSCAN_API_KEY "
    "environment variable",
)
json_rpc_option = click.option(
    "--json-rpc",
    "-rpc",
    "json_rpc",
    default=os.environ.get("JSON_RPC"),
    help="RPC url for reading ERC20 token metadata.  If not provided, will use the JSON_RPC environment variable",
)
cache_dir_option = click.option(
    "--cache-dir",
    "cache_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=os.environ.get("GOVAUDIT_CACHE_DIR", "cache"),
    show_default=True,
    help="Directory for the ABI & proposal simulation caches",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging",
)

# -------------------------------------------------------
#    Audit Parameters
# -------------------------------------------------------
timelock_option = click.option(
    "--timelock",
    "timelock",
    type=str,
    default=None,
    help="Address of the timelock executing the proposal.  Overrides the timelock stored in the input file",
)
output_option = click.option(
    "--output",
    "-o",
    "output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="File to write the markdown report to.  If not provided, the report is printed to the console",
)
dust_threshold_option = click.option(
    "--dust-threshold",
    "dust_threshold",
    type=str,
    callback=_parse_decimal,
    default=str(DEFAULT_DUST_THRESHOLD),
    show_default=True,
    help="ETH balance changes smaller than this amount are not reported",
)
