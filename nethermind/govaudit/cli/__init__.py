import click

from nethermind.govaudit.cli.audit import audit_command, decode_command
from nethermind.govaudit.cli.cache import cache_group


@click.group()
def govaudit_cli():
    """Command Line Interface for Nethermind Governance Proposal Auditing"""


# Adding Commands
govaudit_cli.add_command(audit_command, name="audit")
govaudit_cli.add_command(decode_command, name="decode")
govaudit_cli.add_command(cache_group, name="cache")
