# ABOUTME: CLI package for Libris, built on Click.
# ABOUTME: Defines the root command group and registers subcommands.

import click

from libris.cli.commands import (
    account_cmd,
    add_cmd,
    edit_cmd,
    info_cmd,
    ls_cmd,
    rm_cmd,
    verify_cmd,
)
from libris.cli.runtime import configure_logging, load_config


@click.group()
@click.version_option(package_name="libris")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging on stderr.")
def cli(verbose: bool) -> None:
    """Libris - a personal library catalog with per-user ownership."""
    configure_logging(verbose, load_config())


cli.add_command(account_cmd.register)
cli.add_command(account_cmd.login)
cli.add_command(account_cmd.logout)
cli.add_command(account_cmd.profile)
cli.add_command(account_cmd.reset_sessions)
cli.add_command(add_cmd.add)
cli.add_command(ls_cmd.ls)
cli.add_command(info_cmd.info)
cli.add_command(edit_cmd.edit)
cli.add_command(rm_cmd.rm)
cli.add_command(verify_cmd.verify)
