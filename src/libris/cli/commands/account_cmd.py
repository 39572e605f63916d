# ABOUTME: Account commands: `libris register`, `login`, `logout`, `profile`, `reset-sessions`.
# ABOUTME: Login stores the session token in the session file used by the book commands.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from libris.cli.options import db_option, session_option
from libris.cli.runtime import open_catalog, resolve_session_file
from libris.cli.session_file import clear_token, read_token, write_token

console = Console()


@click.command("register")
@click.argument("username")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password for the new account (prompted if omitted).",
)
@db_option
def register(username: str, password: str, db_path: Path | None) -> None:
    """Create a new account."""
    with open_catalog(db_path) as library:
        library.accounts.register(username, password)

    console.print(
        f"Account [bold]{escape(username)}[/bold] created. "
        f"Run `libris login {escape(username)}` to sign in."
    )


@click.command("login")
@click.argument("username")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    help="Account password (prompted if omitted).",
)
@db_option
@session_option
def login(username: str, password: str, db_path: Path | None, session_file: Path | None) -> None:
    """Sign in and remember the session for later commands."""
    token_path = resolve_session_file(session_file)
    with open_catalog(db_path) as library:
        token = library.accounts.login(username, password)
        # Replacing a login ends the previous session
        library.accounts.logout(read_token(token_path))
        write_token(token_path, token)

    console.print(f"Logged in as [bold]{escape(username)}[/bold].")


@click.command("logout")
@db_option
@session_option
def logout(db_path: Path | None, session_file: Path | None) -> None:
    """Sign out and forget the stored session."""
    token_path = resolve_session_file(session_file)
    token = read_token(token_path)
    if token is None:
        console.print("[yellow]Not logged in.[/yellow]")
        return

    with open_catalog(db_path) as library:
        library.accounts.logout(token)
    clear_token(token_path)
    console.print("Logged out.")


@click.command("profile")
@db_option
@session_option
def profile(db_path: Path | None, session_file: Path | None) -> None:
    """Show the logged-in user and how many books they own."""
    token = read_token(resolve_session_file(session_file))
    with open_catalog(db_path) as library:
        summary = library.accounts.profile(token)

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=10)
    table.add_column("Value")
    table.add_row("Username", escape(summary.username))
    table.add_row("User ID", str(summary.user_id))
    table.add_row("Books", str(summary.book_count))
    console.print(table)


@click.command("reset-sessions")
@click.confirmation_option(prompt="Log out every user of this library?")
@db_option
def reset_sessions(db_path: Path | None) -> None:
    """Destroy every active session in the library."""
    with open_catalog(db_path) as library:
        removed = library.sessions.reset()

    console.print(f"Removed {removed} session(s).")
