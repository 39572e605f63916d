# ABOUTME: The `libris verify` command for checking library integrity.
# ABOUTME: Reports books without an owner and ownership entries for missing books.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from libris.cli.options import db_option
from libris.cli.runtime import open_catalog
from libris.core.verifier import verify_library

console = Console()


@click.command("verify")
@db_option
def verify(db_path: Path | None) -> None:
    """Verify library integrity: every book owned, every owned book present."""
    with open_catalog(db_path) as library:
        result = verify_library(library.books, library.ownership)

    if result.total_issues > 0:
        table = Table()
        table.add_column("Book", style="dim", width=6)
        table.add_column("Title", style="bold")
        table.add_column("Issue", style="red")

        for book in result.orphaned:
            table.add_row(str(book.id), escape(book.title or ""), "No owner")

        for user_id, book_id in result.dangling:
            table.add_row(str(book_id), "", f"Owned by user {user_id} but missing")

        console.print(table)
        console.print(
            f"\n[red]{result.total_issues} issue(s) found, {result.ok} book(s) verified.[/red]"
        )
        raise SystemExit(1)

    console.print(f"[green]All {result.ok} book(s) verified.[/green]")
