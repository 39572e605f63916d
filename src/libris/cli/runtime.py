# ABOUTME: Glue between CLI commands and the Libris core.
# ABOUTME: Opens the library from options/env, configures logging, and maps errors to exit codes.

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from libris.config import LibrisConfig
from libris.core.library import Library
from libris.errors import (
    BookNotFoundError,
    ForbiddenError,
    LibraryError,
    StorageUnavailableError,
    UnauthenticatedError,
)

console = Console()

EXIT_DENIED = 1
EXIT_RETRYABLE = 2


def load_config() -> LibrisConfig:
    """Read LIBRIS_* settings, reporting bad values as a usage error."""
    try:
        return LibrisConfig.from_env()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def configure_logging(verbose: bool, config: LibrisConfig) -> None:
    """Send log records to stderr through Rich. -v forces DEBUG."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Translate core errors into a message and a non-zero exit.

    StorageUnavailableError exits with 2 (worth retrying); every other
    failure exits with 1.
    """
    try:
        yield
    except UnauthenticatedError as exc:
        console.print("[red]You must be logged in. Run `libris login USERNAME` first.[/red]")
        raise SystemExit(EXIT_DENIED) from exc
    except (ForbiddenError, BookNotFoundError) as exc:
        console.print(f"[red]{escape(str(exc))}.[/red]")
        raise SystemExit(EXIT_DENIED) from exc
    except StorageUnavailableError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        console.print("[yellow]The library is temporarily unavailable; try again.[/yellow]")
        raise SystemExit(EXIT_RETRYABLE) from exc
    except LibraryError as exc:
        console.print(f"[red]{escape(str(exc))}.[/red]")
        raise SystemExit(EXIT_DENIED) from exc


@contextmanager
def open_catalog(db_path: Path | None) -> Iterator[Library]:
    """Open the library for one command and close it afterwards."""
    config = load_config()
    with reporting_errors():
        library = Library.open(
            db_path or config.db_path,
            bcrypt_rounds=config.bcrypt_rounds,
            busy_timeout=config.busy_timeout,
        )
    try:
        with reporting_errors():
            yield library
    finally:
        library.close()


def resolve_session_file(session_file: Path | None) -> Path:
    return session_file or load_config().session_file


def resolve_upload_dir(upload_dir: Path | None) -> Path:
    return upload_dir or load_config().upload_dir
