# ABOUTME: Shared Click options for Libris CLI commands.
# ABOUTME: Provides reusable decorators for --db, --session-file, and --upload-dir.

from pathlib import Path

import click

from libris.config import DEFAULT_DB_PATH, DEFAULT_SESSION_FILE, DEFAULT_UPLOAD_DIR

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    help=f"Path to library database (default: $LIBRIS_DB or {DEFAULT_DB_PATH})",
)

session_option = click.option(
    "--session-file",
    "session_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Where the login token is kept (default: $LIBRIS_SESSION_FILE or {DEFAULT_SESSION_FILE})",
)

upload_option = click.option(
    "--upload-dir",
    "upload_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help=f"Directory for staged cover images (default: $LIBRIS_UPLOAD_DIR or {DEFAULT_UPLOAD_DIR})",
)

cover_option = click.option(
    "--cover",
    "cover",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Cover image file to attach.",
)
