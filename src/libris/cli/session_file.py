# ABOUTME: Persists the CLI's session token between invocations.
# ABOUTME: The token file is private to the user (mode 0600).

import os
from pathlib import Path


def read_token(path: Path) -> str | None:
    """Return the stored token, or None if there is none."""
    try:
        token = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    return token or None


def write_token(path: Path, token: str) -> None:
    """Store token at path, readable and writable by the owner only."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(token)
    path.chmod(0o600)


def clear_token(path: Path) -> None:
    path.unlink(missing_ok=True)
