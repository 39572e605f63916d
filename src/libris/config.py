# ABOUTME: Configuration defaults and environment overrides for Libris.
# ABOUTME: LibrisConfig.from_env() resolves paths, hashing cost, and log level.

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_HOME = Path.home() / ".libris"
DEFAULT_DB_PATH = DEFAULT_HOME / "library.db"
DEFAULT_UPLOAD_DIR = DEFAULT_HOME / "uploads"
DEFAULT_SESSION_FILE = DEFAULT_HOME / "session"
DEFAULT_BCRYPT_ROUNDS = 12
DEFAULT_BUSY_TIMEOUT = 5.0
DEFAULT_LOG_LEVEL = "WARNING"


def _path_from_env(name: str, default: Path) -> Path:
    raw = os.getenv(name, "").strip()
    return Path(raw).expanduser() if raw else default


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass
class LibrisConfig:
    """Resolved runtime settings for a Libris process."""

    db_path: Path = DEFAULT_DB_PATH
    upload_dir: Path = DEFAULT_UPLOAD_DIR
    session_file: Path = DEFAULT_SESSION_FILE
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    busy_timeout: float = DEFAULT_BUSY_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "LibrisConfig":
        """Load settings from LIBRIS_* environment variables.

        LIBRIS_HOME relocates every default path at once; the per-path
        variables take precedence over it.
        """
        home = _path_from_env("LIBRIS_HOME", DEFAULT_HOME)
        return cls(
            db_path=_path_from_env("LIBRIS_DB", home / "library.db"),
            upload_dir=_path_from_env("LIBRIS_UPLOAD_DIR", home / "uploads"),
            session_file=_path_from_env("LIBRIS_SESSION_FILE", home / "session"),
            bcrypt_rounds=_int_from_env("LIBRIS_BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS),
            busy_timeout=_float_from_env("LIBRIS_BUSY_TIMEOUT", DEFAULT_BUSY_TIMEOUT),
            log_level=os.getenv("LIBRIS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
            or DEFAULT_LOG_LEVEL,
        )
