# ABOUTME: Cover image staging for the upload layer.
# ABOUTME: Copies an image into the upload directory and returns its opaque reference.

import logging
import shutil
import time
from pathlib import Path

logger = logging.getLogger(__name__)

_MAX_COLLISION_ATTEMPTS = 10_000


def _resolve_collision(target: Path) -> Path:
    """Find a non-colliding filename by appending _1, _2, etc."""
    if not target.exists():
        return target
    stem = target.stem
    suffix = target.suffix
    parent = target.parent
    for counter in range(1, _MAX_COLLISION_ATTEMPTS + 1):
        candidate = parent / f"{stem}_{counter}{suffix}"
        if not candidate.exists():
            return candidate
    raise OSError(
        f"Could not find a non-colliding filename after "
        f"{_MAX_COLLISION_ATTEMPTS} attempts: {target}"
    )


def stage_cover(source: Path, upload_dir: Path, *, timestamp_ms: int | None = None) -> str:
    """Copy a cover image into upload_dir under a timestamped name.

    The stored name is ``<epoch milliseconds><original extension>``.

    Args:
        source: The image file to stage.
        upload_dir: Directory that holds staged covers; created if missing.
        timestamp_ms: Override for the name's timestamp.

    Returns:
        The stored file name, used as the book's cover_image reference.

    Raises:
        FileNotFoundError: If source does not exist.
    """
    if not source.is_file():
        raise FileNotFoundError(f"Cover image not found: {source}")

    upload_dir.mkdir(parents=True, exist_ok=True)
    stamp = timestamp_ms if timestamp_ms is not None else time.time_ns() // 1_000_000
    dest = _resolve_collision(upload_dir / f"{stamp}{source.suffix.lower()}")
    shutil.copy2(source, dest)
    logger.debug("Staged cover %s as %s", source, dest.name)
    return dest.name


def cover_path(upload_dir: Path, reference: str) -> Path:
    """Resolve a stored cover reference back to a path in upload_dir."""
    return upload_dir / Path(reference).name
