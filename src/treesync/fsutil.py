"""Small filesystem helpers used around a sync."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def empty_directory(path: str | os.PathLike[str], *, include_hidden: bool = False) -> list[str]:
    """Remove every child of *path* but keep *path* itself.

    Dot-prefixed children are kept unless *include_hidden* is set.
    Returns the names of the removed children, sorted.

    Raises:
        NotADirectoryError: If *path* is not a directory.
        FileNotFoundError: If *path* does not exist.
    """
    base = Path(path)
    if not base.is_dir():
        if base.exists():
            raise NotADirectoryError(f"Not a directory: {base}")
        raise FileNotFoundError(f"No such directory: {base}")

    removed = []
    for child in sorted(base.iterdir()):
        if child.name.startswith(".") and not include_hidden:
            continue
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
        logger.debug("removed: %s", child)
        removed.append(child.name)
    return removed


def find_project_root(directory: str | os.PathLike[str], marker: str) -> Path | None:
    """Find the nearest ancestor of *directory* that contains *marker*.

    The search starts at the parent of *directory* and walks up to the
    filesystem root.  Returns the path of the marker itself
    (``<ancestor>/<marker>``), or ``None`` if no ancestor has one.
    """
    current = Path(directory).absolute().parent
    while True:
        candidate = current / marker
        if candidate.exists():
            return candidate
        if current.parent == current:
            return None
        current = current.parent
