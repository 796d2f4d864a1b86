"""Bottom-up removal of empty directories."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..exceptions import EnumerationError
from ._types import PruneOptions, SyncError

logger = logging.getLogger(__name__)


def _entries(abs_dir: Path) -> list[tuple[str, bool]]:
    result = []
    with os.scandir(abs_dir) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            result.append((entry.name, is_dir))
    return result


def prune_empty_dirs(
    root: str | os.PathLike[str],
    options: PruneOptions | None = None,
    *,
    errors: list[SyncError] | None = None,
) -> list[str]:
    """Remove every directory under *root* that is empty once its children are.

    Children are resolved before their parent, so a directory holding
    only directories that become empty is removed as well.  *root* itself
    is never removed.  Returns the removed directories as root-relative
    paths, children before parents.

    A subdirectory that cannot be listed or removed is recorded in
    *errors* and kept.  Failing to list *root* raises
    :class:`~treesync.exceptions.EnumerationError`.
    """
    options = options or PruneOptions()
    base = Path(root)
    errors = errors if errors is not None else []
    try:
        entries = _entries(base)
    except OSError as exc:
        raise EnumerationError(str(base), exc.strerror or str(exc)) from exc
    options.filter.enter_directory(base, "")
    removed: list[str] = []
    for name, is_dir in entries:
        if is_dir:
            _prune_dir(base, name, 1, options, removed, errors)
    return removed


def _prune_dir(
    base: Path,
    rel_dir: str,
    depth: int,
    options: PruneOptions,
    removed: list[str],
    errors: list[SyncError],
) -> bool:
    """Resolve one directory; return True if it no longer exists."""
    if options.max_depth > 0 and depth > options.max_depth:
        logger.debug("rmdir: %s skipped, max depth reached", rel_dir)
        return False
    if not options.filter.accepts(rel_dir, is_dir=True):
        return False

    abs_dir = base / rel_dir
    try:
        entries = _entries(abs_dir)
    except OSError as exc:
        logger.warning("cannot list %s: %s", rel_dir, exc)
        errors.append(SyncError(path=rel_dir, error=str(exc), phase="prune"))
        return False
    options.filter.enter_directory(abs_dir, rel_dir)

    remaining: list[tuple[str, bool]] = []
    for name, is_dir in entries:
        if is_dir and _prune_dir(base, f"{rel_dir}/{name}", depth + 1,
                                 options, removed, errors):
            continue
        remaining.append((name, is_dir))

    markers = [
        name for name, is_dir in remaining
        if not is_dir and options.delete_hidden_files and name in options.hidden_files
    ]
    if len(remaining) > len(markers):
        return False

    try:
        for name in markers:
            (abs_dir / name).unlink()
        abs_dir.rmdir()
    except FileNotFoundError:
        logger.warning("rmdir: %s already gone", rel_dir)
        return True
    except OSError as exc:
        logger.warning("rmdir failed: %s: %s", rel_dir, exc)
        errors.append(SyncError(path=rel_dir, error=str(exc), phase="prune"))
        return False
    logger.debug("rmdir: %s", rel_dir)
    removed.append(rel_dir)
    return True
