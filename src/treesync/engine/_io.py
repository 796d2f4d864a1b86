"""File I/O phases: concurrent copy and stale-file deletion."""

from __future__ import annotations

import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Sequence

from .._pool import WorkerPool
from ..progress import ProgressReporter
from ._types import CopyTask, SyncError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Copy
# ---------------------------------------------------------------------------

def _clear_blocking_paths(out: Path, base: Path, *, follow_symlinks: bool = False) -> None:
    """Make room for a file at *out* inside *base*.

    A file (or, unless following symlinks, a symlink) where a parent
    directory must go is removed, as is a real directory where the file
    must go.  Nothing at or above *base* is touched.
    """
    for parent in out.parents:
        if parent == base:
            break
        if parent.is_symlink() and not follow_symlinks:
            parent.unlink(missing_ok=True)
            break
        if parent.exists() and not parent.is_dir():
            parent.unlink(missing_ok=True)
            break
    if out.is_dir() and not out.is_symlink():
        shutil.rmtree(out)


def _copy_file(task: CopyTask, *, base: Path, follow_symlinks: bool = False) -> None:
    """Copy one file, replacing the destination atomically.

    The bytes land in a hidden sibling first, so a failed copy never
    leaves a truncated destination behind.  ``shutil.copy2`` carries the
    modification time over, which the default comparator relies on.
    """
    out = task.dst
    _clear_blocking_paths(out, base, follow_symlinks=follow_symlinks)
    out.parent.mkdir(parents=True, exist_ok=True)
    tmp = out.with_name(f".{out.name}.{uuid.uuid4().hex[:12]}.tmp")
    replaced = False
    try:
        shutil.copy2(task.src, tmp, follow_symlinks=follow_symlinks)
        os.replace(tmp, out)
        replaced = True
    finally:
        if not replaced and (tmp.exists() or tmp.is_symlink()):
            tmp.unlink()


def execute_copies(
    tasks: Sequence[CopyTask],
    *,
    pool: WorkerPool,
    base: Path,
    errors: list[SyncError],
    reporter: ProgressReporter | None = None,
    follow_symlinks: bool = False,
) -> list[CopyTask]:
    """Run *tasks* concurrently on *pool*; return the ones that succeeded.

    A failed copy is logged, recorded in *errors*, and skipped.  The
    *reporter* is called on the calling thread after every finished task
    (successful or not) with a strictly increasing completed count.
    """
    total = len(tasks)
    completed = 0
    done: list[CopyTask] = []

    def _copy(task: CopyTask) -> None:
        _copy_file(task, base=base, follow_symlinks=follow_symlinks)

    for task, fut in pool.imap_unordered(_copy, tasks):
        completed += 1
        try:
            fut.result()
        except OSError as exc:
            logger.warning("copy failed: %s: %s", task.path, exc)
            errors.append(SyncError(path=task.path, error=str(exc), phase="copy"))
        else:
            logger.debug("+ %s", task.path)
            done.append(task)
        if reporter is not None:
            reporter(task.path, completed, total)
    return done


# ---------------------------------------------------------------------------
# Stale-file cleanup
# ---------------------------------------------------------------------------

def clean_stale(
    paths: Sequence[str],
    output_root: Path,
    *,
    pool: WorkerPool,
    errors: list[SyncError],
) -> list[str]:
    """Delete *paths* (relative to *output_root*); return the ones now gone.

    A path that has already disappeared counts as deleted.  Any other
    failure is logged, recorded in *errors*, and does not stop the rest.
    """
    deleted: list[str] = []

    def _unlink(rel: str) -> None:
        try:
            (output_root / rel).unlink()
        except FileNotFoundError:
            logger.debug("already gone: %s", rel)

    for rel, fut in pool.imap_unordered(_unlink, paths):
        try:
            fut.result()
        except OSError as exc:
            logger.warning("delete failed: %s: %s", rel, exc)
            errors.append(SyncError(path=rel, error=str(exc), phase="delete"))
        else:
            logger.debug("- %s", rel)
            deleted.append(rel)
    deleted.sort()
    return deleted
