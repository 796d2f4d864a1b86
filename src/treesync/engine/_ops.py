"""Top-level entry points: plan_sync() and sync()."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .._pool import WorkerPool
from ..exceptions import EnumerationError
from ._io import clean_stale, execute_copies
from ._plan import build_plan
from ._prune import prune_empty_dirs
from ._types import SyncError, SyncOptions, SyncPlan, SyncReport
from ._walk import enumerate_paths

logger = logging.getLogger(__name__)


def _check_roots(input_root: Path, output_root: Path) -> None:
    if not input_root.is_dir():
        reason = "not a directory" if input_root.exists() else "no such directory"
        raise EnumerationError(str(input_root), reason)
    if not output_root.exists():
        return
    if not output_root.is_dir():
        raise EnumerationError(str(output_root), "not a directory")
    if os.path.samefile(input_root, output_root):
        raise ValueError(
            f"Input and output are the same directory: {input_root}")


def _displaced_by_copies(stale: list[str], copied: set[str]) -> list[str]:
    """Return the stale paths a copy already removed.

    A copy clears whatever blocks it: a stale file where one of its
    parent directories goes, or a stale subtree where the file itself
    goes.  Either way the stale path no longer exists.
    """
    parents = {p.rsplit("/", i)[0]
               for p in copied for i in range(1, p.count("/") + 1)}
    displaced = []
    for rel in stale:
        ancestors = rel.split("/")[:-1]
        if rel in parents or any(
                "/".join(ancestors[:i]) in copied for i in range(1, len(ancestors) + 1)):
            logger.debug("- %s (replaced)", rel)
            displaced.append(rel)
    return displaced


def _plan(input_root: Path, output_root: Path, options: SyncOptions,
          pool: WorkerPool, warnings: list[SyncError]) -> SyncPlan:
    input_paths = enumerate_paths(input_root, options.enumeration("input"),
                                  pool=pool)
    logger.debug("input: %d files under %s", len(input_paths), input_root)
    if output_root.is_dir():
        output_paths = enumerate_paths(output_root, options.enumeration("output"),
                                       pool=pool)
    else:
        output_paths = []
    logger.debug("output: %d files under %s", len(output_paths), output_root)
    return build_plan(input_root, output_root, input_paths, output_paths,
                      options.compare, pool=pool, warnings=warnings)


def plan_sync(
    input_root: str | os.PathLike[str],
    output_root: str | os.PathLike[str],
    options: SyncOptions | None = None,
) -> SyncPlan:
    """Compute what :func:`sync` would do, without touching either tree.

    A missing *output_root* is treated as empty.

    Raises:
        EnumerationError: If a tree cannot be listed.
        ValueError: If both roots are the same directory.
    """
    options = options or SyncOptions()
    src = Path(input_root).absolute()
    dest = Path(output_root).absolute()
    _check_roots(src, dest)
    with WorkerPool(options.workers) as pool:
        return _plan(src, dest, options, pool, [])


def sync(
    input_root: str | os.PathLike[str],
    output_root: str | os.PathLike[str],
    options: SyncOptions | None = None,
) -> SyncReport:
    """Make *output_root* hold exactly the files of *input_root*.

    Files missing from the output are copied, files the comparator finds
    different are re-copied, output files absent from the input are
    deleted (``clean_directory``), and directories left empty are pruned
    (``clean_empty``).  Each phase finishes before the next one starts.

    Per-file failures do not stop the run; they are collected in
    :attr:`SyncReport.errors` (and tolerated conditions in
    :attr:`SyncReport.warnings`).

    Args:
        input_root: Source directory; must exist.
        output_root: Destination directory; created if missing.
        options: :class:`SyncOptions`; defaults apply when omitted.

    Returns:
        A :class:`SyncReport` describing what was done.

    Raises:
        EnumerationError: If the input is missing or a tree cannot be listed.
        ValueError: If both roots are the same directory.
    """
    options = options or SyncOptions()
    src = Path(input_root).absolute()
    dest = Path(output_root).absolute()
    _check_roots(src, dest)
    dest.mkdir(parents=True, exist_ok=True)

    report = SyncReport()
    with WorkerPool(options.workers) as pool:
        plan = _plan(src, dest, options, pool, report.warnings)
        report.skip = plan.skip

        reporter = options.reporter if options.log_progress else None
        copied = execute_copies(
            plan.copy_tasks(), pool=pool, base=dest, errors=report.errors,
            reporter=reporter, follow_symlinks=options.follow_symlinks,
        )
        done = {task.path for task in copied}
        report.add = [p for p in plan.add if p in done]
        report.update = [p for p in plan.update if p in done]

        if options.clean_directory:
            displaced = _displaced_by_copies(plan.delete, done)
            gone = set(displaced)
            stale = [p for p in plan.delete if p not in gone]
            deleted = clean_stale(stale, dest, pool=pool, errors=report.errors)
            report.delete = sorted(deleted + displaced)

    if options.clean_empty:
        report.pruned = prune_empty_dirs(dest, options.pruning(),
                                         errors=report.errors)

    logger.debug("sync %s -> %s: %s", src, dest, report.summary())
    return report
