"""Directory enumeration: list every file (and optionally directory) under a root."""

from __future__ import annotations

import logging
import os
from collections import deque
from functools import partial
from pathlib import Path

from .._pool import WorkerPool
from ..exceptions import EnumerationError
from ._types import EnumerationOptions

logger = logging.getLogger(__name__)


def _scan_dir(base: Path, rel_dir: str, *, follow_symlinks: bool) -> list[tuple[str, bool]]:
    """Return ``(name, is_dir)`` for every entry of one directory."""
    abs_dir = base / rel_dir if rel_dir else base
    logger.debug("scanning: %s", abs_dir)
    entries: list[tuple[str, bool]] = []
    with os.scandir(abs_dir) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir(follow_symlinks=follow_symlinks)
            except OSError:
                # Entry vanished or is unreadable; list it as a file
                is_dir = False
            entries.append((entry.name, is_dir))
    return entries


def _render(base: Path, rel: str, options: EnumerationOptions) -> str:
    if options.full_path:
        return os.path.abspath(os.path.join(base, rel))
    if options.as_root:
        return "/" + rel
    return rel


def enumerate_paths(root: str | os.PathLike[str],
                    options: EnumerationOptions | None = None,
                    *, pool: WorkerPool | None = None) -> list[str]:
    """Return the paths of all files under *root*.

    Paths are relative to *root* with ``/`` separators unless
    ``options.full_path`` or ``options.as_root`` say otherwise.  The filter
    decides inclusion only; every subdirectory is descended into whether
    or not the filter accepts it.  Result order is unspecified.

    Listings run on *pool* when given (its size then bounds concurrency,
    not ``options.workers``); otherwise on a pool of ``options.workers``.

    Raises :class:`~treesync.exceptions.EnumerationError` if *root* or any
    directory below it cannot be listed.
    """
    options = options or EnumerationOptions()
    base = Path(root)
    if not base.is_dir():
        reason = "not a directory" if base.exists() else "no such directory"
        raise EnumerationError(str(base), reason)

    filt = options.filter
    results: list[str] = []
    seen_realpaths: set[str] = set()
    if options.follow_symlinks:
        seen_realpaths.add(os.path.realpath(base))

    scan = partial(_scan_dir, base, follow_symlinks=options.follow_symlinks)
    queue: deque[str] = deque([""])

    def _walk(pool: WorkerPool) -> None:
        for rel_dir, fut in pool.drain(scan, queue):
            try:
                entries = fut.result()
            except OSError as exc:
                path = str(base / rel_dir) if rel_dir else str(base)
                raise EnumerationError(path, exc.strerror or str(exc)) from exc

            filt.enter_directory(base / rel_dir if rel_dir else base, rel_dir)
            for name, is_dir in entries:
                rel = f"{rel_dir}/{name}" if rel_dir else name
                if is_dir:
                    if options.follow_symlinks:
                        real = os.path.realpath(base / rel)
                        if real in seen_realpaths:
                            continue
                        seen_realpaths.add(real)
                    queue.append(rel)
                    if options.include_directories and filt.accepts(rel, is_dir=True):
                        results.append(_render(base, rel, options))
                elif filt.accepts(rel):
                    results.append(_render(base, rel, options))

    if pool is not None:
        _walk(pool)
    else:
        with WorkerPool(options.workers) as own:
            _walk(own)
    return results