"""Diff planning: turn two enumerations and a comparator into a SyncPlan."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .._pool import WorkerPool
from ._compare import Comparator
from ._types import SyncError, SyncPlan

logger = logging.getLogger(__name__)


def build_plan(
    input_root: Path,
    output_root: Path,
    input_paths: Iterable[str],
    output_paths: Iterable[str],
    comparator: Comparator,
    *,
    pool: WorkerPool,
    warnings: list[SyncError],
) -> SyncPlan:
    """Compare two path sets to produce a :class:`SyncPlan`.

    Adds and deletes are decided by path membership alone.  Only paths
    present on both sides reach the comparator; those calls run
    concurrently on *pool*.  A comparator that raises is recorded in
    *warnings* and the path is scheduled as an update.
    """
    input_set = set(input_paths)
    output_set = set(output_paths)

    plan = SyncPlan(
        input_root=input_root,
        output_root=output_root,
        add=sorted(input_set - output_set),
        delete=sorted(output_set - input_set),
    )

    def _compare(rel: str) -> bool:
        return comparator(str(input_root / rel), str(output_root / rel))

    for rel, fut in pool.imap_unordered(_compare, input_set & output_set):
        try:
            same = fut.result()
        except Exception as exc:
            logger.warning("compare failed, copying %s: %s", rel, exc)
            warnings.append(SyncError(path=rel, error=f"compare failed: {exc}", phase="compare"))
            same = False
        if same:
            plan.skip.append(rel)
        else:
            plan.update.append(rel)

    plan.update.sort()
    plan.skip.sort()
    return plan
