"""One-way reconciliation of an output directory tree with an input tree.

``sync`` copies new and changed files, deletes output files absent from
the input, and prunes output directories left empty.  ``plan_sync``
computes the same plan without touching either tree.
"""

from ._compare import (
    AlwaysCopy,
    CallableComparator,
    Comparator,
    SizeComparator,
    StatComparator,
    as_comparator,
)
from ._types import (
    HIDDEN_FILES,
    CopyTask,
    EnumerationOptions,
    PruneOptions,
    SyncAction,
    SyncActionKind,
    SyncError,
    SyncOptions,
    SyncPlan,
    SyncReport,
)
from ._walk import enumerate_paths
from ._plan import build_plan
from ._io import clean_stale, execute_copies
from ._prune import prune_empty_dirs
from ._ops import plan_sync, sync

__all__ = [
    # Public types
    "AlwaysCopy", "CallableComparator", "Comparator", "SizeComparator",
    "StatComparator", "CopyTask", "EnumerationOptions", "PruneOptions",
    "SyncAction", "SyncActionKind", "SyncError", "SyncOptions", "SyncPlan",
    "SyncReport", "HIDDEN_FILES",
    # Phases
    "enumerate_paths", "build_plan", "execute_copies", "clean_stale",
    "prune_empty_dirs",
    # Entry points
    "plan_sync", "sync",
    "as_comparator",
]
