from ._exclude import ACCEPT_ALL, AcceptAll, CallableFilter, ExcludeFilter, PathFilter, as_path_filter
from .exceptions import EnumerationError, TreeSyncError
from .fsutil import empty_directory, find_project_root
from .progress import ProgressReporter, ThrottledReporter
from .engine import (
    AlwaysCopy,
    CallableComparator,
    Comparator,
    EnumerationOptions,
    PruneOptions,
    SizeComparator,
    StatComparator,
    SyncAction,
    SyncActionKind,
    SyncError,
    SyncOptions,
    SyncPlan,
    SyncReport,
    enumerate_paths,
    plan_sync,
    prune_empty_dirs,
    sync,
)

__all__ = [
    "sync", "plan_sync", "enumerate_paths", "prune_empty_dirs",
    "empty_directory", "find_project_root",
    "SyncOptions", "EnumerationOptions", "PruneOptions",
    "SyncPlan", "SyncReport", "SyncAction", "SyncActionKind", "SyncError",
    "Comparator", "StatComparator", "SizeComparator", "AlwaysCopy", "CallableComparator",
    "PathFilter", "AcceptAll", "ACCEPT_ALL", "CallableFilter", "ExcludeFilter", "as_path_filter",
    "ProgressReporter", "ThrottledReporter",
    "TreeSyncError", "EnumerationError",
]
