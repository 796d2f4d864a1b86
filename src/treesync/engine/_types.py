"""Data structures for enumeration, planning, and sync reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .._exclude import ACCEPT_ALL, PathFilter, as_path_filter
from .._pool import DEFAULT_WORKERS
from ..progress import ProgressReporter
from ._compare import Comparator, StatComparator, as_comparator

# OS-generated marker files that do not keep a directory alive
HIDDEN_FILES = frozenset({".DS_Store", "Desktop.ini"})


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

@dataclass
class EnumerationOptions:
    """Options for :func:`~treesync.enumerate_paths`.

    Attributes:
        full_path: Return absolute paths instead of root-relative ones.
        filter: Inclusion predicate over root-relative paths.  Rejected
            directories are still descended into.
        include_directories: Include directory entries in the result.
        as_root: Render relative paths as if rooted at ``/``.
        follow_symlinks: Descend into symlinked directories.  Otherwise
            every symlink is reported as a file.
        workers: Maximum number of concurrent directory listings.
    """
    full_path: bool = False
    filter: PathFilter = ACCEPT_ALL
    include_directories: bool = False
    as_root: bool = False
    follow_symlinks: bool = False
    workers: int = DEFAULT_WORKERS

    def __post_init__(self) -> None:
        self.filter = as_path_filter(self.filter)
        self.workers = max(1, int(self.workers))


@dataclass
class PruneOptions:
    """Options for :func:`~treesync.prune_empty_dirs`.

    Attributes:
        delete_hidden_files: Ignore *hidden_files* when deciding whether a
            directory is empty (and delete them along with it).
        hidden_files: File names treated as OS-generated markers.
        filter: Directories it rejects (by root-relative path) are never
            pruned and count as non-empty for their parent.
        max_depth: Deepest level to descend into; ``0`` means unlimited.
    """
    delete_hidden_files: bool = True
    hidden_files: frozenset[str] = HIDDEN_FILES
    filter: PathFilter = ACCEPT_ALL
    max_depth: int = 0

    def __post_init__(self) -> None:
        self.filter = as_path_filter(self.filter)
        self.hidden_files = frozenset(self.hidden_files)


@dataclass
class SyncOptions:
    """Options for :func:`~treesync.sync` and :func:`~treesync.plan_sync`.

    Attributes:
        filter_input: Filter applied to the input tree's enumeration.  Only
            accepted input paths are copied and protect output files from
            deletion.
        filter_output: Filter applied to the output tree's enumeration.
            Rejected output files are neither compared nor deleted.
        compare: :class:`Comparator` deciding whether a file present on
            both sides can be skipped.  Defaults to size + mtime.
        clean_directory: Delete output files absent from the input.
        clean_empty: Prune output directories left empty afterwards.
        log_progress: Call *reporter* after every finished copy.
        reporter: Progress callback ``(label, completed, total)``.
        workers: Worker-pool bound for every concurrent phase.
        follow_symlinks: Follow symlinks while enumerating and copying.
        delete_hidden_files: See :class:`PruneOptions`.
        prune_filter: See :class:`PruneOptions`.
        max_depth: See :class:`PruneOptions`.
    """
    filter_input: PathFilter = ACCEPT_ALL
    filter_output: PathFilter = ACCEPT_ALL
    compare: Comparator | None = None
    clean_directory: bool = True
    clean_empty: bool = True
    log_progress: bool = True
    reporter: ProgressReporter | None = None
    workers: int = DEFAULT_WORKERS
    follow_symlinks: bool = False
    delete_hidden_files: bool = True
    prune_filter: PathFilter = ACCEPT_ALL
    max_depth: int = 0

    def __post_init__(self) -> None:
        self.filter_input = as_path_filter(self.filter_input)
        self.filter_output = as_path_filter(self.filter_output)
        self.prune_filter = as_path_filter(self.prune_filter)
        self.compare = as_comparator(
            self.compare, StatComparator(follow_symlinks=self.follow_symlinks))
        if not callable(self.reporter):
            self.reporter = None
        self.workers = max(1, int(self.workers))

    def enumeration(self, side: str) -> EnumerationOptions:
        """Enumeration options for the ``"input"`` or ``"output"`` tree."""
        filt = self.filter_input if side == "input" else self.filter_output
        return EnumerationOptions(filter=filt, follow_symlinks=self.follow_symlinks,
                                  workers=self.workers)

    def pruning(self) -> PruneOptions:
        return PruneOptions(delete_hidden_files=self.delete_hidden_files,
                            filter=self.prune_filter, max_depth=self.max_depth)


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------

class SyncActionKind(str, Enum):
    """Kind of sync action: ``ADD``, ``UPDATE``, ``DELETE``, or ``PRUNE``."""
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    PRUNE = "prune"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {
    SyncActionKind.ADD: "+",
    SyncActionKind.UPDATE: "~",
    SyncActionKind.DELETE: "-",
    SyncActionKind.PRUNE: "-",
}


@dataclass
class SyncAction:
    """A single action in a :class:`SyncPlan` or :class:`SyncReport`.

    Attributes:
        path: Root-relative path (forward slashes).
        action: :class:`SyncActionKind` value.
    """
    path: str
    action: SyncActionKind

    def __str__(self) -> str:
        suffix = "/" if self.action == SyncActionKind.PRUNE else ""
        return f"{self.action.symbol} {self.path}{suffix}"


@dataclass(frozen=True)
class CopyTask:
    """One pending copy from the input tree to the output tree."""
    path: str
    src: Path
    dst: Path


def _sorted_actions(groups) -> list[SyncAction]:
    result = [SyncAction(path=p, action=kind) for kind, paths in groups for p in paths]
    result.sort(key=lambda a: a.path)
    return result


@dataclass
class SyncPlan:
    """What a sync would do.

    ``add`` holds input files missing from the output, ``update`` files
    present on both sides that the comparator found different, ``skip``
    files found equivalent, and ``delete`` stale output files.
    """
    input_root: Path
    output_root: Path
    add: list[str] = field(default_factory=list)
    update: list[str] = field(default_factory=list)
    delete: list[str] = field(default_factory=list)
    skip: list[str] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        return not self.add and not self.update and not self.delete

    @property
    def total(self) -> int:
        return len(self.add) + len(self.update) + len(self.delete)

    def actions(self) -> list[SyncAction]:
        """All actions sorted by path."""
        return _sorted_actions([
            (SyncActionKind.ADD, self.add),
            (SyncActionKind.UPDATE, self.update),
            (SyncActionKind.DELETE, self.delete),
        ])

    def copy_tasks(self) -> list[CopyTask]:
        """One :class:`CopyTask` per added or updated path."""
        return [
            CopyTask(rel, self.input_root / rel, self.output_root / rel)
            for rel in self.add + self.update
        ]


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

@dataclass
class SyncError:
    """A path that failed, or was handled permissively, during a sync.

    Attributes:
        path: The path that caused the error.
        error: Human-readable error message.
        phase: ``"compare"``, ``"copy"``, ``"delete"``, or ``"prune"``.
    """
    path: str
    error: str
    phase: str = ""

    def __str__(self) -> str:
        return f"{self.path}: {self.error}"


@dataclass
class SyncReport:
    """Result of :func:`~treesync.sync`.

    Attributes:
        add: Files copied that were missing from the output.
        update: Files re-copied because the comparator found them different.
        delete: Stale output files deleted.
        skip: Files left alone because they were already equivalent.
        pruned: Output directories removed because they were empty.
        errors: Per-item failures; the item was not processed.
        warnings: Per-item conditions handled permissively.
    """
    add: list[str] = field(default_factory=list)
    update: list[str] = field(default_factory=list)
    delete: list[str] = field(default_factory=list)
    skip: list[str] = field(default_factory=list)
    pruned: list[str] = field(default_factory=list)
    errors: list[SyncError] = field(default_factory=list)
    warnings: list[SyncError] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        """``True`` if nothing was copied, deleted, or pruned."""
        return not self.add and not self.update and not self.delete and not self.pruned

    @property
    def total(self) -> int:
        return len(self.add) + len(self.update) + len(self.delete) + len(self.pruned)

    @property
    def ok(self) -> bool:
        return not self.errors

    def actions(self) -> list[SyncAction]:
        """All completed actions sorted by path."""
        return _sorted_actions([
            (SyncActionKind.ADD, self.add),
            (SyncActionKind.UPDATE, self.update),
            (SyncActionKind.DELETE, self.delete),
            (SyncActionKind.PRUNE, self.pruned),
        ])

    def summary(self) -> str:
        """One-line ``+N ~N -N`` summary."""
        parts = []
        if self.add:
            parts.append(f"+{len(self.add)}")
        if self.update:
            parts.append(f"~{len(self.update)}")
        if self.delete:
            parts.append(f"-{len(self.delete)}")
        if self.pruned:
            parts.append(f"-{len(self.pruned)}/")
        return " ".join(parts) if parts else "no changes"
