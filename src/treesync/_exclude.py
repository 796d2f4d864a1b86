"""Path filters for enumeration and pruning.

A :class:`PathFilter` decides which root-relative paths take part in a
sync.  Filters govern inclusion only: enumeration still descends into
directories a filter rejects, so a filter that wants to hide a whole
subtree must reject its descendants too (``ExcludeFilter`` does).

``ExcludeFilter`` combines ``--exclude`` patterns, ``--exclude-from``
files, and automatic ``.gitignore`` loading into a single predicate.
Pattern syntax follows gitignore rules (implemented by
``dulwich.ignore.IgnoreFilter``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Sequence

from dulwich.ignore import IgnoreFilter


class PathFilter(ABC):
    """Predicate over root-relative paths (``/``-separated)."""

    @abstractmethod
    def accepts(self, path: str, *, is_dir: bool = False) -> bool:
        """Return True if *path* should be included."""

    def enter_directory(self, abs_dir: Path, rel_dir: str) -> None:
        """Called once per listed directory, always before its children."""

    def __call__(self, path: str) -> bool:
        return self.accepts(path)


class AcceptAll(PathFilter):
    """The default filter: every path is included."""

    def accepts(self, path: str, *, is_dir: bool = False) -> bool:
        return True

    def __repr__(self) -> str:
        return "ACCEPT_ALL"


ACCEPT_ALL = AcceptAll()


class CallableFilter(PathFilter):
    """Adapts a plain ``fn(path) -> bool`` callback."""

    def __init__(self, fn: Callable[[str], bool]) -> None:
        self._fn = fn

    def accepts(self, path: str, *, is_dir: bool = False) -> bool:
        return bool(self._fn(path))

    def __repr__(self) -> str:
        return f"CallableFilter({self._fn!r})"


def as_path_filter(obj) -> PathFilter:
    """Coerce a user-supplied filter option into a :class:`PathFilter`.

    ``None`` and anything that is not callable mean "no filter".
    """
    if isinstance(obj, PathFilter):
        return obj
    if callable(obj):
        return CallableFilter(obj)
    return ACCEPT_ALL


class ExcludeFilter(PathFilter):
    """Combines --exclude patterns, --exclude-from, and .gitignore files.

    Unlike plain gitignore matching, a path is also excluded when any of
    its ancestor directories is excluded, because enumeration does not
    stop at excluded directories.
    """

    def __init__(
        self,
        *,
        patterns: Sequence[str] | None = None,
        exclude_from: str | None = None,
        gitignore: bool = False,
    ) -> None:
        base_lines: list[bytes] = []
        for p in patterns or ():
            base_lines.append(p.encode("utf-8"))
        if exclude_from is not None:
            path = Path(exclude_from)
            for raw in path.read_bytes().splitlines():
                line = raw.strip()
                if line and not line.startswith(b"#"):
                    base_lines.append(line)
        self._base: IgnoreFilter | None = (
            IgnoreFilter(base_lines) if base_lines else None
        )
        self._gitignore = gitignore
        # {rel_dir: IgnoreFilter | None} loaded lazily per directory
        self._dir_filters: dict[str, IgnoreFilter | None] = {}
        self._dir_cache: dict[str, bool] = {}

    # ------------------------------------------------------------------
    @property
    def active(self) -> bool:
        """True if any filtering is configured."""
        return self._base is not None or self._gitignore

    # ------------------------------------------------------------------
    def is_excluded(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check *rel_path* alone (no ancestor check) against all loaded patterns."""
        check = rel_path + "/" if is_dir else rel_path

        # Base patterns (--exclude / --exclude-from)
        if self._base is not None and self._base.is_ignored(check) is True:
            return True

        if not self._gitignore:
            return False

        # Auto-exclude .gitignore files themselves
        if not is_dir and rel_path.rsplit("/", 1)[-1] == ".gitignore":
            return True

        # Walk .gitignore filters from the deepest ancestor up to the root.
        # Each filter checks the path relative to its own directory; the
        # first one with an opinion (match or negation) decides.
        parts = rel_path.split("/")
        for depth in range(len(parts) - 1, -1, -1):
            dir_key = "/".join(parts[:depth])
            filt = self._dir_filters.get(dir_key)
            if filt is not None:
                sub = "/".join(parts[depth:])
                sub_check = sub + "/" if is_dir else sub
                result = filt.is_ignored(sub_check)
                if result is not None:
                    return result

        return False

    # ------------------------------------------------------------------
    def _dir_excluded(self, rel_dir: str) -> bool:
        cached = self._dir_cache.get(rel_dir)
        if cached is None:
            parent = rel_dir.rpartition("/")[0]
            cached = (bool(parent) and self._dir_excluded(parent)) or \
                self.is_excluded(rel_dir, is_dir=True)
            self._dir_cache[rel_dir] = cached
        return cached

    def accepts(self, path: str, *, is_dir: bool = False) -> bool:
        path = path.strip("/")
        if not path:
            return True
        if is_dir:
            return not self._dir_excluded(path)
        parent = path.rpartition("/")[0]
        if parent and self._dir_excluded(parent):
            return False
        return not self.is_excluded(path)

    # ------------------------------------------------------------------
    def enter_directory(self, abs_dir: Path, rel_dir: str) -> None:
        """Load .gitignore from *abs_dir* if gitignore mode is on."""
        if not self._gitignore:
            return
        if rel_dir in self._dir_filters:
            return
        gi = abs_dir / ".gitignore"
        if gi.is_file():
            self._dir_filters[rel_dir] = IgnoreFilter.from_path(str(gi))
        else:
            self._dir_filters[rel_dir] = None
        # Results computed before this file was loaded may be stale
        self._dir_cache.clear()
