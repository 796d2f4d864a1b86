"""Comparators: decide whether a file present on both sides can be skipped.

Every comparator must answer "not equivalent" when it cannot tell, so that
missing information leads to a copy rather than a silently stale file.
"""

from __future__ import annotations

import asyncio
import inspect
import os
from abc import ABC, abstractmethod
from typing import Callable


class Comparator(ABC):
    """Strategy deciding whether *output_path* already matches *input_path*."""

    @abstractmethod
    def equivalent(self, input_path: str, output_path: str) -> bool:
        """Return True if the copy can be skipped."""

    def __call__(self, input_path: str, output_path: str) -> bool:
        return self.equivalent(input_path, output_path)


class StatComparator(Comparator):
    """Equal size and modification time.

    *mtime_tolerance* (seconds) absorbs timestamp truncation on coarse
    filesystems such as FAT (2 s) or some network mounts.
    """

    def __init__(self, mtime_tolerance: float = 0.0, *, follow_symlinks: bool = True) -> None:
        self.tolerance_ns = int(mtime_tolerance * 1_000_000_000)
        self.follow_symlinks = follow_symlinks

    def equivalent(self, input_path: str, output_path: str) -> bool:
        try:
            a = os.stat(input_path, follow_symlinks=self.follow_symlinks)
            b = os.stat(output_path, follow_symlinks=self.follow_symlinks)
        except OSError:
            return False
        if a.st_size != b.st_size:
            return False
        return abs(a.st_mtime_ns - b.st_mtime_ns) <= self.tolerance_ns

    def __repr__(self) -> str:
        return f"StatComparator(mtime_tolerance={self.tolerance_ns / 1e9:g})"


class SizeComparator(Comparator):
    """Equal size only (for trees whose timestamps are not preserved)."""

    def equivalent(self, input_path: str, output_path: str) -> bool:
        try:
            return os.path.getsize(input_path) == os.path.getsize(output_path)
        except OSError:
            return False


class AlwaysCopy(Comparator):
    """Never equivalent: every file present on both sides is re-copied."""

    def equivalent(self, input_path: str, output_path: str) -> bool:
        return False


class CallableComparator(Comparator):
    """Adapts ``fn(input_path, output_path) -> bool``.

    *fn* may be a coroutine function; its result is awaited on a private
    event loop in the calling worker thread.
    """

    def __init__(self, fn: Callable[[str, str], object]) -> None:
        self._fn = fn

    def equivalent(self, input_path: str, output_path: str) -> bool:
        result = self._fn(input_path, output_path)
        if inspect.isawaitable(result):
            result = asyncio.run(_resolve(result))
        return bool(result)

    def __repr__(self) -> str:
        return f"CallableComparator({self._fn!r})"


async def _resolve(awaitable):
    return await awaitable


def as_comparator(obj, default: Comparator | None = None) -> Comparator:
    """Coerce a user-supplied compare option; non-callables mean *default*."""
    if isinstance(obj, Comparator):
        return obj
    if callable(obj):
        return CallableComparator(obj)
    return default if default is not None else StatComparator()
