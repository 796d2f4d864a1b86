"""Exceptions for treesync."""


class TreeSyncError(Exception):
    """Base class for errors that abort a whole treesync operation."""


class EnumerationError(TreeSyncError):
    """Raised when a directory under a sync root cannot be listed.

    A partial listing would make the plan silently wrong, so enumeration
    failures abort the run instead of being collected per item.  The
    underlying :class:`OSError` is available as ``__cause__``.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Cannot list {path}: {message}")
        self.path = path
