"""treesync CLI: one-way directory tree synchronization."""

from ._helpers import main  # noqa: F401 (entry point)

# Import command modules to register Click commands with the main group.
from . import _basic, _sync  # noqa: F401
