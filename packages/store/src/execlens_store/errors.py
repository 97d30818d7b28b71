"""Exception hierarchy shared by the store, core and CLI layers.

Read-path failures (CorruptEntryError) are caught by the stores and degrade to
"no history". Write-path and malformed-input failures propagate to the caller.
"""

from __future__ import annotations


class ExeclensError(Exception):
    """Base class for all execlens errors."""


class HistoryWriteError(ExeclensError):
    """Persisting a history entry failed (disk full, permission denied, ...)."""

    def __init__(self, identity: str, cause: BaseException):
        super().__init__(f"could not write history for {identity!r}: {cause}")
        self.identity = identity
        self.cause = cause


class CorruptEntryError(ExeclensError):
    """A stored history entry could not be decompressed or decoded."""


class MalformedRecordError(ExeclensError):
    """An action record lacks required fields or has duplicate paths."""
