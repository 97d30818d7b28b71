"""Abstract history store interface.

Every backend (filesystem, SQLite, in-memory) implements this interface. The
diff engine depends on BaseHistoryStore, not on a concrete backend, so
backends are swappable without touching classification code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from execlens_store.models import ActionRecord


class BaseHistoryStore(ABC):
    """Overwrite-in-place persistence of the latest ActionRecord per identity.

    History is best-effort: ``get`` never raises for a missing or corrupt
    entry. ``put`` is the opposite: a failed write raises HistoryWriteError,
    since silently losing history would make every later run report
    "no history".
    """

    @abstractmethod
    def put(self, identity: str, record: ActionRecord) -> None:
        """Persist ``record`` under ``identity``, replacing any prior entry."""

    @abstractmethod
    def get(self, identity: str) -> ActionRecord | None:
        """Return the record stored under ``identity``, or None.

        Returns None for unknown identities and for unreadable entries (with
        a logged warning). Never raises.
        """

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Backends holding connections override this.
        The default does nothing, so callers may always call it.
        """
