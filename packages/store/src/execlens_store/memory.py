"""In-memory store — history that lives only as long as the process.

Used by tests and by dry runs that should not touch the persistent history.
Entries are kept in their encoded form so reads go through the same codec as
the durable backends.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from execlens_store.base import BaseHistoryStore
from execlens_store.codec import decode_record, encode_record
from execlens_store.errors import CorruptEntryError
from execlens_store.keys import storage_key

if TYPE_CHECKING:
    from execlens_store.models import ActionRecord

logger = logging.getLogger(__name__)


class MemoryHistoryStore(BaseHistoryStore):
    """Dict-backed store keyed by storage key."""

    def __init__(self):
        self._entries: dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def put(self, identity: str, record: ActionRecord) -> None:
        self._entries[storage_key(identity)] = encode_record(record)

    def get(self, identity: str) -> ActionRecord | None:
        data = self._entries.get(storage_key(identity))
        if data is None:
            return None
        try:
            return decode_record(data)
        except CorruptEntryError as e:
            logger.warning("Ignoring corrupt in-memory history entry: %s", e)
            return None
