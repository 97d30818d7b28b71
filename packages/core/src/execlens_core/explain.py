"""Diff engine: compare an action against its previous run.

For each action the engine:
    normalize() → store.get() → classify inputs and outputs → store.put()

The comparison is set reconciliation keyed by path with digest equality; it
does not try to detect renames or moves.
"""

from __future__ import annotations

import contextlib
import enum
import logging
import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from execlens_core.identity import DEFAULT_NORMALIZERS, Normalizer, normalize

if TYPE_CHECKING:
    from execlens_store.base import BaseHistoryStore
    from execlens_store.models import ActionRecord

logger = logging.getLogger(__name__)


class FileClassification(enum.Enum):
    UNCHANGED = "unchanged"
    CHANGED_DIGEST = "changed"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class ActionDiff:
    """Result of explaining one action. Produced fresh per action, never persisted.

    Classification mappings only hold changed paths, ordered changed → removed
    → added. When ``has_history`` is False both mappings are empty: "first
    time seen" is reported as its own state, not as "everything added".
    """

    identity: str
    record: ActionRecord
    has_history: bool
    input_classifications: dict[str, FileClassification] = field(default_factory=dict)
    output_classifications: dict[str, FileClassification] = field(default_factory=dict)

    @property
    def total_changed_inputs(self) -> int:
        return len(self.input_classifications)

    @property
    def total_changed_outputs(self) -> int:
        return len(self.output_classifications)

    @property
    def inputs_unchanged(self) -> bool:
        return self.has_history and self.total_changed_inputs == 0

    @property
    def outputs_unchanged(self) -> bool:
        return self.has_history and self.total_changed_outputs == 0

    @property
    def suppressible(self) -> bool:
        """True for a cache hit with no detected change; renderers may omit it."""
        return self.inputs_unchanged and self.outputs_unchanged and self.record.cache_hit


def classify(current: dict[str, bytes], previous: dict[str, bytes]) -> dict[str, FileClassification]:
    """Classify every path in the union of ``current`` and ``previous``.

    Unchanged paths are omitted. Changed and added paths keep ``current``
    order, removed paths keep ``previous`` order.
    """
    changed: list[str] = []
    added: list[str] = []
    for path, digest in current.items():
        if path not in previous:
            added.append(path)
        elif previous[path] != digest:
            changed.append(path)
    removed = [path for path in previous if path not in current]

    result: dict[str, FileClassification] = {}
    for path in changed:
        result[path] = FileClassification.CHANGED_DIGEST
    for path in removed:
        result[path] = FileClassification.REMOVED
    for path in added:
        result[path] = FileClassification.ADDED
    return result


class Explainer:
    """Explains actions against the history held in ``store``.

    Each call reads the previous record and then overwrites it with the
    current one. The read/overwrite pair is serialized per identity, so two
    threads explaining the same action cannot both read the same stale record.
    """

    def __init__(self, store: BaseHistoryStore, normalizers: Iterable[Normalizer] = DEFAULT_NORMALIZERS):
        self._store = store
        self._normalizers = tuple(normalizers)
        # identity -> [lock, number of callers holding or waiting on it]
        self._locks: dict[str, list] = {}
        self._locks_guard = threading.Lock()

    def identity_of(self, record: ActionRecord) -> str:
        return normalize(record.identity_label, record.progress_message, self._normalizers)

    def explain(self, record: ActionRecord) -> ActionDiff:
        """Compare ``record`` with its stored predecessor, then store ``record``.

        Raises MalformedRecordError for a record without a label and
        HistoryWriteError when the new baseline cannot be persisted.
        """
        identity = self.identity_of(record)
        with self._locked(identity):
            previous = self._store.get(identity)
            if previous is None:
                logger.debug("No history for %s", identity)
                diff = ActionDiff(identity=identity, record=record, has_history=False)
            else:
                diff = ActionDiff(
                    identity=identity,
                    record=record,
                    has_history=True,
                    input_classifications=classify(record.input_digests(), previous.input_digests()),
                    output_classifications=classify(record.output_digests(), previous.output_digests()),
                )
            self._store.put(identity, record)
        return diff

    def explain_all(self, records: Iterable[ActionRecord]) -> Iterator[ActionDiff]:
        """Explain ``records`` one at a time, in arrival order."""
        for record in records:
            yield self.explain(record)

    @contextlib.contextmanager
    def _locked(self, identity: str) -> Iterator[None]:
        with self._locks_guard:
            entry = self._locks.setdefault(identity, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[identity]
