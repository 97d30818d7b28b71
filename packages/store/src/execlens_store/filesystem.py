"""FileHistoryStore — one compressed file per identity under a directory tree.

Layout:
  <root>/<key[:2]>/<key>   gzip(JSON) encoded ActionRecord

The two-character shard keeps any single directory from accumulating one
entry per action in the build. The root is expected to live in a per-workspace
output area that survives between build invocations.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from execlens_store.base import BaseHistoryStore
from execlens_store.codec import decode_record, encode_record
from execlens_store.errors import CorruptEntryError, HistoryWriteError
from execlens_store.keys import shard_of, storage_key

if TYPE_CHECKING:
    from execlens_store.models import ActionRecord

logger = logging.getLogger(__name__)

HISTORY_DIRNAME = "execlog_history"


class FileHistoryStore(BaseHistoryStore):
    """Stores action history as sharded gzip files on the local filesystem."""

    def __init__(self, root: str | os.PathLike[str]):
        self._root = Path(root)

    @classmethod
    def for_output_base(cls, output_base: str | os.PathLike[str]) -> FileHistoryStore:
        """Return a store rooted at ``<output_base>/execlog_history``."""
        return cls(Path(output_base) / HISTORY_DIRNAME)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, identity: str) -> Path:
        key = storage_key(identity)
        return self._root / shard_of(key) / key

    def put(self, identity: str, record: ActionRecord) -> None:
        path = self.path_for(identity)
        data = encode_record(record)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write beside the target and rename so readers never see a partial entry.
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise HistoryWriteError(identity, e) from e

    def get(self, identity: str) -> ActionRecord | None:
        path = self.path_for(identity)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read history entry %s (%s): %s", path, type(e).__name__, e)
            return None

        try:
            return decode_record(data)
        except CorruptEntryError as e:
            logger.warning("Ignoring corrupt history entry %s: %s", path, e)
            return None
