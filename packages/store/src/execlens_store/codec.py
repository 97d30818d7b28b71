"""Compressed JSON encoding of ActionRecord history entries.

Format: gzip(JSON object). Digests are hex-encoded so the payload stays
plain JSON; ``version`` guards against reading entries written by an
incompatible release.
"""

from __future__ import annotations

import gzip
import json
import zlib

from execlens_store.errors import CorruptEntryError, MalformedRecordError
from execlens_store.models import ActionRecord, FileRecord

FORMAT_VERSION = 1


def encode_record(record: ActionRecord) -> bytes:
    """Serialize and gzip-compress a record."""
    payload = {
        "version": FORMAT_VERSION,
        "identity_label": record.identity_label,
        "progress_message": record.progress_message,
        "mnemonic": record.mnemonic,
        "wall_time_seconds": record.wall_time_seconds,
        "cache_hit": record.cache_hit,
        "inputs": [[f.path, f.digest.hex()] for f in record.inputs],
        "outputs": [[f.path, f.digest.hex()] for f in record.outputs],
    }
    return gzip.compress(json.dumps(payload, separators=(",", ":")).encode("utf-8"))


def decode_record(data: bytes) -> ActionRecord:
    """Decompress and deserialize a record.

    Raises CorruptEntryError for truncated gzip streams, invalid JSON, missing
    fields and unsupported versions.
    """
    try:
        payload = json.loads(gzip.decompress(data).decode("utf-8"))
    except (OSError, EOFError, zlib.error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptEntryError(f"{type(e).__name__}: {e}") from e

    if not isinstance(payload, dict):
        raise CorruptEntryError("entry is not a JSON object")
    version = payload.get("version")
    if version != FORMAT_VERSION:
        raise CorruptEntryError(f"unsupported entry version {version!r} (expected {FORMAT_VERSION})")

    try:
        return ActionRecord(
            identity_label=payload["identity_label"],
            progress_message=payload["progress_message"],
            mnemonic=payload.get("mnemonic", ""),
            wall_time_seconds=float(payload.get("wall_time_seconds", 0.0)),
            cache_hit=bool(payload.get("cache_hit", False)),
            inputs=tuple(FileRecord(path, bytes.fromhex(digest)) for path, digest in payload["inputs"]),
            outputs=tuple(FileRecord(path, bytes.fromhex(digest)) for path, digest in payload["outputs"]),
        )
    except (KeyError, TypeError, ValueError, MalformedRecordError) as e:
        raise CorruptEntryError(f"invalid entry payload: {e}") from e
