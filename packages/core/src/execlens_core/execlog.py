"""Read ActionRecords from a build's JSON execution log.

The log is a stream of JSON objects, one per executed spawn, either
concatenated (pretty-printed, separated by whitespace) or one per line:

    {
      "targetLabel": "//pkg:lib",
      "progressMessage": "Building pkg/liblib.jar (2 source files)",
      "mnemonic": "Javac",
      "inputs": [{"path": "pkg/A.java", "digest": {"hash": "ab12...", "sizeBytes": "120"}}],
      "actualOutputs": [{"path": "bazel-out/.../liblib.jar", "digest": {"hash": "cd34..."}}],
      "walltime": "1.250s",
      "remoteCacheHit": false
    }
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator
from pathlib import Path

from execlens_store.errors import ExeclensError, MalformedRecordError
from execlens_store.models import ActionRecord, FileRecord

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s*")
_DURATION = re.compile(r"^(-?\d+(?:\.\d+)?)s$")


class ExeclogFormatError(ExeclensError):
    """The execution log is not a stream of JSON objects."""


def read_execlog(path: str | Path) -> Iterator[ActionRecord]:
    """Yield the ActionRecords of the execution log at ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ExeclogFormatError(f"not valid UTF-8 at byte {e.start}: {e.reason}") from e
    yield from parse_execlog(text)


def parse_execlog(text: str) -> Iterator[ActionRecord]:
    """Yield ActionRecords from execution log text.

    Raises ExeclogFormatError for invalid JSON and MalformedRecordError for a
    spawn without a target label; both name the offending record's index.
    """
    decoder = json.JSONDecoder()
    pos = _WHITESPACE.match(text, 0).end()
    index = 0
    while pos < len(text):
        try:
            obj, end = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            raise ExeclogFormatError(f"record #{index}: invalid JSON at offset {e.pos}: {e.msg}") from e
        if not isinstance(obj, dict):
            raise ExeclogFormatError(f"record #{index}: expected a JSON object, got {type(obj).__name__}")
        yield spawn_to_record(obj, index)
        index += 1
        pos = _WHITESPACE.match(text, end).end()
    logger.debug("Parsed %d records from execution log", index)


def spawn_to_record(spawn: dict, index: int = 0) -> ActionRecord:
    """Map one execution-log spawn object to an ActionRecord."""
    label = spawn.get("targetLabel")
    if not label or not isinstance(label, str):
        raise MalformedRecordError(
            f"record #{index} has no targetLabel (progress message: {spawn.get('progressMessage', '')!r})"
        )
    for key in ("progressMessage", "mnemonic"):
        if not isinstance(spawn.get(key, ""), str):
            raise MalformedRecordError(f"record #{index} ({label}): {key} must be a string")
    try:
        return ActionRecord(
            identity_label=label,
            progress_message=spawn.get("progressMessage", ""),
            mnemonic=spawn.get("mnemonic", ""),
            inputs=tuple(_to_file(f) for f in spawn.get("inputs", [])),
            outputs=tuple(_to_file(f) for f in spawn.get("actualOutputs", [])),
            wall_time_seconds=parse_duration(spawn.get("walltime")),
            cache_hit=bool(spawn.get("remoteCacheHit", False)),
        )
    except MalformedRecordError as e:
        raise MalformedRecordError(f"record #{index}: {e}") from e
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise MalformedRecordError(f"record #{index} ({label}): {type(e).__name__}: {e}") from e


def parse_duration(value) -> float:
    """Convert a protobuf Duration ("1.5s" or {"seconds", "nanos"}) to seconds."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, dict):
        return int(value.get("seconds", 0)) + int(value.get("nanos", 0)) / 1_000_000_000
    match = _DURATION.match(str(value).strip())
    if match is None:
        raise ValueError(f"invalid duration {value!r}")
    return float(match.group(1))


def _to_file(entry: dict) -> FileRecord:
    path = entry["path"]
    digest = (entry.get("digest") or {}).get("hash", "")
    if not isinstance(path, str) or not isinstance(digest, str):
        raise TypeError(f"path and digest hash must be strings in {entry!r}")
    return FileRecord(path=path, digest=_digest_bytes(digest))


def _digest_bytes(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        return value.encode("utf-8")
