"""Action history data models.

Decoupled from execlens_core so the store layer can be used independently
and the diff engine has no knowledge of how records are persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from execlens_store.errors import MalformedRecordError


@dataclass(frozen=True)
class FileRecord:
    """One declared input or actual output of an action."""

    path: str
    digest: bytes


@dataclass(frozen=True)
class ActionRecord:
    """One executed build action as observed in a single run.

    Paths are unique within ``inputs`` and within ``outputs``; the order of
    each tuple is the order the build reported them in.
    """

    identity_label: str
    progress_message: str
    inputs: tuple[FileRecord, ...] = ()
    outputs: tuple[FileRecord, ...] = ()
    wall_time_seconds: float = 0.0
    cache_hit: bool = False
    mnemonic: str = ""
    _input_map: dict[str, bytes] = field(init=False, repr=False, compare=False)
    _output_map: dict[str, bytes] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        object.__setattr__(self, "_input_map", _digest_map(self.inputs, "input", self.identity_label))
        object.__setattr__(self, "_output_map", _digest_map(self.outputs, "output", self.identity_label))

    def input_digests(self) -> dict[str, bytes]:
        """Return a path -> digest mapping of the inputs, in record order."""
        return dict(self._input_map)

    def output_digests(self) -> dict[str, bytes]:
        """Return a path -> digest mapping of the outputs, in record order."""
        return dict(self._output_map)


def _digest_map(files: tuple[FileRecord, ...], side: str, label: str) -> dict[str, bytes]:
    result: dict[str, bytes] = {}
    for f in files:
        if f.path in result:
            raise MalformedRecordError(f"duplicate {side} path {f.path!r} in action {label!r}")
        result[f.path] = f.digest
    return result
