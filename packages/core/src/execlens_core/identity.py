"""Stable action identities across build runs.

An action's progress message often embeds details that vary between runs
without the action itself changing ("Building x.jar (12 source files)" vs
"(15 source files)"). Normalizers strip those known noisy suffixes so the same
logical action maps to the same identity, and therefore the same history entry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from execlens_store.errors import MalformedRecordError

logger = logging.getLogger(__name__)

IDENTITY_DELIMITER = "|"

Normalizer = Callable[[str], "str | None"]


def strip_jar_source_count(message: str) -> str | None:
    """Truncate a Java compile message at its parenthesized source summary.

    "Building pkg/lib.jar (20 source files, 3 source jars) and running ..."
    becomes "Building pkg/lib.jar". Returns None for any other message.
    """
    if message.startswith("Building ") and ".jar (" in message:
        return message[: message.index("(")].rstrip()
    return None


DEFAULT_NORMALIZERS: tuple[Normalizer, ...] = (strip_jar_source_count,)


def normalize_message(message: str, normalizers: Iterable[Normalizer] = DEFAULT_NORMALIZERS) -> str:
    """Apply the first normalizer that recognizes ``message``; otherwise return it verbatim."""
    for normalizer in normalizers:
        result = normalizer(message)
        if result is not None:
            return result

    if "(" in message:
        logger.debug("No normalizer matched parenthesized progress message; identity may be unstable: %r", message)
    return message


def normalize(
    identity_label: str,
    progress_message: str,
    normalizers: Iterable[Normalizer] = DEFAULT_NORMALIZERS,
) -> str:
    """Derive the ActionIdentity for a label and progress message.

    Raises MalformedRecordError when the label is missing: without one there
    is nothing stable to key history on.
    """
    if not identity_label:
        raise MalformedRecordError(f"action has no identity label (progress message: {progress_message!r})")
    return identity_label + IDENTITY_DELIMITER + normalize_message(progress_message or "", normalizers)
