"""Storage key derivation for action identities."""

from __future__ import annotations

import hashlib

SHARD_PREFIX_LENGTH = 2


def storage_key(identity: str) -> str:
    """Return the hex SHA-256 of an identity.

    Two identities hashing to the same key overwrite each other's history.
    That is an accepted accuracy limitation, not something to chain around.
    """
    return hashlib.sha256(identity.encode("utf-8")).hexdigest()


def shard_of(key: str) -> str:
    """Return the shard directory name for a storage key."""
    return key[:SHARD_PREFIX_LENGTH]
