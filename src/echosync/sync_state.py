#!/usr/bin/env python3
"""
Last-known clipboard values for loop prevention.

Echo prevention is critical when polling two mutable clipboards: a value
pushed from this device comes straight back on the next pull, and without
tracking it would be re-applied locally, which in turn looks like a fresh
local change on the following tick.

The state tracks two values:
- last_local: last value read from (or applied to) the device clipboard.
  Prevents re-pushing unchanged content and, on the pull side, acts as the
  anti-echo guard.
- last_remote: last desktop value applied locally. Prevents re-applying the
  same desktop value on every tick.

Applying a remote value sets both fields, keeping the two sides in
lockstep. The state is an in-memory write-through cache of the durable
store: callers persist first and only then record the change here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from echosync.constants import LAST_LOCAL_KEY, LAST_REMOTE_KEY

if TYPE_CHECKING:
    from echosync.state_store import StateStore


@dataclass
class SyncState:
    """
    Track last-known values on both sides of the sync.

    Attributes:
        last_local: Last local clipboard value, or None on first run.
        last_remote: Last applied desktop value, or None on first run.
        skipped_local: Last local value refused as oversized; not persisted.
        skipped_remote: Last desktop value refused as oversized; not persisted.
    """

    last_local: str | None = None
    last_remote: str | None = None
    skipped_local: str | None = field(default=None, compare=False)
    skipped_remote: str | None = field(default=None, compare=False)

    @classmethod
    async def load(cls, store: StateStore) -> SyncState:
        """
        Rebuild the cache from the durable store.

        Args:
            store: The durable state store.

        Returns:
            A SyncState holding the persisted values.
        """
        return cls(
            last_local=await store.get(LAST_LOCAL_KEY),
            last_remote=await store.get(LAST_REMOTE_KEY),
        )

    def should_push(self, current: str | None) -> bool:
        """
        Check if a local clipboard value is a new local change.

        Args:
            current: Value just read from the device clipboard.

        Returns:
            True if the value is non-empty, was not refused as oversized,
            and differs from last_local.
        """
        if not current or current == self.skipped_local:
            return False
        return current != self.last_local

    def should_apply(self, incoming: str | None) -> bool:
        """
        Check if a pulled desktop value should be applied locally.

        Returns False for empty values, for a value already refused as
        oversized, for the desktop value already applied, and for echoes of
        the current local value.

        Args:
            incoming: Value just pulled from the relay.

        Returns:
            True if the value is a genuine desktop change.
        """
        if not incoming or incoming == self.skipped_remote:
            return False
        if incoming == self.last_remote:
            return False
        if incoming == self.last_local:
            return False
        return True

    def record_pushed(self, value: str) -> None:
        """
        Record a local value as observed.

        Args:
            value: The local value that was persisted.
        """
        self.last_local = value

    def record_applied(self, value: str) -> None:
        """
        Record a desktop value as applied to both sides.

        Args:
            value: The desktop value written to the device clipboard.
        """
        self.last_remote = value
        self.last_local = value

    @property
    def settled(self) -> bool:
        """True when both sides hold the same known value."""
        return self.last_local is not None and self.last_local == self.last_remote
