#!/usr/bin/env python3
"""Runtime sync session.

This module provides the SyncSession dataclass grouping everything a
running reconciliation needs: the I/O adapters, the cached state, the
current mode, and the asyncio tasks driving the cycles. Sessions are
runtime-only; the controller rebuilds one at startup from the persisted
sync-enabled flag.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from echosync.constants import DEFAULT_INTERVAL
from echosync.sync_state import SyncState

if TYPE_CHECKING:
    from echosync.local_clipboard import LocalClipboard
    from echosync.notifier import Notifier
    from echosync.remote import RemoteClipboard
    from echosync.state_store import StateStore


class SyncMode(enum.Enum):
    """Lifecycle state of the controller."""

    STOPPED = "stopped"
    FOREGROUND = "foreground"
    BACKGROUND = "background"


@dataclass
class SyncSession:
    """State for a clipboard sync session.

    Attributes:
        local: Device clipboard adapter.
        remote: Relay client.
        store: Durable state store.
        notifier: Sink for user-facing notifications.
        state: Cached last-known values, written through to store.
        interval: Seconds between reconciliation ticks.
        mode: Current lifecycle mode.
        cycle_lock: Serializes cycles so cache comparisons always see the
            latest committed values.
        scheduler: Task launching cycles on every tick, or None when idle.
        in_flight: Cycle tasks currently running, keyed by cycle name.
    """

    local: LocalClipboard
    remote: RemoteClipboard
    store: StateStore
    notifier: Notifier
    state: SyncState = field(default_factory=SyncState)
    interval: float = DEFAULT_INTERVAL
    mode: SyncMode = SyncMode.STOPPED
    cycle_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    scheduler: asyncio.Task[None] | None = None
    in_flight: dict[str, asyncio.Task[bool]] = field(default_factory=dict)

    @property
    def running(self) -> bool:
        """True while the session is in a running mode."""
        return self.mode is not SyncMode.STOPPED
