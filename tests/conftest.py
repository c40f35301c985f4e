#!/usr/bin/env python3
"""Pytest fixtures for echosync tests.

Provides in-memory stand-ins for the device clipboard, the relay and the
notification sink, plus a session wired to a state file under tmp_path.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from echosync.errors import NetworkError, PermissionDenied, PlatformError
from echosync.notifier import Notifier
from echosync.session import SyncSession
from echosync.state_store import StateStore


class FakeClipboard:
    """Device clipboard held in memory."""

    def __init__(self, value: str | None = None) -> None:
        self.value = value
        self.writes: list[str] = []
        self.fail_read = False
        self.fail_write = False

    async def read(self) -> str | None:
        if self.fail_read:
            raise PlatformError("clipboard unavailable")
        return self.value or None

    async def write(self, value: str) -> None:
        if self.fail_write:
            raise PlatformError("clipboard unavailable")
        self.writes.append(value)
        self.value = value


class FakeRemote:
    """Last-write-wins relay slot held in memory."""

    def __init__(self, value: str | None = None) -> None:
        self.value = value
        self.pushes: list[str] = []
        self.pulls = 0
        self.fail_push = False
        self.fail_pull = False

    async def push(self, value: str) -> None:
        if self.fail_push:
            raise NetworkError("relay unreachable")
        self.pushes.append(value)
        self.value = value

    async def pull(self) -> str | None:
        self.pulls += 1
        if self.fail_pull:
            raise NetworkError("relay unreachable")
        return self.value


class RecordingNotifier(Notifier):
    """Notifier that remembers what it was asked to show."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.acquired = False
        self.notifications: list[tuple[str, str]] = []

    async def acquire(self) -> None:
        if not self.available:
            raise PermissionDenied("notifications unavailable")
        self.acquired = True

    async def notify(self, title: str, body: str = "") -> None:
        self.notifications.append((title, body))

    @property
    def titles(self) -> list[str]:
        return [title for title, _ in self.notifications]


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Provide a temporary path for the durable state file."""
    return tmp_path / "state.json"


@pytest.fixture
def store(state_path: Path) -> StateStore:
    """Create a StateStore backed by a temporary file."""
    return StateStore(state_path)


@pytest.fixture
def clipboard() -> FakeClipboard:
    """Create an empty in-memory device clipboard."""
    return FakeClipboard()


@pytest.fixture
def remote() -> FakeRemote:
    """Create an empty in-memory relay."""
    return FakeRemote()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Create a recording notifier."""
    return RecordingNotifier()


@pytest.fixture
def session(
    clipboard: FakeClipboard,
    remote: FakeRemote,
    store: StateStore,
    notifier: RecordingNotifier,
) -> SyncSession:
    """Create a stopped session over the in-memory fakes."""
    return SyncSession(
        local=clipboard,  # type: ignore[arg-type]
        remote=remote,  # type: ignore[arg-type]
        store=store,
        notifier=notifier,
        interval=0.01,
    )
