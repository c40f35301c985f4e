#!/usr/bin/env python3
"""
Durable key-value state for echosync.

State survives process restarts in a small JSON file holding a flat
mapping of string keys to string values. Every write replaces the whole
file atomically (temp file, fsync, os.replace), so a crash mid-write can
lose the most recent update but never leaves a half-written file behind.

Keys in use:
- lastClipboard: last local value observed or applied
- lastDesktopClipboard: last desktop value applied locally
- backgroundSyncRunning: "true" while sync is enabled
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from platformdirs import user_data_dir
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from echosync.errors import PersistenceError

logger = logging.getLogger(__name__)

# Retry parameters for replacing the state file while another process
# (virus scanner, indexer) briefly holds it open.
REPLACE_ATTEMPTS: int = 3
REPLACE_WAIT: float = 0.05


def default_state_path() -> Path:
    """Return the per-user location of the state file."""
    return Path(user_data_dir("echosync", appauthor=False)) / "state.json"


@retry(
    wait=wait_fixed(REPLACE_WAIT),
    retry=retry_if_exception_type(PermissionError),
    stop=stop_after_attempt(REPLACE_ATTEMPTS),
    reraise=True,
)
def _replace(source: str, target: Path) -> None:
    """Atomically move source over target."""
    os.replace(source, target)


def _load(path: Path) -> dict[str, str]:
    """Read the state mapping from disk.

    A missing file yields an empty mapping. A corrupt file is moved aside
    to ``<name>.bak`` and also yields an empty mapping.

    Raises:
        PersistenceError: If the file exists but cannot be read.
    """
    if not path.exists():
        return {}
    try:
        raw_bytes = path.read_bytes()
    except OSError as e:
        raise PersistenceError(f"Cannot read state file {path}: {e}") from e
    try:
        raw = raw_bytes.decode("utf-8")
        data = json.loads(raw) if raw.strip() else {}
        if not isinstance(data, dict):
            raise ValueError("state file must contain a JSON object")
    except ValueError as e:
        logger.warning("State file %s is corrupt (%s), starting empty", path, e)
        backup = path.with_name(path.name + ".bak")
        try:
            os.replace(path, backup)
        except OSError as exc:
            logger.warning("Failed to back up corrupt state file: %s", exc)
        return {}
    return {str(k): v for k, v in data.items() if isinstance(v, str)}


def _dump(path: Path, values: dict[str, str]) -> None:
    """Write the state mapping to disk atomically.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    temp_path = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=str(path.parent), prefix=".state_tmp_", suffix=".json"
        )
        os.chmod(temp_path, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(values, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        _replace(temp_path, path)
        temp_path = None
    except OSError as e:
        raise PersistenceError(f"Cannot write state file {path}: {e}") from e
    finally:
        if temp_path and os.path.exists(temp_path):
            try:
                os.unlink(temp_path)
            except OSError as exc:
                logger.warning("Failed to remove temp state file %s: %s", temp_path, exc)


class StateStore:
    """Named string values persisted across restarts.

    The store is the exclusive owner of the state file. Values are kept in
    memory after the first load and written through on every set.

    Args:
        path: Location of the JSON state file.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else default_state_path()
        self._values: dict[str, str] | None = None
        self._lock = asyncio.Lock()

    async def _ensure_loaded(self) -> dict[str, str]:
        if self._values is None:
            self._values = await asyncio.to_thread(_load, self.path)
        return self._values

    async def get(self, key: str) -> str | None:
        """Return the stored value for key, or None if it was never set.

        Raises:
            PersistenceError: If the state file cannot be read.
        """
        async with self._lock:
            values = await self._ensure_loaded()
            return values.get(key)

    async def set(self, key: str, value: str) -> None:
        """Store value under key and flush it to disk.

        The in-memory value only changes once the file write succeeded.

        Raises:
            PersistenceError: If the state file cannot be written.
        """
        await self.update({key: value})

    async def update(self, changes: dict[str, str]) -> None:
        """Store several values with a single file write.

        Raises:
            PersistenceError: If the state file cannot be written.
        """
        async with self._lock:
            values = await self._ensure_loaded()
            merged = {**values, **changes}
            await asyncio.to_thread(_dump, self.path, merged)
            self._values = merged

    async def get_flag(self, key: str) -> bool:
        """Return a boolean stored as the string "true"."""
        return await self.get(key) == "true"

    async def set_flag(self, key: str, enabled: bool) -> None:
        """Store a boolean as the string "true" or "false"."""
        await self.set(key, "true" if enabled else "false")

    async def snapshot(self) -> dict[str, str]:
        """Return a copy of every stored value."""
        async with self._lock:
            return dict(await self._ensure_loaded())
