#!/usr/bin/env python3
"""Constants for echosync endpoints, polling and persisted state.

These values mirror the deployed relay service and the key names used by
the durable state file, so changing them breaks compatibility with
existing installations.
"""

# Default relay endpoints (tRPC batch procedures).
DEFAULT_PUSH_URL: str = (
    "https://echo-proxy-murex.vercel.app/api/trpc/clipboard.addItem?batch=1"
)
DEFAULT_PULL_URL: str = (
    "https://echo-proxy-murex.vercel.app/api/trpc/clipboard.getLastCopiedItem?batch=1"
)

# Origin tags sent with every request.
LOCAL_DEVICE: str = "mobile"
REMOTE_DEVICE: str = "desktop"

# Seconds between reconciliation ticks.
DEFAULT_INTERVAL: float = 1.0

# Seconds before an HTTP request to the relay is abandoned.
DEFAULT_TIMEOUT: float = 10.0

# Persisted state keys.
LAST_LOCAL_KEY: str = "lastClipboard"
LAST_REMOTE_KEY: str = "lastDesktopClipboard"
SYNC_ENABLED_KEY: str = "backgroundSyncRunning"

# Characters of clipboard text shown in notifications before truncation.
PREVIEW_LENGTH: int = 50
