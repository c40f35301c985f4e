#!/usr/bin/env python3
"""Error types raised by echosync I/O adapters.

Every adapter translates its library's exceptions into one of these so the
reconciliation cycles only ever have to catch SyncError at their boundary.
"""


class SyncError(Exception):
    """Base class for recoverable synchronization failures."""

    pass


class NetworkError(SyncError):
    """Transport failure or non-2xx response from the relay."""

    pass


class PlatformError(SyncError):
    """The device clipboard could not be read or written."""

    pass


class PersistenceError(SyncError):
    """The durable state file could not be read or written."""

    pass


class PermissionDenied(SyncError):
    """Background execution capability is unavailable."""

    pass
