from __future__ import annotations


class InvalidDateError(ValueError):
    pass


class IngestionError(Exception):
    """A source file or row could not be turned into tree nodes."""


class NetworkError(Exception):
    pass


class SourceSyncError(NetworkError):
    pass
