"""Errors raised by a reconciliation pass."""

from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for failures that abort a reconciliation pass."""


class MalformedFeedError(SyncError):
    """Raised when the feed structure is truncated or a required tag is missing.

    A malformed *value* never raises; only a malformed *structure* does.
    """


class StoreError(SyncError):
    """Raised when the local store cannot be read or a batch cannot be applied."""
