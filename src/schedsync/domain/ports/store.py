"""Ports for reading local snapshots and applying mutation batches."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection

    from schedsync.domain.sync.batch import Batch
    from schedsync.domain.sync.resolve import LocalSnapshot


@runtime_checkable
class SnapshotReader(Protocol):
    """Point lookup of the reconciliation projection for one identity."""

    def get_snapshot(self, identity: str, *, owned_fields: Collection[str]) -> LocalSnapshot:
        """Return the snapshot, or one stamped ``NEVER`` when no record exists."""
        ...


@runtime_checkable
class BatchWriter(Protocol):
    """Atomic (all-or-nothing) application of a batch."""

    def apply_batch(self, batch: Batch) -> None: ...


@runtime_checkable
class ScheduleStore(SnapshotReader, BatchWriter, Protocol):
    """Store partition for one entity kind."""
