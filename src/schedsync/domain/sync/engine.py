"""Reconciliation pass driver.

One pass walks the feed once, in order::

    read -> derive identity -> resolve against the store -> (skip | map -> append)

and returns the accumulated batch. The engine only reads from the store; the
caller applies the batch as one atomic unit. Any ``SyncError`` aborts the pass
and no batch is returned, so nothing from a failed pass can be applied.

Passes over the same kind must not overlap: conflict reads are not isolated
from a concurrent pass's write-back. Serialising passes is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from .batch import Batch
from .entries import END_OF_STREAM
from .errors import SyncError
from .identity import derive_identity
from .mapping import map_fields
from .policy import UPDATED_FIELD
from .resolve import LocalSnapshot, Skip, fetch_snapshot, resolve

if TYPE_CHECKING:
    from schedsync.domain.ports.feed import EntryReader
    from schedsync.domain.ports.store import SnapshotReader

    from .policy import SyncPolicy

log = logging.getLogger(__name__)


@dataclass(slots=True)
class PassCounters:
    """Row counts observed during one pass."""

    read: int = 0
    superseded: int = 0
    skipped: int = 0


@dataclass(slots=True)
class PassResult:
    """Batch built by one pass plus its counters."""

    batch: Batch
    counters: PassCounters = field(default_factory=PassCounters)


def reconcile(policy: SyncPolicy, reader: EntryReader, store: SnapshotReader) -> PassResult:
    """Run one reconciliation pass for ``policy.kind``."""

    batch = Batch()
    counters = PassCounters()
    try:
        while (entry := reader.advance()) is not END_OF_STREAM:
            counters.read += 1
            identity = derive_identity(entry, policy)
            snapshot = _current_snapshot(identity, batch, store, policy)
            resolution = resolve(identity, entry.updated, snapshot)
            if isinstance(resolution, Skip):
                counters.skipped += 1
                continue

            fields = map_fields(entry, identity, resolution.owned_fields, policy)
            batch.append(identity, fields)
            counters.superseded += 1
    except SyncError as exc:
        log.warning(
            "Aborting %s pass after %s entries: %s",
            policy.kind,
            counters.read,
            exc,
        )
        raise

    log.info(
        "Finished %s pass: read=%s, superseded=%s, skipped=%s, mutations=%s",
        policy.kind,
        counters.read,
        counters.superseded,
        counters.skipped,
        len(batch),
    )
    return PassResult(batch=batch, counters=counters)


def sync(policy: SyncPolicy, reader: EntryReader, store: SnapshotReader) -> Batch:
    """Return the batch that brings ``store`` up to date with ``reader``'s feed."""

    return reconcile(policy, reader, store).batch


def _current_snapshot(
    identity: str,
    batch: Batch,
    store: SnapshotReader,
    policy: SyncPolicy,
) -> LocalSnapshot:
    # Duplicate rows resolve against the pending upsert of this pass.
    pending = batch.pending(identity)
    if pending is None:
        return fetch_snapshot(store, identity, policy)

    pending_updated = pending.fields[UPDATED_FIELD]
    if not isinstance(pending_updated, int):
        raise TypeError(f"Pending upsert for {identity} has no integer {UPDATED_FIELD!r}")
    owned = {name: pending.fields[name] for name in policy.owned_fields if name in pending.fields}
    return LocalSnapshot(last_updated=pending_updated, owned_fields=MappingProxyType(owned))
