"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from schedsync.adapters.spreadsheet import SpreadsheetFeedClient
from schedsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyScheduleUnitOfWork,
    is_started,
    startup,
)
from schedsync.config import get_feed_config
from schedsync.domain.sync import EntityKind, reconcile, speaker_policy, vendor_policy

if TYPE_CHECKING:
    from collections.abc import Callable

    from schedsync.config import FeedConfig
    from schedsync.domain.ports.feed import EntryReader
    from schedsync.domain.ports.unit_of_work import ScheduleUnitOfWork
    from schedsync.domain.sync import SyncPolicy

    type UnitOfWorkFactory = Callable[[], ScheduleUnitOfWork]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncSummary:
    """Outcome of one feed synchronisation."""

    kind: EntityKind
    read: int
    superseded: int
    skipped: int
    mutations: int
    applied: bool


def sync_vendors(
    *,
    reader: EntryReader | None = None,
    feed_config: FeedConfig | None = None,
    client: SpreadsheetFeedClient | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    dry_run: bool = False,
) -> SyncSummary:
    """Synchronise the vendors feed into the local store."""

    config = feed_config or get_feed_config()
    policy = vendor_policy(aliases=config.track_aliases(), logo_base_url=config.logo_base_url)
    return sync_feed(
        policy,
        reader=reader or _open_remote_reader(config, EntityKind.VENDOR, client),
        unit_of_work_factory=unit_of_work_factory,
        dry_run=dry_run,
    )


def sync_speakers(
    *,
    reader: EntryReader | None = None,
    feed_config: FeedConfig | None = None,
    client: SpreadsheetFeedClient | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    dry_run: bool = False,
) -> SyncSummary:
    """Synchronise the speakers feed into the local store."""

    config = feed_config or get_feed_config()
    return sync_feed(
        speaker_policy(),
        reader=reader or _open_remote_reader(config, EntityKind.SPEAKER, client),
        unit_of_work_factory=unit_of_work_factory,
        dry_run=dry_run,
    )


def sync_feed(
    policy: SyncPolicy,
    *,
    reader: EntryReader,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    dry_run: bool = False,
) -> SyncSummary:
    """Run one reconciliation pass and apply its batch atomically.

    Callers must not run two passes for the same kind concurrently.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    log.info("Starting %s sync (dry_run=%s)", policy.kind, dry_run)

    with effective_uow() as uow:
        store = uow.repositories.for_kind(policy.kind)
        result = reconcile(policy, reader, store)
        applied = False
        if result.batch and not dry_run:
            store.apply_batch(result.batch)
            uow.commit()
            applied = True

    summary = SyncSummary(
        kind=policy.kind,
        read=result.counters.read,
        superseded=result.counters.superseded,
        skipped=result.counters.skipped,
        mutations=len(result.batch),
        applied=applied,
    )
    log.info(
        "Finished %s sync: read=%s, superseded=%s, skipped=%s, mutations=%s, applied=%s",
        summary.kind,
        summary.read,
        summary.superseded,
        summary.skipped,
        summary.mutations,
        summary.applied,
    )
    return summary


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyScheduleUnitOfWork


def _open_remote_reader(
    config: FeedConfig,
    kind: EntityKind,
    client: SpreadsheetFeedClient | None,
) -> EntryReader:
    effective_client = client or SpreadsheetFeedClient(resilience=config.resilience)
    return effective_client.open_reader(config.feed_url(kind))
