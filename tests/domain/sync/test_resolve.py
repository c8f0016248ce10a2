from __future__ import annotations

from types import MappingProxyType

from schedsync.domain.sync import (
    ABSENT,
    NEVER,
    LocalSnapshot,
    Skip,
    Supersede,
    resolve,
    speaker_policy,
    vendor_policy,
)
from schedsync.domain.sync.resolve import fetch_snapshot
from tests.helpers.store import InMemoryScheduleStore


def test_never_sorts_before_any_timestamp() -> None:
    assert NEVER < 0
    assert NEVER < -1
    assert not NEVER >= 0
    assert NEVER == NEVER
    assert NEVER != 0


def test_absent_snapshot_does_not_exist() -> None:
    assert not ABSENT.exists
    assert LocalSnapshot(last_updated=5).exists


def test_missing_record_is_superseded() -> None:
    resolution = resolve("acme", 100, ABSENT)

    assert isinstance(resolution, Supersede)
    assert dict(resolution.owned_fields) == {}


def test_older_local_record_is_superseded_with_owned_fields() -> None:
    snapshot = LocalSnapshot(last_updated=99, owned_fields=MappingProxyType({"starred": 1}))

    resolution = resolve("acme", 100, snapshot)

    assert isinstance(resolution, Supersede)
    assert dict(resolution.owned_fields) == {"starred": 1}


def test_equal_timestamps_are_skipped() -> None:
    resolution = resolve("acme", 100, LocalSnapshot(last_updated=100))

    assert resolution == Skip(last_updated=100)


def test_newer_local_record_is_skipped() -> None:
    resolution = resolve("acme", 100, LocalSnapshot(last_updated=101))

    assert isinstance(resolution, Skip)


def test_fetch_snapshot_returns_absent_for_unknown_identity() -> None:
    store = InMemoryScheduleStore()

    assert fetch_snapshot(store, "acme", vendor_policy()) is ABSENT


def test_fetch_snapshot_drops_null_owned_values() -> None:
    store = InMemoryScheduleStore(
        {
            "acme": {"vendor_id": "acme", "updated": 10, "starred": None},
            "globex": {"vendor_id": "globex", "updated": 11, "starred": 1},
        }
    )
    policy = vendor_policy()

    assert dict(fetch_snapshot(store, "acme", policy).owned_fields) == {}
    assert dict(fetch_snapshot(store, "globex", policy).owned_fields) == {"starred": 1}


def test_fetch_snapshot_without_owned_fields() -> None:
    store = InMemoryScheduleStore({"jane": {"speaker_id": "jane", "updated": 7}})

    snapshot = fetch_snapshot(store, "jane", speaker_policy())

    assert snapshot.last_updated == 7
    assert dict(snapshot.owned_fields) == {}
