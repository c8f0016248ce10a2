from __future__ import annotations

import pytest

from schedsync.domain.sync import (
    Delete,
    MalformedFeedError,
    StoreError,
    TrackAliases,
    Upsert,
    reconcile,
    speaker_policy,
    sync,
    vendor_policy,
)
from tests.helpers.feeds import ListEntryReader, make_entry, vendor_entry
from tests.helpers.store import InMemoryScheduleStore


def _upsert_for(mutations: tuple[object, ...], identity: str) -> Upsert:
    for mutation in mutations:
        if isinstance(mutation, Upsert) and mutation.identity == identity:
            return mutation
    raise AssertionError(f"no upsert for {identity}")


def test_new_vendor_produces_delete_and_upsert() -> None:
    entry = vendor_entry(
        "280 North, Inc.",
        updated=1000,
        companypod="Google APIs",
        companylogo="280north.png",
    )
    policy = vendor_policy(
        aliases=TrackAliases({"google-apis": "apis"}),
        logo_base_url="https://cdn.example/images/",
    )

    batch = sync(policy, ListEntryReader([entry]), InMemoryScheduleStore())

    mutations = batch.mutations
    assert mutations[0] == Delete("280-north-inc")
    upsert = _upsert_for(mutations, "280-north-inc")
    assert upsert.fields["track_id"] == "apis"
    assert upsert.fields["logo_url"] == "https://cdn.example/images/280north.png"
    assert upsert.fields["updated"] == 1000
    assert len(batch) == 2


def test_replayed_entry_with_equal_timestamp_is_a_no_op() -> None:
    store = InMemoryScheduleStore({"280-north-inc": {"vendor_id": "280-north-inc", "updated": 1000}})
    entry = vendor_entry("280 North, Inc.", updated=1000)

    result = reconcile(vendor_policy(), ListEntryReader([entry]), store)

    assert not result.batch
    assert result.counters.skipped == 1
    assert result.counters.superseded == 0


def test_newer_local_record_wins() -> None:
    store = InMemoryScheduleStore({"acme": {"vendor_id": "acme", "updated": 5000}})

    batch = sync(vendor_policy(), ListEntryReader([vendor_entry("Acme", updated=2000)]), store)

    assert not batch


def test_superseding_entry_inherits_starred() -> None:
    store = InMemoryScheduleStore(
        {"280-north-inc": {"vendor_id": "280-north-inc", "updated": 1000, "starred": 1}}
    )
    entry = vendor_entry("280 North, Inc.", updated=2000)

    batch = sync(vendor_policy(), ListEntryReader([entry]), store)

    upsert = _upsert_for(batch.mutations, "280-north-inc")
    assert upsert.fields["starred"] == 1
    assert upsert.fields["updated"] == 2000


def test_second_pass_over_applied_batch_is_empty() -> None:
    store = InMemoryScheduleStore(
        {"acme": {"vendor_id": "acme", "updated": 10, "starred": 1, "name": "Acme"}}
    )
    entries = [
        vendor_entry("Acme", updated=20, companylocation="Springfield"),
        vendor_entry("Globex", updated=30),
        vendor_entry("Initech", updated=40),
    ]
    policy = vendor_policy()

    first = sync(policy, ListEntryReader(entries), store)
    store.apply_batch(first)
    store.commit()
    second = sync(policy, ListEntryReader(entries), store)

    assert len(first) == 6
    assert not second
    assert store.records["acme"]["starred"] == 1
    assert store.records["acme"]["location"] == "Springfield"


def test_identity_is_stable_across_passes() -> None:
    entries = [vendor_entry("Acme, Ltd.", updated=1)]

    first = sync(vendor_policy(), ListEntryReader(entries), InMemoryScheduleStore())
    second = sync(vendor_policy(), ListEntryReader(entries), InMemoryScheduleStore())

    assert first.identities == second.identities == ("acme-ltd",)


def test_duplicate_rows_collapse_to_newest_pair() -> None:
    store = InMemoryScheduleStore({"acme": {"vendor_id": "acme", "updated": 1, "starred": 1}})
    entries = [
        vendor_entry("Acme", updated=10, companylocation="old"),
        vendor_entry("ACME", updated=30, companylocation="new"),
        vendor_entry("acme", updated=20, companylocation="stale"),
    ]

    result = reconcile(vendor_policy(), ListEntryReader(entries), store)

    assert result.batch.identities == ("acme",)
    assert len(result.batch) == 2
    upsert = _upsert_for(result.batch.mutations, "acme")
    assert upsert.fields["location"] == "new"
    assert upsert.fields["starred"] == 1
    assert result.counters.superseded == 2
    assert result.counters.skipped == 1
    assert store.snapshot_reads == ["acme"]


def test_malformed_entry_aborts_the_pass() -> None:
    store = InMemoryScheduleStore()
    entries = [
        vendor_entry("Acme", updated=10),
        make_entry(updated=11, companylocation="nowhere"),
    ]

    with pytest.raises(MalformedFeedError):
        reconcile(vendor_policy(), ListEntryReader(entries), store)

    assert store.applied == []


def test_speakers_use_the_same_engine() -> None:
    entries = [
        make_entry(updated=5, speakertitle="Jane Doe (Google)", speakercompany="Google"),
        make_entry(updated=6, speakertitle="Jane Doe", speakerldap="jdoe2"),
    ]

    batch = sync(speaker_policy(), ListEntryReader(entries), InMemoryScheduleStore())

    assert batch.identities == ("jane-doe", "jane-doe--jdoe2")
    upsert = _upsert_for(batch.mutations, "jane-doe")
    assert upsert.fields == {
        "updated": 5,
        "speaker_id": "jane-doe",
        "name": "Jane Doe (Google)",
        "company": "Google",
    }


def test_empty_feed_yields_empty_batch() -> None:
    result = reconcile(vendor_policy(), ListEntryReader([]), InMemoryScheduleStore())

    assert not result.batch
    assert result.counters.read == 0


def test_store_read_failure_aborts_the_pass() -> None:
    store = InMemoryScheduleStore()
    store.fail_on_read = True

    with pytest.raises(StoreError, match="unreadable"):
        reconcile(vendor_policy(), ListEntryReader([vendor_entry("Acme", updated=10)]), store)

    assert store.applied == []
