from __future__ import annotations

from typing import TYPE_CHECKING

from schedsync.adapters.spreadsheet import AtomEntryReader
from schedsync.adapters.sqlalchemy import SqlAlchemyScheduleStore, vendors_table
from schedsync.domain.ports import BatchWriter, EntryReader, ScheduleStore, SnapshotReader
from tests.helpers.feeds import ListEntryReader, atom_feed
from tests.helpers.store import InMemoryScheduleStore

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def test_readers_satisfy_entry_reader_port() -> None:
    assert isinstance(AtomEntryReader.from_bytes(atom_feed()), EntryReader)
    assert isinstance(ListEntryReader([]), EntryReader)


def test_stores_satisfy_store_ports(sqlite_session: Session) -> None:
    for store in (InMemoryScheduleStore(), SqlAlchemyScheduleStore(sqlite_session, vendors_table)):
        assert isinstance(store, SnapshotReader)
        assert isinstance(store, BatchWriter)
        assert isinstance(store, ScheduleStore)
