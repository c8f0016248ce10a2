"""Domain port definitions for adapters."""

from __future__ import annotations

from .feed import EntryReader
from .store import BatchWriter, ScheduleStore, SnapshotReader
from .unit_of_work import ScheduleRepositories, ScheduleUnitOfWork, UnitOfWork

__all__ = [
    "BatchWriter",
    "EntryReader",
    "ScheduleRepositories",
    "ScheduleStore",
    "ScheduleUnitOfWork",
    "SnapshotReader",
    "UnitOfWork",
]
