"""SQLAlchemy adapter package for schedsync."""

from __future__ import annotations

from .mappings import TABLE_BY_KIND, create_all_tables, metadata, speakers_table, vendors_table
from .store import SqlAlchemyScheduleStore

__all__ = [
    "TABLE_BY_KIND",
    "SqlAlchemyScheduleStore",
    "create_all_tables",
    "metadata",
    "speakers_table",
    "vendors_table",
]
