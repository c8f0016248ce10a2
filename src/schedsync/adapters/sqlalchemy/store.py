"""Schedule store partitions backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from contextlib import closing
from types import MappingProxyType
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError

from schedsync.domain.sync.batch import Delete, Upsert
from schedsync.domain.sync.errors import StoreError
from schedsync.domain.sync.policy import UPDATED_FIELD
from schedsync.domain.sync.resolve import ABSENT, LocalSnapshot

if TYPE_CHECKING:
    from collections.abc import Collection

    from sqlalchemy import Table
    from sqlalchemy.orm import Session
    from sqlalchemy.sql.expression import Executable

    from schedsync.domain.sync.batch import Batch, Mutation

log = logging.getLogger(__name__)


class SqlAlchemyScheduleStore:
    """One entity kind's table, read by point lookup and written batch-at-a-time."""

    def __init__(self, session: Session, table: Table) -> None:
        primary_key = list(table.primary_key.columns)
        if len(primary_key) != 1:
            raise ValueError(f"Table {table.name} must have a single-column primary key")
        self.session = session
        self.table = table
        self._key = primary_key[0]

    def get_snapshot(self, identity: str, *, owned_fields: Collection[str]) -> LocalSnapshot:
        owned_columns = [self.table.c[name] for name in owned_fields if name in self.table.c]
        stmt = (
            select(self.table.c[UPDATED_FIELD], *owned_columns)
            .where(self._key == identity)
            .limit(1)
        )
        try:
            with closing(self.session.execute(stmt)) as result:
                row = result.first()
        except SQLAlchemyError as exc:
            raise StoreError(f"Cannot read {self.table.name} snapshot for {identity}") from exc

        if row is None:
            return ABSENT
        values = row._mapping  # noqa: SLF001
        return LocalSnapshot(
            last_updated=int(values[UPDATED_FIELD]),
            owned_fields=MappingProxyType(
                {column.name: values[column.name] for column in owned_columns}
            ),
        )

    def apply_batch(self, batch: Batch) -> None:
        """Stage every mutation in the session transaction; the unit of work commits."""

        if not batch:
            return
        try:
            for mutation in batch:
                self.session.execute(self._statement(mutation))
        except SQLAlchemyError as exc:
            raise StoreError(f"Cannot apply {len(batch)} mutations to {self.table.name}") from exc
        log.info("Staged %s mutations for %s", len(batch), self.table.name)

    def _statement(self, mutation: Mutation) -> Executable:
        if isinstance(mutation, Delete):
            return delete(self.table).where(self._key == mutation.identity)
        if isinstance(mutation, Upsert):
            return insert(self.table).values(dict(mutation.fields))
        raise TypeError(f"Unsupported mutation: {mutation!r}")
