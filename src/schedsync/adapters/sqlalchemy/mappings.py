"""SQLAlchemy table metadata for the local schedule store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from sqlalchemy import BigInteger, Column, Integer, MetaData, String, Table, Text

from schedsync.domain.sync.policy import UPDATED_FIELD, EntityKind

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

vendors_table = Table(
    "vendors",
    metadata,
    Column("vendor_id", String(64), primary_key=True),
    Column(UPDATED_FIELD, BigInteger, nullable=False),
    Column("name", Text),
    Column("location", Text),
    Column("description", Text),
    Column("url", Text),
    Column("product_description", Text),
    Column("track_id", String(64), index=True),
    Column("logo_url", Text),
    Column("starred", Integer, nullable=False, default=0, server_default="0"),
)

speakers_table = Table(
    "speakers",
    metadata,
    Column("speaker_id", String(130), primary_key=True),
    Column(UPDATED_FIELD, BigInteger, nullable=False),
    Column("name", Text),
    Column("company", Text),
    Column("abstract", Text),
)

TABLE_BY_KIND: Final[Mapping[EntityKind, Table]] = {
    EntityKind.VENDOR: vendors_table,
    EntityKind.SPEAKER: speakers_table,
}


def create_all_tables(engine: Engine) -> None:
    """Create every table directly from metadata (no migration history)."""

    log.debug("Creating schedule tables on %s", engine.url)
    metadata.create_all(engine)
