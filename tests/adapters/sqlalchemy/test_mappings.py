from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, inspect

from schedsync.adapters.sqlalchemy import TABLE_BY_KIND, create_all_tables, metadata
from schedsync.domain.sync import EntityKind, speaker_policy, vendor_policy

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def _columns(engine: Engine) -> dict[str, set[str]]:
    inspector = inspect(engine)
    return {
        name: {column["name"] for column in inspector.get_columns(name)}
        for name in inspector.get_table_names()
        if name != "alembic_version"
    }


def test_migrations_match_metadata(sqlite_engine: Engine) -> None:
    direct = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(direct)

    assert _columns(sqlite_engine) == _columns(direct)
    assert _columns(direct) == {
        table.name: {column.name for column in table.columns}
        for table in metadata.sorted_tables
    }
    direct.dispose()


def test_tables_hold_every_policy_field() -> None:
    for policy in (vendor_policy(), speaker_policy()):
        table = TABLE_BY_KIND[policy.kind]
        expected = {mapping.target for mapping in policy.fields}
        expected |= {"updated", policy.identity_field}
        expected |= policy.owned_fields
        assert expected <= set(table.c.keys())


def test_vendor_table_holds_derived_fields() -> None:
    columns = set(TABLE_BY_KIND[EntityKind.VENDOR].c.keys())

    assert {"track_id", "logo_url"} <= columns
