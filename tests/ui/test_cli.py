from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from schedsync.app import SyncSummary
from schedsync.config import MissingConfigurationError
from schedsync.domain.sync import END_OF_STREAM, EntityKind
from schedsync.ui import cli
from tests.helpers.feeds import atom_entry, atom_feed

if TYPE_CHECKING:
    from pathlib import Path


def _summary(kind: EntityKind, *, applied: bool = True) -> SyncSummary:
    return SyncSummary(kind=kind, read=1, superseded=1, skipped=0, mutations=2, applied=applied)


def test_vendors_command_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(**kwargs: object) -> SyncSummary:
        captured.update(kwargs)
        return _summary(EntityKind.VENDOR)

    monkeypatch.setattr(cli, "sync_vendors", fake_sync)

    cli.main(["vendors"])

    assert captured == {"reader": None, "dry_run": False}


def test_speakers_command_with_feed_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    feed = tmp_path / "speakers.xml"
    feed.write_bytes(
        atom_feed(atom_entry("2010-05-12T19:33:44.000Z", {"speakertitle": "Jane Doe"}))
    )
    titles: list[str | None] = []
    flags: list[object] = []

    def fake_sync(*, reader: cli.AtomEntryReader, dry_run: bool) -> SyncSummary:
        entry = reader.advance()
        assert entry is not END_OF_STREAM
        titles.append(entry.get("speakertitle"))
        flags.append(dry_run)
        return _summary(EntityKind.SPEAKER, applied=False)

    monkeypatch.setattr(cli, "sync_speakers", fake_sync)

    cli.main(["--verbose", "speakers", "--feed-file", str(feed), "--dry-run"])

    assert titles == ["Jane Doe"]
    assert flags == [True]


def test_missing_feed_file_exits_with_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["vendors", "--feed-file", str(tmp_path / "missing.xml")])

    assert excinfo.value.code == 2


def test_configuration_error_exits_with_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_sync(**_: object) -> SyncSummary:
        raise MissingConfigurationError("Missing configuration for: SCHEDSYNC_VENDORS_FEED_URL")

    monkeypatch.setattr(cli, "sync_vendors", fake_sync)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["vendors"])

    assert excinfo.value.code == 2


def test_sync_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_sync(**_: object) -> SyncSummary:
        raise RuntimeError("boom")

    monkeypatch.setattr(cli, "sync_speakers", fake_sync)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["speakers"])

    assert excinfo.value.code == 1


def test_subcommand_is_required() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2
