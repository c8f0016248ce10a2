"""Per-record conflict resolution against the local store.

Responsibilities of this stage:
- read the minimal local projection for one identity (``updated`` plus the
  fields the store owns locally)
- decide whether the incoming row supersedes the local record

The decision rule is a strict greater-than on the logical clock, which makes a
re-run over an unchanged feed produce no mutations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import total_ordering
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

    from schedsync.domain.ports.store import SnapshotReader

    from .policy import SyncPolicy

log = logging.getLogger(__name__)


@total_ordering
class _UpdatedNever:
    """Clock value of a record that does not exist locally; sorts before any timestamp."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NEVER"

    def __eq__(self, other: object) -> bool:
        return other is self

    def __lt__(self, other: object) -> bool:
        return other is not self

    def __hash__(self) -> int:
        return hash(_UpdatedNever)


NEVER: Final = _UpdatedNever()
type LastUpdated = int | _UpdatedNever


def _empty_mapping() -> Mapping[str, object]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class LocalSnapshot:
    """Local state relevant to reconciliation for one identity."""

    last_updated: LastUpdated = NEVER
    owned_fields: Mapping[str, object] = field(default_factory=_empty_mapping)

    @property
    def exists(self) -> bool:
        return self.last_updated is not NEVER


ABSENT: Final = LocalSnapshot()


@dataclass(frozen=True, slots=True)
class Skip:
    """Local record is as new as, or newer than, the incoming row."""

    last_updated: LastUpdated


@dataclass(frozen=True, slots=True)
class Supersede:
    """Incoming row replaces the local record; ``owned_fields`` must be carried over."""

    owned_fields: Mapping[str, object]


type Resolution = Skip | Supersede


def resolve(identity: str, updated: int, snapshot: LocalSnapshot) -> Resolution:
    """Decide between ``Skip`` and ``Supersede`` for a row stamped ``updated``."""

    log.debug(
        "Resolving %s: local_updated=%r, server_updated=%s",
        identity,
        snapshot.last_updated,
        updated,
    )
    if snapshot.last_updated >= updated:
        return Skip(last_updated=snapshot.last_updated)
    return Supersede(owned_fields=snapshot.owned_fields)


def fetch_snapshot(reader: SnapshotReader, identity: str, policy: SyncPolicy) -> LocalSnapshot:
    """Read the projection ``policy`` needs for ``identity``.

    Owned fields the store reports as ``None`` are dropped so that inheritance
    never writes an explicit "no value" over a fresh row.
    """

    snapshot = reader.get_snapshot(identity, owned_fields=policy.owned_fields)
    if not snapshot.exists:
        return ABSENT
    owned = {
        name: value
        for name, value in snapshot.owned_fields.items()
        if name in policy.owned_fields and value is not None
    }
    return LocalSnapshot(last_updated=snapshot.last_updated, owned_fields=MappingProxyType(owned))
