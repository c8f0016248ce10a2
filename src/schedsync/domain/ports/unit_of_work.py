"""Unit-of-work abstractions for coordinating store partitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from schedsync.domain.sync.policy import EntityKind

if TYPE_CHECKING:
    from types import TracebackType

    from schedsync.domain.ports.store import ScheduleStore


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class ScheduleRepositories(RepositoryCollection):
    """Store partitions, one per entity kind."""

    vendors: ScheduleStore
    speakers: ScheduleStore

    def for_kind(self, kind: EntityKind) -> ScheduleStore:
        if kind is EntityKind.VENDOR:
            return self.vendors
        return self.speakers


type ScheduleUnitOfWork = UnitOfWork[ScheduleRepositories]
