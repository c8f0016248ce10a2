"""Mutations and the ordered batch handed to the store in one atomic apply."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


class MutationType(StrEnum):
    DELETE = "delete"
    UPSERT = "upsert"


@dataclass(frozen=True, slots=True)
class Delete:
    """Remove any stored record for ``identity``."""

    identity: str

    @property
    def type(self) -> MutationType:
        return MutationType.DELETE


@dataclass(frozen=True, slots=True)
class Upsert:
    """Write ``fields`` as the complete record for ``identity``."""

    identity: str
    fields: Mapping[str, object]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def type(self) -> MutationType:
        return MutationType.UPSERT


type Mutation = Delete | Upsert


@dataclass(slots=True)
class Batch:
    """Ordered delete/upsert pairs, at most one pair per identity.

    Each ``Delete`` is immediately followed by the ``Upsert`` for the same
    identity. Order across identities carries no meaning.
    """

    _pairs: dict[str, tuple[Delete, Upsert]] = field(
        default_factory=dict["str", "tuple[Delete, Upsert]"]
    )

    def append(self, identity: str, fields: Mapping[str, object]) -> None:
        """Add the pair for ``identity``; a later pair replaces an earlier one in place."""

        self._pairs[identity] = (Delete(identity), Upsert(identity, fields))

    def pending(self, identity: str) -> Upsert | None:
        pair = self._pairs.get(identity)
        return pair[1] if pair is not None else None

    @property
    def mutations(self) -> tuple[Mutation, ...]:
        return tuple(mutation for pair in self._pairs.values() for mutation in pair)

    @property
    def identities(self) -> tuple[str, ...]:
        return tuple(self._pairs)

    def upserts(self) -> Iterator[Upsert]:
        for _delete, upsert in self._pairs.values():
            yield upsert

    def __iter__(self) -> Iterator[Mutation]:
        return iter(self.mutations)

    def __len__(self) -> int:
        return 2 * len(self._pairs)

    def __bool__(self) -> bool:
        return bool(self._pairs)
