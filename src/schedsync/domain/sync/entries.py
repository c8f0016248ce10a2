"""Feed rows as seen by the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, Literal

from .errors import MalformedFeedError

if TYPE_CHECKING:
    from collections.abc import Mapping


class EndOfStream(Enum):
    """Marker returned by entry readers once the document is exhausted."""

    END_OF_STREAM = "end-of-stream"


END_OF_STREAM: Final = EndOfStream.END_OF_STREAM
type EntryOrEnd = Entry | Literal[EndOfStream.END_OF_STREAM]


@dataclass(frozen=True, slots=True)
class Entry:
    """One parsed feed row: ordered column values plus the row's ``updated`` clock.

    ``updated`` is a monotonic logical clock in epoch milliseconds.
    """

    columns: Mapping[str, str]
    updated: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    def __contains__(self, name: object) -> bool:
        return name in self.columns

    def get(self, name: str) -> str | None:
        return self.columns.get(name)

    def require(self, name: str) -> str:
        """Return column ``name`` or raise if the row does not carry it."""

        try:
            return self.columns[name]
        except KeyError:
            raise MalformedFeedError(
                f"Feed entry (updated={self.updated}) is missing required column {name!r}"
            ) from None
