"""Ports for pulling rows out of a remote feed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from schedsync.domain.sync.entries import EntryOrEnd


@runtime_checkable
class EntryReader(Protocol):
    """Pull-based entry stream.

    ``advance`` returns the next row or ``END_OF_STREAM`` once the document is
    exhausted, and raises ``MalformedFeedError`` on a truncated structure.
    """

    def advance(self) -> EntryOrEnd: ...


__all__ = ["EntryReader"]
