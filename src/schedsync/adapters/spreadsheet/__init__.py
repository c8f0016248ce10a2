"""Public interface for the spreadsheet feed adapter."""

from __future__ import annotations

from .client import FeedFetchError, SpreadsheetFeedClient
from .reader import AtomEntryReader
from .schema import EntryPayload, EntryPayloadInput
from .translator import parse_entry, to_epoch_millis

__all__ = [
    "AtomEntryReader",
    "EntryPayload",
    "EntryPayloadInput",
    "FeedFetchError",
    "SpreadsheetFeedClient",
    "parse_entry",
    "to_epoch_millis",
]
