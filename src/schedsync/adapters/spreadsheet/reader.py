"""Incremental reader for Google Spreadsheets list feeds (Atom).

Rows arrive as ``<entry>`` elements; cell values are the ``gsx:*`` children and
the row clock is the Atom ``<updated>`` element::

    <entry>
      <updated>2010-05-12T19:33:44.123Z</updated>
      <gsx:companyname>280 North, Inc.</gsx:companyname>
      <gsx:companypod>Google APIs</gsx:companypod>
    </entry>

The document is fed to an ``XMLPullParser`` in chunks, so rows are handed out
before the whole body has been parsed. A truncated document surfaces as
``MalformedFeedError`` when the stream runs dry.
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
from collections import deque
from typing import TYPE_CHECKING, BinaryIO, Final, Literal

from schedsync.domain.sync.entries import END_OF_STREAM
from schedsync.domain.sync.errors import MalformedFeedError

from .translator import parse_entry

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from schedsync.domain.sync.entries import Entry, EntryOrEnd

log = logging.getLogger(__name__)

ATOM_NS: Final[str] = "http://www.w3.org/2005/Atom"
GSX_NS: Final[str] = "http://schemas.google.com/spreadsheets/2006/extended"
ENTRY_TAG: Final[str] = f"{{{ATOM_NS}}}entry"
UPDATED_TAG: Final[str] = f"{{{ATOM_NS}}}updated"
_GSX_PREFIX: Final[str] = f"{{{GSX_NS}}}"
DEFAULT_CHUNK_SIZE: Final[int] = 64 * 1024


class AtomEntryReader:
    """Pull ``Entry`` rows out of a spreadsheet feed byte stream."""

    def __init__(self, stream: BinaryIO, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._stream = stream
        self._chunk_size = chunk_size
        self._parser = ET.XMLPullParser(events=("start", "end"))
        self._root: ET.Element | None = None
        self._ready: deque[Entry] = deque()
        self._exhausted = False
        self.entries_read = 0

    @classmethod
    def from_bytes(cls, data: bytes, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AtomEntryReader:
        return cls(io.BytesIO(data), chunk_size=chunk_size)

    def advance(self) -> EntryOrEnd:
        while not self._ready:
            if self._exhausted:
                return END_OF_STREAM
            self._pump()
        self.entries_read += 1
        return self._ready.popleft()

    def __iter__(self) -> Iterator[Entry]:
        while (entry := self.advance()) is not END_OF_STREAM:
            yield entry

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> AtomEntryReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.close()
        return False

    def _pump(self) -> None:
        chunk = self._stream.read(self._chunk_size)
        try:
            if chunk:
                self._parser.feed(chunk)
            else:
                self._exhausted = True
                self._parser.close()
        except ET.ParseError as exc:
            raise MalformedFeedError(f"Feed document is truncated or not well-formed: {exc}") from exc

        for event, element in self._parser.read_events():
            if event == "start":
                if self._root is None:
                    self._root = element
                continue
            if element.tag != ENTRY_TAG:
                continue
            self._ready.append(parse_entry(_entry_payload(element)))
            self._release(element)

    def _release(self, element: ET.Element) -> None:
        # Parsed rows are detached so the tree never holds more than one entry.
        element.clear()
        if self._root is not None and element in self._root:
            self._root.remove(element)


def _entry_payload(element: ET.Element) -> dict[str, object]:
    updated: str | None = None
    columns: dict[str, str] = {}
    for child in element:
        if child.tag == UPDATED_TAG:
            updated = child.text
        elif child.tag.startswith(_GSX_PREFIX):
            columns[child.tag.removeprefix(_GSX_PREFIX)] = child.text or ""
    if updated is None:
        log.debug("Entry without <updated>: %s", columns)
    return {"updated": updated, "columns": columns}
