"""Translate spreadsheet payloads into domain entries."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from schedsync.domain.sync.entries import Entry
from schedsync.domain.sync.errors import MalformedFeedError

from .schema import EntryPayload

if TYPE_CHECKING:
    from .schema import EntryPayloadInput

EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MILLISECOND: Final[timedelta] = timedelta(milliseconds=1)


def to_epoch_millis(value: datetime) -> int:
    """Exact epoch milliseconds for an aware datetime (sub-millisecond part truncated)."""

    return (value.astimezone(UTC) - EPOCH) // _ONE_MILLISECOND


def parse_entry(payload: EntryPayloadInput) -> Entry:
    """Validate ``payload`` and return the matching ``Entry``.

    A missing or unparseable ``updated`` stamp is a structural defect of the row.
    """

    try:
        model = (
            payload if isinstance(payload, EntryPayload) else EntryPayload.model_validate(payload)
        )
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
        raise MalformedFeedError(f"Invalid feed entry ({fields}): {exc}") from exc
    return Entry(columns=model.columns, updated=to_epoch_millis(model.updated))
