"""Pydantic models describing one spreadsheet list-feed entry."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator


def _strip_text(value: object) -> object:
    if isinstance(value, str):
        return value.strip()
    return value


class SpreadsheetBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class EntryPayload(SpreadsheetBaseModel):
    """Raw values pulled from an ``<entry>`` element.

    ``columns`` holds the ``gsx:*`` cells keyed by local tag name, in feed order.
    """

    updated: AwareDatetime
    columns: dict[str, str] = Field(default_factory=dict)

    _strip_updated = field_validator("updated", mode="before")(_strip_text)

    @field_validator("columns", mode="before")
    @classmethod
    def _strip_cells(cls, value: object) -> object:
        if isinstance(value, Mapping):
            return {str(key): _strip_text(cell) for key, cell in value.items()}
        return value


type EntryPayloadInput = EntryPayload | Mapping[str, object]
