"""Field mapping from feed rows to store fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .policy import UPDATED_FIELD

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .entries import Entry
    from .policy import SyncPolicy


def map_fields(
    entry: Entry,
    identity: str,
    owned_fields: Mapping[str, object],
    policy: SyncPolicy,
) -> dict[str, object]:
    """Build the store fields for ``entry``.

    Columns missing from the row are omitted rather than cleared. Owned fields
    from the prior snapshot are re-applied verbatim; this is the only way a
    locally owned value survives the delete+insert pair.
    """

    fields: dict[str, object] = {
        UPDATED_FIELD: entry.updated,
        policy.identity_field: identity,
    }
    for mapping in policy.fields:
        value = entry.get(mapping.source)
        if value is not None:
            fields[mapping.target] = value

    if policy.derive is not None:
        for name, value in policy.derive(entry).items():
            if value is not None:
                fields[name] = value

    for name, value in owned_fields.items():
        if name in policy.owned_fields:
            fields[name] = value
    return fields
