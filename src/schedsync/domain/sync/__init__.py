"""Delta synchronisation of spreadsheet feeds into the local schedule store.

Flow of one pass:
1) pull entries from an ``EntryReader``
2) derive a sanitized identity per entry
3) resolve against the stored snapshot (skip or supersede)
4) map entry columns to store fields, inheriting owned fields
5) append a delete+upsert pair to the batch
"""

from __future__ import annotations

from .batch import Batch, Delete, Mutation, MutationType, Upsert
from .engine import PassCounters, PassResult, reconcile, sync
from .entries import END_OF_STREAM, EndOfStream, Entry, EntryOrEnd
from .errors import MalformedFeedError, StoreError, SyncError
from .identity import MAX_IDENTITY_LENGTH, derive_identity, sanitize_id
from .mapping import map_fields
from .policy import (
    DEFAULT_LOGO_BASE_URL,
    UPDATED_FIELD,
    EntityKind,
    FieldMapping,
    SpeakerColumns,
    SyncPolicy,
    TrackAliases,
    VendorColumns,
    VendorDerivedFields,
    compose_logo_url,
    resolve_track_id,
    speaker_policy,
    vendor_policy,
)
from .resolve import ABSENT, NEVER, LocalSnapshot, Resolution, Skip, Supersede, resolve

__all__ = [
    "ABSENT",
    "DEFAULT_LOGO_BASE_URL",
    "END_OF_STREAM",
    "MAX_IDENTITY_LENGTH",
    "NEVER",
    "UPDATED_FIELD",
    "Batch",
    "Delete",
    "EndOfStream",
    "EntityKind",
    "Entry",
    "EntryOrEnd",
    "FieldMapping",
    "LocalSnapshot",
    "MalformedFeedError",
    "Mutation",
    "MutationType",
    "PassCounters",
    "PassResult",
    "Resolution",
    "Skip",
    "SpeakerColumns",
    "StoreError",
    "Supersede",
    "SyncError",
    "SyncPolicy",
    "TrackAliases",
    "Upsert",
    "VendorColumns",
    "VendorDerivedFields",
    "compose_logo_url",
    "derive_identity",
    "map_fields",
    "reconcile",
    "resolve",
    "resolve_track_id",
    "sanitize_id",
    "speaker_policy",
    "sync",
    "vendor_policy",
]
