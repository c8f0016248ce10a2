"""Per-kind reconciliation policy.

Entity kinds differ only in data: which column identifies a row, which columns
are copied where, which store fields are owned locally, and an optional hook
computing derived fields. One engine runs every kind from a ``SyncPolicy``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

from .identity import sanitize_id

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .entries import Entry

    type DeriveFields = Callable[[Entry], Mapping[str, object | None]]

UPDATED_FIELD: Final[str] = "updated"
DEFAULT_LOGO_BASE_URL: Final[str] = "http://code.google.com/events/io/2010/images/"


class EntityKind(StrEnum):
    """Entity kinds that can be synchronised from a spreadsheet feed."""

    VENDOR = "vendor"
    SPEAKER = "speaker"


@dataclass(frozen=True, slots=True)
class FieldMapping:
    """Copy feed column ``source`` into store field ``target``."""

    source: str
    target: str


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncPolicy:
    """Everything the engine needs to know about one entity kind."""

    kind: EntityKind
    identity_column: str
    identity_field: str
    fields: tuple[FieldMapping, ...]
    owned_fields: frozenset[str] = frozenset()
    strip_parenthetical: bool = False
    disambiguator_column: str | None = None
    derive: DeriveFields | None = None

    def __post_init__(self) -> None:
        remote_targets = {mapping.target for mapping in self.fields}
        remote_targets |= {UPDATED_FIELD, self.identity_field}
        overlap = remote_targets & self.owned_fields
        if overlap:
            names = ", ".join(sorted(overlap))
            raise ValueError(f"{self.kind} policy marks remote fields as owned: {names}")


@dataclass(frozen=True, slots=True)
class TrackAliases:
    """Static mapping from legacy category tokens to canonical track ids.

    Keys are sanitized on construction so lookups can use sanitized tokens.
    Unknown tokens translate to themselves.
    """

    aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        normalized = {sanitize_id(key): value for key, value in self.aliases.items()}
        object.__setattr__(self, "aliases", MappingProxyType(normalized))

    def translate(self, token: str) -> str:
        return self.aliases.get(token, token)

    def __len__(self) -> int:
        return len(self.aliases)


class VendorColumns:
    """Columns of the remote vendors spreadsheet."""

    COMPANY_NAME: Final = "companyname"
    COMPANY_LOCATION: Final = "companylocation"
    COMPANY_DESC: Final = "companydesc"
    COMPANY_URL: Final = "companyurl"
    PRODUCT_DESC: Final = "productdesc"
    COMPANY_LOGO: Final = "companylogo"
    COMPANY_POD: Final = "companypod"

    # companyname: 280 North, Inc.
    # companylocation: San Francisco, California
    # companydesc: Creators of 280 Slides, a web based presentation
    # companyurl: www.280north.com
    # productdesc: 280 Slides relies on the Google AJAX APIs to provide
    # companylogo: 280north.png
    # companypod: Google APIs


class SpeakerColumns:
    """Columns of the remote speakers spreadsheet."""

    SPEAKER_TITLE: Final = "speakertitle"
    SPEAKER_COMPANY: Final = "speakercompany"
    SPEAKER_ABSTRACT: Final = "speakerabstract"
    SPEAKER_LDAP: Final = "speakerldap"


def compose_logo_url(base_url: str, filename: str | None) -> str | None:
    """Append the basename of ``filename`` to ``base_url`` as one quoted path segment."""

    if filename is None:
        return None
    name = PurePosixPath(filename.strip().replace("\\", "/")).name
    if not name or name in {".", ".."}:
        return None
    return f"{base_url.rstrip('/')}/{quote(name, safe='')}"


def resolve_track_id(aliases: TrackAliases, pod: str | None) -> str | None:
    """Sanitize a pod/category value and translate it through ``aliases``."""

    if pod is None or not pod.strip():
        return None
    return aliases.translate(sanitize_id(pod))


@dataclass(frozen=True, slots=True)
class VendorDerivedFields:
    """Derived vendor fields: canonical track id and absolute logo URL."""

    aliases: TrackAliases
    logo_base_url: str = DEFAULT_LOGO_BASE_URL

    def __call__(self, entry: Entry) -> dict[str, object | None]:
        return {
            "track_id": resolve_track_id(self.aliases, entry.get(VendorColumns.COMPANY_POD)),
            "logo_url": compose_logo_url(
                self.logo_base_url, entry.get(VendorColumns.COMPANY_LOGO)
            ),
        }


VENDOR_FIELDS: Final[tuple[FieldMapping, ...]] = (
    FieldMapping(VendorColumns.COMPANY_NAME, "name"),
    FieldMapping(VendorColumns.COMPANY_LOCATION, "location"),
    FieldMapping(VendorColumns.COMPANY_DESC, "description"),
    FieldMapping(VendorColumns.COMPANY_URL, "url"),
    FieldMapping(VendorColumns.PRODUCT_DESC, "product_description"),
)

SPEAKER_FIELDS: Final[tuple[FieldMapping, ...]] = (
    FieldMapping(SpeakerColumns.SPEAKER_TITLE, "name"),
    FieldMapping(SpeakerColumns.SPEAKER_COMPANY, "company"),
    FieldMapping(SpeakerColumns.SPEAKER_ABSTRACT, "abstract"),
)


def vendor_policy(
    *,
    aliases: TrackAliases | None = None,
    logo_base_url: str = DEFAULT_LOGO_BASE_URL,
) -> SyncPolicy:
    """Policy for the vendors feed; vendors own the user's ``starred`` flag."""

    return SyncPolicy(
        kind=EntityKind.VENDOR,
        identity_column=VendorColumns.COMPANY_NAME,
        identity_field="vendor_id",
        fields=VENDOR_FIELDS,
        owned_fields=frozenset({"starred"}),
        derive=VendorDerivedFields(aliases=aliases or TrackAliases(), logo_base_url=logo_base_url),
    )


def speaker_policy() -> SyncPolicy:
    """Policy for the speakers feed.

    Speaker titles may repeat across events, so identities are disambiguated
    by the speaker's directory handle when the row carries one.
    """

    return SyncPolicy(
        kind=EntityKind.SPEAKER,
        identity_column=SpeakerColumns.SPEAKER_TITLE,
        identity_field="speaker_id",
        fields=SPEAKER_FIELDS,
        strip_parenthetical=True,
        disambiguator_column=SpeakerColumns.SPEAKER_LDAP,
    )
