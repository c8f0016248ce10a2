"""Stable, URL-safe identifiers derived from feed columns.

Identifiers double as store lookup keys and as the persisted id column, so the
derivation must be a pure function of its inputs: the same column values must
always produce the same token, pass after pass.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from .entries import Entry
    from .policy import SyncPolicy

MAX_IDENTITY_LENGTH: Final[int] = 64
PLACEHOLDER_PREFIX: Final[str] = "id"
DISAMBIGUATOR_SEPARATOR: Final[str] = "--"
_DIGEST_LENGTH: Final[int] = 12

_PARENTHETICAL = re.compile(r"\(.*?\)")
_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9_-]")
_REPEATED_SEPARATOR = re.compile(r"-{2,}")


def sanitize_id(
    value: str | None,
    *,
    strip_parenthetical: bool = False,
    max_length: int = MAX_IDENTITY_LENGTH,
) -> str:
    """Return a lower-case ``[a-z0-9_-]`` token for ``value``.

    Never raises. Input that sanitizes to nothing (empty, punctuation-only,
    scripts without an ASCII folding) becomes ``id-<digest>`` of the raw value.
    Tokens longer than ``max_length`` keep a digest suffix so distinct long
    values stay distinct.
    """

    raw = value or ""
    text = _PARENTHETICAL.sub("", raw) if strip_parenthetical else raw
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = text.lower()
    text = _WHITESPACE.sub("-", text.strip())
    text = _DISALLOWED.sub("", text)
    text = _REPEATED_SEPARATOR.sub("-", text).strip("-")

    if not text:
        return f"{PLACEHOLDER_PREFIX}-{_digest(raw)}"
    if len(text) > max_length:
        head = text[: max(max_length - _DIGEST_LENGTH - 1, 1)].rstrip("-")
        text = f"{head}-{_digest(raw)}"
    return text


def derive_identity(entry: Entry, policy: SyncPolicy) -> str:
    """Derive the record identity for ``entry`` according to ``policy``.

    The primary column must be present in the row; its value may be anything.
    """

    primary = entry.require(policy.identity_column)
    identity = sanitize_id(primary, strip_parenthetical=policy.strip_parenthetical)

    if policy.disambiguator_column is None:
        return identity
    disambiguator = entry.get(policy.disambiguator_column)
    if disambiguator is None or not disambiguator.strip():
        return identity
    suffix = sanitize_id(disambiguator)
    return f"{identity}{DISAMBIGUATOR_SEPARATOR}{suffix}"


def _digest(value: str) -> str:
    return hashlib.sha1(value.encode("utf-8"), usedforsecurity=False).hexdigest()[:_DIGEST_LENGTH]
