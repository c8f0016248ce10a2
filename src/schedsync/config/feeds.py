"""Remote feed locations and vendor-derivation settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from pydantic import TypeAdapter, ValidationError

from schedsync.domain.sync.policy import DEFAULT_LOGO_BASE_URL, EntityKind, TrackAliases

from .env import optional_env_var
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

FEED_URL_ENV: Final[Mapping[EntityKind, str]] = {
    EntityKind.VENDOR: "SCHEDSYNC_VENDORS_FEED_URL",
    EntityKind.SPEAKER: "SCHEDSYNC_SPEAKERS_FEED_URL",
}
LOGO_BASE_URL_ENV: Final[str] = "SCHEDSYNC_LOGO_BASE_URL"
TRACK_ALIASES_ENV: Final[str] = "SCHEDSYNC_TRACK_ALIASES"
FEED_TIMEOUT_SECONDS: Final[float] = 30.0

_ALIAS_DOCUMENT = TypeAdapter(dict[str, str])


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="spreadsheet-feed",
        timeout_seconds=FEED_TIMEOUT_SECONDS,
        default_headers={"Accept": "application/atom+xml"},
    )


@dataclass(frozen=True, slots=True)
class FeedConfig:
    """Where feeds live and how vendor rows derive their track and logo values."""

    feed_urls: Mapping[EntityKind, str] = field(default_factory=dict["EntityKind", "str"])
    logo_base_url: str = DEFAULT_LOGO_BASE_URL
    track_aliases_path: Path | None = None
    resilience: ResilienceConfig = field(default_factory=_default_resilience)

    def feed_url(self, kind: EntityKind) -> str:
        try:
            return self.feed_urls[kind]
        except KeyError:
            raise MissingConfigurationError(
                f"Missing configuration for: {FEED_URL_ENV[kind]}"
            ) from None

    def track_aliases(self) -> TrackAliases:
        if self.track_aliases_path is None:
            return TrackAliases()
        return load_track_aliases(self.track_aliases_path)


def get_feed_config(*, resilience: ResilienceConfig | None = None) -> FeedConfig:
    feed_urls: dict[EntityKind, str] = {}
    for kind, env_name in FEED_URL_ENV.items():
        url = optional_env_var(env_name)
        if url is not None:
            feed_urls[kind] = url
    aliases_path = optional_env_var(TRACK_ALIASES_ENV)
    return FeedConfig(
        feed_urls=feed_urls,
        logo_base_url=optional_env_var(LOGO_BASE_URL_ENV) or DEFAULT_LOGO_BASE_URL,
        track_aliases_path=Path(aliases_path) if aliases_path else None,
        resilience=resilience or _default_resilience(),
    )


def load_track_aliases(path: Path) -> TrackAliases:
    """Load a JSON object of ``{"legacy category": "canonical-track-id"}`` pairs."""

    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigurationError(f"Cannot read track aliases from {path}: {exc}") from exc
    try:
        document = _ALIAS_DOCUMENT.validate_json(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid track alias document {path}: {exc}") from exc
    return TrackAliases(document)

