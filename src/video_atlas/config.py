"""Application configuration via environment variables and layered config files."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from video_atlas.logging import get_logger

logger = get_logger(__name__)

# Channels aggregated by default
DEFAULT_CHANNEL_IDS = [
    "UCynoa1DjwnvHAowA_jiMEAQ",
    "UCK0KOjX3beyB9nzonls0cuw",
    "UCACkIrvrGAQ7kuc0hMVwvmA",
    "UCtWRAKKvOEA0CXOue9BG8ZA",
]

# Searched in priority order: local development, CI, checked-in template
CONFIG_FILES = (
    "config.properties",
    "config.properties.ci",
    "config.properties.template",
)

API_KEY_PROPERTY = "youtubeApiKey"
API_KEY_PLACEHOLDER = "YOUR_YOUTUBE_API_KEY_HERE"
FALLBACK_API_KEY = "FALLBACK_API_KEY"

AUTHORIZED_EMAILS_PROPERTY = "authorized_emails"
FALLBACK_AUTHORIZED_EMAILS = ["fallback1@example.com", "fallback2@example.com"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///video_atlas.db",
        description="SQLAlchemy URL of the local video store",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )

    # Providers
    upstream_provider: str = Field(
        default="youtube",
        description="Upstream content provider (youtube, stub)",
    )
    geocoder_provider: str = Field(
        default="nominatim",
        description="Reverse geocoding provider (nominatim, stub, none)",
    )

    # YouTube Data API
    youtube_api_key: str | None = Field(
        default=None,
        description="YouTube Data API key (falls back to the layered config files)",
    )
    youtube_base_url: str = Field(
        default="https://www.googleapis.com/youtube/v3/",
        description="YouTube Data API base URL",
    )
    youtube_client_package: str = Field(
        default="dev.elainedb.android_claude",
        description="Package identity sent with every request for app-restricted keys",
    )
    youtube_client_cert: str = Field(
        default="",
        description="Base64 SHA-1 fingerprint of the signing certificate",
    )
    youtube_client_cert_path: Path | None = Field(
        default=None,
        description="DER certificate to fingerprint when youtube_client_cert is unset",
    )
    channel_ids: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CHANNEL_IDS),
        description="Channel ids to aggregate",
    )

    # Pipeline
    max_pages_per_channel: int = Field(
        default=5,
        description="Hard cap on list pages fetched per channel",
    )
    detail_batch_size: int = Field(
        default=50,
        description="Video ids per detail request (upstream maximum is 50)",
    )
    cache_ttl_hours: int = Field(
        default=24,
        description="Hours a cached video is served without refetching",
    )
    pipeline_timeout_seconds: float | None = Field(
        default=None,
        description="Abandon a refresh after this many seconds",
    )

    # Geocoding
    geocoder_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Nominatim-compatible reverse geocoding service",
    )
    geocoder_user_agent: str = Field(
        default="video-atlas/0.1",
        description="User-Agent sent to the geocoding service",
    )
    geocoder_max_concurrency: int = Field(
        default=1,
        description="Reverse geocoding requests allowed in flight at once",
    )
    geocoder_min_interval_seconds: float = Field(
        default=1.0,
        description="Minimum spacing between reverse geocoding request starts",
    )

    # Layered config files
    config_dir: Path = Field(
        default=Path("."),
        description="Directory searched for config.properties files",
    )


def read_properties(path: Path) -> dict[str, str]:
    """Parse a Java-style ``key=value`` properties file."""
    properties: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith(("#", "!")):
            continue
        separator = min(
            (index for index in (line.find("="), line.find(":")) if index != -1),
            default=-1,
        )
        if separator == -1:
            properties[line] = ""
            continue
        properties[line[:separator].strip()] = line[separator + 1 :].strip()
    return properties


def _layered_properties(config_dir: Path):
    """Yield ``(file_name, properties)`` for each config file that exists."""
    for file_name in CONFIG_FILES:
        path = config_dir / file_name
        try:
            properties = read_properties(path)
        except OSError:
            logger.debug("config_file_missing", file=file_name)
            continue
        yield file_name, properties


def load_youtube_api_key(config_dir: Path) -> str:
    """Return the first usable API key from the layered config files."""
    for file_name, properties in _layered_properties(config_dir):
        api_key = properties.get(API_KEY_PROPERTY, "").strip().replace("`", "").replace('"', "")
        if api_key and api_key != API_KEY_PLACEHOLDER:
            logger.debug("api_key_loaded", file=file_name, length=len(api_key))
            return api_key

    logger.warning("api_key_not_found", config_dir=str(config_dir))
    return FALLBACK_API_KEY


def load_authorized_emails(config_dir: Path) -> list[str]:
    """Return the authorized account list from the layered config files."""
    for file_name, properties in _layered_properties(config_dir):
        raw = properties.get(AUTHORIZED_EMAILS_PROPERTY, "")
        if raw.strip():
            emails = [email.strip() for email in raw.split(",") if email.strip()]
            logger.debug("authorized_emails_loaded", file=file_name, count=len(emails))
            return emails

    logger.warning("authorized_emails_not_found", config_dir=str(config_dir))
    return list(FALLBACK_AUTHORIZED_EMAILS)


def resolve_api_key(settings: Settings) -> str:
    """Environment settings win over the layered config files."""
    if settings.youtube_api_key:
        return settings.youtube_api_key
    return load_youtube_api_key(settings.config_dir)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


# Convenience alias
settings = get_settings()
