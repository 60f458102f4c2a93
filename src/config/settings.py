"""Configuration management using Pydantic Settings.

This module provides type-safe configuration management with automatic
environment variable loading and validation using Pydantic Settings v2.

The configuration is organized into logical groups:
- CatalogConfig: Remote catalog endpoint, timeouts and retries
- RankingConfig: Search scoring weights
- MatchingConfig: Playlist conversion tolerances and pacing
- TranslationConfig: MusicBrainz name translation
- LinksConfig: Share-link resolution services
- HistoryConfig: Listening history capacities
- LoggingConfig: Logging levels, files, and debugging options
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogConfig(BaseModel):
    """Remote catalog backend connection settings."""

    base_url: str = ""
    timeout: float = 10.0
    retry_count: int = 3
    retry_base_delay: float = 1.0
    retry_max_delay: float = 8.0
    default_limit: int = 50
    preferred_quality: str = "LOSSLESS"
    stream_qualities: list[str] = ["HI_RES_LOSSLESS", "LOSSLESS", "HIGH", "LOW"]
    user_agent: str = "tidefinder/0.1.0"


class RankingConfig(BaseModel):
    """Search result scoring weights.

    Only the relative ordering matters: history > exact title > exact artist
    > prefix > substring > popularity.
    """

    title_exact: float = 3000.0
    title_prefix: float = 1000.0
    title_substring: float = 500.0
    artist_exact: float = 2000.0
    artist_prefix: float = 1000.0
    artist_substring: float = 500.0
    album_exact: float = 1500.0
    album_prefix: float = 800.0
    album_substring: float = 400.0
    context_artist_exact: float = 1000.0
    context_album_exact: float = 500.0
    transliteration: float = 2000.0
    history_exact: float = 10000.0
    history_artist: float = 3000.0
    history_album: float = 2000.0
    popularity_multiplier: float = 10.0
    playlist_base: float = 1200.0


class MatchingConfig(BaseModel):
    """Playlist conversion tolerances and rate limiting."""

    duration_tolerance: int = 5  # seconds
    relaxed_duration_tolerance: int = 10  # seconds
    keyword_overlap_ratio: float = 0.5
    candidate_limit: int = 10
    album_limit: int = 5
    track_delay: float = 0.15
    query_delay: float = 0.10


class TranslationConfig(BaseModel):
    """MusicBrainz artist-name translation settings."""

    enabled: bool = True
    confidence_threshold: int = 90
    app_name: str = "tidefinder"
    app_version: str = "0.1.0"
    contact: str = "https://github.com/tidefinder/tidefinder"
    request_interval: float = 1.1
    timeout: float = 5.0  # seconds, per lookup


class LinksConfig(BaseModel):
    """Share-link resolution services."""

    odesli_url: str = "https://api.song.link/v1-alpha.1/links"
    odesli_platform: str = "tidal"
    odesli_entity_prefix: str = "TIDAL_SONG::"
    oembed_url: str = "https://open.spotify.com/oembed"
    embed_url: str = "https://open.spotify.com/embed"
    timeout: float = 10.0


class HistoryConfig(BaseModel):
    """Listening history capacities (newest-first, bounded)."""

    recent_tracks: int = 30
    recent_artists: int = 20
    recent_albums: int = 20


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("tidefinder.log")
    real_time_debug: bool = True


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Environment variables can be set using flat naming or nested naming:
    - Flat: CATALOG_BASE_URL, CONSOLE_LOG_LEVEL
    - Nested: CATALOG__BASE_URL, LOGGING__CONSOLE_LEVEL

    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    catalog: CatalogConfig = CatalogConfig()
    ranking: RankingConfig = RankingConfig()
    matching: MatchingConfig = MatchingConfig()
    translation: TranslationConfig = TranslationConfig()
    links: LinksConfig = LinksConfig()
    history: HistoryConfig = HistoryConfig()
    logging: LoggingConfig = LoggingConfig()

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Transform flat environment variables to nested structure.

        Handles flat env vars (CATALOG_BASE_URL) and maps them to the
        nested structure expected by the models (catalog.base_url).
        """
        if not isinstance(data, dict):
            return data

        transformed: dict[str, dict[str, Any]] = {}

        flat_mappings = {
            "catalog": {
                "catalog_base_url": "base_url",
                "catalog_timeout": "timeout",
                "catalog_retry_count": "retry_count",
                "audio_quality": "preferred_quality",
            },
            "translation": {
                "translation_enabled": "enabled",
                "translation_confidence_threshold": "confidence_threshold",
            },
            "logging": {
                "console_log_level": "console_level",
                "file_log_level": "file_level",
                "log_file": "log_file",
                "log_real_time_debug": "real_time_debug",
            },
        }
        for section, mapping in flat_mappings.items():
            for env_key, field_key in mapping.items():
                if env_key in data:
                    transformed.setdefault(section, {})[field_key] = data.pop(env_key)

        for section, values in transformed.items():
            existing = data.get(section)
            if isinstance(existing, dict):
                values = {**existing, **values}
            data[section] = values

        return data


# Singleton instance for application use
settings = Settings()
