"""Domain service interfaces following Clean Architecture principles.

These interfaces define the contracts of the engine's collaborators without
depending on infrastructure implementations. Remote collaborators return raw,
loosely shaped documents; interpreting them is domain work.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from src.domain.entities import (
        Album,
        Artist,
        CrossPlatformMatch,
        ForeignTrackMetadata,
        HistorySnapshot,
        SourceTrack,
        Track,
    )


class CatalogServiceProtocol(Protocol):
    """Remote catalog backend."""

    def ensure_configured(self) -> None:
        """Raise CatalogNotConfiguredError when no endpoint is configured."""
        ...

    async def search_facet(
        self, query: str, kind: str, offset: int = 0, limit: int = 50
    ) -> Any | None:
        """Search one kind and return the decoded response document.

        Returns None when the call fails; failures never raise.
        """
        ...

    async def get_album_tracks(self, album_id: str) -> Any | None:
        """Return the decoded album document, or None on failure."""
        ...

    async def get_stream_metadata(
        self, track_id: str, quality: str | None = None
    ) -> dict[str, Any] | None:
        """Return ``{"url": ..., "id": ...}`` for playback, or None."""
        ...


class HistoryStoreProtocol(Protocol):
    """Read access to recently played entities, newest first."""

    def recent_tracks(self) -> list["Track"]: ...

    def recent_artists(self) -> list["Artist"]: ...

    def recent_albums(self) -> list["Album"]: ...

    def snapshot(self) -> "HistorySnapshot":
        """Point-in-time copy of all three collections."""
        ...


class PlayRecorderProtocol(Protocol):
    """Write access to the play history."""

    def record_play(self, track: "Track") -> None:
        """Record a track that started playing."""
        ...


class TranslationServiceProtocol(Protocol):
    """Artist-name search used for script translation."""

    async def search_artists(self, name: str) -> list[dict[str, Any]]:
        """Return ``[{"name": str, "score": int}, ...]`` best first."""
        ...


class ForeignMetadataProtocol(Protocol):
    """Public embed surface of a foreign streaming platform."""

    async def fetch_embed_metadata(self, url: str) -> "ForeignTrackMetadata | None":
        """Return title, artist and ISRC for a foreign track link, or None."""
        ...

    async def fetch_playlist(self, playlist_id: str) -> list["SourceTrack"]:
        """Return the source tracks of a foreign playlist."""
        ...


class CrossPlatformResolverProtocol(Protocol):
    """Maps a foreign URL to this catalog's equivalent track."""

    async def resolve(self, url: str) -> "CrossPlatformMatch | None":
        """Return the equivalent own-catalog track, or None."""
        ...


class PlayerProtocol(Protocol):
    """Playback engine; only the success of starting playback matters here."""

    async def play(self, track_id: str, stream: dict[str, Any]) -> bool: ...
