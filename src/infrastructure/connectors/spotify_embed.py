"""Spotify public embed connector.

Reads track and playlist metadata from Spotify's unauthenticated surfaces:
the embed pages, which ship their state as a ``__NEXT_DATA__`` JSON blob,
and the oEmbed endpoint, whose title string encodes track and artist names.
No API credentials are involved.
"""

import json
import re
from typing import Any

import attrs
from attrs import define, field
import httpx

from src.config import get_logger, settings
from src.domain.entities.catalog import CatalogKind
from src.domain.entities.conversion import SourceTrack
from src.domain.entities.links import ForeignTrackMetadata, parse_link
from src.infrastructure.connectors.musicbrainz import MusicBrainzConnector

logger = get_logger(__name__).bind(service="spotify_embed")

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml",
    "Accept-Language": "en-US,en;q=0.9",
}

_NEXT_DATA = re.compile(
    r'<script id="__NEXT_DATA__" type="application/json">(\{.+?\})</script>',
    re.DOTALL,
)
_OEMBED_PATTERNS = (
    re.compile(r"^(.+?)\s*[-–]\s*song and lyrics by\s+(.+)$", re.IGNORECASE),
    re.compile(r"^(.+?)\s*[-–]\s*Album by\s+(.+)$", re.IGNORECASE),
    re.compile(r"^(.+?)\s+by\s+(.+)$", re.IGNORECASE),
)


def parse_oembed_title(raw: str) -> tuple[str, str | None]:
    """Split an oEmbed title such as ``"Song - song and lyrics by Artist | Spotify"``."""
    title = raw.split(" | Spotify")[0].strip()
    for pattern in _OEMBED_PATTERNS:
        match = pattern.match(title)
        if match:
            return match.group(1).strip(), match.group(2).strip()
    return title, None


def extract_next_data(html: str) -> dict[str, Any] | None:
    match = _NEXT_DATA.search(html)
    if match is None:
        return None
    try:
        data = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.debug(f"Malformed __NEXT_DATA__ payload: {e}")
        return None
    return data if isinstance(data, dict) else None


def _page_entity(data: dict[str, Any], *fallback_keys: str) -> dict[str, Any] | None:
    page_props = (data.get("props") or {}).get("pageProps") or {}
    state_entity = (
        ((page_props.get("state") or {}).get("data") or {}).get("entity")
    )
    for candidate in (state_entity, *(page_props.get(key) for key in fallback_keys)):
        if isinstance(candidate, dict):
            return candidate
    return None


def _duration_seconds(track: dict[str, Any]) -> int | None:
    duration_ms = track.get("duration_ms", track.get("duration"))
    if isinstance(duration_ms, (int, float)) and not isinstance(duration_ms, bool):
        return int(duration_ms) // 1000
    return None


def _artist_names(track: dict[str, Any], join_all: bool) -> str | None:
    artists = [
        a.get("name") for a in track.get("artists") or [] if isinstance(a, dict)
    ]
    artists = [name for name in artists if name]
    if artists:
        return ", ".join(artists) if join_all else artists[0]
    subtitle = track.get("subtitle")
    return str(subtitle) if subtitle else None


def _isrc(track: dict[str, Any]) -> str | None:
    external_ids = track.get("external_ids")
    if isinstance(external_ids, dict) and external_ids.get("isrc"):
        return str(external_ids["isrc"])
    return None


def parse_track_entity(data: dict[str, Any]) -> ForeignTrackMetadata | None:
    """Track metadata from an embed page's ``__NEXT_DATA__``."""
    entity = _page_entity(data, "entity")
    if entity is None or not entity.get("name"):
        return None
    album = entity.get("album")
    return ForeignTrackMetadata(
        title=str(entity["name"]),
        artist=_artist_names(entity, join_all=False),
        isrc=_isrc(entity),
        album=album.get("name") if isinstance(album, dict) else None,
        duration=_duration_seconds(entity),
    )


def parse_playlist_entity(data: dict[str, Any]) -> list[SourceTrack]:
    """Source tracks listed in a playlist embed page's ``__NEXT_DATA__``."""
    entity = _page_entity(data, "playlist", "entity")
    if entity is None:
        return []

    tracks_node = entity.get("tracks")
    items = (
        tracks_node.get("items") if isinstance(tracks_node, dict) else None
    ) or entity.get("trackList") or []

    tracks = []
    for item in items:
        if not isinstance(item, dict):
            continue
        track = item.get("track") if isinstance(item.get("track"), dict) else item
        title = track.get("name") or track.get("title")
        track_id = track.get("id") or str(track.get("uri") or "").split(":")[-1]
        if not title or not track_id:
            continue
        album = track.get("album")
        tracks.append(
            SourceTrack.detect(
                title=str(title),
                artist=_artist_names(track, join_all=True),
                album=album.get("name") if isinstance(album, dict) else None,
                duration=_duration_seconds(track),
                isrc=_isrc(track),
                source_id=str(track_id),
            )
        )
    return tracks


@define(slots=True)
class SpotifyEmbedConnector:
    """Scrapes foreign track and playlist metadata without credentials.

    Attributes:
        musicbrainz: Used to fill in a missing ISRC; None disables the lookup
    """

    musicbrainz: MusicBrainzConnector | None = None
    embed_url: str = field(factory=lambda: settings.links.embed_url)
    oembed_url: str = field(factory=lambda: settings.links.oembed_url)
    timeout: float = field(factory=lambda: settings.links.timeout)
    client: httpx.AsyncClient | None = field(default=None, repr=False)

    def _client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, headers=BROWSER_HEADERS
            )
        return self.client

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def _embed_data(self, kind: str, entity_id: str) -> dict[str, Any] | None:
        url = f"{self.embed_url}/{kind}/{entity_id}"
        try:
            response = await self._client().get(url)
        except httpx.HTTPError as e:
            logger.warning(f"Embed page request failed: {e}", url=url)
            return None
        if response.status_code != 200:
            logger.debug(f"Embed page returned {response.status_code}", url=url)
            return None
        return extract_next_data(response.text)

    async def _oembed(self, url: str) -> ForeignTrackMetadata | None:
        try:
            response = await self._client().get(
                self.oembed_url,
                params={"url": url},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"oEmbed request failed: {e}", url=url)
            return None
        if response.status_code != 200:
            return None
        try:
            raw_title = response.json().get("title")
        except (ValueError, AttributeError):
            return None
        if not raw_title:
            return None
        title, artist = parse_oembed_title(str(raw_title))
        return ForeignTrackMetadata(title=title, artist=artist)

    async def _fill_isrc(self, metadata: ForeignTrackMetadata) -> ForeignTrackMetadata:
        if metadata.isrc or not metadata.artist or self.musicbrainz is None:
            return metadata
        try:
            isrc = await self.musicbrainz.search_recording_isrc(
                metadata.artist, metadata.title
            )
        except Exception as e:
            logger.warning(f"MusicBrainz ISRC lookup failed: {e}")
            return metadata
        if isrc is None:
            return metadata
        logger.info(f"Found ISRC via MusicBrainz: {isrc}")
        return attrs.evolve(metadata, isrc=isrc)

    async def fetch_embed_metadata(self, url: str) -> ForeignTrackMetadata | None:
        """Title, artist and ISRC for a foreign link.

        The embed page is tried first since it carries the ISRC; oEmbed is
        the fallback and works for albums and artists too. The MusicBrainz
        ISRC lookup runs for track links only.
        """
        link = parse_link(url)
        metadata = None
        if link.entity is CatalogKind.TRACK and link.id:
            data = await self._embed_data("track", link.id)
            if data is not None:
                metadata = parse_track_entity(data)
        if metadata is None:
            metadata = await self._oembed(url)
        if metadata is None:
            return None
        if link.entity is not CatalogKind.TRACK:
            return metadata
        return await self._fill_isrc(metadata)

    async def fetch_playlist(self, playlist_id: str) -> list[SourceTrack]:
        data = await self._embed_data("playlist", playlist_id)
        if data is None:
            return []
        tracks = parse_playlist_entity(data)
        logger.info(f"Fetched {len(tracks)} tracks from playlist {playlist_id}")
        return tracks
