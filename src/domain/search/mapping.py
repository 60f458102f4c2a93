"""Build typed catalog items from scanned raw fields."""

from typing import Any

from src.config import get_logger
from src.domain.entities.catalog import (
    Album,
    Artist,
    CatalogItem,
    CatalogKind,
    Playlist,
    Track,
)
from src.domain.search.scanner import ScannedNode

logger = get_logger(__name__)


def normalize_popularity(value: Any) -> float | None:
    """Bring popularity onto a 0-100 scale.

    Sources report either a fraction of one or a percentage; values in
    (0, 1] are treated as fractions.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        popularity = float(value)
    except (TypeError, ValueError):
        return None
    if 0 < popularity <= 1.0:
        return popularity * 100.0
    return popularity


def build_item(node: ScannedNode) -> CatalogItem | None:
    """Convert a scanned node into its catalog item, or None if malformed."""
    try:
        match node.kind:
            case CatalogKind.TRACK:
                return _build_track(node.id, node.fields)
            case CatalogKind.ALBUM:
                return _build_album(node.id, node.fields)
            case CatalogKind.ARTIST:
                return _build_artist(node.id, node.fields)
            case CatalogKind.PLAYLIST:
                return _build_playlist(node.id, node.fields)
    except (AttributeError, TypeError, ValueError) as e:
        logger.debug(f"Error parsing {node.kind} ({node.id}): {e}")
    return None


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _primary_artist(fields: dict[str, Any]) -> tuple[str | None, str | None]:
    """Return (name, id) of the first credited artist."""
    name = _text(fields.get("artistName"))
    artist_id = _text(fields.get("artistId"))
    raw: dict = {}
    nested = fields.get("artist")
    artists = fields.get("artists")
    if isinstance(nested, dict):
        raw = nested
    elif isinstance(artists, list) and artists and isinstance(artists[0], dict):
        raw = artists[0]
    if name is None and raw:
        name = _text(raw.get("name"))
    if artist_id is None and raw:
        artist_id = _text(raw.get("id"))
    return name, artist_id


def _build_track(item_id: str, fields: dict[str, Any]) -> Track:
    artist_name, artist_id = _primary_artist(fields)

    album = fields.get("album") if isinstance(fields.get("album"), dict) else {}
    album_id = _text(fields.get("albumId")) or _text(album.get("id"))
    album_title = _text(fields.get("albumTitle")) or _text(album.get("title"))
    cover = (
        _text(fields.get("albumCoverUuid"))
        or _text(fields.get("coverUuid"))
        or _text(fields.get("cover"))
        or _text(album.get("cover"))
        or _text(album.get("coverUuid"))
    )

    return Track(
        id=item_id,
        title=_text(fields.get("title")) or "Unknown Title",
        artist_id=artist_id or "",
        artist_name=artist_name or "",
        album_id=album_id or "",
        album_title=album_title or "",
        duration=_int(fields.get("duration")) or 0,
        isrc=_text(fields.get("isrc")),
        popularity=normalize_popularity(fields.get("popularity")),
        cover=cover,
        track_number=_int(fields.get("trackNumber") or fields.get("track_number")),
    )


def _build_album(item_id: str, fields: dict[str, Any]) -> Album:
    artist_name, artist_id = _primary_artist(fields)
    return Album(
        id=item_id,
        title=_text(fields.get("title")) or "",
        artist_id=artist_id or "",
        artist_name=artist_name or "",
        popularity=normalize_popularity(fields.get("popularity")),
        cover=_text(fields.get("coverUuid")) or _text(fields.get("cover")),
        number_of_tracks=_int(fields.get("numberOfTracks")),
        release_date=_text(fields.get("releaseDate")),
    )


def _build_artist(item_id: str, fields: dict[str, Any]) -> Artist:
    return Artist(
        id=item_id,
        name=_text(fields.get("name")) or "",
        popularity=normalize_popularity(fields.get("popularity")),
        picture=_text(fields.get("pictureUuid")) or _text(fields.get("picture")),
    )


def _build_playlist(item_id: str, fields: dict[str, Any]) -> Playlist:
    creator = fields.get("creator")
    creator_name = _text(creator.get("name")) if isinstance(creator, dict) else None
    image = (
        _text(fields.get("squareImage"))
        or _text(fields.get("image"))
        or _text(fields.get("uuid"))
    )
    return Playlist(
        id=item_id,
        title=_text(fields.get("title")) or "Unknown Playlist",
        description=_text(fields.get("description")),
        number_of_tracks=_int(fields.get("numberOfTracks")) or 0,
        creator_name=creator_name or _text(fields.get("creatorName")),
        image=image,
    )
