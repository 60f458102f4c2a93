"""In-memory listening history.

Keeps the most recently played tracks, artists and albums, newest first,
each collection bounded by its configured capacity. Replaying an entity
moves it to the front instead of duplicating it.
"""

from collections import deque

from attrs import define, field

from src.config import get_logger, settings
from src.domain.entities.catalog import Album, Artist, HistorySnapshot, Track

logger = get_logger(__name__).bind(service="history")


def _remember[T: (Track, Artist, Album)](entries: deque[T], entry: T) -> None:
    for existing in list(entries):
        if existing.id == entry.id:
            entries.remove(existing)
    entries.appendleft(entry)


@define(slots=True)
class InMemoryHistoryStore:
    """Bounded, newest-first history of played entities."""

    track_capacity: int = field(factory=lambda: settings.history.recent_tracks)
    artist_capacity: int = field(factory=lambda: settings.history.recent_artists)
    album_capacity: int = field(factory=lambda: settings.history.recent_albums)
    _tracks: deque[Track] = field(init=False)
    _artists: deque[Artist] = field(init=False)
    _albums: deque[Album] = field(init=False)

    def __attrs_post_init__(self) -> None:
        self._tracks = deque(maxlen=self.track_capacity)
        self._artists = deque(maxlen=self.artist_capacity)
        self._albums = deque(maxlen=self.album_capacity)

    def record_play(self, track: Track) -> None:
        """Record a played track along with its artist and album."""
        _remember(self._tracks, track)
        if track.artist_id:
            _remember(
                self._artists,
                Artist(id=track.artist_id, name=track.artist_name),
            )
        if track.album_id:
            _remember(
                self._albums,
                Album(
                    id=track.album_id,
                    title=track.album_title,
                    artist_id=track.artist_id,
                    artist_name=track.artist_name,
                    cover=track.cover,
                ),
            )
        logger.debug(f"Recorded play of track {track.id}")

    def record_artist(self, artist: Artist) -> None:
        _remember(self._artists, artist)

    def record_album(self, album: Album) -> None:
        _remember(self._albums, album)

    def recent_tracks(self) -> list[Track]:
        return list(self._tracks)

    def recent_artists(self) -> list[Artist]:
        return list(self._artists)

    def recent_albums(self) -> list[Album]:
        return list(self._albums)

    def snapshot(self) -> HistorySnapshot:
        return HistorySnapshot(
            recent_tracks=self._tracks,
            recent_artists=self._artists,
            recent_albums=self._albums,
        )

    def clear(self) -> None:
        self._tracks.clear()
        self._artists.clear()
        self._albums.clear()
