"""Catalog entities native to the streaming backend.

Pure, immutable representations of the four catalog kinds. A catalog item is
one of ``Track``, ``Album``, ``Artist`` or ``Playlist``; every variant
exposes its ``kind`` discriminant, a ``key`` of the form ``"<kind>_<id>"``
and a ``display_name`` used for matching and history injection.
"""

from enum import StrEnum
import re
from typing import ClassVar

from attrs import define, field, validators


class CatalogKind(StrEnum):
    """Discriminant of the catalog item union."""

    TRACK = "track"
    ARTIST = "artist"
    ALBUM = "album"
    PLAYLIST = "playlist"


IMAGE_HOST = "https://resources.tidal.com/images"
_IMGUR_ID = re.compile(r"^[a-zA-Z0-9]{7}$")


def resolve_image_url(reference: str | None, size: int) -> str:
    """Turn a cover/picture reference into a fetchable URL.

    Supports ipfs:// references, bare Imgur ids and dash-separated image
    UUIDs served by the catalog's image host.
    """
    if not reference:
        return ""
    if reference.startswith(("http://", "https://")):
        return reference
    if reference.startswith("ipfs://"):
        return f"https://ipfs.io/ipfs/{reference.removeprefix('ipfs://')}"
    if _IMGUR_ID.match(reference):
        return f"https://i.imgur.com/{reference}.jpg"
    path = reference.replace("-", "/")
    return f"{IMAGE_HOST}/{path}/{size}x{size}.jpg"


def _popularity(value: float | None) -> float | None:
    if value is None:
        return None
    return float(value)


@define(frozen=True, slots=True)
class Track:
    """A single recording in the catalog."""

    kind: ClassVar[CatalogKind] = CatalogKind.TRACK

    id: str = field(validator=validators.instance_of(str))
    title: str
    artist_id: str = ""
    artist_name: str = ""
    album_id: str = ""
    album_title: str = ""
    duration: int = 0  # seconds
    isrc: str | None = None
    popularity: float | None = field(default=None, converter=_popularity)
    cover: str | None = None
    track_number: int | None = None

    @property
    def key(self) -> str:
        return f"{self.kind}_{self.id}"

    @property
    def display_name(self) -> str:
        return self.title

    def cover_url(self, size: int = 1280) -> str:
        return resolve_image_url(self.cover, size)


@define(frozen=True, slots=True)
class Album:
    """An album release."""

    kind: ClassVar[CatalogKind] = CatalogKind.ALBUM

    id: str = field(validator=validators.instance_of(str))
    title: str
    artist_id: str = ""
    artist_name: str = ""
    popularity: float | None = field(default=None, converter=_popularity)
    cover: str | None = None
    number_of_tracks: int | None = None
    release_date: str | None = None

    @property
    def key(self) -> str:
        return f"{self.kind}_{self.id}"

    @property
    def display_name(self) -> str:
        return self.title

    def cover_url(self, size: int = 320) -> str:
        return resolve_image_url(self.cover, size)


@define(frozen=True, slots=True)
class Artist:
    """A performing artist."""

    kind: ClassVar[CatalogKind] = CatalogKind.ARTIST

    id: str = field(validator=validators.instance_of(str))
    name: str
    popularity: float | None = field(default=None, converter=_popularity)
    picture: str | None = None

    @property
    def key(self) -> str:
        return f"{self.kind}_{self.id}"

    @property
    def display_name(self) -> str:
        return self.name

    def cover_url(self, size: int = 320) -> str:
        return resolve_image_url(self.picture, size)


@define(frozen=True, slots=True)
class Playlist:
    """A public, user- or editor-curated playlist."""

    kind: ClassVar[CatalogKind] = CatalogKind.PLAYLIST

    id: str = field(validator=validators.instance_of(str))
    title: str
    description: str | None = None
    number_of_tracks: int = 0
    creator_name: str | None = None
    image: str | None = None

    @property
    def key(self) -> str:
        return f"{self.kind}_{self.id}"

    @property
    def display_name(self) -> str:
        return self.title

    @property
    def popularity(self) -> float | None:
        return None

    def cover_url(self, size: int = 640) -> str:
        return resolve_image_url(self.image, size)


type CatalogItem = Track | Album | Artist | Playlist


@define(frozen=True, slots=True)
class HistorySnapshot:
    """Point-in-time, read-only view of the listening history.

    Each collection is newest-first. Capacities are enforced by the store
    that produced the snapshot, not here.
    """

    recent_tracks: tuple[Track, ...] = field(factory=tuple, converter=tuple)
    recent_artists: tuple[Artist, ...] = field(factory=tuple, converter=tuple)
    recent_albums: tuple[Album, ...] = field(factory=tuple, converter=tuple)

    @property
    def track_ids(self) -> frozenset[str]:
        return frozenset(t.id.strip() for t in self.recent_tracks)

    @property
    def artist_ids(self) -> frozenset[str]:
        return frozenset(a.id.strip() for a in self.recent_artists)

    @property
    def album_ids(self) -> frozenset[str]:
        return frozenset(a.id.strip() for a in self.recent_albums)

    @classmethod
    def empty(cls) -> "HistorySnapshot":
        return cls()
