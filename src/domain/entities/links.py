"""Share-link entities and classification.

Raw user input is one of three things: a link into this catalog, a link into
a foreign platform's catalog, or a plain free-text query. Classification is
pure pattern matching; resolving the link is the job of the application
layer.
"""

from enum import StrEnum
import re
from urllib.parse import urlsplit

from attrs import define, field

from .catalog import CatalogKind, Track


class LinkKind(StrEnum):
    OWN_LINK = "own_link"
    FOREIGN_LINK = "foreign_link"
    PLAIN_QUERY = "plain_query"


OWN_HOSTS = ("tidal.com",)

_OWN_PATTERNS = (
    (CatalogKind.TRACK, re.compile(r"/(?:album/\d+/)?track/(\d+)")),
    (CatalogKind.ALBUM, re.compile(r"/album/(\d+)(?:/|$)")),
    (CatalogKind.ARTIST, re.compile(r"/artist/(\d+)")),
    (CatalogKind.PLAYLIST, re.compile(r"/playlist/([a-f0-9-]+)", re.IGNORECASE)),
)

_FOREIGN_PATTERN = re.compile(
    r"open\.spotify\.com/(?:intl-[a-z]{2}/)?(album|artist|track|playlist)/([A-Za-z0-9]+)"
)
_FOREIGN_URI = re.compile(r"^spotify:(album|artist|track|playlist):([A-Za-z0-9]+)$")


@define(frozen=True, slots=True)
class ParsedLink:
    """Classified raw input.

    ``entity`` and ``id`` are set for own and foreign links; ``text`` always
    holds the stripped input.
    """

    kind: LinkKind
    text: str
    entity: CatalogKind | None = None
    id: str | None = None

    @property
    def is_link(self) -> bool:
        return self.kind is not LinkKind.PLAIN_QUERY


def _own_link(text: str) -> ParsedLink | None:
    candidate = text if "://" in text else f"https://{text}"
    try:
        parts = urlsplit(candidate)
        host = (parts.hostname or "").lower()
    except ValueError:
        return None
    if not any(host == own or host.endswith(f".{own}") for own in OWN_HOSTS):
        return None

    for entity, pattern in _OWN_PATTERNS:
        match = pattern.search(parts.path)
        if match:
            return ParsedLink(
                kind=LinkKind.OWN_LINK, text=text, entity=entity, id=match.group(1)
            )
    return None


def _foreign_link(text: str) -> ParsedLink | None:
    match = _FOREIGN_PATTERN.search(text) or _FOREIGN_URI.match(text)
    if match is None:
        return None
    return ParsedLink(
        kind=LinkKind.FOREIGN_LINK,
        text=text,
        entity=CatalogKind(match.group(1)),
        id=match.group(2),
    )


def parse_link(raw: str) -> ParsedLink:
    """Classify raw input as an own link, a foreign link or a plain query."""
    text = raw.strip()
    return (
        _own_link(text)
        or _foreign_link(text)
        or ParsedLink(kind=LinkKind.PLAIN_QUERY, text=text)
    )


@define(frozen=True, slots=True)
class ForeignTrackMetadata:
    """Lightweight metadata scraped from a foreign platform's embed surface."""

    title: str
    artist: str | None = None
    isrc: str | None = None
    album: str | None = None
    duration: int | None = None  # seconds

    @property
    def query(self) -> str:
        return f"{self.title} {self.artist}".strip() if self.artist else self.title


@define(frozen=True, slots=True)
class CrossPlatformMatch:
    """This catalog's equivalent of a foreign track, per a link resolver."""

    track_id: str
    title: str | None = None
    artist: str | None = None
    cover: str | None = None

    @property
    def has_metadata(self) -> bool:
        return bool(self.title)

    @property
    def query(self) -> str:
        return " ".join(part for part in (self.title, self.artist) if part)


class ResolutionOutcome(StrEnum):
    PLAY = "play"
    NAVIGATE = "navigate"
    CANDIDATES = "candidates"


@define(frozen=True, slots=True)
class LinkResolution:
    """Result of resolving raw input.

    - PLAY: ``target_id`` and ``stream`` identify a playable track
    - NAVIGATE: ``entity``/``target_id`` name an album, artist or playlist page
    - CANDIDATES: ``candidates`` holds ranked search results, possibly empty
    """

    outcome: ResolutionOutcome
    link: ParsedLink
    entity: CatalogKind | None = None
    target_id: str | None = None
    stream: dict | None = None
    track: Track | None = None
    candidates: tuple = field(factory=tuple, converter=tuple)
    resolved_via: str | None = None
    query: str | None = None
