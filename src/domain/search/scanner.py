"""Type-inferring walk over loosely shaped catalog responses.

The backend answers searches and detail lookups with documents whose nesting
varies from endpoint to endpoint: bare lists, ``{"items": [...]}`` pages,
``{"item": {...}}`` wrappers, artist modules with nested album lists, and so
on. Rather than modelling each shape, the scanner visits every JSON value
depth-first and decides per object whether it is a track, album, artist or
playlist.

Kind inference for an object, in order:

1. An explicit ``type`` field wins, unless it is a generic marker such as
   ``MAIN`` or ``CONTRIBUTOR``; otherwise the kind inherited from the
   parent container key is used.
2. With no kind yet, the shape decides: ``duration`` means track,
   ``artistRoles``/``artistTypes``/``picture`` artist, ``uuid``/``creator``
   playlist, ``cover``/``releaseDate``/``numberOfTracks`` album.
3. Structural refinement is reapplied with precedence
   playlist > album > track, because these fields co-occur (an album may
   carry a total ``duration``).
"""

from collections.abc import Iterator
from typing import Any

from attrs import define

from src.config import get_logger
from src.domain.entities.catalog import CatalogKind

logger = get_logger(__name__)

GENERIC_TYPES = frozenset({"main", "contributor", "media", "product"})
TYPE_ALIASES = {"song": "track", "release": "album"}
SKIPPED_KEYS = frozenset({"item", "links"})

_KNOWN_KINDS = {kind.value: kind for kind in CatalogKind}


@define(frozen=True, slots=True)
class ScannedNode:
    """A candidate catalog object found in a response document."""

    kind: CatalogKind
    id: str
    fields: dict[str, Any]


def scan_document(
    document: Any, inferred: CatalogKind | None = None
) -> Iterator[ScannedNode]:
    """Yield every catalog candidate in ``document``, depth-first.

    Args:
        document: Decoded JSON (dict, list or scalar)
        inferred: Kind assumed for ambiguous top-level objects

    Yields:
        ScannedNode for each object resolving to a known kind with an id.
        Duplicates are not filtered here.
    """
    match document:
        case list():
            for element in document:
                yield from scan_document(element, inferred)
        case dict():
            yield from _scan_object(document, inferred)
        case _:
            return


def _scan_object(
    node: dict[str, Any], inferred: CatalogKind | None
) -> Iterator[ScannedNode]:
    wrapped = node.get("item")
    if isinstance(wrapped, dict):
        # The wrapper is transport, only its payload is a candidate.
        found = yield from _scan_candidate(wrapped, inferred)
        yield from _scan_children(wrapped, inferred, found)
    else:
        found = yield from _scan_candidate(node, inferred)
    yield from _scan_children(node, inferred, found)


def _scan_candidate(
    node: dict[str, Any], inferred: CatalogKind | None
) -> Iterator[ScannedNode]:
    """Yield node if it classifies; return whether it carried an id."""
    try:
        kind = infer_kind(node, inferred)
        node_id = _node_id(node, kind)
    except (AttributeError, TypeError, ValueError) as e:
        logger.debug(f"Skipping malformed node: {e}")
        return False

    if node_id is None:
        return False
    if kind is not None:
        yield ScannedNode(kind=kind, id=node_id, fields=node)
    return True


def _scan_children(
    node: dict[str, Any], inferred: CatalogKind | None, node_has_id: bool
) -> Iterator[ScannedNode]:
    # An identified object starts a fresh context for its children.
    base = None if node_has_id else inferred
    for key, child in node.items():
        if key in SKIPPED_KEYS or not isinstance(child, (dict, list)):
            continue
        yield from scan_document(child, container_hint(key) or base)


def container_hint(key: str) -> CatalogKind | None:
    """Kind implied by a container key such as ``albums`` or ``topTracks``."""
    lower = key.lower()
    if "artist" in lower:
        return CatalogKind.ARTIST
    if "album" in lower or lower == "releases":
        return CatalogKind.ALBUM
    if "track" in lower or "song" in lower or lower in ("items", "contents"):
        return CatalogKind.TRACK
    if "playlist" in lower:
        return CatalogKind.PLAYLIST
    return None


def infer_kind(
    node: dict[str, Any], inferred: CatalogKind | None = None
) -> CatalogKind | None:
    """Classify a single object, see the module docstring for the rules."""
    explicit = _explicit_type(node)
    if explicit is None:
        kind = inferred.value if inferred is not None else None
    elif explicit in GENERIC_TYPES:
        kind = None
    else:
        kind = explicit

    if kind is None:
        kind = _kind_from_shape(node)

    if _present(node, "uuid", "creator"):
        kind = "playlist"
    elif _present(node, "numberOfTracks") and kind != "playlist":
        kind = "album"
    elif _present(node, "duration") and kind not in ("album", "playlist"):
        kind = "track"

    if kind is None:
        return None
    return _KNOWN_KINDS.get(TYPE_ALIASES.get(kind, kind))


def _explicit_type(node: dict[str, Any]) -> str | None:
    raw = node.get("type")
    if raw is None:
        return None
    value = str(raw).lower()
    return TYPE_ALIASES.get(value, value)


def _kind_from_shape(node: dict[str, Any]) -> str | None:
    if _present(node, "duration"):
        return "track"
    if _present(node, "artistRoles", "artistTypes", "picture"):
        return "artist"
    if _present(node, "uuid", "creator"):
        return "playlist"
    if _present(node, "cover", "releaseDate", "numberOfTracks"):
        return "album"
    if _present(node, "title") and _present(node, "artist"):
        return "track"
    return None


def _node_id(node: dict[str, Any], kind: CatalogKind | None) -> str | None:
    # Playlists are addressed by uuid, everything else by id.
    keys = ("uuid", "id") if kind is CatalogKind.PLAYLIST else ("id", "uuid")
    for key in keys:
        value = node.get(key)
        if value is not None:
            return str(value).strip()
    return None


def _present(node: dict[str, Any], *keys: str) -> bool:
    return any(node.get(key) is not None for key in keys)
