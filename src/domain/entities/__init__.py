"""Core domain entities for catalog search and playlist conversion."""

# Catalog entities
from .catalog import (
    Album,
    Artist,
    CatalogItem,
    CatalogKind,
    HistorySnapshot,
    Playlist,
    Track,
    resolve_image_url,
)

# Conversion entities
from .conversion import (
    NOT_FOUND,
    ConversionResult,
    ConversionSummary,
    SourceTrack,
    parse_duration,
)

# Errors
from .errors import CatalogError, CatalogNotConfiguredError, CatalogRequestError

# Link entities
from .links import (
    CrossPlatformMatch,
    ForeignTrackMetadata,
    LinkKind,
    LinkResolution,
    ParsedLink,
    ResolutionOutcome,
    parse_link,
)

__all__ = [
    # Catalog entities
    "Album",
    "Artist",
    "CatalogItem",
    "CatalogKind",
    "HistorySnapshot",
    "Playlist",
    "Track",
    "resolve_image_url",
    # Conversion entities
    "NOT_FOUND",
    "ConversionResult",
    "ConversionSummary",
    "SourceTrack",
    "parse_duration",
    # Errors
    "CatalogError",
    "CatalogNotConfiguredError",
    "CatalogRequestError",
    # Link entities
    "CrossPlatformMatch",
    "ForeignTrackMetadata",
    "LinkKind",
    "LinkResolution",
    "ParsedLink",
    "ResolutionOutcome",
    "parse_link",
]
