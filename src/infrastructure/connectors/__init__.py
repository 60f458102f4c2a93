"""Service connectors for the catalog backend and external music services."""

from src.infrastructure.connectors.catalog import CatalogConnector
from src.infrastructure.connectors.musicbrainz import MusicBrainzConnector
from src.infrastructure.connectors.odesli import OdesliConnector
from src.infrastructure.connectors.spotify_embed import SpotifyEmbedConnector

__all__ = [
    "CatalogConnector",
    "MusicBrainzConnector",
    "OdesliConnector",
    "SpotifyEmbedConnector",
]
