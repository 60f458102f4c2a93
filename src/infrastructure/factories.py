"""Wiring for a fully configured engine.

Builds the connectors, the history store and the application services from
settings, and hands them out together so a caller (the CLI, a player) can
share one set of HTTP clients and close them once.
"""

from typing import Self

from attrs import define

from src.application.services.query_aggregator import QueryAggregator
from src.application.services.translation import TranslationLookup
from src.application.use_cases.convert_playlist import ConvertPlaylistUseCase
from src.application.use_cases.resolve_link import ResolveLinkUseCase
from src.config import get_logger, settings
from src.domain.repositories.interfaces import PlayerProtocol
from src.infrastructure.connectors.catalog import CatalogConnector
from src.infrastructure.connectors.musicbrainz import MusicBrainzConnector
from src.infrastructure.connectors.odesli import OdesliConnector
from src.infrastructure.connectors.spotify_embed import SpotifyEmbedConnector
from src.infrastructure.persistence.history import InMemoryHistoryStore

logger = get_logger(__name__)


@define(slots=True)
class Engine:
    """Connected set of engine components.

    Use as an async context manager, or call ``aclose`` when done.
    """

    catalog: CatalogConnector
    history: InMemoryHistoryStore
    aggregator: QueryAggregator
    resolver: ResolveLinkUseCase
    converter: ConvertPlaylistUseCase
    odesli: OdesliConnector
    embed: SpotifyEmbedConnector

    async def aclose(self) -> None:
        await self.catalog.aclose()
        await self.odesli.aclose()
        await self.embed.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def create_engine(
    base_url: str | None = None,
    history: InMemoryHistoryStore | None = None,
    player: PlayerProtocol | None = None,
) -> Engine:
    """Build an engine from settings.

    Args:
        base_url: Catalog endpoint; defaults to ``settings.catalog.base_url``
        history: History store to share; a fresh in-memory one if omitted
        player: Playback engine for link resolution; None treats any stream
            as playable

    Returns:
        An engine whose HTTP clients are created lazily on first use.
    """
    catalog = CatalogConnector(
        base_url=base_url if base_url is not None else settings.catalog.base_url
    )
    history = history if history is not None else InMemoryHistoryStore()

    musicbrainz = MusicBrainzConnector() if settings.translation.enabled else None
    translator = TranslationLookup(service=musicbrainz)

    aggregator = QueryAggregator(
        catalog=catalog, history=history, translator=translator
    )
    odesli = OdesliConnector()
    embed = SpotifyEmbedConnector(musicbrainz=musicbrainz)

    logger.debug(
        "Created engine",
        configured=catalog.is_configured,
        translation=musicbrainz is not None,
    )
    return Engine(
        catalog=catalog,
        history=history,
        aggregator=aggregator,
        resolver=ResolveLinkUseCase(
            aggregator=aggregator,
            catalog=catalog,
            foreign_metadata=embed,
            cross_platform=odesli,
            player=player,
            history=history,
        ),
        converter=ConvertPlaylistUseCase(aggregator=aggregator, source=embed),
        odesli=odesli,
        embed=embed,
    )
