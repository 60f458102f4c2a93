"""Fan-out catalog search with deduplication, history injection and ranking.

A general search issues one facet search per catalog kind in parallel. When
the query is Latin script and the translation lookup recognizes it as an
artist's romanized name, a second round of facet searches runs for the
canonical name. Every facet collects into its own list; the lists are merged
in a fixed order once all facets have settled, so results do not depend on
network timing.
"""

import asyncio

from attrs import define, field

from src.config import get_logger, resilient_operation, settings
from src.domain.entities.catalog import (
    CatalogItem,
    CatalogKind,
    HistorySnapshot,
    Track,
)
from src.domain.entities.errors import CatalogNotConfiguredError
from src.domain.repositories.interfaces import (
    CatalogServiceProtocol,
    HistoryStoreProtocol,
)
from src.domain.search.dedup import Deduplicator
from src.domain.search.history import inject_history
from src.domain.search.keywords import is_latin_query, normalize_query
from src.domain.search.mapping import build_item
from src.domain.search.ranking import RankingWeights, rank_results
from src.domain.search.scanner import scan_document

from .translation import TranslationLookup

logger = get_logger(__name__)

FACET_ORDER = (
    CatalogKind.TRACK,
    CatalogKind.ARTIST,
    CatalogKind.ALBUM,
    CatalogKind.PLAYLIST,
)


@define(slots=True)
class QueryAggregator:
    """Catalog search engine.

    Attributes:
        catalog: Remote catalog backend
        history: Listening history; None means no history bonuses or injection
        translator: Optional name translation for romanized queries
        weights: Ranking constants
    """

    catalog: CatalogServiceProtocol
    history: HistoryStoreProtocol | None = None
    translator: TranslationLookup | None = None
    weights: RankingWeights = field(
        factory=lambda: RankingWeights.from_config(settings.ranking)
    )

    def _snapshot(self) -> HistorySnapshot:
        if self.history is None:
            return HistorySnapshot.empty()
        return self.history.snapshot()

    async def _facet(
        self, query: str, kind: CatalogKind, offset: int, limit: int | None
    ) -> list[CatalogItem]:
        """Items found by one facet search; empty on any failure."""
        try:
            document = await self.catalog.search_facet(query, kind, offset, limit)
        except CatalogNotConfiguredError:
            raise
        except Exception as e:
            logger.warning(f"Facet search failed: {e}", kind=str(kind), query=query)
            return []

        if document is None:
            return []

        items = []
        for node in scan_document(document, inferred=kind):
            item = build_item(node)
            if item is not None:
                items.append(item)
        return items

    async def _translated_query(self, query: str, normalized: str) -> str | None:
        if self.translator is None or not is_latin_query(normalized):
            return None
        translated = await self.translator.translate(query)
        if translated and translated.lower() != normalized:
            return translated
        return None

    @resilient_operation("catalog_search")
    async def search(
        self, query: str, offset: int = 0, limit: int | None = None
    ) -> list[CatalogItem]:
        """Search every kind and return deduplicated, ranked results.

        ``offset`` and ``limit`` apply to each facet call, so the merged
        result may hold more than ``limit`` items.

        Raises:
            CatalogNotConfiguredError: No catalog endpoint is configured
        """
        self.catalog.ensure_configured()
        normalized = normalize_query(query)
        if not normalized:
            return []

        tasks = [
            asyncio.create_task(self._facet(query, kind, offset, limit))
            for kind in FACET_ORDER
        ]
        try:
            translated = await self._translated_query(query, normalized)
            if translated is not None:
                logger.info(f"Also searching for translated name '{translated}'")
                tasks.extend(
                    asyncio.create_task(self._facet(translated, kind, offset, limit))
                    for kind in FACET_ORDER
                )
            batches = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        seen = Deduplicator()
        merged = [item for batch in batches for item in batch if seen.admit(item)]

        history = self._snapshot()
        combined = inject_history(normalized, history, merged, seen)
        ranked = rank_results(combined, normalized, history, self.weights)

        logger.debug(
            f"Search '{query}' returned {len(ranked)} results",
            remote=len(merged),
            injected=len(combined) - len(merged),
            top=[f"{item.kind}:{item.display_name}" for item in ranked[:5]],
        )
        return ranked

    async def search_scoped(
        self,
        query: str,
        kind: CatalogKind,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[CatalogItem]:
        """Single-kind search in backend order, without history or ranking.

        Used for exact lookups such as ISRC searches, where the backend's own
        order is authoritative.
        """
        self.catalog.ensure_configured()
        if not normalize_query(query):
            return []

        seen = Deduplicator()
        return [
            item
            for item in await self._facet(query, kind, offset, limit)
            if item.kind is kind and seen.admit(item)
        ]

    async def album_tracks(self, album_id: str) -> list[Track]:
        """Tracks of an album, in listing order."""
        self.catalog.ensure_configured()
        try:
            document = await self.catalog.get_album_tracks(album_id)
        except CatalogNotConfiguredError:
            raise
        except Exception as e:
            logger.warning(f"Album track lookup failed: {e}", album_id=album_id)
            return []

        if document is None:
            return []

        seen = Deduplicator()
        tracks = []
        for node in scan_document(document, inferred=CatalogKind.TRACK):
            item = build_item(node)
            if isinstance(item, Track) and seen.admit(item):
                tracks.append(item)
        return tracks
