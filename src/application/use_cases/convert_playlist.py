"""Convert a foreign playlist into catalog tracks.

Each source track is matched by the first tier that succeeds:

1. ISRC: exact ISRC search, first hit accepted
2. Album: find the source album, then the track within its listing
3. Strict: per query variant, a candidate agreeing on artist, duration,
   remix/cover status and title
4. Relaxed: within the same variant, a candidate covering at least half of
   the shorter title's keywords, with a lenient artist rule

Tracks are processed one at a time with a pause between remote calls to
respect backend rate limits. A cancellation token is checked before each
track; entries already resolved are skipped, so an interrupted conversion
can be resumed with its partial results.
"""

import asyncio
from collections.abc import Awaitable, Callable

from attrs import define, field

from src.application.utilities.cancellation import CancellationToken
from src.config import get_logger, resilient_operation, settings
from src.domain.entities.catalog import Album, CatalogKind, Track
from src.domain.entities.conversion import NOT_FOUND, ConversionResult, SourceTrack
from src.domain.entities.errors import CatalogNotConfiguredError
from src.domain.entities.links import parse_link
from src.domain.matching.algorithms import (
    is_album_artist_match,
    is_relaxed_match,
    is_strict_match,
    is_variant_allowed,
)
from src.domain.matching.types import MatchTier, MatchTolerances
from src.domain.repositories.interfaces import ForeignMetadataProtocol
from src.domain.search.keywords import is_title_match

from ..services.query_aggregator import QueryAggregator

logger = get_logger(__name__)

type ProgressCallback = Callable[[int, int, ConversionResult], None]
type Sleep = Callable[[float], Awaitable[None]]


def _default_tolerances() -> MatchTolerances:
    return MatchTolerances(
        duration_seconds=settings.matching.duration_tolerance,
        relaxed_duration_seconds=settings.matching.relaxed_duration_tolerance,
        keyword_overlap_ratio=settings.matching.keyword_overlap_ratio,
    )


@define(slots=True)
class ConvertPlaylistUseCase:
    """Sequential, tiered matcher from source tracks to catalog tracks.

    Attributes:
        aggregator: Catalog search
        source: Foreign playlist reader, needed only by ``load_playlist``
        tolerances: Thresholds for the strict and relaxed tiers
        sleep: Awaitable delay, replaceable in tests
    """

    aggregator: QueryAggregator
    source: ForeignMetadataProtocol | None = None
    tolerances: MatchTolerances = field(factory=_default_tolerances)
    candidate_limit: int = field(factory=lambda: settings.matching.candidate_limit)
    album_limit: int = field(factory=lambda: settings.matching.album_limit)
    track_delay: float = field(factory=lambda: settings.matching.track_delay)
    query_delay: float = field(factory=lambda: settings.matching.query_delay)
    sleep: Sleep = asyncio.sleep

    async def load_playlist(self, url_or_id: str) -> list[SourceTrack]:
        """Fetch the source tracks of a foreign playlist link or bare id."""
        if self.source is None:
            raise ValueError("No foreign playlist source configured")
        link = parse_link(url_or_id)
        if link.entity is CatalogKind.PLAYLIST and link.id:
            playlist_id = link.id
        else:
            playlist_id = url_or_id.strip()
        return await self.source.fetch_playlist(playlist_id)

    async def execute(
        self,
        sources: list[SourceTrack],
        token: CancellationToken | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[ConversionResult]:
        """Match every source track; results keep the source order."""
        return await self.resume(
            [ConversionResult(source_track=source) for source in sources],
            token=token,
            progress=progress,
        )

    @resilient_operation("convert_playlist")
    async def resume(
        self,
        results: list[ConversionResult],
        token: CancellationToken | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[ConversionResult]:
        """Process pending and failed entries, skipping resolved ones.

        Entries not reached before cancellation stay as they were.

        Raises:
            CatalogNotConfiguredError: No catalog endpoint is configured
        """
        self.aggregator.catalog.ensure_configured()
        updated = list(results)
        total = len(updated)

        for index, result in enumerate(updated):
            if token is not None and token.cancelled:
                logger.info(f"Conversion cancelled after {index}/{total} tracks")
                break

            if result.is_resolved:
                if progress is not None:
                    progress(index + 1, total, result)
                continue

            try:
                track, tier = await self.match_track(result.source_track)
            except CatalogNotConfiguredError:
                raise
            except Exception as e:
                logger.warning(
                    f"Matching failed for {result.source_track.label}: {e}"
                )
                updated[index] = result.failed(str(e))
            else:
                if track is None:
                    updated[index] = result.failed(NOT_FOUND)
                else:
                    logger.debug(
                        f"Matched {result.source_track.label} to {track.id}",
                        tier=str(tier),
                    )
                    updated[index] = result.resolved(track)

            if progress is not None:
                progress(index + 1, total, updated[index])
            await self.sleep(self.track_delay)

        found = sum(1 for r in updated if r.is_resolved)
        logger.info(f"Conversion complete: {found}/{total} tracks found")
        return updated

    async def match_track(
        self, source: SourceTrack
    ) -> tuple[Track | None, MatchTier | None]:
        """Run the tiers in order; return the first match and its tier."""
        if source.isrc:
            track = await self._match_isrc(source.isrc)
            if track is not None:
                return track, MatchTier.ISRC

        if source.album and source.artist:
            track = await self._match_in_album(source)
            if track is not None:
                return track, MatchTier.ALBUM

        return await self._match_by_queries(source)

    async def _match_isrc(self, isrc: str) -> Track | None:
        hits = await self.aggregator.search_scoped(isrc, CatalogKind.TRACK, limit=1)
        return next((hit for hit in hits if isinstance(hit, Track)), None)

    async def _match_in_album(self, source: SourceTrack) -> Track | None:
        albums = await self.aggregator.search_scoped(
            f"{source.album} {source.artist}", CatalogKind.ALBUM, limit=self.album_limit
        )
        for album in albums:
            if not isinstance(album, Album):
                continue
            if not is_album_artist_match(source.artist or "", album.artist_name):
                continue
            for track in await self.aggregator.album_tracks(album.id):
                if is_title_match(source.title, track.title):
                    return track
        return None

    async def _match_by_queries(
        self, source: SourceTrack
    ) -> tuple[Track | None, MatchTier | None]:
        for query in source.search_queries:
            candidates = [
                item
                for item in await self.aggregator.search_scoped(
                    query, CatalogKind.TRACK, limit=self.candidate_limit
                )
                if isinstance(item, Track)
            ]

            for candidate in candidates:
                if is_strict_match(source, candidate, self.tolerances):
                    return candidate, MatchTier.STRICT

            for candidate in candidates:
                if not is_variant_allowed(source, candidate):
                    continue
                if is_relaxed_match(source, candidate, self.tolerances):
                    return candidate, MatchTier.RELAXED

            await self.sleep(self.query_delay)
        return None, None
