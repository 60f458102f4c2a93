"""Resolve raw user input (own link, foreign link or query) to catalog results.

Own links resolve directly: tracks play, everything else navigates. Foreign
links run a short-circuiting chain:

1. scrape title, artist and ISRC from the foreign platform's embed surface
2. ISRC search; any hit is accepted as ground truth
3. cross-platform id resolution; the resolved track is played if possible
4. free-text search on the best title and artist available, returning
   ranked candidates

Every step degrades to the next one. The caller only ever sees an empty
candidate list, never an error, except when no catalog is configured.
"""

from typing import Any

from attrs import define

from src.config import get_logger, resilient_operation
from src.domain.entities.catalog import CatalogKind, Track
from src.domain.entities.errors import CatalogNotConfiguredError
from src.domain.entities.links import (
    CrossPlatformMatch,
    ForeignTrackMetadata,
    LinkKind,
    LinkResolution,
    ParsedLink,
    ResolutionOutcome,
    parse_link,
)
from src.domain.repositories.interfaces import (
    CatalogServiceProtocol,
    CrossPlatformResolverProtocol,
    ForeignMetadataProtocol,
    PlayerProtocol,
    PlayRecorderProtocol,
)

from ..services.query_aggregator import QueryAggregator

logger = get_logger(__name__)


@define(slots=True)
class ResolveLinkUseCase:
    """Turns raw input into something to play, open or choose from.

    Attributes:
        aggregator: Catalog search
        catalog: Catalog backend, for stream metadata
        foreign_metadata: Foreign embed scraper; None skips step 1
        cross_platform: Cross-platform resolver; None skips step 3
        player: Playback engine; None treats any stream as playable
        history: Play history; tracks that resolve to PLAY are recorded here
    """

    aggregator: QueryAggregator
    catalog: CatalogServiceProtocol
    foreign_metadata: ForeignMetadataProtocol | None = None
    cross_platform: CrossPlatformResolverProtocol | None = None
    player: PlayerProtocol | None = None
    history: PlayRecorderProtocol | None = None

    @resilient_operation("resolve_link")
    async def execute(self, raw: str) -> LinkResolution:
        """Resolve raw input.

        Raises:
            CatalogNotConfiguredError: No catalog endpoint is configured
        """
        self.catalog.ensure_configured()
        link = parse_link(raw)
        logger.debug(f"Classified input as {link.kind}", entity=link.entity, id=link.id)

        match link.kind:
            case LinkKind.OWN_LINK:
                resolution = await self._resolve_own(link)
            case LinkKind.FOREIGN_LINK:
                resolution = await self._resolve_foreign(link)
            case _:
                resolution = await self._search(link, link.text, resolved_via="search")

        self._record(resolution)
        return resolution

    def _record(self, resolution: LinkResolution) -> None:
        if self.history is None or resolution.track is None:
            return
        if resolution.outcome is not ResolutionOutcome.PLAY:
            return
        try:
            self.history.record_play(resolution.track)
        except Exception as e:
            logger.warning(f"Failed to record play: {e}", track_id=resolution.track.id)

    async def _try_play(self, track_id: str) -> dict[str, Any] | None:
        """Stream metadata for a track if playback starts, else None."""
        try:
            stream = await self.catalog.get_stream_metadata(track_id)
        except CatalogNotConfiguredError:
            raise
        except Exception as e:
            logger.warning(f"Stream lookup failed: {e}", track_id=track_id)
            return None

        if stream is None:
            return None
        if self.player is None:
            return stream

        try:
            started = await self.player.play(track_id, stream)
        except Exception as e:
            logger.warning(f"Playback failed: {e}", track_id=track_id)
            return None
        return stream if started else None

    async def _search(
        self, link: ParsedLink, query: str, resolved_via: str
    ) -> LinkResolution:
        candidates = await self.aggregator.search(query) if query.strip() else []
        return LinkResolution(
            outcome=ResolutionOutcome.CANDIDATES,
            link=link,
            candidates=candidates,
            resolved_via=resolved_via,
            query=query,
        )

    async def _resolve_own(self, link: ParsedLink) -> LinkResolution:
        if link.entity is not CatalogKind.TRACK:
            return LinkResolution(
                outcome=ResolutionOutcome.NAVIGATE,
                link=link,
                entity=link.entity,
                target_id=link.id,
                resolved_via="own_link",
            )

        stream = await self._try_play(link.id)
        if stream is None:
            logger.warning(f"Track {link.id} is not playable")
            return LinkResolution(
                outcome=ResolutionOutcome.CANDIDATES, link=link, resolved_via="own_link"
            )
        return LinkResolution(
            outcome=ResolutionOutcome.PLAY,
            link=link,
            entity=CatalogKind.TRACK,
            target_id=link.id,
            stream=stream,
            resolved_via="own_link",
        )

    async def _embed_metadata(self, link: ParsedLink) -> ForeignTrackMetadata | None:
        if self.foreign_metadata is None:
            return None
        try:
            return await self.foreign_metadata.fetch_embed_metadata(link.text)
        except Exception as e:
            logger.warning(f"Foreign metadata lookup failed: {e}", url=link.text)
            return None

    async def _cross_platform_match(
        self, link: ParsedLink
    ) -> CrossPlatformMatch | None:
        if self.cross_platform is None:
            return None
        try:
            return await self.cross_platform.resolve(link.text)
        except Exception as e:
            logger.warning(f"Cross-platform resolution failed: {e}", url=link.text)
            return None

    async def _isrc_hit(self, isrc: str) -> Track | None:
        hits = await self.aggregator.search_scoped(isrc, CatalogKind.TRACK, limit=1)
        return next((hit for hit in hits if isinstance(hit, Track)), None)

    async def _resolve_foreign(self, link: ParsedLink) -> LinkResolution:
        metadata = await self._embed_metadata(link)
        is_track = link.entity is CatalogKind.TRACK

        if is_track and metadata is not None and metadata.isrc:
            track = await self._isrc_hit(metadata.isrc)
            if track is not None:
                logger.info(f"Resolved {link.text} by ISRC {metadata.isrc}")
                return LinkResolution(
                    outcome=ResolutionOutcome.PLAY,
                    link=link,
                    entity=CatalogKind.TRACK,
                    target_id=track.id,
                    track=track,
                    stream=await self._try_play(track.id),
                    resolved_via="isrc",
                )

        equivalent = await self._cross_platform_match(link) if is_track else None
        if equivalent is not None:
            stream = await self._try_play(equivalent.track_id)
            if stream is not None:
                logger.info(f"Resolved {link.text} to track {equivalent.track_id}")
                return LinkResolution(
                    outcome=ResolutionOutcome.PLAY,
                    link=link,
                    entity=CatalogKind.TRACK,
                    target_id=equivalent.track_id,
                    track=_matched_track(equivalent),
                    stream=stream,
                    resolved_via="cross_platform",
                )
            logger.info(
                f"Track {equivalent.track_id} not playable, falling back to search"
            )

        if equivalent is not None and equivalent.has_metadata:
            query = equivalent.query
        elif metadata is not None:
            query = metadata.query
        else:
            query = ""
        return await self._search(link, query, resolved_via="search")


def _matched_track(equivalent: CrossPlatformMatch) -> Track | None:
    """Track built from a resolver's metadata, or None without a title."""
    if not equivalent.has_metadata:
        return None
    return Track(
        id=equivalent.track_id,
        title=equivalent.title or "",
        artist_name=equivalent.artist or "",
        cover=equivalent.cover,
    )
