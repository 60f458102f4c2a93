"""MusicBrainz service connector for name translation and ISRC lookup.

Wraps the MusicBrainz web service with the rate limiting its usage policy
requires (one request per second). Two lookups are used by the engine:

- artist search, to find an artist's canonical name when a user types a
  romanized spelling of a non-Latin name
- recording search, to recover an ISRC for a foreign track that lacks one
"""

import asyncio
import time
from typing import Any

from attrs import define, field
import backoff
import musicbrainzngs

from src.config import get_logger, settings

logger = get_logger(__name__).bind(service="musicbrainz")


def _score(entry: dict[str, Any]) -> int:
    try:
        return int(entry.get("ext:score", entry.get("score", 0)))
    except (TypeError, ValueError):
        return 0


@define(slots=True)
class MusicBrainzConnector:
    """Wrapper for the MusicBrainz API with rate limiting.

    Attributes:
        request_interval: Minimum seconds between requests
        _last_request_time: Timestamp of last API request for rate limiting
        _request_lock: Asyncio lock to ensure sequential request handling
    """

    request_interval: float = field(
        factory=lambda: settings.translation.request_interval
    )
    _last_request_time: float = field(default=0.0)
    _request_lock: asyncio.Lock = field(factory=asyncio.Lock, repr=False)

    def __attrs_post_init__(self) -> None:
        logger.debug("Initializing MusicBrainz connector")
        musicbrainzngs.set_useragent(
            settings.translation.app_name,
            settings.translation.app_version,
            settings.translation.contact,
        )

    async def _rate_limited_request(self, func, *args, **kwargs) -> Any:
        """Execute a MusicBrainz request no sooner than the configured interval."""
        async with self._request_lock:
            time_since_last = time.time() - self._last_request_time
            if time_since_last < self.request_interval:
                await asyncio.sleep(self.request_interval - time_since_last)

            try:
                self._last_request_time = time.time()
                return await asyncio.to_thread(func, *args, **kwargs)
            except musicbrainzngs.WebServiceError as e:
                if "404" in str(e):
                    return None
                logger.error(f"MusicBrainz API error: {e}")
                raise

    @backoff.on_exception(
        backoff.expo,
        musicbrainzngs.WebServiceError,
        max_tries=3,
        giveup=lambda e: "404" in str(e),
    )
    async def search_artists(self, name: str, limit: int = 5) -> list[dict[str, Any]]:
        """Search artists by name.

        Returns:
            ``[{"name": str, "score": int}, ...]`` in MusicBrainz order (best first)
        """
        if not name.strip():
            return []

        result = await self._rate_limited_request(
            musicbrainzngs.search_artists, artist=name, limit=limit
        )
        artists = result.get("artist-list", []) if result is not None else []
        return [
            {"name": artist.get("name"), "score": _score(artist)}
            for artist in artists
            if artist.get("name")
        ]

    @backoff.on_exception(
        backoff.expo,
        musicbrainzngs.WebServiceError,
        max_tries=3,
        giveup=lambda e: "404" in str(e),
    )
    async def search_recording_isrc(self, artist: str, title: str) -> str | None:
        """Return the first ISRC of the best recording for artist and title."""
        if not artist or not title:
            return None

        result = await self._rate_limited_request(
            musicbrainzngs.search_recordings,
            query=f"artist:{artist} AND recording:{title}",
            limit=1,
        )
        recordings = result.get("recording-list", []) if result is not None else []
        if not recordings:
            return None

        isrcs = recordings[0].get("isrc-list") or recordings[0].get("isrcs") or []
        return str(isrcs[0]) if isrcs else None
