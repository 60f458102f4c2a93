"""Odesli (song.link) connector for cross-platform track resolution."""

import re
from typing import Any

from attrs import define, field
import httpx

from src.config import get_logger, settings
from src.domain.entities.links import CrossPlatformMatch

logger = get_logger(__name__).bind(service="odesli")

_TRACK_URL_ID = re.compile(r"tidal\.com/(?:browse/)?track/([0-9]+)")


def parse_links_response(
    data: dict[str, Any],
    platform: str | None = None,
    entity_prefix: str | None = None,
) -> CrossPlatformMatch | None:
    """Find this catalog's track in an Odesli ``links`` response.

    The entity table is preferred since it carries title and artist; the
    per-platform link is a fallback that yields only an id.
    """
    platform = platform or settings.links.odesli_platform
    entity_prefix = entity_prefix or settings.links.odesli_entity_prefix

    entity: dict[str, Any] = {}
    for key, value in (data.get("entitiesByUniqueId") or {}).items():
        if key.startswith(entity_prefix) and isinstance(value, dict):
            entity = value
            break

    track_id = entity.get("id")
    if track_id is None:
        link = (data.get("linksByPlatform") or {}).get(platform) or {}
        unique_id = link.get("entityUniqueId") or ""
        if unique_id.startswith(entity_prefix):
            track_id = unique_id.split("::")[-1]
        elif match := _TRACK_URL_ID.search(link.get("url") or ""):
            track_id = match.group(1)

    if track_id is None:
        return None

    return CrossPlatformMatch(
        track_id=str(track_id),
        title=entity.get("title"),
        artist=entity.get("artistName"),
        cover=entity.get("thumbnailUrl"),
    )


@define(slots=True)
class OdesliConnector:
    """Resolves a foreign track URL to this catalog's track id."""

    api_url: str = field(factory=lambda: settings.links.odesli_url)
    timeout: float = field(factory=lambda: settings.links.timeout)
    client: httpx.AsyncClient | None = field(default=None, repr=False)

    def _client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self.client

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def resolve(self, url: str) -> CrossPlatformMatch | None:
        """Resolve ``url``; None when the service has no match or fails."""
        try:
            response = await self._client().get(self.api_url, params={"url": url})
        except httpx.HTTPError as e:
            logger.warning(f"Odesli request failed: {e}", url=url)
            return None

        if response.status_code != 200:
            logger.debug(f"Odesli returned {response.status_code}", url=url)
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Malformed Odesli response: {e}", url=url)
            return None

        if not isinstance(data, dict):
            return None
        match = parse_links_response(data)
        if match is not None:
            logger.info(f"Odesli resolved track {match.track_id}", url=url)
        return match
