"""Remote catalog connector.

Thin async HTTP client over the catalog backend's search, album and track
endpoints. Responses are returned as decoded documents; interpreting their
shape is left to the domain scanner.

Failures on the read paths degrade to ``None`` after retries are exhausted.
The one surfaced failure is a missing endpoint, raised as
``CatalogNotConfiguredError``.
"""

import base64
import binascii
import json
import re
from typing import Any

from attrs import define, field
import backoff
import httpx

from src.config import get_logger, settings
from src.domain.entities.catalog import CatalogKind
from src.domain.entities.errors import CatalogNotConfiguredError, CatalogRequestError

logger = get_logger(__name__).bind(service="catalog")

FACET_CODES: dict[CatalogKind, str] = {
    CatalogKind.TRACK: "s",
    CatalogKind.ARTIST: "a",
    CatalogKind.ALBUM: "al",
    CatalogKind.PLAYLIST: "p",
}

_BASE_URL_TAG = re.compile(r"<BaseURL[^>]*>([^<]+)</BaseURL>", re.IGNORECASE)
_MEDIA_MARKERS = (".flac", ".mp4", ".m4a", ".aac", "token=", "/audio/")
_SCHEMA_MARKERS = ("w3.org", "xmlschema", "xmlns")


class RetryableStatusError(CatalogRequestError):
    """Rate limiting or a server-side error worth retrying."""


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def _unwrap(document: Any) -> Any:
    """Catalog responses may nest their payload under ``data``."""
    if isinstance(document, dict) and document.get("data") is not None:
        return document["data"]
    return document


def _is_media_url(url: str) -> bool:
    lower = url.lower()
    if any(marker in lower for marker in _SCHEMA_MARKERS):
        return False
    return any(marker in lower for marker in _MEDIA_MARKERS)


def extract_stream_url(manifest: str, mime_type: str | None = None) -> str | None:
    """Pull a playable URL out of a base64 stream manifest.

    JSON manifests carry a ``urls`` list. DASH manifests either name a single
    media file in ``<BaseURL>`` or are segmented, in which case the whole
    manifest is returned as a ``data:`` URI.
    """
    try:
        decoded = base64.b64decode(manifest.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        decoded = manifest.strip()

    if decoded.lstrip().startswith("{"):
        try:
            urls = json.loads(decoded).get("urls") or []
        except (json.JSONDecodeError, AttributeError):
            urls = []
        if urls:
            return str(urls[0])

    if "<MPD" in decoded or (mime_type and "xml" in mime_type):
        for match in _BASE_URL_TAG.finditer(decoded):
            url = match.group(1).strip()
            if _is_media_url(url):
                return url
        encoded = base64.b64encode(decoded.encode("utf-8")).decode("ascii")
        return f"data:application/dash+xml;base64,{encoded}"

    return None


@define(slots=True)
class CatalogConnector:
    """Async client for the catalog backend.

    Attributes:
        base_url: Backend root, without trailing slash
        client: Shared httpx client; one is created lazily if not given
    """

    base_url: str = field(
        factory=lambda: settings.catalog.base_url,
        converter=lambda url: (url or "").strip().rstrip("/"),
    )
    timeout: float = field(factory=lambda: settings.catalog.timeout)
    retry_count: int = field(factory=lambda: settings.catalog.retry_count)
    retry_base_delay: float = field(factory=lambda: settings.catalog.retry_base_delay)
    retry_max_delay: float = field(factory=lambda: settings.catalog.retry_max_delay)
    preferred_quality: str = field(factory=lambda: settings.catalog.preferred_quality)
    stream_qualities: list[str] = field(
        factory=lambda: list(settings.catalog.stream_qualities)
    )
    client: httpx.AsyncClient | None = field(default=None, repr=False)

    def __attrs_post_init__(self) -> None:
        logger.debug("Initializing catalog connector", base_url=self.base_url)

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise CatalogNotConfiguredError(
                "No catalog endpoint configured; set CATALOG_BASE_URL"
            )

    def _client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={
                    "User-Agent": settings.catalog.user_agent,
                    "Accept": "application/json, text/plain, */*",
                },
            )
        return self.client

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        """GET a catalog endpoint, retrying rate limits and server errors."""
        self.ensure_configured()
        url = f"{self.base_url}/{path}"

        @backoff.on_exception(
            backoff.expo,
            (RetryableStatusError, httpx.TransportError),
            max_tries=self.retry_count + 1,
            factor=self.retry_base_delay,
            max_value=self.retry_max_delay,
            logger=None,
            on_backoff=lambda details: logger.warning(
                f"Catalog request failed, retrying (attempt {details['tries']})",
                url=url,
                error=str(details.get("exception")),
            ),
        )
        async def attempt() -> Any:
            response = await self._client().get(url, params=params)
            if _is_retryable_status(response.status_code):
                raise RetryableStatusError(
                    f"Catalog returned {response.status_code}",
                    status_code=response.status_code,
                )
            if response.status_code != 200:
                raise CatalogRequestError(
                    f"Catalog returned {response.status_code}",
                    status_code=response.status_code,
                )
            try:
                return response.json()
            except json.JSONDecodeError as e:
                raise CatalogRequestError(f"Malformed catalog response: {e}") from e

        try:
            return await attempt()
        except httpx.TransportError as e:
            raise CatalogRequestError(f"Catalog request failed: {e}") from e

    async def search_facet(
        self,
        query: str,
        kind: CatalogKind | str,
        offset: int = 0,
        limit: int | None = None,
    ) -> Any | None:
        """Search a single kind; None when the facet fails.

        Args:
            query: Free-text query or ISRC
            kind: One of track, artist, album, playlist
            offset: Page offset, sent as both ``offset`` and ``index``
            limit: Page size, defaults to the configured limit

        Returns:
            The unwrapped response document, or None on failure
        """
        code = FACET_CODES[CatalogKind(kind)]
        params = {
            code: query,
            "offset": offset,
            "index": offset,
            "limit": limit or settings.catalog.default_limit,
        }
        try:
            document = await self._get_json("search", params)
        except CatalogRequestError as e:
            logger.warning(f"Facet search failed: {e}", kind=str(kind), query=query)
            return None
        return _unwrap(document)

    async def get_album_tracks(self, album_id: str) -> Any | None:
        try:
            document = await self._get_json("album", {"id": album_id})
        except CatalogRequestError as e:
            logger.warning(f"Album lookup failed: {e}", album_id=album_id)
            return None
        return _unwrap(document)

    def _quality_order(self, quality: str | None) -> list[str]:
        preferred = quality or self.preferred_quality
        return [preferred, *(q for q in self.stream_qualities if q != preferred)]

    async def get_stream_metadata(
        self, track_id: str, quality: str | None = None
    ) -> dict[str, Any] | None:
        """Fetch playback metadata, falling back through lower qualities.

        Returns:
            Track payload with ``id`` and, when a manifest is present, a
            playable ``url``; None if every quality failed.
        """
        for candidate in self._quality_order(quality):
            try:
                document = await self._get_json(
                    "track", {"id": track_id, "quality": candidate}
                )
            except CatalogRequestError as e:
                logger.debug(f"Stream lookup failed: {e}", quality=candidate)
                continue

            payload = _unwrap(document)
            if not isinstance(payload, dict):
                continue
            stream = dict(payload)
            if stream.get("id") is None:
                stream["id"] = track_id

            manifest = stream.get("manifest")
            if isinstance(manifest, str):
                url = extract_stream_url(manifest, stream.get("manifestMimeType"))
                if url:
                    stream["url"] = url
            return stream

        logger.warning("No stream available in any quality", track_id=track_id)
        return None
