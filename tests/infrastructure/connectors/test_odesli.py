"""Tests for the Odesli cross-platform resolver."""

import httpx

from src.domain.entities.links import CrossPlatformMatch
from src.infrastructure.connectors.odesli import OdesliConnector, parse_links_response

SPOTIFY_URL = "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC"


class TestParseLinksResponse:
    def test_entity_carries_metadata(self):
        data = {
            "entitiesByUniqueId": {
                "SPOTIFY_SONG::4uLU": {"id": "4uLU", "title": "Other"},
                "TIDAL_SONG::123": {
                    "id": "123",
                    "title": "Blinding Lights",
                    "artistName": "The Weeknd",
                    "thumbnailUrl": "https://img/123.jpg",
                },
            }
        }

        assert parse_links_response(data) == CrossPlatformMatch(
            track_id="123",
            title="Blinding Lights",
            artist="The Weeknd",
            cover="https://img/123.jpg",
        )

    def test_platform_unique_id_fallback(self):
        data = {"linksByPlatform": {"tidal": {"entityUniqueId": "TIDAL_SONG::456"}}}

        match = parse_links_response(data)

        assert match.track_id == "456"
        assert not match.has_metadata

    def test_platform_url_fallback(self):
        data = {
            "linksByPlatform": {
                "tidal": {"url": "https://listen.tidal.com/track/789?u"}
            }
        }
        assert parse_links_response(data).track_id == "789"

    def test_no_match(self):
        assert parse_links_response({"linksByPlatform": {"deezer": {}}}) is None
        assert parse_links_response({}) is None


class TestOdesliConnector:
    def connector(self, handler) -> OdesliConnector:
        return OdesliConnector(
            api_url="https://odesli.test/links",
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

    async def test_resolve(self):
        def handler(request):
            assert request.url.params["url"] == SPOTIFY_URL
            return httpx.Response(
                200,
                json={"linksByPlatform": {"tidal": {"entityUniqueId": "TIDAL_SONG::1"}}},
            )

        match = await self.connector(handler).resolve(SPOTIFY_URL)

        assert match == CrossPlatformMatch(track_id="1")

    async def test_http_error_status(self):
        connector = self.connector(lambda request: httpx.Response(429))
        assert await connector.resolve(SPOTIFY_URL) is None

    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        assert await self.connector(handler).resolve(SPOTIFY_URL) is None

    async def test_malformed_body(self):
        connector = self.connector(lambda request: httpx.Response(200, text="oops"))
        assert await connector.resolve(SPOTIFY_URL) is None
