"""Tests for share-link classification."""

import pytest

from src.domain.entities.catalog import CatalogKind
from src.domain.entities.links import (
    CrossPlatformMatch,
    ForeignTrackMetadata,
    LinkKind,
    parse_link,
)


class TestOwnLinks:
    @pytest.mark.parametrize(
        ("url", "entity", "entity_id"),
        [
            ("https://tidal.com/browse/track/12345", CatalogKind.TRACK, "12345"),
            ("https://listen.tidal.com/album/999/track/123", CatalogKind.TRACK, "123"),
            ("tidal.com/album/5555", CatalogKind.ALBUM, "5555"),
            ("https://tidal.com/browse/album/5555/", CatalogKind.ALBUM, "5555"),
            ("https://tidal.com/browse/artist/42?u", CatalogKind.ARTIST, "42"),
            (
                "https://tidal.com/browse/playlist/0a1b2c3d-aaaa-bbbb-cccc-111122223333",
                CatalogKind.PLAYLIST,
                "0a1b2c3d-aaaa-bbbb-cccc-111122223333",
            ),
        ],
    )
    def test_recognized(self, url, entity, entity_id):
        link = parse_link(url)

        assert link.kind is LinkKind.OWN_LINK
        assert link.entity is entity
        assert link.id == entity_id
        assert link.is_link

    def test_lookalike_host_is_not_own(self):
        assert parse_link("https://nottidal.com/track/1").kind is LinkKind.PLAIN_QUERY

    def test_own_host_without_entity_is_plain_query(self):
        assert parse_link("https://tidal.com/about").kind is LinkKind.PLAIN_QUERY


class TestForeignLinks:
    @pytest.mark.parametrize(
        ("url", "entity", "entity_id"),
        [
            (
                "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=xyz",
                CatalogKind.TRACK,
                "4uLU6hMCjMI75M1A2tKUQC",
            ),
            ("https://open.spotify.com/intl-de/album/abc123", CatalogKind.ALBUM, "abc123"),
            ("open.spotify.com/artist/0OdUWJ0sBjDrqHygGUXeCF", CatalogKind.ARTIST, "0OdUWJ0sBjDrqHygGUXeCF"),
            ("spotify:playlist:37i9dQZF1DXcBWIGoYBM5M", CatalogKind.PLAYLIST, "37i9dQZF1DXcBWIGoYBM5M"),
        ],
    )
    def test_recognized(self, url, entity, entity_id):
        link = parse_link(url)

        assert link.kind is LinkKind.FOREIGN_LINK
        assert link.entity is entity
        assert link.id == entity_id
        assert link.text == url


class TestPlainQueries:
    def test_text_is_stripped(self):
        link = parse_link("  hello world ")

        assert link.kind is LinkKind.PLAIN_QUERY
        assert link.text == "hello world"
        assert link.entity is None
        assert not link.is_link

    def test_empty_input(self):
        assert parse_link("").kind is LinkKind.PLAIN_QUERY


class TestLinkValues:
    def test_foreign_metadata_query(self):
        assert ForeignTrackMetadata(title="Song", artist="Band").query == "Song Band"
        assert ForeignTrackMetadata(title="Song").query == "Song"

    def test_cross_platform_match_query(self):
        full = CrossPlatformMatch(track_id="1", title="Song", artist="Band")
        bare = CrossPlatformMatch(track_id="1")

        assert full.has_metadata
        assert full.query == "Song Band"
        assert not bare.has_metadata
        assert bare.query == ""
