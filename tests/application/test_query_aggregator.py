"""Tests for the fan-out search aggregator."""

import asyncio

import pytest

from src.application.services.query_aggregator import FACET_ORDER, QueryAggregator
from src.application.services.translation import TranslationLookup
from src.domain.entities.catalog import Album, Artist, CatalogKind, Track
from src.domain.entities.errors import CatalogNotConfiguredError
from src.domain.search.keywords import normalize_name
from tests.fixtures.fakes import (
    FakeTranslationService,
    album_doc,
    artist_doc,
    playlist_doc,
    track_doc,
)


class TestSearch:
    async def test_fans_out_one_call_per_kind(self, aggregator, catalog):
        await aggregator.search("abc")

        assert catalog.calls == [("abc", kind) for kind in FACET_ORDER]

    async def test_exact_title_ranks_first(self, aggregator, catalog):
        catalog.add(
            "abc",
            CatalogKind.TRACK,
            track_doc(1, "Abcdef Song"),
            track_doc(2, "Abc"),
        )

        results = await aggregator.search("abc")

        assert [item.display_name for item in results] == ["Abc", "Abcdef Song"]

    async def test_results_are_unique(self, aggregator, catalog):
        catalog.add("blue", CatalogKind.TRACK, track_doc(1, "Blue"), track_doc(2, "Blue"))
        catalog.add(
            "blue",
            CatalogKind.ALBUM,
            album_doc(10, "Blue", "Joni Mitchell"),
            album_doc(11, "BLUE", "Joni Mitchell"),
            track_doc(1, "Blue"),
        )
        catalog.add(
            "blue",
            CatalogKind.ARTIST,
            artist_doc(20, "Blue"),
            artist_doc(21, "blue"),
            album_doc(10, "Blue", "Joni Mitchell"),
        )

        results = await aggregator.search("blue")

        keys = [item.key for item in results]
        assert len(keys) == len(set(keys))
        names = [
            (item.kind, normalize_name(item.display_name))
            for item in results
            if isinstance(item, (Album, Artist))
        ]
        assert len(names) == len(set(names))
        assert sorted(keys) == ["album_10", "artist_20", "track_1", "track_2"]

    async def test_history_entry_found_when_remote_is_empty(self, aggregator, history):
        history.tracks.append(Track(id="42", title="My Song"))

        results = await aggregator.search("my")

        assert [item.display_name for item in results] == ["My Song"]

    async def test_all_matching_history_entries_are_injected(self, aggregator, catalog, history):
        catalog.add("Love", CatalogKind.TRACK, track_doc(1, "Love Story"))
        history.tracks.append(Track(id="2", title="Lovely"))
        history.artists.append(Artist(id="3", name="Love Band"))
        history.albums.append(Album(id="4", title="Endless Love"))
        history.albums.append(Album(id="5", title="Unrelated"))

        results = await aggregator.search("Love")

        assert {item.key for item in results} == {
            "track_1",
            "track_2",
            "artist_3",
            "album_4",
        }

    async def test_history_track_outranks_remote(self, aggregator, catalog, history):
        catalog.add(
            "love",
            CatalogKind.TRACK,
            track_doc(1, "Love", artist="Love", popularity=100),
            track_doc(2, "Love Me Do", artist="The Beatles"),
        )
        history.tracks.append(Track(id="2", title="Love Me Do"))

        results = await aggregator.search("love")

        assert results[0].id == "2"

    async def test_failed_facet_degrades(self, aggregator, catalog):
        catalog.add("abc", CatalogKind.ALBUM, album_doc(1, "Abc"))
        catalog.failing = {CatalogKind.TRACK, CatalogKind.ARTIST}

        results = await aggregator.search("abc")

        assert [item.key for item in results] == ["album_1"]

    async def test_empty_query(self, aggregator, catalog):
        assert await aggregator.search("   ") == []
        assert catalog.calls == []

    async def test_unconfigured_catalog_raises(self, aggregator, catalog):
        catalog.configured = False

        with pytest.raises(CatalogNotConfiguredError):
            await aggregator.search("abc")

    async def test_without_history_store(self, catalog):
        catalog.add("abc", CatalogKind.PLAYLIST, playlist_doc("p-1", "Abc Mix"))
        aggregator = QueryAggregator(catalog=catalog)

        results = await aggregator.search("abc")

        assert [item.key for item in results] == ["playlist_p-1"]


class TestTranslation:
    def lookup(self, candidates):
        return TranslationLookup(
            service=FakeTranslationService(candidates=candidates),
            threshold=90,
            enabled=True,
        )

    async def test_translated_name_is_searched_too(self, catalog, history):
        catalog.add("utada", CatalogKind.TRACK, track_doc(1, "Utada Song"))
        catalog.add("宇多田ヒカル", CatalogKind.ARTIST, artist_doc(2, "宇多田ヒカル"))
        aggregator = QueryAggregator(
            catalog=catalog,
            history=history,
            translator=self.lookup({"utada": [{"name": "宇多田ヒカル", "score": 100}]}),
        )

        results = await aggregator.search("utada")

        assert [query for query, _ in catalog.calls] == ["utada"] * 4 + ["宇多田ヒカル"] * 4
        assert {item.key for item in results} == {"track_1", "artist_2"}
        # Transliteration bonus lifts the canonical-script result.
        assert results[0].key == "artist_2"

    async def test_low_confidence_translation_is_ignored(self, catalog):
        aggregator = QueryAggregator(
            catalog=catalog,
            translator=self.lookup({"utada": [{"name": "宇多田ヒカル", "score": 90}]}),
        )

        await aggregator.search("utada")

        assert len(catalog.calls) == 4

    async def test_same_name_translation_is_ignored(self, catalog):
        aggregator = QueryAggregator(
            catalog=catalog,
            translator=self.lookup({"queen": [{"name": "Queen", "score": 100}]}),
        )

        await aggregator.search("queen")

        assert len(catalog.calls) == 4

    async def test_non_latin_query_is_not_translated(self, catalog):
        service = FakeTranslationService(
            candidates={"東京": [{"name": "Tokyo", "score": 100}]}
        )
        aggregator = QueryAggregator(
            catalog=catalog,
            translator=TranslationLookup(service=service, enabled=True),
        )

        await aggregator.search("東京")

        assert len(catalog.calls) == 4

    async def test_translation_failure_degrades(self, catalog):
        catalog.add("utada", CatalogKind.TRACK, track_doc(1, "Utada Song"))
        service = FakeTranslationService(error=RuntimeError("musicbrainz down"))
        aggregator = QueryAggregator(
            catalog=catalog,
            translator=TranslationLookup(service=service, enabled=True),
        )

        results = await aggregator.search("utada")

        assert [item.key for item in results] == ["track_1"]

    async def test_slow_translation_is_abandoned(self, catalog):
        catalog.add("utada", CatalogKind.TRACK, track_doc(1, "Utada Song"))
        service = FakeTranslationService(
            candidates={"utada": [{"name": "宇多田ヒカル", "score": 100}]}, delay=30
        )
        aggregator = QueryAggregator(
            catalog=catalog,
            translator=TranslationLookup(service=service, enabled=True, timeout=0.01),
        )

        results = await asyncio.wait_for(aggregator.search("utada"), timeout=5)

        assert [item.key for item in results] == ["track_1"]
        assert len(catalog.calls) == 4


class TestScopedSearch:
    async def test_returns_only_requested_kind_in_backend_order(self, aggregator, catalog, history):
        catalog.add(
            "USUG11904206",
            CatalogKind.TRACK,
            track_doc(2, "Zzz", isrc="USUG11904206"),
            album_doc(3, "Album"),
            track_doc(1, "USUG11904206"),
        )
        history.tracks.append(Track(id="1", title="USUG11904206"))

        results = await aggregator.search_scoped("USUG11904206", CatalogKind.TRACK)

        assert [item.id for item in results] == ["2", "1"]
        assert catalog.calls == [("USUG11904206", CatalogKind.TRACK)]

    async def test_album_tracks(self, aggregator, catalog):
        catalog.albums["10"] = {
            "id": 10,
            "title": "Record",
            "numberOfTracks": 2,
            "items": [
                {"item": track_doc(1, "One", album_id=10)},
                {"item": track_doc(2, "Two", album_id=10)},
            ],
        }

        tracks = await aggregator.album_tracks("10")

        assert [track.title for track in tracks] == ["One", "Two"]

    async def test_missing_album(self, aggregator):
        assert await aggregator.album_tracks("404") == []
