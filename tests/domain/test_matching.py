"""Tests for track matching predicates and conversion entities."""

import pytest

from src.domain.entities.catalog import Track
from src.domain.entities.conversion import (
    NOT_FOUND,
    ConversionResult,
    ConversionSummary,
    SourceTrack,
    parse_duration,
)
from src.domain.matching import (
    MatchTolerances,
    is_album_artist_match,
    is_relaxed_match,
    is_strict_match,
    is_variant_allowed,
)


def candidate(title, artist="The Weeknd", duration=200):
    return Track(id="1", title=title, artist_name=artist, duration=duration)


class TestVariantGate:
    @pytest.mark.parametrize(
        "title",
        [
            "Song (Remix)",
            "Song (Club Mix)",
            "Song - VIP Mix",
            "Song [Bootleg]",
            "Song (Extended Edit)",
        ],
    )
    def test_remixes_never_match_original(self, title):
        source = SourceTrack.detect("Song", artist="The Weeknd", duration=200)
        track = candidate(title)

        assert not source.is_remix
        assert not is_variant_allowed(source, track)
        assert not is_strict_match(source, track)

    def test_remix_source_accepts_remix(self):
        source = SourceTrack.detect("Song (Remix)", artist="The Weeknd")
        assert source.is_remix
        assert is_variant_allowed(source, candidate("Song (Remix)"))

    def test_cover_gate(self):
        original = SourceTrack.detect("Song", artist="The Weeknd")
        cover = SourceTrack.detect("Song (Cover)", artist="The Weeknd")

        assert not is_variant_allowed(original, candidate("Song (Cover)"))
        assert is_variant_allowed(cover, candidate("Song (Cover)"))

    def test_single_letter_artist_remix_is_rejected(self):
        source = SourceTrack.detect("Song", artist="X")
        track = candidate("Song (Club Mix)", artist="X")

        assert not is_strict_match(source, track)
        assert not (is_variant_allowed(source, track) and is_relaxed_match(source, track))


class TestStrictMatch:
    def test_exact_match(self):
        source = SourceTrack.detect("Blinding Lights", artist="The Weeknd", duration=200)
        assert is_strict_match(source, candidate("Blinding Lights"))

    def test_duration_tolerance(self):
        source = SourceTrack.detect("Blinding Lights", artist="The Weeknd", duration=200)

        assert is_strict_match(source, candidate("Blinding Lights", duration=205))
        assert not is_strict_match(source, candidate("Blinding Lights", duration=206))

    def test_unknown_duration_is_ignored(self):
        source = SourceTrack.detect("Blinding Lights", artist="The Weeknd")
        assert is_strict_match(source, candidate("Blinding Lights", duration=999))

    def test_artist_must_overlap(self):
        source = SourceTrack.detect("Blinding Lights", artist="The Weeknd")

        assert is_strict_match(source, candidate("Blinding Lights", "The Weeknd, Daft Punk"))
        assert not is_strict_match(source, candidate("Blinding Lights", "Drake"))

    def test_unknown_artist_is_ignored(self):
        source = SourceTrack.detect("Blinding Lights")
        assert is_strict_match(source, candidate("Blinding Lights", "Anyone"))

    def test_custom_tolerances(self):
        source = SourceTrack.detect("Song", artist="The Weeknd", duration=200)
        loose = MatchTolerances(duration_seconds=30)
        assert is_strict_match(source, candidate("Song", duration=220), loose)


class TestRelaxedMatch:
    def test_keyword_coverage(self):
        source = SourceTrack.detect("Blinding Lights", artist="The Weeknd")

        assert is_relaxed_match(source, candidate("Blinding Lights (2020 Remaster)"))
        assert not is_relaxed_match(source, candidate("Save Your Tears"))

    def test_artist_mismatch_needs_identical_title(self):
        source = SourceTrack.detect("Blinding Lights", artist="Someone", duration=200)

        assert is_relaxed_match(source, candidate("blinding lights", duration=210))
        assert not is_relaxed_match(source, candidate("Blinding Lights", duration=211))
        assert not is_relaxed_match(source, candidate("Blinding Lights Live"))

    def test_artist_without_keywords_counts_as_unknown(self):
        for artist in ("X", "The The"):
            source = SourceTrack.detect("Song", artist=artist)

            assert is_relaxed_match(source, candidate("Song (Live)", artist="Y"))

    def test_album_artist_match(self):
        assert is_album_artist_match("The Weeknd", "The Weeknd")
        assert not is_album_artist_match("The Weeknd", "Drake")


class TestSourceTrack:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("3:20", 200), ("1:02:03", 3723), (200, 200), ("abc", None), (None, None)],
    )
    def test_parse_duration(self, raw, expected):
        assert parse_duration(raw) == expected

    def test_search_queries(self):
        source = SourceTrack.detect(
            "Song (feat. B) [Official Video]", artist="A, B", album="Record"
        )

        assert source.search_queries == [
            "Song A",
            "Song (feat. B) [Official Video] A",
            "Song",
            "Song (feat. B) [Official Video]",
            "Song Record",
        ]

    def test_search_queries_are_deduplicated(self):
        assert SourceTrack.detect("Song", artist="A").search_queries == ["Song A", "Song"]

    def test_label(self):
        assert SourceTrack.detect("Song", artist="A").label == "A - Song"
        assert SourceTrack.detect("Song").label == "Song"


class TestConversionResult:
    def test_lifecycle(self, track):
        pending = ConversionResult(source_track=SourceTrack.detect("Song"))
        assert pending.is_pending

        failed = pending.failed(NOT_FOUND)
        assert failed.error == NOT_FOUND
        assert not failed.is_pending and not failed.is_resolved

        resolved = failed.resolved(track)
        assert resolved.is_resolved
        assert resolved.error is None

    def test_track_and_error_are_exclusive(self, track):
        with pytest.raises(ValueError):
            ConversionResult(
                source_track=SourceTrack.detect("Song"), resolved_track=track, error="x"
            )

    def test_summary(self, track):
        source = SourceTrack.detect("Song")
        results = [
            ConversionResult(source_track=source).resolved(track),
            ConversionResult(source_track=source).failed(NOT_FOUND),
            ConversionResult(source_track=source),
        ]

        assert ConversionSummary.from_results(results) == ConversionSummary(
            total=3, found=1, failed=1, pending=1
        )
