"""Tests for text normalization and keyword helpers."""

import pytest

from src.domain.search.keywords import (
    clean_title,
    extract_keywords,
    has_cjk,
    is_cover,
    is_latin_query,
    is_remix,
    is_title_match,
    keyword_coverage,
    keywords_overlap,
    normalize_name,
    normalize_query,
    primary_artist,
    tier_match,
)


class TestNormalization:
    def test_normalize_query_lowercases_and_trims(self):
        assert normalize_query("  Hello World ") == "hello world"

    def test_normalize_name_collapses_whitespace(self):
        assert normalize_name("Abbey   Road\t") == "abbey road"


class TestKeywords:
    def test_stopwords_and_single_characters_dropped(self):
        assert extract_keywords("The Sound of Silence") == ["sound", "silence"]
        assert extract_keywords("A B cd") == ["cd"]

    def test_splits_on_hyphens_and_underscores(self):
        assert extract_keywords("Hello-World_foo") == ["hello", "world", "foo"]

    def test_keeps_non_latin_letters(self):
        assert extract_keywords("宇多田 ヒカル") == ["宇多田", "ヒカル"]

    def test_overlap(self):
        assert keywords_overlap("The Weeknd", "The Weeknd, Daft Punk")
        assert not keywords_overlap("The Weeknd", "Drake")

    def test_coverage_uses_shorter_side(self):
        assert keyword_coverage("Blinding Lights", "Blinding Lights Remastered") == 1.0
        assert keyword_coverage("Hello World Again Today", "Goodbye") == 0.0

    def test_coverage_without_keywords_is_full(self):
        assert keyword_coverage("a", "Something") == 1.0


class TestTitleMatch:
    @pytest.mark.parametrize(
        ("first", "second"),
        [("Hello!", "hello"), ("Hello", "Hello World"), ("Don't Stop", "Dont Stop")],
    )
    def test_matching_titles(self, first, second):
        assert is_title_match(first, second)

    def test_different_titles(self):
        assert not is_title_match("Abc", "Xyz")

    def test_empty_titles_only_match_each_other(self):
        assert is_title_match("!!", "??")
        assert not is_title_match("!!", "Song")


class TestVariants:
    @pytest.mark.parametrize(
        "title",
        ["Song (Remix)", "Song (Club Mix)", "Song (Radio Edit)", "Song [Bootleg]"],
    )
    def test_remix_detection(self, title):
        assert is_remix(title)

    def test_plain_title_is_not_remix(self):
        assert not is_remix("Song")

    def test_cover_detection(self):
        assert is_cover("Song - Acoustic Version")
        assert is_cover("Song (Cover)")


class TestScripts:
    def test_latin_query(self):
        assert is_latin_query("hello world!")
        assert not is_latin_query("こんにちは")
        assert not is_latin_query("café")

    @pytest.mark.parametrize("query", ["don’t stop", "rock – live", "“hello”", "a+b $5"])
    def test_unicode_punctuation_stays_latin(self, query):
        assert is_latin_query(query)

    def test_non_latin_with_punctuation(self):
        assert not is_latin_query("東京。")
        assert not is_latin_query("")

    def test_cjk_detection(self):
        assert has_cjk("東京")
        assert has_cjk("서울")
        assert not has_cjk("Tokyo")


class TestCleanup:
    def test_clean_title_strips_noise(self):
        assert clean_title("Song (feat. X) [Official Video]") == "Song"
        assert clean_title("Song - Remastered 2011") == "Song"
        assert clean_title("Song (Remastered 2009)") == "Song"

    def test_primary_artist(self):
        assert primary_artist("A, B") == "A"
        assert primary_artist(None) is None


class TestTierMatch:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("abc", 3), ("abcdef", 2), ("xabc", 1), ("xyz", 0), ("", 0)],
    )
    def test_tiers(self, value, expected):
        assert tier_match(value, "abc") == expected
