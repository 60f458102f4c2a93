"""Text normalization helpers shared by ranking and track matching.

Pure functions with no external dependencies. Keyword extraction is Unicode
aware so non-Latin titles and artist names keep their letters.
"""

import re
import string
import unicodedata

STOPWORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
    "for", "of", "with", "by", "from", "is", "it", "as",
})

REMIX_MARKERS = ("remix", "bootleg", "edit)", "edit]", "vip mix", "club mix")
COVER_MARKERS = ("cover", "acoustic version", "unplugged")

_SEPARATORS = re.compile(r"[\s\-_]+")
_NON_ALNUM = re.compile(r"[\W_]+")
_CJK_OR_HANGUL = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af]")

_TITLE_NOISE = (
    re.compile(r"\s*[\(\[](?:feat\.?|ft\.?|featuring)[^\)\]]+[\)\]]", re.IGNORECASE),
    re.compile(
        r"\s*[\(\[](?:Official|Music|Video|Audio|Lyric|Cover|Prod\.?)[^\)\]]*[\)\]]",
        re.IGNORECASE,
    ),
    re.compile(r"\s*[\(\[](?:Remastered|Remaster)[^\)\]]*[\)\]]", re.IGNORECASE),
    re.compile(r"\s*-\s*(?:Remastered|Remaster).*$", re.IGNORECASE),
)


def normalize_query(text: str) -> str:
    """Lowercase and trim a free-text query."""
    return text.lower().strip()


def normalize_name(text: str) -> str:
    """Lowercase and collapse whitespace, for near-duplicate detection."""
    return " ".join(text.lower().split())


def extract_keywords(text: str) -> list[str]:
    """Split text into significant lowercase keywords.

    Splits on whitespace, hyphens and underscores, strips everything that is
    not a letter or digit, then drops single-character tokens and stopwords.
    """
    keywords = []
    for word in _SEPARATORS.split(text.lower()):
        cleaned = _NON_ALNUM.sub("", word)
        if len(cleaned) > 1 and cleaned not in STOPWORDS:
            keywords.append(cleaned)
    return keywords


def keywords_overlap(first: str, second: str) -> bool:
    """True when the two strings share at least one keyword."""
    second_words = set(extract_keywords(second))
    return any(word in second_words for word in extract_keywords(first))


def keyword_coverage(first: str, second: str) -> float:
    """Fraction of the shorter keyword list found in the longer one.

    Returns 1.0 when the shorter side has no keywords at all.
    """
    first_words = extract_keywords(first)
    second_words = extract_keywords(second)
    if len(first_words) < len(second_words):
        shorter, longer = first_words, second_words
    else:
        shorter, longer = second_words, first_words
    if not shorter:
        return 1.0
    longer_set = set(longer)
    matched = sum(1 for word in shorter if word in longer_set)
    return matched / len(shorter)


def compact_title(text: str) -> str:
    """Lowercase and drop every non-word character."""
    return _NON_ALNUM.sub("", text.lower())


def is_title_match(first: str, second: str) -> bool:
    """Compact titles are equal or one contains the other."""
    a, b = compact_title(first), compact_title(second)
    if not a or not b:
        return a == b
    return a == b or a in b or b in a


def is_remix(title: str) -> bool:
    lower = title.lower()
    return any(marker in lower for marker in REMIX_MARKERS)


def is_cover(title: str) -> bool:
    lower = title.lower()
    return any(marker in lower for marker in COVER_MARKERS)


def _is_latin_char(char: str) -> bool:
    if char.isascii():
        return char.isalnum() or char.isspace() or char in string.punctuation
    return char.isspace() or unicodedata.category(char).startswith("P")


def is_latin_query(text: str) -> bool:
    """True for queries made only of ASCII letters, digits, spaces and punctuation.

    Punctuation is any Unicode punctuation, so typographic quotes and dashes
    keep a query Latin.
    """
    return bool(text) and all(_is_latin_char(char) for char in text)


def has_cjk(text: str) -> bool:
    """True when text contains Japanese kana, CJK ideographs or Hangul."""
    return bool(_CJK_OR_HANGUL.search(text))


def clean_title(title: str) -> str:
    """Strip featuring credits, video tags and remaster suffixes."""
    cleaned = title
    for pattern in _TITLE_NOISE:
        cleaned = pattern.sub("", cleaned)
    return cleaned.strip()


def primary_artist(artist: str | None) -> str | None:
    """First credited artist: the text before the first comma."""
    if artist is None:
        return None
    return artist.split(",")[0].strip()


def tier_match(value: str, query: str) -> int:
    """Classify how value matches query: 3 exact, 2 prefix, 1 substring, 0 none."""
    if not value or not query:
        return 0
    if value == query:
        return 3
    if value.startswith(query):
        return 2
    if query in value:
        return 1
    return 0
