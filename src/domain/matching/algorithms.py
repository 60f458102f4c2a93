"""Pure predicates deciding whether a catalog track matches a source track.

The strict predicate is tried on every candidate of a search before the
relaxed one, so a loosely matching early candidate never shadows an exact
later one.
"""

from src.domain.entities.catalog import Track
from src.domain.entities.conversion import SourceTrack
from src.domain.search.keywords import (
    extract_keywords,
    is_cover,
    is_remix,
    is_title_match,
    keyword_coverage,
    keywords_overlap,
)

from .types import MatchTolerances

DEFAULT_TOLERANCES = MatchTolerances()


def is_variant_allowed(source: SourceTrack, candidate: Track) -> bool:
    """Reject remixes and covers unless the source is itself one."""
    if not source.is_remix and is_remix(candidate.title):
        return False
    return source.is_cover or not is_cover(candidate.title)


def _duration_gap(source: SourceTrack, candidate: Track) -> int | None:
    if source.duration is None:
        return None
    return abs(source.duration - candidate.duration)


def is_strict_match(
    source: SourceTrack,
    candidate: Track,
    tolerances: MatchTolerances = DEFAULT_TOLERANCES,
) -> bool:
    """Artist overlap, duration within tolerance, variant agreement and title match."""
    if source.artist is not None and not keywords_overlap(
        source.artist, candidate.artist_name
    ):
        return False

    gap = _duration_gap(source, candidate)
    if gap is not None and gap > tolerances.duration_seconds:
        return False

    if not is_variant_allowed(source, candidate):
        return False

    return is_title_match(source.title, candidate.title)


def is_relaxed_match(
    source: SourceTrack,
    candidate: Track,
    tolerances: MatchTolerances = DEFAULT_TOLERANCES,
) -> bool:
    """Keyword-coverage title match with a lenient artist rule.

    Callers apply ``is_variant_allowed`` first. An artist mismatch is
    forgiven only when the titles are identical (case-insensitively) and
    the durations, if known, are close. An artist without significant
    keywords (a single letter, only stopwords) counts as unknown.
    """
    coverage = keyword_coverage(source.title, candidate.title)
    if coverage < tolerances.keyword_overlap_ratio:
        return False

    if not extract_keywords(source.artist or ""):
        return True
    if keywords_overlap(source.artist, candidate.artist_name):
        return True

    gap = _duration_gap(source, candidate)
    if gap is not None and gap > tolerances.relaxed_duration_seconds:
        return False
    return source.title.lower() == candidate.title.lower()


def is_album_artist_match(source_artist: str, album_artist: str) -> bool:
    """Album-scoped search keeps albums whose artist shares a keyword."""
    return keywords_overlap(source_artist, album_artist)
