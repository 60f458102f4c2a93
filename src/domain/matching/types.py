"""Pure domain types for playlist track matching."""

from enum import StrEnum

from attrs import define


class MatchTier(StrEnum):
    """Stage of the track matching pipeline that produced a match."""

    ISRC = "isrc"
    ALBUM = "album"
    STRICT = "strict"
    RELAXED = "relaxed"


@define(frozen=True, slots=True)
class MatchTolerances:
    """Thresholds applied by the strict and relaxed match predicates."""

    duration_seconds: int = 5
    relaxed_duration_seconds: int = 10
    keyword_overlap_ratio: float = 0.5
