"""Track matching predicates for playlist conversion."""

from .algorithms import (
    DEFAULT_TOLERANCES,
    is_album_artist_match,
    is_relaxed_match,
    is_strict_match,
    is_variant_allowed,
)
from .types import MatchTier, MatchTolerances

__all__ = [
    "DEFAULT_TOLERANCES",
    "MatchTier",
    "MatchTolerances",
    "is_album_artist_match",
    "is_relaxed_match",
    "is_strict_match",
    "is_variant_allowed",
]
