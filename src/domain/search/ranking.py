"""Heuristic re-ranking of merged search results.

The score of an item is additive:

- a base term ``1000 / (index + 1)`` that preserves the backend's own order
- tiered title, artist and album bonuses (exact > prefix > substring)
- a contextual boost when a track or album's artist or album equals the query
- a transliteration bonus for Latin queries answered in CJK or Hangul script
- history bonuses, dominated by exact membership in recent history
- ``popularity * 10`` for tracks, artists and albums, a flat boost for playlists

Weights are tunable through ``RankingConfig``; only their relative order is
load-bearing.
"""

from typing import Any, Self

from attrs import define

from src.config.settings import RankingConfig
from src.domain.entities.catalog import (
    Album,
    Artist,
    CatalogItem,
    HistorySnapshot,
    Playlist,
    Track,
)
from src.domain.search.keywords import (
    has_cjk,
    is_latin_query,
    normalize_query,
    tier_match,
)


@define(frozen=True, slots=True)
class RankingWeights:
    """Scoring constants, in points."""

    title_exact: float = 3000.0
    title_prefix: float = 1000.0
    title_substring: float = 500.0
    artist_exact: float = 2000.0
    artist_prefix: float = 1000.0
    artist_substring: float = 500.0
    album_exact: float = 1500.0
    album_prefix: float = 800.0
    album_substring: float = 400.0
    context_artist_exact: float = 1000.0
    context_album_exact: float = 500.0
    transliteration: float = 2000.0
    history_exact: float = 10000.0
    history_artist: float = 3000.0
    history_album: float = 2000.0
    popularity_multiplier: float = 10.0
    playlist_base: float = 1200.0

    @classmethod
    def from_config(cls, config: RankingConfig) -> Self:
        return cls(**config.model_dump())

    def tiered(self, field_name: str, tier: int) -> float:
        match tier:
            case 3:
                return getattr(self, f"{field_name}_exact")
            case 2:
                return getattr(self, f"{field_name}_prefix")
            case 1:
                return getattr(self, f"{field_name}_substring")
            case _:
                return 0.0


@define(frozen=True, slots=True)
class ScoreEvidence:
    """Breakdown of how an item's ranking score was composed."""

    base: float
    title: float = 0.0
    artist: float = 0.0
    album: float = 0.0
    context: float = 0.0
    transliteration: float = 0.0
    history: float = 0.0
    popularity: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.base
            + self.title
            + self.artist
            + self.album
            + self.context
            + self.transliteration
            + self.history
            + self.popularity
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "base": round(self.base, 2),
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "context": self.context,
            "transliteration": self.transliteration,
            "history": self.history,
            "popularity": round(self.popularity, 2),
            "total": round(self.total, 2),
        }


def _match_fields(item: CatalogItem) -> tuple[str, str, str]:
    """(title, artist, album) text of an item as seen by the scorer."""
    match item:
        case Track():
            return item.title, item.artist_name, item.album_title
        case Album():
            return item.title, item.artist_name, ""
        case Artist():
            return item.name, "", ""
        case Playlist():
            return item.title, "", ""


def _history_bonus(
    item: CatalogItem, history: HistorySnapshot, weights: RankingWeights
) -> float:
    item_id = item.id.strip()
    match item:
        case Track():
            if item_id in history.track_ids:
                return weights.history_exact
            if item.artist_id and item.artist_id.strip() in history.artist_ids:
                return weights.history_artist
            if item.album_id and item.album_id.strip() in history.album_ids:
                return weights.history_album
        case Artist():
            if item_id in history.artist_ids:
                return weights.history_exact
        case Album():
            if item_id in history.album_ids:
                return weights.history_exact
            if item.artist_id and item.artist_id.strip() in history.artist_ids:
                return weights.history_artist
    return 0.0


def _popularity_bonus(item: CatalogItem, weights: RankingWeights) -> float:
    if isinstance(item, Playlist):
        return weights.playlist_base
    return (item.popularity or 0.0) * weights.popularity_multiplier


def calculate_score(
    item: CatalogItem,
    original_index: int,
    query: str,
    history: HistorySnapshot,
    weights: RankingWeights | None = None,
) -> ScoreEvidence:
    """Score one item and return the evidence behind the score.

    Args:
        item: Candidate from the merged result set
        original_index: Position in the merged set before ranking
        query: Free-text query (normalized here)
        history: Point-in-time history snapshot
        weights: Scoring constants, defaults when omitted

    Returns:
        ScoreEvidence whose ``total`` is the ranking score
    """
    weights = weights or RankingWeights()
    needle = normalize_query(query)

    title, artist, album = _match_fields(item)
    lower_title = title.lower()
    lower_artist = artist.lower()
    lower_album = album.lower()

    context = 0.0
    if isinstance(item, (Track, Album)) and needle:
        if lower_artist == needle:
            context += weights.context_artist_exact
        if lower_album == needle:
            context += weights.context_album_exact

    transliteration = 0.0
    if needle and is_latin_query(needle) and (has_cjk(title) or has_cjk(artist)):
        transliteration = weights.transliteration

    return ScoreEvidence(
        base=1000.0 / (original_index + 1),
        title=weights.tiered("title", tier_match(lower_title, needle)),
        artist=weights.tiered("artist", tier_match(lower_artist, needle)),
        album=weights.tiered("album", tier_match(lower_album, needle)),
        context=context,
        transliteration=transliteration,
        history=_history_bonus(item, history, weights),
        popularity=_popularity_bonus(item, weights),
    )


def score_item(
    item: CatalogItem,
    original_index: int,
    query: str,
    history: HistorySnapshot,
    weights: RankingWeights | None = None,
) -> float:
    return calculate_score(item, original_index, query, history, weights).total


def rank_results(
    items: list[CatalogItem],
    query: str,
    history: HistorySnapshot,
    weights: RankingWeights | None = None,
) -> list[CatalogItem]:
    """Sort items by descending score; ties keep their original order."""
    scores = [
        score_item(item, index, query, history, weights)
        for index, item in enumerate(items)
    ]
    order = sorted(range(len(items)), key=lambda i: -scores[i])
    return [items[i] for i in order]
