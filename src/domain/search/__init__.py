"""Search-result processing: scanning, deduplication, injection and ranking."""

from .keywords import extract_keywords, keywords_overlap, normalize_query
from .scanner import ScannedNode, infer_kind, scan_document
from .mapping import build_item, normalize_popularity
from .dedup import Deduplicator, deduplicate
from .history import inject_history
from .ranking import (
    RankingWeights,
    ScoreEvidence,
    calculate_score,
    rank_results,
    score_item,
)

__all__ = [
    "Deduplicator",
    "RankingWeights",
    "ScannedNode",
    "ScoreEvidence",
    "build_item",
    "calculate_score",
    "deduplicate",
    "extract_keywords",
    "infer_kind",
    "inject_history",
    "keywords_overlap",
    "normalize_popularity",
    "normalize_query",
    "rank_results",
    "scan_document",
    "score_item",
]
