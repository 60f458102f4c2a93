"""Force personally relevant history entries into search results."""

from src.domain.entities.catalog import CatalogItem, HistorySnapshot
from src.domain.search.dedup import Deduplicator
from src.domain.search.keywords import normalize_query


def inject_history(
    query: str,
    history: HistorySnapshot,
    results: list[CatalogItem],
    seen: Deduplicator,
) -> list[CatalogItem]:
    """Append history entries whose display text contains the query.

    The remote search is fuzzy and can miss a user's own recently played
    tracks, artists or albums; those entries are appended here so they take
    part in ranking like any remote result.

    Args:
        query: Free-text query (normalized here)
        history: Point-in-time history snapshot
        results: Deduplicated results so far
        seen: The deduplicator that admitted ``results``

    Returns:
        New list: ``results`` followed by the injected entries.
    """
    needle = normalize_query(query)
    if not needle:
        return list(results)

    injected: list[CatalogItem] = []
    for collection in (
        history.recent_tracks,
        history.recent_artists,
        history.recent_albums,
    ):
        for entry in collection:
            if needle in entry.display_name.lower() and seen.admit(entry):
                injected.append(entry)

    return [*results, *injected]
