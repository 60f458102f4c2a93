"""Identity and near-duplicate suppression for catalog items."""

from attrs import define, field

from src.domain.entities.catalog import Album, Artist, CatalogItem
from src.domain.search.keywords import normalize_name


@define(slots=True)
class Deduplicator:
    """Admits each catalog item at most once per search.

    Items are identified by their ``"<kind>_<id>"`` key; the first occurrence
    wins. Albums and artists are additionally collapsed by normalized name,
    since the backend answers the same release from several facets under
    different ids. Tracks are exempt: distinct recordings share titles.
    """

    _keys: set[str] = field(factory=set)
    _names: set[str] = field(factory=set)

    def admit(self, item: CatalogItem) -> bool:
        """Register item and return True if it was not seen before."""
        if item.key in self._keys:
            return False

        name_key = _name_key(item)
        if name_key is not None and name_key in self._names:
            return False

        self._keys.add(item.key)
        if name_key is not None:
            self._names.add(name_key)
        return True

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)


def _name_key(item: CatalogItem) -> str | None:
    match item:
        case Album() | Artist():
            name = normalize_name(item.display_name)
            return f"{item.kind}_{name}" if name else None
        case _:
            return None


def deduplicate(items: list[CatalogItem]) -> list[CatalogItem]:
    """Keep the first occurrence of every distinct item, preserving order."""
    seen = Deduplicator()
    return [item for item in items if seen.admit(item)]
