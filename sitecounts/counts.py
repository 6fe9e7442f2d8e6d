from __future__ import annotations

from dataclasses import dataclass

from .catalog import Catalog, CatalogCategory, DjangoCatalog


@dataclass(frozen=True)
class CategoryCount:
    label: str
    count: int


CategoryCountMap = dict[str, CategoryCount]


def _to_count(category: CatalogCategory, published: int | None) -> CategoryCount:
    # Defaults for fields the catalog may omit.
    return CategoryCount(label=category.label or "", count=int(published or 0))


class CountAggregator:
    """
    Live published-item counts for every public content kind.
    Never cached.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    @classmethod
    def from_settings(cls) -> "CountAggregator":
        return cls(DjangoCatalog())

    def compute_counts(self) -> CategoryCountMap:
        counts: CategoryCountMap = {}
        for category in self.catalog.list_categories(public=True) or ():
            published = category.published_count
            if published is None:
                published = self.catalog.count_published(category.key)
            counts[category.key] = _to_count(category, published)
        return counts
