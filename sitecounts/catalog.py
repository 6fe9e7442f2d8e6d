from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from django.db import DatabaseError, models

from .exceptions import CatalogUnavailable
from .models import ContentKind, Item


@dataclass(frozen=True)
class CatalogCategory:
    """
    A content-type category as the catalog reports it.
    `label` and `published_count` may be missing; readers substitute defaults.
    """

    key: str
    label: str | None = None
    published_count: int | None = None


@dataclass(frozen=True)
class ItemQuery:
    """
    Catalog item query.

    Two modes:
    - compound filter (kinds/status/hour range/tag/category), catalog default order
    - `include_ids` lookup, ordered by position in `include_ids`
    Only ids are ever returned.
    """

    kinds: frozenset[str] = frozenset()
    status: str | None = Item.Status.PUBLISH
    limit: int | None = None
    hour_range: tuple[int, int] | None = None
    tag: str | None = None
    category: str | None = None
    include_ids: tuple[int, ...] | None = None


@dataclass(frozen=True)
class QueryResult:
    ids: tuple[int, ...]
    # Number of matches ignoring `limit`.
    total_count: int


class Catalog(Protocol):
    def list_categories(self, *, public: bool | None = True) -> Sequence[CatalogCategory] | None: ...

    def count_published(self, category_key: str) -> int | None: ...

    def query(self, query: ItemQuery) -> QueryResult: ...


def _position_order(ids: Sequence[int]) -> models.Case:
    return models.Case(
        *[models.When(pk=pk, then=models.Value(pos)) for pos, pk in enumerate(ids)],
        default=models.Value(len(ids)),
        output_field=models.IntegerField(),
    )


class DjangoCatalog:
    """
    Catalog backed by the ORM models of this app.
    Any database error surfaces as CatalogUnavailable.
    """

    def list_categories(self, *, public: bool | None = True) -> list[CatalogCategory]:
        qs = ContentKind.objects.all()
        if public is not None:
            qs = qs.filter(is_public=public)
        try:
            return [CatalogCategory(key=k.key, label=k.label or None) for k in qs]
        except DatabaseError as e:
            raise CatalogUnavailable(f"Could not list content kinds: {e}") from e

    def count_published(self, category_key: str) -> int:
        try:
            return Item.objects.filter(kind__key=category_key, status=Item.Status.PUBLISH).count()
        except DatabaseError as e:
            raise CatalogUnavailable(f"Could not count items of kind {category_key!r}: {e}") from e

    def query(self, query: ItemQuery) -> QueryResult:
        if query.include_ids is not None and not query.include_ids:
            return QueryResult(ids=(), total_count=0)

        qs = Item.objects.all()
        if query.kinds:
            qs = qs.filter(kind__key__in=sorted(query.kinds))
        if query.status:
            qs = qs.filter(status=query.status)
        if query.hour_range is not None:
            start, end = query.hour_range
            qs = qs.filter(published_at__hour__gte=start, published_at__hour__lte=end)
        if query.tag:
            qs = qs.filter(tags__slug=query.tag)
        if query.category:
            qs = qs.filter(categories__name=query.category)
        if query.include_ids is not None:
            qs = qs.filter(pk__in=query.include_ids).order_by(_position_order(query.include_ids))

        ids_qs = qs.values_list("pk", flat=True)
        if query.limit is not None:
            ids_qs = ids_qs[: query.limit]
        try:
            total = qs.count()
            ids = tuple(ids_qs)
        except DatabaseError as e:
            raise CatalogUnavailable(f"Item query failed: {e}") from e
        return QueryResult(ids=ids, total_count=total)
