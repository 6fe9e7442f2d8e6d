from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .cache_store import CacheEntry, CacheStore, DjangoCacheStore
from .catalog import Catalog, DjangoCatalog, ItemQuery, QueryResult
from .conf import get_setting
from .exceptions import CacheUnavailable
from .models import Item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListFilter:
    """
    Compound filter for the block listing.

    `limit` is one more than the page size we want to show, since the item
    being rendered is usually part of the raw result and gets dropped.
    """

    kinds: frozenset[str]
    hour_range: tuple[int, int]
    tag: str
    category: str
    limit: int
    status: str = Item.Status.PUBLISH
    exclude_id: int | None = None

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError("limit must be > 0")
        start, end = self.hour_range
        if not (0 <= start <= end <= 23):
            raise ValueError(f"Invalid hour range: {self.hour_range!r}")

    @classmethod
    def build(
        cls,
        *,
        kinds: Iterable[str],
        hour_range: Iterable[int],
        tag: str,
        category: str,
        page_size: int,
        exclude_id: int | None = None,
    ) -> "ListFilter":
        start, end = (int(h) for h in hour_range)
        return cls(
            kinds=frozenset(kinds),
            hour_range=(start, end),
            tag=tag,
            category=category,
            limit=int(page_size) + 1,
            exclude_id=exclude_id,
        )

    @classmethod
    def from_settings(cls, exclude_id: int | None = None) -> "ListFilter":
        conf: Mapping[str, Any] = get_setting("LIST_FILTER")
        return cls.build(
            kinds=conf["kinds"],
            hour_range=conf["hour_range"],
            tag=conf["tag"],
            category=conf["category"],
            page_size=conf["page_size"],
            exclude_id=exclude_id,
        )

    def to_query(self) -> ItemQuery:
        return ItemQuery(
            kinds=self.kinds,
            status=self.status,
            limit=self.limit,
            hour_range=self.hour_range,
            tag=self.tag,
            category=self.category,
        )


@dataclass(frozen=True)
class ListResult:
    ids: tuple[int, ...]
    total_count: int

    @classmethod
    def empty(cls) -> "ListResult":
        return cls(ids=(), total_count=0)


def exclude_current(raw: QueryResult, current_id: int | None) -> ListResult:
    """
    Drop one occurrence of `current_id` from a raw result, keeping order,
    and take it off the total too.
    """
    if current_id is None or current_id not in raw.ids:
        return ListResult(ids=tuple(raw.ids), total_count=raw.total_count)
    ids = list(raw.ids)
    ids.remove(current_id)
    return ListResult(ids=tuple(ids), total_count=max(0, raw.total_count - 1))


class FilteredListCache:
    """
    Read-through cache of the block listing ids.

    Miss: run the compound filter, drop the current item, store the ids.
    Hit: look the cached ids up again by id (cheap) keeping the cached order.
    The cache only ever holds ids, never query objects.

    With `recheck_status` the hit lookup only keeps published items, so an
    item unpublished after caching drops out until the entry expires.
    """

    def __init__(
        self,
        catalog: Catalog,
        store: CacheStore,
        *,
        cache_key: str,
        ttl: int = 5 * 60,
        recheck_status: bool = True,
    ):
        if ttl <= 0:
            raise ValueError("ttl must be > 0")
        self.catalog = catalog
        self.store = store
        self.cache_key = cache_key
        self.ttl = int(ttl)
        self.recheck_status = recheck_status

    @classmethod
    def from_settings(cls) -> "FilteredListCache":
        return cls(
            DjangoCatalog(),
            DjangoCacheStore(get_setting("LIST_CACHE_ALIAS")),
            cache_key=get_setting("LIST_CACHE_KEY"),
            ttl=int(get_setting("LIST_CACHE_TTL")),
            recheck_status=bool(get_setting("LIST_RECHECK_STATUS")),
        )

    def get_filtered_list(self, list_filter: ListFilter, current_id: int | None = None) -> ListResult:
        if current_id is None:
            current_id = list_filter.exclude_id
        entry = self._read_entry()
        if entry is None:
            logger.debug("Listing cache miss (%s)", self.cache_key)
            return self._refresh(list_filter, current_id)
        logger.debug("Listing cache hit (%s, %d ids)", self.cache_key, len(entry.value))
        return self._from_cached(list_filter, entry.value, current_id)

    def _read_entry(self) -> CacheEntry | None:
        try:
            return self.store.get(self.cache_key)
        except CacheUnavailable:
            logger.warning("Listing cache read failed, querying catalog", exc_info=True)
            return None

    def _refresh(self, list_filter: ListFilter, current_id: int | None) -> ListResult:
        raw = self.catalog.query(list_filter.to_query())
        result = exclude_current(raw, current_id)
        try:
            self.store.set(self.cache_key, result.ids, self.ttl)
        except CacheUnavailable:
            # No cache is fine; the result is still correct.
            logger.warning("Listing cache write failed", exc_info=True)
        return result

    def _from_cached(self, list_filter: ListFilter, cached: tuple[int, ...], current_id: int | None) -> ListResult:
        # The entry may have been written while rendering another item.
        ids = tuple(pk for pk in cached if pk != current_id)
        if not ids:
            return ListResult.empty()
        raw = self.catalog.query(
            ItemQuery(
                kinds=list_filter.kinds,
                status=Item.Status.PUBLISH if self.recheck_status else None,
                limit=len(ids),
                include_ids=ids,
            )
        )
        return ListResult(ids=tuple(raw.ids), total_count=len(ids))
