"""Shared fixtures for site counts tests."""

import time
from datetime import datetime, timezone

import pytest
from django.core.cache import cache

from sitecounts.cache_store import CacheEntry
from sitecounts.catalog import CatalogCategory, QueryResult
from sitecounts.exceptions import CacheUnavailable, CatalogUnavailable
from sitecounts.models import Category, ContentKind, Item, Tag


class FakeCatalog:
    """In-memory catalog double that records every query it answers."""

    def __init__(self, categories=None, counts=None, raw=None, published=None, fail=False):
        self.categories = categories
        self.counts = counts or {}
        self.raw = raw or QueryResult(ids=(), total_count=0)
        # Ids considered published for id lookups (None: all of them).
        self.published = published
        self.fail = fail
        self.queries = []
        self.count_calls = []

    def list_categories(self, *, public=True):
        if self.fail:
            raise CatalogUnavailable("catalog down")
        return self.categories

    def count_published(self, category_key):
        self.count_calls.append(category_key)
        return self.counts.get(category_key)

    def query(self, query):
        if self.fail:
            raise CatalogUnavailable("catalog down")
        self.queries.append(query)
        if query.include_ids is None:
            return self.raw
        ids = list(query.include_ids)
        if query.status and self.published is not None:
            ids = [i for i in ids if i in self.published]
        if query.limit is not None:
            ids = ids[: query.limit]
        return QueryResult(ids=tuple(ids), total_count=len(ids))


class FakeStore:
    """Cache store double; can be told to fail on read or write."""

    def __init__(self, fail_get=False, fail_set=False):
        self.entries = {}
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.writes = []

    def get(self, key):
        if self.fail_get:
            raise CacheUnavailable("cache down")
        entry = self.entries.get(key)
        if entry is None or entry.is_expired(time.time()):
            return None
        return entry

    def set(self, key, value, ttl):
        self.writes.append((key, tuple(value), ttl))
        if self.fail_set:
            raise CacheUnavailable("cache down")
        self.entries[key] = CacheEntry(key=key, value=tuple(value), expires_at=time.time() + ttl)

    def seed(self, key, ids, ttl=300):
        self.entries[key] = CacheEntry(key=key, value=tuple(ids), expires_at=time.time() + ttl)


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def fake_catalog_cls():
    return FakeCatalog


@pytest.fixture
def fake_store_cls():
    return FakeStore


@pytest.fixture
def category_cls():
    return CatalogCategory


def at_hour(hour, day=1):
    return datetime(2024, 5, day, hour, 30, tzinfo=timezone.utc)


@pytest.fixture
def catalog_data(db):
    """
    Posts and pages spread over the day; only some carry tag `foo` and
    category `baz`. Returns a dict of the created objects by name.
    """
    post = ContentKind.objects.create(key="post", label="Posts", sort_order=1)
    page = ContentKind.objects.create(key="page", label="Pages", sort_order=2)
    ContentKind.objects.create(key="revision", label="Revisions", is_public=False, sort_order=3)
    product = ContentKind.objects.create(key="product", label="", sort_order=4)

    foo = Tag.objects.create(name="Foo", slug="foo")
    other_tag = Tag.objects.create(name="Other", slug="other")
    baz = Category.objects.create(name="baz", slug="baz")
    other_cat = Category.objects.create(name="qux", slug="qux")

    def make(title, kind, hour, *, day=1, status=Item.Status.PUBLISH, tags=(foo,), cats=(baz,)):
        item = Item.objects.create(title=title, kind=kind, status=status, published_at=at_hour(hour, day))
        item.tags.set(tags)
        item.categories.set(cats)
        return item

    items = {
        "morning_post": make("Morning post", post, 9, day=1),
        "noon_page": make("Noon page", page, 12, day=2),
        "late_post": make("Late post", post, 17, day=3),
        "evening_post": make("Evening post", post, 18, day=4),
        "early_post": make("Early post", post, 8, day=5),
        "draft_post": make("Draft post", post, 10, day=6, status=Item.Status.DRAFT),
        "untagged_post": make("Untagged post", post, 11, day=7, tags=(other_tag,)),
        "wrong_cat_page": make("Wrong category page", page, 13, day=8, cats=(other_cat,)),
        "product_item": make("Product", product, 14, day=9),
        "recent_page": make("Recent page", page, 15, day=10),
    }
    return {"post": post, "page": page, "product": product, "items": items}
