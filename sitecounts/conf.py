from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "LIST_CACHE_KEY": "sitecounts:block:list_ids",
    "LIST_CACHE_TTL": 5 * 60,
    "LIST_CACHE_ALIAS": "default",
    "LIST_RECHECK_STATUS": True,
    "LIST_FILTER": {
        "kinds": ["post", "page"],
        "hour_range": [9, 17],
        "tag": "foo",
        "category": "baz",
        "page_size": 5,
    },
}


def get_setting(name: str) -> Any:
    """
    Read one key of settings.SITE_COUNTS, falling back to DEFAULTS.
    """
    overrides = getattr(settings, "SITE_COUNTS", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
