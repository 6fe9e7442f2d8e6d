from __future__ import annotations

from typing import Any

from .conf import get_setting
from .counts import CategoryCountMap, CountAggregator
from .listing import FilteredListCache, ListFilter, ListResult


def build_block_context(
    current_id: int,
    *,
    aggregator: CountAggregator | None = None,
    listing: FilteredListCache | None = None,
    list_filter: ListFilter | None = None,
) -> dict[str, Any]:
    """
    Data for one render of the site counts block.
    Counts and listing are computed independently; catalog errors propagate.
    """
    aggregator = aggregator or CountAggregator.from_settings()
    listing = listing or FilteredListCache.from_settings()
    list_filter = list_filter or ListFilter.from_settings(exclude_id=current_id)
    return {
        "current_id": current_id,
        "counts": aggregator.compute_counts(),
        "listing": listing.get_filtered_list(list_filter, current_id),
    }


def summary_lines(current_id: int, counts: CategoryCountMap, listing: ListResult) -> list[str]:
    """
    Plain-text sentences the block shows.
    """
    conf = get_setting("LIST_FILTER")
    lines = [f"There are {c.count} {c.label}." for c in counts.values()]
    lines.append(f"The current item ID is {abs(int(current_id))}.")
    if listing.ids:
        lines.append(
            f"{listing.total_count} items with the tag of {conf['tag']} and the category of {conf['category']}"
        )
    return lines


def serialize_block(context: dict[str, Any]) -> dict[str, Any]:
    counts: CategoryCountMap = context["counts"]
    listing: ListResult = context["listing"]
    return {
        "current_id": context["current_id"],
        "counts": [{"key": key, "label": c.label, "count": c.count} for key, c in counts.items()],
        "listing": {"ids": list(listing.ids), "total_count": listing.total_count},
        "summary": summary_lines(context["current_id"], counts, listing),
    }
