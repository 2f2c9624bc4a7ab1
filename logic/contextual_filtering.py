"""Deterministic item filtering for occasion, season and mood requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from models.clothing_item import ClothingItem
from models.outfit import SuggestionFilters


@dataclass(frozen=True)
class FilteringResult:
    """Captures the outcome of a filtering pass."""

    items: List[ClothingItem]
    removed: Dict[str, str]
    debug: Dict[str, object]


def _rejects(tags: List[str], wanted: Optional[str]) -> bool:
    # Untagged items are never excluded by that dimension.
    return bool(wanted) and bool(tags) and wanted not in tags


def filter_items(items: List[ClothingItem], filters: SuggestionFilters) -> FilteringResult:
    """Drop excluded items and items whose tags contradict the requested context."""

    excluded = set(filters.exclude_items or [])
    removed: Dict[str, str] = {}
    kept: List[ClothingItem] = []

    for item in items:
        reason = None
        if item.id in excluded:
            reason = "excluded by request"
        elif _rejects(item.occasions, filters.occasion):
            reason = f"not tagged for occasion {filters.occasion}"
        elif _rejects(item.seasons, filters.season):
            reason = f"not tagged for season {filters.season}"
        elif _rejects(item.mood_tags, filters.mood):
            reason = f"not tagged for mood {filters.mood}"

        if reason:
            removed[item.id] = reason
        else:
            kept.append(item)

    debug = {
        "input_count": len(items),
        "kept_count": len(kept),
        "removed_count": len(removed),
        "occasion": filters.occasion,
        "season": filters.season,
        "mood": filters.mood,
    }
    return FilteringResult(items=kept, removed=removed, debug=debug)


__all__ = ["filter_items", "FilteringResult"]
