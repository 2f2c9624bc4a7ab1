"""Pairwise garment compatibility scoring."""

from __future__ import annotations

from typing import Sequence

from models.clothing_item import ClothingItem
from models.color_theory import color_compatibility

COMPATIBILITY_WEIGHTS = {
    "color": 0.4,
    "occasion": 0.3,
    "season": 0.2,
    "mood": 0.1,
}


def tag_overlap(tags1: Sequence[str], tags2: Sequence[str]) -> float:
    """Fraction of shared tags relative to the longer list."""

    shared = len([tag for tag in tags1 if tag in tags2])
    return shared / max(len(tags1), len(tags2), 1)


def item_compatibility(item1: ClothingItem, item2: ClothingItem) -> float:
    """Weighted blend of color harmony and occasion/season/mood overlap."""

    return (
        color_compatibility(item1.colors, item2.colors) * COMPATIBILITY_WEIGHTS["color"]
        + tag_overlap(item1.occasions, item2.occasions) * COMPATIBILITY_WEIGHTS["occasion"]
        + tag_overlap(item1.seasons, item2.seasons) * COMPATIBILITY_WEIGHTS["season"]
        + tag_overlap(item1.mood_tags, item2.mood_tags) * COMPATIBILITY_WEIGHTS["mood"]
    )


__all__ = ["COMPATIBILITY_WEIGHTS", "tag_overlap", "item_compatibility"]
