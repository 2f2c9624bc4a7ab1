"""Deterministic scoring for candidate outfits."""

from __future__ import annotations

import random
import string
import time
from collections import Counter
from typing import List, Sequence

from models.clothing_item import ClothingItem
from models.color_theory import color_compatibility, color_harmony
from models.outfit import OutfitSuggestion, SuggestionFilters
from models.taxonomy import category_bucket

WEIGHTS = {
    "color": 0.4,
    "style": 0.3,
    "completeness": 0.2,
    "preference": 0.1,
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


def outfit_color_harmony(items: Sequence[ClothingItem]) -> float:
    """Average color compatibility over every unordered item pair."""

    if len(items) < 2:
        return 1.0
    pairs = [
        color_compatibility(items[i].colors, items[j].colors)
        for i in range(len(items))
        for j in range(i + 1, len(items))
    ]
    return sum(pairs) / len(pairs)


def overlap_score(tags: Sequence[str]) -> float:
    """Share of the pooled tags taken by the most frequent value."""

    if not tags:
        return 0.0
    _, top_count = Counter(tags).most_common(1)[0]
    return top_count / len(tags)


def style_coherence(items: Sequence[ClothingItem]) -> float:
    occasions = [tag for item in items for tag in item.occasions]
    moods = [tag for item in items for tag in item.mood_tags]
    return (overlap_score(occasions) + overlap_score(moods)) / 2


def completeness(items: Sequence[ClothingItem]) -> float:
    """1.0 for a dress or a top+bottom pair, otherwise 0.5."""

    buckets = {category_bucket(item.category) for item in items}
    if "dresses" in buckets:
        return 1.0
    if "tops" in buckets and "bottoms" in buckets:
        return 1.0
    return 0.5


def preference_alignment(items: Sequence[ClothingItem], preferred_colors: Sequence[str] | None) -> float:
    if not preferred_colors:
        return 0.5
    outfit_colors = [color for item in items for color in item.colors]
    matches = [
        color
        for color in outfit_colors
        if any(color_harmony(color, preferred) > 0.7 for preferred in preferred_colors)
    ]
    return len(matches) / max(len(outfit_colors), 1)


def generate_outfit_id() -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"outfit-{int(time.time() * 1000)}-{suffix}"


def score_outfit(items: List[ClothingItem], filters: SuggestionFilters) -> OutfitSuggestion:
    """Calculate the composite score, sub scores and reasoning for an outfit."""

    harmony = outfit_color_harmony(items)
    coherence = style_coherence(items)
    complete = completeness(items)
    preference = preference_alignment(items, filters.preferred_colors)

    score = (
        harmony * WEIGHTS["color"]
        + coherence * WEIGHTS["style"]
        + complete * WEIGHTS["completeness"]
        + preference * WEIGHTS["preference"]
    )

    reasoning: List[str] = []
    if harmony > 0.7:
        reasoning.append("Great color coordination")
    if coherence > 0.8:
        reasoning.append("Cohesive style")
    if complete == 1.0:
        reasoning.append("Complete outfit")

    return OutfitSuggestion(
        id=generate_outfit_id(),
        items=items,
        score=score,
        reasoning=reasoning,
        color_harmony=harmony,
        style_coherence=coherence,
        occasion=filters.occasion,
        season=filters.season,
        mood=filters.mood,
    )


__all__ = [
    "WEIGHTS",
    "outfit_color_harmony",
    "overlap_score",
    "style_coherence",
    "completeness",
    "preference_alignment",
    "generate_outfit_id",
    "score_outfit",
]
