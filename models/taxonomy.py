"""Canonical taxonomy definitions for clothing items.

This module centralises the fixed enumerations for categories, occasions,
seasons and mood tags, plus the coarse category buckets used when assembling
outfits. Helper functions keep validation consistent across the models,
stores and service layer.
"""

from typing import Dict, Iterable, List


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_")


CATEGORIES: List[str] = [
    "tops",
    "bottoms",
    "dresses",
    "outerwear",
    "shoes",
    "accessories",
    "underwear",
    "activewear",
    "sleepwear",
    "formal",
]

OCCASIONS: List[str] = [
    "casual",
    "work",
    "formal",
    "party",
    "date",
    "workout",
    "travel",
    "home",
    "special_event",
    "outdoor",
]

SEASONS: List[str] = ["spring", "summer", "fall", "winter", "all_season"]

MOODS: List[str] = [
    "confident",
    "comfortable",
    "elegant",
    "edgy",
    "playful",
    "professional",
    "romantic",
    "sporty",
    "trendy",
    "classic",
]

BUCKETS: List[str] = ["tops", "bottoms", "dresses", "outerwear", "shoes", "accessories"]

CATEGORY_BUCKETS: Dict[str, str] = {
    "tops": "tops",
    "bottoms": "bottoms",
    "dresses": "dresses",
    "outerwear": "outerwear",
    "shoes": "shoes",
    "accessories": "accessories",
    "activewear": "tops",
    "sleepwear": "tops",
    "underwear": "accessories",
    "formal": "dresses",
}

STYLE_PERSONALITIES: List[str] = ["classic", "trendy", "casual", "formal", "eclectic", "minimalist"]
RISK_TOLERANCES: List[str] = ["conservative", "moderate", "adventurous"]


def category_bucket(category: str) -> str:
    """Map a clothing category onto its outfit-assembly bucket."""

    return CATEGORY_BUCKETS.get(category, "accessories")


def validate_category(value: str) -> str:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    key = _normalize_key(value)
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {CATEGORIES}")
    return key


def normalise_tags(values: Iterable[str], allowed: List[str]) -> List[str]:
    """Normalise and deduplicate tags against an allowed set."""

    normalised = []
    seen = set()
    for value in values:
        key = _normalize_key(str(value))
        if key in allowed and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


__all__ = [
    "CATEGORIES",
    "OCCASIONS",
    "SEASONS",
    "MOODS",
    "BUCKETS",
    "CATEGORY_BUCKETS",
    "STYLE_PERSONALITIES",
    "RISK_TOLERANCES",
    "category_bucket",
    "validate_category",
    "normalise_tags",
]
