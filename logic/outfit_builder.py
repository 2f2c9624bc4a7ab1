"""Deterministic outfit assembly with transparent diagnostics."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from logic.compatibility import item_compatibility
from models.clothing_item import ClothingItem
from models.outfit import SuggestionFilters
from models.taxonomy import BUCKETS, category_bucket

logger = logging.getLogger(__name__)

MIN_OUTFIT_SIZE = 2


@dataclass(frozen=True)
class CombinationResult:
    outfits: List[List[ClothingItem]]
    diagnostics: Dict[str, object]


def group_by_bucket(items: Sequence[ClothingItem]) -> Dict[str, List[ClothingItem]]:
    """Partition items into the six assembly buckets, preserving input order."""

    grouped: Dict[str, List[ClothingItem]] = {bucket: [] for bucket in BUCKETS}
    for item in items:
        grouped[category_bucket(item.category)].append(item)
    return grouped


def best_match(base: ClothingItem, candidates: Sequence[ClothingItem]) -> ClothingItem:
    """Return the most compatible candidate; the first one wins ties."""

    assert candidates, "best_match requires at least one candidate"
    best = candidates[0]
    best_score = item_compatibility(base, best)
    for candidate in candidates[1:]:
        score = item_compatibility(base, candidate)
        if score > best_score:
            best, best_score = candidate, score
    return best


def is_outerwear_appropriate(filters: SuggestionFilters) -> bool:
    """Layer a jacket over top+bottom outfits only when the context calls for it."""

    if filters.season in {"winter", "fall"}:
        return True
    if filters.occasion in {"formal", "work"}:
        return True
    if filters.season == "spring":
        return True
    return False


def generate_combinations(items: Sequence[ClothingItem], filters: SuggestionFilters) -> CombinationResult:
    """Build dress-based and top+bottom outfits, each completed with best matches."""

    grouped = group_by_bucket(items)
    shoes, outerwear, accessories = grouped["shoes"], grouped["outerwear"], grouped["accessories"]
    outfits: List[List[ClothingItem]] = []

    for dress in grouped["dresses"]:
        outfit = [dress]
        if shoes:
            outfit.append(best_match(dress, shoes))
        if outerwear:
            outfit.append(best_match(dress, outerwear))
        if accessories:
            outfit.append(best_match(dress, accessories))
        outfits.append(outfit)

    layer_outerwear = is_outerwear_appropriate(filters)
    for top in grouped["tops"]:
        for bottom in grouped["bottoms"]:
            outfit = [top, bottom]
            if shoes:
                outfit.append(best_match(top, shoes))
            if outerwear and layer_outerwear:
                outfit.append(best_match(top, outerwear))
            if accessories:
                outfit.append(best_match(top, accessories))
            outfits.append(outfit)

    complete = [outfit for outfit in outfits if len(outfit) >= MIN_OUTFIT_SIZE]
    diagnostics: Dict[str, object] = {
        "bucket_counts": {bucket: len(values) for bucket, values in grouped.items()},
        "generated": len(outfits),
        "discarded": len(outfits) - len(complete),
        "outerwear_layered": layer_outerwear,
    }
    logger.info("Generated %s outfit combinations from %s items", len(complete), len(items))
    return CombinationResult(outfits=complete, diagnostics=diagnostics)


__all__ = [
    "CombinationResult",
    "group_by_bucket",
    "best_match",
    "is_outerwear_appropriate",
    "generate_combinations",
]
