"""Evaluation scenarios covering ranking, insufficiency, profiling and compatibility."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

MINIMALIST_PALETTE = ["#000000", "#FFFFFF", "#808080", "#000080", "#F5F5DC", "#8B4513", "#556B2F"]


@dataclass
class EvaluationScenario:
    name: str
    description: str
    kind: str
    wardrobe_items: List[Dict[str, object]]
    filters: Dict[str, object] = field(default_factory=dict)
    expectations: Dict[str, object] = field(default_factory=dict)


def _basic_pair() -> List[Dict[str, object]]:
    return [
        {
            "id": "tee_white",
            "name": "White cotton tee",
            "category": "tops",
            "colors": ["#FFFFFF"],
            "occasions": ["casual", "work"],
        },
        {
            "id": "trousers_navy",
            "name": "Navy trousers",
            "category": "bottoms",
            "colors": ["#000080"],
            "occasions": ["casual", "work"],
        },
    ]


def _capsule_wardrobe(size: int = 19) -> List[Dict[str, object]]:
    categories = ["tops", "bottoms", "shoes", "outerwear", "accessories"]
    return [
        {
            "id": f"capsule_{index:02d}",
            "name": f"Capsule piece {index}",
            "category": categories[index % len(categories)],
            "colors": [MINIMALIST_PALETTE[index % len(MINIMALIST_PALETTE)]],
            "occasions": ["casual"],
            "seasons": ["all_season"],
            "mood_tags": ["comfortable"],
        }
        for index in range(size)
    ]


def _opposites() -> List[Dict[str, object]]:
    return [
        {
            "id": "scarf_red",
            "name": "Red silk scarf",
            "category": "accessories",
            "colors": ["#FF0000"],
            "occasions": ["party"],
            "seasons": ["winter"],
            "mood_tags": ["edgy"],
        },
        {
            "id": "shorts_cyan",
            "name": "Cyan running shorts",
            "category": "bottoms",
            "colors": ["#00FFFF"],
            "occasions": ["workout"],
            "seasons": ["summer"],
            "mood_tags": ["sporty"],
        },
    ]


SCENARIOS: List[EvaluationScenario] = [
    EvaluationScenario(
        name="two_piece_wardrobe",
        description="A white tee and navy trousers produce a complete, harmonious outfit.",
        kind="suggestions",
        wardrobe_items=_basic_pair(),
        expectations={
            "min_outfits": 1,
            "contains_items": ["tee_white", "trousers_navy"],
            "min_color_harmony": 0.7,
            "completeness": 1.0,
        },
    ),
    EvaluationScenario(
        name="single_item_wardrobe",
        description="One item is reported as an insufficient wardrobe, not an empty result.",
        kind="suggestions",
        wardrobe_items=_basic_pair()[:1],
        expectations={"error": "InsufficientWardrobeError"},
    ),
    EvaluationScenario(
        name="capsule_wardrobe_profile",
        description="A small, low-variety casual wardrobe is profiled as minimalist.",
        kind="style_profile",
        wardrobe_items=_capsule_wardrobe(),
        expectations={"style_personality": "minimalist"},
    ),
    EvaluationScenario(
        name="complementary_strangers",
        description="Two items with no shared tags and complementary colors score 0.32.",
        kind="compatibility",
        wardrobe_items=_opposites(),
        expectations={"compatibility": 0.32},
    ),
]


__all__ = ["EvaluationScenario", "SCENARIOS", "MINIMALIST_PALETTE"]
