"""AI enhancement: fallbacks, caching, personality matching and profile analysis."""

from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from agents.ai_enhancement import (  # noqa: E402
    FALLBACK_RECOMMENDATIONS,
    FALLBACK_STYLE_NOTES,
    AIOutfitEnhancer,
    BoundedCache,
)
from agents.suggestion_engine import OutfitSuggestionEngine  # noqa: E402
from logic.outfit_scoring import score_outfit  # noqa: E402
from logic.style_profile import infer_style_profile  # noqa: E402
from models.clothing_item import ClothingItem  # noqa: E402
from models.outfit import OutfitSuggestion, SuggestionFilters  # noqa: E402
from tools.ai_client import AIServiceError, StyleAIClient, TextGenerationService  # noqa: E402

DESCRIPTION_REPLY = json.dumps(
    {
        "description": "Crisp and polished.",
        "styleNotes": ["Tuck the tee"],
        "occasionFit": "Office days",
        "confidence": 0.5,
    }
)


class CountingService(TextGenerationService):
    name = "counting"

    def __init__(self, reply: str = DESCRIPTION_REPLY, fail: bool = False) -> None:
        self.reply = reply
        self.fail = fail
        self.calls = 0

    @property
    def available(self) -> bool:
        return True

    async def generate_text(self, prompt: str) -> str:
        self.calls += 1
        if self.fail:
            raise AIServiceError("provider unavailable")
        return self.reply


def _item(
    item_id: str,
    category: str,
    colors: List[str],
    occasions: Optional[List[str]] = None,
    moods: Optional[List[str]] = None,
) -> ClothingItem:
    return ClothingItem(
        id=item_id,
        user_id="u1",
        name=item_id.replace("_", " ").title(),
        category=category,
        colors=colors,
        occasions=occasions or [],
        mood_tags=moods or [],
    )


def _wardrobe() -> List[ClothingItem]:
    return [
        _item("white_tee", "tops", ["#FFFFFF"], ["casual", "work"]),
        _item("striped_shirt", "tops", ["#ADD8E6"], ["work"]),
        _item("navy_trousers", "bottoms", ["#000080"], ["casual", "work"]),
        _item("black_jeans", "bottoms", ["#000000"], ["casual"], ["edgy"]),
    ]


def _suggestion(items: List[ClothingItem], **filters) -> OutfitSuggestion:
    return score_outfit(items, SuggestionFilters(**filters))


def _enhancer(service: TextGenerationService | None, personality: str | None = None) -> AIOutfitEnhancer:
    profile = None
    if personality:
        profile = replace(infer_style_profile(_wardrobe()), style_personality=personality)
    return AIOutfitEnhancer(StyleAIClient(service), style_profile=profile)


def test_failing_provider_yields_fallback_fields_for_every_suggestion() -> None:
    engine = OutfitSuggestionEngine(_wardrobe())
    enhancer = _enhancer(CountingService(fail=True))
    base = {tuple(s.item_ids): s.score for s in engine.rule_based_suggestions()}

    suggestions = asyncio.run(enhancer.generate_ai_enhanced_suggestions(engine, SuggestionFilters()))

    assert len(suggestions) == len(base) == 4
    for suggestion in suggestions:
        names = ", ".join(item.name for item in suggestion.items)
        assert suggestion.ai_confidence == 0.6
        assert suggestion.ai_style_notes == FALLBACK_STYLE_NOTES
        assert suggestion.ai_recommendations == FALLBACK_RECOMMENDATIONS
        assert suggestion.ai_description == f"A stylish combination featuring {names}, perfect for any occasion."
        assert suggestion.ai_occasion_fit == "Suitable for various occasions"
        assert suggestion.ai_color_analysis == "Good color harmony"
        assert suggestion.score == pytest.approx(base[tuple(suggestion.item_ids)] * 0.6)
    scores = [suggestion.score for suggestion in suggestions]
    assert scores == sorted(scores, reverse=True)


def test_fallback_mentions_requested_occasion() -> None:
    enhancer = _enhancer(None)
    suggestion = _suggestion(_wardrobe()[:3:2], occasion="work")
    enhanced = asyncio.run(enhancer.enhance_with_fallback(suggestion))
    assert enhanced.ai_description == (
        "A stylish combination featuring White Tee, Navy Trousers, perfect for work."
    )
    assert enhanced.ai_occasion_fit == "Suitable for work"


def test_use_ai_false_marks_rule_based_confidence() -> None:
    service = CountingService()
    engine = OutfitSuggestionEngine(_wardrobe())
    suggestions = asyncio.run(
        _enhancer(service).generate_ai_enhanced_suggestions(engine, SuggestionFilters(use_ai=False))
    )
    assert suggestions
    assert all(suggestion.ai_confidence == 0.5 for suggestion in suggestions)
    assert all(suggestion.ai_description is None for suggestion in suggestions)
    assert service.calls == 0


def test_successful_enhancement_merges_ai_fields_and_scales_score() -> None:
    enhancer = _enhancer(CountingService(), personality="casual")
    suggestion = _suggestion(_wardrobe()[:3:2], season="winter")

    enhanced = asyncio.run(enhancer.describe(suggestion))

    assert enhanced is not None
    assert enhanced.ai_description == "Crisp and polished."
    assert enhanced.ai_style_notes == ["Tuck the tee"]
    assert enhanced.ai_occasion_fit == "Office days"
    assert enhanced.ai_confidence == 0.5
    assert enhanced.ai_personality_match == 0.8
    assert enhanced.ai_color_analysis == "Complementary color pairing enhances visual appeal"
    assert enhanced.ai_recommendations == ["Consider adding a warm layer for comfort"]
    assert enhanced.style_personality == "casual"
    assert enhanced.score == pytest.approx(suggestion.score * 0.5)
    assert suggestion.ai_description is None


def test_describe_returns_none_on_failure_and_does_not_cache_it() -> None:
    service = CountingService(fail=True)
    enhancer = _enhancer(service)
    suggestion = _suggestion(_wardrobe()[:2])

    assert asyncio.run(enhancer.describe(suggestion)) is None
    assert asyncio.run(enhancer.enhance(suggestion)) is suggestion
    assert service.calls == 2
    assert len(enhancer.cache) == 0


def test_results_are_cached_per_item_set() -> None:
    service = CountingService()
    enhancer = _enhancer(service)
    items = _wardrobe()[:3:2]
    first = _suggestion(items)
    same_items_reversed = _suggestion(list(reversed(items)))

    results = asyncio.run(enhancer.enhance_batch([first, same_items_reversed, first]))

    assert service.calls == 1
    assert [result.ai_description for result in results] == ["Crisp and polished."] * 3


@pytest.mark.parametrize(
    "personality, items, expected",
    [
        ("minimalist", [("a", "tops", ["#FFFFFF"], [], []), ("b", "bottoms", ["#000000"], [], [])], 0.9),
        ("formal", [("a", "tops", ["#FFFFFF"], ["work"], []), ("b", "bottoms", ["#000000"], ["formal"], [])], 0.9),
        ("formal", [("a", "tops", ["#FFFFFF"], ["work"], []), ("b", "bottoms", ["#000000"], ["casual"], [])], 0.4),
        ("casual", [("a", "tops", ["#FFFFFF"], ["party"], []), ("b", "bottoms", ["#000000"], [], [])], 0.5),
        ("trendy", [("a", "tops", ["#FFFFFF"], [], ["trendy"]), ("b", "bottoms", ["#000000"], [], [])], 0.9),
        ("trendy", [("a", "tops", ["#FFFFFF"], [], []), ("b", "bottoms", ["#000000"], [], [])], 0.6),
        ("classic", [("a", "tops", ["#FFFFFF"], [], ["edgy"]), ("b", "bottoms", ["#000000"], [], [])], 0.5),
        ("classic", [("a", "tops", ["#FFFFFF"], [], ["classic"]), ("b", "bottoms", ["#000000"], [], [])], 0.8),
        ("eclectic", [("a", "tops", ["#FFFFFF", "#FF0000"], [], []), ("b", "bottoms", ["#000000"], [], [])], 0.9),
        ("eclectic", [("a", "tops", ["#FFFFFF"], [], []), ("b", "bottoms", ["#000000"], [], [])], 0.6),
    ],
)
def test_personality_match_table(personality: str, items, expected: float) -> None:
    enhancer = _enhancer(None, personality=personality)
    suggestion = _suggestion([_item(*spec) for spec in items])
    assert enhancer.personality_match(suggestion) == expected


def test_personality_match_defaults() -> None:
    suggestion = _suggestion(_wardrobe()[:2])
    assert _enhancer(None).personality_match(suggestion) == 0.7
    big = _suggestion(_wardrobe())
    assert _enhancer(None, personality="minimalist").personality_match(big) == 0.5


def test_color_analysis_and_recommendations() -> None:
    mono = _suggestion([_item("a", "tops", ["#FFFFFF"]), _item("b", "bottoms", ["#FFFFFF"])])
    triad = _suggestion([_item("a", "tops", ["#FFFFFF", "#FF0000"]), _item("b", "bottoms", ["#000000"])])
    rich = _suggestion([_item("a", "tops", ["#FFFFFF", "#FF0000"]), _item("b", "bottoms", ["#000000", "#00FF00"])])
    assert AIOutfitEnhancer.color_analysis(mono) == "Monochromatic color scheme creates a cohesive look"
    assert AIOutfitEnhancer.color_analysis(triad) == "Triadic color harmony creates dynamic balance"
    assert AIOutfitEnhancer.color_analysis(rich) == "Rich color palette adds visual interest"

    formal_summer = _suggestion(
        [_item("a", "tops", ["#FFFFFF"]), _item("b", "bottoms", ["#000000"])], season="summer", occasion="formal"
    )
    assert AIOutfitEnhancer.outfit_recommendations(formal_summer) == [
        "Light fabrics will keep you cool and comfortable",
        "Ensure all pieces are well-pressed and fitted",
        "Black adds sophistication and versatility",
    ]
    assert AIOutfitEnhancer.outfit_recommendations(mono) == []


def test_analyze_wardrobe_style_uses_ai_reply() -> None:
    reply = json.dumps(
        {
            "stylePersonality": "Trendy",
            "dominantThemes": ["edgy", "bold", "street"],
            "colorPalette": ["#000000", "#FFFFFF", "#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#FF00FF"],
            "recommendations": ["Add a statement coat"],
            "confidence": 0.9,
        }
    )
    service = CountingService(reply=reply)
    enhancer = _enhancer(service)

    profile = asyncio.run(enhancer.analyze_wardrobe_style(_wardrobe()))

    assert profile.style_personality == "trendy"
    assert profile.risk_tolerance == "adventurous"
    assert profile.dominant_colors[0] == "#000000"
    assert profile.color_preferences.loves == ["#000000", "#FFFFFF", "#FF0000"]
    assert profile.color_preferences.likes == ["#00FF00", "#0000FF", "#FFFF00"]
    assert profile.preferred_categories == ["tops", "bottoms"]
    assert profile.occasion_frequency == {"casual": 3, "work": 3}
    assert enhancer.style_profile is profile

    assert asyncio.run(enhancer.analyze_wardrobe_style(_wardrobe())) is profile
    assert service.calls == 1


def test_analyze_wardrobe_style_keeps_rule_personality_for_unknown_labels() -> None:
    reply = json.dumps({"stylePersonality": "boho", "dominantThemes": [], "colorPalette": []})
    profile = asyncio.run(_enhancer(CountingService(reply=reply)).analyze_wardrobe_style(_wardrobe()))
    assert profile.style_personality == infer_style_profile(_wardrobe()).style_personality
    assert profile.risk_tolerance == "conservative"


def test_analyze_wardrobe_style_falls_back_to_rules() -> None:
    profile = asyncio.run(_enhancer(CountingService(fail=True)).analyze_wardrobe_style(_wardrobe()))
    assert profile == infer_style_profile(_wardrobe())


def test_bounded_cache_evicts_oldest_entry() -> None:
    cache = BoundedCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 3)
    cache.set("c", 4)
    assert "b" not in cache
    assert cache.get("a") == 3
    assert cache.get("c") == 4
    assert len(cache) == 2
    with pytest.raises(ValueError):
        BoundedCache(max_size=0)


def test_fallback_fields_use_profile_personality_match() -> None:
    suggestion = _suggestion(_wardrobe()[:3:2])
    enhancer = _enhancer(CountingService(fail=True), personality="minimalist")
    enhanced = asyncio.run(enhancer.enhance_with_fallback(suggestion))
    assert enhanced.ai_confidence == 0.6
    assert enhanced.ai_personality_match == 0.9
    assert enhanced.style_personality == "minimalist"

    without_profile = asyncio.run(_enhancer(CountingService(fail=True)).enhance_with_fallback(suggestion))
    assert without_profile.ai_personality_match == 0.7


def test_recommend_colors_reads_color_names_from_ai_advice() -> None:
    enhancer = _enhancer(CountingService(reply="Try navy and beige with white accents."))
    recommendations = asyncio.run(enhancer.recommend_colors(["#000080"], "work"))
    assert recommendations.colors == ["white", "navy", "beige"]
    assert recommendations.ai_generated is True


def test_recommend_colors_falls_back_to_color_theory() -> None:
    vague = asyncio.run(_enhancer(CountingService(reply="Soft pastels look lovely.")).recommend_colors(["navy blue"]))
    assert vague.colors == ["#FFFFFF", "#000000", "#FFA500"]
    assert vague.ai_generated is False

    failed = asyncio.run(_enhancer(CountingService(fail=True)).recommend_colors(["red"]))
    assert failed.colors == ["#FFFFFF", "#000000", "#008000"]
    assert failed.ai_generated is False

    offline = asyncio.run(_enhancer(None).recommend_colors(["yellow"]))
    assert offline.to_dict() == {"colors": ["#FFFFFF", "#000000", "#800080"], "ai_generated": False}
