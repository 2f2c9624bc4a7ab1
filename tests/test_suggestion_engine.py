"""End-to-end behaviour of the suggestion orchestrator."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from agents.ai_enhancement import AIOutfitEnhancer  # noqa: E402
from agents.suggestion_engine import OutfitSuggestionEngine  # noqa: E402
from models.clothing_item import ClothingItem  # noqa: E402
from models.outfit import EmptyWardrobeError, InsufficientWardrobeError, SuggestionFilters  # noqa: E402
from tools.ai_client import AIServiceError, StyleAIClient, TextGenerationService  # noqa: E402


class FlakyService(TextGenerationService):
    """Answers every prompt, or fails the ones mentioning ``fail_on``."""

    name = "flaky"

    def __init__(self, confidence: float = 0.5, fail_on: Optional[str] = None) -> None:
        self.confidence = confidence
        self.fail_on = fail_on

    @property
    def available(self) -> bool:
        return True

    async def generate_text(self, prompt: str) -> str:
        if self.fail_on is not None and self.fail_on in prompt:
            raise AIServiceError("rate limited")
        return json.dumps({"description": "Looks great.", "confidence": self.confidence})


def _item(
    item_id: str,
    category: str,
    colors: List[str],
    occasions: Optional[List[str]] = None,
    seasons: Optional[List[str]] = None,
) -> ClothingItem:
    return ClothingItem(
        id=item_id,
        user_id="u1",
        name=item_id.replace("_", " ").title(),
        category=category,
        colors=colors,
        occasions=occasions or [],
        seasons=seasons or [],
    )


def _tee_and_trousers() -> List[ClothingItem]:
    return [
        _item("white_tee", "tops", ["#FFFFFF"], ["casual", "work"]),
        _item("navy_trousers", "bottoms", ["#000080"], ["casual", "work"]),
    ]


def _grid_wardrobe() -> List[ClothingItem]:
    tops = [
        _item("red_top", "tops", ["#FF0000"], ["party"]),
        _item("white_top", "tops", ["#FFFFFF"], ["work"]),
        _item("green_top", "tops", ["#00FF00"], ["casual"]),
        _item("blue_top", "tops", ["#0000FF"]),
    ]
    bottoms = [
        _item("black_skirt", "bottoms", ["#000000"], ["work"]),
        _item("cyan_shorts", "bottoms", ["#00FFFF"], ["casual"], ["summer"]),
        _item("yellow_pants", "bottoms", ["#FFFF00"], ["party"]),
    ]
    return tops + bottoms


def test_two_item_wardrobe_yields_complete_harmonious_outfit() -> None:
    items = _tee_and_trousers()
    suggestions = asyncio.run(OutfitSuggestionEngine(items).generate_suggestions(SuggestionFilters()))

    matching = [s for s in suggestions if set(s.item_ids) == {"white_tee", "navy_trousers"}]
    assert matching
    assert matching[0].color_harmony >= 0.7
    assert "Complete outfit" in matching[0].reasoning
    assert matching[0].items[0] is items[0]


def test_single_item_wardrobe_raises_insufficiency() -> None:
    engine = OutfitSuggestionEngine(_tee_and_trousers()[:1])
    with pytest.raises(InsufficientWardrobeError) as excinfo:
        asyncio.run(engine.generate_suggestions())
    assert not isinstance(excinfo.value, EmptyWardrobeError)
    assert excinfo.value.item_count == 1


def test_empty_wardrobe_raises_empty_error() -> None:
    with pytest.raises(EmptyWardrobeError):
        asyncio.run(OutfitSuggestionEngine([]).generate_suggestions())


def test_filters_that_match_nothing_return_an_empty_list() -> None:
    engine = OutfitSuggestionEngine(_tee_and_trousers())
    assert asyncio.run(engine.generate_suggestions(SuggestionFilters(occasion="party"))) == []
    assert asyncio.run(engine.generate_suggestions(SuggestionFilters(exclude_items=["white_tee"]))) == []


def test_results_are_sorted_and_truncated() -> None:
    engine = OutfitSuggestionEngine(_grid_wardrobe())

    default = asyncio.run(engine.generate_suggestions())
    assert len(default) == 10
    scores = [suggestion.score for suggestion in default]
    assert scores == sorted(scores, reverse=True)

    capped = asyncio.run(engine.generate_suggestions(SuggestionFilters(max_items=3)))
    assert len(capped) == 3
    assert [s.item_ids for s in capped] == [s.item_ids for s in default[:3]]


def test_lenient_filters_keep_untagged_items() -> None:
    engine = OutfitSuggestionEngine(_grid_wardrobe())
    suggestions = asyncio.run(engine.generate_suggestions(SuggestionFilters(occasion="work")))
    ids = {item_id for suggestion in suggestions for item_id in suggestion.item_ids}
    assert ids == {"white_top", "blue_top", "black_skirt"}
    assert all(suggestion.occasion == "work" for suggestion in suggestions)


def test_ranking_is_stable_between_calls() -> None:
    engine = OutfitSuggestionEngine(_grid_wardrobe())
    filters = SuggestionFilters(season="summer", preferred_colors=["#FF0000"])
    first = asyncio.run(engine.generate_suggestions(filters))
    second = asyncio.run(engine.generate_suggestions(filters))
    assert [s.item_ids for s in first] == [s.item_ids for s in second]


def test_enhancement_scales_scores_and_tolerates_partial_failure() -> None:
    items = _grid_wardrobe()
    rule_scores = {
        tuple(s.item_ids): s.score for s in OutfitSuggestionEngine(items).rule_based_suggestions(SuggestionFilters(max_items=50))
    }
    # Every prompt that mentions the red top fails; the rest succeed.
    enhancer = AIOutfitEnhancer(StyleAIClient(FlakyService(confidence=0.5, fail_on="Red Top")))
    engine = OutfitSuggestionEngine(items, enhancer=enhancer)

    suggestions = asyncio.run(engine.generate_suggestions(SuggestionFilters(max_items=50)))

    assert len(suggestions) == len(rule_scores) == 12
    for suggestion in suggestions:
        expected = rule_scores[tuple(suggestion.item_ids)]
        if "red_top" in suggestion.item_ids:
            assert suggestion.ai_confidence is None
            assert suggestion.score == pytest.approx(expected)
        else:
            assert suggestion.ai_confidence == 0.5
            assert suggestion.ai_description == "Looks great."
            assert suggestion.score == pytest.approx(expected * 0.5)
    scores = [suggestion.score for suggestion in suggestions]
    assert scores == sorted(scores, reverse=True)


def test_enhancement_skipped_when_ai_disabled_or_unavailable() -> None:
    items = _tee_and_trousers()
    working = AIOutfitEnhancer(StyleAIClient(FlakyService()))
    off = asyncio.run(OutfitSuggestionEngine(items, enhancer=working).generate_suggestions(SuggestionFilters(use_ai=False)))
    assert off[0].ai_description is None

    unconfigured = AIOutfitEnhancer(StyleAIClient(None))
    plain = asyncio.run(OutfitSuggestionEngine(items, enhancer=unconfigured).generate_suggestions())
    assert plain[0].ai_confidence is None


class EmptyReplyService(TextGenerationService):
    name = "empty-reply"

    @property
    def available(self) -> bool:
        return True

    async def generate_text(self, prompt: str) -> str:
        return None  # type: ignore[return-value]


def test_provider_returning_no_text_degrades_gracefully() -> None:
    items = _tee_and_trousers()

    plain_engine = OutfitSuggestionEngine(items, enhancer=AIOutfitEnhancer(StyleAIClient(EmptyReplyService())))
    plain = asyncio.run(plain_engine.generate_suggestions())
    assert len(plain) == 1
    assert plain[0].ai_confidence is None
    assert plain[0].ai_description is None

    ranked_engine = OutfitSuggestionEngine(items, enhancer=AIOutfitEnhancer(StyleAIClient(EmptyReplyService())))
    ranked = asyncio.run(ranked_engine.generate_ai_enhanced_suggestions())
    assert len(ranked) == 1
    assert ranked[0].ai_confidence == 0.6
    assert ranked[0].ai_description.startswith("A stylish combination featuring")


def test_ai_enhanced_path_without_enhancer_is_rule_based() -> None:
    engine = OutfitSuggestionEngine(_tee_and_trousers())
    suggestions = asyncio.run(engine.generate_ai_enhanced_suggestions())
    assert len(suggestions) == 1
    assert suggestions[0].ai_confidence is None


def test_style_profiles() -> None:
    engine = OutfitSuggestionEngine(_grid_wardrobe())
    assert engine.generate_style_profile() == engine.generate_style_profile()

    profile = asyncio.run(engine.generate_ai_style_profile())
    assert engine.style_profile is profile
    assert profile.style_personality == "minimalist"

    enhancer = AIOutfitEnhancer(StyleAIClient(None))
    with_enhancer = OutfitSuggestionEngine(_grid_wardrobe(), enhancer=enhancer, style_profile=profile)
    assert enhancer.style_profile is profile
    assert asyncio.run(with_enhancer.generate_ai_style_profile()) == profile
