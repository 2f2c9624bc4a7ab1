"""Best-effort AI enrichment for outfit suggestions and style profiles."""
from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Dict, Hashable, List, Optional, Sequence, Tuple

from closet_app.logging_config import get_logger, log_event
from logic.style_profile import (
    infer_style_profile,
    occasion_frequency,
    preferred_categories,
    risk_tolerance_from_themes,
)
from logic.validation import (
    OutfitDescriptionInput,
    OutfitItemSummary,
    StyleAnalysisInput,
    StyleItemSummary,
)
from models.clothing_item import ClothingItem
from models.color_theory import color_keywords_in, fallback_color_recommendations
from models.outfit import (
    AIStyleProfile,
    ColorPreferences,
    ColorRecommendations,
    OutfitSuggestion,
    SuggestionFilters,
)
from models.taxonomy import STYLE_PERSONALITIES
from tools.ai_client import AIFailure, StyleAIClient

if TYPE_CHECKING:
    from agents.suggestion_engine import OutfitSuggestionEngine

logger = get_logger(__name__)

FALLBACK_CONFIDENCE = 0.6
FALLBACK_STYLE_NOTES = ["Classic combination", "Well-coordinated colors"]
FALLBACK_RECOMMENDATIONS = ["Try different accessories", "Consider layering options"]
DEFAULT_PERSONALITY_MATCH = 0.7
_STYLE_PROFILE_KEY: Tuple[str, ...] = ("__style_profile__",)


class BoundedCache:
    """Insertion-ordered map that evicts its oldest entry past ``max_size``."""

    def __init__(self, max_size: int = 256) -> None:
        if max_size <= 0:
            raise ValueError("Cache size must be positive")
        self.max_size = max_size
        self._data: "OrderedDict[Hashable, Any]" = OrderedDict()

    def get(self, key: Hashable) -> Any:
        return self._data.get(key)

    def set(self, key: Hashable, value: Any) -> None:
        self._data[key] = value
        self._data.move_to_end(key)
        while len(self._data) > self.max_size:
            self._data.popitem(last=False)

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


def outfit_cache_key(suggestion: OutfitSuggestion) -> Tuple[str, ...]:
    return tuple(sorted(suggestion.item_ids))


def fallback_description(suggestion: OutfitSuggestion) -> str:
    names = ", ".join(item.name for item in suggestion.items)
    return f"A stylish combination featuring {names}, perfect for {suggestion.occasion or 'any occasion'}."


class AIOutfitEnhancer:
    """Merges AI descriptions into suggestions and degrades to templates on failure.

    One instance owns one response cache, so a batch of suggestions that share
    an item set only triggers a single provider call. Nothing here ever raises
    because of the provider; failures are logged and replaced by rule-based
    values.
    """

    def __init__(
        self,
        ai_client: StyleAIClient,
        style_profile: AIStyleProfile | None = None,
        cache_size: int = 256,
    ) -> None:
        self.ai_client = ai_client
        self.style_profile = style_profile
        self.cache = BoundedCache(cache_size)

    @property
    def available(self) -> bool:
        return self.ai_client.available

    async def analyze_wardrobe_style(self, items: Sequence[ClothingItem]) -> AIStyleProfile:
        """Ask the AI for a wardrobe profile, falling back to rule-based inference."""

        cached = self.cache.get(_STYLE_PROFILE_KEY)
        if cached is not None:
            return cached

        payload = StyleAnalysisInput(
            items=[
                StyleItemSummary(
                    category=item.category,
                    colors=item.colors,
                    occasions=item.occasions,
                    mood_tags=item.mood_tags,
                )
                for item in items
            ],
            favorite_colors=list(self.style_profile.dominant_colors) if self.style_profile else None,
            style_preferences=[self.style_profile.style_personality] if self.style_profile else None,
        )
        result = await self.ai_client.analyze_style(payload)
        rule_profile = infer_style_profile(items)

        if isinstance(result, AIFailure):
            log_event(
                logger,
                logging.WARNING,
                "ai_style_analysis_failed",
                reason=result.reason,
                item_count=len(items),
            )
            profile = rule_profile
        else:
            analysis = result.payload
            personality = analysis.style_personality
            if personality not in STYLE_PERSONALITIES:
                personality = rule_profile.style_personality
            palette = list(analysis.color_palette)
            profile = AIStyleProfile(
                dominant_colors=palette,
                preferred_categories=preferred_categories(items),
                style_personality=personality,
                risk_tolerance=risk_tolerance_from_themes(analysis.dominant_themes),
                color_preferences=ColorPreferences(loves=palette[:3], likes=palette[3:6]),
                occasion_frequency=occasion_frequency(items),
            )

        self.cache.set(_STYLE_PROFILE_KEY, profile)
        self.style_profile = profile
        return profile

    async def recommend_colors(
        self, base_colors: Sequence[str], occasion: Optional[str] = None
    ) -> ColorRecommendations:
        """Colour names pulled from AI advice, or colour-theory picks when the AI has none."""

        result = await self.ai_client.color_advice(base_colors, occasion)
        if isinstance(result, AIFailure):
            log_event(logger, logging.WARNING, "ai_color_recommendations_failed", reason=result.reason)
            return ColorRecommendations(colors=fallback_color_recommendations(base_colors))

        mentioned = color_keywords_in(result.payload)
        if not mentioned:
            return ColorRecommendations(colors=fallback_color_recommendations(base_colors))
        return ColorRecommendations(colors=mentioned, ai_generated=True)

    def personality_match(self, suggestion: OutfitSuggestion) -> float:
        """How well an outfit suits the wardrobe's style personality."""

        if self.style_profile is None:
            return DEFAULT_PERSONALITY_MATCH
        items = suggestion.items
        personality = self.style_profile.style_personality
        if personality == "minimalist":
            return 0.9 if len(items) <= 3 else 0.5
        if personality == "formal":
            formal = all("formal" in item.occasions or "work" in item.occasions for item in items)
            return 0.9 if formal else 0.4
        if personality == "casual":
            return 0.8 if any("casual" in item.occasions for item in items) else 0.5
        if personality == "trendy":
            return 0.9 if any("trendy" in item.mood_tags for item in items) else 0.6
        if personality == "classic":
            return 0.8 if all("edgy" not in item.mood_tags for item in items) else 0.5
        if personality == "eclectic":
            distinct = {color for item in items for color in item.colors}
            return 0.9 if len(distinct) >= 3 else 0.6
        return DEFAULT_PERSONALITY_MATCH

    @staticmethod
    def color_analysis(suggestion: OutfitSuggestion) -> str:
        distinct = {color for item in suggestion.items for color in item.colors}
        if len(distinct) == 1:
            return "Monochromatic color scheme creates a cohesive look"
        if len(distinct) == 2:
            return "Complementary color pairing enhances visual appeal"
        if len(distinct) == 3:
            return "Triadic color harmony creates dynamic balance"
        return "Rich color palette adds visual interest"

    @staticmethod
    def outfit_recommendations(suggestion: OutfitSuggestion) -> List[str]:
        recommendations: List[str] = []
        if suggestion.season == "winter":
            recommendations.append("Consider adding a warm layer for comfort")
        elif suggestion.season == "summer":
            recommendations.append("Light fabrics will keep you cool and comfortable")

        if suggestion.occasion == "formal":
            recommendations.append("Ensure all pieces are well-pressed and fitted")
        elif suggestion.occasion == "casual":
            recommendations.append("Perfect for relaxed, everyday wear")

        colors = [color.lower() for item in suggestion.items for color in item.colors]
        if "#000000" in colors or "black" in colors:
            recommendations.append("Black adds sophistication and versatility")
        return recommendations[:3]

    def fallback_fields(self, suggestion: OutfitSuggestion) -> Dict[str, Any]:
        return {
            "ai_description": fallback_description(suggestion),
            "ai_style_notes": list(FALLBACK_STYLE_NOTES),
            "ai_occasion_fit": f"Suitable for {suggestion.occasion or 'various occasions'}",
            "ai_personality_match": self.personality_match(suggestion),
            "ai_color_analysis": "Good color harmony",
            "ai_recommendations": list(FALLBACK_RECOMMENDATIONS),
            "ai_confidence": FALLBACK_CONFIDENCE,
        }

    async def _ai_fields(self, suggestion: OutfitSuggestion) -> Optional[Dict[str, Any]]:
        key = outfit_cache_key(suggestion)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        payload = OutfitDescriptionInput(
            items=[
                OutfitItemSummary(name=item.name, category=item.category, colors=item.colors)
                for item in suggestion.items
            ],
            occasion=suggestion.occasion,
            season=suggestion.season,
            mood=suggestion.mood,
        )
        result = await self.ai_client.describe_outfit(payload)
        if isinstance(result, AIFailure):
            log_event(
                logger,
                logging.WARNING,
                "ai_enhancement_failed",
                outfit_id=suggestion.id,
                reason=result.reason,
            )
            return None

        description = result.payload
        fields = {
            "ai_description": description.description,
            "ai_style_notes": list(description.style_notes),
            "ai_occasion_fit": description.occasion_fit,
            "ai_personality_match": self.personality_match(suggestion),
            "ai_color_analysis": self.color_analysis(suggestion),
            "ai_recommendations": self.outfit_recommendations(suggestion),
            "ai_confidence": result.confidence,
        }
        self.cache.set(key, fields)
        return fields

    def _apply(self, suggestion: OutfitSuggestion, fields: Dict[str, Any]) -> OutfitSuggestion:
        confidence = fields.get("ai_confidence")
        if confidence is None:
            confidence = 1
        return replace(
            suggestion,
            **fields,
            style_personality=self.style_profile.style_personality if self.style_profile else None,
            score=suggestion.score * confidence,
        )

    async def describe(self, suggestion: OutfitSuggestion) -> Optional[OutfitSuggestion]:
        """Return an AI-enhanced copy, or None when the provider call failed."""

        fields = await self._ai_fields(suggestion)
        return None if fields is None else self._apply(suggestion, fields)

    async def enhance(self, suggestion: OutfitSuggestion) -> OutfitSuggestion:
        enhanced = await self.describe(suggestion)
        return suggestion if enhanced is None else enhanced

    async def enhance_with_fallback(self, suggestion: OutfitSuggestion) -> OutfitSuggestion:
        """Enhance with AI output, or with templated fallback fields on failure."""

        fields = await self._ai_fields(suggestion)
        return self._apply(suggestion, fields or self.fallback_fields(suggestion))

    async def enhance_batch(
        self, suggestions: Sequence[OutfitSuggestion], with_fallback: bool = False
    ) -> List[OutfitSuggestion]:
        """Enhance every suggestion concurrently and wait for the whole batch."""

        enhance = self.enhance_with_fallback if with_fallback else self.enhance
        return list(await asyncio.gather(*(enhance(suggestion) for suggestion in suggestions)))

    async def generate_ai_enhanced_suggestions(
        self, engine: "OutfitSuggestionEngine", filters: SuggestionFilters | None = None
    ) -> List[OutfitSuggestion]:
        """Rank the engine's rule-based suggestions by AI-adjusted score.

        Every suggestion comes back with AI fields: real ones when the provider
        answered, templated ones with confidence 0.6 when it did not.
        """

        filters = filters or SuggestionFilters()
        base = engine.rule_based_suggestions(filters)
        if not filters.use_ai:
            return [replace(suggestion, ai_confidence=0.5) for suggestion in base]

        enhanced = await self.enhance_batch(base, with_fallback=True)
        enhanced.sort(key=lambda suggestion: suggestion.score, reverse=True)
        return enhanced[: engine.limit(filters)]


__all__ = [
    "AIOutfitEnhancer",
    "BoundedCache",
    "FALLBACK_CONFIDENCE",
    "FALLBACK_STYLE_NOTES",
    "FALLBACK_RECOMMENDATIONS",
    "fallback_description",
    "outfit_cache_key",
]
