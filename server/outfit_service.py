"""Caller-facing outfit service: loads a wardrobe snapshot and runs the engine."""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Sequence

from agents.ai_enhancement import AIOutfitEnhancer
from agents.suggestion_engine import OutfitSuggestionEngine
from closet_app.config import EngineConfig
from closet_app.logging_config import get_logger, log_event
from logic.style_profile import merge_preferences, style_insights
from memory.user_preferences import PreferenceStore
from models.clothing_item import ClothingItem
from models.outfit import (
    AIStyleProfile,
    ColorRecommendations,
    EmptyWardrobeError,
    InsufficientWardrobeError,
    OutfitSuggestion,
    SuggestionFilters,
)
from models.preferences import UserPreferences
from tools.ai_client import StyleAIClient
from tools.observability import instrument_operation
from tools.wardrobe_store import WardrobeStore

logger = get_logger(__name__)

EMPTY_WARDROBE_MESSAGE = "Your wardrobe is empty. Add some clothing items to get outfit suggestions!"
INSUFFICIENT_WARDROBE_MESSAGE = (
    "You need at least 2 items in your wardrobe to generate outfit suggestions. "
    "Add more items to your wardrobe!"
)
PAGE_SIZE = 8


class WardrobeLoadError(RuntimeError):
    """Raised when the wardrobe store cannot be read."""


def current_season(today: date | None = None) -> str:
    month = (today or date.today()).month
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "fall"
    return "winter"


class OutfitService:
    """Suggestion entry points for one deployment.

    Each call reads a fresh wardrobe snapshot and builds its own engine, so
    calls for different users never share state.
    """

    def __init__(
        self,
        wardrobe_store: WardrobeStore,
        preference_store: PreferenceStore | None = None,
        ai_client: StyleAIClient | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.wardrobe_store = wardrobe_store
        self.preference_store = preference_store
        self.ai_client = ai_client or StyleAIClient(None)
        self.config = config or EngineConfig(ai_provider="none")

    def _load_items(self, user_id: str) -> List[ClothingItem]:
        try:
            return self.wardrobe_store.get_all(user_id)
        except Exception as exc:
            raise WardrobeLoadError("Failed to load wardrobe items") from exc

    def _load_wardrobe(self, user_id: str) -> List[ClothingItem]:
        items = self._load_items(user_id)
        if not items:
            raise EmptyWardrobeError(EMPTY_WARDROBE_MESSAGE)
        if len(items) < 2:
            raise InsufficientWardrobeError(len(items), INSUFFICIENT_WARDROBE_MESSAGE)
        return items

    def _preferences(self, user_id: str) -> Optional[UserPreferences]:
        if self.preference_store is None:
            return None
        return self.preference_store.get(user_id)

    @staticmethod
    def _with_preferences(filters: SuggestionFilters, preferences: UserPreferences | None) -> SuggestionFilters:
        if preferences is None or filters.preferred_colors or not preferences.favorite_colors:
            return filters
        return replace(filters, preferred_colors=list(preferences.favorite_colors))

    def _engine(self, items: List[ClothingItem], **kwargs) -> OutfitSuggestionEngine:
        return OutfitSuggestionEngine(items, default_max_items=self.config.default_max_suggestions, **kwargs)

    @instrument_operation("generate_outfit_suggestions")
    async def generate_outfit_suggestions(
        self, user_id: str, filters: SuggestionFilters | None = None
    ) -> List[OutfitSuggestion]:
        items = self._load_wardrobe(user_id)
        filters = self._with_preferences(filters or SuggestionFilters(), self._preferences(user_id))
        return await self._engine(items).generate_suggestions(filters)

    async def get_occasion_suggestions(self, user_id: str, occasion: str) -> List[OutfitSuggestion]:
        return await self.generate_outfit_suggestions(
            user_id, SuggestionFilters(occasion=occasion, max_items=PAGE_SIZE)
        )

    async def get_mood_suggestions(self, user_id: str, mood: str) -> List[OutfitSuggestion]:
        return await self.generate_outfit_suggestions(user_id, SuggestionFilters(mood=mood, max_items=PAGE_SIZE))

    @instrument_operation("get_color_coordinated_suggestions")
    async def get_color_coordinated_suggestions(self, user_id: str) -> List[OutfitSuggestion]:
        items = self._load_wardrobe(user_id)
        filters = self._with_preferences(SuggestionFilters(max_items=PAGE_SIZE), self._preferences(user_id))
        suggestions = await self._engine(items).generate_suggestions(filters)
        return sorted(suggestions, key=lambda suggestion: suggestion.color_harmony, reverse=True)

    async def get_personalized_suggestions(
        self, user_id: str, time_of_day: str | None = None, today: date | None = None
    ) -> List[OutfitSuggestion]:
        """Season from the calendar, occasion from the time of day."""

        filters = SuggestionFilters(season=current_season(today), max_items=PAGE_SIZE)
        if time_of_day == "morning":
            filters.occasion = "work"
        elif time_of_day == "evening":
            filters.occasion = "casual"
        return await self.generate_outfit_suggestions(user_id, filters)

    @instrument_operation("get_style_challenge_suggestions")
    async def get_style_challenge_suggestions(self, user_id: str) -> List[OutfitSuggestion]:
        """Larger outfits with less conventional colour and style mixes."""

        items = self._load_wardrobe(user_id)
        suggestions = await self._engine(items).generate_suggestions(SuggestionFilters(max_items=20))
        challenging = [
            suggestion
            for suggestion in suggestions
            if len(suggestion.items) >= 3 and suggestion.color_harmony < 0.8 and suggestion.style_coherence < 0.9
        ]
        return challenging[:6]

    async def get_quick_suggestions(self, user_id: str, today: date | None = None) -> List[OutfitSuggestion]:
        """Top three seasonal outfits for a home screen; never raises for small wardrobes."""

        try:
            items = self._load_items(user_id)
            if len(items) < 2:
                return []
            filters = self._with_preferences(
                SuggestionFilters(season=current_season(today), max_items=3), self._preferences(user_id)
            )
            suggestions = await self._engine(items).generate_suggestions(filters)
        except WardrobeLoadError:
            log_event(logger, logging.WARNING, "quick_suggestions_unavailable", exc_info=True)
            return []
        return suggestions[:3]

    @instrument_operation("generate_ai_outfit_suggestions")
    async def generate_ai_outfit_suggestions(
        self, user_id: str, filters: SuggestionFilters | None = None, count: int = 3
    ) -> List[OutfitSuggestion]:
        """AI-ranked suggestions; falls back to templated AI fields when the provider fails."""

        items = self._load_wardrobe(user_id)
        preferences = self._preferences(user_id)
        filters = self._with_preferences(filters or SuggestionFilters(), preferences)
        filters = replace(filters, max_items=max(count * 3, 15))

        enhancer = AIOutfitEnhancer(self.ai_client, cache_size=self.config.ai_cache_size)
        profile = merge_preferences(await enhancer.analyze_wardrobe_style(items), preferences)
        enhancer.style_profile = profile

        engine = self._engine(items, enhancer=enhancer, style_profile=profile)
        suggestions = await engine.generate_ai_enhanced_suggestions(filters)
        return suggestions[:count]

    async def get_fresh_suggestions(self, user_id: str) -> List[OutfitSuggestion]:
        return await self._ai_page(user_id, 3)

    async def get_outfit_page_suggestions(self, user_id: str) -> List[OutfitSuggestion]:
        return await self._ai_page(user_id, 9)

    async def _ai_page(self, user_id: str, count: int) -> List[OutfitSuggestion]:
        try:
            items = self._load_items(user_id)
            if len(items) < 2:
                return []
            return await self.generate_ai_outfit_suggestions(user_id, SuggestionFilters(), count)
        except WardrobeLoadError:
            log_event(logger, logging.WARNING, "ai_page_suggestions_unavailable", count=count, exc_info=True)
            return []

    async def get_color_recommendations(
        self, base_colors: Sequence[str], occasion: str | None = None
    ) -> ColorRecommendations:
        enhancer = AIOutfitEnhancer(self.ai_client, cache_size=self.config.ai_cache_size)
        return await enhancer.recommend_colors(list(base_colors), occasion)

    def generate_style_profile(self, user_id: str) -> AIStyleProfile:
        """Rule-based profile with the user's favourite colours folded into ``loves``."""

        items = self._load_items(user_id)
        profile = self._engine(items).generate_style_profile()
        return merge_preferences(profile, self._preferences(user_id))

    def get_style_insights(self, user_id: str) -> Dict[str, object]:
        return style_insights(self.generate_style_profile(user_id))


__all__ = [
    "OutfitService",
    "WardrobeLoadError",
    "current_season",
    "EMPTY_WARDROBE_MESSAGE",
    "INSUFFICIENT_WARDROBE_MESSAGE",
]
