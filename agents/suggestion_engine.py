"""Suggestion orchestrator: filter, combine, score, optionally enhance, rank."""
from __future__ import annotations

import logging
from typing import List, Sequence

from agents.ai_enhancement import AIOutfitEnhancer
from closet_app.logging_config import get_logger, log_event, operation_context
from logic.contextual_filtering import filter_items
from logic.outfit_builder import MIN_OUTFIT_SIZE, generate_combinations
from logic.outfit_scoring import score_outfit
from logic.style_profile import infer_style_profile
from models.clothing_item import ClothingItem
from models.outfit import (
    AIStyleProfile,
    EmptyWardrobeError,
    InsufficientWardrobeError,
    OutfitSuggestion,
    SuggestionFilters,
)

logger = get_logger(__name__)

DEFAULT_MAX_ITEMS = 10


class OutfitSuggestionEngine:
    """Ranks outfits built from one wardrobe snapshot.

    The engine never mutates the items it is given; suggestions hold
    references to them. AI enhancement is optional and only ever changes
    scores and descriptive fields.
    """

    def __init__(
        self,
        items: Sequence[ClothingItem],
        enhancer: AIOutfitEnhancer | None = None,
        style_profile: AIStyleProfile | None = None,
        default_max_items: int = DEFAULT_MAX_ITEMS,
    ) -> None:
        self.items: List[ClothingItem] = list(items)
        self.enhancer = enhancer
        self.style_profile = style_profile
        self.default_max_items = default_max_items
        if enhancer is not None and style_profile is not None and enhancer.style_profile is None:
            enhancer.style_profile = style_profile

    def limit(self, filters: SuggestionFilters) -> int:
        return filters.max_items or self.default_max_items

    def _check_wardrobe(self) -> None:
        if not self.items:
            raise EmptyWardrobeError()
        if len(self.items) < MIN_OUTFIT_SIZE:
            raise InsufficientWardrobeError(len(self.items))

    def _score_all(self, filters: SuggestionFilters) -> List[OutfitSuggestion]:
        self._check_wardrobe()
        filtered = filter_items(self.items, filters)
        if len(filtered.items) < MIN_OUTFIT_SIZE:
            log_event(
                logger,
                logging.INFO,
                "filters_matched_nothing",
                remaining=len(filtered.items),
                removed=len(filtered.removed),
                occasion=filters.occasion,
                season=filters.season,
                mood=filters.mood,
            )
            return []

        combinations = generate_combinations(filtered.items, filters)
        logger.debug("Combination diagnostics: %s", combinations.diagnostics)
        return [score_outfit(outfit, filters) for outfit in combinations.outfits]

    def _rank(self, suggestions: List[OutfitSuggestion], filters: SuggestionFilters) -> List[OutfitSuggestion]:
        # sorted() is stable, so equal scores keep generation order.
        return sorted(suggestions, key=lambda suggestion: suggestion.score, reverse=True)[: self.limit(filters)]

    def rule_based_suggestions(self, filters: SuggestionFilters | None = None) -> List[OutfitSuggestion]:
        """Top suggestions by rule score alone, with no AI involvement."""

        filters = filters or SuggestionFilters()
        return self._rank(self._score_all(filters), filters)

    async def generate_suggestions(self, filters: SuggestionFilters | None = None) -> List[OutfitSuggestion]:
        """Return up to ``max_items`` suggestions sorted by descending score.

        Raises :class:`EmptyWardrobeError` or :class:`InsufficientWardrobeError`
        when the wardrobe holds fewer than two items. Filters that leave too
        few items simply produce an empty list.
        """

        filters = filters or SuggestionFilters()
        with operation_context("engine.generate_suggestions") as correlation_id:
            log_event(
                logger,
                logging.INFO,
                "suggestions_started",
                correlation_id=correlation_id,
                item_count=len(self.items),
                occasion=filters.occasion,
                season=filters.season,
                mood=filters.mood,
            )
            scored = self._score_all(filters)
            enhanced = False
            if scored and filters.use_ai and self.enhancer is not None and self.enhancer.available:
                scored = await self.enhancer.enhance_batch(scored)
                enhanced = True

            ranked = self._rank(scored, filters)
            log_event(
                logger,
                logging.INFO,
                "suggestions_completed",
                correlation_id=correlation_id,
                candidates=len(scored),
                returned=len(ranked),
                ai_enhanced=enhanced,
            )
            return ranked

    async def generate_ai_enhanced_suggestions(
        self, filters: SuggestionFilters | None = None
    ) -> List[OutfitSuggestion]:
        """AI-ranked suggestions; without an enhancer this is the rule-based list."""

        if self.enhancer is None:
            return self.rule_based_suggestions(filters)
        return await self.enhancer.generate_ai_enhanced_suggestions(self, filters)

    def generate_style_profile(self) -> AIStyleProfile:
        """Rule-based profile of the current wardrobe snapshot."""

        return infer_style_profile(self.items)

    async def generate_ai_style_profile(self) -> AIStyleProfile:
        if self.enhancer is None:
            profile = self.generate_style_profile()
        else:
            profile = await self.enhancer.analyze_wardrobe_style(self.items)
        self.style_profile = profile
        return profile


__all__ = ["OutfitSuggestionEngine", "DEFAULT_MAX_ITEMS"]
