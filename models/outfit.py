"""Outfit suggestion, filter and style profile schemas."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from models.clothing_item import ClothingItem


class InsufficientWardrobeError(ValueError):
    """Raised when a wardrobe has too few items to build any outfit."""

    def __init__(self, item_count: int, message: str | None = None) -> None:
        self.item_count = item_count
        super().__init__(message or f"At least 2 wardrobe items are required, found {item_count}")


class EmptyWardrobeError(InsufficientWardrobeError):
    """Raised when a wardrobe has no items at all."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(0, message or "Wardrobe is empty")


@dataclass
class SuggestionFilters:
    """Soft constraints for one suggestion request."""

    occasion: Optional[str] = None
    season: Optional[str] = None
    mood: Optional[str] = None
    preferred_colors: Optional[List[str]] = None
    exclude_items: List[str] = field(default_factory=list)
    max_items: Optional[int] = None
    use_ai: bool = True


@dataclass
class OutfitSuggestion:
    """A scored outfit candidate. Items are borrowed from the wardrobe, never copied."""

    id: str
    items: List[ClothingItem]
    score: float
    reasoning: List[str] = field(default_factory=list)
    color_harmony: float = 0.0
    style_coherence: float = 0.0
    occasion: Optional[str] = None
    season: Optional[str] = None
    mood: Optional[str] = None
    ai_confidence: Optional[float] = None
    ai_recommendations: Optional[List[str]] = None
    style_personality: Optional[str] = None
    ai_description: Optional[str] = None
    ai_style_notes: Optional[List[str]] = None
    ai_occasion_fit: Optional[str] = None
    ai_personality_match: Optional[float] = None
    ai_color_analysis: Optional[str] = None

    @property
    def item_ids(self) -> List[str]:
        return [item.id for item in self.items]

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        return {key: value for key, value in payload.items() if value is not None}


@dataclass
class ColorPreferences:
    loves: List[str] = field(default_factory=list)
    likes: List[str] = field(default_factory=list)
    neutral: List[str] = field(default_factory=list)
    dislikes: List[str] = field(default_factory=list)


@dataclass
class AIStyleProfile:
    """Descriptive summary of one wardrobe snapshot.

    A pure function of the item set, so it is safe to cache per snapshot and
    recompute at any time.
    """

    dominant_colors: List[str]
    preferred_categories: List[str]
    style_personality: str
    risk_tolerance: str
    color_preferences: ColorPreferences
    occasion_frequency: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ColorRecommendations:
    """Colours to pair with a set of base colours.

    ``ai_generated`` is False when the colour-theory fallback produced them.
    """

    colors: List[str]
    ai_generated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "ColorRecommendations",
    "InsufficientWardrobeError",
    "EmptyWardrobeError",
    "SuggestionFilters",
    "OutfitSuggestion",
    "ColorPreferences",
    "AIStyleProfile",
]
