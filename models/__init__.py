"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing_item import ClothingItem, from_raw_metadata
from models.outfit import (
    AIStyleProfile,
    ColorPreferences,
    ColorRecommendations,
    EmptyWardrobeError,
    InsufficientWardrobeError,
    OutfitSuggestion,
    SuggestionFilters,
)
from models.preferences import UserPreferences

__all__ = [
    "ClothingItem",
    "from_raw_metadata",
    "AIStyleProfile",
    "ColorPreferences",
    "ColorRecommendations",
    "EmptyWardrobeError",
    "InsufficientWardrobeError",
    "OutfitSuggestion",
    "SuggestionFilters",
    "UserPreferences",
]
