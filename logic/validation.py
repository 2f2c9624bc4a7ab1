"""Pydantic schemas for AI payloads and service request bodies."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.outfit import SuggestionFilters
from models.taxonomy import MOODS, OCCASIONS, SEASONS


class _CamelModel(BaseModel):
    """Accept the camelCase keys the AI prompts ask for, or snake_case."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class StyleItemSummary(BaseModel):
    category: str
    colors: List[str] = []
    occasions: List[str] = []
    mood_tags: List[str] = []


class StyleAnalysisInput(_CamelModel):
    """Whole-wardrobe summary sent to the style analysis prompt."""

    items: List[StyleItemSummary]
    favorite_colors: Optional[List[str]] = Field(None, alias="favoriteColors")
    style_preferences: Optional[List[str]] = Field(None, alias="stylePreferences")


class OutfitItemSummary(BaseModel):
    name: str
    category: str
    colors: List[str] = []


class OutfitDescriptionInput(BaseModel):
    items: List[OutfitItemSummary]
    occasion: Optional[str] = None
    season: Optional[str] = None
    mood: Optional[str] = None


class StyleAnalysis(_CamelModel):
    """Structured result expected back from a style analysis prompt."""

    style_personality: str = Field(alias="stylePersonality", min_length=1)
    dominant_themes: List[str] = Field(default_factory=list, alias="dominantThemes")
    color_palette: List[str] = Field(default_factory=list, alias="colorPalette")
    recommendations: List[str] = Field(default_factory=list)
    confidence: float = Field(0.5, ge=0.0, le=1.0)

    @field_validator("style_personality")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.strip().lower()


class OutfitDescription(_CamelModel):
    """Structured result expected back from an outfit description prompt."""

    description: str = Field(min_length=1)
    style_notes: List[str] = Field(default_factory=list, alias="styleNotes")
    occasion_fit: str = Field("", alias="occasionFit")
    confidence: float = Field(0.7, ge=0.0, le=1.0)


def _check_tag(value: Optional[str], allowed: List[str], label: str) -> Optional[str]:
    if value is None:
        return None
    key = value.strip().lower().replace(" ", "_")
    if key not in allowed:
        raise ValueError(f"Unsupported {label} '{value}'. Allowed: {allowed}")
    return key


class SuggestionRequest(BaseModel):
    """HTTP body for suggestion endpoints."""

    occasion: Optional[str] = None
    season: Optional[str] = None
    mood: Optional[str] = None
    preferred_colors: Optional[List[str]] = None
    exclude_items: List[str] = Field(default_factory=list)
    max_items: Optional[int] = Field(None, ge=1, le=50)
    use_ai: bool = True
    count: int = Field(3, ge=1, le=20)

    @field_validator("occasion")
    @classmethod
    def _occasion(cls, value: Optional[str]) -> Optional[str]:
        return _check_tag(value, OCCASIONS, "occasion")

    @field_validator("season")
    @classmethod
    def _season(cls, value: Optional[str]) -> Optional[str]:
        return _check_tag(value, SEASONS, "season")

    @field_validator("mood")
    @classmethod
    def _mood(cls, value: Optional[str]) -> Optional[str]:
        return _check_tag(value, MOODS, "mood")

    def to_filters(self) -> SuggestionFilters:
        return SuggestionFilters(
            occasion=self.occasion,
            season=self.season,
            mood=self.mood,
            preferred_colors=self.preferred_colors,
            exclude_items=list(self.exclude_items),
            max_items=self.max_items,
            use_ai=self.use_ai,
        )


class ColorRecommendationRequest(BaseModel):
    """HTTP body for colour recommendations."""

    base_colors: List[str] = Field(min_length=1, max_length=10)
    occasion: Optional[str] = None

    @field_validator("base_colors")
    @classmethod
    def _non_blank(cls, value: List[str]) -> List[str]:
        colors = [color.strip() for color in value if color.strip()]
        if not colors:
            raise ValueError("At least one base color is required")
        return colors

    @field_validator("occasion")
    @classmethod
    def _occasion(cls, value: Optional[str]) -> Optional[str]:
        return _check_tag(value, OCCASIONS, "occasion")


def summary_payload(model: BaseModel) -> Dict[str, object]:
    """Dump a prompt payload with camelCase keys and without empty fields."""

    return model.model_dump(by_alias=True, exclude_none=True)


__all__ = [
    "StyleItemSummary",
    "StyleAnalysisInput",
    "OutfitItemSummary",
    "OutfitDescriptionInput",
    "StyleAnalysis",
    "OutfitDescription",
    "SuggestionRequest",
    "ColorRecommendationRequest",
    "summary_payload",
]
