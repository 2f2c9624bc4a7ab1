"""Rule-based style profile inference over a whole wardrobe."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from typing import Dict, Iterable, List, Sequence

from models.clothing_item import ClothingItem
from models.color_theory import is_neutral_color
from models.outfit import AIStyleProfile, ColorPreferences
from models.preferences import UserPreferences

logger = logging.getLogger(__name__)

BOLD_THEMES = {"edgy", "bold", "adventurous", "experimental"}

_PERSONALITY_TIPS: Dict[str, List[str]] = {
    "minimalist": ["Consider adding versatile neutral pieces", "Focus on quality over quantity"],
    "trendy": ["Experiment with bold color combinations", "Try mixing patterns and textures"],
    "classic": ["Invest in timeless pieces", "Build a capsule wardrobe"],
    "eclectic": ["Embrace your unique style", "Don't be afraid to mix different aesthetics"],
}
_DEFAULT_TIPS = ["Explore different styles to find your preference"]
_RISK_TIPS = {
    "conservative": "Try adding one statement piece to safe outfits",
    "adventurous": "Your bold choices inspire confidence",
}


def _ranked(values: Iterable[str], limit: int) -> List[str]:
    return [value for value, _ in Counter(values).most_common(limit)]


def _fraction(items: Sequence[ClothingItem], predicate) -> float:
    return len([item for item in items if predicate(item)]) / max(len(items), 1)


def _has_any(tags: Sequence[str], wanted: Iterable[str]) -> bool:
    return any(tag in tags for tag in wanted)


def determine_style_personality(items: Sequence[ClothingItem]) -> str:
    """Classify a wardrobe with an ordered decision list; the first rule to match wins."""

    total_items = len(items)
    distinct_colors = len({color for item in items for color in item.colors})
    formal_fraction = _fraction(items, lambda item: _has_any(item.occasions, ("formal", "work")))
    color_variety = distinct_colors / max(total_items, 1)

    if formal_fraction > 0.4 and color_variety < 0.3:
        return "classic"
    if total_items < 20 and distinct_colors < 8:
        return "minimalist"
    if formal_fraction > 0.5:
        return "formal"
    if color_variety > 0.5:
        return "eclectic"
    if _fraction(items, lambda item: _has_any(item.mood_tags, ("trendy", "edgy"))) > 0.3:
        return "trendy"
    return "casual"


def determine_risk_tolerance(items: Sequence[ClothingItem]) -> str:
    bold_fraction = _fraction(items, lambda item: _has_any(item.mood_tags, ("edgy", "confident")))
    neutral_fraction = _fraction(items, lambda item: any(is_neutral_color(color) for color in item.colors))
    if bold_fraction > 0.3:
        return "adventurous"
    if neutral_fraction > 0.7:
        return "conservative"
    return "moderate"


def analyze_color_preferences(colors: Sequence[str]) -> ColorPreferences:
    """Split colors into love/like/neutral tiers by frequency.

    Nothing in the wardrobe signals dislike, so that tier stays empty.
    """

    ranked = Counter(colors).most_common()
    total = max(len(colors), 1)
    return ColorPreferences(
        loves=[color for color, count in ranked[:3] if count / total > 0.15],
        likes=[color for color, count in ranked[3:8] if count / total > 0.05],
        neutral=[color for color, _ in ranked[8:12]],
        dislikes=[],
    )


def occasion_frequency(items: Sequence[ClothingItem]) -> Dict[str, int]:
    return dict(Counter(tag for item in items for tag in item.occasions))


def preferred_categories(items: Sequence[ClothingItem]) -> List[str]:
    return _ranked((item.category for item in items), 3)


def infer_style_profile(items: Sequence[ClothingItem]) -> AIStyleProfile:
    """Derive the style profile as a pure function of the item set."""

    all_colors = [color for item in items for color in item.colors]
    profile = AIStyleProfile(
        dominant_colors=_ranked(all_colors, 5),
        preferred_categories=preferred_categories(items),
        style_personality=determine_style_personality(items),
        risk_tolerance=determine_risk_tolerance(items),
        color_preferences=analyze_color_preferences(all_colors),
        occasion_frequency=occasion_frequency(items),
    )
    logger.info(
        "Inferred style profile personality=%s risk=%s from %s items",
        profile.style_personality,
        profile.risk_tolerance,
        len(items),
    )
    return profile


def risk_tolerance_from_themes(themes: Iterable[str]) -> str:
    bold = [theme for theme in themes if str(theme).lower() in BOLD_THEMES]
    if len(bold) > 1:
        return "adventurous"
    if len(bold) == 1:
        return "moderate"
    return "conservative"


def merge_preferences(profile: AIStyleProfile, preferences: UserPreferences | None) -> AIStyleProfile:
    """Return a copy of ``profile`` whose loved colors include the user's favourites, once each."""

    if preferences is None:
        return profile
    tiers = replace(
        profile.color_preferences,
        loves=list(dict.fromkeys([*profile.color_preferences.loves, *preferences.favorite_colors])),
    )
    return replace(profile, color_preferences=tiers)


def style_insights(profile: AIStyleProfile) -> Dict[str, object]:
    recommendations = list(_PERSONALITY_TIPS.get(profile.style_personality, _DEFAULT_TIPS))
    if profile.risk_tolerance in _RISK_TIPS:
        recommendations.append(_RISK_TIPS[profile.risk_tolerance])
    return {
        "style_personality": profile.style_personality,
        "risk_tolerance": profile.risk_tolerance,
        "dominant_colors": list(profile.dominant_colors),
        "preferred_categories": list(profile.preferred_categories),
        "recommendations": recommendations,
    }


__all__ = [
    "determine_style_personality",
    "determine_risk_tolerance",
    "analyze_color_preferences",
    "occasion_frequency",
    "preferred_categories",
    "infer_style_profile",
    "risk_tolerance_from_themes",
    "merge_preferences",
    "style_insights",
]
