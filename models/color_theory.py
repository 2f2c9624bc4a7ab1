"""Hue-distance color harmony helpers for deterministic outfit scoring.

The scores are deliberately coarse buckets (neutral, analogous,
complementary, triadic) so that every number surfaced to the user can be
explained in one sentence.
"""
from __future__ import annotations

import colorsys
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)

_HEX_PATTERN = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)

NEUTRAL_SATURATION = 0.2
NEUTRAL_RECOMMENDATIONS = ["#FFFFFF", "#000000", "#808080", "#F5F5DC", "#2F4F4F"]
_COMPLEMENT_HINTS = [("blue", "#FFA500"), ("red", "#008000"), ("yellow", "#800080")]
COLOR_KEYWORDS = [
    "red",
    "blue",
    "green",
    "black",
    "white",
    "yellow",
    "pink",
    "purple",
    "orange",
    "brown",
    "gray",
    "navy",
    "beige",
]


@dataclass(frozen=True)
class HSL:
    """Hue in degrees [0, 360), saturation and lightness in [0, 1]."""

    h: float
    s: float
    l: float  # noqa: E741


def hex_to_hsl(value: Optional[str]) -> Optional[HSL]:
    """Parse a ``#rrggbb`` string (hash optional) into HSL, or None when malformed."""

    if not isinstance(value, str):
        return None
    match = _HEX_PATTERN.match(value.strip())
    if not match:
        return None
    r, g, b = (int(part, 16) / 255 for part in match.groups())
    hue, lightness, saturation = colorsys.rgb_to_hls(r, g, b)
    return HSL(h=hue * 360, s=saturation, l=lightness)


def is_neutral_color(value: Optional[str]) -> bool:
    """Return True for near-gray, white or black colors."""

    hsl = hex_to_hsl(value)
    return hsl is not None and hsl.s < NEUTRAL_SATURATION


def hue_distance(h1: float, h2: float) -> float:
    """Distance between two hues along the shorter arc of the wheel."""

    diff = abs(h1 - h2)
    return min(diff, 360 - diff)


def color_harmony(color1: Optional[str], color2: Optional[str]) -> float:
    """Score how well two colors pair, in [0, 1]. Never raises."""

    hsl1 = hex_to_hsl(color1)
    hsl2 = hex_to_hsl(color2)
    if hsl1 is None or hsl2 is None:
        return 0.5

    if color1.strip().lower() == color2.strip().lower():  # type: ignore[union-attr]
        return 1.0

    if hsl1.s < NEUTRAL_SATURATION or hsl2.s < NEUTRAL_SATURATION:
        return 0.9

    distance = hue_distance(hsl1.h, hsl2.h)
    if 150 < distance < 210:
        return 0.8
    if distance < 30:
        return 0.9
    if abs(distance - 120) < 20:
        return 0.7
    return 0.4


def color_compatibility(colors1: Sequence[str], colors2: Sequence[str]) -> float:
    """Best pairwise harmony across two color lists; 0.5 if either is empty."""

    if not colors1 or not colors2:
        return 0.5
    best = max(color_harmony(c1, c2) for c1 in colors1 for c2 in colors2)
    logger.debug("color compatibility %s x %s -> %s", list(colors1), list(colors2), best)
    return best


def fallback_color_recommendations(base_colors: Iterable[str]) -> List[str]:
    """Suggest neutrals plus simple complements for named base colors."""

    recommendations = list(NEUTRAL_RECOMMENDATIONS[:2])
    for color in base_colors:
        lowered = str(color).lower()
        for hint, complement in _COMPLEMENT_HINTS:
            if hint in lowered:
                recommendations.append(complement)
                break
    deduplicated = list(dict.fromkeys(recommendations))
    return deduplicated[:5]


def color_keywords_in(text: str) -> List[str]:
    """Colour names mentioned anywhere in ``text``, in :data:`COLOR_KEYWORDS` order."""

    lowered = text.lower()
    return [keyword for keyword in COLOR_KEYWORDS if keyword in lowered]


__all__ = [
    "COLOR_KEYWORDS",
    "color_keywords_in",
    "HSL",
    "hex_to_hsl",
    "is_neutral_color",
    "hue_distance",
    "color_harmony",
    "color_compatibility",
    "fallback_color_recommendations",
]
