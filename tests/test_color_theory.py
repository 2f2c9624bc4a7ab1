"""Color harmony rules and color-list compatibility."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.color_theory import (  # noqa: E402
    color_compatibility,
    color_keywords_in,
    color_harmony,
    fallback_color_recommendations,
    hex_to_hsl,
    hue_distance,
    is_neutral_color,
)


@pytest.mark.parametrize("color", ["#FF0000", "#00ff7f", "000080", "#AbCdEf"])
def test_identical_colors_are_fully_harmonious(color: str) -> None:
    assert color_harmony(color, color) == 1.0
    assert color_harmony(color.upper(), color.lower()) == 1.0


@pytest.mark.parametrize("neutral", ["#FFFFFF", "#000000", "#808080", "#F0F0F0"])
@pytest.mark.parametrize("other", ["#FF0000", "#00FF00", "#123456"])
def test_low_saturation_colors_match_everything(neutral: str, other: str) -> None:
    assert is_neutral_color(neutral)
    assert color_harmony(neutral, other) == 0.9
    assert color_harmony(other, neutral) == 0.9


@pytest.mark.parametrize("bad", [None, "", "red", "#12345", "#GGGGGG", "#1234567", 42])
def test_unparseable_colors_fall_back_to_neutral_score(bad) -> None:
    assert color_harmony(bad, "#FF0000") == 0.5
    assert color_harmony("#FF0000", bad) == 0.5
    assert hex_to_hsl(bad) is None


def test_hue_buckets() -> None:
    # complementary: red vs cyan sit 180 degrees apart
    assert color_harmony("#FF0000", "#00FFFF") == 0.8
    # analogous: red vs a red-orange around 15 degrees
    assert color_harmony("#FF0000", "#FF4000") == 0.9
    # triadic: red vs green at 120 degrees
    assert color_harmony("#FF0000", "#00FF00") == 0.7
    # everything else: red vs yellow at 60 degrees
    assert color_harmony("#FF0000", "#FFFF00") == 0.4


def test_hue_distance_uses_shorter_arc() -> None:
    assert hue_distance(350, 10) == 20
    assert hue_distance(0, 180) == 180
    assert hue_distance(90, 300) == 150


def test_color_compatibility_takes_best_pair_and_treats_empty_as_neutral() -> None:
    assert color_compatibility([], ["#FF0000"]) == 0.5
    assert color_compatibility(["#FF0000"], []) == 0.5
    assert color_compatibility(["#FF0000", "#FFFFFF"], ["#00FF00"]) == 0.9


def test_fallback_color_recommendations_adds_complements() -> None:
    recommendations = fallback_color_recommendations(["Navy Blue", "red", "red"])
    assert recommendations[:2] == ["#FFFFFF", "#000000"]
    assert "#FFA500" in recommendations
    assert "#008000" in recommendations
    assert len(recommendations) == len(set(recommendations))
    assert len(recommendations) <= 5


def test_color_keywords_in_follows_keyword_order() -> None:
    assert color_keywords_in("Pair it with BEIGE, then Navy and a touch of red.") == ["red", "navy", "beige"]
    assert color_keywords_in("Soft pastels look lovely.") == []
