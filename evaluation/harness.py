"""Lightweight evaluation harness for deterministic scenarios."""

from __future__ import annotations

import asyncio
import math
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Dict, List

from closet_app.config import EngineConfig
from evaluation.scenarios import EvaluationScenario, SCENARIOS
from logic.compatibility import item_compatibility
from logic.outfit_scoring import completeness
from memory.user_preferences import PreferenceStore
from models.clothing_item import from_raw_metadata
from models.outfit import InsufficientWardrobeError, SuggestionFilters
from server.outfit_service import OutfitService
from tools.wardrobe_store import SQLiteWardrobeStore


def _seed_wardrobe(store: SQLiteWardrobeStore, user_id: str, items: List[Dict[str, object]]) -> None:
    for item in items:
        store.create(from_raw_metadata({**item, "user_id": user_id}))


def _check_suggestions(service: OutfitService, user_id: str, scenario: EvaluationScenario) -> Dict[str, bool]:
    expectations = scenario.expectations
    checks: Dict[str, bool] = {}
    try:
        suggestions = asyncio.run(
            service.generate_outfit_suggestions(user_id, SuggestionFilters(**scenario.filters))
        )
    except InsufficientWardrobeError as exc:
        checks["error"] = type(exc).__name__ == expectations.get("error")
        return checks

    if "error" in expectations:
        checks["error"] = False
        return checks

    checks["min_outfits"] = len(suggestions) >= int(expectations.get("min_outfits", 1))
    wanted = set(expectations.get("contains_items", []))
    matching = [suggestion for suggestion in suggestions if wanted.issubset(suggestion.item_ids)]
    if wanted:
        checks["contains_items"] = bool(matching)
    if "min_color_harmony" in expectations:
        checks["min_color_harmony"] = any(
            suggestion.color_harmony >= float(expectations["min_color_harmony"]) for suggestion in matching
        )
    if "completeness" in expectations:
        checks["completeness"] = any(
            completeness(suggestion.items) == float(expectations["completeness"]) for suggestion in matching
        )
    return checks


def _check_style_profile(service: OutfitService, user_id: str, scenario: EvaluationScenario) -> Dict[str, bool]:
    profile = service.generate_style_profile(user_id)
    return {"style_personality": profile.style_personality == scenario.expectations["style_personality"]}


def _check_compatibility(store: SQLiteWardrobeStore, user_id: str, scenario: EvaluationScenario) -> Dict[str, bool]:
    first, second = store.get_all(user_id)[:2]
    score = item_compatibility(first, second)
    return {"compatibility": math.isclose(score, float(scenario.expectations["compatibility"]), abs_tol=1e-9)}


def run_scenario(scenario: EvaluationScenario, user_id: str = "eval_user") -> Dict[str, object]:
    config = EngineConfig(ai_provider="none")
    with TemporaryDirectory() as tmpdir:
        store = SQLiteWardrobeStore(Path(tmpdir) / "wardrobe.db")
        preferences = PreferenceStore(str(Path(tmpdir) / "preferences"))
        service = OutfitService(store, preferences, config=config)
        _seed_wardrobe(store, user_id, scenario.wardrobe_items)

        if scenario.kind == "suggestions":
            checks = _check_suggestions(service, user_id, scenario)
        elif scenario.kind == "style_profile":
            checks = _check_style_profile(service, user_id, scenario)
        elif scenario.kind == "compatibility":
            checks = _check_compatibility(store, user_id, scenario)
        else:
            raise ValueError(f"Unknown scenario kind '{scenario.kind}'")

    return {
        "scenario": scenario.name,
        "passed": bool(checks) and all(checks.values()),
        "checks": checks,
    }


def run_evaluation_suite() -> List[Dict[str, object]]:
    return [run_scenario(scenario) for scenario in SCENARIOS]


def run_smoke_checks() -> List[str]:
    results = run_evaluation_suite()
    return [f"{result['scenario']}: {'passed' if result['passed'] else 'failed'}" for result in results]


__all__ = ["run_evaluation_suite", "run_scenario", "run_smoke_checks"]
