"""Shared stylist prompt preamble and guardrails for AI calls."""

from __future__ import annotations

from typing import List

GUARDRAIL_BULLETS: List[str] = [
    "Only describe the wardrobe items you are given; never invent new garments.",
    "Refer to items by their names and categories, not by owner details.",
    "Keep style advice practical, inclusive and body-positive.",
]
JSON_REPLY_BULLET = "Respond with a single JSON object and no surrounding prose."


def system_instruction(role_hint: str, json_reply: bool = True) -> str:
    """Compose a consistent prompt preamble with boundary reminders."""

    bullets = GUARDRAIL_BULLETS + ([JSON_REPLY_BULLET] if json_reply else [])
    boundary_text = "\n".join(f"- {bullet}" for bullet in bullets)
    return (
        f"You are a professional fashion stylist acting as the Closet Buddy {role_hint}.\n"
        "Follow these guardrails before responding:\n"
        f"{boundary_text}\n"
    )


__all__ = ["system_instruction", "GUARDRAIL_BULLETS", "JSON_REPLY_BULLET"]
