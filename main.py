"""Simple entrypoint to run the Closet Buddy engine locally against a demo wardrobe."""

import asyncio

from closet_app.app import ClosetBuddyApp
from models.clothing_item import from_raw_metadata

DEMO_USER = "demo_user"
DEMO_WARDROBE = [
    {"id": "demo_tee", "name": "White cotton tee", "category": "tops", "colors": ["#FFFFFF"],
     "occasions": ["casual", "work"], "seasons": ["all_season"], "mood_tags": ["comfortable"]},
    {"id": "demo_trousers", "name": "Navy trousers", "category": "bottoms", "colors": ["#000080"],
     "occasions": ["casual", "work"], "seasons": ["all_season"], "mood_tags": ["professional"]},
    {"id": "demo_loafers", "name": "Brown loafers", "category": "shoes", "colors": ["#8B4513"],
     "occasions": ["work"], "seasons": ["all_season"], "mood_tags": ["classic"]},
    {"id": "demo_blazer", "name": "Grey blazer", "category": "outerwear", "colors": ["#808080"],
     "occasions": ["work", "formal"], "seasons": ["fall", "winter"], "mood_tags": ["confident"]},
]


def main() -> None:
    app = ClosetBuddyApp()
    for raw in DEMO_WARDROBE:
        app.wardrobe_store.upsert(from_raw_metadata({**raw, "user_id": DEMO_USER}))

    suggestions = asyncio.run(app.outfit_service.generate_ai_outfit_suggestions(DEMO_USER, count=3))
    for suggestion in suggestions:
        names = ", ".join(item.name for item in suggestion.items)
        print(f"{suggestion.score:.2f}  {names}")
        print(f"      {suggestion.ai_description}")


if __name__ == "__main__":
    main()
