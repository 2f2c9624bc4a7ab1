"""Clothing item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.taxonomy import MOODS, OCCASIONS, SEASONS, normalise_tags, validate_category


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


@dataclass
class ClothingItem:
    """A single garment owned by one user.

    Colors are kept as the hex-like strings the upload flow extracted; an item
    without colors is treated as color-neutral by the scorer.
    """

    id: str
    user_id: str
    name: str
    category: str
    colors: List[str] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)
    seasons: List[str] = field(default_factory=list)
    mood_tags: List[str] = field(default_factory=list)
    subcategory: Optional[str] = None
    image_url: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    material: Optional[str] = None
    notes: Optional[str] = None
    wear_count: int = 0
    favorite: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self) -> None:
        self.category = validate_category(self.category)
        self.colors = [str(color).strip() for color in _ensure_list(self.colors) if str(color).strip()]
        self.occasions = normalise_tags(_ensure_list(self.occasions), OCCASIONS)
        self.seasons = normalise_tags(_ensure_list(self.seasons), SEASONS)
        self.mood_tags = normalise_tags(_ensure_list(self.mood_tags), MOODS)
        self.wear_count = int(self.wear_count or 0)
        if self.wear_count < 0:
            raise ValueError(f"wear_count must be non-negative, got {self.wear_count}")
        self.favorite = bool(self.favorite)


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from a loose store row or payload."""

    required_fields = ["id", "user_id", "name", "category"]
    missing = [name for name in required_fields if not metadata.get(name)]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    return ClothingItem(
        id=str(metadata["id"]),
        user_id=str(metadata["user_id"]),
        name=str(metadata["name"]),
        category=str(metadata["category"]),
        colors=_ensure_list(metadata.get("colors")),
        occasions=_ensure_list(metadata.get("occasions")),
        seasons=_ensure_list(metadata.get("seasons")),
        mood_tags=_ensure_list(metadata.get("mood_tags")),
        subcategory=metadata.get("subcategory"),
        image_url=metadata.get("image_url"),
        brand=metadata.get("brand"),
        size=metadata.get("size"),
        material=metadata.get("material"),
        notes=metadata.get("notes"),
        wear_count=metadata.get("wear_count") or 0,
        favorite=bool(metadata.get("favorite", False)),
        created_at=metadata.get("created_at"),
        updated_at=metadata.get("updated_at"),
    )


__all__ = ["ClothingItem", "from_raw_metadata"]
