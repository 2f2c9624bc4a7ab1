"""User preference schema."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class UserPreferences:
    user_id: str
    favorite_colors: List[str] = field(default_factory=list)
    style_preferences: List[str] = field(default_factory=list)
    brand_preferences: List[str] = field(default_factory=list)
    size_preferences: Dict[str, str] = field(default_factory=dict)
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
