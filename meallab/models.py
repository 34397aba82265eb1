"""Meal records as returned by TheMealDB."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# TheMealDB spreads ingredients over numbered fields strIngredient1..20 / strMeasure1..20
MAX_INGREDIENTS = 20


class ListName(str, Enum):
    """The two personal meal lists."""

    FAVORITES = "favorites"
    COOKED = "cooked"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def clean_text(value: Any) -> str:
    """Convert an optional value to a trimmed string; None becomes ""."""
    if value is None:
        return ""
    return str(value).strip()


def parse_ingredients(data: dict[str, Any]) -> dict[str, str]:
    """
    Collect the numbered ingredient/measure fields into an ordered mapping.

    Blank ingredients are skipped and a missing measure becomes an empty string.
    A repeated ingredient keeps its first position but takes the later measure.

    Args:
        data: Raw meal dictionary from the API

    Returns:
        Dict mapping ingredient name to measure, in API order
    """
    ingredients: dict[str, str] = {}
    for i in range(1, MAX_INGREDIENTS + 1):
        ingredient = clean_text(data.get(f"strIngredient{i}"))
        if not ingredient:
            continue
        ingredients[ingredient] = clean_text(data.get(f"strMeasure{i}"))
    return ingredients


@dataclass
class MealSummary:
    """Lightweight meal returned by ingredient searches."""

    meal_id: str
    name: str
    thumbnail_url: str = ""

    @property
    def is_valid(self) -> bool:
        return bool(self.meal_id)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MealSummary":
        """Create from a raw API meal dictionary."""
        return cls(
            meal_id=clean_text(data.get("idMeal")),
            name=clean_text(data.get("strMeal")),
            thumbnail_url=clean_text(data.get("strMealThumb")),
        )


@dataclass
class MealDetails:
    """Full meal details including ingredients and instructions."""

    meal_id: str
    name: str
    category: str = ""
    area: str = ""
    instructions: str = ""
    thumbnail_url: str = ""
    ingredients: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return bool(self.meal_id)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MealDetails":
        """Create from a raw API meal dictionary."""
        return cls(
            meal_id=clean_text(data.get("idMeal")),
            name=clean_text(data.get("strMeal")),
            category=clean_text(data.get("strCategory")),
            area=clean_text(data.get("strArea")),
            # Keep line structure; formatting happens at display time
            instructions=data.get("strInstructions") or "",
            thumbnail_url=clean_text(data.get("strMealThumb")),
            ingredients=parse_ingredients(data),
        )
