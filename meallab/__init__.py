"""MealLab - browse TheMealDB and keep Favorites and Cooked meal lists."""

__version__ = "1.0.0"

from .api import MealDBAPI, MealDBAPIError, MealNotFoundError
from .instructions import format_instructions
from .lists import (
    AddResult,
    InvalidMealIdError,
    ListEntry,
    ListStore,
    MoveResult,
    PersistenceWarning,
    RemovedFrom,
)
from .models import ListName, MealDetails, MealSummary
from .storage import MealStorage, StorageError, load_meal_map, sanitize_meal_map, save_meal_map

__all__ = [
    "MealDBAPI",
    "MealDBAPIError",
    "MealNotFoundError",
    "MealDetails",
    "MealSummary",
    "ListName",
    "ListEntry",
    "ListStore",
    "AddResult",
    "MoveResult",
    "RemovedFrom",
    "PersistenceWarning",
    "InvalidMealIdError",
    "MealStorage",
    "StorageError",
    "load_meal_map",
    "save_meal_map",
    "sanitize_meal_map",
    "format_instructions",
]
