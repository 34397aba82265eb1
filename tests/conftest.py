"""Shared fixtures for meallab tests."""

import pytest
import respx

from meallab.api import MealDBAPI
from meallab.config import API_BASE_URL
from meallab.lists import ListStore
from meallab.models import ListName
from meallab.storage import MealStorage, StorageError


class FlakyStorage(MealStorage):
    """MealStorage whose saves can be made to fail per list."""

    def __init__(self, data_dir, fail_saves=()):
        super().__init__(data_dir)
        self.fail_saves = set(fail_saves)
        self.saves: list[ListName] = []

    def save(self, list_name, meal_map):
        self.saves.append(list_name)
        if list_name in self.fail_saves:
            raise StorageError(f"Failed to save {self.path_for(list_name)}: disk full")
        super().save(list_name, meal_map)


@pytest.fixture
def mock_httpx():
    """Activate respx mock for HTTP requests."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def api_client():
    """Create a fresh MealDBAPI client instance."""
    client = MealDBAPI(base_url=API_BASE_URL)
    yield client
    client.close()


@pytest.fixture
def data_dir(tmp_path):
    """Directory for list files."""
    return tmp_path / ".meallab"


@pytest.fixture
def make_storage(data_dir):
    """Factory for storage over the temporary data directory."""

    def _make(fail_saves=()):
        return FlakyStorage(data_dir, fail_saves=fail_saves)

    return _make


@pytest.fixture
def storage(make_storage):
    return make_storage()


@pytest.fixture
def store(storage):
    """A ListStore over empty temporary storage."""
    return ListStore(storage)


@pytest.fixture
def mock_meal():
    """Full meal as returned by lookup.php / random.php / search.php."""
    meal = {
        "idMeal": "52772",
        "strMeal": "Teriyaki Chicken Casserole",
        "strCategory": "Chicken",
        "strArea": "Japanese",
        "strInstructions": "Preheat oven to 350° F.\r\nCombine soy sauce.\r\n\r\nBake for 30 minutes.",
        "strMealThumb": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
        "strIngredient1": "soy sauce",
        "strMeasure1": "3/4 cup",
        "strIngredient2": "water",
        "strMeasure2": "1/2 cup",
        "strIngredient3": "brown sugar",
        "strMeasure3": "1/4 cup",
        "strIngredient4": " ",
        "strMeasure4": " ",
        "strIngredient5": None,
        "strMeasure5": None,
    }
    for i in range(6, 21):
        meal[f"strIngredient{i}"] = ""
        meal[f"strMeasure{i}"] = ""
    return meal


@pytest.fixture
def mock_meal_summary():
    """Lightweight meal as returned by filter.php."""
    return {
        "idMeal": "52772",
        "strMeal": "Teriyaki Chicken Casserole",
        "strMealThumb": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
    }
