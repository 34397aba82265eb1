"""TheMealDB API client for meal search and lookup."""

import logging
from typing import Any

import httpx

from .config import API_BASE_URL, CONNECT_TIMEOUT, READ_TIMEOUT
from .models import MealDetails, MealSummary

logger = logging.getLogger(__name__)


class MealDBAPIError(Exception):
    """Exception raised for TheMealDB API errors."""

    pass


class MealNotFoundError(MealDBAPIError):
    """Raised when a lookup returns no meal."""

    pass


class MealDBAPI:
    """Client for interacting with TheMealDB's JSON API.

    All calls are synchronous. Front ends that must stay responsive run them
    in a worker thread.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        connect_timeout: float = CONNECT_TIMEOUT,
        read_timeout: float = READ_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            headers={
                "Accept": "application/json",
                "User-Agent": "meallab/1.0",
            },
            timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
            follow_redirects=True,
        )

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self.client.close()

    def __enter__(self) -> "MealDBAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get(self, endpoint: str, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        """
        GET an endpoint and return its "meals" array.

        TheMealDB answers with {"meals": null} when nothing matches, which is
        returned here as an empty list.

        Raises:
            MealDBAPIError: On network, HTTP or decoding failure
        """
        url = f"{self.base_url}/{endpoint}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise MealDBAPIError(f"API call failed: {url}: {e}") from e

        if not isinstance(data, dict):
            raise MealDBAPIError(f"API call failed: {url}: unexpected response format")

        meals = data.get("meals")
        if not meals:
            return []
        if not isinstance(meals, list):
            raise MealDBAPIError(f"API call failed: {url}: unexpected response format")
        return [meal for meal in meals if isinstance(meal, dict)]

    def search_by_ingredient(self, ingredient: str) -> list[MealSummary]:
        """
        Search for meals containing an ingredient.

        Args:
            ingredient: Ingredient name, e.g. "chicken"

        Returns:
            List of lightweight meal summaries (id, name, thumbnail)
        """
        meals = self._get("filter.php", {"i": (ingredient or "").strip()})
        return [MealSummary.from_api(m) for m in meals]

    def search_by_name(self, name: str) -> list[MealDetails]:
        """
        Search for meals by name (partial matches allowed).

        Args:
            name: Meal name or part of it, e.g. "teriyaki"

        Returns:
            List of full meal details
        """
        meals = self._get("search.php", {"s": (name or "").strip()})
        return [MealDetails.from_api(m) for m in meals]

    def lookup_by_id(self, meal_id: str) -> MealDetails:
        """
        Look up a meal by its TheMealDB ID.

        Args:
            meal_id: Meal ID, e.g. "52772"

        Returns:
            Full meal details

        Raises:
            MealNotFoundError: If no meal exists for the ID
            MealDBAPIError: If the API call fails
        """
        meal_id = (meal_id or "").strip()
        meals = self._get("lookup.php", {"i": meal_id})
        meal = MealDetails.from_api(meals[0]) if meals else None
        if meal is None or not meal.is_valid:
            raise MealNotFoundError(f"No meal found for id={meal_id}")
        return meal

    def random_meal(self) -> MealDetails:
        """
        Fetch a random meal.

        Raises:
            MealNotFoundError: If the API returned no meal
            MealDBAPIError: If the API call fails
        """
        meals = self._get("random.php")
        meal = MealDetails.from_api(meals[0]) if meals else None
        if meal is None or not meal.is_valid:
            raise MealNotFoundError("No random meal returned")
        return meal
