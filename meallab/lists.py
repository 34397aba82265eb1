"""Favorites and Cooked list management.

The ListStore owns both lists in memory and writes the affected list through
to its persistence backend after every change. Storage failures never undo an
in-memory change: they are logged and reported to listeners as
PersistenceWarning values, and memory stays authoritative for the rest of the
process.

Only a meal's ID and name are kept. Everything else is fetched from the API
when needed.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .models import ListName, clean_text
from .storage import ListPersistence, MealStorage, StorageError

logger = logging.getLogger(__name__)


class ListsError(Exception):
    """Exception raised for list-related errors."""

    pass


class InvalidMealIdError(ListsError):
    """Raised when a blank meal ID is given to a list operation."""

    pass


class AddResult(Enum):
    ADDED = "added"
    ALREADY_EXISTS = "already_exists"


class MoveResult(Enum):
    MOVED = "moved"
    ALREADY_IN_TARGET = "already_in_target"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ListEntry:
    """A meal in one of the lists."""

    meal_id: str
    name: str


@dataclass(frozen=True)
class RemovedFrom:
    """Which lists a remove_from_any call changed."""

    favorites: bool = False
    cooked: bool = False

    def __bool__(self) -> bool:
        return self.favorites or self.cooked

    @property
    def lists(self) -> list[ListName]:
        removed = []
        if self.favorites:
            removed.append(ListName.FAVORITES)
        if self.cooked:
            removed.append(ListName.COOKED)
        return removed


@dataclass(frozen=True)
class PersistenceWarning:
    """A non-fatal failure to load or save a list."""

    list_name: ListName
    operation: str  # "load" or "save"
    message: str
    path: Path | None = None

    def __str__(self) -> str:
        return f"Could not {self.operation} {self.list_name.label}: {self.message}"


WarningListener = Callable[[PersistenceWarning], None]


def _require_meal_id(meal_id: str | None) -> str:
    normalized = clean_text(meal_id)
    if not normalized:
        raise InvalidMealIdError("Meal ID must not be blank")
    return normalized


class ListStore:
    """In-memory Favorites and Cooked lists with write-through persistence.

    Not thread-safe: call it from the thread that owns it.
    """

    def __init__(
        self,
        storage: ListPersistence | None = None,
        on_warning: WarningListener | None = None,
        load: bool = True,
    ):
        self.storage: ListPersistence = storage if storage is not None else MealStorage()
        self._lists: dict[ListName, dict[str, str]] = {name: {} for name in ListName}
        self._listeners: list[WarningListener] = []
        self.warnings: list[PersistenceWarning] = []
        if on_warning is not None:
            self._listeners.append(on_warning)
        if load:
            self.load()

    # ------------------------------------------------------------------
    # Warnings
    # ------------------------------------------------------------------

    def add_warning_listener(self, listener: WarningListener) -> None:
        """Register a callback for persistence warnings."""
        self._listeners.append(listener)

    def remove_warning_listener(self, listener: WarningListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _warn(self, list_name: ListName, operation: str, error: Exception) -> None:
        path = None
        if isinstance(self.storage, MealStorage):
            path = self.storage.path_for(list_name)
        warning = PersistenceWarning(
            list_name=list_name, operation=operation, message=str(error), path=path
        )
        logger.warning("%s", warning)
        self.warnings.append(warning)
        for listener in list(self._listeners):
            listener(warning)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """
        Load both lists from storage, replacing what is in memory.

        A missing file gives an empty list. An unreadable or malformed file
        also gives an empty list, plus a PersistenceWarning.
        """
        for list_name in ListName:
            try:
                meal_map = self.storage.load(list_name)
            except StorageError as e:
                self._warn(list_name, "load", e)
                meal_map = {}
            self._lists[list_name] = dict(meal_map)
            logger.debug("Loaded %d %s entries", len(meal_map), list_name.value)

    def _persist(self, list_name: ListName) -> bool:
        """Save one list. Returns False (after warning) if the write failed."""
        try:
            self.storage.save(list_name, dict(self._lists[list_name]))
        except StorageError as e:
            self._warn(list_name, "save", e)
            return False
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def entries(self, list_name: ListName) -> tuple[ListEntry, ...]:
        """Get a list's entries, oldest first."""
        return tuple(
            ListEntry(meal_id=meal_id, name=name)
            for meal_id, name in self._lists[ListName(list_name)].items()
        )

    def contains(self, list_name: ListName, meal_id: str) -> bool:
        return clean_text(meal_id) in self._lists[ListName(list_name)]

    def get_name(self, list_name: ListName, meal_id: str) -> str | None:
        """Get the stored name for a meal, or None if it is not in the list."""
        return self._lists[ListName(list_name)].get(clean_text(meal_id))

    def len_of(self, list_name: ListName) -> int:
        return len(self._lists[ListName(list_name)])

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, list_name: ListName, meal_id: str, name: str | None = "") -> AddResult:
        """
        Add a meal to a list.

        Args:
            list_name: Target list
            meal_id: Meal ID (trimmed before use)
            name: Display name (trimmed before use)

        Returns:
            AddResult.ADDED, or AddResult.ALREADY_EXISTS if the ID was already
            in the list (the stored name is left unchanged)

        Raises:
            InvalidMealIdError: If the ID is blank
        """
        list_name = ListName(list_name)
        meal_id = _require_meal_id(meal_id)
        target = self._lists[list_name]

        if meal_id in target:
            return AddResult.ALREADY_EXISTS

        target[meal_id] = clean_text(name)
        self._persist(list_name)
        logger.info("Added %s to %s", meal_id, list_name.value)
        return AddResult.ADDED

    def remove(self, list_name: ListName, meal_id: str) -> bool:
        """
        Remove a meal from a list.

        Returns:
            True if the meal was removed, False if it was not in the list

        Raises:
            InvalidMealIdError: If the ID is blank
        """
        list_name = ListName(list_name)
        meal_id = _require_meal_id(meal_id)
        target = self._lists[list_name]

        if meal_id not in target:
            return False

        del target[meal_id]
        self._persist(list_name)
        logger.info("Removed %s from %s", meal_id, list_name.value)
        return True

    def move_to_cooked(self, meal_id: str) -> MoveResult:
        """
        Move a meal from Favorites to Cooked.

        If the meal is already in Cooked, the existing Cooked entry is kept
        as is and the meal is only removed from Favorites.

        Returns:
            MoveResult.MOVED, MoveResult.ALREADY_IN_TARGET, or
            MoveResult.NOT_FOUND if the meal is not in Favorites (nothing changes)

        Raises:
            InvalidMealIdError: If the ID is blank
        """
        meal_id = _require_meal_id(meal_id)
        favorites = self._lists[ListName.FAVORITES]
        cooked = self._lists[ListName.COOKED]

        if meal_id not in favorites:
            return MoveResult.NOT_FOUND

        name = favorites.pop(meal_id)

        if meal_id in cooked:
            self._persist(ListName.FAVORITES)
            logger.info("Removed %s from favorites, already in cooked", meal_id)
            return MoveResult.ALREADY_IN_TARGET

        cooked[meal_id] = name
        self._persist(ListName.FAVORITES)
        self._persist(ListName.COOKED)
        logger.info("Moved %s from favorites to cooked", meal_id)
        return MoveResult.MOVED

    def remove_from_any(self, meal_id: str) -> RemovedFrom:
        """
        Remove a meal from both lists.

        Each list is changed and saved on its own; a failed save of one does
        not affect the other.

        Returns:
            RemovedFrom telling which lists contained the meal

        Raises:
            InvalidMealIdError: If the ID is blank
        """
        meal_id = _require_meal_id(meal_id)
        removed = {}
        for list_name in ListName:
            target = self._lists[list_name]
            removed[list_name] = target.pop(meal_id, None) is not None
            if removed[list_name]:
                self._persist(list_name)

        result = RemovedFrom(
            favorites=removed[ListName.FAVORITES], cooked=removed[ListName.COOKED]
        )
        if result:
            logger.info(
                "Removed %s from %s", meal_id, ", ".join(n.value for n in result.lists)
            )
        return result
