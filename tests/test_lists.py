"""Tests for the Favorites/Cooked list store."""

import json
import logging

import pytest

from meallab.lists import (
    AddResult,
    InvalidMealIdError,
    ListEntry,
    ListStore,
    MoveResult,
    RemovedFrom,
)
from meallab.models import ListName
from meallab.storage import MealStorage, load_meal_map

FAV = ListName.FAVORITES
COOKED = ListName.COOKED


def write_list(storage: MealStorage, list_name: ListName, data) -> None:
    path = storage.path_for(list_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def on_disk(storage: MealStorage, list_name: ListName) -> dict[str, str]:
    return load_meal_map(storage.path_for(list_name))


# ============================================================================
# Load Tests
# ============================================================================


class TestLoad:
    """Tests for loading lists at startup."""

    def test_starts_empty_without_files(self, store):
        assert store.entries(FAV) == ()
        assert store.entries(COOKED) == ()
        assert store.warnings == []

    def test_loads_both_lists(self, storage):
        write_list(storage, FAV, {"1": "Fav One"})
        write_list(storage, COOKED, {"2": "Cooked Two"})

        store = ListStore(storage)

        assert store.entries(FAV) == (ListEntry("1", "Fav One"),)
        assert store.entries(COOKED) == (ListEntry("2", "Cooked Two"),)

    def test_sanitizes_loaded_entries(self, storage):
        write_list(storage, FAV, {" 53126 ": "  Soup  ", "  ": "Dropped"})

        store = ListStore(storage)

        assert store.entries(FAV) == (ListEntry("53126", "Soup"),)

    def test_corrupt_file_gives_empty_list_and_warning(self, storage):
        storage.favorites_file.parent.mkdir(parents=True)
        storage.favorites_file.write_text("{ not json", encoding="utf-8")
        write_list(storage, COOKED, {"2": "Still here"})
        received = []

        store = ListStore(storage, on_warning=received.append)

        assert store.entries(FAV) == ()
        assert store.entries(COOKED) == (ListEntry("2", "Still here"),)
        assert len(received) == 1
        assert received[0].list_name is FAV
        assert received[0].operation == "load"
        assert received[0].path == storage.favorites_file
        assert store.warnings == received

    def test_non_mapping_file_gives_warning(self, storage):
        write_list(storage, COOKED, ["not", "a", "map"])

        store = ListStore(storage)

        assert store.entries(COOKED) == ()
        assert len(store.warnings) == 1
        assert store.warnings[0].list_name is COOKED

    def test_unreadable_data_dir_gives_warnings(self, tmp_path):
        store = ListStore(MealStorage(tmp_path / ("x" * 300)))

        assert store.entries(FAV) == ()
        assert store.entries(COOKED) == ()
        assert [w.list_name for w in store.warnings] == [FAV, COOKED]
        assert all(w.operation == "load" for w in store.warnings)

    def test_load_warning_is_logged(self, storage, caplog):
        write_list(storage, FAV, 123)

        with caplog.at_level(logging.WARNING, logger="meallab.lists"):
            ListStore(storage)

        assert "Could not load Favorites" in caplog.text

    def test_skip_initial_load(self, storage):
        write_list(storage, FAV, {"1": "A"})

        store = ListStore(storage, load=False)

        assert store.entries(FAV) == ()
        store.load()
        assert store.entries(FAV) == (ListEntry("1", "A"),)


# ============================================================================
# Add Tests
# ============================================================================


class TestAdd:
    """Tests for ListStore.add."""

    def test_add_and_query(self, store, storage):
        result = store.add(FAV, "52772", "Teriyaki Chicken")

        assert result is AddResult.ADDED
        assert store.entries(FAV) == (ListEntry("52772", "Teriyaki Chicken"),)
        assert on_disk(storage, FAV) == {"52772": "Teriyaki Chicken"}

    def test_add_trims_id_and_name(self, store):
        store.add(FAV, "  52772 ", "  Teriyaki  ")

        assert store.entries(FAV) == (ListEntry("52772", "Teriyaki"),)

    def test_add_allows_empty_name(self, store):
        assert store.add(COOKED, "1", "") is AddResult.ADDED
        assert store.add(COOKED, "2", None) is AddResult.ADDED
        assert store.entries(COOKED) == (ListEntry("1", ""), ListEntry("2", ""))

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_blank_id_rejected(self, store, storage, blank):
        with pytest.raises(InvalidMealIdError):
            store.add(FAV, blank, "X")

        assert store.entries(FAV) == ()
        assert storage.saves == []

    def test_duplicate_returns_already_exists(self, store, storage):
        store.add(FAV, "52772", "Teriyaki Chicken")
        saves_before = len(storage.saves)

        result = store.add(FAV, " 52772 ", "Renamed")

        assert result is AddResult.ALREADY_EXISTS
        assert store.get_name(FAV, "52772") == "Teriyaki Chicken"
        assert store.len_of(FAV) == 1
        assert len(storage.saves) == saves_before

    def test_ids_stay_unique_over_many_adds(self, store):
        for meal_id in ["1", "2", "1", " 2", "3", "3 ", "1"]:
            store.add(FAV, meal_id, f"Meal {meal_id}")

        ids = [entry.meal_id for entry in store.entries(FAV)]
        assert ids == ["1", "2", "3"]

    def test_insertion_order_is_kept(self, store, storage):
        for meal_id in ["30", "10", "20"]:
            store.add(COOKED, meal_id, "x")

        assert [e.meal_id for e in store.entries(COOKED)] == ["30", "10", "20"]
        assert list(on_disk(storage, COOKED)) == ["30", "10", "20"]

    def test_lists_are_independent(self, store):
        store.add(FAV, "1", "A")
        store.add(COOKED, "1", "A")

        assert store.contains(FAV, "1")
        assert store.contains(COOKED, "1")

        store.remove(COOKED, "1")
        assert store.contains(FAV, "1")

    def test_add_only_writes_target_list(self, store, storage):
        store.add(COOKED, "1", "A")

        assert storage.saves == [COOKED]
        assert not storage.favorites_file.exists()

    def test_accepts_list_name_values(self, store):
        store.add("favorites", "1", "A")

        assert store.entries(FAV) == (ListEntry("1", "A"),)


# ============================================================================
# Remove Tests
# ============================================================================


class TestRemove:
    """Tests for ListStore.remove."""

    def test_remove_existing(self, store, storage):
        store.add(FAV, "1", "A")
        store.add(FAV, "2", "B")

        assert store.remove(FAV, " 1 ") is True
        assert store.entries(FAV) == (ListEntry("2", "B"),)
        assert on_disk(storage, FAV) == {"2": "B"}

    def test_remove_missing_is_noop(self, store, storage):
        store.add(FAV, "1", "A")
        saves_before = len(storage.saves)

        assert store.remove(FAV, "999") is False
        assert len(storage.saves) == saves_before

    def test_remove_blank_id_rejected(self, store):
        with pytest.raises(InvalidMealIdError):
            store.remove(FAV, "  ")


# ============================================================================
# Move Tests
# ============================================================================


class TestMoveToCooked:
    """Tests for ListStore.move_to_cooked."""

    def test_move_scenario(self, store, storage):
        store.add(FAV, "52772", "Teriyaki Chicken")
        assert store.entries(FAV) == (ListEntry("52772", "Teriyaki Chicken"),)

        result = store.move_to_cooked("52772")

        assert result is MoveResult.MOVED
        assert store.entries(FAV) == ()
        assert store.entries(COOKED) == (ListEntry("52772", "Teriyaki Chicken"),)
        assert on_disk(storage, FAV) == {}
        assert on_disk(storage, COOKED) == {"52772": "Teriyaki Chicken"}

    def test_move_keeps_existing_cooked_entry(self, storage):
        write_list(storage, COOKED, {"99": "Old Name"})
        write_list(storage, FAV, {"99": "New Name"})
        store = ListStore(storage)

        result = store.move_to_cooked("99")

        assert result is MoveResult.ALREADY_IN_TARGET
        assert store.entries(FAV) == ()
        assert store.entries(COOKED) == (ListEntry("99", "Old Name"),)
        assert storage.saves == [FAV]
        assert on_disk(storage, FAV) == {}
        assert on_disk(storage, COOKED) == {"99": "Old Name"}

    def test_move_missing_touches_nothing(self, store, storage):
        store.add(COOKED, "1", "A")
        saves_before = len(storage.saves)

        result = store.move_to_cooked("1")

        assert result is MoveResult.NOT_FOUND
        assert store.entries(COOKED) == (ListEntry("1", "A"),)
        assert len(storage.saves) == saves_before

    def test_move_appends_to_cooked(self, store):
        store.add(COOKED, "1", "First")
        store.add(FAV, "2", "Second")

        store.move_to_cooked("2")

        assert [e.meal_id for e in store.entries(COOKED)] == ["1", "2"]

    def test_move_blank_id_rejected(self, store):
        with pytest.raises(InvalidMealIdError):
            store.move_to_cooked("")

    def test_no_move_back_to_favorites(self, store):
        assert not hasattr(store, "move_to_favorites")


# ============================================================================
# Remove From Any Tests
# ============================================================================


class TestRemoveFromAny:
    """Tests for ListStore.remove_from_any."""

    def test_removes_from_both(self, store, storage):
        store.add(FAV, "1", "A")
        store.add(COOKED, "1", "A")

        removed = store.remove_from_any("1")

        assert removed == RemovedFrom(favorites=True, cooked=True)
        assert removed.lists == [FAV, COOKED]
        assert on_disk(storage, FAV) == {}
        assert on_disk(storage, COOKED) == {}

    def test_removes_from_one(self, store, storage):
        store.add(COOKED, "1", "A")
        storage.saves.clear()

        removed = store.remove_from_any("1")

        assert removed == RemovedFrom(favorites=False, cooked=True)
        assert bool(removed) is True
        assert storage.saves == [COOKED]

    def test_not_found_anywhere(self, store, storage):
        removed = store.remove_from_any("404")

        assert not removed
        assert removed.lists == []
        assert storage.saves == []

    def test_blank_id_rejected(self, store):
        with pytest.raises(InvalidMealIdError):
            store.remove_from_any(" ")


# ============================================================================
# Persistence Failure Tests
# ============================================================================


class TestPersistenceFailures:
    """Storage failures are warnings, never errors."""

    def test_failed_save_keeps_memory_change(self, make_storage):
        storage = make_storage(fail_saves={FAV})
        received = []
        store = ListStore(storage, on_warning=received.append)

        result = store.add(FAV, "1", "A")

        assert result is AddResult.ADDED
        assert store.entries(FAV) == (ListEntry("1", "A"),)
        assert len(received) == 1
        assert received[0].operation == "save"
        assert "disk full" in received[0].message
        assert "Could not save Favorites" in str(received[0])

    def test_failed_save_leaves_file_untouched(self, data_dir, make_storage):
        good = MealStorage(data_dir)
        good.save(FAV, {"1": "Before"})
        store = ListStore(make_storage(fail_saves={FAV}))

        store.add(FAV, "2", "After")

        assert on_disk(good, FAV) == {"1": "Before"}

    def test_partial_move_failure_is_tolerated(self, make_storage):
        storage = make_storage(fail_saves={COOKED})
        store = ListStore(storage)
        store.add(FAV, "1", "A")

        result = store.move_to_cooked("1")

        assert result is MoveResult.MOVED
        assert store.entries(COOKED) == (ListEntry("1", "A"),)
        # Favorites reached disk, Cooked did not
        assert on_disk(storage, FAV) == {}
        assert on_disk(storage, COOKED) == {}
        assert [w.list_name for w in store.warnings] == [COOKED]

    def test_remove_from_any_saves_each_list_independently(self, make_storage):
        storage = make_storage()
        store = ListStore(storage)
        store.add(FAV, "1", "A")
        store.add(COOKED, "1", "A")
        storage.fail_saves = {FAV}

        removed = store.remove_from_any("1")

        assert removed == RemovedFrom(favorites=True, cooked=True)
        assert on_disk(storage, FAV) == {"1": "A"}
        assert on_disk(storage, COOKED) == {}
        assert len(store.warnings) == 1

    def test_listener_management(self, make_storage):
        store = ListStore(make_storage(fail_saves={FAV}))
        received = []
        store.add_warning_listener(received.append)

        store.add(FAV, "1", "A")
        store.remove_warning_listener(received.append)
        store.add(FAV, "2", "B")

        assert len(received) == 1
        assert len(store.warnings) == 2


# ============================================================================
# Round Trip Tests
# ============================================================================


class TestRoundTrip:
    """State survives a restart."""

    def test_reload_gives_same_state(self, storage):
        store = ListStore(storage)
        store.add(FAV, "3", "Three")
        store.add(FAV, "1", "One")
        store.add(COOKED, "2", "Two")
        store.add(FAV, "4", "")
        store.move_to_cooked("1")

        reloaded = ListStore(MealStorage(storage.data_dir))

        assert reloaded.entries(FAV) == store.entries(FAV)
        assert reloaded.entries(COOKED) == store.entries(COOKED)
        assert reloaded.warnings == []
