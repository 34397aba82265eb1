"""Interactive TUI for browsing meals and managing the lists."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static

from .api import MealDBAPIError, MealNotFoundError
from .instructions import format_instructions
from .lists import AddResult, InvalidMealIdError, MoveResult, PersistenceWarning
from .models import ListName, MealDetails

if TYPE_CHECKING:
    from .api import MealDBAPI
    from .lists import ListStore

TABLE_IDS = {
    ListName.FAVORITES: "favorites-table",
    ListName.COOKED: "cooked-table",
}


def describe_meal(meal: MealDetails) -> str:
    """Build the details pane text for a meal."""
    lines = []
    meta = " | ".join(part for part in (meal.category, meal.area) if part)
    if meta:
        lines.append(meta)
    lines.append(f"Id: {meal.meal_id}")
    if meal.thumbnail_url:
        lines.append(f"Image: {meal.thumbnail_url}")

    lines.append("")
    lines.append("Ingredients:")
    if meal.ingredients:
        for ingredient, measure in meal.ingredients.items():
            lines.append(f"  • {ingredient}" + (f" - {measure}" if measure else ""))
    else:
        lines.append("  (none)")

    lines.append("")
    lines.append("Instructions:")
    lines.append(format_instructions(meal.instructions) or "(none)")
    return "\n".join(lines)


class MealLabApp(App[None]):
    """Meal browser with search, details, and Favorites/Cooked tables."""

    CSS = """
    Screen {
        background: $surface;
    }

    #search-bar {
        height: auto;
        padding: 0 1;
    }

    #search-bar Input {
        width: 1fr;
    }

    #main {
        height: 1fr;
    }

    #tables {
        width: 1fr;
        padding: 0 1;
    }

    .table-title {
        text-style: bold;
        padding-top: 1;
    }

    DataTable {
        height: 1fr;
    }

    #details {
        width: 1fr;
        padding: 1;
        background: $primary-background;
    }

    #details-title {
        text-style: bold;
        padding-bottom: 1;
    }
    """

    BINDINGS = [
        Binding("f", "add_favorite", "Add to Favorites"),
        Binding("c", "add_cooked", "Add to Cooked"),
        Binding("m", "move_to_cooked", "Move Fav → Cooked"),
        Binding("d", "remove", "Remove"),
        Binding("r", "random_meal", "Random"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, store: ListStore, api: MealDBAPI) -> None:
        super().__init__()
        self.store = store
        self.api = api
        self.current_meal: MealDetails | None = None
        self.selected: dict[ListName, str | None] = {name: None for name in ListName}

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="search-bar"):
            yield Input(placeholder="Ingredient (enter to search)", id="ingredient-input")
            yield Input(placeholder="Meal name (enter to search)", id="name-input")
            yield Input(placeholder="Meal id (enter to look up)", id="id-input")
            yield Button("Random", id="btn-random")
        with Horizontal(id="main"):
            with Vertical(id="tables"):
                yield Label("Search results", classes="table-title")
                yield DataTable(id="results-table", cursor_type="row")
                yield Label("Favorites", classes="table-title")
                yield DataTable(id="favorites-table", cursor_type="row")
                yield Label("Cooked", classes="table-title")
                yield DataTable(id="cooked-table", cursor_type="row")
            with VerticalScroll(id="details"):
                yield Static("No meal selected", id="details-title")
                yield Static("", id="details-body")
        yield Footer()

    def on_mount(self) -> None:
        self.title = "MealLab"
        for table in self.query(DataTable):
            table.add_columns("Id", "Name")
        self.refresh_lists()

        self.store.add_warning_listener(self._on_persistence_warning)
        for warning in self.store.warnings:
            self._on_persistence_warning(warning)

    def on_unmount(self) -> None:
        self.store.remove_warning_listener(self._on_persistence_warning)

    def _on_persistence_warning(self, warning: PersistenceWarning) -> None:
        self.notify(str(warning), title="Storage", severity="warning")

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def refresh_lists(self) -> None:
        """Redraw the Favorites and Cooked tables from the store."""
        for list_name, table_id in TABLE_IDS.items():
            table = self.query_one(f"#{table_id}", DataTable)
            table.clear()
            for entry in self.store.entries(list_name):
                table.add_row(entry.meal_id, entry.name, key=entry.meal_id)

    def show_results(self, rows: list[tuple[str, str]]) -> None:
        table = self.query_one("#results-table", DataTable)
        table.clear()
        for meal_id, name in rows:
            table.add_row(meal_id, name, key=meal_id)
        if not rows:
            self.notify("No meals found.")

    def show_meal(self, meal: MealDetails) -> None:
        self.current_meal = meal
        self.selected = {name: None for name in ListName}
        self.query_one("#details-title", Static).update(meal.name or "(unnamed meal)")
        self.query_one("#details-body", Static).update(describe_meal(meal))

    def report(self, message: str, severity: str = "information") -> None:
        self.notify(message, severity=severity)

    # ------------------------------------------------------------------
    # API calls (run in worker threads, results applied on the app thread)
    # ------------------------------------------------------------------

    @work(thread=True, exclusive=True, group="search")
    def search_by_ingredient(self, ingredient: str) -> None:
        try:
            meals = self.api.search_by_ingredient(ingredient)
        except MealDBAPIError as e:
            self.call_from_thread(self.report, f"Search failed: {e}", "error")
            return
        self.call_from_thread(self.show_results, [(m.meal_id, m.name) for m in meals])

    @work(thread=True, exclusive=True, group="search")
    def search_by_name(self, name: str) -> None:
        try:
            meals = self.api.search_by_name(name)
        except MealDBAPIError as e:
            self.call_from_thread(self.report, f"Search failed: {e}", "error")
            return
        self.call_from_thread(self.show_results, [(m.meal_id, m.name) for m in meals])

    @work(thread=True, exclusive=True, group="details")
    def load_meal(self, meal_id: str) -> None:
        try:
            meal = self.api.lookup_by_id(meal_id)
        except MealNotFoundError:
            self.call_from_thread(self.report, f"Meal not found for id: {meal_id}", "warning")
            return
        except MealDBAPIError as e:
            self.call_from_thread(self.report, f"Lookup failed: {e}", "error")
            return
        self.call_from_thread(self.show_meal, meal)

    @work(thread=True, exclusive=True, group="details")
    def load_random_meal(self) -> None:
        try:
            meal = self.api.random_meal()
        except MealDBAPIError as e:
            self.call_from_thread(self.report, f"Could not fetch a random meal: {e}", "error")
            return
        self.call_from_thread(self.show_meal, meal)

    # ------------------------------------------------------------------
    # List operations
    # ------------------------------------------------------------------

    def add_current(self, list_name: ListName) -> tuple[str, str]:
        """Add the meal shown in the details pane to a list.

        Returns:
            Tuple of (message, severity) for the user
        """
        meal = self.current_meal
        if meal is None:
            return "Select a meal first.", "warning"
        try:
            result = self.store.add(list_name, meal.meal_id, meal.name)
        except InvalidMealIdError as e:
            return str(e), "error"
        if result is AddResult.ALREADY_EXISTS:
            return f"Already in {list_name.label}: {meal.name}", "warning"
        return f"Added to {list_name.label}: {meal.name}", "information"

    def move_selected(self) -> tuple[str, str]:
        """Move the selected Favorites row to Cooked."""
        meal_id = self.selected[ListName.FAVORITES]
        if not meal_id:
            return "Select a meal in Favorites first.", "warning"
        name = self.store.get_name(ListName.FAVORITES, meal_id)
        result = self.store.move_to_cooked(meal_id)
        if result is MoveResult.NOT_FOUND:
            return f"This id is not in Favorites: {meal_id}", "warning"
        if result is MoveResult.ALREADY_IN_TARGET:
            return "Already in Cooked, removed from Favorites.", "warning"
        return f"Moved to Cooked: {name}", "information"

    def remove_selected(self) -> tuple[str, str]:
        """Remove the selected list row (or the shown meal) from both lists."""
        meal_id = next((mid for mid in self.selected.values() if mid), None)
        if meal_id is None and self.current_meal is not None:
            meal_id = self.current_meal.meal_id
        if not meal_id:
            return "Select a meal first.", "warning"
        removed = self.store.remove_from_any(meal_id)
        if not removed:
            return f"Id not found in Favorites or Cooked: {meal_id}", "warning"
        return "Removed from: " + ", ".join(n.label for n in removed.lists), "information"

    def sync_selection(self) -> None:
        """Take the selection from the cursor row of the focused list table.

        Nothing is selected unless the Favorites or Cooked table has focus.
        """
        self.selected = {name: None for name in ListName}
        table = self.focused
        if not isinstance(table, DataTable) or not table.row_count:
            return
        for list_name, table_id in TABLE_IDS.items():
            if table.id == table_id:
                row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
                self.selected[list_name] = row_key.value

    def _run_list_operation(self, outcome: tuple[str, str]) -> None:
        message, severity = outcome
        self.report(message, severity)
        self.refresh_lists()

    def action_add_favorite(self) -> None:
        self._run_list_operation(self.add_current(ListName.FAVORITES))

    def action_add_cooked(self) -> None:
        self._run_list_operation(self.add_current(ListName.COOKED))

    def action_move_to_cooked(self) -> None:
        self.sync_selection()
        self._run_list_operation(self.move_selected())

    def action_remove(self) -> None:
        self.sync_selection()
        self._run_list_operation(self.remove_selected())

    def action_random_meal(self) -> None:
        self.load_random_meal()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @on(Input.Submitted, "#ingredient-input")
    def on_ingredient_submitted(self, event: Input.Submitted) -> None:
        if event.value.strip():
            self.search_by_ingredient(event.value.strip())

    @on(Input.Submitted, "#name-input")
    def on_name_submitted(self, event: Input.Submitted) -> None:
        if event.value.strip():
            self.search_by_name(event.value.strip())

    @on(Input.Submitted, "#id-input")
    def on_id_submitted(self, event: Input.Submitted) -> None:
        meal_id = event.value.strip()
        if not meal_id:
            self.report("Please provide a valid meal id.", "warning")
            return
        self.load_meal(meal_id)

    @on(Button.Pressed, "#btn-random")
    def on_random_button(self) -> None:
        self.action_random_meal()

    @on(DataTable.RowSelected)
    def on_row_selected(self, event: DataTable.RowSelected) -> None:
        """Show details for a row when Enter is pressed on it."""
        meal_id = event.row_key.value if event.row_key else None
        if meal_id:
            self.load_meal(meal_id)


def run_browser(store: ListStore, api: MealDBAPI) -> None:
    """Launch the interactive meal browser."""
    app = MealLabApp(store, api)
    app.run()
