"""CLI entry point for MealLab."""

from pathlib import Path

import click

from . import __version__
from .api import MealDBAPI, MealDBAPIError, MealNotFoundError
from .config import DEFAULT_RESULT_LIMIT, get_log_level, setup_logging
from .instructions import format_instructions
from .lists import (
    AddResult,
    InvalidMealIdError,
    ListStore,
    MoveResult,
    PersistenceWarning,
)
from .models import ListName, MealDetails
from .storage import MealStorage
from .tui import run_browser

# Shared instances, created on first use
_api: MealDBAPI | None = None
_store: ListStore | None = None
_data_dir: Path | None = None


def get_api() -> MealDBAPI:
    """Get or create the API instance."""
    global _api
    if _api is None:
        _api = MealDBAPI()
    return _api


def echo_warning(warning: PersistenceWarning) -> None:
    """Show a persistence warning to the user."""
    click.echo(f"⚠️  Warning: {warning}", err=True)


def get_store() -> ListStore:
    """Get or create the list store for the selected data directory."""
    global _store
    if _store is None:
        _store = ListStore(MealStorage(_data_dir), on_warning=echo_warning)
    return _store


def display_meal(meal: MealDetails) -> None:
    """Display full meal details."""
    click.echo()
    click.echo("=" * 60)
    click.echo(f"MEAL: {meal.name}")
    click.echo("=" * 60)
    click.echo(f"Id: {meal.meal_id}")
    if meal.category:
        click.echo(f"Category: {meal.category}")
    if meal.area:
        click.echo(f"Area: {meal.area}")
    if meal.thumbnail_url:
        click.echo(f"Thumbnail: {meal.thumbnail_url}")

    click.echo("\nIngredients:")
    if meal.ingredients:
        for ingredient, measure in meal.ingredients.items():
            if measure:
                click.echo(f"  - {ingredient} : {measure}")
            else:
                click.echo(f"  - {ingredient}")
    else:
        click.echo("  (none)")

    click.echo("\nInstructions:")
    click.echo(format_instructions(meal.instructions) or "  (none)")
    click.echo()


def display_list(list_name: ListName) -> None:
    """Display the entries of one list."""
    entries = get_store().entries(list_name)

    if not entries:
        click.echo(f"{list_name.label} list is empty.")
        return

    click.echo()
    click.echo(f"YOUR {list_name.label.upper()}")
    click.echo("=" * 50)
    for i, entry in enumerate(entries, 1):
        click.echo(f"{i}. {entry.name} (id={entry.meal_id})")
    click.echo()
    click.echo(f"Total: {len(entries)} meals")


def require_meal_id(meal_id: str) -> str:
    """Trim a meal ID argument, exiting if it is blank."""
    meal_id = meal_id.strip()
    if not meal_id:
        click.echo("✗ Please provide a valid meal id.", err=True)
        raise SystemExit(1)
    return meal_id


def add_meal(list_name: ListName, meal: MealDetails) -> None:
    """Add a resolved meal to a list and report the outcome."""
    try:
        result = get_store().add(list_name, meal.meal_id, meal.name)
    except InvalidMealIdError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    if result is AddResult.ALREADY_EXISTS:
        click.echo(f"Meal already exists in {list_name.label} (id={meal.meal_id}).")
    else:
        click.echo(f"✓ Added to {list_name.label}: {meal.name} (id={meal.meal_id})")


def add_by_id(list_name: ListName, meal_id: str) -> None:
    """Look up a meal by ID and add it to a list."""
    meal_id = require_meal_id(meal_id)
    store = get_store()

    # Skip the lookup for a meal we already have
    if store.contains(list_name, meal_id):
        click.echo(f"Meal already exists in {list_name.label} (id={meal_id}).")
        return

    try:
        meal = get_api().lookup_by_id(meal_id)
    except MealNotFoundError:
        click.echo(f"✗ Meal not found for id: {meal_id}", err=True)
        raise SystemExit(1) from None
    except MealDBAPIError as e:
        click.echo(f"✗ Lookup failed: {e}", err=True)
        raise SystemExit(1) from None

    add_meal(list_name, meal)


def remove_by_id(list_name: ListName, meal_id: str) -> None:
    """Remove a meal from one list."""
    meal_id = require_meal_id(meal_id)
    if get_store().remove(list_name, meal_id):
        click.echo(f"✓ Removed from {list_name.label} (id={meal_id})")
    else:
        click.echo(f"Id not found in {list_name.label}: {meal_id}")


# ============================================================================
# Main CLI Group
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="meallab")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding favorites.json and cooked.json",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(data_dir: Path | None, verbose: bool):
    """MealLab - browse TheMealDB and keep track of meals.

    Search meals by ingredient or name, look at recipes, and keep your own
    Favorites and Cooked lists.
    """
    global _data_dir, _store
    # Warnings are echoed by the commands themselves
    setup_logging("DEBUG" if verbose else get_log_level("ERROR"))
    _data_dir = data_dir
    _store = None


# ============================================================================
# Search Commands
# ============================================================================


@cli.group()
def search():
    """Search TheMealDB."""
    pass


@search.command("ingredient")
@click.argument("ingredient")
@click.option("--limit", "-l", default=DEFAULT_RESULT_LIMIT, help="Maximum results to show")
def search_ingredient(ingredient: str, limit: int):
    """Search meals by ingredient.

    Examples:

    \b
        meallab search ingredient chicken
        meallab search ingredient garlic --limit 20
    """
    try:
        click.echo(f"Searching for meals with: {ingredient}")
        meals = get_api().search_by_ingredient(ingredient)
    except MealDBAPIError as e:
        click.echo(f"✗ Search failed: {e}", err=True)
        raise SystemExit(1) from None

    if not meals:
        click.echo(f"No meals found for ingredient: {ingredient}")
        return

    click.echo(f"\nFound {len(meals)} meals:\n")
    for i, meal in enumerate(meals[:limit], 1):
        click.echo(f"{i}. {meal.name} (id={meal.meal_id})")
    click.echo()
    click.echo("Use 'meallab show <id>' to see details.")


@search.command("name")
@click.argument("name")
@click.option("--limit", "-l", default=DEFAULT_RESULT_LIMIT, help="Maximum results to show")
def search_name(name: str, limit: int):
    """Search meals by name (partial names work)."""
    try:
        click.echo(f"Searching for: {name}")
        meals = get_api().search_by_name(name)
    except MealDBAPIError as e:
        click.echo(f"✗ Search failed: {e}", err=True)
        raise SystemExit(1) from None

    if not meals:
        click.echo(f"No meals found for name: {name}")
        return

    click.echo(f"\nFound {len(meals)} meals:\n")
    for i, meal in enumerate(meals[:limit], 1):
        category = f" [{meal.category}]" if meal.category else ""
        click.echo(f"{i}. {meal.name}{category} (id={meal.meal_id})")
    click.echo()
    click.echo("Use 'meallab show <id>' to see details.")


@cli.command()
@click.argument("meal_id")
def show(meal_id: str):
    """Show the full recipe for a meal id."""
    meal_id = require_meal_id(meal_id)

    try:
        meal = get_api().lookup_by_id(meal_id)
    except MealNotFoundError:
        click.echo(f"✗ Meal not found for id: {meal_id}", err=True)
        raise SystemExit(1) from None
    except MealDBAPIError as e:
        click.echo(f"✗ Lookup failed: {e}", err=True)
        raise SystemExit(1) from None

    display_meal(meal)


@cli.command("random")
@click.option(
    "--add",
    "add_to",
    type=click.Choice(["favorites", "cooked", "none"]),
    help="Add the meal to a list without asking",
)
def random_meal_cmd(add_to: str | None):
    """Show a random meal and optionally add it to a list."""
    try:
        meal = get_api().random_meal()
    except MealDBAPIError as e:
        click.echo(f"✗ Could not fetch a random meal: {e}", err=True)
        raise SystemExit(1) from None

    display_meal(meal)

    if add_to is None:
        answer = click.prompt(
            "Add this meal to (f)avorites, (c)ooked, or (n)o?",
            default="n",
            show_default=False,
        )
        add_to = {"f": "favorites", "c": "cooked"}.get(answer.strip().lower()[:1], "none")

    if add_to == "none":
        click.echo("Ok, not added.")
        return

    add_meal(ListName(add_to), meal)


# ============================================================================
# List Commands
# ============================================================================


@cli.group()
def favorites():
    """Manage your Favorites list."""
    pass


@favorites.command("list")
def favorites_list():
    """List your favorite meals."""
    display_list(ListName.FAVORITES)


@favorites.command("add")
@click.argument("meal_id")
def favorites_add(meal_id: str):
    """Add a meal to Favorites by id."""
    add_by_id(ListName.FAVORITES, meal_id)


@favorites.command("remove")
@click.argument("meal_id")
def favorites_remove(meal_id: str):
    """Remove a meal from Favorites."""
    remove_by_id(ListName.FAVORITES, meal_id)


@favorites.command("move")
@click.argument("meal_id")
def favorites_move(meal_id: str):
    """Move a meal from Favorites to Cooked.

    If the meal is already in Cooked, it is only removed from Favorites and
    the Cooked entry is kept as it was.
    """
    meal_id = require_meal_id(meal_id)
    store = get_store()
    name = store.get_name(ListName.FAVORITES, meal_id)

    result = store.move_to_cooked(meal_id)

    if result is MoveResult.NOT_FOUND:
        click.echo(f"✗ This id is not in Favorites: {meal_id}", err=True)
        raise SystemExit(1)
    if result is MoveResult.ALREADY_IN_TARGET:
        click.echo(f"Meal already exists in Cooked, removed from Favorites (id={meal_id}).")
    else:
        click.echo(f"✓ Moved to Cooked: {name} (id={meal_id})")


@cli.group()
def cooked():
    """Manage your Cooked list."""
    pass


@cooked.command("list")
def cooked_list():
    """List meals you have cooked."""
    display_list(ListName.COOKED)


@cooked.command("add")
@click.argument("meal_id")
def cooked_add(meal_id: str):
    """Add a meal to Cooked by id."""
    add_by_id(ListName.COOKED, meal_id)


@cooked.command("remove")
@click.argument("meal_id")
def cooked_remove(meal_id: str):
    """Remove a meal from Cooked."""
    remove_by_id(ListName.COOKED, meal_id)


@cli.command("remove")
@click.argument("meal_id")
def remove_any(meal_id: str):
    """Remove a meal from both Favorites and Cooked."""
    meal_id = require_meal_id(meal_id)
    removed = get_store().remove_from_any(meal_id)

    if not removed:
        click.echo(f"Id not found in Favorites or Cooked: {meal_id}")
        return

    click.echo("✓ Removed from: " + ", ".join(n.label for n in removed.lists))


@cli.command()
def paths():
    """Show where your lists are stored."""
    storage = MealStorage(_data_dir)
    click.echo(f"Data directory: {storage.data_dir}")
    for list_name in ListName:
        path = storage.path_for(list_name)
        status = "" if path.exists() else " (not created yet)"
        click.echo(f"{list_name.label}: {path}{status}")


@cli.command()
def browse():
    """Open the interactive meal browser."""
    run_browser(get_store(), get_api())


# ============================================================================
# Entry Point
# ============================================================================


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
