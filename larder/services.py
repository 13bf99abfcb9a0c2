from collections.abc import Iterable
from typing import Any

from larder.llm_service import LLMService
from larder.models import NormalizedRecipe, RecipePage, ShoppingList
from larder.nutrition import normalize_recipe
from larder.query import RecipeQuery, recipe_facets, search_recipes
from larder.repository import RecipeRepository
from larder.shopping import aggregate_ingredients


def list_recipes(
    query: RecipeQuery,
    *,
    repository: RecipeRepository,
) -> RecipePage:
    return search_recipes(repository.list(), repository.ingredient_index, query)


def get_recipe(
    id: str,
    *,
    repository: RecipeRepository,
) -> NormalizedRecipe:
    return normalize_recipe(repository.get(id), repository.ingredient_index)


def list_facets(
    query: RecipeQuery,
    *,
    repository: RecipeRepository,
) -> dict[str, list[str]]:
    page = list_recipes(query, repository=repository)
    return recipe_facets(page.items)


async def create_shopping_list(
    recipe_ids: Iterable[str],
    *,
    repository: RecipeRepository,
    llm: LLMService,
) -> ShoppingList:
    selected = repository.select(recipe_ids)
    if not selected:
        return ShoppingList(items=[], llm=False)
    items = aggregate_ingredients(selected, repository.ingredient_index)
    return await llm.normalize_shopping_list(items)


def recipe_ids_from_body(body: Any) -> list[str]:
    """The `recipeIds` of a shopping list request body, `[]` if malformed."""
    if not isinstance(body, dict):
        return []
    ids = body.get("recipeIds")  # pyright: ignore[reportUnknownMemberType]
    if not isinstance(ids, list):
        return []
    return [str(i) for i in ids]  # pyright: ignore[reportUnknownVariableType]
