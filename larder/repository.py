from collections.abc import Iterable
import json
import logging
from pathlib import Path
from typing import Any, Self

from larder.models import Ingredient, IngredientIndex, RawRecipe


logger = logging.getLogger(__name__)


class RecipeNotFound(Exception):
    pass


def build_ingredient_index(
    ingredients: Iterable[Ingredient] | None,
) -> IngredientIndex:
    index: IngredientIndex = {}
    for ingredient in ingredients or ():
        index[ingredient.id] = ingredient
    return index


class RecipeRepository:
    """Read-only snapshot of the recipes dataset.

    Loaded once when the app starts and passed to every service call. Nothing
    here writes back.
    """

    def __init__(
        self,
        *,
        recipes: Iterable[RawRecipe],
        ingredients: Iterable[Ingredient] | None = None,
    ) -> None:
        self.recipes: tuple[RawRecipe, ...] = tuple(recipes)
        self.ingredient_index = build_ingredient_index(ingredients)
        self._by_id: dict[str, RawRecipe] = {}
        for recipe in self.recipes:
            self._by_id.setdefault(recipe.id, recipe)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        recipes = data.get("recipes") or []
        ingredients = data.get("ingredients") or []
        return cls(
            recipes=[RawRecipe.from_dict(r) for r in recipes if isinstance(r, dict)],
            ingredients=[
                Ingredient.from_dict(i) for i in ingredients if isinstance(i, dict)
            ],
        )

    @classmethod
    def from_path(cls, path: Path | str) -> Self:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {path}.")
        repo = cls.from_dict(data)  # pyright: ignore[reportUnknownArgumentType]
        logger.info(
            "Loaded %d recipes and %d ingredients from %s",
            len(repo.recipes),
            len(repo.ingredient_index),
            path,
        )
        return repo

    def __len__(self) -> int:
        return len(self.recipes)

    def get(self, id: str) -> RawRecipe:
        recipe = self._by_id.get(id)
        if recipe is None:
            raise RecipeNotFound(f"{id}")
        return recipe

    def select(self, ids: Iterable[str]) -> list[RawRecipe]:
        """Recipes with any of `ids`, in dataset order. Unknown ids are ignored."""
        wanted = set(ids)
        return [recipe for recipe in self.recipes if recipe.id in wanted]

    def list(self) -> tuple[RawRecipe, ...]:
        return self.recipes
