from collections.abc import Callable, Iterable, Mapping
import logging
import re
from typing import Any, Self
import unicodedata

from larder.models import (
    DIFFICULTIES,
    IngredientIndex,
    NormalizedRecipe,
    RawRecipe,
    RecipePage,
)
from larder.nutrition import normalize_recipe
from larder.parsing import parse_minutes


logger = logging.getLogger(__name__)


DEFAULT_LIMIT = 100
TRUTHY = frozenset(("1", "true", "yes", "on"))
DIFFICULTY_RANK = {difficulty: rank for rank, difficulty in enumerate(DIFFICULTIES)}
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_int(value: str | None, default: int) -> int:
    match = LEADING_INT_RE.match(value or "")
    return int(match.group(1)) if match else default


class RecipeQuery:
    def __init__(
        self,
        *,
        q: str = "",
        tags: Iterable[str] | None = None,
        ingredients: Iterable[str] | None = None,
        difficulty: str = "",
        time_preset: str = "",
        favorites_only: bool = False,
        favorites: Iterable[str] | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> None:
        self.q = q
        self.tags = [] if tags is None else list(tags)
        self.ingredients = [] if ingredients is None else list(ingredients)
        self.difficulty = difficulty
        self.time_preset = time_preset
        self.favorites_only = favorites_only
        self.favorites = frozenset(() if favorites is None else favorites)
        self.sort_by = sort_by
        self.sort_order = sort_order
        self.limit = limit
        self.offset = offset

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> Self:
        """Build a query from `/recipes` query string parameters."""
        return cls(
            q=params.get("q") or "",
            tags=split_csv(params.get("tags")),
            ingredients=split_csv(params.get("ingredients")),
            difficulty=params.get("difficulty") or "",
            time_preset=params.get("timePreset") or "",
            favorites_only=(params.get("favoritesOnly") or "").lower() in TRUTHY,
            favorites=split_csv(params.get("favorites")),
            sort_by=params.get("sortBy") or "name",
            sort_order=params.get("sortOrder") or "asc",
            # 0 and junk both fall back to the default page size.
            limit=parse_int(params.get("limit"), DEFAULT_LIMIT) or DEFAULT_LIMIT,
            offset=parse_int(params.get("offset"), 0),
        )

    @property
    def descending(self) -> bool:
        return self.sort_order.lower() == "desc"

    def __repr__(self) -> str:
        return f"<RecipeQuery(q={self.q!r}, sort_by={self.sort_by})>"


class Candidate:
    """A raw recipe that passed the filters, with its durations parsed once."""

    def __init__(self, recipe: RawRecipe) -> None:
        self.recipe = recipe
        self.prep_minutes = parse_minutes(recipe.prep_time)
        self.cook_minutes = parse_minutes(recipe.cook_time)

    @property
    def total_minutes(self) -> int:
        return self.prep_minutes + self.cook_minutes

    @property
    def difficulty_rank(self) -> int | None:
        if not self.recipe.difficulty:
            return None
        return DIFFICULTY_RANK.get(self.recipe.difficulty.lower())


def name_key(name: str) -> tuple[str, str, str]:
    """Sort key: base letters, then accents, then lowercase before uppercase."""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), name.casefold(), name.swapcase()


def matches_text(recipe: RawRecipe, q: str) -> bool:
    if not q:
        return True
    s = q.lower()
    return s in recipe.title.lower() or s in recipe.description.lower()


def matches_tags(recipe: RawRecipe, tags: list[str]) -> bool:
    if not tags:
        return True
    have = {tag.lower() for tag in recipe.tags}
    return any(tag.lower() in have for tag in tags)


def matches_ingredients(
    recipe: RawRecipe,
    requested: list[str],
    name_to_id: Mapping[str, str],
) -> bool:
    if not requested:
        return True
    have = {line.ingredient_id for line in recipe.ingredients}
    for wanted in requested:
        norm = wanted.lower().strip()
        ingredient_id = norm if norm in have else name_to_id.get(norm)
        if ingredient_id is None or ingredient_id not in have:
            return False
    return True


def matches_difficulty(recipe: RawRecipe, difficulty: str) -> bool:
    if not difficulty:
        return True
    return (recipe.difficulty or "").lower() == difficulty.lower()


def in_time_bucket(total_minutes: int, preset: str) -> bool:
    match preset:
        case "<15":
            return total_minutes < 15
        case "15-30":
            return 15 <= total_minutes <= 30
        case "30-60":
            return 30 < total_minutes <= 60
        case ">60":
            return total_minutes > 60
        case _:
            return True


def is_favorite(recipe: RawRecipe, favorites: frozenset[str]) -> bool:
    # favoritesOnly with nothing favorited matches nothing.
    return bool(favorites) and recipe.id in favorites


SORT_KEYS: dict[str, Callable[[Candidate], Any]] = {
    "name": lambda c: name_key(c.recipe.title),
    "prepTimeMinutes": lambda c: c.prep_minutes,
    "cookTimeMinutes": lambda c: c.cook_minutes,
}


def sort_candidates(
    candidates: list[Candidate],
    *,
    sort_by: str,
    descending: bool,
) -> list[Candidate]:
    if sort_by == "difficulty":
        known = [c for c in candidates if c.difficulty_rank is not None]
        unknown = [c for c in candidates if c.difficulty_rank is None]
        known.sort(key=lambda c: c.difficulty_rank, reverse=descending)
        return known + unknown

    key = SORT_KEYS.get(sort_by)
    if key is None:
        return candidates
    return sorted(candidates, key=key, reverse=descending)


def filter_recipes(
    recipes: Iterable[RawRecipe],
    ingredient_index: IngredientIndex,
    query: RecipeQuery,
) -> list[Candidate]:
    name_to_id = {
        ingredient.name.lower(): ingredient_id
        for ingredient_id, ingredient in ingredient_index.items()
    }
    candidates: list[Candidate] = []
    for recipe in recipes:
        if not matches_text(recipe, query.q):
            continue
        if not matches_tags(recipe, query.tags):
            continue
        if not matches_ingredients(recipe, query.ingredients, name_to_id):
            continue
        if not matches_difficulty(recipe, query.difficulty):
            continue
        if query.favorites_only and not is_favorite(recipe, query.favorites):
            continue
        candidate = Candidate(recipe)
        if not in_time_bucket(candidate.total_minutes, query.time_preset):
            continue
        candidates.append(candidate)
    return candidates


def search_recipes(
    recipes: Iterable[RawRecipe],
    ingredient_index: IngredientIndex,
    query: RecipeQuery,
) -> RecipePage:
    candidates = filter_recipes(recipes, ingredient_index, query)
    candidates = sort_candidates(
        candidates,
        sort_by=query.sort_by,
        descending=query.descending,
    )

    start = max(0, query.offset)
    end = max(start, start + query.limit)
    page = candidates[start:end]
    logger.debug("%r matched %d recipes", query, len(candidates))

    return RecipePage(
        total=len(candidates),
        items=[normalize_recipe(c.recipe, ingredient_index) for c in page],
    )


def recipe_facets(recipes: Iterable[NormalizedRecipe]) -> dict[str, list[str]]:
    """Distinct tags and ingredient ids across `recipes`, for filter choices."""
    tags: set[str] = set()
    ingredients: set[str] = set()
    for recipe in recipes:
        tags.update(recipe.tags)
        ingredients.update(line.ingredient_id for line in recipe.ingredients)
    return {
        "tags": sorted(tags, key=name_key),
        "ingredients": sorted(ingredients, key=name_key),
    }
