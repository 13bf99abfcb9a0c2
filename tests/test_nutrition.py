from larder.models import Ingredient, IngredientLine, RawRecipe
from larder.nutrition import compute_nutrition_total, normalize_recipe
from larder.parsing import parse_minutes
from larder.query import Candidate
from larder.repository import RecipeRepository, build_ingredient_index


FLOUR = Ingredient(
    id="flour",
    name="Flour",
    nutrition={"calories": 100, "protein": 3, "carbs": 20, "fat": 1},
)


def recipe_with(*lines: IngredientLine) -> RawRecipe:
    return RawRecipe(id="r", title="R", ingredients=list(lines))


def test_amount_scales_nutrition() -> None:
    recipe = recipe_with(IngredientLine(ingredient_id="flour", amount="2", unit="cup"))
    got = compute_nutrition_total(recipe, build_ingredient_index([FLOUR]))
    assert got.to_dict() == {"calories": 200, "protein": 6, "carbs": 40, "fat": 2}


def test_missing_ingredient_contributes_nothing() -> None:
    recipe = recipe_with(
        IngredientLine(ingredient_id="flour", amount="1", unit="cup"),
        IngredientLine(ingredient_id="unobtainium", amount="5", unit="g"),
    )
    got = compute_nutrition_total(recipe, build_ingredient_index([FLOUR]))
    assert got.calories == 100


def test_unparseable_amount_counts_as_one_unit() -> None:
    recipe = recipe_with(IngredientLine(ingredient_id="flour", amount="some", unit=""))
    got = compute_nutrition_total(recipe, build_ingredient_index([FLOUR]))
    assert got.calories == 100


def test_ingredient_without_nutrition_is_skipped() -> None:
    salt = Ingredient(id="salt", name="Salt")
    recipe = recipe_with(IngredientLine(ingredient_id="salt", amount="10", unit="g"))
    got = compute_nutrition_total(recipe, build_ingredient_index([salt]))
    assert got.to_dict() == {"calories": 0, "protein": 0, "carbs": 0, "fat": 0}


def test_totals_are_rounded_to_one_decimal() -> None:
    oil = Ingredient(id="oil", name="Oil", nutrition={"calories": 1.25, "fat": 0.333})
    recipe = recipe_with(IngredientLine(ingredient_id="oil", amount="3", unit="ml"))
    got = compute_nutrition_total(recipe, build_ingredient_index([oil]))
    assert got.calories == 3.8
    assert got.fat == 1.0


def test_dataset_totals(repository: RecipeRepository) -> None:
    pancakes = compute_nutrition_total(
        repository.get("pancakes"), repository.ingredient_index
    )
    assert pancakes.calories == 951
    assert pancakes.fat == 13.1

    # "splash" of milk counts once, the unknown ingredient not at all.
    omelette = compute_nutrition_total(
        repository.get("omelette"), repository.ingredient_index
    )
    assert omelette.calories == 258
    assert omelette.fat == 15.4


def test_build_ingredient_index_last_write_wins() -> None:
    first = Ingredient(id="egg", name="Egg")
    second = Ingredient(id="egg", name="Hen's egg")
    got = build_ingredient_index([first, second])
    assert got == {"egg": second}
    assert build_ingredient_index(None) == {}


def test_normalize_recipe(repository: RecipeRepository) -> None:
    got = normalize_recipe(repository.get("bread"), repository.ingredient_index)
    exp = {
        "id": "bread",
        "name": "Rustic Bread",
        "description": "Crusty loaf",
        "servings": 8,
        "prepTimeMinutes": 90,
        "cookTimeMinutes": 45,
        "difficulty": "hard",
        "tags": ["baking"],
        "ingredients": [
            {"ingredientId": "flour", "amount": "500", "unit": "g"},
            {"ingredientId": "salt", "amount": "10", "unit": "g"},
        ],
        "instructions": ["Knead.", "Prove.", "Bake."],
        "nutritionTotal": {
            "calories": 182000.0,
            "protein": 5150.0,
            "carbs": 38150.0,
            "fat": 500.0,
        },
    }
    assert got.to_dict() == exp


def test_normalize_recipe_defaults() -> None:
    raw = RawRecipe.from_dict({"id": "bare", "title": "Bare"})
    got = normalize_recipe(raw, {}).to_dict()
    assert got["prepTimeMinutes"] == 0
    assert got["cookTimeMinutes"] == 0
    assert got["tags"] == []
    assert got["ingredients"] == []
    assert got["instructions"] == []
    assert "difficulty" not in got


def test_normalized_total_time_matches_filter(repository: RecipeRepository) -> None:
    for raw in repository.list():
        normalized = normalize_recipe(raw, repository.ingredient_index)
        assert normalized.total_time_minutes == Candidate(raw).total_minutes
        assert normalized.prep_time_minutes == parse_minutes(raw.prep_time)
