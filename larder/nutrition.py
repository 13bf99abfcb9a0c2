from larder.models import (
    NUTRIENTS,
    IngredientIndex,
    NormalizedRecipe,
    NutritionTotal,
    RawRecipe,
)
from larder.parsing import parse_amount, parse_minutes, parse_number, round_half_up


def compute_nutrition_total(
    recipe: RawRecipe,
    ingredient_index: IngredientIndex,
) -> NutritionTotal:
    totals = dict.fromkeys(NUTRIENTS, 0.0)
    for line in recipe.ingredients:
        ingredient = ingredient_index.get(line.ingredient_id)
        if ingredient is None or not ingredient.nutrition:
            continue
        # An amount we cannot read counts as one unit.
        amount = parse_amount(line.amount)
        multiplier = 1.0 if amount is None else amount
        for nutrient in NUTRIENTS:
            per_unit = parse_number(ingredient.nutrition.get(nutrient))
            if per_unit is None:
                continue
            totals[nutrient] += per_unit * multiplier

    return NutritionTotal(
        **{nutrient: round_half_up(total, 1) for nutrient, total in totals.items()}
    )


def normalize_recipe(
    recipe: RawRecipe,
    ingredient_index: IngredientIndex,
) -> NormalizedRecipe:
    return NormalizedRecipe(
        id=recipe.id,
        name=recipe.title,
        description=recipe.description,
        servings=recipe.servings,
        prep_time_minutes=parse_minutes(recipe.prep_time),
        cook_time_minutes=parse_minutes(recipe.cook_time),
        difficulty=recipe.difficulty,
        tags=list(recipe.tags),
        ingredients=list(recipe.ingredients),
        instructions=list(recipe.instructions),
        nutrition_total=compute_nutrition_total(recipe, ingredient_index),
        image_url=recipe.image_url,
    )
