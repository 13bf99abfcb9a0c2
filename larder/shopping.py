from collections.abc import Iterable

from larder.models import IngredientIndex, RawRecipe, ShoppingItem
from larder.parsing import parse_amount, round_half_up
from larder.query import name_key


class _Tally:
    def __init__(self, name: str) -> None:
        self.name = name
        self.quantity = 0.0
        # dict as an ordered set, units in first-seen order
        self.units: dict[str, None] = {}

    def add(self, quantity: float, unit: str) -> None:
        self.quantity += quantity
        self.units.setdefault(unit)

    def to_item(self) -> ShoppingItem:
        units = list(self.units)
        mixed = len(units) > 1
        return ShoppingItem(
            name=self.name,
            quantity=round_half_up(self.quantity, 2),
            unit="" if mixed else units[0],
            notes=f"Multiple units used: {', '.join(units)}" if mixed else None,
        )


def aggregate_ingredients(
    recipes: Iterable[RawRecipe],
    ingredient_index: IngredientIndex,
) -> list[ShoppingItem]:
    """Merge the ingredient lines of `recipes` into one item per ingredient."""
    tallies: dict[str, _Tally] = {}
    for recipe in recipes:
        for line in recipe.ingredients:
            tally = tallies.get(line.ingredient_id)
            if tally is None:
                ingredient = ingredient_index.get(line.ingredient_id)
                name = ingredient.name if ingredient else line.ingredient_id
                tally = tallies[line.ingredient_id] = _Tally(name)
            # Unlike nutrition, an amount we cannot read adds nothing here.
            tally.add(parse_amount(line.amount) or 0.0, line.unit)

    items = [tally.to_item() for tally in tallies.values()]
    items.sort(key=lambda item: name_key(item.name))
    return items
