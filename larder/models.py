from typing import Any, Self, TypeAlias


Amount: TypeAlias = str | int | float
IngredientIndex: TypeAlias = "dict[str, Ingredient]"


DIFFICULTIES = ("easy", "medium", "hard")
NUTRIENTS = ("calories", "protein", "carbs", "fat")


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]  # pyright: ignore[reportUnknownVariableType]


class Ingredient:
    def __init__(
        self,
        *,
        id: str,
        name: str,
        nutrition: dict[str, Any] | None = None,
    ) -> None:
        self.id = id
        self.name = name
        self.nutrition = nutrition

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        ingredient_id = str(data.get("id", ""))
        nutrition = data.get("nutrition")
        return cls(
            id=ingredient_id,
            name=str(data.get("name") or ingredient_id),
            nutrition=nutrition if isinstance(nutrition, dict) else None,
        )

    def __repr__(self) -> str:
        return f"<Ingredient(id={self.id}, name={self.name})>"


class IngredientLine:
    def __init__(self, *, ingredient_id: str, amount: Amount, unit: str) -> None:
        self.ingredient_id = ingredient_id
        self.amount = amount
        self.unit = unit

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        amount = data.get("amount")
        return cls(
            ingredient_id=str(data.get("ingredientId", "")),
            amount="" if amount is None else amount,
            unit=str(data.get("unit") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "ingredientId": self.ingredient_id,
            "amount": self.amount,
            "unit": self.unit,
        }


class RawRecipe:
    """A recipe as it is stored in the dataset."""

    def __init__(
        self,
        *,
        id: str,
        title: str,
        description: str = "",
        servings: int | None = None,
        prep_time: str | None = None,
        cook_time: str | None = None,
        difficulty: str | None = None,
        tags: list[str] | None = None,
        ingredients: list[IngredientLine] | None = None,
        instructions: list[str] | None = None,
        image_url: str | None = None,
    ) -> None:
        self.id = id
        self.title = title
        self.description = description
        self.servings = servings
        self.prep_time = prep_time
        self.cook_time = cook_time
        self.difficulty = difficulty
        self.tags = [] if tags is None else tags
        self.ingredients = [] if ingredients is None else ingredients
        self.instructions = [] if instructions is None else instructions
        self.image_url = image_url

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        lines = data.get("ingredients")
        lines = lines if isinstance(lines, list) else []
        prep_time = data.get("prepTime")
        cook_time = data.get("cookTime")
        difficulty = data.get("difficulty")
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            servings=data.get("servings"),
            prep_time=None if prep_time is None else str(prep_time),
            cook_time=None if cook_time is None else str(cook_time),
            difficulty=str(difficulty) if difficulty else None,
            tags=_str_list(data.get("tags")),
            ingredients=[
                IngredientLine.from_dict(line)  # pyright: ignore[reportUnknownArgumentType]
                for line in lines  # pyright: ignore[reportUnknownVariableType]
                if isinstance(line, dict)
            ],
            instructions=_str_list(data.get("instructions")),
            image_url=data.get("imageUrl"),
        )

    def __repr__(self) -> str:
        return f"<RawRecipe(id={self.id}, title={self.title})>"


class NutritionTotal:
    def __init__(
        self,
        *,
        calories: float = 0,
        protein: float = 0,
        carbs: float = 0,
        fat: float = 0,
    ) -> None:
        self.calories = calories
        self.protein = protein
        self.carbs = carbs
        self.fat = fat

    def to_dict(self) -> dict[str, float]:
        return {nutrient: getattr(self, nutrient) for nutrient in NUTRIENTS}


class NormalizedRecipe:
    """The public shape of a recipe, derived per request."""

    def __init__(
        self,
        *,
        id: str,
        name: str,
        description: str,
        servings: int | None,
        prep_time_minutes: int,
        cook_time_minutes: int,
        difficulty: str | None,
        tags: list[str],
        ingredients: list[IngredientLine],
        instructions: list[str],
        nutrition_total: NutritionTotal,
        image_url: str | None = None,
    ) -> None:
        self.id = id
        self.name = name
        self.description = description
        self.servings = servings
        self.prep_time_minutes = prep_time_minutes
        self.cook_time_minutes = cook_time_minutes
        self.difficulty = difficulty
        self.tags = tags
        self.ingredients = ingredients
        self.instructions = instructions
        self.nutrition_total = nutrition_total
        self.image_url = image_url

    @property
    def total_time_minutes(self) -> int:
        return self.prep_time_minutes + self.cook_time_minutes

    def __repr__(self) -> str:
        return f"<NormalizedRecipe(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "servings": self.servings,
            "prepTimeMinutes": self.prep_time_minutes,
            "cookTimeMinutes": self.cook_time_minutes,
            "tags": list(self.tags),
            "ingredients": [line.to_dict() for line in self.ingredients],
            "instructions": list(self.instructions),
            "nutritionTotal": self.nutrition_total.to_dict(),
        }
        if self.difficulty is not None:
            data["difficulty"] = self.difficulty
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        return data


class RecipePage:
    def __init__(self, *, total: int, items: list[NormalizedRecipe]) -> None:
        self.total = total
        self.items = items

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "items": [r.to_dict() for r in self.items]}


class ShoppingItem:
    def __init__(
        self,
        *,
        name: str,
        quantity: float,
        unit: str,
        notes: str | None = None,
    ) -> None:
        self.name = name
        self.quantity = quantity
        self.unit = unit
        self.notes = notes

    def __repr__(self) -> str:
        return f"<ShoppingItem(name={self.name}, quantity={self.quantity})>"

    @property
    def line(self) -> str:
        """One `quantity unit name` line, blank parts dropped."""
        quantity = ""
        if self.quantity:
            quantity = f"{self.quantity:.2f}".rstrip("0").rstrip(".")
        return " ".join(p for p in (quantity, self.unit, self.name) if p)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data


class ShoppingList:
    def __init__(self, *, items: list[dict[str, Any]], llm: bool) -> None:
        self.items = items
        self.llm = llm

    @classmethod
    def from_items(cls, items: list[ShoppingItem]) -> Self:
        return cls(items=[i.to_dict() for i in items], llm=False)

    def to_dict(self) -> dict[str, Any]:
        return {"items": self.items, "llm": self.llm}
