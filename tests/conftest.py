from pathlib import Path

import pytest

from larder.repository import RecipeRepository


DATA_PATH = Path(__file__).parent / "data" / "recipes.json"


@pytest.fixture
def repository() -> RecipeRepository:
    return RecipeRepository.from_path(DATA_PATH)
