from pathlib import Path

import pytest
from starlette.testclient import TestClient

from app.app import create_app
from app.config import Config
from larder.llm_service import LLMService
from larder.repository import RecipeRepository

from tests.fakes import FakeCompletions, fake_openai_client


DATA_PATH = Path(__file__).parent / "data" / "recipes.json"


@pytest.fixture
def client(repository: RecipeRepository) -> TestClient:
    return TestClient(create_app(repository=repository, llm=LLMService()))


def test_list_recipes(client: TestClient) -> None:
    resp = client.get("/recipes", params={"tags": "vegan", "sortBy": "name"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert [r["id"] for r in data["items"]] == ["salad", "tomato-soup"]
    assert data["items"][1]["cookTimeMinutes"] == 60


def test_list_recipes_favorites_only_without_favorites(client: TestClient) -> None:
    resp = client.get("/recipes", params={"favoritesOnly": "1", "favorites": ""})
    assert resp.json() == {"total": 0, "items": []}


def test_recipe_detail(client: TestClient) -> None:
    resp = client.get("/recipes/pancakes")
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Pancakes"
    assert data["nutritionTotal"]["calories"] == 951


def test_recipe_detail_not_found(client: TestClient) -> None:
    resp = client.get("/recipes/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Recipe not found"}


def test_facets(client: TestClient) -> None:
    resp = client.get("/facets", params={"q": "bread"})
    assert resp.json() == {"tags": ["baking"], "ingredients": ["flour", "salt"]}


def test_shopping_list(client: TestClient) -> None:
    resp = client.post("/shopping-list", json={"recipeIds": ["pancakes", "bread"]})
    assert resp.status_code == 200
    data = resp.json()
    assert data["llm"] is False
    flour = next(i for i in data["items"] if i["name"] == "Flour")
    assert flour["unit"] == ""
    assert flour["notes"] == "Multiple units used: cup, g"


@pytest.mark.parametrize(
    "kwargs",
    (
        {"json": {"recipeIds": []}},
        {"json": {}},
        {"content": b"not json"},
    ),
)
def test_shopping_list_empty_selection(client: TestClient, kwargs: dict) -> None:
    resp = client.post("/shopping-list", **kwargs)
    assert resp.status_code == 200
    assert resp.json() == {"items": [], "llm": False}


def test_shopping_list_with_llm(repository: RecipeRepository) -> None:
    reply = '[{"name": "Bread flour", "quantity": 1, "unit": "kg"}]'
    completions = FakeCompletions(content=reply)
    llm = LLMService(fake_openai_client(completions))
    client = TestClient(create_app(repository=repository, llm=llm))
    resp = client.post("/shopping-list", json={"recipeIds": ["bread"]})
    assert resp.json() == {
        "items": [{"name": "Bread flour", "quantity": 1, "unit": "kg"}],
        "llm": True,
    }


def test_unexpected_error_is_generic(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    def boom(*args: object, **kwargs: object) -> None:
        raise RuntimeError("secret internals")

    monkeypatch.setattr("app.app.list_recipes", boom)
    resp = client.get("/recipes")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert "secret" not in resp.text


def test_lifespan_loads_dataset() -> None:
    settings = Config(data_path=DATA_PATH, openai_api_key=None)
    with TestClient(create_app(settings=settings)) as client:
        resp = client.get("/health")
    assert resp.json() == {"status": "ok", "recipes": 5}
