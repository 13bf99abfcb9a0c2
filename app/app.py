import contextlib
import functools
import logging
from typing import Any, AsyncIterator, Awaitable, Callable

from rich.logging import RichHandler
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from app import config
from larder.llm_service import LLMService
from larder.query import RecipeQuery
from larder.repository import RecipeNotFound, RecipeRepository
from larder.services import (
    create_shopping_list,
    get_recipe,
    list_facets,
    list_recipes,
    recipe_ids_from_body,
)


CONFIG = config.Config()


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def aJSONResponse(route: Callable[[Request], Awaitable[Any | tuple[Any, int]]]):
    @functools.wraps(route)
    async def wrapper(request: Request) -> JSONResponse:
        try:
            resp = await route(request)
        except RecipeNotFound:
            return JSONResponse({"error": "Recipe not found"}, status_code=404)
        except Exception:
            logger.exception("%s %s failed", request.method, request.url.path)
            return JSONResponse({"error": "Internal server error"}, status_code=500)
        if not isinstance(resp, tuple):
            data, code = resp, 200
        else:
            data, code = resp  # pyright: ignore[reportUnknownVariableType]
        return JSONResponse(data, status_code=code)

    return wrapper


@aJSONResponse
async def health(request: Request) -> dict[str, Any]:
    repo: RecipeRepository = request.app.state.repo
    return {"status": "ok", "recipes": len(repo)}


@aJSONResponse
async def recipes(request: Request) -> dict[str, Any]:
    query = RecipeQuery.from_params(request.query_params)
    page = list_recipes(query, repository=request.app.state.repo)
    return page.to_dict()


@aJSONResponse
async def recipe_detail(request: Request) -> dict[str, Any]:
    id = request.path_params["id"]
    recipe = get_recipe(id, repository=request.app.state.repo)
    return recipe.to_dict()


@aJSONResponse
async def facets(request: Request) -> dict[str, list[str]]:
    query = RecipeQuery.from_params(request.query_params)
    return list_facets(query, repository=request.app.state.repo)


@aJSONResponse
async def shopping_list(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        body = {}
    repo: RecipeRepository = request.app.state.repo
    llm: LLMService = request.app.state.llm
    result = await create_shopping_list(
        recipe_ids_from_body(body),
        repository=repo,
        llm=llm,
    )
    return result.to_dict()


def create_app(
    *,
    repository: RecipeRepository | None = None,
    llm: LLMService | None = None,
    settings: config.Config | None = None,
) -> Starlette:
    settings = CONFIG if settings is None else settings

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        if repository is None:
            app.state.repo = RecipeRepository.from_path(settings.data_path)
        if not app.state.llm.enabled:
            logger.info("OPENAI_API_KEY not set, shopping lists will not be normalized")
        yield

    app = Starlette(
        debug=True if settings.env == config.Env.local else False,
        routes=[
            Route("/health", health),
            Route("/recipes", recipes),
            Route("/recipes/{id}", recipe_detail),
            Route("/facets", facets),
            Route("/shopping-list", shopping_list, methods=["POST"]),
        ],
        lifespan=lifespan,
    )

    if repository is not None:
        app.state.repo = repository
    app.state.llm = (
        LLMService(api_key=settings.openai_api_key, model=settings.openai_model)
        if llm is None
        else llm
    )
    return app


app = create_app()
