import json
import logging
import re
from typing import Any

import openai

from larder.aopenai import DEFAULT_MODEL, openai_client_factory, quick_chat
from larder.models import ShoppingItem, ShoppingList
from larder.prompts import JSON_ONLY_PROMPT, shopping_list_prompt


logger = logging.getLogger(__name__)


CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    match = CODE_FENCE_RE.match(text.strip())
    return match.group(1) if match else text


class LLMService:
    """Optional OpenAI clean up of generated shopping lists.

    Without an API key (or an injected client) the service is disabled and
    lists pass through untouched.
    """

    def __init__(
        self,
        openai_client: openai.AsyncClient | None = None,
        *,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.2,
    ) -> None:
        self.openai_client = (
            openai_client_factory(api_key) if openai_client is None else openai_client
        )
        self.model = model
        self.temperature = temperature

    @property
    def enabled(self) -> bool:
        return self.openai_client is not None

    async def qa(self, q: str, *, system: str | None = None) -> str:
        if self.openai_client is None:
            raise RuntimeError("No OpenAI client configured.")
        return await quick_chat(
            q,
            openai_client=self.openai_client,
            system=system,
            model=self.model,
            temperature=self.temperature,
        )

    async def normalize_shopping_list(self, items: list[ShoppingItem]) -> ShoppingList:
        """Ask the model to merge and tidy `items`, falling back to them as is."""
        if not self.enabled:
            logger.debug("No OpenAI client, returning the shopping list as is")
            return ShoppingList.from_items(items)

        try:
            ans = await self.qa(
                shopping_list_prompt([item.line for item in items]),
                system=JSON_ONLY_PROMPT,
            )
            parsed: Any = json.loads(strip_code_fence(ans) or "[]")
        except Exception:
            logger.exception("Shopping list normalization failed")
            return ShoppingList.from_items(items)

        if not isinstance(parsed, list):
            logger.warning(
                "Shopping list normalization returned %s, not a list",
                type(parsed).__name__,
            )
            return ShoppingList.from_items(items)

        logger.info("Normalized %d shopping items into %d", len(items), len(parsed))
        return ShoppingList(items=parsed, llm=True)  # pyright: ignore[reportUnknownArgumentType]
