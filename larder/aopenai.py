import openai
from openai.types.chat import ChatCompletionMessageParam


DEFAULT_MODEL = "gpt-4o-mini"


def openai_client_factory(api_key: str | None = None) -> openai.AsyncClient | None:
    """An OpenAI client for `api_key`, or `None` when there is no key."""
    if not api_key:
        return None
    return openai.AsyncClient(api_key=api_key)


async def quick_chat(
    msg: str,
    *,
    openai_client: openai.AsyncClient,
    system: str | None = None,
    model: str | None = None,
    temperature: float = 1.0,
) -> str:
    model = DEFAULT_MODEL if model is None else model
    messages: list[ChatCompletionMessageParam] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": msg})
    resp = await openai_client.chat.completions.create(
        model=model,
        messages=messages,
        temperature=temperature,
    )
    ans = resp.choices[0].message.content or ""
    return ans.strip()
