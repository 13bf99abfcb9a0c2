JSON_ONLY_PROMPT = "You return only valid JSON."


SHOPPING_LIST_PROMPT = """
You are helping generate a concise grocery list.
Merge lines that refer to the same item, normalize units when possible,
and output a JSON array of items with {{ name, quantity, unit, notes? }}.
Lines:
{lines}"""


def shopping_list_prompt(lines: list[str]) -> str:
    return SHOPPING_LIST_PROMPT.format(lines="\n".join(lines)).strip()
