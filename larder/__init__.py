"""Recipes, nutrition and shopping lists over a read-only dataset.

Everything in here is a plain function of the `RecipeRepository` snapshot it is
given. The only I/O is loading that snapshot and the optional OpenAI call in
`LLMService`.
"""
