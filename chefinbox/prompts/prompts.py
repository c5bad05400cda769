"""Prompts for the two Gemini calls.

Factory functions so language, cuisine and recipe count stay configurable
while the rules themselves are fixed.
"""


def get_recognition_prompt(language: str) -> str:
    """Instruction sent alongside the captured image.

    Args:
        language: Language the ingredient names must be written in.

    Returns:
        str: Prompt text for the recognition call.
    """
    return (
        "Analyse this image and identify all the visible food ingredients. "
        f"Return only a list of ingredient names in {language}, without descriptions."
    )


def get_generation_prompt(
    ingredients: list[str],
    servings: int,
    language: str,
    cuisine: str,
    recipe_count: int,
) -> str:
    """Instruction for the recipe generation call.

    Every rule here is mandatory for the model: quantities scaled to
    ``servings``, classic dishes of ``cuisine`` only, supplied ingredients may
    be skipped, essential missing ones must be added (scaled as well).

    Args:
        ingredients: Ingredient names from the registry, in insertion order.
        servings: Number of people the quantities must be computed for.
        language: Language the whole answer must be written in.
        cuisine: Classic regional tradition the dishes must belong to.
        recipe_count: How many recipes to suggest.

    Returns:
        str: Prompt text for the generation call.
    """
    ingredient_list = ", ".join(ingredients)
    return f"""You are an expert in classic {cuisine} cooking.
Suggest {recipe_count} recipes from the CLASSIC {cuisine.upper()} TRADITION based on this list of ingredients: {ingredient_list}.

MANDATORY RULES:
1. SCALE THE QUANTITIES: every ingredient quantity must be calculated exactly for {servings} people.
2. Suggest only dishes that belong to the classic {cuisine} tradition.
3. A recipe does NOT need to use ALL the supplied ingredients. Use only those relevant to the classic recipe.
4. If ingredients essential to the classic version are missing, include them anyway in the list, with quantities for {servings} people.
5. For each recipe, provide an image URL (imageUrl) specific to the dish.
6. Set servings to {servings} for every recipe.
7. Answer exclusively in {language}."""
