"""Recipe generation: ingredient names and a serving count in, a recipe batch out."""

from typing import Optional

from google import genai
from pydantic import ValidationError

from chefinbox.models.models import Recipe, RecipeBatchResponse
from chefinbox.models.schemas import recipe_batch_schema
from chefinbox.prompts.prompts import get_generation_prompt
from chefinbox.services.gemini import generate_json, get_gemini_client
from chefinbox.utils.config import config
from chefinbox.utils.exceptions import GenerationFailure
from chefinbox.utils.logger import logger


def parse_recipe_batch(data: dict) -> list[Recipe]:
    """Turn the top-level response object into a list of recipes.

    A missing ``recipes`` field gives an empty batch. Individual records that
    fail validation are dropped with a warning; the rest are returned as-is
    (``servings`` is echoed, never corrected).

    Raises:
        ValidationError: ``recipes`` is present but not a list.
    """
    batch = RecipeBatchResponse.model_validate(data)

    recipes: list[Recipe] = []
    for idx, record in enumerate(batch.recipes):
        try:
            recipes.append(Recipe.model_validate(record))
        except ValidationError as e:
            logger.warning(f"Dropping malformed recipe #{idx + 1}: {e.error_count()} validation error(s)")
            logger.debug(f"Malformed recipe #{idx + 1}: {e}")
    return recipes


async def get_recipes_from_ingredients(
    ingredients: list[str],
    servings: int,
    client: Optional[genai.Client] = None,
) -> list[Recipe]:
    """Ask Gemini for a batch of classic recipes scaled to ``servings``.

    Requests RECIPE_COUNT recipes of the configured CUISINE; the batch may not
    use every supplied ingredient and may add essential missing ones.

    Args:
        ingredients: Non-empty list of ingredient names.
        servings: Positive serving count (callers clamp it to [1, 12]).
        client: Gemini client; defaults to the shared one.

    Returns:
        list[Recipe]: The batch, possibly empty.

    Raises:
        ValueError: Empty ingredient list or non-positive serving count.
        GenerationFailure: Transport error or malformed top-level JSON.
    """
    if not ingredients:
        raise ValueError("At least one ingredient is required to generate recipes")
    if servings < 1:
        raise ValueError(f"servings must be a positive integer, got: {servings}")

    prompt = get_generation_prompt(
        ingredients,
        servings,
        language=config.RESPONSE_LANGUAGE,
        cuisine=config.CUISINE,
        recipe_count=config.RECIPE_COUNT,
    )

    try:
        client = client or get_gemini_client()
        data = await generate_json(client, config.GEMINI_MODEL, prompt, recipe_batch_schema(servings))
        recipes = parse_recipe_batch(data)
    except Exception as e:
        logger.error(f"Recipe generation failed: {e}")
        raise GenerationFailure(f"Recipe generation failed: {e}") from e

    logger.info(f"Generated {len(recipes)} recipe(s) for {servings} serving(s)")
    return recipes
