"""Gemini response schemas.

Declared to the model through ``response_schema`` so its JSON output is
structurally constrained. Parsing on our side is done by the Pydantic models
in ``chefinbox.models.models``.
"""

from google.genai import types

from chefinbox.models.models import Difficulty


INGREDIENT_RECOGNITION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "ingredients": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="Names of the food ingredients visible in the image",
        ),
    },
    required=["ingredients"],
)


def recipe_batch_schema(servings: int) -> types.Schema:
    """Build the recipe batch schema; field descriptions mention the serving count."""
    recipe = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": types.Schema(type=types.Type.STRING, description="Name of the classic dish"),
            "description": types.Schema(type=types.Type.STRING, description="Short description of the dish"),
            "ingredients": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
                description=f"Ingredient list with quantities for {servings} people",
            ),
            "instructions": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
                description="Preparation steps, in order",
            ),
            "prepTime": types.Schema(type=types.Type.STRING),
            "difficulty": types.Schema(
                type=types.Type.STRING,
                enum=[level.value for level in Difficulty],
            ),
            "calories": types.Schema(type=types.Type.STRING),
            "imageUrl": types.Schema(type=types.Type.STRING),
            "servings": types.Schema(
                type=types.Type.INTEGER,
                description="Number of people the quantities are computed for",
            ),
        },
        required=[
            "title",
            "description",
            "ingredients",
            "instructions",
            "prepTime",
            "difficulty",
            "imageUrl",
            "servings",
        ],
    )
    return types.Schema(
        type=types.Type.OBJECT,
        properties={"recipes": types.Schema(type=types.Type.ARRAY, items=recipe)},
        required=["recipes"],
    )
