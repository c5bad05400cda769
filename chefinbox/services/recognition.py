"""Ingredient recognition: one captured image in, ingredient names out."""

import asyncio
from typing import Optional

from google import genai
from google.genai import types

from chefinbox.models.models import IngredientRecognitionResponse
from chefinbox.models.schemas import INGREDIENT_RECOGNITION_SCHEMA
from chefinbox.prompts.prompts import get_recognition_prompt
from chefinbox.services.gemini import generate_json, get_gemini_client
from chefinbox.services.images import compress_image, validate_image
from chefinbox.utils.config import config
from chefinbox.utils.exceptions import AnalysisFailure
from chefinbox.utils.logger import logger


async def identify_ingredients_from_image(
    image_bytes: bytes,
    mime_type: str,
    client: Optional[genai.Client] = None,
) -> list[str]:
    """Ask Gemini which food ingredients are visible in an image.

    Names come back in the configured RESPONSE_LANGUAGE, in model order, and
    are not deduplicated (the registry does that).

    Args:
        image_bytes: Encoded still image (JPEG or PNG).
        mime_type: Media type of ``image_bytes``.
        client: Gemini client; defaults to the shared one.

    Returns:
        list[str]: Ingredient names. Empty when the response has no
        ``ingredients`` field.

    Raises:
        InvalidImageError: The image violates the input constraints.
        AnalysisFailure: Transport error, malformed JSON or schema violation.
    """
    mime_type = validate_image(image_bytes, mime_type)
    # Pillow work stays off the event loop
    payload, payload_mime = await asyncio.to_thread(compress_image, image_bytes, mime_type)

    try:
        client = client or get_gemini_client()
        data = await generate_json(
            client,
            config.IMAGE_DETECTION_MODEL,
            [
                types.Part.from_bytes(data=payload, mime_type=payload_mime),
                get_recognition_prompt(config.RESPONSE_LANGUAGE),
            ],
            INGREDIENT_RECOGNITION_SCHEMA,
        )
        result = IngredientRecognitionResponse.model_validate(data)
    except Exception as e:
        logger.error(f"Ingredient recognition failed: {e}")
        raise AnalysisFailure(f"Ingredient recognition failed: {e}") from e

    logger.info(f"Recognised {len(result.ingredients)} ingredient(s) in image")
    return result.ingredients
