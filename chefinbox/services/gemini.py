"""Shared Gemini transport helpers.

- get_gemini_client(): lazily built, validated ``genai.Client``
- parse_json_object(): lenient JSON parsing of a model response
- generate_json(): one schema-constrained ``generate_content`` call

Errors are not translated here; the recognition and generation clients wrap
them into their own failure types.
"""

import asyncio
import json
import re
from typing import Any, Optional

from google import genai
from google.genai import types

from chefinbox.utils.config import config
from chefinbox.utils.logger import logger

_client: Optional[genai.Client] = None


def get_gemini_client() -> genai.Client:
    """Return the process-wide Gemini client, creating it on first use.

    Raises:
        ConfigurationError: If the configuration is invalid (e.g. no API key).
    """
    global _client
    if _client is None:
        config.validate()
        http_options = None
        if config.REQUEST_TIMEOUT_SECONDS is not None:
            # HttpOptions.timeout is expressed in milliseconds
            http_options = types.HttpOptions(timeout=int(config.REQUEST_TIMEOUT_SECONDS * 1000))
        _client = genai.Client(api_key=config.GEMINI_API_KEY, http_options=http_options)
        logger.debug("Gemini client initialised")
    return _client


def reset_gemini_client() -> None:
    """Drop the cached client so the next call picks up new configuration."""
    global _client
    _client = None


def parse_json_object(response_text: Optional[str]) -> dict:
    """Parse the JSON object out of a Gemini response.

    Tries a direct ``json.loads`` first, then falls back to extracting the
    outermost ``{...}`` span (the model occasionally wraps JSON in a code fence).

    Raises:
        ValueError: If no JSON object can be parsed. ``json.JSONDecodeError``
            is a ``ValueError`` subclass and propagates as-is.
    """
    text = (response_text or "").strip()
    if not text:
        raise ValueError("Empty response from Gemini")

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", text, re.DOTALL)
        if not match:
            raise
        logger.debug("Direct JSON parse failed, using extracted object")
        parsed = json.loads(match.group())

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object at top level, got {type(parsed).__name__}")
    return parsed


async def generate_json(
    client: genai.Client,
    model: str,
    contents: Any,
    response_schema: types.Schema,
) -> dict:
    """Run one JSON-constrained ``generate_content`` call and parse the result.

    The SDK client is synchronous, so the call runs in a worker thread and the
    event loop stays free while the request is in flight.

    Args:
        client: Gemini client.
        model: Model name.
        contents: Prompt text or list of parts.
        response_schema: Schema the model output must follow.

    Returns:
        dict: Top-level JSON object of the response.
    """
    generation_config = types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=response_schema,
        temperature=config.TEMPERATURE,
        max_output_tokens=config.MAX_OUTPUT_TOKENS,
    )
    response = await asyncio.to_thread(
        client.models.generate_content,
        model=model,
        contents=contents,
        config=generation_config,
    )
    return parse_json_object(response.text)
