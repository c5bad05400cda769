"""Unit tests for the shared Gemini transport helpers."""

import json
from unittest.mock import patch

import pytest
from google.genai import types

from chefinbox.models.schemas import INGREDIENT_RECOGNITION_SCHEMA
from chefinbox.services.gemini import generate_json, get_gemini_client, parse_json_object
from chefinbox.utils.config import config
from chefinbox.utils.exceptions import ConfigurationError


class TestParseJsonObject:
    """Lenient JSON parsing of model responses."""

    def test_valid_json(self):
        assert parse_json_object('{"ingredients": ["Uovo"]}') == {"ingredients": ["Uovo"]}

    def test_surrounding_whitespace(self):
        assert parse_json_object('\n  {"recipes": []}  \n') == {"recipes": []}

    def test_code_fenced_json(self):
        text = '```json\n{"ingredients": ["Farina"]}\n```'
        assert parse_json_object(text) == {"ingredients": ["Farina"]}

    def test_malformed_json(self):
        with pytest.raises(json.JSONDecodeError):
            parse_json_object('{"ingredients": ["Uovo"')

    def test_not_json(self):
        with pytest.raises(ValueError):
            parse_json_object("Sorry, I cannot help with that.")

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty(self, text):
        with pytest.raises(ValueError, match="Empty"):
            parse_json_object(text)

    @pytest.mark.parametrize("text", ['["Uovo", "Farina"]', '"Uovo"', "42", "null"])
    def test_top_level_must_be_object(self, text):
        with pytest.raises(ValueError, match="JSON object"):
            parse_json_object(text)


class TestGenerateJson:
    """One schema-constrained generate_content call."""

    @pytest.mark.asyncio
    async def test_sends_schema_and_returns_object(self, gemini_client):
        client = gemini_client({"ingredients": ["Uovo"]})

        result = await generate_json(client, "test-model", ["part"], INGREDIENT_RECOGNITION_SCHEMA)

        assert result == {"ingredients": ["Uovo"]}
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["contents"] == ["part"]
        sent_config = kwargs["config"]
        assert isinstance(sent_config, types.GenerateContentConfig)
        assert sent_config.response_mime_type == "application/json"
        assert sent_config.response_schema == INGREDIENT_RECOGNITION_SCHEMA
        assert sent_config.temperature == config.TEMPERATURE
        assert sent_config.max_output_tokens == config.MAX_OUTPUT_TOKENS

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, gemini_client):
        client = gemini_client(error=ConnectionError("network down"))
        with pytest.raises(ConnectionError):
            await generate_json(client, "test-model", "prompt", INGREDIENT_RECOGNITION_SCHEMA)


class TestGetGeminiClient:
    """Lazy, validated client construction."""

    def test_missing_api_key(self):
        with patch.object(config, "GEMINI_API_KEY", ""):
            with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
                get_gemini_client()

    @patch("chefinbox.services.gemini.genai.Client")
    def test_builds_client_once(self, mock_client_cls):
        with patch.object(config, "GEMINI_API_KEY", "test_key"), patch.object(config, "REQUEST_TIMEOUT_SECONDS", None):
            first = get_gemini_client()
            second = get_gemini_client()

        assert first is second
        mock_client_cls.assert_called_once_with(api_key="test_key", http_options=None)

    @patch("chefinbox.services.gemini.genai.Client")
    def test_timeout_forwarded_in_milliseconds(self, mock_client_cls):
        with patch.object(config, "GEMINI_API_KEY", "test_key"), patch.object(config, "REQUEST_TIMEOUT_SECONDS", 7.5):
            get_gemini_client()

        http_options = mock_client_cls.call_args.kwargs["http_options"]
        assert http_options.timeout == 7500
