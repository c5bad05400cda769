"""Configuration management for ChefInBox.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv

from chefinbox.utils.exceptions import ConfigurationError


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Recipe generation model
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")
        # Image Detection Model: may differ from the recipe model for cost reasons
        self.IMAGE_DETECTION_MODEL: str = os.getenv("IMAGE_DETECTION_MODEL", "gemini-3-flash-preview")
        # Number of recipes requested per generation call. Default: 3
        self.RECIPE_COUNT: int = int(os.getenv("RECIPE_COUNT", "3"))
        # Serving count a new session starts with. Default: 2
        self.DEFAULT_SERVINGS: int = int(os.getenv("DEFAULT_SERVINGS", "2"))
        # Language the model must answer in (ingredient names and recipes)
        self.RESPONSE_LANGUAGE: str = os.getenv("RESPONSE_LANGUAGE", "Italian")
        # Classic regional tradition the suggested recipes must belong to
        self.CUISINE: str = os.getenv("CUISINE", "Italian")
        # LLM Model Parameters
        # Temperature: Controls randomness (0.0 = deterministic, 1.0 = max randomness)
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.2"))
        # Max Output Tokens: three full recipes need more room than a single one
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "8192"))
        # Maximum image size (in MB) that can be processed. Default: 5 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
        # Image Compression: Enable/disable JPEG recompression before upload
        self.COMPRESS_IMG: bool = _env_bool("COMPRESS_IMG", "true")
        # Image Compression Threshold: Only compress images larger than this (in KB)
        self.COMPRESS_IMG_THRESHOLD_KB: int = int(os.getenv("COMPRESS_IMG_THRESHOLD_KB", "300"))
        # Transport timeout for Gemini calls, in seconds. Unset = client default
        timeout = os.getenv("REQUEST_TIMEOUT_SECONDS")
        self.REQUEST_TIMEOUT_SECONDS: Optional[float] = float(timeout) if timeout else None

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ConfigurationError: If required API keys are missing or invalid values provided.
        """
        if not self.GEMINI_API_KEY:
            raise ConfigurationError("GEMINI_API_KEY environment variable is required")
        if self.RECIPE_COUNT < 1:
            raise ConfigurationError(f"RECIPE_COUNT must be at least 1, got: {self.RECIPE_COUNT}")
        if not (1 <= self.DEFAULT_SERVINGS <= 12):
            raise ConfigurationError(
                f"DEFAULT_SERVINGS must be between 1 and 12, got: {self.DEFAULT_SERVINGS}"
            )
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ConfigurationError(
                f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ConfigurationError(
                f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}"
            )
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ConfigurationError(
                f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}"
            )
        if self.REQUEST_TIMEOUT_SECONDS is not None and self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ConfigurationError(
                f"REQUEST_TIMEOUT_SECONDS must be positive, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )


# Module-level config instance; validated lazily when the Gemini client is built
config = Config()
