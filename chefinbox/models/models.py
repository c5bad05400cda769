"""Data models for the recipe suggestion session.

Pydantic v2 models for the domain objects (ingredients, recipes), the raw
top-level shapes returned by Gemini, and the read-only session snapshot
handed to the presentation layer.
"""

import uuid
from enum import Enum
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Difficulty(str, Enum):
    """Difficulty levels a generated recipe may declare."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class SessionState(str, Enum):
    """States of the recipe session state machine."""

    IDLE = "Idle"
    ANALYZING = "Analyzing"
    ANALYSIS_ERROR = "AnalysisError"
    GENERATING = "Generating"
    GENERATION_ERROR = "GenerationError"
    RESULTS_READY = "ResultsReady"

    @property
    def is_busy(self) -> bool:
        return self in (SessionState.ANALYZING, SessionState.GENERATING)


def _new_ingredient_id() -> str:
    return uuid.uuid4().hex


class Ingredient(BaseModel):
    """An entry of the user's working ingredient set.

    The id is generated locally and is only used to address the entry for
    removal; uniqueness across the registry is by name (case-insensitive).
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: Annotated[str, Field(default_factory=_new_ingredient_id, description="Opaque local identifier")]
    name: Annotated[str, Field(min_length=1, description="Ingredient name as entered or detected")]

    @property
    def key(self) -> str:
        """Case-insensitive identity used for deduplication."""
        return self.name.casefold()


class Recipe(BaseModel):
    """A generated recipe, already scaled to the requested serving count.

    Field names follow Python conventions; the camelCase wire names used in
    the Gemini response schema (``prepTime``, ``imageUrl``) are accepted as
    aliases and used when dumping with ``by_alias=True``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: Annotated[str, Field(min_length=1, description="Name of the classic dish")]
    description: Annotated[str, Field(description="Short description of the dish")]
    ingredients: Annotated[List[str], Field(description="Ingredient lines with quantities for the requested servings")]
    instructions: Annotated[List[str], Field(description="Ordered preparation steps")]
    prep_time: Annotated[str, Field(alias="prepTime", description="Free-text preparation time")]
    difficulty: Difficulty
    calories: Annotated[Optional[str], Field(None, description="Optional free-text calorie estimate")]
    image_url: Annotated[str, Field(alias="imageUrl", description="Illustrative image URL, not guaranteed to resolve")]
    servings: Annotated[int, Field(ge=1, description="Serving count the quantities were computed for")]


class IngredientRecognitionResponse(BaseModel):
    """Top-level JSON object returned by the recognition call.

    A missing or null ``ingredients`` field becomes an empty list; any other
    value that is not a list of strings fails validation.
    """

    ingredients: Annotated[List[str], Field(default_factory=list)]

    @field_validator("ingredients", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class RecipeBatchResponse(BaseModel):
    """Top-level JSON object returned by the generation call.

    A missing or null ``recipes`` field becomes an empty batch. Records are
    kept raw here; they are validated one by one into ``Recipe``
    so a single malformed record does not sink the whole batch.
    """

    recipes: Annotated[List[Any], Field(default_factory=list)]

    @field_validator("recipes", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class SessionSnapshot(BaseModel):
    """Immutable view of a session, published to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    state: SessionState
    servings: int
    ingredients: List[Ingredient]
    recipes: List[Recipe]
    error: Optional[str] = None

    @property
    def is_analyzing(self) -> bool:
        return self.state == SessionState.ANALYZING

    @property
    def is_generating(self) -> bool:
        return self.state == SessionState.GENERATING
