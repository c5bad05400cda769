"""Recipe session: owns the ingredient registry, the serving count and the
analysis/generation state machine.

Transition table::

    Idle/ResultsReady/*Error --request_analysis-->   Analyzing
    Analyzing                --success-->            Idle            (names merged into registry)
    Analyzing                --AnalysisFailure-->    AnalysisError
    Idle/ResultsReady/*Error --request_generation--> Generating      (registry must be non-empty)
    Generating               --success-->            ResultsReady    (batch replaced wholesale)
    Generating               --GenerationFailure-->  GenerationError (previous batch kept)
    Analyzing/Generating     --cancelled-->          Idle            (registry and batch untouched)
    AnalysisError/GenerationError --dismiss_error--> Idle
    any non-busy state       --clear_ingredients-->  Idle

Only one model request may be outstanding at a time, whatever its kind.
Starting a second one raises RequestInProgressError and leaves the session
untouched. The busy check and the transition happen before the first await,
so on a single event loop they cannot interleave.
"""

import uuid
from typing import Awaitable, Callable, Optional

from chefinbox.models.models import Ingredient, Recipe, SessionSnapshot, SessionState
from chefinbox.services.generation import get_recipes_from_ingredients
from chefinbox.services.recognition import identify_ingredients_from_image
from chefinbox.session.registry import IngredientRegistry
from chefinbox.utils.config import config
from chefinbox.utils.exceptions import AnalysisFailure, GenerationFailure, RequestInProgressError
from chefinbox.utils.logger import logger

MIN_SERVINGS = 1
MAX_SERVINGS = 12

ANALYSIS_ERROR_MESSAGE = "Error while analysing the image. Please try again."
GENERATION_ERROR_MESSAGE = "Oops! Something went wrong while generating the recipes. Please try again."

Recognizer = Callable[[bytes, str], Awaitable[list[str]]]
RecipeGenerator = Callable[[list[str], int], Awaitable[list[Recipe]]]
StateListener = Callable[[SessionState, SessionState], None]


def clamp_servings(value: int) -> int:
    return max(MIN_SERVINGS, min(MAX_SERVINGS, value))


class RecipeSession:
    """One user's recipe suggestion session.

    Args:
        recognizer: Async ``(image_bytes, mime_type) -> names``; defaults to
            the Gemini recognition client.
        generator: Async ``(names, servings) -> recipes``; defaults to the
            Gemini generation client.
        servings: Initial serving count (clamped); defaults to DEFAULT_SERVINGS.
        session_id: Identifier used in logs; generated when omitted.
    """

    def __init__(
        self,
        recognizer: Optional[Recognizer] = None,
        generator: Optional[RecipeGenerator] = None,
        servings: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.registry = IngredientRegistry()
        self._recognizer = recognizer or identify_ingredients_from_image
        self._generator = generator or get_recipes_from_ingredients
        self._servings = clamp_servings(config.DEFAULT_SERVINGS if servings is None else servings)
        self._state = SessionState.IDLE
        self._recipes: list[Recipe] = []
        self._error: Optional[str] = None
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def servings(self) -> int:
        return self._servings

    @property
    def recipes(self) -> list[Recipe]:
        return list(self._recipes)

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def ingredients(self) -> list[Ingredient]:
        return self.registry.items()

    @property
    def is_analyzing(self) -> bool:
        return self._state == SessionState.ANALYZING

    @property
    def is_generating(self) -> bool:
        return self._state == SessionState.GENERATING

    @property
    def is_busy(self) -> bool:
        return self._state.is_busy

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            state=self._state,
            servings=self._servings,
            ingredients=self.registry.items(),
            recipes=self.recipes,
            error=self._error,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener(previous, current)`` on every state transition.

        Returns:
            A function that unsubscribes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Synchronous edits
    # ------------------------------------------------------------------

    def add_ingredient(self, name: str) -> Optional[Ingredient]:
        """Add an ingredient by name; blanks and case-insensitive duplicates are ignored."""
        if not name or not name.strip():
            logger.debug("Ignoring blank ingredient name", extra=self._log_context())
            return None
        ingredient = self.registry.add(name)
        if ingredient is None:
            logger.debug(f"Ingredient already present: {name.strip()}", extra=self._log_context())
        return ingredient

    def remove_ingredient(self, ingredient_id: str) -> bool:
        return self.registry.remove(ingredient_id)

    def clear_ingredients(self) -> None:
        """Empty the registry; a non-busy session also returns to Idle."""
        self.registry.clear()
        if not self.is_busy and self._state != SessionState.IDLE:
            self._error = None
            self._transition(SessionState.IDLE)

    def set_servings(self, delta: int) -> int:
        """Shift the serving count by ``delta``, clamped to [1, 12]."""
        self._servings = clamp_servings(self._servings + delta)
        return self._servings

    def dismiss_error(self) -> None:
        """Acknowledge the last error and return to Idle."""
        if self._state in (SessionState.ANALYSIS_ERROR, SessionState.GENERATION_ERROR):
            self._error = None
            self._transition(SessionState.IDLE)

    # ------------------------------------------------------------------
    # Model requests
    # ------------------------------------------------------------------

    async def request_analysis(self, image_bytes: bytes, mime_type: str) -> list[Ingredient]:
        """Recognise ingredients in a captured image and merge them into the registry.

        Returns:
            The ingredients that were actually added (duplicates skipped).
            Empty on failure; the registry is then left untouched.

        Raises:
            RequestInProgressError: Another request is outstanding.
        """
        self._begin("analysis", SessionState.ANALYZING)
        try:
            names = await self._recognizer(image_bytes, mime_type)
        except AnalysisFailure as e:
            self._fail(SessionState.ANALYSIS_ERROR, ANALYSIS_ERROR_MESSAGE, e)
            return []
        except Exception as e:
            self._fail(SessionState.ANALYSIS_ERROR, ANALYSIS_ERROR_MESSAGE, e)
            raise
        except BaseException:
            self._abort("analysis")
            raise

        added = self.registry.merge(names)
        logger.info(
            f"Image analysis added {len(added)} of {len(names)} detected ingredient(s)",
            extra=self._log_context(),
        )
        self._transition(SessionState.IDLE)
        return added

    async def request_generation(self) -> Optional[list[Recipe]]:
        """Generate a new recipe batch from the registry and the serving count.

        Returns:
            The new batch, or None when nothing was done (empty registry) or
            the call failed. A failure keeps the previous batch.

        Raises:
            RequestInProgressError: Another request is outstanding.
        """
        if not len(self.registry):
            logger.debug("Generation requested with no ingredients, ignoring", extra=self._log_context())
            return None

        self._begin("generation", SessionState.GENERATING)
        names = self.registry.names()
        servings = self._servings
        try:
            recipes = await self._generator(names, servings)
        except GenerationFailure as e:
            self._fail(SessionState.GENERATION_ERROR, GENERATION_ERROR_MESSAGE, e)
            return None
        except Exception as e:
            self._fail(SessionState.GENERATION_ERROR, GENERATION_ERROR_MESSAGE, e)
            raise
        except BaseException:
            self._abort("generation")
            raise

        self._recipes = list(recipes)
        logger.info(
            f"Received {len(self._recipes)} recipe(s) for {servings} serving(s)",
            extra=self._log_context(),
        )
        self._transition(SessionState.RESULTS_READY)
        return self.recipes

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _log_context(self) -> dict:
        return {"session_id": self.session_id, "state": self._state.value}

    def _begin(self, operation: str, busy_state: SessionState) -> None:
        if self.is_busy:
            raise RequestInProgressError(operation, self._state.value)
        self._error = None
        self._transition(busy_state)

    def _fail(self, error_state: SessionState, message: str, exc: Exception) -> None:
        logger.warning(f"{error_state.value}: {exc}", extra=self._log_context())
        self._error = message
        self._transition(error_state)

    def _abort(self, operation: str) -> None:
        logger.warning(f"{operation.capitalize()} request cancelled", extra=self._log_context())
        self._transition(SessionState.IDLE)

    def _transition(self, new_state: SessionState) -> None:
        previous = self._state
        self._state = new_state
        logger.debug(f"State {previous.value} -> {new_state.value}", extra=self._log_context())
        for listener in list(self._listeners):
            try:
                listener(previous, new_state)
            except Exception:
                # listener errors never interrupt a transition
                logger.exception("State listener failed", extra=self._log_context())
