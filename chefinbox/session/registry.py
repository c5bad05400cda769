"""In-memory ingredient registry with case-insensitive deduplication."""

from typing import Iterator, Optional

from chefinbox.models.models import Ingredient


class IngredientRegistry:
    """The user's working set of ingredients, in insertion order.

    No two entries share a name case-insensitively; adding a name that is
    already present is a no-op.
    """

    def __init__(self) -> None:
        self._items: list[Ingredient] = []

    def add(self, name: str) -> Optional[Ingredient]:
        """Add ``name`` unless an equal name (ignoring case) is present.

        Returns:
            The new Ingredient, or None when the name was a duplicate.

        Raises:
            ValueError: If ``name`` is blank.
        """
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValueError("Ingredient name must not be blank")
        if cleaned.casefold() in self:
            return None
        ingredient = Ingredient(name=cleaned)
        self._items.append(ingredient)
        return ingredient

    def merge(self, names: list[str]) -> list[Ingredient]:
        """Add each name with the dedup rule, skipping blanks.

        Returns:
            The entries actually added, in order.
        """
        added = []
        for name in names:
            if not name or not name.strip():
                continue
            ingredient = self.add(name)
            if ingredient is not None:
                added.append(ingredient)
        return added

    def remove(self, ingredient_id: str) -> bool:
        """Remove the entry with ``ingredient_id``; False if there is none."""
        for idx, item in enumerate(self._items):
            if item.id == ingredient_id:
                del self._items[idx]
                return True
        return False

    def clear(self) -> None:
        self._items.clear()

    def names(self) -> list[str]:
        return [item.name for item in self._items]

    def items(self) -> list[Ingredient]:
        return list(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.strip().casefold()
        return any(item.key == key for item in self._items)

    def __iter__(self) -> Iterator[Ingredient]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
