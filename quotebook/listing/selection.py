"""Selection state for a list in selection mode."""

from collections.abc import Iterable


class SelectionSet:
    """Set of selected entity IDs."""

    def __init__(self):
        self._ids: set[str] = set()

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def toggle(self, entity_id: str) -> bool:
        """Flip membership of one ID.

        Returns:
            True if the ID is selected afterwards
        """
        if entity_id in self._ids:
            self._ids.remove(entity_id)
            return False
        self._ids.add(entity_id)
        return True

    def contains_all(self, entity_ids: Iterable[str]) -> bool:
        return all(entity_id in self._ids for entity_id in entity_ids)

    def select_all(self, entity_ids: Iterable[str]) -> None:
        self._ids.update(entity_ids)

    def unselect_all(self, entity_ids: Iterable[str]) -> None:
        self._ids.difference_update(entity_ids)

    def invert(self, visible_ids: Iterable[str]) -> None:
        """Complement the selection against the visible IDs."""
        self._ids.symmetric_difference_update(set(visible_ids))

    def retain(self, visible_ids: Iterable[str]) -> None:
        """Drop IDs that are no longer visible."""
        self._ids.intersection_update(set(visible_ids))

    def clear(self) -> None:
        self._ids.clear()
