"""Selectable, sectioned list controller.

The controller is the headless state behind a list screen. It holds a live
query (search term + sort → predicate + ordering), tracks whether the list is
browsing or selecting, and routes user actions to the handlers the caller
wired in. An action whose handler is missing does not exist at all: it is not
listed among the available actions and invoking it raises
`ActionUnavailableError`.

Handlers for bulk actions receive a tuple snapshot of the selected entities
in view order, so later selection changes never reach a running operation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

from quotebook.core.exceptions import ActionUnavailableError
from quotebook.core.sorting import Section, SortDefinition, SortRegistry
from quotebook.storage.live import LiveQuery
from quotebook.storage.query import Predicate, all_of, text_filter

from .selection import SelectionSet

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIRM_TITLE = "Are you sure?"
DEFAULT_DELETE_MESSAGE = "This action cannot be undone!"
DEFAULT_MOVE_MESSAGE = "Are you sure you want to move this item?"


class ListMode(Enum):
    """Interaction state of a list."""

    BROWSING = "browsing"
    SELECTING = "selecting"


class RowAction(str, Enum):
    """Per-row actions while browsing."""

    EDIT = "edit"
    MOVE = "move"
    DELETE = "delete"


class BulkAction(str, Enum):
    """Actions over the selection while selecting."""

    EDIT = "edit"
    MOVE = "move"
    DELETE = "delete"
    EXPORT = "export"


class Confirm(Protocol):
    """Asks the user to confirm a destructive action."""

    def __call__(self, title: str, message: str) -> bool: ...


QueryFactory = Callable[[type, Predicate | None, SortDefinition], LiveQuery]
ExitSelection = Callable[[], None]


@dataclass
class ListHandlers(Generic[T]):
    """Caller-supplied behavior of a list; None means the action is absent."""

    open: Callable[[T], Any] | None = None
    add: Callable[[], Any] | None = None

    edit: Callable[[T], Any] | None = None
    move: Callable[[T], Any] | None = None
    move_message: Callable[[T], str] = lambda _: DEFAULT_MOVE_MESSAGE
    delete: Callable[[T], Any] | None = None
    delete_message: Callable[[T], str] = lambda _: DEFAULT_DELETE_MESSAGE

    bulk_edit: Callable[[tuple[T, ...], ExitSelection], Any] | None = None
    bulk_move: Callable[[tuple[T, ...], ExitSelection], Any] | None = None
    bulk_delete: Callable[[tuple[T, ...]], Any] | None = None
    bulk_delete_message: Callable[[tuple[T, ...]], str] = (
        lambda _: DEFAULT_DELETE_MESSAGE
    )
    bulk_export: Callable[[tuple[T, ...]], Any] | None = None


class SelectableListController(Generic[T]):
    """Browsing/selecting state machine over a live sectioned query."""

    def __init__(
        self,
        title: str,
        entity_type: type,
        query: QueryFactory,
        registry: SortRegistry,
        handlers: ListHandlers[T] | None = None,
        confirm: Confirm | None = None,
        base_predicate: Predicate | None = None,
        search_fields: tuple[str, ...] = (),
        scope: str | None = None,
    ):
        """Initialize controller and open the initial query.

        Args:
            title: Title shown while browsing
            entity_type: Type of the listed entities
            query: Opens a live query, usually ``QuoteStore.query``
            registry: Sort registry holding the sort options
            handlers: Wired actions
            confirm: Prompt used before destructive actions
            base_predicate: Scope filter, e.g. one collection
            search_fields: Fields matched by the search term
            scope: Preference scope for the remembered sort
        """
        self._title = title
        self.entity_type = entity_type
        self.registry = registry
        self.handlers = handlers or ListHandlers()
        self.confirm = confirm
        self.base_predicate = base_predicate
        self.search_fields = search_fields
        self.scope = scope

        self._query_factory = query
        self._mode = ListMode.BROWSING
        self._selection = SelectionSet()
        self._search_term = ""
        self._sort = registry.get_user_default(entity_type, scope)
        self._listeners: list[Callable[[SelectableListController[T]], None]] = []
        self._results: LiveQuery | None = None
        self._unsubscribe_results: Callable[[], None] | None = None

        self._requery()

    # State

    @property
    def mode(self) -> ListMode:
        return self._mode

    @property
    def in_selection_mode(self) -> bool:
        return self._mode is ListMode.SELECTING

    @property
    def title(self) -> str:
        if self.in_selection_mode:
            return f"{len(self._selection)} Selected"
        return self._title

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def sort(self) -> SortDefinition:
        return self._sort

    @property
    def sort_options(self) -> tuple[SortDefinition, ...]:
        return self.registry.list_sorts(self.entity_type)

    @property
    def predicate(self) -> Predicate | None:
        """Scope filter ANDed with the search filter."""
        return all_of(
            self.base_predicate, text_filter(self._search_term, self.search_fields)
        )

    @property
    def sections(self) -> list[Section[T]]:
        return self._require_results().sections

    @property
    def entities(self) -> list[T]:
        return self._require_results().entities

    def is_empty(self) -> bool:
        return self._require_results().is_empty()

    @property
    def can_enter_selection(self) -> bool:
        return not self.in_selection_mode and not self.is_empty()

    @property
    def can_add(self) -> bool:
        return not self.in_selection_mode and self.handlers.add is not None

    @property
    def selected_ids(self) -> frozenset[str]:
        return self._selection.ids

    @property
    def selected_count(self) -> int:
        return len(self._selection)

    def is_selected(self, entity: T) -> bool:
        return entity.id in self._selection

    def is_section_selected(self, section_id: str) -> bool:
        """True when every entity of the section is selected."""
        section = self._require_section(section_id)
        return self._selection.contains_all(entity.id for entity in section)

    def snapshot(self) -> tuple[T, ...]:
        """Selected entities in view order, detached from the live selection."""
        return tuple(e for e in self.entities if e.id in self._selection)

    # Observers

    def subscribe(
        self, listener: Callable[[SelectableListController[T]], None]
    ) -> Callable[[], None]:
        """Register a listener called after every state change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # Query

    def set_search_term(self, term: str) -> None:
        """Filter the list by a search term; empty shows the full scope."""
        if term == self._search_term:
            return
        self._search_term = term
        self._requery()
        self._notify()

    def select_sort(self, sort: SortDefinition | str) -> SortDefinition:
        """Switch to another sort and remember it for this scope.

        Raises:
            ValueError: If no sort with that name is registered
        """
        if isinstance(sort, str):
            found = self.registry.get(self.entity_type, sort)
            if found is None:
                raise ValueError(f"Unknown sort: {sort}")
            sort = found

        self._sort = sort
        self.registry.set_user_default(sort, self.scope)
        self._requery()
        self._notify()
        return sort

    def _requery(self) -> None:
        self._close_results()
        self._results = self._query_factory(self.entity_type, self.predicate, self._sort)
        self._unsubscribe_results = self._results.subscribe(self._on_results_changed)
        self._selection.retain(e.id for e in self._results.entities)

    def _on_results_changed(self, results: LiveQuery) -> None:
        self._selection.retain(e.id for e in results.entities)
        self._notify()

    def _close_results(self) -> None:
        if self._unsubscribe_results is not None:
            self._unsubscribe_results()
            self._unsubscribe_results = None
        if self._results is not None:
            self._results.close()
            self._results = None

    def close(self) -> None:
        """Release the live query."""
        self._close_results()
        self._listeners.clear()

    def _require_results(self) -> LiveQuery:
        if self._results is None:
            raise RuntimeError("List controller is closed")
        return self._results

    def _require_section(self, section_id: str) -> Section[T]:
        section = self._require_results().section(section_id)
        if section is None:
            raise KeyError(f"No section {section_id!r}")
        return section

    # Mode transitions

    def enter_selection(self) -> None:
        """Switch to selection mode with an empty selection."""
        if not self.can_enter_selection:
            raise ActionUnavailableError("select", "nothing to select")
        self._selection.clear()
        self._mode = ListMode.SELECTING
        logger.debug("%s: entered selection mode", self._title)
        self._notify()

    def exit_selection(self) -> None:
        """Return to browsing and clear the selection."""
        self._selection.clear()
        self._mode = ListMode.BROWSING
        logger.debug("%s: exited selection mode", self._title)
        self._notify()

    # Row and section activation

    def activate(self, entity: T) -> Any:
        """Handle a tap on a row.

        Browsing opens the entity's page; selecting toggles membership.

        Returns:
            Whatever the open handler returns while browsing, else None
        """
        if self.in_selection_mode:
            self.toggle(entity)
            return None
        if self.handlers.open is None:
            return None
        return self.handlers.open(entity)

    def toggle(self, entity: T) -> bool:
        """Flip one entity's selection.

        Returns:
            True if selected afterwards
        """
        self._require_selecting("toggle")
        selected = self._selection.toggle(entity.id)
        self._notify()
        return selected

    def activate_section(self, section_id: str) -> None:
        """Select a whole section, or unselect it when fully selected."""
        self._require_selecting("select section")
        ids = [entity.id for entity in self._require_section(section_id)]
        if self._selection.contains_all(ids):
            self._selection.unselect_all(ids)
        else:
            self._selection.select_all(ids)
        self._notify()

    def invert_selection(self) -> None:
        """Complement the selection against every visible entity."""
        self._require_selecting("invert")
        self._selection.invert(e.id for e in self.entities)
        self._notify()

    def _require_selecting(self, action: str) -> None:
        if not self.in_selection_mode:
            raise ActionUnavailableError(action, "not in selection mode")

    # Single-row actions

    def row_actions(self) -> list[RowAction]:
        """Row actions that exist for this list while browsing."""
        if self.in_selection_mode:
            return []
        wired = {
            RowAction.EDIT: self.handlers.edit,
            RowAction.MOVE: self.handlers.move,
            RowAction.DELETE: self.handlers.delete,
        }
        return [action for action, handler in wired.items() if handler is not None]

    def _require_row_action(self, action: RowAction) -> Callable[[T], Any]:
        if action not in self.row_actions():
            raise ActionUnavailableError(action.value, "not available")
        return getattr(self.handlers, action.value)

    def _confirm(self, action: str, message: str) -> bool:
        if self.confirm is None:
            raise ActionUnavailableError(action, "no confirmation prompt configured")
        return bool(self.confirm(CONFIRM_TITLE, message))

    def edit(self, entity: T) -> Any:
        """Invoke the edit handler for one entity."""
        return self._require_row_action(RowAction.EDIT)(entity)

    def move(self, entity: T) -> bool:
        """Confirm, then invoke the move handler for one entity.

        Returns:
            False when the user cancelled
        """
        handler = self._require_row_action(RowAction.MOVE)
        if not self._confirm("move", self.handlers.move_message(entity)):
            return False
        handler(entity)
        return True

    def delete(self, entity: T) -> bool:
        """Confirm, then invoke the delete handler for one entity.

        Returns:
            False when the user cancelled
        """
        handler = self._require_row_action(RowAction.DELETE)
        if not self._confirm("delete", self.handlers.delete_message(entity)):
            return False
        handler(entity)
        return True

    # Bulk actions

    def bulk_actions(self) -> dict[BulkAction, bool]:
        """Bulk actions that exist for this list, mapped to whether enabled."""
        if not self.in_selection_mode:
            return {}
        enabled = bool(self._selection)
        wired = {
            BulkAction.EDIT: self.handlers.bulk_edit,
            BulkAction.MOVE: self.handlers.bulk_move,
            BulkAction.DELETE: self.handlers.bulk_delete,
            BulkAction.EXPORT: self.handlers.bulk_export,
        }
        return {
            action: enabled for action, handler in wired.items() if handler is not None
        }

    def _require_bulk_action(self, action: BulkAction) -> Callable[..., Any]:
        available = self.bulk_actions()
        if action not in available:
            raise ActionUnavailableError(f"bulk {action.value}", "not available")
        if not available[action]:
            raise ActionUnavailableError(f"bulk {action.value}", "nothing selected")
        return getattr(self.handlers, f"bulk_{action.value}")

    def bulk_edit(self) -> Any:
        """Hand the selection to the bulk edit handler.

        The handler also receives ``exit_selection`` to call once done.
        """
        handler = self._require_bulk_action(BulkAction.EDIT)
        return handler(self.snapshot(), self.exit_selection)

    def bulk_move(self) -> Any:
        """Hand the selection to the bulk move handler."""
        handler = self._require_bulk_action(BulkAction.MOVE)
        return handler(self.snapshot(), self.exit_selection)

    def bulk_delete(self) -> bool:
        """Confirm, delete the selection and leave selection mode.

        Returns:
            False when the user cancelled
        """
        handler = self._require_bulk_action(BulkAction.DELETE)
        snapshot = self.snapshot()
        if not self._confirm("bulk delete", self.handlers.bulk_delete_message(snapshot)):
            return False
        handler(snapshot)
        self.exit_selection()
        return True

    def bulk_export(self) -> Any:
        """Build an export document from the selection."""
        handler = self._require_bulk_action(BulkAction.EXPORT)
        return handler(self.snapshot())
