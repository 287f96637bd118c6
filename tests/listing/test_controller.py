"""Tests for the selectable, sectioned list controller."""

from unittest.mock import Mock

import pytest

from quotebook.core.exceptions import ActionUnavailableError
from quotebook.core.models import Quote
from quotebook.listing.controller import (
    CONFIRM_TITLE,
    DEFAULT_DELETE_MESSAGE,
    BulkAction,
    ListHandlers,
    ListMode,
    RowAction,
    SelectableListController,
)
from quotebook.storage.query import QUOTE_SEARCH_FIELDS, quote_predicate


def make_controller(store, registry, collection, handlers=None, confirm=None):
    return SelectableListController(
        title=collection.name,
        entity_type=Quote,
        query=store.query,
        registry=registry,
        handlers=handlers,
        confirm=confirm,
        base_predicate=quote_predicate(collection.id),
        search_fields=QUOTE_SEARCH_FIELDS,
        scope=collection.id,
    )


@pytest.fixture
def handlers():
    """Every action wired to a mock."""
    return ListHandlers(
        open=Mock(return_value="page"),
        add=Mock(),
        edit=Mock(),
        move=Mock(),
        delete=Mock(),
        bulk_edit=Mock(),
        bulk_move=Mock(),
        bulk_delete=Mock(),
        bulk_export=Mock(return_value="document"),
    )


@pytest.fixture
def confirm():
    return Mock(return_value=True)


@pytest.fixture
def controller(store, registry, stoics, handlers, confirm):
    """Controller over 'Stoics', sorted by tags so that A precedes B."""
    collection = stoics[0]
    registry.set_user_default(registry.get(Quote, "Tags (A-Z)"), collection.id)
    controller = make_controller(store, registry, collection, handlers, confirm)
    yield controller
    controller.close()


class TestBrowsing:
    """Test the initial browsing state."""

    def test_initial_state(self, controller):
        assert controller.mode is ListMode.BROWSING
        assert controller.title == "Stoics"
        assert controller.selected_count == 0
        assert controller.can_enter_selection
        assert controller.can_add

    def test_sections_follow_sort(self, controller, stoics):
        _, memento, amor = stoics

        assert [(s.id, s.items) for s in controller.sections] == [
            ("NONE", (memento,)),
            ("PHILOSOPHY", (amor,)),
        ]

    def test_default_sort_for_fresh_scope(self, store, registry, stoics):
        controller = make_controller(store, registry, stoics[0])

        assert controller.sort.name == "Date Created (Newest)"
        controller.close()

    def test_activate_opens_page(self, controller, handlers, stoics):
        assert controller.activate(stoics[1]) == "page"
        handlers.open.assert_called_once_with(stoics[1])
        assert controller.mode is ListMode.BROWSING

    def test_activate_without_open_handler(self, store, registry, stoics):
        controller = make_controller(store, registry, stoics[0])

        assert controller.activate(stoics[1]) is None
        controller.close()

    def test_cannot_select_empty_list(self, store, registry):
        collection = store.create_collection("Empty")
        controller = make_controller(store, registry, collection)

        assert not controller.can_enter_selection
        with pytest.raises(ActionUnavailableError):
            controller.enter_selection()
        controller.close()


class TestSearchAndSort:
    """Test re-querying by search term and sort."""

    def test_search(self, controller, stoics):
        controller.set_search_term("amor")

        assert controller.entities == [stoics[2]]
        assert controller.search_term == "amor"

    def test_search_matches_tags(self, controller, stoics):
        controller.set_search_term("PHILO")

        assert controller.entities == [stoics[2]]

    def test_search_ignores_diacritics(self, store, controller, stoics):
        cafe = store.create_quote(stoics[0].id, "Un café, s'il vous plaît")

        controller.set_search_term("cafe")

        assert controller.entities == [cafe]

    def test_clearing_search_shows_scope(self, controller):
        controller.set_search_term("amor")
        controller.set_search_term("")

        assert len(controller.entities) == 2

    def test_select_sort_persists_for_scope(self, controller, registry, stoics):
        controller.select_sort("Text (A-Z)")

        assert [q.text for q in controller.entities] == ["Amor fati", "Memento mori"]
        assert registry.get_user_default(Quote, stoics[0].id).name == "Text (A-Z)"
        assert registry.get_user_default(Quote).name == "Date Created (Newest)"

    def test_select_unknown_sort(self, controller):
        with pytest.raises(ValueError):
            controller.select_sort("Nope")
        assert controller.sort.name == "Tags (A-Z)"

    def test_sort_options(self, controller):
        assert len(controller.sort_options) == 12

    def test_listeners_notified(self, controller):
        listener = Mock()
        unsubscribe = controller.subscribe(listener)

        controller.set_search_term("amor")
        unsubscribe()
        controller.set_search_term("")

        listener.assert_called_once_with(controller)


class TestSelection:
    """Test selection mode."""

    def test_enter_selection_starts_empty(self, controller):
        controller.enter_selection()

        assert controller.mode is ListMode.SELECTING
        assert controller.selected_ids == frozenset()
        assert controller.title == "0 Selected"
        assert not controller.can_enter_selection
        assert not controller.can_add

    def test_activate_toggles(self, controller, handlers, stoics):
        controller.enter_selection()

        controller.activate(stoics[1])
        assert controller.is_selected(stoics[1])
        assert controller.title == "1 Selected"

        controller.activate(stoics[1])
        assert not controller.is_selected(stoics[1])
        handlers.open.assert_not_called()

    def test_toggle_requires_selection_mode(self, controller, stoics):
        with pytest.raises(ActionUnavailableError):
            controller.toggle(stoics[1])

    def test_section_toggle(self, controller, store, stoics):
        collection = stoics[0]
        extra = store.create_quote(collection.id, "Premeditatio malorum")
        controller.enter_selection()

        controller.activate_section("NONE")
        assert controller.selected_ids == {stoics[1].id, extra.id}
        assert controller.is_section_selected("NONE")

        controller.activate_section("NONE")
        assert controller.selected_ids == frozenset()

    def test_partial_section_becomes_full(self, controller, store, stoics):
        extra = store.create_quote(stoics[0].id, "Premeditatio malorum")
        controller.enter_selection()
        controller.toggle(extra)

        controller.activate_section("NONE")

        assert controller.is_section_selected("NONE")

    def test_unknown_section(self, controller):
        controller.enter_selection()

        with pytest.raises(KeyError):
            controller.activate_section("MISSING")

    def test_invert(self, controller, store, stoics):
        store.create_quote(stoics[0].id, "Premeditatio malorum")
        controller.enter_selection()
        controller.toggle(stoics[1])

        controller.invert_selection()

        assert controller.selected_count == 2
        assert not controller.is_selected(stoics[1])

    def test_exit_clears(self, controller, stoics):
        controller.enter_selection()
        controller.toggle(stoics[1])

        controller.exit_selection()

        assert controller.mode is ListMode.BROWSING
        assert controller.selected_count == 0
        assert controller.title == "Stoics"

    def test_reentering_starts_empty(self, controller, stoics):
        controller.enter_selection()
        controller.toggle(stoics[1])
        controller.exit_selection()

        controller.enter_selection()

        assert controller.selected_count == 0

    def test_snapshot_in_view_order(self, controller, stoics):
        _, memento, amor = stoics
        controller.enter_selection()
        controller.toggle(amor)
        controller.toggle(memento)

        assert controller.snapshot() == (memento, amor)


class TestLiveUpdates:
    """Test reaction to store changes."""

    def test_new_quote_appears(self, controller, store, stoics):
        listener = Mock()
        controller.subscribe(listener)

        quote = store.create_quote(stoics[0].id, "Premeditatio malorum")

        assert quote in controller.entities
        listener.assert_called_with(controller)

    def test_deleted_quote_leaves_selection(self, controller, store, stoics):
        controller.enter_selection()
        controller.toggle(stoics[1])
        controller.toggle(stoics[2])

        store.delete_quote(stoics[1].id)

        assert controller.selected_ids == {stoics[2].id}
        assert controller.title == "1 Selected"

    def test_search_prunes_selection(self, controller, stoics):
        controller.enter_selection()
        controller.toggle(stoics[1])
        controller.toggle(stoics[2])

        controller.set_search_term("amor")

        assert controller.selected_ids == {stoics[2].id}

    def test_closed_controller(self, controller, store, stoics):
        controller.close()

        with pytest.raises(RuntimeError):
            controller.sections
        store.create_quote(stoics[0].id, "Premeditatio malorum")


class TestRowActions:
    """Test single-entity actions while browsing."""

    def test_only_wired_actions_exist(self, store, registry, stoics):
        controller = make_controller(
            store, registry, stoics[0], ListHandlers(delete=Mock())
        )

        assert controller.row_actions() == [RowAction.DELETE]
        with pytest.raises(ActionUnavailableError):
            controller.edit(stoics[1])
        controller.close()

    def test_no_row_actions_while_selecting(self, controller):
        assert controller.row_actions() == [
            RowAction.EDIT,
            RowAction.MOVE,
            RowAction.DELETE,
        ]

        controller.enter_selection()

        assert controller.row_actions() == []

    def test_edit(self, controller, handlers, stoics):
        controller.edit(stoics[1])

        handlers.edit.assert_called_once_with(stoics[1])

    def test_delete_confirms(self, controller, handlers, confirm, stoics):
        assert controller.delete(stoics[1]) is True

        confirm.assert_called_once_with(CONFIRM_TITLE, DEFAULT_DELETE_MESSAGE)
        handlers.delete.assert_called_once_with(stoics[1])

    def test_declined_delete_is_noop(self, controller, handlers, confirm, stoics):
        confirm.return_value = False

        assert controller.delete(stoics[1]) is False
        handlers.delete.assert_not_called()

    def test_move_uses_caller_message(self, controller, handlers, confirm, stoics):
        handlers.move_message = lambda quote: f"Move {quote.text}?"

        controller.move(stoics[2])

        confirm.assert_called_once_with(CONFIRM_TITLE, "Move Amor fati?")
        handlers.move.assert_called_once_with(stoics[2])

    def test_delete_without_confirmer(self, store, registry, stoics):
        handler = Mock()
        controller = make_controller(
            store, registry, stoics[0], ListHandlers(delete=handler)
        )

        with pytest.raises(ActionUnavailableError):
            controller.delete(stoics[1])
        handler.assert_not_called()
        controller.close()


class TestBulkActions:
    """Test actions over the selection."""

    def test_actions_disabled_until_selected(self, controller, stoics):
        assert controller.bulk_actions() == {}

        controller.enter_selection()
        assert controller.bulk_actions() == {
            BulkAction.EDIT: False,
            BulkAction.MOVE: False,
            BulkAction.DELETE: False,
            BulkAction.EXPORT: False,
        }

        controller.toggle(stoics[1])
        assert all(controller.bulk_actions().values())

    def test_only_wired_bulk_actions_exist(self, store, registry, stoics):
        controller = make_controller(
            store, registry, stoics[0], ListHandlers(bulk_export=Mock())
        )
        controller.enter_selection()
        controller.toggle(stoics[1])

        assert list(controller.bulk_actions()) == [BulkAction.EXPORT]
        with pytest.raises(ActionUnavailableError):
            controller.bulk_move()
        controller.close()

    def test_disabled_action_raises(self, controller, handlers):
        controller.enter_selection()

        with pytest.raises(ActionUnavailableError):
            controller.bulk_export()
        handlers.bulk_export.assert_not_called()

    def test_bulk_delete_confirms_and_exits(
        self, controller, handlers, confirm, stoics
    ):
        controller.enter_selection()
        controller.toggle(stoics[1])

        assert controller.bulk_delete() is True

        handlers.bulk_delete.assert_called_once_with((stoics[1],))
        assert confirm.call_args[0][0] == CONFIRM_TITLE
        assert controller.mode is ListMode.BROWSING
        assert controller.selected_count == 0

    def test_declined_bulk_delete_keeps_selection(
        self, controller, handlers, confirm, stoics
    ):
        confirm.return_value = False
        controller.enter_selection()
        controller.toggle(stoics[1])

        assert controller.bulk_delete() is False

        handlers.bulk_delete.assert_not_called()
        assert controller.mode is ListMode.SELECTING
        assert controller.selected_count == 1

    def test_bulk_edit_decides_when_to_exit(self, controller, handlers, stoics):
        controller.enter_selection()
        controller.toggle(stoics[1])

        controller.bulk_edit()

        snapshot, exit_selection = handlers.bulk_edit.call_args[0]
        assert snapshot == (stoics[1],)
        assert controller.mode is ListMode.SELECTING

        exit_selection()
        assert controller.mode is ListMode.BROWSING

    def test_snapshot_is_immutable(self, controller, handlers, stoics):
        """Later selection changes never reach a handler's snapshot."""
        controller.enter_selection()
        controller.toggle(stoics[1])
        controller.bulk_move()

        snapshot = handlers.bulk_move.call_args[0][0]
        controller.toggle(stoics[2])
        controller.exit_selection()

        assert isinstance(snapshot, tuple)
        assert snapshot == (stoics[1],)

    def test_bulk_export(self, controller, handlers, stoics):
        controller.enter_selection()
        controller.invert_selection()

        assert controller.bulk_export() == "document"
        handlers.bulk_export.assert_called_once_with((stoics[1], stoics[2]))
