"""List controllers wired to the quote store.

The store-only actions (delete, bulk delete, export) are wired here. Actions
that need further user input, such as picking a target collection or filling
in a form, are supplied by the caller and stay absent otherwise.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from quotebook.core.export import DEFAULT_DOCUMENT_NAME
from quotebook.core.models import Collection, Quote
from quotebook.core.sorting import SortRegistry
from quotebook.listing.controller import (
    DEFAULT_DELETE_MESSAGE,
    Confirm,
    ListHandlers,
    SelectableListController,
)
from quotebook.storage.query import (
    COLLECTION_SEARCH_FIELDS,
    QUOTE_SEARCH_FIELDS,
    quote_predicate,
)
from quotebook.storage.store import QuoteStore

ALL_QUOTES_TITLE = "All Quotes"
COLLECTIONS_TITLE = "Collections"


def _collection_delete_message(collection: Collection) -> str:
    return f'All quotes in "{collection.name}" will be deleted. {DEFAULT_DELETE_MESSAGE}'


def _quotes_delete_message(quotes: tuple[Quote, ...]) -> str:
    noun = "quote" if len(quotes) == 1 else "quotes"
    return f"{len(quotes)} {noun} will be deleted. {DEFAULT_DELETE_MESSAGE}"


def _wire(wired: ListHandlers, handlers: dict[str, Any]) -> None:
    for name, handler in handlers.items():
        if not hasattr(wired, name):
            raise TypeError(f"Unknown list handler: {name}")
        setattr(wired, name, handler)


def quote_list(
    store: QuoteStore,
    registry: SortRegistry,
    collection: Collection | None = None,
    confirm: Confirm | None = None,
    document_name: str = DEFAULT_DOCUMENT_NAME,
    **handlers: Callable[..., Any] | None,
) -> SelectableListController[Quote]:
    """Open a quote list over one collection, or over every quote.

    Args:
        store: Quote store
        registry: Sort registry; the chosen sort is remembered per collection
        collection: Collection to list, None for all quotes
        confirm: Prompt used before destructive actions
        document_name: Name of exported documents
        **handlers: Extra ``ListHandlers`` fields (open, add, edit, move,
            bulk_edit, bulk_move)

    Returns:
        Controller in browsing mode
    """
    wired = ListHandlers[Quote](
        delete=lambda quote: store.delete_quote(quote.id),
        bulk_delete=lambda quotes: store.delete_quotes([q.id for q in quotes]),
        bulk_delete_message=_quotes_delete_message,
        bulk_export=lambda quotes: store.export_as_plain_text(quotes, document_name),
    )
    _wire(wired, handlers)

    base = quote_predicate(collection.id) if collection else None

    return SelectableListController(
        title=collection.name if collection else ALL_QUOTES_TITLE,
        entity_type=Quote,
        query=store.query,
        registry=registry,
        handlers=wired,
        confirm=confirm,
        base_predicate=base,
        search_fields=QUOTE_SEARCH_FIELDS,
        scope=collection.id if collection else None,
    )


def collection_list(
    store: QuoteStore,
    registry: SortRegistry,
    confirm: Confirm | None = None,
    **handlers: Callable[..., Any] | None,
) -> SelectableListController[Collection]:
    """Open the list of collections.

    Deleting a collection deletes its quotes, so the confirmation says so.
    """
    wired = ListHandlers[Collection](
        delete=lambda collection: store.delete_collection(collection.id),
        delete_message=_collection_delete_message,
    )
    _wire(wired, handlers)

    return SelectableListController(
        title=COLLECTIONS_TITLE,
        entity_type=Collection,
        query=store.query,
        registry=registry,
        handlers=wired,
        confirm=confirm,
        search_fields=COLLECTION_SEARCH_FIELDS,
    )
