"""Quote store: validated, event-publishing access to the quote library.

The store is the single entry point for mutations. It validates input,
writes through the repositories inside a transaction, and publishes one
event per operation so live queries can refresh.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

import msgspec

from quotebook.core.exceptions import NotFoundError, ValidationError
from quotebook.core.export import (
    DEFAULT_DOCUMENT_NAME,
    PlainTextDocument,
    export_quotes,
)
from quotebook.core.models import Collection, DisplayFlags, Quote
from quotebook.core.sorting import SortDefinition
from quotebook.core.tags import TagsEditMode, apply_tags_edit, normalize_tags

from .events import COLLECTION_EVENTS, QUOTE_EVENTS, EventBus, EventPublisher, EventType
from .live import LiveQuery
from .preferences import PreferenceStore
from .query import Predicate
from .repository import RepositoryManager, StorageBackend

logger = logging.getLogger(__name__)


def _require_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValidationError("name", "Name is empty!")
    return name


def _require_text(text: str) -> str:
    if not text.strip():
        raise ValidationError("text", "Text is empty!")
    return text


class QuoteStore(RepositoryManager, EventPublisher):
    """Repository manager that validates mutations and publishes events."""

    def __init__(
        self,
        backend: StorageBackend,
        event_bus: EventBus | None = None,
        default_display: DisplayFlags | None = None,
    ):
        RepositoryManager.__init__(self, backend)
        EventPublisher.__init__(self, event_bus or EventBus())
        self.preferences = PreferenceStore(backend)
        self.default_display = default_display or DisplayFlags()

    # Lookups

    def get_collection(self, collection_id: str) -> Collection:
        """Get a collection.

        Raises:
            NotFoundError: If the collection does not exist
        """
        collection = self.collections.find(collection_id)
        if collection is None:
            raise NotFoundError("collection", collection_id)
        return collection

    def get_quote(self, quote_id: str) -> Quote:
        """Get a quote.

        Raises:
            NotFoundError: If the quote does not exist
        """
        quote = self.quotes.find(quote_id)
        if quote is None:
            raise NotFoundError("quote", quote_id)
        return quote

    def get_quotes(self, quote_ids: Iterable[str]) -> list[Quote]:
        """Get quotes in the order given."""
        return [self.get_quote(quote_id) for quote_id in quote_ids]

    def _require_collection(self, collection_id: str) -> Collection:
        collection = self.collections.find(collection_id)
        if collection is None:
            raise ValidationError("collection_id", "Collection does not exist!")
        return collection

    # Collections

    def create_collection(self, name: str) -> Collection:
        """Create a collection.

        Raises:
            ValidationError: If the name is empty
        """
        collection = Collection(name=_require_name(name))
        self.collections.save(collection)
        logger.info("Created collection %s", collection.id)
        self._publish_event(
            EventType.COLLECTION_CREATED, id=collection.id, collection=collection
        )
        return collection

    def update_collection(self, collection_id: str, name: str) -> Collection:
        """Rename a collection.

        Raises:
            ValidationError: If the name is empty
            NotFoundError: If the collection does not exist
        """
        name = _require_name(name)
        collection = self.get_collection(collection_id).rename(name)
        self.collections.save(collection)
        self._publish_event(
            EventType.COLLECTION_UPDATED, id=collection.id, collection=collection
        )
        return collection

    def delete_collection(self, collection_id: str) -> list[str]:
        """Delete a collection and every quote it owns.

        Returns:
            IDs of the deleted quotes
        """
        self.get_collection(collection_id)
        with self.transaction():
            quote_ids = [q.id for q in self.quotes.find_by_collection(collection_id)]
            for quote_id in quote_ids:
                self.quotes.delete(quote_id)
            self.collections.delete(collection_id)

        logger.info(
            "Deleted collection %s with %d quotes", collection_id, len(quote_ids)
        )
        self._publish_event(
            EventType.COLLECTION_DELETED, id=collection_id, quote_ids=quote_ids
        )
        return quote_ids

    # Quotes

    def create_quote(
        self,
        collection_id: str,
        text: str,
        author_first_name: str = "",
        author_last_name: str = "",
        tags: str = "",
        display: DisplayFlags | None = None,
    ) -> Quote:
        """Create a quote in a collection.

        Display flags default to the ones most recently set on any quote.

        Raises:
            ValidationError: If the text is empty or the collection is unknown
        """
        text = _require_text(text)
        self._require_collection(collection_id)
        flags = display or self.preferences.get_display_flags(self.default_display)

        quote = Quote(
            collection_id=collection_id,
            text=text,
            author_first_name=author_first_name.strip(),
            author_last_name=author_last_name.strip(),
            tags=normalize_tags(tags),
            display_quotation_marks=flags.quotation_marks,
            display_author=flags.author,
            display_author_on_new_line=flags.author_on_new_line,
        )
        self.quotes.save(quote)
        logger.info("Created quote %s in collection %s", quote.id, collection_id)
        self._publish_event(EventType.QUOTE_CREATED, id=quote.id, quote=quote)
        return quote

    def update_quote(
        self,
        quote_id: str,
        text: str | None = None,
        author_first_name: str | None = None,
        author_last_name: str | None = None,
        tags: str | None = None,
    ) -> Quote:
        """Update quote fields; None leaves a field unchanged.

        An update that changes nothing is not saved and publishes no event.

        Raises:
            ValidationError: If the new text is empty
            NotFoundError: If the quote does not exist
        """
        quote = self.get_quote(quote_id)
        changes: dict[str, str] = {}
        if text is not None:
            changes["text"] = _require_text(text)
        if author_first_name is not None:
            changes["author_first_name"] = author_first_name.strip()
        if author_last_name is not None:
            changes["author_last_name"] = author_last_name.strip()
        if tags is not None:
            changes["tags"] = normalize_tags(tags)

        changes = {
            name: value
            for name, value in changes.items()
            if getattr(quote, name) != value
        }
        if not changes:
            return quote

        quote = msgspec.structs.replace(quote, **changes, updated_at=datetime.now())
        self.quotes.save(quote)
        self._publish_event(EventType.QUOTE_UPDATED, id=quote.id, quote=quote)
        return quote

    def set_display_flags(
        self,
        quote_id: str,
        quotation_marks: bool | None = None,
        author: bool | None = None,
        author_on_new_line: bool | None = None,
    ) -> Quote:
        """Change how a quote is displayed and remember the flags as last used."""
        quote = self.get_quote(quote_id)
        current = quote.display
        flags = DisplayFlags(
            quotation_marks=(
                current.quotation_marks if quotation_marks is None else quotation_marks
            ),
            author=current.author if author is None else author,
            author_on_new_line=(
                current.author_on_new_line
                if author_on_new_line is None
                else author_on_new_line
            ),
        )

        quote = quote.with_display(flags)
        self.quotes.save(quote)
        self.preferences.set_display_flags(flags)
        self._publish_event(EventType.QUOTE_UPDATED, id=quote.id, quote=quote)
        return quote

    def delete_quote(self, quote_id: str) -> None:
        """Delete a quote.

        Raises:
            NotFoundError: If the quote does not exist
        """
        if not self.quotes.delete(quote_id):
            raise NotFoundError("quote", quote_id)
        self._publish_event(EventType.QUOTE_DELETED, id=quote_id)

    def delete_quotes(self, quote_ids: Iterable[str]) -> list[str]:
        """Delete several quotes at once; unknown IDs are skipped.

        Returns:
            IDs actually deleted
        """
        with self.transaction():
            deleted = [qid for qid in quote_ids if self.quotes.delete(qid)]

        if deleted:
            logger.info("Deleted %d quotes", len(deleted))
            self._publish_event(EventType.QUOTE_DELETED, ids=deleted)
        return deleted

    def move_quote(self, quote_id: str, collection_id: str) -> Quote:
        """Move a quote to another collection."""
        return self.move_quotes([quote_id], collection_id)[0]

    def move_quotes(self, quote_ids: Iterable[str], collection_id: str) -> list[Quote]:
        """Move quotes to another collection.

        Raises:
            ValidationError: If the target collection is unknown
            NotFoundError: If a quote does not exist
        """
        self._require_collection(collection_id)
        now = datetime.now()

        with self.transaction():
            moved = [
                msgspec.structs.replace(
                    quote, collection_id=collection_id, updated_at=now
                )
                for quote in self.get_quotes(quote_ids)
            ]
            for quote in moved:
                self.quotes.save(quote)

        self._publish_event(
            EventType.QUOTES_MOVED,
            ids=[q.id for q in moved],
            collection_id=collection_id,
        )
        return moved

    def bulk_edit_quotes(
        self,
        quote_ids: Iterable[str],
        author_first_name: str | None = None,
        author_last_name: str | None = None,
        tags_mode: TagsEditMode = TagsEditMode.REPLACE,
        tags: str | None = None,
    ) -> list[Quote]:
        """Edit author names and tags of several quotes.

        Args:
            quote_ids: Quotes to edit
            author_first_name: Replacement first name, None to keep
            author_last_name: Replacement last name, None to keep
            tags_mode: How tags combine with the existing ones
            tags: Comma-separated tags, None to leave tags alone

        Returns:
            Updated quotes
        """
        now = datetime.now()
        edited = []

        with self.transaction():
            for quote in self.get_quotes(quote_ids):
                changes: dict[str, str] = {}
                if author_first_name is not None:
                    changes["author_first_name"] = author_first_name.strip()
                if author_last_name is not None:
                    changes["author_last_name"] = author_last_name.strip()
                if tags is not None:
                    changes["tags"] = apply_tags_edit(quote.tags, tags_mode, tags)

                quote = msgspec.structs.replace(quote, **changes, updated_at=now)
                self.quotes.save(quote)
                edited.append(quote)

        self._publish_event(EventType.QUOTES_EDITED, ids=[q.id for q in edited])
        return edited

    # Queries and export

    def query(
        self,
        entity_type: type,
        predicate: Predicate | None,
        sort: SortDefinition,
    ) -> LiveQuery:
        """Open a live, sectioned query.

        Raises:
            ValueError: If the entity type is not stored here
        """
        if entity_type is Quote:
            return LiveQuery(self.quotes, predicate, sort, self.event_bus, QUOTE_EVENTS)
        if entity_type is Collection:
            return LiveQuery(
                self.collections, predicate, sort, self.event_bus, COLLECTION_EVENTS
            )
        raise ValueError(f"Cannot query entity type {entity_type.__name__}")

    def export_as_plain_text(
        self, quotes: Iterable[Quote], name: str = DEFAULT_DOCUMENT_NAME
    ) -> PlainTextDocument:
        """Export quotes as plain text, one line per quote in the given order."""
        return export_quotes(quotes, name)

    def clear_all(self) -> None:
        """Remove every record and publish event."""
        self.backend.clear()
        self._publish_event(EventType.STORAGE_CLEARED)
