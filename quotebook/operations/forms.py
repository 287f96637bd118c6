"""Forms for adding and editing collections and quotes.

A form holds editable field values and saves them through the store on
``submit()``. Validation failures keep the form open and surface the
validation message as an alert; any other failure is logged and surfaced
with the default error message. ``cancel()`` closes the form without
touching the store.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from quotebook.core.exceptions import (
    DEFAULT_ERROR_MESSAGE,
    ActionUnavailableError,
    ValidationError,
)
from quotebook.core.models import Collection, Quote
from quotebook.core.tags import TagsEditMode
from quotebook.storage.store import QuoteStore

from .results import Alert, OperationResult, ResultStatus

logger = logging.getLogger(__name__)


class Form(ABC):
    """Base class for forms that save through the quote store."""

    title = "Form"

    def __init__(self, store: QuoteStore):
        self.store = store
        self.alert: Alert | None = None
        self.is_open = True

    def submit(self) -> OperationResult:
        """Validate and save the form.

        Returns:
            Result; on failure the form stays open and ``alert`` is set
        """
        if not self.is_open:
            raise ActionUnavailableError("submit", "form is closed")

        try:
            entity_ids = self._save()
        except ValidationError as e:
            self.alert = Alert(message=e.message)
            return OperationResult(
                status=ResultStatus.VALIDATION_FAILED,
                message=e.message,
                alert=self.alert,
            )
        except Exception:
            logger.exception("%s failed to save", type(self).__name__)
            self.alert = Alert(message=DEFAULT_ERROR_MESSAGE)
            return OperationResult(
                status=ResultStatus.ERROR,
                message=DEFAULT_ERROR_MESSAGE,
                alert=self.alert,
            )

        self.alert = None
        self.is_open = False
        return OperationResult(
            status=ResultStatus.SUCCESS,
            message=f"{self.title} saved",
            entity_ids=entity_ids,
        )

    def cancel(self) -> OperationResult:
        """Close the form, discarding edits."""
        self.is_open = False
        self.alert = None
        return OperationResult(status=ResultStatus.CANCELLED, message="Cancelled")

    def dismiss_alert(self) -> None:
        self.alert = None

    @abstractmethod
    def _save(self) -> list[str]:
        """Write the form to the store and return affected IDs."""
        pass


class CollectionForm(Form):
    """Create a collection, or rename an existing one."""

    def __init__(self, store: QuoteStore, collection: Collection | None = None):
        super().__init__(store)
        self.collection = collection
        self.is_new = collection is None
        self.name = collection.name if collection else ""

    @property
    def title(self) -> str:
        return "New Collection" if self.is_new else "Edit Collection"

    def _save(self) -> list[str]:
        if self.is_new:
            saved = self.store.create_collection(self.name)
        else:
            saved = self.store.update_collection(self.collection.id, self.name)
        self.collection = saved
        return [saved.id]


class QuoteForm(Form):
    """Create a quote in a collection, or edit an existing one.

    Editing never touches the quote's display flags.
    """

    def __init__(
        self,
        store: QuoteStore,
        collection_id: str | None = None,
        quote: Quote | None = None,
    ):
        super().__init__(store)
        self.quote = quote
        self.is_new = quote is None
        self.collection_id = quote.collection_id if quote else collection_id
        self.text = quote.text if quote else ""
        self.author_first_name = quote.author_first_name if quote else ""
        self.author_last_name = quote.author_last_name if quote else ""
        self.tags = quote.tags if quote else ""

    @property
    def title(self) -> str:
        return "New Quote" if self.is_new else "Edit Quote"

    def _save(self) -> list[str]:
        moving = not self.is_new and self.collection_id != self.quote.collection_id
        if self.is_new or moving:
            self._require_target()

        if self.is_new:
            saved = self.store.create_quote(
                self.collection_id,
                self.text,
                author_first_name=self.author_first_name,
                author_last_name=self.author_last_name,
                tags=self.tags,
            )
        else:
            saved = self.store.update_quote(
                self.quote.id,
                text=self.text,
                author_first_name=self.author_first_name,
                author_last_name=self.author_last_name,
                tags=self.tags,
            )
            if moving:
                saved = self.store.move_quote(saved.id, self.collection_id)
        self.quote = saved
        return [saved.id]

    def _require_target(self) -> None:
        # Checked before any write so a bad target leaves the quote untouched
        if not self.collection_id or not self.store.collections.exists(
            self.collection_id
        ):
            raise ValidationError("collection_id", "Collection does not exist!")


class BulkEditForm(Form):
    """Edit author names and tags of several quotes at once.

    Fields left as None are not changed.
    """

    title = "Edit Quotes"

    def __init__(self, store: QuoteStore, quotes: Iterable[Quote]):
        super().__init__(store)
        self.quotes = tuple(quotes)
        self.author_first_name: str | None = None
        self.author_last_name: str | None = None
        self.tags_mode = TagsEditMode.REPLACE
        self.tags: str | None = None

    def _save(self) -> list[str]:
        edited = self.store.bulk_edit_quotes(
            [q.id for q in self.quotes],
            author_first_name=self.author_first_name,
            author_last_name=self.author_last_name,
            tags_mode=self.tags_mode,
            tags=self.tags,
        )
        return [q.id for q in edited]


class MoveForm(Form):
    """Move one or more quotes to a target collection."""

    title = "Move Quotes"

    def __init__(
        self,
        store: QuoteStore,
        quotes: Iterable[Quote],
        collection_id: str | None = None,
    ):
        super().__init__(store)
        self.quotes = tuple(quotes)
        self.collection_id = collection_id

    def _save(self) -> list[str]:
        if self.collection_id is None:
            raise ValidationError("collection_id", "Collection does not exist!")
        moved = self.store.move_quotes([q.id for q in self.quotes], self.collection_id)
        return [q.id for q in moved]
