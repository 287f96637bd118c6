"""Core data models for quote collections.

Collections own quotes; quotes carry their own display formatting. Both are
immutable structs, updated by replacement.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import uuid4

import msgspec

ANONYMOUS = "Anonymous"


def _new_id() -> str:
    return str(uuid4())


def month_label(value: datetime) -> str:
    """Month label used for date sections, e.g. 'OCTOBER 2026'."""
    return value.strftime("%B %Y").upper()


def day_label(value: datetime) -> str:
    """Day label used for date sections, e.g. '18 OCTOBER 2026'."""
    return f"{value.day} {value.strftime('%B %Y')}".upper()


class DisplayFlags(msgspec.Struct, frozen=True):
    """How a quote is formatted for display."""

    quotation_marks: bool = True
    author: bool = True
    author_on_new_line: bool = False


class Collection(msgspec.Struct, frozen=True, kw_only=True):
    """A named container of quotes."""

    id: str = msgspec.field(default_factory=_new_id)
    name: str
    created_at: datetime = msgspec.field(default_factory=datetime.now)
    updated_at: datetime = msgspec.field(default_factory=datetime.now)

    def rename(self, new_name: str) -> Collection:
        """Rename the collection.

        Args:
            new_name: New collection name

        Returns:
            Updated collection
        """
        return msgspec.structs.replace(self, name=new_name, updated_at=datetime.now())

    @property
    def name_initial(self) -> str:
        """First character of the upper-cased name, matching the name sort key."""
        return self.name.upper()[:1]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return msgspec.to_builtins(self)


class Quote(msgspec.Struct, frozen=True, kw_only=True):
    """A single attributable or anonymous piece of text."""

    id: str = msgspec.field(default_factory=_new_id)
    collection_id: str
    text: str
    author_first_name: str = ""
    author_last_name: str = ""
    tags: str = ""

    display_quotation_marks: bool = True
    display_author: bool = True
    display_author_on_new_line: bool = False

    created_at: datetime = msgspec.field(default_factory=datetime.now)
    updated_at: datetime = msgspec.field(default_factory=datetime.now)

    @property
    def author(self) -> str:
        """Full author name, or 'Anonymous' when no name is set."""
        name = f"{self.author_first_name} {self.author_last_name}".strip()
        return name or ANONYMOUS

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def display(self) -> DisplayFlags:
        return DisplayFlags(
            quotation_marks=self.display_quotation_marks,
            author=self.display_author,
            author_on_new_line=self.display_author_on_new_line,
        )

    @property
    def display_text(self) -> str:
        """Text formatted according to the quote's display flags."""
        text = self.text
        if self.display_quotation_marks:
            text = f"“{text}”"
        if self.display_author:
            separator = "\n" if self.display_author_on_new_line else " "
            text = f"{text}{separator}—{self.author}"
        return text

    @property
    def export_text(self) -> str:
        """Single-line plain text export form."""
        return f"{self.text} ——{self.author}"

    @property
    def tag_list(self) -> list[str]:
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]

    # Section keys

    @property
    def text_initial(self) -> str:
        return self.text.upper()[:1]

    @property
    def author_first_name_section(self) -> str:
        if self.author_first_name:
            return self.author_first_name.upper()
        if self.author_last_name:
            return "NONE"
        return "ANONYMOUS"

    @property
    def author_last_name_section(self) -> str:
        if self.author_last_name:
            return self.author_last_name.upper()
        if self.author_first_name:
            return "NONE"
        return "ANONYMOUS"

    @property
    def tags_section(self) -> str:
        return self.tags.upper() if self.tags else "NONE"

    @property
    def month_created(self) -> str:
        return month_label(self.created_at)

    @property
    def month_changed(self) -> str:
        return month_label(self.updated_at)

    def with_display(self, flags: DisplayFlags) -> Quote:
        """Return a copy using the given display flags."""
        return msgspec.structs.replace(
            self,
            display_quotation_marks=flags.quotation_marks,
            display_author=flags.author,
            display_author_on_new_line=flags.author_on_new_line,
            updated_at=datetime.now(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return msgspec.to_builtins(self)
