"""Plain-text export of quotes."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import msgspec

from .models import Quote

DEFAULT_DOCUMENT_NAME = "Exported Quotes"


class PlainTextDocument(msgspec.Struct, frozen=True):
    """A named plain-text document ready to be saved or shared."""

    name: str
    text: str

    @property
    def filename(self) -> str:
        return f"{self.name}.txt"

    @property
    def lines(self) -> list[str]:
        return self.text.splitlines()

    def write_to(self, directory: Path) -> Path:
        """Write the document into a directory.

        Args:
            directory: Target directory, created if missing

        Returns:
            Path of the written file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        path.write_text(self.text + "\n" if self.text else "", encoding="utf-8")
        return path


def export_quotes(
    quotes: Iterable[Quote], name: str = DEFAULT_DOCUMENT_NAME
) -> PlainTextDocument:
    """Build a document with one export line per quote, in the given order."""
    return PlainTextDocument(
        name=name, text="\n".join(quote.export_text for quote in quotes)
    )
