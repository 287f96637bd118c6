"""Tests for collection and quote models."""

from datetime import datetime

import msgspec
import pytest

from quotebook.core.models import (
    ANONYMOUS,
    Collection,
    DisplayFlags,
    Quote,
    day_label,
    month_label,
)


class TestLabels:
    """Test date section labels."""

    def test_month_label(self):
        """Month labels are upper-cased month and year."""
        assert month_label(datetime(2026, 10, 18, 9, 30)) == "OCTOBER 2026"

    def test_day_label(self):
        """Day labels have no leading zero."""
        assert day_label(datetime(2026, 10, 8)) == "8 OCTOBER 2026"
        assert day_label(datetime(2026, 10, 18)) == "18 OCTOBER 2026"


class TestCollection:
    """Test the Collection model."""

    def test_defaults(self):
        """New collections get an ID and timestamps."""
        collection = Collection(name="Stoics")

        assert collection.id
        assert collection.created_at <= collection.updated_at

    def test_rename_returns_copy(self, sample_collection):
        """Renaming leaves the original untouched and bumps updated_at."""
        renamed = sample_collection.rename("Greek Stoics")

        assert renamed.name == "Greek Stoics"
        assert renamed.id == sample_collection.id
        assert renamed.updated_at > sample_collection.updated_at
        assert sample_collection.name == "Stoics"

    def test_frozen(self, sample_collection):
        """Collections cannot be mutated in place."""
        with pytest.raises(AttributeError):
            sample_collection.name = "Other"

    def test_name_initial(self):
        """The name initial is upper-cased."""
        assert Collection(name="epictetus").name_initial == "E"
        assert Collection(name="").name_initial == ""

    def test_to_dict_round_trip(self, sample_collection):
        """Stored dictionaries convert back to an equal collection."""
        data = sample_collection.to_dict()

        assert data["created_at"] == "2020-01-15T09:00:00"
        assert msgspec.convert(data, Collection) == sample_collection


class TestQuoteAuthor:
    """Test author name handling."""

    def test_full_name(self):
        quote = Quote(
            collection_id="c1",
            text="Memento mori",
            author_first_name="Marcus",
            author_last_name="Aurelius",
        )
        assert quote.author == "Marcus Aurelius"

    def test_single_name(self):
        """A single name has no stray space."""
        assert Quote(collection_id="c1", text="x", author_last_name="Seneca").author == (
            "Seneca"
        )
        assert Quote(collection_id="c1", text="x", author_first_name="Zeno").author == (
            "Zeno"
        )

    def test_anonymous(self):
        """Quotes without names are attributed to Anonymous."""
        assert Quote(collection_id="c1", text="Amor fati").author == ANONYMOUS


class TestQuoteDisplay:
    """Test display and export formatting."""

    def test_default_flags(self):
        """Quotation marks and author on the same line by default."""
        quote = Quote(collection_id="c1", text="Amor fati")

        assert quote.display == DisplayFlags()
        assert quote.display_text == "“Amor fati” —Anonymous"

    def test_author_on_new_line(self):
        quote = Quote(
            collection_id="c1",
            text="Memento mori",
            author_first_name="Marcus",
            author_last_name="Aurelius",
            display_author_on_new_line=True,
        )
        assert quote.display_text == "“Memento mori”\n—Marcus Aurelius"

    def test_plain_text(self):
        """Without marks and author only the raw text is shown."""
        quote = Quote(
            collection_id="c1",
            text="Memento mori",
            display_quotation_marks=False,
            display_author=False,
        )
        assert quote.display_text == "Memento mori"

    def test_export_text_ignores_flags(self):
        """Export text always has the double dash and author."""
        quote = Quote(
            collection_id="c1",
            text="Memento mori",
            author_first_name="Marcus",
            author_last_name="Aurelius",
            display_author=False,
        )
        assert quote.export_text == "Memento mori ——Marcus Aurelius"

    def test_with_display(self):
        """Replacing flags keeps content and identity."""
        quote = Quote(collection_id="c1", text="Amor fati")
        styled = quote.with_display(DisplayFlags(quotation_marks=False))

        assert styled.id == quote.id
        assert styled.text == quote.text
        assert styled.display == DisplayFlags(quotation_marks=False)
        assert styled.display_text == "Amor fati —Anonymous"

    def test_length(self):
        assert Quote(collection_id="c1", text="Amor fati").length == 9


class TestQuoteSectionKeys:
    """Test the values quotes are grouped by."""

    def test_first_name_section(self, dated_quotes):
        q1, q2, q3, q4 = dated_quotes

        assert q1.author_first_name_section == "MARCUS"
        assert q2.author_first_name_section == "ANONYMOUS"
        assert q4.author_first_name_section == "NONE"

    def test_last_name_section(self, dated_quotes):
        q1, q2, q3, q4 = dated_quotes

        assert q1.author_last_name_section == "AURELIUS"
        assert q2.author_last_name_section == "ANONYMOUS"
        assert q3.author_last_name_section == "NONE"
        assert q4.author_last_name_section == "SENECA"

    def test_tags_section(self, dated_quotes):
        assert dated_quotes[1].tags_section == "PHILOSOPHY, STOICISM"
        assert dated_quotes[2].tags_section == "NONE"

    def test_month_sections(self, dated_quotes):
        q1 = dated_quotes[0]

        assert q1.month_created == "SEPTEMBER 2026"
        assert q1.month_changed == "OCTOBER 2026"

    def test_tag_list(self, dated_quotes):
        assert dated_quotes[1].tag_list == ["philosophy", "stoicism"]
        assert dated_quotes[2].tag_list == []
