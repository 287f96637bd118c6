"""Tests for sort definitions and the sort registry."""

from datetime import datetime
from itertools import permutations

import pytest

from quotebook.core.exceptions import UnregisteredEntityTypeError
from quotebook.core.models import Collection, Quote
from quotebook.core.sorting import (
    COLLECTION_SORTS,
    QUOTE_SORTS,
    MemoryPreferences,
    SortDefinition,
    SortDirection,
    SortKey,
    SortRegistry,
    create_default_registry,
)


def ids(entities):
    return [entity.id for entity in entities]


def section_ids(sections):
    return [(section.id, ids(section)) for section in sections]


@pytest.fixture
def sorts():
    """Built-in quote sorts by name."""
    return {sort.name: sort for sort in QUOTE_SORTS}


class TestQuoteSorts:
    """Test ordering and sectioning of the built-in quote sorts."""

    def test_date_created_newest(self, sorts, dated_quotes):
        sections = sorts["Date Created (Newest)"].group(dated_quotes)

        assert section_ids(sections) == [
            ("OCTOBER 2026", ["q3", "q2"]),
            ("SEPTEMBER 2026", ["q4", "q1"]),
        ]

    def test_date_created_oldest(self, sorts, dated_quotes):
        ordered = sorts["Date Created (Oldest)"].sorted(dated_quotes)
        assert ids(ordered) == ["q1", "q4", "q2", "q3"]

    def test_date_changed_newest(self, sorts, dated_quotes):
        """Changed sorts use updated_at for order and section."""
        sections = sorts["Date Changed (Newest)"].group(dated_quotes)

        assert section_ids(sections) == [
            ("OCTOBER 2026", ["q3", "q2", "q1"]),
            ("SEPTEMBER 2026", ["q4"]),
        ]

    def test_text_is_case_insensitive(self, sorts, dated_quotes):
        sections = sorts["Text (A-Z)"].group(dated_quotes)

        assert section_ids(sections) == [
            ("A", ["q2"]),
            ("M", ["q1"]),
            ("W", ["q3", "q4"]),
        ]

    def test_text_descending(self, sorts, dated_quotes):
        ordered = sorts["Text (Z-A)"].sorted(dated_quotes)
        assert ids(ordered) == ["q4", "q3", "q1", "q2"]

    def test_author_first_name(self, sorts, dated_quotes):
        """Missing first names group under NONE, missing authors under ANONYMOUS."""
        sections = sorts["Author First Name (A-Z)"].group(dated_quotes)

        assert section_ids(sections) == [
            ("ANONYMOUS", ["q2"]),
            ("MARCUS", ["q3", "q1"]),
            ("NONE", ["q4"]),
        ]

    def test_author_last_name(self, sorts, dated_quotes):
        sections = sorts["Author Last Name (A-Z)"].group(dated_quotes)

        assert section_ids(sections) == [
            ("ANONYMOUS", ["q2"]),
            ("AURELIUS", ["q1"]),
            ("NONE", ["q3"]),
            ("SENECA", ["q4"]),
        ]

    def test_tags(self, sorts, dated_quotes):
        sections = sorts["Tags (A-Z)"].group(dated_quotes)

        assert section_ids(sections) == [
            ("MORTALITY", ["q1"]),
            ("NONE", ["q3", "q4"]),
            ("PHILOSOPHY, STOICISM", ["q2"]),
        ]

    def test_tags_descending_keeps_text_order_within_section(
        self, sorts, dated_quotes
    ):
        sections = sorts["Tags (Z-A)"].group(dated_quotes)

        assert section_ids(sections) == [
            ("PHILOSOPHY, STOICISM", ["q2"]),
            ("NONE", ["q3", "q4"]),
            ("MORTALITY", ["q1"]),
        ]

    def test_ascending_and_descending_are_reverses(self, sorts, dated_quotes):
        """Without ties, the two directions are exact reverses."""
        ascending = sorts["Date Created (Oldest)"].sorted(dated_quotes)
        descending = sorts["Date Created (Newest)"].sorted(dated_quotes)

        assert ids(ascending) == list(reversed(ids(descending)))


class TestTotalOrder:
    """Test that every sort is a total order broken by identity."""

    def test_identity_breaks_ties(self, sorts):
        same = datetime(2026, 10, 18, 12, 0)
        quotes = [
            Quote(id=qid, collection_id="c1", text="Amor fati", created_at=same)
            for qid in ("b", "c", "a")
        ]

        assert ids(sorts["Date Created (Newest)"].sorted(quotes)) == ["a", "b", "c"]
        assert ids(sorts["Text (Z-A)"].sorted(quotes)) == ["a", "b", "c"]

    @pytest.mark.parametrize("sort", QUOTE_SORTS, ids=lambda s: s.name)
    def test_distinct_quotes_never_compare_equal(self, sort, dated_quotes):
        for left, right in permutations(dated_quotes, 2):
            result = sort.compare(left, right)
            assert result != 0
            assert (result > 0) == (sort.compare(right, left) < 0)

    @pytest.mark.parametrize("sort", QUOTE_SORTS, ids=lambda s: s.name)
    def test_sorted_output_is_strictly_increasing(self, sort, dated_quotes):
        ordered = sort.sorted(dated_quotes)
        for left, right in zip(ordered, ordered[1:]):
            assert sort.compare(left, right) < 0

    @pytest.mark.parametrize("sort", QUOTE_SORTS, ids=lambda s: s.name)
    def test_order_does_not_depend_on_input_order(self, sort, dated_quotes):
        assert ids(sort.sorted(dated_quotes)) == ids(
            sort.sorted(list(reversed(dated_quotes)))
        )

    def test_sections_are_contiguous(self, sorts, dated_quotes):
        """Each section ID appears once."""
        for sort in sorts.values():
            section_names = [section.id for section in sort.group(dated_quotes)]
            assert len(section_names) == len(set(section_names))

    def test_text_sections_follow_upper_cased_text(self, sorts):
        """Initials whose upper case expands stay in one section."""
        quotes = [
            Quote(id="1", collection_id="c1", text="Sz"),
            Quote(id="2", collection_id="c1", text="ßa"),
            Quote(id="3", collection_id="c1", text="Sa"),
        ]

        sections = sorts["Text (A-Z)"].group(quotes)

        assert section_ids(sections) == [("S", ["3", "2", "1"])]


class TestCollectionSorts:
    """Test the built-in collection sorts."""

    def test_name_sections_by_initial(self):
        collections = [
            Collection(id="1", name="stoics"),
            Collection(id="2", name="Epicureans"),
            Collection(id="3", name="Skeptics"),
        ]
        by_name = {sort.name: sort for sort in COLLECTION_SORTS}

        sections = by_name["Name (A-Z)"].group(collections)

        assert section_ids(sections) == [("E", ["2"]), ("S", ["3", "1"])]

    def test_name_initial_matches_name_order(self):
        collections = [
            Collection(id="1", name="Sz"),
            Collection(id="2", name="ßa"),
            Collection(id="3", name="Sa"),
        ]
        by_name = {sort.name: sort for sort in COLLECTION_SORTS}

        sections = by_name["Name (A-Z)"].group(collections)

        assert section_ids(sections) == [("S", ["3", "2", "1"])]

    def test_date_sections_by_day(self, sample_collection):
        by_name = {sort.name: sort for sort in COLLECTION_SORTS}

        sections = by_name["Date Created (Newest)"].group([sample_collection])

        assert sections[0].id == "15 JANUARY 2020"


class TestSortDefinition:
    """Test sort definition identity."""

    def test_equality_by_type_and_name(self):
        first = SortDefinition("Text", Quote, lambda q: "")
        second = SortDefinition(
            "Text", Quote, lambda q: "X", (SortKey(len, SortDirection.DESCENDING),)
        )
        other_type = SortDefinition("Text", Collection, lambda c: "")

        assert first == second
        assert hash(first) == hash(second)
        assert first != other_type

    def test_empty_input(self):
        assert QUOTE_SORTS[0].group([]) == []


class TestSortRegistry:
    """Test registration and per-scope preferences."""

    def test_list_in_registration_order(self):
        registry = create_default_registry()

        assert registry.list_sorts(Quote) == QUOTE_SORTS
        assert registry.list_sorts(Collection) == COLLECTION_SORTS

    def test_duplicate_name_rejected(self):
        registry = create_default_registry()

        with pytest.raises(ValueError):
            registry.register(SortDefinition("Text (A-Z)", Quote, lambda q: ""))

    def test_same_name_for_other_type_allowed(self):
        registry = SortRegistry()
        registry.register(SortDefinition("Name", Quote, lambda q: ""))
        registry.register(SortDefinition("Name", Collection, lambda c: ""))

        assert len(registry.list_sorts(Quote)) == 1
        assert len(registry.list_sorts(Collection)) == 1

    def test_unregistered_type(self):
        registry = SortRegistry()

        with pytest.raises(UnregisteredEntityTypeError):
            registry.list_sorts(Quote)
        with pytest.raises(UnregisteredEntityTypeError):
            registry.get_user_default(Quote)

    def test_default_is_first_registered(self):
        registry = create_default_registry()

        assert registry.get_user_default(Quote).name == "Date Created (Newest)"
        assert registry.get_user_default(Quote, "c1") == QUOTE_SORTS[0]

    def test_set_then_get_same_scope(self):
        registry = create_default_registry()
        chosen = registry.get(Quote, "Tags (A-Z)")

        registry.set_user_default(chosen, "c1")

        assert registry.get_user_default(Quote, "c1") == chosen
        assert registry.get_user_default(Quote) == QUOTE_SORTS[0]
        assert registry.get_user_default(Quote, "c2") == QUOTE_SORTS[0]

    def test_global_scope(self):
        registry = create_default_registry()
        chosen = registry.get(Quote, "Text (Z-A)")

        registry.set_user_default(chosen)

        assert registry.get_user_default(Quote) == chosen
        assert registry.preferences.get("sort.Quote") == "Text (Z-A)"

    def test_stale_name_falls_back(self):
        preferences = MemoryPreferences({"sort.Quote.c1": "Removed Sort"})
        registry = create_default_registry(preferences)

        assert registry.get_user_default(Quote, "c1") == QUOTE_SORTS[0]

    def test_get_unknown_name(self):
        assert create_default_registry().get(Quote, "Nope") is None

    def test_preference_key(self):
        assert SortRegistry.preference_key(Quote) == "sort.Quote"
        assert SortRegistry.preference_key(Collection, "x") == "sort.Collection.x"
