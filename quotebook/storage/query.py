"""Predicates for filtering collections and quotes.

Predicates are composable: a `Query` combines conditions (or nested queries)
with AND, OR or NOT. `quote_predicate` builds the predicate used by quote
lists: the collection scope, if any, ANDed with an OR of substring matches
over the searchable fields. Substring matches ignore case and diacritics.
"""

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

QUOTE_SEARCH_FIELDS = ("text", "author_first_name", "author_last_name", "tags")
COLLECTION_SEARCH_FIELDS = ("name",)


def fold(text: str) -> str:
    """Fold case and strip diacritics so "Café" and "cafe" compare equal."""
    nfd = unicodedata.normalize("NFD", text)
    return "".join(char for char in nfd if unicodedata.category(char) != "Mn").casefold()


class Operator(Enum):
    """Query operators."""

    # Comparison
    EQ = "="
    NE = "!="

    # String
    CONTAINS = "contains"

    # Collection
    IN = "in"

    # Logical
    AND = "and"
    OR = "or"
    NOT = "not"


@dataclass(frozen=True)
class Condition:
    """A single field condition."""

    field: str
    operator: Operator
    value: Any

    def matches(self, entity: Any) -> bool:
        """Check if an entity matches this condition."""
        field_value = getattr(entity, self.field, None)

        if self.operator == Operator.EQ:
            return field_value == self.value
        elif self.operator == Operator.NE:
            return field_value != self.value
        elif self.operator == Operator.CONTAINS:
            if field_value is None:
                return False
            return fold(str(self.value)) in fold(str(field_value))
        elif self.operator == Operator.IN:
            return field_value in self.value

        raise ValueError(f"Unsupported condition operator: {self.operator}")


@dataclass(frozen=True)
class Query:
    """Conditions combined with a logical operator."""

    conditions: tuple[Union[Condition, "Query"], ...]
    operator: Operator = Operator.AND

    def matches(self, entity: Any) -> bool:
        """Check if an entity matches this query."""
        if self.operator == Operator.AND:
            return all(c.matches(entity) for c in self.conditions)
        elif self.operator == Operator.OR:
            return any(c.matches(entity) for c in self.conditions)
        elif self.operator == Operator.NOT:
            return not all(c.matches(entity) for c in self.conditions)

        raise ValueError(f"Unsupported query operator: {self.operator}")


Predicate = Condition | Query


def all_of(*predicates: Predicate | None) -> Predicate | None:
    """AND the given predicates, skipping missing ones."""
    present = tuple(p for p in predicates if p is not None)
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return Query(conditions=present, operator=Operator.AND)


def text_filter(term: str, fields: tuple[str, ...]) -> Query | None:
    """Build an OR of substring matches for a search term.

    Args:
        term: Search term; empty means no filter
        fields: Fields to search

    Returns:
        Query, or None for an empty term
    """
    if not term:
        return None
    return Query(
        conditions=tuple(Condition(f, Operator.CONTAINS, term) for f in fields),
        operator=Operator.OR,
    )


def quote_predicate(
    collection_id: str | None = None, search_term: str = ""
) -> Predicate | None:
    """Predicate for a quote list scoped to a collection and a search term."""
    scope = (
        Condition("collection_id", Operator.EQ, collection_id)
        if collection_id
        else None
    )
    return all_of(scope, text_filter(search_term, QUOTE_SEARCH_FIELDS))


def matches(predicate: Predicate | None, entity: Any) -> bool:
    """Evaluate an optional predicate; a missing predicate matches everything."""
    return predicate is None or predicate.matches(entity)
