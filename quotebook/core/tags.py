"""Tag string normalization and bulk tag edits.

Tags are stored as a single comma-separated string. Before storage the string
is split, trimmed, stripped of empty items and de-duplicated without regard to
case; the first spelling of a tag wins and relative order is kept.
"""

from __future__ import annotations

from enum import Enum

SEPARATOR = ", "


class TagsEditMode(str, Enum):
    """How a bulk edit combines new tags with the existing ones."""

    REPLACE = "replace"
    ADD = "add"
    REMOVE = "remove"


def split_tags(value: str | None) -> list[str]:
    """Split a comma-separated tag string into unique, trimmed tags.

    Args:
        value: Raw tag string

    Returns:
        Tags in their original order, first spelling kept
    """
    if not value:
        return []

    seen: set[str] = set()
    tags = []
    for part in value.split(","):
        tag = part.strip()
        if not tag or tag.casefold() in seen:
            continue
        seen.add(tag.casefold())
        tags.append(tag)
    return tags


def join_tags(tags: list[str]) -> str:
    return SEPARATOR.join(tags)


def normalize_tags(value: str | None) -> str:
    """Normalize a raw tag string for storage."""
    return join_tags(split_tags(value))


def apply_tags_edit(current: str, mode: TagsEditMode, value: str | None) -> str:
    """Apply a bulk tag edit to one quote's tag string.

    Args:
        current: Existing tag string
        mode: Replace, add or remove
        value: Comma-separated tags to apply

    Returns:
        Normalized tag string
    """
    existing = split_tags(current)
    incoming = split_tags(value)

    match mode:
        case TagsEditMode.REPLACE:
            return join_tags(incoming)
        case TagsEditMode.ADD:
            return join_tags(split_tags(join_tags(existing + incoming)))
        case TagsEditMode.REMOVE:
            removed = {tag.casefold() for tag in incoming}
            return join_tags([tag for tag in existing if tag.casefold() not in removed])
        case _:
            raise ValueError(f"Unknown tags edit mode: {mode}")
