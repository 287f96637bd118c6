"""Selectable, sectioned list state shared by every list screen."""

from .controller import (
    CONFIRM_TITLE,
    DEFAULT_DELETE_MESSAGE,
    BulkAction,
    ListHandlers,
    ListMode,
    RowAction,
    SelectableListController,
)
from .selection import SelectionSet

__all__ = [
    "CONFIRM_TITLE",
    "DEFAULT_DELETE_MESSAGE",
    "BulkAction",
    "ListHandlers",
    "ListMode",
    "RowAction",
    "SelectableListController",
    "SelectionSet",
]
