"""Core models, tag handling and sorting.

This package provides:
- Collection and Quote models with display formatting
- Tag string normalization and bulk tag edits
- Sort definitions, sections and the per-scope sort registry
"""

from .exceptions import (
    DEFAULT_ERROR_MESSAGE,
    ActionUnavailableError,
    NotFoundError,
    QuotebookError,
    UnregisteredEntityTypeError,
    ValidationError,
)
from .models import Collection, DisplayFlags, Quote
from .sorting import (
    COLLECTION_SORTS,
    QUOTE_SORTS,
    Section,
    SortDefinition,
    SortDirection,
    SortKey,
    SortRegistry,
    create_default_registry,
)
from .tags import TagsEditMode, apply_tags_edit, normalize_tags

__all__ = [
    # Models
    "Collection",
    "Quote",
    "DisplayFlags",
    # Errors
    "DEFAULT_ERROR_MESSAGE",
    "QuotebookError",
    "ValidationError",
    "NotFoundError",
    "ActionUnavailableError",
    "UnregisteredEntityTypeError",
    # Sorting
    "Section",
    "SortDefinition",
    "SortDirection",
    "SortKey",
    "SortRegistry",
    "QUOTE_SORTS",
    "COLLECTION_SORTS",
    "create_default_registry",
    # Tags
    "TagsEditMode",
    "apply_tags_edit",
    "normalize_tags",
]
