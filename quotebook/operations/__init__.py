"""Forms and store-wired list operations.

This module provides:
- Forms for collections, quotes, bulk edits and moves
- Quote and collection list controllers wired to the store
- Result and alert types
"""

from .forms import BulkEditForm, CollectionForm, Form, MoveForm, QuoteForm
from .lists import collection_list, quote_list
from .results import Alert, OperationResult, ResultStatus

__all__ = [
    # Forms
    "Form",
    "CollectionForm",
    "QuoteForm",
    "BulkEditForm",
    "MoveForm",
    # Lists
    "quote_list",
    "collection_list",
    # Results
    "Alert",
    "OperationResult",
    "ResultStatus",
]
