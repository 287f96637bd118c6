"""Exception classes for quotebook."""

DEFAULT_ERROR_MESSAGE = "An unknown error occurred."


class QuotebookError(Exception):
    """Base exception for quotebook errors."""

    pass


class ValidationError(QuotebookError, ValueError):
    """Raised when user input fails a business rule.

    The message is meant to be shown to the user as-is.
    """

    def __init__(self, field: str, message: str):
        """Initialize with field and user-displayable message."""
        self.field = field
        self.message = message
        super().__init__(message)


class NotFoundError(QuotebookError, LookupError):
    """Raised when a collection or quote does not exist."""

    def __init__(self, kind: str, entity_id: str):
        """Initialize with entity kind and ID."""
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} not found: {entity_id}")


class ActionUnavailableError(QuotebookError, RuntimeError):
    """Raised when a list action is not wired or not currently enabled."""

    def __init__(self, action: str, reason: str):
        """Initialize with action name and reason."""
        self.action = action
        self.reason = reason
        super().__init__(f"Action '{action}' is unavailable: {reason}")


class UnregisteredEntityTypeError(QuotebookError, KeyError):
    """Raised when sorts are requested for an entity type with none registered."""

    def __init__(self, entity_type: type):
        """Initialize with the offending entity type."""
        self.entity_type = entity_type
        super().__init__(f"No sorts registered for {entity_type.__name__}")

    def __str__(self) -> str:
        return self.args[0]
