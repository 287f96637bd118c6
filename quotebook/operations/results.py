"""Result types returned by forms and list operations."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ResultStatus(Enum):
    """Status of an operation result."""

    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"
    ERROR = "error"
    CANCELLED = "cancelled"

    def is_success(self) -> bool:
        """Check if status indicates success."""
        return self is ResultStatus.SUCCESS

    def is_failure(self) -> bool:
        """Check if status indicates failure."""
        return self in (ResultStatus.VALIDATION_FAILED, ResultStatus.ERROR)


@dataclass(frozen=True)
class Alert:
    """Message shown to the user when an operation fails."""

    message: str
    title: str = "Error"


@dataclass
class OperationResult:
    """Result of a single form submission or list action."""

    status: ResultStatus
    message: str
    entity_ids: list[str] = field(default_factory=list)
    alert: Alert | None = None
    data: Any = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def success(self) -> bool:
        """Check if the operation succeeded."""
        return self.status.is_success()

    @property
    def entity_id(self) -> str | None:
        return self.entity_ids[0] if self.entity_ids else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        result: dict[str, Any] = {
            "status": self.status.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }

        if self.entity_ids:
            result["entity_ids"] = list(self.entity_ids)

        if self.alert:
            result["alert"] = {"title": self.alert.title, "message": self.alert.message}

        return result
