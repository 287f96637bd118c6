"""User preferences persisted alongside the quote library."""

import logging
from typing import Any

import msgspec

from quotebook.core.models import DisplayFlags

from .repository import StorageBackend

logger = logging.getLogger(__name__)

LAST_DISPLAY_FLAGS = "display.last_used"


class PreferenceStore:
    """String-valued preferences stored as ``preference:<name>`` records."""

    kind = "preference"

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    def _key(self, name: str) -> str:
        return f"{self.kind}:{name}"

    def get(self, name: str) -> str | None:
        """Get a stored preference."""
        data = self.backend.read(self._key(name))
        if data is None:
            return None
        return data.get("value")

    def set(self, name: str, value: str) -> None:
        """Store a preference."""
        self.backend.write(self._key(name), {"value": value})

    def delete(self, name: str) -> bool:
        return self.backend.delete(self._key(name))

    def get_display_flags(self, default: DisplayFlags) -> DisplayFlags:
        """Display flags most recently set on any quote.

        Args:
            default: Flags used when none were recorded

        Returns:
            Last-used display flags
        """
        raw = self.get(LAST_DISPLAY_FLAGS)
        if raw is None:
            return default
        try:
            return msgspec.json.decode(raw, type=DisplayFlags)
        except msgspec.DecodeError:
            logger.warning("Ignoring unreadable display preference %r", raw)
            return default

    def set_display_flags(self, flags: DisplayFlags) -> None:
        self.set(LAST_DISPLAY_FLAGS, msgspec.json.encode(flags).decode())

    def as_dict(self) -> dict[str, Any]:
        """All stored preferences by name."""
        prefix = self._key("")
        return {
            key[len(prefix) :]: data.get("value")
            for key, data in self.backend.records(prefix)
        }
