"""
Domain-specific exception hierarchy for the slot catalog.
"""


class SlotCatalogError(Exception):
    """Base class for all application-level errors."""


class MalformedRuleError(SlotCatalogError):
    """Raised when a time rule carries a value that cannot be interpreted."""

    def __init__(self, slot_id: str, field: str, value: object):
        self.slot_id = slot_id
        self.field = field
        self.value = value
        super().__init__(
            f"Time rule '{slot_id}' has an invalid {field}: {value!r} (expected HH:MM)"
        )


class RepositoryUnavailableError(SlotCatalogError):
    """Raised when time rules or the product catalog cannot be read."""


class ConfigError(SlotCatalogError):
    """Raised when the application configuration is missing or invalid."""
