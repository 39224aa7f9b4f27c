"""Domain-specific exceptions for the chicken keeper core services."""

class ValidationError(ValueError):
    """Raised when a form payload does not meet validation requirements."""


class RecordNotFoundError(LookupError):
    """Raised when a reminder, income or expense record cannot be located."""


class PersistenceError(IOError):
    """Raised when a collection cannot be written to durable storage."""
