"""Custom exceptions for the AI Co-founder application."""

class StorageError(Exception):
    """Raised when a Supabase read or write fails.

    The original client error (if any) is chained as ``__cause__``.
    """
    def __init__(self, detail: str, *, table: str | None = None):
        super().__init__(detail)
        self.detail = detail
        self.table = table

class ConfigurationError(RuntimeError):
    """Raised when a required environment setting is missing or invalid."""
    pass
