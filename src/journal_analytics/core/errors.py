"""Custom exception hierarchy for the journal analytics engine."""


class AnalyticsError(Exception):
    """Base exception for all analytics errors."""


# --- Configuration ---
class ConfigError(AnalyticsError):
    """Invalid or missing configuration."""


# --- Records ---
class RecordError(AnalyticsError):
    """Trade record contract violation."""


class InvalidRecordError(RecordError):
    """A record is missing a field or carries a value of the wrong type."""

    def __init__(self, field: str, index: int | None = None, reason: str = ""):
        self.field = field
        self.index = index
        self.reason = reason
        where = f"record #{index}" if index is not None else "record"
        detail = f": {reason}" if reason else ""
        super().__init__(f"Invalid {where} field [{field}]{detail}")
