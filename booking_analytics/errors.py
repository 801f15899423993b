"""Exceptions raised by the booking analytics pipeline."""

from typing import Dict, Optional


class BookingAnalyticsError(Exception):
    """Base class for pipeline errors."""


class IngestionError(BookingAnalyticsError):
    """The input file is missing, malformed or does not match the schema."""


class NoMatchingRecordsError(BookingAnalyticsError, LookupError):
    """A cohort filter matched zero sale records."""

    def __init__(self, filters: Optional[Dict[str, str]] = None):
        self.filters = dict(filters or {})
        if self.filters:
            applied = ", ".join(f"{k}={v!r}" for k, v in self.filters.items())
            message = f"No matching records for {applied}"
        else:
            message = "No matching records"
        super().__init__(message)
