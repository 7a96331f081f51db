"""
Record-level errors raised while loading and amending rentals
"""
from __future__ import annotations
from typing import Any, Optional


class RecordError(ValueError):
    """A single input record is unusable; the batch goes on without it"""

    def __init__(self, message: str, record_id: Optional[Any] = None):
        super().__init__(message)
        self.record_id = record_id

    def __str__(self) -> str:
        msg = super().__str__()
        if self.record_id is None:
            return msg
        return f"{msg} (record {self.record_id!r})"


class MissingField(RecordError):
    """A required key is absent from an input row"""


class MalformedDate(RecordError):
    """A date string is not a valid YYYY-MM-DD date"""


class InvalidIdentifier(RecordError):
    """An id or reference is not a plain JSON scalar"""


class InvalidOption(RecordError):
    """A rental option is not a JSON boolean"""


class InvalidPeriod(RecordError):
    """end_date is before start_date"""


class InvalidDistance(RecordError):
    """distance is not a non-negative integer"""


class InvalidPrice(RecordError):
    """A car price is not a non-negative integer"""


class UnknownCarReference(RecordError):
    """A rental points at a car id missing from the catalog"""


class UnknownRentalReference(RecordError):
    """A modification points at a rental id that was not loaded"""
