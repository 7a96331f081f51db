"""
Utility functions for RentalSplitLedger
"""
from __future__ import annotations
import os
from datetime import date, datetime
from typing import Any, Mapping, Optional

from errors import (
    InvalidDistance, InvalidIdentifier, InvalidOption, InvalidPrice, MalformedDate, MissingField,
)


def project_dir() -> str:
    """Directory holding this module (the project root)"""
    return os.path.dirname(os.path.abspath(__file__))


def parse_date(s: Any, record_id: Optional[Any] = None) -> date:
    """Parse YYYY-MM-DD date string"""
    if not isinstance(s, str):
        raise MalformedDate(f"date must be a YYYY-MM-DD string, got {s!r}", record_id)
    try:
        return datetime.strptime(s.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise MalformedDate(f"unparsable date {s!r}", record_id) from None


def require(row: Mapping[str, Any], key: str, record_id: Optional[Any] = None) -> Any:
    """Fetch a required key from an input row"""
    try:
        return row[key]
    except (KeyError, TypeError):
        raise MissingField(f"missing field {key!r}", record_id) from None


def _non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def parse_distance(value: Any, record_id: Optional[Any] = None) -> int:
    """Validate a distance: non-negative integer"""
    if not _non_negative_int(value):
        raise InvalidDistance(f"distance must be a non-negative integer, got {value!r}", record_id)
    return value


def parse_price(value: Any, key: str, record_id: Optional[Any] = None) -> int:
    """Validate a car price field: non-negative integer"""
    if not _non_negative_int(value):
        raise InvalidPrice(f"{key} must be a non-negative integer, got {value!r}", record_id)
    return value


def is_identifier(value: Any) -> bool:
    """Ids and references must be usable as mapping keys"""
    try:
        hash(value)
    except TypeError:
        return False
    return True


def require_id(row: Mapping[str, Any], key: str = "id", record_id: Optional[Any] = None) -> Any:
    """Fetch a required id field and check it can key a mapping"""
    value = require(row, key, record_id)
    if not is_identifier(value):
        raise InvalidIdentifier(f"{key} must be a string or number, got {value!r}", record_id)
    return value


def parse_flag(row: Mapping[str, Any], key: str, record_id: Optional[Any] = None) -> bool:
    """Optional boolean field, false when absent"""
    value = row.get(key, False)
    if not isinstance(value, bool):
        raise InvalidOption(f"{key} must be true or false, got {value!r}", record_id)
    return value
