"""Coercion rules used by primitive schemas when ``coerce`` is enabled.

Each function returns the converted value or ``NOT_MATCHED``.
"""

from __future__ import annotations

import datetime as dt
import math
from decimal import Decimal
from typing import Any

from klaw_schema.engine import NOT_MATCHED

__all__ = [
    'to_bool',
    'to_date',
    'to_datetime',
    'to_float',
    'to_int',
    'to_str',
]

_TRUE = frozenset({'true', '1', 'yes', 'on', 'y'})
_FALSE = frozenset({'false', '0', 'no', 'off', 'n', ''})
_INFINITY = frozenset({'inf', 'infinity'})


def to_str(value: Any) -> Any:
    """Numbers use their shortest round-trip form; booleans become ``true``/``false``."""
    match value:
        case str():
            return value
        case bool():
            return 'true' if value else 'false'
        case int() | Decimal():
            return str(value)
        case float():
            return repr(value)
        case bytes():
            try:
                return value.decode()
            except UnicodeDecodeError:
                return NOT_MATCHED
        case _:
            return NOT_MATCHED


def to_int(value: Any) -> Any:
    """Integers from integral numbers, decimal strings, and booleans."""
    match value:
        case bool():
            return int(value)
        case int():
            return value
        case float() if math.isfinite(value) and value.is_integer():
            return int(value)
        case Decimal() if value.is_finite() and value == value.to_integral_value():
            return int(value)
        case str():
            text = value.strip().replace('_', '')
            try:
                return int(text, 10)
            except ValueError:
                return NOT_MATCHED
        case _:
            return NOT_MATCHED


def to_float(value: Any) -> Any:
    """Floats from numbers, decimal strings, and booleans; NaN text is rejected."""
    match value:
        case bool():
            return float(value)
        case int() | float() | Decimal():
            try:
                result = float(value)
            except OverflowError:
                return NOT_MATCHED
            if isinstance(value, Decimal) and value.is_finite() and math.isinf(result):
                return NOT_MATCHED
            return result
        case str():
            text = value.strip()
            try:
                result = float(text)
            except ValueError:
                return NOT_MATCHED
            if math.isnan(result):
                return NOT_MATCHED
            # Overflowing literals like 1e999 parse to inf
            if math.isinf(result) and text.lstrip('+-').lower() not in _INFINITY:
                return NOT_MATCHED
            return result
        case _:
            return NOT_MATCHED


def to_bool(value: Any) -> Any:
    """Booleans from numbers (non-zero is true) and common truthy/falsy words."""
    match value:
        case bool():
            return value
        case int() | float():
            return value != 0
        case str():
            text = value.strip().lower()
            if text in _TRUE:
                return True
            if text in _FALSE:
                return False
            return NOT_MATCHED
        case _:
            return NOT_MATCHED


def to_datetime(value: Any) -> Any:
    """Datetimes from epoch seconds (UTC), ISO strings, and dates."""
    match value:
        case dt.datetime():
            return value
        case dt.date():
            return dt.datetime(value.year, value.month, value.day, tzinfo=dt.UTC)
        case bool():
            return NOT_MATCHED
        case int() | float():
            try:
                return dt.datetime.fromtimestamp(value, tz=dt.UTC)
            except (OverflowError, OSError, ValueError):
                return NOT_MATCHED
        case str():
            try:
                return dt.datetime.fromisoformat(value.strip())
            except ValueError:
                return NOT_MATCHED
        case _:
            return NOT_MATCHED


def to_date(value: Any) -> Any:
    """Dates from ISO strings, epoch seconds, and datetimes."""
    match value:
        case dt.datetime():
            return value.date()
        case dt.date():
            return value
        case str():
            text = value.strip()
            try:
                return dt.date.fromisoformat(text)
            except ValueError:
                pass
        case _:
            pass
    converted = to_datetime(value)
    return converted.date() if isinstance(converted, dt.datetime) else NOT_MATCHED
