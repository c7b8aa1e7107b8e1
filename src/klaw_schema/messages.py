"""Default English messages for raw issues."""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Callable, Mapping, Sequence, Set
from typing import Any

from klaw_schema.issues import IssueCode, RawIssue

__all__ = [
    'default_message',
    'describe_value',
    'format_noun',
    'parsed_type',
    'stringify_primitive',
]


# Size units per measured origin; origins without an entry use "to be" phrasing
SIZABLE: dict[str, str] = {
    'string': 'characters',
    'file': 'bytes',
    'array': 'items',
    'tuple': 'items',
    'set': 'items',
    'object': 'keys',
    'map': 'keys',
    'record': 'keys',
}

FORMAT_NOUNS: dict[str, str] = {
    'regex': 'input',
    'email': 'email address',
    'url': 'URL',
    'emoji': 'emoji',
    'uuid': 'UUID',
    'guid': 'GUID',
    'nanoid': 'nanoid',
    'cuid': 'cuid',
    'cuid2': 'cuid2',
    'ulid': 'ULID',
    'xid': 'XID',
    'ksuid': 'KSUID',
    'datetime': 'ISO datetime',
    'date': 'ISO date',
    'time': 'ISO time',
    'duration': 'ISO duration',
    'ipv4': 'IPv4 address',
    'ipv6': 'IPv6 address',
    'cidrv4': 'IPv4 range',
    'cidrv6': 'IPv6 range',
    'base64': 'base64-encoded string',
    'base64url': 'base64url-encoded string',
    'hex': 'hexadecimal string',
    'json_string': 'JSON string',
    'e164': 'E.164 number',
    'jwt': 'JWT',
    'lowercase': 'lowercase string',
    'uppercase': 'uppercase string',
    'mime': 'MIME type',
}


def format_noun(format: str) -> str:
    """Return the human-readable noun for a string format name."""
    return FORMAT_NOUNS.get(format, format)


def parsed_type(value: Any) -> str:
    """Name the kind of a Python value in schema vocabulary."""
    match value:
        case None:
            return 'nil'
        case bool():
            return 'bool'
        case float() if math.isnan(value):
            return 'NaN'
        case float() if math.isinf(value):
            return 'Infinity'
        case int() | float():
            return 'number'
        case str():
            return 'string'
        case bytes() | bytearray():
            return 'bytes'
        case dt.datetime() | dt.date() | dt.time():
            return 'date'
        case list():
            return 'array'
        case tuple():
            return 'tuple'
        case Set():
            return 'set'
        case Mapping():
            return 'object'
        case _ if callable(value):
            return 'function'
        case _ if hasattr(value, 'read'):
            return 'file'
        case _:
            return type(value).__name__


def stringify_primitive(value: Any) -> str:
    """Render a primitive for inclusion in a message."""
    match value:
        case str():
            return f'"{value}"'
        case None:
            return 'nil'
        case bool():
            return 'true' if value else 'false'
        case float() if math.isnan(value):
            return 'NaN'
        case float() if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        case float() if value.is_integer():
            return str(int(value))
        case int() | float():
            return repr(value)
        case _:
            return f'"{value}"'


def describe_value(value: Any) -> str:
    """Render a bound (number, date, size) for a message."""
    match value:
        case float() if value.is_integer():
            return str(int(value))
        case dt.datetime() | dt.date():
            return value.isoformat()
        case _:
            return str(value)


def _join(values: Sequence[Any], separator: str) -> str:
    return separator.join(stringify_primitive(value) for value in values)


def _comparison(inclusive: bool, too_small: bool) -> str:
    if too_small:
        return 'at least' if inclusive else 'more than'
    return 'at most' if inclusive else 'less than'


def _size_message(raw: RawIssue, too_small: bool) -> str:
    props = raw.properties
    origin = props.get('origin', 'value')
    threshold = props.get('minimum' if too_small else 'maximum')
    if threshold is None:
        return 'Too small' if too_small else 'Too big'

    bound = describe_value(threshold)
    if props.get('exact'):
        unit = SIZABLE.get(origin)
        suffix = f' {unit}' if unit else ''
        return f'Invalid length: expected {origin} to have exactly {bound}{suffix}'
    if origin == 'file':
        return f'File size must be {_comparison(True, too_small)} {bound} bytes'

    prefix = 'Too small' if too_small else 'Too big'
    adjective = _comparison(props.get('inclusive', True), too_small)
    if unit := SIZABLE.get(origin):
        return f'{prefix}: expected {origin} to have {adjective} {bound} {unit}'
    return f'{prefix}: expected {origin} to be {adjective} {bound}'


def _format_message(raw: RawIssue) -> str:
    props = raw.properties
    match props.get('format'):
        case None | '':
            return 'Invalid format'
        case 'starts_with':
            return f'Invalid string: must start with {stringify_primitive(props.get("prefix", ""))}'
        case 'ends_with':
            return f'Invalid string: must end with {stringify_primitive(props.get("suffix", ""))}'
        case 'includes':
            return f'Invalid string: must include {stringify_primitive(props.get("includes", ""))}'
        case 'regex':
            return f'Invalid string: must match pattern {props.get("pattern", "")}'
        case 'mime':
            return f'Invalid file type: expected one of {_join(props.get("mime", []), "|")}'
        case fmt:
            return f'Invalid {format_noun(fmt)}'


def _invalid_type_message(raw: RawIssue) -> str:
    expected = raw.expected or 'unknown'
    if expected == 'non_optional':
        return 'Invalid input: expected a value, received nil'
    return f'Invalid input: expected {expected}, received {parsed_type(raw.input)}'


def _unrecognized_message(raw: RawIssue) -> str:
    keys = raw.properties.get('keys', [])
    if not keys:
        return 'Unrecognized key(s) in object'
    noun = 'keys' if len(keys) > 1 else 'key'
    return f'Unrecognized {noun}: {_join(keys, ", ")}'


def _invalid_value_message(raw: RawIssue) -> str:
    if note := raw.properties.get('note'):
        return f'Invalid input: {note}'
    values = raw.properties.get('values', [])
    if not values:
        return 'Invalid value'
    if len(values) == 1:
        return f'Invalid input: expected {stringify_primitive(values[0])}'
    return f'Invalid option: expected one of {_join(values, "|")}'


def _union_message(raw: RawIssue) -> str:
    if note := raw.properties.get('note'):
        return f'Invalid input: {note}'
    return 'Invalid input: no union member matched'


_FORMATTERS: dict[IssueCode, Callable[[RawIssue], str]] = {
    IssueCode.INVALID_TYPE: _invalid_type_message,
    IssueCode.INVALID_VALUE: _invalid_value_message,
    IssueCode.TOO_SMALL: lambda raw: _size_message(raw, too_small=True),
    IssueCode.TOO_BIG: lambda raw: _size_message(raw, too_small=False),
    IssueCode.INVALID_FORMAT: _format_message,
    IssueCode.NOT_MULTIPLE_OF: lambda raw: f'Invalid number: must be a multiple of {raw.properties.get("divisor")}',
    IssueCode.UNRECOGNIZED_KEYS: _unrecognized_message,
    IssueCode.INVALID_KEY: lambda raw: f'Invalid key in {raw.properties.get("origin", "map")}',
    IssueCode.INVALID_ELEMENT: lambda raw: f'Invalid value in {raw.properties.get("origin", "map")}',
    IssueCode.INVALID_UNION: _union_message,
    IssueCode.INVALID_XOR: lambda raw: (
        f'Invalid input: expected exactly one union member to match, {raw.properties.get("count")} matched'
    ),
    IssueCode.NOT_FOUND: lambda raw: 'Not found',
    IssueCode.INVALID_SCHEMA: lambda raw: f'Invalid schema: {raw.properties.get("reason", "definition rejected")}',
    IssueCode.CUSTOM: lambda raw: 'Invalid input',
}


def default_message(raw: RawIssue) -> str:
    """Build the system default message for a raw issue."""
    formatter = _FORMATTERS.get(raw.code)
    if formatter is None:
        return 'Invalid input'
    return formatter(raw)
