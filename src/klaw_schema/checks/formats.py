"""Named string formats (email, UUID, ISO 8601, JWT, ...) as checks."""

from __future__ import annotations

import base64
import binascii
import ipaddress
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar
from urllib.parse import urlsplit

import msgspec

from klaw_schema.checks.base import Check
from klaw_schema.context import ParsePayload
from klaw_schema.errors import InvalidSchemaError
from klaw_schema.issues import invalid_format

__all__ = [
    'FORMATS',
    'StringFormat',
    'datetime_pattern',
    'format_check',
    'is_jwt',
    'is_url',
    'time_pattern',
]

type Predicate = Callable[[str], bool]

# --- Patterns ---

CUID = re.compile(r'^[cC][^\s-]{8,}$')
CUID2 = re.compile(r'^[0-9a-z]+$')
ULID = re.compile(r'^[0-9A-HJKMNP-TV-Za-hjkmnp-tv-z]{26}$')
XID = re.compile(r'^[0-9a-vA-V]{20}$')
KSUID = re.compile(r'^[A-Za-z0-9]{27}$')
NANOID = re.compile(r'^[a-zA-Z0-9_-]{21}$')
GUID = re.compile(r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$')
UUID = re.compile(
    r'^(?:[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-8][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}'
    r'|00000000-0000-0000-0000-000000000000|ffffffff-ffff-ffff-ffff-ffffffffffff)$'
)
EMAIL = re.compile(
    r"^[A-Za-z0-9_'+\-]+([A-Za-z0-9_'+\-]*\.[A-Za-z0-9_'+\-]+)*"
    r'@[A-Za-z0-9]([A-Za-z0-9\-]*[A-Za-z0-9])?(\.[A-Za-z0-9]([A-Za-z0-9\-]*[A-Za-z0-9])?)*\.[A-Za-z]{2,}$'
)
BASE64 = re.compile(r'^$|^(?:[0-9a-zA-Z+/]{4})*(?:(?:[0-9a-zA-Z+/]{2}==)|(?:[0-9a-zA-Z+/]{3}=))?$')
BASE64URL = re.compile(r'^[A-Za-z0-9_-]*={0,2}$')
HEX = re.compile(r'^[0-9a-fA-F]*$')
E164 = re.compile(r'^\+[1-9]\d{6,14}$')
DURATION = re.compile(r'^P(?:(\d+W)|(?!.*W)(?=\d|T\d)(\d+Y)?(\d+M)?(\d+D)?(T(?=\d)(\d+H)?(\d+M)?(\d+([.,]\d+)?S)?)?)$')
DATE = (
    r'(?:(?:\d\d[2468][048]|\d\d[13579][26]|\d\d0[48]|[02468][048]00|[13579][26]00)-02-29'
    r'|\d{4}-(?:(?:0[13578]|1[02])-(?:0[1-9]|[12]\d|3[01])|(?:0[469]|11)-(?:0[1-9]|[12]\d|30)'
    r'|(?:02)-(?:0[1-9]|1\d|2[0-8])))'
)
EMOJI = re.compile(
    '^[\U0001f000-\U0001faff\u2600-\u27bf\u2300-\u23ff\u2b00-\u2bff\u2190-\u21ff'
    '\u00a9\u00ae\u203c\u2049\u2122\u2139\u3030\u303d\u3297\u3299'
    '\u200d\ufe0f\u20e3\U000e0020-\U000e007f]+$'
)


def time_pattern(precision: int | None = None) -> str:
    """Regex source for an ISO time of day.

    Args:
        precision: None allows optional seconds and any fraction; -1 allows
            minutes only; 0 requires whole seconds; n > 0 requires exactly n
            fractional digits.
    """
    hhmm = r'(?:[01]\d|2[0-3]):[0-5]\d'
    match precision:
        case None:
            return hhmm + r'(?::[0-5]\d(?:\.\d+)?)?'
        case -1:
            return hhmm
        case 0:
            return hhmm + r':[0-5]\d'
        case _:
            return hhmm + rf':[0-5]\d\.\d{{{precision}}}'


def datetime_pattern(*, offset: bool = False, local: bool = False, precision: int | None = None) -> re.Pattern[str]:
    """Compile an ISO datetime pattern.

    ``Z`` is always accepted; ``offset`` also accepts ``+hh:mm`` style offsets and
    ``local`` accepts a datetime with no zone designator.
    """
    suffixes = ['Z']
    if offset:
        suffixes.append(r'[+-](?:[01]\d|2[0-3]):?[0-5]\d')
    if local:
        suffixes.append('')
    return re.compile(f'^{DATE}T{time_pattern(precision)}(?:{"|".join(suffixes)})$')


def _matches(pattern: re.Pattern[str]) -> Predicate:
    return lambda value: pattern.fullmatch(value) is not None


def _ip_predicate(version: int, network: bool) -> Predicate:
    def check(value: str) -> bool:
        if network and '/' not in value:
            return False
        try:
            parsed = ipaddress.ip_network(value, strict=False) if network else ipaddress.ip_address(value)
        except ValueError:
            return False
        return parsed.version == version

    return check


def _is_json(value: str) -> bool:
    try:
        msgspec.json.decode(value)
    except msgspec.DecodeError:
        return False
    return True


def _b64url_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + '=' * (-len(segment) % 4))


def is_jwt(value: str, alg: str | None = None) -> bool:
    """Structural JWT check: three base64url segments with a JSON object header."""
    parts = value.split('.')
    if len(parts) != 3 or not all(BASE64URL.fullmatch(part) for part in parts[:2]):
        return False
    try:
        header = msgspec.json.decode(_b64url_decode(parts[0]))
    except (binascii.Error, msgspec.DecodeError):
        return False
    if not isinstance(header, dict):
        return False
    if 'typ' in header and header['typ'] != 'JWT':
        return False
    return alg is None or header.get('alg') == alg


def is_url(
    value: str,
    *,
    protocol: re.Pattern[str] | None = None,
    hostname: re.Pattern[str] | None = None,
) -> bool:
    """True for absolute URLs with a scheme and a host."""
    if any(char.isspace() for char in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    if not parts.scheme or not parts.netloc or not parts.hostname:
        return False
    if protocol is not None and not protocol.fullmatch(parts.scheme):
        return False
    return hostname is None or hostname.fullmatch(parts.hostname) is not None


def _is_base64(value: str) -> bool:
    return len(value) % 4 == 0 and BASE64.fullmatch(value) is not None


FORMATS: dict[str, Predicate] = {
    'email': _matches(EMAIL),
    'url': is_url,
    'uuid': _matches(UUID),
    'guid': _matches(GUID),
    'cuid': _matches(CUID),
    'cuid2': _matches(CUID2),
    'ulid': _matches(ULID),
    'xid': _matches(XID),
    'ksuid': _matches(KSUID),
    'nanoid': _matches(NANOID),
    'ipv4': _ip_predicate(4, network=False),
    'ipv6': _ip_predicate(6, network=False),
    'cidrv4': _ip_predicate(4, network=True),
    'cidrv6': _ip_predicate(6, network=True),
    'json_string': _is_json,
    'emoji': _matches(EMOJI),
    'jwt': is_jwt,
    'base64': _is_base64,
    'base64url': _matches(BASE64URL),
    'hex': _matches(HEX),
    'e164': _matches(E164),
    'datetime': _matches(datetime_pattern()),
    'date': _matches(re.compile(f'^{DATE}$')),
    'time': _matches(re.compile(f'^{time_pattern()}$')),
    'duration': _matches(DURATION),
    'lowercase': lambda value: value == value.lower(),
    'uppercase': lambda value: value == value.upper(),
}


@dataclass(frozen=True, slots=True, kw_only=True)
class StringFormat(Check):
    """The string must satisfy the named format's predicate."""

    kind: ClassVar[str] = 'string_format'

    format: str
    predicate: Predicate

    def run(self, payload: ParsePayload) -> None:
        if not self.predicate(payload.value):
            payload.add_issue(invalid_format(self.format, payload.value, inst=self.error))


def format_check(format: str, predicate: Predicate | None = None, **kwargs: object) -> StringFormat:
    """Build the check for a registered format.

    Args:
        format: Format name (a key of ``FORMATS`` unless ``predicate`` is given).
        predicate: Custom predicate overriding the registered one.
        **kwargs: Check options (``error``, ``abort``, ``when``).

    Raises:
        InvalidSchemaError: If the format is unknown and no predicate is given.
    """
    if predicate is None:
        try:
            predicate = FORMATS[format]
        except KeyError:
            msg = f'Unknown string format {format!r}'
            raise InvalidSchemaError(msg) from None
    return StringFormat(format=format, predicate=predicate, **kwargs)
