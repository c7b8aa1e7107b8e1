"""File inspection helpers and the MIME type check."""

from __future__ import annotations

import mimetypes
import os
from collections.abc import Set
from dataclasses import dataclass
from typing import Any, ClassVar

from klaw_schema.checks.base import Check
from klaw_schema.context import ParsePayload
from klaw_schema.issues import invalid_format

__all__ = [
    'MimeType',
    'file_mime',
    'file_size',
    'is_file_like',
]


def is_file_like(value: Any) -> bool:
    """True for open binary/text handles and upload objects exposing ``read``."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return callable(getattr(value, 'read', None))


def file_size(value: Any) -> int | None:
    """Size in bytes, from a ``size`` attribute or by seeking to the end.

    Returns None for streams that expose neither a size nor a seekable position.
    """
    size = getattr(value, 'size', None)
    if isinstance(size, int):
        return size
    if hasattr(value, 'fileno'):
        try:
            return os.fstat(value.fileno()).st_size
        except (OSError, ValueError):
            pass
    seek = getattr(value, 'seek', None)
    tell = getattr(value, 'tell', None)
    if not (callable(seek) and callable(tell)):
        return None
    try:
        position = tell()
        seek(0, os.SEEK_END)
        end = tell()
        seek(position)
    except (OSError, ValueError):
        return None
    return end


def file_mime(value: Any) -> str | None:
    """MIME type from ``content_type``/``mimetype`` attributes, else guessed from the name."""
    for attribute in ('content_type', 'mimetype'):
        declared = getattr(value, attribute, None)
        if isinstance(declared, str) and declared:
            return declared.split(';', 1)[0].strip()
    for attribute in ('filename', 'name'):
        name = getattr(value, attribute, None)
        if isinstance(name, str):
            guessed, _ = mimetypes.guess_type(name)
            if guessed:
                return guessed
    return None


@dataclass(frozen=True, slots=True, kw_only=True)
class MimeType(Check):
    """The file's MIME type must be one of ``allowed``."""

    kind: ClassVar[str] = 'mime_type'

    allowed: Set[str]

    def run(self, payload: ParsePayload) -> None:
        mime = file_mime(payload.value)
        if mime not in self.allowed:
            payload.add_issue(invalid_format('mime', mime, mime=sorted(self.allowed), inst=self.error))
