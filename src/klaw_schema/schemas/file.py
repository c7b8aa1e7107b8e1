"""File schema: open handles and upload objects, validated by size and MIME type."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, BinaryIO, ClassVar, Self, Unpack

from klaw_schema.checks.files import MimeType, is_file_like
from klaw_schema.context import ParseContext
from klaw_schema.engine import NOT_MATCHED, ParseResult, parse_complex
from klaw_schema.internals import TypeTag
from klaw_schema.issues import ErrorOverride
from klaw_schema.result import Err
from klaw_schema.schemas.base import Schema, SchemaParams, SizedMixin, make_internals

__all__ = [
    'FileSchema',
    'file',
]


class FileSchema(SizedMixin, Schema[BinaryIO]):
    """Anything exposing ``read``: file objects, ``io.BytesIO``, framework uploads.

    ``min``/``max``/``size`` bound the size in bytes. A prefault on a file schema
    also replaces input that fails validation, not only nil.
    """

    _size_origin: ClassVar[str] = 'file'

    def _extract(self, value: Any) -> Any:
        return value if is_file_like(value) else NOT_MATCHED

    def _strict_shortcut(self, value: Any) -> bool:
        return is_file_like(value)

    def _run(self, value: Any, ctx: ParseContext) -> ParseResult:
        result = parse_complex(self, value, ctx)
        internals = self.internals
        if isinstance(result, Err) and internals.has_prefault and not internals.non_optional and value is not None:
            return parse_complex(self, internals.resolve_prefault(), ctx)
        return result

    def size(self, size: int, *, error: ErrorOverride | None = None) -> Self:
        """Require exactly ``size`` bytes."""
        return self.length(size, error=error)

    def mime(self, types: str | Iterable[str], *, error: ErrorOverride | None = None) -> Self:
        """Restrict the MIME type (``content_type``/``mimetype`` or guessed from the name)."""
        allowed = frozenset([types] if isinstance(types, str) else types)
        return self._with_check(MimeType(allowed=allowed, error=error))


def file(**params: Unpack[SchemaParams]) -> FileSchema:
    """Schema accepting file-like objects.

    Example:
        ```python
        import io

        file().max(1024).parse(io.BytesIO(b'data'))  # Ok(<BytesIO>)
        ```
    """
    return FileSchema(make_internals(TypeTag.FILE, **params))
