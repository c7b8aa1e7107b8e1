"""Checks: validation units run, in append order, after a schema's validator."""

from klaw_schema.checks.base import Check, Overwrite, PayloadCheck, Refinement, refinement
from klaw_schema.checks.files import MimeType, file_mime, file_size, is_file_like
from klaw_schema.checks.formats import FORMATS, StringFormat, datetime_pattern, format_check
from klaw_schema.checks.numeric import Finite, GreaterThan, LessThan, MultipleOf, is_multiple_of
from klaw_schema.checks.sizes import ExactSize, MaxSize, MinSize, measure
from klaw_schema.checks.strings import EndsWith, Includes, Regex, StartsWith, compile_pattern

__all__ = [
    'FORMATS',
    'Check',
    'EndsWith',
    'ExactSize',
    'Finite',
    'GreaterThan',
    'Includes',
    'LessThan',
    'MaxSize',
    'MimeType',
    'MinSize',
    'MultipleOf',
    'Overwrite',
    'PayloadCheck',
    'Refinement',
    'Regex',
    'StartsWith',
    'StringFormat',
    'compile_pattern',
    'datetime_pattern',
    'file_mime',
    'file_size',
    'format_check',
    'is_file_like',
    'is_multiple_of',
    'measure',
    'refinement',
]
