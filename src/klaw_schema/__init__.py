"""klaw-schema: composable runtime validation and parsing.

Build an immutable schema, then parse untyped input into a typed value or a
structured ``ValidationError``.

Flat imports (preferred):
    from klaw_schema import object_, string, integer, array, union, lazy
    from klaw_schema import ValidationError, ParseContext, configure

Submodule imports (for organization):
    from klaw_schema.schemas import ObjectSchema, StringSchema
    from klaw_schema.checks import MinSize, Regex
    from klaw_schema.errors import flatten_error, treeify_error
"""

# Configuration and logging
from klaw_schema._logging import add_log_hook, clear_log_hooks, configure_logging, get_logger, remove_log_hook

# Checks
from klaw_schema.checks import Check, Overwrite, PayloadCheck, Refinement, refinement
from klaw_schema.config import SchemaConfig, configure, get_config, reset_config

# Parse context
from klaw_schema.context import DEFAULT_CONTEXT, ParseContext, ParsePayload, RefinementContext

# Errors
from klaw_schema.errors import (
    ErrorTree,
    FlattenedError,
    InvalidPatternError,
    InvalidSchemaError,
    SchemaError,
    ValidationError,
    ValidationFailure,
    flatten_error,
    format_error,
    prettify_error,
    to_dot_path,
    treeify_error,
)
from klaw_schema.internals import UNSET, Internals, TypeTag

# Issues
from klaw_schema.issues import ErrorOverride, Issue, IssueCode, ObjectValueMarker, PathSegment, RawIssue

# Registry
from klaw_schema.registry import GlobalRegistry, global_registry

# Result carrier
from klaw_schema.result import Err, Ok, Result

# Schemas
from klaw_schema.schemas import (
    AnySchema,
    ArraySchema,
    BooleanSchema,
    DateSchema,
    DefaultSchema,
    DiscriminatedUnionSchema,
    EnumSchema,
    FileSchema,
    FunctionSchema,
    IntegerSchema,
    IntersectionSchema,
    LazySchema,
    LiteralSchema,
    MapSchema,
    NeverSchema,
    NilableSchema,
    NilSchema,
    NonOptionalSchema,
    NumberSchema,
    ObjectMode,
    ObjectSchema,
    OptionalSchema,
    PipeSchema,
    PrefaultSchema,
    RecordSchema,
    Schema,
    SetSchema,
    StringBoolSchema,
    StringSchema,
    TransformSchema,
    TupleSchema,
    UnionSchema,
    XorSchema,
    any_,
    array,
    base64,
    boolean,
    cuid,
    cuid2,
    date,
    date_time,
    discriminated_union,
    e164,
    email,
    enum,
    file,
    float32,
    float64,
    float_,
    function_,
    guid,
    hex_,
    int8,
    int16,
    int32,
    int64,
    integer,
    intersection,
    ipv4,
    ipv6,
    iso_date,
    iso_datetime,
    iso_duration,
    iso_time,
    jwt,
    lazy,
    literal,
    loose_object,
    loose_record,
    map_,
    mapping,
    nanoid,
    never,
    nil,
    nilable,
    non_optional,
    none,
    nullish,
    number,
    object_,
    optional,
    partial_record,
    pipe,
    record,
    set_,
    strict_object,
    string,
    stringbool,
    transform,
    tuple_,
    uint,
    uint8,
    uint16,
    uint32,
    uint64,
    ulid,
    union,
    unknown,
    url,
    uuid,
    with_default,
    with_prefault,
    xor,
)

__version__ = '0.1.0'

__all__ = [
    'DEFAULT_CONTEXT',
    'UNSET',
    # Schemas
    'AnySchema',
    'ArraySchema',
    'BooleanSchema',
    # Checks
    'Check',
    'DateSchema',
    'DefaultSchema',
    'DiscriminatedUnionSchema',
    'EnumSchema',
    # Result carrier
    'Err',
    # Issues
    'ErrorOverride',
    # Errors
    'ErrorTree',
    'FileSchema',
    'FlattenedError',
    'FunctionSchema',
    # Registry
    'GlobalRegistry',
    'IntegerSchema',
    'Internals',
    'IntersectionSchema',
    'InvalidPatternError',
    'InvalidSchemaError',
    'Issue',
    'IssueCode',
    'LazySchema',
    'LiteralSchema',
    'MapSchema',
    'NeverSchema',
    'NilSchema',
    'NilableSchema',
    'NonOptionalSchema',
    'NumberSchema',
    'ObjectMode',
    'ObjectSchema',
    'ObjectValueMarker',
    'Ok',
    'OptionalSchema',
    'Overwrite',
    # Parse context
    'ParseContext',
    'ParsePayload',
    'PathSegment',
    'PayloadCheck',
    'PipeSchema',
    'PrefaultSchema',
    'RawIssue',
    'RecordSchema',
    'Refinement',
    'RefinementContext',
    'Result',
    'Schema',
    # Configuration
    'SchemaConfig',
    'SchemaError',
    'SetSchema',
    'StringBoolSchema',
    'StringSchema',
    'TransformSchema',
    'TupleSchema',
    'TypeTag',
    'UnionSchema',
    'ValidationError',
    'ValidationFailure',
    'XorSchema',
    # Logging
    'add_log_hook',
    'any_',
    'array',
    'base64',
    'boolean',
    'clear_log_hooks',
    'configure',
    'configure_logging',
    'cuid',
    'cuid2',
    'date',
    'date_time',
    'discriminated_union',
    'e164',
    'email',
    'enum',
    'file',
    'flatten_error',
    'float32',
    'float64',
    'float_',
    'format_error',
    'function_',
    'get_config',
    'get_logger',
    'global_registry',
    'guid',
    'hex_',
    'int8',
    'int16',
    'int32',
    'int64',
    'integer',
    'intersection',
    'ipv4',
    'ipv6',
    'iso_date',
    'iso_datetime',
    'iso_duration',
    'iso_time',
    'jwt',
    'lazy',
    'literal',
    'loose_object',
    'loose_record',
    'map_',
    'mapping',
    'nanoid',
    'never',
    'nil',
    'nilable',
    'non_optional',
    'none',
    'nullish',
    'number',
    'object_',
    'optional',
    'partial_record',
    'pipe',
    'prettify_error',
    'record',
    'refinement',
    'remove_log_hook',
    'reset_config',
    'set_',
    'strict_object',
    'string',
    'stringbool',
    'to_dot_path',
    'transform',
    'treeify_error',
    'tuple_',
    'uint',
    'uint8',
    'uint16',
    'uint32',
    'uint64',
    'ulid',
    'union',
    'unknown',
    'url',
    'uuid',
    'with_default',
    'with_prefault',
    'xor',
]
