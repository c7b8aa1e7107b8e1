"""Schema kinds and their constructors."""

from klaw_schema.schemas.array import ArraySchema, SetSchema, array, set_
from klaw_schema.schemas.base import Schema, SchemaParams, SizedMixin, make_internals
from klaw_schema.schemas.file import FileSchema, file
from klaw_schema.schemas.function import FunctionSchema, function_
from klaw_schema.schemas.intersection import IntersectionSchema, intersection, merge_values
from klaw_schema.schemas.lazy import LazySchema, lazy
from klaw_schema.schemas.mapping import MapSchema, RecordSchema, loose_record, map_, mapping, partial_record, record
from klaw_schema.schemas.object import ObjectMode, ObjectSchema, loose_object, object_, strict_object
from klaw_schema.schemas.pipe import PipeSchema, TransformSchema, pipe, transform
from klaw_schema.schemas.primitives import (
    BooleanSchema,
    DateSchema,
    IntegerSchema,
    NumberSchema,
    StringBoolSchema,
    StringSchema,
    base64,
    boolean,
    cuid,
    cuid2,
    date,
    date_time,
    e164,
    email,
    float32,
    float64,
    float_,
    guid,
    hex_,
    int8,
    int16,
    int32,
    int64,
    integer,
    ipv4,
    ipv6,
    iso_date,
    iso_datetime,
    iso_duration,
    iso_time,
    jwt,
    nanoid,
    number,
    string,
    stringbool,
    uint,
    uint8,
    uint16,
    uint32,
    uint64,
    ulid,
    url,
    uuid,
)
from klaw_schema.schemas.special import (
    AnySchema,
    EnumSchema,
    LiteralSchema,
    NeverSchema,
    NilSchema,
    any_,
    enum,
    literal,
    never,
    nil,
    none,
    unknown,
)
from klaw_schema.schemas.tuple import TupleSchema, tuple_
from klaw_schema.schemas.union import (
    DiscriminatedUnionSchema,
    UnionSchema,
    XorSchema,
    discriminated_union,
    union,
    xor,
)
from klaw_schema.schemas.wrappers import (
    DefaultSchema,
    NilableSchema,
    NonOptionalSchema,
    OptionalSchema,
    PrefaultSchema,
    WrapperSchema,
    nilable,
    non_optional,
    nullish,
    optional,
    with_default,
    with_prefault,
)

__all__ = [
    'AnySchema',
    'ArraySchema',
    'BooleanSchema',
    'DateSchema',
    'DefaultSchema',
    'DiscriminatedUnionSchema',
    'EnumSchema',
    'FileSchema',
    'FunctionSchema',
    'IntegerSchema',
    'IntersectionSchema',
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
    'OptionalSchema',
    'PipeSchema',
    'PrefaultSchema',
    'RecordSchema',
    'Schema',
    'SchemaParams',
    'SetSchema',
    'SizedMixin',
    'StringBoolSchema',
    'StringSchema',
    'TransformSchema',
    'TupleSchema',
    'UnionSchema',
    'WrapperSchema',
    'XorSchema',
    'any_',
    'array',
    'base64',
    'boolean',
    'cuid',
    'cuid2',
    'date',
    'date_time',
    'discriminated_union',
    'e164',
    'email',
    'enum',
    'file',
    'float32',
    'float64',
    'float_',
    'function_',
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
    'make_internals',
    'map_',
    'mapping',
    'merge_values',
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
    'record',
    'set_',
    'strict_object',
    'string',
    'stringbool',
    'transform',
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
