"""Intermediate Representation (IR) for validator schemas.

This module defines dataclasses that describe a schema tree in a
validator-agnostic way. Parsers produce these nodes; emitters consume them
and never see GraphQL or OpenAPI constructs directly.

Every node carries a class-level ``kind`` tag so emitters can dispatch with
a single ``match`` on ``schema.kind``.

Example usage:
    from schemagen.core.ir import ObjectProperty, ObjectSchema, StringSchema

    user = ObjectSchema(properties={
        "email": ObjectProperty(StringSchema(format="email"), required=True),
    })
"""

from dataclasses import dataclass, field
from typing import ClassVar, Literal, Union

StringFormat = Literal["email", "url", "uuid", "datetime", "date", "time", "ipv4", "ipv6"]

SchemaCategory = Literal[
    "component",
    "enum",
    "input",
    "fragment",
    "variables",
    "response",
    "params",
]

# Marker for objects that keep undeclared keys as-is.
PASSTHROUGH = "passthrough"


@dataclass
class StringSchema:
    """A string, optionally constrained to a well-known format."""
    format: StringFormat | None = None
    kind: ClassVar[str] = "string"


@dataclass
class NumberSchema:
    """A number; ``integer`` restricts it to whole numbers."""
    integer: bool = False
    kind: ClassVar[str] = "number"


@dataclass
class BooleanSchema:
    kind: ClassVar[str] = "boolean"


@dataclass
class BigIntSchema:
    kind: ClassVar[str] = "bigint"


@dataclass
class NullSchema:
    kind: ClassVar[str] = "null"


@dataclass
class UndefinedSchema:
    kind: ClassVar[str] = "undefined"


@dataclass
class UnknownSchema:
    kind: ClassVar[str] = "unknown"


@dataclass
class NeverSchema:
    kind: ClassVar[str] = "never"


@dataclass
class DateSchema:
    """A native date object (not an ISO string)."""
    kind: ClassVar[str] = "date"


@dataclass
class ObjectProperty:
    """A property of an object schema."""
    schema: "SchemaIR"
    required: bool = True


@dataclass
class ObjectSchema:
    """An object with ordered properties.

    ``additional_properties`` has three states:
        None          -- undeclared keys are allowed and discarded
        PASSTHROUGH   -- undeclared keys are allowed and preserved
        a SchemaIR    -- undeclared keys must match that schema

    ``fragment_spreads`` lists the entry names of GraphQL fragments whose
    fields are merged into this object.
    """
    properties: dict[str, ObjectProperty] = field(default_factory=dict)
    additional_properties: Union["SchemaIR", str, None] = None
    fragment_spreads: list[str] = field(default_factory=list)
    kind: ClassVar[str] = "object"

    @property
    def is_passthrough(self) -> bool:
        return isinstance(self.additional_properties, str) and self.additional_properties == PASSTHROUGH

    @property
    def catchall(self) -> "SchemaIR | None":
        """The schema undeclared keys must match, if any."""
        if self.additional_properties is None or isinstance(self.additional_properties, str):
            return None
        return self.additional_properties


@dataclass
class ArraySchema:
    items: "SchemaIR"
    kind: ClassVar[str] = "array"


@dataclass
class TupleSchema:
    items: list["SchemaIR"]
    kind: ClassVar[str] = "tuple"


@dataclass
class RecordSchema:
    key_type: "SchemaIR"
    value_type: "SchemaIR"
    kind: ClassVar[str] = "record"


@dataclass
class EnumSchema:
    values: list[str | int | float]
    kind: ClassVar[str] = "enum"


@dataclass
class LiteralSchema:
    value: str | int | float | bool
    kind: ClassVar[str] = "literal"


@dataclass
class UnionSchema:
    members: list["SchemaIR"]
    kind: ClassVar[str] = "union"


@dataclass
class IntersectionSchema:
    members: list["SchemaIR"]
    kind: ClassVar[str] = "intersection"


@dataclass
class RefSchema:
    """Reference to another named entry, resolved at emission time."""
    name: str
    kind: ClassVar[str] = "ref"


@dataclass
class RawSchema:
    """Verbatim validator code, emitted as-is."""
    code: str
    kind: ClassVar[str] = "raw"


SchemaIR = Union[
    StringSchema,
    NumberSchema,
    BooleanSchema,
    BigIntSchema,
    NullSchema,
    UndefinedSchema,
    UnknownSchema,
    NeverSchema,
    DateSchema,
    ObjectSchema,
    ArraySchema,
    TupleSchema,
    RecordSchema,
    EnumSchema,
    LiteralSchema,
    UnionSchema,
    IntersectionSchema,
    RefSchema,
    RawSchema,
]


@dataclass
class NamedSchemaIR:
    """A top-level named schema entry."""
    name: str
    schema: SchemaIR
    dependencies: frozenset[str] = frozenset()
    category: SchemaCategory = "component"


@dataclass
class SchemaIRResult:
    """Output of a parser: sorted entries plus non-fatal warnings."""
    schemas: list[NamedSchemaIR] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def get(self, name: str) -> NamedSchemaIR | None:
        """Look up an entry by name."""
        for entry in self.schemas:
            if entry.name == name:
                return entry
        return None


def make_nullable(schema: SchemaIR) -> UnionSchema:
    """Wrap a schema so it also accepts null."""
    return UnionSchema([schema, NullSchema()])


def make_optional(schema: SchemaIR) -> UnionSchema:
    """Wrap a schema so it also accepts undefined."""
    return UnionSchema([schema, UndefinedSchema()])


def make_nullish(schema: SchemaIR) -> UnionSchema:
    """Wrap a schema so it also accepts null and undefined."""
    return UnionSchema([schema, NullSchema(), UndefinedSchema()])
