"""ArkType emitter.

ArkType accepts both string definitions (``"string | null"``) and chained
``Type`` expressions. Nodes that can be written in the string syntax are
kept as strings so unions and arrays stay compact; everything else falls
back to expressions built from ``type(...)``.
"""

import json

from ..ir import NamedSchemaIR, ObjectProperty, ObjectSchema, SchemaIR, UnionSchema
from ..naming import is_valid_identifier, schema_var_name
from .base import (
    EmitContext,
    EmitterResult,
    ValidatorLibrary,
    indent,
    nullability_wrapper,
    regex_literal,
    render_module,
    split_nullability,
    strip_nullability,
)

_STRING_FORMATS = {
    "email": "string.email",
    "url": "string.url",
    "uuid": "string.uuid",
    "datetime": "string.date.iso",
    "ipv4": "string.ip.v4",
    "ipv6": "string.ip.v6",
}

_KEYWORDS = {
    "boolean": "boolean",
    "bigint": "bigint",
    "null": "null",
    "undefined": "undefined",
    "unknown": "unknown",
    "never": "never",
    "date": "Date",
}

_MODIFIER_KEYWORDS = {
    "nullable": ("null",),
    "optional": ("undefined",),
    "nullish": ("null", "undefined"),
}


class ArktypeEmitter:
    """Emits ``type(...)`` schemas."""

    library = ValidatorLibrary.ARKTYPE
    title = "ArkType"

    def import_statement(self) -> str:
        return 'import { type } from "arktype";'

    def type_inference(self, schema_var: str, type_name: str) -> str:
        return f"export type {type_name} = typeof {schema_var}.infer;"

    def emit(self, schemas: list[NamedSchemaIR]) -> EmitterResult:
        return render_module(self, schemas, self._emit)

    # String syntax

    def _dsl(self, schema: SchemaIR) -> str | None:
        """The string-syntax definition of a node, or None if it has none."""
        match schema.kind:
            case "string":
                if schema.format is None:
                    return "string"
                return _STRING_FORMATS.get(schema.format)
            case "number":
                return "number.integer" if schema.integer else "number"
            case "boolean" | "bigint" | "null" | "undefined" | "unknown" | "never" | "date":
                return _KEYWORDS[schema.kind]
            case "literal":
                return _literal_dsl(schema.value)
            case "array":
                items = self._dsl(schema.items)
                if items is None:
                    return None
                return f"({items})[]" if " " in items else f"{items}[]"
            case "union":
                members = [self._dsl(m) for m in schema.members]
                if not members or any(m is None for m in members):
                    return None
                return " | ".join(members)
            case "intersection":
                members = [self._dsl(m) for m in schema.members]
                if not members or any(m is None for m in members):
                    return None
                return " & ".join(f"({m})" if " " in m else m for m in members)
        return None

    # Expressions

    def _emit(self, schema: SchemaIR, ctx: EmitContext, depth: int) -> str:
        dsl = self._dsl(schema)
        if dsl is not None:
            return f"type({json.dumps(dsl)})"

        match schema.kind:
            case "string":
                return f"type({json.dumps(regex_literal(schema.format))})"
            case "object":
                return self._object(schema, ctx, depth)
            case "array":
                return f"{self._emit(schema.items, ctx, depth)}.array()"
            case "tuple":
                items = ", ".join(self._value(item, ctx, depth) for item in schema.items)
                return f"type([{items}])"
            case "record":
                key = self._dsl(schema.key_type) or "string"
                value = self._value(schema.value_type, ctx, depth)
                return f"type({{ {json.dumps(f'[{key}]')}: {value} }})"
            case "enum":
                if not schema.values:
                    return 'type("never")'
                values = ", ".join(json.dumps(v) for v in schema.values)
                return f"type.enumerated({values})"
            case "literal":
                return f"type.unit({json.dumps(schema.value)})"
            case "union":
                return self._union(schema, ctx, depth)
            case "intersection":
                members = [self._emit(m, ctx, depth) for m in schema.members]
                if not members:
                    return 'type("unknown")'
                code = members[0]
                for member in members[1:]:
                    code = f"{code}.and({member})"
                return code
            case "ref":
                if ctx.is_forward(schema.name):
                    ctx.warnings.append(
                        f'Forward reference to "{schema.name}" cannot be expressed with arktype '
                        "outside a scope; the binding is referenced before its declaration"
                    )
                return schema_var_name(schema.name)
            case "raw":
                return schema.code
            case _:
                ctx.warn_unsupported(self.library, schema)
                return 'type("unknown")'

    def _value(self, schema: SchemaIR, ctx: EmitContext, depth: int) -> str:
        """A definition usable as an object value: quoted string syntax or an expression."""
        dsl = self._dsl(schema)
        if dsl is not None:
            return json.dumps(dsl)
        return self._emit(schema, ctx, depth)

    def _union(self, schema: UnionSchema, ctx: EmitContext, depth: int) -> str:
        wrapped = nullability_wrapper(schema.members)
        if wrapped is not None:
            inner, modifier = wrapped
            code = self._emit(inner, ctx, depth)
            for keyword in _MODIFIER_KEYWORDS[modifier]:
                code = f'{code}.or(type("{keyword}"))'
            return code
        if not schema.members:
            return 'type("never")'
        members = [self._emit(m, ctx, depth) for m in schema.members]
        code = members[0]
        for member in members[1:]:
            code = f"{code}.or({member})"
        return code

    def _property(self, key: str, prop: ObjectProperty, ctx: EmitContext, depth: int) -> str:
        if prop.required:
            name = key if is_valid_identifier(key) else json.dumps(key)
            return f"{name}: {self._value(prop.schema, ctx, depth)}"
        inner = strip_nullability(prop.schema)
        dsl = self._dsl(inner)
        if _accepts_null(inner):
            value = json.dumps(dsl) if dsl is not None else self._emit(inner, ctx, depth)
        elif dsl is not None:
            value = json.dumps(f"{dsl} | null")
        else:
            value = f'{self._emit(inner, ctx, depth)}.or(type("null"))'
        return f"{json.dumps(key + '?')}: {value}"

    def _object(self, schema: ObjectSchema, ctx: EmitContext, depth: int) -> str:
        pad = indent(depth + 1)
        lines = []
        for key, prop in schema.properties.items():
            lines.append(f"{pad}{self._property(key, prop, ctx, depth + 1)},")
        if schema.catchall is not None:
            lines.append(f'{pad}"[string]": {self._value(schema.catchall, ctx, depth + 1)},')
        elif schema.is_passthrough:
            lines.append(f'{pad}"+": "ignore",')
        else:
            lines.append(f'{pad}"+": "delete",')
        code = "type({\n" + "\n".join(lines) + "\n" + indent(depth) + "})"
        for name in reversed(schema.fragment_spreads):
            code = f"{schema_var_name(name)}.and({code})"
        return code


def _accepts_null(schema: SchemaIR) -> bool:
    if schema.kind == "union":
        return split_nullability(schema.members)[1]
    return schema.kind == "null"


def _literal_dsl(value) -> str | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if "'" in value or "\\" in value:
        return None
    return f"'{value}'"


arktype_emitter = ArktypeEmitter()
