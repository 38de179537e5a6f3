"""Effect Schema emitter."""

import json

from ..ir import NamedSchemaIR, ObjectProperty, ObjectSchema, SchemaIR, StringSchema, UnionSchema
from ..naming import safe_property_name, schema_var_name
from .base import (
    EmitContext,
    EmitterResult,
    ValidatorLibrary,
    indent,
    nullability_wrapper,
    regex_literal,
    render_module,
    strip_nullability,
)

_PRIMITIVES = {
    "boolean": "Schema.Boolean",
    "bigint": "Schema.BigIntFromSelf",
    "null": "Schema.Null",
    "undefined": "Schema.Undefined",
    "unknown": "Schema.Unknown",
    "never": "Schema.Never",
    "date": "Schema.DateFromSelf",
}

_WRAPPERS = {
    "nullable": "Schema.NullOr",
    "optional": "Schema.UndefinedOr",
    "nullish": "Schema.NullishOr",
}

_PRESERVE_EXCESS = '.annotations({ parseOptions: { onExcessProperty: "preserve" } })'


class EffectEmitter:
    """Emits ``Schema.*`` definitions from the ``effect`` package."""

    library = ValidatorLibrary.EFFECT
    title = "Effect"

    def import_statement(self) -> str:
        return 'import { Schema } from "effect";'

    def type_inference(self, schema_var: str, type_name: str) -> str:
        return f"export type {type_name} = typeof {schema_var}.Type;"

    def emit(self, schemas: list[NamedSchemaIR]) -> EmitterResult:
        return render_module(self, schemas, self._emit)

    def _emit(self, schema: SchemaIR, ctx: EmitContext, depth: int) -> str:
        match schema.kind:
            case "string":
                return self._string(schema)
            case "number":
                return "Schema.Number.pipe(Schema.int())" if schema.integer else "Schema.Number"
            case "boolean" | "bigint" | "null" | "undefined" | "unknown" | "never" | "date":
                return _PRIMITIVES[schema.kind]
            case "object":
                return self._object(schema, ctx, depth)
            case "array":
                return f"Schema.Array({self._emit(schema.items, ctx, depth)})"
            case "tuple":
                items = ", ".join(self._emit(item, ctx, depth) for item in schema.items)
                return f"Schema.Tuple({items})"
            case "record":
                key = self._emit(schema.key_type, ctx, depth)
                value = self._emit(schema.value_type, ctx, depth)
                return f"Schema.Record({{ key: {key}, value: {value} }})"
            case "enum":
                if not schema.values:
                    return "Schema.Never"
                values = ", ".join(json.dumps(v) for v in schema.values)
                return f"Schema.Literal({values})"
            case "literal":
                return f"Schema.Literal({json.dumps(schema.value)})"
            case "union":
                return self._union(schema, ctx, depth)
            case "intersection":
                members = [self._emit(m, ctx, depth) for m in schema.members]
                if not members:
                    return "Schema.Unknown"
                code = members[0]
                for member in members[1:]:
                    code = f"Schema.extend({code}, {member})"
                return code
            case "ref":
                var = schema_var_name(schema.name)
                if ctx.is_forward(schema.name):
                    return f"Schema.suspend(() => {var})"
                return var
            case "raw":
                return schema.code
            case _:
                ctx.warn_unsupported(self.library, schema)
                return "Schema.Unknown"

    def _string(self, schema: StringSchema) -> str:
        if schema.format is None:
            return "Schema.String"
        if schema.format == "uuid":
            return "Schema.UUID"
        return f"Schema.String.pipe(Schema.pattern({regex_literal(schema.format)}))"

    def _union(self, schema: UnionSchema, ctx: EmitContext, depth: int) -> str:
        wrapped = nullability_wrapper(schema.members)
        if wrapped is not None:
            inner, modifier = wrapped
            return f"{_WRAPPERS[modifier]}({self._emit(inner, ctx, depth)})"
        if not schema.members:
            return "Schema.Never"
        if len(schema.members) == 1:
            return self._emit(schema.members[0], ctx, depth)
        members = ", ".join(self._emit(m, ctx, depth) for m in schema.members)
        return f"Schema.Union({members})"

    def _property(self, prop: ObjectProperty, ctx: EmitContext, depth: int) -> str:
        if prop.required:
            return self._emit(prop.schema, ctx, depth)
        inner = self._emit(strip_nullability(prop.schema), ctx, depth)
        return f"Schema.optional(Schema.NullOr({inner}))"

    def _object(self, schema: ObjectSchema, ctx: EmitContext, depth: int) -> str:
        pad = indent(depth + 1)
        lines = []
        extended = []
        for name in schema.fragment_spreads:
            if name in ctx.object_names:
                lines.append(f"{pad}...{schema_var_name(name)}.fields,")
            else:
                extended.append(schema_var_name(name))
        for key, prop in schema.properties.items():
            lines.append(f"{pad}{safe_property_name(key)}: {self._property(prop, ctx, depth + 1)},")
        body = "{\n" + "\n".join(lines) + "\n" + indent(depth) + "}" if lines else "{}"

        if schema.catchall is not None:
            rest = self._emit(schema.catchall, ctx, depth)
            code = f"Schema.Struct({body}, Schema.Record({{ key: Schema.String, value: {rest} }}))"
        else:
            code = f"Schema.Struct({body})"
            if schema.is_passthrough:
                code += _PRESERVE_EXCESS
        for var in extended:
            code = f"Schema.extend({var}, {code})"
        return code


effect_emitter = EffectEmitter()
