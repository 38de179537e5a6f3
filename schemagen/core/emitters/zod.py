"""Zod (v4) emitter."""

import json

from ..ir import EnumSchema, NamedSchemaIR, ObjectProperty, ObjectSchema, SchemaIR, StringSchema, UnionSchema
from ..naming import safe_property_name, schema_var_name
from .base import (
    EmitContext,
    EmitterResult,
    ValidatorLibrary,
    indent,
    nullability_wrapper,
    render_module,
    strip_nullability,
)

_STRING_FORMATS = {
    "email": "z.email()",
    "url": "z.url()",
    "uuid": "z.uuid()",
    "datetime": "z.iso.datetime()",
    "date": "z.iso.date()",
    "time": "z.iso.time()",
    "ipv4": "z.ipv4()",
    "ipv6": "z.ipv6()",
}

_PRIMITIVES = {
    "boolean": "z.boolean()",
    "bigint": "z.bigint()",
    "null": "z.null()",
    "undefined": "z.undefined()",
    "unknown": "z.unknown()",
    "never": "z.never()",
    "date": "z.date()",
}


class ZodEmitter:
    """Emits ``z.*`` schemas."""

    library = ValidatorLibrary.ZOD
    title = "Zod"

    def import_statement(self) -> str:
        return 'import * as z from "zod";'

    def type_inference(self, schema_var: str, type_name: str) -> str:
        return f"export type {type_name} = z.infer<typeof {schema_var}>;"

    def emit(self, schemas: list[NamedSchemaIR]) -> EmitterResult:
        return render_module(self, schemas, self._emit)

    def _emit(self, schema: SchemaIR, ctx: EmitContext, depth: int) -> str:
        match schema.kind:
            case "string":
                return self._string(schema)
            case "number":
                return "z.number().int()" if schema.integer else "z.number()"
            case "boolean" | "bigint" | "null" | "undefined" | "unknown" | "never" | "date":
                return _PRIMITIVES[schema.kind]
            case "object":
                return self._object(schema, ctx, depth)
            case "array":
                return f"z.array({self._emit(schema.items, ctx, depth)})"
            case "tuple":
                items = ", ".join(self._emit(item, ctx, depth) for item in schema.items)
                return f"z.tuple([{items}])"
            case "record":
                key = self._emit(schema.key_type, ctx, depth)
                value = self._emit(schema.value_type, ctx, depth)
                return f"z.record({key}, {value})"
            case "enum":
                return self._enum(schema)
            case "literal":
                return f"z.literal({json.dumps(schema.value)})"
            case "union":
                return self._union(schema, ctx, depth)
            case "intersection":
                members = [self._emit(m, ctx, depth) for m in schema.members]
                if not members:
                    return "z.unknown()"
                code = members[0]
                for member in members[1:]:
                    code = f"{code}.and({member})"
                return code
            case "ref":
                var = schema_var_name(schema.name)
                if ctx.is_forward(schema.name):
                    return f"z.lazy(() => {var})"
                return var
            case "raw":
                return schema.code
            case _:
                ctx.warn_unsupported(self.library, schema)
                return "z.unknown()"

    def _string(self, schema: StringSchema) -> str:
        if schema.format is None:
            return "z.string()"
        return _STRING_FORMATS[schema.format]

    def _enum(self, schema: EnumSchema) -> str:
        if not schema.values:
            return "z.never()"
        if all(isinstance(v, str) for v in schema.values):
            values = ", ".join(json.dumps(v) for v in schema.values)
            return f"z.enum([{values}])"
        literals = [f"z.literal({json.dumps(v)})" for v in schema.values]
        if len(literals) == 1:
            return literals[0]
        return f"z.union([{', '.join(literals)}])"

    def _union(self, schema: UnionSchema, ctx: EmitContext, depth: int) -> str:
        wrapped = nullability_wrapper(schema.members)
        if wrapped is not None:
            inner, modifier = wrapped
            return f"{self._emit(inner, ctx, depth)}.{modifier}()"
        if not schema.members:
            return "z.never()"
        if len(schema.members) == 1:
            return self._emit(schema.members[0], ctx, depth)
        members = ", ".join(self._emit(m, ctx, depth) for m in schema.members)
        return f"z.union([{members}])"

    def _property(self, prop: ObjectProperty, ctx: EmitContext, depth: int) -> str:
        if prop.required:
            return self._emit(prop.schema, ctx, depth)
        return f"{self._emit(strip_nullability(prop.schema), ctx, depth)}.nullish()"

    def _object(self, schema: ObjectSchema, ctx: EmitContext, depth: int) -> str:
        pad = indent(depth + 1)
        lines = []
        intersected = []
        for name in schema.fragment_spreads:
            if name in ctx.object_names:
                lines.append(f"{pad}...{schema_var_name(name)}.shape,")
            else:
                intersected.append(schema_var_name(name))
        for key, prop in schema.properties.items():
            lines.append(f"{pad}{safe_property_name(key)}: {self._property(prop, ctx, depth + 1)},")
        body = "{\n" + "\n".join(lines) + "\n" + indent(depth) + "}" if lines else "{}"

        code = f"z.looseObject({body})" if schema.is_passthrough else f"z.object({body})"
        if schema.catchall is not None:
            code += f".catchall({self._emit(schema.catchall, ctx, depth)})"
        for var in intersected:
            code = f"{var}.and({code})"
        return code


zod_emitter = ZodEmitter()
