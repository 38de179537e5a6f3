"""Valibot emitter."""

import json

from ..ir import NamedSchemaIR, ObjectProperty, ObjectSchema, SchemaIR, StringSchema, UnionSchema
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

_STRING_ACTIONS = {
    "email": "v.email()",
    "url": "v.url()",
    "uuid": "v.uuid()",
    "datetime": "v.isoTimestamp()",
    "date": "v.isoDate()",
    "time": "v.isoTime()",
    "ipv4": "v.ipv4()",
    "ipv6": "v.ipv6()",
}

_PRIMITIVES = {
    "boolean": "v.boolean()",
    "bigint": "v.bigint()",
    "null": "v.null()",
    "undefined": "v.undefined()",
    "unknown": "v.unknown()",
    "never": "v.never()",
    "date": "v.date()",
}


class ValibotEmitter:
    """Emits ``v.*`` schemas."""

    library = ValidatorLibrary.VALIBOT
    title = "Valibot"

    def import_statement(self) -> str:
        return 'import * as v from "valibot";'

    def type_inference(self, schema_var: str, type_name: str) -> str:
        return f"export type {type_name} = v.InferOutput<typeof {schema_var}>;"

    def emit(self, schemas: list[NamedSchemaIR]) -> EmitterResult:
        return render_module(self, schemas, self._emit)

    def _emit(self, schema: SchemaIR, ctx: EmitContext, depth: int) -> str:
        match schema.kind:
            case "string":
                return self._string(schema)
            case "number":
                return "v.pipe(v.number(), v.integer())" if schema.integer else "v.number()"
            case "boolean" | "bigint" | "null" | "undefined" | "unknown" | "never" | "date":
                return _PRIMITIVES[schema.kind]
            case "object":
                return self._object(schema, ctx, depth)
            case "array":
                return f"v.array({self._emit(schema.items, ctx, depth)})"
            case "tuple":
                items = ", ".join(self._emit(item, ctx, depth) for item in schema.items)
                return f"v.tuple([{items}])"
            case "record":
                key = self._emit(schema.key_type, ctx, depth)
                value = self._emit(schema.value_type, ctx, depth)
                return f"v.record({key}, {value})"
            case "enum":
                if not schema.values:
                    return "v.never()"
                values = ", ".join(json.dumps(value) for value in schema.values)
                return f"v.picklist([{values}])"
            case "literal":
                return f"v.literal({json.dumps(schema.value)})"
            case "union":
                return self._union(schema, ctx, depth)
            case "intersection":
                members = [self._emit(m, ctx, depth) for m in schema.members]
                if not members:
                    return "v.unknown()"
                if len(members) == 1:
                    return members[0]
                return f"v.intersect([{', '.join(members)}])"
            case "ref":
                var = schema_var_name(schema.name)
                if ctx.is_forward(schema.name):
                    return f"v.lazy(() => {var})"
                return var
            case "raw":
                return schema.code
            case _:
                ctx.warn_unsupported(self.library, schema)
                return "v.unknown()"

    def _string(self, schema: StringSchema) -> str:
        if schema.format is None:
            return "v.string()"
        return f"v.pipe(v.string(), {_STRING_ACTIONS[schema.format]})"

    def _union(self, schema: UnionSchema, ctx: EmitContext, depth: int) -> str:
        wrapped = nullability_wrapper(schema.members)
        if wrapped is not None:
            inner, modifier = wrapped
            return f"v.{modifier}({self._emit(inner, ctx, depth)})"
        if not schema.members:
            return "v.never()"
        if len(schema.members) == 1:
            return self._emit(schema.members[0], ctx, depth)
        members = ", ".join(self._emit(m, ctx, depth) for m in schema.members)
        return f"v.union([{members}])"

    def _property(self, prop: ObjectProperty, ctx: EmitContext, depth: int) -> str:
        if prop.required:
            return self._emit(prop.schema, ctx, depth)
        return f"v.nullish({self._emit(strip_nullability(prop.schema), ctx, depth)})"

    def _object(self, schema: ObjectSchema, ctx: EmitContext, depth: int) -> str:
        pad = indent(depth + 1)
        lines = []
        intersected = []
        for name in schema.fragment_spreads:
            if name in ctx.object_names:
                lines.append(f"{pad}...{schema_var_name(name)}.entries,")
            else:
                intersected.append(schema_var_name(name))
        for key, prop in schema.properties.items():
            lines.append(f"{pad}{safe_property_name(key)}: {self._property(prop, ctx, depth + 1)},")
        body = "{\n" + "\n".join(lines) + "\n" + indent(depth) + "}" if lines else "{}"

        if schema.catchall is not None:
            code = f"v.objectWithRest({body}, {self._emit(schema.catchall, ctx, depth)})"
        elif schema.is_passthrough:
            code = f"v.looseObject({body})"
        else:
            code = f"v.object({body})"
        if intersected:
            code = f"v.intersect([{', '.join(intersected)}, {code}])"
        return code


valibot_emitter = ValibotEmitter()
