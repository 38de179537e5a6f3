"""OpenAPI document -> schema IR.

Works on a document prepared by :func:`openapi_document.dereference`, where
a named component schema is recognised by object identity wherever it is
used.

Example usage:
    from schemagen.core.openapi_document import dereference, extract_operations, load_document
    from schemagen.core.openapi_parser import parse_openapi_to_ir

    document = dereference(load_document("petstore.yaml"))
    result = parse_openapi_to_ir(document, extract_operations(document))
"""

import logging
from typing import Any

from .dependencies import create_named_schema, topological_sort_schemas
from .ir import (
    PASSTHROUGH,
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntersectionSchema,
    LiteralSchema,
    NamedSchemaIR,
    NullSchema,
    NumberSchema,
    ObjectProperty,
    ObjectSchema,
    RecordSchema,
    RefSchema,
    SchemaCategory,
    SchemaIR,
    SchemaIRResult,
    StringSchema,
    TupleSchema,
    UnionSchema,
    UnknownSchema,
    make_nullable,
)
from .naming import pascal_case
from .openapi_document import OpenAPIOperation

logger = logging.getLogger(__name__)

STRING_FORMATS = {
    "date-time": "datetime",
    "date": "date",
    "time": "time",
    "email": "email",
    "uri": "url",
    "url": "url",
    "uuid": "uuid",
    "ipv4": "ipv4",
    "ipv6": "ipv6",
}

_SUBSCHEMA_KEYS = ("allOf", "oneOf", "anyOf")


def parse_openapi_to_ir(
    document: dict[str, Any],
    operations: list[OpenAPIOperation],
    operation_ids: list[str] | None = None,
) -> SchemaIRResult:
    """Convert the components and operations of a document into sorted IR entries.

    Args:
        document: A dereferenced OpenAPI document.
        operations: Operations extracted from the same document.
        operation_ids: Restrict generation to these operations.
    """
    if operation_ids is not None:
        wanted = set(operation_ids)
        operations = [op for op in operations if op.operation_id in wanted]
    builder = _OpenAPIIRBuilder(document)
    return builder.build(operations)


class _OpenAPIIRBuilder:
    """Per-call parser state. Created by ``parse_openapi_to_ir`` and discarded after."""

    def __init__(self, document: dict[str, Any]):
        components = (document.get("components") or {}).get("schemas") or {}
        self.components: dict[str, Any] = components
        # id(component schema) -> component name; first name wins for aliases.
        self.named: dict[int, str] = {}
        for name, schema in components.items():
            self.named.setdefault(id(schema), name)
        self.entries: list[NamedSchemaIR] = []
        self.generated: set[str] = set()
        self.pending: dict[str, Any] = {}
        self.warnings: list[str] = []

    def build(self, operations: list[OpenAPIOperation]) -> SchemaIRResult:
        used: list[str] = []
        seen: set[int] = set()
        for operation in operations:
            for schema in _operation_schemas(operation):
                self._collect_used(schema, used, seen)

        for name in used:
            self._generate_component(name)
        self._drain_pending()

        for operation in operations:
            self._generate_operation(operation)
        self._drain_pending()

        logger.debug("Built %d OpenAPI entries from %d operations", len(self.entries), len(operations))
        return SchemaIRResult(
            schemas=topological_sort_schemas(self.entries),
            warnings=self.warnings,
        )

    def _add_entry(self, name: str, schema: SchemaIR, category: SchemaCategory):
        self.entries.append(create_named_schema(name, schema, category))
        self.generated.add(name)

    def _collect_used(self, schema: Any, used: list[str], seen: set[int]):
        """Find component names reachable from a schema by identity."""
        if not isinstance(schema, dict) or id(schema) in seen:
            return
        seen.add(id(schema))
        name = self.named.get(id(schema))
        if name is not None and name not in used:
            used.append(name)
        if isinstance(schema.get("items"), dict):
            self._collect_used(schema["items"], used, seen)
        for prop in (schema.get("properties") or {}).values():
            self._collect_used(prop, used, seen)
        if isinstance(schema.get("additionalProperties"), dict):
            self._collect_used(schema["additionalProperties"], used, seen)
        for key in _SUBSCHEMA_KEYS:
            for sub in schema.get(key) or ():
                self._collect_used(sub, used, seen)

    def _generate_component(self, name: str):
        if name in self.generated:
            return
        self.generated.add(name)
        self._add_entry(name, self._schema_to_ir(self.components[name], name), "component")

    def _drain_pending(self):
        while self.pending:
            name = next(iter(self.pending))
            del self.pending[name]
            self._generate_component(name)

    def _generate_operation(self, operation: OpenAPIOperation):
        base = pascal_case(operation.operation_id)

        if operation.request_body is not None and f"{base}Request" not in self.generated:
            self._add_entry(f"{base}Request", self._schema_to_ir(operation.request_body), "input")

        if operation.response_schema is not None and f"{base}Response" not in self.generated:
            self._add_entry(f"{base}Response", self._schema_to_ir(operation.response_schema), "response")

        params = [*operation.path_params, *operation.query_params]
        if params and f"{base}Params" not in self.generated:
            properties = {}
            for param in params:
                schema = param.get("schema")
                properties[param["name"]] = ObjectProperty(
                    self._schema_to_ir(schema) if isinstance(schema, dict) else UnknownSchema(),
                    required=param.get("in") == "path" or bool(param.get("required", False)),
                )
            self._add_entry(f"{base}Params", ObjectSchema(properties), "params")

    def _schema_to_ir(self, schema: Any, current: str | None = None) -> SchemaIR:
        """Convert one schema object, referencing named components other than ``current``."""
        if not isinstance(schema, dict):
            return UnknownSchema()

        name = self.named.get(id(schema))
        if name is not None and name != current:
            if name not in self.generated:
                self.pending.setdefault(name, schema)
            return RefSchema(name)

        types = schema.get("type")
        nullable = bool(schema.get("nullable"))
        if isinstance(types, list):
            nullable = nullable or "null" in types
            types = [t for t in types if t != "null"]
            if len(types) == 1:
                types = types[0]
            elif not types:
                types = None

        ir = self._non_null_schema_to_ir(schema, types)
        if nullable and not _accepts_null(ir):
            return make_nullable(ir)
        return ir

    def _non_null_schema_to_ir(self, schema: dict[str, Any], types) -> SchemaIR:
        if "const" in schema:
            if schema["const"] is None:
                return NullSchema()
            return LiteralSchema(schema["const"])

        if "enum" in schema:
            values = [v for v in schema["enum"] if v is not None]
            enum = EnumSchema(values)
            return make_nullable(enum) if None in schema["enum"] else enum

        if "allOf" in schema:
            members = [self._schema_to_ir(sub) for sub in schema["allOf"]]
            return members[0] if len(members) == 1 else IntersectionSchema(members)

        for key in ("oneOf", "anyOf"):
            if key in schema:
                members = [self._schema_to_ir(sub) for sub in schema[key]]
                return members[0] if len(members) == 1 else UnionSchema(members)

        if isinstance(types, list):
            return UnionSchema([self._typed_schema_to_ir(schema, t) for t in types])
        return self._typed_schema_to_ir(schema, types)

    def _typed_schema_to_ir(self, schema: dict[str, Any], type_name: str | None) -> SchemaIR:
        match type_name:
            case "string":
                return StringSchema(format=STRING_FORMATS.get(schema.get("format")))
            case "number":
                return NumberSchema()
            case "integer":
                return NumberSchema(integer=True)
            case "boolean":
                return BooleanSchema()
            case "null":
                return NullSchema()
            case "array":
                if "prefixItems" in schema:
                    return TupleSchema([self._schema_to_ir(item) for item in schema["prefixItems"]])
                items = schema.get("items")
                return ArraySchema(self._schema_to_ir(items) if isinstance(items, dict) else UnknownSchema())
            case "object":
                return self._object_to_ir(schema)
        if "properties" in schema or "additionalProperties" in schema:
            return self._object_to_ir(schema)
        if type_name is not None:
            message = f'Unsupported schema type "{type_name}", using unknown'
            if message not in self.warnings:
                self.warnings.append(message)
        return UnknownSchema()

    def _object_to_ir(self, schema: dict[str, Any]) -> SchemaIR:
        properties = schema.get("properties") or {}
        additional = schema.get("additionalProperties")

        if not properties and (additional is True or isinstance(additional, dict)):
            value = self._schema_to_ir(additional) if isinstance(additional, dict) and additional else UnknownSchema()
            return RecordSchema(StringSchema(), value)

        required = set(schema.get("required") or ())
        object_properties = {
            name: ObjectProperty(self._schema_to_ir(prop), required=name in required)
            for name, prop in properties.items()
        }
        if additional is True or additional == {}:
            return ObjectSchema(object_properties, additional_properties=PASSTHROUGH)
        if isinstance(additional, dict):
            return ObjectSchema(object_properties, additional_properties=self._schema_to_ir(additional))
        return ObjectSchema(object_properties)


def _accepts_null(ir: SchemaIR) -> bool:
    if ir.kind == "union":
        return any(member.kind == "null" for member in ir.members)
    return ir.kind == "null"


def _operation_schemas(operation: OpenAPIOperation) -> list[Any]:
    schemas = [operation.request_body, operation.response_schema]
    for param in [*operation.path_params, *operation.query_params]:
        schemas.append(param.get("schema"))
    return [s for s in schemas if isinstance(s, dict)]
