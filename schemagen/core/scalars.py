"""GraphQL scalar mappings for schema generation.

Maps GraphQL scalar names to IR nodes. Built-in and common custom scalars
are registered by default; callers can override any scalar with verbatim
validator code, which is checked against the target validator library so
that a zod expression is not silently emitted into a valibot module.

Example usage:
    from schemagen.core.scalars import ScalarRegistry

    registry = ScalarRegistry({"Money": "z.string().regex(/^\\d+\\.\\d{2}$/)"}, validator="zod")
    registry.get("Money")     # RawSchema(code="z.string()...")
    registry.get("DateTime")  # StringSchema(format="datetime")
"""

from .emitters.base import ValidatorLibrary
from .ir import (
    BigIntSchema,
    BooleanSchema,
    NumberSchema,
    RawSchema,
    RecordSchema,
    SchemaIR,
    StringSchema,
    UnknownSchema,
)

# Leading tokens a scalar override must start with, per validator library.
VALIDATOR_PREFIXES: dict[ValidatorLibrary, tuple[str, ...]] = {
    ValidatorLibrary.ZOD: ("z.",),
    ValidatorLibrary.VALIBOT: ("v.",),
    ValidatorLibrary.ARKTYPE: ("type(", "type."),
    ValidatorLibrary.EFFECT: ("Schema.",),
}

# Suggested replacement keyed by what the user typed. Unrecognized input
# falls back to the library's string expression.
_SUGGESTIONS: dict[ValidatorLibrary, dict[str, str]] = {
    ValidatorLibrary.ZOD: {
        "string": "z.string()",
        "number": "z.number()",
        "boolean": "z.boolean()",
        "date": "z.string()",
        "object": "z.object({})",
        "any": "z.any()",
        "unknown": "z.unknown()",
    },
    ValidatorLibrary.VALIBOT: {
        "string": "v.string()",
        "number": "v.number()",
        "boolean": "v.boolean()",
        "date": "v.string()",
        "object": "v.object({})",
        "any": "v.any()",
        "unknown": "v.unknown()",
    },
    ValidatorLibrary.ARKTYPE: {
        "string": 'type("string")',
        "number": 'type("number")',
        "boolean": 'type("boolean")',
        "date": 'type("string")',
        "object": "type({})",
        "any": 'type("unknown")',
        "unknown": 'type("unknown")',
    },
    ValidatorLibrary.EFFECT: {
        "string": "Schema.String",
        "number": "Schema.Number",
        "boolean": "Schema.Boolean",
        "date": "Schema.String",
        "object": "Schema.Struct({})",
        "any": "Schema.Unknown",
        "unknown": "Schema.Unknown",
    },
}

# Capitalized spellings accepted alongside the lowercase keys.
_SUGGESTION_ALIASES = {"String": "string", "Number": "number", "Boolean": "boolean", "Date": "date"}


class ScalarMappingError(ValueError):
    """Raised when a scalar override does not belong to the target validator."""

    def __init__(self, scalar_name: str, code: str, validator: ValidatorLibrary, suggestion: str):
        self.scalar_name = scalar_name
        self.code = code
        self.validator = validator
        self.suggestion = suggestion
        super().__init__(
            f'Invalid scalar mapping for "{scalar_name}": received "{code}". '
            f"For {validator.value}, scalar values must be valid {validator.value} expressions. "
            f'Did you mean "{suggestion}"?'
        )


class ScalarRegistry:
    """Registry of GraphQL scalar name -> IR node.

    Example:
        registry = ScalarRegistry()
        registry.register("Cursor", StringSchema())

        if registry.has("Cursor"):
            schema = registry.get("Cursor")
    """

    def __init__(
        self,
        overrides: dict[str, str] | None = None,
        validator: ValidatorLibrary | str | None = None,
    ):
        self._schemas: dict[str, SchemaIR] = {}
        self.validator = ValidatorLibrary(validator) if validator is not None else None
        self._register_defaults()
        for name, code in (overrides or {}).items():
            self.register_code(name, code)

    def _register_defaults(self):
        """Register built-in GraphQL scalars and common custom ones."""
        self.register("ID", StringSchema())
        self.register("String", StringSchema())
        self.register("Int", NumberSchema(integer=True))
        self.register("Float", NumberSchema())
        self.register("Boolean", BooleanSchema())
        self.register("DateTime", StringSchema(format="datetime"))
        self.register("Date", StringSchema(format="date"))
        self.register("Time", StringSchema(format="time"))
        self.register("JSON", UnknownSchema())
        self.register("JSONObject", RecordSchema(StringSchema(), UnknownSchema()))
        self.register("BigInt", BigIntSchema())
        self.register("UUID", StringSchema(format="uuid"))
        self.register("Email", StringSchema(format="email"))
        self.register("URL", StringSchema(format="url"))

    def register(self, scalar_name: str, schema: SchemaIR):
        """Register an IR node for a scalar type."""
        self._schemas[scalar_name] = schema

    def register_code(self, scalar_name: str, code: str):
        """Register verbatim validator code for a scalar type.

        Raises:
            ScalarMappingError: If a validator is set and the code does not
                start with one of its expression prefixes.
        """
        if self.validator is not None and not code.startswith(VALIDATOR_PREFIXES[self.validator]):
            raise ScalarMappingError(scalar_name, code, self.validator, self.suggest(code))
        self.register(scalar_name, RawSchema(code))

    def suggest(self, code: str) -> str:
        """Suggest replacement code in the current validator for what was typed."""
        suggestions = _SUGGESTIONS[self.validator or ValidatorLibrary.ZOD]
        key = _SUGGESTION_ALIASES.get(code, code)
        return suggestions.get(key, suggestions["string"])

    def get(self, scalar_name: str) -> SchemaIR | None:
        """Get the IR node for a scalar type, or None if not registered."""
        return self._schemas.get(scalar_name)

    def has(self, scalar_name: str) -> bool:
        """Check if a scalar type is registered."""
        return scalar_name in self._schemas
