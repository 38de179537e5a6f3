"""Shared pieces of the validator emitters.

Each validator library has its own emitter class. They do not inherit from
a common base; they only conform to the :class:`Emitter` protocol and share
the helpers below for union classification and module rendering.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from ..ir import NamedSchemaIR, SchemaIR
from ..naming import schema_var_name
from ..rendering import default_environment


class ValidatorLibrary(str, Enum):
    """Supported validator libraries."""
    ZOD = "zod"
    VALIBOT = "valibot"
    ARKTYPE = "arktype"
    EFFECT = "effect"


@dataclass
class EmitterResult:
    """Generated module source plus non-fatal warnings."""
    content: str
    warnings: list[str] = field(default_factory=list)


@runtime_checkable
class Emitter(Protocol):
    """Protocol implemented by every validator emitter.

    Example:
        emitter = get_emitter("zod")
        result = emitter.emit(ir_result.schemas)
        Path("schemas.ts").write_text(result.content)
    """

    library: ValidatorLibrary

    def import_statement(self) -> str:
        """The import line the generated module starts with."""
        ...

    def type_inference(self, schema_var: str, type_name: str) -> str:
        """The exported TypeScript type inferred from a schema binding."""
        ...

    def emit(self, schemas: list[NamedSchemaIR]) -> EmitterResult:
        """Render a whole module for an ordered list of entries."""
        ...


@dataclass
class EmitContext:
    """Per-emit state threaded through an emitter's recursive calls."""
    # Entries whose schema is a plain object and can be spread field-wise.
    object_names: set[str] = field(default_factory=set)
    # Entries already bound earlier in the module.
    declared: set[str] = field(default_factory=set)
    warnings: list[str] = field(default_factory=list)

    def is_forward(self, name: str) -> bool:
        """True when a reference points at a binding not yet declared."""
        return name not in self.declared

    def warn_unsupported(self, library: ValidatorLibrary, schema: SchemaIR):
        self.warnings.append(f'Unsupported schema kind "{schema.kind}" for {library.value}, using unknown')


# Regular expressions used where a library has no built-in string format.
FORMAT_PATTERNS: dict[str, str] = {
    "email": r"^[^\s@]+@[^\s@]+\.[^\s@]+$",
    "url": r"^[a-zA-Z][a-zA-Z\d+\-.]*:\/\/[^\s]+$",
    "datetime": r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$",
    "date": r"^\d{4}-\d{2}-\d{2}$",
    "time": r"^\d{2}:\d{2}(:\d{2}(\.\d+)?)?$",
    "ipv4": r"^(25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)(\.(25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)){3}$",
    "ipv6": r"^(([0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}|([0-9a-fA-F]{1,4}:){0,6}[0-9a-fA-F]{0,4}::([0-9a-fA-F]{1,4}:){0,6}[0-9a-fA-F]{0,4})$",
}


def regex_literal(format_name: str) -> str:
    """JS regex literal for a string format."""
    return f"/{FORMAT_PATTERNS[format_name]}/"


def split_nullability(members: list[SchemaIR]) -> tuple[list[SchemaIR], bool, bool]:
    """Split union members into (concrete members, has null, has undefined)."""
    concrete = [m for m in members if m.kind not in ("null", "undefined")]
    has_null = any(m.kind == "null" for m in members)
    has_undefined = any(m.kind == "undefined" for m in members)
    return concrete, has_null, has_undefined


def nullability_wrapper(members: list[SchemaIR]) -> tuple[SchemaIR, str] | None:
    """Classify a union as a single type made nullable, optional or nullish.

    Returns ``(inner, modifier)`` with modifier one of ``"nullable"``,
    ``"optional"`` or ``"nullish"``, or None when the union has zero or
    several concrete members and must be rendered as a plain union.
    """
    concrete, has_null, has_undefined = split_nullability(members)
    if len(concrete) != 1 or not (has_null or has_undefined):
        return None
    if has_null and has_undefined:
        return concrete[0], "nullish"
    return concrete[0], "nullable" if has_null else "optional"


def strip_nullability(schema: SchemaIR) -> SchemaIR:
    """Unwrap ``union[T, null | undefined]`` to ``T`` for optional properties."""
    if schema.kind == "union":
        wrapped = nullability_wrapper(schema.members)
        if wrapped is not None:
            return wrapped[0]
    return schema


def spreadable_names(schemas: list[NamedSchemaIR]) -> set[str]:
    """Names of entries rendered as a plain object whose fields can be spread.

    An object entry that spreads a non-spreadable entry is rendered as an
    intersection, so it loses its field accessor too. Repeats until stable.
    """
    names = {s.name for s in schemas if s.schema.kind == "object"}
    changed = True
    while changed:
        changed = False
        for entry in schemas:
            if entry.name in names and not set(entry.schema.fragment_spreads) <= names:
                names.discard(entry.name)
                changed = True
    return names


def indent(depth: int) -> str:
    return "\t" * depth


def render_module(
    emitter,
    schemas: list[NamedSchemaIR],
    emit_schema: Callable[[SchemaIR, EmitContext, int], str],
) -> EmitterResult:
    """Render the module layout shared by all emitters.

    One schema binding per entry, in entry order, followed by one inferred
    type export per entry in the same order.
    """
    ctx = EmitContext(object_names=spreadable_names(schemas))
    declarations = []
    for entry in schemas:
        var_name = schema_var_name(entry.name)
        declarations.append({
            "name": entry.name,
            "var_name": var_name,
            "code": emit_schema(entry.schema, ctx, 0),
            "type_export": emitter.type_inference(var_name, entry.name),
        })
        ctx.declared.add(entry.name)

    template = default_environment().get_template("module.ts.j2")
    content = template.render(
        import_statement=emitter.import_statement(),
        title=emitter.title,
        rule="=" * 76,
        declarations=declarations,
    )
    return EmitterResult(content=content, warnings=ctx.warnings)
