"""Dependency extraction and ordering for named schema entries."""

from collections.abc import Iterable

from .ir import NamedSchemaIR, SchemaCategory, SchemaIR


def extract_dependencies(schema: SchemaIR) -> set[str]:
    """Collect every entry name a schema tree refers to.

    Covers ``ref`` nodes and GraphQL fragment spreads, reached through
    object properties, typed additional properties, array and tuple items,
    record keys and values, and union / intersection members.
    """
    deps: set[str] = set()
    _visit(schema, deps)
    return deps


def _visit(schema: SchemaIR, deps: set[str]) -> None:
    match schema.kind:
        case "ref":
            deps.add(schema.name)
        case "object":
            for prop in schema.properties.values():
                _visit(prop.schema, deps)
            if schema.catchall is not None:
                _visit(schema.catchall, deps)
            deps.update(schema.fragment_spreads)
        case "array":
            _visit(schema.items, deps)
        case "tuple":
            for item in schema.items:
                _visit(item, deps)
        case "record":
            _visit(schema.key_type, deps)
            _visit(schema.value_type, deps)
        case "union" | "intersection":
            for member in schema.members:
                _visit(member, deps)


def create_named_schema(
    name: str,
    schema: SchemaIR,
    category: SchemaCategory = "component",
    extra_dependencies: Iterable[str] = (),
) -> NamedSchemaIR:
    """Build a named entry, computing its dependencies (never itself)."""
    deps = extract_dependencies(schema)
    deps.update(extra_dependencies)
    deps.discard(name)
    return NamedSchemaIR(
        name=name,
        schema=schema,
        dependencies=frozenset(deps),
        category=category,
    )


def topological_sort_schemas(schemas: list[NamedSchemaIR]) -> list[NamedSchemaIR]:
    """Order entries so dependencies precede the entries that use them.

    Cycles are broken at the point of re-entry, and names that do not
    belong to the collection are ignored. Entries with no ordering
    constraint keep their relative input order.
    """
    by_name = {entry.name: entry for entry in schemas}
    visited: set[str] = set()
    visiting: set[str] = set()
    ordered: list[NamedSchemaIR] = []

    def visit(name: str) -> None:
        if name in visited or name in visiting:
            return
        entry = by_name.get(name)
        if entry is None:
            return
        visiting.add(name)
        for dep in sorted(entry.dependencies):
            visit(dep)
        visiting.discard(name)
        visited.add(name)
        ordered.append(entry)

    for entry in schemas:
        visit(entry.name)
    return ordered
