"""Predicate translator code generation.

Generates TypeScript functions that translate a generic collection load
request (filters, sorts, limit, offset) into the query parameters of a REST
API or the variables of a GraphQL API, in one of four dialects:

    rest-simple  field=v, field_gte=v, sort=-a,b, limit, offset
    jsonapi      filter[field]=v, filter[field][gte]=v, sort, page[limit]
    hasura       where: { field: { _gte: v } }, _and, order_by, limit/offset
    prisma       where: { field: { gte: v } }, AND, orderBy, take/skip

Example usage:
    from schemagen.core.config import CollectionDescriptor
    from schemagen.core.predicates import generate_predicate_translator

    result = generate_predicate_translator(
        CollectionDescriptor(name="users", predicate_mapping="jsonapi"),
        "ListUsersParams",
        "openapi",
    )
    print(result.content)
"""

from dataclasses import dataclass, field
from typing import Literal

from .config import CollectionDescriptor
from .naming import pascal_case
from .rendering import default_environment

SourceType = Literal["openapi", "graphql"]

OPENAPI_DIALECTS = ("rest-simple", "jsonapi")
GRAPHQL_DIALECTS = ("hasura", "prisma")
FILTER_OPERATORS = ("eq", "lt", "lte", "gt", "gte", "in")

# Filter key expressions, evaluated in the generated code with `fieldName` in scope.
_REST_SIMPLE_KEYS = {
    "eq": "fieldName",
    **{op: f"`${{fieldName}}_{op}`" for op in FILTER_OPERATORS if op != "eq"},
}
_JSONAPI_KEYS = {
    "eq": "`filter[${fieldName}]`",
    **{op: f"`filter[${{fieldName}}][{op}]`" for op in FILTER_OPERATORS if op != "eq"},
}

_HASURA_OPERATORS = {op: f"_{op}" for op in FILTER_OPERATORS}
_PRISMA_OPERATORS = {"eq": "equals", **{op: op for op in FILTER_OPERATORS if op != "eq"}}


@dataclass
class PredicateTranslatorResult:
    """Generated translator source plus non-fatal warnings."""
    content: str
    dialect: str
    warnings: list[str] = field(default_factory=list)


def resolve_dialect(collection: CollectionDescriptor) -> str:
    """Pick the dialect for a collection.

    Priority: explicit mapping, then the detected filter style (unless it
    is "custom" or unknown), then rest-simple.
    """
    if collection.predicate_mapping:
        return collection.predicate_mapping
    style = collection.filter_style
    if style and style in OPENAPI_DIALECTS + GRAPHQL_DIALECTS:
        return style
    return "rest-simple"


def translator_name(collection: CollectionDescriptor) -> str:
    return f"translate{pascal_case(collection.name)}Predicates"


def generate_predicate_translator(
    collection: CollectionDescriptor,
    params_type_name: str | None = None,
    source_type: SourceType = "openapi",
    include_helpers: bool = True,
) -> PredicateTranslatorResult:
    """Generate the translator function for one collection.

    Args:
        collection: The collection descriptor.
        params_type_name: Type the result is cast to (``Partial<T>``);
            ``Record<string, unknown>`` when omitted.
        source_type: "openapi" or "graphql".
        include_helpers: Emit ``buildNestedObject`` after GraphQL
            translators. Disable when several translators share one module.

    Raises:
        ValueError: If ``source_type`` is not supported.
    """
    if source_type not in ("openapi", "graphql"):
        raise ValueError(f'Unknown source type "{source_type}". Expected "openapi" or "graphql"')

    warnings: list[str] = []
    dialect = resolve_dialect(collection)
    allowed, fallback = (
        (OPENAPI_DIALECTS, "rest-simple") if source_type == "openapi" else (GRAPHQL_DIALECTS, "hasura")
    )
    if dialect not in allowed:
        warnings.append(
            f'Predicate dialect "{dialect}" is not available for {source_type} collection '
            f'"{collection.name}", using "{fallback}"'
        )
        dialect = fallback

    context = {
        "name": collection.name,
        "fn_name": translator_name(collection),
        "return_type": f"Partial<{params_type_name}>" if params_type_name else "Record<string, unknown>",
    }
    env = default_environment()
    if dialect == "rest-simple":
        template = env.get_template("predicates/rest.ts.j2")
        context.update(
            label="query parameters",
            filter_keys=list(_REST_SIMPLE_KEYS.items()),
            sort_param=collection.sort_param or "sort",
            limit_param=collection.limit_param or "limit",
            offset_param=collection.offset_param or "offset",
        )
    elif dialect == "jsonapi":
        template = env.get_template("predicates/rest.ts.j2")
        page_style = collection.pagination_style == "page"
        context.update(
            label="JSON:API query parameters",
            filter_keys=list(_JSONAPI_KEYS.items()),
            sort_param="sort",
            limit_param="page[limit]" if page_style else collection.limit_param or "page[limit]",
            offset_param="page[offset]" if page_style else collection.offset_param or "page[offset]",
        )
    elif dialect == "hasura":
        template = env.get_template("predicates/graphql.ts.j2")
        context.update(
            label="Hasura",
            operator_keys=list(_HASURA_OPERATORS.items()),
            and_key="_and",
            order_key="order_by",
            limit_param=collection.limit_param or "limit",
            offset_param=collection.offset_param or "offset",
            include_helpers=include_helpers,
        )
    else:
        template = env.get_template("predicates/graphql.ts.j2")
        context.update(
            label="Prisma",
            operator_keys=list(_PRISMA_OPERATORS.items()),
            and_key="AND",
            order_key="orderBy",
            limit_param=collection.limit_param or "take",
            offset_param=collection.offset_param or "skip",
            include_helpers=include_helpers,
        )

    return PredicateTranslatorResult(
        content=template.render(context),
        dialect=dialect,
        warnings=warnings,
    )


def predicate_imports() -> str:
    """Imports the generated translators rely on."""
    return (
        'import { parseLoadSubsetOptions } from "@tanstack/query-db-collection"\n'
        'import type { LoadSubsetOptions } from "@tanstack/db"'
    )


def needs_predicate_translation(collection: CollectionDescriptor) -> bool:
    """Only collections loaded on demand push predicates to the API."""
    return collection.sync_mode == "on-demand"
