"""Command-line interface for schemagen."""

import logging
from pathlib import Path

import click
from graphql import GraphQLError
from pydantic import ValidationError

from .core.config import CollectionDescriptor, GenerationConfig
from .core.documents import DocumentError, load_documents, load_schema
from .core.emitters import SUPPORTED_VALIDATORS
from .core.generator import GenerationResult, SchemaGenerator
from .core.openapi_document import (
    OpenAPIDocumentError,
    dereference,
    extract_base_url,
    extract_operations,
    load_document,
)
from .core.predicates import GRAPHQL_DIALECTS, OPENAPI_DIALECTS, generate_predicate_translator, predicate_imports
from .core.scalars import ScalarMappingError


def parse_scalar_options(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated ``NAME=CODE`` options into a mapping."""
    scalars = {}
    for value in values:
        name, sep, code = value.partition("=")
        if not sep or not name or not code:
            raise click.BadParameter(f"Expected NAME=CODE, got {value!r}", param_hint="--scalar")
        scalars[name.strip()] = code.strip()
    return scalars


def _configure_logging(verbose: bool):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _report(result: GenerationResult, output_path: Path, verbose: bool):
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)
    if verbose:
        counts: dict[str, int] = {}
        for schema in result.schemas:
            counts[schema.category] = counts.get(schema.category, 0) + 1
        for category, count in counts.items():
            click.echo(f"  {category}: {count}")
    click.echo(f"Done! Generated {len(result.schemas)} schemas in {output_path}")


@click.group()
@click.version_option()
def main():
    """Validator schema generator.

    Generate zod, valibot, arktype or Effect Schema modules from GraphQL
    and OpenAPI schemas.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to GraphQL SDL file, directory of SDL files, or introspection JSON.",
)
@click.option(
    "--documents",
    "-d",
    required=True,
    multiple=True,
    help="Glob pattern for operation documents (repeatable).",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(),
    help="Output file for the generated module.",
)
@click.option(
    "--validator",
    type=click.Choice(SUPPORTED_VALIDATORS),
    default="zod",
    show_default=True,
    help="Validator library to generate.",
)
@click.option(
    "--scalar",
    "scalars",
    multiple=True,
    metavar="NAME=CODE",
    help="Custom scalar mapping, e.g. Money='z.string()' (repeatable).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def graphql(schema: str, documents: tuple[str, ...], output: str, validator: str, scalars: tuple[str, ...], verbose: bool):
    """Generate schemas from a GraphQL schema and operation documents.

    Examples:

        schemagen graphql -s ./schema.graphql -d "src/**/*.graphql" -o ./src/schemas.ts

        schemagen graphql -s ./schema -d "queries/*.gql" -o out.ts --validator valibot
    """
    _configure_logging(verbose)
    output_path = Path(output).resolve()

    try:
        config = GenerationConfig(validator=validator, scalars=parse_scalar_options(scalars))
        click.echo("Parsing schema...")
        gql_schema = load_schema(schema)
        parsed = load_documents(list(documents))
        if verbose:
            click.echo(f"  Operations: {len(parsed.operations)}")
            click.echo(f"  Fragments: {len(parsed.fragments)}")

        click.echo(f"Generating {validator} schemas...")
        generator = SchemaGenerator(config)
        result = generator.generate_graphql(gql_schema, parsed, filename=output_path.name)
        generator.write(result, str(output_path))
    except (DocumentError, GraphQLError, ScalarMappingError, ValidationError) as e:
        raise click.ClickException(str(e)) from e

    _report(result, output_path, verbose)


@main.command()
@click.option(
    "--spec",
    "-s",
    "spec_path",
    required=True,
    type=click.Path(exists=True),
    help="Path to an OpenAPI document (.json, .yaml, .yml).",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(),
    help="Output file for the generated module.",
)
@click.option(
    "--validator",
    type=click.Choice(SUPPORTED_VALIDATORS),
    default="zod",
    show_default=True,
    help="Validator library to generate.",
)
@click.option(
    "--operation-id",
    "operation_ids",
    multiple=True,
    help="Only generate schemas for this operation (repeatable).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def openapi(spec_path: str, output: str, validator: str, operation_ids: tuple[str, ...], verbose: bool):
    """Generate schemas from an OpenAPI document.

    Examples:

        schemagen openapi -s ./petstore.yaml -o ./src/schemas.ts

        schemagen openapi -s api.json -o out.ts --validator effect --operation-id listPets
    """
    _configure_logging(verbose)
    output_path = Path(output).resolve()

    try:
        config = GenerationConfig(validator=validator, operation_ids=list(operation_ids) or None)
        click.echo("Loading OpenAPI document...")
        document = dereference(load_document(spec_path))
        operations = extract_operations(document)
        if verbose:
            click.echo(f"  Base URL: {extract_base_url(document) or '(none)'}")
            click.echo(f"  Operations: {len(operations)}")

        click.echo(f"Generating {validator} schemas...")
        generator = SchemaGenerator(config)
        result = generator.generate_openapi(document, operations, filename=output_path.name)
        generator.write(result, str(output_path))
    except (OpenAPIDocumentError, ValidationError) as e:
        raise click.ClickException(str(e)) from e

    _report(result, output_path, verbose)


@main.command()
@click.option("--name", "-n", required=True, help="Collection name, e.g. users.")
@click.option(
    "--source",
    type=click.Choice(["openapi", "graphql"]),
    default="openapi",
    show_default=True,
    help="Kind of API the collection is loaded from.",
)
@click.option(
    "--dialect",
    type=click.Choice(OPENAPI_DIALECTS + GRAPHQL_DIALECTS),
    default=None,
    help="Predicate dialect (defaults to rest-simple / hasura).",
)
@click.option("--params-type", default=None, help="TypeScript type the result is cast to.")
@click.option("--sort-param", default=None, help="Query parameter used for sorting.")
@click.option("--limit-param", default=None, help="Parameter used for the page size.")
@click.option("--offset-param", default=None, help="Parameter used for the offset.")
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(),
    help="Output file for the generated translator.",
)
def predicates(
    name: str,
    source: str,
    dialect: str | None,
    params_type: str | None,
    sort_param: str | None,
    limit_param: str | None,
    offset_param: str | None,
    output: str,
):
    """Generate a predicate translator for one collection.

    Examples:

        schemagen predicates -n users --dialect jsonapi -o ./src/users-predicates.ts

        schemagen predicates -n posts --source graphql --dialect prisma -o ./src/posts.ts
    """
    collection = CollectionDescriptor(
        name=name,
        predicate_mapping=dialect or ("hasura" if source == "graphql" else None),
        sort_param=sort_param,
        limit_param=limit_param,
        offset_param=offset_param,
        sync_mode="on-demand",
    )
    result = generate_predicate_translator(collection, params_type, source)
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)

    output_path = Path(output).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(f"{predicate_imports()}\n\n{result.content}")
    click.echo(f"Done! Generated {result.dialect} translator in {output_path}")
