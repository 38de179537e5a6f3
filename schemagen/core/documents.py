"""GraphQL schema and operation document loading using graphql-core.

Loads SDL (or introspection JSON) schemas and parses client documents into
``ParsedOperation`` / ``ParsedFragment`` records for the GraphQL parser.

Example usage:
    from schemagen.core.documents import load_documents, load_schema

    schema = load_schema("./schema.graphql")
    documents = load_documents(["./src/**/*.graphql"])
"""

import glob
import json
import logging
import os
from dataclasses import dataclass, field

from graphql import (
    FragmentDefinitionNode,
    FragmentSpreadNode,
    GraphQLSchema,
    Node,
    OperationDefinitionNode,
    OperationType,
    Visitor,
    build_client_schema,
    build_schema,
    parse,
    visit,
)

logger = logging.getLogger(__name__)

SCHEMA_EXTENSIONS = (".graphql", ".graphqls", ".gql")


class DocumentError(ValueError):
    """Raised for unreadable or unsupported GraphQL documents."""


@dataclass
class ParsedOperation:
    """A named query or mutation from a client document."""
    name: str
    operation: str  # "query" or "mutation"
    node: OperationDefinitionNode
    fragment_spread_names: list[str] = field(default_factory=list)
    source: str | None = None


@dataclass
class ParsedFragment:
    """A fragment definition from a client document."""
    name: str
    type_name: str
    node: FragmentDefinitionNode
    fragment_spread_names: list[str] = field(default_factory=list)
    source: str | None = None


@dataclass
class ParsedDocuments:
    """All operations and fragments found in a set of documents."""
    operations: list[ParsedOperation] = field(default_factory=list)
    fragments: list[ParsedFragment] = field(default_factory=list)

    def get_fragment(self, name: str) -> ParsedFragment | None:
        for fragment in self.fragments:
            if fragment.name == name:
                return fragment
        return None


class _FragmentSpreadCollector(Visitor):
    def __init__(self):
        super().__init__()
        self.names: list[str] = []

    def enter_fragment_spread(self, node: FragmentSpreadNode, *_args):
        if node.name.value not in self.names:
            self.names.append(node.name.value)


def find_fragment_spreads(node: Node) -> list[str]:
    """Names of fragments spread directly inside a node, in first-seen order."""
    collector = _FragmentSpreadCollector()
    visit(node, collector)
    return collector.names


def parse_documents(sources: dict[str, str]) -> ParsedDocuments:
    """Parse client documents keyed by source name.

    Subscriptions are skipped. Anonymous operations cannot be given a
    type name and are rejected.

    Raises:
        DocumentError: On an anonymous operation.
        GraphQLError: On a syntax error.
    """
    documents = ParsedDocuments()
    for source_name, text in sources.items():
        ast = parse(text)
        for definition in ast.definitions:
            if isinstance(definition, OperationDefinitionNode):
                if definition.name is None:
                    raise DocumentError(
                        f"Anonymous {definition.operation.value} in {source_name}: "
                        "operations must be named to generate types"
                    )
                if definition.operation == OperationType.SUBSCRIPTION:
                    logger.debug("Skipping subscription %s", definition.name.value)
                    continue
                documents.operations.append(ParsedOperation(
                    name=definition.name.value,
                    operation=definition.operation.value,
                    node=definition,
                    fragment_spread_names=find_fragment_spreads(definition),
                    source=source_name,
                ))
            elif isinstance(definition, FragmentDefinitionNode):
                documents.fragments.append(ParsedFragment(
                    name=definition.name.value,
                    type_name=definition.type_condition.name.value,
                    node=definition,
                    fragment_spread_names=find_fragment_spreads(definition),
                    source=source_name,
                ))
    logger.debug(
        "Parsed %d operations and %d fragments",
        len(documents.operations),
        len(documents.fragments),
    )
    return documents


def load_documents(patterns: list[str]) -> ParsedDocuments:
    """Load and parse every document matching the given glob patterns."""
    paths: list[str] = []
    for pattern in patterns:
        for path in sorted(glob.glob(pattern, recursive=True)):
            if os.path.isfile(path) and path not in paths:
                paths.append(path)
    if not paths:
        raise DocumentError(f"No GraphQL documents match {', '.join(patterns)}")

    sources = {}
    for path in paths:
        with open(path) as f:
            sources[path] = f.read()
    return parse_documents(sources)


def _collect_schema_files(schema_path: str) -> list[str]:
    """Collect all schema files from a file or directory path."""
    files = []
    if os.path.isfile(schema_path):
        files.append(schema_path)
    else:
        for root, _, filenames in os.walk(schema_path):
            for filename in filenames:
                if filename.endswith(SCHEMA_EXTENSIONS):
                    files.append(os.path.join(root, filename))
    return sorted(files)


def load_schema(schema_path: str) -> GraphQLSchema:
    """Build a schema from SDL files or an introspection result.

    Args:
        schema_path: An SDL file, a directory of SDL files, or a ``.json``
            introspection result (with or without the ``data`` wrapper).
    """
    if not os.path.exists(schema_path):
        raise DocumentError(f"Schema path does not exist: {schema_path}")

    if schema_path.endswith(".json"):
        with open(schema_path) as f:
            introspection = json.load(f)
        return build_client_schema(introspection.get("data", introspection))

    files = _collect_schema_files(schema_path)
    if not files:
        raise DocumentError(f"No schema files found in {schema_path}")
    sdl = []
    for path in files:
        with open(path) as f:
            sdl.append(f.read())
    logger.debug("Building schema from %d files", len(files))
    return build_schema("\n".join(sdl))
