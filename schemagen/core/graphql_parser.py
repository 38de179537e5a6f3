"""GraphQL schema + operation documents -> schema IR.

Walks the selection sets of client operations and fragments against a
graphql-core ``GraphQLSchema`` and produces one named IR entry per enum,
input object, fragment, variables object and operation response.

Example usage:
    from schemagen.core.documents import load_documents, load_schema
    from schemagen.core.graphql_parser import parse_graphql_to_ir

    result = parse_graphql_to_ir(
        load_schema("schema.graphql"),
        load_documents(["src/**/*.graphql"]),
        scalars={"Money": "z.string()"},
        validator="zod",
    )
    for entry in result.schemas:
        print(entry.name, entry.category)
"""

import logging
from collections.abc import Iterable

from graphql import (
    FieldNode,
    FragmentSpreadNode,
    GraphQLEnumType,
    GraphQLInputObjectType,
    GraphQLNamedType,
    GraphQLSchema,
    InlineFragmentNode,
    ListTypeNode,
    NonNullTypeNode,
    SelectionNode,
    SelectionSetNode,
    TypeNode,
    get_named_type,
    is_abstract_type,
    is_composite_type,
    is_enum_type,
    is_input_object_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
    is_scalar_type,
    is_union_type,
)

from .dependencies import create_named_schema, extract_dependencies, topological_sort_schemas
from .documents import ParsedDocuments, ParsedFragment, ParsedOperation
from .emitters.base import ValidatorLibrary
from .ir import (
    ArraySchema,
    EnumSchema,
    LiteralSchema,
    NamedSchemaIR,
    ObjectProperty,
    ObjectSchema,
    RefSchema,
    SchemaCategory,
    SchemaIR,
    SchemaIRResult,
    StringSchema,
    UnionSchema,
    UnknownSchema,
    make_nullable,
)
from .naming import fragment_type_name, operation_type_name, variables_type_name
from .scalars import ScalarRegistry

logger = logging.getLogger(__name__)


def parse_graphql_to_ir(
    schema: GraphQLSchema,
    documents: ParsedDocuments,
    scalars: dict[str, str] | None = None,
    validator: ValidatorLibrary | str | None = None,
) -> SchemaIRResult:
    """Convert operations and fragments into topologically sorted IR entries.

    Args:
        schema: The GraphQL schema the documents are written against.
        documents: Parsed operations and fragments.
        scalars: Optional scalar name -> verbatim validator code overrides.
        validator: Target validator library, used to check the overrides.

    Raises:
        ScalarMappingError: If an override does not match the validator.
    """
    builder = _GraphQLIRBuilder(schema, documents, ScalarRegistry(scalars, validator))
    return builder.build()


class _GraphQLIRBuilder:
    """Per-call parser state. Created by ``parse_graphql_to_ir`` and discarded after."""

    def __init__(self, schema: GraphQLSchema, documents: ParsedDocuments, scalars: ScalarRegistry):
        self.schema = schema
        self.documents = documents
        self.scalars = scalars
        self.entries: list[NamedSchemaIR] = []
        self.generated: set[str] = set()
        # Discovered enum / input types not generated yet.
        self.pending: dict[str, GraphQLNamedType] = {}
        self.warnings: list[str] = []
        # Fragment name -> generated entry name.
        self.fragment_entries: dict[str, str] = {}
        # Entry name -> dependencies including those of spread fragments.
        self.closures: dict[str, frozenset[str]] = {}
        # Fragments currently being inlined, innermost last.
        self.inlining: list[str] = []

    def build(self) -> SchemaIRResult:
        self._collect_enums()
        self._collect_input_types()
        self._drain_pending()

        in_progress: set[str] = set()
        for fragment in self.documents.fragments:
            self._generate_fragment(fragment, in_progress)

        for operation in self.documents.operations:
            self._generate_variables(operation)
            self._generate_response(operation)

        self._drain_pending()
        logger.debug("Built %d GraphQL entries with %d warnings", len(self.entries), len(self.warnings))
        return SchemaIRResult(
            schemas=topological_sort_schemas(self.entries),
            warnings=self.warnings,
        )

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _warn(self, message: str):
        if message not in self.warnings:
            self.warnings.append(message)

    def _add_entry(self, name: str, schema: SchemaIR, category: SchemaCategory):
        extra: set[str] = set()
        for dep in extract_dependencies(schema):
            extra.update(self.closures.get(dep, ()))
        entry = create_named_schema(name, schema, category, extra)
        self.entries.append(entry)
        self.generated.add(name)
        self.closures[name] = entry.dependencies

    def _ensure(self, named_type: GraphQLNamedType):
        """Queue an enum or input type for generation."""
        if named_type.name not in self.generated and named_type.name not in self.pending:
            self.pending[named_type.name] = named_type

    def _drain_pending(self):
        while self.pending:
            name = next(iter(self.pending))
            named_type = self.pending.pop(name)
            if name in self.generated:
                continue
            if is_enum_type(named_type):
                self._generate_enum(named_type)
            elif is_input_object_type(named_type):
                self._generate_input_object(named_type)

    # ------------------------------------------------------------------
    # Enums and input objects
    # ------------------------------------------------------------------

    def _collect_enums(self):
        """Generate every enum reachable from variables and selection sets."""
        for operation in self.documents.operations:
            for definition in operation.node.variable_definitions or ():
                named_type = self.schema.get_type(_type_node_name(definition.type))
                if named_type is not None:
                    self._collect_input_enums(named_type, set())

        visited_fragments: set[str] = set()
        for operation in self.documents.operations:
            root = self._root_type(operation)
            if root is not None:
                self._collect_selection_enums(operation.node.selection_set.selections, root, visited_fragments)
        for fragment in self.documents.fragments:
            fragment_type = self.schema.get_type(fragment.type_name)
            if fragment_type is not None and is_composite_type(fragment_type):
                self._collect_selection_enums(fragment.node.selection_set.selections, fragment_type, visited_fragments)

    def _collect_input_enums(self, named_type: GraphQLNamedType, seen: set[str]):
        if is_enum_type(named_type):
            self._generate_enum(named_type)
        elif is_input_object_type(named_type) and named_type.name not in seen:
            seen.add(named_type.name)
            for field in named_type.fields.values():
                self._collect_input_enums(get_named_type(field.type), seen)

    def _collect_selection_enums(
        self,
        selections: Iterable[SelectionNode],
        parent: GraphQLNamedType,
        visited_fragments: set[str],
    ):
        for selection in selections:
            if isinstance(selection, FieldNode):
                field = getattr(parent, "fields", {}).get(selection.name.value)
                if field is None:
                    continue
                named_type = get_named_type(field.type)
                if is_enum_type(named_type):
                    self._generate_enum(named_type)
                elif selection.selection_set is not None and is_composite_type(named_type):
                    self._collect_selection_enums(
                        selection.selection_set.selections, named_type, visited_fragments
                    )
            elif isinstance(selection, FragmentSpreadNode):
                name = selection.name.value
                fragment = self.documents.get_fragment(name)
                if fragment is None or name in visited_fragments:
                    continue
                visited_fragments.add(name)
                fragment_type = self.schema.get_type(fragment.type_name)
                if fragment_type is not None and is_composite_type(fragment_type):
                    self._collect_selection_enums(
                        fragment.node.selection_set.selections, fragment_type, visited_fragments
                    )
            elif isinstance(selection, InlineFragmentNode):
                condition = parent
                if selection.type_condition is not None:
                    condition = self.schema.get_type(selection.type_condition.name.value) or parent
                self._collect_selection_enums(selection.selection_set.selections, condition, visited_fragments)

    def _collect_input_types(self):
        """Generate every input object reachable from operation variables."""
        ordered: list[GraphQLInputObjectType] = []
        seen: set[str] = set()

        def collect(named_type: GraphQLNamedType):
            if not is_input_object_type(named_type) or named_type.name in seen:
                return
            seen.add(named_type.name)
            ordered.append(named_type)
            for field in named_type.fields.values():
                collect(get_named_type(field.type))

        for operation in self.documents.operations:
            for definition in operation.node.variable_definitions or ():
                named_type = self.schema.get_type(_type_node_name(definition.type))
                if named_type is not None:
                    collect(named_type)

        for input_type in ordered:
            if input_type.name not in self.generated:
                self._generate_input_object(input_type)

    def _generate_enum(self, enum_type: GraphQLEnumType):
        if enum_type.name in self.generated:
            return
        self._add_entry(enum_type.name, EnumSchema(list(enum_type.values)), "enum")

    def _generate_input_object(self, input_type: GraphQLInputObjectType):
        properties = {
            name: ObjectProperty(self._input_type_to_ir(field.type), required=is_non_null_type(field.type))
            for name, field in input_type.fields.items()
        }
        self._add_entry(input_type.name, ObjectSchema(properties), "input")

    def _input_type_to_ir(self, gql_type) -> SchemaIR:
        if is_non_null_type(gql_type):
            return self._input_inner_to_ir(gql_type.of_type)
        return make_nullable(self._input_inner_to_ir(gql_type))

    def _input_inner_to_ir(self, gql_type) -> SchemaIR:
        if is_list_type(gql_type):
            return ArraySchema(self._input_type_to_ir(gql_type.of_type))
        if is_scalar_type(gql_type):
            return self._scalar_to_ir(gql_type.name)
        if is_enum_type(gql_type) or is_input_object_type(gql_type):
            self._ensure(gql_type)
            return RefSchema(gql_type.name)
        return UnknownSchema()

    def _scalar_to_ir(self, name: str) -> SchemaIR:
        schema = self.scalars.get(name)
        if schema is None:
            self._warn(f'Unknown scalar type "{name}", using unknown. Consider adding a scalar mapping.')
            return UnknownSchema()
        return schema

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _root_type(self, operation: ParsedOperation):
        if operation.operation == "mutation":
            return self.schema.mutation_type
        return self.schema.query_type

    def _generate_variables(self, operation: ParsedOperation):
        definitions = operation.node.variable_definitions or ()
        if not definitions:
            return
        properties = {}
        for definition in definitions:
            required = isinstance(definition.type, NonNullTypeNode) and definition.default_value is None
            properties[definition.variable.name.value] = ObjectProperty(
                self._variable_type_to_ir(definition.type, operation.name), required=required
            )
        name = variables_type_name(operation.name, operation.operation)
        if name not in self.generated:
            self._add_entry(name, ObjectSchema(properties), "variables")

    def _variable_type_to_ir(self, type_node: TypeNode, operation_name: str) -> SchemaIR:
        if isinstance(type_node, NonNullTypeNode):
            return self._variable_inner_to_ir(type_node.type, operation_name)
        return make_nullable(self._variable_inner_to_ir(type_node, operation_name))

    def _variable_inner_to_ir(self, type_node: TypeNode, operation_name: str) -> SchemaIR:
        if isinstance(type_node, ListTypeNode):
            return ArraySchema(self._variable_type_to_ir(type_node.type, operation_name))
        name = type_node.name.value
        if self.scalars.has(name):
            return self.scalars.get(name)
        named_type = self.schema.get_type(name)
        if named_type is None:
            self._warn(f'Unknown type "{name}" in variables of operation "{operation_name}", using unknown')
            return UnknownSchema()
        return self._input_inner_to_ir(named_type)

    def _generate_response(self, operation: ParsedOperation):
        root = self._root_type(operation)
        if root is None:
            self._warn(f'No {operation.operation} type in schema for operation "{operation.name}"')
            return
        name = operation_type_name(operation.name, operation.operation)
        if name in self.generated:
            return
        self._add_entry(name, self._selection_set_to_ir(operation.node.selection_set, root), "response")

    # ------------------------------------------------------------------
    # Fragments and selection sets
    # ------------------------------------------------------------------

    def _generate_fragment(self, fragment: ParsedFragment, in_progress: set[str]):
        """Generate a fragment entry after the fragments it spreads."""
        if fragment.name in self.fragment_entries or fragment.name in in_progress:
            return
        in_progress.add(fragment.name)
        for spread_name in fragment.fragment_spread_names:
            spread = self.documents.get_fragment(spread_name)
            if spread is not None:
                self._generate_fragment(spread, in_progress)
        in_progress.discard(fragment.name)

        fragment_type = self.schema.get_type(fragment.type_name)
        if fragment_type is None or not is_composite_type(fragment_type):
            self._warn(f'Unable to resolve type "{fragment.type_name}" for fragment "{fragment.name}"')
            return
        entry_name = fragment_type_name(fragment.name)
        if entry_name in self.generated:
            return

        self.inlining.append(fragment.name)
        schema = self._selection_set_to_ir(fragment.node.selection_set, fragment_type)
        self.inlining.pop()
        self._add_entry(entry_name, schema, "fragment")
        self.fragment_entries[fragment.name] = entry_name

    def _selection_set_to_ir(self, selection_set: SelectionSetNode | None, parent: GraphQLNamedType) -> SchemaIR:
        if selection_set is None:
            return UnknownSchema()
        properties: dict[str, ObjectProperty] = {}
        spreads: list[str] = []
        narrowed: dict[str, list[SelectionNode]] = {}
        self._collect_fields(selection_set.selections, parent, properties, spreads, narrowed)
        if is_abstract_type(parent):
            return self._narrow(parent, properties, spreads, narrowed)
        return ObjectSchema(properties, fragment_spreads=spreads)

    def _collect_fields(
        self,
        selections: Iterable[SelectionNode],
        parent: GraphQLNamedType,
        properties: dict[str, ObjectProperty],
        spreads: list[str],
        narrowed: dict[str, list[SelectionNode]],
    ):
        """Collect selected fields of ``parent``.

        Fields and same-type fragments are merged into ``properties``;
        fragments on a concrete type below an abstract ``parent`` are
        grouped into ``narrowed`` by type name.
        """
        for selection in selections:
            if isinstance(selection, FieldNode):
                self._collect_field(selection, parent, properties)

            elif isinstance(selection, FragmentSpreadNode):
                name = selection.name.value
                fragment = self.documents.get_fragment(name)
                if fragment is None:
                    self._warn(f'Unknown fragment "{name}"')
                    continue
                fragment_type = self.schema.get_type(fragment.type_name)
                if self._is_narrowing(parent, fragment_type):
                    narrowed.setdefault(fragment_type.name, []).append(selection)
                elif name in self.fragment_entries:
                    entry_name = self.fragment_entries[name]
                    if entry_name not in spreads:
                        spreads.append(entry_name)
                elif name in self.inlining:
                    self._warn(f'Cyclic spread of fragment "{name}" ignored')
                elif fragment_type is not None and is_composite_type(fragment_type):
                    # Fragment without an entry of its own, merge its fields here.
                    self.inlining.append(name)
                    self._collect_fields(
                        fragment.node.selection_set.selections,
                        parent if is_object_type(parent) else fragment_type,
                        properties,
                        spreads,
                        narrowed,
                    )
                    self.inlining.pop()

            elif isinstance(selection, InlineFragmentNode):
                condition = parent
                if selection.type_condition is not None:
                    condition = self.schema.get_type(selection.type_condition.name.value) or parent
                if self._is_narrowing(parent, condition):
                    narrowed.setdefault(condition.name, []).extend(selection.selection_set.selections)
                else:
                    self._collect_fields(
                        selection.selection_set.selections,
                        parent if is_object_type(parent) else condition,
                        properties,
                        spreads,
                        narrowed,
                    )

    @staticmethod
    def _is_narrowing(parent: GraphQLNamedType, condition: GraphQLNamedType | None) -> bool:
        return (
            condition is not None
            and is_abstract_type(parent)
            and is_object_type(condition)
            and condition.name != parent.name
        )

    def _collect_field(self, node: FieldNode, parent: GraphQLNamedType, properties: dict[str, ObjectProperty]):
        name = node.name.value
        output_name = node.alias.value if node.alias else name
        if name == "__typename":
            discriminator = LiteralSchema(parent.name) if is_object_type(parent) else StringSchema()
            properties[output_name] = ObjectProperty(discriminator, required=True)
            return
        field = getattr(parent, "fields", {}).get(name)
        if field is None:
            self._warn(f'Unknown field "{name}" on type "{parent.name}", using unknown')
            properties[output_name] = ObjectProperty(UnknownSchema(), required=False)
            return
        properties[output_name] = ObjectProperty(
            self._output_type_to_ir(field.type, node.selection_set),
            required=is_non_null_type(field.type),
        )

    def _output_type_to_ir(self, gql_type, selection_set: SelectionSetNode | None) -> SchemaIR:
        if is_non_null_type(gql_type):
            return self._output_inner_to_ir(gql_type.of_type, selection_set)
        return make_nullable(self._output_inner_to_ir(gql_type, selection_set))

    def _output_inner_to_ir(self, gql_type, selection_set: SelectionSetNode | None) -> SchemaIR:
        if is_list_type(gql_type):
            return ArraySchema(self._output_type_to_ir(gql_type.of_type, selection_set))
        if is_scalar_type(gql_type):
            return self._scalar_to_ir(gql_type.name)
        if is_enum_type(gql_type):
            self._ensure(gql_type)
            return RefSchema(gql_type.name)
        return self._selection_set_to_ir(selection_set, gql_type)

    def _narrow(
        self,
        parent: GraphQLNamedType,
        properties: dict[str, ObjectProperty],
        spreads: list[str],
        narrowed: dict[str, list[SelectionNode]],
    ) -> SchemaIR:
        """Build the IR of a selection on an interface or union type."""
        if not narrowed:
            if is_union_type(parent):
                self._warn(
                    f'Union type "{parent.name}" has no inline fragments. '
                    'Consider adding "... on TypeName { fields }" to select specific fields.'
                )
                return UnknownSchema()
            if not properties and not spreads:
                self._warn(
                    f'Interface type "{parent.name}" has no selected fields or inline fragments, using unknown'
                )
                return UnknownSchema()
            return ObjectSchema(properties, fragment_spreads=spreads)

        members: list[SchemaIR] = []
        for type_name, selections in narrowed.items():
            concrete = self.schema.get_type(type_name)
            member_properties = {"__typename": ObjectProperty(LiteralSchema(type_name), required=True)}
            member_properties.update(properties)
            member_spreads = list(spreads)
            self._collect_fields(selections, concrete, member_properties, member_spreads, {})
            member_properties["__typename"] = ObjectProperty(LiteralSchema(type_name), required=True)
            members.append(ObjectSchema(member_properties, fragment_spreads=member_spreads))
        if len(members) == 1:
            return members[0]
        return UnionSchema(members)


def _type_node_name(type_node: TypeNode) -> str:
    while isinstance(type_node, (NonNullTypeNode, ListTypeNode)):
        type_node = type_node.type
    return type_node.name.value
