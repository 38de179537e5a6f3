"""Tests for the validator emitters."""

import pytest

from schemagen.core.documents import parse_documents
from schemagen.core.emitters import (
    SUPPORTED_VALIDATORS,
    ArktypeEmitter,
    Emitter,
    ValidatorLibrary,
    ZodEmitter,
    get_emitter,
    is_validator_library,
)
from schemagen.core.emitters.base import nullability_wrapper, spreadable_names, strip_nullability
from schemagen.core.graphql_parser import parse_graphql_to_ir
from schemagen.core.ir import (
    PASSTHROUGH,
    ArraySchema,
    EnumSchema,
    NamedSchemaIR,
    NullSchema,
    NumberSchema,
    ObjectProperty,
    ObjectSchema,
    RefSchema,
    StringSchema,
    UndefinedSchema,
    UnionSchema,
    make_nullable,
    make_nullish,
    make_optional,
)


def _entry(name, schema):
    return NamedSchemaIR(name=name, schema=schema)


@pytest.fixture
def entries():
    """A small module touching each property and object variant."""
    return [
        _entry("Status", EnumSchema(["a", "b"])),
        _entry("Base", ObjectSchema({"id": ObjectProperty(StringSchema())})),
        _entry("Item", ObjectSchema(
            {
                "status": ObjectProperty(RefSchema("Status")),
                "tag": ObjectProperty(make_nullable(StringSchema())),
                "note": ObjectProperty(make_nullish(StringSchema())),
                "maybe": ObjectProperty(make_optional(NumberSchema())),
                "label": ObjectProperty(make_nullable(StringSchema()), required=False),
            },
            fragment_spreads=["Base"],
        )),
        _entry("Strict", ObjectSchema({"a": ObjectProperty(StringSchema())})),
        _entry("Loose", ObjectSchema({"a": ObjectProperty(StringSchema())}, additional_properties=PASSTHROUGH)),
        _entry("Extra", ObjectSchema({"a": ObjectProperty(StringSchema())}, additional_properties=NumberSchema())),
    ]


# Expected fragments of output per validator library.
EXPECTED = {
    "zod": {
        "import": 'import * as z from "zod";',
        "type": "export type Item = z.infer<typeof itemSchema>;",
        "ref": "status: statusSchema,",
        "nullable": "tag: z.string().nullable(),",
        "nullish": "note: z.string().nullish(),",
        "optional": "maybe: z.number().optional(),",
        "optional_property": "label: z.string().nullish(),",
        "enum": 'export const statusSchema = z.enum(["a", "b"]);',
        "spread": "...baseSchema.shape,",
        "strict": "export const strictSchema = z.object({",
        "passthrough": "export const looseSchema = z.looseObject({",
        "catchall": "}).catchall(z.number());",
    },
    "valibot": {
        "import": 'import * as v from "valibot";',
        "type": "export type Item = v.InferOutput<typeof itemSchema>;",
        "ref": "status: statusSchema,",
        "nullable": "tag: v.nullable(v.string()),",
        "nullish": "note: v.nullish(v.string()),",
        "optional": "maybe: v.optional(v.number()),",
        "optional_property": "label: v.nullish(v.string()),",
        "enum": 'export const statusSchema = v.picklist(["a", "b"]);',
        "spread": "...baseSchema.entries,",
        "strict": "export const strictSchema = v.object({",
        "passthrough": "export const looseSchema = v.looseObject({",
        "catchall": "}, v.number());",
    },
    "arktype": {
        "import": 'import { type } from "arktype";',
        "type": "export type Item = typeof itemSchema.infer;",
        "ref": "status: statusSchema,",
        "nullable": 'tag: "string | null",',
        "nullish": 'note: "string | null | undefined",',
        "optional": 'maybe: "number | undefined",',
        "optional_property": '"label?": "string | null",',
        "enum": 'export const statusSchema = type.enumerated("a", "b");',
        "spread": "export const itemSchema = baseSchema.and(type({",
        "strict": '"+": "delete",',
        "passthrough": '"+": "ignore",',
        "catchall": '"[string]": "number",',
    },
    "effect": {
        "import": 'import { Schema } from "effect";',
        "type": "export type Item = typeof itemSchema.Type;",
        "ref": "status: statusSchema,",
        "nullable": "tag: Schema.NullOr(Schema.String),",
        "nullish": "note: Schema.NullishOr(Schema.String),",
        "optional": "maybe: Schema.UndefinedOr(Schema.Number),",
        "optional_property": "label: Schema.optional(Schema.NullOr(Schema.String)),",
        "enum": 'export const statusSchema = Schema.Literal("a", "b");',
        "spread": "...baseSchema.fields,",
        "strict": "export const strictSchema = Schema.Struct({",
        "passthrough": '}).annotations({ parseOptions: { onExcessProperty: "preserve" } });',
        "catchall": "Schema.Record({ key: Schema.String, value: Schema.Number })",
    },
}

CASES = [(library, case) for library, cases in EXPECTED.items() for case in cases]


# =============================================================================
# Lookup
# =============================================================================


class TestLookup:
    """Tests for get_emitter and the Emitter protocol."""

    @pytest.mark.parametrize("library", SUPPORTED_VALIDATORS)
    def test_get_emitter(self, library):
        emitter = get_emitter(library)
        assert isinstance(emitter, Emitter)
        assert emitter.library is ValidatorLibrary(library)

    def test_get_emitter_accepts_enum(self):
        assert isinstance(get_emitter(ValidatorLibrary.ZOD), ZodEmitter)

    def test_unknown_library(self):
        with pytest.raises(ValueError, match='Unknown validator library "yup"'):
            get_emitter("yup")

    def test_is_validator_library(self):
        assert is_validator_library("arktype")
        assert not is_validator_library("yup")


# =============================================================================
# Union classification
# =============================================================================


class TestNullability:
    """Tests for the union classification shared by every emitter."""

    @pytest.mark.parametrize("members,modifier", [
        ([StringSchema(), NullSchema()], "nullable"),
        ([StringSchema(), UndefinedSchema()], "optional"),
        ([StringSchema(), NullSchema(), UndefinedSchema()], "nullish"),
        ([NullSchema(), StringSchema()], "nullable"),
    ])
    def test_wrapper(self, members, modifier):
        assert nullability_wrapper(members) == (StringSchema(), modifier)

    @pytest.mark.parametrize("members", [
        [StringSchema(), NumberSchema()],
        [StringSchema(), NumberSchema(), NullSchema()],
        [StringSchema()],
        [NullSchema()],
    ])
    def test_plain_union(self, members):
        assert nullability_wrapper(members) is None

    def test_strip_nullability(self):
        assert strip_nullability(make_nullish(StringSchema())) == StringSchema()
        union = UnionSchema([StringSchema(), NumberSchema()])
        assert strip_nullability(union) is union


# =============================================================================
# Module output
# =============================================================================


class TestModule:
    """Tests for the rendered module of every emitter."""

    @pytest.mark.parametrize("library,case", CASES)
    def test_output(self, entries, library, case):
        content = get_emitter(library).emit(entries).content
        assert EXPECTED[library][case] in content

    @pytest.mark.parametrize("library", SUPPORTED_VALIDATORS)
    def test_one_binding_and_type_per_entry(self, entries, library):
        content = get_emitter(library).emit(entries).content
        assert content.count("export const ") == len(entries)
        assert content.count("export type ") == len(entries)

    @pytest.mark.parametrize("library", SUPPORTED_VALIDATORS)
    def test_types_follow_bindings(self, entries, library):
        content = get_emitter(library).emit(entries).content
        assert content.rindex("export const ") < content.index("export type ")
        order = [line.split()[2] for line in content.splitlines() if line.startswith("export type ")]
        assert order == [entry.name for entry in entries]

    @pytest.mark.parametrize("library", SUPPORTED_VALIDATORS)
    def test_no_warnings(self, entries, library):
        assert get_emitter(library).emit(entries).warnings == []

    def test_header(self, entries):
        content = get_emitter("zod").emit(entries).content
        assert content.startswith("/**\n * This file was automatically generated by schemagen.")
        assert "// Zod Schemas" in content
        assert "// TypeScript Types (inferred from Zod schemas)" in content

    def test_quoted_keys(self):
        schema = ObjectSchema({"first-name": ObjectProperty(StringSchema())})
        content = get_emitter("zod").emit([_entry("Person", schema)]).content
        assert '"first-name": z.string(),' in content

    def test_spreadable_names(self):
        entries = [
            _entry("Node", UnionSchema([ObjectSchema({}), ObjectSchema({})])),
            _entry("Card", ObjectSchema({}, fragment_spreads=["Node"])),
            _entry("Row", ObjectSchema({}, fragment_spreads=["Card"])),
            _entry("Plain", ObjectSchema({})),
            _entry("Wide", ObjectSchema({}, fragment_spreads=["Plain"])),
        ]
        assert spreadable_names(entries) == {"Plain", "Wide"}

    def test_arktype_optional_union_with_null(self):
        value = UnionSchema([StringSchema(), NumberSchema(), NullSchema()])
        schema = ObjectSchema({"value": ObjectProperty(value, required=False)})
        content = ArktypeEmitter().emit([_entry("Cell", schema)]).content
        assert '"value?": "string | number | null",' in content
        assert "null | null" not in content


# =============================================================================
# References
# =============================================================================


class TestReferences:
    """Tests for forward and self references."""

    @pytest.mark.parametrize("library,expected", [
        ("zod", "z.lazy(() => treeSchema)"),
        ("valibot", "v.lazy(() => treeSchema)"),
        ("effect", "Schema.suspend(() => treeSchema)"),
    ])
    def test_self_reference_is_deferred(self, library, expected):
        tree = ObjectSchema({"children": ObjectProperty(ArraySchema(RefSchema("Tree")))})
        result = get_emitter(library).emit([_entry("Tree", tree)])
        assert expected in result.content
        assert result.warnings == []

    def test_backward_reference_is_direct(self):
        entries = [
            _entry("Leaf", StringSchema()),
            _entry("Node", ObjectSchema({"leaf": ObjectProperty(RefSchema("Leaf"))})),
        ]
        content = get_emitter("zod").emit(entries).content
        assert "leaf: leafSchema," in content
        assert "z.lazy" not in content

    def test_arktype_forward_reference_warns(self):
        tree = ObjectSchema({"children": ObjectProperty(ArraySchema(RefSchema("Tree")))})
        result = ArktypeEmitter().emit([_entry("Tree", tree)])
        assert "children: treeSchema.array()," in result.content
        assert len(result.warnings) == 1
        assert 'Forward reference to "Tree"' in result.warnings[0]


# =============================================================================
# Formats and fallbacks
# =============================================================================


class TestFormats:
    """Tests for string formats."""

    @pytest.mark.parametrize("library,fmt,expected", [
        ("zod", "email", "z.email()"),
        ("zod", "datetime", "z.iso.datetime()"),
        ("valibot", "uuid", "v.pipe(v.string(), v.uuid())"),
        ("valibot", "date", "v.pipe(v.string(), v.isoDate())"),
        ("arktype", "email", 'type("string.email")'),
        ("arktype", "datetime", 'type("string.date.iso")'),
        ("effect", "uuid", "Schema.UUID"),
    ])
    def test_builtin_format(self, library, fmt, expected):
        content = get_emitter(library).emit([_entry("Value", StringSchema(format=fmt))]).content
        assert f"export const valueSchema = {expected};" in content

    def test_arktype_regex_fallback(self):
        content = ArktypeEmitter().emit([_entry("Day", StringSchema(format="date"))]).content
        assert 'export const daySchema = type("/^\\\\d{4}-\\\\d{2}-\\\\d{2}$/");' in content

    def test_effect_regex_fallback(self):
        content = get_emitter("effect").emit([_entry("Mail", StringSchema(format="email"))]).content
        assert "Schema.String.pipe(Schema.pattern(/^" in content

    def test_integer(self):
        entries = [_entry("Count", NumberSchema(integer=True))]
        assert "z.number().int()" in get_emitter("zod").emit(entries).content
        assert "v.pipe(v.number(), v.integer())" in get_emitter("valibot").emit(entries).content
        assert 'type("number.integer")' in get_emitter("arktype").emit(entries).content
        assert "Schema.Number.pipe(Schema.int())" in get_emitter("effect").emit(entries).content

    def test_zod_mixed_enum(self):
        content = get_emitter("zod").emit([_entry("Level", EnumSchema([1, 2]))]).content
        assert "z.union([z.literal(1), z.literal(2)])" in content


# =============================================================================
# End to end
# =============================================================================


class TestGraphQLModule:
    """Tests emitting the sample GraphQL documents."""

    @pytest.mark.parametrize("library", ["zod", "valibot", "effect"])
    def test_no_warnings(self, gql_schema, documents, library):
        ir = parse_graphql_to_ir(gql_schema, documents)
        result = get_emitter(library).emit(ir.schemas)
        assert result.warnings == []
        assert result.content.count("export const ") == len(ir.schemas)

    def test_discriminated_members(self, gql_schema, documents):
        ir = parse_graphql_to_ir(gql_schema, documents)
        content = get_emitter("zod").emit(ir.schemas).content
        assert '__typename: z.literal("User"),' in content
        assert '__typename: z.literal("Post"),' in content
        assert "...userFieldsFragmentSchema.shape," in content

    def test_arktype_self_referencing_input(self, gql_schema, documents):
        ir = parse_graphql_to_ir(gql_schema, documents)
        result = get_emitter("arktype").emit(ir.schemas)
        assert '"nested?": userFilterSchema.or(type("null")),' in result.content
        assert any('"UserFilter"' in warning for warning in result.warnings)

    @pytest.mark.parametrize("library,expected", [
        ("zod", "userCardFragmentSchema.and(z.object({}))"),
        ("valibot", "v.intersect([userCardFragmentSchema, v.object({})])"),
        ("effect", "Schema.extend(userCardFragmentSchema, Schema.Struct({}))"),
    ])
    def test_intersected_fragment_is_not_spread(self, gql_schema, library, expected):
        documents = parse_documents({"cards.graphql": """
            fragment NodeInfo on Node { id ... on User { email } ... on Post { title } }
            fragment UserCard on User { ...NodeInfo name }
            query GetUser { user(id: "1") { ...UserCard } }
        """})
        ir = parse_graphql_to_ir(gql_schema, documents)
        content = get_emitter(library).emit(ir.schemas).content
        assert expected in content
        assert "...userCardFragmentSchema." not in content
        assert "...nodeInfoFragmentSchema." not in content
