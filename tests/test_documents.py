"""Tests for GraphQL schema and document loading."""

import json

import pytest
from graphql import GraphQLError, build_schema, introspection_from_schema

from schemagen.core.documents import (
    DocumentError,
    find_fragment_spreads,
    load_documents,
    load_schema,
    parse_documents,
)


# =============================================================================
# Document parsing
# =============================================================================


class TestParseDocuments:
    """Tests for parse_documents."""

    def test_operations_and_fragments(self, documents):
        assert [op.name for op in documents.operations] == [
            "GetUser", "ListUsers", "Search", "GetNode", "CreateUser",
        ]
        assert [f.name for f in documents.fragments] == ["UserFields", "UserWithPosts"]

    def test_operation_kinds(self, documents):
        kinds = {op.name: op.operation for op in documents.operations}
        assert kinds["GetUser"] == "query"
        assert kinds["CreateUser"] == "mutation"

    def test_fragment_spread_names(self, documents):
        assert documents.get_fragment("UserWithPosts").fragment_spread_names == ["UserFields"]
        assert documents.get_fragment("UserFields").fragment_spread_names == []
        get_user = documents.operations[0]
        assert get_user.fragment_spread_names == ["UserWithPosts"]

    def test_fragment_type_name(self, documents):
        assert documents.get_fragment("UserFields").type_name == "User"
        assert documents.get_fragment("Missing") is None

    def test_source_is_recorded(self, documents):
        assert documents.operations[0].source == "operations.graphql"

    def test_anonymous_operation_raises(self):
        with pytest.raises(DocumentError, match="Anonymous query"):
            parse_documents({"anon.graphql": "{ user(id: 1) { id } }"})

    def test_subscription_is_skipped(self):
        parsed = parse_documents({"sub.graphql": "subscription OnUser { user { id } }"})
        assert parsed.operations == []

    def test_syntax_error_propagates(self):
        with pytest.raises(GraphQLError):
            parse_documents({"bad.graphql": "query {"})

    def test_find_fragment_spreads_deduplicates(self):
        node = parse_documents({
            "q.graphql": "query Q { a { ...F ...G } b { ...F } }",
        }).operations[0].node
        assert find_fragment_spreads(node) == ["F", "G"]


# =============================================================================
# Loading from disk
# =============================================================================


class TestLoadDocuments:
    """Tests for load_documents."""

    def test_glob_recursive(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "one.graphql").write_text("query One { a }")
        (tmp_path / "two.graphql").write_text("query Two { b }")
        parsed = load_documents([str(tmp_path / "**" / "*.graphql")])
        assert sorted(op.name for op in parsed.operations) == ["One", "Two"]

    def test_no_match_raises(self, tmp_path):
        with pytest.raises(DocumentError, match="No GraphQL documents"):
            load_documents([str(tmp_path / "*.graphql")])


class TestLoadSchema:
    """Tests for load_schema."""

    def test_sdl_file(self, tmp_path, sdl):
        path = tmp_path / "schema.graphql"
        path.write_text(sdl)
        schema = load_schema(str(path))
        assert schema.get_type("User") is not None

    def test_directory(self, tmp_path):
        (tmp_path / "types.graphql").write_text("type User { id: ID! }")
        (tmp_path / "query.gql").write_text("type Query { user: User }")
        (tmp_path / "notes.txt").write_text("not a schema")
        schema = load_schema(str(tmp_path))
        assert schema.query_type.name == "Query"
        assert schema.get_type("User") is not None

    def test_introspection_json(self, tmp_path, sdl):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"data": introspection_from_schema(build_schema(sdl))}))
        schema = load_schema(str(path))
        assert schema.get_type("SearchResult") is not None

    def test_missing_path(self, tmp_path):
        with pytest.raises(DocumentError, match="does not exist"):
            load_schema(str(tmp_path / "missing.graphql"))

    def test_empty_directory(self, tmp_path):
        with pytest.raises(DocumentError, match="No schema files"):
            load_schema(str(tmp_path))
