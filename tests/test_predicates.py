"""Tests for predicate translator generation."""

import pytest
from pydantic import ValidationError

from schemagen.core.config import CollectionDescriptor
from schemagen.core.predicates import (
    generate_predicate_translator,
    needs_predicate_translation,
    predicate_imports,
    resolve_dialect,
    translator_name,
)


def _generate(name="users", source="openapi", params_type=None, **kwargs):
    return generate_predicate_translator(CollectionDescriptor(name=name, **kwargs), params_type, source)


# =============================================================================
# Dialect selection
# =============================================================================


class TestResolveDialect:
    """Tests for resolve_dialect."""

    def test_explicit_mapping_wins(self):
        collection = CollectionDescriptor(name="users", predicate_mapping="jsonapi", filter_style="hasura")
        assert resolve_dialect(collection) == "jsonapi"

    def test_detected_filter_style(self):
        assert resolve_dialect(CollectionDescriptor(name="users", filter_style="prisma")) == "prisma"

    @pytest.mark.parametrize("style", [None, "custom", "odata"])
    def test_defaults_to_rest_simple(self, style):
        assert resolve_dialect(CollectionDescriptor(name="users", filter_style=style)) == "rest-simple"

    def test_invalid_mapping_is_rejected(self):
        with pytest.raises(ValidationError):
            CollectionDescriptor(name="users", predicate_mapping="odata")


# =============================================================================
# REST dialects
# =============================================================================


class TestRestSimple:
    """Tests for the rest-simple dialect."""

    def test_filter_keys(self):
        content = _generate().content
        assert "params[fieldName] = filter.value" in content
        assert "params[`${fieldName}_gte`] = filter.value" in content
        assert "params[`${fieldName}_in`] = filter.value" in content

    def test_sort_and_pagination(self):
        content = _generate().content
        assert 'params["sort"] = parsed.sorts' in content
        assert '`${s.direction === "desc" ? "-" : ""}${s.field.join(".")}`' in content
        assert 'params["limit"] = parsed.limit' in content
        assert 'params["offset"] = options.offset' in content

    def test_custom_params(self):
        content = _generate(sort_param="order", limit_param="per_page", offset_param="skip").content
        assert 'params["order"] = parsed.sorts' in content
        assert 'params["per_page"] = parsed.limit' in content
        assert 'params["skip"] = options.offset' in content

    def test_signature(self):
        content = _generate(name="user_accounts", params_type="ListUsersParams").content
        assert "function translateUserAccountsPredicates(" in content
        assert "): Partial<ListUsersParams> {" in content
        assert "return params as Partial<ListUsersParams>" in content

    def test_untyped_result(self):
        assert "): Record<string, unknown> {" in _generate().content

    def test_no_helper(self):
        assert "buildNestedObject" not in _generate().content


class TestJsonApi:
    """Tests for the jsonapi dialect."""

    def test_filter_keys(self):
        result = _generate(predicate_mapping="jsonapi")
        assert result.dialect == "jsonapi"
        assert "params[`filter[${fieldName}]`] = filter.value" in result.content
        assert "params[`filter[${fieldName}][lte]`] = filter.value" in result.content

    def test_page_params(self):
        content = _generate(predicate_mapping="jsonapi").content
        assert 'params["page[limit]"] = parsed.limit' in content
        assert 'params["page[offset]"] = options.offset' in content

    def test_page_style_ignores_custom_params(self):
        content = _generate(predicate_mapping="jsonapi", pagination_style="page", limit_param="size").content
        assert 'params["page[limit]"] = parsed.limit' in content

    def test_custom_limit_param(self):
        content = _generate(predicate_mapping="jsonapi", limit_param="size").content
        assert 'params["size"] = parsed.limit' in content


# =============================================================================
# GraphQL dialects
# =============================================================================


class TestGraphQLDialects:
    """Tests for the hasura and prisma dialects."""

    def test_hasura(self):
        result = _generate(source="graphql", predicate_mapping="hasura")
        content = result.content
        assert result.warnings == []
        assert "buildNestedObject(filter.field, { _gte: filter.value })" in content
        assert "variables.where = { _and: whereConditions }" in content
        assert "variables.order_by = parsed.sorts" in content
        assert 'variables["limit"] = parsed.limit' in content
        assert 'variables["offset"] = options.offset' in content

    def test_prisma(self):
        content = _generate(source="graphql", predicate_mapping="prisma").content
        assert "buildNestedObject(filter.field, { equals: filter.value })" in content
        assert "buildNestedObject(filter.field, { in: filter.value })" in content
        assert "variables.where = { AND: whereConditions }" in content
        assert "variables.orderBy = parsed.sorts" in content
        assert 'variables["take"] = parsed.limit' in content
        assert 'variables["skip"] = options.offset' in content

    def test_helper_is_emitted(self):
        content = _generate(source="graphql", predicate_mapping="hasura").content
        assert content.count("function buildNestedObject(") == 1
        assert content.index("function translateUsersPredicates(") < content.index("function buildNestedObject(")

    def test_helper_can_be_omitted(self):
        result = generate_predicate_translator(
            CollectionDescriptor(name="users", predicate_mapping="prisma"),
            source_type="graphql",
            include_helpers=False,
        )
        assert "function buildNestedObject(" not in result.content
        assert "buildNestedObject(filter.field" in result.content


# =============================================================================
# Fallbacks and helpers
# =============================================================================


class TestFallbacks:
    """Tests for dialects used with the wrong source."""

    def test_graphql_dialect_on_openapi(self):
        result = _generate(predicate_mapping="hasura")
        assert result.dialect == "rest-simple"
        assert result.warnings == [
            'Predicate dialect "hasura" is not available for openapi collection "users", using "rest-simple"'
        ]

    def test_rest_dialect_on_graphql(self):
        result = _generate(source="graphql")
        assert result.dialect == "hasura"
        assert len(result.warnings) == 1

    def test_unknown_source_type(self):
        with pytest.raises(ValueError, match="Unknown source type"):
            _generate(source="grpc")


def test_translator_name():
    assert translator_name(CollectionDescriptor(name="blog-posts")) == "translateBlogPostsPredicates"


def test_needs_predicate_translation():
    assert needs_predicate_translation(CollectionDescriptor(name="users", sync_mode="on-demand"))
    assert not needs_predicate_translation(CollectionDescriptor(name="users", sync_mode="full"))
    assert not needs_predicate_translation(CollectionDescriptor(name="users"))


def test_predicate_imports():
    imports = predicate_imports()
    assert "parseLoadSubsetOptions" in imports
    assert "LoadSubsetOptions" in imports
