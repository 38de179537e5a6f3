"""Configuration models.

Example usage:
    from schemagen.core.config import CollectionDescriptor, GenerationConfig

    config = GenerationConfig(validator="valibot", scalars={"Money": "v.string()"})
    users = CollectionDescriptor(name="users", predicate_mapping="jsonapi")
"""

from typing import Literal

from pydantic import BaseModel, Field

from .emitters.base import ValidatorLibrary

PredicateDialect = Literal["rest-simple", "jsonapi", "hasura", "prisma"]


class GenerationConfig(BaseModel):
    """Options for one schema generation run."""

    validator: ValidatorLibrary = ValidatorLibrary.ZOD
    # GraphQL scalar name -> verbatim validator code.
    scalars: dict[str, str] = Field(default_factory=dict)
    # OpenAPI only: restrict generation to these operation ids.
    operation_ids: list[str] | None = None
    # Text prepended to the generated module.
    header: str | None = None


class CollectionDescriptor(BaseModel):
    """A collection that needs a predicate translator.

    ``predicate_mapping`` is the explicitly configured dialect;
    ``filter_style`` is a dialect detected from the API description and is
    only used when no mapping is configured.
    """

    name: str
    predicate_mapping: PredicateDialect | None = None
    filter_style: str | None = None
    sort_param: str | None = None
    limit_param: str | None = None
    offset_param: str | None = None
    pagination_style: Literal["offset", "page", "cursor"] | None = None
    sync_mode: Literal["full", "on-demand"] | None = None
