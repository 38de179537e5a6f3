"""Schema generation pipeline.

Sequences parse -> pre hooks -> emit -> post hooks and optionally writes
the result.

Example usage:
    from schemagen.core.config import GenerationConfig
    from schemagen.core.generator import SchemaGenerator

    generator = SchemaGenerator(GenerationConfig(validator="zod"))
    result = generator.generate_graphql(schema, documents)
    generator.write(result, "src/generated/schemas.ts")
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from graphql import GraphQLSchema

from .config import GenerationConfig
from .documents import ParsedDocuments
from .emitters import get_emitter
from .graphql_parser import parse_graphql_to_ir
from .hooks import AddHeaderHook, HookRunner
from .ir import NamedSchemaIR, SchemaIRResult
from .openapi_document import OpenAPIOperation
from .openapi_parser import parse_openapi_to_ir

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "schemas.ts"


@dataclass
class GenerationResult:
    """A rendered module with the entries it contains and all warnings."""
    content: str
    schemas: list[NamedSchemaIR] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class SchemaGenerator:
    """Generates a validator module from a GraphQL or OpenAPI source.

    Example:
        hooks = HookRunner()
        hooks.add_pre_hook(FilterSchemasHook(categories={"response"}))
        generator = SchemaGenerator(GenerationConfig(validator="effect"), hooks=hooks)
    """

    def __init__(self, config: GenerationConfig | None = None, hooks: HookRunner | None = None):
        self.config = config or GenerationConfig()
        self.hooks = HookRunner()
        if hooks is not None:
            self.hooks.pre_hooks.extend(hooks.pre_hooks)
            self.hooks.post_hooks.extend(hooks.post_hooks)
        if self.config.header:
            self.hooks.add_post_hook(AddHeaderHook(self.config.header))
        self.emitter = get_emitter(self.config.validator)

    def generate_graphql(
        self,
        schema: GraphQLSchema,
        documents: ParsedDocuments,
        filename: str = DEFAULT_FILENAME,
    ) -> GenerationResult:
        """Generate a module from a GraphQL schema and client documents."""
        ir = parse_graphql_to_ir(
            schema,
            documents,
            scalars=self.config.scalars,
            validator=self.config.validator,
        )
        return self._emit(ir, filename)

    def generate_openapi(
        self,
        document: dict[str, Any],
        operations: list[OpenAPIOperation],
        filename: str = DEFAULT_FILENAME,
    ) -> GenerationResult:
        """Generate a module from a dereferenced OpenAPI document."""
        ir = parse_openapi_to_ir(document, operations, operation_ids=self.config.operation_ids)
        return self._emit(ir, filename)

    def _emit(self, ir: SchemaIRResult, filename: str) -> GenerationResult:
        schemas = self.hooks.run_pre_hooks(ir.schemas)
        emitted = self.emitter.emit(schemas)
        content = self.hooks.run_post_hooks(filename, emitted.content)
        warnings = [*ir.warnings, *emitted.warnings]
        logger.info(
            "Generated %d %s schemas (%d warnings)",
            len(schemas),
            self.emitter.library.value,
            len(warnings),
        )
        return GenerationResult(content=content, schemas=schemas, warnings=warnings)

    def write(self, result: GenerationResult, output_path: str):
        """Write a generated module, creating parent directories."""
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(result.content)
        logger.info("Wrote %s", output_path)
