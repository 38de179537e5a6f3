"""Core modules for validator schema generation."""

from .config import CollectionDescriptor, GenerationConfig
from .dependencies import create_named_schema, extract_dependencies, topological_sort_schemas
from .documents import (
    DocumentError,
    ParsedDocuments,
    ParsedFragment,
    ParsedOperation,
    load_documents,
    load_schema,
    parse_documents,
)
from .emitters import (
    SUPPORTED_VALIDATORS,
    Emitter,
    EmitterResult,
    ValidatorLibrary,
    get_emitter,
    is_validator_library,
)
from .generator import GenerationResult, SchemaGenerator
from .graphql_parser import parse_graphql_to_ir
from .hooks import (
    AddHeaderHook,
    FilterSchemasHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .ir import NamedSchemaIR, SchemaIR, SchemaIRResult, make_nullable, make_nullish, make_optional
from .openapi_document import (
    OpenAPIDocumentError,
    OpenAPIOperation,
    dereference,
    extract_operations,
    load_document,
)
from .openapi_parser import parse_openapi_to_ir
from .predicates import (
    PredicateTranslatorResult,
    generate_predicate_translator,
    needs_predicate_translation,
    predicate_imports,
)
from .scalars import ScalarMappingError, ScalarRegistry

__all__ = [
    # Config
    "CollectionDescriptor",
    "GenerationConfig",
    # IR
    "NamedSchemaIR",
    "SchemaIR",
    "SchemaIRResult",
    "make_nullable",
    "make_nullish",
    "make_optional",
    "create_named_schema",
    "extract_dependencies",
    "topological_sort_schemas",
    # Scalars
    "ScalarMappingError",
    "ScalarRegistry",
    # GraphQL
    "DocumentError",
    "ParsedDocuments",
    "ParsedFragment",
    "ParsedOperation",
    "load_documents",
    "load_schema",
    "parse_documents",
    "parse_graphql_to_ir",
    # OpenAPI
    "OpenAPIDocumentError",
    "OpenAPIOperation",
    "dereference",
    "extract_operations",
    "load_document",
    "parse_openapi_to_ir",
    # Emitters
    "SUPPORTED_VALIDATORS",
    "Emitter",
    "EmitterResult",
    "ValidatorLibrary",
    "get_emitter",
    "is_validator_library",
    # Predicates
    "PredicateTranslatorResult",
    "generate_predicate_translator",
    "needs_predicate_translation",
    "predicate_imports",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterSchemasHook",
    "HookRunner",
    # Pipeline
    "GenerationResult",
    "SchemaGenerator",
]
