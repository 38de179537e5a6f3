"""schemagen - validator schema generator for GraphQL and OpenAPI sources."""

__version__ = "0.1.0"
