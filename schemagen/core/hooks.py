"""Generation hooks for customizing schema generation.

Provides protocols for pre- and post-generation hooks that can modify
the IR entries before emission or transform the generated module after.

Example usage:
    from schemagen.core.hooks import PreGenerateHook, PostGenerateHook

    # Pre-generation hook to drop internal schemas
    class DropInternal(PreGenerateHook):
        def pre_generate(self, schemas):
            return [s for s in schemas if not s.name.startswith("Internal")]

    # Post-generation hook to add headers
    class AddLicenseHeader(PostGenerateHook):
        def post_generate(self, filename, content):
            header = "// Copyright 2024 My Company\\n\\n"
            return header + content
"""

from typing import Protocol, runtime_checkable

from .ir import NamedSchemaIR, SchemaCategory


@runtime_checkable
class PreGenerateHook(Protocol):
    """Protocol for pre-generation hooks.

    Pre-generation hooks receive the sorted IR entries before emission and
    return the entries to emit. Returned entries must not refer to names
    that were removed.

    Example:
        class OnlyResponses(PreGenerateHook):
            def pre_generate(self, schemas: list[NamedSchemaIR]) -> list[NamedSchemaIR]:
                return [s for s in schemas if s.category != "params"]
    """

    def pre_generate(self, schemas: list[NamedSchemaIR]) -> list[NamedSchemaIR]:
        """Called before emission.

        Args:
            schemas: The topologically sorted IR entries

        Returns:
            The (possibly filtered) entries to emit
        """
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Protocol for post-generation hooks.

    Post-generation hooks receive the generated module text and can
    transform it before it's written to disk.

    Example:
        class FormatWithPrettier(PostGenerateHook):
            def post_generate(self, filename: str, content: str) -> str:
                return run_prettier(filename, content)
    """

    def post_generate(self, filename: str, content: str) -> str:
        """Called after emission.

        Args:
            filename: The name of the generated file (e.g., "schemas.ts")
            content: The generated code content

        Returns:
            The (possibly transformed) code to write
        """
        ...


class AddHeaderHook:
    """Built-in hook to add a header to generated files.

    Example:
        hook = AddHeaderHook("// Auto-generated - do not edit")
    """

    def __init__(self, header: str):
        self.header = header

    def post_generate(self, _filename: str, content: str) -> str:
        """Add a header to the beginning of the file."""
        if not self.header.endswith("\n"):
            header = self.header + "\n\n"
        else:
            header = self.header + "\n"
        return header + content


class FilterSchemasHook:
    """Built-in hook to filter entries by name prefix/suffix and category.

    Entries that a kept entry depends on are always kept, so filtering never
    leaves a reference to a schema that is not emitted.

    Example:
        # Keep only operation responses (and whatever they reference)
        hook = FilterSchemasHook(categories={"response"})
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
        categories: set[SchemaCategory] | None = None,
    ):
        self.exclude_prefix = exclude_prefix
        self.exclude_suffix = exclude_suffix
        self.include_prefix = include_prefix
        self.include_suffix = include_suffix
        self.categories = categories

    def _should_include(self, schema: NamedSchemaIR) -> bool:
        """Check if an entry should be included."""
        name = schema.name
        if self.exclude_prefix and name.startswith(self.exclude_prefix):
            return False
        if self.exclude_suffix and name.endswith(self.exclude_suffix):
            return False
        if self.include_prefix and not name.startswith(self.include_prefix):
            return False
        if self.include_suffix and not name.endswith(self.include_suffix):
            return False
        if self.categories is not None and schema.category not in self.categories:
            return False
        return True

    def pre_generate(self, schemas: list[NamedSchemaIR]) -> list[NamedSchemaIR]:
        """Filter entries, keeping the dependencies of every kept entry."""
        by_name = {s.name: s for s in schemas}
        keep: set[str] = set()
        stack = [s.name for s in schemas if self._should_include(s)]
        while stack:
            name = stack.pop()
            if name in keep or name not in by_name:
                continue
            keep.add(name)
            stack.extend(by_name[name].dependencies)
        return [s for s in schemas if s.name in keep]


class HookRunner:
    """Runs a collection of hooks in order."""

    def __init__(self):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []

    def add_pre_hook(self, hook: PreGenerateHook):
        """Add a pre-generation hook."""
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        """Add a post-generation hook."""
        self.post_hooks.append(hook)

    def run_pre_hooks(self, schemas: list[NamedSchemaIR]) -> list[NamedSchemaIR]:
        """Run all pre-generation hooks in order."""
        for hook in self.pre_hooks:
            schemas = hook.pre_generate(schemas)
        return schemas

    def run_post_hooks(self, filename: str, content: str) -> str:
        """Run all post-generation hooks in order."""
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
