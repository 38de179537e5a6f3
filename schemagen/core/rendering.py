"""Jinja2 environment shared by the module emitters and predicate generator."""

import json
from functools import lru_cache
from pathlib import Path

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .naming import camel_case, pascal_case, safe_property_name, schema_var_name


def create_environment(template_dir: str | None = None) -> Environment:
    """Create the template environment.

    Args:
        template_dir: Optional directory with custom Jinja2 templates.
                      Templates here override the built-in templates.
    """
    loaders = []
    if template_dir:
        template_path = Path(template_dir)
        if template_path.is_dir():
            loaders.append(FileSystemLoader(str(template_path)))
    loaders.append(PackageLoader("schemagen", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["pascal_case"] = pascal_case
    env.filters["camel_case"] = camel_case
    env.filters["schema_var"] = schema_var_name
    env.filters["safe_property"] = safe_property_name
    env.filters["json"] = json.dumps
    return env


@lru_cache(maxsize=None)
def default_environment() -> Environment:
    """The environment over the built-in templates only."""
    return create_environment()
