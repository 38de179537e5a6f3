"""Naming helpers shared by parsers and emitters."""

import json
import re

_SEPARATOR = re.compile(r"[-_\s]+(.)?")
_IDENTIFIER = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")


def pascal_case(name: str) -> str:
    """Convert ``get_user-by id`` style names to ``GetUserById``."""
    joined = _SEPARATOR.sub(lambda m: m.group(1).upper() if m.group(1) else "", name)
    return joined[:1].upper() + joined[1:]


def camel_case(name: str) -> str:
    """Convert a name to camelCase."""
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def schema_var_name(type_name: str) -> str:
    """Name of the exported schema binding for an entry (``User`` -> ``userSchema``)."""
    return type_name[:1].lower() + type_name[1:] + "Schema"


def fragment_type_name(fragment_name: str) -> str:
    return pascal_case(fragment_name) + "Fragment"


def operation_type_name(operation_name: str, operation: str) -> str:
    """Response entry name (``GetUser`` + query -> ``GetUserQuery``)."""
    return pascal_case(operation_name) + operation.capitalize()


def variables_type_name(operation_name: str, operation: str) -> str:
    return operation_type_name(operation_name, operation) + "Variables"


def is_valid_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def safe_property_name(name: str) -> str:
    """Quote an object key when it is not a valid JS identifier."""
    if is_valid_identifier(name):
        return name
    return json.dumps(name)
