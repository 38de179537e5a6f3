"""OpenAPI document loading, dereferencing and operation extraction.

``dereference`` replaces every local ``$ref`` with the very object it points
to, so a component schema referenced from ten places is the same Python
object in all ten. The OpenAPI parser relies on that identity to tell
named components apart from inline schemas.

Example usage:
    from schemagen.core.openapi_document import dereference, extract_operations, load_document

    document = dereference(load_document("petstore.yaml"))
    operations = extract_operations(document)
"""

import copy
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete")
JSON_MEDIA_TYPE = "application/json"
RESPONSE_CODES = ("200", "201", "default")


class OpenAPIDocumentError(ValueError):
    """Raised for unreadable documents or unresolvable references."""


@dataclass
class OpenAPIOperation:
    """One HTTP operation with its schemas resolved."""
    operation_id: str
    method: str
    path: str
    request_body: dict[str, Any] | None = None
    response_schema: dict[str, Any] | None = None
    path_params: list[dict[str, Any]] = field(default_factory=list)
    query_params: list[dict[str, Any]] = field(default_factory=list)


def load_document(path: str | Path) -> dict[str, Any]:
    """Load an OpenAPI document from a ``.json``, ``.yaml`` or ``.yml`` file."""
    path = Path(path)
    if not path.is_file():
        raise OpenAPIDocumentError(f"OpenAPI document not found: {path}")
    text = path.read_text()
    try:
        if path.suffix == ".json":
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise OpenAPIDocumentError(f"Failed to parse {path}: {e}") from e
    if not isinstance(document, dict):
        raise OpenAPIDocumentError(f"{path} does not contain an OpenAPI object")
    return document


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def dereference(document: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``document`` with local ``$ref``s replaced by their targets.

    Raises:
        OpenAPIDocumentError: On external references, missing targets or
            references that only point at each other.
    """
    document = copy.deepcopy(document)
    resolved: dict[str, Any] = {}

    def lookup(ref: str) -> Any:
        if not ref.startswith("#/"):
            raise OpenAPIDocumentError(f"Unsupported external reference: {ref}")
        node: Any = document
        for token in ref[2:].split("/"):
            token = _unescape(token)
            if isinstance(node, list) and token.isdigit():
                node = node[int(token)]
            elif isinstance(node, dict) and token in node:
                node = node[token]
            else:
                raise OpenAPIDocumentError(f"Unresolvable reference: {ref}")
        return node

    def resolve(ref: str) -> Any:
        if ref in resolved:
            return resolved[ref]
        seen = {ref}
        target = lookup(ref)
        while _is_ref(target):
            next_ref = target["$ref"]
            if next_ref in seen:
                raise OpenAPIDocumentError(f"Circular reference alias: {ref}")
            seen.add(next_ref)
            target = lookup(next_ref)
        resolved[ref] = target
        return target

    visited: set[int] = set()

    def walk(node: Any):
        if isinstance(node, dict):
            if id(node) in visited:
                return
            visited.add(id(node))
            items = node.items()
        elif isinstance(node, list):
            if id(node) in visited:
                return
            visited.add(id(node))
            items = enumerate(node)
        else:
            return
        for key, value in list(items):
            if _is_ref(value):
                value = resolve(value["$ref"])
                node[key] = value
            walk(value)

    walk(document)
    return document


def _is_ref(node: Any) -> bool:
    return isinstance(node, dict) and isinstance(node.get("$ref"), str)


def generate_operation_id(method: str, path: str) -> str:
    """Derive an operation id from method and path.

    ``GET /users/{id}/posts`` becomes ``getUsersByIdPosts``.
    """
    parts = []
    for segment in path.strip("/").split("/"):
        if not segment:
            continue
        param = re.fullmatch(r"\{(.+)\}", segment)
        if param:
            parts.append("By" + _capitalize(param.group(1)))
        else:
            parts.append(_capitalize(segment))
    return method.lower() + "".join(parts)


def _capitalize(segment: str) -> str:
    words = re.split(r"[^a-zA-Z0-9]+", segment)
    return "".join(word[:1].upper() + word[1:] for word in words if word)


def _json_schema(content: dict[str, Any] | None) -> dict[str, Any] | None:
    if not content:
        return None
    media = content.get(JSON_MEDIA_TYPE)
    if not media:
        return None
    return media.get("schema")


def extract_operations(document: dict[str, Any]) -> list[OpenAPIOperation]:
    """Extract operations from a dereferenced document in path order."""
    operations = []
    for path, path_item in (document.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        shared_params = path_item.get("parameters") or []
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue

            # Operation-level parameters override path-level ones with the same name and location.
            params: dict[tuple[str, str], dict[str, Any]] = {}
            for param in [*shared_params, *(operation.get("parameters") or [])]:
                params[(param.get("name"), param.get("in"))] = param

            response_schema = None
            responses = operation.get("responses") or {}
            for code in RESPONSE_CODES:
                if code in responses:
                    response_schema = _json_schema(responses[code].get("content"))
                    if response_schema is not None:
                        break

            operations.append(OpenAPIOperation(
                operation_id=operation.get("operationId") or generate_operation_id(method, path),
                method=method,
                path=path,
                request_body=_json_schema((operation.get("requestBody") or {}).get("content")),
                response_schema=response_schema,
                path_params=[p for p in params.values() if p.get("in") == "path"],
                query_params=[p for p in params.values() if p.get("in") == "query"],
            ))
    logger.debug("Extracted %d operations", len(operations))
    return operations


def extract_base_url(document: dict[str, Any]) -> str | None:
    """First server URL with its variables substituted by their defaults."""
    servers = document.get("servers") or []
    if not servers:
        return None
    server = servers[0]
    url = server.get("url")
    if url is None:
        return None
    for name, variable in (server.get("variables") or {}).items():
        url = url.replace("{" + name + "}", str(variable.get("default", "")))
    return url
