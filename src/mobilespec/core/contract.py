"""
External API contract resolver.

Reads an OpenAPI 3.x / Swagger 2.0 document leniently: only operation ids and
success response bodies are extracted. Everything else is ignored.

Response root keys are the top-level property names of the first 2xx JSON
response body. Resolution follows local ``$ref`` pointers and unions
``allOf`` members; ``oneOf``/``anyOf`` and anything it cannot follow is
recorded as unresolved, never as an empty key set.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from . import diagnostics
from .config import UNUSED_LEVEL_OFF, OpenApiConfig
from .decode import decode_contract, format_validation_error
from .errors import ContractError, ErrorContext
from .ir import (
    ContractDoc,
    DataReference,
    DataRefKind,
    Diagnostic,
    Operation,
    OperationRegistry,
    RootKeys,
    StateDoc,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

MAX_REF_DEPTH = 16


# =============================================================================
# Reading
# =============================================================================


def read_contract(path: Path) -> ContractDoc:
    """Parse a contract document.

    Raises:
        ContractError: If the file cannot be read, is not YAML/JSON, or has
            no usable ``paths`` mapping.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ContractError(f"cannot parse: {e}", ErrorContext(file=path)) from e

    if not isinstance(data, dict):
        raise ContractError("document root must be a mapping", ErrorContext(file=path))

    try:
        doc = decode_contract(data)
    except ValidationError as e:
        raise ContractError(format_validation_error(e), ErrorContext(file=path)) from e

    logger.debug("Read contract %s (%d paths)", path, len(doc.paths))
    return doc


# =============================================================================
# Root-key resolution
# =============================================================================


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, ref: str) -> Any | None:
    """Follow a local JSON pointer such as ``#/components/schemas/Task``.

    Returns None for external references and pointers that do not resolve.
    """
    if not ref.startswith("#"):
        return None
    pointer = ref[1:]
    if pointer in ("", "/"):
        return document if pointer == "" else None

    current = document
    for token in pointer.lstrip("/").split("/"):
        token = _unescape(token)
        if isinstance(current, dict) and token in current:
            current = current[token]
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            return None
    return current


def schema_root_keys(schema: Any, document: Any, depth: int = 0) -> RootKeys:
    """Resolve the top-level property names of a schema.

    Args:
        schema: Schema object (may be a ``$ref``).
        document: Whole contract, for pointer lookups.
        depth: Current indirection depth.

    Returns:
        Resolved keys, or an unresolved marker with a reason.
    """
    if depth > MAX_REF_DEPTH:
        return RootKeys.unresolved(f"reference depth exceeds {MAX_REF_DEPTH}")
    if not isinstance(schema, dict):
        return RootKeys.unresolved("schema is not an object")

    ref = schema.get("$ref")
    if isinstance(ref, str):
        target = resolve_pointer(document, ref)
        if target is None:
            return RootKeys.unresolved(f"unresolvable reference {ref}")
        return schema_root_keys(target, document, depth + 1)

    for keyword in ("oneOf", "anyOf"):
        if keyword in schema:
            return RootKeys.unresolved(f"{keyword} is not resolved")

    keys: set[str] = set()
    resolved_any = False

    properties = schema.get("properties")
    if isinstance(properties, dict):
        keys.update(str(k) for k in properties)
        resolved_any = True

    members = schema.get("allOf")
    if isinstance(members, list):
        for member in members:
            result = schema_root_keys(member, document, depth + 1)
            if result.keys is not None:
                keys.update(result.keys)
                resolved_any = True

    if not resolved_any:
        if isinstance(members, list):
            return RootKeys.unresolved("no resolvable allOf member")
        return RootKeys.unresolved("schema declares no properties")
    return RootKeys.of(keys)


def _is_success(status: Any) -> bool:
    code = str(status).strip().upper()
    return len(code) == 3 and code[0] == "2" and (code[1:].isdigit() or code[1:] == "XX")


def _is_json(media_type: str) -> bool:
    base = media_type.split(";", 1)[0].strip().lower()
    return base == "application/json" or base.endswith("+json") or base == "*/*"


def response_root_keys(operation: Any, document: Any) -> RootKeys:
    """Root keys of the first 2xx JSON response of an operation."""
    if not isinstance(operation, dict):
        return RootKeys.unresolved("operation is not an object")
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return RootKeys.unresolved("no responses")

    success = sorted((str(s) for s in responses if _is_success(s)))
    if not success:
        return RootKeys.unresolved("no 2xx response")

    status = success[0]
    response = responses.get(status, responses.get(int(status)) if status.isdigit() else None)

    # Responses may themselves be references (components/responses)
    depth = 0
    while isinstance(response, dict) and isinstance(response.get("$ref"), str):
        depth += 1
        if depth > MAX_REF_DEPTH:
            return RootKeys.unresolved(f"reference depth exceeds {MAX_REF_DEPTH}")
        ref = response["$ref"]
        response = resolve_pointer(document, ref)
        if response is None:
            return RootKeys.unresolved(f"unresolvable reference {ref}")

    if not isinstance(response, dict):
        return RootKeys.unresolved(f"response {status} is not an object")

    content = response.get("content")
    if isinstance(content, dict):
        for media_type, body in content.items():
            if _is_json(str(media_type)) and isinstance(body, dict) and "schema" in body:
                return schema_root_keys(body["schema"], document, depth)
        return RootKeys.unresolved(f"response {status} has no JSON body")

    # Swagger 2.0
    if "schema" in response:
        return schema_root_keys(response["schema"], document, depth)
    return RootKeys.unresolved(f"response {status} has no body")


# =============================================================================
# Registry
# =============================================================================


def build_operation_registry(doc: ContractDoc) -> OperationRegistry:
    """Collect operation ids over every path and HTTP method."""
    occurrences: dict[str, list[str]] = {}
    first: dict[str, Any] = {}
    missing: list[str] = []

    for path, item in doc.paths.items():
        if not isinstance(item, dict):
            continue
        for method, operation in item.items():
            method_name = str(method).lower()
            if method_name not in HTTP_METHODS:
                continue

            label = f"{method_name.upper()} {path}"
            operation_id = operation.get("operationId") if isinstance(operation, dict) else None
            if not isinstance(operation_id, str) or not operation_id.strip():
                missing.append(label)
                continue

            operation_id = operation_id.strip()
            occurrences.setdefault(operation_id, []).append(label)
            first.setdefault(operation_id, operation)

    operations = {
        op_id: Operation(
            operation_id=op_id,
            occurrences=labels,
            root_keys=response_root_keys(first[op_id], doc.raw),
        )
        for op_id, labels in occurrences.items()
    }
    logger.debug("Operation registry: %d ids, %d missing", len(operations), len(missing))
    return OperationRegistry(operations=operations, missing=missing)


def collect_data_references(docs: list[StateDoc]) -> list[DataReference]:
    """Queries and mutations that name an operation id."""
    references: list[DataReference] = []
    for doc in docs:
        screen = doc.screen
        declared = (
            (DataRefKind.QUERY, screen.data.queries),
            (DataRefKind.MUTATION, screen.data.mutations),
        )
        for kind, refs in declared:
            for name, ref in refs.items():
                if not ref.operation_id:
                    continue
                references.append(
                    DataReference(
                        screen=screen.id,
                        kind=kind,
                        name=name,
                        operation_id=ref.operation_id,
                        select_root=ref.select_root,
                        path=doc.path,
                    )
                )
    return references


# =============================================================================
# Checks
# =============================================================================


def check_registry(registry: OperationRegistry) -> list[Diagnostic]:
    found = [diagnostics.missing_operation_id(label) for label in registry.missing]
    for op_id, labels in registry.duplicates.items():
        found.append(diagnostics.duplicate_operation_id(op_id, labels))
    return found


def check_references(
    registry: OperationRegistry,
    references: list[DataReference],
    check_select_root: bool = True,
) -> list[Diagnostic]:
    found: list[Diagnostic] = []

    for ref in references:
        operation = registry.get(ref.operation_id)
        if operation is None:
            found.append(
                diagnostics.unknown_operation_id(
                    ref.operation_id, ref.kind.value, ref.name, ref.screen, ref.path
                )
            )
            continue

        if not check_select_root or not ref.select_root:
            continue

        root_keys = operation.root_keys
        if root_keys.keys is None:
            found.append(
                diagnostics.response_unresolved(
                    ref.select_root,
                    ref.operation_id,
                    root_keys.reason or "unresolved",
                    ref.kind.value,
                    ref.name,
                    ref.screen,
                )
            )
        elif ref.select_root not in root_keys.keys:
            found.append(
                diagnostics.select_root_not_found(
                    ref.select_root,
                    ref.operation_id,
                    root_keys.keys,
                    ref.kind.value,
                    ref.name,
                    ref.screen,
                )
            )

    return found


def check_unused(
    registry: OperationRegistry, references: list[DataReference]
) -> list[Diagnostic]:
    used = {ref.operation_id for ref in references}
    unused = {
        op_id: op.occurrences for op_id, op in registry.operations.items() if op_id not in used
    }
    if not unused:
        return []
    return [diagnostics.unused_operation_ids(unused)]


def check_contract(
    openapi: OpenApiConfig, specs_dir: Path, state_docs: list[StateDoc]
) -> list[Diagnostic]:
    """Run every contract check for the configured document.

    Never raises for a missing or malformed contract; those become
    ``OPENAPI_NOT_FOUND`` / ``OPENAPI_INVALID``.
    """
    if not openapi.path:
        return [diagnostics.openapi_not_found("", openapi.path)]

    path = openapi.resolve(specs_dir)
    if not path.is_file():
        return [diagnostics.openapi_not_found(str(path), openapi.path)]

    try:
        doc = read_contract(path)
    except ContractError as e:
        return [diagnostics.openapi_invalid(str(path), e.message)]

    registry = build_operation_registry(doc)
    references = collect_data_references(state_docs)

    found = check_registry(registry)
    found.extend(check_references(registry, references, openapi.check_select_root))
    if openapi.warn_unused_operation_id != UNUSED_LEVEL_OFF:
        found.extend(check_unused(registry, references))
    return found
