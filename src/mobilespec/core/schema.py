"""
Structural schema validation.

JSON Schemas (draft 2020-12) are compiled once per ``SchemaCache`` and reused.
The cache is an explicit object so tests and long-running callers can share
or isolate it; it is keyed by resolved file path and, when present, by the
schema's ``$id`` so two paths carrying the same ``$id`` compile only once.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from . import diagnostics
from .errors import ErrorContext, SchemaNotFoundError
from .ir import Diagnostic
from .loader import SpecFile

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"


class SchemaCache:
    """Compiled-validator cache keyed by schema identity."""

    def __init__(self) -> None:
        self._by_path: dict[Path, Draft202012Validator] = {}
        self._by_id: dict[str, Draft202012Validator] = {}

    def __len__(self) -> int:
        return len(self._by_path)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, Path) and path.resolve() in self._by_path

    def get(self, schema_path: Path) -> Draft202012Validator:
        """Return the compiled validator for ``schema_path``.

        Raises:
            SchemaNotFoundError: If the file does not exist.
            SchemaError: If the file is not a valid JSON Schema.
        """
        path = schema_path.resolve()
        cached = self._by_path.get(path)
        if cached is not None:
            return cached

        if not path.is_file():
            raise SchemaNotFoundError("schema not found", ErrorContext(file=path))

        schema: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        schema_id = schema.get("$id")
        if isinstance(schema_id, str) and schema_id in self._by_id:
            validator = self._by_id[schema_id]
            self._by_path[path] = validator
            return validator

        Draft202012Validator.check_schema(schema)
        validator = Draft202012Validator(schema)
        logger.debug("Compiled schema %s", path)

        self._by_path[path] = validator
        if isinstance(schema_id, str):
            self._by_id[schema_id] = validator
        return validator


def _pointer(parts: Any) -> str:
    segments = [str(p).replace("~", "~0").replace("/", "~1") for p in parts]
    return "/" + "/".join(segments) if segments else "/"


def validate_documents(
    files: list[SpecFile],
    schema_path: Path,
    label: str,
    cache: SchemaCache,
    display_root: Path | None = None,
) -> tuple[list[Diagnostic], list[SpecFile]]:
    """Validate documents of one layer against a JSON Schema.

    Files that failed to parse are reported here too. A missing schema is
    reported once and every parsed file passes through unchecked; the
    fail-closed decode step still guards the downstream checks.

    Args:
        files: Loaded documents.
        schema_path: Schema file for the layer.
        label: Layer label (``L2``/``L3``/``L4``).
        cache: Compiled schema cache.
        display_root: Paths in messages are shown relative to this.

    Returns:
        Tuple of (diagnostics, files that passed).
    """
    found: list[Diagnostic] = []
    passed: list[SpecFile] = []

    validator: Draft202012Validator | None
    try:
        validator = cache.get(schema_path)
    except SchemaNotFoundError:
        found.append(diagnostics.schema_not_found(label, str(schema_path)))
        validator = None
    except (SchemaError, ValueError) as e:
        # Unusable schema is reported like a missing one
        found.append(diagnostics.schema_not_found(label, f"{schema_path} ({e})"))
        validator = None

    for file in files:
        shown = display_path(file.path, display_root)
        if not file.ok:
            found.append(diagnostics.document_invalid(label, shown, file.error or "unreadable"))
            continue
        if validator is None:
            passed.append(file)
            continue

        errors = sorted(
            validator.iter_errors(file.data),
            key=lambda e: (_pointer(e.absolute_path), e.message),
        )
        if errors:
            for err in errors:
                found.append(
                    diagnostics.schema_violation(label, shown, _pointer(err.absolute_path), err.message)
                )
            continue
        passed.append(file)

    return found, passed


def display_path(path: Path, root: Path | None) -> str:
    if root is None:
        return str(path)
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)
