"""
Decode step: raw YAML -> typed per-layer documents.

Runs after schema validation. Anything the models reject becomes a
``<layer>_INVALID`` diagnostic for that document only.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

from . import diagnostics
from .ir import ContractDoc, Diagnostic, NavigationDoc, StateDoc, UiDoc
from .loader import SpecFile
from .schema import display_path

DocT = TypeVar("DocT", NavigationDoc, UiDoc, StateDoc)


def format_validation_error(error: ValidationError) -> str:
    """Render a pydantic error as ``/json/pointer message`` pairs."""
    parts = []
    for item in error.errors():
        pointer = "/" + "/".join(str(p) for p in item["loc"])
        parts.append(f"{pointer} {item['msg']}")
    return "; ".join(parts)


def decode_documents(
    files: list[SpecFile],
    model: type[DocT],
    label: str,
    display_root: Path | None = None,
) -> tuple[list[DocT], list[Diagnostic]]:
    """Decode every file into ``model``.

    Returns:
        Tuple of (documents, diagnostics).
    """
    docs: list[DocT] = []
    found: list[Diagnostic] = []

    for file in files:
        shown = display_path(file.path, display_root)
        if not isinstance(file.data, dict):
            found.append(diagnostics.document_invalid(label, shown, "document root must be a mapping"))
            continue
        try:
            doc = model.model_validate(file.data)
        except ValidationError as e:
            found.append(diagnostics.document_invalid(label, shown, format_validation_error(e)))
            continue
        docs.append(doc.model_copy(update={"path": shown, "group": file.group}))

    return docs, found


def decode_contract(data: Any) -> ContractDoc:
    """Decode an OpenAPI document leniently.

    Raises:
        ValidationError: If the root is not a mapping or ``paths`` is not one.
    """
    doc = ContractDoc.model_validate(data)
    return doc.model_copy(update={"raw": data})
