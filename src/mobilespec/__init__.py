"""
mobilespec - structural consistency checks for layered mobile app specs.

Validates navigation (L2), UI (L3) and state (L4) documents against each
other and against an external OpenAPI contract, and generates flow diagrams
and translation files from them.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import ir
from .core.errors import ConfigError, ContractError, DocumentLoadError, MobileSpecError
from .core.validate import ValidationResult, openapi_check, validate


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    try:
        return _metadata_version("mobilespec")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "validate",
    "openapi_check",
    "ValidationResult",
    "MobileSpecError",
    "ConfigError",
    "ContractError",
    "DocumentLoadError",
]
