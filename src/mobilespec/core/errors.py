"""
Error types for mobilespec loading, schema checking and contract parsing.

These are raised by the I/O collaborators (loader, config, schema cache,
contract reader). The validation pipeline catches them and turns them into
diagnostics, so callers of ``validate()`` never see them for a malformed tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class MobileSpecError(Exception):
    """Base exception for all mobilespec errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class ConfigError(MobileSpecError):
    """
    Raised when mobilespec.config.yml cannot be read or has the wrong shape.

    Examples:
    - YAML syntax error
    - Top-level value is not a mapping
    - openapi.path is not a string
    """

    pass


class DocumentLoadError(MobileSpecError):
    """
    Raised when a spec document cannot be read or parsed.

    Examples:
    - YAML syntax error
    - Document root is not a mapping
    - Required field missing after decode
    """

    pass


class SchemaNotFoundError(MobileSpecError):
    """Raised when a JSON Schema file does not exist."""

    pass


class ContractError(MobileSpecError):
    """
    Raised when the external API contract cannot be used.

    Examples:
    - File missing
    - Not YAML/JSON
    - ``paths`` is not a mapping
    """

    pass


@dataclass
class ErrorContext:
    """
    Location information for an error.

    Attributes:
        file: Path to the document where the error occurred
        pointer: Optional JSON pointer inside the document (e.g. ``/screen/id``)
    """

    file: Path
    pointer: str | None = None

    def format(self) -> str:
        """
        Format as a human-readable location.

        Returns:
            Formatted string like: "L2.screenflows/home.flow.yaml#/screen/id"
        """
        if self.pointer:
            return f"{self.file}#{self.pointer}"
        return str(self.file)


def make_load_error(message: str, file: Path, pointer: str | None = None) -> DocumentLoadError:
    """Helper to create a DocumentLoadError with file context."""
    return DocumentLoadError(message, ErrorContext(file=file, pointer=pointer))
