"""
Diagnostic types for mobilespec IR.

A diagnostic is a single structured finding. Only two levels exist:
``error`` (the spec cannot be implemented as written) and ``info``
(a visible but acceptable state such as unused or not-yet-wired items).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic."""

    ERROR = "error"
    INFO = "info"


class DiagnosticCode(str, Enum):
    """Machine-readable diagnostic codes."""

    # Structural
    CONFIG_INVALID = "CONFIG_INVALID"
    L2_SCHEMA_NOT_FOUND = "L2_SCHEMA_NOT_FOUND"
    L3_SCHEMA_NOT_FOUND = "L3_SCHEMA_NOT_FOUND"
    L4_SCHEMA_NOT_FOUND = "L4_SCHEMA_NOT_FOUND"
    L2_INVALID = "L2_INVALID"
    L3_INVALID = "L3_INVALID"
    L4_INVALID = "L4_INVALID"
    L2_NO_FILES = "L2_NO_FILES"

    # Navigation graph
    L2_UNKNOWN_GROUP = "L2_UNKNOWN_GROUP"
    L2_DUPLICATE_SCREEN_ID = "L2_DUPLICATE_SCREEN_ID"
    L2_DUPLICATE_TRANSITION_ID = "L2_DUPLICATE_TRANSITION_ID"
    L2_INVALID_TRANSITION_TO = "L2_INVALID_TRANSITION_TO"
    L2_AMBIGUOUS_TRANSITION_TO = "L2_AMBIGUOUS_TRANSITION_TO"

    # Reachability, choices and guards
    L2_NO_ENTRY = "L2_NO_ENTRY"
    L2_ENTRY_POINTS = "L2_ENTRY_POINTS"
    L2_UNREACHABLE_SCREEN = "L2_UNREACHABLE_SCREEN"
    L2_DEAD_END = "L2_DEAD_END"
    L2_CHOICE_UNGUARDED = "L2_CHOICE_UNGUARDED"
    L2_CHOICE_MULTIPLE_ELSE = "L2_CHOICE_MULTIPLE_ELSE"
    L2_CHOICE_TAP_TRIGGER = "L2_CHOICE_TAP_TRIGGER"
    L2_UNKNOWN_GUARD = "L2_UNKNOWN_GUARD"
    L2_GUARD_UNUSED = "L2_GUARD_UNUSED"

    # Cross-layer
    L3_UNKNOWN_SCREEN = "L3_UNKNOWN_SCREEN"
    L3_ACTION_NOT_IN_L2 = "L3_ACTION_NOT_IN_L2"
    L2_TRANSITION_UNUSED = "L2_TRANSITION_UNUSED"
    L2_TRANSITION_NOT_IN_L4 = "L2_TRANSITION_NOT_IN_L4"
    L4_EVENT_NOT_IN_L2 = "L4_EVENT_NOT_IN_L2"
    L4_UNKNOWN_QUERY = "L4_UNKNOWN_QUERY"
    L4_UNKNOWN_MUTATION = "L4_UNKNOWN_MUTATION"
    L4_UNKNOWN_SCREEN = "L4_UNKNOWN_SCREEN"

    # External contract
    OPENAPI_NOT_FOUND = "OPENAPI_NOT_FOUND"
    OPENAPI_INVALID = "OPENAPI_INVALID"
    OPENAPI_MISSING_OPERATION_ID = "OPENAPI_MISSING_OPERATION_ID"
    OPENAPI_DUPLICATE_OPERATION_ID = "OPENAPI_DUPLICATE_OPERATION_ID"
    OPENAPI_RESPONSE_SCHEMA_UNRESOLVED = "OPENAPI_RESPONSE_SCHEMA_UNRESOLVED"
    L4_UNKNOWN_OPERATION_ID = "L4_UNKNOWN_OPERATION_ID"
    L4_SELECT_ROOT_NOT_FOUND = "L4_SELECT_ROOT_NOT_FOUND"
    L4_UNUSED_OPERATION_ID = "L4_UNUSED_OPERATION_ID"

    # Translations
    I18N_MISSING_KEY = "I18N_MISSING_KEY"
    I18N_UNTRANSLATED = "I18N_UNTRANSLATED"


class Diagnostic(BaseModel):
    """
    A single structured finding.

    Attributes:
        code: Machine-readable code
        level: error or info
        message: Human-readable message
        meta: Structured data (ids, paths, counts) for tooling
    """

    code: DiagnosticCode
    level: DiagnosticLevel
    message: str
    meta: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def is_error(self) -> bool:
        return self.level == DiagnosticLevel.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "level": self.level.value,
            "message": self.message,
            "meta": self.meta,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class DiagnosticSet(BaseModel):
    """
    Ordered collection of diagnostics with derived views.

    Pass/fail is decided solely by the presence of error-level diagnostics.
    """

    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.level == DiagnosticLevel.ERROR]

    @property
    def infos(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.level == DiagnosticLevel.INFO]

    @property
    def ok(self) -> bool:
        """True if no errors (infos never affect the outcome)."""
        return not any(d.is_error for d in self.diagnostics)

    def find(self, code: DiagnosticCode | str) -> Diagnostic | None:
        """Return the first diagnostic with the given code, or None.

        Codes outside the catalogue never match.
        """
        matches = self.find_all(code)
        return matches[0] if matches else None

    def find_all(self, code: DiagnosticCode | str) -> list[Diagnostic]:
        value = code.value if isinstance(code, DiagnosticCode) else str(code)
        return [d for d in self.diagnostics if d.code.value == value]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "error_count": len(self.errors),
            "info_count": len(self.infos),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
