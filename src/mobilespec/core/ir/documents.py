"""
Per-layer document types for mobilespec IR.

Raw YAML is decoded into one of these models before any cross-layer logic
runs. Decoding fails closed: a missing required field raises a pydantic
``ValidationError`` instead of letting ``None`` leak into the checkers.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScreenKind(str, Enum):
    """Node kinds in the navigation graph."""

    SCREEN = "screen"
    CHOICE = "choice"  # Automatic branch resolved by guards


class TriggerKind(str, Enum):
    """How a transition fires."""

    TAP = "tap"
    AUTO = "auto"


class EventType(str, Enum):
    """State event types that reference the screen's own data declarations."""

    CALL_QUERY = "callQuery"
    CALL_MUTATION = "callMutation"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, str):
        return value.strip()
    return value


# =============================================================================
# Navigation layer (L2)
# =============================================================================


class FlowTransition(BaseModel):
    """
    Transition as declared in a navigation document.

    Attributes:
        id: Transition id, unique per source screen
        trigger: tap or auto
        target: Target screen id
        target_context: Disambiguates between context variants of the target
        guard: Guard id (required on choice screens unless ``else`` is set)
        else_: Fallback branch of a choice screen
    """

    id: str = Field(min_length=1)
    trigger: TriggerKind = TriggerKind.TAP
    target: str = Field(min_length=1)
    target_context: str | None = Field(None, alias="targetContext")
    guard: str | None = None
    else_: bool = Field(False, alias="else")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("target_context", "guard", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return _blank_to_none(value)


class FlowScreen(BaseModel):
    """Screen declaration in a navigation document."""

    id: str = Field(min_length=1)
    name: str | None = None
    type: ScreenKind = ScreenKind.SCREEN
    context: str | None = None
    entry: bool = False
    exit: bool = False
    transitions: list[FlowTransition] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("context", mode="before")
    @classmethod
    def _strip_context(cls, value: Any) -> Any:
        return _blank_to_none(value)


class NavigationDoc(BaseModel):
    """A decoded ``*.flow.yaml`` document."""

    screen: FlowScreen
    path: str = ""
    group: str = ""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# UI layer (L3)
# =============================================================================


class UiNode(BaseModel):
    """
    Canonical UI element.

    Every raw node, whether it nests children directly or under a ``layout``
    sub-object, is normalized to this shape before traversal.
    """

    id: str | None = None
    component: str | None = None
    name: str | None = None
    action: str | None = None
    children: list[UiNode] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def walk(self) -> list[UiNode]:
        """Return this node and all descendants in document order."""
        nodes: list[UiNode] = []
        stack: list[UiNode] = [self]
        while stack:
            node = stack.pop()
            nodes.append(node)
            stack.extend(reversed(node.children))
        return nodes


def normalize_node(raw: Any) -> UiNode:
    """
    Flatten a raw YAML node into a ``UiNode``.

    Children come from ``node.children`` followed by ``node.layout.children``.
    Non-mapping children are dropped.
    """
    if not isinstance(raw, dict):
        return UiNode()

    raw_children: list[Any] = []
    if isinstance(raw.get("children"), list):
        raw_children.extend(raw["children"])
    layout = raw.get("layout")
    if isinstance(layout, dict) and isinstance(layout.get("children"), list):
        raw_children.extend(layout["children"])

    def _text(key: str) -> str | None:
        value = raw.get(key)
        return value if isinstance(value, str) and value else None

    return UiNode(
        id=_text("id"),
        component=_text("component") or _text("type"),
        name=_text("name"),
        action=_text("action"),
        children=[normalize_node(c) for c in raw_children if isinstance(c, dict)],
    )


class UiScreen(BaseModel):
    """Screen declaration in a UI document."""

    id: str = Field(min_length=1)
    context: str | None = None
    layout: UiNode

    model_config = ConfigDict(frozen=True)

    @field_validator("context", mode="before")
    @classmethod
    def _strip_context(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("layout", mode="before")
    @classmethod
    def _normalize_layout(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return normalize_node(value)
        return value


class UiAction(BaseModel):
    """An ``action`` found on a UI node, expected to name a transition id."""

    screen_id: str
    context: str | None = None
    component_id: str | None = None
    action: str

    model_config = ConfigDict(frozen=True)


class UiDoc(BaseModel):
    """A decoded ``*.ui.yaml`` document."""

    screen: UiScreen
    path: str = ""
    group: str = ""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# State layer (L4)
# =============================================================================


class DataRef(BaseModel):
    """A query or mutation declaration, optionally bound to an operation id."""

    operation_id: str | None = Field(None, alias="operationId")
    select_root: str | None = Field(None, alias="selectRoot")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    @field_validator("operation_id", "select_root", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return _blank_to_none(value)


class StateData(BaseModel):
    """Data declarations of a state document."""

    queries: dict[str, DataRef] = Field(default_factory=dict)
    mutations: dict[str, DataRef] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("queries", "mutations", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class StateEvent(BaseModel):
    """Event descriptor keyed by transition id in a state document."""

    type: str = Field(min_length=1)
    query: str | None = None
    mutation: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class StateScreen(BaseModel):
    """Screen declaration in a state document."""

    id: str = Field(min_length=1)
    context: str | None = None
    data: StateData = Field(default_factory=StateData)
    events: dict[str, StateEvent] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("context", mode="before")
    @classmethod
    def _strip_context(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("data", "events", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any) -> Any:
        return {} if value is None else value


class StateDoc(BaseModel):
    """A decoded ``*.state.yaml`` document."""

    screen: StateScreen
    path: str = ""
    group: str = ""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# External contract
# =============================================================================


class ContractDoc(BaseModel):
    """
    Narrow view of an OpenAPI / Swagger document.

    Only ``paths`` is typed; everything else is kept as-is so that ``$ref``
    pointers into ``components`` or ``definitions`` can be followed.
    """

    openapi: str | None = None
    swagger: str | None = None
    paths: dict[str, Any] = Field(default_factory=dict)
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("paths", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("openapi", "swagger", mode="before")
    @classmethod
    def _version_to_str(cls, value: Any) -> Any:
        # YAML reads ``swagger: 2.0`` as a float
        if isinstance(value, (int, float)):
            return str(value)
        return value
