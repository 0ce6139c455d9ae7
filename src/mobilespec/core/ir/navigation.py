"""
Navigation graph types for mobilespec IR.

Screens are identified by a composite ``(id, context)`` key so that role-based
variants of the same logical screen can coexist. All types are immutable and
scoped to a single validation run.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .documents import ScreenKind, TriggerKind


class ScreenKey(BaseModel):
    """Composite screen identity."""

    id: str
    context: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def display(self) -> str:
        """Human form, e.g. ``home[admin]``."""
        return f"{self.id}[{self.context}]" if self.context else self.id

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.id, self.context or "")

    def __str__(self) -> str:
        return self.display


class Screen(BaseModel):
    """
    A node in the navigation graph.

    Attributes:
        key: Composite identity
        name: Display name
        kind: screen or choice
        entry: Starting point for reachability
        exit: Terminal screen (no outgoing transitions expected)
        group: Structural group from the file location (presentation only)
        path: Source document
    """

    key: ScreenKey
    name: str | None = None
    kind: ScreenKind = ScreenKind.SCREEN
    entry: bool = False
    exit: bool = False
    group: str = ""
    path: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def id(self) -> str:
        return self.key.id

    @property
    def context(self) -> str | None:
        return self.key.context


class Transition(BaseModel):
    """A resolved directed edge between two screens."""

    id: str
    source: ScreenKey
    target: ScreenKey
    trigger: TriggerKind = TriggerKind.TAP
    guard: str | None = None
    else_: bool = False

    model_config = ConfigDict(frozen=True)


class GuardRef(BaseModel):
    """A guard named on a declared transition."""

    guard: str
    source: ScreenKey
    transition_id: str

    model_config = ConfigDict(frozen=True)


class NavigationGraph(BaseModel):
    """
    Registry of screens and resolved transitions.

    Screens are kept in insertion order (sorted document order) so every
    derived listing is deterministic.
    """

    screens: dict[ScreenKey, Screen] = Field(default_factory=dict)
    transitions: list[Transition] = Field(default_factory=list)
    # Transition ids declared per source screen, including edges whose target
    # failed to resolve. UI/state checks compare against declarations.
    declared_ids: dict[ScreenKey, list[str]] = Field(default_factory=dict)
    # Guard references of every declared transition, resolved or not
    guard_refs: list[GuardRef] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def has_screen(self, key: ScreenKey) -> bool:
        return key in self.screens

    def outgoing(self, key: ScreenKey) -> list[Transition]:
        return [t for t in self.transitions if t.source == key]

    def transition_ids(self, key: ScreenKey) -> list[str]:
        """Transition ids declared on a screen, in declaration order."""
        return list(self.declared_ids.get(key, []))

    @property
    def entries(self) -> list[Screen]:
        return [s for s in self.screens.values() if s.entry]


class GuardDef(BaseModel):
    """A guard declaration from ``L2.guards.yaml``."""

    id: str
    name: str | None = None
    description: str | None = None

    model_config = ConfigDict(frozen=True)


class GuardRegistry(BaseModel):
    """Flat set of declared guard ids."""

    guards: list[GuardDef] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def ids(self) -> set[str]:
        return {g.id for g in self.guards}

    def __contains__(self, guard_id: object) -> bool:
        return guard_id in self.ids
