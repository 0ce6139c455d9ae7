"""
Reachability and choice-screen analysis over a built navigation graph.

Policy (fixed, not configurable):
- no entry screen => error; unreachable check is skipped
- one or more entry screens => info
- screen not reached from any entry => error (grouped)
- non-exit screen with no outgoing transition => info (grouped)
"""

from __future__ import annotations

import logging
from collections import deque

from . import diagnostics
from .config import MobileSpecConfig
from .ir import Diagnostic, NavigationGraph, Screen, ScreenKey, ScreenKind, TriggerKind

logger = logging.getLogger(__name__)


def reachable_from(graph: NavigationGraph, start: list[ScreenKey]) -> set[ScreenKey]:
    """Breadth-first traversal over outgoing edges."""
    adjacency: dict[ScreenKey, list[ScreenKey]] = {}
    for transition in graph.transitions:
        adjacency.setdefault(transition.source, []).append(transition.target)

    visited: set[ScreenKey] = set(start)
    queue = deque(start)
    while queue:
        current = queue.popleft()
        for target in adjacency.get(current, []):
            if target not in visited:
                visited.add(target)
                queue.append(target)
    return visited


def _exempt(screen: Screen, allow_no_incoming: list[str]) -> bool:
    return screen.id in allow_no_incoming or screen.key.display in allow_no_incoming


def check_reachability(
    graph: NavigationGraph, config: MobileSpecConfig | None = None
) -> list[Diagnostic]:
    config = config or MobileSpecConfig()
    found: list[Diagnostic] = []

    entries = graph.entries
    if not entries:
        found.append(diagnostics.no_entry())
    else:
        found.append(diagnostics.entry_points(entries))
        reached = reachable_from(graph, [s.key for s in entries])
        unreachable = [
            screen
            for screen in graph.screens.values()
            if screen.key not in reached
            and not _exempt(screen, config.validation.allow_no_incoming)
        ]
        if unreachable:
            found.append(diagnostics.unreachable_screens(unreachable))

    dead = [
        screen
        for screen in graph.screens.values()
        if not screen.exit and not graph.transition_ids(screen.key)
    ]
    if dead:
        found.append(diagnostics.dead_ends(dead))

    logger.debug("Reachability: %d entries, %d findings", len(entries), len(found))
    return found


def check_choices(graph: NavigationGraph) -> list[Diagnostic]:
    """Every branch of a choice screen is automatic and guarded (or the single else)."""
    found: list[Diagnostic] = []

    for screen in graph.screens.values():
        if screen.kind != ScreenKind.CHOICE:
            continue

        outgoing = graph.outgoing(screen.key)
        else_ids = [t.id for t in outgoing if t.else_]
        for transition in outgoing:
            if not transition.guard and not transition.else_:
                found.append(diagnostics.choice_unguarded(screen.key, transition.id))
            if transition.trigger == TriggerKind.TAP:
                found.append(diagnostics.choice_tap_trigger(screen.key, transition.id))
        if len(else_ids) > 1:
            found.append(diagnostics.choice_multiple_else(screen.key, else_ids))

    return found
