"""
Cross-layer reference checks.

Runs the UI and state layers against the navigation graph. The checks are
independent: a finding in one never suppresses another, except that a
document whose screen key is unknown is not compared further against L2.

1. UI -> navigation: screen key exists; every action is a transition id of
   the same screen.
2. Navigation <-> state: transition ids vs event keys (info, per screen).
3. State internal: callQuery / callMutation reference declared names.
4. State -> navigation: screen key exists.
"""

from __future__ import annotations

import logging

from . import diagnostics
from .ir import (
    Diagnostic,
    EventType,
    NavigationGraph,
    ScreenKey,
    StateDoc,
    TriggerKind,
    UiAction,
    UiDoc,
)

logger = logging.getLogger(__name__)


def collect_ui_actions(doc: UiDoc) -> list[UiAction]:
    """All actions of a UI document in document order."""
    return [
        UiAction(
            screen_id=doc.screen.id,
            context=doc.screen.context,
            component_id=node.id,
            action=node.action,
        )
        for node in doc.screen.layout.walk()
        if node.action
    ]


def _key(screen_id: str, context: str | None) -> ScreenKey:
    return ScreenKey(id=screen_id, context=context or None)


# =============================================================================
# UI layer
# =============================================================================


def check_ui(graph: NavigationGraph, docs: list[UiDoc]) -> list[Diagnostic]:
    found: list[Diagnostic] = []
    used: dict[ScreenKey, set[str]] = {}

    for doc in docs:
        key = _key(doc.screen.id, doc.screen.context)
        if not graph.has_screen(key):
            found.append(diagnostics.l3_unknown_screen(key, doc.path))
            continue

        declared = set(graph.transition_ids(key))
        actions = used.setdefault(key, set())
        for ui_action in collect_ui_actions(doc):
            actions.add(ui_action.action)
            if ui_action.action not in declared:
                found.append(
                    diagnostics.l3_action_not_in_l2(ui_action.action, key, ui_action.component_id)
                )

    # Tap transitions nobody can trigger, for screens that have a UI document
    for key, actions in used.items():
        unused = [
            t.id
            for t in graph.outgoing(key)
            if t.trigger == TriggerKind.TAP and t.id not in actions
        ]
        if unused:
            found.append(diagnostics.l2_transitions_unused(key, unused))

    return found


# =============================================================================
# State layer
# =============================================================================


def check_state_screens(graph: NavigationGraph, docs: list[StateDoc]) -> list[Diagnostic]:
    found: list[Diagnostic] = []
    for doc in docs:
        key = _key(doc.screen.id, doc.screen.context)
        if not graph.has_screen(key):
            found.append(diagnostics.l4_unknown_screen(key, doc.path))
    return found


def check_state_integrity(docs: list[StateDoc]) -> list[Diagnostic]:
    """Events that call data must reference the document's own declarations."""
    found: list[Diagnostic] = []

    for doc in docs:
        screen = doc.screen
        key = _key(screen.id, screen.context)
        for event_key, event in screen.events.items():
            if event.type == EventType.CALL_QUERY.value:
                if not event.query or event.query not in screen.data.queries:
                    found.append(diagnostics.l4_unknown_query(event.query, event_key, key))
            elif event.type == EventType.CALL_MUTATION.value:
                if not event.mutation or event.mutation not in screen.data.mutations:
                    found.append(diagnostics.l4_unknown_mutation(event.mutation, event_key, key))

    return found


def check_state_wiring(graph: NavigationGraph, docs: list[StateDoc]) -> list[Diagnostic]:
    """Compare L2 transition ids with L4 event keys per screen (info only)."""
    found: list[Diagnostic] = []
    events_by_key: dict[ScreenKey, set[str]] = {}

    for doc in docs:
        key = _key(doc.screen.id, doc.screen.context)
        if graph.has_screen(key):
            events_by_key.setdefault(key, set()).update(doc.screen.events)

    for key in sorted(events_by_key, key=lambda k: k.sort_key):
        event_keys = events_by_key[key]
        transition_ids = set(graph.transition_ids(key))

        not_in_state = transition_ids - event_keys
        if not_in_state:
            found.append(diagnostics.l2_transitions_not_in_l4(key, sorted(not_in_state)))

        not_in_navigation = event_keys - transition_ids
        if not_in_navigation:
            found.append(diagnostics.l4_events_not_in_l2(key, sorted(not_in_navigation)))

    return found


def check_cross_layer(
    graph: NavigationGraph, ui_docs: list[UiDoc], state_docs: list[StateDoc]
) -> list[Diagnostic]:
    """Run every cross-layer check in fixed order."""
    found: list[Diagnostic] = []
    found.extend(check_ui(graph, ui_docs))
    found.extend(check_state_screens(graph, state_docs))
    found.extend(check_state_integrity(state_docs))
    found.extend(check_state_wiring(graph, state_docs))
    logger.debug(
        "Cross-layer: %d UI docs, %d state docs, %d findings",
        len(ui_docs),
        len(state_docs),
        len(found),
    )
    return found
