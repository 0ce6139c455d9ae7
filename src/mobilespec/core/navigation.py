"""
Navigation graph builder.

Turns decoded L2 documents into a ``NavigationGraph``:

1. Collect screens, rejecting unknown structural groups and duplicate
   ``(id, context)`` keys.
2. Resolve every transition target against the collected screens.

Target resolution never guesses: a target id with several context variants
must name one through ``targetContext``.
"""

from __future__ import annotations

import logging

from . import diagnostics
from .config import MobileSpecConfig
from .ir import (
    Diagnostic,
    GuardRef,
    NavigationDoc,
    NavigationGraph,
    Screen,
    ScreenKey,
    Transition,
)

logger = logging.getLogger(__name__)


def screen_key(screen_id: str, context: str | None = None) -> ScreenKey:
    return ScreenKey(id=screen_id, context=context or None)


def _collect_screens(
    docs: list[NavigationDoc], known_groups: list[str]
) -> tuple[dict[ScreenKey, Screen], list[NavigationDoc], list[Diagnostic]]:
    screens: dict[ScreenKey, Screen] = {}
    accepted: list[NavigationDoc] = []
    errors: list[Diagnostic] = []

    for doc in docs:
        if known_groups and doc.group and doc.group not in known_groups:
            errors.append(diagnostics.unknown_group(doc.group, known_groups, doc.path))
            continue

        spec = doc.screen
        key = screen_key(spec.id, spec.context)
        if key in screens:
            errors.append(diagnostics.duplicate_screen(key, doc.path, screens[key].path))
            continue

        screens[key] = Screen(
            key=key,
            name=spec.name,
            kind=spec.type,
            entry=spec.entry,
            exit=spec.exit,
            group=doc.group,
            path=doc.path,
        )
        accepted.append(doc)

    return screens, accepted, errors


def resolve_target(
    source: ScreenKey,
    target_id: str,
    target_context: str | None,
    transition_id: str,
    variants_by_id: dict[str, list[Screen]],
) -> tuple[ScreenKey | None, Diagnostic | None]:
    """Resolve a transition target to a screen key.

    Returns:
        Tuple of (resolved key, None) or (None, error diagnostic).
    """
    candidates = variants_by_id.get(target_id, [])
    if not candidates:
        return None, diagnostics.transition_target_not_found(source, target_id, transition_id)

    if target_context:
        for candidate in candidates:
            if candidate.context == target_context:
                return candidate.key, None
        return None, diagnostics.target_context_not_found(
            source, target_id, target_context, transition_id
        )

    if len(candidates) == 1:
        return candidates[0].key, None

    options = sorted(c.key.display for c in candidates)
    return None, diagnostics.ambiguous_target(source, target_id, options, transition_id)


def build_navigation_graph(
    docs: list[NavigationDoc], config: MobileSpecConfig | None = None
) -> tuple[NavigationGraph, list[Diagnostic]]:
    """Build the screen registry and resolved transitions.

    Args:
        docs: Decoded navigation documents in sorted path order.
        config: Project config (known structural groups).

    Returns:
        Tuple of (graph, errors).
    """
    config = config or MobileSpecConfig()
    screens, accepted, errors = _collect_screens(docs, config.validation.groups)

    variants_by_id: dict[str, list[Screen]] = {}
    for screen in screens.values():
        variants_by_id.setdefault(screen.id, []).append(screen)

    transitions: list[Transition] = []
    declared_ids: dict[ScreenKey, list[str]] = {}
    guard_refs: list[GuardRef] = []

    for doc in accepted:
        source = screen_key(doc.screen.id, doc.screen.context)
        declared = declared_ids.setdefault(source, [])

        for spec in doc.screen.transitions:
            if spec.id in declared:
                errors.append(diagnostics.duplicate_transition(source, spec.id))
                continue
            declared.append(spec.id)
            if spec.guard:
                guard_refs.append(GuardRef(guard=spec.guard, source=source, transition_id=spec.id))

            target, error = resolve_target(
                source, spec.target, spec.target_context, spec.id, variants_by_id
            )
            if error is not None:
                errors.append(error)
                continue

            transitions.append(
                Transition(
                    id=spec.id,
                    source=source,
                    target=target,
                    trigger=spec.trigger,
                    guard=spec.guard,
                    else_=spec.else_,
                )
            )

    logger.debug(
        "Navigation graph: %d screens, %d transitions, %d errors",
        len(screens),
        len(transitions),
        len(errors),
    )
    graph = NavigationGraph(
        screens=screens,
        transitions=transitions,
        declared_ids=declared_ids,
        guard_refs=guard_refs,
    )
    return graph, errors
