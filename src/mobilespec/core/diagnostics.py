"""
Diagnostic constructors.

Policy (fixed):
- implementation impossible => error
- visible but acceptable state (unused, pending wiring, untranslated) => info

Every checker builds its findings through these helpers so codes, levels and
metadata keys stay consistent.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .ir import Diagnostic, DiagnosticCode, DiagnosticLevel, Screen, ScreenKey

_SCHEMA_NOT_FOUND = {
    "L2": DiagnosticCode.L2_SCHEMA_NOT_FOUND,
    "L3": DiagnosticCode.L3_SCHEMA_NOT_FOUND,
    "L4": DiagnosticCode.L4_SCHEMA_NOT_FOUND,
}

_INVALID = {
    "L2": DiagnosticCode.L2_INVALID,
    "L3": DiagnosticCode.L3_INVALID,
    "L4": DiagnosticCode.L4_INVALID,
}


def _error(code: DiagnosticCode, message: str, **meta: Any) -> Diagnostic:
    return Diagnostic(code=code, level=DiagnosticLevel.ERROR, message=message, meta=meta)


def _info(code: DiagnosticCode, message: str, **meta: Any) -> Diagnostic:
    return Diagnostic(code=code, level=DiagnosticLevel.INFO, message=message, meta=meta)


def format_grouped(title: str, groups: Mapping[str, Iterable[str]]) -> str:
    """
    Render a title followed by sorted groups of sorted items.

    Example:
        Unreachable screens:
          Home
            - settings
          (root)
            - debug
    """
    lines = [f"{title}:"]
    for group in sorted(groups):
        lines.append(f"  {group or '(root)'}")
        for item in sorted(groups[group]):
            lines.append(f"    - {item}")
    return "\n".join(lines)


def format_list(title: str, items: Iterable[str]) -> str:
    return "\n".join([f"{title}:", *(f"  - {item}" for item in items)])


def path_root(label: str) -> str:
    """``"GET /users/{id}"`` -> ``"/users"``."""
    parts = label.split(" ", 1)
    if len(parts) < 2:
        return "(unknown)"
    segments = [s for s in parts[1].split("/") if s]
    return f"/{segments[0]}" if segments else "/"


def _screens_by_group(screens: Iterable[Screen]) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {}
    for screen in screens:
        groups.setdefault(screen.group, []).append(screen.key.display)
    return groups


def _sorted_keys(screens: Iterable[Screen]) -> list[str]:
    return [s.key.display for s in sorted(screens, key=lambda s: s.key.sort_key)]


# =============================================================================
# Structural
# =============================================================================


def config_invalid(config_path: str, details: str) -> Diagnostic:
    return _error(
        DiagnosticCode.CONFIG_INVALID,
        f"Config is invalid ({config_path}): {details}",
        path=config_path,
        details=details,
    )


def schema_not_found(label: str, schema_path: str) -> Diagnostic:
    return _error(
        _SCHEMA_NOT_FOUND[label],
        f"Schema file not found: {schema_path}",
        label=label,
        schemaPath=schema_path,
    )


def schema_violation(label: str, file_path: str, pointer: str, details: str) -> Diagnostic:
    return _error(
        _INVALID[label],
        f"{label} schema error ({file_path}): {pointer} {details}",
        label=label,
        filePath=file_path,
        instancePath=pointer,
        details=details,
    )


def document_invalid(label: str, file_path: str, details: str) -> Diagnostic:
    """Document could not be parsed or decoded."""
    return _error(
        _INVALID[label],
        f"{label} document invalid ({file_path}): {details}",
        label=label,
        filePath=file_path,
        details=details,
    )


def no_navigation_files(directory: str) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_NO_FILES,
        f"No navigation documents found (at least one .flow.yaml is required): {directory}",
        directory=directory,
    )


# =============================================================================
# Navigation graph
# =============================================================================


def unknown_group(group: str, known: list[str], file_path: str) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_UNKNOWN_GROUP,
        f"Unknown structural group '{group}' ({file_path}); known groups: {', '.join(known)}",
        group=group,
        known=list(known),
        filePath=file_path,
    )


def duplicate_screen(key: ScreenKey, file_path: str, first_path: str) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_DUPLICATE_SCREEN_ID,
        f"Duplicate screen key: {key.display} ({file_path}, first declared in {first_path})",
        id=key.id,
        context=key.context,
        filePath=file_path,
        firstPath=first_path,
    )


def duplicate_transition(source: ScreenKey, transition_id: str) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_DUPLICATE_TRANSITION_ID,
        f"Duplicate transition id on {source.display}: {transition_id}",
        screenId=source.id,
        context=source.context,
        transitionId=transition_id,
    )


def transition_target_not_found(
    source: ScreenKey, target_id: str, transition_id: str
) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_INVALID_TRANSITION_TO,
        f"Transition target not found: {source.display} -> {target_id} "
        f"(transition: {transition_id})",
        fromKey=source.display,
        targetId=target_id,
        transitionId=transition_id,
    )


def target_context_not_found(
    source: ScreenKey, target_id: str, target_context: str, transition_id: str
) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_INVALID_TRANSITION_TO,
        f"targetContext not found: {target_id}[{target_context}] "
        f"(from {source.display}, transition {transition_id})",
        fromKey=source.display,
        targetId=target_id,
        targetContext=target_context,
        transitionId=transition_id,
    )


def ambiguous_target(
    source: ScreenKey, target_id: str, options: list[str], transition_id: str
) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_AMBIGUOUS_TRANSITION_TO,
        f"Ambiguous target: {target_id} has multiple contexts ({', '.join(options)}). "
        f"Set transition.targetContext (from {source.display}, transition {transition_id}).",
        fromKey=source.display,
        targetId=target_id,
        options=list(options),
        transitionId=transition_id,
    )


# =============================================================================
# Reachability, choices and guards
# =============================================================================


def no_entry() -> Diagnostic:
    return _error(
        DiagnosticCode.L2_NO_ENTRY,
        "No entry screen defined (set entry: true on at least one screen); "
        "reachability cannot be evaluated",
    )


def entry_points(entries: list[Screen]) -> Diagnostic:
    keys = _sorted_keys(entries)
    if len(keys) == 1:
        message = f"Entry screen: {keys[0]}"
    else:
        message = f"Multiple entry screens ({len(keys)}): {', '.join(keys)}"
    return _info(DiagnosticCode.L2_ENTRY_POINTS, message, screens=keys, count=len(keys))


def unreachable_screens(screens: list[Screen]) -> Diagnostic:
    keys = _sorted_keys(screens)
    return _error(
        DiagnosticCode.L2_UNREACHABLE_SCREEN,
        format_grouped(
            f"Unreachable from any entry screen ({len(keys)})", _screens_by_group(screens)
        ),
        screens=keys,
        count=len(keys),
    )


def dead_ends(screens: list[Screen]) -> Diagnostic:
    keys = _sorted_keys(screens)
    return _info(
        DiagnosticCode.L2_DEAD_END,
        format_grouped(
            f"Screens without outgoing transitions ({len(keys)}, not marked exit)",
            _screens_by_group(screens),
        ),
        screens=keys,
        count=len(keys),
    )


def choice_unguarded(source: ScreenKey, transition_id: str) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_CHOICE_UNGUARDED,
        f"Choice {source.display}: transition {transition_id} needs a guard or else: true",
        screenId=source.id,
        context=source.context,
        transitionId=transition_id,
    )


def choice_multiple_else(source: ScreenKey, transition_ids: list[str]) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_CHOICE_MULTIPLE_ELSE,
        f"Choice {source.display} has more than one else branch: {', '.join(transition_ids)}",
        screenId=source.id,
        context=source.context,
        transitionIds=list(transition_ids),
    )


def choice_tap_trigger(source: ScreenKey, transition_id: str) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_CHOICE_TAP_TRIGGER,
        f"Choice {source.display}: transition {transition_id} uses trigger 'tap'; "
        "choice branches must be automatic",
        screenId=source.id,
        context=source.context,
        transitionId=transition_id,
    )


def unknown_guard(guard: str, source: ScreenKey, transition_id: str) -> Diagnostic:
    return _error(
        DiagnosticCode.L2_UNKNOWN_GUARD,
        f"Guard '{guard}' is not declared in L2.guards.yaml "
        f"(screen: {source.display}, transition: {transition_id})",
        guard=guard,
        screenId=source.id,
        context=source.context,
        transitionId=transition_id,
    )


def unused_guards(guard_ids: list[str]) -> Diagnostic:
    ids = sorted(guard_ids)
    return _info(
        DiagnosticCode.L2_GUARD_UNUSED,
        f"Declared guards not referenced by any transition: {', '.join(ids)}",
        guards=ids,
        count=len(ids),
    )


# =============================================================================
# Cross-layer
# =============================================================================


def l3_unknown_screen(key: ScreenKey, file_path: str) -> Diagnostic:
    return _error(
        DiagnosticCode.L3_UNKNOWN_SCREEN,
        f"L3-L2 mismatch: UI screen {key.display} does not exist in L2 ({file_path})",
        screenId=key.id,
        context=key.context,
        filePath=file_path,
    )


def l3_action_not_in_l2(action: str, key: ScreenKey, component_id: str | None) -> Diagnostic:
    return _error(
        DiagnosticCode.L3_ACTION_NOT_IN_L2,
        f'L3-L2 mismatch: action="{action}" has no L2 transition id '
        f"(screen: {key.display}, component: {component_id or '(anonymous)'})",
        action=action,
        screenId=key.id,
        context=key.context,
        componentId=component_id,
    )


def l2_transitions_unused(key: ScreenKey, transition_ids: list[str]) -> Diagnostic:
    ids = sorted(transition_ids)
    return _info(
        DiagnosticCode.L2_TRANSITION_UNUSED,
        f"Unused: tap transitions on {key.display} not referenced from L3: {', '.join(ids)}",
        screenId=key.id,
        context=key.context,
        transitionIds=ids,
    )


def l2_transitions_not_in_l4(key: ScreenKey, transition_ids: list[str]) -> Diagnostic:
    ids = sorted(transition_ids)
    return _info(
        DiagnosticCode.L2_TRANSITION_NOT_IN_L4,
        f"Not wired: transitions on {key.display} without L4 event: {', '.join(ids)}",
        screenId=key.id,
        context=key.context,
        transitionIds=ids,
    )


def l4_events_not_in_l2(key: ScreenKey, event_keys: list[str]) -> Diagnostic:
    keys = sorted(event_keys)
    return _info(
        DiagnosticCode.L4_EVENT_NOT_IN_L2,
        f"L4 events on {key.display} without L2 transition: {', '.join(keys)}",
        screenId=key.id,
        context=key.context,
        eventKeys=keys,
    )


def l4_unknown_query(query: str | None, event_key: str, key: ScreenKey) -> Diagnostic:
    return _error(
        DiagnosticCode.L4_UNKNOWN_QUERY,
        f'L4 internal mismatch: callQuery.query="{query or ""}" is not declared in '
        f"data.queries (event: {event_key}, screen: {key.display})",
        queryKey=query,
        eventKey=event_key,
        screenId=key.id,
        context=key.context,
    )


def l4_unknown_mutation(mutation: str | None, event_key: str, key: ScreenKey) -> Diagnostic:
    return _error(
        DiagnosticCode.L4_UNKNOWN_MUTATION,
        f'L4 internal mismatch: callMutation.mutation="{mutation or ""}" is not declared in '
        f"data.mutations (event: {event_key}, screen: {key.display})",
        mutationKey=mutation,
        eventKey=event_key,
        screenId=key.id,
        context=key.context,
    )


def l4_unknown_screen(key: ScreenKey, file_path: str) -> Diagnostic:
    return _error(
        DiagnosticCode.L4_UNKNOWN_SCREEN,
        f"L4-L2 mismatch: state screen {key.display} does not exist in L2 ({file_path})",
        screenId=key.id,
        context=key.context,
        filePath=file_path,
    )


# =============================================================================
# External contract
# =============================================================================


def openapi_not_found(path: str, raw: str | None = None) -> Diagnostic:
    if not path:
        return _error(
            DiagnosticCode.OPENAPI_NOT_FOUND,
            "openapi.path is empty",
            path=path,
            raw=raw,
        )
    return _error(
        DiagnosticCode.OPENAPI_NOT_FOUND,
        f"OpenAPI document not found: {path}",
        path=path,
        raw=raw,
    )


def openapi_invalid(path: str, details: str) -> Diagnostic:
    return _error(
        DiagnosticCode.OPENAPI_INVALID,
        f"OpenAPI document invalid ({path}): {details}",
        path=path,
        details=details,
    )


def missing_operation_id(label: str) -> Diagnostic:
    return _error(
        DiagnosticCode.OPENAPI_MISSING_OPERATION_ID,
        f"OpenAPI operation without operationId: {label}",
        operation=label,
    )


def duplicate_operation_id(operation_id: str, labels: list[str]) -> Diagnostic:
    return _error(
        DiagnosticCode.OPENAPI_DUPLICATE_OPERATION_ID,
        f"OpenAPI operationId must be unique: {operation_id} ({', '.join(labels)})",
        operationId=operation_id,
        occurrences=list(labels),
    )


def unknown_operation_id(
    operation_id: str, kind: str, name: str, screen: str, file_path: str
) -> Diagnostic:
    return _error(
        DiagnosticCode.L4_UNKNOWN_OPERATION_ID,
        f"L4 references unknown operationId: {operation_id} ({kind}:{name}) "
        f"screen={screen} file={file_path}",
        operationId=operation_id,
        kind=kind,
        name=name,
        screenId=screen,
        filePath=file_path,
    )


def select_root_not_found(
    select_root: str, operation_id: str, root_keys: Iterable[str], kind: str, name: str, screen: str
) -> Diagnostic:
    keys = sorted(root_keys)
    return _error(
        DiagnosticCode.L4_SELECT_ROOT_NOT_FOUND,
        f'selectRoot="{select_root}" is not a response root key of {operation_id} '
        f"({kind}:{name}, screen={screen}); root keys: {', '.join(keys) or '(none)'}",
        selectRoot=select_root,
        operationId=operation_id,
        rootKeys=keys,
        kind=kind,
        name=name,
        screenId=screen,
    )


def response_unresolved(
    select_root: str, operation_id: str, reason: str, kind: str, name: str, screen: str
) -> Diagnostic:
    return _info(
        DiagnosticCode.OPENAPI_RESPONSE_SCHEMA_UNRESOLVED,
        f'selectRoot="{select_root}" not checked: response schema of {operation_id} '
        f"is unresolved ({reason}; {kind}:{name}, screen={screen})",
        selectRoot=select_root,
        operationId=operation_id,
        reason=reason,
        kind=kind,
        name=name,
        screenId=screen,
    )


def unused_operation_ids(items: Mapping[str, list[str]]) -> Diagnostic:
    """Group unused operation ids by the first segment of their paths."""
    groups: dict[str, list[str]] = {}
    for op_id, labels in items.items():
        roots = {path_root(label) for label in labels}
        group = roots.pop() if len(roots) == 1 else "(multiple roots)"
        entry = f"{op_id} ({', '.join(labels)})" if labels else op_id
        groups.setdefault(group, []).append(entry)
    ids = sorted(items)
    return _info(
        DiagnosticCode.L4_UNUSED_OPERATION_ID,
        format_grouped(f"OpenAPI operationIds not referenced from L4 ({len(ids)})", groups),
        operationIds=ids,
        count=len(ids),
    )


# =============================================================================
# Translations
# =============================================================================


def i18n_source_missing(source: str, locales: list[str]) -> Diagnostic:
    return _error(
        DiagnosticCode.I18N_MISSING_KEY,
        f'i18n: source locale "{source}" is not among locales ({", ".join(locales)})',
        locale=source,
        locales=list(locales),
        keys=[],
    )


def i18n_missing_keys(locale: str, keys: list[str]) -> Diagnostic:
    ordered = sorted(keys)
    return _error(
        DiagnosticCode.I18N_MISSING_KEY,
        format_list(f'i18n: keys missing in locale "{locale}" ({len(ordered)})', ordered),
        locale=locale,
        keys=ordered,
        count=len(ordered),
    )


def i18n_untranslated(locale: str, keys: list[str]) -> Diagnostic:
    ordered = sorted(keys)
    return _info(
        DiagnosticCode.I18N_UNTRANSLATED,
        format_list(f'i18n: untranslated in locale "{locale}" ({len(ordered)})', ordered),
        locale=locale,
        keys=ordered,
        count=len(ordered),
    )


def i18n_unreadable(locale: str, file_path: str, details: str) -> Diagnostic:
    return _error(
        DiagnosticCode.I18N_MISSING_KEY,
        f'i18n: locale "{locale}" cannot be read ({file_path}): {details}',
        locale=locale,
        filePath=file_path,
        details=details,
        keys=[],
    )
