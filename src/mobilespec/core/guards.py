"""
Guard registry (``L2.guards.yaml``).

Accepted shapes:

    guards:
      - id: is_logged_in
        name: Logged in
      - has_draft

or a bare top-level list of ids / ``{id, name?, description?}`` maps.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from . import diagnostics
from .errors import make_load_error
from .ir import Diagnostic, GuardDef, GuardRegistry, NavigationGraph

logger = logging.getLogger(__name__)

GUARDS_FILE = "L2.guards.yaml"


def _guard_from_item(item: Any) -> GuardDef | None:
    if isinstance(item, str):
        return GuardDef(id=item.strip()) if item.strip() else None
    if isinstance(item, dict):
        guard_id = item.get("id")
        if not isinstance(guard_id, str) or not guard_id.strip():
            return None
        name = item.get("name")
        description = item.get("description")
        return GuardDef(
            id=guard_id.strip(),
            name=name if isinstance(name, str) else None,
            description=description if isinstance(description, str) else None,
        )
    return None


def parse_guards(data: Any) -> list[GuardDef]:
    """Extract guard definitions from decoded YAML, ignoring malformed items."""
    if isinstance(data, dict):
        data = data.get("guards")
    if not isinstance(data, list):
        return []
    return [g for g in (_guard_from_item(item) for item in data) if g is not None]


def load_guards(specs_dir: Path) -> GuardRegistry:
    """Load the guard registry.

    Returns:
        An empty registry when the file does not exist.

    Raises:
        DocumentLoadError: If the file exists but is not valid YAML.
    """
    path = specs_dir / GUARDS_FILE
    if not path.exists():
        return GuardRegistry()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise make_load_error(f"cannot read guards: {e}", path) from e

    guards = parse_guards(data)
    logger.debug("Loaded %d guards from %s", len(guards), path)
    return GuardRegistry(guards=guards)


def check_guards(graph: NavigationGraph, registry: GuardRegistry) -> list[Diagnostic]:
    """Report undeclared guard references (error) and unused declarations (info).

    Every declared transition counts, including ones whose target did not
    resolve.
    """
    found: list[Diagnostic] = []
    used: set[str] = set()

    for ref in graph.guard_refs:
        used.add(ref.guard)
        if ref.guard not in registry:
            found.append(diagnostics.unknown_guard(ref.guard, ref.source, ref.transition_id))

    unused = sorted(registry.ids - used)
    if unused:
        found.append(diagnostics.unused_guards(unused))
    return found
