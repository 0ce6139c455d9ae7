"""
Mermaid flow diagram generator.

Renders the navigation graph to ``flows.md``: one subgraph per structural
group, choice screens as decision nodes, and one labelled edge per resolved
transition (``id/trigger [guard] [else]``).
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.config import MobileSpecConfig
from ..core.ir import NavigationGraph, Screen, ScreenKey, ScreenKind, Transition

logger = logging.getLogger(__name__)

OUTPUT_FILE = "flows.md"
HEADER = "<!-- AUTO-GENERATED. DO NOT EDIT. -->"


def node_id(key: ScreenKey) -> str:
    """Mermaid-safe node id; context variants get a ``__<context>`` suffix."""
    return f"{key.id}__{key.context}" if key.context else key.id


def _label(text: str) -> str:
    return text.replace('"', "#quot;")


def _node(screen: Screen) -> str:
    text = f"{screen.key.display}\\n{screen.name}" if screen.name else screen.key.display
    label = _label(text)
    if screen.kind == ScreenKind.CHOICE:
        return f'{node_id(screen.key)}{{"{label}"}}'
    return f'{node_id(screen.key)}["{label}"]'


def _edge(transition: Transition) -> str:
    parts = [f"{transition.id}/{transition.trigger.value}"]
    if transition.guard:
        parts.append(f"[{transition.guard}]")
    if transition.else_:
        parts.append("[else]")
    return f"{node_id(transition.source)} -->|{' '.join(parts)}| {node_id(transition.target)}"


def _ordered_groups(groups: list[str], order: list[str]) -> list[str]:
    named = [g for g in groups if g]
    return [g for g in order if g in named] + sorted(g for g in named if g not in order)


def _ordered_screens(screens: list[Screen], order: list[str]) -> list[Screen]:
    def rank(screen: Screen) -> int:
        return order.index(screen.id) if screen.id in order else len(order)

    return sorted(screens, key=rank)


def render_mermaid(graph: NavigationGraph, config: MobileSpecConfig | None = None) -> str:
    """Render the navigation graph as a Markdown document with a mermaid block."""
    config = config or MobileSpecConfig()

    by_group: dict[str, list[Screen]] = {}
    for screen in graph.screens.values():
        by_group.setdefault(screen.group, []).append(screen)

    lines = [HEADER, "```mermaid", "flowchart TD", ""]

    for screen in _ordered_screens(by_group.get("", []), config.mermaid.screen_order):
        lines.append(f"  {_node(screen)}")
    if "" in by_group:
        lines.append("")

    for group in _ordered_groups(list(by_group), config.mermaid.group_order):
        lines.append(f"subgraph {group}")
        for screen in _ordered_screens(by_group[group], config.mermaid.screen_order):
            lines.append(f"  {_node(screen)}")
        lines.append("end")
        lines.append("")

    lines.extend(_edge(t) for t in graph.transitions)
    lines.append("```")
    return "\n".join(lines) + "\n"


def write_mermaid(
    specs_dir: Path, graph: NavigationGraph, config: MobileSpecConfig | None = None
) -> Path:
    """Write ``flows.md`` into the spec tree and return its path."""
    output_path = specs_dir / OUTPUT_FILE
    output_path.write_text(render_mermaid(graph, config), encoding="utf-8")
    logger.info("Wrote %s (%d screens)", output_path, len(graph.screens))
    return output_path
