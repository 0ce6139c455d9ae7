"""Shared pytest fixtures for mobilespec tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from builders import SpecTree, flow, transition


@pytest.fixture
def spec_tree(tmp_path: Path) -> SpecTree:
    """Return an empty spec tree rooted at a temporary directory."""
    return SpecTree(tmp_path)


@pytest.fixture
def ok_spec(spec_tree: SpecTree) -> SpecTree:
    """
    Minimal valid tree.

    home (entry) --open_tasks/tap--> tasks (exit); home has a UI button
    wired to open_tasks and a state event with the same key.
    """
    spec_tree.flow(
        flow("home", [transition("open_tasks", "tasks")], name="Home", entry=True),
        group="home",
    )
    spec_tree.flow(flow("tasks", [], name="Tasks", exit=True), group="task")
    spec_tree.ui(
        {
            "screen": {
                "id": "home",
                "layout": {
                    "type": "Column",
                    "children": [
                        {
                            "id": "action_open_tasks",
                            "type": "Button",
                            "name": "Open tasks",
                            "action": "open_tasks",
                        }
                    ],
                },
            }
        },
        group="home",
    )
    spec_tree.state(
        {"screen": {"id": "home", "events": {"open_tasks": {"type": "navigate"}}}},
        group="home",
    )
    return spec_tree
