"""Tests for reachability, choice screens and guards."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from builders import flow, transition
from mobilespec.core.config import MobileSpecConfig, ValidationConfig
from mobilespec.core.errors import DocumentLoadError
from mobilespec.core.guards import check_guards, load_guards, parse_guards
from mobilespec.core.ir import (
    DiagnosticCode,
    GuardDef,
    GuardRegistry,
    NavigationDoc,
    NavigationGraph,
    ScreenKey,
)
from mobilespec.core.navigation import build_navigation_graph
from mobilespec.core.reachability import check_choices, check_reachability, reachable_from


def graph_of(*raws: dict[str, Any], groups: list[str] | None = None) -> NavigationGraph:
    docs = []
    for i, raw in enumerate(raws):
        group = groups[i] if groups else ""
        docs.append(NavigationDoc.model_validate(raw).model_copy(update={"group": group}))
    graph, errors = build_navigation_graph(docs)
    assert errors == []
    return graph


class TestReachability:
    def test_cycle_terminates(self) -> None:
        graph = graph_of(
            flow("a", [transition("next", "b")], entry=True),
            flow("b", [transition("back", "a")]),
        )

        assert reachable_from(graph, [ScreenKey(id="a")]) == {ScreenKey(id="a"), ScreenKey(id="b")}
        codes = [d.code for d in check_reachability(graph)]
        assert codes == [DiagnosticCode.L2_ENTRY_POINTS]

    def test_unreachable_grouped_and_sorted(self) -> None:
        graph = graph_of(
            flow("home", [], entry=True, exit=True),
            flow("zeta", [], exit=True),
            flow("alpha", [], exit=True),
            groups=["Home", "Misc", "Misc"],
        )

        found = check_reachability(graph)

        unreachable = [d for d in found if d.code == DiagnosticCode.L2_UNREACHABLE_SCREEN]
        assert len(unreachable) == 1
        assert unreachable[0].is_error
        assert unreachable[0].meta["screens"] == ["alpha", "zeta"]
        assert "Misc" in unreachable[0].message

    def test_allow_no_incoming(self) -> None:
        graph = graph_of(flow("home", [], entry=True, exit=True), flow("debug", [], exit=True))
        config = MobileSpecConfig(validation=ValidationConfig(allow_no_incoming=["debug"]))

        found = check_reachability(graph, config)

        assert [d.code for d in found] == [DiagnosticCode.L2_ENTRY_POINTS]

    def test_no_entry_skips_unreachable(self) -> None:
        graph = graph_of(flow("a", [], exit=True), flow("b", [], exit=True))

        found = check_reachability(graph)

        assert [d.code for d in found] == [DiagnosticCode.L2_NO_ENTRY]

    def test_multiple_entries(self) -> None:
        graph = graph_of(flow("a", [], entry=True, exit=True), flow("b", [], entry=True, exit=True))

        (info,) = check_reachability(graph)

        assert info.code == DiagnosticCode.L2_ENTRY_POINTS
        assert info.meta["count"] == 2
        assert not info.is_error

    def test_dead_end_is_info(self) -> None:
        graph = graph_of(
            flow("home", [transition("a", "stuck"), transition("b", "done")], entry=True),
            flow("stuck", []),
            flow("done", [], exit=True),
        )

        found = check_reachability(graph)

        dead = [d for d in found if d.code == DiagnosticCode.L2_DEAD_END]
        assert len(dead) == 1
        assert not dead[0].is_error
        assert dead[0].meta["screens"] == ["stuck"]


class TestChoices:
    def test_guarded_choice_is_valid(self) -> None:
        graph = graph_of(
            flow(
                "gate",
                [
                    transition("member", "a", trigger="auto", guard="is_member"),
                    transition("guest", "b", trigger="auto", **{"else": True}),
                ],
                type="choice",
            ),
            flow("a", []),
            flow("b", []),
        )

        assert check_choices(graph) == []

    def test_unguarded_branch(self) -> None:
        graph = graph_of(
            flow("gate", [transition("x", "a", trigger="auto")], type="choice"),
            flow("a", []),
        )

        assert [d.code for d in check_choices(graph)] == [DiagnosticCode.L2_CHOICE_UNGUARDED]

    def test_multiple_else(self) -> None:
        graph = graph_of(
            flow(
                "gate",
                [
                    transition("x", "a", trigger="auto", **{"else": True}),
                    transition("y", "a", trigger="auto", **{"else": True}),
                ],
                type="choice",
            ),
            flow("a", []),
        )

        found = check_choices(graph)

        assert [d.code for d in found] == [DiagnosticCode.L2_CHOICE_MULTIPLE_ELSE]
        assert found[0].meta["transitionIds"] == ["x", "y"]

    def test_tap_trigger_on_choice(self) -> None:
        graph = graph_of(
            flow("gate", [transition("x", "a", trigger="tap", guard="g")], type="choice"),
            flow("a", []),
        )

        assert [d.code for d in check_choices(graph)] == [DiagnosticCode.L2_CHOICE_TAP_TRIGGER]

    def test_plain_screens_ignored(self) -> None:
        graph = graph_of(flow("home", [transition("x", "a")]), flow("a", []))

        assert check_choices(graph) == []


class TestGuards:
    def test_parse_shapes(self) -> None:
        mapping = parse_guards({"guards": [{"id": "a", "name": "A"}, "b", {"name": "no id"}, 3]})
        bare = parse_guards([" c ", {"id": "d", "description": "D"}])

        assert mapping == [GuardDef(id="a", name="A"), GuardDef(id="b")]
        assert bare == [GuardDef(id="c"), GuardDef(id="d", description="D")]
        assert parse_guards("nonsense") == []

    def test_missing_file(self, tmp_path: Path) -> None:
        registry = load_guards(tmp_path)

        assert registry.ids == set()

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        (tmp_path / "L2.guards.yaml").write_text("guards: [\n")

        with pytest.raises(DocumentLoadError):
            load_guards(tmp_path)

    def test_unknown_and_unused(self) -> None:
        graph = graph_of(
            flow(
                "gate",
                [
                    transition("x", "a", trigger="auto", guard="is_member"),
                    transition("y", "a", trigger="auto", guard="is_ghost"),
                ],
                type="choice",
            ),
            flow("a", []),
        )
        registry = GuardRegistry(
            guards=[GuardDef(id="is_member"), GuardDef(id="is_admin"), GuardDef(id="has_draft")]
        )

        found = check_guards(graph, registry)

        assert [d.code for d in found] == [
            DiagnosticCode.L2_UNKNOWN_GUARD,
            DiagnosticCode.L2_GUARD_UNUSED,
        ]
        assert found[0].meta["guard"] == "is_ghost"
        assert found[1].meta["guards"] == ["has_draft", "is_admin"]
        assert not found[1].is_error

    def test_guard_without_registry_is_error(self) -> None:
        graph = graph_of(
            flow("gate", [transition("x", "a", trigger="auto", guard="g")], type="choice"),
            flow("a", []),
        )

        found = check_guards(graph, GuardRegistry())

        assert [d.code for d in found] == [DiagnosticCode.L2_UNKNOWN_GUARD]

    def test_unresolved_edges_still_reference_guards(self) -> None:
        docs = [
            NavigationDoc.model_validate(
                flow(
                    "gate",
                    [
                        transition("go", "missing", trigger="auto", guard="is_ready"),
                        transition("stay", "nowhere", trigger="auto", guard="is_ghost"),
                    ],
                    type="choice",
                )
            )
        ]
        graph, errors = build_navigation_graph(docs)

        found = check_guards(graph, GuardRegistry(guards=[GuardDef(id="is_ready")]))

        assert [d.code for d in errors] == [DiagnosticCode.L2_INVALID_TRANSITION_TO] * 2
        assert graph.transitions == []
        assert [(d.code, d.meta["guard"]) for d in found] == [
            (DiagnosticCode.L2_UNKNOWN_GUARD, "is_ghost")
        ]

    def test_undecodable_file_raises_load_error(self, tmp_path: Path) -> None:
        (tmp_path / "L2.guards.yaml").write_bytes(b"\xff\xfe guards")

        with pytest.raises(DocumentLoadError):
            load_guards(tmp_path)
