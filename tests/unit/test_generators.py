"""Tests for the diagram and translation generators."""

from __future__ import annotations

import json
from typing import Any

import pytest

from builders import SpecTree, flow, transition
from mobilespec import validate
from mobilespec.core.config import I18nConfig, MermaidConfig, MobileSpecConfig
from mobilespec.core.errors import ConfigError
from mobilespec.core.ir import NavigationDoc, NavigationGraph
from mobilespec.core.navigation import build_navigation_graph
from mobilespec.generators.i18n import generate_translations, write_translations
from mobilespec.generators.mermaid import HEADER, node_id, render_mermaid, write_mermaid

OK_SPEC_DIAGRAM = "\n".join(
    [
        HEADER,
        "```mermaid",
        "flowchart TD",
        "",
        "subgraph Home",
        '  home["home\\nHome"]',
        "end",
        "",
        "subgraph Task",
        '  tasks["tasks\\nTasks"]',
        "end",
        "",
        "home -->|open_tasks/tap| tasks",
        "```",
        "",
    ]
)


def graph_of(*raws: dict[str, Any]) -> NavigationGraph:
    graph, errors = build_navigation_graph([NavigationDoc.model_validate(r) for r in raws])
    assert errors == []
    return graph


class TestMermaid:
    def test_ok_spec(self, ok_spec: SpecTree) -> None:
        result = validate(ok_spec.root)

        assert render_mermaid(result.graph, result.config) == OK_SPEC_DIAGRAM

    def test_group_order(self, ok_spec: SpecTree) -> None:
        result = validate(ok_spec.root)
        config = MobileSpecConfig(mermaid=MermaidConfig(group_order=["Task"]))

        text = render_mermaid(result.graph, config)

        assert text.index("subgraph Task") < text.index("subgraph Home")

    def test_screen_order_and_ungrouped_first(self) -> None:
        graph = graph_of(flow("b"), flow("a"), flow("c"))
        config = MobileSpecConfig(mermaid=MermaidConfig(screen_order=["c", "b"]))

        lines = render_mermaid(graph, config).splitlines()

        assert lines[4:7] == ['  c["c\\nC"]', '  b["b\\nB"]', '  a["a\\nA"]']
        assert not any(line.startswith("subgraph") for line in lines)

    def test_choice_nodes_and_edge_labels(self) -> None:
        graph = graph_of(
            flow(
                "gate",
                [
                    transition(
                        "to_admin", "home", trigger="auto", guard="is_admin", targetContext="admin"
                    ),
                    transition(
                        "fallback", "home", trigger="auto", targetContext="user", **{"else": True}
                    ),
                ],
                type="choice",
            ),
            flow("home", context="admin"),
            flow("home", context="user"),
        )

        text = render_mermaid(graph)

        assert 'gate{"gate\\nGate"}' in text
        assert 'home__admin["home[admin]\\nHome"]' in text
        assert "gate -->|to_admin/auto [is_admin]| home__admin" in text
        assert "gate -->|fallback/auto [else]| home__user" in text

    def test_quotes_escaped(self) -> None:
        text = render_mermaid(graph_of(flow("home", name='Say "hi"')))

        assert 'home["home\\nSay #quot;hi#quot;"]' in text

    def test_node_id(self) -> None:
        graph = graph_of(flow("home", context="admin"))

        (key,) = graph.screens

        assert node_id(key) == "home__admin"

    def test_write(self, ok_spec: SpecTree) -> None:
        result = validate(ok_spec.root)

        path = write_mermaid(ok_spec.root, result.graph, result.config)

        assert path == ok_spec.root / "flows.md"
        assert path.read_text(encoding="utf-8") == OK_SPEC_DIAGRAM


class TestTranslations:
    @pytest.fixture
    def config(self) -> MobileSpecConfig:
        return MobileSpecConfig(i18n=I18nConfig(locales=["en", "ja"]))

    def test_source_filled_and_targets_padded(
        self, ok_spec: SpecTree, config: MobileSpecConfig
    ) -> None:
        ok_spec.locale("ja", {"app.screen.home.title": "ホーム", "custom.key": "残す"})
        result = validate(ok_spec.root)

        generated = generate_translations(ok_spec.root, config, result.graph, result.ui_docs)

        assert generated["en"] == {
            "app.screen.home.component.action_open_tasks.label": "Open tasks",
            "app.screen.home.title": "Home",
            "app.screen.tasks.title": "Tasks",
        }
        assert generated["ja"] == {
            "app.screen.home.component.action_open_tasks.label": "",
            "app.screen.home.title": "ホーム",
            "app.screen.tasks.title": "",
            "custom.key": "残す",
        }
        assert list(generated["ja"]) == sorted(generated["ja"])

    def test_source_overwritten_from_specs(
        self, ok_spec: SpecTree, config: MobileSpecConfig
    ) -> None:
        ok_spec.locale("en", {"app.screen.home.title": "Start"})
        result = validate(ok_spec.root)

        generated = generate_translations(ok_spec.root, config, result.graph, result.ui_docs)

        assert generated["en"]["app.screen.home.title"] == "Home"

    def test_requires_locales(self, ok_spec: SpecTree) -> None:
        result = validate(ok_spec.root)

        with pytest.raises(ConfigError):
            generate_translations(ok_spec.root, MobileSpecConfig(), result.graph, result.ui_docs)

    def test_source_must_be_configured(self, ok_spec: SpecTree) -> None:
        result = validate(ok_spec.root)
        config = MobileSpecConfig(i18n=I18nConfig(locales=["ja"], source_locale="en"))

        with pytest.raises(ConfigError):
            generate_translations(ok_spec.root, config, result.graph, result.ui_docs)

    def test_write(self, ok_spec: SpecTree, config: MobileSpecConfig) -> None:
        result = validate(ok_spec.root)

        paths = write_translations(ok_spec.root, config, result.graph, result.ui_docs)

        assert [p.name for p in paths] == ["en.json", "ja.json"]
        text = paths[0].read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert json.loads(text)["app.screen.tasks.title"] == "Tasks"
        assert validate(ok_spec.root).ok
