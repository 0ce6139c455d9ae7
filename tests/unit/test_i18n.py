"""Tests for the translation-key audit."""

from __future__ import annotations

from pathlib import Path

import pytest

from builders import SpecTree
from mobilespec import validate
from mobilespec.core.errors import DocumentLoadError
from mobilespec.core.i18n import expected_keys, read_locale, screen_prefix
from mobilespec.core.ir import DiagnosticCode

HOME_TITLE = "app.screen.home.title"
TASKS_TITLE = "app.screen.tasks.title"
BUTTON_LABEL = "app.screen.home.component.action_open_tasks.label"

COMPLETE = {HOME_TITLE: "Home", TASKS_TITLE: "Tasks", BUTTON_LABEL: "Open tasks"}


def i18n_codes(spec: SpecTree) -> list[tuple[DiagnosticCode, str]]:
    result = validate(spec.root)
    return [
        (d.code, d.meta["locale"])
        for d in result.diagnostics
        if d.code in (DiagnosticCode.I18N_MISSING_KEY, DiagnosticCode.I18N_UNTRANSLATED)
    ]


class TestExpectedKeys:
    def test_prefix_with_context(self) -> None:
        assert screen_prefix("home") == "app.screen.home"
        assert screen_prefix("home", "admin") == "app.screen.home.ctx.admin"

    def test_titles_and_labels(self, ok_spec: SpecTree) -> None:
        result = validate(ok_spec.root)

        assert expected_keys(result.graph, result.ui_docs) == COMPLETE

    def test_nodes_without_name_have_no_label(self, ok_spec: SpecTree) -> None:
        ok_spec.ui(
            {
                "screen": {
                    "id": "tasks",
                    "layout": {"id": "list", "children": [{"name": "anonymous"}]},
                }
            },
            group="task",
        )
        result = validate(ok_spec.root)

        keys = expected_keys(result.graph, result.ui_docs)

        assert not any(".component.list." in key for key in keys)
        assert len(keys) == 3


class TestAudit:
    def test_not_configured(self, ok_spec: SpecTree) -> None:
        assert i18n_codes(ok_spec) == []

    def test_complete_locales_pass(self, ok_spec: SpecTree) -> None:
        ok_spec.config({"i18n": {"locales": ["en", "ja"]}})
        ok_spec.locale("en", COMPLETE)
        ok_spec.locale("ja", {key: "x" for key in COMPLETE})

        result = validate(ok_spec.root)

        assert result.ok
        assert i18n_codes(ok_spec) == []

    def test_missing_keys_grouped_per_locale(self, ok_spec: SpecTree) -> None:
        ok_spec.config({"i18n": {"locales": ["en", "ja"]}})
        ok_spec.locale("en", {HOME_TITLE: "Home"})

        result = validate(ok_spec.root)

        missing = result.find_all(DiagnosticCode.I18N_MISSING_KEY)
        assert [d.meta["locale"] for d in missing] == ["en", "ja"]
        assert missing[0].meta["keys"] == [BUTTON_LABEL, TASKS_TITLE]
        assert missing[1].meta["count"] == 3
        assert not result.ok

    def test_empty_values_untranslated_outside_source(self, ok_spec: SpecTree) -> None:
        ok_spec.config({"i18n": {"locales": ["ja", "en"], "sourceLocale": "en"}})
        ok_spec.locale("en", {**COMPLETE, TASKS_TITLE: ""})
        ok_spec.locale("ja", {**COMPLETE, HOME_TITLE: ""})

        assert i18n_codes(ok_spec) == [(DiagnosticCode.I18N_UNTRANSLATED, "ja")]

    def test_locales_fall_back_to_files(self, ok_spec: SpecTree) -> None:
        ok_spec.locale("en", COMPLETE)
        ok_spec.locale("fr", {})

        assert i18n_codes(ok_spec) == [(DiagnosticCode.I18N_MISSING_KEY, "fr")]

    def test_source_locale_not_configured(self, ok_spec: SpecTree) -> None:
        ok_spec.config({"i18n": {"locales": ["ja"], "sourceLocale": "en"}})
        ok_spec.locale("ja", COMPLETE)

        result = validate(ok_spec.root)

        (error,) = result.errors
        assert error.code == DiagnosticCode.I18N_MISSING_KEY
        assert error.meta["locale"] == "en"
        assert error.meta["keys"] == []

    def test_unreadable_locale(self, ok_spec: SpecTree) -> None:
        ok_spec.config({"i18n": {"locales": ["en"]}})
        ok_spec.write_text("i18n/en.json", "[1, 2]")

        result = validate(ok_spec.root)

        (error,) = result.errors
        assert error.code == DiagnosticCode.I18N_MISSING_KEY
        assert "cannot be read" in error.message


class TestReadLocale:
    def test_missing_or_blank_is_empty(self, tmp_path: Path) -> None:
        blank = tmp_path / "en.json"
        blank.write_text("  \n")

        assert read_locale(tmp_path / "absent.json") == {}
        assert read_locale(blank) == {}

    def test_undecodable_raises_load_error(self, tmp_path: Path) -> None:
        path = tmp_path / "en.json"
        path.write_bytes(b"\xff\xfe{}")

        with pytest.raises(DocumentLoadError):
            read_locale(path)
