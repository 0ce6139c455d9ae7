"""
Translation-key audit.

Expected keys:

    app.screen.<id>[.ctx.<context>].title
    app.screen.<id>[.ctx.<context>].component.<nodeId>.label

The first comes from every navigation screen, the second from every UI node
carrying both ``id`` and ``name``. Locale files live in ``i18n/<locale>.json``
as flat key -> string maps.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from . import diagnostics
from .config import MobileSpecConfig
from .errors import DocumentLoadError, make_load_error
from .ir import Diagnostic, NavigationGraph, UiDoc

logger = logging.getLogger(__name__)

I18N_DIR = "i18n"


def screen_prefix(screen_id: str, context: str | None = None) -> str:
    if context:
        return f"app.screen.{screen_id}.ctx.{context}"
    return f"app.screen.{screen_id}"


def expected_keys(graph: NavigationGraph, ui_docs: list[UiDoc]) -> dict[str, str]:
    """Map every expected key to its source text (screen or component name)."""
    keys: dict[str, str] = {}

    for screen in graph.screens.values():
        keys[f"{screen_prefix(screen.id, screen.context)}.title"] = screen.name or ""

    for doc in ui_docs:
        prefix = screen_prefix(doc.screen.id, doc.screen.context)
        for node in doc.screen.layout.walk():
            if node.id and node.name:
                keys[f"{prefix}.component.{node.id}.label"] = node.name

    return keys


def locale_path(specs_dir: Path, locale: str) -> Path:
    return specs_dir / I18N_DIR / f"{locale}.json"


def list_locale_files(specs_dir: Path) -> list[str]:
    directory = specs_dir / I18N_DIR
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.glob("*.json") if p.is_file())


def read_locale(path: Path) -> dict[str, str]:
    """Read a locale file; a missing or blank file is an empty map.

    Raises:
        DocumentLoadError: If the file is not a JSON object.
    """
    if not path.exists():
        return {}
    try:
        text = path.read_text(encoding="utf-8").strip()
        data = json.loads(text) if text else {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise make_load_error(f"cannot read locale: {e}", path) from e
    if not isinstance(data, dict):
        raise make_load_error("locale root must be an object", path)
    return {str(k): v if isinstance(v, str) else str(v) for k, v in data.items()}


def configured_locales(specs_dir: Path, config: MobileSpecConfig) -> list[str]:
    """Configured locales, falling back to the files present in ``i18n/``."""
    return list(config.i18n.locales) or list_locale_files(specs_dir)


def audit_translations(
    specs_dir: Path,
    config: MobileSpecConfig,
    graph: NavigationGraph,
    ui_docs: list[UiDoc],
) -> list[Diagnostic]:
    """Check every locale against the expected key set.

    Returns:
        Diagnostics; empty when translations are not set up.
    """
    locales = configured_locales(specs_dir, config)
    if not locales:
        return []

    found: list[Diagnostic] = []
    source = config.i18n.source or locales[0]
    if source not in locales:
        found.append(diagnostics.i18n_source_missing(source, locales))

    expected = expected_keys(graph, ui_docs)
    for locale in locales:
        path = locale_path(specs_dir, locale)
        try:
            translations = read_locale(path)
        except DocumentLoadError as e:
            found.append(diagnostics.i18n_unreadable(locale, f"{I18N_DIR}/{path.name}", e.message))
            continue

        missing = [key for key in expected if key not in translations]
        if missing:
            found.append(diagnostics.i18n_missing_keys(locale, missing))

        if locale != source:
            untranslated = [
                key for key in expected if key in translations and translations[key] == ""
            ]
            if untranslated:
                found.append(diagnostics.i18n_untranslated(locale, untranslated))

    logger.debug("i18n audit: %d locales, %d keys", len(locales), len(expected))
    return found
