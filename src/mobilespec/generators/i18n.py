"""
Translation file generator.

Writes ``i18n/<locale>.json`` for every configured locale:

- source locale: keys set to the screen / component names from the specs
- other locales: missing keys added as empty strings

Existing translations are never removed or overwritten in target locales.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..core.config import CONFIG_FILE, MobileSpecConfig
from ..core.errors import ConfigError, ErrorContext
from ..core.i18n import I18N_DIR, configured_locales, expected_keys, locale_path, read_locale
from ..core.ir import NavigationGraph, UiDoc

logger = logging.getLogger(__name__)


def generate_translations(
    specs_dir: Path,
    config: MobileSpecConfig,
    graph: NavigationGraph,
    ui_docs: list[UiDoc],
) -> dict[str, dict[str, str]]:
    """
    Build the updated translation maps.

    Args:
        specs_dir: Root of the spec tree.
        config: Project config (locales, source locale).
        graph: Validated navigation graph.
        ui_docs: Decoded UI documents.

    Returns:
        Mapping of locale to its complete key -> text map.

    Raises:
        ConfigError: If no locales are configured or the source locale is
            not among them.
        DocumentLoadError: If an existing locale file cannot be read.
    """
    locales = configured_locales(specs_dir, config)
    context = ErrorContext(file=specs_dir / CONFIG_FILE)
    if not locales:
        raise ConfigError("i18n.locales is not configured", context)

    source = config.i18n.source or locales[0]
    if source not in locales:
        raise ConfigError(f'source locale "{source}" is not among i18n.locales', context)

    expected = expected_keys(graph, ui_docs)
    result: dict[str, dict[str, str]] = {}

    for locale in locales:
        translations = read_locale(locale_path(specs_dir, locale))
        if locale == source:
            for key, text in expected.items():
                if text:
                    translations[key] = text
                else:
                    translations.setdefault(key, "")
        else:
            for key in expected:
                translations.setdefault(key, "")
        result[locale] = dict(sorted(translations.items()))

    return result


def write_translations(
    specs_dir: Path,
    config: MobileSpecConfig,
    graph: NavigationGraph,
    ui_docs: list[UiDoc],
) -> list[Path]:
    """Write every locale file and return the written paths."""
    generated = generate_translations(specs_dir, config, graph, ui_docs)
    (specs_dir / I18N_DIR).mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for locale, translations in generated.items():
        path = locale_path(specs_dir, locale)
        path.write_text(
            json.dumps(translations, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
        written.append(path)
        logger.info("Wrote %s (%d keys)", path, len(translations))
    return written
