"""
Validation pipeline.

Stages run in a fixed order and never stop early:

1. Config, schema validation and decode (per layer)
2. Navigation graph build
3. Reachability, choice screens and guards
4. Cross-layer references (UI, state)
5. External contract (when ``openapi`` is configured)
6. Translation audit (when locales are configured or present)

Diagnostics are concatenated in that order, so identical input always yields
an identical list.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import TypeVar

from pydantic import Field

from . import diagnostics
from .config import CONFIG_FILE, MobileSpecConfig, OpenApiConfig, load_config
from .contract import check_contract
from .crosslayer import check_cross_layer
from .decode import decode_documents
from .errors import ConfigError, DocumentLoadError
from .guards import GUARDS_FILE, check_guards, load_guards
from .i18n import audit_translations
from .ir import (
    Diagnostic,
    DiagnosticSet,
    GuardRegistry,
    NavigationDoc,
    NavigationGraph,
    StateDoc,
    UiDoc,
)
from .loader import NAVIGATION, STATE, UI, Layer, load_layer
from .navigation import build_navigation_graph
from .reachability import check_choices, check_reachability
from .schema import DEFAULT_SCHEMA_DIR, SchemaCache, validate_documents

logger = logging.getLogger(__name__)

DocT = TypeVar("DocT", NavigationDoc, UiDoc, StateDoc)


class ValidationResult(DiagnosticSet):
    """
    Outcome of a full validation run.

    Besides the diagnostics, carries what the generators need: the built
    navigation graph, the decoded UI/state documents and the config in effect.
    """

    graph: NavigationGraph = Field(default_factory=NavigationGraph)
    ui_docs: list[UiDoc] = Field(default_factory=list)
    state_docs: list[StateDoc] = Field(default_factory=list)
    config: MobileSpecConfig = Field(default_factory=MobileSpecConfig)


def _read_config(specs_dir: Path, found: list[Diagnostic]) -> MobileSpecConfig:
    try:
        return load_config(specs_dir)
    except ConfigError as e:
        found.append(diagnostics.config_invalid(CONFIG_FILE, e.message))
        return MobileSpecConfig()


def _load_documents(
    specs_dir: Path,
    layer: Layer,
    model: type[DocT],
    schema_dir: Path,
    cache: SchemaCache,
    found: list[Diagnostic],
) -> tuple[list[DocT], int]:
    """Load, schema-check and decode one layer.

    Returns:
        Tuple of (decoded documents, number of files found).
    """
    files = load_layer(specs_dir, layer)
    schema_findings, passed = validate_documents(
        files, schema_dir / layer.schema, layer.label, cache, specs_dir
    )
    found.extend(schema_findings)

    docs, decode_findings = decode_documents(passed, model, layer.label, specs_dir)
    found.extend(decode_findings)
    logger.debug("%s: %d files, %d decoded", layer.label, len(files), len(docs))
    return docs, len(files)


def _read_guards(specs_dir: Path, found: list[Diagnostic]) -> GuardRegistry:
    try:
        return load_guards(specs_dir)
    except DocumentLoadError as e:
        found.append(diagnostics.document_invalid("L2", GUARDS_FILE, e.message))
        return GuardRegistry()


def validate(
    specs_dir: Path | str,
    schema_dir: Path | str | None = None,
    schema_cache: SchemaCache | None = None,
) -> ValidationResult:
    """
    Validate a complete spec tree.

    Args:
        specs_dir: Root of the spec tree.
        schema_dir: Directory holding the layer JSON Schemas (defaults to the
            schemas shipped with the package).
        schema_cache: Compiled-schema cache to reuse across runs.

    Returns:
        ValidationResult; ``ok`` is False iff any error was found.
    """
    specs_dir = Path(specs_dir)
    schema_path = Path(schema_dir) if schema_dir else DEFAULT_SCHEMA_DIR
    cache = schema_cache if schema_cache is not None else SchemaCache()
    found: list[Diagnostic] = []

    # 1. Config and structure
    config = _read_config(specs_dir, found)
    nav_docs, nav_count = _load_documents(
        specs_dir, NAVIGATION, NavigationDoc, schema_path, cache, found
    )
    if nav_count == 0:
        found.append(diagnostics.no_navigation_files(NAVIGATION.directory))
    ui_docs, _ = _load_documents(specs_dir, UI, UiDoc, schema_path, cache, found)
    state_docs, _ = _load_documents(specs_dir, STATE, StateDoc, schema_path, cache, found)

    # 2. Navigation graph
    graph, graph_errors = build_navigation_graph(nav_docs, config)
    found.extend(graph_errors)

    # 3. Reachability, choices and guards
    found.extend(check_reachability(graph, config))
    found.extend(check_choices(graph))
    found.extend(check_guards(graph, _read_guards(specs_dir, found)))

    # 4. Cross-layer
    found.extend(check_cross_layer(graph, ui_docs, state_docs))

    # 5. External contract
    if config.openapi is not None:
        found.extend(check_contract(config.openapi, specs_dir, state_docs))

    # 6. Translations
    found.extend(audit_translations(specs_dir, config, graph, ui_docs))

    result = ValidationResult(
        diagnostics=found,
        graph=graph,
        ui_docs=ui_docs,
        state_docs=state_docs,
        config=config,
    )
    logger.debug(
        "Validated %s: %d errors, %d infos", specs_dir, len(result.errors), len(result.infos)
    )
    return result


def openapi_check(
    specs_dir: Path | str,
    openapi_path: Path | str | None = None,
    schema_dir: Path | str | None = None,
    schema_cache: SchemaCache | None = None,
) -> DiagnosticSet:
    """
    Run only the external contract checks.

    ``openapi_path`` overrides ``openapi.path`` from the config; the config's
    other contract settings still apply.
    """
    specs_dir = Path(specs_dir)
    schema_path = Path(schema_dir) if schema_dir else DEFAULT_SCHEMA_DIR
    cache = schema_cache if schema_cache is not None else SchemaCache()
    found: list[Diagnostic] = []

    config = _read_config(specs_dir, found)
    state_docs, _ = _load_documents(specs_dir, STATE, StateDoc, schema_path, cache, found)

    openapi = config.openapi
    if openapi_path is not None:
        path = str(Path(openapi_path).resolve())
        openapi = replace(openapi, path=path) if openapi else OpenApiConfig(path=path)

    if openapi is None:
        found.append(diagnostics.openapi_not_found("", None))
    else:
        found.extend(check_contract(openapi, specs_dir, state_docs))

    return DiagnosticSet(diagnostics=found)
