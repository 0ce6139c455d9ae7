"""
Spec tree document loader.

Reads YAML documents of one layer from a directory tree. The first directory
segment below the layer root becomes the document's structural group
(``home/detail.flow.yaml`` -> ``Home``); files directly under the root have
an empty group.

Default layout under the specs directory:

    L2.screenflows/**/*.flow.yaml
    L3.ui/**/*.ui.yaml
    L4.state/**/*.state.yaml
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Layer:
    """Static description of a spec layer."""

    label: str  # "L2", "L3", "L4"
    directory: str
    suffix: str
    schema: str


NAVIGATION = Layer("L2", "L2.screenflows", ".flow.yaml", "L2.screenflows.schema.json")
UI = Layer("L3", "L3.ui", ".ui.yaml", "L3.ui.schema.json")
STATE = Layer("L4", "L4.state", ".state.yaml", "L4.state.schema.json")


@dataclass(frozen=True)
class SpecFile:
    """
    A loaded document.

    Attributes:
        path: Absolute file path
        data: Parsed YAML (None when ``error`` is set)
        group: Structural group derived from the location
        error: YAML parse / read error message
    """

    path: Path
    data: Any
    group: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def group_for(relative: Path) -> str:
    """Derive the structural group from a path relative to the layer root."""
    parts = relative.parts[:-1]
    if not parts:
        return ""
    first = parts[0]
    return first[:1].upper() + first[1:]


def load_yaml_files(root: Path, suffix: str) -> list[SpecFile]:
    """Load every ``*suffix`` file under ``root``.

    Files are returned in sorted path order so downstream output is stable.
    A missing root yields an empty list. Unreadable files are returned with
    ``error`` set rather than raising.

    Args:
        root: Layer directory.
        suffix: File suffix such as ``.flow.yaml``.

    Returns:
        Loaded documents.
    """
    if not root.is_dir():
        logger.debug("Layer directory %s does not exist", root)
        return []

    results: list[SpecFile] = []
    for path in sorted(p for p in root.rglob(f"*{suffix}") if p.is_file()):
        group = group_for(path.relative_to(root))
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.warning("Failed to read %s: %s", path, e)
            results.append(SpecFile(path=path, data=None, group=group, error=str(e)))
            continue
        results.append(SpecFile(path=path, data=data, group=group))

    logger.debug("Loaded %d %s files from %s", len(results), suffix, root)
    return results


def load_layer(specs_dir: Path, layer: Layer) -> list[SpecFile]:
    return load_yaml_files(specs_dir / layer.directory, layer.suffix)
