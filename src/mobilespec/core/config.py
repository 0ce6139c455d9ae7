"""
mobilespec.config.yml loading.

The config file is optional. Missing sections fall back to defaults; a file
that cannot be parsed raises ``ConfigError`` so the pipeline can report it
once and continue with ``MobileSpecConfig()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError, ErrorContext

logger = logging.getLogger(__name__)

CONFIG_FILE = "mobilespec.config.yml"

UNUSED_LEVEL_INFO = "info"
UNUSED_LEVEL_OFF = "off"


@dataclass(frozen=True)
class MermaidConfig:
    """Diagram ordering."""

    group_order: list[str] = field(default_factory=list)
    screen_order: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ValidationConfig:
    """Navigation validation knobs."""

    groups: list[str] = field(default_factory=list)  # Empty: any group accepted
    allow_no_incoming: list[str] = field(default_factory=list)  # Screen ids or keys


@dataclass(frozen=True)
class I18nConfig:
    """Translation audit settings."""

    locales: list[str] = field(default_factory=list)
    source_locale: str | None = None

    @property
    def source(self) -> str | None:
        """Explicit source locale, else the first configured one."""
        if self.source_locale:
            return self.source_locale
        return self.locales[0] if self.locales else None


@dataclass(frozen=True)
class OpenApiConfig:
    """External contract settings.

    Examples in mobilespec.config.yml:

        openapi:
          path: ../api/openapi.yaml
          warnUnusedOperationId: info   # or "off"
          checkSelectRoot: true
    """

    path: str
    warn_unused_operation_id: str = UNUSED_LEVEL_INFO
    check_select_root: bool = True

    def resolve(self, specs_dir: Path) -> Path:
        """Resolve ``path`` against the specs directory."""
        p = Path(self.path)
        return p if p.is_absolute() else (specs_dir / p).resolve()


@dataclass(frozen=True)
class MobileSpecConfig:
    """Complete project configuration."""

    mermaid: MermaidConfig = field(default_factory=MermaidConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    i18n: I18nConfig = field(default_factory=I18nConfig)
    openapi: OpenApiConfig | None = None


def get_config_path(specs_dir: Path) -> Path:
    return specs_dir / CONFIG_FILE


def _string_list(value: Any, key: str, path: Path) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list of strings", ErrorContext(file=path))
    return [v.strip() for v in value if isinstance(v, str) and v.strip()]


def _section(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping", ErrorContext(file=path))
    return value


def _parse_unused_level(value: Any, path: Path) -> str:
    """Accept ``info`` / ``off`` and booleans for backwards compatibility."""
    if value is None:
        return UNUSED_LEVEL_INFO
    if isinstance(value, bool):
        return UNUSED_LEVEL_INFO if value else UNUSED_LEVEL_OFF
    if isinstance(value, str) and value.strip().lower() in (UNUSED_LEVEL_INFO, UNUSED_LEVEL_OFF):
        return value.strip().lower()
    raise ConfigError(
        f"openapi.warnUnusedOperationId must be 'info' or 'off', got {value!r}",
        ErrorContext(file=path),
    )


def _parse_openapi(data: dict[str, Any], path: Path) -> OpenApiConfig | None:
    if "openapi" not in data or data["openapi"] is None:
        return None
    section = _section(data, "openapi", path)
    raw_path = section.get("path")
    if raw_path is not None and not isinstance(raw_path, str):
        raise ConfigError("openapi.path must be a string", ErrorContext(file=path))

    check_select_root = section.get("checkSelectRoot", True)
    if not isinstance(check_select_root, bool):
        raise ConfigError("openapi.checkSelectRoot must be a boolean", ErrorContext(file=path))

    # An empty path is kept so the contract stage can report it as not found
    return OpenApiConfig(
        path=(raw_path or "").strip(),
        warn_unused_operation_id=_parse_unused_level(section.get("warnUnusedOperationId"), path),
        check_select_root=check_select_root,
    )


def parse_config(data: Any, path: Path) -> MobileSpecConfig:
    """Build a ``MobileSpecConfig`` from decoded YAML.

    Raises:
        ConfigError: If the data has the wrong shape.
    """
    if data is None:
        return MobileSpecConfig()
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping", ErrorContext(file=path))

    mermaid = _section(data, "mermaid", path)
    validation = _section(data, "validation", path)
    i18n = _section(data, "i18n", path)

    source_locale = i18n.get("sourceLocale")
    if source_locale is not None and not isinstance(source_locale, str):
        raise ConfigError("i18n.sourceLocale must be a string", ErrorContext(file=path))

    return MobileSpecConfig(
        mermaid=MermaidConfig(
            group_order=_string_list(mermaid.get("groupOrder"), "mermaid.groupOrder", path),
            screen_order=_string_list(mermaid.get("screenOrder"), "mermaid.screenOrder", path),
        ),
        validation=ValidationConfig(
            groups=_string_list(validation.get("groups"), "validation.groups", path),
            allow_no_incoming=_string_list(
                validation.get("allowNoIncoming"), "validation.allowNoIncoming", path
            ),
        ),
        i18n=I18nConfig(
            locales=_string_list(i18n.get("locales"), "i18n.locales", path),
            source_locale=source_locale.strip() if source_locale else None,
        ),
        openapi=_parse_openapi(data, path),
    )


def load_config(specs_dir: Path) -> MobileSpecConfig:
    """Load mobilespec.config.yml from the specs directory.

    Args:
        specs_dir: Root of the spec tree.

    Returns:
        Parsed config, or defaults when the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    path = get_config_path(specs_dir)
    if not path.exists():
        logger.debug("No %s in %s, using defaults", CONFIG_FILE, specs_dir)
        return MobileSpecConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config: {e}", ErrorContext(file=path)) from e

    config = parse_config(data, path)
    logger.debug("Loaded config from %s", path)
    return config
