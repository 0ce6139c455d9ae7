"""Core mobilespec functionality: IR, loader, schema checks, graph analysis, cross-layer and contract checks."""

from . import ir
from .config import MobileSpecConfig, load_config
from .contract import build_operation_registry, read_contract, schema_root_keys
from .errors import (
    ConfigError,
    ContractError,
    DocumentLoadError,
    ErrorContext,
    MobileSpecError,
    SchemaNotFoundError,
)
from .navigation import build_navigation_graph
from .schema import DEFAULT_SCHEMA_DIR, SchemaCache
from .validate import ValidationResult, openapi_check, validate

__all__ = [
    "ir",
    "MobileSpecError",
    "ConfigError",
    "DocumentLoadError",
    "SchemaNotFoundError",
    "ContractError",
    "ErrorContext",
    "MobileSpecConfig",
    "load_config",
    "SchemaCache",
    "DEFAULT_SCHEMA_DIR",
    "build_navigation_graph",
    "build_operation_registry",
    "read_contract",
    "schema_root_keys",
    "validate",
    "openapi_check",
    "ValidationResult",
]
