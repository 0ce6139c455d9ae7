"""
mobilespec commands.

- validate: full pipeline
- openapi-check: external contract only
- mermaid / i18n: generators
- check: validate, then generate when clean
"""

from __future__ import annotations

from pathlib import Path

import typer

from ..core.errors import MobileSpecError
from ..core.validate import ValidationResult, openapi_check, validate
from ..generators import write_mermaid, write_translations
from .output import check_format, console, print_error, print_result, print_success
from .utils import configure_logging

SPECS_DIR_HELP = "Spec tree root (default: current directory)"
SCHEMA_DIR_HELP = "Directory with L2/L3/L4 JSON Schemas (default: bundled schemas)"


def _run_validate(specs_dir: Path, schema_dir: Path | None) -> ValidationResult:
    if not specs_dir.is_dir():
        print_error(f"Spec directory not found: {specs_dir}")
        raise typer.Exit(code=1)
    return validate(specs_dir, schema_dir)


def _generate_mermaid(specs_dir: Path, result: ValidationResult) -> None:
    path = write_mermaid(specs_dir, result.graph, result.config)
    print_success(f"Wrote {path}")


def _generate_i18n(specs_dir: Path, result: ValidationResult) -> None:
    try:
        paths = write_translations(specs_dir, result.config, result.graph, result.ui_docs)
    except MobileSpecError as e:
        print_error(f"i18n: {e}")
        raise typer.Exit(code=1)
    for path in paths:
        print_success(f"Wrote {path}")


def validate_command(
    specs_dir: Path = typer.Option(Path("."), "--specs-dir", "-s", help=SPECS_DIR_HELP),  # noqa: B008
    schema_dir: Path | None = typer.Option(None, "--schema-dir", help=SCHEMA_DIR_HELP),  # noqa: B008
    format: str = typer.Option("human", "--format", "-f", help="Output format: 'human' or 'json'"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Validate every layer of the spec tree and their cross references.

    Exits with status 1 if any error-level diagnostic is found.
    """
    check_format(format)
    configure_logging(verbose)

    result = _run_validate(specs_dir, schema_dir)
    print_result(result, format, "Validation")
    if not result.ok:
        raise typer.Exit(code=1)


def openapi_check_command(
    specs_dir: Path = typer.Option(Path("."), "--specs-dir", "-s", help=SPECS_DIR_HELP),  # noqa: B008
    openapi: Path | None = typer.Option(  # noqa: B008
        None, "--openapi", help="OpenAPI document (default: openapi.path from config)"
    ),
    schema_dir: Path | None = typer.Option(None, "--schema-dir", help=SCHEMA_DIR_HELP),  # noqa: B008
    format: str = typer.Option("human", "--format", "-f", help="Output format: 'human' or 'json'"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Check L4 operationId references against the OpenAPI contract."""
    check_format(format)
    configure_logging(verbose)

    result = openapi_check(specs_dir, openapi, schema_dir)
    print_result(result, format, "OpenAPI check")
    if not result.ok:
        raise typer.Exit(code=1)


def mermaid_command(
    specs_dir: Path = typer.Option(Path("."), "--specs-dir", "-s", help=SPECS_DIR_HELP),  # noqa: B008
    schema_dir: Path | None = typer.Option(None, "--schema-dir", help=SCHEMA_DIR_HELP),  # noqa: B008
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Generate flows.md (mermaid flowchart) from the navigation layer."""
    configure_logging(verbose)
    _generate_mermaid(specs_dir, _run_validate(specs_dir, schema_dir))


def i18n_command(
    specs_dir: Path = typer.Option(Path("."), "--specs-dir", "-s", help=SPECS_DIR_HELP),  # noqa: B008
    schema_dir: Path | None = typer.Option(None, "--schema-dir", help=SCHEMA_DIR_HELP),  # noqa: B008
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Generate or update i18n/<locale>.json for every configured locale."""
    configure_logging(verbose)
    _generate_i18n(specs_dir, _run_validate(specs_dir, schema_dir))


def check_command(
    specs_dir: Path = typer.Option(Path("."), "--specs-dir", "-s", help=SPECS_DIR_HELP),  # noqa: B008
    schema_dir: Path | None = typer.Option(None, "--schema-dir", help=SCHEMA_DIR_HELP),  # noqa: B008
    format: str = typer.Option("human", "--format", "-f", help="Output format: 'human' or 'json'"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Validate, then regenerate flows.md and the i18n files.

    Generators only run when validation passed.
    """
    check_format(format)
    configure_logging(verbose)

    result = _run_validate(specs_dir, schema_dir)
    print_result(result, format, "Validation")
    if not result.ok:
        raise typer.Exit(code=1)

    if format == "human":
        console.print()
    _generate_mermaid(specs_dir, result)
    if result.config.i18n.locales:
        _generate_i18n(specs_dir, result)
