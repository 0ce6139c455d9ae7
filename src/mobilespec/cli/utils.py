"""
mobilespec CLI utilities.

Shared helpers used across CLI modules.
"""

import logging
import platform
from importlib.metadata import PackageNotFoundError, version

import typer

__version__ = "0.3.0"


def get_version() -> str:
    """Get mobilespec version from package metadata."""
    try:
        return version("mobilespec")
    except PackageNotFoundError:
        return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"mobilespec version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(
            f"  Python:        {platform.python_implementation()} {platform.python_version()}"
        )
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library debug logging to stderr when --verbose is set."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
