"""
mobilespec CLI Package.

- commands.py: validate, openapi-check, mermaid, i18n, check
- output.py: human (rich) and JSON diagnostic rendering
- utils.py: version and logging helpers
"""

import typer

from mobilespec.cli.commands import (
    check_command,
    i18n_command,
    mermaid_command,
    openapi_check_command,
    validate_command,
)
from mobilespec.cli.utils import get_version, version_callback

app = typer.Typer(
    help="""
mobilespec - structural consistency checks for layered mobile app specs.

Layers (under the spec directory):

  • L2.screenflows/**/*.flow.yaml  navigation
  • L3.ui/**/*.ui.yaml             UI composition
  • L4.state/**/*.state.yaml       state and data contracts
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """mobilespec CLI main callback for global options."""
    pass


app.command(name="validate")(validate_command)
app.command(name="openapi-check")(openapi_check_command)
app.command(name="mermaid")(mermaid_command)
app.command(name="i18n")(i18n_command)
app.command(name="check")(check_command)


def main() -> None:
    app()


__all__ = [
    "app",
    "main",
    "get_version",
    "version_callback",
]
