"""
Diagnostic rendering for the mobilespec CLI.

Human output uses rich styles (errors red, infos cyan); JSON output is a
single ``{"ok": ..., "diagnostics": [...]}`` document on stdout.
"""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.style import Style
from rich.text import Text

from ..core.ir import Diagnostic, DiagnosticSet

FORMATS = ("human", "json")

console = Console()

STYLES = {
    "title": Style(color="bright_cyan", bold=True),
    "success": Style(color="green", bold=True),
    "error": Style(color="red", bold=True),
    "info": Style(color="cyan"),
    "muted": Style(color="bright_black"),
}


def check_format(format: str) -> None:
    if format not in FORMATS:
        typer.echo(f"Unknown format '{format}' (expected: {', '.join(FORMATS)})", err=True)
        raise typer.Exit(code=2)


def print_success(message: str) -> None:
    console.print(Text(f"✓ {message}", style=STYLES["success"]), soft_wrap=True)


def print_error(message: str) -> None:
    console.print(Text(f"✗ {message}", style=STYLES["error"]), soft_wrap=True)


def print_diagnostic(diagnostic: Diagnostic) -> None:
    if diagnostic.is_error:
        text = Text("✗ ", style=STYLES["error"])
        text.append(f"[{diagnostic.code.value}] ", style=STYLES["error"])
    else:
        text = Text("ℹ ", style=STYLES["info"])
        text.append(f"[{diagnostic.code.value}] ", style=STYLES["info"])
    text.append(diagnostic.message)
    console.print(text, soft_wrap=True)


def print_human(result: DiagnosticSet, title: str) -> None:
    console.print(Text(title, style=STYLES["title"]))
    for diagnostic in result.diagnostics:
        print_diagnostic(diagnostic)

    summary = f"({len(result.errors)} errors, {len(result.infos)} infos)"
    if result.ok:
        print_success(f"{title} passed {summary}")
    else:
        print_error(f"{title} failed {summary}")


def print_json(result: DiagnosticSet) -> None:
    payload = {
        "ok": result.ok,
        "diagnostics": [d.to_dict() for d in result.diagnostics],
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def print_result(result: DiagnosticSet, format: str, title: str) -> None:
    if format == "json":
        print_json(result)
    else:
        print_human(result, title)
