"""Output generators driven by a validated spec tree."""

from .i18n import generate_translations, write_translations
from .mermaid import render_mermaid, write_mermaid

__all__ = [
    "render_mermaid",
    "write_mermaid",
    "generate_translations",
    "write_translations",
]
