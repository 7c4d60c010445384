"""Rendering helpers shared by the review and show commands."""

from __future__ import annotations

import re

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax

_HEADING_MARKS = re.compile(r"#+")
_BOLD_MARKS = re.compile(r"\*\*")

PREVIEW_CHARS = 30


def strip_markdown(text: str) -> str:
    """Drop heading (#) and bold (**) markers for plain-text terminals."""
    return _BOLD_MARKS.sub("", _HEADING_MARKS.sub("", text)).strip()


def code_preview(code: str) -> str:
    """First 30 characters of a snippet with whitespace collapsed, for history listings."""
    flat = " ".join(code.split())
    return f"{flat[:PREVIEW_CHARS]}..."


def render_review(console: Console, review: str, optimized_code: str = "", plain: bool = False) -> None:
    """Print the review pane and, when present, the optimized code pane."""
    body = strip_markdown(review) if plain else Markdown(review)
    console.print(Panel(body, title="AI Review", border_style="green"))
    if optimized_code:
        console.print(
            Panel(
                Syntax(optimized_code, "text", word_wrap=True),
                title="Optimized Code",
                border_style="cyan",
            )
        )
