"""Utilities for preparing HTML snippets before rendering in Streamlit."""
from html import escape
from textwrap import dedent


def html_block(template: str) -> str:
    """
    Normalize multi-line HTML so Streamlit doesn't treat it as Markdown code.

    Lines with 4+ leading spaces render as code blocks in Markdown, so every
    line is left-stripped after dedenting.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def safe(value: object) -> str:
    """Escape user-entered text for interpolation into HTML snippets."""
    return escape("" if value is None else str(value))
