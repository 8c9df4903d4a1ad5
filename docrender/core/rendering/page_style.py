"""
Page Style Injection
====================

Translates PdfOptions into a ``<style>`` block with the @page box and the
default body font, and places it inside the document head.
"""

from typing import List
from decimal import Decimal
import re

from docrender.models.schemas import PdfOptions

_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)


def format_points(value: float) -> str:
    """Format a length in points as plain decimal, without an exponent or trailing zeros."""
    return f"{Decimal(str(value)).normalize():f}pt"


def css_string(value: str) -> str:
    """Quote a value as a single-quoted CSS string."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def build_page_style(options: PdfOptions) -> str:
    """Build the style block for the page box and default font."""
    rules: List[str] = [
        f"@page {{ size: {options.page_size.css_name}; "
        f"margin: {' '.join(format_points(m) for m in options.margins)}; }}"
    ]
    if options.default_font:
        rules.append(f"body {{ font-family: {css_string(options.default_font)}; }}")

    return "<style> " + " ".join(rules) + " </style>"


def insert_into_head(html: str, fragment: str) -> str:
    """Insert markup before the first ``</head>``, or prepend it when there is none."""
    match = _HEAD_CLOSE_RE.search(html)
    if match is None:
        return fragment + html
    return html[: match.start()] + fragment + html[match.start():]


def inject_page_style(html: str, options: PdfOptions) -> str:
    """
    Insert the page style block before the first ``</head>``.

    Documents without a head get the block prepended instead.
    """
    return insert_into_head(html, build_page_style(options))
