"""
docrender
=========

Renders named or inline templates against a data model into HTML, and
HTML into print-ready PDF documents.

This package provides:
- Template resolution from bundled package templates and a filesystem directory
- Jinja2 template expansion with ``${...}`` interpolation
- XHTML canonicalization and @page style injection
- Font embedding and PDF output through WeasyPrint or headless Chromium
"""

__version__ = "1.0.0"

from docrender.core.errors import (
    ConfigurationError,
    DocumentRenderError,
    InvalidArgumentError,
    RenderError,
    TemplateError,
    TemplateEvaluationError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from docrender.core.renderer import (
    DocumentRenderer,
    create_renderer,
    render_html_to_pdf,
    render_template_string_to_html,
    render_template_string_to_pdf,
    render_template_to_html,
    render_template_to_pdf,
)
from docrender.models.schemas import PageSize, PdfOptions, PdfOptionsBuilder, RenderRequest

__all__ = [
    "ConfigurationError",
    "DocumentRenderError",
    "DocumentRenderer",
    "InvalidArgumentError",
    "PageSize",
    "PdfOptions",
    "PdfOptionsBuilder",
    "RenderError",
    "RenderRequest",
    "TemplateError",
    "TemplateEvaluationError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "create_renderer",
    "render_html_to_pdf",
    "render_template_string_to_html",
    "render_template_string_to_pdf",
    "render_template_to_html",
    "render_template_to_pdf",
]
