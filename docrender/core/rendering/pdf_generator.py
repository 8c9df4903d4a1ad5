"""
PDF Generator
=============

Lays out canonical XHTML and serializes it to PDF bytes.
WeasyPrint is the default backend; headless Chromium through Playwright is
available for documents that depend on browser layout.
"""

from typing import Any, Callable, Dict, List, Optional, Type, Union
from abc import ABC, abstractmethod
from html import escape
from pathlib import Path
import base64

from playwright.sync_api import sync_playwright

from docrender.config.logging import get_logger
from docrender.config.settings import Settings, get_settings
from docrender.core.errors import ConfigurationError, RenderError
from docrender.core.rendering.fonts import read_font_family
from docrender.core.rendering.page_style import insert_into_head
from docrender.models.schemas import FONT_SUFFIXES, FontFace

logger = get_logger(__name__)

PDF_SIGNATURE = b"%PDF"


class BasePdfRenderer(ABC):
    """
    Abstract base class for PDF backends.

    A renderer instance serves a single render call: fonts added to it
    only apply to that call.
    """

    name = "base"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(renderer=self.name)  # structlog.BoundLoggerBase
        self._fonts: List[FontFace] = []

    @property
    def fonts(self) -> List[FontFace]:
        """Fonts registered for embedding."""
        return list(self._fonts)

    def add_font(self, path: Union[str, Path]) -> FontFace:
        """
        Register a font file for embedding.

        Raises:
            ValueError: If the file is not a .ttf or .otf font
            OSError: If the font cannot be read
        """
        font_path = Path(path).resolve()
        font_format = FONT_SUFFIXES.get(font_path.suffix.lower())
        if font_format is None:
            raise ValueError(f"Unsupported font file: {font_path.name}")

        face = FontFace(family=read_font_family(font_path), path=font_path, format=font_format)
        self._fonts.append(face)
        return face

    def font_face_css(self, url_for: Callable[[FontFace], str]) -> str:
        """@font-face rules for the registered fonts."""
        rules = []
        for face in self._fonts:
            family = face.family.replace("\\", "\\\\").replace("'", "\\'")
            rules.append(
                f"@font-face {{ font-family: '{family}'; "
                f"src: url('{url_for(face)}') format('{face.format.value}'); }}"
            )
        return "\n".join(rules)

    @abstractmethod
    def _render(self, html: str, base_uri: Optional[str]) -> bytes:
        """Backend specific layout and serialization."""
        pass

    def render(self, html: str, base_uri: Optional[str] = None) -> bytes:
        """
        Render canonical XHTML to PDF bytes.

        Args:
            html: Canonical XHTML document
            base_uri: Base for relative resource references

        Returns:
            PDF bytes starting with the %PDF signature

        Raises:
            RenderError: If layout or serialization fails
        """
        self.logger.info(
            "Generating PDF from HTML",
            html_length=len(html),
            base_uri=base_uri,
            fonts=len(self._fonts),
        )
        try:
            pdf_bytes = self._render(html, base_uri)
        except RenderError:
            raise
        except Exception as e:
            error_msg = f"PDF generation failed: {e}"
            self.logger.error("PDF generation error", error=error_msg)
            raise RenderError(error_msg) from e

        if not pdf_bytes or not pdf_bytes.startswith(PDF_SIGNATURE):
            raise RenderError("PDF generation failed: output is not a PDF document")

        self.logger.info("PDF generation completed", file_size=len(pdf_bytes))
        return pdf_bytes


class WeasyPrintPdfRenderer(BasePdfRenderer):
    """WeasyPrint-based PDF renderer."""

    name = "weasyprint"

    def _render(self, html: str, base_uri: Optional[str]) -> bytes:
        # Imported per call: WeasyPrint loads Pango through cffi at import time
        from weasyprint import CSS, HTML
        from weasyprint.text.fonts import FontConfiguration

        font_config = FontConfiguration()
        stylesheets = []
        if self._fonts:
            stylesheets.append(
                CSS(string=self.font_face_css(lambda face: face.path.as_uri()), font_config=font_config)
            )

        document = HTML(string=html, base_url=base_uri)
        return document.write_pdf(
            stylesheets=stylesheets,
            font_config=font_config,
            presentational_hints=True,
        )


def _font_data_uri(face: FontFace) -> str:
    mime = "font/otf" if face.format.value == "opentype" else "font/ttf"
    encoded = base64.b64encode(face.path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


class ChromiumPdfRenderer(BasePdfRenderer):
    """Playwright/Chromium-based PDF renderer."""

    name = "chromium"

    launch_args = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
    ]

    def _prepare_document(self, html: str, base_uri: Optional[str]) -> str:
        """Add the base URL and embedded fonts to the document head."""
        head_parts = []
        if base_uri:
            head_parts.append(f'<base href="{escape(base_uri, quote=True)}" />')
        if self._fonts:
            # Fonts travel as data URLs: file URLs are blocked for set_content pages
            head_parts.append(f"<style>{self.font_face_css(_font_data_uri)}</style>")
        if not head_parts:
            return html
        return insert_into_head(html, "".join(head_parts))

    def _render(self, html: str, base_uri: Optional[str]) -> bytes:
        document = self._prepare_document(html, base_uri)

        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(
                headless=self.settings.playwright_headless,
                args=self.launch_args,
            )
            try:
                page = browser.new_page()
                page.set_default_timeout(self.settings.playwright_timeout)
                page.set_content(document, wait_until="load")
                page.emulate_media(media="print")
                return page.pdf(prefer_css_page_size=True, print_background=True)
            finally:
                browser.close()


class PdfRendererFactory:
    """Factory for creating PDF renderers."""

    _renderers: Dict[str, Type[BasePdfRenderer]] = {
        "weasyprint": WeasyPrintPdfRenderer,
        "chromium": ChromiumPdfRenderer,
    }

    @classmethod
    def register(cls, backend: str, renderer_class: Type[BasePdfRenderer]) -> None:
        """Make a renderer class available under a backend name."""
        cls._renderers[backend.lower()] = renderer_class

    @classmethod
    def available_backends(cls) -> List[str]:
        return sorted(cls._renderers)

    @classmethod
    def create_renderer(
        cls, backend: str = "weasyprint", settings: Optional[Settings] = None
    ) -> BasePdfRenderer:
        """
        Create PDF renderer instance.

        Args:
            backend: Backend name
            settings: Settings passed to the renderer

        Returns:
            A fresh renderer for one render call

        Raises:
            ConfigurationError: If the backend is not supported
        """
        renderer_class = cls._renderers.get(backend.lower())
        if renderer_class is None:
            raise ConfigurationError(f"Unsupported PDF backend: {backend}")

        return renderer_class(settings)
