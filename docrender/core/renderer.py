"""
Document Renderer
=================

Public rendering pipeline: template resolution and expansion to HTML, and
HTML to PDF through canonicalization, page style injection, font embedding
and a PDF backend. Results are returned as bytes, written to a stream, or
written to a file.
"""

from typing import Any, BinaryIO, Callable, Mapping, Optional, Union
from pathlib import Path

from docrender.config.logging import get_logger
from docrender.config.settings import Settings, get_settings
from docrender.core.errors import InvalidArgumentError
from docrender.core.rendering.fonts import configure_fonts
from docrender.core.rendering.html_canonicalizer import ensure_xhtml
from docrender.core.rendering.page_style import inject_page_style
from docrender.core.rendering.pdf_generator import PdfRendererFactory
from docrender.core.templates.engine import TemplateEngine
from docrender.core.templates.resolver import TemplateResolver, TemplateSourceChain
from docrender.models.schemas import PdfOptions, RenderRequest

logger = get_logger(__name__)

Model = Optional[Mapping[str, Any]]
PathLike = Union[str, Path]


class DocumentRenderer:
    """
    Renders templates to HTML and PDF.

    The template source chain belongs to the renderer instance. Configure it
    before sharing the renderer between threads; render calls only read it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        resolver: Optional[TemplateResolver] = None,
        backend: Optional[str] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.backend = backend or self.settings.pdf_backend
        self.logger: Any = logger.bind(component="document_renderer")  # structlog.BoundLoggerBase

        if resolver is None:
            resolver = TemplateResolver(package=self.settings.template_package)
            resolver.configure_chain(self.settings.template_prefix, self.settings.template_dir)
        self.resolver = resolver
        self.engine = TemplateEngine(resolver)

    # Template source configuration

    def configure_single(self, directory: PathLike) -> TemplateSourceChain:
        """Load templates from a single filesystem directory."""
        chain = self.resolver.configure_single(directory)
        self.engine.reload()
        return chain

    def configure_chain(
        self, embedded_prefix: Optional[str] = None, filesystem_dir: Optional[PathLike] = None
    ) -> TemplateSourceChain:
        """Load templates from bundled package data, then a filesystem directory."""
        chain = self.resolver.configure_chain(embedded_prefix, filesystem_dir)
        self.engine.reload()
        return chain

    def save_template(self, content: str, template_name: str) -> Path:
        """
        Persist template content under the filesystem template root.

        The root is created when missing. Returns the written path.

        When the chain has no filesystem tier (configure_chain fell back to
        bundled templates only), the file is written to
        ``settings.template_dir`` instead. That directory is not part of the
        chain, so the template is not resolvable until the chain is
        reconfigured to include it; a warning is logged.

        Raises:
            InvalidArgumentError: If the name is blank or escapes the root
        """
        if content is None:
            raise InvalidArgumentError("Template content cannot be null")
        if template_name is None or not template_name.strip():
            raise InvalidArgumentError("Template name cannot be null or empty")

        root = self.resolver.filesystem_root or self.settings.template_dir
        root.mkdir(parents=True, exist_ok=True)

        target = (root / template_name).resolve()
        if not target.is_relative_to(root.resolve()):
            raise InvalidArgumentError(f"Template name escapes the template directory: {template_name}")

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

        if self.resolver.filesystem_root is None:
            self.logger.warning(
                "Template saved outside the configured source chain", path=str(target)
            )
        else:
            self.logger.info("Template saved", path=str(target))
        return target

    # HTML rendering

    def render_template_to_html(self, template_name: str, model: Model = None) -> str:
        """Resolve a template by name and expand it against the data model."""
        return self.engine.render(template_name, model)

    def render_template_string_to_html(
        self, content: str, template_name: Optional[str] = None, model: Model = None
    ) -> str:
        """Expand inline template content; the name is only used in diagnostics."""
        return self.engine.render_string(content, template_name, model)

    # PDF rendering

    def prepare_html(self, html: str, options: PdfOptions) -> str:
        """
        Canonicalize HTML and inject the page style.

        Raises:
            InvalidArgumentError: If the HTML is blank
        """
        if html is None or not html.strip():
            raise InvalidArgumentError("HTML content is empty")

        return inject_page_style(ensure_xhtml(html), options)

    def render_html_to_pdf(self, html: str, options: Optional[PdfOptions] = None) -> bytes:
        """
        Render HTML to PDF bytes.

        Raises:
            InvalidArgumentError: If the HTML is blank
            RenderError: If the PDF backend fails
        """
        options = options or self.settings.default_pdf_options()
        xhtml = self.prepare_html(html, options)

        renderer = PdfRendererFactory.create_renderer(self.backend, self.settings)
        configure_fonts(renderer, options)

        return renderer.render(xhtml, options.base_uri)

    def render_html_to_pdf_stream(
        self, html: str, stream: BinaryIO, options: Optional[PdfOptions] = None
    ) -> int:
        """Render HTML to PDF and write it to a binary stream. Returns bytes written."""
        return self._write_stream(stream, self.render_html_to_pdf(html, options))

    def render_html_to_pdf_file(
        self, html: str, output_path: PathLike, options: Optional[PdfOptions] = None
    ) -> Path:
        """Render HTML to a PDF file, replacing any existing file."""
        return self._write_file(
            output_path, lambda fh: self.render_html_to_pdf_stream(html, fh, options)
        )

    def render_template_to_pdf(
        self, template_name: str, model: Model = None, options: Optional[PdfOptions] = None
    ) -> bytes:
        """Render a named template to PDF bytes."""
        html = self.render_template_to_html(template_name, model)
        return self.render_html_to_pdf(html, options)

    def render_template_to_pdf_stream(
        self,
        template_name: str,
        model: Model,
        stream: BinaryIO,
        options: Optional[PdfOptions] = None,
    ) -> int:
        """Render a named template to PDF and write it to a binary stream."""
        return self._write_stream(stream, self.render_template_to_pdf(template_name, model, options))

    def render_template_to_pdf_file(
        self,
        template_name: str,
        model: Model,
        output_path: PathLike,
        options: Optional[PdfOptions] = None,
    ) -> Path:
        """Render a named template to a PDF file, replacing any existing file."""
        return self._write_file(
            output_path,
            lambda fh: self.render_template_to_pdf_stream(template_name, model, fh, options),
        )

    def render_template_string_to_pdf(
        self,
        content: str,
        template_name: Optional[str] = None,
        model: Model = None,
        options: Optional[PdfOptions] = None,
    ) -> bytes:
        """Render inline template content to PDF bytes."""
        html = self.render_template_string_to_html(content, template_name, model)
        return self.render_html_to_pdf(html, options)

    def render_template_string_to_pdf_stream(
        self,
        content: str,
        template_name: Optional[str],
        model: Model,
        stream: BinaryIO,
        options: Optional[PdfOptions] = None,
    ) -> int:
        """Render inline template content to PDF and write it to a binary stream."""
        pdf_bytes = self.render_template_string_to_pdf(content, template_name, model, options)
        return self._write_stream(stream, pdf_bytes)

    def render_template_string_to_pdf_file(
        self,
        content: str,
        template_name: Optional[str],
        model: Model,
        output_path: PathLike,
        options: Optional[PdfOptions] = None,
    ) -> Path:
        """Render inline template content to a PDF file, replacing any existing file."""
        return self._write_file(
            output_path,
            lambda fh: self.render_template_string_to_pdf_stream(
                content, template_name, model, fh, options
            ),
        )

    def render(self, request: RenderRequest, options: Optional[PdfOptions] = None) -> bytes:
        """Render a RenderRequest, named or inline, to PDF bytes."""
        if request.is_inline:
            return self.render_template_string_to_pdf(
                request.content, request.name, request.model, options
            )
        return self.render_template_to_pdf(request.template_name, request.model, options)

    # Output helpers

    def _write_stream(self, stream: BinaryIO, pdf_bytes: bytes) -> int:
        written = stream.write(pdf_bytes)
        stream.flush()
        return written if written is not None else len(pdf_bytes)

    def _write_file(self, output_path: PathLike, write: Callable[[BinaryIO], Any]) -> Path:
        output = Path(output_path)
        output.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(output, "wb") as fh:
                write(fh)
        except Exception:
            output.unlink(missing_ok=True)
            raise

        self.logger.info("PDF created successfully", path=str(output))
        return output


def create_renderer(settings: Optional[Settings] = None, backend: Optional[str] = None) -> DocumentRenderer:
    """Create a renderer with a source chain built from settings."""
    return DocumentRenderer(settings=settings, backend=backend)


def render_template_to_html(template_name: str, model: Model = None) -> str:
    """Render a named template to HTML with a renderer built from settings."""
    return create_renderer().render_template_to_html(template_name, model)


def render_template_string_to_html(
    content: str, template_name: Optional[str] = None, model: Model = None
) -> str:
    """Render inline template content to HTML."""
    return create_renderer().render_template_string_to_html(content, template_name, model)


def render_html_to_pdf(html: str, options: Optional[PdfOptions] = None) -> bytes:
    """Render HTML to PDF bytes."""
    return create_renderer().render_html_to_pdf(html, options)


def render_template_to_pdf(
    template_name: str, model: Model = None, options: Optional[PdfOptions] = None
) -> bytes:
    """Render a named template to PDF bytes."""
    return create_renderer().render_template_to_pdf(template_name, model, options)


def render_template_string_to_pdf(
    content: str,
    template_name: Optional[str] = None,
    model: Model = None,
    options: Optional[PdfOptions] = None,
) -> bytes:
    """Render inline template content to PDF bytes."""
    return create_renderer().render_template_string_to_pdf(content, template_name, model, options)
