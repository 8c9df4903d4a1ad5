"""
Template Engine
===============

Jinja2-based expansion of named or inline templates against a data model.
Interpolation uses ``${...}`` delimiters; statements keep Jinja2's ``{% %}``.
"""

from typing import Any, Dict, Mapping, Optional
from datetime import date, datetime
import sys
import time
import uuid
import jinja2

from docrender.config.logging import get_logger
from docrender.core.errors import (
    InvalidArgumentError,
    TemplateEvaluationError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from docrender.core.rendering.page_style import format_points
from docrender.core.templates.resolver import ResolverLoader, TemplateResolver

logger = get_logger(__name__)


def inline_template_name() -> str:
    """Unique diagnostic name for an unnamed inline template."""
    return f"inline-template-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def _error_lineno(template_name: Optional[str]) -> Optional[int]:
    """Recover the template line of the exception being handled, if any."""
    tb = sys.exc_info()[2]
    lineno = None
    while tb is not None:
        code = tb.tb_frame.f_code
        if code.co_filename == template_name or code.co_filename == "<template>":
            lineno = tb.tb_lineno
        tb = tb.tb_next
    return lineno


class TemplateEngine:
    """Expands templates resolved through a TemplateResolver."""

    def __init__(self, resolver: TemplateResolver) -> None:
        self.resolver = resolver
        self.logger: Any = logger.bind(component="template_engine")  # structlog.BoundLoggerBase
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 template environment over the resolver's source chain."""
        self.env = jinja2.Environment(
            loader=ResolverLoader(self.resolver),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
            undefined=jinja2.StrictUndefined,
            variable_start_string="${",
            variable_end_string="}",
            cache_size=0,
            keep_trailing_newline=True,
        )

        self._register_template_functions()

    def reload(self) -> None:
        """Rebuild the environment, dropping any state held by the previous one."""
        self._setup_jinja2_environment()

    def _register_template_functions(self) -> None:
        """Register custom Jinja2 filters."""

        def format_date(value: Any, fmt: str = "%Y-%m-%d") -> str:
            """Format a date or datetime value."""
            if isinstance(value, (date, datetime)):
                return value.strftime(fmt)
            return str(value)

        def format_number(value: Any, decimals: int = 2) -> str:
            """Format a number with thousands separators and fixed decimals."""
            return f"{float(value):,.{decimals}f}"

        self.env.filters["pt"] = format_points
        self.env.filters["date"] = format_date
        self.env.filters["number"] = format_number

    def render(self, template_name: str, model: Optional[Mapping[str, Any]] = None) -> str:
        """
        Resolve a template through the source chain and expand it.

        Raises:
            TemplateNotFoundError: If no source has the template
            TemplateSyntaxError: If the template is malformed
            TemplateEvaluationError: If expansion fails
        """
        # Resolving first keeps not-found reporting identical to TemplateResolver.resolve
        source = self.resolver.resolve(template_name)
        template = self._compile(source, template_name, filename=template_name)
        return self._expand(template, template_name, model)

    def render_string(
        self,
        content: str,
        template_name: Optional[str] = None,
        model: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Expand inline template content, bypassing the source chain.

        Raises:
            InvalidArgumentError: If the content is blank
            TemplateSyntaxError: If the template is malformed
            TemplateEvaluationError: If expansion fails
        """
        if content is None or not content.strip():
            raise InvalidArgumentError("Template content cannot be null or empty")

        if template_name is None or not template_name.strip():
            template_name = inline_template_name()

        template = self._compile(content, template_name)
        return self._expand(template, template_name, model)

    def _compile(
        self, source: str, template_name: str, filename: Optional[str] = None
    ) -> jinja2.Template:
        try:
            code = self.env.compile(source, template_name, filename)
            return self.env.template_class.from_code(
                self.env, code, self.env.make_globals(None), None
            )
        except jinja2.TemplateSyntaxError as e:
            self.logger.error(
                "Failed to parse template", template=template_name, line=e.lineno, error=e.message
            )
            raise TemplateSyntaxError(e.message or str(e), template_name, e.lineno) from e

    def _expand(
        self, template: jinja2.Template, template_name: str, model: Optional[Mapping[str, Any]]
    ) -> str:
        context: Dict[str, Any] = dict(model or {})
        try:
            html = template.render(context)
        except jinja2.TemplateNotFound as e:
            # {% include %} / {% extends %} of a missing template
            self.logger.error("Failed to load included template", template=template_name, missing=e.name)
            raise TemplateNotFoundError(str(e.name), self.resolver.chain.describe()) from e
        except jinja2.TemplateSyntaxError as e:
            self.logger.error("Failed to parse included template", template=template_name, error=e.message)
            raise TemplateSyntaxError(e.message or str(e), e.name or template_name, e.lineno) from e
        except OSError:
            raise
        except Exception as e:
            lineno = _error_lineno(template.filename)
            self.logger.error(
                "Failed to process template", template=template_name, line=lineno, error=str(e)
            )
            raise TemplateEvaluationError(str(e), template_name, lineno) from e

        self.logger.debug("Template expanded", template=template_name, html_length=len(html))
        return html
