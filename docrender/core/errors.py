"""
Rendering Errors
================

Exception taxonomy for the document rendering pipeline and the
degrade-or-fail policy shared by the template resolver and font embedder.

Filesystem and stream failures are not wrapped: they surface as the
builtin ``OSError``.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Tuple, Type


class DocumentRenderError(Exception):
    """Base class for all rendering pipeline errors."""

    pass


class ConfigurationError(DocumentRenderError):
    """Raised when a template source or backend is configured with an invalid value."""

    pass


class InvalidArgumentError(DocumentRenderError, ValueError):
    """Raised when a required input is blank."""

    pass


class TemplateNotFoundError(DocumentRenderError, LookupError):
    """Raised when a template name is not resolvable in any configured source."""

    def __init__(self, template_name: str, sources: Tuple[str, ...] = ()) -> None:
        self.template_name = template_name
        self.sources = sources
        searched = f" (searched: {', '.join(sources)})" if sources else ""
        super().__init__(f"Template not found: {template_name}{searched}")


class TemplateError(DocumentRenderError):
    """Base class for template expansion failures."""

    def __init__(
        self, message: str, template_name: Optional[str] = None, lineno: Optional[int] = None
    ) -> None:
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        location = ""
        if template_name:
            location = f" [template {template_name}"
            location += f", line {lineno}]" if lineno else "]"
        super().__init__(f"{message}{location}")


class TemplateSyntaxError(TemplateError):
    """Raised for a malformed template directive."""

    pass


class TemplateEvaluationError(TemplateError):
    """Raised for an undefined reference or a failing expression."""

    pass


class RenderError(DocumentRenderError):
    """Raised when PDF layout or serialization fails."""

    pass


# Failures that reduce functionality instead of aborting the call:
# an unusable filesystem template tier and unreadable font files.
DEGRADABLE_ERRORS: Tuple[Type[BaseException], ...] = (OSError, ValueError, RenderError)


@contextmanager
def degradable(logger: Any, event: str, **context: Any) -> Iterator[None]:
    """
    Log and swallow degradable failures raised inside the block.

    Anything outside DEGRADABLE_ERRORS propagates unchanged.
    """
    try:
        yield
    except DEGRADABLE_ERRORS as e:
        logger.warning(event, error=str(e), error_type=type(e).__name__, **context)
