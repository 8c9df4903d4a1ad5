"""
Unit Tests for Rendering Errors
===============================
"""

import pytest
import structlog

from docrender.core.errors import (
    ConfigurationError,
    DocumentRenderError,
    InvalidArgumentError,
    RenderError,
    TemplateEvaluationError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    degradable,
)


class TestErrorMessages:
    """Test error formatting and hierarchy."""

    def test_hierarchy(self):
        """Test error inheritance."""
        for error_class in (
            ConfigurationError,
            InvalidArgumentError,
            TemplateNotFoundError,
            TemplateSyntaxError,
            TemplateEvaluationError,
            RenderError,
        ):
            assert issubclass(error_class, DocumentRenderError)

        assert issubclass(InvalidArgumentError, ValueError)
        assert issubclass(TemplateNotFoundError, LookupError)

    def test_template_not_found(self):
        """Test not found message lists the searched sources."""
        error = TemplateNotFoundError("a.ftl", ("package:docrender/templates", "directory:/t"))

        assert str(error) == (
            "Template not found: a.ftl (searched: package:docrender/templates, directory:/t)"
        )
        assert str(TemplateNotFoundError("a.ftl")) == "Template not found: a.ftl"

    def test_template_error_location(self):
        """Test template errors append name and line."""
        assert str(TemplateSyntaxError("bad tag", "a.ftl", 3)) == "bad tag [template a.ftl, line 3]"
        assert str(TemplateEvaluationError("undefined", "a.ftl")) == "undefined [template a.ftl]"
        assert str(TemplateEvaluationError("undefined")) == "undefined"


class TestDegradable:
    """Test the degrade-or-fail policy."""

    @pytest.fixture
    def log(self):
        """Create a package logger."""
        return structlog.get_logger("docrender.tests")

    @pytest.mark.parametrize(
        "error",
        [OSError("disk"), PermissionError("denied"), ValueError("bad"), RenderError("layout")],
    )
    def test_swallows_degradable_errors(self, log, error, caplog):
        """Test degradable errors are logged and swallowed."""
        with degradable(log, "Degraded", item="x"):
            raise error

        assert "Degraded" in caplog.text

    @pytest.mark.parametrize("error", [KeyError("k"), RuntimeError("r"), ConfigurationError("c")])
    def test_propagates_other_errors(self, log, error):
        """Test other errors propagate unchanged."""
        with pytest.raises(type(error)):
            with degradable(log, "Degraded"):
                raise error

    def test_block_without_error(self, log):
        """Test the block runs normally without errors."""
        ran = []

        with degradable(log, "Degraded"):
            ran.append(True)

        assert ran == [True]
