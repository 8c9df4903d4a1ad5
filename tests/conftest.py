"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, temporary template and font directories, and fake
PDF backends.
"""

import logging
import pytest
from pathlib import Path
from typing import Generator

from docrender.config.settings import Settings
from docrender.core.renderer import DocumentRenderer
from docrender.core.rendering.pdf_generator import PdfRendererFactory
from docrender.core.templates.resolver import TemplateResolver

from tests.utils.mocks import (
    BrokenFontRenderer,
    FailingPdfRenderer,
    FakePdfRenderer,
    NotAPdfRenderer,
)

GREETING_TEMPLATE = "<p>Hello ${name}!</p>"


@pytest.fixture(scope="session", autouse=True)
def register_fake_backends() -> None:
    """Make the fake PDF backends available to the renderer factory."""
    PdfRendererFactory.register("fake", FakePdfRenderer)
    PdfRendererFactory.register("failing", FailingPdfRenderer)
    PdfRendererFactory.register("not-a-pdf", NotAPdfRenderer)
    PdfRendererFactory.register("broken-font", BrokenFontRenderer)


@pytest.fixture(autouse=True)
def reset_fake_renderer() -> Generator[None, None, None]:
    """Clear the fake backend's recorded instances around each test."""
    FakePdfRenderer.reset()
    yield
    FakePdfRenderer.reset()


@pytest.fixture(autouse=True)
def capture_package_logs(caplog: pytest.LogCaptureFixture) -> Generator[None, None, None]:
    """Route the non-propagating docrender logger into caplog."""
    package_logger = logging.getLogger("docrender")
    package_logger.addHandler(caplog.handler)
    yield
    package_logger.removeHandler(caplog.handler)


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Filesystem template directory holding test.ftl."""
    directory = tmp_path / "templates"
    directory.mkdir()
    (directory / "test.ftl").write_text(GREETING_TEMPLATE, encoding="utf-8")
    return directory


@pytest.fixture
def font_dir(tmp_path: Path) -> Path:
    """Directory with font-like files, non-font files and a nested directory."""
    directory = tmp_path / "fonts"
    directory.mkdir()
    (directory / "Alpha.ttf").write_bytes(b"\x00\x01\x00\x00")
    (directory / "Beta.OTF").write_bytes(b"OTTO")
    (directory / "readme.txt").write_text("not a font")
    nested = directory / "nested"
    nested.mkdir()
    (nested / "Gamma.ttf").write_bytes(b"\x00\x01\x00\x00")
    return directory


@pytest.fixture
def test_settings(template_dir: Path) -> Settings:
    """Test settings using the fake PDF backend and the temporary template directory."""
    return Settings(
        _env_file=None,
        environment="testing",
        log_level="DEBUG",
        template_dir=template_dir,
        pdf_backend="fake",
    )


@pytest.fixture
def resolver(template_dir: Path) -> TemplateResolver:
    """Resolver over bundled templates and the temporary template directory."""
    resolver = TemplateResolver()
    resolver.configure_chain("templates", template_dir)
    return resolver


@pytest.fixture
def renderer(test_settings: Settings) -> DocumentRenderer:
    """Document renderer backed by the fake PDF backend."""
    return DocumentRenderer(settings=test_settings)


@pytest.fixture
def invoice_model() -> dict:
    """Data model for the bundled invoice template."""
    from datetime import date

    return {
        "customer": {"name": "ACME Corp"},
        "invoice": {
            "number": "INV-2024-001",
            "issued": date(2024, 3, 5),
            "currency": "EUR",
            "lines": [
                {"description": "Consulting", "quantity": 2, "price": 1500.0},
                {"description": "Travel", "quantity": 1, "price": 320.5},
            ],
        },
    }
