"""
Unit Tests for Page Style Injection
===================================
"""

import pytest

from docrender.core.rendering.html_canonicalizer import ensure_xhtml
from docrender.core.rendering.page_style import (
    build_page_style,
    css_string,
    format_points,
    inject_page_style,
    insert_into_head,
)
from docrender.models.schemas import PageSize, PdfOptions

from tests.utils.assertions import assert_style_before_head_close


class TestBuildPageStyle:
    """Test style block construction."""

    def test_default_options(self):
        """Test style block for default options."""
        style = build_page_style(PdfOptions())

        assert style == "<style> @page { size: a4; margin: 36pt 36pt 36pt 36pt; } </style>"

    def test_margins_in_css_order(self):
        """Test margins are emitted top, right, bottom, left."""
        options = PdfOptions.builder().with_margins(1, 2, 3, 4).build()

        assert "margin: 1pt 2pt 3pt 4pt;" in build_page_style(options)

    def test_fractional_margins(self):
        """Test fractional margins keep their decimals."""
        options = PdfOptions.builder().with_margins(10.5, 0, 0.25, 72).build()

        assert "margin: 10.5pt 0pt 0.25pt 72pt;" in build_page_style(options)

    def test_large_and_precise_margins(self):
        """Test margins are never rounded or written with an exponent."""
        options = PdfOptions(margin_top=1234567, margin_right=12.3456789)

        assert "margin: 1234567pt 12.3456789pt 36pt 36pt;" in build_page_style(options)

    @pytest.mark.parametrize("page_size", list(PageSize))
    def test_page_sizes(self, page_size):
        """Test every page size maps to its CSS name."""
        options = PdfOptions.builder().with_page_size(page_size).build()

        assert f"size: {page_size.value.lower()};" in build_page_style(options)

    def test_no_font_rule_without_default_font(self):
        """Test no body rule is emitted without a default font."""
        assert "font-family" not in build_page_style(PdfOptions())

    def test_default_font_rule(self):
        """Test body font rule for a default font."""
        options = PdfOptions.builder().with_default_font("Open Sans").build()

        assert "body { font-family: 'Open Sans'; }" in build_page_style(options)

    def test_css_string_escapes_quotes(self):
        """Test CSS string quoting."""
        assert css_string("O'Brien Sans") == "'O\\'Brien Sans'"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, "0pt"),
            (72, "72pt"),
            (72.0, "72pt"),
            (100.0, "100pt"),
            (0.1, "0.1pt"),
            (1e7, "10000000pt"),
            (0.000125, "0.000125pt"),
        ],
    )
    def test_format_points(self, value, expected):
        """Test point formatting as plain decimals."""
        assert format_points(value) == expected


class TestInjectPageStyle:
    """Test style block placement."""

    def test_letter_with_72pt_margins_before_head_close(self):
        """Test LETTER page with 72pt margins is injected before </head>."""
        options = (
            PdfOptions.builder()
            .with_page_size(PageSize.LETTER)
            .with_margins(72, 72, 72, 72)
            .build()
        )

        html = inject_page_style("<html><head><title>t</title></head><body/></html>", options)

        assert_style_before_head_close(html, "size: letter;")
        assert_style_before_head_close(html, "margin: 72pt 72pt 72pt 72pt;")

    def test_synthesized_document_gets_style_in_head(self):
        """Test the style lands inside a synthesized head."""
        html = inject_page_style(ensure_xhtml("<p>x</p>"), PdfOptions())

        assert_style_before_head_close(html, "@page")
        assert html.index("<style>") > html.index("<head>")

    def test_document_without_head_gets_style_prepended(self):
        """Test documents without a head get the style prepended."""
        document = "<!DOCTYPE html><html><body><p>x</p></body></html>"

        html = inject_page_style(document, PdfOptions())

        assert html.startswith("<style> @page")
        assert html.endswith(document)

    def test_only_first_head_close(self):
        """Test only the first </head> receives the style."""
        document = "<head></head><body><pre>&lt;/head&gt;</pre></body><head></head>"

        html = inject_page_style(document, PdfOptions())

        assert html.count("<style>") == 1
        assert html.startswith("<head><style>")

    def test_uppercase_head_close(self):
        """Test head detection is case-insensitive."""
        html = inject_page_style("<HTML><HEAD></HEAD><BODY/></HTML>", PdfOptions())

        assert html.startswith("<HTML><HEAD><style>")

    def test_insert_into_head(self):
        """Test fragment insertion with and without a head."""
        assert insert_into_head("<head></head>", "<x/>") == "<head><x/></head>"
        assert insert_into_head("<p/>", "<x/>") == "<x/><p/>"
