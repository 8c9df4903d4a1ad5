"""
Rendering Module
===============

HTML canonicalization and PDF creation.

Components:
- html_canonicalizer: wrap bare markup into an XHTML document
- page_style: @page size, margins and default font injection
- fonts: font directory embedding
- pdf_generator: WeasyPrint and Chromium PDF backends
"""
