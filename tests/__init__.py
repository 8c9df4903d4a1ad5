"""
Test Suite
==========

Test suite matching the docrender/ package structure.

Test Categories:
- unit: Unit tests for individual components, PDF backends replaced by fakes
- integration: Full pipeline tests producing real PDFs through WeasyPrint
"""
