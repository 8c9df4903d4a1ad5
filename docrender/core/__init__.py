"""
Core Business Logic
==================

Core rendering pipeline modules.

Modules:
- templates: template source chain and Jinja2 expansion
- rendering: XHTML canonicalization, page styles, fonts and PDF backends
- renderer: the DocumentRenderer orchestrating both
- errors: exception taxonomy
"""
