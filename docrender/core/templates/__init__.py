"""
Templates Module
================

Template source resolution and expansion.

Components:
- resolver: ordered template source chain with first-match lookup
- engine: Jinja2 expansion of named and inline templates
"""
