"""
Data Models
===========

Pydantic models for render requests and PDF options.
"""
