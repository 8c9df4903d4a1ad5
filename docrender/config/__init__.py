"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Template sources, PDF defaults and backend selection
- logging: Structured logging configuration
"""
