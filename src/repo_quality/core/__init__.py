"""Core business logic: AI providers, scoring, analysis, and data models.

This module is framework-agnostic. It has no dependency on MCP or any server
framework and never reads the process environment; the server passes
configuration in.
"""
