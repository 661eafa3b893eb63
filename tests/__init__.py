"""
Quote Service Test Suite
========================

This package contains tests for the Quote Service including:
- Unit tests for individual components
- Integration tests running the API against a real SQLite database
"""
