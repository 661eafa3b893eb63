"""
API module for the quote service.
Provides the FastAPI-based HTTP interface for categories, authors and quotes.
"""

__all__ = ['app', 'routes', 'models', 'middleware']
