"""
Database module for the quote service.
Provides async relational storage for categories, authors and quotes.
"""

from .connection import DatabaseManager
from .operations import DatabaseOperations
from .models import Category, Author, Quote, NewQuote

__all__ = ['models', 'connection', 'operations', 'DatabaseManager', 'DatabaseOperations',
           'Category', 'Author', 'Quote', 'NewQuote']
