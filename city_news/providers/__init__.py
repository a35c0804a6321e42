"""
News provider implementations.

This package contains the abstract base class and concrete implementations
for the supported headline APIs (NewsData.io, NewsAPI.org).

To add a new provider:
1. Inherit from NewsProvider
2. Implement new_cursor(), build_params() and parse_page()
3. Add its record shape to core/normalize.py
4. Register it in factory.py
"""

from .base import NewsProvider
from .factory import available_providers, create_provider
from .newsapi import NewsApiProvider
from .newsdata import NewsDataProvider

__all__ = [
    "NewsProvider",
    "NewsDataProvider",
    "NewsApiProvider",
    "available_providers",
    "create_provider",
]
