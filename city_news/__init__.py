"""
City News - headline aggregation for a city dashboard.

This package pulls headlines for a city or search term from a primary and a
secondary news API, rotating API keys when quotas run out, paging through
both providers and merging the results into one deduplicated list.

Main entry point is the CLI via `city-news headlines` command.

Example:
    $ city-news headlines -q Pune -p 2
"""

__all__ = ["__version__", "AggregationController", "AppConfig", "Article", "load_config"]
__version__ = "0.1.0"

from .config import AppConfig, load_config
from .controller import AggregationController
from .core.types import Article
