"""
Core domain models and business logic.

This package contains data types and the pure steps of the news pipeline
(normalization, deduplication, recency policy) that are independent of any
provider or network code.
"""

from .types import Article, FailureKind, NewsFeedView, ProviderRole
from .normalize import normalize_article, normalize_batch
from .dedup import identity_key, merge_articles
from .recency import prefer_today

__all__ = [
    "Article",
    "FailureKind",
    "NewsFeedView",
    "ProviderRole",
    "normalize_article",
    "normalize_batch",
    "identity_key",
    "merge_articles",
    "prefer_today",
]
