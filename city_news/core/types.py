"""
Core data types for City News.

This module defines the structures shared by every stage of the engine:
- Article: Canonical headline record, whatever provider it came from
- ProviderRole: Which slot (primary or secondary) a provider occupies
- FailureKind: Why a fetch produced nothing usable
- NewsFeedView: Read model handed to the presentation layer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class Article:
    """A single headline in canonical form.

    Every field is text and defaults to an empty string, so an Article is
    always structurally valid even when the provider omitted data.

    Attributes:
        title: The article headline
        description: Short teaser text from the provider
        url: Link to the original article (may be empty)
        image: Link to a thumbnail image (may be empty)
        source: Publication name, e.g. "The Hindu"
        published_at: ISO-like publication timestamp (may be empty)
    """
    title: str = ""
    description: str = ""
    url: str = ""
    image: str = ""
    source: str = ""
    published_at: str = ""


class ProviderRole(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"

    @property
    def other(self) -> "ProviderRole":
        if self is ProviderRole.PRIMARY:
            return ProviderRole.SECONDARY
        return ProviderRole.PRIMARY


class FailureKind(Enum):
    """Reasons a provider fetch yielded no articles."""

    NETWORK_FAILURE = "network_failure"
    QUOTA_EXCEEDED = "quota_exceeded"
    NO_USABLE_RESULT = "no_usable_result"
    ALL_PROVIDERS_EXHAUSTED = "all_providers_exhausted"


@dataclass
class NewsFeedView:
    """Snapshot of a session for the presentation layer.

    Attributes:
        query: The query the snapshot belongs to
        articles: Accumulated, deduplicated articles in display order
        is_loading: True while a fetch is in flight
        has_more: True if load_more() could still yield articles
        error_message: User-facing message when nothing could be loaded
    """
    query: str = ""
    articles: list[Article] = field(default_factory=list)
    is_loading: bool = False
    has_more: bool = False
    error_message: str = ""
