"""
Pagination cursors.

The two providers page differently: NewsData returns an opaque `nextPage`
token with each page, NewsAPI takes a plain page number and never says
when results run out. Both are wrapped in the same small interface so the
controller does not care which one it is driving.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class PaginationCursor(ABC):
    """Continuation state for one provider within one session."""

    def __init__(self) -> None:
        self.exhausted = False

    @property
    @abstractmethod
    def first_page(self) -> bool:
        """True until the first page has been consumed."""
        raise NotImplementedError

    @abstractmethod
    def request_value(self) -> str | int | None:
        """Value of the page query parameter, or None to omit it."""
        raise NotImplementedError

    @abstractmethod
    def advance(self, batch_size: int, token: str | None) -> None:
        """Move past a page that returned `batch_size` records."""
        raise NotImplementedError

    @abstractmethod
    def reset(self) -> None:
        """Go back to the first page."""
        raise NotImplementedError


class TokenCursor(PaginationCursor):
    """Opaque continuation token; a page without a token is the last one."""

    def __init__(self) -> None:
        super().__init__()
        self._token: str | None = None
        self._started = False

    @property
    def first_page(self) -> bool:
        return not self._started

    def request_value(self) -> str | None:
        return self._token

    def advance(self, batch_size: int, token: str | None) -> None:
        self._started = True
        self._token = token or None
        self.exhausted = self._token is None

    def reset(self) -> None:
        self._token = None
        self._started = False
        self.exhausted = False


class PageNumberCursor(PaginationCursor):
    """Numbered pages starting at 1.

    The provider has no end-of-results flag, so a short page (fewer records
    than requested) is taken to be the last one. A provider may still return
    a short page that is not final; this cursor does not try to tell.
    """

    def __init__(self, page_size: int) -> None:
        super().__init__()
        self.page_size = page_size
        self.page = 1

    @property
    def first_page(self) -> bool:
        return self.page == 1

    def request_value(self) -> int:
        return self.page

    def advance(self, batch_size: int, token: str | None) -> None:
        self.page += 1
        self.exhausted = batch_size < self.page_size

    def reset(self) -> None:
        self.page = 1
        self.exhausted = False
