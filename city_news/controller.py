"""
Aggregation controller for City News.

This module coordinates the whole engine for one query at a time:
1. A query change starts a fresh AggregationSession (older ones go stale)
2. The primary provider's first page is fetched, rotating credentials on quota
3. If the primary has nothing to give, the secondary provider is tried
4. load_more() pulls the next page from the active provider and switches
   to the other provider once the active one runs dry

Everything runs on one asyncio loop. Network calls are the only await
points; every result is checked against the session generation before it
is applied, which is how superseded fetches get discarded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

import httpx

from .config import AppConfig, get_credentials
from .core.dedup import merge_articles
from .core.recency import prefer_today
from .core.types import Article, FailureKind, NewsFeedView, ProviderRole
from .logging_utils import log_event, redact_credential
from .pagination import PaginationCursor
from .providers.base import NewsProvider
from .providers.factory import create_provider
from .rotation import Classified, CredentialRotator, ResponseKind

NETWORK_ERROR_MESSAGE = "Unable to fetch news."
EMPTY_ERROR_MESSAGE = "No news available right now."

FeedListener = Callable[[NewsFeedView], None]


class ControllerState(Enum):
    IDLE = "idle"
    FETCHING_PRIMARY_FIRST_PAGE = "fetching_primary_first_page"
    FETCHING_SECONDARY_FIRST_PAGE = "fetching_secondary_first_page"
    READY = "ready"
    FETCHING_MORE = "fetching_more"
    EXHAUSTED = "exhausted"


_FETCHING_STATES = frozenset(
    {
        ControllerState.FETCHING_PRIMARY_FIRST_PAGE,
        ControllerState.FETCHING_SECONDARY_FIRST_PAGE,
        ControllerState.FETCHING_MORE,
    }
)


@dataclass
class ProviderState:
    """Per-provider state for one session.

    Attributes:
        credentials: Forward-only credential rotator
        cursor: Pagination position
        failed: Set when the provider returned an error other than quota
        attempts: Number of HTTP requests issued to this provider
    """
    credentials: CredentialRotator
    cursor: PaginationCursor
    failed: bool = False
    attempts: int = 0

    @property
    def active_credential_index(self) -> int:
        return self.credentials.index

    @property
    def exhausted(self) -> bool:
        return self.failed or self.cursor.exhausted or self.credentials.exhausted


@dataclass
class AggregationSession:
    """Everything known about one query.

    Replaced wholesale when the query changes; load_more() mutates it in place.
    """
    query: str
    generation: int
    provider_states: dict[ProviderRole, ProviderState]
    active_provider: ProviderRole = ProviderRole.PRIMARY
    accumulated: list[Article] = field(default_factory=list)
    state: ControllerState = ControllerState.IDLE
    in_flight: bool = False
    last_failure: FailureKind | None = None
    error_message: str = ""

    @property
    def providers_left(self) -> bool:
        return any(not ps.exhausted for ps in self.provider_states.values())

    @property
    def has_more(self) -> bool:
        return self.state is not ControllerState.EXHAUSTED and self.providers_left


@dataclass
class PageOutcome:
    """What one page fetch contributed to the session."""
    added: int = 0
    failure: FailureKind | None = None


class AggregationController:
    """Owns the current AggregationSession and drives its state machine."""

    def __init__(
        self,
        providers: dict[ProviderRole, NewsProvider],
        credentials: dict[ProviderRole, list[str]],
        default_query: str = "India",
        prefer_today_on_first_page: bool = True,
        title_threshold: int | None = None,
        clock: Callable[[], date] = date.today,
        logger: logging.Logger | None = None,
    ):
        self._providers = providers
        self._credentials = credentials
        self._default_query = default_query
        self._prefer_today = prefer_today_on_first_page
        self._title_threshold = title_threshold
        self._clock = clock
        self._logger = logger or logging.getLogger("city_news.controller")
        self._generation = 0
        self._session: AggregationSession | None = None
        self._listeners: list[FeedListener] = []

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        clients: dict[ProviderRole, httpx.AsyncClient] | None = None,
        clock: Callable[[], date] = date.today,
        logger: logging.Logger | None = None,
    ) -> "AggregationController":
        clients = clients or {}
        providers = {
            ProviderRole.PRIMARY: create_provider(cfg.primary, clients.get(ProviderRole.PRIMARY)),
            ProviderRole.SECONDARY: create_provider(cfg.secondary, clients.get(ProviderRole.SECONDARY)),
        }
        credentials = {
            ProviderRole.PRIMARY: get_credentials(cfg.primary),
            ProviderRole.SECONDARY: get_credentials(cfg.secondary),
        }
        threshold = cfg.dedup.title_similarity_threshold if cfg.dedup.fuzzy_titles else None
        return cls(
            providers,
            credentials,
            default_query=cfg.news.default_query,
            prefer_today_on_first_page=cfg.news.prefer_today,
            title_threshold=threshold,
            clock=clock,
            logger=logger,
        )

    @property
    def session(self) -> AggregationSession | None:
        return self._session

    @property
    def state(self) -> ControllerState:
        if self._session is None:
            return ControllerState.IDLE
        return self._session.state

    @property
    def view(self) -> NewsFeedView:
        session = self._session
        if session is None:
            return NewsFeedView()
        return NewsFeedView(
            query=session.query,
            articles=list(session.accumulated),
            is_loading=session.in_flight,
            has_more=session.has_more,
            error_message=session.error_message,
        )

    def subscribe(self, listener: FeedListener) -> Callable[[], None]:
        """Call `listener` with a fresh view after every state transition.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def set_query(self, query: str) -> None:
        """Start a new session for `query` and load its first page."""
        self._generation += 1
        session = AggregationSession(
            query=query.strip() or self._default_query,
            generation=self._generation,
            provider_states={
                role: ProviderState(
                    credentials=CredentialRotator(self._credentials.get(role, [])),
                    cursor=provider.new_cursor(),
                )
                for role, provider in self._providers.items()
            },
        )
        self._session = session
        session.in_flight = True
        log_event(
            self._logger,
            "Session start",
            event="session_start",
            query=session.query,
            generation=session.generation,
        )

        try:
            for role in (ProviderRole.PRIMARY, ProviderRole.SECONDARY):
                session.active_provider = role
                if role is ProviderRole.PRIMARY:
                    session.state = ControllerState.FETCHING_PRIMARY_FIRST_PAGE
                else:
                    session.state = ControllerState.FETCHING_SECONDARY_FIRST_PAGE
                self._notify()

                outcome = await self._fetch_page(session, role)
                if outcome is None:
                    return
                if outcome.added > 0 or not session.provider_states[role].exhausted:
                    break
                if role is ProviderRole.PRIMARY:
                    log_event(
                        self._logger,
                        "Falling back to secondary provider",
                        event="provider_switch",
                        query=session.query,
                        reason=outcome.failure.value if outcome.failure else None,
                    )

            self._settle(session)
        finally:
            self._release(session)

    async def load_more(self) -> None:
        """Fetch the next page; a no-op unless the session is READY."""
        session = self._session
        if session is None or session.in_flight or session.state is not ControllerState.READY:
            return

        session.state = ControllerState.FETCHING_MORE
        session.in_flight = True
        try:
            self._notify()

            while True:
                role = session.active_provider
                if session.provider_states[role].exhausted:
                    other = role.other
                    if session.provider_states[other].exhausted:
                        break
                    session.active_provider = other
                    session.provider_states[other].cursor.reset()
                    log_event(
                        self._logger,
                        "Switching provider",
                        event="provider_switch",
                        query=session.query,
                        provider=other.value,
                    )
                    continue

                outcome = await self._fetch_page(session, role)
                if outcome is None:
                    return
                if outcome.added > 0 or not session.provider_states[role].exhausted:
                    break

            self._settle(session)
        finally:
            self._release(session)

    async def aclose(self) -> None:
        for provider in self._providers.values():
            await provider.close()

    async def _fetch_page(self, session: AggregationSession, role: ProviderRole) -> PageOutcome | None:
        """Fetch the next page of `role` and merge it into the session.

        Returns:
            PageOutcome, or None if the session went stale meanwhile
        """
        provider = self._providers[role]
        ps = session.provider_states[role]
        first_page = ps.cursor.first_page

        classified = await self._request_with_rotation(session, role)
        if classified is None:
            return None

        if classified.kind is ResponseKind.QUOTA_EXCEEDED:
            return self._provider_exhausted(session, role, FailureKind.QUOTA_EXCEEDED, classified.detail)
        if classified.kind is ResponseKind.OTHER_ERROR:
            ps.failed = True
            return self._provider_exhausted(session, role, FailureKind.NETWORK_FAILURE, classified.detail)

        records, token = provider.parse_page(classified.payload)
        ps.cursor.advance(len(records), token)
        batch = provider.normalize(records)
        if first_page and self._prefer_today:
            batch = prefer_today(batch, self._clock())

        before = len(session.accumulated)
        session.accumulated = merge_articles(session.accumulated, batch, self._title_threshold)
        added = len(session.accumulated) - before
        log_event(
            self._logger,
            "Page merged",
            event="page_merged",
            provider=provider.name,
            received=len(records),
            added=added,
            exhausted=ps.exhausted,
        )

        if added == 0 and ps.exhausted:
            return self._provider_exhausted(session, role, FailureKind.NO_USABLE_RESULT, "empty final page")
        return PageOutcome(added=added)

    async def _request_with_rotation(self, session: AggregationSession, role: ProviderRole) -> Classified | None:
        """Issue one logical request, retrying with the next credential on quota.

        At most one attempt per configured credential. Returns None as soon
        as the session is superseded.
        """
        provider = self._providers[role]
        ps = session.provider_states[role]

        while not ps.credentials.exhausted:
            credential = ps.credentials.current or ""
            page = ps.cursor.request_value()
            log_event(
                self._logger,
                "Provider request",
                level=logging.DEBUG,
                event="provider_request",
                provider=provider.name,
                credential=redact_credential(credential),
                page=page,
            )
            ps.attempts += 1
            result = await provider.fetch_page(session.query, credential, page)
            if session.generation != self._generation:
                log_event(
                    self._logger,
                    "Discarding stale result",
                    level=logging.DEBUG,
                    event="stale_result",
                    query=session.query,
                    generation=session.generation,
                )
                return None

            classified = provider.classify(result)
            if classified.kind is not ResponseKind.QUOTA_EXCEEDED:
                return classified

            log_event(
                self._logger,
                "Quota exceeded, rotating credential",
                level=logging.INFO,
                event="quota_rotate",
                provider=provider.name,
                credential=redact_credential(credential),
                detail=classified.detail,
            )
            ps.credentials.advance()

        return Classified(ResponseKind.QUOTA_EXCEEDED, detail="all credentials exhausted")

    def _provider_exhausted(
        self,
        session: AggregationSession,
        role: ProviderRole,
        failure: FailureKind,
        detail: str,
    ) -> PageOutcome:
        session.last_failure = failure
        log_event(
            self._logger,
            "Provider exhausted",
            level=logging.WARNING if failure is FailureKind.NETWORK_FAILURE else logging.INFO,
            event="provider_exhausted",
            provider=self._providers[role].name,
            reason=failure.value,
            detail=detail,
        )
        return PageOutcome(added=0, failure=failure)

    def _settle(self, session: AggregationSession) -> None:
        session.in_flight = False
        if session.providers_left:
            session.state = ControllerState.READY
            log_event(
                self._logger,
                "Session ready",
                event="session_ready",
                query=session.query,
                articles=len(session.accumulated),
                provider=session.active_provider.value,
            )
        else:
            session.state = ControllerState.EXHAUSTED
            if not session.accumulated:
                if session.last_failure is FailureKind.NETWORK_FAILURE:
                    session.error_message = NETWORK_ERROR_MESSAGE
                else:
                    session.error_message = EMPTY_ERROR_MESSAGE
            log_event(
                self._logger,
                "Session exhausted",
                event="session_exhausted",
                query=session.query,
                articles=len(session.accumulated),
                reason=FailureKind.ALL_PROVIDERS_EXHAUSTED.value,
            )
        self._notify()

    def _release(self, session: AggregationSession) -> None:
        # Only does work when the fetch ended without reaching _settle.
        if not session.in_flight:
            return
        session.in_flight = False
        if session.generation == self._generation and session.state in _FETCHING_STATES:
            session.state = ControllerState.READY if session.providers_left else ControllerState.EXHAUSTED

    def _notify(self) -> None:
        view = self.view
        for listener in list(self._listeners):
            listener(view)
