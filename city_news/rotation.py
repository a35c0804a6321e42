"""
Credential rotation and quota detection.

Providers hand out small daily quotas per key, so a deployment configures
several keys per provider. CredentialRotator walks them in order and never
goes back; classify_response decides whether a response means "this key is
out of quota" (rotate), "here is data" (use it) or "something else broke"
(give up on the provider).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .fetcher import FetchResult

_OK_STATUSES = {"ok", "success"}


class ResponseKind(Enum):
    OK = "ok"
    QUOTA_EXCEEDED = "quota_exceeded"
    OTHER_ERROR = "other_error"


@dataclass
class Classified:
    """A provider response sorted into one of three outcomes.

    Attributes:
        kind: The outcome
        payload: Decoded body for OK responses, None otherwise
        detail: Human-readable reason for non-OK outcomes
    """
    kind: ResponseKind
    payload: Any = None
    detail: str = ""


class CredentialRotator:
    """Ordered credentials for one provider with a forward-only index.

    Once every credential has been rejected for quota, the rotator stays
    exhausted for the rest of its life.
    """

    def __init__(self, credentials: list[str]):
        self._credentials = [c for c in credentials if c]
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def count(self) -> int:
        return len(self._credentials)

    @property
    def exhausted(self) -> bool:
        return self._index >= len(self._credentials)

    @property
    def current(self) -> str | None:
        """The credential to use next, or None when exhausted."""
        if self.exhausted:
            return None
        return self._credentials[self._index]

    def advance(self) -> None:
        """Retire the current credential."""
        if not self.exhausted:
            self._index += 1


def classify_response(result: FetchResult, vocabulary: tuple[str, ...]) -> Classified:
    """Classify a provider response.

    HTTP 429 always means quota. Otherwise an error response (non-2xx, or a
    body whose "status" is not ok/success) is inspected for quota vocabulary
    in its status, message and code fields. Successful bodies are never
    searched, since headlines can legitimately mention "rates" or "limits".

    Args:
        result: The fetched response
        vocabulary: Lower-case substrings that signal quota exhaustion

    Returns:
        Classified outcome
    """
    if result.status_code == 429:
        return Classified(ResponseKind.QUOTA_EXCEEDED, detail=_error_text(result.payload) or "HTTP 429")
    if result.error is not None:
        return Classified(ResponseKind.OTHER_ERROR, detail=result.error)

    payload = result.payload
    status = str(payload.get("status", "")).lower() if isinstance(payload, dict) else ""
    if result.ok and isinstance(payload, dict) and status in _OK_STATUSES:
        return Classified(ResponseKind.OK, payload=payload)

    text = _error_text(payload)
    if mentions_quota(text, vocabulary):
        return Classified(ResponseKind.QUOTA_EXCEEDED, detail=text)
    return Classified(ResponseKind.OTHER_ERROR, detail=text or f"HTTP {result.status_code}")


def mentions_quota(text: str, vocabulary: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in vocabulary)


def _error_text(payload: Any) -> str:
    """Collect status/message/code strings from an error body.

    NewsData nests them under "results"; NewsAPI keeps them at the top level.
    """
    if not isinstance(payload, dict):
        return ""
    parts: list[str] = []
    for source in (payload, payload.get("results")):
        if not isinstance(source, dict):
            continue
        for key in ("status", "message", "code"):
            value = source.get(key)
            if isinstance(value, str) and value:
                parts.append(value)
    return " ".join(parts)
