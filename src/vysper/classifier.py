"""Failure classification for upstream generative API calls.

Classification reads only the text of a failure. Rules are checked in table
order and the first rule with a matching phrase wins, so a message that
mentions both a connection problem and a quota is reported as a network
failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from vysper.errors import RetriesExhausted


class ErrorKind(str, Enum):
    NETWORK = "network"
    AUTH = "auth"
    QUOTA = "quota"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ErrorClassification:
    kind: ErrorKind
    retryable: bool
    suggested_action: str
    is_quota_error: bool = False

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "retryable": self.retryable,
            "suggested_action": self.suggested_action,
            "is_quota_error": self.is_quota_error,
        }


@dataclass(frozen=True)
class ClassificationRule:
    phrases: tuple[str, ...]
    classification: ErrorClassification


QUOTA_ACTION = (
    "API quota exceeded. Create a NEW Google Cloud project at "
    "https://aistudio.google.com/app/apikey for fresh quota, or wait for quota reset."
)

RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        phrases=(
            "fetch failed",
            "network error",
            "enotfound",
            "econnrefused",
            "econnreset",
            "connection refused",
            "connection reset",
            "connecterror",
            "name or service not known",
            "temporary failure in name resolution",
            "nodename nor servname",
            "getaddrinfo",
            "etimedout",
            "timed out",
            "connect timeout",
            "read timeout",
            "connecttimeout",
            "readtimeout",
            "writetimeout",
            "pooltimeout",
            "gateway timeout",
            "deadline exceeded",
            "deadline_exceeded",
        ),
        classification=ErrorClassification(
            kind=ErrorKind.NETWORK,
            retryable=True,
            suggested_action="Check internet connection and firewall settings",
        ),
    ),
    ClassificationRule(
        phrases=(
            "unauthorized",
            "unauthenticated",
            "invalid api key",
            "api key not valid",
            "permission_denied",
            "forbidden",
            "http 401",
            "http 403",
        ),
        classification=ErrorClassification(
            kind=ErrorKind.AUTH,
            retryable=False,
            suggested_action="Verify Gemini API key configuration",
        ),
    ),
    ClassificationRule(
        phrases=(
            "quota",
            "rate limit",
            "too many requests",
            "429",
            "resource_exhausted",
            "resource exhausted",
        ),
        classification=ErrorClassification(
            kind=ErrorKind.QUOTA,
            retryable=False,
            suggested_action=QUOTA_ACTION,
            is_quota_error=True,
        ),
    ),
    ClassificationRule(
        phrases=("request timeout",),
        classification=ErrorClassification(
            kind=ErrorKind.TIMEOUT,
            retryable=True,
            suggested_action="Check network latency or increase timeout",
        ),
    ),
)

UNKNOWN = ErrorClassification(
    kind=ErrorKind.UNKNOWN,
    retryable=False,
    suggested_action="Check logs for more details",
)


def classify(failure: BaseException | str) -> ErrorClassification:
    if isinstance(failure, RetriesExhausted):
        return failure.classification
    message = failure if isinstance(failure, str) else _failure_text(failure)
    lowered = message.lower()
    for rule in RULES:
        if any(phrase in lowered for phrase in rule.phrases):
            return rule.classification
    return UNKNOWN


def _failure_text(error: BaseException) -> str:
    # Type names carry meaning too: httpx.ConnectError often has an empty message.
    return f"{type(error).__name__}: {error}"
