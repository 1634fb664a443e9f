"""Exception hierarchy for vysper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vysper.classifier import ErrorClassification


class VysperError(Exception):
    """Base class for every failure raised by vysper."""


class InvalidInput(VysperError, ValueError):
    """The caller supplied input that cannot produce a request."""


class NotInitialized(VysperError):
    """The service has no usable credentials."""


class NoContent(VysperError):
    """Filtering left nothing to send upstream."""


class TransportError(VysperError):
    """The network call itself failed."""


@dataclass
class HTTPStatusError(TransportError):
    status_code: int
    body_preview: str

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.body_preview}"


class AttemptTimeout(TransportError):
    def __init__(self, timeout_s: float) -> None:
        super().__init__("Request timeout")
        self.timeout_s = timeout_s


class ResponseError(VysperError):
    """The upstream answered but the body could not be used."""


class MalformedResponse(ResponseError):
    pass


class EmptyResponse(ResponseError):
    pass


class RetriesExhausted(VysperError):
    def __init__(
        self,
        attempts: int,
        classification: ErrorClassification,
        original: BaseException,
    ) -> None:
        super().__init__(f"Generative API failed after {attempts} attempts: {original}")
        self.attempts = attempts
        self.classification = classification
        self.original = original
