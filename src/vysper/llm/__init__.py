"""Transports and request types for generative API access."""

from vysper.llm.client import Transport, create_transports, extract_text, parse_response_body, serialize_request
from vysper.llm.httpx_transport import HttpxTransport
from vysper.llm.mock import MockTransport
from vysper.llm.requests_transport import RequestsTransport
from vysper.llm.types import (
    CompletionRequest,
    ConversationTurn,
    GenerationParameters,
    InlineData,
    Part,
    RequestKind,
    ResultEnvelope,
    ResultMetadata,
    ScreenshotInput,
    SkillContext,
    Turn,
)

__all__ = [
    "CompletionRequest",
    "ConversationTurn",
    "GenerationParameters",
    "HttpxTransport",
    "InlineData",
    "MockTransport",
    "Part",
    "RequestKind",
    "RequestsTransport",
    "ResultEnvelope",
    "ResultMetadata",
    "ScreenshotInput",
    "SkillContext",
    "Transport",
    "Turn",
    "create_transports",
    "extract_text",
    "parse_response_body",
    "serialize_request",
]
