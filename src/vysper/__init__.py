"""Resilient request orchestration for a generative-AI interview assistant."""

__version__ = "0.1.0"

from vysper.classifier import ErrorClassification, ErrorKind, classify
from vysper.config import Settings, load_settings
from vysper.context import NullContextProvider, SkillContextProvider, StaticContextProvider
from vysper.errors import InvalidInput, NotInitialized, RetriesExhausted, VysperError
from vysper.llm.types import ConversationTurn, RequestKind, ResultEnvelope, ResultMetadata
from vysper.service import ConnectionTestResult, LLMService

__all__ = [
    "ConnectionTestResult",
    "ConversationTurn",
    "ErrorClassification",
    "ErrorKind",
    "InvalidInput",
    "LLMService",
    "NotInitialized",
    "NullContextProvider",
    "RequestKind",
    "ResultEnvelope",
    "ResultMetadata",
    "RetriesExhausted",
    "Settings",
    "SkillContextProvider",
    "StaticContextProvider",
    "VysperError",
    "__version__",
    "classify",
    "load_settings",
]
