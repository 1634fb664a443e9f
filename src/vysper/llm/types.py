"""Core request/response types for generative completion calls."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

Role = Literal["user", "model"]

DEFAULT_IMAGE_MIME_TYPE = "image/png"


class RequestKind(str, Enum):
    PLAIN = "plain"
    TRANSCRIPTION = "transcription"
    VISION = "vision"


@dataclass(frozen=True)
class InlineData:
    mime_type: str
    data: bytes

    def to_wire(self) -> dict[str, Any]:
        return {
            "mimeType": self.mime_type,
            "data": base64.b64encode(self.data).decode("ascii"),
        }


@dataclass(frozen=True)
class Part:
    text: str | None = None
    inline_data: InlineData | None = None

    def to_wire(self) -> dict[str, Any]:
        if self.inline_data is not None:
            return {"inlineData": self.inline_data.to_wire()}
        return {"text": self.text or ""}


@dataclass(frozen=True)
class Turn:
    role: Role
    parts: list[Part]

    @classmethod
    def from_text(cls, role: Role, text: str) -> "Turn":
        return cls(role=role, parts=[Part(text=text)])

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.parts if part.text is not None)

    def to_wire(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "parts": [part.to_wire() for part in self.parts],
        }


@dataclass(frozen=True)
class GenerationParameters:
    temperature: float | None = None
    max_output_tokens: int | None = None
    top_k: int | None = None
    top_p: float | None = None

    def to_wire(self) -> dict[str, Any]:
        config: dict[str, Any] = {}

        def add_optional(key: str, value: Any) -> None:
            if value is not None:
                config[key] = value

        add_optional("temperature", self.temperature)
        add_optional("maxOutputTokens", self.max_output_tokens)
        add_optional("topK", self.top_k)
        add_optional("topP", self.top_p)
        return config


CHAT_PARAMETERS = GenerationParameters(temperature=0.7, max_output_tokens=2048, top_k=40, top_p=0.95)
VISION_PARAMETERS = GenerationParameters(temperature=0.7, max_output_tokens=4096, top_k=40, top_p=0.95)
CONNECTION_TEST_PARAMETERS = GenerationParameters(temperature=0.0, max_output_tokens=10)

PARAMETERS_BY_KIND = {
    RequestKind.PLAIN: CHAT_PARAMETERS,
    RequestKind.TRANSCRIPTION: CHAT_PARAMETERS,
    RequestKind.VISION: VISION_PARAMETERS,
}


@dataclass
class CompletionRequest:
    contents: list[Turn]
    generation: GenerationParameters
    system_instruction: str | None = None
    kind: RequestKind = RequestKind.PLAIN

    @property
    def final_turn(self) -> Turn:
        return self.contents[-1]

    def to_wire(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "contents": [turn.to_wire() for turn in self.contents],
            "generationConfig": self.generation.to_wire(),
        }
        if self.system_instruction:
            body["systemInstruction"] = {"parts": [{"text": self.system_instruction}]}
        return body


@dataclass(frozen=True)
class ConversationTurn:
    role: str
    content: Any
    timestamp: float | None = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ConversationTurn":
        return cls(
            role=str(data.get("role", "user")),
            content=data.get("content"),
            timestamp=data.get("timestamp"),
        )


@dataclass(frozen=True)
class SkillContext:
    skill: str
    skill_prompt: str
    requires_language: bool = False


@dataclass(frozen=True)
class ScreenshotInput:
    image: bytes
    mime_type: str | None = None
    prompt: str = ""


@dataclass(frozen=True)
class ResultMetadata:
    skill: str
    language: str | None
    elapsed_ms: int
    request_id: int
    used_fallback: bool
    kind: RequestKind
    error_kind: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "skill": self.skill,
            "language": self.language,
            "elapsed_ms": self.elapsed_ms,
            "request_id": self.request_id,
            "used_fallback": self.used_fallback,
            "kind": self.kind.value,
            "error_kind": self.error_kind,
        }


@dataclass(frozen=True)
class ResultEnvelope:
    response: str
    metadata: ResultMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "response": self.response,
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class AttemptRecord:
    attempt: int
    transport: str
    error: str | None = None
    delay_s: float | None = None
