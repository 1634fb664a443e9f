"""Assemble completion requests from user input, skill context and history."""

from __future__ import annotations

from typing import Any, Sequence

from vysper import prompts
from vysper.context import NullContextProvider, SkillContextProvider
from vysper.errors import InvalidInput, NoContent
from vysper.llm.types import (
    DEFAULT_IMAGE_MIME_TYPE,
    PARAMETERS_BY_KIND,
    CompletionRequest,
    ConversationTurn,
    InlineData,
    Part,
    RequestKind,
    ScreenshotInput,
    Turn,
)
from vysper.logger import get_logger

log = get_logger("builder")

HISTORY_WINDOW = {
    RequestKind.PLAIN: 15,
    RequestKind.TRANSCRIPTION: 10,
    RequestKind.VISION: 5,
}
TRANSCRIPTION_RECENT_TURNS = 8

HistoryItem = ConversationTurn | dict[str, Any]


class RequestBuilder:
    def __init__(self, provider: SkillContextProvider | None = None) -> None:
        self._provider = provider or NullContextProvider()

    def build(
        self,
        kind: RequestKind,
        user_input: str | ScreenshotInput,
        skill: str,
        history: Sequence[HistoryItem] | None = None,
        language: str | None = None,
    ) -> CompletionRequest:
        if kind is RequestKind.VISION:
            if not isinstance(user_input, ScreenshotInput):
                raise InvalidInput("Vision requests need a ScreenshotInput")
            request = self._build_vision(user_input, skill, history, language)
        elif kind is RequestKind.TRANSCRIPTION:
            request = self._build_transcription(user_input, skill, history, language)
        else:
            request = self._build_plain(user_input, skill, history, language)

        if not request.contents:
            raise NoContent("No valid content to send to the generative API")
        log.debug(
            f"Built {kind.value} request | skill={skill} language={language or 'not specified'} "
            f"turns={len(request.contents)} system_instruction={request.system_instruction is not None}"
        )
        return request

    def _build_plain(
        self,
        text: Any,
        skill: str,
        history: Sequence[HistoryItem] | None,
        language: str | None,
    ) -> CompletionRequest:
        if not isinstance(text, str) or not text.strip():
            raise InvalidInput("Empty or invalid text provided")
        context = self._provider.get_skill_context(skill, language)
        contents = self._history_turns(RequestKind.PLAIN, history)
        contents.append(Turn.from_text("user", text))
        return CompletionRequest(
            contents=contents,
            generation=PARAMETERS_BY_KIND[RequestKind.PLAIN],
            system_instruction=context.skill_prompt or None,
            kind=RequestKind.PLAIN,
        )

    def _build_transcription(
        self,
        text: Any,
        skill: str,
        history: Sequence[HistoryItem] | None,
        language: str | None,
    ) -> CompletionRequest:
        clean_text = text.strip() if isinstance(text, str) else ""
        if not clean_text:
            raise InvalidInput("Empty or invalid transcription text provided")
        context = self._provider.get_skill_context(skill, language)
        filtering = prompts.transcription_prompt(skill, language)
        instruction = f"{context.skill_prompt}\n\n{filtering}" if context.skill_prompt else filtering

        contents = self._history_turns(RequestKind.TRANSCRIPTION, history)[-TRANSCRIPTION_RECENT_TURNS:]
        contents.append(Turn.from_text("user", clean_text))
        return CompletionRequest(
            contents=contents,
            generation=PARAMETERS_BY_KIND[RequestKind.TRANSCRIPTION],
            system_instruction=instruction,
            kind=RequestKind.TRANSCRIPTION,
        )

    def _build_vision(
        self,
        screenshot: ScreenshotInput,
        skill: str,
        history: Sequence[HistoryItem] | None,
        language: str | None,
    ) -> CompletionRequest:
        parts: list[Part] = []
        if screenshot.image:
            mime_type = screenshot.mime_type or DEFAULT_IMAGE_MIME_TYPE
            parts.append(Part(inline_data=InlineData(mime_type=mime_type, data=screenshot.image)))
        else:
            log.warning("Vision request has no image data; sending prompt only")
        prompt = screenshot.prompt.strip() if isinstance(screenshot.prompt, str) else ""
        parts.append(Part(text=prompt or prompts.DEFAULT_SCREENSHOT_PROMPT))

        contents = self._history_turns(RequestKind.VISION, history)
        contents.append(Turn(role="user", parts=parts))
        return CompletionRequest(
            contents=contents,
            generation=PARAMETERS_BY_KIND[RequestKind.VISION],
            system_instruction=prompts.vision_prompt(skill, language),
            kind=RequestKind.VISION,
        )

    def _history_turns(self, kind: RequestKind, history: Sequence[HistoryItem] | None) -> list[Turn]:
        window = HISTORY_WINDOW[kind]
        if history is None:
            source: Sequence[HistoryItem] = self._provider.get_conversation_history(window)
        else:
            source = list(history)[-window:]
        return filter_history(source)


def filter_history(history: Sequence[HistoryItem]) -> list[Turn]:
    """Drop system and empty turns and map roles onto user/model."""
    turns: list[Turn] = []
    for item in history:
        event = ConversationTurn.from_mapping(item) if isinstance(item, dict) else item
        if event.role == "system":
            continue
        if not isinstance(event.content, str) or not event.content.strip():
            continue
        role = "model" if event.role == "model" else "user"
        turns.append(Turn.from_text(role, event.content.strip()))
    return turns
