"""Skill-context providers: where conversation history and skill prompts come from."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from vysper import prompts
from vysper.llm.types import ConversationTurn, SkillContext


@runtime_checkable
class SkillContextProvider(Protocol):
    def get_conversation_history(self, limit: int) -> Sequence[ConversationTurn]:
        """Return up to `limit` most recent turns, oldest first."""

    def get_skill_context(self, skill: str, language: str | None = None) -> SkillContext:
        """Resolve the system prompt for a skill, with any language directive applied."""


def local_skill_context(skill: str, language: str | None = None) -> SkillContext:
    return SkillContext(
        skill=skill,
        skill_prompt=prompts.skill_prompt(skill, language),
        requires_language=prompts.requires_language(skill),
    )


class NullContextProvider:
    """Used when no session store is attached.

    Contributes no history of its own, so only caller-supplied history reaches
    the request, and synthesizes skill prompts locally.
    """

    def get_conversation_history(self, limit: int) -> Sequence[ConversationTurn]:
        return []

    def get_skill_context(self, skill: str, language: str | None = None) -> SkillContext:
        return local_skill_context(skill, language)


class StaticContextProvider:
    """In-memory provider over a fixed list of turns."""

    def __init__(
        self,
        turns: Sequence[ConversationTurn] = (),
        skill_prompts: dict[str, str] | None = None,
    ) -> None:
        self._turns = list(turns)
        self._skill_prompts = dict(skill_prompts or {})

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)

    def get_conversation_history(self, limit: int) -> Sequence[ConversationTurn]:
        return list(self._turns[-limit:]) if limit > 0 else []

    def get_skill_context(self, skill: str, language: str | None = None) -> SkillContext:
        prompt = self._skill_prompts.get(skill)
        if prompt is None:
            return local_skill_context(skill, language)
        if language and prompts.requires_language(skill):
            prompt = f"{prompt}\n\n{prompts.language_directive(language)}"
        return SkillContext(skill=skill, skill_prompt=prompt, requires_language=prompts.requires_language(skill))
