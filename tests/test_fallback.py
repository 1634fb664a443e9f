from __future__ import annotations

import pytest

from vysper.classifier import classify
from vysper.fallback import QUOTA_MESSAGE, VISION_MESSAGE, FallbackResponder, fallback_text, looks_relevant
from vysper.llm.types import RequestKind

QUOTA = classify("HTTP 429: RESOURCE_EXHAUSTED")
NETWORK = classify("fetch failed")


@pytest.mark.parametrize("kind", list(RequestKind))
def test_quota_message_wins_for_every_kind(kind: RequestKind) -> None:
    assert fallback_text(kind, "how do I reverse a list?", "dsa", QUOTA) == QUOTA_MESSAGE


def test_vision_failures_get_the_screenshot_message() -> None:
    assert fallback_text(RequestKind.VISION, "", "programming", NETWORK) == VISION_MESSAGE


def test_relevant_question_asks_for_a_rephrase() -> None:
    text = fallback_text(RequestKind.PLAIN, "Explain tree traversal", "dsa", NETWORK)
    assert "sounds like a dsa question" in text


def test_unrelated_input_gets_the_listening_prompt() -> None:
    text = fallback_text(RequestKind.TRANSCRIPTION, "hello there", "sales", NETWORK)
    assert text == "Yeah, I'm listening. Ask your question relevant to sales."


def test_relevance_uses_keywords_and_question_words() -> None:
    assert looks_relevant("We need a load balancer", "system-design")
    assert looks_relevant("Could you help?", "negotiation")
    assert not looks_relevant("good morning", "devops")


def test_responder_marks_envelope_as_fallback() -> None:
    envelope = FallbackResponder().respond(
        RequestKind.PLAIN,
        "what is big o?",
        "dsa",
        QUOTA,
        request_id=4,
        elapsed_ms=12,
        language="python",
    )
    assert envelope.response == QUOTA_MESSAGE
    metadata = envelope.to_dict()["metadata"]
    assert metadata == {
        "skill": "dsa",
        "language": "python",
        "elapsed_ms": 12,
        "request_id": 4,
        "used_fallback": True,
        "kind": "plain",
        "error_kind": "quota",
    }
