"""Degraded answers for when the upstream service cannot be reached."""

from __future__ import annotations

from vysper.classifier import ErrorClassification
from vysper.llm.types import RequestKind, ResultEnvelope, ResultMetadata
from vysper.logger import get_logger

log = get_logger("fallback")

QUOTA_MESSAGE = (
    "API QUOTA EXCEEDED\n\n"
    "Your Gemini API key has hit its usage limit.\n\n"
    "To fix this:\n"
    "1. Go to https://aistudio.google.com/app/apikey\n"
    "2. Create a NEW Google Cloud project\n"
    "3. Generate a new API key from that project\n"
    "4. Update GEMINI_API_KEY in your .env file\n"
    "5. Restart the app\n\n"
    "Note: Keys from the same project share quota limits."
)

VISION_MESSAGE = (
    "I'm having trouble analyzing the screenshot right now. "
    "Please try again or check your internet connection and API key configuration."
)

SKILL_KEYWORDS: dict[str, tuple[str, ...]] = {
    "dsa": ("algorithm", "data structure", "array", "tree", "graph", "sort", "search", "complexity", "big o"),
    "programming": ("code", "function", "variable", "class", "method", "bug", "debug", "syntax"),
    "system-design": ("scalability", "database", "architecture", "microservice", "load balancer", "cache"),
    "behavioral": ("interview", "experience", "situation", "leadership", "conflict", "team"),
    "sales": ("customer", "deal", "negotiation", "price", "revenue", "prospect"),
    "presentation": ("slide", "audience", "public speaking", "presentation", "nervous"),
    "data-science": ("data", "model", "machine learning", "statistics", "analytics", "python", "pandas"),
    "devops": ("deployment", "ci/cd", "docker", "kubernetes", "infrastructure", "monitoring"),
    "negotiation": ("negotiate", "compromise", "agreement", "terms", "conflict resolution"),
}

QUESTION_INDICATORS = ("how", "what", "why", "when", "where", "can you", "could you", "should i", "?")


def looks_relevant(text: str, skill: str) -> bool:
    lowered = text.lower()
    keywords = SKILL_KEYWORDS.get(skill.lower(), ())
    if any(keyword in lowered for keyword in keywords):
        return True
    return any(indicator in lowered for indicator in QUESTION_INDICATORS)


def fallback_text(kind: RequestKind, text: str, skill: str, classification: ErrorClassification) -> str:
    if classification.is_quota_error:
        return QUOTA_MESSAGE
    if kind is RequestKind.VISION:
        return VISION_MESSAGE
    if looks_relevant(text, skill):
        return (
            f"I'm having trouble processing that right now, but it sounds like a {skill} question. "
            "Could you rephrase or ask more specifically about what you need help with?"
        )
    return f"Yeah, I'm listening. Ask your question relevant to {skill}."


class FallbackResponder:
    def respond(
        self,
        kind: RequestKind,
        text: str,
        skill: str,
        classification: ErrorClassification,
        *,
        request_id: int,
        elapsed_ms: int = 0,
        language: str | None = None,
    ) -> ResultEnvelope:
        log.info(f"Generating fallback response | kind={kind.value} skill={skill} error={classification.kind.value}")
        return ResultEnvelope(
            response=fallback_text(kind, text or "", skill, classification),
            metadata=ResultMetadata(
                skill=skill,
                language=language,
                elapsed_ms=elapsed_ms,
                request_id=request_id,
                used_fallback=True,
                kind=kind,
                error_kind=classification.kind.value,
            ),
        )
