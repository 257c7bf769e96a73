"""
Trivia questions gating each self-role.

:func:`generate_question` asks the configured LLM backend for a four-option
multiple choice question about the role. It never raises: any failure
(transport error, timeout, malformed JSON, wrong shape) is logged and the
static fallback table is used instead.
"""
from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from nakama.clients import oai, ollama
from nakama.config import core, local_llm

logger = logging.getLogger(__name__)

OPTION_COUNT = 4

QUESTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "question": {"type": "string"},
        "options": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": OPTION_COUNT,
            "maxItems": OPTION_COUNT,
        },
        "correctAnswer": {"type": "string"},
    },
    "required": ["question", "options", "correctAnswer"],
    "additionalProperties": False,
}

_FENCE_RE = re.compile(r"```(?:json)?\s*")


@dataclass(frozen=True)
class QuestionData:
    question: str
    options: tuple[str, ...]
    correct_answer: str


@dataclass(frozen=True)
class QuestionResult:
    """Outcome of a single generation attempt; ``reason`` is set on failure."""

    data: QuestionData | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.data is not None


_FALLBACK_QUESTIONS: dict[str, QuestionData] = {
    "🧠 Logic Lords": QuestionData(
        question="What is the time complexity of binary search?",
        options=("O(1)", "O(log n)", "O(n)", "O(n²)"),
        correct_answer="O(log n)",
    ),
    "👾 Game On": QuestionData(
        question="Which gaming platform do you primarily use?",
        options=("PC", "PlayStation", "Xbox", "Nintendo"),
        correct_answer="PC",
    ),
    "📽️ Cinephile": QuestionData(
        question="What is your favorite movie genre?",
        options=("Action", "Comedy", "Drama", "Sci-Fi"),
        correct_answer="Drama",
    ),
    "💼 Parul Alumni": QuestionData(
        question="What is the fare of chhagda from waghodia chowkdi to parul university?",
        options=("Rs. 20", "Rs. 25", "Rs. 30", "Rs. 35"),
        correct_answer="Rs. 30",
    ),
}

GENERIC_QUESTION = QuestionData(
    question="Are you sure you want this role?",
    options=("Yes", "No", "Maybe", "Not sure"),
    correct_answer="Yes",
)


def build_prompt(role_name: str, category: str) -> str:
    return (
        "You are a role verification system. Generate a verification question for a "
        f'Discord role named "{role_name}" in the category "{category}".\n\n'
        "Return a JSON object with this exact structure:\n"
        "{\n"
        '    "question": "A relevant question to verify if the user belongs to this role",\n'
        '    "options": ["4 different options, one of which is correct"],\n'
        '    "correctAnswer": "The correct option from the options array"\n'
        "}\n\n"
        "Guidelines:\n"
        "- For a developer role, ask about programming concepts\n"
        "- For a gaming role, ask about gaming platforms or popular games\n"
        "- For a movie role, ask about film genres or directors\n"
        "- For an alumni role, ask about specific university details\n\n"
        "Important: Return ONLY the raw JSON object, no markdown, no code blocks, no additional text."
    )


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences (```json / ```) and surrounding whitespace."""
    return _FENCE_RE.sub("", text).strip()


def parse_question(text: str) -> QuestionData:
    """
    Parse and validate a raw model reply.

    Raises ``ValueError`` when the payload is not JSON or does not match the
    expected shape.
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        raise ValueError("response is empty")

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ValueError(f"response is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise ValueError("response is not a JSON object")

    question = payload.get("question")
    options = payload.get("options")
    correct = payload.get("correctAnswer")

    if not isinstance(question, str) or not question.strip():
        raise ValueError("missing or empty 'question'")
    if (
        not isinstance(options, list)
        or len(options) != OPTION_COUNT
        or not all(isinstance(opt, str) and opt.strip() for opt in options)
    ):
        raise ValueError(f"'options' must be a list of {OPTION_COUNT} non-empty strings")
    if not isinstance(correct, str) or correct not in options:
        raise ValueError("'correctAnswer' must be one of 'options'")

    return QuestionData(question=question.strip(), options=tuple(options), correct_answer=correct)


def fallback_question(role_name: str) -> QuestionData:
    return _FALLBACK_QUESTIONS.get(role_name, GENERIC_QUESTION)


async def request_question(role_name: str, category: str) -> QuestionResult:
    """Run one generation attempt against the configured backend."""
    messages = [{"role": "user", "content": build_prompt(role_name, category)}]

    try:
        call = (
            ollama.structured_chat(messages, QUESTION_SCHEMA, model=local_llm.LOCAL_MODEL_ID)
            if local_llm.USE_LOCAL
            else oai.structured_chat(
                messages,
                QUESTION_SCHEMA,
                name="role_question",
                model=core.QUESTION_MODEL_ID,
            )
        )
        raw = await asyncio.wait_for(call, timeout=core.QUESTION_TIMEOUT)
        return QuestionResult(data=parse_question(raw))
    except asyncio.TimeoutError:
        return QuestionResult(reason=f"timed out after {core.QUESTION_TIMEOUT}s")
    except Exception as e:
        return QuestionResult(reason=f"{type(e).__name__}: {e}")


async def generate_question(role_name: str, category: str) -> QuestionData:
    """Return a question for ``role_name``; falls back to the static table on any failure."""
    result = await request_question(role_name, category)
    if result.ok:
        logger.info("Generated verification question for role %s", role_name)
        return result.data

    logger.warning(
        "Question generation failed for role %s, using fallback: %s",
        role_name,
        result.reason,
    )
    return fallback_question(role_name)


__all__ = [
    "QUESTION_SCHEMA",
    "QuestionData",
    "QuestionResult",
    "GENERIC_QUESTION",
    "build_prompt",
    "strip_code_fences",
    "parse_question",
    "fallback_question",
    "request_question",
    "generate_question",
]
