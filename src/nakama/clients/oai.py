"""Helpers for interacting with OpenAI API"""
from __future__ import annotations

import logging
from typing import Any

from openai import AsyncOpenAI

from nakama.config import core

logger = logging.getLogger(__name__)

# One global async-capable client; absent when only the local backend is configured.
aoai = AsyncOpenAI(api_key=core.OPENAI_API_KEY) if core.OPENAI_API_KEY else None


async def structured_chat(
    messages: list[dict],
    schema: dict[str, Any],
    *,
    name: str = "response",
    model: str = core.QUESTION_MODEL_ID,
) -> str:
    """
    Send a chat completion constrained to ``schema`` and return the raw text.

    The reply is not parsed here; callers own validation so that a malformed
    payload can be handled the same way as a transport failure.
    """
    if aoai is None:
        raise RuntimeError("OpenAI client is not configured (missing API key)")

    resp = await aoai.chat.completions.create(
        model=model,
        messages=messages,
        response_format={
            "type": "json_schema",
            "json_schema": {"name": name, "schema": schema, "strict": True},
        },
    )

    content = resp.choices[0].message.content
    return (content or "").strip()
