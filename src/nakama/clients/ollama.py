"""Helpers for interacting with a local Ollama server"""

from typing import Any

from nakama.config import local_llm
from ollama import AsyncClient

client = AsyncClient(host=local_llm.LOCAL_SERVER_URL)

async def structured_chat(
        messages: list[dict],
        schema: dict[str, Any],
        model = local_llm.LOCAL_MODEL_ID
    ) -> str:
    """
    Send a prompt to the local Ollama server, asking for JSON matching
    ``schema``, and return its raw reply.

    Example input messages list[dict]:

    .. code-block:: python
        [
            {
                "role": "user",
                "content": "Return a JSON object with a question..."
            }
        ]
    """
    resp = await client.chat(
        model=model,
        messages=messages,
        format=schema,
    )

    return (resp.message.content or "").strip()
