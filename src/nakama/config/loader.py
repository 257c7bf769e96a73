"""
Reading ``config.toml``.

Everything the bot reads lives under a top-level ``[nakama]`` table, split
into ``discord``, ``models``, ``local_llm`` and ``guild`` sub-tables (see
``config.toml.example``). Secrets never come from the file, only the names of
the environment variables that hold them.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.toml")
ROOT_TABLE = "nakama"


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """Parse the TOML file at ``path``; no file means no overrides (``{}``)."""
    target = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not target.is_file():
        return {}

    with target.open("rb") as handle:
        raw = tomllib.load(handle)
    logger.info("Loaded settings from %s", target)
    return raw


def section(raw: Dict[str, Any] | None, name: str | None = None) -> Dict[str, Any]:
    """Return ``[nakama]`` (or ``[nakama.<name>]``), empty when absent or malformed."""
    table = (raw or {}).get(ROOT_TABLE, {})
    if name is not None and isinstance(table, dict):
        table = table.get(name, {})
    return table if isinstance(table, dict) else {}


__all__ = ["load_raw_config", "section", "DEFAULT_CONFIG_PATH", "ROOT_TABLE"]
