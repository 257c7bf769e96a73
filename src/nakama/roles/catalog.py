"""
The fixed catalog of self-assignable roles.

Each entry maps the reaction emoji shown on the selection message to the
guild role it grants and the category handed to the question provider.
Order matters: it is the order of the embed fields and of the reactions the
bot adds to the selection message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import discord


@dataclass(frozen=True)
class RoleConfig:
    """One grantable role and the reaction that requests it."""

    trigger: str
    role_name: str
    category: str


ROLE_CATALOG: tuple[RoleConfig, ...] = (
    RoleConfig("💻", "🧠 Logic Lords", "Software Development"),
    RoleConfig("🎮", "👾 Game On", "Gaming"),
    RoleConfig("🎬", "📽️ Cinephile", "Movies & Series"),
    RoleConfig("🎓", "💼 Parul Alumni", "Education"),
)


def find_role(
    emoji: discord.PartialEmoji | discord.Emoji | str | None,
    catalog: Iterable[RoleConfig] = ROLE_CATALOG,
) -> RoleConfig | None:
    """
    Return the first catalog entry whose trigger matches ``emoji``.

    Unicode reactions arrive as ``PartialEmoji`` objects whose ``name`` is the
    glyph itself, so both plain strings and emoji objects are accepted.
    """

    if emoji is None:
        return None
    name = emoji if isinstance(emoji, str) else getattr(emoji, "name", None)
    if not name:
        return None

    for entry in catalog:
        if entry.trigger == name:
            return entry
    return None


def missing_roles(
    guild_roles: Iterable[discord.Role],
    catalog: Iterable[RoleConfig] = ROLE_CATALOG,
) -> list[RoleConfig]:
    """Return catalog entries whose role name does not exist in the guild."""

    existing = {getattr(role, "name", None) for role in guild_roles}
    return [entry for entry in catalog if entry.role_name not in existing]


__all__ = ["RoleConfig", "ROLE_CATALOG", "find_role", "missing_roles"]
