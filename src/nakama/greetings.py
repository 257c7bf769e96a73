"""Welcome greetings posted when a member joins."""

from __future__ import annotations

import logging
import random

import discord

from nakama.config import guild as guild_cfg

logger = logging.getLogger(__name__)

PLACEHOLDER = "{username}"

GREETINGS: tuple[str, ...] = (
    "Yohohoho! Welcome aboard {username}! Let's make this journey a grand adventure! 🏴‍☠️",
    "SUUUUPER welcome to our crew, {username}! 🚢",
    "Shishishi! Hey {username}, welcome to our nakama! 🍖",
    "Welcome to the Grand Line, {username}! May your adventures be legendary! ⚓",
    "Ora ora! {username} has joined our pirate crew! 🗡️",
    "A new nakama appears! Welcome {username}! Let's set sail together! ⛵",
)


def pick_greeting(display_name: str, rng: random.Random | None = None) -> str:
    template = (rng or random).choice(GREETINGS)
    return template.replace(PLACEHOLDER, display_name)


async def greet(member: discord.Member, rng: random.Random | None = None) -> None:
    """Post a random greeting for ``member`` in the welcome channel, if present."""

    channel = discord.utils.get(member.guild.text_channels, name=guild_cfg.WELCOME_CHANNEL)
    if channel is None:
        logger.debug("No #%s channel in guild %s; skipping greeting", guild_cfg.WELCOME_CHANNEL, member.guild.id)
        return

    try:
        await channel.send(pick_greeting(member.display_name, rng))
    except discord.HTTPException:
        logger.exception("Error sending welcome message for member %s", member.id)


__all__ = ["GREETINGS", "PLACEHOLDER", "pick_greeting", "greet"]
