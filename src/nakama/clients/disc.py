"""Discord bot bootstrap utilities."""

from __future__ import annotations

import asyncio
import logging

import discord
from discord.ext import commands as discord_commands

from nakama.config import core
from nakama.event_hooks import member_hook, reaction_hook, ready_hook
from nakama.roles import RoleSelectionService, VerificationFlow

logger = logging.getLogger(__name__)

# --- Intents --------------------------------------------------------------- #
intents = discord.Intents.none()
intents.guilds = True
intents.guild_messages = True
intents.message_content = True
intents.members = True
intents.dm_messages = True
intents.guild_reactions = True


def _log_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Log exceptions from tasks nobody awaited instead of letting them vanish."""

    exc = context.get("exception")
    logger.error(
        "Unhandled exception in event loop: %s",
        context.get("message", "unknown error"),
        exc_info=exc,
    )


class NakamaBot(discord_commands.Bot):
    """Discord client owning the role selection state for this process."""

    def __init__(self) -> None:
        super().__init__(command_prefix=discord_commands.when_mentioned, intents=intents)
        self.selection = RoleSelectionService()
        self.verifier = VerificationFlow()

    async def setup_hook(self) -> None:
        """Install the top-level loop exception handler."""

        asyncio.get_running_loop().set_exception_handler(_log_loop_exception)

    async def on_error(self, event_method: str, /, *args, **kwargs) -> None:
        logger.exception("Discord client error in %s", event_method)


bot = NakamaBot()


@bot.event
async def on_ready() -> None:
    await ready_hook.handle(bot, bot.selection)


@bot.event
async def on_member_join(member: discord.Member) -> None:
    await member_hook.handle(bot, member)


@bot.event
async def on_raw_reaction_add(payload: discord.RawReactionActionEvent) -> None:
    await reaction_hook.handle(bot, payload, bot.selection, bot.verifier)


def run() -> int:
    """Start the Discord bot; returns a process exit code."""

    if not core.DISCORD_API_TOKEN:
        logger.error("No DISCORD_API_TOKEN configured. Cannot run client.")
        return 1

    try:
        bot.run(core.DISCORD_API_TOKEN, log_handler=None)
    except discord.LoginFailure as exc:
        logger.error("Failed to login: %s", exc)
        return 1
    return 0
