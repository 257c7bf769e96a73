"""
Ownership of the single "Role Selection" announcement.

The message id lives on a :class:`RoleSelectionService` instance held by the
bot for the life of the process. On startup the service scans recent channel
history and adopts a previous announcement instead of posting a duplicate.
"""

from __future__ import annotations

import logging
from typing import Iterable

import discord

from nakama.config import guild as guild_cfg
from nakama.roles.catalog import ROLE_CATALOG, RoleConfig, missing_roles

logger = logging.getLogger(__name__)

SELECTION_DESCRIPTION = "React with the emojis below to get your roles!"
SELECTION_COLOUR = discord.Colour(0x0099FF)


class RoleSelectionService:
    """Tracks the selection message that reaction triggers are honoured on."""

    def __init__(
        self,
        catalog: Iterable[RoleConfig] = ROLE_CATALOG,
        *,
        channel_name: str = guild_cfg.SELF_ROLES_CHANNEL,
        title: str = guild_cfg.SELECTION_TITLE,
        history_limit: int = guild_cfg.HISTORY_SCAN_LIMIT,
    ) -> None:
        self.catalog: tuple[RoleConfig, ...] = tuple(catalog)
        self.channel_name = channel_name
        self.title = title
        self.history_limit = history_limit
        self.message_id: int | None = None

    def is_selection_message(self, message_id: int | None) -> bool:
        return self.message_id is not None and message_id == self.message_id

    def build_embed(self) -> discord.Embed:
        embed = discord.Embed(
            title=self.title,
            description=SELECTION_DESCRIPTION,
            colour=SELECTION_COLOUR,
        )
        for entry in self.catalog:
            embed.add_field(
                name=f"{entry.trigger} {entry.role_name}",
                value=f"Category: {entry.category}",
                inline=False,
            )
        return embed

    async def find_existing(self, channel: discord.TextChannel) -> discord.Message | None:
        """Return a recent announcement authored by the bot, if any."""

        me = getattr(channel.guild, "me", None)
        bot_id = getattr(me, "id", None)

        async for message in channel.history(limit=self.history_limit):
            if bot_id is None or message.author.id != bot_id:
                continue
            if message.embeds and message.embeds[0].title == self.title:
                return message
        return None

    async def ensure_selection_message(self, channel: discord.TextChannel) -> None:
        """
        Make sure exactly one selection announcement exists in ``channel``.

        Adopts a prior announcement when found, otherwise posts a new one. Any
        catalog reaction missing from the message is added in catalog order
        before the id is recorded, so a setup interrupted halfway is finished
        on the next attempt.
        """

        if self.message_id is not None:
            return

        message = await self.find_existing(channel)
        if message is not None:
            logger.info("Found existing role selection message %s", message.id)
        else:
            message = await channel.send(embed=self.build_embed())
            logger.info("Posted role selection message %s in #%s", message.id, channel.name)

        present = {str(reaction.emoji) for reaction in getattr(message, "reactions", None) or ()}
        for entry in self.catalog:
            if entry.trigger not in present:
                await message.add_reaction(entry.trigger)

        self.message_id = message.id

    async def bootstrap(self, guild: discord.Guild) -> bool:
        """
        Validate the guild layout and set up the selection message.

        Returns ``False`` (after logging why) when the self-roles channel or
        any catalog role is missing, or when the announcement could not be
        prepared. Nothing is posted unless every precondition holds.
        """

        channel = discord.utils.get(guild.text_channels, name=self.channel_name)
        if channel is None:
            logger.error(
                'Could not find the self-roles channel. Please create a channel named "%s"',
                self.channel_name,
            )
            return False

        missing = missing_roles(guild.roles, self.catalog)
        if missing:
            logger.error(
                "Missing roles: %s. Please create these roles in your server",
                ", ".join(entry.role_name for entry in missing),
            )
            return False

        try:
            await self.ensure_selection_message(channel)
        except Exception:
            logger.exception("Error creating role selection message")
            return False
        return True


__all__ = ["RoleSelectionService", "SELECTION_DESCRIPTION"]
