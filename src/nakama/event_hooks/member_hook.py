import logging

import discord

from nakama import greetings

logger = logging.getLogger(__name__)


async def handle(client: discord.Client, member: discord.Member):
    """Greet members joining the guild."""

    logger.info("Member %s joined guild %s", member.id, member.guild.id)
    await greetings.greet(member)
