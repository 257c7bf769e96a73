import discord

from nakama.roles import RoleSelectionService

import logging

logger = logging.getLogger(__name__)

async def handle(client: discord.Client, selection: RoleSelectionService):
    """Set up the role selection message once the gateway session is ready."""
    logger.info(f"Logged in as {client.user.name} (ID: {client.user.id})")

    guild = client.guilds[0] if client.guilds else None
    if guild is None:
        logger.error("No guild found! Make sure the bot is in a server.")
        return

    if selection.message_id is not None:
        logger.info("Role selection message %s already set; skipping bootstrap", selection.message_id)
        return

    if await selection.bootstrap(guild):
        logger.info("Role selection ready in guild %s (message %s)", guild.name, selection.message_id)
    else:
        logger.error("Role selection bootstrap aborted for guild %s", guild.name)
