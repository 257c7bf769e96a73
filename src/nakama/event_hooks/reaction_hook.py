"""
Handle reactions that request a self-role.

Raw gateway events are used so reactions on a selection message that is not
in the message cache (e.g. one adopted from history after a restart) are
still seen. The payload is resolved to a full member and channel before any
matching happens.
"""

from __future__ import annotations

import logging

import discord

from nakama.config import guild as guild_cfg
from nakama.roles import RoleSelectionService, VerificationFlow, find_role

logger = logging.getLogger(__name__)


async def _resolve_member(
    client: discord.Client, payload: discord.RawReactionActionEvent
) -> discord.Member | None:
    if payload.member is not None:
        return payload.member

    guild = client.get_guild(payload.guild_id)
    if guild is None:
        return None
    member = guild.get_member(payload.user_id)
    if member is not None:
        return member
    return await guild.fetch_member(payload.user_id)


async def _resolve_channel(
    client: discord.Client, payload: discord.RawReactionActionEvent
) -> discord.abc.GuildChannel | None:
    channel = client.get_channel(payload.channel_id)
    if channel is not None:
        return channel
    return await client.fetch_channel(payload.channel_id)


async def handle(
    client: discord.Client,
    payload: discord.RawReactionActionEvent,
    selection: RoleSelectionService,
    verifier: VerificationFlow,
) -> None:
    """
    Start a verification when a member reacts to the selection message with
    a catalog emoji in the self-roles channel. Anything else is ignored.
    """

    # Skip DM reactions and other contexts without a guild.
    if payload.guild_id is None:
        return

    # Only the current selection message counts.
    if not selection.is_selection_message(payload.message_id):
        return

    try:
        member = await _resolve_member(client, payload)
        channel = await _resolve_channel(client, payload)
    except discord.HTTPException as exc:
        logger.error("Error fetching reaction %s on message %s: %s", payload.emoji, payload.message_id, exc)
        return

    if member is None or channel is None:
        logger.debug("Could not resolve member/channel for reaction on message %s", payload.message_id)
        return

    if member.bot:
        return

    if getattr(channel, "name", None) != guild_cfg.SELF_ROLES_CHANNEL:
        return

    role = find_role(payload.emoji, selection.catalog)
    if role is None:
        return

    logger.info(
        "Member %s reacted %s on selection message %s; requesting %s",
        member.id,
        payload.emoji,
        payload.message_id,
        role.role_name,
    )
    await verifier.run(member, member, role)
