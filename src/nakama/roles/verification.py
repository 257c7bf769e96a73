"""
Quiz-gated role verification over direct messages.

A flow walks through::

    IDLE -> QUESTION_REQUESTED -> AWAITING_ANSWER -> GRANTED | DENIED | TIMED_OUT

The question is sent by DM with one button per option. An
:class:`AnswerCollector` accepts the first answer from the reacting user and
closes; presses after that (or after the window expires) are acknowledged and
dropped.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable

import discord

from nakama.config import guild as guild_cfg
from nakama.roles.catalog import RoleConfig
from nakama.roles.questions import QuestionData, generate_question

logger = logging.getLogger(__name__)

QuestionProvider = Callable[[str, str], Awaitable[QuestionData]]

SUCCESS_MESSAGE = "✅ Verification successful! You've been given the {role} role."
INCORRECT_MESSAGE = "❌ Incorrect answer. Please try again later."
TIMEOUT_MESSAGE = "Verification timed out. Please try again."
ROLE_MISSING_MESSAGE = (
    "⚠️ You answered correctly, but the {role} role is not set up on this server. "
    "Please let a moderator know."
)
ERROR_MESSAGE = (
    "Sorry, there was an error processing your role verification. Please try again later."
)

QUESTION_COLOUR = discord.Colour(0x0099FF)
_BUTTON_LABEL_LIMIT = 80


class VerificationState(enum.Enum):
    IDLE = "idle"
    QUESTION_REQUESTED = "question_requested"
    AWAITING_ANSWER = "awaiting_answer"
    GRANTED = "granted"
    DENIED = "denied"
    TIMED_OUT = "timed_out"
    # Correct answer, but the catalog role does not exist in the guild.
    ROLE_MISSING = "role_missing"
    # Flow aborted by an unexpected error.
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self not in (
            VerificationState.IDLE,
            VerificationState.QUESTION_REQUESTED,
            VerificationState.AWAITING_ANSWER,
        )


@dataclass
class PendingVerification:
    """A question that is out for an answer."""

    user_id: int
    role: RoleConfig
    question: QuestionData
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class AnswerCollector:
    """
    Accepts at most one answer for a :class:`PendingVerification`.

    Backed by a single future: the first valid :meth:`offer` resolves it, and
    once it is resolved or the window expires every later offer is refused.
    """

    def __init__(self, pending: PendingVerification, timeout: float) -> None:
        self.pending = pending
        self.timeout = timeout
        self._answer: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def closed(self) -> bool:
        return self._answer.done()

    def offer(self, user_id: int, interaction: discord.Interaction, index: int) -> bool:
        if self.closed or user_id != self.pending.user_id:
            return False
        if not 0 <= index < len(self.pending.question.options):
            return False
        self._answer.set_result((interaction, index))
        return True

    async def wait(self) -> tuple[discord.Interaction, int] | None:
        """Return ``(interaction, option_index)``, or ``None`` on timeout."""
        try:
            return await asyncio.wait_for(self._answer, timeout=self.timeout)
        except asyncio.TimeoutError:
            return None


class AnswerButton(discord.ui.Button):
    def __init__(self, label: str, index: int) -> None:
        super().__init__(
            label=label[:_BUTTON_LABEL_LIMIT],
            style=discord.ButtonStyle.primary,
            custom_id=f"verify_{index}",
        )
        self.index = index

    async def callback(self, interaction: discord.Interaction) -> None:
        await self.view.submit(interaction, self.index)


class AnswerView(discord.ui.View):
    """One button per option, feeding a shared :class:`AnswerCollector`."""

    def __init__(self, collector: AnswerCollector) -> None:
        # The collector owns the answer window.
        super().__init__(timeout=None)
        self.collector = collector
        for index, option in enumerate(collector.pending.question.options):
            self.add_item(AnswerButton(option, index))

    async def submit(self, interaction: discord.Interaction, index: int) -> None:
        if self.collector.offer(interaction.user.id, interaction, index):
            self.stop()
            return

        logger.debug(
            "Ignoring extra answer from user %s for %s",
            interaction.user.id,
            self.collector.pending.role.role_name,
        )
        if not interaction.response.is_done():
            await interaction.response.defer()

    def disable(self) -> None:
        for item in self.children:
            item.disabled = True


def build_question_embed(role: RoleConfig, question: QuestionData) -> discord.Embed:
    return discord.Embed(
        title=f"Verification for {role.role_name}",
        description=question.question,
        colour=QUESTION_COLOUR,
    )


class VerificationFlow:
    """Runs one DM verification per call to :meth:`run`."""

    def __init__(
        self,
        *,
        answer_timeout: float = guild_cfg.ANSWER_TIMEOUT,
        question_provider: QuestionProvider = generate_question,
    ) -> None:
        self.answer_timeout = answer_timeout
        self.question_provider = question_provider

    async def run(
        self, user: discord.abc.User, member: discord.Member, role: RoleConfig
    ) -> VerificationState:
        """
        Drive a verification for ``role`` to a terminal state.

        Never raises; unexpected errors are logged and the user is told that
        something went wrong.
        """
        try:
            return await self._run(user, member, role)
        except Exception:
            logger.exception(
                "Error in role verification for user %s (role %s)", user.id, role.role_name
            )
            try:
                await user.send(ERROR_MESSAGE)
            except discord.HTTPException as exc:
                logger.warning("Could not notify user %s of the failure: %s", user.id, exc)
            return VerificationState.FAILED

    async def _run(
        self, user: discord.abc.User, member: discord.Member, role: RoleConfig
    ) -> VerificationState:
        _log_state(user.id, role, VerificationState.QUESTION_REQUESTED)
        question = await self.question_provider(role.role_name, role.category)

        pending = PendingVerification(user_id=user.id, role=role, question=question)
        collector = AnswerCollector(pending, self.answer_timeout)
        view = AnswerView(collector)

        dm_channel = await user.create_dm()
        message = await dm_channel.send(embed=build_question_embed(role, question), view=view)
        _log_state(user.id, role, VerificationState.AWAITING_ANSWER)

        try:
            answer = await collector.wait()
            if answer is None:
                await dm_channel.send(TIMEOUT_MESSAGE)
                state = VerificationState.TIMED_OUT
            else:
                interaction, index = answer
                state = await self._resolve(interaction, member, pending, index)
        finally:
            view.stop()
            await _retire(view, message)

        _log_state(user.id, role, state)
        return state

    async def _resolve(
        self,
        interaction: discord.Interaction,
        member: discord.Member,
        pending: PendingVerification,
        index: int,
    ) -> VerificationState:
        # Acknowledge before any guild call so the interaction token stays valid.
        await _acknowledge(interaction)

        selected = pending.question.options[index]
        if selected != pending.question.correct_answer:
            await _reply(interaction, INCORRECT_MESSAGE)
            return VerificationState.DENIED

        role_name = pending.role.role_name
        guild_role = discord.utils.get(member.guild.roles, name=role_name)
        if guild_role is None:
            logger.error("Role %s not found in guild %s; cannot grant", role_name, member.guild.id)
            await _reply(interaction, ROLE_MISSING_MESSAGE.format(role=role_name))
            return VerificationState.ROLE_MISSING

        await member.add_roles(guild_role, reason="Passed self-role verification")
        await _reply(interaction, SUCCESS_MESSAGE.format(role=role_name))
        return VerificationState.GRANTED


async def _acknowledge(interaction: discord.Interaction) -> None:
    if interaction.response.is_done():
        return
    try:
        await interaction.response.defer()
    except discord.HTTPException as exc:
        logger.warning("Could not acknowledge answer from user %s: %s", interaction.user.id, exc)


async def _reply(interaction: discord.Interaction, content: str) -> None:
    """Send the private result; the outcome stands even if this fails."""
    try:
        await interaction.followup.send(content, ephemeral=True)
    except discord.HTTPException as exc:
        logger.warning("Could not deliver result to user %s: %s", interaction.user.id, exc)


async def _retire(view: AnswerView, message: discord.Message) -> None:
    """Grey out the question buttons once the flow is over."""
    view.disable()
    try:
        await message.edit(view=view)
    except discord.HTTPException as exc:
        logger.debug("Could not disable buttons on message %s: %s", message.id, exc)


def _log_state(user_id: int, role: RoleConfig, state: VerificationState) -> None:
    logger.info("Verification user=%s role=%s -> %s", user_id, role.role_name, state.value)


__all__ = [
    "VerificationState",
    "PendingVerification",
    "AnswerCollector",
    "AnswerButton",
    "AnswerView",
    "VerificationFlow",
    "build_question_embed",
    "SUCCESS_MESSAGE",
    "INCORRECT_MESSAGE",
    "TIMEOUT_MESSAGE",
    "ROLE_MISSING_MESSAGE",
    "ERROR_MESSAGE",
]
