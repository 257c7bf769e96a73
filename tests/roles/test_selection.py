import asyncio
import itertools
from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord

from nakama.roles.catalog import ROLE_CATALOG
from nakama.roles.selection import SELECTION_DESCRIPTION, RoleSelectionService

BOT_ID = 999
_ids = itertools.count(100)


class FakeMessage(SimpleNamespace):
    pass


def _message(author_id, embeds=()):
    message = FakeMessage(
        id=next(_ids),
        author=SimpleNamespace(id=author_id),
        embeds=list(embeds),
        reactions=[],
    )

    async def add_reaction(emoji):
        message.reactions.append(SimpleNamespace(emoji=emoji, count=1))

    message.add_reaction = AsyncMock(side_effect=add_reaction)
    return message


class FakeChannel:
    def __init__(self, messages=(), name="😋-self-roles"):
        self.id = 1
        self.name = name
        self.guild = SimpleNamespace(me=SimpleNamespace(id=BOT_ID))
        # newest first
        self.messages = list(messages)
        self.sent = []
        self.last_history = None

    def history(self, *, limit=None):
        self.last_history = {"limit": limit}

        async def gen():
            for m in self.messages[:limit]:
                yield m

        return gen()

    async def send(self, content=None, *, embed=None):
        message = _message(BOT_ID, [embed] if embed else [])
        self.messages.insert(0, message)
        self.sent.append(message)
        return message


def _guild(channel, role_names=None):
    names = [e.role_name for e in ROLE_CATALOG] if role_names is None else role_names
    return SimpleNamespace(
        id=7,
        name="crew",
        text_channels=[channel] if channel is not None else [],
        roles=[SimpleNamespace(name=n) for n in names],
    )


def _selection_messages(channel):
    return [
        m for m in channel.messages
        if m.author.id == BOT_ID and m.embeds and m.embeds[0].title == "Role Selection"
    ]


def test_build_embed_lists_catalog_entries():
    embed = RoleSelectionService().build_embed()

    assert embed.title == "Role Selection"
    assert embed.description == SELECTION_DESCRIPTION
    assert embed.colour.value == 0x0099FF
    assert [f.name for f in embed.fields] == [f"{e.trigger} {e.role_name}" for e in ROLE_CATALOG]
    assert embed.fields[0].value == "Category: Software Development"


def test_ensure_creates_message_and_reacts_in_catalog_order():
    channel = FakeChannel()
    service = RoleSelectionService()

    asyncio.run(service.ensure_selection_message(channel))

    assert len(channel.sent) == 1
    message = channel.sent[0]
    assert service.message_id == message.id
    assert channel.last_history == {"limit": 10}
    assert [c.args[0] for c in message.add_reaction.await_args_list] == [
        e.trigger for e in ROLE_CATALOG
    ]


def test_bootstrap_twice_reuses_the_first_message():
    channel = FakeChannel([_message(42), _message(43)])
    guild = _guild(channel)

    first = RoleSelectionService()
    assert asyncio.run(first.bootstrap(guild))

    # Simulates a process restart: fresh service, same channel.
    second = RoleSelectionService()
    assert asyncio.run(second.bootstrap(guild))

    assert len(channel.sent) == 1
    assert len(_selection_messages(channel)) == 1
    assert second.message_id == first.message_id


def test_existing_message_from_another_author_is_not_adopted():
    foreign = _message(42, [discord.Embed(title="Role Selection")])
    channel = FakeChannel([foreign])
    service = RoleSelectionService()

    asyncio.run(service.ensure_selection_message(channel))

    assert len(channel.sent) == 1
    assert service.message_id != foreign.id


def test_message_id_is_not_reassigned_once_set():
    channel = FakeChannel()
    service = RoleSelectionService()
    asyncio.run(service.ensure_selection_message(channel))
    original = service.message_id

    channel.messages.clear()
    asyncio.run(service.ensure_selection_message(channel))

    assert service.message_id == original
    assert len(channel.sent) == 1
    assert service.is_selection_message(original)
    assert not service.is_selection_message(original + 1)


def test_bootstrap_aborts_without_self_roles_channel():
    service = RoleSelectionService()

    assert not asyncio.run(service.bootstrap(_guild(FakeChannel(name="general"))))
    assert not asyncio.run(service.bootstrap(_guild(None)))
    assert service.message_id is None


def test_bootstrap_aborts_when_roles_are_missing():
    channel = FakeChannel()
    service = RoleSelectionService()

    ok = asyncio.run(service.bootstrap(_guild(channel, role_names=["🧠 Logic Lords"])))

    assert not ok
    assert channel.sent == []
    assert service.message_id is None


def test_bootstrap_reports_send_failures():
    channel = FakeChannel()
    channel.send = AsyncMock(side_effect=RuntimeError("no permission"))
    service = RoleSelectionService()

    assert not asyncio.run(service.bootstrap(_guild(channel)))
    assert service.message_id is None


def _fail_on_nth_reaction(message, n):
    calls = itertools.count(1)
    record = message.add_reaction.side_effect

    async def add_reaction(emoji):
        if next(calls) == n:
            raise RuntimeError("rate limited")
        await record(emoji)

    message.add_reaction.side_effect = add_reaction


def test_interrupted_reactions_are_completed_on_retry():
    channel = FakeChannel()
    original_send = channel.send

    async def send_then_break(content=None, *, embed=None):
        message = await original_send(content, embed=embed)
        _fail_on_nth_reaction(message, 3)
        return message

    channel.send = send_then_break
    guild = _guild(channel)
    service = RoleSelectionService()

    assert not asyncio.run(service.bootstrap(guild))
    assert service.message_id is None

    message = channel.sent[0]
    assert [str(r.emoji) for r in message.reactions] == [e.trigger for e in ROLE_CATALOG[:2]]

    # The next ready event adopts the half-built message and fills the gaps.
    message.add_reaction.reset_mock()
    assert asyncio.run(service.bootstrap(guild))

    assert service.message_id == message.id
    assert len(channel.sent) == 1
    assert [c.args[0] for c in message.add_reaction.await_args_list] == [
        e.trigger for e in ROLE_CATALOG[2:]
    ]
    assert [str(r.emoji) for r in message.reactions] == [e.trigger for e in ROLE_CATALOG]


def test_adopted_message_with_all_reactions_is_left_alone():
    existing = _message(BOT_ID, [discord.Embed(title="Role Selection")])
    existing.reactions = [SimpleNamespace(emoji=e.trigger, count=1) for e in ROLE_CATALOG]
    channel = FakeChannel([existing])
    service = RoleSelectionService()

    asyncio.run(service.ensure_selection_message(channel))

    assert service.message_id == existing.id
    assert channel.sent == []
    existing.add_reaction.assert_not_awaited()
