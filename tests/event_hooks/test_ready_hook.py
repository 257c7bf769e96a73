import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

from nakama.event_hooks import ready_hook


def _client(guilds):
    return SimpleNamespace(user=SimpleNamespace(name="nakama", id=999), guilds=guilds)


def test_ready_bootstraps_first_guild():
    first = SimpleNamespace(name="crew")
    second = SimpleNamespace(name="other")
    selection = SimpleNamespace(message_id=None, bootstrap=AsyncMock(return_value=True))

    asyncio.run(ready_hook.handle(_client([first, second]), selection))

    selection.bootstrap.assert_awaited_once_with(first)


def test_ready_without_guild_does_nothing():
    selection = SimpleNamespace(message_id=None, bootstrap=AsyncMock())

    asyncio.run(ready_hook.handle(_client([]), selection))

    selection.bootstrap.assert_not_awaited()


def test_ready_after_reconnect_keeps_existing_message():
    selection = SimpleNamespace(message_id=123, bootstrap=AsyncMock())

    asyncio.run(ready_hook.handle(_client([SimpleNamespace(name="crew")]), selection))

    selection.bootstrap.assert_not_awaited()
