"""Unit tests for Discord bot components."""
import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from pydantic import ValidationError

from wowbot.client import DiscordBotClient
from wowbot.config import BotSettings
from wowbot.health_server import evaluate_checks
from wowbot.lifecycle import SessionLifecycle
from wowbot.locks import KeyedLock
from wowbot.models import RunStatus
from wowbot.router import MessageRouter
from wowbot.utils import scope_id_for, truncate_reply
from conftest import make_message


def test_truncate_reply_no_truncation():
    """Test that short replies are unchanged."""
    assert truncate_reply("Hello, world!") == "Hello, world!"
    assert truncate_reply("x" * 2000) == "x" * 2000


def test_truncate_reply_exact_limit():
    """Test that long replies are cut to exactly the limit."""
    content = "word " * 1000

    truncated = truncate_reply(content, max_length=2000)

    assert len(truncated) == 2000
    assert content.startswith(truncated)


def test_scope_id_for_guild_and_dm():
    assert scope_id_for(1234) == "1234"
    assert scope_id_for(None) == "@me"


def test_run_status_terminal_set():
    assert {s.value for s in RunStatus} == {"cancelled", "failed", "completed", "expired"}
    for status in ("queued", "in_progress", "requires_action", "cancelling", "incomplete", "unknown"):
        assert RunStatus.is_terminal(status) is False


def test_settings_defaults(settings):
    assert settings.BOT_NAME == "WoWBot"
    assert settings.DYNAMODB_TABLE == "DiscordOpenAIThreads"
    assert settings.POLL_INTERVAL_SECONDS == 1.0
    assert settings.MAX_REPLY_LENGTH == 2000
    assert settings.REPLAY_BACKLOG_ONCE is False


@pytest.mark.parametrize("field,value", [
    ("POLL_BACKOFF_FACTOR", 0.5),
    ("POLL_TIMEOUT_SECONDS", 0),
    ("MAX_REPLY_LENGTH", 0),
])
def test_settings_reject_invalid_polling(field, value):
    with pytest.raises(ValidationError):
        BotSettings(
            _env_file=None,
            DISCORD_TOKEN="t",
            OPENAI_API_KEY="k",
            ASSISTANT_ID="a",
            **{field: value}
        )


def test_health_checks_aggregate():
    def broken():
        raise RuntimeError("down")

    status, body = evaluate_checks("wowbot", {"discord": lambda: True})
    assert status == 200
    assert body["status"] == "healthy"

    status, body = evaluate_checks("wowbot", {"discord": lambda: True, "other": broken})
    assert status == 503
    assert body["checks"]["other"] == {"status": "error", "healthy": False, "error": "down"}


@pytest.mark.asyncio
async def test_keyed_lock_serializes_same_key_and_cleans_up():
    locks = KeyedLock()
    order = []

    async def worker(name, key):
        async with locks.hold(key):
            order.append(f"{name}-start")
            await asyncio.sleep(0.01)
            order.append(f"{name}-end")

    await asyncio.gather(worker("a", "x"), worker("b", "x"))

    assert order in (
        ["a-start", "a-end", "b-start", "b-end"],
        ["b-start", "b-end", "a-start", "a-end"],
    )
    assert len(locks) == 0
    assert locks.is_locked("x") is False


@pytest.mark.asyncio
async def test_keyed_lock_releases_on_error():
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        async with locks.hold("x"):
            raise RuntimeError("boom")

    assert len(locks) == 0


def _interaction(channel_id=100, guild_id=1):
    interaction = MagicMock()
    interaction.channel_id = channel_id
    interaction.guild_id = guild_id
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def bot(settings):
    lifecycle = AsyncMock(spec=SessionLifecycle)
    router = AsyncMock(spec=MessageRouter)
    return DiscordBotClient(settings, lifecycle=lifecycle, router=router)


def test_slash_commands_registered(bot):
    names = {command.name for command in bot.tree.get_commands()}
    assert names == {"join", "leave"}


@pytest.mark.asyncio
async def test_join_command_success(bot):
    interaction = _interaction()

    await bot.handle_join(interaction)

    bot.lifecycle.join.assert_called_once_with("100", "1")
    interaction.response.defer.assert_called_once()
    interaction.followup.send.assert_called_once_with(
        "WoWBot is now active in this channel! I will respond to messages here."
    )


@pytest.mark.asyncio
async def test_join_command_failure_is_reported(bot):
    bot.lifecycle.join.side_effect = RuntimeError("DynamoDB unavailable")
    interaction = _interaction()

    await bot.handle_join(interaction)

    interaction.followup.send.assert_called_once_with("Failed to join the channel.")


@pytest.mark.asyncio
async def test_leave_command_success(bot):
    interaction = _interaction(guild_id=None)

    await bot.handle_leave(interaction)

    bot.lifecycle.leave.assert_called_once_with("100", "@me")
    interaction.followup.send.assert_called_once_with(
        "WoWBot has left this channel. Use /join to reactivate me here."
    )


@pytest.mark.asyncio
async def test_leave_command_failure_is_reported(bot):
    bot.lifecycle.leave.side_effect = RuntimeError("DynamoDB unavailable")
    interaction = _interaction()

    await bot.handle_leave(interaction)

    interaction.followup.send.assert_called_once_with("Failed to leave the channel.")


@pytest.mark.asyncio
async def test_on_message_routes_messages(bot):
    message = make_message("hello")

    await bot.on_message(message)

    bot.router.handle_message.assert_called_once_with(message)
