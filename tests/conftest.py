"""Pytest configuration and shared fixtures."""
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from wowbot.config import BotSettings
from wowbot.models import RunResult, RunStatus, Session
from wowbot.run_driver import RunDriver


class AsyncIter:
    """Async iterator over a fixed list (stands in for Messageable.history())."""

    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._items:
            raise StopAsyncIteration
        return self._items.pop(0)


class FakeSessionStore:
    """In-memory ISessionStore."""

    def __init__(self):
        self.sessions: Dict[Tuple[str, str], Session] = {}

    async def get(self, channel_id: str, scope_id: str) -> Optional[str]:
        session = self.sessions.get((scope_id, channel_id))
        return session.ai_thread_id if session else None

    async def create(self, channel_id: str, ai_thread_id: str, scope_id: str) -> Session:
        session = Session(
            channel_id=channel_id,
            scope_id=scope_id,
            ai_thread_id=ai_thread_id,
            created_at=datetime.now(timezone.utc)
        )
        self.sessions[session.key] = session
        return session

    async def remove(self, channel_id: str, scope_id: str) -> None:
        self.sessions.pop((scope_id, channel_id), None)


@pytest.fixture
def settings():
    """Settings that never read the environment's .env file."""
    return BotSettings(
        _env_file=None,
        DISCORD_TOKEN="discord-token",
        OPENAI_API_KEY="sk-test",
        ASSISTANT_ID="asst_test"
    )


@pytest.fixture
def session_store():
    return FakeSessionStore()


@pytest.fixture
def run_driver():
    """RunDriver mock whose runs complete with a short assistant reply."""
    driver = AsyncMock(spec=RunDriver)
    driver.create_thread.side_effect = [f"thread_{i}" for i in range(1, 10)]
    driver.start_run.return_value = "run_1"
    driver.await_completion.return_value = RunResult(run_id="run_1", status=RunStatus.COMPLETED)
    driver.fetch_latest_reply.return_value = "Hello from the assistant!"
    return driver


def make_message(
    content: str = "hello",
    channel_id: int = 100,
    guild_id: Optional[int] = 1,
    is_bot: bool = False,
    channel_type=discord.TextChannel,
    message_id: int = 9001
):
    """Build a Discord message mock with an awaitable reply()."""
    message = MagicMock()
    message.id = message_id
    message.content = content
    message.author.bot = is_bot
    message.author.id = 42

    message.channel = MagicMock(spec=channel_type)
    message.channel.id = channel_id

    if guild_id is None:
        message.guild = None
    else:
        message.guild.id = guild_id

    message.reply = AsyncMock()
    return message


def make_history_message(message_id: int, content: str):
    message = MagicMock()
    message.id = message_id
    message.content = content
    return message
