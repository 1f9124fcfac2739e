"""Backlog replay for Discord threads.

When the bot is active in a thread, the thread's visible history (starter
message first, then everything after it, oldest first) is submitted to the
assistant thread before a run is started.
"""
from typing import Iterable, List, Optional, Set

import discord

from wowbot import logging_client
from wowbot.interfaces import IRunDriver

logger = logging_client.setup_logger('wowbot')


def order_backlog(
    starter_content: Optional[str],
    recent_newest_first: Iterable[Optional[str]]
) -> List[str]:
    """
    Build the oldest-first backlog from a starter message and a newest-first fetch.

    Args:
        starter_content: Content of the message the thread was started from
        recent_newest_first: Message contents as Discord returns them (newest first)

    Returns:
        [starter, oldest, ..., newest] with empty and whitespace-only entries removed
    """
    ordered = [starter_content, *reversed(list(recent_newest_first))]
    return [content for content in ordered if content and content.strip()]


async def fetch_starter_message(thread: discord.Thread) -> Optional[discord.Message]:
    """
    Get the message a thread was started from.

    The starter message shares the thread's ID. For text-channel threads it
    lives in the parent channel; for forum posts it lives in the thread itself.

    Returns:
        The starter message, or None if it was deleted or is not readable
    """
    if thread.starter_message is not None:
        return thread.starter_message

    source = thread.parent if isinstance(thread.parent, discord.TextChannel) else thread
    try:
        return await source.fetch_message(thread.id)
    except (discord.NotFound, discord.Forbidden) as e:
        logger.warning(f"⚠️  Starter message for thread {thread.id} unavailable: {e}")
        return None


async def gather_backlog(thread: discord.Thread, limit: int = 50) -> List[str]:
    """
    Collect a thread's history as an oldest-first list of message contents.

    Args:
        thread: Discord thread
        limit: Maximum number of recent messages to fetch

    Returns:
        Ordered, non-empty message contents
    """
    starter = await fetch_starter_message(thread)
    starter_id = starter.id if starter is not None else None

    # history() yields newest first
    recent = [
        message.content
        async for message in thread.history(limit=limit)
        if message.id != starter_id
    ]

    return order_backlog(starter.content if starter is not None else None, recent)


class BacklogReplayer:
    """Feeds a Discord thread's history into an assistant thread."""

    def __init__(self, run_driver: IRunDriver, fetch_limit: int = 50, replay_once: bool = False):
        """
        Initialize the replayer.

        Args:
            run_driver: Driver used to submit messages
            fetch_limit: Maximum number of recent thread messages to replay
            replay_once: Only replay the first time an assistant thread is seen
                by this process; later messages are submitted on their own
        """
        self.run_driver = run_driver
        self.fetch_limit = fetch_limit
        self.replay_once = replay_once
        self._replayed: Set[str] = set()

    def already_replayed(self, ai_thread_id: str) -> bool:
        return self.replay_once and ai_thread_id in self._replayed

    async def replay(self, ai_thread_id: str, backlog: List[str]) -> int:
        """
        Submit backlog entries one at a time, in order.

        Returns:
            Number of messages submitted
        """
        for content in backlog:
            await self.run_driver.submit_message(ai_thread_id, content)
        return len(backlog)

    async def replay_thread(self, ai_thread_id: str, thread: discord.Thread) -> bool:
        """
        Gather and replay a Discord thread's history.

        Returns:
            True if the history was submitted, False if nothing was replayed
        """
        if self.already_replayed(ai_thread_id):
            logger.debug(f"Backlog for thread {thread.id} already replayed, skipping")
            return False

        backlog = await gather_backlog(thread, self.fetch_limit)
        if not backlog:
            return False

        count = await self.replay(ai_thread_id, backlog)
        if self.replay_once:
            self._replayed.add(ai_thread_id)

        logger.info(f"📜 Replayed {count} message(s) from thread {thread.id} into {ai_thread_id}")
        return True
