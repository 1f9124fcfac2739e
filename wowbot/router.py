"""Message routing for Discord bot."""
from typing import Optional

import discord

from wowbot import logging_client
from wowbot.backlog import BacklogReplayer
from wowbot.exceptions import RunTimeoutError
from wowbot.interfaces import IRunDriver, ISessionStore
from wowbot.locks import KeyedLock
from wowbot.utils import scope_id_for, truncate_reply

logger = logging_client.setup_logger('wowbot')

ERROR_REPLY = "❌ Something went wrong while answering that. Please try again."
TIMEOUT_REPLY = "⏳ The assistant took too long to answer. Please try again."


class MessageRouter:
    """
    Turns inbound Discord messages into assistant replies.

    Channels without a session are ignored. Messages on the same channel are
    handled one at a time; different channels run concurrently.
    """

    def __init__(
        self,
        session_store: ISessionStore,
        run_driver: IRunDriver,
        replayer: BacklogReplayer,
        max_reply_length: int = 2000,
        notify_on_error: bool = True
    ):
        self.session_store = session_store
        self.run_driver = run_driver
        self.replayer = replayer
        self.max_reply_length = max_reply_length
        self.notify_on_error = notify_on_error
        self.channel_locks = KeyedLock()

    @staticmethod
    def should_handle(message: discord.Message) -> bool:
        """Skip bot authors and messages without text."""
        if message.author.bot:
            return False
        return bool(message.content and message.content.strip())

    async def handle_message(self, message: discord.Message) -> Optional[str]:
        """
        Handle an inbound message.

        Args:
            message: Discord message object

        Returns:
            Text sent back to the channel, or None if nothing was sent
        """
        if not self.should_handle(message):
            return None

        channel_id = str(message.channel.id)
        scope_id = scope_id_for(message.guild.id if message.guild else None)

        async with self.channel_locks.hold((scope_id, channel_id)):
            try:
                return await self._process(message, channel_id, scope_id)
            except RunTimeoutError as e:
                logger.error(f"❌ {e} (channel {scope_id}/{channel_id})")
                return await self._notify(message, TIMEOUT_REPLY)
            except Exception as e:
                logger.error(
                    f"❌ Failed to handle message {message.id} in {scope_id}/{channel_id}: {e}",
                    exc_info=True
                )
                return await self._notify(message, ERROR_REPLY)

    async def _process(self, message: discord.Message, channel_id: str, scope_id: str) -> Optional[str]:
        ai_thread_id = await self.session_store.get(channel_id, scope_id)
        if not ai_thread_id:
            # Not invited to this channel
            return None

        logger.info(f"📨 Message {message.id} from {message.author.id} in {scope_id}/{channel_id}")

        replayed = False
        if isinstance(message.channel, discord.Thread):
            replayed = await self.replayer.replay_thread(ai_thread_id, message.channel)

        if not replayed:
            await self.run_driver.submit_message(ai_thread_id, message.content)

        run_id = await self.run_driver.start_run(ai_thread_id)
        result = await self.run_driver.await_completion(ai_thread_id, run_id)

        if not result.succeeded:
            logger.warning(f"⚠️  Run {result.run_id} ended with '{result.status.value}'")
            notice = f"⚠️ I couldn't finish a reply (run {result.status.value})."
            await message.reply(notice)
            return notice

        reply = truncate_reply(
            await self.run_driver.fetch_latest_reply(ai_thread_id),
            self.max_reply_length
        )
        if not reply.strip():
            logger.warning(f"⚠️  Run {result.run_id} completed without an assistant reply")
            return None

        await message.reply(reply)
        logger.info(f"✅ Replied to message {message.id} ({len(reply)} chars)")
        return reply

    async def _notify(self, message: discord.Message, text: str) -> Optional[str]:
        if not self.notify_on_error:
            return None
        try:
            await message.reply(text)
        except discord.HTTPException as e:
            logger.error(f"Failed to send error notice for message {message.id}: {e}")
            return None
        return text
