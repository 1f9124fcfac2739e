"""Join/leave lifecycle for channel sessions."""
from typing import Optional

from wowbot import logging_client
from wowbot.interfaces import IRunDriver, ISessionStore
from wowbot.models import Session

logger = logging_client.setup_logger('wowbot')


class SessionLifecycle:
    """
    Moves a channel between "no session" and "session active".

    join always allocates a fresh assistant thread; joining an active channel
    replaces its thread and the old one is orphaned. leave only unlinks the
    thread, it is not deleted remotely.
    """

    def __init__(self, session_store: ISessionStore, run_driver: IRunDriver):
        self.session_store = session_store
        self.run_driver = run_driver

    async def join(self, channel_id: str, scope_id: str) -> Session:
        """
        Bind a channel to a new assistant thread.

        Raises:
            Exception: Whatever the AI backend or store raised. If persisting
                fails, the new thread is deleted (best effort) first.
        """
        ai_thread_id = await self.run_driver.create_thread()

        try:
            session = await self.session_store.create(channel_id, ai_thread_id, scope_id)
        except Exception:
            await self._discard_thread(ai_thread_id)
            raise

        logger.info(f"✅ Joined channel {scope_id}/{channel_id} with thread {ai_thread_id}")
        return session

    async def leave(self, channel_id: str, scope_id: str) -> None:
        """Unbind a channel. Leaving a channel without a session is a no-op."""
        await self.session_store.remove(channel_id, scope_id)
        logger.info(f"👋 Left channel {scope_id}/{channel_id}")

    async def status(self, channel_id: str, scope_id: str) -> Optional[str]:
        return await self.session_store.get(channel_id, scope_id)

    async def _discard_thread(self, ai_thread_id: str):
        try:
            await self.run_driver.delete_thread(ai_thread_id)
        except Exception as e:
            logger.warning(f"⚠️  Could not delete unreferenced thread {ai_thread_id}: {e}")
