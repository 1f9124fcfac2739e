"""OpenAI Assistants run driver.

Submits user content to an assistant thread, starts a run, polls the run
until it reaches a terminal status and reads back the assistant's reply.
"""
import asyncio
import time
from typing import Callable

from openai import AsyncOpenAI, OpenAIError

from wowbot import logging_client
from wowbot.exceptions import RunTimeoutError
from wowbot.models import RunResult, RunStatus

logger = logging_client.setup_logger('wowbot')


class RunDriver:
    """
    Drives assistant runs on OpenAI threads.

    Holds no persistent state. Submissions to one thread must be awaited one
    after another by the caller; the driver does not serialize them itself.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        assistant_id: str,
        poll_interval: float = 1.0,
        backoff_factor: float = 1.5,
        max_poll_interval: float = 10.0,
        poll_timeout: float = 300.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the run driver.

        Args:
            client: OpenAI async client
            assistant_id: Assistant that processes every run
            poll_interval: Delay before the second status poll (seconds)
            backoff_factor: Multiplier applied to the delay after each poll
            max_poll_interval: Upper bound for the delay between polls
            poll_timeout: Give up on a run after this many seconds
            clock: Monotonic time source in seconds
        """
        self.client = client
        self.assistant_id = assistant_id
        self.poll_interval = poll_interval
        self.backoff_factor = backoff_factor
        self.max_poll_interval = max_poll_interval
        self.poll_timeout = poll_timeout
        self.clock = clock

    async def create_thread(self) -> str:
        """Create a new, empty assistant thread and return its ID."""
        thread = await self.client.beta.threads.create()
        logger.info(f"🧵 Created assistant thread {thread.id}")
        return thread.id

    async def delete_thread(self, ai_thread_id: str) -> None:
        await self.client.beta.threads.delete(ai_thread_id)
        logger.info(f"🗑️ Deleted assistant thread {ai_thread_id}")

    async def submit_message(self, ai_thread_id: str, content: str) -> None:
        """
        Append one user message to the thread.

        Raises:
            ValueError: If content is empty or whitespace
        """
        if not content or not content.strip():
            raise ValueError("Message content must not be empty")

        await self.client.beta.threads.messages.create(
            ai_thread_id,
            role="user",
            content=content
        )

    async def start_run(self, ai_thread_id: str) -> str:
        """Start processing every message submitted so far. Returns the run ID."""
        run = await self.client.beta.threads.runs.create(
            ai_thread_id,
            assistant_id=self.assistant_id
        )
        logger.debug(f"Started run {run.id} on thread {ai_thread_id}")
        return run.id

    async def await_completion(self, ai_thread_id: str, run_id: str) -> RunResult:
        """
        Poll a run until it reaches a terminal status.

        The first poll is immediate. The delay between polls starts at
        poll_interval and grows by backoff_factor up to max_poll_interval.

        Returns:
            RunResult with one of cancelled, failed, completed or expired

        Raises:
            RunTimeoutError: If the run is still going after poll_timeout seconds
        """
        started = self.clock()
        deadline = started + self.poll_timeout
        delay = self.poll_interval
        polls = 0

        while True:
            run = await self.client.beta.threads.runs.retrieve(
                run_id=run_id,
                thread_id=ai_thread_id
            )
            polls += 1

            if RunStatus.is_terminal(run.status):
                logger.info(f"Run {run_id} finished with '{run.status}' after {polls} poll(s)")
                return RunResult(run_id=run_id, status=RunStatus(run.status))

            remaining = deadline - self.clock()
            if remaining <= 0:
                await self._cancel_run(ai_thread_id, run_id)
                raise RunTimeoutError(run_id, run.status, self.clock() - started)

            logger.debug(f"Run {run_id} is '{run.status}', next poll in {min(delay, remaining):.1f}s")
            await asyncio.sleep(min(delay, remaining))
            delay = min(delay * self.backoff_factor, self.max_poll_interval)

    async def _cancel_run(self, ai_thread_id: str, run_id: str):
        """Ask OpenAI to cancel a stuck run so the thread accepts new messages."""
        try:
            await self.client.beta.threads.runs.cancel(
                run_id=run_id,
                thread_id=ai_thread_id
            )
            logger.warning(f"⚠️  Cancelled run {run_id} after poll timeout")
        except OpenAIError as e:
            logger.warning(f"⚠️  Failed to cancel run {run_id}: {e}")

    async def fetch_latest_reply(self, ai_thread_id: str) -> str:
        """
        Get the text of the most recent assistant message on the thread.

        Returns:
            Reply text (not truncated), or "" if the assistant has not replied
        """
        page = await self.client.beta.threads.messages.list(
            ai_thread_id,
            order="desc",
            limit=20
        )

        for message in page.data:
            if message.role != "assistant":
                continue
            return _message_text(message)

        return ""


def _message_text(message) -> str:
    """Join the text blocks of a thread message; other block types are skipped."""
    parts = []
    for block in message.content:
        if block.type == "text":
            parts.append(block.text.value)
    return "\n".join(parts)
