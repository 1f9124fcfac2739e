"""Collaborator interfaces (Dependency Inversion).

Components depend on these protocols rather than on the DynamoDB or OpenAI
implementations, so tests can substitute fakes.
"""
from typing import Optional, Protocol

from wowbot.models import RunResult, Session


class ISessionStore(Protocol):
    """Durable (scope, channel) -> assistant thread mapping."""

    async def get(self, channel_id: str, scope_id: str) -> Optional[str]:
        """Return the assistant thread ID, or None if absent or unreadable."""
        ...

    async def create(self, channel_id: str, ai_thread_id: str, scope_id: str) -> Session:
        """Insert or overwrite the mapping. Errors propagate."""
        ...

    async def remove(self, channel_id: str, scope_id: str) -> None:
        """Delete the mapping. Deleting an absent key is not an error."""
        ...


class IRunDriver(Protocol):
    """Remote assistant thread operations."""

    async def create_thread(self) -> str:
        ...

    async def delete_thread(self, ai_thread_id: str) -> None:
        ...

    async def submit_message(self, ai_thread_id: str, content: str) -> None:
        ...

    async def start_run(self, ai_thread_id: str) -> str:
        ...

    async def await_completion(self, ai_thread_id: str, run_id: str) -> RunResult:
        ...

    async def fetch_latest_reply(self, ai_thread_id: str) -> str:
        ...
