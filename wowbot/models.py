"""Domain types for channel sessions and assistant runs."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Scope used for channels outside a guild (direct messages)
DIRECT_MESSAGE_SCOPE = "@me"


class RunStatus(str, Enum):
    """Terminal run statuses. Any other status means the run is still going."""

    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return status in {member.value for member in cls}


@dataclass(frozen=True)
class Session:
    """One channel bound to one assistant thread. Never mutated once created."""

    channel_id: str
    scope_id: str
    ai_thread_id: str
    created_at: datetime

    @property
    def key(self) -> tuple:
        return (self.scope_id, self.channel_id)


@dataclass(frozen=True)
class RunResult:
    """Terminal outcome of one assistant run."""

    run_id: str
    status: RunStatus

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.COMPLETED
