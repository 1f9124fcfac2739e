"""Custom exceptions for WoWBot."""


class WoWBotError(Exception):
    """Base exception for WoWBot."""
    pass


class RunDriverError(WoWBotError):
    """Raised when an assistant run cannot be driven to a result."""
    pass


class RunTimeoutError(RunDriverError):
    """Raised when a run does not reach a terminal status within the poll timeout."""

    def __init__(self, run_id: str, last_status: str, waited: float):
        self.run_id = run_id
        self.last_status = last_status
        self.waited = waited
        super().__init__(
            f"Run {run_id} still '{last_status}' after {waited:.1f}s"
        )
