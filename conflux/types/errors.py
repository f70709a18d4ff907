"""Exceptions raised by conflux combinators.

Only two kinds of failure belong to this library: contract violations
(programmer misuse of a state machine) and launch failures from the spawn
bridge. The channel exceptions describe the one-shot channel's terminal
states. Failures of operands themselves are never wrapped.
"""


class ContractViolation(RuntimeError):
    """Raised when a state machine is driven past its terminal state.

    Examples are taking a MaybeDone value twice, polling a join after it
    completed, or reading from a chain after ``into_inner()``. These signal a
    bug in the caller and are not meant to be caught.
    """


class SpawnError(Exception):
    """Raised when a task-launching facility rejects a task.

    Attributes:
        reason: Short machine-readable reason, ``"shutdown"`` for executors
            that stopped accepting work
    """

    def __init__(self, message: str = "executor rejected the task", reason: str = "rejected") -> None:
        self.reason = reason
        super().__init__(message)

    @classmethod
    def shutdown(cls) -> "SpawnError":
        """Builds the error an executor raises once it is shutting down."""
        return cls("executor is shutdown", reason="shutdown")

    def is_shutdown(self) -> bool:
        """Returns True if the spawn failed because the executor is shut down."""
        return self.reason == "shutdown"


class Canceled(Exception):
    """Raised by a one-shot receiver whose sender went away without sending."""

    def __init__(self, message: str = "oneshot canceled") -> None:
        super().__init__(message)


class ChannelClosed(Exception):
    """Raised when sending on a one-shot channel that can no longer deliver."""
