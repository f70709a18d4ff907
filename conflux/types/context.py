"""Turn context handed to every poll call.

This module provides the TurnContext class, the opaque handle an operand
receives on each poll. An operand that returns PENDING keeps a reference to
the context (or to its ``wake`` method) and calls it once progress is
possible again, asking whoever drives the computation for another turn.
"""

from collections.abc import Callable

import pydantic


def _noop() -> None:
    return None


class TurnContext(pydantic.BaseModel):
    """Wake-up handle and bookkeeping for one poll turn.

    The context carries the driver's waker together with the turn number.
    Composites pass the context they receive straight down to their children,
    so every operand of a join (or both sources of a chain) registers against
    the same waker.

    Key features:
    - ``wake()`` schedules another turn; calling it more than once per turn
      is harmless
    - ``turn`` counts driver turns, starting at 1
    - ``noop()`` builds a context for polling by hand

    Example:
        cx = TurnContext.noop()
        result = future.poll(cx)
        if result is PENDING:
            ...  # nobody will be woken; poll again manually
    """

    model_config = pydantic.ConfigDict(extra="ignore", frozen=True)

    # ------------------------------------------------------------------
    # Core fields
    # ------------------------------------------------------------------
    waker: Callable[[], None] = _noop
    turn: int = 1

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    @pydantic.field_validator("turn")  # type: ignore[misc]
    def validate_turn(cls, v: int) -> int:
        """Validates that the turn counter is positive.

        Args:
            v: Turn number to validate

        Returns:
            The validated turn number

        Raises:
            ValueError: If the turn number is smaller than 1
        """
        if v < 1:
            raise ValueError("'turn' must be >= 1")
        return v

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def noop(cls) -> "TurnContext":
        """Creates a context whose wake does nothing.

        Useful when polling futures manually, e.g. in tests, where the caller
        decides on its own when to poll again.

        Returns:
            A TurnContext with a no-op waker
        """
        return cls(waker=_noop)

    def next_turn(self) -> "TurnContext":
        """Returns a copy of this context for the following turn."""
        return self.model_copy(update={"turn": self.turn + 1})

    # ------------------------------------------------------------------
    # Waking
    # ------------------------------------------------------------------
    def wake(self) -> None:
        """Requests another poll turn from the driver."""
        self.waker()
