"""Single operand slot used by the join combinators."""

import enum
from typing import Any, Generic, TypeVar, cast

from conflux.future.base import Future, into_future
from conflux.types import PENDING, ContractViolation, Poll, Ready, TurnContext

T = TypeVar("T")


class SlotState(enum.Enum):
    FUTURE = "future"
    DONE = "done"
    GONE = "gone"


class MaybeDone(Future[None], Generic[T]):
    """A future that may have completed, holding its output until taken.

    The slot starts in ``FUTURE`` state wrapping an operand. Polling advances
    the operand; once it completes the value is stored and the slot moves to
    ``DONE``, after which polling returns ``Ready(None)`` without touching the
    operand again. ``take_output()`` moves the value out exactly once and
    leaves the slot ``GONE``.

    Example:
        slot = maybe_done(ready(7))
        slot.poll(TurnContext.noop())   # Ready(None)
        slot.take_output()              # 7
        slot.take_output()              # raises ContractViolation
    """

    def __init__(self, future: Future[T]):
        self._future: Future[T] | None = future
        self._output: T | None = None
        self._state = SlotState.FUTURE

    @property
    def state(self) -> SlotState:
        return self._state

    def poll(self, cx: TurnContext) -> Poll[None]:
        if self._state is SlotState.DONE:
            return Ready(None)
        if self._state is SlotState.GONE:
            raise ContractViolation("MaybeDone polled after value taken")

        # FUTURE state always holds the operand
        future = cast(Future[T], self._future)
        result = future.poll(cx)
        if not isinstance(result, Ready):
            return PENDING
        self._output = result.value
        self._future = None
        self._state = SlotState.DONE
        return Ready(None)

    def output(self) -> T | None:
        """Returns the stored value without taking it, or None if not done."""
        if self._state is SlotState.DONE:
            return self._output
        return None

    def take_output(self) -> T:
        """Moves the stored value out of the slot.

        Returns:
            The operand's value

        Raises:
            ContractViolation: If the slot is still pending or already taken
        """
        if self._state is not SlotState.DONE:
            raise ContractViolation(f"cannot take output of a MaybeDone in state {self._state.value!r}")
        value = self._output
        self._output = None
        self._state = SlotState.GONE
        return value  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self._state is SlotState.FUTURE:
            return f"MaybeDone.Future({self._future!r})"
        if self._state is SlotState.DONE:
            return f"MaybeDone.Done({self._output!r})"
        return "MaybeDone.Gone"


def maybe_done(future: Any) -> MaybeDone[Any]:
    """Wraps a future (or awaitable) into a MaybeDone slot."""
    return MaybeDone(into_future(future))
