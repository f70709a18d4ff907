"""Fan-in join combinators.

A join owns a fixed set of operands, each wrapped in a MaybeDone slot. Every
poll of the join advances every slot that is not done yet, in declaration
order, without short-circuiting. The join completes on the first turn in
which all slots are done, taking each value exactly once.

Operand values are never interpreted: a value that encodes a failure lands
in the result like any other, and an exception raised by an operand
propagates out of ``poll`` untouched.
"""

from collections.abc import Iterable
from typing import Any, ClassVar, Generic, TypeVar

from conflux.future.base import Future
from conflux.future.maybe_done import MaybeDone, maybe_done
from conflux.types import PENDING, Poll, Ready, TurnContext

T = TypeVar("T")
T1 = TypeVar("T1")
T2 = TypeVar("T2")
T3 = TypeVar("T3")
T4 = TypeVar("T4")
T5 = TypeVar("T5")


class _JoinBase(Future[T]):
    """Shared polling logic for every join arity."""

    _arity: ClassVar[int | None] = None

    def __init__(self, *futures: Any):
        if self._arity is not None and len(futures) != self._arity:
            raise TypeError(f"{type(self).__name__} takes exactly {self._arity} futures, got {len(futures)}")
        self._slots: tuple[MaybeDone[Any], ...] = tuple(maybe_done(f) for f in futures)

    def _advance_all(self, cx: TurnContext) -> bool:
        all_done = True
        for slot in self._slots:
            # Every slot is polled on every turn, even after one reports pending
            if not isinstance(slot.poll(cx), Ready):
                all_done = False
        return all_done

    def poll(self, cx: TurnContext) -> Poll[T]:
        if self._advance_all(cx):
            return Ready(self._collect())
        return PENDING

    def _collect(self) -> Any:
        return tuple(slot.take_output() for slot in self._slots)

    def __repr__(self) -> str:
        fields = ", ".join(f"fut{i}={slot!r}" for i, slot in enumerate(self._slots, start=1))
        return f"{type(self).__name__}({fields})"


class Join(_JoinBase[tuple[T1, T2]], Generic[T1, T2]):
    """Future for the ``join`` function."""

    _arity = 2


class Join3(_JoinBase[tuple[T1, T2, T3]], Generic[T1, T2, T3]):
    """Future for the ``join3`` function."""

    _arity = 3


class Join4(_JoinBase[tuple[T1, T2, T3, T4]], Generic[T1, T2, T3, T4]):
    """Future for the ``join4`` function."""

    _arity = 4


class Join5(_JoinBase[tuple[T1, T2, T3, T4, T5]], Generic[T1, T2, T3, T4, T5]):
    """Future for the ``join5`` function."""

    _arity = 5


class JoinAll(_JoinBase[list[T]]):
    """Future for the ``join_all`` function.

    Same polling policy as the fixed-arity joins over a runtime-sized,
    homogeneous collection. Resolves to a list in input order; an empty
    collection resolves immediately to an empty list.
    """

    def __init__(self, futures: Iterable[Any]):
        super().__init__(*futures)

    def _collect(self) -> list[T]:
        return [slot.take_output() for slot in self._slots]


def join(future1: Any, future2: Any) -> Join[Any, Any]:
    """Joins the result of two futures, waiting for them both to complete.

    This function returns a new future which polls both futures on every turn
    and finishes with a tuple of both results. Coroutines and other
    awaitables are accepted and wrapped with ``into_future``.

    Example:
        a = ready(1)
        b = ready(2)
        pair = join(a, b)

        assert await pair == (1, 2)
    """
    return Join(future1, future2)


def join3(future1: Any, future2: Any, future3: Any) -> Join3[Any, Any, Any]:
    """Same as ``join``, but with three futures.

    Example:
        assert await join3(ready(1), ready(2), ready(3)) == (1, 2, 3)
    """
    return Join3(future1, future2, future3)


def join4(future1: Any, future2: Any, future3: Any, future4: Any) -> Join4[Any, Any, Any, Any]:
    """Same as ``join``, but with four futures."""
    return Join4(future1, future2, future3, future4)


def join5(
    future1: Any,
    future2: Any,
    future3: Any,
    future4: Any,
    future5: Any,
) -> Join5[Any, Any, Any, Any, Any]:
    """Same as ``join``, but with five futures."""
    return Join5(future1, future2, future3, future4, future5)


def join_all(futures: Iterable[Any]) -> JoinAll[Any]:
    """Joins any number of futures of the same type into a list of results.

    Example:
        results = await join_all(fetch(url) for url in urls)
    """
    return JoinAll(futures)
