"""Core Future abstraction for poll-driven composition.

This module provides the Future base class that every conflux combinator
derives from, the ``drive`` loop that runs a future under anyio, and the
adapters that turn coroutines and plain values into futures. A Future is a
state machine: each call to ``poll`` advances it once and answers either
``Ready(value)`` or ``PENDING``.
"""

import asyncio
import inspect
import threading
from collections.abc import Callable, Generator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import anyio

from conflux.types import PENDING, ContractViolation, Poll, Ready, TurnContext

if TYPE_CHECKING:
    from conflux.future.remote_handle import Remote, RemoteHandle

T = TypeVar("T")
U = TypeVar("U")


class Future(Generic[T]):
    """Base class for all poll-based operations in conflux.

    A Future does nothing until polled. Each ``poll(cx)`` call performs one
    synchronous step and returns ``Ready(value)`` once the operation is
    complete or ``PENDING`` otherwise. A future that returns ``PENDING`` is
    responsible for calling ``cx.wake()`` once it can make progress again.

    Key features:
    - Single abstraction for every operand and combinator
    - Composable: any Future can be an operand of a join, or be spawned
    - Awaitable: ``await future`` drives it to completion under anyio
    - ``map()`` and ``remote_handle()`` helpers

    Subclasses must implement ``poll``. Polling a future again after it
    returned ``Ready`` is a contract violation.

    Example:
        class Countdown(Future[str]):
            def __init__(self, n: int):
                self.n = n

            def poll(self, cx: TurnContext) -> Poll[str]:
                self.n -= 1
                if self.n <= 0:
                    return Ready("liftoff")
                cx.wake()
                return PENDING

        result = await Countdown(3)
    """

    def poll(self, cx: TurnContext) -> Poll[T]:
        """Advances the operation by one step.

        Args:
            cx: Turn context used to register for a future wake-up

        Returns:
            ``Ready(value)`` when complete, ``PENDING`` otherwise

        Raises:
            NotImplementedError: This method must be implemented by subclasses
        """
        raise NotImplementedError

    def __await__(self) -> Generator[Any, None, T]:
        """Drives this future to completion from ``async def`` code."""
        return drive(self).__await__()

    def map(self, fn: Callable[[T], U]) -> "Map[T, U]":
        """Returns a future that applies ``fn`` to this future's value.

        Args:
            fn: Function applied to the value once this future completes

        Returns:
            A Map future wrapping this one
        """
        return Map(self, fn)

    def remote_handle(self) -> "tuple[Remote[T], RemoteHandle[T]]":
        """Splits this future into a runnable half and an observer handle.

        See ``conflux.future.remote_handle.remote_handle``.
        """
        from conflux.future.remote_handle import remote_handle

        return remote_handle(self)


class _Signal:
    """Waker shared by every turn of one ``drive`` call.

    ``wake`` may be called from any thread. Calls from the driving thread set
    the event directly; calls from other threads hand the set to the event
    loop with ``call_soon_threadsafe``. Wakes after the drive finished are
    ignored.
    """

    def __init__(self) -> None:
        self._event = anyio.Event()
        self._thread_id = threading.get_ident()
        self._loop: asyncio.AbstractEventLoop | None
        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            # Not running on asyncio
            self._loop = None
        self._finished = False

    def reset(self) -> None:
        self._event = anyio.Event()

    def finish(self) -> None:
        self._finished = True

    def wake(self) -> None:
        if self._finished:
            return
        if threading.get_ident() == self._thread_id:
            self._event.set()
            return
        if self._loop is None:
            raise RuntimeError("cross-thread wake-ups require the asyncio backend")
        self._loop.call_soon_threadsafe(self._wake_on_loop)

    def _wake_on_loop(self) -> None:
        if not self._finished:
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


async def drive(future: Any) -> Any:
    """Polls a future to completion, sleeping between turns until woken.

    This is the minimal executor loop behind ``await future``: it polls once,
    and if the future is pending waits on an anyio event that the future's
    waker sets. The waker stays valid across turns, so an operand may wake a
    context it captured on an earlier turn.

    Args:
        future: A Future, coroutine or awaitable (see ``into_future``)

    Returns:
        The future's value
    """
    fut = into_future(future)
    signal = _Signal()
    cx = TurnContext(waker=signal.wake)
    try:
        while True:
            signal.reset()
            result = fut.poll(cx)
            if isinstance(result, Ready):
                return result.value
            await signal.wait()
            cx = cx.next_turn()
    finally:
        signal.finish()


class CoroutineFuture(Future[T]):
    """Steps a coroutine (or an ``__await__`` generator) as a Future.

    A bare ``yield`` from the coroutine (``asyncio.sleep(0)``) wakes the
    context immediately. A yielded asyncio future gets a done callback that
    wakes the context of the most recent turn. Any other yielded object is
    rejected, so coroutines built on trio primitives cannot be wrapped.
    """

    def __init__(self, coro: Any):
        self._coro = coro
        self._blocked_on: Any = None
        self._cx: TurnContext | None = None
        self._done = False

    def poll(self, cx: TurnContext) -> Poll[T]:
        if self._done:
            raise ContractViolation("coroutine future polled after completion")
        self._cx = cx
        if self._blocked_on is not None:
            if not self._blocked_on.done():
                return PENDING
            self._blocked_on = None

        try:
            yielded = self._coro.send(None)
        except StopIteration as stop:
            self._done = True
            return Ready(stop.value)
        except BaseException:
            self._done = True
            raise

        if yielded is None:
            cx.wake()
            return PENDING
        if getattr(yielded, "_asyncio_future_blocking", None) is not None:
            # Same handshake asyncio.Task performs with a yielded future
            yielded._asyncio_future_blocking = False
            self._blocked_on = yielded
            yielded.add_done_callback(self._wake_latest)
            return PENDING

        self._done = True
        self._coro.close()
        raise TypeError(f"coroutine yielded an unsupported object: {yielded!r}")

    def _wake_latest(self, _fut: Any) -> None:
        if self._cx is not None:
            self._cx.wake()


def into_future(obj: Any) -> Future[Any]:
    """Converts a Future, coroutine or awaitable into a Future.

    Args:
        obj: Object to convert

    Returns:
        ``obj`` itself if it already is a Future, otherwise a CoroutineFuture

    Raises:
        TypeError: If ``obj`` is not awaitable
    """
    if isinstance(obj, Future):
        return obj
    if inspect.iscoroutine(obj):
        return CoroutineFuture(obj)
    if inspect.isawaitable(obj):
        return CoroutineFuture(obj.__await__())
    raise TypeError(f"expected a Future or an awaitable, got {type(obj).__name__}")


class ReadyFuture(Future[T]):
    """Future that is immediately ready with a value."""

    def __init__(self, value: T):
        self._value = value
        self._done = False

    def poll(self, cx: TurnContext) -> Poll[T]:
        if self._done:
            raise ContractViolation("ReadyFuture polled after completion")
        self._done = True
        return Ready(self._value)


class PendingFuture(Future[Any]):
    """Future that never completes."""

    def poll(self, cx: TurnContext) -> Poll[Any]:
        return PENDING


class PollFn(Future[T]):
    """Future backed by a plain ``fn(cx) -> Poll`` function."""

    def __init__(self, fn: Callable[[TurnContext], Poll[T]]):
        self._fn = fn

    def poll(self, cx: TurnContext) -> Poll[T]:
        return self._fn(cx)


class Map(Future[U], Generic[T, U]):
    """Future for ``Future.map``."""

    def __init__(self, future: Any, fn: Callable[[T], U]):
        self._future = into_future(future)
        self._fn = fn
        self._done = False

    def poll(self, cx: TurnContext) -> Poll[U]:
        if self._done:
            raise ContractViolation("Map polled after completion")
        result = self._future.poll(cx)
        if isinstance(result, Ready):
            self._done = True
            return Ready(self._fn(result.value))
        return PENDING


def ready(value: T) -> ReadyFuture[T]:
    """Creates a future that is immediately ready with ``value``."""
    return ReadyFuture(value)


def pending() -> PendingFuture:
    """Creates a future that never resolves."""
    return PendingFuture()


def poll_fn(fn: Callable[[TurnContext], Poll[T]]) -> PollFn[T]:
    """Creates a future from a poll function.

    Example:
        counter = iter(range(3))
        fut = poll_fn(lambda cx: Ready("done") if next(counter) == 2 else PENDING)
    """
    return PollFn(fn)
