"""Spawn bridge between a task-launching facility and observer handles.

The executor is injected as a capability: any object with ``spawn_obj``
satisfies ``Spawn``, any object with ``spawn_local_obj`` satisfies
``LocalSpawn``. Both methods take a Future and either accept it or raise
``SpawnError``. The functions here never retry; a rejected launch reaches
the caller synchronously.

The local variants carry the same contracts. They exist for executors that
run every task on one thread and therefore accept tasks holding
thread-bound state.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import structlog

from conflux.future import Future, RemoteHandle, into_future, remote_handle
from conflux.types import SpawnError

logger = structlog.get_logger(__name__)


@runtime_checkable
class Spawn(Protocol):
    """Capability to launch tasks that may run on any thread."""

    def spawn_obj(self, future: Future[None]) -> None:
        """Launches ``future`` as a task; raises SpawnError if rejected."""
        ...


@runtime_checkable
class LocalSpawn(Protocol):
    """Capability to launch tasks on the current thread's executor."""

    def spawn_local_obj(self, future: Future[None]) -> None:
        """Launches ``future`` as a local task; raises SpawnError if rejected."""
        ...


def _discard(_value: Any) -> None:
    return None


def _launch(launch: Callable[[Future[None]], None], future: Any, kind: str) -> None:
    task = into_future(future).map(_discard)
    try:
        launch(task)
    except SpawnError as exc:
        logger.debug("Spawn rejected", kind=kind, reason=exc.reason)
        raise


def _launch_with_handle(launch: Callable[[Future[None]], None], future: Any, kind: str) -> RemoteHandle[Any]:
    remote, handle = remote_handle(future)
    try:
        _launch(launch, remote, kind)
    except SpawnError:
        handle.close()
        raise
    return handle


def spawn(spawner: Spawn, future: Any) -> None:
    """Spawns a task that polls ``future`` to completion, discarding its value.

    Args:
        spawner: Task-launching facility
        future: A Future, coroutine or awaitable

    Raises:
        SpawnError: If the spawner rejects the task

    Example:
        spawn(spawner, log_event(event))
    """
    _launch(spawner.spawn_obj, future, "spawn")


def spawn_with_handle(spawner: Spawn, future: Any) -> RemoteHandle[Any]:
    """Spawns ``future`` and returns a handle resolving to its value.

    The future is wrapped so that its value goes through a one-shot channel
    to the returned handle. Dropping the handle before completion tells the
    task its result is no longer wanted; call ``handle.forget()`` to let it
    run to completion regardless.

    Args:
        spawner: Task-launching facility
        future: A Future, coroutine or awaitable

    Returns:
        A RemoteHandle for the spawned future's value

    Raises:
        SpawnError: If the spawner rejects the task; no handle is produced

    Example:
        handle = spawn_with_handle(spawner, compute())
        value = await handle
    """
    return _launch_with_handle(spawner.spawn_obj, future, "spawn")


def spawn_local(spawner: LocalSpawn, future: Any) -> None:
    """Same as ``spawn`` for a single-threaded executor."""
    _launch(spawner.spawn_local_obj, future, "spawn_local")


def spawn_local_with_handle(spawner: LocalSpawn, future: Any) -> RemoteHandle[Any]:
    """Same as ``spawn_with_handle`` for a single-threaded executor."""
    return _launch_with_handle(spawner.spawn_local_obj, future, "spawn_local")
