"""Executor adapter launching conflux futures onto an anyio task group."""

from typing import Any

import anyio.abc
import structlog

from conflux.future import Future, drive
from conflux.types import SpawnError

logger = structlog.get_logger(__name__)


class TaskGroupSpawner:
    """Spawn and LocalSpawn capability backed by an anyio task group.

    Each spawned future becomes an anyio task running ``drive(future)``.
    Once ``shutdown()`` is called the spawner rejects new tasks with
    ``SpawnError.shutdown()``. Tasks already running are left to the task
    group. Methods must be called from the event loop thread.

    Example:
        async with anyio.create_task_group() as tg:
            spawner = TaskGroupSpawner(tg)
            handle = spawn_with_handle(spawner, compute())
            value = await handle
    """

    def __init__(self, task_group: anyio.abc.TaskGroup):
        self._task_group = task_group
        self._shutdown = False
        self.spawned = 0

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def status(self) -> None:
        """Raises SpawnError if the spawner no longer accepts tasks."""
        if self._shutdown:
            raise SpawnError.shutdown()

    def spawn_obj(self, future: Future[Any]) -> None:
        self.status()
        self._task_group.start_soon(drive, future)
        self.spawned += 1

    def spawn_local_obj(self, future: Future[Any]) -> None:
        self.spawn_obj(future)

    def shutdown(self) -> None:
        """Stops accepting new tasks."""
        if not self._shutdown:
            self._shutdown = True
            logger.info("Task group spawner shut down", spawned=self.spawned)
