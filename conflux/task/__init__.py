"""Spawn bridge and executor adapters.

Key components:
- Spawn / LocalSpawn: injected task-launching capabilities
- spawn / spawn_with_handle: launch a future, optionally keeping a handle
- spawn_local / spawn_local_with_handle: single-threaded variants
- TaskGroupSpawner: capability backed by an anyio task group

Example:
    import anyio
    from conflux.task import TaskGroupSpawner, spawn_with_handle

    async with anyio.create_task_group() as tg:
        handle = spawn_with_handle(TaskGroupSpawner(tg), compute())
        print(await handle)
"""

from .spawn import LocalSpawn, Spawn, spawn, spawn_local, spawn_local_with_handle, spawn_with_handle
from .task_group import TaskGroupSpawner

__all__ = [
    "Spawn",
    "LocalSpawn",
    "spawn",
    "spawn_with_handle",
    "spawn_local",
    "spawn_local_with_handle",
    "TaskGroupSpawner",
]
