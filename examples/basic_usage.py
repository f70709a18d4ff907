"""Basic usage example demonstrating joins, chains and spawned tasks."""

import asyncio
from typing import Any

import anyio

from conflux.future import Future, join, join3, ready
from conflux.io import BytesReader
from conflux.task import TaskGroupSpawner, spawn_with_handle
from conflux.types import PENDING, Poll, Ready, TurnContext


class Countdown(Future[str]):
    """A hand-written future that needs a few turns before it is ready."""

    def __init__(self, name: str, turns: int):
        self.name = name
        self.turns = turns

    def poll(self, cx: TurnContext) -> Poll[str]:
        print(f"  polling {self.name} on turn {cx.turn}")
        self.turns -= 1
        if self.turns <= 0:
            return Ready(f"{self.name} done")
        cx.wake()
        return PENDING


async def fetch(name: str, delay: float) -> dict[str, Any]:
    """Simulate an I/O-bound call."""
    await asyncio.sleep(delay)
    return {"name": name, "delay": delay}


async def main() -> None:
    print("=== Join: every operand advances on every turn ===")
    result = await join(Countdown("fast", 1), Countdown("slow", 3))
    print(f"Result: {result}\n")

    print("=== Join of coroutines ===")
    users, orders, flag = await join3(fetch("users", 0.05), fetch("orders", 0.02), ready(True))
    print(f"users={users} orders={orders} flag={flag}\n")

    print("=== Chain: header, then body ===")
    reader = BytesReader(b"HEADER\n").chain(BytesReader(b"body bytes"))
    data = await reader.read_to_end()
    print(f"Read {len(data)} bytes: {data!r}\n")

    print("=== Spawn with handle ===")
    async with anyio.create_task_group() as tg:
        spawner = TaskGroupSpawner(tg)
        handle = spawn_with_handle(spawner, fetch("report", 0.01))
        print(f"Spawned task resolved to: {await handle}")

    print("\nDone!")


if __name__ == "__main__":
    asyncio.run(main())
