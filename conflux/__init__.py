"""pyconflux: composable asynchronous combinators on an explicit poll protocol.

This package provides building blocks that combine independently progressing
asynchronous operations into a single operation, without an embedded
scheduler or I/O reactor. Every operand and every combinator is a Future: a
state machine that is asked "are you done yet?" through ``poll(cx)`` and
answers ``Ready(value)`` or ``PENDING``.

The library is built around a few principles:
- One abstraction: operands and combinators share the Future interface, so
  a join can be an operand of another join and a chain can feed a chain
- Poll everything, take once: joins advance every pending operand on each
  turn and hand out each value exactly once
- No hidden executor: spawning goes through an injected capability
- Loud misuse: driving a state machine past its end raises ContractViolation

Combinators:
- join / join3 / join4 / join5 / join_all: fan-in of concurrent futures
- Chain: one byte source after another, with plain, vectored and buffered reads
- spawn / spawn_with_handle: launch a future, observe it through a RemoteHandle

Example:
    import asyncio

    import anyio
    from conflux.future import join, ready
    from conflux.io import BytesReader
    from conflux.task import TaskGroupSpawner, spawn_with_handle

    async def main():
        a, b = await join(ready(1), asyncio.sleep(0.1))

        data = await BytesReader(b"ab").chain(BytesReader(b"cd")).read_to_end()

        async with anyio.create_task_group() as tg:
            handle = spawn_with_handle(TaskGroupSpawner(tg), compute())
            result = await handle
"""
