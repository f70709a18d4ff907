"""Poll-based futures and the join combinators.

This package provides the Future base class that every conflux operand and
combinator derives from, together with the fan-in join family and the
remote-handle pair used by the spawn bridge.

Key components:
- Future: base class with ``poll(cx)``; awaitable through ``drive``
- ready / pending / poll_fn / into_future: small adapters
- MaybeDone: single operand slot holding a value until it is taken
- join, join3, join4, join5, join_all: poll every operand each turn,
  resolve to all values in declaration order
- remote_handle: runnable half plus observer handle over a one-shot channel

Example:
    from conflux.future import join, ready

    async def main():
        a, b = await join(ready(1), fetch_user())
"""

from .base import (
    CoroutineFuture,
    Future,
    Map,
    PendingFuture,
    PollFn,
    ReadyFuture,
    drive,
    into_future,
    pending,
    poll_fn,
    ready,
)
from .join import Join, Join3, Join4, Join5, JoinAll, join, join3, join4, join5, join_all
from .maybe_done import MaybeDone, SlotState, maybe_done
from .remote_handle import Remote, RemoteHandle, remote_handle

__all__ = [
    "Future",
    "CoroutineFuture",
    "Map",
    "PendingFuture",
    "PollFn",
    "ReadyFuture",
    "drive",
    "into_future",
    "pending",
    "poll_fn",
    "ready",
    "MaybeDone",
    "SlotState",
    "maybe_done",
    "Join",
    "Join3",
    "Join4",
    "Join5",
    "JoinAll",
    "join",
    "join3",
    "join4",
    "join5",
    "join_all",
    "Remote",
    "RemoteHandle",
    "remote_handle",
]
