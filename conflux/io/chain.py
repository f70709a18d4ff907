"""Sequential composition of two byte sources."""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

import structlog

from conflux.io.traits import AsyncBufRead, AsyncRead, WriteBuffer
from conflux.types import ContractViolation, Poll, Ready, TurnContext

logger = structlog.get_logger(__name__)

R1 = TypeVar("R1", bound=AsyncRead)
R2 = TypeVar("R2", bound=AsyncRead)


class Chain(AsyncBufRead, Generic[R1, R2]):
    """Reads everything from ``first``, then everything from ``second``.

    The chain switches sources the first time ``first`` reports end of data:
    a read of zero bytes into a non-empty buffer, or an empty buffer from
    ``poll_fill_buf``. The switch happens inside the same call, so the caller
    never sees a spurious zero-byte read or pending turn at the boundary.
    Once switched, ``first`` is never polled again.

    A zero-length read request is not end of data and never switches.

    Buffered reads (``poll_fill_buf``/``consume``) require both sources to be
    AsyncBufRead; ``consume`` always goes to the source that is active when
    it is called.

    Example:
        chain = Chain(BytesReader(b"\\x01\\x02\\x03"), BytesReader(b"\\x04\\x05"))
        data = await chain.read_to_end()   # b"\\x01\\x02\\x03\\x04\\x05"
    """

    def __init__(self, first: R1, second: R2):
        self._first: R1 | None = first
        self._second: R2 | None = second
        self._done_first = False

    @property
    def done_first(self) -> bool:
        """True once reads are served by the second source."""
        return self._done_first

    # ------------------------------------------------------------------
    # Access to the wrapped sources
    # ------------------------------------------------------------------
    def _sources(self) -> tuple[R1, R2]:
        if self._first is None or self._second is None:
            raise ContractViolation("Chain used after into_inner()")
        return self._first, self._second

    def get_ref(self) -> tuple[R1, R2]:
        """Returns the two wrapped sources."""
        return self._sources()

    def get_mut(self) -> tuple[R1, R2]:
        """Returns the two wrapped sources for modification.

        Reading from or repositioning a source directly may desynchronise it
        from ``done_first``; that is the caller's responsibility.
        """
        return self._sources()

    def into_inner(self) -> tuple[R1, R2]:
        """Consumes the chain, returning the wrapped sources.

        Any later use of the chain raises ContractViolation.
        """
        sources = self._sources()
        self._first = None
        self._second = None
        return sources

    def _switch(self, trigger: str) -> None:
        self._done_first = True
        logger.debug("Chain switching to second source", trigger=trigger)

    # ------------------------------------------------------------------
    # AsyncRead
    # ------------------------------------------------------------------
    def poll_read(self, cx: TurnContext, buf: WriteBuffer) -> Poll[int]:
        first, second = self._sources()
        if not self._done_first:
            result = first.poll_read(cx, buf)
            if not isinstance(result, Ready) or result.value != 0 or len(buf) == 0:
                return result
            self._switch("read")
        return second.poll_read(cx, buf)

    def poll_read_vectored(self, cx: TurnContext, bufs: Sequence[WriteBuffer]) -> Poll[int]:
        first, second = self._sources()
        if not self._done_first:
            result = first.poll_read_vectored(cx, bufs)
            if not isinstance(result, Ready):
                return result
            if result.value != 0 or not any(len(buf) != 0 for buf in bufs):
                return result
            self._switch("read_vectored")
        return second.poll_read_vectored(cx, bufs)

    # ------------------------------------------------------------------
    # AsyncBufRead
    # ------------------------------------------------------------------
    def poll_fill_buf(self, cx: TurnContext) -> Poll[bytes | memoryview]:
        first, second = self._sources()
        if not self._done_first:
            result = _buffered(first).poll_fill_buf(cx)
            if not isinstance(result, Ready) or len(result.value) != 0:
                return result
            self._switch("fill_buf")
        return _buffered(second).poll_fill_buf(cx)

    def consume(self, amt: int) -> None:
        first, second = self._sources()
        active: AsyncRead = second if self._done_first else first
        _buffered(active).consume(amt)

    def __repr__(self) -> str:
        return f"Chain(first={self._first!r}, second={self._second!r}, done_first={self._done_first})"


def _buffered(source: Any) -> AsyncBufRead:
    if not isinstance(source, AsyncBufRead):
        raise TypeError(f"{type(source).__name__} does not support buffered reads")
    return source


def chain(first: AsyncRead, second: AsyncRead) -> Chain[Any, Any]:
    """Chains two sources; see ``Chain``."""
    return Chain(first, second)
