"""Byte-source interfaces and the read futures built on them.

An AsyncRead source copies bytes into a caller buffer through ``poll_read``.
An AsyncBufRead source additionally exposes its internal buffer through
``poll_fill_buf`` and is told how much of it was used through ``consume``.
A read of zero bytes into a non-empty buffer means end of data.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeAlias

from conflux.future.base import Future
from conflux.types import PENDING, ContractViolation, Poll, Ready, TurnContext

if TYPE_CHECKING:
    from conflux.io.chain import Chain

WriteBuffer: TypeAlias = bytearray | memoryview


class AsyncRead:
    """Base class for asynchronous byte sources.

    Subclasses implement ``poll_read``. Errors from the underlying transport
    are raised as ``OSError`` out of the poll call.

    Example:
        reader = BytesReader(b"hello").chain(BytesReader(b" world"))
        data = await reader.read_to_end()
    """

    def poll_read(self, cx: TurnContext, buf: WriteBuffer) -> Poll[int]:
        """Attempts to read bytes into ``buf``.

        Args:
            cx: Turn context used to register for a wake-up when pending
            buf: Writable destination buffer

        Returns:
            ``Ready(n)`` with the number of bytes written, ``PENDING`` otherwise

        Raises:
            NotImplementedError: This method must be implemented by subclasses
        """
        raise NotImplementedError

    def poll_read_vectored(self, cx: TurnContext, bufs: Sequence[WriteBuffer]) -> Poll[int]:
        """Attempts to read bytes into several buffers.

        The default implementation reads into the first non-empty buffer only.
        Sources that can scatter across buffers should override it.
        """
        for buf in bufs:
            if len(buf) != 0:
                return self.poll_read(cx, buf)
        return self.poll_read(cx, bytearray())

    # ------------------------------------------------------------------
    # Combinators and read futures
    # ------------------------------------------------------------------
    def chain(self, other: "AsyncRead") -> "Chain[Any, Any]":
        """Returns a source that reads all of this one, then all of ``other``."""
        from conflux.io.chain import Chain

        return Chain(self, other)

    def read(self, buf: WriteBuffer) -> "Read":
        """Returns a future reading once into ``buf``, resolving to the byte count."""
        return Read(self, buf)

    def read_to_end(self) -> "ReadToEnd":
        """Returns a future reading until end of data, resolving to the bytes."""
        return ReadToEnd(self)


class AsyncBufRead(AsyncRead):
    """Base class for byte sources that expose an internal buffer."""

    def poll_fill_buf(self, cx: TurnContext) -> Poll[bytes | memoryview]:
        """Returns the contents of the internal buffer, filling it if empty.

        An empty result means end of data.
        """
        raise NotImplementedError

    def consume(self, amt: int) -> None:
        """Marks ``amt`` bytes of the buffer returned by ``poll_fill_buf`` as used."""
        raise NotImplementedError


class Read(Future[int]):
    """Future for ``AsyncRead.read``."""

    def __init__(self, reader: AsyncRead, buf: WriteBuffer):
        self._reader = reader
        self._buf = buf
        self._done = False

    def poll(self, cx: TurnContext) -> Poll[int]:
        if self._done:
            raise ContractViolation("Read polled after completion")
        result = self._reader.poll_read(cx, self._buf)
        if isinstance(result, Ready):
            self._done = True
        return result


class ReadToEnd(Future[bytes]):
    """Future for ``AsyncRead.read_to_end``."""

    _CHUNK_SIZE = 8192

    def __init__(self, reader: AsyncRead):
        self._reader = reader
        self._data = bytearray()
        self._chunk = bytearray(self._CHUNK_SIZE)
        self._done = False

    def poll(self, cx: TurnContext) -> Poll[bytes]:
        if self._done:
            raise ContractViolation("ReadToEnd polled after completion")
        while True:
            result = self._reader.poll_read(cx, self._chunk)
            if not isinstance(result, Ready):
                return PENDING
            if result.value == 0:
                self._done = True
                return Ready(bytes(self._data))
            self._data += self._chunk[: result.value]
