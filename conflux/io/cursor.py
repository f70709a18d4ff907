"""In-memory byte source."""

from collections.abc import Sequence

from conflux.io.traits import AsyncBufRead, WriteBuffer
from conflux.types import Poll, Ready, TurnContext


class BytesReader(AsyncBufRead):
    """A byte source over an in-memory ``bytes`` object.

    Every poll is immediately ready. Supports plain, vectored (scattering
    across buffers) and buffered reads.

    Example:
        reader = BytesReader(b"abc")
        buf = bytearray(2)
        reader.poll_read(TurnContext.noop(), buf)   # Ready(2), buf == b"ab"
    """

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def get_ref(self) -> bytes:
        return self._data

    def poll_read(self, cx: TurnContext, buf: WriteBuffer) -> Poll[int]:
        return Ready(self._read_into(buf))

    def poll_read_vectored(self, cx: TurnContext, bufs: Sequence[WriteBuffer]) -> Poll[int]:
        total = 0
        for buf in bufs:
            n = self._read_into(buf)
            total += n
            if n < len(buf):
                break
        return Ready(total)

    def _read_into(self, buf: WriteBuffer) -> int:
        n = min(len(buf), self.remaining)
        if n:
            memoryview(buf)[:n] = self._data[self._pos : self._pos + n]
            self._pos += n
        return n

    def poll_fill_buf(self, cx: TurnContext) -> Poll[bytes | memoryview]:
        return Ready(memoryview(self._data)[self._pos :])

    def consume(self, amt: int) -> None:
        self._pos = min(self._pos + amt, len(self._data))

    def __repr__(self) -> str:
        return f"BytesReader(position={self._pos}, len={len(self._data)})"
