"""Tests for the Chain combinator."""

from typing import Any

import pytest

from conflux.io import AsyncRead, BytesReader, Chain, chain
from conflux.types import PENDING, ContractViolation, Poll, Ready, TurnContext


class ScriptedReader(AsyncRead):
    """Source that plays back a script of chunks, PENDING markers and errors."""

    def __init__(self, *steps: Any):
        self.steps = list(steps)
        self.polls = 0

    def poll_read(self, cx: TurnContext, buf) -> Poll[int]:
        self.polls += 1
        if not self.steps:
            return Ready(0)
        step = self.steps[0]
        if step is PENDING:
            self.steps.pop(0)
            cx.wake()
            return PENDING
        if isinstance(step, Exception):
            self.steps.pop(0)
            raise step
        n = min(len(buf), len(step))
        buf[:n] = step[:n]
        if n == len(step):
            self.steps.pop(0)
        else:
            self.steps[0] = step[n:]
        return Ready(n)


def read_one(source: AsyncRead, cx: TurnContext) -> Poll[int]:
    buf = bytearray(1)
    result = source.poll_read(cx, buf)
    if isinstance(result, Ready) and result.value == 1:
        return Ready(buf[0])
    return result


class TestChainRead:
    """Test cases for plain reads through a chain."""

    def test_one_byte_reads_cross_the_boundary(self):
        """Test [1,2,3] then [4,5] read one byte at a time."""
        first = ScriptedReader(bytes([1, 2, 3]))
        reader = Chain(first, ScriptedReader(bytes([4, 5])))
        cx = TurnContext.noop()

        seen = []
        for _ in range(3):
            seen.append(read_one(reader, cx))
            assert not reader.done_first
        seen.append(read_one(reader, cx))
        assert reader.done_first
        seen.append(read_one(reader, cx))

        assert seen == [Ready(1), Ready(2), Ready(3), Ready(4), Ready(5)]
        polls_at_flip = first.polls
        assert read_one(reader, cx) == Ready(0)
        assert first.polls == polls_at_flip

    def test_zero_length_read_does_not_switch(self):
        """Test that an empty destination is not taken as end of data."""
        reader = Chain(BytesReader(b"abc"), BytesReader(b"def"))
        cx = TurnContext.noop()
        assert reader.poll_read(cx, bytearray()) == Ready(0)
        assert not reader.done_first

    def test_zero_length_read_on_exhausted_first(self):
        """Test that an empty destination never switches, even at end of data."""
        reader = Chain(BytesReader(b""), BytesReader(b"def"))
        cx = TurnContext.noop()
        assert reader.poll_read(cx, bytearray()) == Ready(0)
        assert not reader.done_first
        buf = bytearray(3)
        assert reader.poll_read(cx, buf) == Ready(3)
        assert buf == b"def"
        assert reader.done_first

    def test_pending_passes_through(self):
        """Test that a pending first source is reported as pending."""
        reader = Chain(ScriptedReader(PENDING, b"x"), BytesReader(b"y"))
        cx = TurnContext.noop()
        buf = bytearray(4)
        assert reader.poll_read(cx, buf) is PENDING
        assert not reader.done_first
        assert reader.poll_read(cx, buf) == Ready(1)
        assert reader.poll_read(cx, buf) == Ready(1)
        assert buf[:1] == b"y"

    def test_error_does_not_switch(self):
        """Test that an error from the first source propagates without switching."""
        reader = Chain(ScriptedReader(OSError("disk gone")), BytesReader(b"y"))
        with pytest.raises(OSError, match="disk gone"):
            reader.poll_read(TurnContext.noop(), bytearray(4))
        assert not reader.done_first

    @pytest.mark.asyncio
    async def test_read_to_end(self):
        """Test reading a nested chain to the end."""
        reader = chain(BytesReader(b"ab"), BytesReader(b"cd")).chain(ScriptedReader(PENDING, b"ef"))
        assert await reader.read_to_end() == b"abcdef"


class TestChainReadVectored:
    """Test cases for vectored reads through a chain."""

    def test_split_destination(self):
        """Test [2][2] buffers against 3 + 3 bytes with no pending at the boundary."""
        reader = Chain(BytesReader(bytes([1, 2, 3])), BytesReader(bytes([4, 5, 6])))
        cx = TurnContext.noop()
        bufs = [bytearray(2), bytearray(2)]

        assert reader.poll_read_vectored(cx, bufs) == Ready(3)
        assert bytes(bufs[0]) + bytes(bufs[1][:1]) == bytes([1, 2, 3])
        assert not reader.done_first

        assert reader.poll_read_vectored(cx, bufs) == Ready(3)
        assert bytes(bufs[0]) + bytes(bufs[1][:1]) == bytes([4, 5, 6])
        assert reader.done_first

        assert reader.poll_read_vectored(cx, bufs) == Ready(0)

    def test_any_nonempty_segment_counts(self):
        """Test that one non-empty segment is enough to detect end of data."""
        reader = Chain(BytesReader(b""), BytesReader(b"z"))
        bufs = [bytearray(), bytearray(1)]
        assert reader.poll_read_vectored(TurnContext.noop(), bufs) == Ready(1)
        assert bufs[1] == b"z"
        assert reader.done_first

    def test_all_empty_segments(self):
        """Test that only empty segments never switch."""
        reader = Chain(BytesReader(b""), BytesReader(b"z"))
        assert reader.poll_read_vectored(TurnContext.noop(), [bytearray(), bytearray()]) == Ready(0)
        assert not reader.done_first

    def test_default_vectored_read(self):
        """Test sources relying on the default first-non-empty-buffer behaviour."""
        reader = Chain(ScriptedReader(b"ab"), ScriptedReader(b"cd"))
        cx = TurnContext.noop()
        bufs = [bytearray(), bytearray(4)]
        assert reader.poll_read_vectored(cx, bufs) == Ready(2)
        assert reader.poll_read_vectored(cx, bufs) == Ready(2)
        assert bufs[1][:2] == b"cd"
        assert reader.done_first


class TestChainBufRead:
    """Test cases for fill_buf / consume through a chain."""

    def test_fill_and_consume(self):
        """Test that consume goes to the active source on each side of the switch."""
        first = BytesReader(b"ab")
        second = BytesReader(b"cd")
        reader = Chain(first, second)
        cx = TurnContext.noop()

        result = reader.poll_fill_buf(cx)
        assert bytes(result.value) == b"ab"
        reader.consume(1)
        assert first.position == 1
        assert bytes(reader.poll_fill_buf(cx).value) == b"b"
        reader.consume(1)

        # Empty first buffer: switch and retry within the same call
        assert bytes(reader.poll_fill_buf(cx).value) == b"cd"
        assert reader.done_first
        reader.consume(1)
        assert second.position == 1
        assert first.position == 2
        assert bytes(reader.poll_fill_buf(cx).value) == b"d"

    def test_fill_buf_needs_buffered_sources(self):
        """Test that non-buffered sources reject fill_buf."""
        reader = Chain(ScriptedReader(b"ab"), BytesReader(b"cd"))
        with pytest.raises(TypeError, match="ScriptedReader does not support buffered reads"):
            reader.poll_fill_buf(TurnContext.noop())


class TestChainOwnership:
    """Test cases for accessing the wrapped sources."""

    def test_get_ref_and_get_mut(self):
        """Test that accessors return the wrapped sources."""
        first, second = BytesReader(b"a"), BytesReader(b"b")
        reader = Chain(first, second)
        assert reader.get_ref() == (first, second)
        assert reader.get_mut()[0] is first

    def test_into_inner_retires_chain(self):
        """Test that the chain cannot be used after into_inner()."""
        first, second = BytesReader(b"a"), BytesReader(b"b")
        reader = Chain(first, second)
        assert reader.into_inner() == (first, second)
        with pytest.raises(ContractViolation):
            reader.poll_read(TurnContext.noop(), bytearray(1))
        with pytest.raises(ContractViolation):
            reader.into_inner()

    def test_repr(self):
        """Test the rendering of a chain."""
        text = repr(Chain(BytesReader(b"a"), BytesReader(b"b")))
        assert text.startswith("Chain(first=BytesReader(")
        assert text.endswith("done_first=False)")
