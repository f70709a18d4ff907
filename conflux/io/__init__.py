"""Asynchronous byte sources and the sequential chain combinator.

Key components:
- AsyncRead / AsyncBufRead: poll-based byte source interfaces
- Read / ReadToEnd: futures returned by ``AsyncRead.read`` and ``read_to_end``
- BytesReader: in-memory source
- Chain: read one source to exhaustion, then the other

Example:
    from conflux.io import BytesReader

    reader = BytesReader(b"head ").chain(BytesReader(b"tail"))
    assert await reader.read_to_end() == b"head tail"
"""

from .chain import Chain, chain
from .cursor import BytesReader
from .traits import AsyncBufRead, AsyncRead, Read, ReadToEnd, WriteBuffer

__all__ = [
    "AsyncRead",
    "AsyncBufRead",
    "Read",
    "ReadToEnd",
    "WriteBuffer",
    "BytesReader",
    "Chain",
    "chain",
]
