"""Demonstrates the plain, vectored and buffered read paths of Chain."""

from conflux.io import BytesReader, Chain
from conflux.types import Ready, TurnContext


def main() -> None:
    cx = TurnContext.noop()

    print("--- One byte at a time ---")
    chain = Chain(BytesReader(bytes([1, 2, 3])), BytesReader(bytes([4, 5])))
    buf = bytearray(1)
    while True:
        result = chain.poll_read(cx, buf)
        assert isinstance(result, Ready)
        if result.value == 0:
            break
        print(f"byte={buf[0]} done_first={chain.done_first}")

    print("\n--- Vectored ---")
    chain = Chain(BytesReader(b"abc"), BytesReader(b"def"))
    bufs = [bytearray(2), bytearray(2)]
    for _ in range(3):
        result = chain.poll_read_vectored(cx, bufs)
        print(f"n={result.value} bufs={[bytes(b) for b in bufs]}")

    print("\n--- Buffered ---")
    chain = Chain(BytesReader(b"first|"), BytesReader(b"second"))
    while True:
        chunk = bytes(chain.poll_fill_buf(cx).value)
        if not chunk:
            break
        print(f"fill_buf -> {chunk!r}")
        chain.consume(len(chunk))

    first, second = chain.into_inner()
    print(f"\nReclaimed sources: {first!r}, {second!r}")


if __name__ == "__main__":
    main()
