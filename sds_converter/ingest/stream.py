from __future__ import annotations

import io
from typing import BinaryIO

from sds_converter.errors import TruncatedInput


class SampleStream:
    """
    Forward-only cursor over the sample region of a capture.

    Bytes for channel n+1 follow channel n contiguously, so every channel pass
    shares this one cursor. Nothing here can move it backwards: bytes that are
    discarded are gone.
    """

    def __init__(self, raw: BinaryIO, *, buffer_size: int = io.DEFAULT_BUFFER_SIZE):
        if isinstance(raw, io.BufferedReader):
            self._buf = raw
        else:
            self._buf = io.BufferedReader(raw, buffer_size)  # type: ignore[arg-type]
        self._consumed = 0

    @property
    def consumed(self) -> int:
        """Bytes taken from the stream since it was created."""
        return self._consumed

    def has_data(self) -> bool:
        """True if at least one more byte can be read."""
        return len(self._buf.peek(1)) > 0

    def read(self, n: int) -> bytes:
        """Read exactly ``n`` bytes or raise TruncatedInput."""
        if n < 0:
            raise ValueError("n must be >= 0")
        data = self._buf.read(n)
        self._consumed += len(data)
        if len(data) != n:
            raise TruncatedInput(
                f"sample data ended early: needed {n} bytes, got {len(data)} "
                f"(after {self._consumed - len(data)} bytes of sample data)"
            )
        return data

    def discard(self, n: int, *, chunk_size: int = 1 << 16) -> None:
        """Drop exactly ``n`` bytes without keeping them."""
        left = int(n)
        while left > 0:
            step = min(left, chunk_size)
            self.read(step)
            left -= step
