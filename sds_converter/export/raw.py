from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO, Optional

import numpy as np

from sds_converter.errors import OutputIOError
from sds_converter.export.sinks import ValueSink


_F32_LE = struct.Struct("<f")


class RawValueWriter(ValueSink):
    """
    Flat output: little-endian float32 values back to back, no header.

    Used for debugging the conversion; it has no notion of channels, so it only
    ever receives one channel's values. An existing file is truncated.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.samples = 0
        self._fh: Optional[BinaryIO] = None
        try:
            self._fh = open(self.path, "wb")
        except OSError as e:
            raise OutputIOError(f"can't create output file {self.path}: {e}") from e

    def __enter__(self) -> "RawValueWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._fh is None

    def write(self, value: float) -> None:
        self._write(_F32_LE.pack(value), 1)

    def write_many(self, values: np.ndarray) -> None:
        arr = np.asarray(values, dtype="<f4")
        if arr.size:
            self._write(arr.tobytes(), int(arr.size))

    def _write(self, data: bytes, n: int) -> None:
        if self._fh is None:
            raise OutputIOError(f"write to closed output file {self.path}")
        try:
            self._fh.write(data)
        except OSError as e:
            raise OutputIOError(f"write failed on {self.path}: {e}") from e
        self.samples += n

    def close(self) -> None:
        if self._fh is None:
            return
        fh, self._fh = self._fh, None
        try:
            fh.close()
        except OSError as e:
            raise OutputIOError(f"close failed on {self.path}: {e}") from e
