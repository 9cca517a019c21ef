"""
Writer for the sigrok session archive format (srzip v2).

See https://sigrok.org/wiki/File_format:Sigrok/v2

Archive layout
--------------
- ``analog-1-<channel>-<part>``: little-endian float32 samples of one analog
  channel, at most SAMPLES_LIMIT samples per part. Parts are numbered from 1
  per channel.
- ``version``: the text ``2\\n``.
- ``metadata``: INI-style text with the sample rate and the channel names.

``version`` and ``metadata`` are written exactly once, after all channel data,
when the writer is finalized.

Examples
--------
>>> with SrZipWriter("capture.sr", sample_rate=1_000_000) as sr:   # doctest: +SKIP
...     ch = sr.new_analog_channel("CH 1")
...     ch.write_many(values)
"""
from __future__ import annotations

import struct
import zipfile
from pathlib import Path
from typing import IO, BinaryIO, List, Literal, Optional

import numpy as np

from sds_converter.errors import ContainerWriteFailed, OutputIOError


# Maximum number of samples in each part
SAMPLES_LIMIT = 0x280000

SRZIP_VERSION = "2\n"

SegmentState = Literal["no-segment", "segment-open", "closed"]

_F32_LE = struct.Struct("<f")


class AnalogChannel:
    """
    One analog channel of an :class:`SrZipWriter`.

    State machine
      no-segment   -> segment-open  on the first write, or the next write after a rollover
      segment-open -> no-segment    when the sample counter reaches a multiple of SAMPLES_LIMIT
      any          -> closed        on close() (channel done, or archive finalized)

    The channel is created with part 1 already open, so a channel that never
    receives a sample still leaves an (empty) part in the archive.
    """

    def __init__(self, writer: "SrZipWriter", index: int, name: str):
        self.writer = writer
        self.index = int(index)
        self.name = str(name)
        self.samples = 0
        self.part = 0
        self._fh: Optional[IO[bytes]] = None
        self._closed = False

    @property
    def state(self) -> SegmentState:
        if self._closed:
            return "closed"
        return "no-segment" if self._fh is None else "segment-open"

    def part_name(self, part: int) -> str:
        return f"analog-1-{self.index}-{part}"

    def write(self, value: float) -> None:
        """Append one sample as little-endian float32."""
        fh = self._segment()
        self._put(fh, _F32_LE.pack(value))
        self.samples += 1
        if self.samples % SAMPLES_LIMIT == 0:
            self._close_segment()

    def write_many(self, values: np.ndarray) -> None:
        """Append a block of samples, splitting it across parts where needed."""
        arr = np.asarray(values, dtype="<f4").ravel()
        pos = 0
        while pos < arr.size:
            fh = self._segment()
            room = SAMPLES_LIMIT - (self.samples % SAMPLES_LIMIT)
            take = arr[pos:pos + room]
            self._put(fh, take.tobytes())
            self.samples += int(take.size)
            pos += int(take.size)
            if self.samples % SAMPLES_LIMIT == 0:
                self._close_segment()

    def close(self) -> None:
        """Flush the open part, if any. Further writes are rejected."""
        if self._closed:
            return
        self._close_segment()
        self._closed = True

    def _segment(self) -> IO[bytes]:
        if self._closed:
            raise ContainerWriteFailed(
                f"analog ch {self.name} is closed; no more samples can be written",
                channel_name=self.name,
            )
        if self._fh is None:
            self._open_segment()
        assert self._fh is not None
        return self._fh

    def _open_segment(self) -> None:
        self.part += 1
        self._fh = self.writer._open_entry(self.part_name(self.part), self)

    def _close_segment(self) -> None:
        if self._fh is None:
            return
        fh, self._fh = self._fh, None
        self.writer._release(self)
        try:
            fh.close()
        except (OSError, ValueError) as e:
            raise ContainerWriteFailed(
                f"can't finish part {self.part} for analog ch {self.name}: {e}",
                channel_name=self.name,
            ) from e

    def _put(self, fh: IO[bytes], data: bytes) -> None:
        try:
            fh.write(data)
        except (OSError, ValueError) as e:
            raise ContainerWriteFailed(
                f"can't write part {self.part} for analog ch {self.name}: {e}",
                channel_name=self.name,
            ) from e


class SrZipWriter:
    """
    Accumulates analog channels into an srzip archive.

    Only one archive entry can be open for writing at a time, so opening a new
    channel (or a new part) flushes whatever part another channel still holds.

    Use as a context manager: a clean exit finalizes the archive, an exception
    aborts it (the zip is closed without ``version``/``metadata``).
    """

    def __init__(
        self,
        target: str | Path | BinaryIO,
        *,
        sample_rate: int = 0,
        compression: int = zipfile.ZIP_DEFLATED,
    ):
        self.target = target
        self.sample_rate = int(sample_rate)
        self.channels: List[AnalogChannel] = []
        self._names: set[str] = set()
        self._active: Optional[AnalogChannel] = None
        self._finalized = False
        try:
            self._zip = zipfile.ZipFile(target, mode="w", compression=compression)
        except OSError as e:
            raise OutputIOError(f"can't create srzip {target}: {e}") from e

    def __enter__(self) -> "SrZipWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._finalized:
            return
        if exc_type is None:
            self.finalize()
        else:
            self.abort()

    @property
    def closed(self) -> bool:
        return self._finalized

    def new_analog_channel(self, name: str) -> AnalogChannel:
        """Register a channel (1-based index in creation order) and open its first part."""
        if self._finalized:
            raise ContainerWriteFailed(f"srzip already finalized; can't add analog ch {name}", channel_name=name)
        ch = AnalogChannel(self, len(self.channels) + 1, name)
        self.channels.append(ch)
        ch._open_segment()
        return ch

    def metadata_text(self) -> str:
        lines = [
            "",
            "[device 1]",
            f"samplerate={int(self.sample_rate)}",
            f"total analog={len(self.channels)}",
        ]
        lines.extend(f"analog{ch.index}={ch.name}" for ch in self.channels)
        return "\n".join(lines) + "\n"

    def finalize(self) -> None:
        """Close every channel, write ``version`` and ``metadata``, close the archive."""
        if self._finalized:
            raise ContainerWriteFailed("srzip already finalized")
        try:
            for ch in self.channels:
                ch.close()
            self._create_file("version", SRZIP_VERSION)
            self._create_file("metadata", self.metadata_text())
        finally:
            self._finalized = True
            self._close_zip()

    def abort(self) -> None:
        """Release the archive without writing the trailing entries."""
        if self._finalized:
            return
        self._finalized = True
        active, self._active = self._active, None
        for ch in self.channels:
            ch._closed = True
        try:
            if active is not None and active._fh is not None:
                fh, active._fh = active._fh, None
                fh.close()
        finally:
            self._close_zip()

    def _create_file(self, name: str, contents: str) -> None:
        if name in self._names:
            raise ContainerWriteFailed(f"duplicate srzip entry {name!r}")
        try:
            self._zip.writestr(name, contents)
        except (OSError, ValueError) as e:
            raise ContainerWriteFailed(f"can't write srzip entry {name!r}: {e}") from e
        self._names.add(name)

    def _open_entry(self, name: str, channel: AnalogChannel) -> IO[bytes]:
        if self._finalized:
            raise ContainerWriteFailed(
                f"srzip already finalized; can't create part for analog ch {channel.name}",
                channel_name=channel.name,
            )
        if name in self._names:
            raise ContainerWriteFailed(
                f"can't create part for analog ch {channel.name}: entry {name!r} already exists",
                channel_name=channel.name,
            )
        if self._active is not None and self._active is not channel:
            self._active._close_segment()
        try:
            fh = self._zip.open(name, mode="w")
        except (OSError, ValueError, RuntimeError) as e:
            raise ContainerWriteFailed(
                f"can't create part for analog ch {channel.name}: {e}",
                channel_name=channel.name,
            ) from e
        self._names.add(name)
        self._active = channel
        return fh

    def _release(self, channel: AnalogChannel) -> None:
        if self._active is channel:
            self._active = None

    def _close_zip(self) -> None:
        try:
            self._zip.close()
        except (OSError, ValueError) as e:
            raise OutputIOError(f"can't close srzip {self.target}: {e}") from e
