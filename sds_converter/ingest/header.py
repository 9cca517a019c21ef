from __future__ import annotations

import os
import struct
from typing import BinaryIO

from sds_converter.errors import TruncatedInput
from sds_converter.models.header import CHANNEL_COUNT, CaptureHeader


# 16 reserved bytes, then scale1..4 and offset1..4, each float64 padded to 16 bytes.
HEADER_STRUCT = struct.Struct("<16x" + "d8x" * (2 * CHANNEL_COUNT))
# pointCount (uint32) immediately followed by sampleRate (float64), no padding.
SPEC_OFFSET = 0xF4
SPEC_STRUCT = struct.Struct("<Id")
# Contiguous uint8 streams, one per present channel.
DATA_OFFSET = 0x800


def _read_exact(stream: BinaryIO, offset: int, size: int, what: str) -> bytes:
    stream.seek(offset, os.SEEK_SET)
    buf = stream.read(size)
    if len(buf) < size:
        raise TruncatedInput(
            f"cannot read {what}: need {size} bytes at 0x{offset:X}, got {len(buf)}"
        )
    return buf


def read_capture_header(stream: BinaryIO) -> CaptureHeader:
    """
    Decode the capture header and leave ``stream`` positioned at DATA_OFFSET.

    The stream must be seekable. All fields are little-endian:
      - 0x10.. : scale1..4, then offset1..4 (float64, 16-byte slots)
      - 0xF4   : pointCount (uint32)
      - 0xF8   : sampleRate (float64)
      - 0x800  : start of sample data

    Raises TruncatedInput if the input ends before any of these offsets is
    fully available (a file must be at least DATA_OFFSET bytes long).
    """
    hdr = HEADER_STRUCT.unpack(_read_exact(stream, 0, HEADER_STRUCT.size, "channel header"))
    scales = tuple(float(x) for x in hdr[:CHANNEL_COUNT])
    offsets = tuple(float(x) for x in hdr[CHANNEL_COUNT:])

    points, sample_rate = SPEC_STRUCT.unpack(
        _read_exact(stream, SPEC_OFFSET, SPEC_STRUCT.size, "point count / sample rate")
    )

    # Seeking past EOF succeeds silently; check the size instead.
    end = stream.seek(0, os.SEEK_END)
    if end < DATA_OFFSET:
        raise TruncatedInput(
            f"cannot seek to sample data: input is {end} bytes, data starts at 0x{DATA_OFFSET:X}"
        )
    stream.seek(DATA_OFFSET, os.SEEK_SET)

    return CaptureHeader(
        scales=scales,
        offsets=offsets,
        point_count=int(points),
        sample_rate=float(sample_rate),
    )
