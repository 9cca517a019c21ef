"""Ingest package - reading SDS-1000 capture binaries.

This package handles:
- Decoding the fixed-offset capture header
- Handing out a forward-only stream over the contiguous per-channel sample data

Key classes:
- SampleStream: single-reader cursor over the sample region
- read_capture_header: HeaderDecoder, returns a validated CaptureHeader

Design principle:
- The input has no signature bytes; fields are read at fixed offsets by convention
- Once sample data starts, nothing seeks backwards
"""

from .header import DATA_OFFSET, HEADER_STRUCT, SPEC_OFFSET, SPEC_STRUCT, read_capture_header
from .stream import SampleStream

__all__ = [
    "DATA_OFFSET",
    "HEADER_STRUCT",
    "SPEC_OFFSET",
    "SPEC_STRUCT",
    "SampleStream",
    "read_capture_header",
]
