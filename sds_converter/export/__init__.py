"""Export package - output sinks for converted samples.

Key classes:
- SrZipWriter / AnalogChannel: sigrok session archive (srzip v2) with per-channel,
  size-capped sample parts
- RawValueWriter: flat little-endian float32 file
- ValueSink / ContainerChannelSink: the write/close capability the driver talks to
"""

from .raw import RawValueWriter
from .sinks import ContainerChannelSink, ValueSink
from .srzip import SAMPLES_LIMIT, AnalogChannel, SrZipWriter

__all__ = [
    "SAMPLES_LIMIT",
    "AnalogChannel",
    "ContainerChannelSink",
    "RawValueWriter",
    "SrZipWriter",
    "ValueSink",
]
