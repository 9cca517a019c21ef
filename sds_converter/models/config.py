from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

from sds_converter.errors import InvalidConfig


RAW_SUFFIX = "-raw.bin"
SRZIP_SUFFIX = ".sr"


@dataclass(frozen=True)
class ConversionConfig:
    """
    Resolved configuration for one conversion run.

    probe_10x:
      Apply the x10 probe multiplier to every channel's scale and offset.
    raw_output:
      Write a flat little-endian float32 file (channel 1 only) instead of an srzip archive.
    apply_offset:
      Subtract the channel's vertical offset. Disable to inspect uncorrected values.
    start_ms:
      Elapsed time (milliseconds) to skip at the start of every channel. 0 disables.
    decimate:
      Keep one sample out of every ``decimate``. Must be >= 1.
    chunk_size:
      Number of raw bytes pulled from the input per read.

    The record is validated on construction, so an invalid one never reaches any I/O.
    """
    input_path: Path
    probe_10x: bool = False
    raw_output: bool = False
    apply_offset: bool = True
    start_ms: float = 0.0
    decimate: int = 1
    chunk_size: int = 1 << 16

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_path", Path(self.input_path))
        if int(self.decimate) != self.decimate or self.decimate < 1:
            raise InvalidConfig(f"decimation factor cannot be less than 1 (got {self.decimate!r})")
        if not math.isfinite(float(self.start_ms)) or self.start_ms < 0:
            raise InvalidConfig(f"start offset must be a finite value >= 0 ms (got {self.start_ms!r})")
        if self.chunk_size < 1:
            raise InvalidConfig(f"chunk_size must be >= 1 (got {self.chunk_size!r})")
        object.__setattr__(self, "decimate", int(self.decimate))

    @property
    def output_path(self) -> Path:
        suffix = RAW_SUFFIX if self.raw_output else SRZIP_SUFFIX
        return self.input_path.with_name(self.input_path.name + suffix)
