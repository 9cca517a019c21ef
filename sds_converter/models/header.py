from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import pandas as pd


# The header always carries four channel slots, populated or not.
CHANNEL_COUNT = 4

PROBE_10X_FACTOR = 10.0


@dataclass(frozen=True)
class ChannelSpec:
    """
    Effective calibration for one channel after the probe multiplier and the
    offset toggle have been applied.

    index: 1-based channel number (1..4)
    scale: vertical scale, already multiplied by 10 for a x10 probe
    offset: vertical offset in the same unit; 0.0 when offset application is disabled
    """
    index: int
    scale: float
    offset: float

    @property
    def name(self) -> str:
        return f"CH {self.index}"


@dataclass(frozen=True)
class CaptureHeader:
    """
    Fixed-layout capture header of an SDS-1000 binary.

    Notes
    - scales/offsets always hold exactly CHANNEL_COUNT entries; a slot being filled
      says nothing about whether the channel's samples exist in the file.
    - point_count is the number of raw bytes stored per present channel.
    """
    scales: Tuple[float, ...]
    offsets: Tuple[float, ...]
    point_count: int
    sample_rate: float

    def __post_init__(self) -> None:
        if len(self.scales) != CHANNEL_COUNT or len(self.offsets) != CHANNEL_COUNT:
            raise ValueError(
                f"CaptureHeader needs {CHANNEL_COUNT} scale/offset slots, "
                f"got {len(self.scales)}/{len(self.offsets)}"
            )

    def channel_spec(self, index: int, *, probe_10x: bool = False, apply_offset: bool = True) -> ChannelSpec:
        """Resolve the effective scale/offset of 1-based channel ``index``."""
        if not 1 <= index <= CHANNEL_COUNT:
            raise ValueError(f"channel index must be in [1, {CHANNEL_COUNT}], got {index}")
        scale = float(self.scales[index - 1])
        offset = float(self.offsets[index - 1])
        if probe_10x:
            scale = PROBE_10X_FACTOR * scale
            offset = PROBE_10X_FACTOR * offset
        if not apply_offset:
            offset = 0.0
        return ChannelSpec(index=index, scale=scale, offset=offset)

    def to_frame(self) -> pd.DataFrame:
        """One row per channel slot, for display."""
        return pd.DataFrame(
            {
                "channel": [f"CH {i}" for i in range(1, CHANNEL_COUNT + 1)],
                "scale": list(self.scales),
                "offset": list(self.offsets),
            }
        )
