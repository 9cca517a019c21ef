from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Tuple

import pandas as pd

from sds_converter.models.header import CaptureHeader


OutputMode = Literal["srzip", "raw"]


@dataclass(frozen=True)
class ChannelReport:
    """What was done to one channel: calibration used and sample accounting."""
    index: int
    name: str
    scale: float
    offset: float
    samples_read: int
    samples_written: int
    parts: int = 0


@dataclass(frozen=True)
class ConversionReport:
    """
    Result of a conversion run.

    sample_rate is the rate recorded in the container metadata (None in raw mode).
    warnings collects non-fatal diagnostics in the order they occurred.
    """
    output_path: Path
    mode: OutputMode
    point_count: int
    sample_rate: Optional[int]
    channels: Tuple[ChannelReport, ...]
    warnings: Tuple[str, ...] = ()
    header: Optional[CaptureHeader] = None

    @property
    def n_channels(self) -> int:
        return len(self.channels)

    def to_frame(self) -> pd.DataFrame:
        cols = ["index", "name", "scale", "offset", "samples_read", "samples_written", "parts"]
        return pd.DataFrame(
            [[getattr(ch, c) for c in cols] for ch in self.channels],
            columns=cols,
        )
