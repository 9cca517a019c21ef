from __future__ import annotations

import math

import numpy as np


def start_point(start_ms: float, sample_rate: float) -> int:
    """
    Number of raw samples covering ``start_ms`` milliseconds at ``sample_rate``.

    floor(start_ms * sample_rate / 1000); 0 when start_ms <= 0.
    """
    if start_ms <= 0:
        return 0
    n = start_ms * sample_rate / 1000.0
    if not math.isfinite(n) or n <= 0:
        return 0
    return int(math.floor(n))


class Decimator:
    """
    Per-channel sample selection.

    For a channel of ``point_count`` raw samples, the first ``start`` samples are
    discarded, then samples start, start+d, start+2d, ... are kept. After a kept
    sample the next d-1 samples are skipped, or only what is left of the channel
    if fewer remain.

    Blocks of consecutive raw samples are fed through :meth:`select`; the running
    phase carries over between blocks and is cleared by :meth:`reset` at the start
    of every channel.
    """

    def __init__(self, factor: int, point_count: int, start: int = 0):
        factor = int(factor)
        if factor < 1:
            raise ValueError(f"decimation factor must be >= 1, got {factor}")
        self.factor = factor
        self.point_count = int(point_count)
        self.start = min(max(int(start), 0), self.point_count)
        self._phase = 0

    @property
    def n_after_start(self) -> int:
        """Raw samples left to iterate once the leading samples are discarded."""
        return self.point_count - self.start

    @property
    def n_kept(self) -> int:
        """Samples emitted for a full channel pass: ceil((point_count - start) / factor)."""
        return -(-self.n_after_start // self.factor)

    def reset(self) -> None:
        self._phase = 0

    def select(self, block: np.ndarray) -> np.ndarray:
        """Return the kept samples of the next consecutive block of raw samples."""
        if self.factor == 1:
            return block
        out = block[self._phase::self.factor]
        self._phase = (self._phase - len(block)) % self.factor
        return out

    def kept_indices(self) -> np.ndarray:
        """Raw-sample indices (0-based, within the channel) that are emitted."""
        return np.arange(self.start, self.point_count, self.factor, dtype=np.int64)
