from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from sds_converter.export.srzip import AnalogChannel


class ValueSink(ABC):
    """Destination for one channel's converted float32 values."""

    @abstractmethod
    def write(self, value: float) -> None:
        """Append a single value."""
        pass

    @abstractmethod
    def write_many(self, values: np.ndarray) -> None:
        """Append a block of values, in order."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Flush and release whatever this sink holds for the channel."""
        pass


class ContainerChannelSink(ValueSink):
    """Sink backed by one analog channel of an srzip archive.

    Closing the sink closes the channel's open part; the archive itself is
    finalized by its owner.
    """

    def __init__(self, channel: AnalogChannel):
        self.channel = channel

    def write(self, value: float) -> None:
        self.channel.write(value)

    def write_many(self, values: np.ndarray) -> None:
        self.channel.write_many(values)

    def close(self) -> None:
        self.channel.close()
