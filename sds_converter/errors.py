"""Error taxonomy for a conversion run.

Every failure is fatal for the run: nothing is retried.
"""
from __future__ import annotations

from typing import Optional


class ConversionError(Exception):
    """Base class for all conversion failures."""


class TruncatedInput(ConversionError, ValueError):
    """Header or sample data is shorter than the fixed layout requires."""


class InvalidConfig(ConversionError, ValueError):
    """Configuration rejected before any I/O takes place."""


class OutputIOError(ConversionError, OSError):
    """Output sink could not be created or written."""


class ContainerWriteFailed(OutputIOError):
    """An archive entry could not be created or written for a channel."""

    def __init__(self, message: str, channel_name: Optional[str] = None):
        super().__init__(message)
        self.channel_name = channel_name
