from .header import CHANNEL_COUNT, CaptureHeader, ChannelSpec
from .config import ConversionConfig
from .report import ChannelReport, ConversionReport

__all__ = [
    "CHANNEL_COUNT",
    "CaptureHeader",
    "ChannelSpec",
    "ConversionConfig",
    "ChannelReport",
    "ConversionReport",
]
