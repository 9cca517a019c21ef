"""SDS Converter -- Python tooling for Siglent SDS-1000 series oscilloscope captures.

Converts the fixed-layout binary that the scope writes via "Save/Recall"
(thumbdrive or web UI) into a sigrok session archive (``.sr``, srzip v2) that
PulseView and other sigrok front-ends can open.

This package provides tools for:
- Decoding the capture header (per-channel scale/offset, point count, sample rate)
- Converting raw 8-bit ADC samples into calibrated float32 values
- Decimating and time-offsetting each channel's sample stream
- Writing multi-channel, multi-part srzip archives (or a flat float32 file)

Key principles:
- Strictly sequential: channel n+1's bytes follow channel n's, the input is
  never read backwards
- No guessed calibration: the documented formula is applied as-is
- Output resources are always released, including on error paths

Main subpackages:
- models: Data models (CaptureHeader, ChannelSpec, ConversionConfig, ConversionReport)
- ingest: Forward-only sample stream and header decoding
- convert: Sample transform, decimation and the per-channel conversion driver
- export: srzip archive writer and flat-file writer
"""

from sds_converter.convert.driver import ConversionDriver, convert_file
from sds_converter.models.config import ConversionConfig

__all__ = [
    "ConversionConfig",
    "ConversionDriver",
    "convert_file",
]
