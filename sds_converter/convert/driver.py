"""
Per-channel conversion of an SDS-1000 capture.

Flow
----
1) decode the header (scale/offset per channel, point count, sample rate)
2) for channel 1..4, while the input still has bytes:
   - resolve the channel's effective scale/offset (x10 probe, offset toggle)
   - open the channel's sink (srzip channel, or the single flat file in raw mode)
   - discard the leading samples covered by the start offset
   - read the rest of the channel's ``point_count`` bytes, decimate, transform, write
   - close the channel's sink before moving on
3) finalize the container

Raw mode stops after channel 1: the flat file has no notion of channels.

Examples
--------
>>> from sds_converter import ConversionConfig, ConversionDriver
>>> report = ConversionDriver(ConversionConfig("SDS00001.bin", decimate=4)).run()   # doctest: +SKIP
>>> report.output_path.name                                                        # doctest: +SKIP
'SDS00001.bin.sr'
"""
from __future__ import annotations

import math
from dataclasses import replace
from pathlib import Path
from typing import Callable, List

import numpy as np

from sds_converter.convert.decimate import Decimator, start_point
from sds_converter.convert.transform import transform_table
from sds_converter.export.raw import RawValueWriter
from sds_converter.export.sinks import ContainerChannelSink, ValueSink
from sds_converter.export.srzip import SrZipWriter
from sds_converter.ingest.header import read_capture_header
from sds_converter.ingest.stream import SampleStream
from sds_converter.models.config import ConversionConfig
from sds_converter.models.header import CHANNEL_COUNT, CaptureHeader, ChannelSpec
from sds_converter.models.report import ChannelReport, ConversionReport


SinkFactory = Callable[[ChannelSpec], ValueSink]


def container_sample_rate(sample_rate: float, decimate: int) -> int:
    """Effective rate after decimation, truncated to an integer."""
    return int(float(sample_rate) / int(decimate))


class ConversionDriver:
    """
    Runs one conversion described by an immutable :class:`ConversionConfig`.

    The driver owns the input file and the output sink for the duration of
    :meth:`run`; both are released on every exit path.
    """

    def __init__(self, config: ConversionConfig):
        self.config = config
        self._warnings: List[str] = []

    def run(self) -> ConversionReport:
        cfg = self.config
        self._warnings = []
        out_path = cfg.output_path

        with open(cfg.input_path, "rb") as f:
            header = read_capture_header(f)
            stream = SampleStream(f)

            if cfg.raw_output:
                with RawValueWriter(out_path) as raw:
                    channels = self.convert_channels(header, stream, lambda spec: raw)
                return self._report(out_path, "raw", header, None, channels)

            rate = self._sample_rate(header)
            with SrZipWriter(out_path, sample_rate=rate) as sr:
                channels = self.convert_channels(
                    header,
                    stream,
                    lambda spec: ContainerChannelSink(sr.new_analog_channel(spec.name)),
                )
                parts = {ch.index: ch.part for ch in sr.channels}
            channels = [replace(c, parts=parts.get(c.index, 0)) for c in channels]
            return self._report(out_path, "srzip", header, rate, channels)

    def convert_channels(
        self,
        header: CaptureHeader,
        stream: SampleStream,
        open_sink: SinkFactory,
    ) -> List[ChannelReport]:
        """Convert every channel present in ``stream``, in order."""
        cfg = self.config
        reports: List[ChannelReport] = []

        for index in range(1, CHANNEL_COUNT + 1):
            if not stream.has_data():
                if index == 1:
                    self._warnings.append("no sample data after the header; nothing converted")
                else:
                    self._warnings.append(f"capture holds {index - 1} channel(s); stopped at end of input")
                break

            spec = header.channel_spec(index, probe_10x=cfg.probe_10x, apply_offset=cfg.apply_offset)
            sink = open_sink(spec)
            reports.append(self.convert_channel(header, spec, stream, sink))
            sink.close()

            if cfg.raw_output:
                if stream.has_data():
                    self._warnings.append("raw output holds channel 1 only; remaining channel data not read")
                break

        return reports

    def convert_channel(
        self,
        header: CaptureHeader,
        spec: ChannelSpec,
        stream: SampleStream,
        sink: ValueSink,
    ) -> ChannelReport:
        """Consume exactly ``header.point_count`` bytes of ``stream`` for one channel."""
        cfg = self.config
        n_points = int(header.point_count)

        skip = start_point(cfg.start_ms, header.sample_rate)
        if skip > n_points:
            self._warnings.append(
                f"{spec.name}: start offset {cfg.start_ms:g} ms = {skip} samples exceeds "
                f"point count {n_points}; clamped"
            )
        dec = Decimator(cfg.decimate, n_points, skip)
        dec.reset()
        stream.discard(dec.start, chunk_size=cfg.chunk_size)

        table = transform_table(spec.scale, spec.offset)
        written = 0
        left = dec.n_after_start
        while left > 0:
            n = min(left, cfg.chunk_size)
            raw = np.frombuffer(stream.read(n), dtype=np.uint8)
            kept = dec.select(raw)
            if kept.size:
                sink.write_many(table[kept])
                written += int(kept.size)
            left -= n

        return ChannelReport(
            index=spec.index,
            name=spec.name,
            scale=spec.scale,
            offset=spec.offset,
            samples_read=n_points,
            samples_written=written,
        )

    def _sample_rate(self, header: CaptureHeader) -> int:
        if not math.isfinite(header.sample_rate) or header.sample_rate < 0:
            self._warnings.append(f"invalid sample rate {header.sample_rate!r} in header; recorded as 0")
            return 0
        return container_sample_rate(header.sample_rate, self.config.decimate)

    def _report(self, out_path, mode, header, rate, channels) -> ConversionReport:
        return ConversionReport(
            output_path=Path(out_path),
            mode=mode,
            point_count=int(header.point_count),
            sample_rate=rate,
            channels=tuple(channels),
            warnings=tuple(self._warnings),
            header=header,
        )


def convert_file(input_path: str | Path, **options) -> ConversionReport:
    """Convenience wrapper: build a ConversionConfig from keyword options and run it."""
    return ConversionDriver(ConversionConfig(input_path=Path(input_path), **options)).run()
