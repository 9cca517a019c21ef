"""Command-line front-end: ``sds2sr [options] <capture.bin>``."""
from __future__ import annotations

from typing import Optional, Sequence

from sds_converter.convert.driver import ConversionDriver
from sds_converter.errors import ConversionError, InvalidConfig
from sds_converter.models.config import ConversionConfig


def build_parser():
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="sds2sr",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Convert a Siglent SDS-1000 series binary capture into a sigrok session (.sr).

            The capture is saved on the scope via Save/Recall (thumbdrive or web UI).
            Output is written next to the input as <input>.sr, or <input>-raw.bin with --raw.
            """
        ),
    )
    p.add_argument("input", help="Binary capture file (*.bin)")
    p.add_argument("--10x", dest="probe_10x", action="store_true", help="Apply x10 probe multiplier")
    p.add_argument("--raw", action="store_true", help="Write a flat float32 file (channel 1 only) instead of .sr")
    p.add_argument(
        "--no-offset",
        dest="apply_offset",
        action="store_false",
        help="Do not subtract the vertical offset from values (debugging)",
    )
    p.add_argument("--start-at", type=float, default=0.0, help="Start offset in milliseconds to process from")
    p.add_argument("--decimate", type=int, default=1, help="Keep one sample out of every N (N >= 1)")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = build_parser()
    ns = p.parse_args(list(argv) if argv is not None else None)

    try:
        cfg = ConversionConfig(
            input_path=ns.input,
            probe_10x=bool(ns.probe_10x),
            raw_output=bool(ns.raw),
            apply_offset=bool(ns.apply_offset),
            start_ms=float(ns.start_at),
            decimate=int(ns.decimate),
        )
    except InvalidConfig as e:
        print(f"[error] {e}")
        return 2

    print(f"[info] input: {cfg.input_path}")
    try:
        report = ConversionDriver(cfg).run()
    except FileNotFoundError as e:
        print(f"[error] cannot open input: {e}")
        return 1
    except ConversionError as e:
        print(f"[error] {type(e).__name__}: {e}")
        return 1

    if report.header is not None:
        print(f"[info] points={report.header.point_count} samplerate={report.header.sample_rate:g} Sa/s")
        print(report.header.to_frame().to_string(index=False))
    for m in report.warnings:
        print(f"[warn] {m}")
    if report.sample_rate is not None:
        print(f"[info] container samplerate: {report.sample_rate}")
    print(report.to_frame().to_string(index=False))
    print(f"[info] wrote: {report.output_path} ({report.mode}, {report.n_channels} channel(s))")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
