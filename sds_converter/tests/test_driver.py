"""End-to-end conversion tests on synthetic SDS-1000 captures.

Covers:
- calibrated values for a known header and byte pattern
- decimation and start offset per channel
- multi-channel srzip output and end-of-input channel detection
- raw (flat float32) mode converting channel 1 only
- truncated input and invalid configuration
"""

from __future__ import annotations

import struct
import zipfile
from pathlib import Path

import numpy as np
import pytest

from sds_converter import ConversionConfig, ConversionDriver, convert_file
from sds_converter.errors import InvalidConfig, TruncatedInput
from sds_converter.export import srzip


def _write_capture(
    path: Path,
    channels: list[bytes],
    *,
    scales=(0.5, 1.0, 2.0, 4.0),
    offsets=(0.1, 0.0, -0.5, 1.0),
    points: int | None = None,
    rate: float = 1000.0,
) -> Path:
    buf = bytearray(0x800)
    for i in range(4):
        struct.pack_into("<d", buf, 0x10 + 0x10 * i, scales[i])
        struct.pack_into("<d", buf, 0x50 + 0x10 * i, offsets[i])
    if points is None:
        points = len(channels[0]) if channels else 0
    struct.pack_into("<Id", buf, 0xF4, points, rate)
    path.write_bytes(bytes(buf) + b"".join(channels))
    return path


def _expected(raw, scale: float, offset: float) -> np.ndarray:
    return np.array([(float(b) - 128) * scale * 10.7 / 256 - offset for b in raw], dtype=np.float32)


def _analog(out: Path, channel: int) -> np.ndarray:
    with zipfile.ZipFile(out) as z:
        names = sorted(
            (n for n in z.namelist() if n.startswith(f"analog-1-{channel}-")),
            key=lambda n: int(n.rsplit("-", 1)[1]),
        )
        return np.concatenate([np.frombuffer(z.read(n), dtype="<f4") for n in names])


def _metadata(out: Path) -> str:
    with zipfile.ZipFile(out) as z:
        return z.read("metadata").decode()


def test_scenario_single_channel_values(tmp_path: Path) -> None:
    src = _write_capture(tmp_path / "SDS00001.bin", [bytes([128, 138, 118, 128])], rate=1e6)
    report = convert_file(src)

    out = tmp_path / "SDS00001.bin.sr"
    assert report.output_path == out
    assert report.mode == "srzip"
    got = _analog(out, 1)
    assert np.array_equal(got, _expected([128, 138, 118, 128], 0.5, 0.1))
    assert got[0] == np.float32(-0.1)
    assert report.channels[0].samples_written == 4
    assert report.channels[0].parts == 1
    assert "samplerate=1000000\n" in _metadata(out)
    assert "total analog=1\nanalog1=CH 1\n" in _metadata(out)


def test_scenario_decimate_two(tmp_path: Path) -> None:
    raw = [128, 0, 0, 255, 0, 0]
    src = _write_capture(tmp_path / "d.bin", [bytes(raw)], rate=1000.0)
    report = convert_file(src, decimate=2)

    got = _analog(report.output_path, 1)
    assert len(got) == 3
    assert np.array_equal(got, _expected([raw[0], raw[2], raw[4]], 0.5, 0.1))
    assert report.sample_rate == 500
    assert "samplerate=500\n" in _metadata(report.output_path)


def test_container_rate_truncates(tmp_path: Path) -> None:
    src = _write_capture(tmp_path / "r.bin", [bytes(7)], rate=1000.0)
    report = convert_file(src, decimate=3)
    assert report.sample_rate == 333
    assert len(_analog(report.output_path, 1)) == 3


def test_multi_channel_stops_at_end_of_input(tmp_path: Path) -> None:
    ch1 = bytes([130, 126, 128, 140, 100])
    ch2 = bytes([0, 255, 128, 129, 127])
    src = _write_capture(tmp_path / "two.bin", [ch1, ch2])
    report = ConversionDriver(ConversionConfig(src)).run()

    assert [c.name for c in report.channels] == ["CH 1", "CH 2"]
    assert np.array_equal(_analog(report.output_path, 1), _expected(ch1, 0.5, 0.1))
    assert np.array_equal(_analog(report.output_path, 2), _expected(ch2, 1.0, 0.0))
    meta = _metadata(report.output_path)
    assert "total analog=2\n" in meta
    assert meta.index("analog1=CH 1") < meta.index("analog2=CH 2")
    assert any("2 channel(s)" in w for w in report.warnings)


def test_four_channels_no_warning(tmp_path: Path) -> None:
    chans = [bytes([128 + i] * 3) for i in range(4)]
    src = _write_capture(tmp_path / "four.bin", chans)
    report = convert_file(src)
    assert report.n_channels == 4
    assert report.warnings == ()
    for i, (s, o) in enumerate(zip((0.5, 1.0, 2.0, 4.0), (0.1, 0.0, -0.5, 1.0)), start=1):
        assert np.array_equal(_analog(report.output_path, i), _expected(chans[i - 1], s, o))


def test_probe_and_offset_toggles(tmp_path: Path) -> None:
    raw = bytes([120, 136])
    src = _write_capture(tmp_path / "p.bin", [raw])

    rep = convert_file(src, probe_10x=True)
    assert np.array_equal(_analog(rep.output_path, 1), _expected(raw, 5.0, 1.0))
    assert rep.channels[0].scale == 5.0

    rep = convert_file(src, probe_10x=True, apply_offset=False)
    assert np.array_equal(_analog(rep.output_path, 1), _expected(raw, 5.0, 0.0))
    assert rep.channels[0].offset == 0.0


def test_start_offset_discards_per_channel(tmp_path: Path) -> None:
    ch1 = bytes(range(100, 110))
    ch2 = bytes(range(200, 210))
    # 1000 Sa/s -> 3 ms = 3 samples
    src = _write_capture(tmp_path / "s.bin", [ch1, ch2], rate=1000.0)
    report = convert_file(src, start_ms=3.0, decimate=2)

    assert np.array_equal(_analog(report.output_path, 1), _expected(ch1[3::2], 0.5, 0.1))
    assert np.array_equal(_analog(report.output_path, 2), _expected(ch2[3::2], 1.0, 0.0))
    assert [c.samples_read for c in report.channels] == [10, 10]


def test_start_offset_past_point_count_is_clamped(tmp_path: Path) -> None:
    src = _write_capture(tmp_path / "c.bin", [bytes(4), bytes([200] * 4)], rate=1000.0)
    report = convert_file(src, start_ms=50.0)
    assert len(_analog(report.output_path, 1)) == 0
    assert len(_analog(report.output_path, 2)) == 0
    assert report.n_channels == 2
    assert any("clamped" in w for w in report.warnings)


@pytest.mark.parametrize("chunk_size", [1, 3, 64])
def test_chunk_size_does_not_change_output(tmp_path: Path, chunk_size: int) -> None:
    rng = np.random.default_rng(0)
    ch1 = rng.integers(0, 256, size=101, dtype=np.uint8).tobytes()
    ch2 = rng.integers(0, 256, size=101, dtype=np.uint8).tobytes()
    src = _write_capture(tmp_path / "k.bin", [ch1, ch2])
    report = convert_file(src, decimate=3, chunk_size=chunk_size)
    assert np.array_equal(_analog(report.output_path, 1), _expected(ch1[::3], 0.5, 0.1))
    assert np.array_equal(_analog(report.output_path, 2), _expected(ch2[::3], 1.0, 0.0))


def test_channel_rolls_over_parts(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(srzip, "SAMPLES_LIMIT", 4)
    ch1 = bytes(range(120, 129))
    src = _write_capture(tmp_path / "roll.bin", [ch1])
    report = convert_file(src)
    assert report.channels[0].parts == 3
    with zipfile.ZipFile(report.output_path) as z:
        assert [n for n in z.namelist() if n.startswith("analog")] == [
            "analog-1-1-1",
            "analog-1-1-2",
            "analog-1-1-3",
        ]
    assert np.array_equal(_analog(report.output_path, 1), _expected(ch1, 0.5, 0.1))


def test_raw_mode_converts_channel_one_only(tmp_path: Path) -> None:
    ch1 = bytes([128, 140, 116])
    ch2 = bytes([1, 2, 3])
    src = _write_capture(tmp_path / "raw.bin", [ch1, ch2])
    report = convert_file(src, raw_output=True)

    out = tmp_path / "raw.bin-raw.bin"
    assert report.output_path == out
    assert report.mode == "raw"
    assert report.sample_rate is None
    assert report.n_channels == 1
    got = np.fromfile(out, dtype="<f4")
    assert np.array_equal(got, _expected(ch1, 0.5, 0.1))
    assert not (tmp_path / "raw.bin.sr").exists()
    assert any("channel 1 only" in w for w in report.warnings)


def test_empty_capture_finalizes_empty_container(tmp_path: Path) -> None:
    src = _write_capture(tmp_path / "e.bin", [], points=16)
    report = convert_file(src)
    assert report.n_channels == 0
    assert "total analog=0\n" in _metadata(report.output_path)
    assert any("no sample data" in w for w in report.warnings)


def test_truncated_channel_data(tmp_path: Path) -> None:
    src = _write_capture(tmp_path / "t.bin", [bytes(10), bytes(4)], points=10)
    with pytest.raises(TruncatedInput):
        convert_file(src)
    # aborted archive: no trailing entries
    with zipfile.ZipFile(tmp_path / "t.bin.sr") as z:
        assert "metadata" not in z.namelist()


def test_truncated_header(tmp_path: Path) -> None:
    src = tmp_path / "short.bin"
    src.write_bytes(b"\x00" * 0x100)
    with pytest.raises(TruncatedInput):
        convert_file(src)


@pytest.mark.parametrize("kwargs", [{"decimate": 0}, {"decimate": -2}, {"start_ms": -1.0}, {"chunk_size": 0}])
def test_invalid_config_rejected_before_io(tmp_path: Path, kwargs) -> None:
    missing = tmp_path / "does-not-exist.bin"
    with pytest.raises(InvalidConfig):
        convert_file(missing, **kwargs)
    assert not (tmp_path / "does-not-exist.bin.sr").exists()


def test_report_frame(tmp_path: Path) -> None:
    src = _write_capture(tmp_path / "f.bin", [bytes(5), bytes(5)])
    df = convert_file(src, decimate=2).to_frame()
    assert list(df["name"]) == ["CH 1", "CH 2"]
    assert list(df["samples_written"]) == [3, 3]
    assert list(df["parts"]) == [1, 1]
