"""
Tests for the p1read program and the serial byte source.
"""

import argparse

import pytest

from p1telegram import p1reader
from p1telegram.p1reader import SerialSource, main, open_source
from p1telegram.ratelimit import RateLimitedReader

from conftest import BODY, make_body, make_frame


class FakePort:
    """Stands in for serial.Serial: reads time out before data shows up."""

    def __init__(self, *chunks):
        self.chunks = list(chunks)
        self.is_open = True
        self.reads = []

    @property
    def in_waiting(self):
        return len(self.chunks[0]) if self.chunks else 0

    def read(self, size=1):
        self.reads.append(size)
        if not self.chunks:
            self.is_open = False
            return b""
        chunk = self.chunks.pop(0)
        return chunk[:size]


class TestSerialSource:

    def test_timeouts_are_not_end_of_stream(self):
        port = FakePort(b"", b"", b"/abc")
        assert SerialSource(port).read(1024) == b"/abc"

    def test_read_is_bounded_by_size(self):
        port = FakePort(b"/abcdef")
        assert SerialSource(port).read(3) == b"/ab"

    def test_closed_port_ends_stream(self):
        port = FakePort()
        port.is_open = False
        assert SerialSource(port).read(1024) == b""


class TestOpenSource:

    def test_testfile(self, tmp_path):
        path = tmp_path / "p1.bin"
        path.write_bytes(make_frame(BODY))
        args = argparse.Namespace(testfile=str(path), ratelimit=0, device="", baud=115200)

        stream, source = open_source(args)
        with stream:
            assert source is stream
            assert source.read(5) == b"/ISk5"

    def test_testfile_rate_limited(self, tmp_path):
        path = tmp_path / "p1.bin"
        path.write_bytes(b"")
        args = argparse.Namespace(testfile=str(path), ratelimit=10, device="", baud=115200)

        stream, source = open_source(args)
        with stream:
            assert isinstance(source, RateLimitedReader)
            assert source.delay == 10

    def test_serial_device(self, monkeypatch):
        opened = {}

        def fake_open_serial(tty, baudrate):
            opened.update(tty=tty, baudrate=baudrate)
            return FakePort()

        monkeypatch.setattr(p1reader, "open_serial", fake_open_serial)
        args = argparse.Namespace(testfile="", ratelimit=0, device="/dev/ttyP1", baud=9600)

        port, source = open_source(args)
        assert opened == {"tty": "/dev/ttyP1", "baudrate": 9600}
        assert isinstance(source, SerialSource)
        assert source.port is port


class TestMain:

    def test_prints_telegrams(self, tmp_path, capsys):
        path = tmp_path / "p1.bin"
        second = make_body(["0-0:1.0.0(210315120000S)", "1-0:1.7.0(0001.234*kW)", "1-0:2.7.0(0000.000*kW)"])
        path.write_bytes(b"noise" + make_frame(BODY) + make_frame(second))

        assert main(["--testfile", str(path)]) == 0

        out = capsys.readouterr().out
        assert out.count("Received telegram") == 2
        assert "Timestamp: 2010-12-09 11:30:20+01:00" in out
        assert "Timestamp: 2021-03-15 12:00:00+02:00" in out
        assert "Electricity power delivered: 1193 W" in out
        assert "Electricity power delivered: 1234 W" in out
        assert "Electricity power received:  0 W" in out
        assert out.rstrip().endswith("Done. Exiting.")

    def test_skips_unparseable_telegram(self, tmp_path, capsys):
        path = tmp_path / "p1.bin"
        no_timestamp = make_body(["1-0:1.7.0(0001.234*kW)"])
        bad_timestamp = make_body(["0-0:1.0.0(210315120000X)"])
        no_returned = make_body(["0-0:1.0.0(210315120000S)", "1-0:1.7.0(0001.234*kW)"])
        bad_value = make_body([
            "0-0:1.0.0(210315120000S)", "1-0:1.7.0(0001.234)", "1-0:2.7.0(0000.000*kW)",
        ])
        path.write_bytes(
            make_frame(no_timestamp) + make_frame(bad_timestamp)
            + make_frame(no_returned) + make_frame(bad_value) + make_frame(BODY)
        )

        assert main(["--testfile", str(path)]) == 0

        out = capsys.readouterr().out
        assert out.count("Received telegram") == 5
        assert out.count("Timestamp:") == 1

    def test_missing_testfile(self, tmp_path):
        assert main(["--testfile", str(tmp_path / "missing.bin")]) == 1

    def test_bad_arguments(self):
        with pytest.raises(SystemExit):
            main(["--baud", "fast"])
