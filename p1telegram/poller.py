"""Reads P1 telegrams out of a byte stream.

A source is anything with a ``read(size) -> bytes`` method returning b'' once
the stream is exhausted: a file opened in binary mode, a
:class:`p1telegram.p1reader.SerialSource` or a
:class:`p1telegram.ratelimit.RateLimitedReader`.
"""
from typing import Generator, Iterator, Optional

import logging
import queue
import threading

from . import config
from .crc import checksum, format_checksum
from .exceptions import FramingError, ChecksumMismatch
from .telegram import Telegram

start_char = b'/'
end_char = b'!'
line_end_char = b'\n'
# 4 hex digits and CR LF
crc_line_size = 6

log = logging.getLogger(__name__)


class _EndOfStream(Exception):
    pass


class FrameReader:
    """Finds telegrams in ``source`` and checks their CRC.

    Noise, truncated frames and frames with a wrong CRC are logged and
    skipped. Reading stops at the end of the stream, or once
    ``max_read_errors`` reads in a row failed.
    """

    def __init__(
        self,
        source,
        chunk_size: int = config.read_chunk_size,
        max_read_errors: int = config.max_read_errors,
    ):
        self.source = source
        self.chunk_size = chunk_size
        self.max_read_errors = max_read_errors
        self.read_errors = 0
        self._buffer = bytearray()

    def _fill(self) -> None:
        try:
            data = self.source.read(self.chunk_size)
        except ValueError:
            # read on a closed file
            raise _EndOfStream()
        if not data:
            raise _EndOfStream()
        self.read_errors = 0
        self._buffer += data

    def _skip_until(self, delim: bytes) -> None:
        # drops every byte before the next delim, keeps the delim itself
        while True:
            pos = self._buffer.find(delim)
            if pos >= 0:
                del self._buffer[:pos]
                return
            self._buffer.clear()
            self._fill()

    def _read_until(self, delim: bytes) -> bytes:
        start = 0
        while True:
            pos = self._buffer.find(delim, start)
            if pos >= 0:
                data = bytes(self._buffer[:pos + 1])
                del self._buffer[:pos + 1]
                return data
            start = len(self._buffer)
            self._fill()

    def _next_frame(self) -> Telegram:
        self._skip_until(start_char)
        try:
            data = self._read_until(end_char)
            crc_bytes = self._read_until(line_end_char)
        except _EndOfStream:
            log.warning("Stream ended in the middle of a telegram.")
            raise

        if len(crc_bytes) != crc_line_size:
            raise FramingError(f"Unexpected number of CRC bytes: {crc_bytes!r}")

        data_crc = crc_bytes[:4].decode('ascii', errors='replace')
        computed_crc = format_checksum(checksum(data))
        if data_crc != computed_crc:
            raise ChecksumMismatch(data_crc, computed_crc)
        return Telegram(data)

    def frames(self) -> Generator[Telegram, None, None]:
        count = 0
        while True:
            try:
                telegram = self._next_frame()
            except _EndOfStream:
                break
            except FramingError as e:
                log.error(f"Skipped a frame: {e}")
                continue
            except ChecksumMismatch as e:
                log.warning(str(e))
                continue
            except OSError as e:
                self.read_errors += 1
                log.error(f"Could not read from the P1 source ({self.read_errors} in a row)")
                log.exception(e)
                self._buffer.clear()
                if self.read_errors >= self.max_read_errors:
                    log.error("Too many read errors, giving up.")
                    break
                continue

            count += 1
            if count % 50 == 0:
                log.debug(f"Frame reader returns telegram {count}")
            yield telegram

        log.info(f"End of P1 stream after {count} telegrams.")


class PollerWorker(threading.Thread):
    """Runs a :class:`FrameReader` and hands its telegrams over ``handoff``.

    Each telegram is handed over like a rendezvous: the worker waits until
    the consumer picked it up before reading on. ``None`` is put once the
    stream is over.
    """

    def __init__(self, source, handoff: queue.Queue, chunk_size: int = config.read_chunk_size):
        self.reader = FrameReader(source, chunk_size=chunk_size)
        self.handoff = handoff
        super().__init__(name='p1-poller', daemon=True)

    def run(self):
        try:
            for telegram in self.reader.frames():
                self.handoff.put(telegram)
                self.handoff.join()
        finally:
            self.handoff.put(None)


def _drain(handoff: queue.Queue) -> Generator[Telegram, None, None]:
    while True:
        telegram: Optional[Telegram] = handoff.get()
        if telegram is None:
            return
        handoff.task_done()
        yield telegram


def poll(source, queue_size: int = config.handoff_queue_size) -> Iterator[Telegram]:
    """Start polling ``source`` in a background thread.

    Returns the telegrams with a correct CRC, in the order they were read.
    The iterator ends with the stream.
    """
    handoff = queue.Queue(maxsize=queue_size)
    PollerWorker(source, handoff).start()
    return _drain(handoff)
