"""Replays a captured P1 stream at the pace of a real meter.

Save the output of a meter to a file, open it and wrap it with
:func:`rate_limit`: the telegrams then come out every ``delay`` seconds,
the way a meter sends one every 10 seconds.
"""
from typing import Callable

import logging
import time

from . import config

log = logging.getLogger(__name__)


class RateLimitedReader:

    def __init__(
        self,
        source,
        delay: float,
        delim: bytes = b'/',
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.delay = delay
        self.delim = delim
        self.sleep = sleep
        self.clock = clock
        self._buffer = bytearray()
        self._eof = False
        self._next_release = clock() + delay

    def _peek(self, size: int) -> bytes:
        while len(self._buffer) < size and not self._eof:
            data = self.source.read(size - len(self._buffer))
            if not data:
                self._eof = True
                break
            self._buffer += data
        return bytes(self._buffer[:size])

    def _take(self, size: int) -> bytes:
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def _wait(self) -> None:
        now = self.clock()
        if self._next_release > now:
            log.debug(f"Holding next telegram for {self._next_release - now:.2f}s")
            self.sleep(self._next_release - now)
            now = self._next_release
        self._next_release = max(self._next_release, now) + self.delay

    def read(self, size: int = config.read_chunk_size) -> bytes:
        tmp = self._peek(size)
        if not tmp:
            return b''

        start = tmp.find(self.delim)
        # no telegram starting here, hand out everything
        if start < 0:
            return self._take(len(tmp))
        # hand out what comes before the next telegram first
        if start > 0:
            return self._take(start)

        # a new telegram starts here
        self._wait()
        following = tmp.find(self.delim, 1)
        if following < 0:
            return self._take(len(tmp))
        return self._take(following)


def rate_limit(source, delay: float = config.telegram_interval) -> RateLimitedReader:
    return RateLimitedReader(source, delay)
