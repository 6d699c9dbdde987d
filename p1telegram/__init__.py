from .crc import checksum, format_checksum
from .exceptions import (
    P1Error,
    FramingError,
    ChecksumMismatch,
    StructureError,
    ValueFormatError,
    TimestampFormatError,
)
from .poller import FrameReader, PollerWorker, poll
from .ratelimit import RateLimitedReader, rate_limit
from .telegram import Telegram
from .values import parse_timestamp, parse_value_with_unit
