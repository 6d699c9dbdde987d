"""Reads telegrams from the P1 port of a DSMR smart meter and prints a few fields."""
from typing import Optional

import argparse
import logging
import sys

import serial

from . import config
from .exceptions import StructureError, TimestampFormatError, ValueFormatError
from .poller import poll
from .ratelimit import rate_limit
from .translator import readings
from .values import parse_timestamp

log = logging.getLogger(__name__)


class SerialSource:
    """
    Byte source on top of an open serial port.

    Find the correct tty using for example this answer:
    https://unix.stackexchange.com/a/144735/601656

    Then create a permanent link to the tty with a udev rule in
    /etc/udev/rules.d/99_usb0.rules:
    KERNEL=="ttyUSB0", SYMLINK+="serialP1"

    Don't forget to
    usermod -a -G dialout <yourname>
    to allow to read the tty with a unprivileged user.
    """

    def __init__(self, port: serial.Serial):
        self.port = port

    def read(self, size: int) -> bytes:
        # a read timing out between two telegrams is not the end of the stream
        while self.port.is_open:
            data = self.port.read(min(size, self.port.in_waiting or 1))
            if data:
                return data
        return b''


# one should tweak the tty to its need.
def open_serial(tty: str = config.serial_tty, baudrate: int = config.baudrate) -> serial.Serial:
    return serial.Serial(
        tty,
        baudrate=baudrate,
        bytesize=config.bytesize,
        parity=config.parity,
        stopbits=config.stopbits,
        timeout=config.serial_timeout,
    )


def open_source(args: argparse.Namespace):
    """Open the input selected on the command line.

    Returns the opened stream, to be closed by the caller, and the source to
    poll.
    """
    if not args.testfile:
        if args.ratelimit:
            log.warning("--ratelimit only applies to a test file, ignored.")
        port = open_serial(args.device, args.baud)
        return port, SerialSource(port)

    stream = open(args.testfile, 'rb')
    if args.ratelimit > 0:
        return stream, rate_limit(stream, args.ratelimit)
    return stream, stream


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='p1read',
        description="Print the telegrams read from the P1 port of a smart meter.",
    )
    parser.add_argument(
        '--testfile', default='',
        help="Testfile to use instead of serial port",
    )
    parser.add_argument(
        '--ratelimit', type=int, default=0,
        help="When using a testfile as input, rate-limit the release of P1 telegrams to once every n seconds.",
    )
    parser.add_argument('--device', default=config.serial_tty, help="Serial port device to use")
    parser.add_argument('--baud', type=int, default=config.baudrate, help="Baud rate to use")
    parser.add_argument('-v', '--verbose', action='store_true', help="Log debug messages")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    print("p1read")
    try:
        stream, source = open_source(args)
    except OSError as e:
        log.error(f"Could not open the P1 input: {e}")
        return 1

    with stream:
        for telegram in poll(source):
            print("Received telegram")
            try:
                records = telegram.parse()
                ts = parse_timestamp(records['0-0:1.0.0'][0])
                data = readings(records)
                delivered = data['power_delivered']
                received = data['power_returned']
            except (StructureError, TimestampFormatError, ValueFormatError) as e:
                log.error(f"Could not parse the telegram. Skipping it: {e}")
                continue
            except KeyError as e:
                log.error(f"Telegram has no {e} field. Skipping it.")
                continue

            print("Timestamp:", ts)
            print(f"Electricity power delivered: {delivered.value:g} {delivered.unit}")
            print(f"Electricity power received:  {received.value:g} {received.unit}")
            print()

    print("Done. Exiting.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
