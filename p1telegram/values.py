import datetime

from . import config
from .exceptions import ValueFormatError, TimestampFormatError

timestamp_format = '%y%m%d%H%M%S'


def parse_value_with_unit(raw: str) -> tuple[float, str]:
    """Parse "<number>*<unit>", e.g. "000123.456*kWh".

    A unit starting with "k" is scaled to its base unit:
    "1.5*kW" gives (1500.0, "W").
    """
    parts = raw.split('*')
    if len(parts) != 2:
        raise ValueFormatError(f"Expected <value>*<unit>, got {raw!r}")

    number, unit = parts
    try:
        value = float(number)
    except ValueError as e:
        raise ValueFormatError(f"Could not parse the value of {raw!r}") from e

    if unit.startswith('k'):
        value *= 1000
        unit = unit[1:]
    return value, unit


def parse_timestamp(
    raw: str,
    zones: dict[str, datetime.tzinfo] = config.timezones,
) -> datetime.datetime:
    """Parse a meter timestamp YYMMDDhhmmssX.

    X is S when daylight saving time is active and W otherwise. ``zones``
    maps both letters to the zone the local time is expressed in.
    """
    if len(raw) != 13:
        raise TimestampFormatError(f"Timestamp must have 13 characters, got {raw!r}")

    stamp, dst = raw[:-1], raw[-1]
    try:
        tz = zones[dst]
    except KeyError:
        raise TimestampFormatError(f"Missing DST indicator in {raw!r}") from None

    if not stamp.isdigit():
        raise TimestampFormatError(f"Timestamp {raw!r} is not numeric")
    try:
        dt = datetime.datetime.strptime(stamp, timestamp_format)
    except ValueError as e:
        raise TimestampFormatError(f"Could not parse timestamp {raw!r}: {e}") from e
    return dt.replace(tzinfo=tz)
