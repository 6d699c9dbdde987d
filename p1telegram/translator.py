from typing import Generator, Optional

import datetime
from collections import namedtuple

from .values import parse_timestamp, parse_value_with_unit

PhysicalData = namedtuple('PhysicalData', 'time value unit')

timestamp_code = '0-0:1.0.0'

# (ID-code, name, unit once scaled). None when the value has no unit.
_obis_map = [
    (timestamp_code, 'timestamp', None),
    ('0-0:96.14.0', 'tariff_indicator', None),

    ('1-0:1.8.1', 'energy_delivered_tariff1', 'Wh'),
    ('1-0:1.8.2', 'energy_delivered_tariff2', 'Wh'),
    ('1-0:2.8.1', 'energy_returned_tariff1', 'Wh'),
    ('1-0:2.8.2', 'energy_returned_tariff2', 'Wh'),

    ('1-0:1.7.0', 'power_delivered', 'W'),
    ('1-0:2.7.0', 'power_returned', 'W'),

    ('1-0:32.7.0', 'voltage1', 'V'),
    ('1-0:52.7.0', 'voltage2', 'V'),
    ('1-0:72.7.0', 'voltage3', 'V'),
    ('1-0:31.7.0', 'current1', 'A'),
    ('1-0:51.7.0', 'current2', 'A'),
    ('1-0:71.7.0', 'current3', 'A'),

    ('1-0:21.7.0', 'power_delivered1', 'W'),
    ('1-0:41.7.0', 'power_delivered2', 'W'),
    ('1-0:61.7.0', 'power_delivered3', 'W'),
    ('1-0:22.7.0', 'power_returned1', 'W'),
    ('1-0:42.7.0', 'power_returned2', 'W'),
    ('1-0:62.7.0', 'power_returned3', 'W'),
]


def get_meters() -> Generator[tuple[str, str, Optional[str]], None, None]:
    for code, name, unit in _obis_map:
        yield code, name, unit


def get_name(code: str) -> Optional[str]:
    for tcode, name, _unit in _obis_map:
        if tcode == code:
            return name
    return None


def get_unit(code: str) -> Optional[str]:
    for tcode, _name, unit in _obis_map:
        if tcode == code:
            return unit
    return None


def get_timestamp(records: dict[str, list[str]]) -> Optional[datetime.datetime]:
    try:
        raw = records[timestamp_code][0]
    except (KeyError, IndexError):
        return None
    return parse_timestamp(raw)


def readings(records: dict[str, list[str]]) -> dict[str, PhysicalData]:
    """Decode the known measurements of a parsed telegram.

    Values are scaled to their base unit (kWh to Wh, kW to W) and stamped
    with the time of the telegram.
    """
    ct = get_timestamp(records)
    result = {}
    for code, name, unit in _obis_map:
        if unit is None or code not in records:
            continue
        value, value_unit = parse_value_with_unit(records[code][0])
        result[name] = PhysicalData(ct, value, value_unit)
    return result
