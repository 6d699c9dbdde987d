"""CRC16 used by the P1 port.

The polynomial is x^16 + x^15 + x^2 + 1, the CRC16-IBM one, computed least
significant bit first with no XOR in and no XOR out. Generic "CRC16-IBM"
helpers that complement the register before and after will not match the
meter.
"""
import crcmod

_crc16 = crcmod.Crc(0x18005, initCrc=0x0000, rev=True, xorOut=0x0000)

# 256 entries, bit-reversed IBM table
CRC16_TABLE = tuple(_crc16.table)


def checksum(data: bytes) -> int:
    return _crc16.new(data).crcValue


def format_checksum(value: int) -> str:
    """Render a CRC the way it is sent on the wire: 4 uppercase hex digits."""
    return f"{value:04X}"
