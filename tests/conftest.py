import pytest

from p1telegram.crc import checksum, format_checksum

BODY = (
    b"/ISk5\\2MT382-1000\r\n"
    b"\r\n"
    b"1-3:0.2.8(50)\r\n"
    b"0-0:1.0.0(101209113020W)\r\n"
    b"0-0:96.1.1(4B384547303034303436333935353037)\r\n"
    b"1-0:1.8.1(123456.789*kWh)\r\n"
    b"1-0:1.8.2(123456.789*kWh)\r\n"
    b"1-0:2.8.1(123456.789*kWh)\r\n"
    b"1-0:2.8.2(123456.789*kWh)\r\n"
    b"0-0:96.14.0(0002)\r\n"
    b"1-0:1.7.0(01.193*kW)\r\n"
    b"1-0:2.7.0(00.000*kW)\r\n"
    b"0-0:96.7.21(00004)\r\n"
    b"1-0:99.97.0(2)(0-0:96.7.19)(101208152415W)(0000000240*s)(101208151004W)(0000000301*s)\r\n"
    b"1-0:32.7.0(220.1*V)\r\n"
    b"1-0:31.7.0(001*A)\r\n"
    b"0-1:24.2.1(101209112500W)(12785.123*m3)\r\n"
    b"!"
)


def make_frame(body: bytes) -> bytes:
    """Append the CRC line the meter sends after the '!'."""
    return body + format_checksum(checksum(body)).encode() + b"\r\n"


def make_body(lines: list[str], header: str = "/XXX5HDR") -> bytes:
    text = header + "\r\n\r\n" + "".join(f"{line}\r\n" for line in lines) + "!"
    return text.encode()


@pytest.fixture
def body() -> bytes:
    return BODY


@pytest.fixture
def frame() -> bytes:
    return make_frame(BODY)
