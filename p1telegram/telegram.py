from .exceptions import StructureError

# "/XXXZ" : start delimiter, manufacturer code and baud rate digit
_header_prefix = 5
_line_end = '\r\n'


def _decode(data: bytes) -> str:
    try:
        return data.decode('ascii')
    except UnicodeDecodeError as e:
        raise StructureError(f"Telegram holds a non ASCII byte at {e.start}") from e


class Telegram(bytes):
    """One P1 telegram, from the leading '/' up to and including the '!'.

    Only the frame reader creates telegrams, once their CRC has been checked.
    """

    def __repr__(self) -> str:
        return f"Telegram({bytes.__repr__(self)})"

    def identifier(self) -> str:
        """The text following "/XXXZ" on the first line."""
        end = self.find(b'\r\n\r\n')
        if end < _header_prefix:
            raise StructureError("Telegram header is too short or not followed by an empty line")
        return _decode(self[_header_prefix:end])

    def parse(self) -> dict[str, list[str]]:
        """Map each ID-code of the telegram to the values found between brackets.

        The first line holds the identifier and the second one must be empty.
        The last one only contains the '!' and is skipped. When an ID-code
        shows up twice, the last line wins.
        """
        lines = _decode(self).split(_line_end)

        if len(lines) < 2:
            raise StructureError("Unexpected number of lines in telegram")
        if not lines[0].startswith('/'):
            raise StructureError("Expected '/' missing in first line of telegram")
        if lines[1]:
            raise StructureError(
                "Missing separating new line (CR+LF) between identifier and data in telegram"
            )

        data_lines = lines[2:-1]
        if not data_lines:
            raise StructureError("Telegram has no data lines")

        result = {}
        for i, line in enumerate(data_lines, start=2):
            id_code_end = line.find('(')
            if id_code_end < 0:
                raise StructureError(f"Expected '(', not found on line {i}")

            id_code = line[:id_code_end]
            # the rest of the line is a list of "(value)"
            result[id_code] = line[id_code_end + 1:-1].split(')(')
        return result
