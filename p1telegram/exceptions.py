class P1Error(Exception):
    """Base class of every error raised while decoding P1 telegrams."""


class FramingError(P1Error):
    """The bytes around a frame do not follow the wire format.

    Only raised and handled inside the frame reader.
    """


class ChecksumMismatch(P1Error):
    """The CRC trailer does not match the CRC computed over the frame."""

    def __init__(self, expected: str, computed: str):
        self.expected = expected
        self.computed = computed
        super().__init__(f"CRC values do not match: {expected} vs {computed}")


class StructureError(P1Error, ValueError):
    """A telegram passed its CRC check but its body cannot be parsed."""


class ValueFormatError(P1Error, ValueError):
    """A value is not of the form <number>*<unit>."""


class TimestampFormatError(P1Error, ValueError):
    """A timestamp is not of the form YYMMDDhhmmssX with X in S, W."""
