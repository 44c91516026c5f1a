"""Fixed-size digest values.

A digest is an immutable byte string whose length is fixed by the hash
algorithm that produced it (16 bytes for MD5, 32 bytes for SHA-256). Its
only textual form is lowercase hexadecimal, two characters per byte, byte 0
first; `from_hex` parses that form back exactly.
"""

HEX_DIGITS = "0123456789abcdefABCDEF"


class DigestParseError(ValueError):
    """Raised when a hexadecimal string cannot be turned into a digest."""


class MalformedDigestError(DigestParseError):
    """The hex string length does not match the digest size."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"invalid str length: expected {expected}, actual {actual}")


class InvalidHexDigitError(DigestParseError):
    """A character that is not a hex digit appears in the hex string."""

    def __init__(self, position, pair):
        self.position = position
        self.pair = pair
        super().__init__(f"invalid hex byte {pair!r} at offset {position}")


class Digest:

    # Number of raw bytes; set by each algorithm's subclass.
    SIZE = None

    __slots__ = ("_raw",)

    def __init__(self, raw):
        # memoryview refuses ints, which bytes() would turn into zero padding
        raw = bytes(memoryview(raw))
        if self.SIZE is None:
            raise TypeError("Digest is abstract; use an algorithm digest class")
        if len(raw) != self.SIZE:
            raise ValueError(
                f"{type(self).__name__} takes {self.SIZE} bytes, got {len(raw)}")
        object.__setattr__(self, "_raw", raw)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_hex(cls, text):
        """Parse the output of `hex()`; upper-case digits are accepted.

        Raises MalformedDigestError on a wrong length and InvalidHexDigitError
        on a bad digit. Nothing is constructed unless the whole string parses.
        """
        if len(text) != 2 * cls.SIZE:
            raise MalformedDigestError(2 * cls.SIZE, len(text))
        raw = bytearray(cls.SIZE)
        for i in range(cls.SIZE):
            pair = text[2*i:2*i+2]
            # int(..., 16) also tolerates "+", "_" and whitespace
            if pair[0] not in HEX_DIGITS or pair[1] not in HEX_DIGITS:
                raise InvalidHexDigitError(2 * i, pair)
            raw[i] = int(pair, 16)
        return cls(raw)

    def hex(self):
        return "".join(f"{byte:02x}" for byte in self._raw)

    def __bytes__(self):
        return self._raw

    def __len__(self):
        return self.SIZE

    def __eq__(self, other):
        if not isinstance(other, Digest):
            return NotImplemented
        return type(self) is type(other) and self._raw == other._raw

    def __hash__(self):
        return hash((type(self).__name__, self._raw))

    def __str__(self):
        return self.hex()

    def __repr__(self):
        return f"{type(self).__name__}('{self.hex()}')"


class MD5Digest(Digest):
    """128-bit MD5 digest."""
    __slots__ = ()
    SIZE = 16


class SHA256Digest(Digest):
    """256-bit SHA-256 digest."""
    __slots__ = ()
    SIZE = 32
