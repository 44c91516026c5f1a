"""Streaming Merkle-Damgard engine shared by every digest algorithm.

An algorithm contributes a Compressor: a running state of 32-bit words, a
compression step that folds one 64-byte block into that state, and a byte
order. StreamHasher does everything else once for all algorithms: it buffers
arbitrary writes into 64-byte blocks, counts the input length, and applies
the final padding (0x80, zeros, then the 64-bit bit length) before asking
the compressor for its digest.
"""
from abc import ABC, abstractmethod
from enum import Enum

BLOCK_SIZE = 64
LENGTH_FIELD_SIZE = 8
# Last offset at which 0x80 and the length field still fit in one block.
MAX_SINGLE_BLOCK_OFFSET = BLOCK_SIZE - LENGTH_FIELD_SIZE - 1

MASK32 = 0xffffffff
MASK64 = 0xffffffffffffffff


class Endian(Enum):
    """Byte order of state words, message words and the length field."""
    BIG = "big"
    LITTLE = "little"


class Compressor(ABC):
    """Per-algorithm compression function over a list of 32-bit words.

    Subclasses set DIGEST (the Digest class produced), ENDIAN and
    INITIAL_STATE, and implement compress().
    """

    DIGEST = None
    ENDIAN = None
    INITIAL_STATE = ()

    def __init__(self):
        self.state = list(self.INITIAL_STATE)

    @abstractmethod
    def compress(self, block):
        """Fold one 64-byte block into self.state."""

    def words(self, block):
        """Split a block into 32-bit words using the algorithm's byte order."""
        assert len(block) == BLOCK_SIZE
        order = self.ENDIAN.value
        return [int.from_bytes(block[i:i+4], order) for i in range(0, BLOCK_SIZE, 4)]

    def live_state(self):
        if self.state is None:
            raise RuntimeError(f"{type(self).__name__} was already finalized")
        return self.state

    def finalize(self):
        """Serialize the state into a digest. The compressor is spent afterwards."""
        state = self.live_state()
        self.state = None
        order = self.ENDIAN.value
        return self.DIGEST(b"".join(w.to_bytes(4, order) for w in state))


class StreamHasher:
    """Incremental hasher: any number of write() calls, then one finish().

    The digest does not depend on how the input is split across writes.
    `endian` is the byte order of both the length field and the digest words;
    it defaults to the compressor's own and must agree with it.
    """

    def __init__(self, compressor, endian=None):
        if endian is not None and endian is not compressor.ENDIAN:
            raise ValueError(
                f"{type(compressor).__name__} serializes {compressor.ENDIAN.value}-endian, "
                f"got {endian.value}-endian length field")
        self._compressor = compressor
        self.endian = compressor.ENDIAN
        self._block = bytearray(BLOCK_SIZE)
        self._offset = 0
        self._length = 0

    @property
    def digest_class(self):
        return type(self._compressor).DIGEST

    @property
    def finished(self):
        return self._compressor is None

    def _live(self):
        if self._compressor is None:
            raise RuntimeError("hasher was already finished")
        return self._compressor

    def write(self, data):
        """Append bytes; every completed 64-byte block is compressed at once.

        Returns the number of bytes consumed, which is always len(data), so the
        hasher can stand in for a binary output stream.
        """
        compressor = self._live()
        view = memoryview(data).cast("B")
        n = len(view)
        # Counted before any compression so the length field covers all input.
        self._length = (self._length + n) & MASK64
        pos = 0
        while pos < n:
            take = min(BLOCK_SIZE - self._offset, n - pos)
            self._block[self._offset:self._offset+take] = view[pos:pos+take]
            self._offset += take
            pos += take
            if self._offset == BLOCK_SIZE:
                compressor.compress(bytes(self._block))
                self._offset = 0
        return n

    update = write

    def finish(self):
        """Pad, compress the final block(s) and return the digest.

        When the buffered tail leaves room for the 0x80 terminator and the
        8-byte length (offset <= 55) a single block is emitted; otherwise the
        terminator and zeros fill the current block and a second block carries
        only zeros and the length.
        """
        compressor = self._live()
        bit_length = (self._length * 8) & MASK64
        length_field = bit_length.to_bytes(LENGTH_FIELD_SIZE, self.endian.value)
        block = self._block
        offset = self._offset
        block[offset] = 0x80
        if offset <= MAX_SINGLE_BLOCK_OFFSET:
            block[offset+1:BLOCK_SIZE-LENGTH_FIELD_SIZE] = bytes(
                BLOCK_SIZE - LENGTH_FIELD_SIZE - offset - 1)
            block[BLOCK_SIZE-LENGTH_FIELD_SIZE:] = length_field
            compressor.compress(bytes(block))
        else:
            block[offset+1:] = bytes(BLOCK_SIZE - offset - 1)
            compressor.compress(bytes(block))
            compressor.compress(bytes(BLOCK_SIZE - LENGTH_FIELD_SIZE) + length_field)
        self._compressor = None
        self._offset = 0
        return compressor.finalize()
