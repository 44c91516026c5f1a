"""MD5 compression function (RFC 1321).

The state words a, b, c, d are updated as 512-bit blocks are fed in by
engine.StreamHasher, which also takes care of padding. Message words and the
final digest are little-endian.
"""
import math

from digest import MD5Digest
from engine import Compressor, Endian, MASK32


class MD5(Compressor):

    DIGEST = MD5Digest
    ENDIAN = Endian.LITTLE
    # Initial vector (IV)
    INITIAL_STATE = (0x67452301, 0xefcdab89, 0x98badcfe, 0x10325476)

    # Per-round left-rotation amounts (RFC 1321)
    S_table = ((7, 12, 17, 22),
               (5, 9, 14, 20),
               (4, 11, 16, 23),
               (6, 10, 15, 21))

    # floor(2^32 · |sin(i+1)|), exact in double precision for i < 64
    K_table = tuple(int(4294967296 * abs(math.sin(i + 1))) & 0xffffffff
                    for i in range(64))

    @staticmethod
    def S(i):
        """Return the rotation amount for step index i (0 ≤ i < 64)."""
        return MD5.S_table[i // 16][i % 4]

    @staticmethod
    def K(i):
        """Return the i-th sine-derived additive constant."""
        return MD5.K_table[i]

    @staticmethod
    def F(b, c, d, i):
        """MD5 non-linear boolean function selected by round index i.

        Round 0 (i < 16): (b & c) | (~b & d)
        Round 1 (i < 32): (b & d) | (c & ~d)
        Round 2 (i < 48): b ^ c ^ d
        Round 3 (i < 64): c ^ (b | ~d)
        """
        if i < 16:
            return (b & c) | (~b & d)
        elif i < 32:
            return (b & d) | (c & ~d)
        elif i < 48:
            return b ^ c ^ d
        elif i < 64:
            return c ^ (b | ~d)
        else:
            raise ValueError("Invalid loop index")

    @staticmethod
    def index(i):
        """Message word used at step i.

        - Round 0: index = i
        - Round 1: index = (5·i + 1) mod 16
        - Round 2: index = (3·i + 5) mod 16
        - Round 3: index = (7·i) mod 16
        """
        if i < 16:
            return i
        elif i < 32:
            return (5*i + 1) % 16
        elif i < 48:
            return (3*i + 5) % 16
        return (7*i) % 16

    @staticmethod
    def ROT(x, i):
        """Rotate x left by S(i) bits, modulo 2^32."""
        x = x & MASK32
        n = MD5.S(i)
        return ((x << n) | (x >> (32 - n))) & MASK32

    @staticmethod
    def combine_words(a, b, c, d, x, i):
        """Compute b + ROT(a + F(b,c,d) + x + K(i), S(i)) (mod 2^32)."""
        f = MD5.F(b, c, d, i)
        comb = a + f + x + MD5.K(i)
        return (MD5.ROT(comb, i) + b) & MASK32

    @staticmethod
    def md5_iteration(a, b, c, d, x, i):
        """Perform one MD5 step (i) on state (a,b,c,d) with 32-bit word x."""
        a_new = d
        c_new = b
        d_new = c
        b_new = MD5.combine_words(a, b, c, d, x, i)
        return a_new, b_new, c_new, d_new

    def compress(self, block):
        """Process one 64-byte block and update the chaining state."""
        state = self.live_state()
        x = self.words(block)
        a, b, c, d = state
        for i in range(64):
            a, b, c, d = MD5.md5_iteration(a, b, c, d, x[MD5.index(i)], i)

        state[0] = (state[0] + a) & MASK32
        state[1] = (state[1] + b) & MASK32
        state[2] = (state[2] + c) & MASK32
        state[3] = (state[3] + d) & MASK32
