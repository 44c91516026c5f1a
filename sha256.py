"""SHA-256 compression function (FIPS 180-4).

Each 512-bit block is expanded into a 64-word message schedule and mixed into
the eight state words over 64 rounds. Message words and the final digest are
big-endian.
"""
from digest import SHA256Digest
from engine import Compressor, Endian, MASK32


class SHA256(Compressor):

    DIGEST = SHA256Digest
    ENDIAN = Endian.BIG
    # First 32 bits of the fractional parts of the square roots of the first 8 primes
    INITIAL_STATE = (0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
                     0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19)

    # First 32 bits of the fractional parts of the cube roots of the first 64 primes
    K_table = (
        0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5, 0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
        0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3, 0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
        0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc, 0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
        0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7, 0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
        0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13, 0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
        0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3, 0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
        0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5, 0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
        0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208, 0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
    )

    @staticmethod
    def ROTR(x, n):
        """Rotate x right by n bits, modulo 2^32."""
        return ((x >> n) | (x << (32 - n))) & MASK32

    @staticmethod
    def sigma0(x):
        """Schedule mixing function σ0: two rotations and a shift."""
        return SHA256.ROTR(x, 7) ^ SHA256.ROTR(x, 18) ^ (x >> 3)

    @staticmethod
    def sigma1(x):
        """Schedule mixing function σ1: two rotations and a shift."""
        return SHA256.ROTR(x, 17) ^ SHA256.ROTR(x, 19) ^ (x >> 10)

    @staticmethod
    def Sigma0(x):
        """Round function Σ0, rotations only."""
        return SHA256.ROTR(x, 2) ^ SHA256.ROTR(x, 13) ^ SHA256.ROTR(x, 22)

    @staticmethod
    def Sigma1(x):
        """Round function Σ1, rotations only."""
        return SHA256.ROTR(x, 6) ^ SHA256.ROTR(x, 11) ^ SHA256.ROTR(x, 25)

    @staticmethod
    def Ch(e, f, g):
        """Bitwise choice: f where e is set, g elsewhere."""
        return (e & f) ^ (~e & g & MASK32)

    @staticmethod
    def Maj(a, b, c):
        """Bitwise majority of a, b, c."""
        return (a & b) ^ (a & c) ^ (b & c)

    @staticmethod
    def schedule(words):
        """Expand 16 message words into the 64-word message schedule."""
        w = list(words)
        for t in range(16, 64):
            w.append((SHA256.sigma1(w[t-2]) + w[t-7] +
                      SHA256.sigma0(w[t-15]) + w[t-16]) & MASK32)
        return w

    @staticmethod
    def sha256_round(a, b, c, d, e, f, g, h, w, t):
        """One round t on the working variables with schedule word w."""
        t1 = (h + SHA256.Sigma1(e) + SHA256.Ch(e, f, g) + SHA256.K_table[t] + w) & MASK32
        t2 = (SHA256.Sigma0(a) + SHA256.Maj(a, b, c)) & MASK32
        return (t1 + t2) & MASK32, a, b, c, (d + t1) & MASK32, e, f, g

    def compress(self, block):
        """Process one 64-byte block and update the chaining state."""
        state = self.live_state()
        w = SHA256.schedule(self.words(block))
        a, b, c, d, e, f, g, h = state
        for t in range(64):
            a, b, c, d, e, f, g, h = SHA256.sha256_round(a, b, c, d, e, f, g, h, w[t], t)

        for i, v in enumerate((a, b, c, d, e, f, g, h)):
            state[i] = (state[i] + v) & MASK32
