import hashlib
import unittest

from digest import MD5Digest
from engine import BLOCK_SIZE
from hashes import Algorithm, hash_bytes
from md5 import MD5


class TestMD5Compressor(unittest.TestCase):

    def test_rotation_table_by_round(self):
        self.assertEqual([MD5.S(i) for i in range(4)], [7, 12, 17, 22])
        self.assertEqual([MD5.S(i) for i in range(16, 20)], [5, 9, 14, 20])
        self.assertEqual(MD5.S(63), 21)

    def test_sine_constants(self):
        # First and last entries of the RFC 1321 table
        self.assertEqual(MD5.K(0), 0xd76aa478)
        self.assertEqual(MD5.K(1), 0xe8c7b756)
        self.assertEqual(MD5.K(63), 0xeb86d391)
        self.assertEqual(len(MD5.K_table), 64)

    def test_message_index_schedule(self):
        self.assertEqual([MD5.index(i) for i in range(16)], list(range(16)))
        self.assertEqual([MD5.index(i) for i in range(16, 20)], [1, 6, 11, 0])
        self.assertEqual([MD5.index(i) for i in range(32, 36)], [5, 8, 11, 14])
        self.assertEqual([MD5.index(i) for i in range(48, 52)], [0, 7, 14, 5])

    def test_F_rejects_out_of_range_step(self):
        with self.assertRaises(ValueError):
            MD5.F(0, 0, 0, 64)

    def test_rotate_wraps_high_bits(self):
        # S(0) == 7
        self.assertEqual(MD5.ROT(0x80000000, 0), 0x40)
        self.assertEqual(MD5.ROT(-1, 0), 0xffffffff)

    def test_iteration_rotates_state_variables(self):
        a, b, c, d = MD5.md5_iteration(1, 2, 3, 4, 0, 0)
        self.assertEqual((a, c, d), (4, 2, 3))
        self.assertEqual(b, MD5.combine_words(1, 2, 3, 4, 0, 0))

    def test_compress_single_padded_block(self):
        # "abc" padded by hand into one block
        block = b"abc" + b"\x80" + bytes(52) + (24).to_bytes(8, "little")
        md5 = MD5()
        md5.compress(block)
        self.assertEqual(md5.finalize().hex(), hashlib.md5(b"abc").hexdigest())

    def test_state_is_little_endian_in_digest(self):
        md5 = MD5()
        digest = md5.finalize()
        self.assertEqual(bytes(digest)[:4], (0x67452301).to_bytes(4, "little"))
        self.assertEqual(bytes(digest)[12:], (0x10325476).to_bytes(4, "little"))

    def test_finalize_consumes_state(self):
        md5 = MD5()
        md5.finalize()
        with self.assertRaises(RuntimeError):
            md5.finalize()
        with self.assertRaises(RuntimeError):
            md5.compress(bytes(BLOCK_SIZE))


class TestMD5Digest(unittest.TestCase):

    def test_known_vectors(self):
        self.assertEqual(hash_bytes(b"", Algorithm.MD5).hex(),
                         "d41d8cd98f00b204e9800998ecf8427e")
        self.assertEqual(hash_bytes(bytes([0x48, 0x45, 0x4c, 0x4c, 0x4f]), Algorithm.MD5).hex(),
                         "eb61eead90e3b899c6bcbe27ac581660")

    def test_digest_type(self):
        digest = hash_bytes(b"HELLO", Algorithm.MD5)
        self.assertIsInstance(digest, MD5Digest)
        self.assertEqual(len(bytes(digest)), 16)

    def test_large_inputs(self):
        # 1018 bytes leaves 58 bytes buffered: the length spills into a second block
        for n, expected in ((1000, "7644672d049290f0390d9c993c7d343d"),
                            (1018, "b7dffc699b081a6c9fd05973f1d23360")):
            data = b"\x41" * n
            self.assertEqual(hash_bytes(data, Algorithm.MD5).hex(), expected, n)
            self.assertEqual(expected, hashlib.md5(data).hexdigest(), n)

    def test_large_inputs_in_chunks(self):
        for n, size, expected in ((1000, 7, "7644672d049290f0390d9c993c7d343d"),
                                  (1018, 17, "b7dffc699b081a6c9fd05973f1d23360")):
            hasher = Algorithm.MD5.new()
            data = b"\x41" * n
            for i in range(0, n, size):
                hasher.write(data[i:i+size])
            self.assertEqual(hasher.finish().hex(), expected, n)

    def test_rfc1321_suite(self):
        suite = [
            b"a",
            b"message digest",
            b"abcdefghijklmnopqrstuvwxyz",
            b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789",
            b"1234567890" * 8,
        ]
        for message in suite:
            self.assertEqual(hash_bytes(message, Algorithm.MD5).hex(),
                             hashlib.md5(message).hexdigest(), message)


if __name__ == "__main__":
    unittest.main(verbosity=1)
