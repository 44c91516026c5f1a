"""Registry of the supported digest algorithms.

Adding an algorithm means writing its Compressor and Digest classes and
listing the compressor here.
"""
from enum import Enum

from engine import StreamHasher
from md5 import MD5
from sha256 import SHA256

DEFAULT_CHUNK_SIZE = 64 * 1024


class Algorithm(Enum):
    MD5 = "md5"
    SHA256 = "sha256"

    def __str__(self):
        # Tag used in BSD-style checksum lines
        return self.name

    @property
    def compressor(self):
        return _COMPRESSORS[self]

    @property
    def digest_class(self):
        return self.compressor.DIGEST

    def new(self):
        """Return a fresh StreamHasher for this algorithm."""
        compressor = self.compressor()
        return StreamHasher(compressor, compressor.ENDIAN)


_COMPRESSORS = {
    Algorithm.MD5: MD5,
    Algorithm.SHA256: SHA256,
}

_ALIASES = {
    "sha-256": Algorithm.SHA256,
}


def lookup(name):
    name = name.lower()
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return Algorithm(name)
    except ValueError:
        raise ValueError(f"unsupported digest algorithm: {name!r}") from None


def new(name):
    """Return a StreamHasher for the algorithm called `name` (e.g. "sha256")."""
    return lookup(name).new()


def hash_stream(reader, algorithm, chunk_size=DEFAULT_CHUNK_SIZE):
    """Read a binary file object to EOF and return its digest.

    Read errors propagate to the caller untouched.
    """
    hasher = algorithm.new()
    for chunk in iter(lambda: reader.read(chunk_size), b""):
        hasher.write(chunk)
    return hasher.finish()


def hash_bytes(data, algorithm):
    hasher = algorithm.new()
    hasher.write(data)
    return hasher.finish()
