"""Checksum lines in the formats written by md5sum/sha256sum.

Two layouts are understood:

    GNU:  <hex digest><whitespace><path>
    BSD:  <ALGO> (<path>) = <hex digest>

The algorithm of a GNU line is inferred from the digest length; a BSD line
names it explicitly.
"""
import re
from enum import Enum

from hashes import Algorithm, hash_stream


class ChecksumError(Exception):
    """Base class for failures while checking a checksum line."""


class UnrecognizedChecksumLineError(ChecksumError):
    """The line matches neither the GNU nor the BSD layout."""

    def __init__(self, line):
        self.line = line
        super().__init__(f"line is unrecognized: {line!r}")


class DigestMismatchError(ChecksumError):
    """The computed digest differs from the expected one."""

    def __init__(self, path, expected, actual):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"{path}: digest incorrect (expected {expected}, got {actual})")


class Style(Enum):
    GNU = "gnu"
    BSD = "bsd"


def _patterns(algorithm):
    width = 2 * algorithm.digest_class.SIZE
    gnu = re.compile(rf"^([0-9A-Za-z]{{{width}}})\s+(.+)$")
    bsd = re.compile(rf"^{algorithm.name} \((.+)\)\s*=\s*([0-9A-Za-z]{{{width}}})$")
    return gnu, bsd


# (algorithm, gnu pattern, bsd pattern), longest digest first
_LINE_PATTERNS = [(algorithm,) + _patterns(algorithm)
                  for algorithm in (Algorithm.SHA256, Algorithm.MD5)]


def format_line(digest, path, algorithm, style=Style.GNU):
    if style is Style.BSD:
        return f"{algorithm.name} ({path}) = {digest}"
    return f"{digest}  {path}"


def parse_line(line):
    """Return (algorithm, path, expected digest) for one checksum line.

    Raises UnrecognizedChecksumLineError when no layout matches, and the
    digest parse errors from digest.py when the hex part is not valid hex.
    """
    line = line.rstrip("\r\n")
    for algorithm, gnu, bsd in _LINE_PATTERNS:
        m = gnu.match(line)
        if m:
            hex_digest, path = m.group(1), m.group(2)
            break
        m = bsd.match(line)
        if m:
            path, hex_digest = m.group(1), m.group(2)
            break
    else:
        raise UnrecognizedChecksumLineError(line)
    return algorithm, path, algorithm.digest_class.from_hex(hex_digest)


def check_line(line, opener=open):
    """Recompute the digest of the file named in `line` and compare.

    Returns the path on success, raises DigestMismatchError otherwise. The
    opener is called as opener(path, "rb"); I/O errors propagate.
    """
    algorithm, path, expected = parse_line(line)
    with opener(path, "rb") as f:
        actual = hash_stream(f, algorithm)
    if actual != expected:
        raise DigestMismatchError(path, expected, actual)
    return path
