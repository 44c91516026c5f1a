#!/usr/bin/env python3
"""ssl: compute and check MD5/SHA-256 message digests, base64-encode files.

Usage:
  ssl md5 FILE...              print "<digest>  <path>" lines
  ssl sha256 --tag FILE...     print "SHA256 (<path>) = <digest>" lines
  ssl md5 --check SUMS...      verify the files listed in checksum files
  ssl base64 FILE              base64 with 76-column lines

With no FILE, or when FILE is -, standard input is read.
"""
import argparse
import base64
import sys

from checksum import ChecksumError, DigestMismatchError, Style, check_line, format_line
from digest import DigestParseError
from hashes import Algorithm, hash_stream

STDIN = "-"
BASE64_LINE_SIZE = 76


def open_input(path, mode="rb"):
    """Open `path`, or standard input when path is "-"."""
    if path == STDIN:
        stream = sys.stdin.buffer if "b" in mode else sys.stdin
        # The caller's `with` must not close the process stdin.
        return _Unclosed(stream)
    if "b" in mode:
        return open(path, mode)
    return open(path, mode, encoding="utf-8")


class _Unclosed:
    def __init__(self, stream):
        self._stream = stream

    def __enter__(self):
        return self._stream

    def __exit__(self, *exc):
        return False


def digest_files(paths, algorithm, style, out=None, err=None):
    """Print one checksum line per path; return the number of failures."""
    out = out or sys.stdout
    err = err or sys.stderr
    failed = 0
    for path in paths:
        try:
            with open_input(path) as f:
                digest = hash_stream(f, algorithm)
        except OSError as e:
            print(f"digest {path}: {e}", file=err)
            failed += 1
            continue
        print(format_line(digest, path, algorithm, style), file=out)
    return failed


def check_files(paths, out=None, err=None):
    """Verify every line of every checksum file; return the number of failures."""
    out = out or sys.stdout
    err = err or sys.stderr
    failed = 0
    for path in paths:
        try:
            with open_input(path) as f:
                lines = f.readlines()
        except OSError as e:
            print(f"{path}: {e}", file=err)
            failed += 1
            continue
        for number, raw in enumerate(lines, 1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                print(f"read line: file {path}, line {number}: {e}", file=err)
                failed += 1
                continue
            if not line.strip():
                continue
            try:
                checked = check_line(line, opener=open_input)
            except DigestMismatchError as e:
                print(f"{e.path}: FAILED", file=out)
                failed += 1
            except (ChecksumError, DigestParseError, OSError) as e:
                print(f"check_line: file {path}, line {number}: {e}", file=err)
                failed += 1
            else:
                print(f"{checked}: OK", file=out)
    return failed


def encode_base64(reader, out, line_size=BASE64_LINE_SIZE):
    """Stream `reader` to `out` as base64 text wrapped at line_size columns.

    line_size must be a multiple of 4 so that every line holds whole groups.
    """
    if line_size <= 0 or line_size % 4:
        raise ValueError(f"line_size must be a positive multiple of 4, got {line_size}")
    # Whole lines of input: line_size output chars come from 3/4 as many bytes.
    chunk_size = line_size // 4 * 3 * 1024
    for chunk in iter(lambda: reader.read(chunk_size), b""):
        # A short read must not end mid-group except at EOF.
        while len(chunk) % (line_size // 4 * 3):
            more = reader.read(chunk_size - len(chunk))
            if not more:
                break
            chunk += more
        encoded = base64.b64encode(chunk).decode("ascii")
        for i in range(0, len(encoded), line_size):
            out.write(encoded[i:i+line_size] + "\n")


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ssl",
        description="Compute and check message digests, encode base64.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    for algorithm in Algorithm:
        cmd = sub.add_parser(
            algorithm.value,
            help=f"compute and check {algorithm} message digest",
        )
        cmd.set_defaults(algorithm=algorithm)
        cmd.add_argument(
            "files",
            nargs="*",
            default=[STDIN],
            help="Files to digest (default: standard input). - means standard input.",
        )
        cmd.add_argument(
            "-t", "--tag",
            action="store_true",
            help="Create a BSD-style checksum instead of the GNU style.",
        )
        cmd.add_argument(
            "-c", "--check",
            action="store_true",
            help="Read checksums from the FILEs and check them.",
        )

    b64 = sub.add_parser("base64", help="base64 encode FILE to standard output")
    b64.add_argument("file", nargs="?", default=STDIN)

    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.command == "base64":
        try:
            with open_input(args.file) as f:
                encode_base64(f, sys.stdout)
        except OSError as e:
            print(f"base64 {args.file}: {e}", file=sys.stderr)
            return 1
        return 0

    if args.check:
        failed = check_files(args.files)
    else:
        style = Style.BSD if args.tag else Style.GNU
        failed = digest_files(args.files, args.algorithm, style)

    if failed:
        print(f"WARNING: {failed} FAILS", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
