"""MD5 implementation using the `transform` function from `compress.py`.

This module provides:

- `compute(data) -> Digest`: one-shot MD5 digest of a complete buffer.
- `md5_with_state_tracking(data)`: the digest plus the chaining value after
  every compressed block.
- CLI usage: `python md5_cli.py "message"` prints the hex digest of the
  UTF-8 encoding of `"message"`; `python md5_cli.py -f path/to/file` streams
  the file through a `Context`.
"""

from __future__ import annotations

import argparse
import shutil
import sys
from typing import List, Tuple

from compress import INITIAL_STATE, transform
from context import Context
from digest import Digest
from padding import (
    BLOCK_SIZE,
    absorb,
    finalize,
    pad_message,
    split_into_blocks,
    state_to_bytes,
)


DEFAULT_CHUNK_SIZE = 64 * 1024


def compute(data) -> Digest:
    """Compute the MD5 digest of `data` in one pass.

    Equivalent to `Context().consuming(data).compute()`, but keeps the
    state, buffer and cursor local instead of building a context.
    """
    state = list(INITIAL_STATE)
    buffer = bytearray(BLOCK_SIZE)
    view = memoryview(data).cast("B")

    cursor = absorb(state, buffer, 0, view)

    return Digest(finalize(state, buffer, cursor, len(view)))


def md5(data: bytes) -> bytes:
    """Return the raw 16-byte digest of `data`."""
    return bytes(compute(data))


def md5_with_state_tracking(
    data: bytes,
) -> Tuple[Digest, List[Tuple[int, int, int, int]]]:
    """Compute MD5 while tracking the chaining value after each block.

    Returns:
        (digest, states)
        where states[block_idx] is the (A, B, C, D) value after that block
    """
    state = list(INITIAL_STATE)
    states: List[Tuple[int, int, int, int]] = []

    for block in split_into_blocks(pad_message(data)):
        transform(state, block)
        states.append(tuple(state))

    return Digest(state_to_bytes(state)), states


def _hexdigest(data: bytes, upper: bool = False) -> str:
    """Convenience helper to return the MD5 hex digest of `data`."""
    digest = compute(data)
    return digest.upper_hex() if upper else digest.hexdigest()


def _hash_stream(stream, chunk_size: int) -> Digest:
    """Feed a binary stream into a fresh context, `chunk_size` bytes at a time."""
    context = Context()
    shutil.copyfileobj(stream, context, chunk_size)
    return context.compute()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Usage:
        python md5_cli.py "message"
        python md5_cli.py -f path/to/file
        python md5_cli.py -f -            # read standard input

    Without flags, the single argument is interpreted as a UTF-8 string and
    hashed. With `-f`, the named file's raw bytes are hashed. The resulting
    hex digest is printed to stdout.
    """
    parser = argparse.ArgumentParser(
        prog="md5_cli.py",
        description="Compute the MD5 digest of a message or a file",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "message",
        nargs="?",
        help="Message to hash (UTF-8 encoded)",
    )
    source.add_argument(
        "-f",
        "--file",
        help="Hash the raw bytes of this file ('-' for standard input)",
    )
    parser.add_argument(
        "--upper",
        action="store_true",
        help="Print the digest in uppercase hex",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Read size in bytes when hashing a file (default: {DEFAULT_CHUNK_SIZE})",
    )
    args = parser.parse_args(argv)

    if args.message is None and args.file is None:
        parser.print_usage(sys.stderr)
        return 1

    if args.chunk_size <= 0:
        sys.stderr.write(f"Error: --chunk-size must be positive (got {args.chunk_size})\n")
        return 1

    if args.file is None:
        print(_hexdigest(args.message.encode("utf-8"), upper=args.upper))
        return 0

    if args.file == "-":
        digest = _hash_stream(sys.stdin.buffer, args.chunk_size)
    else:
        try:
            with open(args.file, "rb") as f:
                digest = _hash_stream(f, args.chunk_size)
        except OSError as e:
            sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
            return 1

    print(format(digest, "X" if args.upper else "x"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
