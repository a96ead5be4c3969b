"""Block buffering and RFC 1321 padding.

An unbounded byte stream is cut into 64-byte blocks, each folded into the
chaining state with `compress.transform`. Between calls at most 63 bytes
stay resident in the caller's buffer; the cursor says how many.

Finalization appends a single 0x80 byte, zero bytes up to offset 56 of the
last block, and the message length in bits as a 64-bit little-endian
integer. When fewer than 9 bytes are left in the current block (cursor
above 55), the padding spills into one extra block.
"""

from __future__ import annotations

import struct
from typing import List, Sequence

from compress import transform


BLOCK_SIZE = 64
LENGTH_OFFSET = 56
MASK64 = 0xFFFFFFFFFFFFFFFF

PADDING = b"\x80" + b"\x00" * (BLOCK_SIZE - 1)

_STATE_FORMAT = struct.Struct("<4I")


def _as_byte_view(data) -> memoryview:
    """Return a flat unsigned-byte view of any bytes-like object."""
    return memoryview(data).cast("B")


def absorb(state: List[int], buffer: bytearray, cursor: int, data) -> int:
    """Feed `data` through the block buffer and return the new cursor.

    Whole blocks are compressed straight from `data` when the buffer is
    empty; only the tail that does not fill a block is copied into `buffer`.
    """
    view = _as_byte_view(data)
    size = len(view)
    pos = 0

    if cursor:
        take = min(BLOCK_SIZE - cursor, size)
        buffer[cursor : cursor + take] = view[:take]
        cursor += take
        if cursor < BLOCK_SIZE:
            return cursor
        transform(state, buffer)
        pos = take

    end = size - (size - pos) % BLOCK_SIZE
    for start in range(pos, end, BLOCK_SIZE):
        transform(state, view[start : start + BLOCK_SIZE])

    rest = size - end
    buffer[:rest] = view[end:]
    return rest


def state_to_bytes(state: Sequence[int]) -> bytes:
    """Serialize (A, B, C, D) into 16 bytes, little-endian per word."""
    return _STATE_FORMAT.pack(*state)


def finalize(state: List[int], buffer: bytearray, cursor: int, length: int) -> bytes:
    """Apply the padding rule to the buffered tail and return the raw digest.

    `length` is the total number of message bytes; its bit count is written
    modulo 2**64.
    """
    if not 0 <= cursor < BLOCK_SIZE:
        raise ValueError(f"cursor must be in [0, {BLOCK_SIZE}), got {cursor}")

    if cursor >= LENGTH_OFFSET:
        buffer[cursor:] = PADDING[: BLOCK_SIZE - cursor]
        transform(state, buffer)
        # The 0x80 marker was already emitted in the previous block.
        buffer[:LENGTH_OFFSET] = PADDING[1 : LENGTH_OFFSET + 1]
    else:
        buffer[cursor:LENGTH_OFFSET] = PADDING[: LENGTH_OFFSET - cursor]

    buffer[LENGTH_OFFSET:] = ((length * 8) & MASK64).to_bytes(8, byteorder="little")
    transform(state, buffer)

    return state_to_bytes(state)


#
# Whole-message helpers, mostly for analysis and tests
#

def pad_message(message: bytes) -> bytes:
    """Pad a complete message according to RFC 1321.

    The result length is a multiple of 64 bytes (512 bits).
    """
    ml_bits = (len(message) * 8) & MASK64

    padded = bytearray(message)
    padded.append(0x80)

    while (len(padded) % BLOCK_SIZE) != LENGTH_OFFSET:
        padded.append(0x00)

    # Append 64-bit little-endian length in bits.
    padded.extend(ml_bits.to_bytes(8, byteorder="little"))
    return bytes(padded)


def split_into_blocks(padded: bytes) -> List[bytes]:
    """Split a padded message into 512-bit (64-byte) blocks."""
    if len(padded) % BLOCK_SIZE != 0:
        raise ValueError(
            f"Padded message length must be a multiple of {BLOCK_SIZE} bytes, got {len(padded)}"
        )
    return [bytes(padded[i : i + BLOCK_SIZE]) for i in range(0, len(padded), BLOCK_SIZE)]
