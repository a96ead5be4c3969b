"""Forward MD5 compression (RFC 1321, section 3.4).

This implements the 64-step compression loop that folds one 512-bit block
into the 128-bit chaining state `(A, B, C, D)`.

Each step `i` computes, with `b, c, d` the current working registers:

    f  = F_i(b, c, d) + a + K[i] + M[g_i]
    a' = d
    b' = b + (f <<< s[i])
    c' = b
    d' = c

where the four groups of 16 steps use

    group 1:  F = (b & c) | (~b & d)      g = i
    group 2:  F = (d & b) | (~d & c)      g = (5i + 1) mod 16
    group 3:  F = b ^ c ^ d               g = (3i + 5) mod 16
    group 4:  F = c ^ (b | ~d)            g = 7i mod 16

All additions are performed modulo 2**32, as in MD5.
"""

from __future__ import annotations

import struct
from typing import List, Sequence, Tuple


MASK32 = 0xFFFFFFFF

# Initial chaining value (A, B, C, D) from RFC 1321, section 3.3.
INITIAL_STATE: Tuple[int, int, int, int] = (
    0x67452301,
    0xEFCDAB89,
    0x98BADCFE,
    0x10325476,
)

# Per-step left-rotation amounts s[0..63].
SHIFTS: Tuple[int, ...] = (
    7, 12, 17, 22, 7, 12, 17, 22, 7, 12, 17, 22, 7, 12, 17, 22,
    5, 9, 14, 20, 5, 9, 14, 20, 5, 9, 14, 20, 5, 9, 14, 20,
    4, 11, 16, 23, 4, 11, 16, 23, 4, 11, 16, 23, 4, 11, 16, 23,
    6, 10, 15, 21, 6, 10, 15, 21, 6, 10, 15, 21, 6, 10, 15, 21,
)

# Round constants K[i] = floor(2**32 * |sin(i + 1)|) for i in 0..63.
SINES: Tuple[int, ...] = (
    0xD76AA478,
    0xE8C7B756,
    0x242070DB,
    0xC1BDCEEE,
    0xF57C0FAF,
    0x4787C62A,
    0xA8304613,
    0xFD469501,
    0x698098D8,
    0x8B44F7AF,
    0xFFFF5BB1,
    0x895CD7BE,
    0x6B901122,
    0xFD987193,
    0xA679438E,
    0x49B40821,
    0xF61E2562,
    0xC040B340,
    0x265E5A51,
    0xE9B6C7AA,
    0xD62F105D,
    0x02441453,
    0xD8A1E681,
    0xE7D3FBC8,
    0x21E1CDE6,
    0xC33707D6,
    0xF4D50D87,
    0x455A14ED,
    0xA9E3E905,
    0xFCEFA3F8,
    0x676F02D9,
    0x8D2A4C8A,
    0xFFFA3942,
    0x8771F681,
    0x6D9D6122,
    0xFDE5380C,
    0xA4BEEA44,
    0x4BDECFA9,
    0xF6BB4B60,
    0xBEBFBC70,
    0x289B7EC6,
    0xEAA127FA,
    0xD4EF3085,
    0x04881D05,
    0xD9D4D039,
    0xE6DB99E5,
    0x1FA27CF8,
    0xC4AC5665,
    0xF4292244,
    0x432AFF97,
    0xAB9423A7,
    0xFC93A039,
    0x655B59C3,
    0x8F0CCC92,
    0xFFEFF47D,
    0x85845DD1,
    0x6FA87E4F,
    0xFE2CE6E0,
    0xA3014314,
    0x4E0811A1,
    0xF7537E82,
    0xBD3AF235,
    0x2AD7D2BB,
    0xEB86D391,
)

_BLOCK_FORMAT = struct.Struct("<16I")


def _rotl(x: int, n: int) -> int:
    """Left-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x << n) | (x >> (32 - n))) & MASK32


def message_index(i: int) -> int:
    """Return the message word index `g` used by step `i` (0..63)."""
    if i < 16:
        return i
    if i < 32:
        return (5 * i + 1) % 16
    if i < 48:
        return (3 * i + 5) % 16
    return (7 * i) % 16


def mix(i: int, b: int, c: int, d: int) -> int:
    """Nonlinear function of (b, c, d) selected by the group of step `i`."""
    if i < 16:
        return ((b & c) | (~b & d)) & MASK32
    if i < 32:
        return ((d & b) | (~d & c)) & MASK32
    if i < 48:
        return (b ^ c ^ d) & MASK32
    return (c ^ (b | (~d & MASK32))) & MASK32


_MESSAGE_INDEX: Tuple[int, ...] = tuple(message_index(i) for i in range(64))


def compression(a: int, b: int, c: int, d: int, m: int, i: int) -> Tuple[int, int, int, int]:
    """Perform one MD5 step.

    Parameters
    ----------
    a, b, c, d : int
        32-bit words representing the current working registers.
    m : int
        Message word `M[g_i]` selected for this step.
    i : int
        Step number 0..63; selects the mixing function, `K[i]` and `s[i]`.

    Returns
    -------
    (a_new, b_new, c_new, d_new) : tuple[int, ...]
        Working registers after the step, all reduced modulo 2**32.
    """
    f = (mix(i, b, c, d) + (a & MASK32) + SINES[i] + (m & MASK32)) & MASK32
    b_new = (b + _rotl(f, SHIFTS[i])) & MASK32
    return d & MASK32, b_new, b & MASK32, c & MASK32


def decode_block(block: bytes) -> List[int]:
    """Split a 64-byte block into sixteen little-endian 32-bit words."""
    if len(block) != 64:
        raise ValueError(f"Expected 64-byte block, got {len(block)}")
    return list(_BLOCK_FORMAT.unpack(block))


def compress64(a: int, b: int, c: int, d: int, segments: Sequence[int]) -> Tuple[int, int, int, int]:
    """Run the full 64-step MD5 compression loop for one block.

    Parameters
    ----------
    a, b, c, d : int
        Initial working registers (the current chaining value).
    segments : Sequence[int]
        The sixteen message words `M[0..15]` of this block.

    Returns
    -------
    (a, b, c, d) : tuple[int, ...]
        Working registers after 64 steps. The caller adds them back into
        the chaining value.
    """
    if len(segments) != 16:
        raise ValueError(f"compress64 expects 16 message words, got {len(segments)}")

    for i in range(64):
        a, b, c, d = compression(a, b, c, d, segments[_MESSAGE_INDEX[i]], i)

    return a, b, c, d


def transform(state: List[int], block: bytes) -> None:
    """Fold one 64-byte block into the 4-word chaining `state` in place."""
    a, b, c, d = compress64(state[0], state[1], state[2], state[3], decode_block(block))
    state[0] = (state[0] + a) & MASK32
    state[1] = (state[1] + b) & MASK32
    state[2] = (state[2] + c) & MASK32
    state[3] = (state[3] + d) & MASK32
