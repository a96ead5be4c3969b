"""Incremental MD5 hashing.

A `Context` accumulates bytes over any number of `consume` calls and is
finalized exactly once:

    context = Context()
    context.consume(b"message ")
    context.consume(b"digest")
    digest = context.compute()   # f96b697d7cb7938d525a2f31aaf161d0

The digest does not depend on how the input was split across calls.
`Context` also behaves as a writable binary file object, so it can be the
destination of `shutil.copyfileobj` and similar helpers.
"""

from __future__ import annotations

from compress import INITIAL_STATE
from digest import Digest
from padding import BLOCK_SIZE, MASK64, absorb, finalize


# Largest slice folded into the byte counter in one step.
CONSUME_CHUNK = 0xFFFFFFFF


class ContextFinalizedError(RuntimeError):
    """Raised when a context is used after `compute()`."""


class Context:
    """Running MD5 state: chaining value, block buffer, cursor and byte count."""

    def __init__(self) -> None:
        self._state = list(INITIAL_STATE)
        self._buffer = bytearray(BLOCK_SIZE)
        self._cursor = 0
        self._length = 0
        self._finalized = False

    @property
    def length(self) -> int:
        """Total number of bytes consumed, modulo 2**64."""
        return self._length

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _check_open(self) -> None:
        if self._finalized:
            raise ContextFinalizedError("context has already been finalized")

    def consume(self, data) -> None:
        """Append `data` (any bytes-like object) to the message."""
        self._check_open()
        view = memoryview(data).cast("B")
        for start in range(0, len(view), CONSUME_CHUNK):
            chunk = view[start : start + CONSUME_CHUNK]
            self._cursor = absorb(self._state, self._buffer, self._cursor, chunk)
            self._length = (self._length + len(chunk)) & MASK64

    def consuming(self, data) -> "Context":
        """Like `consume`, but return the context for chaining."""
        self.consume(data)
        return self

    def compute(self) -> Digest:
        """Finalize and return the digest. The context cannot be used afterwards."""
        self._check_open()
        self._finalized = True
        return Digest(finalize(self._state, self._buffer, self._cursor, self._length))

    finalize = compute

    def copy(self) -> "Context":
        """Return an independent context holding the same partial message."""
        self._check_open()
        other = Context.__new__(Context)
        other._state = list(self._state)
        other._buffer = bytearray(self._buffer)
        other._cursor = self._cursor
        other._length = self._length
        other._finalized = False
        return other

    # Writable file object protocol.

    def write(self, data) -> int:
        self.consume(data)
        return memoryview(data).nbytes

    def flush(self) -> None:
        pass

    def writable(self) -> bool:
        return not self._finalized

    def __repr__(self) -> str:
        status = "finalized" if self._finalized else "open"
        return f"<Context {status} length={self._length}>"
