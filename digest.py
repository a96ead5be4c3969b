"""The 16-byte MD5 digest value."""

from __future__ import annotations


DIGEST_SIZE = 16


class Digest(bytes):
    """An MD5 digest.

    A read-only 16-byte value. Indexing returns the individual bytes in the
    RFC 1321 output order (A, B, C, D, each little-endian); equality and
    hashing are those of the underlying bytes.

    >>> format(Digest(bytes(range(16))), "x")
    '000102030405060708090a0b0c0d0e0f'
    """

    def __new__(cls, value) -> "Digest":
        raw = bytes(value)
        if len(raw) != DIGEST_SIZE:
            raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(raw)}")
        return super().__new__(cls, raw)

    @classmethod
    def from_hex(cls, text: str) -> "Digest":
        """Parse a 32-character hex rendering (either case)."""
        return cls(bytes.fromhex(text))

    def hexdigest(self) -> str:
        """Lowercase hexadecimal rendering (32 characters)."""
        return self.hex()

    def upper_hex(self) -> str:
        """Uppercase hexadecimal rendering (32 characters)."""
        return self.hex().upper()

    def __format__(self, spec: str) -> str:
        if spec == "x":
            return self.hexdigest()
        if spec == "X":
            return self.upper_hex()
        return format(self.hexdigest(), spec)

    def __str__(self) -> str:
        return self.hexdigest()

    def __repr__(self) -> str:
        return f"Digest('{self.hexdigest()}')"
