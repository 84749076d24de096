"""RC4-style 32-bit pseudo-random number generator."""

from __future__ import annotations

import os
import time


class Rc4Random:
    """Generates 32-bit numbers from a 256-byte RC4 state box."""

    def __init__(self, sbox: bytes | bytearray | list[int]) -> None:
        box = bytearray(sbox)
        if len(box) != 256:
            raise ValueError(f"sbox must hold 256 bytes, got {len(box)}")
        self._sbox = box
        self._i = 0
        self._j = 0

    @property
    def sbox(self) -> bytes:
        return bytes(self._sbox)

    @classmethod
    def identity(cls) -> "Rc4Random":
        """A generator starting from the identity permutation (reproducible)."""
        return cls(range(256))

    @classmethod
    def from_entropy(cls) -> "Rc4Random":
        """A generator seeded from the OS random source mixed with the clock."""
        box = bytearray(os.urandom(256))
        for i in range(256):
            now = time.time()
            seconds = int(now)
            micros = int((now - seconds) * 1_000_000)
            source = micros if i & 1 else seconds
            box[i] ^= (source >> (i & 0xF)) & 0xFF
        return cls(box)

    def rand(self) -> int:
        """Return the next 32-bit pseudo-random number."""
        box = self._sbox
        out = bytearray(4)
        for k in range(4):
            self._i = (self._i + 1) & 0xFF
            si = box[self._i]
            self._j = (self._j + si) & 0xFF
            sj = box[self._j]
            box[self._i] = sj
            box[self._j] = si
            out[k] = box[(si + sj) & 0xFF]
        return int.from_bytes(out, "little")

    def seed(self, data: bytes) -> None:
        """Mix user bytes into the state, then discard 32 outputs."""
        for index, byte in enumerate(data):
            self._sbox[index & 0xFF] ^= byte
        for _ in range(32):
            self.rand()