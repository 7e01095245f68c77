"""
Wipeable buffers for ephemeral secrets.

Python cannot guarantee that no copy of a value survives somewhere in the
interpreter, but it can guarantee that the canonical copy owned by the
protocol is overwritten as soon as its role ends. Every ephemeral secret
(θ, α, ask, mk, delegate node keys) lives in a `SecretBytes` buffer and is
released through `wipe()`, a `with` block, or `ephemeral(...)`.
"""

from __future__ import annotations

import hmac
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import ClassVar

from typing_extensions import Self


class SecretBytes:
    """A mutable, wipeable byte buffer with a redacted representation."""

    __slots__ = ("_buffer", "_wiped")

    LENGTH: ClassVar[int | None] = None
    """Required length, if any (set by subclasses)."""

    def __init__(self, data: bytes | bytearray) -> None:
        if self.LENGTH is not None and len(data) != self.LENGTH:
            raise ValueError(
                f"{type(self).__name__} expects exactly {self.LENGTH} bytes, got {len(data)}"
            )
        self._buffer = bytearray(data)
        self._wiped = False

    @classmethod
    def random(cls, length: int | None = None) -> Self:
        """Fill a new buffer from the OS CSPRNG."""
        size = length if length is not None else cls.LENGTH
        if size is None:
            raise ValueError(f"{cls.__name__} needs an explicit length")
        return cls(os.urandom(size))

    @property
    def is_wiped(self) -> bool:
        """Whether the buffer has been released."""
        return self._wiped

    def expose(self) -> bytes:
        """
        Return a copy of the secret.

        Raises:
            ValueError: If the buffer has already been wiped.
        """
        if self._wiped:
            raise ValueError(f"{type(self).__name__} has been wiped")
        return bytes(self._buffer)

    def wipe(self) -> None:
        """Overwrite the buffer with zeros. Idempotent."""
        for i in range(len(self._buffer)):
            self._buffer[i] = 0
        self._wiped = True

    def __len__(self) -> int:
        return len(self._buffer)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.wipe()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretBytes):
            return NotImplemented
        return hmac.compare_digest(self._buffer, other._buffer)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else "redacted"
        return f"{type(self).__name__}(<{state}, {len(self._buffer)} bytes>)"


@contextmanager
def ephemeral(*secrets: SecretBytes) -> Iterator[tuple[SecretBytes, ...]]:
    """Wipe every given secret when the block exits, however it exits."""
    try:
        yield secrets
    finally:
        for secret in secrets:
            secret.wipe()
