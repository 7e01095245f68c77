"""
The Pallas elliptic curve group.

Pallas is the short Weierstrass curve `y^2 = x^3 + 5` over `F_p`. Its group
order is the prime `q`, so every non-identity point generates the whole
group and scalars live in `F_q`.

Points are stored in affine coordinates. The identity is represented by the
pair (0, 0), which is not on the curve because 5 is a non-residue in `F_p`.
"""

from __future__ import annotations

import itertools
from typing import Self

from pydantic import model_validator

from tachyon_spec.types import StrictBaseModel

from .field import FIELD_BYTES, Fp, Fq, P, Q, _sqrt_mod
from .hashing import blake2b_512

B: int = 5
"""The constant term of the curve equation."""

POINT_BYTES: int = FIELD_BYTES
"""Size of a compressed point encoding."""

HASH_TO_CURVE_PERSONALIZATION: bytes = b"Tachyon-HashToCv"
"""BLAKE2b personalization for the try-and-increment hash-to-curve."""

_SIGN_MASK: int = 1 << 255


def _on_curve(x: int, y: int) -> bool:
    return (y * y - x * x * x - B) % P == 0


def _add(p1: tuple[int, int] | None, p2: tuple[int, int] | None) -> tuple[int, int] | None:
    """Affine point addition on raw coordinates; None is the identity."""
    if p1 is None:
        return p2
    if p2 is None:
        return p1
    x1, y1 = p1
    x2, y2 = p2
    if x1 == x2:
        if (y1 + y2) % P == 0:
            return None
        # Doubling (a = 0).
        lam = 3 * x1 * x1 * pow(2 * y1, -1, P) % P
    else:
        lam = (y2 - y1) * pow(x2 - x1, -1, P) % P
    x3 = (lam * lam - x1 - x2) % P
    y3 = (lam * (x1 - x3) - y1) % P
    return x3, y3


def _mul(point: tuple[int, int] | None, k: int) -> tuple[int, int] | None:
    """Left-to-right double-and-add."""
    k %= Q
    result: tuple[int, int] | None = None
    for bit in bin(k)[2:]:
        result = _add(result, result)
        if bit == "1":
            result = _add(result, point)
    return result


class Point(StrictBaseModel):
    """A point on the Pallas curve, or the identity."""

    x: int
    """Affine x coordinate (0 for the identity)."""

    y: int
    """Affine y coordinate (0 for the identity)."""

    @model_validator(mode="after")
    def check_on_curve(self) -> Self:
        """Reject coordinates that are out of range or off the curve."""
        if not (0 <= self.x < P and 0 <= self.y < P):
            raise ValueError("Point coordinates must be canonical field elements")
        if (self.x, self.y) != (0, 0) and not _on_curve(self.x, self.y):
            raise ValueError(f"({self.x:#x}, {self.y:#x}) is not on the Pallas curve")
        return self

    @classmethod
    def identity(cls) -> Self:
        """The group identity."""
        return cls(x=0, y=0)

    @classmethod
    def generator(cls) -> Self:
        """The conventional Pallas generator (-1, 2)."""
        return cls(x=P - 1, y=2)

    @classmethod
    def _from_raw(cls, raw: tuple[int, int] | None) -> Self:
        if raw is None:
            return cls.identity()
        return cls(x=raw[0], y=raw[1])

    def _raw(self) -> tuple[int, int] | None:
        return None if self.is_identity() else (self.x, self.y)

    def is_identity(self) -> bool:
        """Whether this is the group identity."""
        return self.x == 0 and self.y == 0

    def sign_bit(self) -> int:
        """
        The canonical sign bit: the parity of y.

        This is bit 255 of the compressed encoding. The identity has sign 0.
        """
        return self.y & 1

    def __add__(self, other: Point) -> Self:
        """Group addition."""
        return self._from_raw(_add(self._raw(), other._raw()))

    def __neg__(self) -> Self:
        """Group negation."""
        if self.is_identity():
            return self
        return self.__class__(x=self.x, y=P - self.y)

    def __sub__(self, other: Point) -> Self:
        """Group subtraction."""
        return self + (-other)

    def __mul__(self, scalar: Fq | int) -> Self:
        """Scalar multiplication by an `Fq` element or an integer (reduced mod q)."""
        k = scalar.value if isinstance(scalar, Fq) else scalar
        return self._from_raw(_mul(self._raw(), k))

    __rmul__ = __mul__

    def __bytes__(self) -> bytes:
        """
        Compressed encoding: x in little-endian with the sign bit in bit 255.

        The identity encodes as 32 zero bytes.
        """
        encoded = self.x | (self.sign_bit() << 255)
        return encoded.to_bytes(POINT_BYTES, byteorder="little")

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Decode a compressed point.

        Raises:
            ValueError: If the encoding has the wrong length, x is non-canonical,
                x^3 + 5 has no square root, or the identity is encoded with a sign.
        """
        if len(data) != POINT_BYTES:
            raise ValueError(f"Expected {POINT_BYTES} bytes, got {len(data)}")

        encoded = int.from_bytes(data, byteorder="little")
        sign = encoded >> 255
        x = encoded & (_SIGN_MASK - 1)

        if x >= P:
            raise ValueError("Non-canonical x coordinate")
        if x == 0:
            if sign:
                raise ValueError("Non-canonical identity encoding")
            return cls.identity()

        y = _sqrt_mod(x * x * x + B, P)
        if y is None:
            raise ValueError("x coordinate does not correspond to a curve point")
        if y & 1 != sign:
            y = P - y
        return cls(x=x, y=y)


def hash_to_curve(domain: str, message: bytes) -> Point:
    """
    Deterministically map `(domain, message)` to a non-identity curve point.

    Try-and-increment: hash the inputs with a 4-byte counter, reduce
    the digest into `F_p` and accept the first candidate x for which x^3 + 5 is
    a square. The even square root is taken as y. Roughly half of all
    candidates succeed, so the expected number of attempts is two.
    """
    encoded_domain = domain.encode()
    prefix = len(encoded_domain).to_bytes(4, "little") + encoded_domain + message
    for counter in itertools.count():
        digest = blake2b_512(HASH_TO_CURVE_PERSONALIZATION, prefix, counter.to_bytes(4, "little"))
        x = Fp.from_uniform_bytes(digest)
        y = (x * x * x + Fp(value=B)).sqrt()
        if y is not None and not x.is_zero():
            return Point(x=x.value, y=y.value)
    raise AssertionError("unreachable")
