"""Core definitions of the Pallas base field Fp and scalar field Fq."""

from __future__ import annotations

import os
from typing import ClassVar, Self

from pydantic import field_validator

from tachyon_spec.types import StrictBaseModel

# =================================================================
# Field Constants
#
# Pallas is one half of the Pasta cycle: the base field of Pallas is the
# scalar field of Vesta and vice versa. Both moduli are 255-bit primes
# with 2-adicity 32.
# =================================================================

P: int = 0x40000000000000000000000000000000224698FC094CF91B992D30ED00000001
"""The Pallas base field modulus."""

Q: int = 0x40000000000000000000000000000000224698FC0994A8DD8C46EB2100000001
"""The Pallas scalar field modulus (the order of the Pallas group)."""

FIELD_BYTES: int = 32
"""The size of a canonical field element encoding in bytes."""

WIDE_BYTES: int = 64
"""The input size of the wide reduction used by `from_uniform_bytes`."""

TWO_ADICITY: int = 32
"""
The largest integer n such that 2^n divides (P - 1), and likewise (Q - 1).
"""


def _sqrt_mod(n: int, modulus: int) -> int | None:
    """
    Tonelli-Shanks square root modulo an odd prime.

    Returns one root of `n`, or None if `n` is a non-residue.
    """
    n %= modulus
    if n == 0:
        return 0
    if pow(n, (modulus - 1) // 2, modulus) != 1:
        return None

    # Write modulus - 1 = t * 2^s with t odd.
    s, t = 0, modulus - 1
    while t % 2 == 0:
        t //= 2
        s += 1

    z = 2
    while pow(z, (modulus - 1) // 2, modulus) != modulus - 1:
        z += 1

    m, c = s, pow(z, t, modulus)
    x, b = pow(n, (t + 1) // 2, modulus), pow(n, t, modulus)
    while b != 1:
        # Find the least i with b^(2^i) == 1.
        i, b2 = 0, b
        while b2 != 1:
            b2 = b2 * b2 % modulus
            i += 1
        f = pow(c, 1 << (m - i - 1), modulus)
        m, c = i, f * f % modulus
        x, b = x * f % modulus, b * c % modulus
    return x


class PrimeField(StrictBaseModel):
    """
    An element of a 255-bit prime field.

    Subclasses fix `MODULUS`. Elements of different fields never mix:
    arithmetic requires both operands to be of the same class.
    """

    MODULUS: ClassVar[int]
    """The field modulus (overridden by subclasses)."""

    value: int
    """Canonical representative in the range [0, MODULUS)."""

    @field_validator("value", mode="before")
    @classmethod
    def reduce_modulo(cls, v: int) -> int:
        """Reduces an integer input modulo the field modulus before validation."""
        return v % cls.MODULUS

    @classmethod
    def zero(cls) -> Self:
        """The additive identity."""
        return cls(value=0)

    @classmethod
    def one(cls) -> Self:
        """The multiplicative identity."""
        return cls(value=1)

    @classmethod
    def random(cls) -> Self:
        """Sample a uniformly random element from the OS CSPRNG."""
        return cls.from_uniform_bytes(os.urandom(WIDE_BYTES))

    def __add__(self, other: Self) -> Self:
        """Field addition."""
        return self.__class__(value=self.value + other.value)

    def __sub__(self, other: Self) -> Self:
        """Field subtraction."""
        return self.__class__(value=self.value - other.value)

    def __neg__(self) -> Self:
        """Field negation."""
        return self.__class__(value=-self.value)

    def __mul__(self, other: Self) -> Self:
        """Field multiplication."""
        return self.__class__(value=self.value * other.value)

    def __pow__(self, exponent: int) -> Self:
        """Field exponentiation."""
        return self.__class__(value=pow(self.value, exponent, self.MODULUS))

    def inverse(self) -> Self:
        """Computes the multiplicative inverse."""
        if self.value == 0:
            raise ZeroDivisionError("Cannot invert the zero element.")
        return self.__class__(value=pow(self.value, -1, self.MODULUS))

    def __truediv__(self, other: Self) -> Self:
        """Field division."""
        return self * other.inverse()

    def is_zero(self) -> bool:
        """Whether this is the additive identity."""
        return self.value == 0

    def __int__(self) -> int:
        return self.value

    def __bytes__(self) -> bytes:
        """
        Serialize the field element using Python's bytes protocol.

        Returns:
            32-byte little-endian canonical representation.
        """
        return self.value.to_bytes(FIELD_BYTES, byteorder="little")

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Deserialize a canonical field element.

        Raises:
            ValueError: If the data is not 32 bytes, or encodes a value >= MODULUS.
        """
        if len(data) != FIELD_BYTES:
            raise ValueError(f"Expected {FIELD_BYTES} bytes, got {len(data)}")

        value = int.from_bytes(data, byteorder="little")

        if value >= cls.MODULUS:
            raise ValueError(f"Non-canonical encoding: 0x{value:064x} exceeds the field modulus")

        return cls(value=value)

    @classmethod
    def from_uniform_bytes(cls, data: bytes) -> Self:
        """
        Map 64 uniformly random bytes to a field element by wide reduction.

        Reducing 512 bits modulo a 255-bit prime leaves a statistical bias
        below 2^-250, so the output is indistinguishable from uniform.
        """
        if len(data) != WIDE_BYTES:
            raise ValueError(f"Expected {WIDE_BYTES} bytes, got {len(data)}")
        return cls(value=int.from_bytes(data, byteorder="little"))


class Fp(PrimeField):
    """An element in the Pallas base field F_p."""

    MODULUS: ClassVar[int] = P

    def sqrt(self) -> Self | None:
        """Return the square root with even canonical value, or None for a non-residue."""
        root = _sqrt_mod(self.value, P)
        if root is None:
            return None
        return self.__class__(value=root if root % 2 == 0 else P - root)


class Fq(PrimeField):
    """An element in the Pallas scalar field F_q."""

    MODULUS: ClassVar[int] = Q
