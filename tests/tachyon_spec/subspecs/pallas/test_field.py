"""
Tests for the Pallas base and scalar fields.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tachyon_spec.subspecs.pallas import FIELD_BYTES, Fp, Fq, P, Q


def test_constants() -> None:
    """Verify field constants."""
    assert P.bit_length() == 255
    assert Q.bit_length() == 255
    assert P != Q
    assert (P - 1) % (2**32) == 0
    assert (Q - 1) % (2**32) == 0


def test_base_field_arithmetic() -> None:
    """
    Test basic arithmetic, equality, and error handling
    in the base field Fp.
    """
    a = Fp(value=5)
    b = Fp(value=10)

    assert a + b == Fp(value=15)
    assert b - a == Fp(value=5)
    assert -a == Fp(value=P - 5)
    assert a * b == Fp(value=50)
    assert (a / b) * b == a
    assert a**3 == Fp(value=125)

    # Inputs are reduced into the canonical range.
    assert Fp(value=P + 1) == Fp.one()
    assert Fp(value=-1) == Fp(value=P - 1)

    # Elements of different fields never compare equal.
    assert Fp(value=5) != Fq(value=5)

    with pytest.raises(ZeroDivisionError, match="Cannot invert the zero element."):
        Fp.zero().inverse()


def test_bytes_protocol() -> None:
    """Encodings are 32 bytes little-endian and must be canonical."""
    element = Fp(value=258)
    data = bytes(element)
    assert len(data) == FIELD_BYTES
    assert data[:2] == b"\x02\x01"
    assert Fp.from_bytes(data) == element

    with pytest.raises(ValueError, match="Non-canonical"):
        Fp.from_bytes(P.to_bytes(FIELD_BYTES, "little"))
    with pytest.raises(ValueError, match="Expected 32 bytes"):
        Fp.from_bytes(b"\x00" * 31)

    # P < Q, so P is a canonical scalar.
    assert Fq.from_bytes(P.to_bytes(FIELD_BYTES, "little")) == Fq(value=P)


def test_wide_reduction() -> None:
    """Uniform bytes are reduced modulo the field, and only 64-byte inputs are taken."""
    data = (P + 7).to_bytes(64, "little")
    assert Fp.from_uniform_bytes(data) == Fp(value=7)
    with pytest.raises(ValueError):
        Fp.from_uniform_bytes(b"\x00" * 32)


def test_sqrt() -> None:
    """Square roots are even, and non-residues yield None."""
    root = Fp(value=4).sqrt()
    assert root is not None
    assert root * root == Fp(value=4)
    assert root.value % 2 == 0

    # 5 is a non-residue, which is what keeps (0, 0) off the curve.
    assert Fp(value=5).sqrt() is None
    assert Fp.zero().sqrt() == Fp.zero()


@settings(max_examples=50)
@given(st.integers(min_value=1, max_value=P - 1))
def test_sqrt_of_square(n: int) -> None:
    """Every square has a root that squares back to it."""
    square = Fp(value=n) * Fp(value=n)
    root = square.sqrt()
    assert root is not None
    assert root * root == square
    assert root in (Fp(value=n), -Fp(value=n))


@settings(max_examples=50)
@given(st.integers(min_value=1, max_value=Q - 1))
def test_scalar_inverse(n: int) -> None:
    """Non-zero scalars invert."""
    k = Fq(value=n)
    assert k * k.inverse() == Fq.one()
