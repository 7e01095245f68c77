"""Tests for anchors."""

import pytest
from pydantic import ValidationError

from tachyon_spec.subspecs.accumulator import Anchor
from tachyon_spec.types import EmptyAnchorIntersection


def test_contains_is_inclusive() -> None:
    """Both bounds lie inside the anchor."""
    anchor = Anchor.of(10, 50)
    assert anchor.contains(10)
    assert anchor.contains(50)
    assert not anchor.contains(9)
    assert not anchor.contains(51)


def test_intersect() -> None:
    """Overlapping anchors narrow; disjoint ones raise."""
    assert Anchor.of(10, 50).intersect(Anchor.of(30, 70)) == Anchor.of(30, 50)
    assert Anchor.of(10, 50).intersect(Anchor.of(50, 50)) == Anchor.of(50, 50)

    with pytest.raises(EmptyAnchorIntersection) as excinfo:
        Anchor.of(10, 20).intersect(Anchor.of(30, 40))
    assert excinfo.value.left == (10, 20)
    assert excinfo.value.right == (30, 40)


def test_ordering_enforced() -> None:
    """lo must not exceed hi."""
    with pytest.raises(ValidationError):
        Anchor.of(5, 4)


def test_encoding() -> None:
    """Anchors encode as two little-endian u32s."""
    anchor = Anchor.of(1, 258)
    assert bytes(anchor) == b"\x01\x00\x00\x00\x02\x01\x00\x00"
    assert Anchor.from_bytes(bytes(anchor)) == anchor
    with pytest.raises(ValueError):
        Anchor.from_bytes(b"\x00" * 7)
    with pytest.raises(ValueError):
        Anchor.from_bytes(b"\x02\x00\x00\x00\x01\x00\x00\x00")
