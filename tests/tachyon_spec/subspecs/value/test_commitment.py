"""Tests for homomorphic value commitments."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tachyon_spec.subspecs.constants import MAX_MONEY
from tachyon_spec.subspecs.pallas import Fq
from tachyon_spec.subspecs.redpallas import BINDING
from tachyon_spec.subspecs.value import (
    ValueCommitment,
    ValueCommitTrapdoor,
    check_value_balance,
    derive_bvk,
)

amounts = st.integers(min_value=-(10**9), max_value=10**9)
scalars = st.integers(min_value=0, max_value=2**254).map(
    lambda v: ValueCommitTrapdoor(scalar=Fq(value=v))
)


@settings(max_examples=15)
@given(amounts, amounts, scalars, scalars)
def test_commitments_are_homomorphic(
    a: int, b: int, ra: ValueCommitTrapdoor, rb: ValueCommitTrapdoor
) -> None:
    """Adding commitments commits to the sum of values and trapdoors."""
    left = ValueCommitment.commit(a, ra) + ValueCommitment.commit(b, rb)
    assert left == ValueCommitment.commit(a + b, ra + rb)


def test_opposite_values_cancel() -> None:
    """A spend of v and an output of v leave only the blinding."""
    r1, r2 = ValueCommitTrapdoor.random(), ValueCommitTrapdoor.random()
    total = ValueCommitment.sum([ValueCommitment.commit(500, r1), ValueCommitment.commit(-500, r2)])
    assert total == ValueCommitment.commit(0, r1 + r2)


def test_bvk_matches_bsk() -> None:
    """For a balancing set, bvk = [sum(rcv)]R."""
    trapdoors = [ValueCommitTrapdoor.random() for _ in range(3)]
    cvs = [
        ValueCommitment.commit(v, r) for v, r in zip((700, -300, -250), trapdoors, strict=True)
    ]
    bsk = ValueCommitTrapdoor.sum(trapdoors).scalar
    assert derive_bvk(cvs, 150) == BINDING.verification_key(bsk)
    assert derive_bvk(cvs, 151) != BINDING.verification_key(bsk)


def test_commitment_encoding() -> None:
    """Commitments encode as compressed points."""
    cv = ValueCommitment.commit(42, ValueCommitTrapdoor.random())
    assert ValueCommitment.from_bytes(bytes(cv)) == cv
    with pytest.raises(ValueError):
        ValueCommitment.from_bytes(b"\xff" * 32)


def test_money_range() -> None:
    """Balances are bounded by MAX_MONEY in either direction."""
    assert check_value_balance(MAX_MONEY) == MAX_MONEY
    assert check_value_balance(-MAX_MONEY) == -MAX_MONEY
    with pytest.raises(ValueError):
        check_value_balance(MAX_MONEY + 1)
    with pytest.raises(ValueError):
        check_value_balance(-MAX_MONEY - 1)
