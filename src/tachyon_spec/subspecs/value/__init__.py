"""Value commitments and balance checks."""

from .commitment import (
    VALUE_COMMITMENT_RANDOMNESS_BASE,
    VALUE_COMMITMENT_VALUE_BASE,
    ValueCommitment,
    ValueCommitTrapdoor,
    check_value_balance,
    derive_bvk,
)

__all__ = [
    "VALUE_COMMITMENT_RANDOMNESS_BASE",
    "VALUE_COMMITMENT_VALUE_BASE",
    "ValueCommitment",
    "ValueCommitTrapdoor",
    "check_value_balance",
    "derive_bvk",
]
