"""
The transaction-wide signing digest.

Every action signature and the binding signature sign one digest:

    sighash = BLAKE2b-512("Tachyon-BindHash", value_balance || cv_1 || rk_1 || ... || cv_n || rk_n)

with `value_balance` a little-endian signed 64-bit integer. The digest
covers all public action data and the declared balance. It excludes the
stamp, so stripping a bundle during aggregation leaves its signatures
valid, and it excludes the signatures themselves.
"""

from __future__ import annotations

from collections.abc import Iterable

from tachyon_spec.subspecs.constants import BINDING_SIGHASH_PERSONALIZATION
from tachyon_spec.subspecs.pallas import blake2b_512
from tachyon_spec.subspecs.value import check_value_balance


def encode_value_balance(value_balance: int) -> bytes:
    """Encode a balance as a little-endian i64."""
    return check_value_balance(value_balance).to_bytes(8, "little", signed=True)


def compute_sighash(value_balance: int, action_digests: Iterable[bytes]) -> bytes:
    """Compute the signing digest from the balance and each action's `cv || rk`."""
    return blake2b_512(
        BINDING_SIGHASH_PERSONALIZATION,
        encode_value_balance(value_balance),
        *action_digests,
    )
