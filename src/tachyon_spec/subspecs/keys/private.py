"""
Key derivation from the root spending key.

Every long-lived key comes from one 32-byte `SpendingKey` through the
expansion function

    PRF^expand_sk(t) = BLAKE2b-512("Zcash_ExpandSeed", sk || t)

with one single-byte tag per derived key:

    ask = ToScalar(PRF^expand_sk(0x09))
    nk  = ToBase(PRF^expand_sk(0x0a))
    pk  = ToBase(PRF^expand_sk(0x0b))

The tags are disjoint from those Orchard uses with the same function, so a
spending key shared across protocols never yields related keys.
"""

from __future__ import annotations

import os

from typing_extensions import Self

from tachyon_spec.subspecs.constants import (
    PRF_EXPAND_PERSONALIZATION,
    PRF_EXPAND_TAG_ASK,
    PRF_EXPAND_TAG_NK,
    PRF_EXPAND_TAG_PK,
    SPENDING_KEY_LENGTH,
)
from tachyon_spec.subspecs.pallas import Fp, Fq, blake2b_512
from tachyon_spec.subspecs.redpallas import SPEND_AUTH, Signature
from tachyon_spec.types import Bytes32

from .erasure import SecretBytes
from .public import NullifierKey, PaymentKey, ProofAuthorizingKey, SpendValidatingKey


def prf_expand(sk: bytes, tag: bytes) -> bytes:
    """Evaluate PRF^expand_sk(tag)."""
    return blake2b_512(PRF_EXPAND_PERSONALIZATION, sk, tag)


class SpendingKey(Bytes32):
    """The 32-byte root secret of a wallet."""

    @classmethod
    def random(cls) -> Self:
        """Sample a fresh spending key from the OS CSPRNG."""
        return cls(os.urandom(SPENDING_KEY_LENGTH))

    def spend_authorizing_key(self) -> SpendAuthorizingKey:
        """Derive ask."""
        return SpendAuthorizingKey.from_spending_key(self)

    def nullifier_key(self) -> NullifierKey:
        """Derive nk."""
        return NullifierKey(inner=Fp.from_uniform_bytes(prf_expand(self, PRF_EXPAND_TAG_NK)))

    def payment_key(self) -> PaymentKey:
        """Derive pk."""
        return PaymentKey(inner=Fp.from_uniform_bytes(prf_expand(self, PRF_EXPAND_TAG_PK)))

    def proof_authorizing_key(self) -> ProofAuthorizingKey:
        """Derive pak = (ak, nk)."""
        with self.spend_authorizing_key() as ask:
            ak = ask.validating_key()
        return ProofAuthorizingKey(ak=ak, nk=self.nullifier_key())


class SpendAuthorizingKey:
    """
    The spend authorizing key `ask`, the long-lived signing scalar.

    The scalar is held in a wipeable buffer. Use it as a context manager, or
    call `wipe()` once the holder no longer needs to sign.
    """

    __slots__ = ("_secret",)

    def __init__(self, scalar: Fq) -> None:
        self._secret = SecretBytes(bytes(scalar))

    @classmethod
    def from_spending_key(cls, sk: SpendingKey) -> Self:
        """
        Derive ask and apply sign normalization.

        If `[ask]G` has canonical sign bit 1, ask is negated once so that
        `ak` always has sign bit 0. Negation flips the parity of y, so the
        adjustment is idempotent.
        """
        if len(sk) != SPENDING_KEY_LENGTH:
            raise ValueError(f"spending key must be {SPENDING_KEY_LENGTH} bytes, got {len(sk)}")
        ask = Fq.from_uniform_bytes(prf_expand(sk, PRF_EXPAND_TAG_ASK))
        if ask.is_zero():
            raise ValueError("spending key derives a zero ask")
        if SPEND_AUTH.verification_key(ask).sign_bit() == 1:
            ask = -ask
        return cls(ask)

    def scalar(self) -> Fq:
        """Read the scalar out of the buffer."""
        return Fq.from_bytes(self._secret.expose())

    def validating_key(self) -> SpendValidatingKey:
        """Compute ak = [ask]G."""
        return SpendValidatingKey(point=SPEND_AUTH.verification_key(self.scalar()))

    def sign_randomized(self, alpha: Fq, message: bytes) -> Signature:
        """Sign under the randomized key rsk = ask + alpha."""
        rsk = SPEND_AUTH.randomize_signing_key(self.scalar(), alpha)
        return SPEND_AUTH.sign(rsk, message)

    def wipe(self) -> None:
        self._secret.wipe()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<redacted>)"
