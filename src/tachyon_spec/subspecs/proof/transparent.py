"""
A transparent reference proof system.

It checks the action relation in the clear before "proving", and its proofs
carry the stamp digest in the clear, sealed with a keyed BLAKE2b MAC under
a key only the instance holds. The seal stands in for soundness: nobody
without the key can mint a proof for a digest the instance did not check,
or merge proofs into one.

This backend is for simulation and tests. It offers no zero knowledge and
no succinctness, and it is not a production prover.

Compressed layout: `actions_acc (32) || tachygram_acc (32) || anchor (8) || seal (32)`.
"""

from __future__ import annotations

import hashlib
import hmac
import os
from dataclasses import dataclass
from typing import Any

from typing_extensions import Final, Self

from tachyon_spec.subspecs.accumulator import StampDigest
from tachyon_spec.subspecs.keys import ActionRole
from tachyon_spec.subspecs.nullifier import TARGET_NULLIFIER_SCHEME, NullifierScheme
from tachyon_spec.subspecs.redpallas import SPEND_AUTH
from tachyon_spec.subspecs.value import ValueCommitment
from tachyon_spec.types import Bytes32, StrictBaseModel

from .interface import CircuitKind
from .witness import ActionWitness

SEAL_PERSONALIZATION: Final = b"Tachyon-PrfSeal"
"""BLAKE2b personalization of the proof seal."""

SEAL_LENGTH: Final = 32
"""Length of the seal in bytes."""

COMPRESSED_LENGTH: Final = StampDigest.ENCODED_LENGTH + SEAL_LENGTH
"""Length of a compressed transparent proof."""


@dataclass(slots=True)
class TransparentProof:
    """The decompressed, mergeable form of a transparent proof."""

    digest: StampDigest
    seal: bytes


class TransparentProofSystem(StrictBaseModel):
    """A keyed transparent backend implementing `ProofSystem`."""

    key: Bytes32
    """Sealing key. Proofs only verify under the instance that produced them."""

    nullifier_scheme: NullifierScheme = TARGET_NULLIFIER_SCHEME
    """Scheme used to check spend nullifiers."""

    @classmethod
    def generate(cls, nullifier_scheme: NullifierScheme = TARGET_NULLIFIER_SCHEME) -> Self:
        """Create an instance with a fresh random sealing key."""
        return cls(key=Bytes32(os.urandom(Bytes32.LENGTH)), nullifier_scheme=nullifier_scheme)

    def _seal(self, digest: StampDigest) -> bytes:
        return hashlib.blake2b(
            bytes(digest),
            digest_size=SEAL_LENGTH,
            key=bytes(self.key),
            person=SEAL_PERSONALIZATION,
        ).digest()

    def _is_sealed(self, proof: TransparentProof) -> bool:
        return hmac.compare_digest(proof.seal, self._seal(proof.digest))

    def check_relation(self, witness: ActionWitness) -> None:
        """
        Check the action leaf relation.

        Raises:
            ValueError: Naming the first relation the witness violates.
        """
        if not witness.anchor.contains(witness.flavor):
            raise ValueError(f"flavor {witness.flavor} outside the anchor")

        if ValueCommitment.commit(witness.signed_value, witness.rcv) != witness.cv:
            raise ValueError("cv does not open to the note value")

        alpha = witness.alpha.scalar()
        if witness.role is ActionRole.SPEND:
            if witness.pak is None:
                raise ValueError("spend witness needs a proof authorizing key")
            if witness.pak.ak.randomize(alpha) != witness.rk:
                raise ValueError("rk is not a randomization of ak")
            expected = self.nullifier_scheme.nullifier(
                witness.note.psi, witness.pak.nk, witness.flavor
            )
            if expected != witness.tachygram:
                raise ValueError("tachygram is not the note's nullifier for this flavor")
        else:
            if SPEND_AUTH.verification_key(alpha) != witness.rk:
                raise ValueError("rk is not a randomization of the basepoint")
            if witness.note.commitment() != witness.tachygram:
                raise ValueError("tachygram is not the note commitment")

    def prove(self, kind: CircuitKind, witness: Any) -> TransparentProof:
        """
        Prove one action (`ACTION_LEAF`) or fold a `(left, right)` pair (`STAMP_MERGE`).
        """
        if kind is CircuitKind.STAMP_MERGE:
            left, right = witness
            return self.merge(left, right)

        self.check_relation(witness)
        digest = StampDigest.reconstruct(
            [witness.public_digest()], [witness.tachygram], witness.anchor
        )
        return TransparentProof(digest=digest, seal=self._seal(digest))

    def verify(self, proof: TransparentProof, digest: StampDigest) -> bool:
        """Accept iff the seal is genuine and the sealed digest equals `digest`."""
        return self._is_sealed(proof) and proof.digest == digest

    def merge(self, left: TransparentProof, right: TransparentProof) -> TransparentProof:
        """
        Fold two proofs.

        Raises:
            ValueError: If either input carries a forged seal.
            EmptyAnchorIntersection: If the anchors are disjoint.
        """
        if not (self._is_sealed(left) and self._is_sealed(right)):
            raise ValueError("cannot merge a proof with an invalid seal")
        digest = left.digest.combine(right.digest)
        return TransparentProof(digest=digest, seal=self._seal(digest))

    def compress(self, proof: TransparentProof) -> bytes:
        return bytes(proof.digest) + proof.seal

    def decompress(self, data: bytes) -> TransparentProof:
        """
        Parse a compressed proof.

        Raises:
            ValueError: If the data is not a well-formed compressed proof.
        """
        if len(data) != COMPRESSED_LENGTH:
            raise ValueError(f"Expected {COMPRESSED_LENGTH} proof bytes, got {len(data)}")
        return TransparentProof(
            digest=StampDigest.from_bytes(data[: StampDigest.ENCODED_LENGTH]),
            seal=bytes(data[StampDigest.ENCODED_LENGTH :]),
        )
