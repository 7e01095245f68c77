"""Tests for stamp proving, merging and encoding."""

import pytest

from tachyon_spec.subspecs.accumulator import Anchor, StampDigest
from tachyon_spec.subspecs.proof import TransparentProofSystem
from tachyon_spec.subspecs.stamp import Stamp
from tachyon_spec.types import EmptyAnchorIntersection, MalformedBundle
from tests.tachyon_spec.helpers import DEFAULT_ANCHOR, Wallet, make_plan, make_stamped_bundle


def test_prove_covers_every_action(proof_system: TransparentProofSystem) -> None:
    """The stamp lists one tachygram per action and proves their digest."""
    bundle = make_stamped_bundle(proof_system, spends=(100, 20), outputs=(70,))
    stamp = bundle.stamp
    assert stamp is not None
    assert len(stamp.tachygrams) == 3
    assert stamp.anchor == DEFAULT_ANCHOR

    digest = StampDigest.reconstruct(
        [a.public_digest() for a in bundle.actions], stamp.tachygrams, stamp.anchor
    )
    assert proof_system.verify(proof_system.decompress(stamp.proof), digest)


def test_prove_rejects_bad_witnesses(
    proof_system: TransparentProofSystem, wallet: Wallet
) -> None:
    """Stamps need at least one witness, all under the stamp anchor."""
    plan = make_plan(wallet)
    witnesses = [a.witness(DEFAULT_ANCHOR) for a in plan.actions]
    with pytest.raises(ValueError, match="at least one"):
        Stamp.prove([], DEFAULT_ANCHOR, proof_system)
    with pytest.raises(ValueError, match="stamp anchor"):
        Stamp.prove(witnesses, Anchor.of(0, 100), proof_system)


def test_merge_intersects_anchors(proof_system: TransparentProofSystem) -> None:
    """Merging concatenates tachygrams, narrows the anchor and stays provable."""
    first = make_stamped_bundle(proof_system, flavor=40, anchor=Anchor.of(10, 50))
    second = make_stamped_bundle(proof_system, flavor=40, anchor=Anchor.of(30, 70))
    assert first.stamp is not None and second.stamp is not None

    merged = first.stamp.merge(second.stamp, proof_system)
    assert merged.anchor == Anchor.of(30, 50)
    assert merged.tachygrams == first.stamp.tachygrams + second.stamp.tachygrams

    digest = StampDigest.reconstruct(
        [a.public_digest() for a in first.actions + second.actions],
        merged.tachygrams,
        merged.anchor,
    )
    assert proof_system.verify(proof_system.decompress(merged.proof), digest)


def test_merge_disjoint_anchors(proof_system: TransparentProofSystem) -> None:
    """Stamps whose anchors do not overlap cannot be merged."""
    first = make_stamped_bundle(proof_system, flavor=15, anchor=Anchor.of(10, 20))
    second = make_stamped_bundle(proof_system, flavor=35, anchor=Anchor.of(30, 40))
    assert first.stamp is not None and second.stamp is not None
    with pytest.raises(EmptyAnchorIntersection):
        first.stamp.merge(second.stamp, proof_system)


def test_wire_format(proof_system: TransparentProofSystem) -> None:
    """Stamps decode from their encoding; damaged encodings are malformed."""
    stamp = make_stamped_bundle(proof_system).stamp
    assert stamp is not None

    data = stamp.encode_bytes()
    assert len(data) == 4 + 32 * 2 + 8 + 4 + 104
    assert Stamp.decode_bytes(data) == stamp

    with pytest.raises(MalformedBundle, match="truncated"):
        Stamp.decode_bytes(data[:-1])
    with pytest.raises(MalformedBundle, match="trailing"):
        Stamp.decode_bytes(data + b"\x00")
    with pytest.raises(MalformedBundle, match="invalid stamp field"):
        Stamp.decode_bytes(data[:4] + b"\xff" * 32 + data[36:])
