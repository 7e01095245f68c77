"""
Nullifier derivation and bounded delegation.

### Owner path

    mk = ToBase(H("z.cash:Tachyon-nf", "mk", Ψ, nk))
    nf(e) = LeafOutput(GGMWalk(mk, e))

The master key is computed on demand and wiped right after use; it is never
persisted or transmitted.

### Delegate path

To let an untrusted service compute nullifiers for epochs `[0, t]`, the
owner sends one `PrefixKey` per block of the canonical dyadic cover of
`[0, t]`. The service walks down from the prefix covering the requested
epoch. It has no key for any node outside those subtrees, and the bound
check runs before any hashing, so a request for `e > t` is refused without
producing output.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import model_validator
from typing_extensions import Final, Self

from tachyon_spec.subspecs.constants import (
    NULLIFIER_DOMAIN,
    PROD_CONFIG,
    TARGET_CONFIG,
    TEST_CONFIG,
    TachyonConfig,
)
from tachyon_spec.subspecs.keys import NullifierKey, SecretBytes
from tachyon_spec.subspecs.note import Tachygram
from tachyon_spec.subspecs.pallas import FIELD_BYTES, Fp, domain_hash
from tachyon_spec.types import DelegationOutOfScope, StrictBaseModel

from .ggm import dyadic_cover, ggm_walk, leaf_output, prefix_interval

logger = logging.getLogger(__name__)

MASTER_KEY_LABEL: bytes = b"mk"


class NoteMasterKey(SecretBytes):
    """The per-note PRF root mk, held in a wipeable buffer."""

    __slots__ = ()

    LENGTH = FIELD_BYTES


class PrefixKey(StrictBaseModel):
    """
    A GGM node key together with its position in the tree.

    The node sits `prefix_len` levels below the root, on the path spelled by
    the `prefix_len` bits of `prefix`.
    """

    prefix_len: int
    prefix: int
    key: SecretBytes

    def interval(self, depth: int) -> tuple[int, int]:
        """The inclusive epoch range this key can evaluate."""
        return prefix_interval(self.prefix_len, self.prefix, depth)

    def covers(self, epoch: int, depth: int) -> bool:
        """Whether `epoch` lies in this key's subtree."""
        return epoch >> (depth - self.prefix_len) == self.prefix

    def leaf(self, epoch: int, depth: int) -> bytes:
        """Walk from this node down to the leaf of `epoch`."""
        if not self.covers(epoch, depth):
            raise DelegationOutOfScope(epoch, self.interval(depth)[1])
        span = depth - self.prefix_len
        return ggm_walk(self.key.expose(), epoch & ((1 << span) - 1), span)


class NoteDelegateKey(StrictBaseModel):
    """
    The bounded capability Ψ_t: nullifiers for every epoch in `[0, bound]`.

    The prefixes must tile `[0, bound]` exactly, with no gaps, overlaps, or
    blocks reaching past the bound. None of them may be the empty prefix,
    whose key is mk itself. This is checked at construction.
    """

    depth: int
    bound: int
    prefixes: tuple[PrefixKey, ...]

    @model_validator(mode="after")
    def check_exact_cover(self) -> Self:
        """Reject prefix sets that do not tile [0, bound] exactly."""
        if not 0 <= self.bound < (1 << self.depth):
            raise ValueError(f"bound {self.bound} does not fit in {self.depth} bits")
        if any(p.prefix_len == 0 for p in self.prefixes):
            raise ValueError("a delegate key cannot hold the tree root")
        intervals = sorted(p.interval(self.depth) for p in self.prefixes)
        expected_lo = 0
        for lo, hi in intervals:
            if lo != expected_lo:
                raise ValueError(f"prefix block [{lo}, {hi}] leaves a gap or overlaps")
            expected_lo = hi + 1
        if expected_lo != self.bound + 1:
            raise ValueError(f"prefixes cover [0, {expected_lo - 1}], expected [0, {self.bound}]")
        return self

    def derive_nullifier(self, epoch: int) -> Tachygram:
        """
        Evaluate the nullifier PRF for `epoch`.

        Raises:
            DelegationOutOfScope: If `epoch` is outside `[0, bound]`. The check
                happens before any PRF evaluation.
        """
        if not 0 <= epoch <= self.bound:
            logger.warning("Refusing nullifier for epoch %s beyond bound %s", epoch, self.bound)
            raise DelegationOutOfScope(epoch, self.bound)
        for prefix_key in self.prefixes:
            if prefix_key.covers(epoch, self.depth):
                return Tachygram.from_field(leaf_output(prefix_key.leaf(epoch, self.depth)))
        # Unreachable for a validated key; fail closed.
        raise DelegationOutOfScope(epoch, self.bound)

    def extend(self, new_bound: int, delta: Sequence[PrefixKey]) -> NoteDelegateKey:
        """
        Advance the window from `[0, bound]` to `[0, new_bound]`.

        `delta` must be exactly the cover of `(bound, new_bound]`; the result is
        validated as a whole.
        """
        if new_bound <= self.bound:
            raise ValueError(f"new bound {new_bound} does not advance past {self.bound}")
        return NoteDelegateKey(
            depth=self.depth,
            bound=new_bound,
            prefixes=self.prefixes + tuple(delta),
        )

    def wipe(self) -> None:
        """Erase every node key held by this capability."""
        for prefix_key in self.prefixes:
            prefix_key.key.wipe()


class NullifierScheme(StrictBaseModel):
    """The nullifier engine for a given configuration."""

    config: TachyonConfig
    """Configuration parameters (the tree depth is `EPOCH_BITS`)."""

    @model_validator(mode="after")
    def enforce_strict_types(self) -> Self:
        """Reject subclasses to prevent type confusion attacks."""
        if type(self.config) is not TachyonConfig:
            raise TypeError("config must be exactly TachyonConfig, not a subclass")
        return self

    @property
    def depth(self) -> int:
        """Depth of the delegation tree."""
        return self.config.EPOCH_BITS

    def check_epoch(self, epoch: int) -> int:
        """Reject epochs that do not fit in the tree."""
        if not 0 <= epoch <= self.config.MAX_EPOCH:
            raise ValueError(f"epoch {epoch} outside [0, {self.config.MAX_EPOCH}]")
        return epoch

    def master_key(self, psi: Fp, nk: NullifierKey) -> NoteMasterKey:
        """Compute mk = KDF(Ψ, nk). The caller owns, and must wipe, the result."""
        digest = domain_hash(NULLIFIER_DOMAIN, MASTER_KEY_LABEL, bytes(psi), bytes(nk))
        return NoteMasterKey(bytes(Fp.from_uniform_bytes(digest)))

    def nullifier(self, psi: Fp, nk: NullifierKey, epoch: int) -> Tachygram:
        """Compute nf = F_nk(Ψ || epoch) directly from the owner's keys."""
        self.check_epoch(epoch)
        with self.master_key(psi, nk) as mk:
            leaf = ggm_walk(mk.expose(), epoch, self.depth)
        return Tachygram.from_field(leaf_output(leaf))

    def prefix_keys(self, mk: NoteMasterKey, lo: int, hi: int) -> tuple[PrefixKey, ...]:
        """Derive the prefix keys covering `[lo, hi]` from the master key."""
        return tuple(
            PrefixKey(
                prefix_len=prefix_len,
                prefix=prefix,
                key=SecretBytes(ggm_walk(mk.expose(), prefix, prefix_len)),
            )
            for prefix_len, prefix in dyadic_cover(lo, hi, self.depth)
        )

    def delegate(self, psi: Fp, nk: NullifierKey, bound: int) -> NoteDelegateKey:
        """Grant the capability to derive nullifiers for every epoch in `[0, bound]`."""
        self.check_epoch(bound)
        with self.master_key(psi, nk) as mk:
            prefixes = self.prefix_keys(mk, 0, bound)
        logger.debug("Delegated epochs [0, %s] with %s prefix keys", bound, len(prefixes))
        return NoteDelegateKey(depth=self.depth, bound=bound, prefixes=prefixes)

    def extension(
        self, psi: Fp, nk: NullifierKey, delegate: NoteDelegateKey, new_bound: int
    ) -> tuple[PrefixKey, ...]:
        """Derive only the prefix keys for the delta range `(bound, new_bound]`."""
        self.check_epoch(new_bound)
        if new_bound <= delegate.bound:
            raise ValueError(f"new bound {new_bound} does not advance past {delegate.bound}")
        with self.master_key(psi, nk) as mk:
            return self.prefix_keys(mk, delegate.bound + 1, new_bound)


PROD_NULLIFIER_SCHEME: Final = NullifierScheme(config=PROD_CONFIG)
"""An instance configured for production-level parameters."""

TEST_NULLIFIER_SCHEME: Final = NullifierScheme(config=TEST_CONFIG)
"""A lightweight instance for test environments."""

TARGET_NULLIFIER_SCHEME: Final = NullifierScheme(config=TARGET_CONFIG)
"""The instance selected by the `TACHYON_ENV` environment variable."""
