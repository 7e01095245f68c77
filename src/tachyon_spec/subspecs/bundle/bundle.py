"""
Bundles: the shielded payload of one transaction.

A bundle is either *stamped* (actions and a stamp), *stripped* (actions
only, an adjunct whose stamp was absorbed by a preceding aggregate), or
empty (no Tachyon data at all, ignored by validation).

Wire layout (integers little-endian):

    u32 n || action_1 .. action_n (128 bytes each) || value_balance (i64)
        || binding_sig (64) || u8 has_stamp || [stamp]
"""

from __future__ import annotations

from typing import Self

from pydantic import field_validator

from tachyon_spec.subspecs.action import Action, compute_sighash, encode_value_balance
from tachyon_spec.subspecs.redpallas import BINDING, Signature
from tachyon_spec.subspecs.stamp import Stamp
from tachyon_spec.subspecs.value import check_value_balance, derive_bvk
from tachyon_spec.types import (
    InvalidActionSignature,
    InvalidBindingSignature,
    MalformedBundle,
    StrictBaseModel,
)


class Bundle(StrictBaseModel):
    """A transaction's Tachyon payload."""

    actions: tuple[Action, ...]
    """Signed actions."""

    value_balance: int
    """Net value leaving the shielded pool, in [-MAX_MONEY, MAX_MONEY]."""

    binding_sig: Signature
    """Binding signature over the sighash under bvk."""

    stamp: Stamp | None = None
    """The stamp, absent once the bundle has been stripped."""

    @field_validator("value_balance")
    @classmethod
    def check_balance_range(cls, v: int) -> int:
        """Reject balances outside the money range."""
        return check_value_balance(v)

    @property
    def is_stamped(self) -> bool:
        """Whether the bundle carries a stamp."""
        return self.stamp is not None

    @property
    def is_empty(self) -> bool:
        """Whether the bundle carries no Tachyon data at all."""
        return not self.actions and self.stamp is None

    def sighash(self) -> bytes:
        """The digest every signature of the bundle covers."""
        return compute_sighash(self.value_balance, (a.public_digest() for a in self.actions))

    def strip(self) -> Self:
        """Drop the stamp, keeping actions, balance and binding signature."""
        return self.model_copy(update={"stamp": None})

    def verify_signatures(self, bundle_index: int | None = None) -> None:
        """
        Check every action signature, then the binding signature.

        Raises:
            InvalidActionSignature: For the first action whose signature fails.
            InvalidBindingSignature: If the binding signature does not verify
                against bvk = sum(cv) - ValueCommit_0(value_balance).
        """
        sighash = self.sighash()
        for i, action in enumerate(self.actions):
            if not action.verify(sighash):
                raise InvalidActionSignature(i, bundle_index=bundle_index)
        self.verify_binding_signature(sighash, bundle_index)

    def verify_binding_signature(
        self, sighash: bytes | None = None, bundle_index: int | None = None
    ) -> None:
        """Check the binding signature alone."""
        if sighash is None:
            sighash = self.sighash()
        bvk = derive_bvk((a.cv for a in self.actions), self.value_balance)
        if not BINDING.verify(bvk, sighash, self.binding_sig):
            raise InvalidBindingSignature(
                "binding signature does not verify against the value balance",
                bundle_index=bundle_index,
            )

    def encode_bytes(self) -> bytes:
        """Serialize to the wire layout."""
        parts = [len(self.actions).to_bytes(4, "little")]
        parts.extend(a.encode_bytes() for a in self.actions)
        parts.append(encode_value_balance(self.value_balance))
        parts.append(bytes(self.binding_sig))
        if self.stamp is None:
            parts.append(b"\x00")
        else:
            parts.append(b"\x01")
            parts.append(self.stamp.encode_bytes())
        return b"".join(parts)

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """
        Parse a bundle.

        Raises:
            MalformedBundle: On any size, encoding or range violation.
        """
        offset = 0

        def take(size: int) -> bytes:
            nonlocal offset
            if offset + size > len(data):
                raise MalformedBundle(f"bundle truncated at byte {offset}")
            chunk = data[offset : offset + size]
            offset += size
            return chunk

        count = int.from_bytes(take(4), "little")
        try:
            actions = tuple(Action.decode_bytes(take(Action.ENCODED_LENGTH)) for _ in range(count))
            value_balance = check_value_balance(int.from_bytes(take(8), "little", signed=True))
        except ValueError as e:
            raise MalformedBundle(f"invalid bundle field: {e}") from e
        binding_sig = Signature(take(Signature.LENGTH))

        flag = take(1)[0]
        if flag == 0:
            stamp = None
        elif flag == 1:
            stamp, offset = Stamp.decode_prefix(data, offset)
        else:
            raise MalformedBundle(f"invalid stamp flag {flag}")

        if offset != len(data):
            raise MalformedBundle(f"{len(data) - offset} trailing bytes after bundle")
        return cls(
            actions=actions,
            value_balance=value_balance,
            binding_sig=binding_sig,
            stamp=stamp,
        )
