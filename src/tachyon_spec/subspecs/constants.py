"""
Protocol constants and configuration presets for Tachyon.

The domain separators below are protocol-fixed: changing any of them breaks
interoperability with every other implementation.
"""

from pydantic import BaseModel, ConfigDict
from typing_extensions import Final

from tachyon_spec.config import TACHYON_ENV

# --- Key Derivation ---

PRF_EXPAND_PERSONALIZATION: Final = b"Zcash_ExpandSeed"
"""BLAKE2b personalization of the key expansion function PRF^expand."""

PRF_EXPAND_TAG_ASK: Final = bytes([0x09])
"""Expansion tag for the spend authorizing key."""

PRF_EXPAND_TAG_NK: Final = bytes([0x0A])
"""Expansion tag for the nullifier key."""

PRF_EXPAND_TAG_PK: Final = bytes([0x0B])
"""Expansion tag for the payment key."""

SPENDING_KEY_LENGTH: Final = 32
"""Length of the root secret in bytes."""

# --- Action Authorization ---

BINDING_SIGHASH_PERSONALIZATION: Final = b"Tachyon-BindHash"
"""BLAKE2b personalization of the transaction-wide signing digest."""

SPEND_ALPHA_PERSONALIZATION: Final = b"Tachyon-Spend"
"""Role tag for deriving the randomizer of a spend action."""

OUTPUT_ALPHA_PERSONALIZATION: Final = b"Tachyon-Output"
"""Role tag for deriving the randomizer of an output action."""

REDPALLAS_SPEND_AUTH_DOMAIN: Final = "z.cash:Orchard"
"""Hash-to-curve domain of the spend authorization basepoint."""

REDPALLAS_HASH_PERSONALIZATION: Final = b"Zcash_RedPallasH"
"""BLAKE2b personalization of the RedPallas challenge and nonce hash."""

ACTION_ENTROPY_LENGTH: Final = 32
"""Length of the per-action entropy θ in bytes."""

# --- Commitments and Nullifiers ---

VALUE_COMMITMENT_DOMAIN: Final = "z.cash:Orchard-cv"
"""Hash-to-curve domain of the value commitment generators V and R."""

NULLIFIER_DOMAIN: Final = "z.cash:Tachyon-nf"
"""Domain of the nullifier KDF and delegation tree."""

NOTE_COMMITMENT_DOMAIN: Final = "z.cash:Tachyon-NoteCommit"
"""Domain of the note commitment."""

ACCUMULATOR_DOMAIN: Final = "z.cash:Tachyon-acc"
"""Domain of the accumulator hash and generator."""

# --- Value ---

MAX_MONEY: Final = 2_100_000_000_000_000
"""Maximum magnitude of any value or value balance, in zatoshis."""


class TachyonConfig(BaseModel):
    """A model holding the configuration constants for a Tachyon preset."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    EPOCH_BITS: int
    """Depth of the nullifier delegation tree; epochs live in [0, 2^EPOCH_BITS)."""

    CUSTODY_TIMEOUT_SECONDS: float
    """How long the assembler waits for a custody signer before giving up."""

    @property
    def MAX_EPOCH(self) -> int:  # noqa: N802
        """The largest epoch representable by this configuration."""
        return (1 << self.EPOCH_BITS) - 1


PROD_CONFIG: Final = TachyonConfig(
    EPOCH_BITS=32,
    CUSTODY_TIMEOUT_SECONDS=30.0,
)

TEST_CONFIG: Final = TachyonConfig(
    EPOCH_BITS=16,
    CUSTODY_TIMEOUT_SECONDS=1.0,
)

TARGET_CONFIG: Final = TEST_CONFIG if TACHYON_ENV == "test" else PROD_CONFIG
"""The preset selected by the `TACHYON_ENV` environment variable."""
