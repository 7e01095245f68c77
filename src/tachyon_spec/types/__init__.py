"""Reusable type definitions for the Tachyon protocol specification."""

from .base import CamelModel, StrictBaseModel
from .byte_arrays import BaseBytes, Bytes32, Bytes64
from .exceptions import (
    AnchorOutOfRange,
    BundleValidationError,
    CustodyRejected,
    CustodyUnavailable,
    DelegationOutOfScope,
    DuplicateTachygram,
    EmptyAnchorIntersection,
    InvalidActionSignature,
    InvalidBindingSignature,
    MalformedBundle,
    ProofVerificationFailed,
    TachyonError,
    UnbalancedValue,
    UnsupportedTachygramCount,
)
from .uint import BaseUint, Uint32

__all__ = [
    # Core types
    "BaseBytes",
    "BaseUint",
    "Bytes32",
    "Bytes64",
    "CamelModel",
    "StrictBaseModel",
    "Uint32",
    # Exceptions
    "TachyonError",
    "BundleValidationError",
    "MalformedBundle",
    "UnsupportedTachygramCount",
    "InvalidActionSignature",
    "InvalidBindingSignature",
    "DuplicateTachygram",
    "AnchorOutOfRange",
    "ProofVerificationFailed",
    "EmptyAnchorIntersection",
    "UnbalancedValue",
    "DelegationOutOfScope",
    "CustodyUnavailable",
    "CustodyRejected",
]
