"""The proof system boundary and a transparent reference backend."""

from .interface import CircuitKind, ProofSystem
from .transparent import TransparentProof, TransparentProofSystem
from .witness import ActionWitness

__all__ = [
    "ActionWitness",
    "CircuitKind",
    "ProofSystem",
    "TransparentProof",
    "TransparentProofSystem",
]
