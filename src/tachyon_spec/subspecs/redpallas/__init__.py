"""RedPallas re-randomizable Schnorr signatures."""

from .signature import BINDING, SPEND_AUTH, SPEND_AUTH_BASEPOINT, RedPallas, Signature, h_star

__all__ = [
    "BINDING",
    "SPEND_AUTH",
    "SPEND_AUTH_BASEPOINT",
    "RedPallas",
    "Signature",
    "h_star",
]
