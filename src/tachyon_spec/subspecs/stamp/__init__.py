"""Stamps: tachygrams, anchor and recursive proof."""

from .stamp import Stamp

__all__ = [
    "Stamp",
]
