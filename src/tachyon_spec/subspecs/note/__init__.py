"""Notes, note commitments and tachygrams."""

from .note import Note
from .tachygram import Tachygram

__all__ = [
    "Note",
    "Tachygram",
]
