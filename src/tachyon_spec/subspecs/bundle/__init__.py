"""Bundles and their construction."""

from .builder import build_bundle, build_stamped_bundle, finalize_bundle
from .bundle import Bundle

__all__ = [
    "Bundle",
    "build_bundle",
    "build_stamped_bundle",
    "finalize_bundle",
]
