"""Exception hierarchy for the Tachyon protocol."""

from __future__ import annotations


class TachyonError(Exception):
    """
    Base exception for all Tachyon protocol errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class BundleValidationError(TachyonError):
    """
    Base class for failures that invalidate the enclosing block.

    Attributes:
        bundle_index: Position of the offending bundle in the block, if known.
    """

    def __init__(self, message: str, *, bundle_index: int | None = None) -> None:
        self.bundle_index = bundle_index
        if bundle_index is not None:
            message = f"bundle {bundle_index}: {message}"
        super().__init__(message)


class MalformedBundle(BundleValidationError):
    """Raised on field-size, encoding or structural violations."""


class UnsupportedTachygramCount(MalformedBundle):
    """
    Raised when a stamp carries more tachygrams than its window has actions.

    Attributes:
        tachygrams: Number of tachygrams in the stamp.
        actions: Number of actions in the validation window.
    """

    def __init__(self, tachygrams: int, actions: int, *, bundle_index: int | None = None) -> None:
        self.tachygrams = tachygrams
        self.actions = actions
        super().__init__(
            f"{tachygrams} tachygrams for {actions} actions; bonus tachygrams are unsupported",
            bundle_index=bundle_index,
        )


class InvalidActionSignature(BundleValidationError):
    """
    Raised when an action signature does not verify against its rk.

    Attributes:
        action_index: Position of the action within its bundle.
    """

    def __init__(self, action_index: int, *, bundle_index: int | None = None) -> None:
        self.action_index = action_index
        super().__init__(
            f"action {action_index} signature does not verify", bundle_index=bundle_index
        )


class InvalidBindingSignature(BundleValidationError):
    """Raised when the binding signature does not verify against the recomputed bvk."""


class DuplicateTachygram(BundleValidationError):
    """
    Raised when a stamp lists the same tachygram more than once.

    Attributes:
        tachygram: The repeated tachygram.
    """

    def __init__(self, tachygram: bytes, *, bundle_index: int | None = None) -> None:
        self.tachygram = tachygram
        super().__init__(
            f"duplicate tachygram {bytes(tachygram).hex()}", bundle_index=bundle_index
        )


class AnchorOutOfRange(BundleValidationError):
    """
    Raised when a stamp's anchor does not cover the epoch it lands in.

    Attributes:
        epoch: The landing epoch.
        lo: Lower bound of the anchor.
        hi: Upper bound of the anchor.
    """

    def __init__(self, epoch: int, lo: int, hi: int, *, bundle_index: int | None = None) -> None:
        self.epoch = epoch
        self.lo = lo
        self.hi = hi
        super().__init__(
            f"epoch {epoch} outside anchor [{lo}, {hi}]", bundle_index=bundle_index
        )


class ProofVerificationFailed(BundleValidationError):
    """Raised when the proof does not verify against the reconstructed digest."""


class EmptyAnchorIntersection(TachyonError):
    """
    Raised when two anchors being merged do not overlap.

    Attributes:
        left: The (lo, hi) bounds of the left anchor.
        right: The (lo, hi) bounds of the right anchor.
    """

    def __init__(self, left: tuple[int, int], right: tuple[int, int]) -> None:
        self.left = left
        self.right = right
        super().__init__(
            f"anchors [{left[0]}, {left[1]}] and [{right[0]}, {right[1]}] do not intersect"
        )


class UnbalancedValue(TachyonError):
    """Raised at build time when the action values do not sum to the declared balance."""


class DelegationOutOfScope(TachyonError):
    """
    Raised when a delegate key is asked for an epoch it does not cover.

    Attributes:
        epoch: The requested epoch.
        bound: The delegate key's inclusive upper bound.
    """

    def __init__(self, epoch: int, bound: int) -> None:
        self.epoch = epoch
        self.bound = bound
        super().__init__(f"epoch {epoch} is outside the delegated range [0, {bound}]")


class CustodyUnavailable(TachyonError):
    """Raised when the custody signer times out, disconnects or is cancelled."""


class CustodyRejected(TachyonError):
    """Raised when the custody signer refuses a request it cannot authenticate."""
