"""Incremental curve fitters."""

from trend_overlay.fitting.base import Fitter
from trend_overlay.fitting.exponential import ExponentialFitter
from trend_overlay.fitting.linear import LinearFitter

FITTERS: dict[str, type[Fitter]] = {
    LinearFitter.kind: LinearFitter,
    ExponentialFitter.kind: ExponentialFitter,
}


def create_fitter(kind: str) -> Fitter:
    """Build an empty fitter for ``"linear"`` or ``"exponential"``."""
    try:
        return FITTERS[kind]()
    except KeyError:
        raise ValueError(f"Unknown trendline kind: {kind!r}") from None


__all__ = ["Fitter", "LinearFitter", "ExponentialFitter", "FITTERS", "create_fitter"]
