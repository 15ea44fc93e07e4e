"""Uniform random sampling used by the grid to draw points from its domain."""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np


class UniformSampler(Protocol):
    """Anything that can draw a uniform double from ``[low, high]``.

    ``numpy.random.Generator`` satisfies this protocol directly.
    """

    def uniform(self, low: float, high: float) -> float:
        ...


def create_sampler(seed: Optional[int] = None) -> np.random.Generator:
    """Create the default sampler.

    Args:
        seed: Seed for reproducible draws. ``None`` pulls fresh OS entropy.

    Returns:
        A numpy Generator usable as a :class:`UniformSampler`.
    """
    return np.random.default_rng(seed)
