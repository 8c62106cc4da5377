"""Factory functions for binnings: range inference and default bin counts."""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Collection, Hashable

import numpy as np

from ._binning import GeneralBinning, NumberBinning
from ._errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def compute_range(elements: Collection[Any],
                  key_extractor: Callable[[Any], float],
                  min: float | None = None,
                  max: float | None = None) -> tuple[float, float]:
    """Resolve the ``(min, max)`` range of a numeric binning.

    Explicit bounds win. A single explicit bound gets a unit-wide window
    on its open side. Missing bounds are taken from the extracted keys,
    and an empty collection without bounds gives ``(0.0, 1.0)``.
    """
    if min is not None and max is not None:
        return float(min), float(max)
    if min is None and max is None and len(elements) == 0:
        return 0.0, 1.0

    if min is not None:
        return float(min), float(min) + 1.0
    if max is not None:
        return float(max) - 1.0, float(max)

    values = np.fromiter((float(key_extractor(e)) for e in elements),
                         dtype=float, count=len(elements))
    actual_min, actual_max = float(values.min()), float(values.max())
    logger.debug("Inferred range [%g, %g] from %d elements",
                 actual_min, actual_max, len(values))
    return actual_min, actual_max


def create_number_binning(elements: Collection[Any],
                          key_extractor: Callable[[Any], float],
                          bin_count: int,
                          min: float | None = None,
                          max: float | None = None) -> NumberBinning:
    if bin_count <= 0:
        raise InvalidArgumentError(
            f"The bin count must be positive, but is {bin_count}")
    lo, hi = compute_range(elements, key_extractor, min, max)
    return NumberBinning(key_extractor, lo, hi, bin_count)


def create_general_binning(elements: Collection[Any],
                           key_extractor: Callable[[Any], Hashable]
                           ) -> GeneralBinning:
    return GeneralBinning(elements, key_extractor)


def compute_default_bin_count(n: int) -> int:
    """Sturges' rule: ``ceil(log2(n)) + 1`` bins for *n* samples, at least 1."""
    if n < 0:
        raise InvalidArgumentError(
            f"The sample size may not be negative, but is {n}")
    if n <= 1:
        return 1
    return math.ceil(math.log2(n)) + 1
