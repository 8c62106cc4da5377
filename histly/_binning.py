"""Binnings — strategies that map elements to bin indices.

Two shapes exist: NumberBinning splits a numeric range into equal-width
bins, GeneralBinning gives every distinct (categorical) key its own bin.
"""
from __future__ import annotations

import abc
import math
from typing import Any, Callable, Hashable, Iterable

import numpy as np

from ._errors import InvalidArgumentError, UnbinnedElementError
from ._types import INVALID_BIN

EPSILON = 1e-6


def _check_bin_count(bin_count: int) -> int:
    if bin_count <= 0:
        raise InvalidArgumentError(
            f"The bin count must be positive, but is {bin_count}")
    return int(bin_count)


class Binning(abc.ABC):
    """Abstract mapping from elements to bins ``[0, bin_count)``."""

    @property
    @abc.abstractmethod
    def bin_count(self) -> int:
        """Number of bins, fixed at construction."""

    @abc.abstractmethod
    def compute_bin(self, element: Any) -> int:
        """Return the bin of *element*, or INVALID_BIN."""

    def compute(self, elements: Iterable[Any] | None,
                ignore_invalid: bool = True) -> np.ndarray:
        """Count how many of *elements* fall into each bin.

        With ``ignore_invalid=False`` the first element that falls into no
        bin raises UnbinnedElementError and no counts are returned.
        """
        counts = np.zeros(self.bin_count, dtype=int)
        if elements is None:
            return counts
        for element in elements:
            b = self.compute_bin(element)
            if b < 0:
                if not ignore_invalid:
                    raise UnbinnedElementError(element)
                continue
            counts[b] += 1
        return counts


class NumberBinning(Binning):
    """Equal-width bins over ``[min, max]`` of a numeric key.

    All bins are half-open except the last one, which also admits ``max``
    and anything up to EPSILON above it.
    """

    def __init__(self, key_extractor: Callable[[Any], float],
                 min: float, max: float, bin_count: int):
        if key_extractor is None:
            raise InvalidArgumentError("The key_extractor may not be None")
        if min > max:
            raise InvalidArgumentError(
                f"The minimum {min} is larger than the maximum {max}")
        self._key_extractor = key_extractor
        self._min = float(min)
        self._max = float(max)
        self._bin_count = _check_bin_count(bin_count)

    def __repr__(self) -> str:
        return (f"NumberBinning(min={self._min!r}, max={self._max!r}, "
                f"bin_count={self._bin_count})")

    @property
    def bin_count(self) -> int:
        return self._bin_count

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    @property
    def key_extractor(self) -> Callable[[Any], float]:
        return self._key_extractor

    @property
    def step(self) -> float:
        return (self._max - self._min) / self._bin_count

    def bin_min(self, bin: int) -> float:
        return self._min + self.step * bin

    def bin_max(self, bin: int) -> float:
        step = self.step
        return self._min + step * bin + step

    def bin_edges(self) -> np.ndarray:
        """All ``bin_count + 1`` bin boundaries, ``min`` first."""
        edges = [self.bin_min(i) for i in range(self._bin_count)]
        edges.append(self.bin_max(self._bin_count - 1))
        return np.asarray(edges, dtype=float)

    def compute_bin(self, element: Any) -> int:
        value = float(self._key_extractor(element))
        if self._max <= value <= self._max + EPSILON:
            if self._max == self._min:
                return 0
            return self._bin_count - 1
        if self._max == self._min:
            return INVALID_BIN
        alpha = (value - self._min) / (self._max - self._min)
        if not math.isfinite(alpha):
            return INVALID_BIN
        b = math.floor(alpha * self._bin_count)
        # Rounding can push a value just below max onto bin_count
        if b == self._bin_count and value < self._max:
            return self._bin_count - 1
        if b < 0 or b >= self._bin_count:
            return INVALID_BIN
        return b


class GeneralBinning(Binning):
    """One bin per distinct key, numbered in first-seen order.

    The key-to-bin mapping is frozen at construction; keys that were not
    seen then fall into no bin.
    """

    def __init__(self, elements: Iterable[Any],
                 key_extractor: Callable[[Any], Hashable]):
        if key_extractor is None:
            raise InvalidArgumentError("The key_extractor may not be None")
        self._key_extractor = key_extractor
        indices: dict[Hashable, int] = {}
        for element in elements:
            key = key_extractor(element)
            if key not in indices:
                indices[key] = len(indices)
        self._indices = indices
        self._keys = tuple(indices)
        _check_bin_count(len(self._keys))

    def __repr__(self) -> str:
        return f"GeneralBinning(keys={list(self._keys)!r})"

    @property
    def bin_count(self) -> int:
        return len(self._keys)

    @property
    def keys(self) -> tuple:
        return self._keys

    def key(self, bin: int) -> Hashable:
        return self._keys[bin]

    def compute_bin(self, element: Any) -> int:
        key = self._key_extractor(element)
        try:
            return self._indices.get(key, INVALID_BIN)
        except TypeError:  # unhashable
            return INVALID_BIN
