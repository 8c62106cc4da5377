"""Shared constants, enums and value types."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from ._errors import InvalidArgumentError

INVALID_BIN = -1


class Subset(Enum):
    ALL = "all"
    HIGHLIGHTED = "highlighted"

    @classmethod
    def coerce(cls, value: Subset | str) -> Subset:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgumentError(
                f"subset must be 'all' or 'highlighted', got {value!r}"
            ) from None


@dataclass(frozen=True, eq=False)
class BinSnapshot:
    """Per-bin counts of all elements and of the highlighted subset."""

    counts: np.ndarray
    highlighted_counts: np.ndarray

    @property
    def bin_count(self) -> int:
        return len(self.counts)

    @property
    def remainder_counts(self) -> np.ndarray:
        """Total minus highlighted, the upper series of a stacked bar."""
        return self.counts - self.highlighted_counts


@dataclass(frozen=True)
class HistogramClickEvent:
    """Delivered to click listeners when a bar of the histogram is clicked."""

    source: Any  # HistogramEngine
    bin: int
    highlighted: bool
    bin_elements: tuple = ()
    highlighted_bin_elements: tuple = ()
    trigger: Any = None  # e.g. matplotlib.backend_bases.MouseEvent


@dataclass
class HistogramStyle:
    """Visual settings for HistogramView."""

    highlighted_color: str = "#80ff80"
    remainder_color: str = "#8080ff"
    edge_color: str = "none"
    bar_width: float = 0.98
    figsize: tuple[float, float] = (8.0, 3.5)
    tick_fontsize: float = 8.0
    grid_color: str = "#d3d3d3"
    max_bin_count: int = 100000
