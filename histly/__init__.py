"""histly — interactive histograms for arbitrary in-memory collections.

Usage:
    # Categorical: one bin per distinct key, in first-seen order
    engine = histly.create(["A", "A", "B", "C", "B"])

    # Numeric: equal-width bins, Sturges' rule picks the initial count
    engine = histly.create_numeric(people, key=lambda p: p.age)
    engine.set_elements(people, highlighted_elements=selected)
    engine.set_bin_count(20)

    # Clicks deliver the elements of the clicked bin
    engine.add_click_listener(lambda e: print(e.bin, e.bin_elements))
    histly.show(engine)
"""
from __future__ import annotations

__version__ = "0.1.0"
__all__ = [
    "Binning",
    "BinSnapshot",
    "DEFAULT_DATE_PATTERN",
    "EPSILON",
    "GeneralBinning",
    "HistogramClickEvent",
    "HistogramEngine",
    "HistogramError",
    "HistogramStyle",
    "HistogramView",
    "INVALID_BIN",
    "InvalidArgumentError",
    "NotResizableError",
    "NumberBinning",
    "Subset",
    "UnbinnedElementError",
    "compute_default_bin_count",
    "create",
    "create_for_date",
    "create_numeric",
    "show",
]

from ._binning import EPSILON, Binning, GeneralBinning, NumberBinning
from ._binnings import compute_default_bin_count
from ._engine import HistogramEngine
from ._errors import (
    HistogramError, InvalidArgumentError, NotResizableError,
    UnbinnedElementError,
)
from ._histograms import create, create_for_date, create_numeric
from ._labels import DEFAULT_DATE_PATTERN
from ._types import (
    INVALID_BIN, BinSnapshot, HistogramClickEvent, HistogramStyle, Subset,
)
from ._view import HistogramView, show
