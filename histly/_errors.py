"""Exception types raised by the binning engine."""
from __future__ import annotations

from typing import Any


class HistogramError(Exception):
    """Base class for all histly errors."""


class InvalidArgumentError(HistogramError, ValueError):
    """A bin count, range or pattern argument was not acceptable."""


class UnbinnedElementError(HistogramError, ValueError):
    """Strict aggregation met an element that falls into no bin."""

    def __init__(self, element: Any):
        super().__init__(
            f"The element {element!r} was not part of the binning")
        self.element = element


class NotResizableError(HistogramError, TypeError):
    """The bin count of a categorical histogram cannot be changed."""
