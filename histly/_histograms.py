"""Convenience constructors for categorical, numeric and date histograms."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Hashable, Iterable

from ._binnings import (
    compute_default_bin_count, compute_range, create_general_binning,
    create_number_binning,
)
from ._engine import HistogramEngine
from ._errors import InvalidArgumentError
from ._labels import (
    DEFAULT_DATE_PATTERN, category_label_function, compile_date_pattern,
    date_label_function, number_label_function,
)


def _identity(x: Any) -> Any:
    return x


def _to_millis(key: Callable[[Any], Any]) -> Callable[[Any], float]:
    """Wrap *key* so datetime keys become epoch milliseconds."""
    def millis(element: Any) -> float:
        value = key(element)
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value.timestamp() * 1000.0
        return float(value)
    return millis


def _bound_millis(value: Any) -> float | None:
    if value is None:
        return None
    return _to_millis(_identity)(value)


def create(elements: Iterable[Any],
           key: Callable[[Any], Hashable] | None = None) -> HistogramEngine:
    """Categorical histogram with one bin per distinct key.

    Bins follow the order in which keys first appear in *elements*.
    """
    if elements is None:
        raise InvalidArgumentError("The elements may not be None")
    elements = tuple(elements)
    binning = create_general_binning(elements, key or _identity)
    engine = HistogramEngine(binning, category_label_function(binning.keys))
    engine.set_elements(elements)
    return engine


def _create_number_engine(elements, key, bin_count, min, max,
                          label_function_provider) -> HistogramEngine:
    if elements is None:
        raise InvalidArgumentError("The elements may not be None")
    elements = tuple(elements)
    if bin_count is None:
        bin_count = compute_default_bin_count(len(elements))
    # Resolve the range once so resizing keeps it
    lo, hi = compute_range(elements, key, min, max)

    def binning_provider(n: int):
        return create_number_binning(elements, key, n, lo, hi)

    binning = binning_provider(bin_count)
    engine = HistogramEngine(
        binning, label_function_provider(binning),
        binning_provider=binning_provider,
        label_function_provider=label_function_provider)
    engine.set_elements(elements)
    return engine


def create_numeric(elements: Iterable[Any],
                   key: Callable[[Any], float] | None = None,
                   bin_count: int | None = None,
                   min: float | None = None,
                   max: float | None = None,
                   separator: str = "\n") -> HistogramEngine:
    """Numeric histogram over equal-width bins.

    Parameters
    ----------
    elements : iterable
        The elements, consumed once. With no *key* they must be numbers
        themselves.
    key : callable, optional
        Extracts the numeric value of an element.
    bin_count : int, optional
        Initial number of bins. Defaults to Sturges' rule.
    min, max : float, optional
        Explicit range. A single bound gets a unit-wide window, with
        neither the range of the data is used.
    separator : str
        Joins the lower and upper boundary in each bin label.
    """
    key = key or _identity
    return _create_number_engine(
        elements, key, bin_count, min, max,
        lambda b: number_label_function(b, separator))


def create_for_date(elements: Iterable[Any],
                    key: Callable[[Any], Any] | None = None,
                    pattern: str = DEFAULT_DATE_PATTERN,
                    bin_count: int | None = None,
                    min: Any | None = None,
                    max: Any | None = None,
                    separator: str = "\n") -> HistogramEngine:
    """Numeric histogram whose keys are dates.

    Keys may be ``datetime`` objects (naive ones are taken as UTC) or
    milliseconds since the epoch. Labels are formatted with *pattern*.
    """
    millis = _to_millis(key or _identity)
    # Fail on a bad pattern before any binning is built
    compile_date_pattern(pattern)
    return _create_number_engine(
        elements, millis, bin_count, _bound_millis(min), _bound_millis(max),
        lambda b: date_label_function(b, pattern, separator))
