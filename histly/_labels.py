"""Bin label functions for numeric, date and categorical binnings.

A label function maps a bin index to the text shown under its bar. The
numeric and date variants show the bin's lower and upper boundary joined
by *separator* (a newline by default, so the view draws two-line ticks).
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Sequence

from ._binning import NumberBinning
from ._errors import InvalidArgumentError

DEFAULT_DATE_PATTERN = "yyyy-MM-dd HH:mm:ss.SSS"

LabelFunction = Callable[[int], str]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _check_bin(bin: int, bin_count: int) -> None:
    if not 0 <= bin < bin_count:
        raise IndexError(f"bin {bin} out of range [0, {bin_count})")


# -- numeric -------------------------------------------------------------------

def format_spec_for(order: float) -> str:
    """Format spec with just enough decimals for values of magnitude *order*.

    ``format_spec_for(500)`` is ``".0f"``, ``format_spec_for(0.05)`` is
    ``".2f"``. Zero, tiny and non-finite orders get the generic ``"f"``.
    """
    if not math.isfinite(order) or order < 1e-100:
        return "f"
    if order >= 1.0:
        return ".0f"
    digits = int(abs(math.floor(math.log10(order))))
    return f".{digits}f"


def number_label_function(binning: NumberBinning,
                          separator: str = "\n") -> LabelFunction:
    """Labels like ``"0.25\\n0.50"`` with one precision for all bins."""
    n = binning.bin_count
    total = binning.bin_max(n - 1) - binning.bin_min(0)
    spec = format_spec_for(total)

    def label(bin: int) -> str:
        _check_bin(bin, n)
        lo = format(binning.bin_min(bin), spec)
        hi = format(binning.bin_max(bin), spec)
        return f"{lo}{separator}{hi}"
    return label


# -- dates ---------------------------------------------------------------------

_MONTHS = ("January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December")
_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
         "Saturday", "Sunday")

_TOKEN_RE = re.compile(r"'(?:[^']|'')*'|([A-Za-z])\1*|[^A-Za-z']+")


def _field(letter: str, width: int) -> Callable[[datetime], str]:
    if letter == "y":
        if width == 2:
            return lambda dt: f"{dt.year % 100:02d}"
        return lambda dt: f"{dt.year:0{width}d}"
    if letter == "M":
        if width >= 4:
            return lambda dt: _MONTHS[dt.month - 1]
        if width == 3:
            return lambda dt: _MONTHS[dt.month - 1][:3]
        return lambda dt: f"{dt.month:0{width}d}"
    if letter == "d":
        return lambda dt: f"{dt.day:0{width}d}"
    if letter == "H":
        return lambda dt: f"{dt.hour:0{width}d}"
    if letter == "h":
        return lambda dt: f"{(dt.hour % 12) or 12:0{width}d}"
    if letter == "m":
        return lambda dt: f"{dt.minute:0{width}d}"
    if letter == "s":
        return lambda dt: f"{dt.second:0{width}d}"
    if letter == "S":
        if width > 3:
            raise InvalidArgumentError(
                f"Fractions finer than milliseconds are not supported: "
                f"{'S' * width!r}")
        return lambda dt: f"{dt.microsecond // 1000:03d}"[:width]
    if letter == "a":
        return lambda dt: "AM" if dt.hour < 12 else "PM"
    if letter == "E":
        if width >= 4:
            return lambda dt: _DAYS[dt.weekday()]
        return lambda dt: _DAYS[dt.weekday()][:3]
    raise InvalidArgumentError(
        f"Unsupported date pattern letter {letter!r}")


def compile_date_pattern(pattern: str) -> Callable[[datetime], str]:
    """Turn a ``yyyy-MM-dd HH:mm:ss.SSS`` style pattern into a formatter.

    Letter runs are date fields, text in single quotes is literal and
    ``''`` is a quote character. Anything else is copied as-is.
    """
    parts: list[Callable[[datetime], str] | str] = []
    pos = 0
    while pos < len(pattern):
        m = _TOKEN_RE.match(pattern, pos)
        if m is None:
            raise InvalidArgumentError(
                f"Unterminated quote in date pattern {pattern!r}")
        token = m.group(0)
        if token.startswith("'"):
            parts.append(token[1:-1].replace("''", "'") or "'")
        elif m.group(1):
            parts.append(_field(m.group(1), len(token)))
        else:
            parts.append(token)
        pos = m.end()

    def fmt(dt: datetime) -> str:
        return "".join(p if isinstance(p, str) else p(dt) for p in parts)
    return fmt


def millis_to_datetime(value: float) -> datetime:
    """UTC datetime for *value* milliseconds since the epoch, truncated."""
    return _EPOCH + timedelta(milliseconds=int(value))


def date_label_function(binning: NumberBinning,
                        pattern: str = DEFAULT_DATE_PATTERN,
                        separator: str = "\n") -> LabelFunction:
    """Labels showing bin boundaries as UTC dates formatted with *pattern*."""
    fmt = compile_date_pattern(pattern)
    n = binning.bin_count

    def limit(value: float) -> str:
        try:
            return fmt(millis_to_datetime(value))
        except (OverflowError, ValueError):
            return f"{value:.0f}"

    def label(bin: int) -> str:
        _check_bin(bin, n)
        return f"{limit(binning.bin_min(bin))}{separator}" \
               f"{limit(binning.bin_max(bin))}"
    return label


# -- categories ----------------------------------------------------------------

def category_label_function(keys: Sequence) -> LabelFunction:
    labels = [str(k) for k in keys]

    def label(bin: int) -> str:
        _check_bin(bin, len(labels))
        return labels[bin]
    return label
