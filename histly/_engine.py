"""HistogramEngine — holds elements, binning and labels; resolves clicks."""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from ._binning import Binning
from ._errors import InvalidArgumentError, NotResizableError
from ._labels import LabelFunction
from ._types import BinSnapshot, HistogramClickEvent, Subset

logger = logging.getLogger(__name__)

ClickListener = Callable[[HistogramClickEvent], Any]
ChangeListener = Callable[[], Any]


class HistogramEngine:
    """Bin counts for a set of elements and a highlighted subset.

    Every mutation replaces state wholesale and recomputes the snapshot
    right away. Aggregation is best-effort: elements that fall into no bin
    are left out of the counts.

    Parameters
    ----------
    binning : Binning
        Initial binning.
    label_function : callable
        Maps a bin index to its label.
    binning_provider : callable, optional
        ``bin_count -> Binning``. Required for ``set_bin_count``.
    label_function_provider : callable, optional
        ``Binning -> label function``, applied to each provided binning.
    """

    def __init__(self, binning: Binning, label_function: LabelFunction,
                 binning_provider: Callable[[int], Binning] | None = None,
                 label_function_provider:
                 Callable[[Binning], LabelFunction] | None = None):
        if binning is None:
            raise InvalidArgumentError("The binning may not be None")
        if label_function is None:
            raise InvalidArgumentError("The label_function may not be None")
        self._binning = binning
        self._label_function = label_function
        self._binning_provider = binning_provider
        self._label_function_provider = label_function_provider
        self._elements: tuple = ()
        self._highlighted: tuple = ()
        self._listeners: list[ClickListener] = []
        self._change_listeners: list[ChangeListener] = []
        self._snapshot = self._compute_snapshot()

    # -- state ---------------------------------------------------------------

    @property
    def binning(self) -> Binning:
        return self._binning

    @property
    def bin_count(self) -> int:
        return self._binning.bin_count

    @property
    def is_resizable(self) -> bool:
        return self._binning_provider is not None

    @property
    def elements(self) -> tuple:
        return self._elements

    @property
    def highlighted_elements(self) -> tuple:
        return self._highlighted

    @property
    def snapshot(self) -> BinSnapshot:
        return self._snapshot

    def bin_label(self, bin: int) -> str:
        return self._label_function(bin)

    def bin_labels(self) -> list[str]:
        return [self._label_function(i) for i in range(self.bin_count)]

    # -- mutations -----------------------------------------------------------

    def set_elements(self, elements: Iterable[Any] | None,
                     highlighted_elements: Iterable[Any] | None = None
                     ) -> None:
        """Replace the elements and the highlighted subset."""
        self._elements = tuple(elements) if elements is not None else ()
        self._highlighted = (tuple(highlighted_elements)
                             if highlighted_elements is not None else ())
        self._update()

    def set_binning(self, binning: Binning,
                    label_function: LabelFunction) -> None:
        if binning is None:
            raise InvalidArgumentError("The binning may not be None")
        if label_function is None:
            raise InvalidArgumentError("The label_function may not be None")
        self._binning = binning
        self._label_function = label_function
        self._update()

    def set_bin_count(self, bin_count: int) -> None:
        """Re-bin with *bin_count* bins over the same range."""
        if bin_count < 1:
            raise InvalidArgumentError(
                f"The bin count must be positive, but is {bin_count}")
        if self._binning_provider is None:
            raise NotResizableError(
                f"The bin count of {self._binning!r} cannot be changed")
        binning = self._binning_provider(bin_count)
        if self._label_function_provider is not None:
            label_function = self._label_function_provider(binning)
        else:
            label_function = self._label_function
        logger.debug("Re-binning %d elements into %d bins",
                     len(self._elements), bin_count)
        self.set_binning(binning, label_function)

    def _compute_snapshot(self) -> BinSnapshot:
        counts = self._binning.compute(self._elements, True)
        highlighted = self._binning.compute(self._highlighted, True)
        # Read-only so callers cannot edit the engine's counts
        counts.flags.writeable = False
        highlighted.flags.writeable = False
        return BinSnapshot(counts=counts, highlighted_counts=highlighted)

    def _update(self) -> None:
        self._snapshot = self._compute_snapshot()
        for listener in list(self._change_listeners):
            try:
                listener()
            except Exception:
                logger.exception("Change listener %r failed", listener)

    def add_change_listener(self, listener: ChangeListener) -> None:
        """Call *listener* with no arguments after every state change."""
        self._change_listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        try:
            self._change_listeners.remove(listener)
        except ValueError:
            pass

    def validate(self) -> None:
        """Raise UnbinnedElementError if any element falls into no bin."""
        self._binning.compute(self._elements, False)

    # -- clicks --------------------------------------------------------------

    def resolve_click(self, bin: int,
                      subset: Subset | str = Subset.ALL) -> tuple:
        """Elements of *subset* that fall into *bin*, in their original order."""
        source = (self._highlighted
                  if Subset.coerce(subset) is Subset.HIGHLIGHTED
                  else self._elements)
        compute_bin = self._binning.compute_bin
        return tuple(e for e in source if compute_bin(e) == bin)

    elements_in_bin = resolve_click

    def add_click_listener(self, listener: ClickListener) -> None:
        self._listeners.append(listener)

    def remove_click_listener(self, listener: ClickListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def fire_click(self, bin: int, highlighted: bool,
                   trigger: Any = None) -> HistogramClickEvent | None:
        """Notify click listeners that *bin* was clicked.

        Returns the delivered event, or None when nobody is listening.
        """
        if not 0 <= bin < self.bin_count:
            raise InvalidArgumentError(
                f"bin {bin} out of range [0, {self.bin_count})")
        if not self._listeners:
            return None
        event = HistogramClickEvent(
            source=self,
            bin=bin,
            highlighted=highlighted,
            bin_elements=self.resolve_click(bin, Subset.ALL),
            highlighted_bin_elements=self.resolve_click(
                bin, Subset.HIGHLIGHTED),
            trigger=trigger)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Click listener %r failed", listener)
        return event
