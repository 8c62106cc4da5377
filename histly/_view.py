"""HistogramView — stacked bars for an engine, a bin spinner and click hit-testing.

The lower (green) series of each bar counts the highlighted elements, the
upper (blue) series the remaining ones. Clicks on the figure canvas are
mapped to a bin and forwarded to ``HistogramEngine.fire_click``. The widget
also carries a bin picker, since a PNG shown in a notebook takes no clicks.
"""
from __future__ import annotations

import math
from typing import Any

import ipywidgets as widgets
import numpy as np
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from ._engine import HistogramEngine
from ._errors import InvalidArgumentError
from ._renderer import CanvasManager
from ._types import HistogramStyle

_DW = "48px"
_SN = {"description_width": _DW}

_MARGIN = 0.01  # axis padding, in bins


class HistogramView:
    """Draws a HistogramEngine and reports clicked bars back to it."""

    def __init__(self, engine: HistogramEngine, fig: Figure | None = None,
                 canvas: Any = None, style: HistogramStyle | None = None):
        self._engine = engine
        self._style = style or HistogramStyle()
        if fig is None:
            fig = Figure(figsize=self._style.figsize)
        self._fig = fig
        self._ax = fig.axes[0] if fig.axes else fig.add_subplot(111)
        self._highlighted_bars = None
        self._remainder_bars = None
        self._spinner: widgets.BoundedIntText | None = None
        self._bin_dd: widgets.Dropdown | None = None
        self._highlighted_cb: widgets.Checkbox | None = None
        self._updating = False
        self._widget: widgets.Widget | None = None

        self.draw()
        self._canvas = canvas if canvas is not None else CanvasManager(fig)
        self._cid = fig.canvas.mpl_connect(
            "button_press_event", self._on_press)
        engine.add_change_listener(self._on_engine_change)

    @property
    def engine(self) -> HistogramEngine:
        return self._engine

    @property
    def figure(self) -> Figure:
        return self._fig

    @property
    def axes(self):
        return self._ax

    @property
    def widget(self) -> widgets.Widget:
        if self._widget is None:
            self._widget = self.build()
        return self._widget

    # -- drawing -------------------------------------------------------------

    def draw(self) -> None:
        """Recreate both bar series from the engine's current snapshot."""
        ax = self._ax
        s = self._style
        snap = self._engine.snapshot
        x = np.arange(snap.bin_count)

        ax.clear()
        self._highlighted_bars = ax.bar(
            x, snap.highlighted_counts, width=s.bar_width,
            color=s.highlighted_color, edgecolor=s.edge_color,
            label="highlighted")
        self._remainder_bars = ax.bar(
            x, snap.remainder_counts, width=s.bar_width,
            bottom=snap.highlighted_counts,
            color=s.remainder_color, edgecolor=s.edge_color,
            label="elements")

        ax.set_xticks(x)
        ax.set_xticklabels(self._engine.bin_labels(),
                           fontsize=s.tick_fontsize)
        ax.tick_params(axis="y", labelsize=s.tick_fontsize)
        ax.yaxis.set_major_locator(MaxNLocator(integer=True))
        ax.set_xlim(-0.5 - _MARGIN, snap.bin_count - 0.5 + _MARGIN)
        ax.set_facecolor("white")
        ax.grid(axis="y", color=s.grid_color)
        ax.set_axisbelow(True)

    def _on_engine_change(self) -> None:
        self.draw()
        if self._spinner is not None \
                and self._spinner.value != self._engine.bin_count:
            self._updating = True
            try:
                self._spinner.value = self._engine.bin_count
            finally:
                self._updating = False
        if self._bin_dd is not None:
            self._bin_dd.options = self._bin_options()
        self._canvas.redraw()

    # -- controls ------------------------------------------------------------

    def build(self) -> widgets.Widget:
        """Spinner row (numeric histograms only), canvas, bin picker row."""
        children = []
        if self._engine.is_resizable:
            spinner = widgets.BoundedIntText(
                value=self._engine.bin_count, min=1,
                max=self._style.max_bin_count, step=1,
                description="Bins:", style=_SN,
                layout=widgets.Layout(width="160px"))
            spinner.observe(self._on_spinner, names="value")
            self._spinner = spinner
            children.append(widgets.HBox(
                [spinner], layout=widgets.Layout(justify_content="center")))
        children.append(self._canvas.widget)
        children.append(self._build_picker())
        return widgets.VBox(children)

    def _bin_options(self) -> list[tuple[str, int]]:
        return [(label.replace("\n", " - "), i)
                for i, label in enumerate(self._engine.bin_labels())]

    def _build_picker(self) -> widgets.Widget:
        bin_dd = widgets.Dropdown(
            options=self._bin_options(), value=0, description="Bin:",
            style=_SN, layout=widgets.Layout(width="260px"))
        highlighted_cb = widgets.Checkbox(
            value=False, description="Highlighted", indent=False,
            layout=widgets.Layout(width="110px"))
        select_btn = widgets.Button(
            description="Select", button_style="info",
            layout=widgets.Layout(width="80px"))

        def _on_select(btn):
            self._engine.fire_click(bin_dd.value, highlighted_cb.value,
                                    trigger=btn)

        select_btn.on_click(_on_select)
        self._bin_dd = bin_dd
        self._highlighted_cb = highlighted_cb
        return widgets.HBox(
            [bin_dd, highlighted_cb, select_btn],
            layout=widgets.Layout(justify_content="center"))

    def _on_spinner(self, change) -> None:
        if self._updating:
            return
        try:
            self._engine.set_bin_count(int(change["new"]))
        except InvalidArgumentError:
            self._updating = True
            try:
                self._spinner.value = self._engine.bin_count
            finally:
                self._updating = False

    # -- clicks --------------------------------------------------------------

    def bin_at(self, x: float | None) -> int | None:
        """Bin whose bar covers data coordinate *x*, or None."""
        if x is None or not math.isfinite(x):
            return None
        b = math.floor(x + 0.5)
        if not 0 <= b < self._engine.bin_count:
            return None
        if abs(x - b) > self._style.bar_width / 2:
            return None
        return b

    def handle_click(self, x: float | None, y: float | None,
                     trigger: Any = None) -> bool:
        """Forward a click at data coordinates to the engine.

        Returns True when the click hit a bar.
        """
        b = self.bin_at(x)
        if b is None or y is None:
            return False
        snap = self._engine.snapshot
        total = int(snap.counts[b])
        highlighted = int(snap.highlighted_counts[b])
        if total == 0 or not 0 <= y <= total:
            return False
        self._engine.fire_click(b, highlighted > 0 and y <= highlighted,
                                trigger)
        return True

    def _on_press(self, event) -> None:
        if event.inaxes is not self._ax:
            return
        self.handle_click(event.xdata, event.ydata, trigger=event)

    def close(self) -> None:
        """Disconnect from the canvas and the engine."""
        self._fig.canvas.mpl_disconnect(self._cid)
        self._engine.remove_change_listener(self._on_engine_change)


def show(engine: HistogramEngine, **kwargs) -> None:
    """Display an interactive view of *engine* in the current notebook."""
    from IPython.display import display
    view = HistogramView(engine, **kwargs)
    display(view.widget)
    return None  # suppress Jupyter auto-display of return value
