"""Canvas management — shows a histogram figure as a PNG in an Output widget."""
from __future__ import annotations

import io

import ipywidgets as widgets
from matplotlib.figure import Figure


class CanvasManager:
    """Displays a matplotlib Figure inside an ipywidgets.Output.

    Works with any backend, including Agg in a plain kernel, and avoids
    the ipympl canvas, which displays itself a second time. The image is
    static, so bar clicks in a notebook go through the view's bin picker.
    """

    def __init__(self, fig: Figure):
        self._fig = fig
        self._output = widgets.Output()
        self._render()

    @property
    def widget(self) -> widgets.Widget:
        return self._output

    def _png(self) -> bytes:
        buf = io.BytesIO()
        self._fig.savefig(buf, format="png", bbox_inches="tight",
                          facecolor=self._fig.get_facecolor(), dpi=100)
        return buf.getvalue()

    def _render(self) -> None:
        from IPython.display import Image, display as ipy_display
        data = self._png()
        self._output.clear_output(wait=True)
        with self._output:
            ipy_display(Image(data=data))

    def redraw(self) -> None:
        """Re-encode the figure and replace the displayed image."""
        self._render()
