"""Column chart widget drawing a ColumnPlot with PyQtGraph.

The widget owns a ``ColumnPlot`` and redraws whenever the plot is invalidated.
Redraws are debounced through a single-shot timer, so a burst of configuration
changes results in one layout pass. Rectangles are tracked by column key:
existing items are moved in place, new columns get new items and columns that
disappeared are removed.

Coordinates are chart-local with the origin in the top-left corner.

Typical usage:

    chart = ColumnChartWidget(
        column_height=150,
        column_width=10,
        column_spacing=3,
        value_selector=float,
        divisor_operator=max_divisor,
    )
    chart.set_input_series(series)
    chart.set_layout(domain=[-10, 10])

Google-style docstrings + PEP8.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import pyqtgraph as pg
from PySide6 import QtCore
from PySide6.QtCore import Signal
from PySide6.QtWidgets import QGraphicsRectItem, QVBoxLayout, QWidget

from .column_plot import ColumnPlot, SeriesSource
from .models import ColumnKey, ColumnRect

logger = logging.getLogger(__name__)


class ColumnChartWidget(QWidget):
    """Widget rendering the columns of a ``ColumnPlot``.

    Attributes:
        redrawn: Signal emitted after a redraw with the number of columns drawn.
    """

    redrawn = Signal(int)

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        *,
        plot: Optional[ColumnPlot] = None,
        color: str = "#1f77b4",
        negative_color: str = "#d62728",
        debounce_ms: int = 0,
        **plot_options: Any,
    ) -> None:
        """Initialize the chart widget.

        Args:
            parent: Parent widget.
            plot: Existing plot to draw. If omitted, one is created from ``plot_options``.
            color: Fill color of positive columns.
            negative_color: Fill color of negative columns.
            debounce_ms: Delay between an invalidation and the redraw.
            **plot_options: Keyword arguments for ``ColumnPlot`` when ``plot`` is omitted.
        """
        super().__init__(parent)

        self._owns_plot = plot is None
        self._plot = plot if plot is not None else ColumnPlot(parent=self, **plot_options)

        # Drawn rectangles by column key
        self._items: Dict[ColumnKey, QGraphicsRectItem] = {}

        self._brush = pg.mkBrush(color)
        self._negative_brush = pg.mkBrush(negative_color)
        self._pen = pg.mkPen(None)

        # Debounce timer for redraws
        self._redraw_timer = QtCore.QTimer(self)
        self._redraw_timer.setSingleShot(True)
        self._redraw_timer.timeout.connect(self.redraw)
        self._debounce_ms = max(0, int(debounce_ms))

        self._disposed = False

        self._build_ui()

        self._plot.invalidated.connect(self._schedule_redraw)
        self.redraw()

    def _build_ui(self) -> None:
        """Build the user interface."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground("w")
        layout.addWidget(self.plot_widget)

        self.plot_item = self.plot_widget.getPlotItem()

        # Chart-local coordinates: y grows downwards from the top edge
        self.plot_item.invertY(True)
        self.plot_item.hideAxis("bottom")
        self.plot_item.hideAxis("left")
        self.plot_item.hideButtons()
        self.plot_widget.setMouseEnabled(x=False, y=False)

    @property
    def plot(self) -> ColumnPlot:
        return self._plot

    def set_input_series(self, input_series: SeriesSource) -> None:
        """Replace the input series of the plot."""
        self._plot.set_input_series(input_series)

    def set_layout(self, **changes: Any) -> None:
        """Change the layout configuration (``column_height``, ``domain``, ...)."""
        self._plot.update_config(**changes)

    def set_debounce_ms(self, ms: int) -> None:
        """Set the delay between an invalidation and the redraw."""
        self._debounce_ms = max(0, int(ms))

    def drawn_keys(self) -> List[ColumnKey]:
        """Keys of the rectangles currently drawn."""
        return list(self._items)

    def item_for_key(self, key: ColumnKey) -> Optional[QGraphicsRectItem]:
        return self._items.get(key)

    def _schedule_redraw(self) -> None:
        if self._disposed:
            return
        if not self._redraw_timer.isActive():
            self._redraw_timer.start(self._debounce_ms)

    def redraw(self) -> None:
        """Lay out the plot and update the drawn rectangles now."""
        self._redraw_timer.stop()
        if self._disposed:
            return

        rects = self._plot.render_plot()
        self._apply_rects(rects)

        config = self._plot.config
        width = len(rects) * config.pitch
        height = config.column_height
        self.plot_item.setRange(
            xRange=(0.0, max(width, 1.0)),
            yRange=(0.0, max(height, 1.0)),
            padding=0.02,
        )

        logger.debug("ColumnChartWidget %x redrawn with %d columns", id(self), len(rects))
        self.redrawn.emit(len(rects))

    def _apply_rects(self, rects: List[ColumnRect]) -> None:
        seen = set()
        for rect in rects:
            item = self._items.get(rect.key)
            if item is None:
                item = QGraphicsRectItem()
                item.setPen(self._pen)
                self.plot_item.addItem(item)
                self._items[rect.key] = item
            item.setRect(rect.x, rect.y, rect.width, rect.height)
            item.setBrush(self._negative_brush if rect.is_negative else self._brush)
            seen.add(rect.key)

        for key in [k for k in self._items if k not in seen]:
            self.plot_item.removeItem(self._items.pop(key))

    def clear(self) -> None:
        """Remove all drawn rectangles."""
        for item in self._items.values():
            self.plot_item.removeItem(item)
        self._items = {}

    def dispose(self) -> None:
        """Stop redrawing and release the plot's subscription. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._redraw_timer.stop()
        self._plot.invalidated.disconnect(self._schedule_redraw)
        if self._owns_plot:
            self._plot.dispose()
        self.clear()

    def closeEvent(self, event) -> None:
        self.dispose()
        super().closeEvent(event)
