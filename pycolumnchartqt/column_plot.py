"""Column plot bound to a live input series.

``ColumnPlot`` owns the layout configuration of a chart, keeps exactly one
subscription to its input series and retains the most recent column set. Every
update of the series or the configuration invalidates the plot; the host
redraws by calling ``plot()`` / ``render_plot()`` on its next cycle.

Invalidation is coalesced: ``invalidated`` is emitted once when the plot goes
from valid to invalid and not again until the host has plotted.

Typical usage:

    plot = ColumnPlot(
        [-5, 5, 10],
        column_height=150,
        column_width=10,
        column_spacing=3,
        value_selector=float,
        divisor_operator=max_divisor,
    )
    plot.invalidated.connect(schedule_redraw)

    rects = plot.render_plot()
    plot.domain = [-10, 10]   # invalidates

Google-style docstrings + PEP8.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Union

from PySide6 import QtCore

from .columnar import (
    DivisorOperator,
    ValueSelector,
    constant_divisor,
    subscribe_columns,
    zero_value,
)
from .layout import plot_columns
from .models import Column, ColumnPoint, ColumnRect
from .plot_models import LayoutConfig
from .render import KeyFn, column_key, render_plot
from .series import InputSeries, Subscription
from .utils import Domain, DomainOption, is_valid_domain, normalize_domain

logger = logging.getLogger(__name__)

SeriesSource = Union[InputSeries, Iterable[Any]]


class ColumnPlot(QtCore.QObject):
    """Lays out columns for the latest snapshot of an input series.

    Signals:
        invalidated: Emitted when the plot needs to be redrawn.
        inputSeriesChanged(object): Emitted with the new ``InputSeries`` after
            the series has been replaced.
        columnsChanged(object): Emitted with the new list of columns.
    """

    invalidated = QtCore.Signal()
    inputSeriesChanged = QtCore.Signal(object)
    columnsChanged = QtCore.Signal(object)

    def __init__(
        self,
        input_series: Optional[SeriesSource] = None,
        *,
        column_height: float = 0.0,
        column_spacing: float = 0.0,
        column_width: float = 0.0,
        domain: DomainOption = 0,
        value_selector: Optional[ValueSelector] = None,
        divisor_operator: Optional[DivisorOperator] = None,
        key_fn: Optional[KeyFn] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        """Initialize the plot.

        Args:
            input_series: ``InputSeries`` to subscribe to, or a static sequence of inputs.
            column_height: Maximum height of the columns.
            column_spacing: Space between each column.
            column_width: Width of each column.
            domain: Range of values plotted with the full column height.
            value_selector: Selects the value from an input. Values default to 0.
            divisor_operator: Computes the divisor for relative values. Defaults to 1.
            key_fn: Maps an input to its render identity key.
            parent: Parent object.
        """
        super().__init__(parent)

        self._config = LayoutConfig.from_options(
            column_height=column_height,
            column_spacing=column_spacing,
            column_width=column_width,
            domain=domain,
        )
        self._warn_if_invalid_domain(self._config.domain)
        self._value_selector: ValueSelector = value_selector or zero_value
        self._divisor_operator: DivisorOperator = divisor_operator or constant_divisor(1.0)
        self._key_fn: KeyFn = key_fn or column_key

        self._columns: List[Column[Any]] = []
        self._input_series: Optional[InputSeries] = None
        # True when the series was built here from a static sequence
        self._owns_series = False
        self._subscription: Optional[Subscription] = None

        # Nothing to draw yet, so the (empty) plot starts out valid
        self._valid = True
        self._disposed = False

        if input_series is not None:
            self.set_input_series(input_series)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> LayoutConfig:
        return self._config

    @config.setter
    def config(self, config: LayoutConfig) -> None:
        if self._check_disposed("config"):
            return
        self._warn_if_invalid_domain(config.domain)
        self._config = config
        self.invalidate()

    @property
    def column_height(self) -> float:
        """Maximum height of each column."""
        return self._config.column_height

    @column_height.setter
    def column_height(self, column_height: float) -> None:
        self.update_config(column_height=column_height)

    @property
    def column_spacing(self) -> float:
        """Space between each column."""
        return self._config.column_spacing

    @column_spacing.setter
    def column_spacing(self, column_spacing: float) -> None:
        self.update_config(column_spacing=column_spacing)

    @property
    def column_width(self) -> float:
        """Width of each column."""
        return self._config.column_width

    @column_width.setter
    def column_width(self, column_width: float) -> None:
        self.update_config(column_width=column_width)

    @property
    def domain(self) -> Domain:
        """Normalized ``(min, max)`` domain."""
        return self._config.domain

    @domain.setter
    def domain(self, domain: DomainOption) -> None:
        self.update_config(domain=domain)

    @staticmethod
    def _warn_if_invalid_domain(domain: Domain) -> None:
        if not is_valid_domain(domain):
            logger.warning(
                "Invalid column domain %r: expected min <= 0 <= max, columns will be auto-scaled",
                domain,
            )

    def update_config(self, **changes: Any) -> None:
        """Apply several configuration changes with a single invalidation.

        Args:
            **changes: Any of ``column_height``, ``column_spacing``,
                ``column_width`` and ``domain``.

        Raises:
            ValueError: If a size is negative or not finite.
            TypeError: If the domain is malformed or an unknown option is given.
        """
        if self._check_disposed("update_config"):
            return
        if "domain" in changes:
            changes["domain"] = normalize_domain(changes["domain"])
            self._warn_if_invalid_domain(changes["domain"])
        self._config = self._config.replace(**changes)
        self.invalidate()

    # ------------------------------------------------------------------
    # Input series
    # ------------------------------------------------------------------

    @property
    def input_series(self) -> Optional[InputSeries]:
        return self._input_series

    @input_series.setter
    def input_series(self, input_series: SeriesSource) -> None:
        self.set_input_series(input_series)

    def set_input_series(self, input_series: SeriesSource) -> None:
        """Replace the input series.

        The previous subscription is released before the new one is made, so
        emissions of the old series are never observed afterwards.

        Args:
            input_series: ``InputSeries`` or a static sequence of inputs.
        """
        if self._check_disposed("set_input_series"):
            return

        owned = not isinstance(input_series, InputSeries)
        if owned:
            input_series = InputSeries(input_series, parent=self)

        self._release_input_series()
        self._input_series = input_series
        self._owns_series = owned
        logger.debug("ColumnPlot %x: subscribing to series %x", id(self), id(input_series))
        self._subscription = subscribe_columns(
            input_series,
            self._on_columns,
            self._value_selector,
            self._divisor_operator,
        )
        self.inputSeriesChanged.emit(input_series)

    @property
    def has_subscription(self) -> bool:
        return self._subscription is not None and not self._subscription.closed

    def _release_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _release_input_series(self) -> None:
        """Unsubscribe, and hand an owned series back to Python for collection."""
        self._release_subscription()
        series = self._input_series
        self._input_series = None
        if series is not None and self._owns_series:
            series.setParent(None)
        self._owns_series = False

    def _on_columns(self, columns: List[Column[Any]]) -> None:
        if self._disposed:
            return
        self._columns = columns
        self.columnsChanged.emit(list(columns))
        self.invalidate()

    def columns(self) -> List[Column[Any]]:
        """Return the columns of the latest snapshot."""
        return list(self._columns)

    # ------------------------------------------------------------------
    # Plotting
    # ------------------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        return self._valid

    def invalidate(self) -> None:
        """Mark the plot as needing a redraw."""
        if self._disposed or not self._valid:
            return
        self._valid = False
        self.invalidated.emit()

    def plot(self) -> List[ColumnPoint]:
        """Plot a point for each column of the latest snapshot."""
        if self._disposed:
            return []
        points = plot_columns(self._columns, self._config)
        self._valid = True
        return points

    def render_plot(self, points: Optional[List[ColumnPoint]] = None) -> List[ColumnRect]:
        """Create drawable rectangles, plotting first if ``points`` is not given."""
        if points is None:
            points = self.plot()
        return render_plot(points, self._key_fn)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Release the subscription and discard retained state. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._release_input_series()
        self._columns = []
        logger.debug("ColumnPlot %x disposed", id(self))

    def _check_disposed(self, operation: str) -> bool:
        if self._disposed:
            logger.debug("ColumnPlot %x: ignoring %s after dispose", id(self), operation)
            return True
        return False
