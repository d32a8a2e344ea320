from .models import (
    Column,
    ColumnKey,
    ColumnPoint,
    ColumnRect,
    Point,
)
from .plot_models import LayoutConfig
from .utils import Domain, DomainOption, normalize_domain, is_valid_domain

from .columnar import (
    constant_divisor,
    max_divisor,
    reduce_columns,
    subscribe_columns,
)
from .series import InputSeries, Subscription
from .layout import ColumnScale, column_scale, plot_columns
from .render import column_key, render_plot

from .column_plot import ColumnPlot
from .chart_widget import ColumnChartWidget

__all__ = [
    "Column",
    "ColumnKey",
    "ColumnPoint",
    "ColumnRect",
    "Point",
    "LayoutConfig",
    "Domain",
    "DomainOption",
    "normalize_domain",
    "is_valid_domain",
    # Column reduction
    "constant_divisor",
    "max_divisor",
    "reduce_columns",
    "subscribe_columns",
    # Input series
    "InputSeries",
    "Subscription",
    # Layout + rendering
    "ColumnScale",
    "column_scale",
    "plot_columns",
    "column_key",
    "render_plot",
    # Qt objects
    "ColumnPlot",
    "ColumnChartWidget",
]
