"""Column layout: turns columns into proportionally scaled rectangles.

The layout is a pure function of a column set and a ``LayoutConfig``. It
ensures that, when rendered, the distance from the bottom of the most negative
column (or the baseline if there are no negative columns) to the top of the
most positive column (or the baseline if there are no positive columns) equals
``column_height``. A domain recalibrates that span so that only a value equal
to the domain bound reaches the full height.

Typical usage:

    columns = reduce_columns([-5, 5, 10], value_selector=float)
    points = plot_columns(columns, LayoutConfig(column_height=150, column_width=10))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .models import Column, ColumnPoint
from .plot_models import LayoutConfig
from .utils import is_valid_domain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnScale:
    """Scan results and correction factors for one layout pass.

    Attributes:
        most_negative_value: Smallest value, or 0 if there are no negative values.
        most_positive_value: Largest value, or 0 if there are no positive values.
        most_negative_relative_value: Smallest relative value, at most 0.
        most_positive_relative_value: Largest relative value, at least 0.
        auto_correction: Factor fitting the relative spread into one column height.
        domain_correction: Factor calibrating the data against the domain.
        total_correction: ``auto_correction * domain_correction``, or 0 when degenerate.
        positive_height: Distance of the zero baseline from the top of the chart.
        collapse_positive: Positive columns are drawn with zero height.
        collapse_negative: Negative columns are drawn with zero height.
        degenerate: A correction factor was not finite; all columns have zero height.
    """

    most_negative_value: float = 0.0
    most_positive_value: float = 0.0
    most_negative_relative_value: float = 0.0
    most_positive_relative_value: float = 0.0
    auto_correction: float = 1.0
    domain_correction: float = 1.0
    total_correction: float = 1.0
    positive_height: float = 0.0
    collapse_positive: bool = False
    collapse_negative: bool = False
    degenerate: bool = False

    @property
    def has_negative(self) -> bool:
        return self.most_negative_value < 0


def _as_arrays(columns: Sequence[Column]) -> Tuple[np.ndarray, np.ndarray]:
    """Extract values and relative values, with non-finite entries replaced by 0."""
    n = len(columns)
    values = np.fromiter((c.value for c in columns), dtype=np.float64, count=n)
    relative = np.fromiter((c.relative_value for c in columns), dtype=np.float64, count=n)
    values[~np.isfinite(values)] = 0.0
    relative[~np.isfinite(relative)] = 0.0
    return values, relative


def _domain_correction(
    domain: Tuple[float, float],
    most_negative_value: float,
    most_positive_value: float,
) -> Tuple[float, bool, bool]:
    """Return ``(correction, collapse_positive, collapse_negative)`` for a domain."""
    lo, hi = domain

    if lo == 0 and hi == 0:
        return 1.0, False, False

    if not is_valid_domain(domain):
        # Bounds on the wrong side of zero have no defined calibration; scale to the data.
        logger.debug("Ignoring invalid column domain %r: expected min <= 0 <= max", domain)
        return 1.0, False, False

    with np.errstate(divide="ignore", invalid="ignore"):
        if hi == 0:
            return float(np.float64(most_negative_value) / lo), True, False
        if lo == 0:
            return float(np.float64(most_positive_value) / hi), False, True
        span = np.float64(hi) - lo
        return float((np.float64(most_positive_value) - most_negative_value) / span), False, False


def column_scale(columns: Sequence[Column], config: LayoutConfig) -> ColumnScale:
    """Compute the correction factors and baseline for ``columns``."""
    if not columns:
        return ColumnScale()

    values, relative = _as_arrays(columns)

    most_negative_value = min(0.0, float(values.min()))
    most_positive_value = max(0.0, float(values.max()))
    most_negative_relative = min(0.0, float(relative.min()))
    most_positive_relative = max(0.0, float(relative.max()))

    domain_correction, collapse_positive, collapse_negative = _domain_correction(
        config.domain, most_negative_value, most_positive_value
    )

    # Only the sides that are drawn share the column height.
    spread = (0.0 if collapse_positive else most_positive_relative) - (
        0.0 if collapse_negative else most_negative_relative
    )
    with np.errstate(divide="ignore", invalid="ignore"):
        auto_correction = float(np.float64(1.0) / spread)
        total_correction = float(np.float64(auto_correction) * domain_correction)

    degenerate = not np.isfinite(total_correction)
    if degenerate:
        logger.debug(
            "Degenerate column scale (spread=%r, domain=%r); drawing zero-height columns",
            spread,
            config.domain,
        )
        total_correction = 0.0

    has_negative = most_negative_value < 0 and not collapse_negative
    if most_positive_value == 0 or collapse_positive:
        positive_height = 0.0
    elif not has_negative:
        positive_height = config.column_height
    else:
        positive_height = most_positive_relative * total_correction * config.column_height

    return ColumnScale(
        most_negative_value=most_negative_value,
        most_positive_value=most_positive_value,
        most_negative_relative_value=most_negative_relative,
        most_positive_relative_value=most_positive_relative,
        auto_correction=auto_correction,
        domain_correction=domain_correction,
        total_correction=total_correction,
        positive_height=float(positive_height),
        collapse_positive=collapse_positive,
        collapse_negative=collapse_negative,
        degenerate=degenerate,
    )


def plot_columns(columns: Sequence[Column], config: LayoutConfig) -> List[ColumnPoint]:
    """Plot a point for each column.

    Args:
        columns: Columns in display order.
        config: Layout configuration.

    Returns:
        One ``ColumnPoint`` per column, in the same order. Every coordinate is finite.
    """
    if not columns:
        return []

    scale = column_scale(columns, config)
    _, relative = _as_arrays(columns)

    signed = relative * scale.total_correction * config.column_height
    if scale.collapse_positive:
        signed = np.minimum(signed, 0.0)
    if scale.collapse_negative:
        signed = np.maximum(signed, 0.0)

    pitch = config.pitch
    baseline = scale.positive_height
    offset_left = config.column_spacing / 2

    points: List[ColumnPoint] = []
    for index, (column, height) in enumerate(zip(columns, signed.tolist())):
        is_negative = bool(column.relative_value < 0)
        x1 = index * pitch
        if is_negative:
            y1, y2 = baseline, baseline - height
        else:
            y1, y2 = baseline - height, baseline
        points.append(
            ColumnPoint(
                datum=column,
                is_negative=is_negative,
                x1=float(x1),
                x2=float(x1 + pitch),
                y1=float(y1),
                y2=float(y2),
                display_height=abs(height),
                display_width=config.column_width,
                offset_left=offset_left,
            )
        )

    logger.debug("Plotted %d columns (baseline=%.3f)", len(points), baseline)
    return points
