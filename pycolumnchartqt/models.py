from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Hashable, TypeVar

from .utils import Domain, DomainOption

T = TypeVar("T")
D = TypeVar("D")

# Identity of a rendered column; the input record itself, or a fallback for unhashable records
ColumnKey = Hashable

__all__ = [
    "Column",
    "ColumnKey",
    "ColumnPoint",
    "ColumnRect",
    "Domain",
    "DomainOption",
    "Point",
]


@dataclass(frozen=True)
class Column(Generic[T]):
    """One plotted datum.

    Attributes:
        input: The original input record.
        value: Value selected from the input.
        relative_value: ``value`` divided by the series divisor. Only used for
            automatic scaling.
    """

    input: T
    value: float
    relative_value: float


@dataclass(frozen=True)
class Point(Generic[D]):
    """Describes a plot point.

    The rendered shape may occupy only a subset of the area described by the
    point positions; the area includes any spacing up to the next point.

    All coordinates assume (0, 0) is the top-left corner.
    """

    datum: D
    is_negative: bool
    x1: float
    x2: float
    y1: float
    y2: float


@dataclass(frozen=True)
class ColumnPoint(Point[Column[T]]):
    """Geometry of a single column, as produced by the layout engine."""

    display_height: float = 0.0
    display_width: float = 0.0
    offset_left: float = 0.0


@dataclass(frozen=True)
class ColumnRect:
    """Drawable rectangle for one column, in chart-local pixels."""

    key: ColumnKey
    x: float
    y: float
    width: float
    height: float
    is_negative: bool = False

    def to_js(self) -> Dict[str, Any]:
        return {
            "key": str(self.key),
            "x": float(self.x),
            "y": float(self.y),
            "width": float(self.width),
            "height": float(self.height),
            "is_negative": bool(self.is_negative),
        }
