"""Data models for column plot configuration.

Provides frozen dataclasses for configuring column layout. Similar pattern to
models.py for consistency.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any

from .utils import Domain, DomainOption, normalize_domain


@dataclass(frozen=True)
class LayoutConfig:
    """Layout configuration for a column plot.

    Attributes:
        column_height: Height available to the columns. The distance from the
            bottom of the most negative column to the top of the most positive
            column equals this height when no domain is set.
        column_spacing: Space between each column.
        column_width: Width of each column.
        domain: Range of values plotted with the full ``column_height``. Values
            exceeding it are still plotted proportionally. ``(0, 0)`` means
            there is no domain and columns are scaled to the data.
    """

    column_height: float = 0.0
    column_spacing: float = 0.0
    column_width: float = 0.0
    domain: Domain = (0.0, 0.0)

    def __post_init__(self) -> None:
        for name in ("column_height", "column_spacing", "column_width"):
            value = getattr(self, name)
            try:
                v = float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"{name} must be a number, got {value!r}") from e
            if not math.isfinite(v) or v < 0:
                raise ValueError(f"{name} must be a finite, non-negative number, got {value!r}")
            object.__setattr__(self, name, v)

        object.__setattr__(self, "domain", normalize_domain(self.domain))

    @classmethod
    def from_options(
        cls,
        column_height: float = 0.0,
        column_spacing: float = 0.0,
        column_width: float = 0.0,
        domain: DomainOption = 0,
    ) -> "LayoutConfig":
        """Build a config from user options, normalizing the domain option."""
        return cls(
            column_height=column_height,
            column_spacing=column_spacing,
            column_width=column_width,
            domain=normalize_domain(domain),
        )

    def replace(self, **changes: Any) -> "LayoutConfig":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)

    @property
    def pitch(self) -> float:
        """Horizontal distance between the left edges of adjacent columns."""
        return self.column_width + self.column_spacing
