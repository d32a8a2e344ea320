"""Reduce input records into columns.

Each record is mapped to a ``Column`` carrying the selected value and the value
divided by a divisor computed over the whole snapshot.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, TypeVar

from .models import Column
from .series import InputSeries, Subscription

T = TypeVar("T")

ValueSelector = Callable[[T], float]
DivisorOperator = Callable[[Sequence[T], ValueSelector], float]
ColumnsCallback = Callable[[List[Column[Any]]], None]


def zero_value(_input: Any) -> float:
    """Value selector used when none is provided."""
    return 0.0


def constant_divisor(divisor: float = 1.0) -> DivisorOperator:
    """Return a divisor operator that always yields ``divisor``."""
    value = float(divisor)

    def _operator(_inputs: Sequence[Any], _value_selector: ValueSelector) -> float:
        return value

    return _operator


def max_divisor(inputs: Sequence[T], value_selector: ValueSelector) -> float:
    """Divide by the largest selected magnitude.

    Relative values keep the sign of their value and lie within ``[-1, 1]``.
    An empty snapshot, or one where every value is zero, yields ``1``.
    """
    largest = max((abs(float(value_selector(i))) for i in inputs), default=0.0)
    return largest or 1.0


def _divide(value: float, divisor: float) -> float:
    if divisor == 0:
        if value == 0:
            return 0.0
        return float("inf") if value > 0 else float("-inf")
    return value / divisor


def reduce_columns(
    inputs: Sequence[T],
    value_selector: Optional[ValueSelector] = None,
    divisor_operator: Optional[DivisorOperator] = None,
) -> List[Column[T]]:
    """Map a snapshot of inputs to columns.

    Args:
        inputs: Snapshot of input records.
        value_selector: Selects the value of a record. Values default to ``0``.
        divisor_operator: Computes the divisor over the snapshot. Defaults to ``1``.

    Returns:
        One column per input, in input order.
    """
    selector = value_selector or zero_value
    operator = divisor_operator or constant_divisor(1.0)

    records = list(inputs)
    divisor = float(operator(records, selector))

    columns: List[Column[T]] = []
    for record in records:
        value = float(selector(record))
        columns.append(Column(input=record, value=value, relative_value=_divide(value, divisor)))
    return columns


def subscribe_columns(
    series: InputSeries,
    callback: ColumnsCallback,
    value_selector: Optional[ValueSelector] = None,
    divisor_operator: Optional[DivisorOperator] = None,
) -> Subscription:
    """Subscribe to ``series`` and deliver freshly reduced columns to ``callback``."""

    def _on_inputs(inputs: List[Any]) -> None:
        callback(reduce_columns(inputs, value_selector, divisor_operator))

    return series.subscribe(_on_inputs)
