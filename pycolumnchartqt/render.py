from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

from .models import ColumnKey, ColumnPoint, ColumnRect

KeyFn = Callable[[Any], ColumnKey]


def column_key(record: Any) -> ColumnKey:
    """Identity of a column, derived from its input record.

    Hashable records are their own key; other records are keyed by object
    identity, which is stable as long as the same record object is re-emitted.

    Records that compare equal share a key, e.g. ``1``, ``1.0`` and ``True``.
    ``render_plot`` keeps such columns apart by order of appearance, so they
    are matched by position rather than by record between two renders. Pass a
    custom key function where that matters.
    """
    if isinstance(record, Hashable):
        try:
            hash(record)
        except TypeError:
            # e.g. a tuple containing a list
            pass
        else:
            return record
    return ("id", id(record))


def _unique_key(key: ColumnKey, emitted: Set[ColumnKey], repeats: Dict[ColumnKey, int]) -> ColumnKey:
    """Return ``key``, or ``(key, n)`` with the smallest free ``n`` if it is taken."""
    if key not in emitted:
        return key
    n = repeats.get(key, 0)
    while True:
        n += 1
        candidate = (key, n)
        if candidate not in emitted:
            repeats[key] = n
            return candidate


def render_plot(points: Sequence[ColumnPoint], key_fn: Optional[KeyFn] = None) -> List[ColumnRect]:
    """Create a drawable rectangle for each column point.

    Keys are unique within the result: a key that was already emitted is
    replaced by ``(k, n)`` for the next unused ``n``, so equal records stay
    distinguishable.

    Args:
        points: Points produced by the layout engine.
        key_fn: Maps an input record to its identity key. Defaults to ``column_key``.

    Returns:
        One ``ColumnRect`` per point, in the same order.
    """
    key_fn = key_fn or column_key
    emitted: Set[ColumnKey] = set()
    repeats: Dict[ColumnKey, int] = {}
    rects: List[ColumnRect] = []

    for point in points:
        key = _unique_key(key_fn(point.datum.input), emitted, repeats)
        emitted.add(key)

        rects.append(
            ColumnRect(
                key=key,
                x=point.x1 + point.offset_left,
                y=point.y1,
                width=point.display_width,
                height=point.display_height,
                is_negative=point.is_negative,
            )
        )
    return rects
