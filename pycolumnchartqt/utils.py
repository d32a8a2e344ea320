from __future__ import annotations

from numbers import Real
from typing import Sequence, Tuple, Union

Domain = Tuple[float, float]
DomainOption = Union[float, Sequence[float]]


def normalize_domain(domain: DomainOption) -> Domain:
    """Normalize a domain option into a ``(min, max)`` pair.

    A single number ``n`` becomes ``(n, 0)`` when negative, ``(0, n)`` when
    positive and ``(0, 0)`` when zero. A pair is returned as a tuple with the
    same values.

    Raises:
        TypeError: If the option is neither a number nor a two-element sequence.
    """
    if isinstance(domain, Real):
        n = float(domain)
        return (n if n < 0 else 0.0, n if n > 0 else 0.0)

    try:
        lo, hi = domain
    except (TypeError, ValueError) as e:
        raise TypeError(
            f"Domain must be a number or a (min, max) pair, got {domain!r}"
        ) from e

    return (float(lo), float(hi))


def is_valid_domain(domain: Domain) -> bool:
    """A column domain must satisfy ``min <= 0 <= max``."""
    lo, hi = domain
    return lo <= 0 <= hi
