"""Replaceable input series delivering snapshots of records over Qt signals.

An ``InputSeries`` retains the latest snapshot of input records and emits
``seriesChanged`` with a full replacement snapshot whenever it is updated.
Consumers attach through ``subscribe()``, which returns a ``Subscription``
handle used to detach again.

Typical usage:

    series = InputSeries.from_inputs([-5, 5, 10])
    sub = series.subscribe(lambda inputs: print(len(inputs)))
    series.set_inputs([1, 2, 3])
    sub.unsubscribe()
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Set, TypeVar

from PySide6 import QtCore

T = TypeVar("T")
SeriesCallback = Callable[[List[Any]], None]

logger = logging.getLogger(__name__)


class Subscription:
    """Handle for a callback connected to an ``InputSeries``."""

    def __init__(self, series: "InputSeries", callback: SeriesCallback) -> None:
        self._series = series
        self._callback = callback
        self._closed = False
        self._slot = self._deliver
        series.seriesChanged.connect(self._slot)

    @property
    def closed(self) -> bool:
        return self._closed

    def _deliver(self, inputs: List[Any]) -> None:
        # A queued emission may still arrive after unsubscribe()
        if self._closed:
            return
        self._callback(inputs)

    def unsubscribe(self) -> None:
        """Disconnect the callback. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        series = self._series
        self._series = None
        series.seriesChanged.disconnect(self._slot)
        series._discard(self)


class InputSeries(QtCore.QObject):
    """Holds the current snapshot of input records and notifies subscribers.

    Signals:
        seriesChanged(object): Emitted with the new list of inputs every time
            the snapshot is replaced.
    """

    seriesChanged = QtCore.Signal(object)

    def __init__(
        self,
        inputs: Optional[Iterable[T]] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._inputs: List[T] = list(inputs) if inputs is not None else []
        self._subscriptions: Set[Subscription] = set()

    @classmethod
    def from_inputs(cls, inputs: Iterable[T]) -> "InputSeries":
        """Create a series whose initial snapshot is ``inputs``."""
        return cls(inputs)

    def inputs(self) -> List[T]:
        """Return a copy of the current snapshot."""
        return list(self._inputs)

    def set_inputs(self, inputs: Iterable[T]) -> None:
        """Replace the snapshot and notify subscribers."""
        self._inputs = list(inputs)
        self.seriesChanged.emit(list(self._inputs))

    def subscribe(self, callback: SeriesCallback, *, replay: bool = True) -> Subscription:
        """Connect ``callback`` to snapshot updates.

        Args:
            callback: Called with the list of inputs on every update.
            replay: If True, deliver the current snapshot immediately.

        Returns:
            Subscription handle; call ``unsubscribe()`` to detach.
        """
        subscription = Subscription(self, callback)
        self._subscriptions.add(subscription)
        logger.debug("InputSeries %x: %d subscriber(s)", id(self), len(self._subscriptions))

        if replay:
            callback(list(self._inputs))

        return subscription

    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _discard(self, subscription: Subscription) -> None:
        self._subscriptions.discard(subscription)
