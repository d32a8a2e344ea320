"""Pytest configuration for running Qt objects headless.

Selects the ``offscreen`` Qt platform before PySide6 creates an application,
and provides a single ``QApplication`` shared by the whole test session.
"""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Session-wide QApplication."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def series_factory():
    """Create InputSeries objects from plain sequences."""
    from pycolumnchartqt.series import InputSeries

    def _make(inputs=()):
        return InputSeries.from_inputs(inputs)

    return _make
