"""Tests for ColumnPlot in column_plot.py.

Covers configuration defaults and invalidation, coalescing of invalidations,
input series replacement, lifecycle/disposal and the plot/render pipeline.
"""

import logging

import pytest

from pycolumnchartqt.column_plot import ColumnPlot
from pycolumnchartqt.columnar import max_divisor
from pycolumnchartqt.plot_models import LayoutConfig
from pycolumnchartqt.series import InputSeries


class Counter:
    """Counts signal emissions."""

    def __init__(self):
        self.count = 0
        self.args = []

    def hit(self, *args):
        self.count += 1
        self.args.append(args)


def make_plot(inputs=None, **options):
    options.setdefault("value_selector", float)
    return ColumnPlot(inputs, **options)


class TestConfiguration:
    """Configuration surface of ColumnPlot."""

    def test_defaults(self):
        plot = ColumnPlot()
        assert plot.column_height == 0.0
        assert plot.column_spacing == 0.0
        assert plot.column_width == 0.0
        assert plot.domain == (0.0, 0.0)
        assert plot.config == LayoutConfig()
        assert plot.plot() == []

    def test_options(self):
        plot = ColumnPlot(column_height=150, column_spacing=3, column_width=10, domain=-15)
        assert plot.column_height == 150.0
        assert plot.column_spacing == 3.0
        assert plot.column_width == 10.0
        assert plot.domain == (-15.0, 0.0)

    def test_domain_normalized_on_set(self):
        plot = ColumnPlot()
        plot.domain = 10
        assert plot.domain == (0.0, 10.0)
        plot.domain = [-3, 7]
        assert plot.domain == (-3.0, 7.0)

    def test_setters_invalidate(self):
        plot = make_plot([1, 2])
        plot.plot()
        counter = Counter()
        plot.invalidated.connect(counter.hit)
        changes = [
            ("column_height", 100),
            ("column_spacing", 2),
            ("column_width", 8),
            ("domain", 5),
        ]
        for expected, (name, value) in enumerate(changes, start=1):
            setattr(plot, name, value)
            assert counter.count == expected, name
            assert plot.is_valid is False
            plot.plot()
            assert plot.is_valid is True

    def test_invalid_sizes_rejected(self):
        plot = ColumnPlot()
        with pytest.raises(ValueError):
            plot.column_height = -5
        assert plot.column_height == 0.0

    def test_config_does_not_change_produced_points(self):
        plot = make_plot([5, 10], column_height=100)
        points = plot.plot()
        plot.column_height = 200
        assert points[1].display_height == pytest.approx(100.0)
        assert plot.plot()[1].display_height == pytest.approx(200.0)


class TestInvalidation:
    """Coalescing of invalidations."""

    def test_rapid_changes_coalesce(self):
        plot = make_plot([1, 2, 3])
        plot.plot()
        counter = Counter()
        plot.invalidated.connect(counter.hit)

        plot.column_height = 10
        plot.column_width = 5
        plot.domain = 3
        plot.update_config(column_spacing=1, column_height=20)
        assert counter.count == 1

        plot.plot()
        plot.column_height = 30
        assert counter.count == 2

    def test_update_config_applies_all_changes(self):
        plot = ColumnPlot()
        plot.update_config(column_height=20, column_width=4, domain=-8)
        assert plot.config == LayoutConfig(column_height=20, column_width=4, domain=(-8, 0))

    def test_series_emission_invalidates(self):
        series = InputSeries([1])
        plot = make_plot(series)
        plot.plot()
        counter = Counter()
        plot.invalidated.connect(counter.hit)
        series.set_inputs([1, 2])
        assert counter.count == 1
        assert [c.value for c in plot.columns()] == [1.0, 2.0]


class TestInputSeries:
    """Subscription management."""

    def test_static_inputs(self):
        plot = make_plot([-5, 5, 10], column_height=150)
        assert isinstance(plot.input_series, InputSeries)
        assert [c.value for c in plot.columns()] == [-5.0, 5.0, 10.0]
        assert plot.has_subscription is True

    def test_columns_changed_signal(self):
        series = InputSeries([1])
        plot = make_plot(series)
        counter = Counter()
        plot.columnsChanged.connect(counter.hit)
        series.set_inputs([2, 3])
        assert counter.count == 1
        assert [c.input for c in counter.args[0][0]] == [2, 3]

    def test_replacement_keeps_one_subscription(self):
        plot = make_plot()
        series = [InputSeries([i]) for i in range(5)]
        for s in series:
            plot.input_series = s
        assert plot.input_series is series[-1]
        assert [s.subscriber_count() for s in series] == [0, 0, 0, 0, 1]
        assert plot.has_subscription is True

    def test_old_series_is_not_observed(self):
        old = InputSeries([1])
        new = InputSeries([2])
        plot = make_plot(old)
        plot.set_input_series(new)
        old.set_inputs([100, 200])
        assert [c.input for c in plot.columns()] == [2]

    def test_replacement_invalidates_once(self):
        plot = make_plot(InputSeries([1]))
        plot.plot()
        counter = Counter()
        plot.invalidated.connect(counter.hit)
        plot.set_input_series(InputSeries([2, 3]))
        assert counter.count == 1

    def test_input_series_changed_signal(self):
        plot = make_plot()
        counter = Counter()
        plot.inputSeriesChanged.connect(counter.hit)
        series = InputSeries([1])
        plot.set_input_series(series)
        assert counter.args == [(series,)]

    def test_default_selector_and_divisor(self):
        """Missing selector and divisor operator degrade to 0 and 1."""
        plot = ColumnPlot(["a", "b"], column_height=10)
        assert [(c.value, c.relative_value) for c in plot.columns()] == [(0.0, 0.0), (0.0, 0.0)]
        assert [p.display_height for p in plot.plot()] == [0.0, 0.0]

    def test_divisor_operator(self):
        plot = make_plot([-5, 5, 10], divisor_operator=max_divisor)
        assert [c.relative_value for c in plot.columns()] == [-0.5, 0.5, 1.0]

    @staticmethod
    def owned_children(plot):
        return [c for c in plot.children() if isinstance(c, InputSeries)]

    def test_replacing_static_inputs_releases_previous_series(self):
        plot = make_plot([1])
        for i in range(50):
            plot.set_input_series([i])
        assert len(self.owned_children(plot)) == 1
        assert [c.input for c in plot.columns()] == [49]

    def test_external_series_is_not_reparented(self):
        series = InputSeries([1])
        plot = make_plot(series)
        plot.set_input_series([2])
        assert series.parent() is None
        assert series.subscriber_count() == 0

    def test_dispose_releases_owned_series(self):
        plot = make_plot([1, 2])
        plot.dispose()
        assert self.owned_children(plot) == []
        assert plot.input_series is None


class TestPlotting:
    """plot() and render_plot()."""

    def test_plot_matches_layout(self):
        plot = make_plot([-5, 5, 10], column_height=150, column_width=10, column_spacing=3)
        points = plot.plot()
        assert len(points) == 3
        assert points[2].display_height == pytest.approx(100.0)
        assert points[0].y2 == pytest.approx(150.0)

    def test_plot_is_repeatable(self):
        plot = make_plot([-5, 5, 10], column_height=150, domain=[-10, 10])
        assert plot.plot() == plot.plot()

    def test_render_plot(self):
        plot = make_plot([-5, 5, 10], column_height=200, column_width=10, domain=[-10, 10])
        rects = plot.render_plot()
        assert [r.key for r in rects] == [-5, 5, 10]
        assert rects[2].height == pytest.approx(100.0)

    def test_render_plot_with_key_fn(self):
        plot = ColumnPlot(
            [{"id": "a", "v": 1}],
            value_selector=lambda r: r["v"],
            key_fn=lambda r: r["id"],
            column_height=10,
        )
        assert [r.key for r in plot.render_plot()] == ["a"]

    def test_empty_series(self):
        plot = make_plot(InputSeries([]), column_height=100)
        assert plot.plot() == []
        assert plot.render_plot() == []


class TestDispose:
    """Lifecycle."""

    def test_dispose_releases_subscription(self):
        series = InputSeries([1, 2])
        plot = make_plot(series)
        plot.dispose()
        assert series.subscriber_count() == 0
        assert plot.is_disposed is True
        assert plot.has_subscription is False
        assert plot.input_series is None
        assert plot.columns() == []
        assert plot.plot() == []

    def test_dispose_is_idempotent(self):
        plot = make_plot([1])
        plot.dispose()
        plot.dispose()
        assert plot.is_disposed is True

    def test_no_invalidation_after_dispose(self):
        series = InputSeries([1])
        plot = make_plot(series)
        plot.plot()
        counter = Counter()
        plot.invalidated.connect(counter.hit)
        plot.dispose()
        series.set_inputs([5])
        plot.column_height = 10
        plot.set_input_series(InputSeries([1]))
        assert counter.count == 0
        assert plot.column_height == 0.0

    def test_dispose_during_emission(self):
        series = InputSeries([1])
        plot = make_plot(series)
        plot.columnsChanged.connect(lambda _columns: plot.dispose())
        series.set_inputs([2])
        assert plot.is_disposed is True
        assert series.subscriber_count() == 0
        series.set_inputs([3])
        assert plot.columns() == []


class TestInvalidDomainWarning:
    """An invalid domain is reported when set, not on every layout pass."""

    def test_warns_once_at_construction(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pycolumnchartqt"):
            plot = make_plot([5, 10], column_height=150, domain=[5, 20])
            plot.plot()
            plot.invalidate()
            plot.plot()
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "Invalid column domain" in warnings[0].getMessage()

    def test_warns_when_domain_is_changed(self, caplog):
        plot = make_plot([5, 10], column_height=150)
        with caplog.at_level(logging.WARNING, logger="pycolumnchartqt"):
            plot.domain = [-20, -5]
            plot.plot()
        assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1

    def test_valid_domain_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pycolumnchartqt"):
            plot = make_plot([5, 10], domain=[-10, 10])
            plot.config = LayoutConfig(column_height=10, domain=(0.0, 5.0))
            plot.plot()
        assert caplog.records == []
