"""Tests for HeatmapEngine — exposure sampled over a 2D grid.

Validates:
- Row-major cell-centre sampling
- Sequential and threaded runs give identical grids
- Progress reporting and cancellation
- Input validation and edge cases
"""

import threading

import numpy as np
import pytest

from shieldcalc.core.build_up_factors import BuildupConfig, BuildupParameterStore
from shieldcalc.core.exposure import aggregate_exposure
from shieldcalc.core.heatmap_engine import HeatmapEngine, grid_dimensions, sample_grid
from shieldcalc.models.results import HeatmapResult
from shieldcalc.models.scene import Barrier, Point2D, Source

SCALE = 100.0


@pytest.fixture(scope="module")
def heatmap_engine() -> HeatmapEngine:
    return HeatmapEngine()


@pytest.fixture
def buildup() -> BuildupConfig:
    return BuildupConfig()


@pytest.fixture
def scene():
    sources = [
        Source(position=Point2D(35, 35), isotope="Tc-99m", activity=10.0),
        Source(position=Point2D(380, 160), isotope="I-131", activity=2.0),
    ]
    barriers = [
        Barrier(Point2D(200, 0), Point2D(200, 150), "concrete", 15.0),
        Barrier(Point2D(0, 120), Point2D(150, 120), "lead", 0.2),
    ]
    return sources, barriers


class TestGridDimensions:
    def test_exact(self):
        assert grid_dimensions(400, 200, 20) == (20, 10)

    def test_rounds_up(self):
        assert grid_dimensions(101, 50, 20) == (6, 3)

    def test_invalid_cell_size(self):
        with pytest.raises(ValueError):
            grid_dimensions(100, 100, 0)


class TestHeatmapSampling:
    def test_result_shape(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        result = heatmap_engine.compute(sources, barriers, SCALE, 8, 5, 50, buildup)
        assert isinstance(result, HeatmapResult)
        assert result.values.shape == (40,)
        assert result.as_grid().shape == (5, 8)
        assert result.elapsed_seconds >= 0

    def test_cells_match_point_exposure(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        result = heatmap_engine.compute(sources, barriers, SCALE, 8, 5, 50, buildup)
        for index in (0, 7, 8, 21, 39):
            x, y = result.cell_center(index)
            expected = aggregate_exposure(
                sources, Point2D(x, y), barriers, SCALE, buildup,
            ).total
            assert result.values[index] == pytest.approx(expected)

    def test_row_major_layout(self, heatmap_engine, buildup):
        result = heatmap_engine.compute([], [], SCALE, 4, 3, 10, buildup)
        assert result.cell_center(0) == (5.0, 5.0)
        assert result.cell_center(3) == (35.0, 5.0)
        assert result.cell_center(4) == (5.0, 15.0)
        assert result.cell_center(11) == (35.0, 25.0)

    def test_no_sources_all_zero(self, heatmap_engine, buildup):
        result = heatmap_engine.compute([], [], SCALE, 3, 3, 10, buildup)
        assert np.all(result.values == 0.0)
        assert result.max_value == 0.0

    def test_empty_grid(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        calls = []
        result = heatmap_engine.compute(
            sources, barriers, SCALE, 0, 5, 50, buildup,
            progress_callback=calls.append,
        )
        assert result.values.size == 0
        assert calls == []

    def test_source_at_cell_centre(self, heatmap_engine, buildup):
        sources = [Source(position=Point2D(15, 5), activity=1.0)]
        result = heatmap_engine.compute(sources, [], SCALE, 3, 1, 10, buildup)
        assert np.isinf(result.values[1])
        assert np.isfinite(result.max_value)
        assert result.max_value == pytest.approx(result.values[0])

    def test_wall_shadow(self, heatmap_engine):
        """Cells behind a lead wall read far lower than mirrored open cells."""
        sources = [Source(position=Point2D(105, 5), activity=10.0)]
        wall = Barrier(Point2D(150, -10), Point2D(150, 20), "lead", 1.0)
        result = heatmap_engine.compute(
            sources, [wall], SCALE, 21, 1, 10, BuildupConfig(enabled=False),
        )
        # Cells 15 (x=155) and 5 (x=55) are 50 px from the source
        assert result.values[15] < result.values[5] * 1e-6

    def test_sample_grid_list(self, buildup, scene):
        sources, barriers = scene
        values = sample_grid(sources, barriers, SCALE, 4, 2, 50, buildup)
        assert isinstance(values, list)
        assert len(values) == 8


class TestDeterminism:
    def test_sequential_equals_parallel(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        seq = heatmap_engine.compute(sources, barriers, SCALE, 9, 7, 50, buildup)
        par = heatmap_engine.compute(
            sources, barriers, SCALE, 9, 7, 50, buildup, max_workers=4, batch_size=3,
        )
        assert np.array_equal(seq.values, par.values)

    def test_repeatable(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        a = heatmap_engine.compute(sources, barriers, SCALE, 6, 4, 50, buildup)
        b = heatmap_engine.compute(sources, barriers, SCALE, 6, 4, 50, buildup)
        assert np.array_equal(a.values, b.values)

    def test_store_snapshotted_once(self, heatmap_engine, scene):
        """Edits to the store during a run do not change the grid."""
        sources, barriers = scene
        reference = heatmap_engine.compute(
            sources, barriers, SCALE, 6, 4, 50, BuildupParameterStore(),
        )
        store = BuildupParameterStore()

        def _mutate(_fraction: float) -> None:
            store.set_param("concrete", "A", 10.0)
            store.set_enabled(False)

        mutated = heatmap_engine.compute(
            sources, barriers, SCALE, 6, 4, 50, store,
            progress_callback=_mutate, batch_size=1,
        )
        assert not store.is_buildup_enabled()
        assert np.array_equal(reference.values, mutated.values)


class TestProgressAndCancel:
    def test_progress_sequential(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        calls: list[float] = []
        heatmap_engine.compute(
            sources, barriers, SCALE, 5, 5, 50, buildup,
            progress_callback=calls.append, batch_size=10,
        )
        assert calls == pytest.approx([0.4, 0.8, 1.0])

    def test_progress_parallel_ends_complete(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        calls: list[float] = []
        heatmap_engine.compute(
            sources, barriers, SCALE, 5, 5, 50, buildup,
            progress_callback=calls.append, max_workers=3, batch_size=4,
        )
        assert len(calls) == 7
        assert calls == sorted(calls)
        assert calls[-1] == pytest.approx(1.0)

    def test_cancel_event_before_start(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(InterruptedError):
            heatmap_engine.compute(
                sources, barriers, SCALE, 5, 5, 50, buildup, cancel_event=cancel,
            )

    def test_cancel_event_parallel(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(InterruptedError):
            heatmap_engine.compute(
                sources, barriers, SCALE, 5, 5, 50, buildup,
                cancel_event=cancel, max_workers=2,
            )

    def test_cancel_mid_run(self, heatmap_engine, buildup, scene):
        sources, barriers = scene
        cancel = threading.Event()
        calls: list[float] = []

        def _progress(fraction: float) -> None:
            calls.append(fraction)
            cancel.set()

        with pytest.raises(InterruptedError):
            heatmap_engine.compute(
                sources, barriers, SCALE, 5, 5, 50, buildup,
                progress_callback=_progress, cancel_event=cancel, batch_size=5,
            )
        assert len(calls) == 1

    def test_callback_may_abort(self, heatmap_engine, buildup, scene):
        sources, barriers = scene

        def _abort(_fraction: float) -> None:
            raise InterruptedError("stop")

        with pytest.raises(InterruptedError):
            heatmap_engine.compute(
                sources, barriers, SCALE, 5, 5, 50, buildup,
                progress_callback=_abort, max_workers=2,
            )


class TestValidation:
    @pytest.mark.parametrize("kwargs", [
        {"grid_width": -1},
        {"grid_height": -2},
        {"cell_size": 0},
        {"scale_factor": 0},
        {"batch_size": 0},
    ])
    def test_invalid_inputs(self, heatmap_engine, buildup, kwargs):
        params = dict(
            sources=[], barriers=[], scale_factor=SCALE,
            grid_width=4, grid_height=4, cell_size=10, buildup=buildup,
        )
        params.update(kwargs)
        with pytest.raises(ValueError):
            heatmap_engine.compute(**params)
