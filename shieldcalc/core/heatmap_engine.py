"""Heatmap engine — exposure rate sampled over a 2D grid.

Evaluates the multi-source aggregator at every cell centre of a
``grid_height × grid_width`` grid:

    x = col · cell_size + cell_size / 2
    y = row · cell_size + cell_size / 2
    index = row · grid_width + col        (row-major)

Cells are independent.  They are processed in batches; each batch writes
only its own slice of a preallocated output array, so batches may run on
worker threads and the result order is the same for any schedule.
Progress and cancellation are handled between batches on the calling
thread.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING, Callable, Sequence

import numpy as np

from shieldcalc.constants import HEATMAP_BATCH_CELLS
from shieldcalc.core.archer_engine import ArcherEngine
from shieldcalc.core.build_up_factors import snapshot_of
from shieldcalc.core.exposure import DEFAULT_ENGINE, DEFAULT_ISOTOPES, aggregate_exposure
from shieldcalc.core.isotope_database import IsotopeService
from shieldcalc.models.results import HeatmapResult
from shieldcalc.models.scene import Point2D

if TYPE_CHECKING:
    from shieldcalc.core.build_up_factors import BuildupProvider
    from shieldcalc.models.scene import Barrier, Source

logger = logging.getLogger(__name__)


def grid_dimensions(width: float, height: float, cell_size: float) -> tuple[int, int]:
    """Number of (columns, rows) needed to cover a width × height area.

    Args:
        width: Area width [scene units].
        height: Area height [scene units].
        cell_size: Cell edge length [scene units].
    Returns:
        (grid_width, grid_height), rounded up.
    """
    if cell_size <= 0:
        raise ValueError(f"Cell size must be positive, got {cell_size}")
    return math.ceil(width / cell_size), math.ceil(height / cell_size)


class HeatmapEngine:
    """Computes exposure rate on a regular grid of target points.

    Args:
        engine: Archer engine for the per-source physics.
        isotopes: Isotope catalog.
    """

    def __init__(
        self,
        engine: ArcherEngine | None = None,
        isotopes: IsotopeService | None = None,
    ) -> None:
        self._engine = engine or DEFAULT_ENGINE
        self._isotopes = isotopes or DEFAULT_ISOTOPES

    def compute(
        self,
        sources: Sequence[Source],
        barriers: Sequence[Barrier],
        scale_factor: float,
        grid_width: int,
        grid_height: int,
        cell_size: float,
        buildup: BuildupProvider,
        progress_callback: Callable[[float], None] | None = None,
        max_workers: int | None = None,
        cancel_event: threading.Event | None = None,
        batch_size: int = HEATMAP_BATCH_CELLS,
    ) -> HeatmapResult:
        """Sample total exposure at every cell centre.

        Args:
            sources: Point sources.
            barriers: Shielding walls.
            scale_factor: Scene units per metre (pixels/m).
            grid_width: Number of columns.
            grid_height: Number of rows.
            cell_size: Cell edge length [scene units].
            buildup: Build-up configuration (snapshotted once for the grid).
            progress_callback: Called with the completed fraction [0–1]
                after each batch.  May raise InterruptedError to abort.
            max_workers: Worker threads.  None or 1 → run on this thread.
            cancel_event: Set to abort between batches.
            batch_size: Cells per batch (progress/cancellation cadence).

        Returns:
            HeatmapResult with the flat row-major exposure array [mR/h].

        Raises:
            ValueError: On negative grid sizes or non-positive cell size,
                scale factor or batch size.
            InterruptedError: If cancelled.
        """
        if grid_width < 0 or grid_height < 0:
            raise ValueError(
                f"Grid size must be non-negative, got {grid_width}x{grid_height}"
            )
        if cell_size <= 0:
            raise ValueError(f"Cell size must be positive, got {cell_size}")
        if scale_factor <= 0:
            raise ValueError(f"Scale factor must be positive, got {scale_factor}")
        if batch_size < 1:
            raise ValueError(f"Batch size must be >= 1, got {batch_size}")

        t0 = time.perf_counter()

        sources = list(sources)
        barriers = list(barriers)
        config = snapshot_of(buildup)
        total_cells = grid_width * grid_height
        half = cell_size / 2.0

        # One slot per cell; batches write disjoint slices
        values = np.zeros(total_cells, dtype=np.float64)

        def _run_batch(start: int, stop: int) -> int:
            if cancel_event is not None and cancel_event.is_set():
                return 0
            for index in range(start, stop):
                row, col = divmod(index, grid_width)
                target = Point2D(x=col * cell_size + half, y=row * cell_size + half)
                values[index] = aggregate_exposure(
                    sources, target, barriers, scale_factor, config,
                    engine=self._engine, isotopes=self._isotopes,
                ).total
            return stop - start

        batches = [
            (start, min(start + batch_size, total_cells))
            for start in range(0, total_cells, batch_size)
        ]

        logger.info(
            "Heatmap %dx%d (%d cells, %d sources, %d barriers)",
            grid_width, grid_height, total_cells, len(sources), len(barriers),
        )

        done = 0
        if max_workers is None or max_workers <= 1:
            for start, stop in batches:
                _check_cancelled(cancel_event)
                done += _run_batch(start, stop)
                if progress_callback:
                    progress_callback(done / total_cells)
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = [executor.submit(_run_batch, s, e) for s, e in batches]
                try:
                    for future in as_completed(futures):
                        done += future.result()
                        _check_cancelled(cancel_event)
                        if progress_callback:
                            progress_callback(done / total_cells)
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise

        elapsed = time.perf_counter() - t0
        logger.info("Heatmap finished in %.3f s", elapsed)

        return HeatmapResult(
            values=values,
            grid_width=grid_width,
            grid_height=grid_height,
            cell_size=cell_size,
            elapsed_seconds=elapsed,
        )


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise InterruptedError("Heatmap computation cancelled.")


def sample_grid(
    sources: Sequence[Source],
    barriers: Sequence[Barrier],
    scale_factor: float,
    grid_width: int,
    grid_height: int,
    cell_size: float,
    buildup: BuildupProvider,
    progress_callback: Callable[[float], None] | None = None,
    max_workers: int | None = None,
) -> list[float]:
    """Flat row-major list of total exposure per cell [mR/h].

    Convenience wrapper around ``HeatmapEngine.compute`` with the
    built-in catalogs.
    """
    result = HeatmapEngine().compute(
        sources, barriers, scale_factor, grid_width, grid_height, cell_size,
        buildup, progress_callback=progress_callback, max_workers=max_workers,
    )
    return result.values.tolist()
