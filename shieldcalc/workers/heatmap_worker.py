"""Heatmap worker — background thread for grid exposure sampling.

Runs HeatmapEngine.compute off the UI thread.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from PyQt6.QtCore import QThread, pyqtSignal

from shieldcalc.constants import DEFAULT_HEATMAP_RESOLUTION
from shieldcalc.core.build_up_factors import snapshot_of

if TYPE_CHECKING:
    from shieldcalc.core.build_up_factors import BuildupProvider
    from shieldcalc.core.heatmap_engine import HeatmapEngine, HeatmapResult
    from shieldcalc.models.scene import Barrier, Source


class HeatmapWorker(QThread):
    """Background thread for heatmap computation.

    Usage::

        worker = HeatmapWorker(heatmap_engine)
        worker.setup(sources, barriers, scale_factor, 40, 30, 20, buildup)
        worker.progress.connect(on_progress)
        worker.result_ready.connect(on_result)
        worker.error_occurred.connect(on_error)
        worker.start()
    """

    progress = pyqtSignal(int)          # 0-100%
    result_ready = pyqtSignal(object)   # HeatmapResult
    error_occurred = pyqtSignal(str)

    def __init__(self, heatmap_engine: HeatmapEngine, parent=None):
        super().__init__(parent)
        self._engine = heatmap_engine
        self._sources: list[Source] = []
        self._barriers: list[Barrier] = []
        self._scale_factor: float = 1.0
        self._grid_width: int = 0
        self._grid_height: int = 0
        self._cell_size: float = DEFAULT_HEATMAP_RESOLUTION
        self._buildup: BuildupProvider | None = None
        self._max_workers: int | None = None
        self._cancel_event = threading.Event()

    def setup(
        self,
        sources: list[Source],
        barriers: list[Barrier],
        scale_factor: float,
        grid_width: int,
        grid_height: int,
        cell_size: float,
        buildup: BuildupProvider,
        max_workers: int | None = None,
    ) -> None:
        """Configure computation parameters before starting.

        The build-up configuration is snapshotted here so edits made while
        the worker runs do not leak into the grid.

        Args:
            sources: Point sources.
            barriers: Shielding walls.
            scale_factor: Scene units per metre (pixels/m).
            grid_width: Number of columns.
            grid_height: Number of rows.
            cell_size: Cell edge length [scene units].
            buildup: Build-up configuration.
            max_workers: Worker threads for cell batches.
        """
        self._sources = list(sources)
        self._barriers = list(barriers)
        self._scale_factor = scale_factor
        self._grid_width = grid_width
        self._grid_height = grid_height
        self._cell_size = cell_size
        self._buildup = snapshot_of(buildup)
        self._max_workers = max_workers
        self._cancel_event.clear()

    def cancel(self) -> None:
        """Request graceful cancellation."""
        self._cancel_event.set()

    def run(self) -> None:
        """Execute heatmap computation in background thread."""
        try:
            if self._buildup is None:
                self.error_occurred.emit("Heatmap parameters not set.")
                return

            def _progress_callback(fraction: float) -> None:
                if self._cancel_event.is_set():
                    raise InterruptedError("Heatmap computation cancelled.")
                self.progress.emit(int(fraction * 100))

            result: HeatmapResult = self._engine.compute(
                sources=self._sources,
                barriers=self._barriers,
                scale_factor=self._scale_factor,
                grid_width=self._grid_width,
                grid_height=self._grid_height,
                cell_size=self._cell_size,
                buildup=self._buildup,
                progress_callback=_progress_callback,
                max_workers=self._max_workers,
                cancel_event=self._cancel_event,
            )

            if self._cancel_event.is_set():
                return

            self.result_ready.emit(result)

        except InterruptedError:
            pass  # cancelled silently
        except Exception as e:
            self.error_occurred.emit(str(e))
