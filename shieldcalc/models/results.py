"""Engine result data models.

Dataclasses returned by the exposure aggregator, heatmap engine, point
assessment and vertical shielding calculators.
Reference: Shielding calculator — Multi-Source Aggregator, Grid Sampler.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray


def _empty_float_array() -> NDArray[np.float64]:
    return np.array([], dtype=np.float64)


def _fraction(contribution: float, total: float) -> float:
    """contribution / total with 0/0 defined as 0."""
    if total == 0:
        return 0.0
    return contribution / total


@dataclass
class ExposureResult:
    """Superposed exposure rate at one target point.

    All values in mR/h.

    Attributes:
        total: Sum of all shielded source contributions.
        per_source: Contribution keyed by source ID.
        per_isotope: Contribution keyed by isotope ID (summed over sources).
    """
    total: float = 0.0
    per_source: dict[str, float] = field(default_factory=dict)
    per_isotope: dict[str, float] = field(default_factory=dict)

    def fraction(self, contribution: float) -> float:
        """Share of the total [0–1]; 0 when the total is 0."""
        return _fraction(contribution, self.total)

    def isotope_percentages(self) -> dict[str, float]:
        """Per-isotope share of the total [%]."""
        return {
            key: self.fraction(value) * 100.0
            for key, value in self.per_isotope.items()
        }

    def source_percentages(self) -> dict[str, float]:
        """Per-source share of the total [%]."""
        return {
            key: self.fraction(value) * 100.0
            for key, value in self.per_source.items()
        }

    def dominant_isotope(self) -> str | None:
        """Isotope ID with the largest contribution (first wins on ties)."""
        if not self.per_isotope:
            return None
        best_key = None
        best_value = 0.0
        for key, value in self.per_isotope.items():
            if best_key is None or value > best_value:
                best_key, best_value = key, value
        return best_key


@dataclass
class HeatmapResult:
    """Exposure rate sampled over a regular grid.

    Attributes:
        values: Flat row-major array of total exposure [mR/h],
            index = row * grid_width + col.
        grid_width: Number of columns.
        grid_height: Number of rows.
        cell_size: Cell edge length [scene units].
        elapsed_seconds: Computation time [s].
    """
    values: NDArray[np.float64] = field(default_factory=_empty_float_array)
    grid_width: int = 0
    grid_height: int = 0
    cell_size: float = 0.0
    elapsed_seconds: float = 0.0

    def as_grid(self) -> NDArray[np.float64]:
        """Values reshaped to [grid_height, grid_width]."""
        return self.values.reshape(self.grid_height, self.grid_width)

    def cell_center(self, index: int) -> tuple[float, float]:
        """Scene coordinates of the cell centre for a flat index."""
        row, col = divmod(index, self.grid_width)
        half = self.cell_size / 2.0
        return col * self.cell_size + half, row * self.cell_size + half

    @property
    def max_value(self) -> float:
        """Largest finite exposure value (0 for an empty grid)."""
        finite = self.values[np.isfinite(self.values)]
        if finite.size == 0:
            return 0.0
        return float(np.max(finite))


@dataclass
class ShieldingRecommendation:
    """Thickness of one material needed to reach a dose target.

    Attributes:
        material_id: Material catalog ID.
        thickness_mm: Required thickness [mm] (0 when not required).
        required: False when the target is already met.
    """
    material_id: str = ""
    thickness_mm: float = 0.0
    required: bool = True


@dataclass
class Contribution:
    """Dose rate contributed by one source or isotope.

    Attributes:
        key: Source ID or isotope ID.
        dose_rate_uGy_h: Contribution [µGy/h].
        percentage: Share of the total [%].
        isotope: Isotope ID (for source contributions).
    """
    key: str = ""
    dose_rate_uGy_h: float = 0.0
    percentage: float = 0.0
    isotope: str = ""


@dataclass
class PointAssessment:
    """Dose rate report for one measurement point.

    Attributes:
        point_name: Display label.
        total_dose_rate_uGy_h: Shielded dose rate from all sources [µGy/h].
        effective_dose_rate_uGy_h: Total × occupancy factor [µGy/h].
        target_dose_rate_uGy_h: Design target [µGy/h].
        occupancy_factor: Occupancy [0–1].
        isotope_contributions: Breakdown by isotope.
        source_contributions: Breakdown by source (input order).
        dominant_isotope: Isotope with the largest contribution.
        recommendations: Additional shielding per material.
    """
    point_name: str = ""
    total_dose_rate_uGy_h: float = 0.0
    effective_dose_rate_uGy_h: float = 0.0
    target_dose_rate_uGy_h: float = 0.0
    occupancy_factor: float = 1.0
    isotope_contributions: list[Contribution] = field(default_factory=list)
    source_contributions: list[Contribution] = field(default_factory=list)
    dominant_isotope: str | None = None
    recommendations: list[ShieldingRecommendation] = field(default_factory=list)

    @property
    def meets_target(self) -> bool:
        return self.effective_dose_rate_uGy_h <= self.target_dose_rate_uGy_h


@dataclass
class VerticalShieldingResult:
    """Ceiling/floor shielding requirement above or below sources.

    Attributes:
        location: "above" or "below".
        point_name: Display label.
        total_dose_rate_uGy_h: Unshielded dose rate [µGy/h].
        required_lead_mm: Lead thickness [mm].
        required_concrete_mm: Concrete thickness [mm].
        distance_m: Vertical source distance [m].
    """
    location: str = "above"
    point_name: str = ""
    total_dose_rate_uGy_h: float = 0.0
    required_lead_mm: float = 0.0
    required_concrete_mm: float = 0.0
    distance_m: float = 0.0

    def meets_target(self, target_dose_rate_uGy_h: float) -> bool:
        return self.total_dose_rate_uGy_h <= target_dose_rate_uGy_h
