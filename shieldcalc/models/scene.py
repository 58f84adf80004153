"""Scene data models — sources, barriers and measurement points.

All positions share one planar coordinate system chosen by the caller
(pixels on a floor plan by convention).  The engine only converts to
metres through the caller-supplied scale factor [pixels/m].
Reference: Shielding calculator — Data Model.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from shieldcalc.constants import (
    DEFAULT_OCCUPANCY_FACTOR,
    DEFAULT_TARGET_DOSE_RATE_UGY_H,
)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Point2D:
    """2D point in scene coordinates."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Source:
    """Point gamma source.

    Attributes:
        position: Source position [scene units].
        isotope: Isotope catalog ID ("Tc-99m").
        activity: Activity [mCi], non-negative.
        id: Unique identifier.
    """
    position: Point2D = field(default_factory=Point2D)
    isotope: str = "Tc-99m"
    activity: float = 0.0
    id: str = field(default_factory=_new_id)


@dataclass
class Barrier:
    """Straight shielding wall between two points.

    Attributes:
        start: First endpoint [scene units].
        end: Second endpoint [scene units].
        material: Material catalog ID ("lead", "concrete", ...).
        thickness: Wall thickness [cm], non-negative.
        id: Unique identifier.
    """
    start: Point2D = field(default_factory=Point2D)
    end: Point2D = field(default_factory=Point2D)
    material: str = "concrete"
    thickness: float = 0.0
    id: str = field(default_factory=_new_id)


@dataclass
class MeasurementPoint(Point2D):
    """Point of interest with its own dose constraint.

    Attributes:
        occupancy_factor: Fraction of time the location is occupied [0–1].
        target_dose_rate: Design target [µGy/h].
        name: Optional label.
        id: Unique identifier.
    """
    occupancy_factor: float = DEFAULT_OCCUPANCY_FACTOR
    target_dose_rate: float = DEFAULT_TARGET_DOSE_RATE_UGY_H
    name: str = ""
    id: str = field(default_factory=_new_id)
