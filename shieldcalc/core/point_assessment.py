"""Measurement point assessment — dose rate report with shielding advice.

For one measurement point: superposed dose rate in µGy/h, occupancy-weighted
effective dose rate, breakdown by isotope and by source, and the additional
thickness of each recommendation material needed to reach the point's
target.  Recommendations use the narrow-beam law at the photon energy of
the dominant isotope.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from shieldcalc.constants import RECOMMENDATION_MATERIALS
from shieldcalc.core.exposure import DEFAULT_ENGINE, DEFAULT_ISOTOPES, aggregate_exposure
from shieldcalc.core.units import cm_to_mm, mR_h_to_uGy_h, uGy_h_to_mR_h
from shieldcalc.models.results import (
    Contribution,
    PointAssessment,
    ShieldingRecommendation,
)

if TYPE_CHECKING:
    from shieldcalc.core.archer_engine import ArcherEngine
    from shieldcalc.core.build_up_factors import BuildupProvider
    from shieldcalc.core.isotope_database import IsotopeService
    from shieldcalc.models.scene import Barrier, MeasurementPoint, Source

logger = logging.getLogger(__name__)


def assess_point(
    point: MeasurementPoint,
    sources: Sequence[Source],
    barriers: Sequence[Barrier],
    scale_factor: float,
    buildup: BuildupProvider,
    engine: ArcherEngine | None = None,
    isotopes: IsotopeService | None = None,
    materials: Sequence[str] = tuple(RECOMMENDATION_MATERIALS),
) -> PointAssessment:
    """Dose rate report for one measurement point.

    Args:
        point: Measurement point with occupancy and target [µGy/h].
        sources: Point sources.
        barriers: Existing shielding walls.
        scale_factor: Scene units per metre (pixels/m).
        buildup: Build-up configuration.
        engine: Archer engine.
        isotopes: Isotope catalog.
        materials: Material IDs to recommend thicknesses for.

    Returns:
        PointAssessment in µGy/h and mm.
    """
    engine = engine or DEFAULT_ENGINE
    isotopes = isotopes or DEFAULT_ISOTOPES

    exposure = aggregate_exposure(
        sources, point, barriers, scale_factor, buildup,
        engine=engine, isotopes=isotopes,
    )

    total_uGy_h = mR_h_to_uGy_h(exposure.total)
    assessment = PointAssessment(
        point_name=point.name,
        total_dose_rate_uGy_h=total_uGy_h,
        effective_dose_rate_uGy_h=total_uGy_h * point.occupancy_factor,
        target_dose_rate_uGy_h=point.target_dose_rate,
        occupancy_factor=point.occupancy_factor,
        dominant_isotope=exposure.dominant_isotope(),
    )

    for isotope_id, contribution in exposure.per_isotope.items():
        assessment.isotope_contributions.append(Contribution(
            key=isotope_id,
            dose_rate_uGy_h=mR_h_to_uGy_h(contribution),
            percentage=exposure.fraction(contribution) * 100.0,
            isotope=isotope_id,
        ))

    # Every input source is listed, skipped ones at 0
    for source in sources:
        contribution = exposure.per_source.get(source.id, 0.0)
        assessment.source_contributions.append(Contribution(
            key=source.id,
            dose_rate_uGy_h=mR_h_to_uGy_h(contribution),
            percentage=exposure.fraction(contribution) * 100.0,
            isotope=source.isotope,
        ))

    if assessment.dominant_isotope is None:
        return assessment

    dominant = isotopes.get_isotope(assessment.dominant_isotope)
    effective_mR_h = exposure.total * point.occupancy_factor
    target_mR_h = uGy_h_to_mR_h(point.target_dose_rate)

    for material_id in materials:
        props = engine.materials.get_material_for_energy(material_id, dominant.energy_keV)
        if props is None:
            logger.debug("No recommendation for unknown material %s", material_id)
            continue
        thickness_cm = engine.simple_required_thickness(effective_mR_h, target_mR_h, props)
        if thickness_cm is None:
            assessment.recommendations.append(ShieldingRecommendation(
                material_id=material_id, thickness_mm=0.0, required=False,
            ))
        else:
            assessment.recommendations.append(ShieldingRecommendation(
                material_id=material_id, thickness_mm=cm_to_mm(thickness_cm),
            ))

    return assessment
