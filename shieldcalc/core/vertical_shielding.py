"""Ceiling / floor shielding for locations directly above or below sources.

The slab separating floors is evaluated at a fixed vertical distance from
each source, without in-plane barriers.  Required lead and concrete use the
build-up-corrected solver with several correction passes.  With more than
one source a combined worst case is added per location, shielded for the
energy of the largest single contributor.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from shieldcalc.constants import VERTICAL_SOLVER_ITERATIONS
from shieldcalc.core.build_up_factors import snapshot_of
from shieldcalc.core.exposure import DEFAULT_ENGINE, DEFAULT_ISOTOPES
from shieldcalc.core.units import cm_to_mm, mR_h_to_uGy_h, uGy_h_to_mR_h
from shieldcalc.models.results import VerticalShieldingResult

if TYPE_CHECKING:
    from shieldcalc.core.archer_engine import ArcherEngine
    from shieldcalc.core.build_up_factors import BuildupProvider
    from shieldcalc.core.isotope_database import IsotopeService
    from shieldcalc.models.scene import Source

logger = logging.getLogger(__name__)


def _required_mm(
    engine: ArcherEngine,
    unshielded_mR_h: float,
    target_mR_h: float,
    energy_keV: float,
    material_id: str,
    buildup: BuildupProvider,
) -> float:
    if target_mR_h >= unshielded_mR_h:
        return 0.0
    props = engine.materials.get_material_for_energy(material_id, energy_keV)
    if props is None:
        return 0.0
    thickness_cm = engine.required_thickness(
        unshielded_mR_h, target_mR_h, props, buildup,
        iterations=VERTICAL_SOLVER_ITERATIONS,
    )
    return cm_to_mm(thickness_cm)


def calculate_vertical_shielding(
    sources: Sequence[Source],
    vertical_distance_m: float,
    target_dose_rate_uGy_h: float,
    buildup: BuildupProvider,
    above: bool = True,
    below: bool = True,
    engine: ArcherEngine | None = None,
    isotopes: IsotopeService | None = None,
) -> list[VerticalShieldingResult]:
    """Dose rate and slab thickness above and/or below each source.

    Args:
        sources: Point sources.
        vertical_distance_m: Source to occupied location distance [m].
        target_dose_rate_uGy_h: Design target [µGy/h].
        buildup: Build-up configuration.
        above: Evaluate the floor above (ceiling slab).
        below: Evaluate the floor below (floor slab).
        engine: Archer engine.
        isotopes: Isotope catalog.

    Returns:
        Per-source rows, then combined rows when there are several sources.
        Empty when neither location is selected.
    """
    engine = engine or DEFAULT_ENGINE
    isotopes = isotopes or DEFAULT_ISOTOPES
    config = snapshot_of(buildup)

    locations = [loc for loc, wanted in (("above", above), ("below", below)) if wanted]
    if not locations:
        return []

    target_mR_h = uGy_h_to_mR_h(target_dose_rate_uGy_h)
    results: list[VerticalShieldingResult] = []

    combined_mR_h = 0.0
    dominant_energy = 0.0
    max_contribution = 0.0

    per_source: list[tuple[int, Source, float, float]] = []
    for index, source in enumerate(sources):
        isotope = isotopes.get_isotope(source.isotope)
        if isotope is None:
            logger.debug("Skipping source %s: unknown isotope %s", source.id, source.isotope)
            continue
        unshielded = engine.exposure_rate(
            source.activity, vertical_distance_m, isotope.gamma_constant,
        )
        per_source.append((index, source, unshielded, isotope.energy_keV))

        combined_mR_h += unshielded
        if unshielded > max_contribution:
            max_contribution = unshielded
            dominant_energy = isotope.energy_keV

    for index, source, unshielded, energy_keV in per_source:
        for location in locations:
            label = "Above" if location == "above" else "Below"
            results.append(VerticalShieldingResult(
                location=location,
                point_name=f"{label} Source {index + 1} ({source.isotope})",
                total_dose_rate_uGy_h=mR_h_to_uGy_h(unshielded),
                required_lead_mm=_required_mm(
                    engine, unshielded, target_mR_h, energy_keV, "lead", config),
                required_concrete_mm=_required_mm(
                    engine, unshielded, target_mR_h, energy_keV, "concrete", config),
                distance_m=vertical_distance_m,
            ))

    if len(sources) > 1 and combined_mR_h > 0:
        for location in locations:
            label = "Above" if location == "above" else "Below"
            results.append(VerticalShieldingResult(
                location=location,
                point_name=f"{label} ALL Sources (Combined)",
                total_dose_rate_uGy_h=mR_h_to_uGy_h(combined_mR_h),
                required_lead_mm=_required_mm(
                    engine, combined_mR_h, target_mR_h, dominant_energy, "lead", config),
                required_concrete_mm=_required_mm(
                    engine, combined_mR_h, target_mR_h, dominant_energy, "concrete", config),
                distance_m=vertical_distance_m,
            ))

    return results
