"""Archer equation engine — inverse-square exposure, build-up, shielding.

Exposure rate   X = A · Γ · 10⁶ / d²             [mR/h]
Transmission    T = exp(-µ·t) · B(t / HVL)
Build-up        B(x) = A · exp(α · x)            (1.0 when disabled)

All internal calculations in core units (m, cm, keV, mCi, mR/h).
The build-up configuration is passed into every call; the engine never
holds or mutates it.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterable

from shieldcalc.constants import DEFAULT_ISOTOPE_ID
from shieldcalc.core.build_up_factors import material_key
from shieldcalc.core.geometry import segments_intersect
from shieldcalc.core.isotope_database import ISOTOPES
from shieldcalc.core.material_database import MaterialService
from shieldcalc.core.units import thickness_to_hvl, transmission_to_thickness
from shieldcalc.models.scene import Barrier, Point2D

if TYPE_CHECKING:
    from shieldcalc.core.build_up_factors import BuildupProvider
    from shieldcalc.models.material import MaterialProperties

logger = logging.getLogger(__name__)


class ArcherEngine:
    """Semi-empirical point-source shielding engine.

    Args:
        material_service: Material catalog for energy-matched µ/HVL lookups.
            Defaults to the built-in catalog.
    """

    def __init__(self, material_service: MaterialService | None = None) -> None:
        self._materials = material_service or MaterialService()

    @property
    def materials(self) -> MaterialService:
        return self._materials

    # ------------------------------------------------------------------
    # Forward model
    # ------------------------------------------------------------------

    @staticmethod
    def exposure_rate(
        activity: float,
        distance_m: float,
        gamma_constant: float | None = None,
    ) -> float:
        """Unshielded exposure rate by the inverse-square law.

        X = A · Γ · 10⁶ / d²

        Args:
            activity: Source activity [mCi].
            distance_m: Source-to-target distance [m].
            gamma_constant: Γ [R·m²/(mCi·h)].  None → Tc-99m.

        Returns:
            Exposure rate [mR/h]; ``math.inf`` at zero distance.
        """
        if distance_m == 0:
            return math.inf
        if gamma_constant is None:
            gamma_constant = ISOTOPES[DEFAULT_ISOTOPE_ID].gamma_constant
        return activity * gamma_constant * 1e6 / (distance_m * distance_m)

    @staticmethod
    def buildup_factor(
        thickness_hvl: float,
        material: str,
        buildup: BuildupProvider,
    ) -> float:
        """Broad-beam build-up factor.

        B(x) = A · exp(α · x)

        Args:
            thickness_hvl: Barrier thickness [HVL].
            material: Build-up material key ("lead", "concrete", ...).
            buildup: Build-up configuration.

        Returns:
            B [dimensionless]; exactly 1.0 when build-up is disabled.
        """
        if not buildup.is_buildup_enabled():
            return 1.0
        params = buildup.get_buildup_params(material)
        return params.A * math.exp(params.alpha * thickness_hvl)

    def transmission_with_buildup(
        self,
        thickness_cm: float,
        material: MaterialProperties,
        buildup: BuildupProvider,
    ) -> float:
        """Transmission through one barrier including build-up.

        T = exp(-µ·t) · B(t / (HVL/10))

        Args:
            thickness_cm: Barrier thickness [cm].
            material: Energy-resolved material properties.
            buildup: Build-up configuration.

        Returns:
            Transmission factor [dimensionless].
        """
        mu = material.linear_attenuation_coefficient
        thickness_hvl = thickness_to_hvl(thickness_cm, material.half_value_layer)
        transmission = math.exp(-mu * thickness_cm)
        return transmission * self.buildup_factor(
            thickness_hvl, material_key(material.name), buildup,
        )

    def barrier_attenuation(
        self,
        barriers: Iterable[Barrier],
        source: Point2D,
        target: Point2D,
        energy_keV: float,
        buildup: BuildupProvider,
    ) -> float:
        """Combined transmission of all barriers on the line of sight.

        Barriers that do not cross the source→target segment, or whose
        material is not in the catalog, contribute nothing.

        Args:
            barriers: Shielding walls.
            source: Source position [scene units].
            target: Target position [scene units].
            energy_keV: Photon energy used for the material lookup [keV].
            buildup: Build-up configuration.

        Returns:
            Product of barrier transmissions (1.0 when nothing is in the way).
        """
        total_transmission = 1.0
        for barrier in barriers:
            if not segments_intersect(source, target, barrier.start, barrier.end):
                continue
            material = self._materials.get_material_for_energy(
                barrier.material, energy_keV,
            )
            if material is None:
                logger.debug("Skipping barrier with unknown material %s", barrier.material)
                continue
            total_transmission *= self.transmission_with_buildup(
                barrier.thickness, material, buildup,
            )
        return total_transmission

    # ------------------------------------------------------------------
    # Inverse model
    # ------------------------------------------------------------------

    def required_shielding(
        self,
        activity: float,
        distance_m: float,
        target_exposure: float,
        material: MaterialProperties,
        buildup: BuildupProvider,
        gamma_constant: float | None = None,
    ) -> float:
        """Barrier thickness needed to bring a source down to a target.

        Args:
            activity: Source activity [mCi].
            distance_m: Source-to-target distance [m].
            target_exposure: Target exposure rate [mR/h].
            material: Energy-resolved material properties.
            buildup: Build-up configuration.
            gamma_constant: Γ [R·m²/(mCi·h)].  None → Tc-99m.

        Returns:
            Required thickness [cm], ≥ 0.
        """
        unshielded = self.exposure_rate(activity, distance_m, gamma_constant)
        return self.required_thickness(unshielded, target_exposure, material, buildup)

    def required_thickness(
        self,
        unshielded_exposure: float,
        target_exposure: float,
        material: MaterialProperties,
        buildup: BuildupProvider,
        iterations: int = 1,
    ) -> float:
        """Solve T(t) = target / unshielded for t with build-up correction.

        Starts from the narrow-beam estimate t₀ = -ln(T)/µ, then corrects
        ``iterations`` times: Tᵢ = T / B(tᵢ₋₁), tᵢ = -ln(Tᵢ)/µ.  A corrected
        transmission outside (0, 1) stops the correction and keeps the last
        thickness.

        Args:
            unshielded_exposure: Exposure rate without shielding [mR/h].
            target_exposure: Target exposure rate [mR/h].
            material: Energy-resolved material properties.
            buildup: Build-up configuration.
            iterations: Number of build-up corrections.

        Returns:
            Required thickness [cm], ≥ 0.
        """
        if target_exposure >= unshielded_exposure:
            return 0.0

        transmission_required = target_exposure / unshielded_exposure
        mu = material.linear_attenuation_coefficient
        if transmission_required <= 0:
            # Zero target or infinite exposure: no finite thickness suffices
            return math.inf

        thickness = transmission_to_thickness(transmission_required, mu)
        key = material_key(material.name)

        for _ in range(iterations):
            thickness_hvl = thickness_to_hvl(thickness, material.half_value_layer)
            buildup_factor = self.buildup_factor(thickness_hvl, key, buildup)
            adjusted = transmission_required / buildup_factor
            if adjusted <= 0 or adjusted >= 1:
                logger.debug(
                    "Build-up correction out of range for %s (T=%s), keeping %s cm",
                    material.name, adjusted, thickness,
                )
                break
            thickness = transmission_to_thickness(adjusted, mu)

        return max(0.0, thickness)

    @staticmethod
    def simple_required_thickness(
        unshielded_exposure: float,
        target_exposure: float,
        material: MaterialProperties,
    ) -> float | None:
        """Narrow-beam thickness t = -ln(target/unshielded)/µ, no build-up.

        Returns:
            Thickness [cm], or None when no shielding is required.
        """
        if unshielded_exposure <= 0:
            return None
        transmission_needed = target_exposure / unshielded_exposure
        if transmission_needed >= 1:
            return None
        if transmission_needed <= 0:
            return math.inf
        return transmission_to_thickness(
            transmission_needed, material.linear_attenuation_coefficient,
        )
