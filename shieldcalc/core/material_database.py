"""Material database service — static attenuation tables and energy lookup.

Each material carries µ [cm⁻¹] and HVL [mm] tabulated at the photon energies
of the catalog isotopes.  Lookups resolve to the single tabulated energy
closest to the requested one; ties keep the first key in declaration order.

All energies in keV (core units).
"""

import logging
from types import MappingProxyType

from shieldcalc.core.units import hvl_to_tvl
from shieldcalc.models.material import Material, MaterialProperties

logger = logging.getLogger(__name__)

# Tabulated energies [keV], in declaration order
TABULATED_ENERGIES_KEV = (140, 159, 184, 245, 364, 511)


def _table(values: tuple[float, ...]) -> MappingProxyType:
    return MappingProxyType(dict(zip(TABULATED_ENERGIES_KEV, values)))


MATERIALS: MappingProxyType = MappingProxyType({
    "lead": Material(
        id="lead", name="Lead", density=11.34, zeff=82, color="#4B4B4D",
        attenuation=_table((25.67, 19.84, 14.23, 8.45, 3.41, 1.74)),
        hvl=_table((0.27, 0.35, 0.49, 0.82, 2.03, 3.98)),
    ),
    "concrete": Material(
        id="concrete", name="Concrete", density=2.35, zeff=13, color="#8B8B8B",
        attenuation=_table((0.277, 0.249, 0.223, 0.193, 0.151, 0.124)),
        hvl=_table((25.0, 27.8, 31.1, 35.9, 45.9, 55.9)),
    ),
    "steel": Material(
        id="steel", name="Steel", density=7.85, zeff=26, color="#71797E",
        attenuation=_table((0.975, 0.873, 0.771, 0.643, 0.469, 0.373)),
        hvl=_table((7.1, 7.9, 9.0, 10.8, 14.8, 18.6)),
    ),
    "plasterboard": Material(
        id="plasterboard", name="Plasterboard (Gypsum)", density=0.96,
        zeff=16, color="#F5F5DC",
        attenuation=_table((0.113, 0.102, 0.092, 0.080, 0.063, 0.052)),
        hvl=_table((61.0, 67.9, 75.3, 86.6, 110.0, 133.3)),
    ),
    "glass": Material(
        id="glass", name="Glass", density=2.5, zeff=14, color="#ADD8E6",
        attenuation=_table((0.385, 0.346, 0.309, 0.267, 0.209, 0.171)),
        hvl=_table((18.0, 20.0, 22.4, 26.0, 33.2, 40.5)),
    ),
    "brick": Material(
        id="brick", name="Brick", density=1.92, zeff=12, color="#CB4154",
        attenuation=_table((0.217, 0.195, 0.174, 0.151, 0.118, 0.097)),
        hvl=_table((32.0, 35.5, 39.8, 45.9, 58.7, 71.4)),
    ),
    "wood": Material(
        id="wood", name="Wood", density=0.5, zeff=6, color="#DEB887",
        attenuation=_table((0.060, 0.054, 0.048, 0.042, 0.033, 0.027)),
        hvl=_table((115.0, 128.3, 144.4, 165.0, 210.0, 256.6)),
    ),
})


def nearest_energy(energies, energy_keV: float) -> float:
    """Tabulated energy closest to *energy_keV*.

    Scans in the given order and only replaces the current best on a
    strictly smaller difference, so ties resolve to the earlier key.

    Raises:
        ValueError: If *energies* is empty.
    """
    best = None
    for candidate in energies:
        if best is None or abs(candidate - energy_keV) < abs(best - energy_keV):
            best = candidate
    if best is None:
        raise ValueError("No tabulated energies")
    return best


class MaterialService:
    """Service for material property lookup at a photon energy.

    Args:
        materials: Catalog mapping ID → Material.  Defaults to the built-in
            table; tests may inject their own.
    """

    def __init__(self, materials=None) -> None:
        self._materials = MATERIALS if materials is None else MappingProxyType(dict(materials))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_all_materials(self) -> list[Material]:
        """Return all materials in catalog order."""
        return list(self._materials.values())

    def get_material(self, material_id: str) -> Material | None:
        """Return a material by ID, or None if it is not in the catalog."""
        material = self._materials.get(material_id)
        if material is None:
            logger.debug("Unknown material: %s", material_id)
        return material

    def require_material(self, material_id: str) -> Material:
        """Return a material by ID.

        Raises:
            KeyError: If *material_id* is not found.
        """
        try:
            return self._materials[material_id]
        except KeyError:
            raise KeyError(f"Unknown material: {material_id!r}")

    def get_material_for_energy(
        self,
        material_id: str,
        energy_keV: float,
    ) -> MaterialProperties | None:
        """Material properties at the tabulated energy nearest *energy_keV*.

        Args:
            material_id: Material identifier.
            energy_keV: Photon energy [keV].

        Returns:
            MaterialProperties, or None for an unknown material.
        """
        material = self.get_material(material_id)
        if material is None or not material.attenuation:
            return None

        closest = nearest_energy(material.attenuation.keys(), energy_keV)
        hvl = material.hvl[closest]
        return MaterialProperties(
            name=material.name,
            density=material.density,
            color=material.color,
            energy_keV=closest,
            linear_attenuation_coefficient=material.attenuation[closest],
            half_value_layer=hvl,
            tenth_value_layer=hvl_to_tvl(hvl),
        )
