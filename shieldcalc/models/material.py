"""Material data models.

Defines shielding material properties and the energy-resolved view used by
the Archer engine.
Reference: Shielding calculator — Data Model (Material).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Material:
    """Shielding material definition with tabulated attenuation data.

    Energy tables are keyed by photon energy [keV] and keep their
    declaration order, which decides nearest-energy ties.

    Attributes:
        id: Catalog key ("lead", "concrete", ...).
        name: Display name ("Plasterboard (Gypsum)").
        density: Density [g/cm³].
        zeff: Effective atomic number.
        color: Hex color code for UI display.
        attenuation: Linear attenuation coefficient µ [cm⁻¹] per energy.
        hvl: Half-value layer [mm] per energy.
    """
    id: str
    name: str
    density: float
    zeff: float
    color: str
    attenuation: Mapping[float, float] = field(default_factory=dict)
    hvl: Mapping[float, float] = field(default_factory=dict)


@dataclass(frozen=True)
class MaterialProperties:
    """Material properties resolved at a single tabulated energy.

    Attributes:
        name: Display name of the material.
        density: Density [g/cm³].
        color: Hex color code.
        energy_keV: Tabulated energy the values were taken at [keV].
        linear_attenuation_coefficient: µ [cm⁻¹].
        half_value_layer: HVL [mm].
        tenth_value_layer: TVL [mm] (HVL × 3.32).
    """
    name: str
    density: float
    color: str
    energy_keV: float
    linear_attenuation_coefficient: float
    half_value_layer: float
    tenth_value_layer: float
