"""Isotope data model.

Reference: Shielding calculator — Data Model (Isotope).
"""

from dataclasses import dataclass

from shieldcalc.core.units import dose_rate_per_MBq


@dataclass(frozen=True)
class Isotope:
    """Gamma-emitting radionuclide.

    Attributes:
        id: Catalog key ("Tc-99m", "I-131", ...).
        name: Display name ("Technetium-99m").
        energy_keV: Principal photon energy [keV].
        gamma_constant: Exposure rate constant [R·m²/(mCi·h)].
        half_life: Half-life value, in ``half_life_unit``.
        half_life_unit: "seconds", "minutes", "hours", "days" or "years".
        color: Hex color code for UI display.
    """
    id: str
    name: str
    energy_keV: float
    gamma_constant: float
    half_life: float = 0.0
    half_life_unit: str = "hours"
    color: str = ""

    @property
    def dose_rate_per_MBq(self) -> float:
        """µGy/h at 1 m per MBq."""
        return dose_rate_per_MBq(self.gamma_constant)
