"""Isotope catalog — static gamma constants and photon energies.

Γ values are exposure rate constants in R·m²/(mCi·h); energies are the
principal photon line in keV.  The table is built once at import and is
read-only.
"""

import logging
from types import MappingProxyType

from shieldcalc.models.isotope import Isotope

logger = logging.getLogger(__name__)


ISOTOPES: MappingProxyType = MappingProxyType({
    "Tc-99m": Isotope(
        id="Tc-99m", name="Technetium-99m", energy_keV=140,
        gamma_constant=5.95e-6, half_life=6.02, half_life_unit="hours",
        color="#FF6B6B",
    ),
    "I-131": Isotope(
        id="I-131", name="Iodine-131", energy_keV=364,
        gamma_constant=2.17e-5, half_life=193.2, half_life_unit="hours",
        color="#4ECDC4",
    ),
    "F-18": Isotope(
        id="F-18", name="Fluorine-18", energy_keV=511,
        gamma_constant=5.7e-5, half_life=1.83, half_life_unit="hours",
        color="#45B7D1",
    ),
    "I-123": Isotope(
        id="I-123", name="Iodine-123", energy_keV=159,
        gamma_constant=7.4e-6, half_life=13.2, half_life_unit="hours",
        color="#96CEB4",
    ),
    "Ga-67": Isotope(
        id="Ga-67", name="Gallium-67", energy_keV=184,
        gamma_constant=8.9e-6, half_life=78.3, half_life_unit="hours",
        color="#FECA57",
    ),
    "In-111": Isotope(
        id="In-111", name="Indium-111", energy_keV=245,
        gamma_constant=2.8e-5, half_life=67.3, half_life_unit="hours",
        color="#9C88FF",
    ),
})


class IsotopeService:
    """Lookup service over the isotope catalog.

    Args:
        isotopes: Catalog mapping ID → Isotope.  Defaults to the built-in
            table; tests may inject their own.
    """

    def __init__(self, isotopes=None) -> None:
        self._isotopes = ISOTOPES if isotopes is None else MappingProxyType(dict(isotopes))

    def get_all_isotopes(self) -> list[Isotope]:
        """Return all isotopes in catalog order."""
        return list(self._isotopes.values())

    def get_isotope(self, isotope_id: str) -> Isotope | None:
        """Return an isotope by ID, or None if it is not in the catalog."""
        isotope = self._isotopes.get(isotope_id)
        if isotope is None:
            logger.debug("Unknown isotope: %s", isotope_id)
        return isotope

    def require_isotope(self, isotope_id: str) -> Isotope:
        """Return an isotope by ID.

        Raises:
            KeyError: If *isotope_id* is not found.
        """
        try:
            return self._isotopes[isotope_id]
        except KeyError:
            raise KeyError(f"Unknown isotope: {isotope_id!r}")
