"""Unit conversion module — single conversion point for the engine.

CRITICAL: All unit conversions MUST go through this module.

Internal (core) units:
    Distance     : m   (source → target, after scale factor)
    Thickness    : cm
    HVL table    : mm  (hence the ``HVL / 10`` in the Archer model)
    Energy       : keV
    Activity     : mCi
    Exposure rate: mR/h
    Γ            : R·m²/(mCi·h)

Report units:
    Activity     : MBq
    Dose rate    : µGy/h
    Thickness    : mm
"""

import math
from typing import NewType

# Type aliases: zero runtime cost, visible in IDE for unit-error detection
Cm = NewType('Cm', float)
Mm = NewType('Mm', float)
MBq = NewType('MBq', float)
MCi = NewType('MCi', float)
UGyPerHour = NewType('UGyPerHour', float)
MRPerHour = NewType('MRPerHour', float)

MCI_TO_MBQ = 37.0
MR_TO_UGY = 8.7           # 1 mR ≈ 8.7 µGy (in air)
MR_TO_USV = 10.0          # 1 mR ≈ 10 µSv (gamma, tissue)
# 1 R·m²/(mCi·h) = 8.7 µGy·m² / (37 MBq·h) ≈ 0.235 µGy·m²/(MBq·h)
GAMMA_CONSTANT_CONVERSION = 0.235
# TVL = HVL × log2(10); the tables use the rounded factor
TVL_PER_HVL = 3.32


# ---------------------------------------------------------------------------
# Length conversions
# ---------------------------------------------------------------------------

def mm_to_cm(mm: float) -> Cm:
    """Report (mm) → Core (cm)."""
    return Cm(mm * 0.1)


def cm_to_mm(cm: float) -> Mm:
    """Core (cm) → Report (mm)."""
    return Mm(cm * 10.0)


def m_to_cm(m: float) -> Cm:
    """m → cm."""
    return Cm(m * 100.0)


def cm_to_m(cm: float) -> float:
    """cm → m."""
    return cm * 0.01


# ---------------------------------------------------------------------------
# Activity conversions
# ---------------------------------------------------------------------------

def mCi_to_MBq(mci: float) -> MBq:
    """mCi → MBq."""
    return MBq(mci * MCI_TO_MBQ)


def MBq_to_mCi(mbq: float) -> MCi:
    """MBq → mCi."""
    return MCi(mbq / MCI_TO_MBQ)


def mCi_to_GBq(mci: float) -> float:
    """mCi → GBq."""
    return mci * MCI_TO_MBQ / 1000.0


def GBq_to_mCi(gbq: float) -> MCi:
    """GBq → mCi."""
    return MCi(gbq * 1000.0 / MCI_TO_MBQ)


# ---------------------------------------------------------------------------
# Exposure / dose rate conversions
# ---------------------------------------------------------------------------

def mR_h_to_uGy_h(mr_h: float) -> UGyPerHour:
    """Exposure rate mR/h → air kerma rate µGy/h."""
    return UGyPerHour(mr_h * MR_TO_UGY)


def uGy_h_to_mR_h(ugy_h: float) -> MRPerHour:
    """Air kerma rate µGy/h → exposure rate mR/h."""
    return MRPerHour(ugy_h / MR_TO_UGY)


def mR_to_uSv(mr: float) -> float:
    """mR → µSv (photon, tissue)."""
    return mr * MR_TO_USV


def uSv_to_mR(usv: float) -> float:
    """µSv → mR."""
    return usv / MR_TO_USV


# ---------------------------------------------------------------------------
# Gamma constant conversions
# ---------------------------------------------------------------------------

def convert_gamma_constant(gamma_constant: float) -> float:
    """R·m²/(mCi·h) → µGy·m²/(MBq·h)."""
    return gamma_constant * GAMMA_CONSTANT_CONVERSION


def dose_rate_per_MBq(gamma_constant: float) -> float:
    """Dose rate at 1 m per MBq [µGy/h] from Γ [R·m²/(mCi·h)].

    Args:
        gamma_constant: Exposure rate constant [R·m²/(mCi·h)].

    Returns:
        µGy/h at 1 m per MBq.
    """
    return convert_gamma_constant(gamma_constant) * 1000.0


# ---------------------------------------------------------------------------
# Layer conversions
# ---------------------------------------------------------------------------

def hvl_to_tvl(hvl: float) -> float:
    """Half-value layer → tenth-value layer (same length unit)."""
    return hvl * TVL_PER_HVL


def thickness_to_hvl(thickness_cm: float, hvl_mm: float) -> float:
    """Physical thickness [cm] → number of half-value layers.

    The HVL tables are in mm, so the HVL is scaled by 1/10 before dividing.

    Args:
        thickness_cm: Barrier thickness [cm].
        hvl_mm: Tabulated half-value layer [mm].

    Returns:
        Thickness in HVL [dimensionless].
    """
    return thickness_cm / (hvl_mm / 10.0)


def transmission_to_thickness(transmission: float, mu_per_cm: float) -> Cm:
    """Narrow-beam thickness for a transmission ratio: t = -ln(T) / µ.

    Args:
        transmission: Transmission ratio (0–1].
        mu_per_cm: Linear attenuation coefficient [cm⁻¹].

    Returns:
        Thickness [cm].
    """
    return Cm(-math.log(transmission) / mu_per_cm)
