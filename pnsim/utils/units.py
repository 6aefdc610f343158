"""
pnsim/utils/units.py

Display-unit conversions for the presentation layer.

The physics core works in SI (m, m^-3, C/m^3, V/m, V) and eV for band
energies. Plots, CSV summaries and the viewer convert with these helpers;
nothing inside ``pnsim.physics`` calls them.
"""

from __future__ import annotations

import numpy as np

from .constants import CM3_PER_M3

__all__ = [
    "m_to_um",
    "m3_to_cm3",
    "cm3_to_m3",
    "V_per_m_to_V_per_cm",
    "Cm3_to_Ccm3",
]


def _c64(x) -> np.ndarray:
    return np.ascontiguousarray(np.asarray(x, dtype=np.float64))


def m_to_um(x_m):
    return _c64(x_m) * 1e6


def m3_to_cm3(n_m3):
    """Density per m^3 -> per cm^3."""
    return _c64(n_m3) * CM3_PER_M3


def cm3_to_m3(n_cm3):
    """Density per cm^3 -> per m^3."""
    return _c64(n_cm3) / CM3_PER_M3


def V_per_m_to_V_per_cm(E_V_per_m):
    return _c64(E_V_per_m) * 1e-2


def Cm3_to_Ccm3(rho_Cm3):
    return _c64(rho_Cm3) * CM3_PER_M3
