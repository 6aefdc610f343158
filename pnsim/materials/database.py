"""
Material constant sets for depletion-approximation junction physics.

- SI units throughout (densities in m^-3, permittivity in F/m), except the
  bandgap which is kept in eV because band energies are reported in eV.
- One immutable ``PhysicalConstants`` value per material; callers pass it
  explicitly to every physics function.
- ``ni_model="fixed"`` keeps n_i at its reference value for every T,
  ``"scaled"`` moves it with T through the usual T^{3/2} exp(-Eg/2kT) law
  anchored at (T_ref, n_i,ref).

Public API (stable):
    PhysicalConstants
    get_material(name) -> PhysicalConstants
    list_materials() -> list[str]
    with_overrides(mat, **fields) -> PhysicalConstants

Reference values at 300 K (Sze & Ng, 3rd Ed., App. G):
    Si   : eps_r 11.7,  Eg 1.12 eV,  n_i 1.5e10 cm^-3
    Ge   : eps_r 16.0,  Eg 0.66 eV,  n_i 2.4e13 cm^-3
    GaAs : eps_r 12.9,  Eg 1.424 eV, n_i 2.1e6  cm^-3
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from types import MappingProxyType
from typing import Literal, Mapping

from ..utils.constants import EPS0, K_B_EV

__all__ = [
    "PhysicalConstants",
    "get_material",
    "list_materials",
    "with_overrides",
]


# ---------------------------------------------------------------------
# Data structure
# ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PhysicalConstants:
    """
    Self-consistent constant set for one semiconductor.

    Attributes
    ----------
    name : str
        Canonical material key, e.g. "Si".
    eps_rel : float
        Static relative permittivity.
    ni_m3 : float
        Intrinsic carrier density at ``T_ref_K`` [m^-3].
    Eg_eV : float
        Bandgap [eV].
    Nc_m3, Nv_m3 : float
        Conduction/valence effective density of states at ``T_ref_K`` [m^-3].
    T_ref_K : float
        Temperature the reference values belong to [K].
    ni_model : "fixed" | "scaled"
        How ``ni_at`` treats temperatures other than ``T_ref_K``.
    """
    name: str
    eps_rel: float
    ni_m3: float
    Eg_eV: float
    Nc_m3: float
    Nv_m3: float
    T_ref_K: float = 300.0
    ni_model: Literal["fixed", "scaled"] = "fixed"

    @property
    def eps_F_per_m(self) -> float:
        """Absolute permittivity eps_r * eps_0 [F/m]."""
        return float(self.eps_rel) * EPS0

    def ni_at(self, T_K: float) -> float:
        """
        Intrinsic density [m^-3] at ``T_K``.

        0 for an invalid temperature, and for a "scaled" set whose reference
        values (T_ref_K, ni_m3, Eg_eV) are not finite and positive.
        """
        T = float(T_K)
        if not math.isfinite(T) or T <= 0.0:
            return 0.0
        if self.ni_model == "fixed":
            ni = float(self.ni_m3)
            return ni if math.isfinite(ni) else 0.0
        T0, ni0, Eg = float(self.T_ref_K), float(self.ni_m3), float(self.Eg_eV)
        if not all(math.isfinite(v) and v > 0.0 for v in (T0, ni0, Eg)):
            return 0.0
        arg = -0.5 * Eg / K_B_EV * (1.0 / T - 1.0 / T0)
        # exp overflows past ~709; such temperatures are far outside any use
        if arg > 700.0:
            return 0.0
        ni = ni0 * (T / T0) ** 1.5 * math.exp(arg)
        return ni if math.isfinite(ni) else 0.0


# ---------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------

_DB: Mapping[str, PhysicalConstants] = MappingProxyType({
    "Si": PhysicalConstants(
        name="Si", eps_rel=11.7, ni_m3=1.5e16, Eg_eV=1.12,
        Nc_m3=2.8e25, Nv_m3=1.04e25,
    ),
    "Ge": PhysicalConstants(
        name="Ge", eps_rel=16.0, ni_m3=2.4e19, Eg_eV=0.66,
        Nc_m3=1.04e25, Nv_m3=6.0e24,
    ),
    "GaAs": PhysicalConstants(
        name="GaAs", eps_rel=12.9, ni_m3=2.1e12, Eg_eV=1.424,
        Nc_m3=4.7e23, Nv_m3=7.0e24,
    ),
})


@lru_cache(maxsize=None)
def get_material(name: str = "Si") -> PhysicalConstants:
    """Return the constant set for ``name`` (case-insensitive)."""
    key = {k.lower(): k for k in _DB}.get(str(name).strip().lower())
    if key is None:
        raise KeyError(f"Unknown material '{name}'. Known: {list_materials()}")
    return _DB[key]


def list_materials() -> list[str]:
    return sorted(_DB.keys())


_POSITIVE_FIELDS = ("eps_rel", "ni_m3", "Eg_eV", "Nc_m3", "Nv_m3", "T_ref_K")


def with_overrides(mat: PhysicalConstants, **overrides) -> PhysicalConstants:
    """Copy of ``mat`` with selected fields replaced (unknown keys raise)."""
    known = {f.name for f in fields(PhysicalConstants)}
    bad = sorted(set(overrides) - known)
    if bad:
        raise KeyError(f"Unknown material field(s): {bad}")
    cast = {k: (v if k in ("name", "ni_model") else float(v)) for k, v in overrides.items()}
    if "ni_model" in cast and cast["ni_model"] not in ("fixed", "scaled"):
        raise ValueError("ni_model must be 'fixed' or 'scaled'")
    for k, v in cast.items():
        if k in _POSITIVE_FIELDS and not (math.isfinite(v) and v > 0.0):
            raise ValueError(f"{k} must be finite and > 0 (got {v!r})")
    return replace(mat, **cast)
