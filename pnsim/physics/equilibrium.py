# pnsim/physics/equilibrium.py
"""
Scalar equilibrium parameters of an abrupt PN junction (depletion approximation).

- SI units throughout; band energies in eV.
- Every public function is total: invalid inputs (non-finite, non-positive)
  give zero-valued results instead of raising or returning NaN/Inf.
- The formula primitives here are shared with ``physics.profiles``; nothing
  is re-derived there.

Public API (stable):
    JunctionParams, DepletionGeometry, EquilibriumResult, CarrierDensities,
    BandDisplay
    thermal_voltage(T_K)
    built_in_potential(NA_m3, ND_m3, T_K, *, mat=None)
    depletion_width(NA_m3, ND_m3, Vbi_V, *, mat=None)
    max_electric_field(NA_m3, xp_m, *, mat=None)
    carrier_densities(NA_m3, ND_m3, *, mat=None, T_K=None)
    band_diagram(params, *, mat=None, display=None)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..materials.database import PhysicalConstants, get_material
from ..utils import logger as log
from ..utils.constants import K_B, K_B_EV, Q, CM3_PER_M3

__all__ = [
    "JunctionParams",
    "DepletionGeometry",
    "EquilibriumResult",
    "CarrierDensities",
    "BandDisplay",
    "thermal_voltage",
    "built_in_potential",
    "depletion_width",
    "max_electric_field",
    "carrier_densities",
    "band_diagram",
]


# -----------------------------------------------------------------------------
# Dataclasses
# -----------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class JunctionParams:
    """Inputs for an abrupt junction: acceptors on the left, donors on the right."""
    NA_m3: float
    ND_m3: float
    T_K: float = 300.0

    @classmethod
    def from_cm3(cls, NA_cm3: float, ND_cm3: float, T_K: float = 300.0) -> "JunctionParams":
        """Build from doping given in cm^-3 (the usual lab unit)."""
        return cls(
            NA_m3=float(NA_cm3) / CM3_PER_M3,
            ND_m3=float(ND_cm3) / CM3_PER_M3,
            T_K=float(T_K),
        )


@dataclass(frozen=True, slots=True)
class DepletionGeometry:
    W_m: float = 0.0
    xp_m: float = 0.0   # extent into the p side
    xn_m: float = 0.0   # extent into the n side


@dataclass(frozen=True, slots=True)
class CarrierDensities:
    """Bulk majority/minority densities [m^-3] on each side."""
    nN_m3: float = 0.0
    pN_m3: float = 0.0
    pP_m3: float = 0.0
    nP_m3: float = 0.0


@dataclass(frozen=True, slots=True)
class BandDisplay:
    """
    Presentation parameters for band diagrams (not physics).

    band_bending_factor : float
        Visual exaggeration applied to q*Vbi when placing the p-side band
        edges, so the bend stays visible at typical doping.
    edge_smoothing : float
        Width of the cosmetic transition band at each depletion edge as a
        fraction of W. 0 disables it.
    """
    band_bending_factor: float = 1.8
    edge_smoothing: float = 0.15


@dataclass(frozen=True, slots=True)
class EquilibriumResult:
    """Scalar junction state. Lengths [m], field [V/m], potential [V], energies [eV]."""
    Vbi_V: float = 0.0
    W_m: float = 0.0
    xp_m: float = 0.0
    xn_m: float = 0.0
    Emax_V_per_m: float = 0.0
    EcN_eV: float = 0.0
    EvN_eV: float = 0.0
    EcP_eV: float = 0.0
    EvP_eV: float = 0.0
    EF_eV: float = 0.0
    Ei_eV: float = 0.0

    @property
    def geometry(self) -> DepletionGeometry:
        return DepletionGeometry(W_m=self.W_m, xp_m=self.xp_m, xn_m=self.xn_m)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _mat(mat: Optional[PhysicalConstants]) -> PhysicalConstants:
    return get_material("Si") if mat is None else mat


def _positive(*vals: float) -> bool:
    """True when every value is a finite number > 0."""
    for v in vals:
        try:
            f = float(v)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(f) or f <= 0.0:
            return False
    return True


def _finite_or_zero(x: float) -> float:
    x = float(x)
    return x if math.isfinite(x) else 0.0


# -----------------------------------------------------------------------------
# Formula primitives
# -----------------------------------------------------------------------------

def thermal_voltage(T_K: float) -> float:
    """Thermal voltage V_T = k_B T / q [V]; 0 for an invalid temperature."""
    if not _positive(T_K):
        return 0.0
    return K_B * float(T_K) / Q


def built_in_potential(
    NA_m3: float,
    ND_m3: float,
    T_K: float,
    *,
    mat: Optional[PhysicalConstants] = None,
) -> float:
    """
    Built-in potential V_bi = (k_B T / q) ln(NA ND / n_i^2) [V].

    Returns 0 when NA, ND or T is non-finite or non-positive, or when the
    log argument is. A lightly doped pair with NA*ND <= n_i^2 gives V_bi <= 0,
    which ``depletion_width`` and the profile generator treat as degenerate.
    """
    m = _mat(mat)
    if not _positive(NA_m3, ND_m3, T_K):
        log.debug(f"built_in_potential: invalid input NA={NA_m3!r} ND={ND_m3!r} T={T_K!r}")
        return 0.0
    ni = m.ni_at(T_K)
    if not _positive(ni):
        return 0.0
    # ratio formed stepwise so 1e28*1e28 never has to be represented at once
    ratio = (float(NA_m3) / ni) * (float(ND_m3) / ni)
    if not _positive(ratio):
        return 0.0
    return _finite_or_zero(thermal_voltage(T_K) * math.log(ratio))


def depletion_width(
    NA_m3: float,
    ND_m3: float,
    Vbi_V: float,
    *,
    mat: Optional[PhysicalConstants] = None,
) -> DepletionGeometry:
    """
    Total and per-side depletion widths [m].

        W  = sqrt( (2 eps / q) (NA + ND)/(NA ND) V_bi )
        xp = W ND/(NA + ND),   xn = W NA/(NA + ND)

    so that xp NA = xn ND and xp + xn = W. Any invalid input, including
    V_bi <= 0, yields an all-zero geometry.
    """
    m = _mat(mat)
    eps = m.eps_F_per_m
    if not _positive(NA_m3, ND_m3, Vbi_V, eps):
        return DepletionGeometry()
    NA, ND, Vbi = float(NA_m3), float(ND_m3), float(Vbi_V)
    # (NA + ND)/(NA ND) == 1/NA + 1/ND, which cannot overflow
    W = math.sqrt(2.0 * eps / Q * (1.0 / NA + 1.0 / ND) * Vbi)
    if not _positive(W):
        return DepletionGeometry()
    xp = W * (ND / (NA + ND))
    xn = W * (NA / (NA + ND))
    return DepletionGeometry(W_m=W, xp_m=xp, xn_m=xn)


def max_electric_field(
    NA_m3: float,
    xp_m: float,
    *,
    mat: Optional[PhysicalConstants] = None,
) -> float:
    """Peak field magnitude |E|max = q NA xp / eps [V/m] at the junction."""
    m = _mat(mat)
    eps = m.eps_F_per_m
    if not _positive(NA_m3, xp_m, eps):
        return 0.0
    return _finite_or_zero(Q * float(NA_m3) * float(xp_m) / eps)


def carrier_densities(
    NA_m3: float,
    ND_m3: float,
    *,
    mat: Optional[PhysicalConstants] = None,
    T_K: Optional[float] = None,
) -> CarrierDensities:
    """
    Bulk carrier densities [m^-3] with complete ionization:
        n-side: n = ND, p = n_i^2/ND;  p-side: p = NA, n = n_i^2/NA.

    ``T_K`` only matters for ``ni_model="scaled"``; by default the reference
    temperature of ``mat`` is used. A side with invalid doping reports zeros.
    """
    m = _mat(mat)
    T = m.T_ref_K if T_K is None else T_K
    ni = m.ni_at(T) if _positive(T) else 0.0
    ni2 = ni * ni
    nN = pN = pP = nP = 0.0
    if _positive(ND_m3):
        nN = float(ND_m3)
        pN = _finite_or_zero(ni2 / nN)
    if _positive(NA_m3):
        pP = float(NA_m3)
        nP = _finite_or_zero(ni2 / pP)
    return CarrierDensities(nN_m3=nN, pN_m3=pN, pP_m3=pP, nP_m3=nP)


# -----------------------------------------------------------------------------
# Composition
# -----------------------------------------------------------------------------

def band_diagram(
    params: JunctionParams,
    *,
    mat: Optional[PhysicalConstants] = None,
    display: Optional[BandDisplay] = None,
) -> EquilibriumResult:
    """
    Full scalar state: V_bi, depletion geometry, peak field and band placement.

    Band edges are referenced to E_C on the n side (EcN = 0):
        EvN = -Eg
        EF  = -Eg/2 - kT ln(ND/n_i)
        EcP = -V_bi f,  EvP = EcP - Eg
        Ei  = -Eg/2
    with f = display.band_bending_factor (cosmetic, 1.8 by default). Ei
    ignores the small doping-independent DOS-asymmetry offset.
    """
    m = _mat(mat)
    disp = BandDisplay() if display is None else display
    NA, ND, T = params.NA_m3, params.ND_m3, params.T_K

    Vbi = built_in_potential(NA, ND, T, mat=m)
    geom = depletion_width(NA, ND, Vbi, mat=m)
    Emax = max_electric_field(NA, geom.xp_m, mat=m)

    Eg = _finite_or_zero(m.Eg_eV)
    kT_eV = K_B_EV * float(T) if _positive(T) else 0.0
    ni = m.ni_at(T) if _positive(T) else 0.0
    shift = math.log(float(ND) / ni) if _positive(ND, ni) else 0.0

    f = _finite_or_zero(disp.band_bending_factor)
    EcN = 0.0
    EvN = EcN - Eg
    EF = _finite_or_zero(-0.5 * Eg - kT_eV * shift)
    EcP = _finite_or_zero(-Vbi * f)
    EvP = EcP - Eg
    Ei = -0.5 * Eg

    return EquilibriumResult(
        Vbi_V=Vbi,
        W_m=geom.W_m,
        xp_m=geom.xp_m,
        xn_m=geom.xn_m,
        Emax_V_per_m=Emax,
        EcN_eV=EcN,
        EvN_eV=EvN,
        EcP_eV=EcP,
        EvP_eV=EvP,
        EF_eV=EF,
        Ei_eV=Ei,
    )
