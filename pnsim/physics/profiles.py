# pnsim/physics/profiles.py
"""
Sampled spatial profiles of an abrupt PN junction (depletion approximation).

- p side on the left (x < 0), n side on the right, metallurgical junction at x = 0.
- Fixed physical window: the grid never follows the depletion width, so a
  doping change moves the depletion edges inside a stable frame.
- Piecewise closed forms per region (p bulk | p depletion | n depletion | n bulk);
  no Poisson iteration.
- SI units for x, rho, E, V, n, p; band energies in eV.

Public API (stable):
    ProfileWindow, SpatialProfile, JunctionProfiles
    sample_grid(window)
    charge_density(x, NA_m3, ND_m3, geom)
    electric_field(x, NA_m3, ND_m3, geom, *, mat=None)
    potential(x, NA_m3, ND_m3, Vbi_V, geom, *, mat=None)
    carrier_profile(V, ND_m3, Vbi_V, T_K, *, mat=None, clip=50.0)
    clamp_error_bound(V, Vbi_V, T_K, clip=50.0)
    band_profile(x, V, eq, *, NA_m3, ND_m3, mat=None, display=None)
    generate_profiles(params, *, mat=None, window=None, display=None)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from ..materials.database import PhysicalConstants
from ..utils import logger as log
from ..utils.constants import Q
from .equilibrium import (
    BandDisplay,
    DepletionGeometry,
    EquilibriumResult,
    JunctionParams,
    _mat,
    _positive,
    band_diagram,
    thermal_voltage,
)

__all__ = [
    "ProfileWindow",
    "SpatialProfile",
    "JunctionProfiles",
    "sample_grid",
    "charge_density",
    "electric_field",
    "potential",
    "carrier_profile",
    "clamp_error_bound",
    "band_profile",
    "generate_profiles",
]

EXP_CLIP = 50.0  # |psi| / V_T limit before exponentiation
DEFAULT_HALF_WIDTH_M = 0.5e-6
DEFAULT_NUM_POINTS = 500


# -----------------------------------------------------------------------------
# Dataclasses
# -----------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProfileWindow:
    """Sampling window [-half_width, +half_width] with ``num_points`` nodes."""
    half_width_m: float = DEFAULT_HALF_WIDTH_M
    num_points: int = DEFAULT_NUM_POINTS

    def resolved(self) -> Tuple[float, int]:
        """(half_width, N) with invalid values replaced by safe ones."""
        hw = self.half_width_m
        if not _positive(hw):
            hw = DEFAULT_HALF_WIDTH_M
        try:
            N = int(self.num_points)
        except (TypeError, ValueError, OverflowError):
            N = DEFAULT_NUM_POINTS
        return float(hw), max(N, 2)


@dataclass(slots=True)
class SpatialProfile:
    """One sampled quantity: ``values[i]`` at position ``x_m[i]``."""
    name: str
    unit: str
    x_m: np.ndarray
    values: np.ndarray

    def __len__(self) -> int:
        return int(self.x_m.size)

    def samples(self) -> Iterator[Tuple[float, float]]:
        for xi, vi in zip(self.x_m, self.values):
            yield float(xi), float(vi)


@dataclass(slots=True)
class JunctionProfiles:
    """All sampled quantities on one shared grid."""
    x_m: np.ndarray
    rho: SpatialProfile
    E: SpatialProfile
    V: SpatialProfile
    n: SpatialProfile
    p: SpatialProfile
    Ec: SpatialProfile
    Ev: SpatialProfile
    Ei: SpatialProfile
    EF: SpatialProfile
    equilibrium: EquilibriumResult
    degenerate: bool = False

    def as_dict(self) -> Dict[str, np.ndarray]:
        """Plain arrays keyed by ``<quantity>_<unit>``."""
        out = {"x_m": self.x_m}
        for prof in (self.rho, self.E, self.V, self.n, self.p,
                     self.Ec, self.Ev, self.Ei, self.EF):
            out[f"{prof.name}_{prof.unit}"] = prof.values
        return out


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _c64(x) -> np.ndarray:
    return np.ascontiguousarray(np.asarray(x, dtype=np.float64))


def _finite(a: np.ndarray) -> np.ndarray:
    a = _c64(a)
    return np.where(np.isfinite(a), a, 0.0)


def _segments(x: np.ndarray, geom: DepletionGeometry) -> Tuple[np.ndarray, np.ndarray]:
    """Masks of the p-side [-xp, 0) and n-side [0, xn] depletion segments."""
    if not _positive(geom.W_m, geom.xp_m, geom.xn_m):
        none = np.zeros(x.shape, dtype=bool)
        return none, none
    p_seg = (x >= -geom.xp_m) & (x < 0.0)
    n_seg = (x >= 0.0) & (x <= geom.xn_m)
    return p_seg, n_seg


def _hermite_patch(
    x: np.ndarray,
    y: np.ndarray,
    a: float,
    b: float,
    ya: float,
    yb: float,
    ma: float,
    mb: float,
) -> np.ndarray:
    """
    Replace y on (a, b) by the cubic Hermite through (a, ya, ma) and (b, yb, mb).
    Slopes are limited (Fritsch–Carlson) so the patch stays monotone.
    """
    h = b - a
    inside = (x > a) & (x < b)
    if h <= 0.0 or not inside.any():
        return y
    delta = yb - ya
    if delta != 0.0:
        alpha, beta = ma * h / delta, mb * h / delta
        tau = alpha * alpha + beta * beta
        if tau > 9.0:
            s = 3.0 / math.sqrt(tau)
            ma, mb = ma * s, mb * s
    s = (x[inside] - a) / h
    s2, s3 = s * s, s * s * s
    smooth = 3.0 * s2 - 2.0 * s3                  # smoothstep, h01
    out = y.copy()
    out[inside] = (
        (1.0 - smooth) * ya
        + smooth * yb
        + (s3 - 2.0 * s2 + s) * h * ma
        + (s3 - s2) * h * mb
    )
    return out


# -----------------------------------------------------------------------------
# Piecewise closed forms
# -----------------------------------------------------------------------------

def sample_grid(window: Optional[ProfileWindow] = None) -> np.ndarray:
    """Uniform, strictly increasing grid over the fixed window [m]."""
    hw, N = (window or ProfileWindow()).resolved()
    return np.linspace(-hw, hw, N, dtype=np.float64)


def charge_density(
    x: np.ndarray,
    NA_m3: float,
    ND_m3: float,
    geom: DepletionGeometry,
) -> np.ndarray:
    """rho(x) [C/m^3]: -q NA on [-xp, 0), +q ND on [0, xn], 0 in the neutral bulk."""
    x = _c64(x)
    rho = np.zeros_like(x)
    if not _positive(NA_m3, ND_m3):
        return rho
    p_seg, n_seg = _segments(x, geom)
    rho[p_seg] = -Q * float(NA_m3)
    rho[n_seg] = +Q * float(ND_m3)
    return rho


def electric_field(
    x: np.ndarray,
    NA_m3: float,
    ND_m3: float,
    geom: DepletionGeometry,
    *,
    mat: Optional[PhysicalConstants] = None,
) -> np.ndarray:
    """
    E(x) [V/m], linear on each depletion segment and zero outside:
        p side: E = -(q NA/eps)(x + xp)
        n side: E = -(q ND/eps)(xn - x)
    Continuous at x = 0 where it reaches -Emax (field points n -> p).
    """
    m = _mat(mat)
    eps = m.eps_F_per_m
    x = _c64(x)
    E = np.zeros_like(x)
    if not _positive(NA_m3, ND_m3, eps):
        return E
    p_seg, n_seg = _segments(x, geom)
    E[p_seg] = -(Q * float(NA_m3) / eps) * (x[p_seg] + geom.xp_m)
    E[n_seg] = -(Q * float(ND_m3) / eps) * (geom.xn_m - x[n_seg])
    return E


def potential(
    x: np.ndarray,
    NA_m3: float,
    ND_m3: float,
    Vbi_V: float,
    geom: DepletionGeometry,
    *,
    mat: Optional[PhysicalConstants] = None,
) -> np.ndarray:
    """
    V(x) [V]: 0 in the p bulk, Vbi in the n bulk, quadratic in between:
        p side: V = (q NA / 2eps)(x + xp)^2
        n side: V = Vbi - (q ND / 2eps)(xn - x)^2
    Both branches meet at x = 0 because q(NA xp^2 + ND xn^2)/2eps = Vbi.
    """
    m = _mat(mat)
    eps = m.eps_F_per_m
    x = _c64(x)
    V = np.zeros_like(x)
    if not _positive(NA_m3, ND_m3, Vbi_V, eps, geom.W_m):
        return V
    V[x > geom.xn_m] = float(Vbi_V)
    p_seg, n_seg = _segments(x, geom)
    V[p_seg] = (0.5 * Q * float(NA_m3) / eps) * (x[p_seg] + geom.xp_m) ** 2
    V[n_seg] = float(Vbi_V) - (0.5 * Q * float(ND_m3) / eps) * (geom.xn_m - x[n_seg]) ** 2
    return V


def carrier_profile(
    V: np.ndarray,
    ND_m3: float,
    Vbi_V: float,
    T_K: float,
    *,
    mat: Optional[PhysicalConstants] = None,
    clip: float = EXP_CLIP,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Boltzmann carrier densities n(x), p(x) [m^-3] from the potential.

    psi = V - Vbi is the potential relative to the n-side neutral level, so
    n -> ND, p -> n_i^2/ND in the n bulk and n -> n_i^2/NA, p -> NA in the
    p bulk. psi is clipped to +-clip*V_T before exponentiation; both
    densities use the same clipped value, so n*p = n_i^2 at every sample.
    """
    m = _mat(mat)
    V = _c64(V)
    VT = thermal_voltage(T_K)
    ni = m.ni_at(T_K) if _positive(T_K) else 0.0
    if not _positive(ND_m3, VT, ni) or not math.isfinite(float(Vbi_V)):
        zeros = np.zeros_like(V)
        return zeros, zeros.copy()
    ND = float(ND_m3)
    psi = np.clip(V - float(Vbi_V), -clip * VT, clip * VT)
    n = ND * np.exp(psi / VT)
    p = (ni * ni / ND) * np.exp(-psi / VT)
    return _finite(n), _finite(p)


def clamp_error_bound(
    V: np.ndarray,
    Vbi_V: float,
    T_K: float,
    clip: float = EXP_CLIP,
) -> float:
    """
    Worst relative error of n or p caused by the exponent clip.

    The clip shortens |psi|/V_T by at most max(|psi|/V_T - clip, 0), so each
    density is off by at most a factor exp(excess); the value returned is
    exp(excess) - 1 (0 when the clip never engages). n*p is unaffected.
    """
    VT = thermal_voltage(T_K)
    V = _c64(V)
    if VT <= 0.0 or not (math.isfinite(float(Vbi_V)) and math.isfinite(float(clip))):
        return 0.0
    # non-finite samples carry no usable psi
    V = V[np.isfinite(V)]
    if V.size == 0:
        return 0.0
    excess = float(np.max(np.abs(V - float(Vbi_V)) / VT)) - float(clip)
    if excess <= 0.0:
        return 0.0
    return math.expm1(min(excess, 700.0))


def band_profile(
    x: np.ndarray,
    V: np.ndarray,
    eq: EquilibriumResult,
    *,
    NA_m3: float,
    ND_m3: float,
    mat: Optional[PhysicalConstants] = None,
    display: Optional[BandDisplay] = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Band edges along x [eV]: (Ec, Ev, Ei, EF).

    Ec = EcP + f V(x), which runs from EcP in the p bulk to EcN = 0 in the n
    bulk; Ev = Ec - Eg, Ei = Ec - Eg/2, EF flat. When
    ``display.edge_smoothing`` > 0, Ec is replaced near each depletion edge
    by a monotone cubic blend over a band of width ~edge_smoothing*W. The
    blend is cosmetic only; rho, E, V and the depletion widths are untouched.
    """
    m = _mat(mat)
    disp = BandDisplay() if display is None else display
    f = float(disp.band_bending_factor) if math.isfinite(disp.band_bending_factor) else 0.0
    x = _c64(x)
    V = _c64(V)
    geom = eq.geometry

    Ec = eq.EcP_eV + f * V
    frac = float(disp.edge_smoothing)
    if math.isfinite(frac) and frac > 0.0 and geom.W_m > 0.0:
        t = frac * geom.W_m
        tp, tn = min(t, geom.xp_m), min(t, geom.xn_m)

        def _ec_and_slope(pts):
            pts = _c64(pts)
            Vp = potential(pts, NA_m3, ND_m3, eq.Vbi_V, geom, mat=m)
            Ep = electric_field(pts, NA_m3, ND_m3, geom, mat=m)
            return eq.EcP_eV + f * Vp, -f * Ep          # dV/dx = -E

        # p edge: flat side of width tp/2, curved side of width tp keeps the
        # Hermite slopes inside the monotone region
        a, b = -geom.xp_m - 0.5 * tp, -geom.xp_m + tp
        (ya, yb), (ma, mb) = _ec_and_slope([a, b])
        Ec = _hermite_patch(x, Ec, a, b, ya, yb, ma, mb)

        a, b = geom.xn_m - tn, geom.xn_m + 0.5 * tn
        (ya, yb), (ma, mb) = _ec_and_slope([a, b])
        Ec = _hermite_patch(x, Ec, a, b, ya, yb, ma, mb)

    Eg = float(m.Eg_eV)
    Ev = Ec - Eg
    Ei = Ec - 0.5 * Eg
    EF = np.full_like(Ec, eq.EF_eV)
    return _finite(Ec), _finite(Ev), _finite(Ei), _finite(EF)


# -----------------------------------------------------------------------------
# Main entry
# -----------------------------------------------------------------------------

def _bundle(
    x: np.ndarray,
    eq: EquilibriumResult,
    *,
    rho, E, V, n, p, Ec, Ev, Ei, EF,
    degenerate: bool,
) -> JunctionProfiles:
    def _p(name, unit, vals):
        return SpatialProfile(name=name, unit=unit, x_m=x, values=_finite(vals))

    return JunctionProfiles(
        x_m=x,
        rho=_p("rho", "Cm3", rho),
        E=_p("E", "V_per_m", E),
        V=_p("V", "V", V),
        n=_p("n", "m3", n),
        p=_p("p", "m3", p),
        Ec=_p("Ec", "eV", Ec),
        Ev=_p("Ev", "eV", Ev),
        Ei=_p("Ei", "eV", Ei),
        EF=_p("EF", "eV", EF),
        equilibrium=eq,
        degenerate=degenerate,
    )


def _degenerate_profiles(eq: EquilibriumResult) -> JunctionProfiles:
    zero = np.zeros(1, dtype=np.float64)
    return _bundle(
        zero.copy(), eq,
        rho=zero, E=zero, V=zero, n=zero, p=zero,
        Ec=zero, Ev=zero, Ei=zero, EF=zero,
        degenerate=True,
    )


def generate_profiles(
    params: JunctionParams,
    *,
    mat: Optional[PhysicalConstants] = None,
    window: Optional[ProfileWindow] = None,
    display: Optional[BandDisplay] = None,
) -> JunctionProfiles:
    """
    Sample rho, E, V, n, p and the band edges over the fixed window.

    The scalar state is recomputed from ``params`` with the same primitives
    as ``band_diagram``. Invalid inputs (non-finite or non-positive NA, ND, T,
    or NA*ND <= n_i^2) give one all-zero sample per profile with
    ``degenerate=True``.
    """
    m = _mat(mat)
    disp = BandDisplay() if display is None else display
    NA, ND, T = params.NA_m3, params.ND_m3, params.T_K

    eq = band_diagram(params, mat=m, display=disp)
    if not _positive(NA, ND, T) or eq.Vbi_V <= 0.0 or eq.W_m <= 0.0:
        log.debug(f"generate_profiles: degenerate input NA={NA!r} ND={ND!r} T={T!r}")
        return _degenerate_profiles(eq)

    x = sample_grid(window)
    geom = eq.geometry
    rho = charge_density(x, NA, ND, geom)
    E = electric_field(x, NA, ND, geom, mat=m)
    V = potential(x, NA, ND, eq.Vbi_V, geom, mat=m)
    n, p = carrier_profile(V, ND, eq.Vbi_V, T, mat=m)
    Ec, Ev, Ei, EF = band_profile(x, V, eq, NA_m3=NA, ND_m3=ND, mat=m, display=disp)

    return _bundle(
        x, eq,
        rho=rho, E=E, V=V, n=n, p=p, Ec=Ec, Ev=Ev, Ei=Ei, EF=EF,
        degenerate=False,
    )
