"""
Lightweight plotting helpers for junction profiles.

Inputs are the SI arrays produced by ``pnsim.physics.profiles``; axes are
drawn in display units (µm, cm^-3, V/cm, C/cm^3).
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt

from pnsim.physics.profiles import JunctionProfiles
from pnsim.utils.units import Cm3_to_Ccm3, V_per_m_to_V_per_cm, m3_to_cm3, m_to_um

__all__ = ["plot_band_diagram", "plot_electrostatics", "plot_carriers"]


def _c64(x):
    return np.ascontiguousarray(np.asarray(x, dtype=np.float64))


def _mark_depletion(ax: plt.Axes, profiles: JunctionProfiles) -> None:
    eq = profiles.equilibrium
    if eq.W_m <= 0.0:
        return
    for edge in (-eq.xp_m, eq.xn_m):
        ax.axvline(float(m_to_um(edge)), color="0.5", linestyle=":", linewidth=0.9)
    ax.axvline(0.0, color="0.3", linestyle="--", linewidth=0.8)


def plot_band_diagram(
    x_m: Iterable[float],
    Ec_eV: Iterable[float],
    Ev_eV: Iterable[float],
    EF_eV: float | Iterable[float],
    Ei_eV: Optional[Iterable[float]] = None,
    *,
    ax: plt.Axes | None = None,
    title: str | None = "PN Junction Band Diagram",
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot Ec, Ev, EF (and optionally Ei) across x with axes in µm/eV.

    Parameters
    ----------
    x_m : iterable of float
        Node coordinates [m].
    Ec_eV, Ev_eV : iterable of float
        Conduction/valence band edges [eV] at nodes.
    EF_eV : float or array-like
        Fermi level [eV]. Scalar is drawn as a flat line.
    Ei_eV : iterable of float, optional
        Intrinsic level [eV], drawn dotted.
    ax : matplotlib Axes, optional
        If provided, plot into this axes; otherwise create a new figure.
    title : str, optional
        Title for the plot.

    Returns
    -------
    fig, ax : matplotlib Figure and Axes
    """
    x_um = m_to_um(x_m)
    EC = _c64(Ec_eV)
    EV = _c64(Ev_eV)

    EF_raw = np.asarray(EF_eV, dtype=np.float64)
    if EF_raw.ndim == 0 or EF_raw.size == 1:
        EF = np.full_like(EC, float(EF_raw.ravel()[0]))
    elif EF_raw.shape != EC.shape:
        EF = np.resize(EF_raw, EC.shape)
    else:
        EF = EF_raw

    if ax is None:
        fig, ax = plt.subplots(figsize=(6.0, 3.2), constrained_layout=True)
    else:
        fig = ax.figure

    ax.plot(x_um, EC, label=r"$E_C$", linewidth=1.8)
    ax.plot(x_um, EV, label=r"$E_V$", linewidth=1.8)
    ax.plot(x_um, EF, label=r"$E_F$", linestyle="--", linewidth=1.4)
    if Ei_eV is not None:
        ax.plot(x_um, _c64(Ei_eV), label=r"$E_i$", linestyle=":", linewidth=1.2)

    ax.set_xlabel("x (µm)")
    ax.set_ylabel("Energy (eV)")
    if title:
        ax.set_title(title)

    ax.grid(True, which="both", linestyle=":", linewidth=0.6)
    ax.legend(frameon=False, ncol=4, loc="best")

    ymin = float(min(EC.min(), EV.min(), EF.min()))
    ymax = float(max(EC.max(), EV.max(), EF.max()))
    pad = 0.05 * (ymax - ymin if ymax > ymin else 1.0)
    ax.set_ylim(ymin - pad, ymax + pad)

    return fig, ax


def plot_electrostatics(
    profiles: JunctionProfiles,
    *,
    title: str | None = "PN Junction Electrostatics",
) -> Tuple[plt.Figure, np.ndarray]:
    """Charge density, field and potential stacked on a shared µm axis."""
    x_um = m_to_um(profiles.x_m)
    fig, axes = plt.subplots(3, 1, figsize=(6.0, 7.0), sharex=True, constrained_layout=True)

    panels = (
        (Cm3_to_Ccm3(profiles.rho.values), r"$\rho$ (C/cm$^3$)"),
        (V_per_m_to_V_per_cm(profiles.E.values), "E (V/cm)"),
        (_c64(profiles.V.values), "V (V)"),
    )
    for ax, (vals, label) in zip(axes, panels):
        ax.plot(x_um, vals, linewidth=1.6)
        ax.set_ylabel(label)
        ax.grid(True, linestyle=":", linewidth=0.6)
        _mark_depletion(ax, profiles)

    axes[-1].set_xlabel("x (µm)")
    if title:
        axes[0].set_title(title)
    return fig, axes


def plot_carriers(
    profiles: JunctionProfiles,
    *,
    ax: plt.Axes | None = None,
    title: str | None = "Carrier Densities",
) -> Tuple[plt.Figure, plt.Axes]:
    """n(x), p(x) on a log axis in cm^-3."""
    x_um = m_to_um(profiles.x_m)
    if ax is None:
        fig, ax = plt.subplots(figsize=(6.0, 3.2), constrained_layout=True)
    else:
        fig = ax.figure

    # log axis: zeros only occur in degenerate single-sample output
    n = np.maximum(m3_to_cm3(profiles.n.values), 1e-300)
    p = np.maximum(m3_to_cm3(profiles.p.values), 1e-300)
    ax.semilogy(x_um, n, label="n", linewidth=1.6)
    ax.semilogy(x_um, p, label="p", linewidth=1.6)
    _mark_depletion(ax, profiles)

    ax.set_xlabel("x (µm)")
    ax.set_ylabel(r"Density (cm$^{-3}$)")
    if title:
        ax.set_title(title)
    ax.grid(True, which="both", linestyle=":", linewidth=0.6)
    ax.legend(frameon=False, loc="best")
    return fig, ax
