"""
Abrupt PN junction at equilibrium: one-call facade over the physics modules.

- Scalars from ``physics.equilibrium`` (V_bi, W, xp, xn, Emax, band placement)
- Bulk carrier densities (mass-action law per side)
- Sampled profiles from ``physics.profiles`` on a fixed window

Everything is recomputed from the inputs on every call; a UI recomputes on
each input change and replaces the previous report wholesale.

Example:
    from pnsim.models.pn_junction import analyze_junction
    from pnsim.physics import JunctionParams
    rep = analyze_junction(JunctionParams.from_cm3(1e17, 1e17))
    rep.equilibrium.Vbi_V   # ~0.81 V for Si at 300 K
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..materials.database import PhysicalConstants, get_material
from ..physics.equilibrium import (
    BandDisplay,
    CarrierDensities,
    EquilibriumResult,
    JunctionParams,
    band_diagram,
    carrier_densities,
)
from ..physics.profiles import JunctionProfiles, ProfileWindow, generate_profiles

__all__ = [
    "JunctionReport",
    "analyze_junction",
]


# -----------------------------------------------------------------------------
# Dataclasses
# -----------------------------------------------------------------------------

@dataclass(slots=True)
class JunctionReport:
    """Outputs suitable for band-diagram plotting and analysis."""
    params: JunctionParams
    material: PhysicalConstants
    equilibrium: EquilibriumResult
    carriers: CarrierDensities
    profiles: JunctionProfiles

    def summary(self) -> Dict[str, Any]:
        """Flat scalar summary in SI (eV for energies); JSON-friendly."""
        eq, c = self.equilibrium, self.carriers
        return {
            "material": self.material.name,
            "NA_m3": float(self.params.NA_m3),
            "ND_m3": float(self.params.ND_m3),
            "T_K": float(self.params.T_K),
            "Vbi_V": eq.Vbi_V,
            "W_m": eq.W_m,
            "xp_m": eq.xp_m,
            "xn_m": eq.xn_m,
            "Emax_V_per_m": eq.Emax_V_per_m,
            "EcN_eV": eq.EcN_eV,
            "EvN_eV": eq.EvN_eV,
            "EcP_eV": eq.EcP_eV,
            "EvP_eV": eq.EvP_eV,
            "EF_eV": eq.EF_eV,
            "Ei_eV": eq.Ei_eV,
            "nN_m3": c.nN_m3,
            "pN_m3": c.pN_m3,
            "pP_m3": c.pP_m3,
            "nP_m3": c.nP_m3,
            "degenerate": bool(self.profiles.degenerate),
        }


# -----------------------------------------------------------------------------
# Main entry
# -----------------------------------------------------------------------------

def analyze_junction(
    params: JunctionParams,
    *,
    mat: Optional[PhysicalConstants] = None,
    window: Optional[ProfileWindow] = None,
    display: Optional[BandDisplay] = None,
) -> JunctionReport:
    """Evaluate scalars, bulk carriers and profiles for one input set."""
    m = get_material("Si") if mat is None else mat
    disp = BandDisplay() if display is None else display

    eq = band_diagram(params, mat=m, display=disp)
    carriers = carrier_densities(params.NA_m3, params.ND_m3, mat=m, T_K=params.T_K)
    profiles = generate_profiles(params, mat=m, window=window, display=disp)

    return JunctionReport(
        params=params,
        material=m,
        equilibrium=eq,
        carriers=carriers,
        profiles=profiles,
    )
