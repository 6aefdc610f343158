# -*- coding: utf-8 -*-
"""
Doping sweep: junction scalars over a grid of acceptor concentrations.

Each row is an independent ``band_diagram`` evaluation; degenerate points
(e.g. NA*ND <= n_i^2) stay in the table with zero-valued results.
"""
from __future__ import annotations
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from pnsim.materials.database import PhysicalConstants
from pnsim.physics.equilibrium import JunctionParams, band_diagram
from pnsim.utils.constants import CM3_PER_M3
from pnsim.utils.diagnostics import log_sweep_row

SWEEP_COLUMNS = ["NA_m3", "ND_m3", "T_K", "Vbi_V", "W_m", "xp_m", "xn_m", "Emax_V_per_m"]

def log_doping_grid(start_cm3: float, stop_cm3: float, num: int) -> np.ndarray:
    """Log-spaced doping values given in cm^-3, returned in m^-3."""
    if start_cm3 <= 0 or stop_cm3 <= 0:
        raise ValueError("Doping grid bounds must be > 0")
    if int(num) < 1:
        raise ValueError("num must be >= 1")
    return np.logspace(np.log10(start_cm3), np.log10(stop_cm3), int(num)) / CM3_PER_M3

def sweep_doping(
    NA_values_m3: Iterable[float],
    ND_m3: float,
    T_K: float = 300.0,
    *,
    mat: Optional[PhysicalConstants] = None,
) -> pd.DataFrame:
    rows = []
    for NA in NA_values_m3:
        eq = band_diagram(JunctionParams(NA_m3=float(NA), ND_m3=float(ND_m3), T_K=float(T_K)), mat=mat)
        row = {
            "NA_m3": float(NA),
            "ND_m3": float(ND_m3),
            "T_K": float(T_K),
            "Vbi_V": eq.Vbi_V,
            "W_m": eq.W_m,
            "xp_m": eq.xp_m,
            "xn_m": eq.xn_m,
            "Emax_V_per_m": eq.Emax_V_per_m,
        }
        log_sweep_row(row)
        rows.append(row)
    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)

def write_sweep_csv(df: pd.DataFrame, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path
