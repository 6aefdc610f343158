"""
pnsim/utils/diagnostics.py

Low-noise consistency checks on computed profiles.
Call these from the CLI or workflows when debug output is wanted.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from . import logger as log


def _fmt_range(x: np.ndarray, name: str) -> str:
    if x.size == 0:
        return f"{name}: (empty)"
    return f"{name}∈[{np.min(x):+.3e},{np.max(x):+.3e}]"


def log_profile_summary(profiles, *, prefix: str = "[diag]") -> str:
    """Compact value ranges of the sampled fields; returned and logged at debug level."""
    eq = profiles.equilibrium
    msg = " | ".join([
        prefix,
        f"N={profiles.x_m.size}",
        f"Vbi={eq.Vbi_V:.4f} V",
        f"W={eq.W_m:.3e} m",
        _fmt_range(profiles.E.values, "E"),
        _fmt_range(profiles.V.values, "V"),
        _fmt_range(profiles.n.values, "n"),
        _fmt_range(profiles.p.values, "p"),
        f"degenerate={profiles.degenerate}",
    ])
    log.debug(msg)
    return msg


def check_neutrality(
    x_m: np.ndarray,
    rho_Cm3: np.ndarray,
    *,
    prefix: str = "[diag]",
) -> float:
    """
    Net charge per unit area [C/m^2] (rectangle rule on the sampled grid).
    At equilibrium this should be within ~q*max(NA,ND)*dx of zero.
    """
    x = np.asarray(x_m, dtype=np.float64)
    rho = np.asarray(rho_Cm3, dtype=np.float64)
    if x.size < 2:
        return 0.0
    dx = float(x[1] - x[0])
    total = float(np.sum(rho) * dx)
    log.debug(f"{prefix} charge audit: Q_area={total:+.3e} C/m^2")
    return total


def check_mass_action(
    n: np.ndarray,
    p: np.ndarray,
    ni: float,
    *,
    prefix: str = "[diag]",
) -> float:
    """Largest relative deviation of n*p from n_i^2 (0 for empty input)."""
    n = np.asarray(n, dtype=np.float64)
    p = np.asarray(p, dtype=np.float64)
    ni2 = float(ni) ** 2
    if n.size == 0 or ni2 <= 0.0:
        return 0.0
    dev = float(np.max(np.abs(n * p / ni2 - 1.0)))
    log.debug(f"{prefix} mass action: max|np/ni^2 - 1|={dev:.3e}")
    return dev


def log_sweep_row(row: dict, *, prefix: str = "[sweep]", sink: Optional[Callable[[str], None]] = None) -> None:
    """One line per sweep point."""
    line = (
        f"{prefix} NA={row['NA_m3']:.3e} m^-3 ND={row['ND_m3']:.3e} m^-3 | "
        f"Vbi={row['Vbi_V']:.4f} V | W={row['W_m']:.3e} m | "
        f"Emax={row['Emax_V_per_m']:.3e} V/m"
    )
    (sink or log.debug)(line)
