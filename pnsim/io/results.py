# -*- coding: utf-8 -*-
"""
Results IO helpers.

Write:
  * metrics.json   (scalar junction summary)
  * profiles.npz   (sampled profiles, keyed like JunctionProfiles.as_dict())
  * profiles CSV   (same columns, one row per grid node)

SI units on disk (eV for energies); converting for display is the reader's job.
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict

import numpy as np

from pnsim.physics.profiles import JunctionProfiles

PROFILE_COLUMNS = (
    "x_m", "rho_Cm3", "E_V_per_m", "V_V", "n_m3", "p_m3",
    "Ec_eV", "Ev_eV", "Ei_eV", "EF_eV",
)

def write_metrics(run_dir: Path, metrics: Dict[str, Any]) -> Path:
    run_dir = Path(run_dir)
    run_dir.mkdir(parents=True, exist_ok=True)
    out = run_dir / "metrics.json"
    with open(out, "w") as f:
        json.dump(metrics, f, indent=2, sort_keys=True)
    return out

def save_profiles_npz(run_dir: Path, profiles: JunctionProfiles) -> Path:
    run_dir = Path(run_dir)
    run_dir.mkdir(parents=True, exist_ok=True)
    out = run_dir / "profiles.npz"
    np.savez_compressed(out, **profiles.as_dict())
    return out

def profile_table(profiles: JunctionProfiles) -> np.ndarray:
    """(N, 10) array with columns in PROFILE_COLUMNS order."""
    d = profiles.as_dict()
    return np.column_stack([d[c] for c in PROFILE_COLUMNS])

def write_profiles_csv(path: Path, profiles: JunctionProfiles) -> Path:
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(path, profile_table(profiles), delimiter=",",
               header=",".join(PROFILE_COLUMNS), comments="")
    return path
