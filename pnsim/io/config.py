# pnsim/io/config.py
# -*- coding: utf-8 -*-
"""
YAML → JunctionParams, PhysicalConstants, ProfileWindow and BandDisplay.

Schema (only ``junction`` is required):

junction:
  NA_cm3: 1e17
  ND_cm3: 1e17
  T_K: 300
material:
  name: Si            # Si | Ge | GaAs
  ni_model: fixed     # fixed | scaled
  # any PhysicalConstants field may be overridden, e.g. eps_rel: 11.9
profile:
  num_points: 500
  half_width_um: 0.5
display:
  band_bending_factor: 1.8
  edge_smoothing: 0.15

Overrides use dotted keys, e.g. ``junction.NA_cm3=5e16``; the value is parsed
with ``yaml.safe_load`` so numbers, booleans and strings come out typed.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

import yaml

from pnsim.materials.database import PhysicalConstants, get_material, with_overrides
from pnsim.physics.equilibrium import BandDisplay, JunctionParams
from pnsim.physics.profiles import DEFAULT_NUM_POINTS, DEFAULT_HALF_WIDTH_M, ProfileWindow

@dataclass
class RunConfig:
    raw: dict
    path: Path | None = None

def load_config(path: Path) -> RunConfig:
    data = yaml.safe_load(Path(path).read_text())
    return config_from_dict(data, path=Path(path))

def config_from_dict(data: Any, path: Path | None = None) -> RunConfig:
    if not isinstance(data, dict):
        raise ValueError("Top-level YAML must be a mapping")
    _validate_minimum(data)
    return RunConfig(raw=data, path=path)

def apply_overrides(cfg: RunConfig, overrides: Iterable[str]) -> RunConfig:
    """Apply ``a.b.c=value`` strings in place; returns ``cfg`` for chaining."""
    for item in overrides:
        if "=" not in item:
            raise ValueError(f"Override must look like key.path=value (got '{item}')")
        key, value = item.split("=", 1)
        parts = [p for p in key.strip().split(".") if p]
        if not parts:
            raise ValueError(f"Empty override key in '{item}'")
        node = cfg.raw
        for p in parts[:-1]:
            child = node.setdefault(p, {})
            if not isinstance(child, dict):
                raise ValueError(f"Cannot override below non-mapping key '{p}'")
            node = child
        node[parts[-1]] = yaml.safe_load(value)
    _validate_minimum(cfg.raw)
    return cfg

def build_params(cfg: RunConfig) -> JunctionParams:
    j = cfg.raw["junction"]
    return JunctionParams.from_cm3(
        NA_cm3=_float(j, "NA_cm3"),
        ND_cm3=_float(j, "ND_cm3"),
        T_K=float(j.get("T_K", 300.0)),
    )

def build_material(cfg: RunConfig) -> PhysicalConstants:
    m = dict(cfg.raw.get("material") or {})
    name = str(m.pop("name", "Si"))
    try:
        base = get_material(name)
    except KeyError as exc:
        raise ValueError(str(exc)) from exc
    if not m:
        return base
    try:
        return with_overrides(base, **m)
    except KeyError as exc:
        raise ValueError(str(exc)) from exc

def build_window(cfg: RunConfig) -> ProfileWindow:
    p = cfg.raw.get("profile") or {}
    hw_um = p.get("half_width_um")
    return ProfileWindow(
        half_width_m=float(hw_um) * 1e-6 if hw_um is not None else DEFAULT_HALF_WIDTH_M,
        num_points=int(p.get("num_points", DEFAULT_NUM_POINTS)),
    )

def build_display(cfg: RunConfig) -> BandDisplay:
    d = cfg.raw.get("display") or {}
    defaults = BandDisplay()
    return BandDisplay(
        band_bending_factor=float(d.get("band_bending_factor", defaults.band_bending_factor)),
        edge_smoothing=float(d.get("edge_smoothing", defaults.edge_smoothing)),
    )

def _float(section: dict, key: str) -> float:
    if key not in section:
        raise ValueError(f"Missing junction.{key}")
    return float(section[key])

def _validate_minimum(cfg: dict) -> None:
    if "junction" not in cfg:
        raise ValueError("Missing top-level key: junction")
    if not isinstance(cfg["junction"], dict):
        raise ValueError("junction must be a mapping")
    for key in ("material", "profile", "display"):
        if cfg.get(key) is not None and not isinstance(cfg[key], dict):
            raise ValueError(f"{key} must be a mapping")
