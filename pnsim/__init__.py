"""pnsim: abrupt PN junction electrostatics at equilibrium (depletion approximation)."""
from __future__ import annotations

from .materials.database import PhysicalConstants, get_material
from .models.pn_junction import JunctionReport, analyze_junction
from .physics.equilibrium import BandDisplay, JunctionParams, band_diagram
from .physics.profiles import ProfileWindow, generate_profiles

__version__ = "0.1.0"

__all__ = [
    "PhysicalConstants",
    "get_material",
    "JunctionReport",
    "analyze_junction",
    "BandDisplay",
    "JunctionParams",
    "band_diagram",
    "ProfileWindow",
    "generate_profiles",
]
