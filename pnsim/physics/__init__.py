from __future__ import annotations
from .equilibrium import (
    JunctionParams, DepletionGeometry, EquilibriumResult, CarrierDensities, BandDisplay,
    thermal_voltage, built_in_potential, depletion_width, max_electric_field,
    carrier_densities, band_diagram,
)
from .profiles import ProfileWindow, SpatialProfile, JunctionProfiles, generate_profiles

__all__ = [
    "JunctionParams", "DepletionGeometry", "EquilibriumResult", "CarrierDensities", "BandDisplay",
    "thermal_voltage", "built_in_potential", "depletion_width", "max_electric_field",
    "carrier_densities", "band_diagram",
    "ProfileWindow", "SpatialProfile", "JunctionProfiles", "generate_profiles",
]
