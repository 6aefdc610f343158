# -*- coding: utf-8 -*-
"""
Sampled rho/E/V/n/p/band profiles on the fixed window.
Run with:  pytest -q
"""
from __future__ import annotations

import math

import numpy as np
import pytest

from pnsim.materials.database import get_material
from pnsim.physics.equilibrium import BandDisplay, DepletionGeometry, JunctionParams, band_diagram
from pnsim.physics.profiles import (
    DEFAULT_HALF_WIDTH_M,
    DEFAULT_NUM_POINTS,
    ProfileWindow,
    band_profile,
    carrier_profile,
    charge_density,
    clamp_error_bound,
    electric_field,
    generate_profiles,
    potential,
    sample_grid,
)
from pnsim.utils.constants import Q
from pnsim.utils.diagnostics import check_mass_action, check_neutrality

SI = get_material("Si")


def _sym(N=1e23, **kw):
    return generate_profiles(JunctionParams(N, N), mat=SI, **kw)


def test_grid_is_fixed_and_uniform():
    x = sample_grid()
    assert x.size == DEFAULT_NUM_POINTS
    assert x[0] == -DEFAULT_HALF_WIDTH_M and x[-1] == DEFAULT_HALF_WIDTH_M
    dx = np.diff(x)
    assert np.all(dx > 0.0)
    assert np.allclose(dx, dx[0], rtol=1e-9)
    # window does not follow the depletion width
    a = generate_profiles(JunctionParams(1e21, 1e21), mat=SI)
    b = generate_profiles(JunctionParams(1e24, 1e24), mat=SI)
    assert np.array_equal(a.x_m, b.x_m)


def test_invalid_window_falls_back():
    x = sample_grid(ProfileWindow(half_width_m=-1.0, num_points=1))
    assert x.size == 2
    assert x[-1] == DEFAULT_HALF_WIDTH_M


def test_field_continuous_and_zero_at_edges():
    eq = band_diagram(JunctionParams(1e23, 1e22), mat=SI)
    geom = eq.geometry
    pts = np.array([-geom.xp_m, -1e-18, 0.0, geom.xn_m])
    E = electric_field(pts, 1e23, 1e22, geom, mat=SI)
    assert abs(E[0]) < 1e-9 * eq.Emax_V_per_m
    assert E[1] == pytest.approx(-eq.Emax_V_per_m, rel=1e-6)
    assert E[2] == pytest.approx(-eq.Emax_V_per_m, rel=1e-9)
    assert abs(E[3]) < 1e-9 * eq.Emax_V_per_m
    assert np.all(E <= 0.0)


def test_potential_endpoints_and_junction():
    NA, ND = 1e23, 1e22
    eq = band_diagram(JunctionParams(NA, ND), mat=SI)
    geom = eq.geometry
    V = potential(np.array([-1e-6, -geom.xp_m, -1e-18, 0.0, geom.xn_m, 1e-6]),
                  NA, ND, eq.Vbi_V, geom, mat=SI)
    assert V[0] == 0.0 and V[1] == pytest.approx(0.0, abs=1e-12)
    assert V[2] == pytest.approx(V[3], rel=1e-6)
    assert V[4] == pytest.approx(eq.Vbi_V, rel=1e-12)
    assert V[5] == eq.Vbi_V


def test_potential_is_monotone():
    prof = _sym()
    assert np.all(np.diff(prof.V.values) >= 0.0)
    assert prof.V.values[0] == 0.0
    assert prof.V.values[-1] == pytest.approx(prof.equilibrium.Vbi_V)


def test_charge_neutrality_on_grid():
    prof = generate_profiles(JunctionParams(1e23, 3e22), mat=SI)
    dx = float(prof.x_m[1] - prof.x_m[0])
    total = check_neutrality(prof.x_m, prof.rho.values)
    assert abs(total) <= 2.5 * Q * 1e23 * dx
    assert set(np.unique(prof.rho.values)) <= {0.0, -Q * 1e23, Q * 3e22}


def test_bulk_carriers_and_mass_action():
    prof = _sym()
    assert prof.p.values[0] == pytest.approx(1e23, rel=1e-9)
    assert prof.n.values[-1] == pytest.approx(1e23, rel=1e-9)
    assert check_mass_action(prof.n.values, prof.p.values, SI.ni_m3) < 1e-9
    assert clamp_error_bound(prof.V.values, prof.equilibrium.Vbi_V, 300.0) == 0.0


def test_clip_engages_for_extreme_doping():
    prof = _sym(1e28)
    eq = prof.equilibrium
    assert eq.Vbi_V / (1.380649e-23 * 300.0 / Q) > 50.0
    bound = clamp_error_bound(prof.V.values, eq.Vbi_V, 300.0)
    assert bound > 0.0 and math.isfinite(bound)
    assert np.all(np.isfinite(prof.n.values)) and np.all(np.isfinite(prof.p.values))
    # both densities share the clipped exponent
    assert check_mass_action(prof.n.values, prof.p.values, SI.ni_m3) < 1e-9


def test_clip_error_stays_within_bound():
    NA = ND = 1e28
    prof = _sym(NA)
    bound = clamp_error_bound(prof.V.values, prof.equilibrium.Vbi_V, 300.0)
    ni2 = SI.ni_m3 ** 2
    slack = 1.0 + 1e-9
    # p bulk: exact values would be p = NA, n = ni^2/NA
    assert abs(prof.p.values[0] / NA - 1.0) <= bound * slack
    assert abs(prof.n.values[0] / (ni2 / NA) - 1.0) <= bound * slack
    # n bulk sits at psi = 0, untouched by the clip
    assert prof.n.values[-1] == pytest.approx(ND, rel=1e-12)


@pytest.mark.parametrize(
    "params",
    [
        JunctionParams(0.0, 1e23),
        JunctionParams(1e23, -1.0),
        JunctionParams(float("nan"), 1e23),
        JunctionParams(1e23, float("inf")),
        JunctionParams(1e23, 1e23, 0.0),
        JunctionParams(1e23, 1e23, -1.0),
        JunctionParams(1e23, 1e23, float("nan")),
        JunctionParams(1e23, 1e23, float("inf")),
        JunctionParams(1e16, 1e16),
    ],
)
def test_degenerate_inputs_give_single_zero_sample(params):
    prof = generate_profiles(params, mat=SI)
    assert prof.degenerate
    for arr in prof.as_dict().values():
        assert arr.shape == (1,)
        assert arr[0] == 0.0


def test_smoothed_bands_are_monotone_and_local():
    params = JunctionParams(1e23, 2e22)
    smooth = generate_profiles(params, mat=SI, display=BandDisplay(edge_smoothing=0.15))
    sharp = generate_profiles(params, mat=SI, display=BandDisplay(edge_smoothing=0.0))
    eq = smooth.equilibrium
    Ec = smooth.Ec.values
    assert np.all(np.diff(Ec) >= -1e-12)
    assert Ec[0] == pytest.approx(eq.EcP_eV)
    assert Ec[-1] == pytest.approx(eq.EcN_eV, abs=1e-12)

    t = 0.15 * eq.W_m
    tp, tn = min(t, eq.xp_m), min(t, eq.xn_m)
    x = smooth.x_m
    outside = ((x <= -eq.xp_m - 0.5 * tp) | (x >= -eq.xp_m + tp)) & (
        (x <= eq.xn_m - tn) | (x >= eq.xn_m + 0.5 * tn)
    )
    assert np.allclose(Ec[outside], sharp.Ec.values[outside], rtol=0, atol=1e-12)
    assert not np.allclose(Ec, sharp.Ec.values, rtol=0, atol=1e-12)
    # electrostatics untouched by the cosmetic blend
    assert np.array_equal(smooth.V.values, sharp.V.values)
    assert np.array_equal(smooth.rho.values, sharp.rho.values)


def test_band_offsets_follow_gap():
    prof = _sym(display=BandDisplay(edge_smoothing=0.0))
    assert np.allclose(prof.Ec.values - prof.Ev.values, SI.Eg_eV)
    assert np.allclose(prof.Ec.values - prof.Ei.values, 0.5 * SI.Eg_eV)
    assert np.all(prof.EF.values == prof.equilibrium.EF_eV)
    expected = prof.equilibrium.EcP_eV + 1.8 * prof.V.values
    assert np.allclose(prof.Ec.values, expected)


def test_band_profile_without_smoothing_direct():
    eq = band_diagram(JunctionParams(1e23, 1e23), mat=SI)
    x = np.linspace(-1e-7, 1e-7, 11)
    V = potential(x, 1e23, 1e23, eq.Vbi_V, eq.geometry, mat=SI)
    Ec, Ev, Ei, EF = band_profile(x, V, eq, NA_m3=1e23, ND_m3=1e23, mat=SI,
                                  display=BandDisplay(band_bending_factor=1.0, edge_smoothing=0.0))
    assert np.allclose(Ec, eq.EcP_eV + V)
    assert Ev.shape == Ei.shape == EF.shape == x.shape


def test_spatial_profile_samples():
    prof = _sym(window=ProfileWindow(num_points=5))
    assert len(prof.E) == 5
    pairs = list(prof.V.samples())
    assert pairs[0] == (float(prof.x_m[0]), float(prof.V.values[0]))
    assert set(prof.as_dict()) == {
        "x_m", "rho_Cm3", "E_V_per_m", "V_V", "n_m3", "p_m3",
        "Ec_eV", "Ev_eV", "Ei_eV", "EF_eV",
    }


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), -1.0, 0.0])
def test_profile_primitives_are_total(bad):
    eq = band_diagram(JunctionParams(1e23, 1e23), mat=SI)
    geom = eq.geometry
    x = sample_grid(ProfileWindow(num_points=41))
    outputs = [
        charge_density(x, bad, 1e23, geom),
        charge_density(x, 1e23, bad, geom),
        electric_field(x, bad, 1e23, geom, mat=SI),
        electric_field(x, 1e23, bad, geom, mat=SI),
        potential(x, bad, 1e23, eq.Vbi_V, geom, mat=SI),
        potential(x, 1e23, 1e23, bad, geom, mat=SI),
    ]
    for arr in outputs:
        assert arr.shape == x.shape
        assert np.all(arr == 0.0)
    n, p = carrier_profile(np.zeros(3), bad, eq.Vbi_V, 300.0, mat=SI)
    assert np.all(n == 0.0) and np.all(p == 0.0)


def test_primitives_with_broken_geometry():
    x = sample_grid(ProfileWindow(num_points=11))
    geom = DepletionGeometry(W_m=float("nan"), xp_m=float("nan"), xn_m=1e-7)
    assert np.all(charge_density(x, 1e23, 1e23, geom) == 0.0)
    assert np.all(electric_field(x, 1e23, 1e23, geom, mat=SI) == 0.0)
    assert np.all(potential(x, 1e23, 1e23, 0.8, geom, mat=SI) == 0.0)


def test_carriers_with_non_finite_vbi():
    for Vbi in (float("nan"), float("inf")):
        n, p = carrier_profile(np.zeros(3), 1e23, Vbi, 300.0, mat=SI)
        assert np.all(n == 0.0) and np.all(p == 0.0)


def test_clamp_bound_is_total():
    assert clamp_error_bound(np.zeros(3), float("nan"), 300.0) == 0.0
    assert clamp_error_bound(np.zeros(3), 1.0, float("nan")) == 0.0
    assert clamp_error_bound(np.array([np.nan, np.inf]), 1.0, 300.0) == 0.0
    assert clamp_error_bound(np.array([]), 1.0, 300.0) == 0.0
    assert clamp_error_bound(np.zeros(3), 1.0, 300.0, clip=float("nan")) == 0.0
    # one bad sample does not hide the good ones
    VT = 1.380649e-23 * 300.0 / Q
    bound = clamp_error_bound(np.array([np.nan, 0.0]), 60.0 * VT, 300.0)
    assert bound == pytest.approx(math.expm1(10.0), rel=1e-9)
