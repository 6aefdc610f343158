# -*- coding: utf-8 -*-
"""
Plot helpers draw without error on normal and degenerate profiles.
"""
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from pnsim.physics.equilibrium import JunctionParams
from pnsim.physics.profiles import generate_profiles
from pnsim.postprocess.visualization import plot_band_diagram, plot_carriers, plot_electrostatics


def test_band_diagram_lines():
    prof = generate_profiles(JunctionParams(1e23, 1e22))
    fig, ax = plot_band_diagram(prof.x_m, prof.Ec.values, prof.Ev.values,
                                prof.equilibrium.EF_eV, prof.Ei.values)
    assert len(ax.lines) == 4
    # x axis in µm
    assert np.isclose(ax.lines[0].get_xdata()[-1], 0.5)
    plt.close(fig)


def test_electrostatics_and_carriers():
    prof = generate_profiles(JunctionParams(1e23, 1e22))
    fig, axes = plot_electrostatics(prof)
    assert len(axes) == 3
    plt.close(fig)
    fig, ax = plot_carriers(prof)
    assert ax.get_yscale() == "log"
    plt.close(fig)


def test_degenerate_profiles_plot():
    prof = generate_profiles(JunctionParams(-1.0, 1e22))
    fig, axes = plot_electrostatics(prof)
    plt.close(fig)
    fig, ax = plot_carriers(prof, title=None)
    plt.close(fig)
