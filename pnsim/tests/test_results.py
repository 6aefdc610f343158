# -*- coding: utf-8 -*-
"""
metrics.json / profiles.npz / CSV writers.
"""
import json

import numpy as np

from pnsim.io.results import (
    PROFILE_COLUMNS,
    profile_table,
    save_profiles_npz,
    write_metrics,
    write_profiles_csv,
)
from pnsim.models.pn_junction import analyze_junction
from pnsim.physics.equilibrium import JunctionParams
from pnsim.physics.profiles import ProfileWindow


def _report(N=51):
    return analyze_junction(JunctionParams.from_cm3(1e17, 1e16), window=ProfileWindow(num_points=N))


def test_metrics_json(tmp_path):
    rep = _report()
    out = write_metrics(tmp_path / "run", rep.summary())
    data = json.loads(out.read_text())
    assert out.name == "metrics.json"
    assert data["material"] == "Si"
    assert data["Vbi_V"] == rep.equilibrium.Vbi_V
    assert data["degenerate"] is False


def test_npz_keys(tmp_path):
    rep = _report()
    out = save_profiles_npz(tmp_path, rep.profiles)
    with np.load(out) as z:
        assert set(z.files) == set(PROFILE_COLUMNS)
        assert np.array_equal(z["V_V"], rep.profiles.V.values)


def test_csv_columns_and_rows(tmp_path):
    rep = _report(N=37)
    out = write_profiles_csv(tmp_path / "nested" / "pn.csv", rep.profiles)
    lines = out.read_text().splitlines()
    assert lines[0] == ",".join(PROFILE_COLUMNS)
    data = np.loadtxt(out, delimiter=",", skiprows=1)
    assert data.shape == (37, len(PROFILE_COLUMNS))
    assert np.allclose(data, profile_table(rep.profiles), rtol=1e-12)


def test_degenerate_profiles_write_one_row(tmp_path):
    rep = analyze_junction(JunctionParams(0.0, 1e23))
    out = write_profiles_csv(tmp_path / "deg.csv", rep.profiles)
    assert len(out.read_text().splitlines()) == 2
