# -*- coding: utf-8 -*-
"""
Command line: eq / profiles / sweep subcommands.
"""
import json

import numpy as np
import pandas as pd
import pytest

from pnsim.main import main


def test_eq_writes_metrics(tmp_path, capsys):
    main(["eq", "--NA", "1e17", "--ND", "1e17", "--json", str(tmp_path)])
    out = capsys.readouterr().out
    assert "Vbi" in out
    data = json.loads((tmp_path / "metrics.json").read_text())
    assert data["Vbi_V"] == pytest.approx(0.8124, abs=2e-3)
    assert data["NA_m3"] == pytest.approx(1e23)


def test_eq_from_config_with_override(tmp_path):
    cfg = tmp_path / "run.yaml"
    cfg.write_text("junction:\n  NA_cm3: 1.0e18\n  ND_cm3: 1.0e16\n")
    main(["eq", "--config", str(cfg), "--set", "junction.T_K=350",
          "--material", "GaAs", "--json", str(tmp_path / "o")])
    data = json.loads((tmp_path / "o" / "metrics.json").read_text())
    assert data["T_K"] == 350.0
    assert data["material"] == "GaAs"
    assert data["NA_m3"] == pytest.approx(1e24)


def test_profiles_csv_only(tmp_path):
    csv = tmp_path / "pn.csv"
    main(["profiles", "--NA", "1e18", "--ND", "1e16", "--N", "101", "--csv", str(csv), "--no-png"])
    data = np.loadtxt(csv, delimiter=",", skiprows=1)
    assert data.shape == (101, 10)
    assert not (tmp_path / "pn_band_diagram.png").exists()


def test_profiles_with_figures(tmp_path):
    png, fields = tmp_path / "bands.png", tmp_path / "fields.png"
    main(["profiles", "--N", "64", "--csv", str(tmp_path / "p.csv"),
          "--png", str(png), "--fields-png", str(fields), "--debug"])
    assert png.stat().st_size > 0 and fields.stat().st_size > 0


def test_degenerate_profiles_still_written(tmp_path, capsys):
    csv = tmp_path / "deg.csv"
    main(["profiles", "--NA", "0", "--csv", str(csv), "--no-png"])
    assert len(csv.read_text().splitlines()) == 2
    assert "WARNING" in capsys.readouterr().err


def test_sweep(tmp_path):
    csv = tmp_path / "sweep.csv"
    main(["sweep", "--ND", "1e16", "--NA-start", "1e15", "--NA-stop", "1e19", "--num", "5",
          "--csv", str(csv)])
    df = pd.read_csv(csv)
    assert len(df) == 5 and df["Vbi_V"].is_monotonic_increasing


def test_bad_input_exits(tmp_path):
    with pytest.raises(SystemExit):
        main(["eq", "--set", "junction.T_K"])
    with pytest.raises(SystemExit):
        main(["sweep", "--num", "0", "--csv", str(tmp_path / "s.csv")])
    with pytest.raises(SystemExit):
        main(["eq", "--config", str(tmp_path / "missing.yaml")])
