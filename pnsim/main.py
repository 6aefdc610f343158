"""
pnsim main entrypoint.

Default subcommand: profiles
Usage examples:
    python -m pnsim.main
    python -m pnsim.main eq --NA 1e17 --ND 1e15
    python -m pnsim.main profiles --NA 1e19 --ND 1e16 --N 800 --csv pn.csv
    python -m pnsim.main profiles --config junction.yaml --set junction.T_K=350
    python -m pnsim.main sweep --ND 1e16 --NA-start 1e14 --NA-stop 1e20 --num 25

Doping on the command line is in cm^-3; everything written to disk is SI.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .io.config import (
    RunConfig,
    apply_overrides,
    build_display,
    build_material,
    build_params,
    build_window,
    config_from_dict,
    load_config,
)
from .io.results import write_metrics, write_profiles_csv
from .materials.database import get_material, list_materials
from .models.pn_junction import JunctionReport, analyze_junction
from .utils import logger as log
from .utils.diagnostics import check_mass_action, check_neutrality, log_profile_summary
from .utils.units import V_per_m_to_V_per_cm, cm3_to_m3, m3_to_cm3, m_to_um
from .workflows.sweep import log_doping_grid, sweep_doping, write_sweep_csv

__all__ = ["main"]


# ------------------------------ shared options -------------------------------


def _add_junction_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--NA", type=float, default=None, help="Acceptor conc on p-side [cm^-3] (default 1e17)")
    p.add_argument("--ND", type=float, default=None, help="Donor conc on n-side [cm^-3] (default 1e17)")
    p.add_argument("--T", type=float, default=None, help="Temperature [K] (default 300)")
    p.add_argument("--material", choices=list_materials(), default=None, help="Material constant set")
    p.add_argument("--config", type=Path, default=None, help="YAML run config")
    p.add_argument(
        "--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
        help="Config override, e.g. junction.NA_cm3=5e16 (repeatable)",
    )
    p.add_argument("--debug", action="store_true", help="Print diagnostics")


def _resolve_config(ns: argparse.Namespace) -> RunConfig:
    """Config file (if any) <- command-line flags <- --set overrides."""
    if ns.config is not None:
        cfg = load_config(ns.config)
    else:
        cfg = config_from_dict({"junction": {"NA_cm3": 1e17, "ND_cm3": 1e17, "T_K": 300.0}})
    j = cfg.raw["junction"]
    if ns.NA is not None:
        j["NA_cm3"] = ns.NA
    if ns.ND is not None:
        j["ND_cm3"] = ns.ND
    if ns.T is not None:
        j["T_K"] = ns.T
    if ns.material is not None:
        cfg.raw["material"] = dict(cfg.raw.get("material") or {}, name=ns.material)
    if getattr(ns, "N", None) is not None:
        cfg.raw["profile"] = dict(cfg.raw.get("profile") or {}, num_points=ns.N)
    if getattr(ns, "half_width_um", None) is not None:
        cfg.raw["profile"] = dict(cfg.raw.get("profile") or {}, half_width_um=ns.half_width_um)
    return apply_overrides(cfg, ns.overrides)


def _report_from_config(cfg: RunConfig) -> JunctionReport:
    return analyze_junction(
        build_params(cfg),
        mat=build_material(cfg),
        window=build_window(cfg),
        display=build_display(cfg),
    )


def _print_summary(rep: JunctionReport) -> None:
    eq, c = rep.equilibrium, rep.carriers
    print(f"material      : {rep.material.name}")
    print(f"NA, ND        : {float(m3_to_cm3(rep.params.NA_m3)):.3e}, "
          f"{float(m3_to_cm3(rep.params.ND_m3)):.3e} cm^-3   T = {rep.params.T_K:g} K")
    print(f"Vbi           : {eq.Vbi_V:.4f} V")
    print(f"W (xp | xn)   : {float(m_to_um(eq.W_m)):.4f} µm "
          f"({float(m_to_um(eq.xp_m)):.4f} | {float(m_to_um(eq.xn_m)):.4f})")
    print(f"|E|max        : {float(V_per_m_to_V_per_cm(eq.Emax_V_per_m)):.4e} V/cm")
    print(f"EF, Ei        : {eq.EF_eV:+.4f}, {eq.Ei_eV:+.4f} eV  (EcN = 0)")
    print(f"n-side n | p  : {float(m3_to_cm3(c.nN_m3)):.3e} | {float(m3_to_cm3(c.pN_m3)):.3e} cm^-3")
    print(f"p-side p | n  : {float(m3_to_cm3(c.pP_m3)):.3e} | {float(m3_to_cm3(c.nP_m3)):.3e} cm^-3")


def _run_diagnostics(rep: JunctionReport) -> None:
    prof = rep.profiles
    log_profile_summary(prof)
    check_neutrality(prof.x_m, prof.rho.values)
    check_mass_action(prof.n.values, prof.p.values, rep.material.ni_at(rep.params.T_K))


# ------------------------------ subcommands ----------------------------------


def _add_eq_subparser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    p = subparsers.add_parser("eq", help="Equilibrium scalars (Vbi, W, Emax, bands, carriers)")
    _add_junction_args(p)
    p.add_argument("--json", dest="json_dir", type=Path, default=None,
                   help="Directory to write metrics.json into")
    p.set_defaults(cmd="eq")
    return p


def _add_profiles_subparser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    p = subparsers.add_parser("profiles", help="Sampled rho/E/V/carrier/band profiles")
    _add_junction_args(p)
    p.add_argument("--N", type=int, default=None, help="Grid nodes (default 500)")
    p.add_argument("--half-width-um", dest="half_width_um", type=float, default=None,
                   help="Half width of the fixed window [µm] (default 0.5)")
    p.add_argument("--csv", default="pn_profiles.csv", help="CSV output path")
    p.add_argument("--png", default="pn_band_diagram.png", help="Band diagram PNG path")
    p.add_argument("--fields-png", default="pn_electrostatics.png",
                   help="rho/E/V PNG path")
    p.add_argument("--no-png", action="store_true", help="Skip writing figures")
    p.add_argument("--title", default="PN Junction at Equilibrium", help="Band diagram title")
    p.set_defaults(cmd="profiles")
    return p


def _add_sweep_subparser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    p = subparsers.add_parser("sweep", help="Sweep NA at fixed ND and T")
    p.add_argument("--ND", type=float, default=1e16, help="Donor conc [cm^-3]")
    p.add_argument("--NA-start", dest="NA_start", type=float, default=1e14, help="First NA [cm^-3]")
    p.add_argument("--NA-stop", dest="NA_stop", type=float, default=1e20, help="Last NA [cm^-3]")
    p.add_argument("--num", type=int, default=25, help="Number of sweep points")
    p.add_argument("--T", type=float, default=300.0, help="Temperature [K]")
    p.add_argument("--material", choices=list_materials(), default="Si", help="Material constant set")
    p.add_argument("--csv", default="pn_sweep.csv", help="CSV output path")
    p.add_argument("--debug", action="store_true", help="Print one line per point")
    p.set_defaults(cmd="sweep")
    return p


def _run_eq(ns: argparse.Namespace) -> None:
    rep = _report_from_config(_resolve_config(ns))
    _print_summary(rep)
    if ns.debug:
        _run_diagnostics(rep)
    if ns.json_dir is not None:
        out = write_metrics(ns.json_dir, rep.summary())
        log.info(f"[ok] wrote {out}")


def _run_profiles(ns: argparse.Namespace) -> None:
    rep = _report_from_config(_resolve_config(ns))
    prof = rep.profiles
    if prof.degenerate:
        log.warn("inputs are outside the physical range; profiles are a single zero sample")
    if ns.debug:
        _run_diagnostics(rep)

    out = write_profiles_csv(Path(ns.csv), prof)
    log.info(f"[ok] wrote {out}  (N={prof.x_m.size}, Vbi={rep.equilibrium.Vbi_V:.4f} V)")

    if ns.no_png:
        return
    # pyplot only when figures are requested
    import matplotlib
    matplotlib.use("Agg")
    from .postprocess.visualization import plot_band_diagram, plot_electrostatics

    fig, _ax = plot_band_diagram(
        prof.x_m, prof.Ec.values, prof.Ev.values, prof.EF.values, prof.Ei.values, title=ns.title
    )
    fig.savefig(ns.png, dpi=180)
    log.info(f"[ok] wrote {ns.png}")

    figE, _axes = plot_electrostatics(prof)
    figE.savefig(ns.fields_png, dpi=180)
    log.info(f"[ok] wrote {ns.fields_png}")


def _run_sweep(ns: argparse.Namespace) -> None:
    grid = log_doping_grid(ns.NA_start, ns.NA_stop, ns.num)
    df = sweep_doping(grid, float(cm3_to_m3(ns.ND)), T_K=ns.T, mat=get_material(ns.material))
    out = write_sweep_csv(df, Path(ns.csv))
    log.info(f"[ok] wrote {out}  ({len(df)} points)")


# --------------------------------- main() ------------------------------------


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="pnsim: abrupt PN junction at equilibrium")
    sub = parser.add_subparsers(dest="cmd")

    _add_eq_subparser(sub)
    profiles_parser = _add_profiles_subparser(sub)
    _add_sweep_subparser(sub)

    argv = list(sys.argv[1:] if argv is None else argv)
    # If no subcommand given, default to 'profiles' with defaults
    ns = profiles_parser.parse_args([]) if not argv else parser.parse_args(argv)

    if getattr(ns, "debug", False):
        log.set_debug(True)

    runners = {"eq": _run_eq, "profiles": _run_profiles, "sweep": _run_sweep}
    runner = runners.get(ns.cmd)
    if runner is None:
        parser.error("Unknown command (try: eq, profiles, sweep)")
    try:
        runner(ns)
    except (ValueError, OSError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
