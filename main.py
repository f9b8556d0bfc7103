# main.py
import argparse
import logging
import os
from datetime import datetime
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from common.logging_utils import setup_logging, context
from common.results import (
    summary_rows, pipe_result_to_dataframe, iteration_history_to_dataframe, write_results_csvs,
)
from gasdyn import isentropic, fanno, rayleigh
from gasdyn.shocks import NormalShock
from gasdyn.thermo import GasState, mach_number, stagnation_temperature, stagnation_pressure
from hydrostatics.surfaces import hydrostatic_force, curved_quarter_cylinder
from pipeflow.energy import solve_flow, required_pump_head, pump_power
from vortex.fields import evaluate_field, total_circulation
from vortex.operators import streamfunction, curl, mag
from vortex.analysis import find_stagnation_point, velocity_slice
import io_loader
import plots as plotting

log = logging.getLogger(__name__)

HERE = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIGS = {
    "gas": os.path.join(HERE, "config", "gas.yaml"),
    "hydrostatics": os.path.join(HERE, "config", "surfaces.yaml"),
    "pipe": os.path.join(HERE, "config", "pipe_system.yaml"),
    "vortex": os.path.join(HERE, "config", "vortices.yaml"),
}

Row = Tuple[str, object, str]


def _report(title: str, rows: Sequence[Row]) -> None:
    print(f"== {title}")
    for label, value, unit in rows:
        v = f"{value:.6g}" if isinstance(value, float) else str(value)
        print(f"{label}: {v} {unit}".rstrip())


def run_gas(config: str, outdir: str | None = None, plots: bool = False) -> Dict[str, pd.DataFrame]:
    gas, state = io_loader.load_gas(config)
    gs = GasState.from_pT(state["p"], state["T"], gas)
    rows: List[Row] = list(gs.rows())
    k = gas.gamma.to("").magnitude
    if "V" in state:
        M = mach_number(state["V"], state["T"], gas).value
        rows += [
            ("V", state["V"].magnitude, "m/s"),
            ("M", M, ""),
            ("T0", stagnation_temperature(state["T"], state["V"], gas).value, "K"),
            ("p0", stagnation_pressure(state["p"], state["T"], state["V"], gas).value, "Pa"),
        ]
        # fL*/D is unbounded for a gas at rest
        if M > 0:
            rows += [
                ("fL*/D (Fanno)", fanno.fLstar_D(M, k), ""),
                ("T0/T0* (Rayleigh)", rayleigh.T0_T0star(M, k), ""),
            ]
    _report(f"gas state ({gas.name})", rows)
    tables = {"gas_state": summary_rows(rows)}

    if io_loader.has_nozzle(config):
        nz = io_loader.load_nozzle_case(config)
        ar = nz.area_ratio
        M_sub = float(isentropic.mach_from_area_ratio(ar, k, supersonic=False))
        M_sup = float(isentropic.mach_from_area_ratio(ar, k, supersonic=True))
        p0 = nz.p0.to("Pa").magnitude
        T0 = nz.T0.to("K").magnitude
        nozzle_rows: List[Row] = [
            ("A_exit/A*", ar, ""),
            ("m_dot (choked)", isentropic.choked_mass_flow(nz.p0, nz.T0, nz.A_throat, nz.gas).value, "kg/s"),
            ("M_exit subsonic", M_sub, ""),
            ("p_exit subsonic", p0 / isentropic.p0_p(M_sub, k), "Pa"),
            ("M_exit supersonic", M_sup, ""),
            ("p_exit supersonic", p0 / isentropic.p0_p(M_sup, k), "Pa"),
            ("T_exit supersonic", T0 / isentropic.T0_T(M_sup, k), "K"),
        ]
        _report("nozzle", nozzle_rows)

        # normal shock standing in the exit plane
        shock = NormalShock(M_sup, k)
        shock_rows: List[Row] = list(shock.rows()) + [
            ("p_exit behind shock", p0 / isentropic.p0_p(M_sup, k) * shock.p2_p1, "Pa"),
        ]
        _report("normal shock at exit", shock_rows)
        tables["nozzle"] = summary_rows(nozzle_rows)
        tables["shock"] = summary_rows(shock_rows)

    if outdir:
        _write(tables, outdir, "gas")
        if plots:
            plotting.plot_isentropic(os.path.join(outdir, "fig"), k)
    return tables


def run_hydrostatics(config: str, outdir: str | None = None, plots: bool = False) -> Dict[str, pd.DataFrame]:
    case = io_loader.load_surfaces(config)
    table = []
    for surf in case.plane:
        res = hydrostatic_force(surf, case.rho, p_surface=case.p_surface)
        rows: List[Row] = [
            ("F", res.force.to("N").magnitude, "N"),
            ("A", res.area.to("m^2").magnitude, "m^2"),
            ("h_c", res.centroid_depth.to("m").magnitude, "m"),
            ("h_cp", res.pressure_center_depth.to("m").magnitude, "m"),
            ("p_c", res.centroid_pressure.to("Pa").magnitude, "Pa"),
        ]
        _report(f"plane surface {surf.name}", rows)
        table.append({"surface": surf.name, **{f"{k}[{u}]": v for k, v, u in rows}})

    curved = []
    for name, c in case.curved.items():
        res = curved_quarter_cylinder(c["radius"], c["width"], c["top_depth"], case.rho,
                                      fluid_inside=c["fluid_inside"])
        rows = [
            ("F_H", res.horizontal.to("N").magnitude, "N"),
            ("F_V", res.vertical.to("N").magnitude, "N"),
            ("F", res.resultant.to("N").magnitude, "N"),
            ("angle", res.angle.to("deg").magnitude, "deg"),
        ]
        _report(f"curved surface {name}", rows)
        curved.append({"surface": name, **{f"{k}[{u}]": v for k, v, u in rows}})

    tables = {"plane_surfaces": pd.DataFrame(table)}
    if curved:
        tables["curved_surfaces"] = pd.DataFrame(curved)
    if outdir:
        _write(tables, outdir, "hydrostatics")
        if plots:
            for surf in case.plane:
                plotting.plot_pressure_prism(surf, case.rho, os.path.join(outdir, "fig"), p_surface=case.p_surface)
    return tables


def run_pipe(config: str, outdir: str | None = None, plots: bool = False) -> Dict[str, pd.DataFrame]:
    system, fluid = io_loader.load_pipe_system(config)
    res = solve_flow(system, fluid)
    rows: List[Row] = [
        ("fluid", fluid.name, ""),
        ("rho", fluid.rho.to("kg/m^3").magnitude, "kg/m^3"),
        ("H_available", res.available_head.to("m").magnitude, "m"),
        ("Q", res.Q.to("m^3/s").magnitude, "m^3/s"),
        ("h_L", res.head_loss.to("m").magnitude, "m"),
        ("iterations", res.iterations, ""),
        ("converged", res.converged, ""),
    ]
    for name, V, Re, f in zip(res.pipe_names, res.velocities, res.Re, res.f):
        rows += [(f"{name}.V", V.to("m/s").magnitude, "m/s"), (f"{name}.Re", Re, ""), (f"{name}.f", f, "")]

    design = io_loader.load_design_point(config)
    if "Q" in design:
        hp = required_pump_head(system, fluid, design["Q"])
        rows += [("Q_design", design["Q"].magnitude, "m^3/s"), ("pump head for Q_design", hp.value, "m")]
        if hp.value > 0:
            eff = design["efficiency"].to("").magnitude if "efficiency" in design else 1.0
            rows.append(("pump power", pump_power(design["Q"], hp, fluid.rho, efficiency=eff).value, "W"))
    _report(f"pipe system {system.name}", rows)

    tables = {
        "summary": summary_rows(rows),
        "pipes": pipe_result_to_dataframe(res),
        "iterations": iteration_history_to_dataframe(res),
    }
    if outdir:
        _write(tables, outdir, "pipe")
        if plots:
            fig_dir = os.path.join(outdir, "fig")
            plotting.plot_moody(fig_dir)
            plotting.plot_friction_convergence(tables["iterations"], fig_dir)
    return tables


def run_vortex(config: str, outdir: str | None = None, plots: bool = False) -> Dict[str, pd.DataFrame]:
    grid, cases, boundary = io_loader.load_vortex_case(config)
    table = []
    for name, case in cases.items():
        omega = evaluate_field(case.vorticity, grid)
        psi = streamfunction(omega, grid, boundary)
        vel = curl(psi, grid)
        speed = mag(vel)
        rows: List[Row] = [
            ("grid", f"{grid.nx}x{grid.ny}", ""),
            ("circulation", total_circulation(omega, grid), ""),
            ("max |u|", float(speed.max()), ""),
        ]
        points = [find_stagnation_point(vel, grid, g) for g in case.stagnation_guesses]
        for k, p in enumerate(points):
            rows.append((f"stagnation[{k}]", f"({p.x:.4f}, {p.y:.4f}) converged={p.converged}", ""))
            table.append({"case": name, "x": p.x, "y": p.y, "speed": p.speed, "converged": p.converged})
        _report(f"vortex case {name}", rows)

        if outdir and plots:
            fig_dir = os.path.join(outdir, "fig")
            plotting.plot_vortex_fields(grid, omega, psi, vel, fig_dir, prefix=name)
            xs, sl = velocity_slice(speed, grid, 0.0)
            plotting.plot_speed_slice(xs, sl, fig_dir, name=f"{name}_speed_slice.png")
            if points:
                plotting.plot_stagnation_points(grid, vel, points, fig_dir, name=f"{name}_stagnation.png")

    tables = {"stagnation_points": pd.DataFrame(table, columns=["case", "x", "y", "speed", "converged"])}
    if outdir:
        _write(tables, outdir, "vortex")
    return tables


RUNNERS = {
    "gas": run_gas,
    "hydrostatics": run_hydrostatics,
    "pipe": run_pipe,
    "vortex": run_vortex,
}


def _write(tables: Dict[str, pd.DataFrame], outdir: str, example: str) -> List[str]:
    run_id = f"{example}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    paths = write_results_csvs(tables, outdir, run_id)
    log.info(f"wrote {len(paths)} CSV files to {outdir}", extra=context(example, "write"))
    return paths


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Worked fluid-dynamics examples.")
    ap.add_argument("example", choices=[*RUNNERS, "all"])
    ap.add_argument("--config", help="case file (defaults to config/<example>.yaml); ignored for 'all'")
    ap.add_argument("--log", default="WARNING", help="log level: TRACE, DEBUG, INFO, WARNING, ...")
    ap.add_argument("--outdir", help="write CSV tables, run.log (and figures with --plots) here")
    ap.add_argument("--plots", action="store_true", help="save matplotlib figures under <outdir>/fig")
    return ap.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log, os.path.join(args.outdir, "run.log") if args.outdir else None)
    if args.plots and not args.outdir:
        log.warning("--plots needs --outdir; no figures will be written")

    names = list(RUNNERS) if args.example == "all" else [args.example]
    for name in names:
        config = args.config if (args.config and args.example != "all") else DEFAULT_CONFIGS[name]
        RUNNERS[name](config, args.outdir, args.plots)


if __name__ == "__main__":
    main()
