import os
import sys
from typing import List, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from common.constants import g0
from gasdyn import isentropic
from hydrostatics.surfaces import PlaneSurface, pressure_profile
from pipeflow.friction import friction_factor
from vortex.grid import PhysicalGrid
from vortex.operators import VelocityField, mag


def _save(fig, outdir: str, name: str) -> str:
    os.makedirs(outdir, exist_ok=True)
    path = os.path.join(outdir, name)
    fig.tight_layout()
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path


def _contour(grid: PhysicalGrid, Z: np.ndarray, title: str, zero_line: bool = False):
    x, y = grid.coordinates()
    fig = plt.figure()
    # arrays are [i, j] = (x, y); contour wants rows along y
    cs = plt.contourf(x, y, Z.T, levels=30, cmap="RdBu_r")
    plt.colorbar(cs)
    if zero_line:
        plt.contour(x, y, Z.T, levels=[0.0], colors="k", linewidths=0.8)
    plt.gca().set_aspect("equal")
    plt.xlabel("x"); plt.ylabel("y"); plt.title(title)
    return fig


def plot_vortex_fields(grid: PhysicalGrid, omega: np.ndarray, psi: np.ndarray,
                       vel: VelocityField, outdir: str, prefix: str = "vortex") -> List[str]:
    paths = []
    paths.append(_save(_contour(grid, omega, "vorticity"), outdir, f"{prefix}_01_vorticity.png"))
    paths.append(_save(_contour(grid, psi, "streamfunction"), outdir, f"{prefix}_02_streamfunction.png"))
    paths.append(_save(_contour(grid, vel.u, "u"), outdir, f"{prefix}_03_u.png"))
    paths.append(_save(_contour(grid, vel.v, "v"), outdir, f"{prefix}_04_v.png"))
    paths.append(_save(_contour(grid, mag(vel), "|u|"), outdir, f"{prefix}_05_speed.png"))
    return paths


def plot_speed_slice(xs: np.ndarray, speed: np.ndarray, outdir: str, name: str = "speed_slice.png",
                     analytic: np.ndarray | None = None) -> str:
    fig = plt.figure()
    plt.plot(xs, speed, label="computed")
    if analytic is not None:
        plt.plot(xs, analytic, "--", label="analytic")
    plt.xlabel("x"); plt.ylabel("|u| at y = 0"); plt.legend()
    return _save(fig, outdir, name)


def plot_stagnation_points(grid: PhysicalGrid, vel: VelocityField, points: Sequence, outdir: str,
                           name: str = "stagnation.png") -> str:
    """Zero contours of u and v; stagnation points sit on their crossings."""
    x, y = grid.coordinates()
    fig = plt.figure()
    plt.contour(x, y, vel.u.T, levels=[0.0], colors="tab:blue", linewidths=1.0)
    plt.contour(x, y, vel.v.T, levels=[0.0], colors="tab:red", linewidths=1.0)
    for p in points:
        plt.plot(p.x, p.y, "ko" if p.converged else "kx")
    plt.gca().set_aspect("equal")
    plt.xlabel("x"); plt.ylabel("y"); plt.title("u = 0 (blue), v = 0 (red)")
    return _save(fig, outdir, name)


def plot_moody(outdir: str, eps_D: Sequence[float] = (0.0, 1e-5, 1e-4, 1e-3, 5e-3, 0.02, 0.05),
               name: str = "moody.png") -> str:
    Re = np.logspace(np.log10(600), 8, 200)
    fig = plt.figure()
    for e in eps_D:
        plt.loglog(Re, [friction_factor(r, e) for r in Re], label=f"eps/D={e:g}")
    plt.xlabel("Re [-]"); plt.ylabel("f [-]"); plt.legend(fontsize=7)
    plt.grid(True, which="both", alpha=0.3)
    return _save(fig, outdir, name)


def plot_friction_convergence(history: pd.DataFrame, outdir: str, name: str = "friction_convergence.png") -> str:
    fig = plt.figure()
    if "max_df[-]" in history and len(history):
        plt.semilogy(history["iteration"], history["max_df[-]"].clip(lower=1e-16), "o-")
    plt.xlabel("iteration"); plt.ylabel("max |df| [-]")
    return _save(fig, outdir, name)


def plot_pressure_prism(surface: PlaneSurface, rho, outdir: str, g=g0, p_surface=0.0, name: str | None = None) -> str:
    prof = pressure_profile(surface, rho, g, p_surface)
    s = [a for a, _ in prof]
    p = [b for _, b in prof]
    fig = plt.figure()
    plt.fill_betweenx(s, 0, p, alpha=0.4)
    plt.plot(p, s)
    plt.gca().invert_yaxis()
    plt.xlabel("p [Pa]"); plt.ylabel("distance from top edge [m]"); plt.title(surface.name)
    return _save(fig, outdir, name or f"prism_{surface.name}.png")


def plot_isentropic(outdir: str, gamma: float = 1.4, name: str = "isentropic.png") -> str:
    M = np.linspace(0.05, 4.0, 200)
    fig = plt.figure()
    plt.plot(M, [1 / isentropic.T0_T(m, gamma) for m in M], label="T/T0")
    plt.plot(M, [1 / isentropic.p0_p(m, gamma) for m in M], label="p/p0")
    plt.plot(M, [1 / isentropic.rho0_rho(m, gamma) for m in M], label="rho/rho0")
    plt.plot(M, [1 / isentropic.A_Astar(m, gamma) for m in M], label="A*/A")
    plt.xlabel("M [-]"); plt.ylabel("ratio [-]"); plt.legend()
    return _save(fig, outdir, name)


def main(csv_path):
    """Convergence figure from a *_iterations.csv written by main.py pipe."""
    df = pd.read_csv(csv_path)
    outdir = os.path.join(os.path.dirname(csv_path), "fig")
    return plot_friction_convergence(df, outdir)


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python plots.py <iterations.csv>")
        sys.exit(1)
    main(sys.argv[1])
