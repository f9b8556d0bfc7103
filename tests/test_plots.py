import pandas as pd

from common.units import Q_
from common.results import StagnationPoint
from hydrostatics.surfaces import Rectangle, PlaneSurface
from vortex.grid import PhysicalGrid
from vortex.fields import oseen_vortex, evaluate_field
from vortex.operators import streamfunction, curl, mag
from vortex.analysis import velocity_slice, oseen_velocity
import plots


def test_vortex_figures(tmp_path):
    grid = PhysicalGrid((-1.0, 1.0), (-1.0, 1.0), 0.05)
    omega = evaluate_field(oseen_vortex(0, 0, 1, 0.2), grid)
    psi = streamfunction(omega, grid)
    vel = curl(psi, grid)
    paths = plots.plot_vortex_fields(grid, omega, psi, vel, str(tmp_path), prefix="t")
    assert len(paths) == 5
    xs, s = velocity_slice(mag(vel), grid)
    plots.plot_speed_slice(xs, s, str(tmp_path), analytic=oseen_velocity(abs(xs), 1, 0.2))
    plots.plot_stagnation_points(grid, vel, [StagnationPoint(0.0, 0.0, 0.0, True)], str(tmp_path))
    for name in ["t_01_vorticity.png", "t_05_speed.png", "speed_slice.png", "stagnation.png"]:
        assert (tmp_path / name).exists()


def test_flow_and_gas_figures(tmp_path):
    plots.plot_moody(str(tmp_path), eps_D=(0.0, 1e-3))
    hist = pd.DataFrame({"iteration": [1, 2, 3], "max_df[-]": [1e-2, 1e-4, 0.0]})
    plots.plot_friction_convergence(hist, str(tmp_path))
    gate = PlaneSurface("gate", Rectangle(Q_(2, "m"), Q_(3, "m")), Q_(0, "m"))
    plots.plot_pressure_prism(gate, 1000.0, str(tmp_path))
    plots.plot_isentropic(str(tmp_path))
    for name in ["moody.png", "friction_convergence.png", "prism_gate.png", "isentropic.png"]:
        assert (tmp_path / name).exists()


def test_plots_main_reads_iteration_csv(tmp_path):
    csv = tmp_path / "run_iterations.csv"
    pd.DataFrame({"iteration": [1, 2], "max_df[-]": [1e-3, 1e-7]}).to_csv(csv, index=False)
    path = plots.main(str(csv))
    assert path.endswith("friction_convergence.png")
    assert (tmp_path / "fig" / "friction_convergence.png").exists()
